"""
Handlers initialization.
All handlers are registered via decorators in their respective modules.
"""

# Import all handler modules to register their decorators
from handlers import archive
from handlers import commands
from handlers import admin_commands
from handlers import callbacks
