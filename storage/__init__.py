"""
Persistence: message archive and authorization grants.
"""
