"""
Bot instance, logging and database engine.
"""
