"""
Log browsing: scopes, pagination, exports and button payloads.
"""
