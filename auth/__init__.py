"""
Authorization: grants, access checks and group membership.
"""
