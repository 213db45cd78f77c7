"""
Hospital scoped user account management.
"""
