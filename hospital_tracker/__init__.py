"""
Hospital tracker backend.

This package provides the multi-tenant hospital management API including:
- Hospital registration with a bootstrap authorized user
- Login and JWT bearer authentication
- Phone based password reset with one-time codes
- Hospital scoped user, staff and clinic management
- Cached reference data (provinces, districts, profession groups)
"""
