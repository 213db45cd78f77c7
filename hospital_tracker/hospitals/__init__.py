"""
Hospital registration and location reference data.
"""
