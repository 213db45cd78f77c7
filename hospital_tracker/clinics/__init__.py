"""
Clinics and clinic types.
"""
