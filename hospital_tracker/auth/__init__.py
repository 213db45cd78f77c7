"""
Authentication module for the hospital tracker.

This module provides:
- Login with email or phone and JWT bearer tokens
- Phone based password reset with one-time codes
- Request authentication and the authorized-only gate
"""
