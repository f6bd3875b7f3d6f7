# vgen/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: Startup sweep and default admin creation
- errors: Domain exceptions
- rate_limit: Fixed-window limiter for auth routes
- security: Password hashing, JWT and reset tokens
"""
