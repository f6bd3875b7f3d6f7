# vgen/__init__.py
"""VGen Tools API: AI career tools backend."""
__version__ = "1.0.0"
