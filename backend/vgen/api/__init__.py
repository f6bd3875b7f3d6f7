# vgen/api/__init__.py
"""HTTP layer: routers under /api and their shared dependencies (deps)."""
