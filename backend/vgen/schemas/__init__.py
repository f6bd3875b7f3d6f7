# vgen/schemas/__init__.py
"""
Schema module initialization.
Exports model-output schemas and shared request bodies.
"""
from .ai import *
from .requests import *
