"""
CLI module for the components generator.

Provides the ``components-generator`` console script entry point.
"""

from .commands import main

__all__ = ["main"]
