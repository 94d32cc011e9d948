"""
Components Generator

Builds WordPress themes from the Components theme library: fetches and
caches the library archive, indexes its theme types and assembles a theme
type into a build directory.
"""

__version__ = "0.1.0"

from components_generator.core.component_assembler import build_type
from components_generator.cli.commands import main

__all__ = [
    "build_type",
    "main",
]
