"""Core generator pipeline: fetch, index, copy and assemble."""

from components_generator.core.component_assembler import build_type
from components_generator.core.type_index import gen_types_cache, read_types

__all__ = ["build_type", "gen_types_cache", "read_types"]
