"""Read Sass partial paths from a stylesheet's ``@import`` statements."""

from __future__ import annotations

import re
from pathlib import Path

from components_generator.helpers.generator_config import GeneratorConfig
from components_generator.helpers.helpers_logging import log_message

IMPORT_RE = re.compile(r'@import\s+"([^"]+)"\s*;', re.IGNORECASE)


def partial_path(import_name: str) -> str:
    """Map an import name to its partial file.

    'navigation/menus/main' -> 'navigation/_main.scss'
    'variables' -> '_variables.scss'
    """
    parts = import_name.split("/")
    if len(parts) > 1:
        return f"{parts[0]}/_{parts[-1]}.scss"
    return f"_{parts[-1]}.scss"


def get_stylesheet_paths(config: GeneratorConfig, filename: Path) -> list[str]:
    """List the partials imported by ``filename``, in import order.

    Logs an error and returns an empty list when no import is found.
    """
    contents = filename.read_text(encoding="utf-8")
    matches = IMPORT_RE.findall(contents)
    if not matches:
        log_message(config, "Error: stylesheet file was unable to be parsed and/or find SASS imports.")
        log_message(config, matches)
        return []
    return [partial_path(name) for name in matches]
