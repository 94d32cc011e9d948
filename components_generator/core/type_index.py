"""Theme type index.

Scans ``configs/type-<id>.json`` in the extracted library and caches an
``{id: title}`` mapping in ``<build_dir>/types.json``:

    configs/type-business-plus.json  ->  {"business-plus": "Business Plus"}
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from components_generator.helpers.generator_config import GeneratorConfig
from components_generator.helpers.helpers_logging import log_message

TYPE_CONFIG_RE = re.compile(r"(?:^|/)type-([^.]+)\.json$")


def read_json(path: Path) -> Any:
    """Parse a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        json.JSONDecodeError: If the file is not valid JSON
    """
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def title_from_id(type_id: str) -> str:
    """Turn a type id into its display title.

    Each hyphen-separated word gets an upper-case first letter; the rest of
    the word is left as it is.
    """
    return " ".join(word[:1].upper() + word[1:] for word in type_id.split("-"))


def scan_types(config: GeneratorConfig) -> dict[str, str]:
    """Collect ``{id: title}`` from the library's type configs.

    Config files are visited in sorted order; a later duplicate id wins.
    """
    types: dict[str, str] = {}
    configs_dir = config.components_dir / "configs"
    for path in sorted(configs_dir.glob("*.json")):
        match = TYPE_CONFIG_RE.search(path.as_posix())
        if match is None:
            continue
        type_id = match.group(1)
        types[type_id] = title_from_id(type_id)
    return types


def gen_types_cache(config: GeneratorConfig) -> dict[str, str] | None:
    """Rebuild ``types.json`` from the library's type configs.

    When no type config is found an error is logged and the existing index,
    if any, is left alone.

    Returns:
        The written mapping, or None when nothing was written
    """
    types = scan_types(config)
    if not types:
        log_message(
            config,
            "Error: types.json was not rebuilt successfully because configs were not able to be read.",
        )
        return None

    config.types_file.parent.mkdir(parents=True, exist_ok=True)
    config.types_file.write_text(json.dumps(types, indent=4), encoding="utf-8")
    return types


def read_types(config: GeneratorConfig) -> dict[str, str]:
    """Load the cached type index (empty when it has not been built yet)."""
    if not config.types_file.is_file():
        return {}
    data = read_json(config.types_file)
    if not isinstance(data, dict):
        return {}
    return {str(key): str(value) for key, value in data.items()}
