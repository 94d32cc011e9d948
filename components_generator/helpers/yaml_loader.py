#!/usr/bin/env python3
"""
YAML loader for generator settings files.
Provides a shared ruamel.yaml instance and a typed file loader.
"""

from pathlib import Path
from typing import Union, cast

from ruamel.yaml import YAML

# Recursive type for nested YAML structures
ConfigValue = Union[str, int, float, bool, None, 'ConfigDict', list['ConfigValue']]
ConfigDict = dict[str, ConfigValue]


def _create_yaml_loader() -> YAML:
    """Create the YAML loader instance.

    Returns:
        Safe-mode YAML loader
    """
    yaml_obj = YAML(typ="safe", pure=True)
    yaml_obj.default_flow_style = False
    return yaml_obj


# Shared loader instance
yaml: YAML = _create_yaml_loader()


def load_yaml_file(file_path: Path) -> ConfigDict:
    """Load a YAML mapping from disk.

    Args:
        file_path: Path to YAML file to load

    Returns:
        Mapping loaded from YAML (empty for an empty document)

    Raises:
        FileNotFoundError: If file does not exist
        ValueError: If the document is not a mapping
    """
    if not file_path.exists():
        raise FileNotFoundError(f"YAML file not found: {file_path}")

    with file_path.open(encoding="utf-8") as f:
        raw: ConfigValue = yaml.load(f)

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"Expected a mapping at the top of {file_path}")
    return cast(ConfigDict, raw)
