#!/usr/bin/env python3
"""
Generator configuration value object.

A single :class:`GeneratorConfig` is built once at startup (from defaults,
an optional ``components-generator.yaml`` settings file and CLI overrides) and
passed to every operation of the generator.

Example settings file:
    build_dir: build
    branch_override: branchless-merge
    bypass_cache: false
    logging: true
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

from components_generator.helpers.yaml_loader import load_yaml_file

SETTINGS_FILE_NAME = "components-generator.yaml"

DEFAULT_REPO_URL = "https://codeload.github.com/Automattic/theme-components/zip/master"
DEFAULT_REPO_FILE_NAME = "theme-components-master.zip"
DEFAULT_BRANCH_OVERRIDE = "branchless-merge"
DEFAULT_CACHE_TTL = 1800  # seconds
DEFAULT_REQUEST_TIMEOUT = 60.0  # seconds

TYPES_FILE_NAME = "types.json"
CACHE_META_FILE_NAME = "cache-meta.json"
LOG_FILE_NAME = "debug.log"

_PATH_KEYS = {"build_dir", "log_file"}


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings shared by every generator operation.

    Attributes:
        build_dir: Directory holding the extracted library, caches and builds.
        repo_url: Remote archive URL of the component library.
        repo_file_name: File name of the downloaded archive.
        branch_override: Branch substituted for ``master`` in the URL and
            names (None or empty keeps ``master``).
        bypass_cache: Always treat the cached library as stale.
        logging: Record diagnostics to the log file.
        log_file_override: Log file path set by the ``log_file`` setting
            (None uses build_dir/debug.log).
        cache_ttl: Seconds before the cached library is considered stale.
        request_timeout: HTTP timeout for the archive download.
    """

    build_dir: Path = field(default_factory=lambda: Path("build"))
    repo_url: str = DEFAULT_REPO_URL
    repo_file_name: str = DEFAULT_REPO_FILE_NAME
    branch_override: str | None = DEFAULT_BRANCH_OVERRIDE
    bypass_cache: bool = False
    logging: bool = True
    log_file_override: Path | None = None
    cache_ttl: int = DEFAULT_CACHE_TTL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    @property
    def archive_url(self) -> str:
        """Download URL with the branch override applied."""
        if not self.branch_override:
            return self.repo_url
        return re.sub(r"/master$", f"/{self.branch_override}", self.repo_url)

    @property
    def archive_name(self) -> str:
        """Archive file name with the branch override applied."""
        if not self.branch_override:
            return self.repo_file_name
        return re.sub(r"-master\.zip$", f"-{self.branch_override}.zip", self.repo_file_name)

    @property
    def components_dir(self) -> Path:
        """Directory the library archive extracts to."""
        name = self.repo_file_name.replace(".zip", "")
        if self.branch_override:
            name = re.sub(r"-master$", f"-{self.branch_override}", name)
        return self.build_dir / name

    @property
    def types_file(self) -> Path:
        return self.build_dir / TYPES_FILE_NAME

    @property
    def cache_meta_file(self) -> Path:
        return self.build_dir / CACHE_META_FILE_NAME

    @property
    def log_file(self) -> Path:
        return self.log_file_override or self.build_dir / LOG_FILE_NAME

    def type_dir(self, type_id: str) -> Path:
        """Build target directory for a theme type."""
        return self.build_dir / type_id


def find_settings_file(start: Path | None = None) -> Path | None:
    """Search upwards from ``start`` (default: CWD) for the settings file."""
    current = start or Path.cwd()
    for parent in [current, *current.parents]:
        candidate = parent / SETTINGS_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def _coerce_settings(raw: dict[str, Any], base_dir: Path) -> dict[str, Any]:
    """Map settings-file keys onto GeneratorConfig field values.

    Raises:
        ValueError: On unknown keys or values of the wrong type
    """
    known = {f.name for f in fields(GeneratorConfig)} - {"log_file_override"} | {"log_file"}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown generator settings: {', '.join(unknown)}")

    values: dict[str, Any] = {}
    for key, value in raw.items():
        if key in _PATH_KEYS:
            if not isinstance(value, str) or not value:
                raise ValueError(f"Setting '{key}' must be a non-empty path string")
            path = Path(value).expanduser()
            if not path.is_absolute():
                path = base_dir / path
            values["log_file_override" if key == "log_file" else key] = path
        elif key in ("bypass_cache", "logging"):
            if not isinstance(value, bool):
                raise ValueError(f"Setting '{key}' must be true or false")
            values[key] = value
        elif key == "cache_ttl":
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError("Setting 'cache_ttl' must be a non-negative integer")
            values[key] = value
        elif key == "request_timeout":
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ValueError("Setting 'request_timeout' must be a positive number")
            values[key] = float(value)
        elif key == "branch_override":
            if value is not None and not isinstance(value, str):
                raise ValueError("Setting 'branch_override' must be a string or null")
            values[key] = value or None
        else:
            if not isinstance(value, str) or not value:
                raise ValueError(f"Setting '{key}' must be a non-empty string")
            values[key] = value
    return values


def load_generator_config(
    settings_path: Path | None = None,
    **overrides: Any,
) -> GeneratorConfig:
    """Build the configuration from defaults, settings file and overrides.

    Args:
        settings_path: Explicit settings file. When None, the nearest
            ``components-generator.yaml`` above the CWD is used if present.
        **overrides: Field values taking precedence over the file. None
            values are ignored.

    Returns:
        The resolved configuration

    Raises:
        FileNotFoundError: If an explicit settings file does not exist
        ValueError: If the settings file holds invalid values
    """
    config = GeneratorConfig(build_dir=Path.cwd() / "build")

    path = settings_path or find_settings_file()
    if path is not None:
        raw = load_yaml_file(path)
        config = replace(config, **_coerce_settings(dict(raw), path.parent.resolve()))

    applied = {key: value for key, value in overrides.items() if value is not None}
    if applied:
        config = replace(config, **applied)
    return config
