#!/usr/bin/env python3
"""
Assemble a theme type from the shared component library.

A build copies the library's base files into ``<build_dir>/<type>/`` and then
runs each section of the type config (``configs/type-<type>.json``) through
its registered handler, in the order the sections appear in the config:

    {
        "replacement_files": ["header.php"],
        "components": ["header", "nav"],
        "templates": ["template-fullwidth.php"],
        "js": ["navigation.js"]
    }

Unknown sections are ignored.

Example usage:
    >>> from components_generator.core.component_assembler import build_type
    >>> result = build_type(config, "basic")
    >>> result.target_dir
    PosixPath('build/basic')
"""

from __future__ import annotations

import re
import shutil
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from components_generator.core.file_copier import (
    CopyPlan,
    copy_build_files,
    copy_files,
    ensure_directory,
)
from components_generator.core.marker_lexer import IncludeDirective, Marker, rewrite_markers
from components_generator.core.type_index import read_json
from components_generator.helpers.generator_config import GeneratorConfig
from components_generator.helpers.helpers_logging import log_message

# Library meta content, pulled into a build selectively by the config sections.
BASE_EXCLUDES: tuple[str, ...] = (
    "assets",
    "components",
    "configs",
    "CONTRIBUTING.md",
    "README.md",
    "templates",
    "types",
)

SOURCE_SUFFIX = ".php"

_TYPE_ID_RE = re.compile(r"^[^./\\][^/\\]*$")


@dataclass
class BuildContext:
    """State of one type build, shared by the section handlers."""

    config: GeneratorConfig
    type_id: str
    type_config: dict[str, Any]
    target_dir: Path

    @property
    def library_dir(self) -> Path:
        return self.config.components_dir

    @property
    def replacements(self) -> list[str]:
        """Relative paths listed under ``replacement_files``."""
        return _as_list(self.type_config.get("replacement_files"))


@dataclass
class BuildResult:
    """Outcome of :func:`build_type`."""

    type_id: str
    target_dir: Path
    base_plan: CopyPlan
    sections: list[str] = field(default_factory=list)
    dry_run: bool = False


@dataclass(frozen=True)
class BuildSource:
    """A source file of the build target and its contents."""

    path: Path
    source: str


SectionHandler = Callable[[BuildContext, list[str]], None]

SECTION_HANDLERS: dict[str, SectionHandler] = {}


def section_handler(name: str) -> Callable[[SectionHandler], SectionHandler]:
    """Register a handler for a type config section."""

    def _register(func: SectionHandler) -> SectionHandler:
        SECTION_HANDLERS[name] = func
        return func

    return _register


def _as_list(value: object) -> list[str]:
    """Coerce a config section value into a list of strings."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return [str(value)]


def _read_source(path: Path) -> str:
    return path.read_bytes().decode("utf-8", errors="surrogateescape")


def _write_source(path: Path, text: str) -> None:
    path.write_bytes(text.encode("utf-8", errors="surrogateescape"))


# ============================================================================
# Section handlers
# ============================================================================


@section_handler("replacement_files")
def add_replacement_files(ctx: BuildContext, files: list[str]) -> None:
    """Overwrite base files with the type's own versions."""
    src_dir = ctx.library_dir / "types" / ctx.type_id
    copy_files(ctx.config, src_dir, files, ctx.target_dir)


@section_handler("sass_replace")
def add_sass_includes(_ctx: BuildContext, _files: list[str]) -> None:
    """Stylesheet include replacement is accepted but not applied."""


@section_handler("components")
def handle_components(ctx: BuildContext, components: list[str]) -> None:
    add_component_files(ctx, components, ctx.replacements)


@section_handler("templates")
def add_templates(ctx: BuildContext, files: list[str]) -> None:
    copy_files(ctx.config, ctx.library_dir / "templates", files, ctx.target_dir / "templates")


@section_handler("js")
def add_javascript(ctx: BuildContext, files: list[str]) -> None:
    copy_files(
        ctx.config,
        ctx.library_dir / "assets" / "js",
        files,
        ctx.target_dir / "assets" / "js",
    )


# ============================================================================
# Component resolution
# ============================================================================


def resolve_components(ctx: BuildContext, components: list[str]) -> set[Path]:
    """Copy the requested components into the build.

    A component is a file when it ends in ``.php`` or when ``<id>.php`` exists
    in the library; otherwise a directory whose files are all copied.

    Returns:
        Library paths of every component file made available
    """
    config = ctx.config
    components_root = ctx.library_dir / "components"
    target_root = ctx.target_dir / "components"
    available: set[Path] = set()

    for comp in components:
        path = components_root / comp
        is_phpfile = comp.endswith(SOURCE_SUFFIX)

        implicit = path.with_name(path.name + SOURCE_SUFFIX)
        if not is_phpfile and implicit.is_file():
            is_phpfile = True
            path = implicit

        if is_phpfile and path.is_file():
            dest = target_root / path.relative_to(components_root)
            ensure_directory(config, dest.parent)
            available.add(path)
            shutil.copyfile(path, dest)
        elif path.is_dir():
            files = sorted(entry.name for entry in path.iterdir() if entry.is_file())
            for name in files:
                available.add(path / name)
            dest = target_root / comp
            ensure_directory(config, dest.parent)
            copy_files(config, path, files, dest)
        else:
            log_message(config, f"Error: component {comp} was not found in {components_root}.")

    return available


def get_build_sources(target_dir: Path) -> list[BuildSource]:
    """Read every source file of the build target, in sorted path order."""
    return [
        BuildSource(path=path, source=_read_source(path))
        for path in sorted(target_dir.rglob(f"*{SOURCE_SUFFIX}"))
        if path.is_file()
    ]


def add_component_files(
    ctx: BuildContext,
    components: list[str],
    replacements: list[str],
) -> None:
    """Copy components and rewrite the insertion markers of the build.

    A marker is replaced by its include directive when its component was made
    available, or when the file holding it is one of ``replacements``. In the
    latter case the component file is copied into the build as well. Every
    other marker is stripped.
    """
    config = ctx.config
    ensure_directory(config, ctx.target_dir / "components")

    available = resolve_components(ctx, components)
    replacement_set = set(replacements)

    for build_source in get_build_sources(ctx.target_dir):
        filename = build_source.path.relative_to(ctx.target_dir).as_posix()
        copy_over = filename in replacement_set

        def _resolve(marker: Marker, copy_over: bool = copy_over) -> IncludeDirective | None:
            compfile = ctx.library_dir / marker.component
            if compfile not in available and not copy_over:
                return None
            if copy_over:
                _force_copy_component(ctx, marker)
            return marker.directive()

        src = rewrite_markers(build_source.source, _resolve)

        if src != build_source.source:
            _write_source(build_source.path, src)


def _force_copy_component(ctx: BuildContext, marker: Marker) -> None:
    """Copy a component referenced by a replacement file into the build."""
    comp_path = ctx.library_dir / marker.component
    comp_target = ctx.target_dir / marker.component
    if not comp_path.is_file():
        log_message(ctx.config, f"Error: component {marker.component} was not able to be copied.")
        return
    ensure_directory(ctx.config, comp_target.parent)
    shutil.copyfile(comp_path, comp_target)


# ============================================================================
# Build entry points
# ============================================================================


def handle_config(ctx: BuildContext) -> list[str]:
    """Run each known config section through its handler.

    Returns:
        Names of the sections that were handled, in order
    """
    handled: list[str] = []
    for section, args in ctx.type_config.items():
        handler = SECTION_HANDLERS.get(section)
        if handler is None:
            continue
        handler(ctx, _as_list(args))
        handled.append(section)
    return handled


def load_type_config(config: GeneratorConfig, type_id: str) -> dict[str, Any]:
    """Read ``configs/type-<type_id>.json`` from the library.

    Raises:
        ValueError: If the type id is not a plain name or the config is not
            a JSON object
        FileNotFoundError: If the config file does not exist
    """
    if not _TYPE_ID_RE.match(type_id):
        raise ValueError(f"Invalid theme type: {type_id!r}")

    config_path = config.components_dir / "configs" / f"type-{type_id}.json"
    if not config_path.is_file():
        raise FileNotFoundError(f"Type config not found: {config_path}")

    data = read_json(config_path)
    if not isinstance(data, dict):
        raise ValueError(f"Type config must be a JSON object: {config_path}")
    return data


def build_type(config: GeneratorConfig, type_id: str, dry_run: bool = False) -> BuildResult:
    """Build a theme type into ``<build_dir>/<type_id>``.

    Args:
        config: Active generator configuration
        type_id: Theme type to build
        dry_run: Only plan the base file copy; nothing is written

    Returns:
        The build result with the base copy plan and handled sections
    """
    type_config = load_type_config(config, type_id)
    target_dir = config.type_dir(type_id)

    plan = copy_build_files(
        config,
        config.components_dir,
        target_dir,
        exclude=BASE_EXCLUDES,
        dry_run=dry_run,
    )
    result = BuildResult(type_id=type_id, target_dir=target_dir, base_plan=plan, dry_run=dry_run)
    if dry_run:
        result.sections = [section for section in type_config if section in SECTION_HANDLERS]
        return result

    ctx = BuildContext(config=config, type_id=type_id, type_config=type_config, target_dir=target_dir)
    result.sections = handle_config(ctx)
    return result
