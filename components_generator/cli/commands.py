#!/usr/bin/env python3
"""Components Generator CLI - Main Entry Point.

Usage:
    components-generator [global options] <command> [options]

Commands:
    refresh              Download the component library and rebuild the type index
    status               Show whether the cached library is fresh
    types                List the theme types of the cached library
    build                Assemble a theme type into the build directory
    stylesheet-imports   List the Sass partials imported by a stylesheet
    help                 Show this help message

Global options:
    --config PATH        Settings file (default: nearest components-generator.yaml)
    --build-dir PATH     Override the build directory
    --bypass-cache       Treat the cached library as stale
    --no-logging         Do not write diagnostics to the log file
    --skip-refresh       Do not schedule a refresh of a stale library
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from components_generator.core.archive_fetcher import get_theme_components_init
from components_generator.core.cache_gate import check_freshness, set_expiration_and_go
from components_generator.core.component_assembler import build_type
from components_generator.core.stylesheet_imports import get_stylesheet_paths
from components_generator.core.type_index import read_types
from components_generator.helpers.generator_config import GeneratorConfig, load_generator_config
from components_generator.helpers.helpers_logging import (
    init_logging,
    print_error,
    print_header,
    print_info,
    print_success,
    print_warning,
)

PROG_NAME = "components-generator"

# Commands that never schedule a library refresh
_NO_GATE_COMMANDS = {"refresh", "help"}


def print_help() -> None:
    """Print help message with all available commands."""
    print(__doc__)


def _config(ctx: click.Context) -> GeneratorConfig:
    config = ctx.find_object(GeneratorConfig)
    if config is None:
        raise click.UsageError("Generator configuration was not loaded")
    return config


def _deferred_refresh(config: GeneratorConfig) -> None:
    print_info(f"🔄 Refreshing component library from {config.archive_url}")
    get_theme_components_init(config)
    print_success(f"Component library refreshed in {config.components_dir}")


@click.group(invoke_without_command=True)
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Settings file")
@click.option("--build-dir", type=click.Path(file_okay=False, path_type=Path),
              help="Override the build directory")
@click.option("--bypass-cache", is_flag=True,
              help="Treat the cached library as stale")
@click.option("--no-logging", is_flag=True, help="Do not write the log file")
@click.option("--skip-refresh", is_flag=True, help="Do not refresh a stale library")
@click.pass_context
def _click_cli(
    ctx: click.Context,
    config_path: Path | None,
    build_dir: Path | None,
    bypass_cache: bool,
    no_logging: bool,
    skip_refresh: bool,
) -> int:
    """Top-level command group: load configuration and run the expiry gate."""
    try:
        config = load_generator_config(
            config_path,
            build_dir=build_dir.resolve() if build_dir else None,
            bypass_cache=bypass_cache or None,
            logging=False if no_logging else None,
        )
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    ctx.obj = config
    init_logging(config)

    if ctx.invoked_subcommand is None:
        print_help()
        return 0

    if not skip_refresh and ctx.invoked_subcommand not in _NO_GATE_COMMANDS:
        set_expiration_and_go(
            config,
            defer=ctx.call_on_close,
            refresh=lambda: _deferred_refresh(config),
        )
    return 0


@_click_cli.command(name="refresh", help="Download the library and rebuild the type index")
@click.pass_context
def refresh_cmd(ctx: click.Context) -> int:
    config = _config(ctx)
    print_header("📦 Fetching component library")
    get_theme_components_init(config)
    types = read_types(config)
    print_success(f"Library extracted to {config.components_dir}")
    print_success(f"{len(types)} theme type(s) indexed in {config.types_file}")
    return 0


@_click_cli.command(name="status", help="Show whether the cached library is fresh")
@click.pass_context
def status_cmd(ctx: click.Context) -> int:
    config = _config(ctx)
    freshness = check_freshness(config)
    print_header("📍 Component library cache")
    print(f"  Library:    {config.components_dir}")
    print(f"  Types file: {config.types_file}")
    if freshness.age is not None:
        print(f"  Age:        {int(freshness.age)}s (ttl {config.cache_ttl}s)")
    if freshness.stale:
        print_warning(f"Library is stale ({freshness.reason})")
    else:
        print_success("Library is fresh")
    return 0


@_click_cli.command(name="types", help="List the theme types of the cached library")
@click.pass_context
def types_cmd(ctx: click.Context) -> int:
    config = _config(ctx)
    types = read_types(config)
    if not types:
        print_warning(f"No theme types cached yet. Run '{PROG_NAME} refresh'.")
        return 1
    print_header("🎨 Theme types")
    for type_id, title in types.items():
        print(f"  {type_id:20} - {title}")
    return 0


@_click_cli.command(name="build", help="Assemble a theme type into the build directory")
@click.argument("type_id")
@click.option("--dry-run", is_flag=True, help="Only show the base files that would be copied")
@click.pass_context
def build_cmd(ctx: click.Context, type_id: str, dry_run: bool) -> int:
    config = _config(ctx)
    try:
        result = build_type(config, type_id, dry_run=dry_run)
    except (FileNotFoundError, ValueError) as e:
        print_error(f"Could not build '{type_id}': {e}")
        return 1

    if dry_run:
        print_header(f"🧪 Dry run: {type_id} -> {result.target_dir}")
        for op in result.base_plan.files:
            print(f"  {op.source} -> {op.destination}")
        print_info(f"Sections to apply: {', '.join(result.sections) or '(none)'}")
        return 0

    print_success(f"Built '{type_id}' in {result.target_dir}")
    print_info(f"Sections applied: {', '.join(result.sections) or '(none)'}")
    return 0


@_click_cli.command(name="stylesheet-imports", help="List Sass partials imported by a stylesheet")
@click.argument("stylesheet", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def stylesheet_imports_cmd(ctx: click.Context, stylesheet: Path) -> int:
    config = _config(ctx)
    paths = get_stylesheet_paths(config, stylesheet)
    if not paths:
        print_warning(f"No Sass imports found in {stylesheet}")
        return 1
    for path in paths:
        print(f"  {path}")
    return 0


@_click_cli.command(name="help", help="Show help message")
def help_cmd() -> int:
    print_help()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = sys.argv[1:] if argv is None else argv

    try:
        result = _click_cli.main(
            args=args,
            prog_name=PROG_NAME,
            standalone_mode=False,
        )
    except click.Abort:
        print("\n⚠️  Cancelled by user")
        return 130
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    return 0 if result is None else int(result)


if __name__ == "__main__":
    sys.exit(main())
