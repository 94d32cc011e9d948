"""Shared fixtures for the components generator test suite.

Provides a composable ``make_library`` factory that lays out a small
component library under ``<build_dir>/theme-components-branchless-merge``,
the location a :class:`GeneratorConfig` with default names extracts to.
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

from components_generator.helpers.generator_config import GeneratorConfig

MakeLibrary = Callable[..., Path]

# ---------------------------------------------------------------------------
# Default library content
# ---------------------------------------------------------------------------

_DEFAULT_BASE_FILES: dict[str, str] = {
    "functions.php": "<?php\n// functions\n",
    "style.css": "/* Theme Name: Components */\n",
    "inc/template-tags.php": "<?php\n// template tags\n",
    "README.md": "# Components\n",
    "CONTRIBUTING.md": "# Contributing\n",
    "index.php": (
        "<?php get_header(); ?>\n"
        "<div class=\"wrap\">\n"
        "\t<!-- components/header.php -->\n"
        "\t<!-- components/nav/nav-main.php -->\n"
        "</div>\n"
    ),
}

_DEFAULT_COMPONENTS: dict[str, str] = {
    "header.php": "<header>site header</header>\n",
    "nav/nav-main.php": "<nav>main navigation</nav>\n",
    "nav/nav-social.php": "<nav>social links</nav>\n",
    "buttons/button-primary.php": "<button class=\"primary\"></button>\n",
    "footer.php": "<footer>site footer</footer>\n",
}

_DEFAULT_TYPES: dict[str, dict[str, Any]] = {
    "basic": {"components": ["header", "nav"]},
}


def _write_tree(root: Path, files: dict[str, str]) -> None:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)


def _make_library(
    config: GeneratorConfig,
    *,
    base_files: dict[str, str] | None = None,
    components: dict[str, str] | None = None,
    types: dict[str, dict[str, Any]] | None = None,
    type_files: dict[str, dict[str, str]] | None = None,
    templates: dict[str, str] | None = None,
    scripts: dict[str, str] | None = None,
) -> Path:
    """Create a component library for ``config``.

    Args:
        config: Configuration whose ``components_dir`` receives the library.
        base_files: Root-level theme files (relative path -> content).
        components: Files under ``components/``.
        types: Type configs written as ``configs/type-<id>.json``.
        type_files: Override files under ``types/<id>/`` per type.
        templates: Files under ``templates/``.
        scripts: Files under ``assets/js/``.

    Returns:
        The library root.
    """
    library = config.components_dir
    library.mkdir(parents=True, exist_ok=True)

    _write_tree(library, _DEFAULT_BASE_FILES if base_files is None else base_files)
    _write_tree(library / "components", _DEFAULT_COMPONENTS if components is None else components)

    configs_dir = library / "configs"
    configs_dir.mkdir(exist_ok=True)
    for type_id, type_config in (_DEFAULT_TYPES if types is None else types).items():
        (configs_dir / f"type-{type_id}.json").write_text(json.dumps(type_config, indent=4))

    for type_id, files in (type_files or {}).items():
        _write_tree(library / "types" / type_id, files)

    _write_tree(library / "templates", templates or {})
    _write_tree(library / "assets" / "js", scripts or {})
    return library


@pytest.fixture()
def config(tmp_path: Path) -> GeneratorConfig:
    """Generator configuration rooted in an isolated build directory."""
    return GeneratorConfig(build_dir=tmp_path / "build")


@pytest.fixture()
def make_library(config: GeneratorConfig) -> MakeLibrary:
    """Return a factory that writes a component library for ``config``.

    Usage in tests::

        def test_build(make_library, config):
            make_library(types={"basic": {"components": ["header"]}})
    """

    def _make(**kwargs: Any) -> Path:
        return _make_library(config, **kwargs)

    return _make


@pytest.fixture()
def isolated_cwd(tmp_path: Path) -> Iterator[Path]:
    """Run the test from inside ``tmp_path``; the CWD is restored after."""
    original_cwd = Path.cwd()
    os.chdir(tmp_path)
    try:
        yield tmp_path
    finally:
        os.chdir(original_cwd)
