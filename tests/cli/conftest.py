"""Shared fixtures for CLI tests.

Every CLI test runs from an isolated working directory, so the settings file
lookup never picks up a ``components-generator.yaml`` from the real workspace.
File handlers attached to the generator logger by ``init_logging`` are
removed after each test.
"""

import json
import logging
import os
import time
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from components_generator.helpers.generator_config import GeneratorConfig
from components_generator.helpers.helpers_logging import LOGGER_NAME

MarkFresh = Callable[[], None]


@pytest.fixture(autouse=True)
def isolated_project(tmp_path: Path) -> Iterator[Path]:
    """Create an isolated project directory and cd into it.

    Yields:
        Path to the temporary project root.
    """
    original_cwd = Path.cwd()
    os.chdir(tmp_path)
    try:
        yield tmp_path
    finally:
        os.chdir(original_cwd)


@pytest.fixture(autouse=True)
def _detach_log_handlers() -> Iterator[None]:
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler):
            logger.removeHandler(handler)
            handler.close()


@pytest.fixture()
def mark_fresh(config: GeneratorConfig) -> MarkFresh:
    """Return a helper that records a just-now library fetch.

    With a fresh ``cache-meta.json`` the CLI does not schedule a refresh.
    """

    def _mark() -> None:
        config.build_dir.mkdir(parents=True, exist_ok=True)
        config.cache_meta_file.write_text(json.dumps({"last_fetched": time.time()}))

    return _mark


@pytest.fixture()
def cli_args(config: GeneratorConfig) -> Callable[..., list[str]]:
    """Return a helper prefixing ``--build-dir <config.build_dir>`` to args."""

    def _args(*args: str) -> list[str]:
        return ["--build-dir", str(config.build_dir), *args]

    return _args
