"""Logging helpers for the components generator.

Console output goes through the colored ``print_*`` helpers. Diagnostics that
the generator records while it works (failed deletes, empty config scans, ...)
go through ``log_message``, which is gated by the ``logging`` toggle of the
active :class:`GeneratorConfig` and appended to the log file.
"""

from __future__ import annotations

import logging
import pprint
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from components_generator.helpers.generator_config import GeneratorConfig

LOGGER_NAME = "components_generator"

logger = logging.getLogger(LOGGER_NAME)


class Colors:
    """ANSI color codes for terminal output."""
    HEADER = '\033[95m'
    OKCYAN = '\033[96m'
    CYAN = '\033[96m'  # Alias for OKCYAN
    OKGREEN = '\033[92m'
    GREEN = '\033[92m'  # Alias for OKGREEN
    YELLOW = '\033[93m'
    RED = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'


def print_header(msg: str) -> None:
    """Print a header message."""
    print(f"{Colors.HEADER}{Colors.BOLD}{msg}{Colors.ENDC}")


def print_info(msg: str) -> None:
    """Print an info message."""
    print(f"{Colors.OKCYAN}{msg}{Colors.ENDC}")


def print_success(msg: str) -> None:
    """Print a success message."""
    print(f"{Colors.OKGREEN}✓ {msg}{Colors.ENDC}")


def print_warning(msg: str) -> None:
    """Print a warning message."""
    print(f"{Colors.YELLOW}⚠️  {msg}{Colors.ENDC}")


def print_error(msg: str) -> None:
    """Print an error message."""
    print(f"{Colors.RED}❌ {msg}{Colors.ENDC}")


def init_logging(config: GeneratorConfig) -> Path | None:
    """Attach an appending file handler for ``config.log_file``.

    Calling it again for the same file is a no-op.

    Returns:
        Path of the log file, or None when logging is switched off.
    """
    if not config.logging:
        return None

    log_file = config.log_file
    logger.setLevel(logging.DEBUG)

    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == log_file.resolve():
            return log_file

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print_warning(f"Could not create log directory {log_file.parent}: {e}")
        return None

    fh = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    logger.addHandler(fh)
    logger.debug("Logging initialized. file=%s", log_file)
    return log_file


def log_message(config: GeneratorConfig, data: object) -> None:
    """Record a diagnostic message when logging is enabled.

    Strings are logged as they are; anything else is pretty-formatted first.
    """
    if not config.logging:
        return
    if isinstance(data, str):
        logger.error(data)
    else:
        logger.error(pprint.pformat(data))
