#!/usr/bin/env python3
"""
Fetch the component library archive.

Downloads the library zip into the build directory, extracts it in place,
removes the downloaded archive and records the fetch time in
``cache-meta.json`` for the expiry gate.
"""

from __future__ import annotations

import json
import time
import zipfile
from pathlib import Path

import httpx

from components_generator.core.file_copier import delete_file, ensure_directory
from components_generator.core.type_index import gen_types_cache
from components_generator.helpers.generator_config import GeneratorConfig
from components_generator.helpers.helpers_logging import log_message, print_error

_CHUNK_SIZE = 64 * 1024


def download_file(
    config: GeneratorConfig,
    url: str,
    destination: Path,
    client: httpx.Client | None = None,
) -> bool:
    """Stream ``url`` into ``destination``.

    HTTP failures are logged; whatever was received stays on disk.

    Args:
        config: Active generator configuration
        url: Remote resource
        destination: Local file to write
        client: HTTP client to use (a short-lived one is created when None)

    Returns:
        True if the response completed with a success status
    """
    owns_client = client is None
    http = client or httpx.Client(timeout=config.request_timeout, follow_redirects=True)
    try:
        with destination.open("wb") as fp, http.stream("GET", url) as response:
            for chunk in response.iter_bytes(_CHUNK_SIZE):
                fp.write(chunk)
            response.raise_for_status()
    except httpx.HTTPStatusError as e:
        log_message(config, f"Error: download of {url} failed with status {e.response.status_code}.")
        return False
    except httpx.HTTPError as e:
        log_message(config, f"Error: download of {url} failed: {e}")
        return False
    finally:
        if owns_client:
            http.close()
    return True


def unzip_file(zip_file: Path) -> Path:
    """Extract ``zip_file`` into the directory that holds it.

    Raises:
        SystemExit: If the archive cannot be opened. This aborts the process.

    Returns:
        The directory the archive was extracted into
    """
    path = zip_file.resolve().parent
    try:
        with zipfile.ZipFile(zip_file) as zf:
            zf.extractall(path)
    except (zipfile.BadZipFile, OSError) as e:
        print_error(f"Oh no! I couldn't open the zip: {zip_file}.")
        raise SystemExit(1) from e
    return path


def write_cache_meta(config: GeneratorConfig, fetched_at: float | None = None) -> dict[str, object]:
    """Record when the library was last fetched."""
    meta: dict[str, object] = {
        "last_fetched": time.time() if fetched_at is None else fetched_at,
        "repo_url": config.archive_url,
        "archive": config.archive_name,
    }
    config.cache_meta_file.write_text(json.dumps(meta, indent=4), encoding="utf-8")
    return meta


def get_theme_components(config: GeneratorConfig, client: httpx.Client | None = None) -> Path:
    """Download and extract the component library into the build directory.

    Returns:
        The extracted library directory
    """
    ensure_directory(config, config.build_dir)

    archive = config.build_dir / config.archive_name
    download_file(config, config.archive_url, archive, client=client)

    unzip_file(archive)

    delete_file(config, archive)

    write_cache_meta(config)
    return config.components_dir


def get_theme_components_init(config: GeneratorConfig, client: httpx.Client | None = None) -> None:
    """Refresh the library and rebuild the type index."""
    get_theme_components(config, client=client)
    gen_types_cache(config)
