"""Expiry gate for the cached component library.

Freshness comes from the ``last_fetched`` timestamp that the archive fetcher
writes into ``cache-meta.json``. A stale library is refreshed once, through a
``defer`` hook supplied by the host, so the refresh runs after the current
command instead of in front of it.
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from dataclasses import dataclass

from components_generator.core.archive_fetcher import get_theme_components_init
from components_generator.helpers.generator_config import GeneratorConfig

Refresh = Callable[[], None]
Defer = Callable[[Refresh], object]


@dataclass(frozen=True)
class Freshness:
    """Result of an expiry check.

    Attributes:
        stale: Whether the library must be refreshed.
        reason: Why ('missing', 'bypass', 'expired' or 'fresh').
        age: Seconds since the last fetch, when known.
    """

    stale: bool
    reason: str
    age: float | None = None


def read_last_fetched(config: GeneratorConfig) -> float | None:
    """Return the recorded fetch time, or None when absent or unreadable."""
    try:
        meta = json.loads(config.cache_meta_file.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    if not isinstance(meta, dict):
        return None
    value = meta.get("last_fetched")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def check_freshness(config: GeneratorConfig, now: float | None = None) -> Freshness:
    """Decide whether the cached library has expired."""
    last_fetched = read_last_fetched(config)
    if last_fetched is None:
        return Freshness(stale=True, reason="missing")

    age = (time.time() if now is None else now) - last_fetched
    if config.bypass_cache:
        return Freshness(stale=True, reason="bypass", age=age)
    if config.cache_ttl <= age:
        return Freshness(stale=True, reason="expired", age=age)
    return Freshness(stale=False, reason="fresh", age=age)


def is_stale(config: GeneratorConfig, now: float | None = None) -> bool:
    return check_freshness(config, now).stale


def set_expiration_and_go(
    config: GeneratorConfig,
    defer: Defer,
    now: float | None = None,
    refresh: Refresh | None = None,
) -> Freshness:
    """Schedule a library refresh through ``defer`` when the cache is stale.

    Args:
        config: Active generator configuration
        defer: Host hook that runs the given callable later
        now: Current time override (UNIX seconds)
        refresh: Refresh callable (defaults to fetch + index rebuild)

    Returns:
        The freshness decision
    """
    freshness = check_freshness(config, now)
    if freshness.stale:
        defer(refresh or (lambda: get_theme_components_init(config)))
    return freshness
