"""Tests for the component library expiry gate."""

from __future__ import annotations

import json
from dataclasses import replace
from unittest.mock import patch

import pytest

from components_generator.core.cache_gate import (
    check_freshness,
    is_stale,
    read_last_fetched,
    set_expiration_and_go,
)
from components_generator.helpers.generator_config import GeneratorConfig

NOW = 1_700_000_000.0


def _write_meta(config: GeneratorConfig, meta: object) -> None:
    config.build_dir.mkdir(parents=True, exist_ok=True)
    config.cache_meta_file.write_text(json.dumps(meta))


class TestCheckFreshness:
    """Age and bypass decisions."""

    def test_missing_meta_is_stale(self, config: GeneratorConfig) -> None:
        freshness = check_freshness(config, now=NOW)

        assert freshness.stale
        assert freshness.reason == "missing"
        assert freshness.age is None

    def test_recent_fetch_is_fresh(self, config: GeneratorConfig) -> None:
        _write_meta(config, {"last_fetched": NOW - 60})

        freshness = check_freshness(config, now=NOW)

        assert not freshness.stale
        assert freshness.reason == "fresh"
        assert freshness.age == 60

    def test_age_equal_to_ttl_is_expired(self, config: GeneratorConfig) -> None:
        _write_meta(config, {"last_fetched": NOW - config.cache_ttl})

        freshness = check_freshness(config, now=NOW)

        assert freshness.stale
        assert freshness.reason == "expired"

    def test_bypass_forces_stale(self, config: GeneratorConfig) -> None:
        _write_meta(config, {"last_fetched": NOW})

        assert check_freshness(replace(config, bypass_cache=True), now=NOW).reason == "bypass"

    @pytest.mark.parametrize(
        "meta",
        [[], {"archive": "x.zip"}, {"last_fetched": "yesterday"}, {"last_fetched": True}],
    )
    def test_unusable_meta_counts_as_missing(self, config: GeneratorConfig, meta: object) -> None:
        _write_meta(config, meta)

        assert read_last_fetched(config) is None
        assert is_stale(config, now=NOW)

    def test_corrupt_meta_counts_as_missing(self, config: GeneratorConfig) -> None:
        config.build_dir.mkdir(parents=True)
        config.cache_meta_file.write_text("{broken")

        assert read_last_fetched(config) is None

    def test_library_mtime_is_ignored(self, make_library, config: GeneratorConfig) -> None:
        make_library()
        _write_meta(config, {"last_fetched": NOW - 7200})

        assert check_freshness(config, now=NOW).reason == "expired"


class TestSetExpirationAndGo:
    """Deferred refresh scheduling."""

    def test_stale_schedules_refresh_once(self, config: GeneratorConfig) -> None:
        scheduled: list[object] = []
        calls: list[str] = []

        freshness = set_expiration_and_go(
            config,
            defer=scheduled.append,
            now=NOW,
            refresh=lambda: calls.append("refresh"),
        )

        assert freshness.stale
        assert len(scheduled) == 1
        assert calls == []
        scheduled[0]()  # type: ignore[operator]
        assert calls == ["refresh"]

    def test_fresh_schedules_nothing(self, config: GeneratorConfig) -> None:
        _write_meta(config, {"last_fetched": NOW - 10})
        scheduled: list[object] = []

        set_expiration_and_go(config, defer=scheduled.append, now=NOW)

        assert scheduled == []

    def test_default_refresh_fetches_library(self, config: GeneratorConfig) -> None:
        scheduled: list[object] = []

        with patch("components_generator.core.cache_gate.get_theme_components_init") as init:
            set_expiration_and_go(config, defer=scheduled.append, now=NOW)
            init.assert_not_called()
            scheduled[0]()  # type: ignore[operator]

        init.assert_called_once_with(config)
