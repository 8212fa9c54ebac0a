"""Tests for the ready-made request filters."""

from __future__ import annotations

from typing import Any

import pytest

from keygate.filters import DEFAULT_EXCLUDED_PREFIXES, exclude_paths, only_paths


@pytest.mark.unit
class TestExcludePaths:
    def test_default_prefixes(self, make_request: Any) -> None:
        skip = exclude_paths()
        for prefix in DEFAULT_EXCLUDED_PREFIXES:
            assert skip(make_request(path=prefix)) is True
        assert skip(make_request(path="/api/items")) is False

    def test_custom_prefixes(self, make_request: Any) -> None:
        skip = exclude_paths("/public")
        assert skip(make_request(path="/public/logo.png")) is True
        assert skip(make_request(path="/health")) is False


@pytest.mark.unit
class TestOnlyPaths:
    def test_guards_listed_paths_only(self, make_request: Any) -> None:
        skip = only_paths("/auth1", "/auth2")
        assert skip(make_request(path="/auth1")) is False
        assert skip(make_request(path="/auth2")) is False
        assert skip(make_request(path="/")) is True

    def test_exact_match(self, make_request: Any) -> None:
        skip = only_paths("/auth1")
        assert skip(make_request(path="/auth1/sub")) is True
