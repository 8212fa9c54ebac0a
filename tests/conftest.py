"""Shared fixtures for keygate tests."""

from __future__ import annotations

from typing import Any
from urllib.parse import urlencode

import pytest
from starlette.requests import Request

from keygate.settings import get_keyauth_settings

_KEYAUTH_ENV = (
    "KEYAUTH_KEY_LOOKUP",
    "KEYAUTH_AUTH_SCHEME",
    "KEYAUTH_CONTEXT_KEY",
    "KEYAUTH_STRICT_LOOKUP",
)


@pytest.fixture(autouse=True)
def _isolated_keyauth_settings(monkeypatch: pytest.MonkeyPatch) -> Any:
    """Keep KEYAUTH_ environment and the settings cache out of each test."""
    for name in _KEYAUTH_ENV:
        monkeypatch.delenv(name, raising=False)
    get_keyauth_settings.cache_clear()
    yield
    get_keyauth_settings.cache_clear()


def build_request(
    *,
    path: str = "/",
    method: str = "GET",
    headers: dict[str, str] | None = None,
    query: dict[str, str] | None = None,
    path_params: dict[str, Any] | None = None,
    body: bytes = b"",
) -> Request:
    """Build a bare Starlette Request from an HTTP scope."""
    raw_headers = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in (headers or {}).items()
    ]
    scope: dict[str, Any] = {
        "type": "http",
        "method": method,
        "scheme": "http",
        "server": ("testserver", 80),
        "path": path,
        "root_path": "",
        "query_string": urlencode(query or {}).encode("latin-1"),
        "headers": raw_headers,
        "path_params": path_params or {},
    }
    sent = False

    async def receive() -> dict[str, Any]:
        nonlocal sent
        if sent:
            return {"type": "http.disconnect"}
        sent = True
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


@pytest.fixture()
def make_request() -> Any:
    """Factory fixture for bare Starlette requests."""
    return build_request
