"""Tests for the key auth error taxonomy."""

from __future__ import annotations

import pytest

from keygate.exceptions import (
    INVALID_KEY_MESSAGE,
    MISSING_OR_MALFORMED_KEY_MESSAGE,
    ConfigurationError,
    KeyAuthError,
    KeyRejectedError,
    MissingOrMalformedKeyError,
)


@pytest.mark.unit
class TestKeyAuthError:
    def test_message_and_code(self) -> None:
        err = KeyAuthError("Something failed")
        assert err.message == "Something failed"
        assert err.error_code == "KEY_AUTH_ERROR"
        assert err.context == {}

    def test_str_with_context(self) -> None:
        err = KeyAuthError("Failed", context={"source": "header"})
        assert str(err) == "Failed (source=header)"

    def test_repr(self) -> None:
        err = KeyAuthError("Failed", context={"a": "1"})
        assert repr(err) == "KeyAuthError('Failed', context={'a': '1'})"


@pytest.mark.unit
class TestMissingOrMalformedKeyError:
    def test_defaults(self) -> None:
        err = MissingOrMalformedKeyError()
        assert err.message == MISSING_OR_MALFORMED_KEY_MESSAGE
        assert err.error_code == "MISSING_OR_MALFORMED_KEY"
        assert err.status_code == 400

    def test_context_from_kwargs(self) -> None:
        err = MissingOrMalformedKeyError(source="cookie", name="access_token")
        assert err.context == {"source": "cookie", "name": "access_token"}

    def test_is_key_auth_error(self) -> None:
        assert isinstance(MissingOrMalformedKeyError(), KeyAuthError)


@pytest.mark.unit
class TestKeyRejectedError:
    def test_defaults(self) -> None:
        err = KeyRejectedError()
        assert err.reason is None
        assert err.message == INVALID_KEY_MESSAGE
        assert err.error_code == "INVALID_KEY"
        assert err.status_code == 401

    def test_reason_becomes_message(self) -> None:
        err = KeyRejectedError("key revoked", key_id="abc")
        assert err.reason == "key revoked"
        assert str(err) == "key revoked (key_id=abc)"


@pytest.mark.unit
class TestConfigurationError:
    def test_code_and_context(self) -> None:
        err = ConfigurationError("bad directive", directive="nope")
        assert err.error_code == "CONFIGURATION_ERROR"
        assert err.context == {"directive": "nope"}
