"""Tests for taproute.errors — exception hierarchy and error messages."""

import pytest

from taproute.errors import (
    ConfigurationError,
    HTTPError,
    NotFound,
    PatternError,
    TaprouteError,
)


class TestHierarchy:
    def test_configuration_error_is_taproute_error(self) -> None:
        assert issubclass(ConfigurationError, TaprouteError)

    def test_pattern_error_is_configuration_error(self) -> None:
        assert issubclass(PatternError, ConfigurationError)

    def test_not_found_is_http_error(self) -> None:
        assert issubclass(NotFound, HTTPError)
        assert issubclass(HTTPError, TaprouteError)


class TestPatternError:
    def test_attributes(self) -> None:
        err = PatternError("{id}", "^(?P<id>[0-9)$", "unterminated character set")
        assert err.rule == "{id}"
        assert err.pattern == "^(?P<id>[0-9)$"
        assert err.reason == "unterminated character set"

    def test_message_names_rule(self) -> None:
        err = PatternError("users/{id}", "^x$", "bad")
        assert str(err) == "Invalid rule 'users/{id}' (compiled to '^x$'): bad"


class TestHTTPError:
    def test_str_with_detail(self) -> None:
        assert str(HTTPError(status=400, detail="Bad request")) == "400: Bad request"

    def test_str_without_detail(self) -> None:
        assert str(HTTPError(status=500)) == "500"

    def test_frozen(self) -> None:
        err = HTTPError(status=400)
        with pytest.raises(AttributeError):
            err.status = 500  # type: ignore[misc]


class TestNotFound:
    def test_defaults(self) -> None:
        err = NotFound()
        assert err.status == 404
        assert err.detail == "Not Found"

    def test_custom_detail(self) -> None:
        assert str(NotFound("No route matches GET '/x'")) == "404: No route matches GET '/x'"
