"""taproute exception hierarchy.

Shared across the pattern compiler, router, group controllers and
declaration providers so every module raises and catches the same types.
"""

from dataclasses import dataclass


class TaprouteError(Exception):
    """Base for all taproute-specific errors."""


class ConfigurationError(TaprouteError):
    """Raised when route declarations are invalid.

    Always surfaces during the load phase, never while matching.
    """


class PatternError(ConfigurationError):
    """A rule template compiled into an invalid regular expression."""

    def __init__(self, rule: str, pattern: str, reason: str) -> None:
        self.rule = rule
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid rule {rule!r} (compiled to {pattern!r}): {reason}")


@dataclass(frozen=True, slots=True)
class HTTPError(TaprouteError):
    """An error that maps directly to an HTTP status code."""

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)
