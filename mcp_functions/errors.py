"""
Error taxonomy and the tool result type shared by both tool paths.

Holiday operations return a ToolResult instead of raising, so the native
tool-trigger path and the fallback tool-call path only differ in how the
result is presented.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Classification of tool failures."""

    INVALID_ARGUMENT = "invalid_argument"
    INVALID_COUNTRY_CODE = "invalid_country_code"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    CHECK_FAILED = "check_failed"
    INTERNAL = "internal"


class HolidayServiceError(Exception):
    """Base error raised by the holiday client."""

    kind = ErrorKind.UPSTREAM_UNAVAILABLE


class InvalidCountryCode(HolidayServiceError):
    """Upstream API answered 404 for the country (or year)."""

    kind = ErrorKind.INVALID_COUNTRY_CODE


class UpstreamUnavailable(HolidayServiceError):
    """Network failure, timeout or non-404 error status from upstream."""

    kind = ErrorKind.UPSTREAM_UNAVAILABLE


class CheckFailed(HolidayServiceError):
    """The is-today check could not be completed."""

    kind = ErrorKind.CHECK_FAILED


@dataclass(frozen=True)
class ToolResult:
    """Outcome of a tool operation: a value or an error kind with a message."""

    value: Any = None
    error: ErrorKind | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any) -> "ToolResult":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "ToolResult":
        return cls(error=kind, message=message)

    @classmethod
    def from_exception(cls, exc: Exception) -> "ToolResult":
        kind = getattr(exc, "kind", ErrorKind.INTERNAL)
        return cls(error=kind, message=str(exc))


def to_trigger_payload(result: ToolResult) -> str:
    """
    Present a result for the native tool-trigger path.

    Failures become an {"error": message} document; both outcomes are JSON text.
    """
    if result.ok:
        return json.dumps(result.value)
    return json.dumps({"error": result.message})


def to_http_envelope(result: ToolResult) -> dict[str, Any]:
    """Present a result for the fallback tool-call path as a status/body envelope."""
    if result.ok:
        return {"status": 200, "body": result.value}
    return {"status": 400, "body": {"error": result.message}}
