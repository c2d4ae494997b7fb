"""Scrub credentials out of log payloads before they reach a sink.

Dashboards embed datasource connection settings, so widget and catalog
payloads routinely carry passwords and API keys. Values under secret-looking
keys are replaced wholesale; free text is scanned for ``key=value`` and
bearer-token shapes.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Final, TypeAlias

JSONScalar: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]
LogRedactor: TypeAlias = Callable[[JSONValue], JSONValue]

REDACTED: Final[str] = "***REDACTED***"

_SECRET_KEY_FRAGMENTS: Final[frozenset[str]] = frozenset(
    {
        "apikey",
        "api_key",
        "authorization",
        "cookie",
        "credential",
        "passphrase",
        "password",
        "private_key",
        "secret",
        "token",
    }
)

_INLINE_ASSIGNMENT: Final[re.Pattern[str]] = re.compile(
    r"(?i)\b(?P<key>api[_-]?key|token|password|secret|authorization)\b"
    r"\s*(?P<sep>[:=])\s*[^\s,;]+"
)
_INLINE_BEARER: Final[re.Pattern[str]] = re.compile(r"(?i)\bbearer\s+[A-Za-z0-9._~+/-]+=*")


def is_secret_key(key: str) -> bool:
    lowered = key.lower()
    return any(fragment in lowered for fragment in _SECRET_KEY_FRAGMENTS)


def redact_text(text: str) -> str:
    scrubbed = _INLINE_ASSIGNMENT.sub(lambda m: f"{m['key']}{m['sep']}{REDACTED}", text)
    return _INLINE_BEARER.sub(f"Bearer {REDACTED}", scrubbed)


def redact(value: JSONValue) -> JSONValue:
    """Return a redacted copy of ``value``; the input is never mutated."""

    if isinstance(value, str):
        return redact_text(value)
    if isinstance(value, list):
        return [redact(item) for item in value]
    if isinstance(value, dict):
        return {
            key: REDACTED if is_secret_key(key) else redact(item) for key, item in value.items()
        }
    return value


def passthrough(value: JSONValue) -> JSONValue:
    return value


__all__ = [
    "JSONScalar",
    "JSONValue",
    "LogRedactor",
    "REDACTED",
    "is_secret_key",
    "passthrough",
    "redact",
    "redact_text",
]
