"""Message catalogs used when finalizing issues.

A locale is a callable ``(RawIssue) -> str``. The English catalog ships with
the library; others can be plugged in with ``register_locale``.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from .issues import IssueCode, RawIssue

logger = logging.getLogger(__name__)

Locale = Callable[[RawIssue], str]

_SIZING: dict[str, str] = {
    "string": "characters",
    "slice": "items",
    "array": "items",
    "tuple": "items",
    "set": "items",
    "record": "entries",
    "map": "entries",
    "object": "keys",
}

_FORMAT_NOUNS: dict[str, str] = {
    "regex": "input",
    "email": "email address",
    "url": "URL",
    "uuid": "UUID",
    "guid": "GUID",
    "uuidv4": "UUIDv4",
    "uuidv6": "UUIDv6",
    "uuidv7": "UUIDv7",
    "cuid": "cuid",
    "cuid2": "cuid2",
    "ulid": "ULID",
    "xid": "XID",
    "ksuid": "KSUID",
    "nanoid": "nanoid",
    "ipv4": "IPv4 address",
    "ipv6": "IPv6 address",
    "cidrv4": "IPv4 range",
    "cidrv6": "IPv6 range",
    "base64": "base64-encoded string",
    "base64url": "base64url-encoded string",
    "emoji": "emoji",
    "jwt": "JWT",
    "hex": "hexadecimal string",
    "iso_date": "ISO date",
    "iso_datetime": "ISO datetime",
    "lowercase": "lowercase string",
    "uppercase": "uppercase string",
}


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    return repr(value)


def _bound(issue: RawIssue, value: Any, inclusive_op: str, exclusive_op: str) -> str:
    origin = issue.origin or "value"
    op = inclusive_op if issue.inclusive in (None, True) else exclusive_op
    unit = _SIZING.get(origin)
    if unit:
        return f"expected {origin} to have {op}{value} {unit}"
    return f"expected {origin} to be {op}{value}"


def english(issue: RawIssue) -> str:
    """Default English catalog."""
    code = issue.code
    if code is IssueCode.INVALID_TYPE:
        if issue.expected == "nonoptional":
            return "Invalid input: expected a value, received nil"
        if issue.received == "missing":
            return f"Required: expected {issue.expected}, received nothing"
        return f"Invalid input: expected {issue.expected}, received {issue.received}"
    if code is IssueCode.INVALID_VALUE:
        values = issue.values
        if len(values) == 1:
            return f"Invalid input: expected {_stringify(values[0])}"
        return "Invalid option: expected one of " + "|".join(_stringify(v) for v in values)
    if code is IssueCode.TOO_BIG:
        return "Too big: " + _bound(issue, issue.maximum, "<=", "<")
    if code is IssueCode.TOO_SMALL:
        return "Too small: " + _bound(issue, issue.minimum, ">=", ">")
    if code is IssueCode.INVALID_FORMAT:
        fmt = issue.format or "regex"
        detail = issue.properties
        if fmt == "starts_with":
            return f'Invalid string: must start with "{detail.get("prefix")}"'
        if fmt == "ends_with":
            return f'Invalid string: must end with "{detail.get("suffix")}"'
        if fmt == "includes":
            return f'Invalid string: must include "{detail.get("includes")}"'
        if fmt == "regex" and "pattern" in detail:
            return f"Invalid string: must match pattern /{detail['pattern']}/"
        return f"Invalid {_FORMAT_NOUNS.get(fmt, fmt)}"
    if code is IssueCode.NOT_MULTIPLE_OF:
        return f"Invalid number: must be a multiple of {issue.multiple_of}"
    if code is IssueCode.UNRECOGNIZED_KEYS:
        keys = issue.keys
        plural = "s" if len(keys) > 1 else ""
        return f"Unrecognized key{plural}: " + ", ".join(_stringify(k) for k in keys)
    if code is IssueCode.INVALID_KEY:
        return f"Invalid key in {issue.origin or 'record'}"
    if code is IssueCode.INVALID_ELEMENT:
        return f"Invalid value in {issue.origin or 'map'}"
    if code is IssueCode.INVALID_UNION:
        if issue.properties.get("note"):
            return f"Invalid input: {issue.properties['note']}"
        return "Invalid input"
    if code is IssueCode.INVALID_SCHEMA:
        return "Invalid schema"
    if code is IssueCode.INVALID_DISCRIMINATOR:
        return "Invalid discriminator value"
    if code is IssueCode.INCOMPATIBLE_TYPES:
        return "Intersection results could not be merged"
    if code is IssueCode.MISSING_REQUIRED:
        return "Required"
    if code is IssueCode.TYPE_CONVERSION:
        return f"Type conversion failed: expected {issue.expected}, received {issue.received}"
    if code is IssueCode.NIL_POINTER:
        return "Unexpected nil pointer"
    return "Invalid input"


_lock = threading.Lock()
_LOCALES: dict[str, Locale] = {"en": english}


def register_locale(name: str, locale: Locale) -> None:
    """Make a catalog available under ``name`` (replaces any previous one)."""
    if not name:
        raise ValueError("locale name must be non-empty")
    if not callable(locale):
        raise TypeError(f"locale must be callable, got {type(locale).__name__}")
    with _lock:
        _LOCALES[name] = locale


def get_locale(name: str | None) -> Locale:
    """Look up a catalog. Unknown names fall back to English."""
    with _lock:
        found = _LOCALES.get(name or "en")
    if found is None:
        logger.warning("Unknown locale %r, falling back to 'en'", name)
        return english
    return found


def available_locales() -> list[str]:
    with _lock:
        return sorted(_LOCALES)
