"""Issue model for schema validation.

Validation never raises inside the engine. Problems are recorded as
``RawIssue`` objects on the parse payload, carried upward with their paths
prefixed by each container they pass through, and finalized exactly once at
the top-level call into ``Issue`` objects wrapped in a ``ZodError``.

Example:
    >>> import pyzod as z
    >>> try:
    ...     z.object({"age": z.integer().min(18)}).parse({"age": 16})
    ... except z.ZodError as e:
    ...     e.issues[0].code, e.issues[0].path
    (<IssueCode.TOO_SMALL: 'too_small'>, ('age',))
"""

from __future__ import annotations

import dataclasses
import datetime
import enum
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Hashable, Union

PathSegment = Union[str, int, Hashable]
ErrorMap = Callable[["RawIssue"], Union[str, None]]


class IssueCode(str, enum.Enum):
    """Machine-readable issue codes."""
    INVALID_TYPE = "invalid_type"
    INVALID_VALUE = "invalid_value"
    INVALID_FORMAT = "invalid_format"
    INVALID_UNION = "invalid_union"
    INVALID_KEY = "invalid_key"
    INVALID_ELEMENT = "invalid_element"
    TOO_SMALL = "too_small"
    TOO_BIG = "too_big"
    NOT_MULTIPLE_OF = "not_multiple_of"
    CUSTOM = "custom"
    INVALID_SCHEMA = "invalid_schema"
    INVALID_DISCRIMINATOR = "invalid_discriminator"
    INCOMPATIBLE_TYPES = "incompatible_types"
    MISSING_REQUIRED = "missing_required"
    TYPE_CONVERSION = "type_conversion"
    NIL_POINTER = "nil_pointer"
    UNRECOGNIZED_KEYS = "unrecognized_keys"

    def __str__(self) -> str:
        return self.value


def parsed_type(value: Any) -> str:
    """Describe the runtime type of a value the way issues report it."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, enum.Enum):
        return "enum"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "NaN" if math.isnan(value) else "float"
    if isinstance(value, Decimal):
        return "decimal"
    if isinstance(value, complex):
        return "complex"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (bytes, bytearray)):
        return "bytes"
    if isinstance(value, (datetime.datetime, datetime.date)):
        return "time"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, list):
        return "slice"
    if isinstance(value, tuple):
        return "array"
    if isinstance(value, (set, frozenset)):
        return "set"
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return "struct"
    if callable(value):
        return "function"
    return type(value).__name__


def format_path(path: tuple[PathSegment, ...] | list[PathSegment]) -> str:
    """Render a path as ``user.tags[2].name``."""
    out = ""
    for seg in path:
        if isinstance(seg, int) and not isinstance(seg, bool):
            out += f"[{seg}]"
        elif out:
            out += f".{seg}"
        else:
            out = str(seg)
    return out


@dataclass
class RawIssue:
    """An issue as produced during parsing, before localization.

    The path is relative to the payload that raised it; containers prepend
    their own segment when merging child issues.
    """
    code: IssueCode
    input: Any = None
    path: list[PathSegment] = field(default_factory=list)
    message: str = ""
    expected: str | None = None
    received: str | None = None
    minimum: Any = None
    maximum: Any = None
    inclusive: bool | None = None
    multiple_of: Any = None
    properties: dict[str, Any] = field(default_factory=dict)
    error_map: ErrorMap | None = field(default=None, repr=False)
    # Set once the schema that produced the issue has attached its override.
    sealed: bool = field(default=False, repr=False, compare=False)

    def prepend(self, *segments: PathSegment) -> RawIssue:
        self.path[0:0] = segments
        return self

    @property
    def origin(self) -> str | None:
        return self.properties.get("origin")

    @property
    def format(self) -> str | None:
        return self.properties.get("format")

    @property
    def keys(self) -> list[Any]:
        return list(self.properties.get("keys", ()))

    @property
    def values(self) -> list[Any]:
        return list(self.properties.get("values", ()))


@dataclass(frozen=True)
class Issue:
    """A finalized, localized issue with an absolute path."""
    code: IssueCode
    path: tuple[PathSegment, ...]
    message: str
    input: Any = None
    expected: str | None = None
    received: str | None = None
    minimum: Any = None
    maximum: Any = None
    inclusive: bool | None = None
    multiple_of: Any = None
    properties: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def origin(self) -> str | None:
        return self.properties.get("origin")

    @property
    def format(self) -> str | None:
        return self.properties.get("format")

    @property
    def keys(self) -> list[Any]:
        return list(self.properties.get("keys", ()))

    @property
    def values(self) -> list[Any]:
        return list(self.properties.get("values", ()))

    @property
    def union_errors(self) -> list[list[Issue]]:
        """Per-option issue lists of an ``invalid_union`` issue."""
        return list(self.properties.get("union_errors", ()))

    @property
    def issues(self) -> list[Issue]:
        """Nested issues of ``invalid_key`` / ``invalid_element`` issues."""
        return list(self.properties.get("issues", ()))

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "code": self.code.value,
            "path": list(self.path),
            "message": self.message,
        }
        for name in ("expected", "received", "minimum", "maximum", "inclusive", "multiple_of"):
            value = getattr(self, name)
            if value is not None:
                d[name] = value
        return d


class ZodError(Exception):
    """Raised when parsing fails. ``issues`` keeps production order."""

    def __init__(self, issues: list[Issue]):
        self.issues = list(issues)
        super().__init__(self._summary())

    def _summary(self) -> str:
        if not self.issues:
            return "Validation failed"
        first = self.issues[0]
        text = first.message
        if first.path:
            text += f" at {format_path(first.path)}"
        more = len(self.issues) - 1
        if more:
            text += f" (and {more} more issue{'s' if more > 1 else ''})"
        return text

    def __str__(self) -> str:
        return self._summary()

    def __repr__(self) -> str:
        return f"ZodError({len(self.issues)} issue{'s' if len(self.issues) != 1 else ''})"


class SchemaDefinitionError(ValueError):
    """Raised at build time when a schema is structurally invalid."""

    def __init__(self, message: str, violations: list[str] | None = None):
        super().__init__(message)
        self.violations = violations or []


# --- Error post-processing ---

@dataclass
class FlattenedError:
    """Top-level messages plus messages grouped by their first path segment."""
    form_errors: list[str] = field(default_factory=list)
    field_errors: dict[str, list[str]] = field(default_factory=dict)


@dataclass
class ErrorTree:
    """Messages arranged along the shape of the input."""
    errors: list[str] = field(default_factory=list)
    properties: dict[str, ErrorTree] = field(default_factory=dict)
    items: list[ErrorTree | None] = field(default_factory=list)


def _leaf_issues(issues: list[Issue]) -> list[Issue]:
    """Expand union and key/element wrappers into the issues they carry."""
    out: list[Issue] = []
    for issue in issues:
        if issue.code is IssueCode.INVALID_UNION and issue.union_errors:
            for option in issue.union_errors:
                out.extend(_leaf_issues(option))
        elif issue.code in (IssueCode.INVALID_KEY, IssueCode.INVALID_ELEMENT) and issue.issues:
            out.extend(_leaf_issues(issue.issues))
        else:
            out.append(issue)
    return out


def flatten_error(error: ZodError, mapper: Callable[[Issue], str] | None = None) -> FlattenedError:
    """Group messages by the first path segment.

    Unlike the other helpers, union alternatives are not expanded, so a failed
    union shows up once at its own position.
    """
    mapper = mapper or (lambda issue: issue.message)
    result = FlattenedError()
    for issue in error.issues:
        if not issue.path:
            result.form_errors.append(mapper(issue))
        else:
            result.field_errors.setdefault(str(issue.path[0]), []).append(mapper(issue))
    return result


def format_error(error: ZodError, mapper: Callable[[Issue], str] | None = None) -> dict[str, Any]:
    """Nested dict mirroring the input, with ``_errors`` lists at each level."""
    mapper = mapper or (lambda issue: issue.message)
    root: dict[str, Any] = {"_errors": []}
    for issue in _leaf_issues(error.issues):
        node = root
        for seg in issue.path:
            node = node.setdefault(str(seg), {"_errors": []})
        node["_errors"].append(mapper(issue))
    return root


def treeify_error(error: ZodError, mapper: Callable[[Issue], str] | None = None) -> ErrorTree:
    """Tree of messages: string segments become properties, ints become items."""
    mapper = mapper or (lambda issue: issue.message)
    tree = ErrorTree()
    for issue in _leaf_issues(error.issues):
        node = tree
        for seg in issue.path:
            if isinstance(seg, int) and not isinstance(seg, bool):
                while len(node.items) <= seg:
                    node.items.append(None)
                child = node.items[seg]
                if child is None:
                    child = node.items[seg] = ErrorTree()
            else:
                child = node.properties.setdefault(str(seg), ErrorTree())
            node = child
        node.errors.append(mapper(issue))
    return tree


def prettify_error(error: ZodError) -> str:
    """Multi-line, human readable rendering of every leaf issue."""
    lines: list[str] = []
    issues = sorted(_leaf_issues(error.issues), key=lambda i: len(i.path))
    for issue in issues:
        lines.append(f"✖ {issue.message}")
        if issue.path:
            lines.append(f"  → at {format_path(issue.path)}")
    return "\n".join(lines)
