"""Normalization of the optional ``params`` argument accepted everywhere."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from .issues import ErrorMap, PathSegment, RawIssue


@dataclass(frozen=True)
class SchemaParams:
    """Options shared by constructors and checks.

    Args:
        error: Message string or error map overriding the catalog message.
        abort: Stop the check chain when this check fails.
        path: Extra path segments appended to issues raised by this check.
        params: Free-form data copied into ``Issue.properties["params"]``.
        description: Description registered for the schema.
        union_fallback: Discriminated unions only: on an unknown
            discriminator, try every option in order.
    """

    error: str | ErrorMap | None = None
    abort: bool = False
    path: tuple[PathSegment, ...] = ()
    params: dict[str, Any] = field(default_factory=dict)
    description: str | None = None
    union_fallback: bool = False

    @property
    def error_map(self) -> ErrorMap | None:
        error = self.error
        if error is None or callable(error):
            return error
        return lambda _issue: error


Params = Union[str, ErrorMap, SchemaParams, dict, None]

_KEYS = {"error", "message", "abort", "path", "params", "description", "union_fallback"}


def normalize_params(params: Params = None) -> SchemaParams:
    """Turn any accepted params form into a SchemaParams.

    Raises:
        ValueError: On unknown dict keys.
        TypeError: On an unsupported params type.
    """
    if params is None:
        return _EMPTY
    if isinstance(params, SchemaParams):
        return params
    if isinstance(params, str) or callable(params):
        return SchemaParams(error=params)
    if isinstance(params, dict):
        unknown = sorted(set(params) - _KEYS)
        if unknown:
            raise ValueError(f"Unknown params key(s): {', '.join(unknown)}")
        d = dict(params)
        if "message" in d:
            d.setdefault("error", d.pop("message"))
            d.pop("message", None)
        d["path"] = tuple(d.get("path") or ())
        d["params"] = dict(d.get("params") or {})
        return SchemaParams(**d)
    raise TypeError(f"params must be a str, callable, dict or SchemaParams, got {type(params).__name__}")


def apply_override(issue: RawIssue, params: SchemaParams) -> None:
    """Attach a check's overrides to an issue it produced."""
    if issue.error_map is None and params.error is not None:
        issue.error_map = params.error_map
    if params.path:
        issue.path[0:0] = list(params.path)
    if params.params:
        issue.properties.setdefault("params", dict(params.params))


_EMPTY = SchemaParams()
