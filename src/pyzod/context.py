"""Per-call parse state: the caller's context and the threaded payload."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .issues import ErrorMap, IssueCode, PathSegment, RawIssue


@dataclass(frozen=True)
class ParseContext:
    """Input-side options for a single parse call.

    Args:
        error: Message string or error map applied to every issue that has
            no schema-level override.
        locale: Message catalog name; defaults to ``Config.locale``.
        report_input: Whether issues carry the offending input. ``None``
            defers to ``Config.report_input``.
        abort_early: Stop a check chain at the first failing check.
    """

    error: str | ErrorMap | None = None
    locale: str | None = None
    report_input: bool | None = None
    abort_early: bool = False


class ParsePayload:
    """Mutable record threaded through one schema's pipeline.

    ``path`` is the absolute position of ``value`` in the input tree. Issues
    appended here carry paths relative to that position; containers prepend
    their segment when merging a child payload.
    """

    __slots__ = ("value", "issues", "path", "context")

    def __init__(
        self,
        value: Any,
        context: ParseContext | None = None,
        path: list[PathSegment] | None = None,
    ) -> None:
        self.value = value
        self.issues: list[RawIssue] = []
        self.path: list[PathSegment] = path if path is not None else []
        self.context = context or ParseContext()

    def add_issue(self, code: IssueCode, **fields: Any) -> RawIssue:
        fields.setdefault("input", self.value)
        issue = RawIssue(code=code, **fields)
        self.issues.append(issue)
        return issue

    def derive(self, value: Any, *segments: PathSegment) -> ParsePayload:
        """A fresh child payload for ``value`` at ``path + segments``."""
        return ParsePayload(value, self.context, self.path + list(segments))

    def merge(self, child: ParsePayload, *segments: PathSegment) -> None:
        for issue in child.issues:
            self.issues.append(issue.prepend(*segments))

    @property
    def failed(self) -> bool:
        return bool(self.issues)

    def __repr__(self) -> str:
        return f"ParsePayload(value={self.value!r}, path={self.path!r}, issues={len(self.issues)})"


class RefinementContext:
    """Handle given to transform callbacks for reporting problems.

    Example:
        >>> def to_int(value, ctx):
        ...     if not value.isdigit():
        ...         ctx.add_issue("not a number")
        ...         return None
        ...     return int(value)
    """

    def __init__(self, payload: ParsePayload) -> None:
        self._payload = payload

    @property
    def value(self) -> Any:
        return self._payload.value

    @property
    def path(self) -> tuple[PathSegment, ...]:
        return tuple(self._payload.path)

    @property
    def issues(self) -> list[RawIssue]:
        return list(self._payload.issues)

    def add_issue(
        self,
        message: str = "",
        code: IssueCode = IssueCode.CUSTOM,
        path: list[PathSegment] | None = None,
        **fields: Any,
    ) -> RawIssue:
        """Record an issue at the current position (or below it via ``path``)."""
        return self._payload.add_issue(
            IssueCode(code), message=message, path=list(path or ()), **fields
        )
