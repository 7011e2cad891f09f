"""Conversion of raw issues into localized, path-bearing issues.

Message resolution order for each raw issue:

1. a message already set on the raw issue,
2. the check or schema error override attached while parsing,
3. ``ParseContext.error``,
4. ``Config.error_map``,
5. the locale catalog (``ParseContext.locale`` or ``Config.locale``).
"""

from __future__ import annotations

from typing import Any

from .config import Config, get_config
from .context import ParseContext
from .issues import ErrorMap, Issue, PathSegment, RawIssue
from .locales import get_locale


def _apply(error: str | ErrorMap | None, raw: RawIssue) -> str | None:
    if error is None:
        return None
    if isinstance(error, str):
        return error
    return error(raw) or None


def resolve_message(raw: RawIssue, ctx: ParseContext, config: Config) -> str:
    return (
        raw.message
        or _apply(raw.error_map, raw)
        or _apply(ctx.error, raw)
        or _apply(config.error_map, raw)
        or get_locale(ctx.locale or config.locale)(raw)
    )


def finalize_issue(
    raw: RawIssue,
    ctx: ParseContext | None = None,
    config: Config | None = None,
    prefix: tuple[PathSegment, ...] = (),
) -> Issue:
    """Finalize one raw issue, including any nested union/element issues."""
    ctx = ctx or ParseContext()
    config = config or get_config()
    report_input = config.report_input if ctx.report_input is None else ctx.report_input
    path = prefix + tuple(raw.path)

    properties: dict[str, Any] = dict(raw.properties)
    if "union_errors" in properties:
        properties["union_errors"] = [
            [finalize_issue(r, ctx, config, path) for r in option]
            for option in properties["union_errors"]
        ]
    if "issues" in properties:
        properties["issues"] = [finalize_issue(r, ctx, config, path) for r in properties["issues"]]

    return Issue(
        code=raw.code,
        path=path,
        message=resolve_message(raw, ctx, config),
        input=raw.input if report_input else None,
        expected=raw.expected,
        received=raw.received,
        minimum=raw.minimum,
        maximum=raw.maximum,
        inclusive=raw.inclusive,
        multiple_of=raw.multiple_of,
        properties=properties,
    )


def finalize_issues(raws: list[RawIssue], ctx: ParseContext | None = None) -> list[Issue]:
    config = get_config()
    return [finalize_issue(raw, ctx, config) for raw in raws]
