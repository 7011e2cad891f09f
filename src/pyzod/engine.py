"""The parse pipeline shared by every schema.

``run`` drives one schema over ``payload.value``:

1. coercion gate (skipped for strict parses),
2. nil gate (default, prefault, non-optional, optional/nilable),
3. type extraction,
4. check chain and container recursion,
5. egress conversion for the schema's constraint (see ``write_back``).

Issues are only collected here. Turning them into a ``ZodError`` happens
once, at the top-level call (see ``finalize``).
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .checks import run_checks, same_value
from .context import ParseContext, ParsePayload
from .internals import Constraint
from .issues import IssueCode, parsed_type

if TYPE_CHECKING:
    from .schema import ZodType


def run(
    schema: ZodType,
    payload: ParsePayload,
    *,
    strict: bool = False,
    allow_prefault: bool = True,
) -> ParsePayload:
    """Validate ``payload.value`` against ``schema``, mutating the payload.

    On success ``payload.value`` holds the output; on failure
    ``payload.issues`` is non-empty and the value must be ignored.
    """
    start = len(payload.issues)
    _pipeline(schema, payload, strict, allow_prefault)
    error = schema._internals.error
    for issue in payload.issues[start:]:
        if not issue.sealed:
            if issue.error_map is None:
                issue.error_map = error
            issue.sealed = True
    return payload


def _pipeline(schema: ZodType, payload: ParsePayload, strict: bool, allow_prefault: bool) -> ParsePayload:
    internals = schema._internals

    if internals.coerce and not strict and payload.value is not None:
        coerced, ok = schema._coerce(payload.value)
        if ok:
            payload.value = coerced

    if payload.value is None and _nil_gate(schema, payload, strict, allow_prefault):
        return payload

    original = payload.value
    extracted, ok = schema._extract(original)
    if not ok:
        payload.add_issue(
            IssueCode.INVALID_TYPE,
            expected=schema._expected,
            received=parsed_type(original),
        )
        return payload
    payload.value = extracted

    checks = internals.checks
    if schema._checks_first:
        deferred = schema._deferred_checks
        early = [c for c in checks if c.kind not in deferred] if deferred else checks
        overwritten = run_checks(early, payload)
        schema._parse_inner(payload)
        if deferred and not payload.issues:
            late = [c for c in checks if c.kind in deferred]
            overwritten = run_checks(late, payload) or overwritten
    else:
        schema._parse_inner(payload)
        overwritten = False if payload.issues else run_checks(checks, payload)

    if payload.issues:
        return payload

    if internals.constraint is Constraint.REFERENCE and original is not None:
        payload.value = schema._write_back(original, payload.value, overwritten)
    return payload


def _nil_gate(schema: ZodType, payload: ParsePayload, strict: bool, allow_prefault: bool) -> bool:
    """Handle a ``None`` input. Returns False when the family parses None itself."""
    internals = schema._internals
    if internals.has_default:
        payload.value = internals.resolve_default()
        return True
    if internals.has_prefault and allow_prefault:
        payload.value = internals.resolve_prefault()
        run(schema, payload, strict=strict, allow_prefault=False)
        return True
    if internals.non_optional:
        payload.add_issue(IssueCode.INVALID_TYPE, expected="nonoptional", received="nil")
        return True
    if (
        internals.optional
        or internals.nilable
        or internals.exact_optional
        or internals.constraint is Constraint.REFERENCE
    ):
        return True
    if schema._accepts_nil:
        return False
    payload.add_issue(IssueCode.INVALID_TYPE, expected=schema._expected, received="nil")
    return True


def run_child(schema: ZodType, parent: ParsePayload, value: Any, *segments: Any) -> ParsePayload:
    """Validate a child value and merge its issues under ``segments``."""
    child = run(schema, parent.derive(value, *segments))
    parent.merge(child, *segments)
    return child


def write_back(original: Any, result: Any, overwritten: bool = False) -> Any:
    """Pick the object a reference-flavoured schema hands back.

    ``original`` is returned when the validated result equals it. When an
    ``overwrite`` check changed the value, the result is copied into the
    caller's dict, list, set or mutable dataclass instance and that object
    is returned. Otherwise the caller's input is left alone and ``result``
    is returned.
    """
    if same_value(original, result):
        return original
    if not overwritten:
        return result
    if isinstance(original, dict) and isinstance(result, Mapping):
        original.clear()
        original.update(result)
        return original
    if isinstance(original, list) and isinstance(result, (list, tuple)):
        original[:] = result
        return original
    if isinstance(original, set) and isinstance(result, (set, frozenset)):
        original.clear()
        original.update(result)
        return original
    if (
        dataclasses.is_dataclass(original)
        and not isinstance(original, type)
        and type(original) is type(result)
        and not type(original).__dataclass_params__.frozen
    ):
        for f in dataclasses.fields(original):
            setattr(original, f.name, getattr(result, f.name))
        return original
    return result


def top_level(schema: ZodType, value: Any, ctx: ParseContext | None, strict: bool) -> ParsePayload:
    return run(schema, ParsePayload(value, ctx or ParseContext()), strict=strict)
