"""Check chain units.

Every check is stored as a payload mutator: it reads ``payload.value`` and
may append issues or replace the value (overwrite). Predicate checks are
built on top of that form. The engine runs checks in order, attaches the
check's overrides to the issues it produced and stops early when the check
aborts.

Example:
    >>> from pyzod.checks import min_length
    >>> check = min_length(3, origin="string")
    >>> check.kind
    'min'
"""

from __future__ import annotations

import datetime
import math
import re
from dataclasses import dataclass, field
from decimal import Decimal
from fractions import Fraction
from typing import Any, Callable

from .context import ParsePayload
from .issues import IssueCode, parsed_type
from .params import Params, SchemaParams, apply_override, normalize_params


@dataclass(frozen=True)
class Check:
    """One entry of a schema's check chain.

    Args:
        kind: Tag such as ``custom``, ``overwrite``, ``min``, ``max``,
            ``size``, ``format``, ``multiple_of`` or ``property``.
        run: Payload mutator implementing the check.
        params: Error override, abort flag, path and custom params.
        detail: Static description of the constraint (bounds, format name,
            pattern) used by schema export.
    """

    kind: str
    run: Callable[[ParsePayload], None]
    params: SchemaParams = field(default_factory=SchemaParams)
    detail: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def abort(self) -> bool:
        return self.params.abort

    def __call__(self, payload: ParsePayload) -> bool:
        """Run the check. Returns True if it produced issues."""
        start = len(payload.issues)
        self.run(payload)
        produced = payload.issues[start:]
        for issue in produced:
            apply_override(issue, self.params)
        return bool(produced)


def run_checks(checks: list[Check] | tuple[Check, ...], payload: ParsePayload) -> bool:
    """Evaluate a check chain in order against the payload.

    Returns True when an ``overwrite`` check replaced the value with a
    different one.
    """
    abort_early = payload.context.abort_early
    overwritten = False
    for check in checks:
        before = payload.value
        produced = check(payload)
        if check.kind == "overwrite" and not same_value(before, payload.value):
            overwritten = True
        if produced and (check.abort or abort_early):
            break
    return overwritten


def same_value(a: Any, b: Any) -> bool:
    """Identity, or equality between values of the same type."""
    return a is b or (type(a) is type(b) and a == b)


# --- Generic checks ---

def custom(predicate: Callable[[Any], bool], params: Params = None) -> Check:
    """Predicate check; a falsy result becomes a ``custom`` issue."""
    p = normalize_params(params)

    def run(payload: ParsePayload) -> None:
        if not predicate(payload.value):
            payload.add_issue(IssueCode.CUSTOM)

    return Check("custom", run, p)


def payload_check(fn: Callable[[ParsePayload], None], params: Params = None) -> Check:
    """Check that receives the payload and may append any number of issues."""
    return Check("custom", fn, normalize_params(params))


def overwrite(fn: Callable[[Any], Any]) -> Check:
    """Replace the in-flight value. Never produces issues."""

    def run(payload: ParsePayload) -> None:
        payload.value = fn(payload.value)

    return Check("overwrite", run)


# --- Length / size ---

def _sized(origin: str, ok: Callable[[int], bool], code: IssueCode, **bounds: Any) -> Callable:
    def run(payload: ParsePayload) -> None:
        if not ok(len(payload.value)):
            payload.add_issue(code, inclusive=True, properties={"origin": origin}, **bounds)

    return run


def min_length(minimum: int, params: Params = None, origin: str = "string") -> Check:
    if minimum < 0:
        raise ValueError("minimum length must be >= 0")
    run = _sized(origin, lambda n: n >= minimum, IssueCode.TOO_SMALL, minimum=minimum)
    return Check("min", run, normalize_params(params), {"minimum": minimum, "origin": origin})


def max_length(maximum: int, params: Params = None, origin: str = "string") -> Check:
    if maximum < 0:
        raise ValueError("maximum length must be >= 0")
    run = _sized(origin, lambda n: n <= maximum, IssueCode.TOO_BIG, maximum=maximum)
    return Check("max", run, normalize_params(params), {"maximum": maximum, "origin": origin})


def length_equals(size: int, params: Params = None, origin: str = "string") -> Check:
    if size < 0:
        raise ValueError("length must be >= 0")

    def run(payload: ParsePayload) -> None:
        n = len(payload.value)
        if n < size:
            payload.add_issue(
                IssueCode.TOO_SMALL, minimum=size, inclusive=True,
                properties={"origin": origin, "exact": True},
            )
        elif n > size:
            payload.add_issue(
                IssueCode.TOO_BIG, maximum=size, inclusive=True,
                properties={"origin": origin, "exact": True},
            )

    return Check("size", run, normalize_params(params), {"size": size, "origin": origin})


# --- Numeric / ordered bounds ---

def _compare(payload: ParsePayload, bound: Any, inclusive: bool, lower: bool, origin: str) -> None:
    v = payload.value
    try:
        if lower:
            ok = v >= bound if inclusive else v > bound
        else:
            ok = v <= bound if inclusive else v < bound
    except TypeError:
        # e.g. naive vs aware datetimes
        payload.add_issue(
            IssueCode.INVALID_TYPE,
            expected=_describe(bound) if isinstance(bound, datetime.datetime) else origin,
            received=_describe(v),
            properties={"origin": origin, "incomparable": True},
        )
        return
    if ok:
        return
    if lower:
        payload.add_issue(IssueCode.TOO_SMALL, minimum=bound, inclusive=inclusive, properties={"origin": origin})
    else:
        payload.add_issue(IssueCode.TOO_BIG, maximum=bound, inclusive=inclusive, properties={"origin": origin})


def _describe(value: Any) -> str:
    if isinstance(value, datetime.datetime):
        return "naive time" if value.tzinfo is None else "aware time"
    return parsed_type(value)


def greater_than(value: Any, inclusive: bool = True, params: Params = None, origin: str = "number") -> Check:
    """Lower bound; works for anything ordered (numbers, datetimes)."""

    def run(payload: ParsePayload) -> None:
        _compare(payload, value, inclusive, True, origin)

    return Check("min", run, normalize_params(params), {"minimum": value, "inclusive": inclusive, "origin": origin})


def less_than(value: Any, inclusive: bool = True, params: Params = None, origin: str = "number") -> Check:
    """Upper bound; works for anything ordered (numbers, datetimes)."""

    def run(payload: ParsePayload) -> None:
        _compare(payload, value, inclusive, False, origin)

    return Check("max", run, normalize_params(params), {"maximum": value, "inclusive": inclusive, "origin": origin})


def _decimals(x: float) -> int:
    text = repr(float(x)).lower()
    if "e-" in text:
        mantissa, exp = text.split("e-")
        return int(exp) + (len(mantissa.split(".")[1]) if "." in mantissa else 0)
    return len(text.split(".")[1].rstrip("0")) if "." in text else 0


def float_safe_remainder(value: float, step: float) -> float:
    """Remainder of value/step without binary float noise (0.3 % 0.1 == 0)."""
    places = max(_decimals(value), _decimals(step))
    scale = 10 ** places
    return (round(value * scale) % round(step * scale)) / scale


def multiple_of(step: Any, params: Params = None, origin: str = "number") -> Check:
    if step == 0:
        raise ValueError("multiple_of step must be non-zero")

    def run(payload: ParsePayload) -> None:
        v = payload.value
        if isinstance(v, float) or isinstance(step, float):
            try:
                remainder = float_safe_remainder(float(v), float(step))
            except OverflowError:
                finite_value = not isinstance(v, float) or math.isfinite(v)
                remainder = Fraction(v) % Fraction(repr(float(step))) if finite_value else 1
        elif isinstance(v, Decimal) or isinstance(step, Decimal):
            remainder = Decimal(v) % Decimal(step)
        else:
            remainder = v % step
        if remainder != 0:
            payload.add_issue(IssueCode.NOT_MULTIPLE_OF, multiple_of=step, properties={"origin": origin})

    return Check("multiple_of", run, normalize_params(params), {"multiple_of": step, "origin": origin})


def finite(params: Params = None) -> Check:
    def run(payload: ParsePayload) -> None:
        v = payload.value
        if isinstance(v, int) or math.isfinite(v):
            return
        payload.add_issue(IssueCode.INVALID_TYPE, expected="number", received="NaN" if math.isnan(v) else "Infinity")

    return Check("finite", run, normalize_params(params))


# --- String formats ---

def string_format(fmt: str, predicate: Callable[[str], bool], params: Params = None, **detail: Any) -> Check:
    """``invalid_format`` check named ``fmt``; ``detail`` lands in properties."""

    def run(payload: ParsePayload) -> None:
        if not predicate(payload.value):
            payload.add_issue(
                IssueCode.INVALID_FORMAT,
                properties={"origin": "string", "format": fmt, **detail},
            )

    return Check("format", run, normalize_params(params), {"format": fmt, **detail})


def regex(pattern: str | re.Pattern, params: Params = None, fmt: str = "regex") -> Check:
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    return string_format(
        fmt, lambda s: compiled.search(s) is not None, params, pattern=compiled.pattern,
    )
