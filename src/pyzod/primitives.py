"""Leaf schemas without family-specific checks.

Covers bool, nil, any, unknown and never, plus string-encoded booleans and
schemas defined entirely by a user predicate.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable
from typing import Any

from . import checks as _checks
from .coercion import to_bool
from .context import ParsePayload
from .internals import Constraint, ZodTypeCode
from .issues import IssueCode
from .params import Params, normalize_params
from .schema import ZodType, base_internals, register_description


class ZodBool(ZodType[bool]):
    def _coerce(self, value: Any) -> tuple[Any, bool]:
        return to_bool(value)

    def _extract(self, value: Any) -> tuple[Any, bool]:
        return value, isinstance(value, bool)

    @classmethod
    def create(cls, params: Params = None, *, coerce: bool = False, constraint: Constraint = Constraint.VALUE) -> ZodBool:
        internals, p = base_internals(ZodTypeCode.BOOL, params, coerce=coerce, constraint=constraint)
        return register_description(cls(internals), p)


class ZodNil(ZodType[None]):
    """Accepts only ``None``."""

    _accepts_nil = True

    def _extract(self, value: Any) -> tuple[Any, bool]:
        return None, value is None

    @classmethod
    def create(cls, params: Params = None) -> ZodNil:
        internals, p = base_internals(ZodTypeCode.NIL, params)
        return register_description(cls(internals), p)


class ZodAny(ZodType[Any]):
    """Accepts everything, including ``None``."""

    _accepts_nil = True

    @classmethod
    def create(cls, params: Params = None, *, type_code: ZodTypeCode = ZodTypeCode.ANY) -> ZodAny:
        internals, p = base_internals(type_code, params)
        return register_description(cls(internals), p)


class ZodUnknown(ZodAny):
    @classmethod
    def create(cls, params: Params = None, *, type_code: ZodTypeCode = ZodTypeCode.UNKNOWN) -> ZodUnknown:
        return super().create(params, type_code=type_code)


class ZodNever(ZodType[Any]):
    """Rejects every input."""

    def _extract(self, value: Any) -> tuple[Any, bool]:
        return value, False

    @classmethod
    def create(cls, params: Params = None) -> ZodNever:
        internals, p = base_internals(ZodTypeCode.NEVER, params)
        return register_description(cls(internals), p)


STRINGBOOL_TRUTHY = ("true", "1", "yes", "on", "y", "enabled")
STRINGBOOL_FALSY = ("false", "0", "no", "off", "n", "disabled")


class ZodStringBool(ZodType[bool]):
    """Strings such as ``"yes"`` or ``"off"`` parsed into booleans.

    Checks added with ``refine`` see the parsed ``bool``.
    """

    _checks_first = False

    def __init__(self, internals, truthy: tuple[str, ...], falsy: tuple[str, ...], case_sensitive: bool) -> None:
        super().__init__(internals)
        self.truthy = truthy
        self.falsy = falsy
        self.case_sensitive = case_sensitive
        fold = (lambda s: s) if case_sensitive else str.lower
        self._truthy = frozenset(map(fold, truthy))
        self._falsy = frozenset(map(fold, falsy))

    def _extract(self, value: Any) -> tuple[Any, bool]:
        return value, isinstance(value, str)

    def _parse_inner(self, payload: ParsePayload) -> None:
        text = payload.value if self.case_sensitive else payload.value.lower()
        if text in self._truthy:
            payload.value = True
        elif text in self._falsy:
            payload.value = False
        else:
            payload.add_issue(IssueCode.INVALID_VALUE, properties={"values": [*self.truthy, *self.falsy]})

    @classmethod
    def create(
        cls,
        params: Params = None,
        *,
        truthy: Iterable[str] | None = None,
        falsy: Iterable[str] | None = None,
        case: str = "insensitive",
        constraint: Constraint = Constraint.VALUE,
    ) -> ZodStringBool:
        if case not in ("sensitive", "insensitive"):
            raise ValueError(f"case must be 'sensitive' or 'insensitive', got {case!r}")
        truthy = tuple(truthy) if truthy else STRINGBOOL_TRUTHY
        falsy = tuple(falsy) if falsy else STRINGBOOL_FALSY
        case_sensitive = case == "sensitive"
        fold = (lambda s: s) if case_sensitive else str.lower
        overlap = set(map(fold, truthy)) & set(map(fold, falsy))
        if overlap:
            raise ValueError(f"stringbool values cannot be both truthy and falsy: {sorted(overlap)}")
        internals, p = base_internals(ZodTypeCode.STRINGBOOL, params, constraint=constraint)
        return register_description(cls(internals, truthy, falsy, case_sensitive), p)


class ZodCustom(ZodType[Any]):
    """Schema whose whole validation is a user-supplied check.

    ``None`` reaches the check like any other value.
    """

    _accepts_nil = True
    expected_class: type | tuple[type, ...] | None = None

    @classmethod
    def create(
        cls,
        fn: Callable[..., Any] | None = None,
        params: Params = None,
        *,
        payload: bool = False,
    ) -> ZodCustom:
        if fn is not None and not callable(fn):
            raise TypeError(f"custom expects a callable, got {type(fn).__name__}")
        internals, p = base_internals(ZodTypeCode.CUSTOM, params)
        if fn is not None:
            internals.checks.append(_checks.payload_check(fn, p) if payload else _checks.custom(fn, p))
        return register_description(cls(internals), p)

    @classmethod
    def instance_of(cls, expected: type | tuple[type, ...], params: Params = None) -> ZodCustom:
        types = expected if isinstance(expected, tuple) else (expected,)
        if not types or not all(isinstance(t, type) for t in types):
            raise TypeError("instance_of expects a class or a tuple of classes")
        p = normalize_params(params)
        if p.error is None:
            p = dataclasses.replace(p, error="Input is not of the expected type")
        schema = cls.create(lambda value: isinstance(value, expected), p)
        schema.expected_class = expected
        return schema
