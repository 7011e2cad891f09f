"""Ordered and unordered collection schemas: slice, array, tuple and set.

Length checks run before the elements are validated, so an ``overwrite``
that sorts or trims a slice is seen by the checks that follow it and by the
element schema.
"""

from __future__ import annotations

from typing import Any, TypeVar

from . import checks as _checks
from .coercion import to_list
from .context import ParsePayload
from .engine import run, run_child
from .internals import Constraint, ZodTypeCode
from .issues import IssueCode
from .params import Params
from .schema import ZodType, base_internals, ensure_schema, register_description

L = TypeVar("L", bound="_Lengthed")


class _Lengthed(ZodType[Any]):
    _origin = "slice"
    _deferred_checks = frozenset({"custom"})

    def min(self: L, length: int, params: Params = None) -> L:
        return self._with_check(_checks.min_length(length, params, self._origin))

    def max(self: L, length: int, params: Params = None) -> L:
        return self._with_check(_checks.max_length(length, params, self._origin))

    def length(self: L, length: int, params: Params = None) -> L:
        return self._with_check(_checks.length_equals(length, params, self._origin))

    size = length

    def non_empty(self: L, params: Params = None) -> L:
        return self.min(1, params)


class ZodSlice(_Lengthed):
    """Variable-length homogeneous list."""

    def __init__(self, internals, element: ZodType) -> None:
        super().__init__(internals)
        self._element = element

    @property
    def element(self) -> ZodType:
        return self._element

    def _coerce(self, value: Any) -> tuple[Any, bool]:
        return to_list(value)

    def _extract(self, value: Any) -> tuple[Any, bool]:
        if isinstance(value, (list, tuple)):
            return list(value), True
        return value, False

    def _parse_inner(self, payload: ParsePayload) -> None:
        out = []
        for index, item in enumerate(payload.value):
            child = run_child(self._element, payload, item, index)
            out.append(child.value)
        payload.value = out

    @classmethod
    def create(cls, element: ZodType, params: Params = None, *, constraint: Constraint = Constraint.VALUE) -> ZodSlice:
        ensure_schema(element, "slice element")
        internals, p = base_internals(ZodTypeCode.SLICE, params, constraint=constraint)
        return register_description(cls(internals, element), p)


class ZodArray(ZodSlice):
    """Fixed-length homogeneous sequence; the output is a tuple."""

    _origin = "array"

    def __init__(self, internals, element: ZodType, size: int) -> None:
        super().__init__(internals, element)
        self._size = size

    @property
    def fixed_length(self) -> int:
        return self._size

    def _parse_inner(self, payload: ParsePayload) -> None:
        super()._parse_inner(payload)
        payload.value = tuple(payload.value)

    @classmethod
    def create(cls, element: ZodType, size: int, params: Params = None, *, constraint: Constraint = Constraint.VALUE) -> ZodArray:
        ensure_schema(element, "array element")
        if size < 0:
            raise ValueError("array size must be >= 0")
        internals, p = base_internals(ZodTypeCode.ARRAY, params, constraint=constraint)
        internals.checks.append(_checks.length_equals(size, None, "array"))
        return register_description(cls(internals, element, size), p)


class ZodTuple(_Lengthed):
    """Per-position schemas plus an optional ``rest`` schema for the tail."""

    _origin = "tuple"

    def __init__(self, internals, items: tuple[ZodType, ...], rest: ZodType | None = None) -> None:
        super().__init__(internals)
        self._items = items
        self._rest = rest

    @property
    def items(self) -> tuple[ZodType, ...]:
        return self._items

    @property
    def rest_schema(self) -> ZodType | None:
        return self._rest

    def rest(self, schema: ZodType) -> ZodTuple:
        new = self._clone()
        new._rest = ensure_schema(schema, "tuple rest")
        return new

    def _extract(self, value: Any) -> tuple[Any, bool]:
        if isinstance(value, (list, tuple)):
            return tuple(value), True
        return value, False

    @property
    def required_count(self) -> int:
        """Number of leading items that must be present."""
        count = len(self._items)
        while count and self._items[count - 1]._optional_in():
            count -= 1
        return count

    def _parse_inner(self, payload: ParsePayload) -> None:
        value = payload.value
        required = self.required_count
        if len(value) < required:
            payload.add_issue(
                IssueCode.TOO_SMALL, minimum=required, inclusive=True, properties={"origin": "tuple"},
            )
            return
        if self._rest is None and len(value) > len(self._items):
            payload.add_issue(
                IssueCode.TOO_BIG, maximum=len(self._items), inclusive=True, properties={"origin": "tuple"},
            )
            return
        out = []
        for index, schema in enumerate(self._items):
            if index >= len(value):
                child = run(schema, payload.derive(None, index))
                if child.issues:
                    payload.merge(child, index)
                elif child.value is not None:
                    out.append(child.value)
                continue
            out.append(run_child(schema, payload, value[index], index).value)
        for index in range(len(self._items), len(value)):
            out.append(run_child(self._rest, payload, value[index], index).value)
        payload.value = tuple(out)

    @classmethod
    def create(
        cls,
        items: list[ZodType] | tuple[ZodType, ...],
        rest: ZodType | None = None,
        params: Params = None,
        *,
        constraint: Constraint = Constraint.VALUE,
    ) -> ZodTuple:
        items = tuple(ensure_schema(s, f"tuple item {i}") for i, s in enumerate(items))
        if rest is not None:
            ensure_schema(rest, "tuple rest")
        internals, p = base_internals(ZodTypeCode.TUPLE, params, constraint=constraint)
        return register_description(cls(internals, items, rest), p)


class ZodSet(_Lengthed):
    """Unordered collection of unique, hashable elements."""

    _origin = "set"

    def __init__(self, internals, element: ZodType) -> None:
        super().__init__(internals)
        self._element = element

    @property
    def element(self) -> ZodType:
        return self._element

    def _coerce(self, value: Any) -> tuple[Any, bool]:
        if isinstance(value, (list, tuple)):
            try:
                return set(value), True
            except TypeError:
                return value, False
        return value, False

    def _extract(self, value: Any) -> tuple[Any, bool]:
        if isinstance(value, (set, frozenset)):
            return set(value), True
        return value, False

    def _parse_inner(self, payload: ParsePayload) -> None:
        out = set()
        for item in payload.value:
            child = run_child(self._element, payload, item)
            if not child.issues:
                out.add(child.value)
        payload.value = out

    @classmethod
    def create(cls, element: ZodType, params: Params = None, *, constraint: Constraint = Constraint.VALUE) -> ZodSet:
        ensure_schema(element, "set element")
        internals, p = base_internals(ZodTypeCode.SET, params, constraint=constraint)
        return register_description(cls(internals, element), p)
