"""Numeric schemas: sized integers, floats, big integers and complex numbers."""

from __future__ import annotations

import math
import sys
from typing import Any, TypeVar

from . import checks as _checks
from .coercion import to_complex, to_float, to_int
from .internals import Constraint, ZodTypeCode
from .issues import IssueCode
from .params import Params, SchemaParams
from .schema import ZodType, base_internals, register_description

N = TypeVar("N", bound="_Numeric")

INT_RANGES: dict[ZodTypeCode, tuple[int, int]] = {
    ZodTypeCode.INT: (-(2**63), 2**63 - 1),
    ZodTypeCode.INT8: (-(2**7), 2**7 - 1),
    ZodTypeCode.INT16: (-(2**15), 2**15 - 1),
    ZodTypeCode.INT32: (-(2**31), 2**31 - 1),
    ZodTypeCode.INT64: (-(2**63), 2**63 - 1),
    ZodTypeCode.UINT: (0, 2**64 - 1),
    ZodTypeCode.UINT8: (0, 2**8 - 1),
    ZodTypeCode.UINT16: (0, 2**16 - 1),
    ZodTypeCode.UINT32: (0, 2**32 - 1),
    ZodTypeCode.UINT64: (0, 2**64 - 1),
}

FLOAT32_MAX = 3.4028234663852886e38
FLOAT64_MAX = sys.float_info.max


class _Numeric(ZodType[Any]):
    """Ordered-number checks shared by the integer and float families."""

    _origin = "number"

    def gt(self: N, value: Any, params: Params = None) -> N:
        return self._with_check(_checks.greater_than(value, False, params, self._origin))

    def gte(self: N, value: Any, params: Params = None) -> N:
        return self._with_check(_checks.greater_than(value, True, params, self._origin))

    min = gte

    def lt(self: N, value: Any, params: Params = None) -> N:
        return self._with_check(_checks.less_than(value, False, params, self._origin))

    def lte(self: N, value: Any, params: Params = None) -> N:
        return self._with_check(_checks.less_than(value, True, params, self._origin))

    max = lte

    def positive(self: N, params: Params = None) -> N:
        return self.gt(0, params)

    def negative(self: N, params: Params = None) -> N:
        return self.lt(0, params)

    def non_negative(self: N, params: Params = None) -> N:
        return self.gte(0, params)

    def non_positive(self: N, params: Params = None) -> N:
        return self.lte(0, params)

    def multiple_of(self: N, step: Any, params: Params = None) -> N:
        return self._with_check(_checks.multiple_of(step, params, self._origin))

    step = multiple_of


class ZodInteger(_Numeric):
    """Integers, bounded by the range of the sized type code."""

    _origin = "int"

    def _coerce(self, value: Any) -> tuple[Any, bool]:
        return to_int(value)

    def _extract(self, value: Any) -> tuple[Any, bool]:
        return value, isinstance(value, int) and not isinstance(value, bool)

    @property
    def bounds(self) -> tuple[int, int]:
        return INT_RANGES[self._internals.type]

    @classmethod
    def create(
        cls,
        type_code: ZodTypeCode = ZodTypeCode.INT,
        params: Params = None,
        *,
        coerce: bool = False,
        constraint: Constraint = Constraint.VALUE,
    ) -> ZodInteger:
        if type_code not in INT_RANGES:
            raise ValueError(f"Not an integer type code: {type_code}")
        internals, p = base_internals(type_code, params, coerce=coerce, constraint=constraint)
        low, high = INT_RANGES[type_code]
        origin = type_code.value
        internals.checks.extend([
            _checks.greater_than(low, True, None, origin),
            _checks.less_than(high, True, None, origin),
        ])
        return register_description(cls(internals), p)


class ZodFloat(_Numeric):
    """Floating point numbers. ``NaN`` is always rejected.

    ``float32``/``float64`` accept ints and return floats; ``number`` keeps
    ints as ints.
    """

    def _coerce(self, value: Any) -> tuple[Any, bool]:
        return to_float(value)

    def _extract(self, value: Any) -> tuple[Any, bool]:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return value, False
        if isinstance(value, float) and math.isnan(value):
            return value, False
        if self._internals.type is ZodTypeCode.NUMBER:
            return value, True
        try:
            return float(value), True
        except OverflowError:
            # left as int for the range check to report
            return value, True

    def finite(self: N, params: Params = None) -> N:
        return self._with_check(_checks.finite(params))

    @classmethod
    def create(
        cls,
        type_code: ZodTypeCode = ZodTypeCode.FLOAT64,
        params: Params = None,
        *,
        coerce: bool = False,
        constraint: Constraint = Constraint.VALUE,
    ) -> ZodFloat:
        if type_code not in (ZodTypeCode.FLOAT32, ZodTypeCode.FLOAT64, ZodTypeCode.NUMBER):
            raise ValueError(f"Not a float type code: {type_code}")
        internals, p = base_internals(type_code, params, coerce=coerce, constraint=constraint)
        if type_code is not ZodTypeCode.NUMBER:
            internals.checks.append(_float_range(type_code))
        return register_description(cls(internals), p)


def _float_range(type_code: ZodTypeCode) -> _checks.Check:
    """Reject values outside the sized float type; aborts the chain on failure."""
    maximum = FLOAT32_MAX if type_code is ZodTypeCode.FLOAT32 else FLOAT64_MAX
    origin = type_code.value

    def run(payload) -> None:
        v = payload.value
        if isinstance(v, float) and (not math.isfinite(v) or abs(v) <= maximum):
            return
        if v > 0:
            payload.add_issue(IssueCode.TOO_BIG, maximum=maximum, inclusive=True, properties={"origin": origin})
        elif v < 0:
            payload.add_issue(IssueCode.TOO_SMALL, minimum=-maximum, inclusive=True, properties={"origin": origin})

    return _checks.Check("range", run, SchemaParams(abort=True))


class ZodBigInt(_Numeric):
    """Arbitrary precision integers."""

    _origin = "bigint"

    def _coerce(self, value: Any) -> tuple[Any, bool]:
        return to_int(value)

    def _extract(self, value: Any) -> tuple[Any, bool]:
        return value, isinstance(value, int) and not isinstance(value, bool)

    @classmethod
    def create(cls, params: Params = None, *, coerce: bool = False, constraint: Constraint = Constraint.VALUE) -> ZodBigInt:
        internals, p = base_internals(ZodTypeCode.BIGINT, params, coerce=coerce, constraint=constraint)
        return register_description(cls(internals), p)


class ZodComplex(ZodType[complex]):
    """Complex numbers; real numbers are widened."""

    def _coerce(self, value: Any) -> tuple[Any, bool]:
        return to_complex(value)

    def _extract(self, value: Any) -> tuple[Any, bool]:
        if isinstance(value, bool) or not isinstance(value, (int, float, complex)):
            return value, False
        try:
            return complex(value), True
        except OverflowError:
            return value, False

    @classmethod
    def create(
        cls,
        type_code: ZodTypeCode = ZodTypeCode.COMPLEX128,
        params: Params = None,
        *,
        coerce: bool = False,
        constraint: Constraint = Constraint.VALUE,
    ) -> ZodComplex:
        if type_code not in (ZodTypeCode.COMPLEX64, ZodTypeCode.COMPLEX128):
            raise ValueError(f"Not a complex type code: {type_code}")
        internals, p = base_internals(type_code, params, coerce=coerce, constraint=constraint)
        return register_description(cls(internals), p)
