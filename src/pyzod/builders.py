"""Schema constructors, re-exported at package level.

Several names (``any``, ``object``, ``map``, ``set``, ``slice``, ``tuple``)
shadow builtins inside this module so that user code reads ``z.object(...)``.
The module body does not use those builtins.

Example:
    >>> import pyzod as z
    >>> schema = z.object({
    ...     "id": z.integer().positive(),
    ...     "tags": z.slice(z.string()).max(5),
    ... })
    >>> schema.parse({"id": 1, "tags": ["a"]})
    {'id': 1, 'tags': ['a']}
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any as _Any, Callable

from .context import ParsePayload
from .internals import Constraint, ZodTypeCode
from .literals import ZodEnum, ZodLiteral
from .numbers import INT_RANGES, ZodBigInt, ZodComplex, ZodFloat, ZodInteger
from .objects import LOOSE as _LOOSE_OBJECT, STRICT as _STRICT_OBJECT, ZodObject, ZodStruct
from .params import Params
from .primitives import ZodAny, ZodBool, ZodCustom, ZodNever, ZodNil, ZodStringBool, ZodUnknown
from .records import EXHAUSTIVE, LOOSE, PARTIAL, ZodMap, ZodRecord
from .schema import ZodType, ensure_schema
from .sequences import ZodArray, ZodSet, ZodSlice, ZodTuple
from .strings import ZodString
from .temporal import ZodTime
from .unions import ZodDiscriminatedUnion, ZodIntersection, ZodUnion, ZodXor
from .wrappers import ZodLazy, ZodPipe, ZodTransform

_VALUE = Constraint.VALUE
_REFERENCE = Constraint.REFERENCE


# --- Primitives ---

def boolean(params: Params = None) -> ZodBool:
    return ZodBool.create(params)


def boolean_ptr(params: Params = None) -> ZodBool:
    return ZodBool.create(params, constraint=_REFERENCE)


def stringbool(
    params: Params = None,
    *,
    truthy: Iterable[str] | None = None,
    falsy: Iterable[str] | None = None,
    case: str = "insensitive",
) -> ZodStringBool:
    """Parse ``"true"``/``"yes"``/``"on"`` style strings into booleans.

    Unrecognised strings fail with ``invalid_value``; ``case="sensitive"``
    disables case folding.
    """
    return ZodStringBool.create(params, truthy=truthy, falsy=falsy, case=case)


def custom(fn: Callable[[_Any], bool] | None = None, params: Params = None) -> ZodCustom:
    """Schema validated only by ``fn``; without ``fn`` every value passes."""
    return ZodCustom.create(fn, params)


def instance_of(cls: type | tuple[type, ...], params: Params = None) -> ZodCustom:
    return ZodCustom.instance_of(cls, params)


def check(fn: Callable[[ParsePayload], None], params: Params = None) -> ZodCustom:
    """Schema driven by a payload-level check that may report several issues."""
    return ZodCustom.create(fn, params, payload=True)


def string(params: Params = None) -> ZodString:
    """String schema. ``params`` may also be a compiled regex the value must match."""
    return ZodString.create(params)


def string_ptr(params: Params = None) -> ZodString:
    return ZodString.create(params, constraint=_REFERENCE)


def _integer_builder(code: ZodTypeCode, constraint: Constraint) -> Callable[..., ZodInteger]:
    def build(params: Params = None) -> ZodInteger:
        return ZodInteger.create(code, params, constraint=constraint)

    suffix = "_ptr" if constraint is _REFERENCE else ""
    build.__name__ = build.__qualname__ = f"{code.value}{suffix}"
    low, high = INT_RANGES[code]
    build.__doc__ = f"``{code.value}`` schema accepting integers in [{low}, {high}]."
    return build


def integer(params: Params = None) -> ZodInteger:
    """Integer schema bounded to the signed 64-bit range."""
    return ZodInteger.create(ZodTypeCode.INT, params)


def integer_ptr(params: Params = None) -> ZodInteger:
    return ZodInteger.create(ZodTypeCode.INT, params, constraint=_REFERENCE)


int8 = _integer_builder(ZodTypeCode.INT8, _VALUE)
int16 = _integer_builder(ZodTypeCode.INT16, _VALUE)
int32 = _integer_builder(ZodTypeCode.INT32, _VALUE)
int64 = _integer_builder(ZodTypeCode.INT64, _VALUE)
uint = _integer_builder(ZodTypeCode.UINT, _VALUE)
uint8 = _integer_builder(ZodTypeCode.UINT8, _VALUE)
uint16 = _integer_builder(ZodTypeCode.UINT16, _VALUE)
uint32 = _integer_builder(ZodTypeCode.UINT32, _VALUE)
uint64 = _integer_builder(ZodTypeCode.UINT64, _VALUE)
int8_ptr = _integer_builder(ZodTypeCode.INT8, _REFERENCE)
int16_ptr = _integer_builder(ZodTypeCode.INT16, _REFERENCE)
int32_ptr = _integer_builder(ZodTypeCode.INT32, _REFERENCE)
int64_ptr = _integer_builder(ZodTypeCode.INT64, _REFERENCE)
uint_ptr = _integer_builder(ZodTypeCode.UINT, _REFERENCE)
uint8_ptr = _integer_builder(ZodTypeCode.UINT8, _REFERENCE)
uint16_ptr = _integer_builder(ZodTypeCode.UINT16, _REFERENCE)
uint32_ptr = _integer_builder(ZodTypeCode.UINT32, _REFERENCE)
uint64_ptr = _integer_builder(ZodTypeCode.UINT64, _REFERENCE)


def float32(params: Params = None) -> ZodFloat:
    return ZodFloat.create(ZodTypeCode.FLOAT32, params)


def float32_ptr(params: Params = None) -> ZodFloat:
    return ZodFloat.create(ZodTypeCode.FLOAT32, params, constraint=_REFERENCE)


def float64(params: Params = None) -> ZodFloat:
    return ZodFloat.create(ZodTypeCode.FLOAT64, params)


def float64_ptr(params: Params = None) -> ZodFloat:
    return ZodFloat.create(ZodTypeCode.FLOAT64, params, constraint=_REFERENCE)


def number(params: Params = None) -> ZodFloat:
    """Any real number (int or float, not bool, not NaN)."""
    return ZodFloat.create(ZodTypeCode.NUMBER, params)


def number_ptr(params: Params = None) -> ZodFloat:
    return ZodFloat.create(ZodTypeCode.NUMBER, params, constraint=_REFERENCE)


def bigint(params: Params = None) -> ZodBigInt:
    return ZodBigInt.create(params)


def bigint_ptr(params: Params = None) -> ZodBigInt:
    return ZodBigInt.create(params, constraint=_REFERENCE)


def complex64(params: Params = None) -> ZodComplex:
    return ZodComplex.create(ZodTypeCode.COMPLEX64, params)


def complex64_ptr(params: Params = None) -> ZodComplex:
    return ZodComplex.create(ZodTypeCode.COMPLEX64, params, constraint=_REFERENCE)


def complex128(params: Params = None) -> ZodComplex:
    return ZodComplex.create(ZodTypeCode.COMPLEX128, params)


def complex128_ptr(params: Params = None) -> ZodComplex:
    return ZodComplex.create(ZodTypeCode.COMPLEX128, params, constraint=_REFERENCE)


def time(params: Params = None) -> ZodTime:
    return ZodTime.create(params)


def time_ptr(params: Params = None) -> ZodTime:
    return ZodTime.create(params, constraint=_REFERENCE)


def nil(params: Params = None) -> ZodNil:
    return ZodNil.create(params)


def any(params: Params = None) -> ZodAny:  # noqa: A001
    return ZodAny.create(params)


def unknown(params: Params = None) -> ZodUnknown:
    return ZodUnknown.create(params)


def never(params: Params = None) -> ZodNever:
    return ZodNever.create(params)


def literal(*values: _Any, params: Params = None) -> ZodLiteral:
    """Match one of ``values`` exactly (value and type)."""
    return ZodLiteral.create(*values, params=params)


def enum(*values: _Any, params: Params = None) -> ZodEnum:
    """Enum from values, a list, a name-to-value dict or an ``enum.Enum`` class."""
    return ZodEnum.create(*values, params=params)


# --- Objects and records ---

def object(shape: Mapping[str, ZodType] | None = None, params: Params = None) -> ZodObject:  # noqa: A001
    """Object schema that strips unknown keys."""
    return ZodObject.create(shape, params)


def strict_object(shape: Mapping[str, ZodType] | None = None, params: Params = None) -> ZodObject:
    """Object schema that reports unknown keys."""
    return ZodObject.create(shape, params, mode=_STRICT_OBJECT)


def loose_object(shape: Mapping[str, ZodType] | None = None, params: Params = None) -> ZodObject:
    """Object schema that keeps unknown keys unvalidated."""
    return ZodObject.create(shape, params, mode=_LOOSE_OBJECT)


def object_ptr(shape: Mapping[str, ZodType] | None = None, params: Params = None) -> ZodObject:
    return ZodObject.create(shape, params, constraint=_REFERENCE)


def struct(cls: type, shape: Mapping[str, ZodType] | None = None, params: Params = None) -> ZodStruct:
    """Schema producing instances of the dataclass ``cls``."""
    return ZodStruct.create(cls, shape, params)


def struct_ptr(cls: type, shape: Mapping[str, ZodType] | None = None, params: Params = None) -> ZodStruct:
    """Like ``struct`` but accepts None and updates instances in place."""
    return ZodStruct.create(cls, shape, params, constraint=_REFERENCE)


def record(key: ZodType, value: ZodType, params: Params = None) -> ZodRecord:
    """String-keyed mapping; exhaustive when ``key`` is an enum or literal."""
    return ZodRecord.create(key, value, params, mode=EXHAUSTIVE)


def record_ptr(key: ZodType, value: ZodType, params: Params = None) -> ZodRecord:
    return ZodRecord.create(key, value, params, mode=EXHAUSTIVE, constraint=_REFERENCE)


def partial_record(key: ZodType, value: ZodType, params: Params = None) -> ZodRecord:
    """Record whose finite keys may be missing."""
    return ZodRecord.create(key, value, params, mode=PARTIAL)


def loose_record(key: ZodType, value: ZodType, params: Params = None) -> ZodRecord:
    """Record that passes keys failing the key schema through unvalidated."""
    return ZodRecord.create(key, value, params, mode=LOOSE)


def map(key: ZodType, value: ZodType, params: Params = None) -> ZodMap:  # noqa: A001
    return ZodMap.create(key, value, params)


def map_ptr(key: ZodType, value: ZodType, params: Params = None) -> ZodMap:
    return ZodMap.create(key, value, params, constraint=_REFERENCE)


# --- Sequences ---

def slice(element: ZodType, params: Params = None) -> ZodSlice:  # noqa: A001
    return ZodSlice.create(element, params)


def slice_ptr(element: ZodType, params: Params = None) -> ZodSlice:
    return ZodSlice.create(element, params, constraint=_REFERENCE)


def array(element: ZodType, length: int, params: Params = None) -> ZodArray:
    """Exactly ``length`` elements; the output is a tuple."""
    return ZodArray.create(element, length, params)


def tuple(items: list[ZodType], rest: ZodType | None = None, params: Params = None) -> ZodTuple:  # noqa: A001
    return ZodTuple.create(items, rest, params)


def set(element: ZodType, params: Params = None) -> ZodSet:  # noqa: A001
    return ZodSet.create(element, params)


# --- Composition ---

def union(options: list[ZodType], params: Params = None) -> ZodUnion:
    return ZodUnion.create(options, params)


def discriminated_union(discriminator: str, options: list[ZodType], params: Params = None) -> ZodDiscriminatedUnion:
    return ZodDiscriminatedUnion.create(discriminator, options, params)


def intersection(left: ZodType, right: ZodType, params: Params = None) -> ZodIntersection:
    return ZodIntersection.create(left, right, params)


def xor(options: list[ZodType], params: Params = None) -> ZodXor:
    return ZodXor.create(options, params)


def lazy(getter: Callable[[], ZodType], params: Params = None) -> ZodLazy:
    return ZodLazy.create(getter, params)


def transform(fn: Callable[..., _Any], params: Params = None) -> ZodTransform:
    """Standalone transform: any input, output ``fn(value[, ctx])``."""
    return ZodTransform.create(ZodAny.create(), fn, params)


def pipe(in_: ZodType, out: ZodType, params: Params = None) -> ZodPipe:
    return ZodPipe.create(in_, out, params)


# --- Wrappers ---

def optional(schema: ZodType) -> ZodType:
    return ensure_schema(schema).optional()


def nilable(schema: ZodType) -> ZodType:
    return ensure_schema(schema).nilable()


def nullish(schema: ZodType) -> ZodType:
    return ensure_schema(schema).nullish()


def non_optional(schema: ZodType) -> ZodType:
    return ensure_schema(schema).non_optional()

