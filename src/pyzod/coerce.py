"""Coercing constructors, used as ``z.coerce.integer()``.

A coercing schema converts its input to the target type before validating
it. Coercion is skipped for ``None`` and under ``strict_parse``. Inputs that
cannot be converted report ``invalid_type`` exactly like a non-coercing
schema would.

Example:
    >>> import pyzod as z
    >>> z.coerce.integer().parse("42")
    42
    >>> z.coerce.boolean().parse("yes")
    True
"""

from __future__ import annotations

from .internals import ZodTypeCode
from .numbers import ZodBigInt, ZodComplex, ZodFloat, ZodInteger
from .params import Params
from .primitives import ZodBool
from .strings import ZodString
from .temporal import ZodTime


def boolean(params: Params = None) -> ZodBool:
    return ZodBool.create(params, coerce=True)


def string(params: Params = None) -> ZodString:
    return ZodString.create(params, coerce=True)


def integer(params: Params = None, *, type_code: ZodTypeCode = ZodTypeCode.INT) -> ZodInteger:
    """Integer from numeric strings, integral floats and bools."""
    return ZodInteger.create(type_code, params, coerce=True)


def int8(params: Params = None) -> ZodInteger:
    return integer(params, type_code=ZodTypeCode.INT8)


def int16(params: Params = None) -> ZodInteger:
    return integer(params, type_code=ZodTypeCode.INT16)


def int32(params: Params = None) -> ZodInteger:
    return integer(params, type_code=ZodTypeCode.INT32)


def int64(params: Params = None) -> ZodInteger:
    return integer(params, type_code=ZodTypeCode.INT64)


def uint(params: Params = None) -> ZodInteger:
    return integer(params, type_code=ZodTypeCode.UINT)


def uint8(params: Params = None) -> ZodInteger:
    return integer(params, type_code=ZodTypeCode.UINT8)


def uint16(params: Params = None) -> ZodInteger:
    return integer(params, type_code=ZodTypeCode.UINT16)


def uint32(params: Params = None) -> ZodInteger:
    return integer(params, type_code=ZodTypeCode.UINT32)


def uint64(params: Params = None) -> ZodInteger:
    return integer(params, type_code=ZodTypeCode.UINT64)


def float32(params: Params = None) -> ZodFloat:
    return ZodFloat.create(ZodTypeCode.FLOAT32, params, coerce=True)


def float64(params: Params = None) -> ZodFloat:
    return ZodFloat.create(ZodTypeCode.FLOAT64, params, coerce=True)


def number(params: Params = None) -> ZodFloat:
    return ZodFloat.create(ZodTypeCode.NUMBER, params, coerce=True)


def bigint(params: Params = None) -> ZodBigInt:
    return ZodBigInt.create(params, coerce=True)


def complex64(params: Params = None) -> ZodComplex:
    return ZodComplex.create(ZodTypeCode.COMPLEX64, params, coerce=True)


def complex128(params: Params = None) -> ZodComplex:
    return ZodComplex.create(ZodTypeCode.COMPLEX128, params, coerce=True)


def time(params: Params = None) -> ZodTime:
    """Datetime from ISO-8601 strings or POSIX timestamps (as UTC)."""
    return ZodTime.create(params, coerce=True)
