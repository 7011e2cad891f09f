"""Time schema for ``datetime.datetime`` values."""

from __future__ import annotations

import datetime
from typing import Any, TypeVar

from . import checks as _checks
from .coercion import to_time
from .internals import Constraint, ZodTypeCode
from .params import Params
from .schema import ZodType, base_internals, register_description

S = TypeVar("S", bound="ZodTime")


class ZodTime(ZodType[datetime.datetime]):
    _origin = "time"

    def _coerce(self, value: Any) -> tuple[Any, bool]:
        return to_time(value)

    def _extract(self, value: Any) -> tuple[Any, bool]:
        return value, isinstance(value, datetime.datetime)

    def min(self: S, moment: datetime.datetime, params: Params = None) -> S:
        return self._with_check(_checks.greater_than(moment, True, params, "time"))

    def max(self: S, moment: datetime.datetime, params: Params = None) -> S:
        return self._with_check(_checks.less_than(moment, True, params, "time"))

    @classmethod
    def create(cls, params: Params = None, *, coerce: bool = False, constraint: Constraint = Constraint.VALUE) -> ZodTime:
        internals, p = base_internals(ZodTypeCode.TIME, params, coerce=coerce, constraint=constraint)
        return register_description(cls(internals), p)
