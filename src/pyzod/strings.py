"""String schema with length, format and normalization checks.

Lengths count code points, so ``"héllo"`` has length 5.
"""

from __future__ import annotations

import re
from typing import Any, TypeVar

from . import checks as _checks
from .coercion import to_string
from .formats import FORMATS, is_jwt
from .internals import Constraint, ZodTypeCode
from .params import Params
from .schema import ZodType, base_internals, register_description

S = TypeVar("S", bound="ZodString")


class ZodString(ZodType[str]):
    _origin = "string"

    def _coerce(self, value: Any) -> tuple[Any, bool]:
        return to_string(value)

    def _extract(self, value: Any) -> tuple[Any, bool]:
        return value, isinstance(value, str)

    # --- Length ---

    def min(self: S, length: int, params: Params = None) -> S:
        return self._with_check(_checks.min_length(length, params, "string"))

    def max(self: S, length: int, params: Params = None) -> S:
        return self._with_check(_checks.max_length(length, params, "string"))

    def length(self: S, length: int, params: Params = None) -> S:
        return self._with_check(_checks.length_equals(length, params, "string"))

    def non_empty(self: S, params: Params = None) -> S:
        return self.min(1, params)

    # --- Formats ---

    def _format(self: S, name: str, params: Params = None) -> S:
        return self._with_check(_checks.string_format(name, FORMATS[name], params))

    def email(self: S, params: Params = None) -> S:
        return self._format("email", params)

    def url(self: S, params: Params = None) -> S:
        return self._format("url", params)

    def uuid(self: S, params: Params = None) -> S:
        return self._format("uuid", params)

    def guid(self: S, params: Params = None) -> S:
        """Any 8-4-4-4-12 hex string, without version or variant bits."""
        return self._format("guid", params)

    def uuidv4(self: S, params: Params = None) -> S:
        return self._format("uuidv4", params)

    def uuidv6(self: S, params: Params = None) -> S:
        return self._format("uuidv6", params)

    def uuidv7(self: S, params: Params = None) -> S:
        return self._format("uuidv7", params)

    def cuid(self: S, params: Params = None) -> S:
        return self._format("cuid", params)

    def cuid2(self: S, params: Params = None) -> S:
        return self._format("cuid2", params)

    def ulid(self: S, params: Params = None) -> S:
        return self._format("ulid", params)

    def xid(self: S, params: Params = None) -> S:
        return self._format("xid", params)

    def ksuid(self: S, params: Params = None) -> S:
        return self._format("ksuid", params)

    def nanoid(self: S, params: Params = None) -> S:
        return self._format("nanoid", params)

    def ipv4(self: S, params: Params = None) -> S:
        return self._format("ipv4", params)

    def ipv6(self: S, params: Params = None) -> S:
        return self._format("ipv6", params)

    def cidrv4(self: S, params: Params = None) -> S:
        return self._format("cidrv4", params)

    def cidrv6(self: S, params: Params = None) -> S:
        return self._format("cidrv6", params)

    def base64(self: S, params: Params = None) -> S:
        return self._format("base64", params)

    def base64url(self: S, params: Params = None) -> S:
        return self._format("base64url", params)

    def hex(self: S, params: Params = None) -> S:
        return self._format("hex", params)

    def emoji(self: S, params: Params = None) -> S:
        return self._format("emoji", params)

    def jwt(self: S, params: Params = None, *, alg: str | None = None) -> S:
        """JSON Web Token shape; ``alg`` pins the header algorithm.

        The signature is never verified.
        """
        if alg is None:
            return self._format("jwt", params)
        return self._with_check(
            _checks.string_format("jwt", lambda s: is_jwt(s, alg), params, alg=alg)
        )

    def iso_date(self: S, params: Params = None) -> S:
        return self._format("iso_date", params)

    def iso_datetime(self: S, params: Params = None) -> S:
        return self._format("iso_datetime", params)

    def regex(self: S, pattern: str | re.Pattern, params: Params = None) -> S:
        return self._with_check(_checks.regex(pattern, params))

    def starts_with(self: S, prefix: str, params: Params = None) -> S:
        return self._with_check(
            _checks.string_format("starts_with", lambda s: s.startswith(prefix), params, prefix=prefix)
        )

    def ends_with(self: S, suffix: str, params: Params = None) -> S:
        return self._with_check(
            _checks.string_format("ends_with", lambda s: s.endswith(suffix), params, suffix=suffix)
        )

    def includes(self: S, needle: str, params: Params = None) -> S:
        return self._with_check(
            _checks.string_format("includes", lambda s: needle in s, params, includes=needle)
        )

    def lowercase(self: S, params: Params = None) -> S:
        return self._with_check(_checks.string_format("lowercase", lambda s: s == s.lower(), params))

    def uppercase(self: S, params: Params = None) -> S:
        return self._with_check(_checks.string_format("uppercase", lambda s: s == s.upper(), params))

    # --- Normalization ---

    def trim(self: S) -> S:
        return self.overwrite(str.strip)

    def to_lower_case(self: S) -> S:
        return self.overwrite(str.lower)

    def to_upper_case(self: S) -> S:
        return self.overwrite(str.upper)

    @classmethod
    def create(
        cls,
        params: Params | re.Pattern = None,
        *,
        coerce: bool = False,
        constraint: Constraint = Constraint.VALUE,
    ) -> ZodString:
        pattern = params if isinstance(params, re.Pattern) else None
        internals, p = base_internals(
            ZodTypeCode.STRING, None if pattern is not None else params,
            coerce=coerce, constraint=constraint,
        )
        schema = cls(internals)
        if pattern is not None:
            schema._internals.checks.append(_checks.regex(pattern))
        return register_description(schema, p)
