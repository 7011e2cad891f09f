"""Record and map schemas.

A record has string keys checked by a string-producing key schema. When the
key schema enumerates a finite set (enum or literal), the record is
exhaustive: every member must be present and other keys are unrecognized.
``partial_record`` drops the every-member requirement and ``loose_record``
passes keys that fail the key schema through unvalidated.

A map accepts any hashable keys; key failures are reported as
``invalid_key`` and value failures as ``invalid_element``, each carrying the
nested issues.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, TypeVar

from . import checks as _checks
from .coercion import to_mapping
from .context import ParsePayload
from .engine import run, run_child
from .internals import Constraint, ZodTypeCode
from .issues import IssueCode, RawIssue, parsed_type
from .literals import ZodEnum, ZodLiteral
from .params import Params
from .primitives import ZodAny
from .schema import ZodType, base_internals, ensure_schema, register_description
from .strings import ZodString

R = TypeVar("R", bound="_Sized")

EXHAUSTIVE = "exhaustive"
PARTIAL = "partial"
LOOSE = "loose"


class _Sized(ZodType[dict]):
    """Entry-count checks shared by records and maps."""

    _checks_first = False

    def min(self: R, size: int, params: Params = None) -> R:
        return self._with_check(_checks.min_length(size, params, self._origin))

    def max(self: R, size: int, params: Params = None) -> R:
        return self._with_check(_checks.max_length(size, params, self._origin))

    def size(self: R, size: int, params: Params = None) -> R:
        return self._with_check(_checks.length_equals(size, params, self._origin))

    def non_empty(self: R, params: Params = None) -> R:
        return self.min(1, params)


def string_keyed(schema: ZodType) -> bool:
    """Whether ``schema`` can only produce string keys."""
    from .unions import ZodUnion
    from .wrappers import ZodPipe

    if isinstance(schema, (ZodString, ZodAny)):
        return True
    if isinstance(schema, (ZodEnum, ZodLiteral)):
        return all(isinstance(v, str) for v in schema.values)
    if isinstance(schema, ZodUnion):
        return all(string_keyed(option) for option in schema.options)
    if isinstance(schema, ZodPipe):
        return string_keyed(schema.in_)
    return False


def finite_keys(schema: ZodType) -> list[Any] | None:
    """Members of a finite key schema, or None when the key set is open."""
    from .unions import ZodUnion

    if isinstance(schema, ZodEnum):
        return list(schema.values)
    if isinstance(schema, ZodLiteral):
        return list(schema.values)
    if isinstance(schema, ZodUnion):
        keys: list[Any] = []
        for option in schema.options:
            option_keys = finite_keys(option)
            if option_keys is None:
                return None
            keys.extend(k for k in option_keys if k not in keys)
        return keys
    return None


def _as_mapping(value: Any) -> tuple[Any, bool]:
    if isinstance(value, Mapping):
        return value, True
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_mapping(value)
    return value, False


class ZodRecord(_Sized):
    _origin = "record"

    def __init__(self, internals, key: ZodType, value: ZodType, mode: str = EXHAUSTIVE) -> None:
        super().__init__(internals)
        self._key = key
        self._value = value
        self._mode = mode
        self._finite = finite_keys(key)

    @property
    def key_schema(self) -> ZodType:
        return self._key

    @property
    def value_schema(self) -> ZodType:
        return self._value

    @property
    def mode(self) -> str:
        return self._mode

    def _coerce(self, value: Any) -> tuple[Any, bool]:
        return to_mapping(value)

    def _extract(self, value: Any) -> tuple[Any, bool]:
        return _as_mapping(value)

    def _parse_inner(self, payload: ParsePayload) -> None:
        source = payload.value
        out: dict[str, Any] = {}
        unrecognized: list[Any] = []
        for key, item in source.items():
            if not isinstance(key, str):
                nested = RawIssue(IssueCode.INVALID_TYPE, input=key, expected="string", received=parsed_type(key))
                payload.add_issue(
                    IssueCode.INVALID_KEY,
                    path=[key],
                    input=key,
                    properties={"origin": "record", "issues": [nested]},
                )
                continue
            key_payload = run(self._key, payload.derive(key, key))
            if key_payload.issues:
                if self._mode == LOOSE:
                    out[key] = item
                elif self._finite is not None:
                    unrecognized.append(key)
                else:
                    payload.add_issue(
                        IssueCode.INVALID_KEY,
                        path=[key],
                        input=key,
                        properties={"origin": "record", "issues": key_payload.issues},
                    )
                continue
            child = run_child(self._value, payload, item, key)
            if not child.issues:
                out[key_payload.value] = child.value

        if self._finite is not None and self._mode == EXHAUSTIVE:
            for key in self._finite:
                if key not in source and not self._value._optional_in():
                    payload.add_issue(
                        IssueCode.INVALID_TYPE,
                        path=[key],
                        input=None,
                        expected=self._value._expected,
                        received="missing",
                    )
        if unrecognized:
            payload.add_issue(IssueCode.UNRECOGNIZED_KEYS, properties={"keys": unrecognized})
        payload.value = out

    @classmethod
    def create(
        cls,
        key: ZodType,
        value: ZodType,
        params: Params = None,
        *,
        mode: str = EXHAUSTIVE,
        constraint: Constraint = Constraint.VALUE,
    ) -> ZodRecord:
        """Build a record schema.

        Raises:
            TypeError: If ``key`` or ``value`` is not a schema.
            ValueError: If the key schema can produce non-string keys.
        """
        ensure_schema(key, "record key")
        ensure_schema(value, "record value")
        if not string_keyed(key):
            raise ValueError(
                f"record key schema must produce strings (string, enum, literal or a union of those), "
                f"got {type(key).__name__}"
            )
        if mode not in (EXHAUSTIVE, PARTIAL, LOOSE):
            raise ValueError(f"unknown record mode {mode!r}")
        internals, p = base_internals(ZodTypeCode.RECORD, params, constraint=constraint)
        return register_description(cls(internals, key, value, mode), p)


class ZodMap(_Sized):
    _origin = "map"

    def __init__(self, internals, key: ZodType, value: ZodType) -> None:
        super().__init__(internals)
        self._key = key
        self._value = value

    @property
    def key_schema(self) -> ZodType:
        return self._key

    @property
    def value_schema(self) -> ZodType:
        return self._value

    def _extract(self, value: Any) -> tuple[Any, bool]:
        return value, isinstance(value, Mapping)

    def _parse_inner(self, payload: ParsePayload) -> None:
        out: dict[Any, Any] = {}
        for key, item in payload.value.items():
            key_payload = run(self._key, payload.derive(key, key))
            value_payload = run(self._value, payload.derive(item, key))
            if key_payload.issues:
                payload.add_issue(
                    IssueCode.INVALID_KEY,
                    path=[key],
                    input=key,
                    properties={"origin": "map", "issues": key_payload.issues},
                )
            if value_payload.issues:
                payload.add_issue(
                    IssueCode.INVALID_ELEMENT,
                    path=[key],
                    input=item,
                    properties={"origin": "map", "key": key, "issues": value_payload.issues},
                )
            if not (key_payload.issues or value_payload.issues):
                out[key_payload.value] = value_payload.value
        payload.value = out

    @classmethod
    def create(
        cls,
        key: ZodType,
        value: ZodType,
        params: Params = None,
        *,
        constraint: Constraint = Constraint.VALUE,
    ) -> ZodMap:
        ensure_schema(key, "map key")
        ensure_schema(value, "map value")
        internals, p = base_internals(ZodTypeCode.MAP, params, constraint=constraint)
        return register_description(cls(internals, key, value), p)
