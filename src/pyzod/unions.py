"""Composition schemas: union, discriminated union, intersection and xor.

Options are parsed against derived payloads at the same path, so an
option's issues never leak into the parent unless the composition decides
to report them.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from typing import Any

from .context import ParsePayload
from .engine import run
from .internals import Constraint, ZodTypeCode
from .issues import IssueCode, SchemaDefinitionError
from .literals import ZodEnum, ZodLiteral
from .objects import ZodObject, ZodStruct
from .params import Params
from .primitives import ZodNil
from .schema import ZodType, base_internals, ensure_schema, register_description

logger = logging.getLogger(__name__)

_MISSING = object()


class ZodUnion(ZodType[Any]):
    """First option that parses wins; otherwise one ``invalid_union`` issue."""

    _accepts_nil = True
    _checks_first = False

    def __init__(self, internals, options: tuple[ZodType, ...]) -> None:
        super().__init__(internals)
        self._options = options

    @property
    def options(self) -> tuple[ZodType, ...]:
        return self._options

    def _optional_in(self) -> bool:
        return super()._optional_in() or any(o._optional_in() for o in self._options)

    def _try_options(self, payload: ParsePayload, options: tuple[ZodType, ...]) -> None:
        failures = []
        for option in options:
            child = run(option, payload.derive(payload.value))
            if not child.issues:
                payload.value = child.value
                return
            failures.append(child.issues)
        payload.add_issue(IssueCode.INVALID_UNION, properties={"union_errors": failures})

    def _parse_inner(self, payload: ParsePayload) -> None:
        self._try_options(payload, self._options)

    @classmethod
    def create(cls, options: list[ZodType] | tuple[ZodType, ...], params: Params = None, *, constraint: Constraint = Constraint.VALUE) -> ZodUnion:
        options = tuple(ensure_schema(o, f"union option {i}") for i, o in enumerate(options))
        if not options:
            raise ValueError("union requires at least one option")
        internals, p = base_internals(ZodTypeCode.UNION, params, constraint=constraint)
        return register_description(cls(internals, options), p)


def discriminator_values(schema: ZodType) -> list[Any] | None:
    """Values a discriminator field schema can match, or None if unsupported."""
    if isinstance(schema, ZodLiteral):
        return list(schema.values)
    if isinstance(schema, ZodEnum):
        values = list(schema.values)
        values.extend(v for v in schema.options if v not in values)
        return values
    if isinstance(schema, ZodNil):
        return [None]
    return None


def _lookup_key(value: Any) -> tuple[type, Any] | None:
    try:
        hash(value)
    except TypeError:
        return None
    return type(value), value


class ZodDiscriminatedUnion(ZodUnion):
    """Union that selects its option by the value of one field.

    The option table is built once at construction; parsing a valid input
    runs exactly one option.
    """

    _accepts_nil = False

    def __init__(
        self,
        internals,
        discriminator: str,
        options: tuple[ZodType, ...],
        lookup: dict[tuple[type, Any], ZodType],
        union_fallback: bool = False,
    ) -> None:
        super().__init__(internals, options)
        self._discriminator = discriminator
        self._lookup = lookup
        self._union_fallback = union_fallback

    @property
    def discriminator(self) -> str:
        return self._discriminator

    @property
    def _expected(self) -> str:
        return "object"

    def _extract(self, value: Any) -> tuple[Any, bool]:
        if isinstance(value, Mapping):
            return value, True
        return value, dataclasses.is_dataclass(value) and not isinstance(value, type)

    def option_for(self, value: Any) -> ZodType | None:
        key = _lookup_key(value)
        return self._lookup.get(key) if key is not None else None

    def _parse_inner(self, payload: ParsePayload) -> None:
        value = payload.value
        if isinstance(value, Mapping):
            tag = value.get(self._discriminator, _MISSING)
        else:
            tag = getattr(value, self._discriminator, _MISSING)
        option = None if tag is _MISSING else self.option_for(tag)
        if option is None:
            if self._union_fallback:
                self._try_options(payload, self._options)
                return
            payload.add_issue(
                IssueCode.INVALID_UNION,
                path=[self._discriminator],
                input=None if tag is _MISSING else tag,
                properties={
                    "discriminator": self._discriminator,
                    "note": "No matching discriminator",
                },
            )
            return
        child = run(option, payload.derive(value))
        payload.merge(child)
        if not child.issues:
            payload.value = child.value

    @classmethod
    def create(
        cls,
        discriminator: str,
        options: list[ZodType] | tuple[ZodType, ...],
        params: Params = None,
        *,
        constraint: Constraint = Constraint.VALUE,
    ) -> ZodDiscriminatedUnion:
        """Build the union and its discriminator table.

        Raises:
            SchemaDefinitionError: If there are no options, an option is not
                an object or struct, an option lacks a literal, enum or nil
                discriminator field, or two options share a value.
        """
        options = tuple(options)
        if not options:
            logger.debug("discriminated_union(%r) rejected: no options", discriminator)
            raise SchemaDefinitionError("discriminated_union requires at least one option")

        violations: list[str] = []
        lookup: dict[tuple[type, Any], ZodType] = {}
        for index, option in enumerate(options):
            if not isinstance(option, (ZodObject, ZodStruct)):
                violations.append(f"option {index}: expected an object or struct schema, got {type(option).__name__}")
                continue
            field = option.shape.get(discriminator)
            if field is None:
                violations.append(f"option {index}: missing discriminator field {discriminator!r}")
                continue
            values = discriminator_values(field)
            if not values:
                violations.append(
                    f"option {index}: discriminator field {discriminator!r} must be a literal, enum or nil schema"
                )
                continue
            for value in values:
                key = _lookup_key(value)
                if key is None:
                    violations.append(f"option {index}: unhashable discriminator value {value!r}")
                elif key in lookup:
                    violations.append(f"option {index}: duplicate discriminator value {value!r}")
                else:
                    lookup[key] = option

        if violations:
            logger.debug("discriminated_union(%r) rejected: %s", discriminator, "; ".join(violations))
            raise SchemaDefinitionError(
                f"Invalid discriminated union on {discriminator!r}: {len(violations)} violation(s)",
                violations=violations,
            )
        internals, p = base_internals(ZodTypeCode.DISCRIMINATED_UNION, params, constraint=constraint)
        schema = cls(internals, discriminator, options, lookup, p.union_fallback)
        return register_description(schema, p)


def merge_values(a: Any, b: Any) -> tuple[Any, bool]:
    """Deep-merge two parse results of the same input."""
    if a is b:
        return a, True
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        merged = dict(a)
        for key, value in b.items():
            if key in merged:
                sub, ok = merge_values(merged[key], value)
                if not ok:
                    return None, False
                merged[key] = sub
            else:
                merged[key] = value
        return merged, True
    if isinstance(a, list) and isinstance(b, list):
        if len(a) != len(b):
            return None, False
        items = []
        for left, right in zip(a, b):
            sub, ok = merge_values(left, right)
            if not ok:
                return None, False
            items.append(sub)
        return items, True
    if type(a) is type(b) and a == b:
        return a, True
    return None, False


class ZodIntersection(ZodType[Any]):
    """Input must satisfy both sides; the results are deep-merged."""

    _accepts_nil = True
    _checks_first = False

    def __init__(self, internals, left: ZodType, right: ZodType) -> None:
        super().__init__(internals)
        self._left = left
        self._right = right

    @property
    def left(self) -> ZodType:
        return self._left

    @property
    def right(self) -> ZodType:
        return self._right

    def _parse_inner(self, payload: ParsePayload) -> None:
        left = run(self._left, payload.derive(payload.value))
        right = run(self._right, payload.derive(payload.value))
        payload.merge(left)
        payload.merge(right)
        if payload.issues:
            return
        merged, ok = merge_values(left.value, right.value)
        if not ok:
            payload.add_issue(IssueCode.INCOMPATIBLE_TYPES)
            return
        payload.value = merged

    @classmethod
    def create(cls, left: ZodType, right: ZodType, params: Params = None) -> ZodIntersection:
        ensure_schema(left, "intersection left")
        ensure_schema(right, "intersection right")
        internals, p = base_internals(ZodTypeCode.INTERSECTION, params)
        return register_description(cls(internals, left, right), p)


class ZodXor(ZodUnion):
    """Exactly one option must parse."""

    def _parse_inner(self, payload: ParsePayload) -> None:
        failures = []
        successes = []
        for option in self._options:
            child = run(option, payload.derive(payload.value))
            if child.issues:
                failures.append(child.issues)
            else:
                successes.append(child)
        if len(successes) == 1:
            payload.value = successes[0].value
            return
        if successes:
            payload.add_issue(
                IssueCode.INVALID_UNION,
                properties={"note": f"{len(successes)} options matched, expected exactly one", "inclusive": False},
            )
            return
        payload.add_issue(IssueCode.INVALID_UNION, properties={"union_errors": failures, "inclusive": False})

    @classmethod
    def create(cls, options: list[ZodType] | tuple[ZodType, ...], params: Params = None, *, constraint: Constraint = Constraint.VALUE) -> ZodXor:
        options = tuple(ensure_schema(o, f"xor option {i}") for i, o in enumerate(options))
        if not options:
            raise ValueError("xor requires at least one option")
        internals, p = base_internals(ZodTypeCode.XOR, params, constraint=constraint)
        return register_description(cls(internals, options), p)
