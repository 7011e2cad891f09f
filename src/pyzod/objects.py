"""Object and struct schemas.

An object validates string-keyed mappings against a shape and returns a new
dict. A struct does the same for a dataclass type and returns an instance of
it; it accepts either an instance or a mapping keyed by field name (or the
field's ``metadata["alias"]``).

Unknown keys are handled by the object mode:

- ``strip`` (default): dropped from the output,
- ``strict``: reported as one ``unrecognized_keys`` issue,
- ``loose``: copied to the output unvalidated,
- catchall: validated against the catchall schema and kept.

Example:
    >>> import pyzod as z
    >>> user = z.object({"name": z.string(), "age": z.integer().optional()})
    >>> user.parse({"name": "Ada", "extra": 1})
    {'name': 'Ada'}
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any, TypeVar

from .checks import Check
from .coercion import to_mapping
from .context import ParsePayload
from .engine import run_child
from .internals import Constraint, ZodTypeCode
from .issues import IssueCode
from .params import Params
from .schema import ZodType, base_internals, ensure_schema, register_description

O = TypeVar("O", bound="ZodObject")

STRIP = "strip"
STRICT = "strict"
LOOSE = "loose"
_MODES = (STRIP, STRICT, LOOSE)


def _freeze_shape(shape: Mapping[str, Any] | None) -> MappingProxyType:
    frozen: dict[str, ZodType] = {}
    for key, schema in (shape or {}).items():
        if not isinstance(key, str):
            raise TypeError(f"shape keys must be strings, got {type(key).__name__}")
        frozen[key] = ensure_schema(schema, f"shape[{key!r}]")
    return MappingProxyType(frozen)


def validate_fields(
    shape: Mapping[str, ZodType],
    source: Mapping[Any, Any],
    payload: ParsePayload,
    always_optional: Iterable[str] = (),
    segments: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Validate every shape entry against ``source``; return the valid outputs.

    Keys listed in ``always_optional`` may be missing regardless of their
    schema. Issues are merged into ``payload`` under the field key, or under
    ``segments[key]`` when the input spells the key differently.
    """
    optional_keys = set(always_optional)
    out: dict[str, Any] = {}
    for key, schema in shape.items():
        internals = schema._internals
        segment = segments.get(key, key) if segments else key
        if key not in source:
            if internals.has_default or internals.has_prefault:
                pass
            elif internals.optional or internals.exact_optional or key in optional_keys:
                continue
            elif not schema._optional_in():
                payload.add_issue(
                    IssueCode.INVALID_TYPE,
                    path=[segment],
                    input=None,
                    expected=schema._expected,
                    received="missing",
                )
                continue
            child = run_child(schema, payload, None, segment)
        else:
            item = source[key]
            if item is None and internals.exact_optional and not (internals.optional or internals.nilable):
                payload.add_issue(
                    IssueCode.INVALID_TYPE,
                    path=[segment],
                    input=None,
                    expected=schema._expected,
                    received="nil",
                )
                continue
            child = run_child(schema, payload, item, segment)
        if not child.issues:
            out[key] = child.value
    return out


class ZodObject(ZodType[dict]):
    """Schema for string-keyed mappings with a fixed shape."""

    _checks_first = False
    _origin = "object"

    def __init__(
        self,
        internals,
        shape: Mapping[str, ZodType] | None = None,
        mode: str = STRIP,
        catchall: ZodType | None = None,
    ) -> None:
        super().__init__(internals)
        if mode not in _MODES:
            raise ValueError(f"mode must be one of {_MODES}, got {mode!r}")
        self._shape = _freeze_shape(shape)
        self._mode = mode
        self._catchall = catchall

    # --- Parsing ---

    def _coerce(self, value: Any) -> tuple[Any, bool]:
        return to_mapping(value)

    def _extract(self, value: Any) -> tuple[Any, bool]:
        if isinstance(value, Mapping):
            return value, True
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return to_mapping(value)
        return value, False

    def _parse_inner(self, payload: ParsePayload) -> None:
        source = payload.value
        out = validate_fields(self._shape, source, payload)
        extra = [k for k in source if k not in self._shape]
        if extra:
            if self._catchall is not None:
                for key in extra:
                    child = run_child(self._catchall, payload, source[key], key)
                    if not child.issues:
                        out[key] = child.value
            elif self._mode == STRICT:
                payload.add_issue(IssueCode.UNRECOGNIZED_KEYS, properties={"keys": extra})
            elif self._mode == LOOSE:
                for key in extra:
                    out[key] = source[key]
        payload.value = out

    # --- Introspection ---

    @property
    def shape(self) -> dict[str, ZodType]:
        """A copy of the shape mapping."""
        return dict(self._shape)

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def catchall_schema(self) -> ZodType | None:
        return self._catchall

    def keyof(self):
        """Enum of the shape's keys."""
        from .literals import ZodEnum
        if not self._shape:
            raise ValueError("keyof requires a non-empty shape")
        return ZodEnum.create(list(self._shape))

    # --- Derivation ---

    def _derive(self: O, shape: Mapping[str, ZodType] | None = None, **changes: Any) -> O:
        new = self._clone(**{k: v for k, v in changes.items() if k not in ("mode", "catchall")})
        if shape is not None:
            new._shape = _freeze_shape(shape)
        if "mode" in changes:
            new._mode = changes["mode"]
        if "catchall" in changes:
            new._catchall = changes["catchall"]
        return new

    def _refined(self) -> bool:
        return bool(self._internals.checks)

    def _check_keys(self, keys: Iterable[str], op: str) -> list[str]:
        keys = list(keys)
        unknown = [k for k in keys if k not in self._shape]
        if unknown:
            raise ValueError(f"{op}: unknown key(s): {', '.join(unknown)}")
        return keys

    def strict(self: O) -> O:
        return self._derive(mode=STRICT, catchall=None)

    def strip(self: O) -> O:
        return self._derive(mode=STRIP, catchall=None)

    def loose(self: O) -> O:
        return self._derive(mode=LOOSE, catchall=None)

    passthrough = loose

    def catchall(self: O, schema: ZodType) -> O:
        return self._derive(catchall=ensure_schema(schema, "catchall"))

    def pick(self: O, *keys: str) -> O:
        """Keep only ``keys``.

        Raises:
            ValueError: On unknown keys or when the object has refinements.
        """
        if self._refined():
            raise ValueError("pick cannot be used on an object with refinements")
        keys = self._check_keys(keys, "pick")
        return self._derive({k: self._shape[k] for k in keys})

    def omit(self: O, *keys: str) -> O:
        """Drop ``keys``.

        Raises:
            ValueError: On unknown keys or when the object has refinements.
        """
        if self._refined():
            raise ValueError("omit cannot be used on an object with refinements")
        dropped = set(self._check_keys(keys, "omit"))
        return self._derive({k: v for k, v in self._shape.items() if k not in dropped})

    def extend(self: O, extra: Mapping[str, ZodType]) -> O:
        """Add fields; later keys overwrite earlier ones.

        Raises:
            ValueError: If the object has refinements and ``extra``
                overwrites an existing key (use ``safe_extend``).
        """
        if self._refined():
            clash = [k for k in extra if k in self._shape]
            if clash:
                raise ValueError(
                    f"extend would overwrite key(s) {', '.join(clash)} on a refined object; use safe_extend"
                )
        return self._derive({**self._shape, **extra})

    def safe_extend(self: O, extra: Mapping[str, ZodType]) -> O:
        return self._derive({**self._shape, **extra})

    def merge(self: O, other: ZodObject) -> O:
        """Union of both shapes (``other`` wins); unknown-key mode from ``other``."""
        if not isinstance(other, ZodObject):
            raise TypeError(f"merge requires an object schema, got {type(other).__name__}")
        return self._derive({**self._shape, **other._shape}, mode=other._mode, catchall=other._catchall)

    def partial(self: O, *keys: str) -> O:
        """Make ``keys`` (or every key) optional."""
        targets = set(self._check_keys(keys, "partial")) if keys else set(self._shape)
        return self._derive({k: (s.optional() if k in targets else s) for k, s in self._shape.items()})

    def required(self: O, *keys: str) -> O:
        """Make ``keys`` (or every key) required."""
        targets = set(self._check_keys(keys, "required")) if keys else set(self._shape)
        return self._derive({k: (s.non_optional() if k in targets else s) for k, s in self._shape.items()})

    def property(self: O, key: str, schema: ZodType, params: Params = None) -> O:
        """Check one output property against an extra schema."""
        from .params import normalize_params
        ensure_schema(schema)

        def run(payload: ParsePayload) -> None:
            run_child(schema, payload, payload.value.get(key), key)

        return self._with_check(Check("property", run, normalize_params(params)))

    @classmethod
    def create(
        cls,
        shape: Mapping[str, ZodType] | None = None,
        params: Params = None,
        *,
        mode: str = STRIP,
        constraint: Constraint = Constraint.VALUE,
    ) -> ZodObject:
        internals, p = base_internals(ZodTypeCode.OBJECT, params, constraint=constraint)
        return register_description(cls(internals, shape, mode), p)


# --- Struct ---

def _field_keys(cls: type) -> dict[str, str]:
    """Map each init field name to its input key (alias or name)."""
    return {
        f.name: f.metadata.get("alias", f.name)
        for f in dataclasses.fields(cls)
        if f.init
    }


class ZodStruct(ZodType[Any]):
    """Schema for a dataclass type.

    The shape is keyed by field name. Fields without a shape entry are taken
    over unvalidated. In partial mode, every field not listed in
    ``partial_exceptions`` may be missing.
    """

    _checks_first = False
    _origin = "struct"

    def __init__(
        self,
        internals,
        cls: type,
        shape: Mapping[str, ZodType] | None = None,
        strict: bool = False,
        partial: bool = False,
        partial_exceptions: frozenset[str] = frozenset(),
    ) -> None:
        super().__init__(internals)
        self._cls = cls
        self._keys = _field_keys(cls)
        self._shape = _freeze_shape(shape)
        unknown = [k for k in self._shape if k not in self._keys]
        if unknown:
            raise ValueError(f"{cls.__name__} has no init field(s): {', '.join(unknown)}")
        self._strict = strict
        self._partial = partial
        self._partial_exceptions = frozenset(partial_exceptions)

    @property
    def _expected(self) -> str:
        return self._cls.__name__

    @property
    def cls(self) -> type:
        return self._cls

    @property
    def shape(self) -> dict[str, ZodType]:
        return dict(self._shape)

    @property
    def field_keys(self) -> dict[str, str]:
        """Field name to input key (the alias when one is set)."""
        return dict(self._keys)

    @property
    def is_strict(self) -> bool:
        return self._strict

    @property
    def is_partial(self) -> bool:
        return self._partial

    @property
    def partial_exceptions(self) -> frozenset[str]:
        return self._partial_exceptions

    def _extract(self, value: Any) -> tuple[Any, bool]:
        return value, isinstance(value, (self._cls, Mapping))

    def _source(self, value: Any) -> tuple[dict[str, Any], list[Any]]:
        """Field-name keyed view of the input plus any unknown mapping keys."""
        if isinstance(value, self._cls):
            return {name: getattr(value, name) for name in self._keys}, []
        by_key = {key: name for name, key in self._keys.items()}
        source: dict[str, Any] = {}
        extra: list[Any] = []
        for key, item in value.items():
            if key in by_key:
                source[by_key[key]] = item
            elif key in self._keys:
                source[key] = item
            else:
                extra.append(key)
        return source, extra

    def _parse_inner(self, payload: ParsePayload) -> None:
        original = payload.value
        source, extra = self._source(original)
        optional_keys: set[str] = set()
        if self._partial:
            optional_keys = set(self._keys) - self._partial_exceptions
        segments = None if isinstance(original, self._cls) else self._keys
        validated = validate_fields(self._shape, source, payload, optional_keys, segments)
        if extra and self._strict:
            payload.add_issue(IssueCode.UNRECOGNIZED_KEYS, properties={"keys": extra})
        if payload.issues:
            return
        values = {k: v for k, v in source.items() if k not in self._shape}
        values.update(validated)
        try:
            if isinstance(original, self._cls):
                payload.value = dataclasses.replace(original, **values)
            else:
                for name in optional_keys:
                    if name not in values and not _has_field_default(self._cls, name):
                        values[name] = None
                payload.value = self._cls(**values)
        except TypeError as exc:
            payload.add_issue(
                IssueCode.TYPE_CONVERSION,
                expected=self._cls.__name__,
                received="object",
                properties={"reason": str(exc)},
            )

    def _derive(self, **changes: Any) -> ZodStruct:
        new = self._clone()
        for name, value in changes.items():
            setattr(new, f"_{name}", value)
        return new

    def strict(self) -> ZodStruct:
        """Report unknown mapping keys instead of dropping them."""
        return self._derive(strict=True)

    def strip(self) -> ZodStruct:
        return self._derive(strict=False)

    def partial(self, *keys: str) -> ZodStruct:
        """Allow ``keys`` (or every field) to be missing."""
        unknown = [k for k in keys if k not in self._keys]
        if unknown:
            raise ValueError(f"partial: unknown field(s): {', '.join(unknown)}")
        exceptions = frozenset(self._keys) - set(keys) if keys else frozenset()
        return self._derive(partial=True, partial_exceptions=exceptions)

    def required(self, *keys: str) -> ZodStruct:
        """Leave partial mode, or keep ``keys`` required while partial."""
        unknown = [k for k in keys if k not in self._keys]
        if unknown:
            raise ValueError(f"required: unknown field(s): {', '.join(unknown)}")
        if not keys:
            return self._derive(partial=False, partial_exceptions=frozenset())
        if self._partial:
            return self._derive(partial_exceptions=self._partial_exceptions | set(keys))
        shape = dict(self._shape)
        for key in keys:
            if key in shape:
                shape[key] = shape[key].non_optional()
        return self._derive(shape=_freeze_shape(shape))

    def extend(self, extra: Mapping[str, ZodType]) -> ZodStruct:
        unknown = [k for k in extra if k not in self._keys]
        if unknown:
            raise ValueError(f"{self._cls.__name__} has no init field(s): {', '.join(unknown)}")
        return self._derive(shape=_freeze_shape({**self._shape, **extra}))

    @classmethod
    def create(
        cls,
        struct_cls: type,
        shape: Mapping[str, ZodType] | None = None,
        params: Params = None,
        *,
        constraint: Constraint = Constraint.VALUE,
    ) -> ZodStruct:
        if not (isinstance(struct_cls, type) and dataclasses.is_dataclass(struct_cls)):
            raise TypeError(f"struct requires a dataclass type, got {struct_cls!r}")
        internals, p = base_internals(ZodTypeCode.STRUCT, params, constraint=constraint)
        return register_description(cls(internals, struct_cls, shape), p)


def _has_field_default(cls: type, name: str) -> bool:
    for f in dataclasses.fields(cls):
        if f.name == name:
            return f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING
    return False
