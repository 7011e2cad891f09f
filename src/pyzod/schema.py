"""Base schema type: parse surface, family hooks and fluent modifiers.

Every schema family subclasses ``ZodType`` and overrides a handful of
hooks; the pipeline itself lives in ``engine``. Schemas are immutable once
built: each modifier returns a clone with copied internals.

Example:
    >>> import pyzod as z
    >>> name = z.string().min(3)
    >>> name.parse("Alice")
    'Alice'
    >>> name.optional().parse(None) is None
    True
    >>> name.safe_parse("Jo").success
    False
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

from . import checks as _checks
from .context import ParseContext, ParsePayload
from .engine import top_level, write_back
from .finalize import finalize_issues
from .internals import UNSET, Constraint, SchemaInternals, ZodTypeCode
from .issues import ZodError
from .params import Params, normalize_params
from .registry import GLOBAL_REGISTRY, GlobalMeta, meta_from_dict

if TYPE_CHECKING:
    from .unions import ZodIntersection, ZodUnion
    from .wrappers import ZodPipe, ZodTransform

T = TypeVar("T")
S = TypeVar("S", bound="ZodType")


@dataclass(frozen=True)
class SafeParseResult(Generic[T]):
    """Outcome of ``safe_parse``: either ``data`` or ``error`` is set."""

    success: bool
    data: T | None = None
    error: ZodError | None = None

    def __bool__(self) -> bool:
        return self.success


class ZodType(Generic[T]):
    """Common base of all schemas.

    Subclasses customise parsing through these hooks:

    - ``_coerce(value) -> (value, ok)`` for coercion-capable families,
    - ``_extract(value) -> (value, ok)`` for the type check,
    - ``_parse_inner(payload)`` for container recursion,
    - ``_write_back(original, result, overwritten)`` for reference egress,
    - ``_accepts_nil`` / ``_checks_first`` class flags, and
      ``_deferred_checks``: check kinds that a checks-first family holds
      back until its children have passed.
    """

    _accepts_nil = False
    _checks_first = True
    _deferred_checks: frozenset[str] = frozenset()
    _origin = "value"

    def __init__(self, internals: SchemaInternals) -> None:
        self._internals = internals

    def __repr__(self) -> str:
        flags = [
            name
            for name in ("optional", "nilable", "non_optional", "exact_optional", "coerce")
            if getattr(self._internals, name)
        ]
        suffix = f" {' '.join(flags)}" if flags else ""
        return f"<{type(self).__name__} {self._internals.type.value}{suffix}>"

    # --- Hooks ---

    @property
    def _expected(self) -> str:
        return self._internals.type.value

    def _coerce(self, value: Any) -> tuple[Any, bool]:
        return value, False

    def _extract(self, value: Any) -> tuple[Any, bool]:
        return value, True

    def _parse_inner(self, payload: ParsePayload) -> None:
        return None

    def _write_back(self, original: Any, result: Any, overwritten: bool = False) -> Any:
        return write_back(original, result, overwritten)

    def _optional_in(self) -> bool:
        """Whether an absent object key may be fed to this schema as None."""
        return self._internals.accepts_missing

    # --- Parse surface ---

    def safe_parse(self, value: Any, ctx: ParseContext | None = None) -> SafeParseResult[T]:
        """Validate without raising on validation failure."""
        return self._result(value, ctx, strict=False)

    def parse(self, value: Any, ctx: ParseContext | None = None) -> T:
        """Validate and return the output.

        Raises:
            ZodError: If the value fails validation.
        """
        result = self._result(value, ctx, strict=False)
        if not result.success:
            raise result.error
        return result.data

    def parse_any(self, value: Any, ctx: ParseContext | None = None) -> Any:
        return self.parse(value, ctx)

    def safe_strict_parse(self, value: T, ctx: ParseContext | None = None) -> SafeParseResult[T]:
        return self._result(value, ctx, strict=True)

    def strict_parse(self, value: T, ctx: ParseContext | None = None) -> T:
        """Validate an input already of the schema's type (no coercion)."""
        result = self._result(value, ctx, strict=True)
        if not result.success:
            raise result.error
        return result.data

    must_parse = parse
    must_strict_parse = strict_parse

    def _result(self, value: Any, ctx: ParseContext | None, strict: bool) -> SafeParseResult[T]:
        ctx = ctx or ParseContext()
        payload = top_level(self, value, ctx, strict)
        if payload.issues:
            return SafeParseResult(False, None, ZodError(finalize_issues(payload.issues, ctx)))
        return SafeParseResult(True, payload.value, None)

    # --- Introspection ---

    @property
    def internals(self) -> SchemaInternals:
        return self._internals

    @property
    def type(self) -> ZodTypeCode:
        return self._internals.type

    @property
    def constraint(self) -> Constraint:
        return self._internals.constraint

    def is_optional(self) -> bool:
        return self._internals.accepts_missing

    def is_nilable(self) -> bool:
        return self.safe_parse(None).success

    @property
    def description(self) -> str | None:
        found = GLOBAL_REGISTRY.get(self)
        return found.description if found else None

    def get_meta(self) -> GlobalMeta | None:
        return GLOBAL_REGISTRY.get(self)

    # --- Cloning ---

    def _clone(self: S, **changes: Any) -> S:
        new = copy.copy(self)
        new._internals = self._internals.clone(**changes)
        meta = GLOBAL_REGISTRY.get(self)
        if meta is not None:
            GLOBAL_REGISTRY.add(new, meta)
        return new

    def _with_check(self: S, check: _checks.Check) -> S:
        return self._clone(checks=[*self._internals.checks, check])

    # --- Modifiers ---

    def _reference(self) -> Constraint:
        current = self._internals.constraint
        return Constraint.REFERENCE if current is Constraint.VALUE else current

    def optional(self: S) -> S:
        """Accept ``None`` and absent keys; output becomes a reference."""
        return self._clone(optional=True, non_optional=False, constraint=self._reference())

    def nilable(self: S) -> S:
        """Accept ``None`` (but not absent keys); output becomes a reference."""
        return self._clone(nilable=True, non_optional=False, constraint=self._reference())

    def nullish(self: S) -> S:
        return self._clone(optional=True, nilable=True, non_optional=False, constraint=self._reference())

    def non_optional(self: S) -> S:
        """Reject ``None`` with ``expected="nonoptional"``; output becomes a value."""
        current = self._internals.constraint
        return self._clone(
            non_optional=True,
            optional=False,
            nilable=False,
            exact_optional=False,
            constraint=Constraint.VALUE if current is Constraint.REFERENCE else current,
        )

    def exact_optional(self: S) -> S:
        """Allow the key to be absent, but reject an explicit ``None``."""
        return self._clone(exact_optional=True, non_optional=False)

    def default(self: S, value: Any) -> S:
        """Return ``value`` (unvalidated) when the input is ``None`` or missing."""
        return self._clone(default_value=value, default_func=None)

    def default_func(self: S, fn: Callable[[], Any]) -> S:
        if not callable(fn):
            raise TypeError("default_func requires a callable")
        return self._clone(default_func=fn, default_value=UNSET)

    def prefault(self: S, value: Any) -> S:
        """Parse ``value`` in place of a ``None`` or missing input."""
        return self._clone(prefault_value=value, prefault_func=None)

    def prefault_func(self: S, fn: Callable[[], Any]) -> S:
        if not callable(fn):
            raise TypeError("prefault_func requires a callable")
        return self._clone(prefault_func=fn, prefault_value=UNSET)

    def refine(self: S, fn: Callable[[T], bool], params: Params = None) -> S:
        """Add a predicate check; a falsy result is a ``custom`` issue."""
        return self._with_check(_checks.custom(fn, params))

    def refine_any(self: S, fn: Callable[[Any], bool], params: Params = None) -> S:
        """Like ``refine`` but the predicate is typed to accept any value."""
        return self._with_check(_checks.custom(fn, params))

    def overwrite(self: S, fn: Callable[[T], T]) -> S:
        """Replace the value during the check chain; the type must not change."""
        return self._with_check(_checks.overwrite(fn))

    def check(self: S, fn: Callable[[ParsePayload], None], params: Params = None) -> S:
        """Add a check that receives the payload and may add several issues."""
        return self._with_check(_checks.payload_check(fn, params))

    def with_check(self: S, *checks: _checks.Check) -> S:
        return self._clone(checks=[*self._internals.checks, *checks])

    def transform(self, fn: Callable[..., Any]) -> ZodTransform:
        from .wrappers import ZodTransform
        return ZodTransform.create(self, fn)

    def pipe(self, target: ZodType) -> ZodPipe:
        from .wrappers import ZodPipe
        return ZodPipe.create(self, target)

    def and_(self, other: ZodType) -> ZodIntersection:
        from .unions import ZodIntersection
        return ZodIntersection.create(self, other)

    def or_(self, other: ZodType) -> ZodUnion:
        from .unions import ZodUnion
        return ZodUnion.create([self, other])

    def meta(self: S, meta: GlobalMeta | dict[str, Any] | None = None, **fields: Any) -> S:
        """Clone and register merged metadata for the clone."""
        if meta is None:
            meta = GlobalMeta()
        if isinstance(meta, dict):
            meta = meta_from_dict(meta)
        if fields:
            meta = meta.merge(meta_from_dict(fields))
        new = self._clone()
        current = GLOBAL_REGISTRY.get(self) or GlobalMeta()
        GLOBAL_REGISTRY.add(new, current.merge(meta))
        return new

    def describe(self: S, text: str) -> S:
        return self.meta(GlobalMeta(description=text))


def ensure_schema(value: Any, what: str = "schema") -> ZodType:
    if not isinstance(value, ZodType):
        raise TypeError(f"{what} must be a pyzod schema, got {type(value).__name__}")
    return value


def base_internals(type_code: ZodTypeCode, params: Params = None, **fields: Any) -> tuple[SchemaInternals, Any]:
    """Internals for a new schema plus the normalized params."""
    p = normalize_params(params)
    internals = SchemaInternals(type=type_code, error=p.error_map, **fields)
    if p.abort:
        internals.bag["abort"] = True
    if p.params:
        internals.bag["params"] = dict(p.params)
    return internals, p


def register_description(schema: S, params: Any) -> S:
    if getattr(params, "description", None):
        GLOBAL_REGISTRY.add(schema, GlobalMeta(description=params.description))
    return schema
