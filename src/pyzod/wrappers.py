"""Wrapper schemas: transform, pipe and lazy."""

from __future__ import annotations

import contextvars
import dataclasses
import inspect
import logging
import threading
from typing import Any, Callable

from .config import get_config
from .context import ParsePayload, RefinementContext
from .engine import run
from .internals import Constraint, ZodTypeCode
from .issues import IssueCode, format_path
from .params import Params
from .schema import ZodType, base_internals, ensure_schema, register_description

logger = logging.getLogger(__name__)

TransformFn = Callable[[Any, RefinementContext], Any]


def _accepts_context(fn: Callable[..., Any]) -> bool:
    try:
        params = list(inspect.signature(fn).parameters.values())
    except (TypeError, ValueError):
        return False
    positional = [
        p for p in params
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    has_varargs = any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params)
    return has_varargs or len(positional) >= 2


class ZodTransform(ZodType[Any]):
    """Runs the inner schema, then ``fn(value, ctx)`` on its output.

    ``fn`` may also take just the value. Issues added through ``ctx`` fail
    the parse; exceptions raised by ``fn`` propagate to the caller.
    """

    _accepts_nil = True
    _checks_first = False

    def __init__(self, internals, inner: ZodType, fn: TransformFn) -> None:
        super().__init__(internals)
        self._inner = inner
        self._fn = fn

    @property
    def inner(self) -> ZodType:
        return self._inner

    def _optional_in(self) -> bool:
        return super()._optional_in() or self._inner._optional_in()

    def _parse_inner(self, payload: ParsePayload) -> None:
        child = run(self._inner, payload.derive(payload.value))
        payload.merge(child)
        if child.issues:
            return
        payload.value = child.value
        result = self._fn(child.value, RefinementContext(payload))
        if not payload.issues:
            payload.value = result

    @classmethod
    def create(cls, inner: ZodType, fn: Callable[..., Any], params: Params = None) -> ZodTransform:
        ensure_schema(inner, "transform input")
        if not callable(fn):
            raise TypeError("transform requires a callable")
        if not _accepts_context(fn):
            single = fn

            def fn(value: Any, _ctx: RefinementContext) -> Any:
                return single(value)

        internals, p = base_internals(ZodTypeCode.TRANSFORM, params, constraint=Constraint.ANY)
        return register_description(cls(internals, inner, fn), p)


class ZodPipe(ZodType[Any]):
    """Feeds the output of ``in_`` into ``out``; both report at the same path."""

    _accepts_nil = True
    _checks_first = False

    def __init__(self, internals, in_: ZodType, out: ZodType) -> None:
        super().__init__(internals)
        self._in = in_
        self._out = out

    @property
    def in_(self) -> ZodType:
        return self._in

    @property
    def out(self) -> ZodType:
        return self._out

    def _optional_in(self) -> bool:
        return super()._optional_in() or self._in._optional_in()

    def _parse_inner(self, payload: ParsePayload) -> None:
        first = run(self._in, payload.derive(payload.value))
        payload.merge(first)
        if first.issues:
            return
        second = run(self._out, payload.derive(first.value))
        payload.merge(second)
        if not second.issues:
            payload.value = second.value

    @classmethod
    def create(cls, in_: ZodType, out: ZodType, params: Params = None) -> ZodPipe:
        ensure_schema(in_, "pipe input")
        ensure_schema(out, "pipe output")
        internals, p = base_internals(ZodTypeCode.PIPE, params, constraint=Constraint.ANY)
        return register_description(cls(internals, in_, out), p)


_lazy_depth: contextvars.ContextVar[int] = contextvars.ContextVar("pyzod_lazy_depth", default=0)
_lazy_active: contextvars.ContextVar[frozenset] = contextvars.ContextVar("pyzod_lazy_active", default=frozenset())


def _is_container(value: Any) -> bool:
    if isinstance(value, (dict, list, set)):
        return True
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


class ZodLazy(ZodType[Any]):
    """Defers building the inner schema, enabling recursive definitions.

    The getter runs once, on first use, under a lock. At parse time a guard
    reports ``invalid_schema`` when nesting exceeds ``Config.max_lazy_depth``
    or the same container object is revisited through this schema.

    Example:
        >>> import pyzod as z
        >>> node = z.lazy(lambda: z.object({"children": z.slice(node)}))
        >>> node.parse({"children": [{"children": []}]})
        {'children': [{'children': []}]}
    """

    _accepts_nil = True
    _checks_first = False

    def __init__(self, internals, getter: Callable[[], ZodType]) -> None:
        super().__init__(internals)
        self._getter = getter
        self._lock = threading.Lock()
        self._resolved: ZodType | None = None

    def resolve(self) -> ZodType:
        if self._resolved is None:
            with self._lock:
                if self._resolved is None:
                    schema = ensure_schema(self._getter(), "lazy getter result")
                    logger.debug("Resolved lazy schema to %r", schema)
                    self._resolved = schema
        return self._resolved

    def _optional_in(self) -> bool:
        return super()._optional_in() or self.resolve()._optional_in()

    def _parse_inner(self, payload: ParsePayload) -> None:
        inner = self.resolve()
        depth = _lazy_depth.get()
        active = _lazy_active.get()
        key = (id(self._getter), id(payload.value))
        cycle = _is_container(payload.value) and key in active
        if cycle or depth >= get_config().max_lazy_depth:
            reason = "cycle" if cycle else "depth"
            logger.warning(
                "Lazy schema recursion guard tripped (%s) at %s",
                reason, format_path(payload.path) or "<root>",
            )
            payload.add_issue(IssueCode.INVALID_SCHEMA, properties={"reason": reason, "depth": depth})
            return
        depth_token = _lazy_depth.set(depth + 1)
        active_token = _lazy_active.set(active | {key} if _is_container(payload.value) else active)
        try:
            child = run(inner, payload.derive(payload.value))
        finally:
            _lazy_active.reset(active_token)
            _lazy_depth.reset(depth_token)
        payload.merge(child)
        if not child.issues:
            payload.value = child.value

    @classmethod
    def create(cls, getter: Callable[[], ZodType], params: Params = None) -> ZodLazy:
        if not callable(getter):
            raise TypeError("lazy requires a callable returning a schema")
        internals, p = base_internals(ZodTypeCode.LAZY, params)
        return register_description(cls(internals, getter), p)
