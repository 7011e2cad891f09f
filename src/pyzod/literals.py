"""Discrete-set schemas: literals and enums.

Membership compares both value and type, so ``literal(1)`` rejects ``True``
and ``1.0``.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from typing import Any

from .context import ParsePayload
from .internals import ZodTypeCode
from .issues import IssueCode
from .params import Params
from .schema import ZodType, base_internals, register_description


def _same(a: Any, b: Any) -> bool:
    return type(a) is type(b) and a == b


class ZodLiteral(ZodType[Any]):
    """Matches one of a fixed set of values."""

    _checks_first = False

    def __init__(self, internals, values: tuple[Any, ...]) -> None:
        super().__init__(internals)
        self._values = values

    @property
    def values(self) -> tuple[Any, ...]:
        return self._values

    @property
    def value(self) -> Any:
        """The single literal value (first one when several were given)."""
        return self._values[0]

    @property
    def _accepts_nil(self) -> bool:
        return any(v is None for v in self._values)

    def _parse_inner(self, payload: ParsePayload) -> None:
        if not any(_same(v, payload.value) for v in self._values):
            payload.add_issue(IssueCode.INVALID_VALUE, properties={"values": list(self._values)})

    @classmethod
    def create(cls, *values: Any, params: Params = None) -> ZodLiteral:
        if not values:
            raise ValueError("literal requires at least one value")
        internals, p = base_internals(ZodTypeCode.LITERAL, params)
        return register_description(cls(internals, tuple(values)), p)


class ZodEnum(ZodType[Any]):
    """Matches one of a named set of values.

    Built either from plain values (names are the values themselves, as
    strings) or from an ``enum.Enum`` subclass, in which case members and
    their raw values are accepted and the member is returned.
    """

    _checks_first = False

    def __init__(self, internals, entries: dict[str, Any], enum_cls: type[enum.Enum] | None = None) -> None:
        super().__init__(internals)
        self._entries = dict(entries)
        self._enum_cls = enum_cls

    @property
    def enum(self) -> dict[str, Any]:
        """Name to value mapping."""
        return dict(self._entries)

    @property
    def options(self) -> list[Any]:
        return list(self._entries.values())

    @property
    def values(self) -> tuple[Any, ...]:
        """Raw values accepted by this enum."""
        if self._enum_cls is None:
            return tuple(self._entries.values())
        return tuple(m.value for m in self._entries.values())

    @property
    def _accepts_nil(self) -> bool:
        return any(v is None for v in self.values)

    def _match(self, value: Any) -> tuple[Any, bool]:
        if self._enum_cls is not None:
            if isinstance(value, self._enum_cls) and value.name in self._entries:
                return value, True
            for member in self._entries.values():
                if _same(member.value, value):
                    return member, True
            return value, False
        for option in self._entries.values():
            if _same(option, value):
                return option, True
        return value, False

    def _parse_inner(self, payload: ParsePayload) -> None:
        matched, ok = self._match(payload.value)
        if not ok:
            payload.add_issue(IssueCode.INVALID_VALUE, properties={"values": list(self.values)})
            return
        payload.value = matched

    def _subset(self, names: list[str]) -> ZodEnum:
        new = self._clone()
        new._entries = {name: self._entries[name] for name in names}
        return new

    def extract(self, *keys: str) -> ZodEnum:
        """New enum limited to ``keys``."""
        unknown = [k for k in keys if k not in self._entries]
        if unknown:
            raise ValueError(f"Unknown enum key(s): {', '.join(map(str, unknown))}")
        return self._subset(list(keys))

    def exclude(self, *keys: str) -> ZodEnum:
        """New enum without ``keys``."""
        unknown = [k for k in keys if k not in self._entries]
        if unknown:
            raise ValueError(f"Unknown enum key(s): {', '.join(map(str, unknown))}")
        remaining = [name for name in self._entries if name not in keys]
        if not remaining:
            raise ValueError("exclude would leave the enum empty")
        return self._subset(remaining)

    @classmethod
    def create(cls, *values: Any, params: Params = None) -> ZodEnum:
        """Accepts ``create("a", "b")``, ``create(["a", "b"])``, a dict or an Enum class.

        Plain values are named by ``str(value)``, so ``create(1, 2)`` has the
        names ``"1"`` and ``"2"``. Values are unique by type and value; values
        whose names collide, such as ``1`` and ``"1"``, need a dict.
        """
        enum_cls = None
        if len(values) == 1 and isinstance(values[0], type) and issubclass(values[0], enum.Enum):
            enum_cls = values[0]
            entries = {m.name: m for m in enum_cls}
        elif len(values) == 1 and isinstance(values[0], dict):
            entries = dict(values[0])
        else:
            if len(values) == 1 and isinstance(values[0], Iterable) and not isinstance(values[0], (str, bytes)):
                values = tuple(values[0])
            entries = {}
            for i, v in enumerate(values):
                if any(_same(v, seen) for seen in values[:i]):
                    raise ValueError(f"enum values must be unique, got {v!r} twice")
                name = str(v)
                if name in entries:
                    raise ValueError(
                        f"enum values {entries[name]!r} and {v!r} share the name {name!r}; "
                        "pass a dict to name them"
                    )
                entries[name] = v
        if not entries:
            raise ValueError("enum requires at least one value")
        internals, p = base_internals(ZodTypeCode.ENUM, params)
        return register_description(cls(internals, entries, enum_cls), p)
