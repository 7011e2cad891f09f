"""Metadata side table keyed by schema identity.

Metadata never lives on schema internals; ``meta()`` and ``describe()``
return a clone and register the merged metadata for it here.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
import weakref
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GlobalMeta:
    """Annotations commonly attached to schemas."""

    id: str | None = None
    title: str | None = None
    description: str | None = None
    examples: tuple[Any, ...] = ()
    extra: dict[str, Any] = field(default_factory=dict)

    def merge(self, other: GlobalMeta) -> GlobalMeta:
        """Fields set on ``other`` win; ``extra`` dicts are combined."""
        return GlobalMeta(
            id=other.id if other.id is not None else self.id,
            title=other.title if other.title is not None else self.title,
            description=other.description if other.description is not None else self.description,
            examples=other.examples or self.examples,
            extra={**self.extra, **other.extra},
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {}
        for name in ("id", "title", "description"):
            value = getattr(self, name)
            if value is not None:
                d[name] = value
        if self.examples:
            d["examples"] = list(self.examples)
        d.update(self.extra)
        return d


def meta_from_dict(d: dict[str, Any]) -> GlobalMeta:
    """Known keys fill GlobalMeta fields; everything else goes to ``extra``."""
    known = {f.name for f in dataclasses.fields(GlobalMeta)} - {"extra"}
    values = {k: v for k, v in d.items() if k in known}
    if "examples" in values:
        values["examples"] = tuple(values["examples"])
    extra = {**d.get("extra", {}), **{k: v for k, v in d.items() if k not in known and k != "extra"}}
    return GlobalMeta(**values, extra=extra)


M = TypeVar("M")


class Registry(Generic[M]):
    """Thread-safe mapping from schema to metadata.

    Keys are held weakly, so registering a schema does not keep it alive.
    """

    def __init__(self) -> None:
        self._entries: weakref.WeakKeyDictionary = weakref.WeakKeyDictionary()
        self._lock = threading.RLock()

    def add(self, schema: Any, meta: M) -> None:
        with self._lock:
            self._entries[schema] = meta
        logger.debug("Registered metadata for %s", type(schema).__name__)

    def get(self, schema: Any) -> M | None:
        with self._lock:
            return self._entries.get(schema)

    def has(self, schema: Any) -> bool:
        with self._lock:
            return schema in self._entries

    def remove(self, schema: Any) -> None:
        with self._lock:
            self._entries.pop(schema, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


GLOBAL_REGISTRY: Registry[GlobalMeta] = Registry()
