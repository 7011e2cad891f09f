"""Per-schema state shared by every schema family.

Internals are filled in by constructors and never touched again; modifiers
call ``clone()`` and change the copy. Family-specific definition data
(shapes, element schemas, options) lives on the schema object itself and is
stored in immutable containers.
"""

from __future__ import annotations

import copy
import dataclasses
import enum
from dataclasses import dataclass, field
from typing import Any, Callable

from .checks import Check
from .issues import ErrorMap


class ZodTypeCode(str, enum.Enum):
    """Tag naming each schema family."""
    BOOL = "bool"
    STRING = "string"
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    NUMBER = "number"
    BIGINT = "bigint"
    COMPLEX64 = "complex64"
    COMPLEX128 = "complex128"
    TIME = "time"
    NIL = "nil"
    ANY = "any"
    UNKNOWN = "unknown"
    NEVER = "never"
    LITERAL = "literal"
    ENUM = "enum"
    OBJECT = "object"
    STRUCT = "struct"
    RECORD = "record"
    MAP = "map"
    SLICE = "slice"
    ARRAY = "array"
    TUPLE = "tuple"
    SET = "set"
    UNION = "union"
    DISCRIMINATED_UNION = "discriminated_union"
    INTERSECTION = "intersection"
    XOR = "xor"
    NONOPTIONAL = "nonoptional"
    OPTIONAL = "optional"
    NILABLE = "nilable"
    DEFAULT = "default"
    PREFAULT = "prefault"
    TRANSFORM = "transform"
    PIPE = "pipe"
    STRINGBOOL = "stringbool"
    CUSTOM = "custom"
    LAZY = "lazy"

    def __str__(self) -> str:
        return self.value


class Constraint(str, enum.Enum):
    """Output flavour of a schema.

    VALUE: fresh output, ``None`` rejected unless a modifier allows it.
    REFERENCE: ``None`` accepted; the input object is returned when the
    result equals it, and is refilled only when an overwrite changed it.
    ANY: output of a transform or pipe, returned as produced.
    """
    VALUE = "value"
    REFERENCE = "reference"
    ANY = "any"


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass
class SchemaInternals:
    """Structural state of one schema instance."""

    type: ZodTypeCode
    constraint: Constraint = Constraint.VALUE
    coerce: bool = False
    optional: bool = False
    nilable: bool = False
    non_optional: bool = False
    exact_optional: bool = False
    default_value: Any = UNSET
    default_func: Callable[[], Any] | None = None
    prefault_value: Any = UNSET
    prefault_func: Callable[[], Any] | None = None
    checks: list[Check] = field(default_factory=list)
    error: ErrorMap | None = None
    bag: dict[str, Any] = field(default_factory=dict)

    def clone(self, **changes: Any) -> SchemaInternals:
        """Copy with a fresh checks list and bag; other fields are shared."""
        new = dataclasses.replace(self, **changes)
        if "checks" not in changes:
            new.checks = list(self.checks)
        if "bag" not in changes:
            new.bag = dict(self.bag)
        return new

    @property
    def has_default(self) -> bool:
        return self.default_func is not None or self.default_value is not UNSET

    @property
    def has_prefault(self) -> bool:
        return self.prefault_func is not None or self.prefault_value is not UNSET

    def resolve_default(self) -> Any:
        if self.default_func is not None:
            return self.default_func()
        return copy.copy(self.default_value)

    def resolve_prefault(self) -> Any:
        if self.prefault_func is not None:
            return self.prefault_func()
        return copy.copy(self.prefault_value)

    @property
    def accepts_missing(self) -> bool:
        """Whether an absent object key is acceptable for this schema."""
        return self.optional or self.exact_optional or self.has_default or self.has_prefault
