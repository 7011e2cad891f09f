"""JSON Schema (Draft 2020-12) export.

``to_json_schema`` describes the *input* a schema accepts. Families with no
JSON counterpart (complex numbers, datetimes, maps with arbitrary keys,
transforms) raise ``ValueError``. Recursive schemas built with ``lazy`` are
emitted once under ``$defs`` and referenced with ``$ref``.

The produced document is checked against the Draft 2020-12 metaschema with
``jsonschema`` before it is returned.

Example:
    >>> import pyzod as z
    >>> z.to_json_schema(z.object({"name": z.string().min(1)}))["properties"]
    {'name': {'type': 'string', 'minLength': 1}}
"""

from __future__ import annotations

import enum
import logging
import re
from typing import Any

from jsonschema import Draft202012Validator

from .formats import ID_PATTERNS
from .internals import ZodTypeCode
from .literals import ZodEnum, ZodLiteral
from .numbers import FLOAT32_MAX, ZodBigInt, ZodComplex, ZodFloat, ZodInteger
from .objects import LOOSE as OBJECT_LOOSE, STRICT as OBJECT_STRICT, ZodObject, ZodStruct
from .primitives import ZodAny, ZodBool, ZodCustom, ZodNever, ZodNil, ZodStringBool
from .records import EXHAUSTIVE, LOOSE as RECORD_LOOSE, ZodMap, ZodRecord, finite_keys
from .registry import GLOBAL_REGISTRY
from .schema import ZodType, ensure_schema
from .sequences import ZodSet, ZodSlice, ZodTuple
from .strings import ZodString
from .temporal import ZodTime
from .unions import ZodDiscriminatedUnion, ZodIntersection, ZodUnion, ZodXor
from .wrappers import ZodLazy, ZodPipe, ZodTransform

logger = logging.getLogger(__name__)

DRAFT_2020_12 = "https://json-schema.org/draft/2020-12/schema"

_STRING_FORMATS = {
    "email": "email",
    "url": "uri",
    "uuid": "uuid",
    "ipv4": "ipv4",
    "ipv6": "ipv6",
    "iso_date": "date",
    "iso_datetime": "date-time",
    "emoji": "emoji",
    "jwt": "jwt",
}

_PATTERN_FORMATS = {
    "starts_with": lambda d: "^" + re.escape(d["prefix"]),
    "ends_with": lambda d: re.escape(d["suffix"]) + "$",
    "includes": lambda d: re.escape(d["includes"]),
    "hex": lambda d: "^[0-9a-fA-F]*$",
    "lowercase": lambda d: "^[^A-Z]*$",
    "uppercase": lambda d: "^[^a-z]*$",
    "cidrv4": lambda d: r"^(\d{1,3}\.){3}\d{1,3}/\d{1,2}$",
}


def to_json_schema(schema: ZodType) -> dict[str, Any]:
    """Convert a schema to a Draft 2020-12 JSON Schema document.

    Args:
        schema: The schema to describe.

    Returns:
        A JSON-serializable dict with ``$schema`` set.

    Raises:
        TypeError: If ``schema`` is not a pyzod schema.
        ValueError: If the schema contains a family without a JSON Schema
            counterpart, or a literal/default value that is not JSON data.
        jsonschema.exceptions.SchemaError: If the produced document does not
            satisfy the metaschema.
    """
    converter = _Converter()
    body = converter.convert(ensure_schema(schema))
    doc: dict[str, Any] = {"$schema": DRAFT_2020_12, **body}
    if converter.defs:
        doc["$defs"] = converter.defs
    Draft202012Validator.check_schema(doc)
    logger.debug("Exported JSON Schema with %d definition(s)", len(converter.defs))
    return doc


def _json_value(value: Any, what: str) -> Any:
    if isinstance(value, enum.Enum):
        value = value.value
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (list, tuple)):
        return [_json_value(v, what) for v in value]
    if isinstance(value, dict) and all(isinstance(k, str) for k in value):
        return {k: _json_value(v, what) for k, v in value.items()}
    raise ValueError(f"{what} {value!r} is not representable in JSON Schema")


class _Converter:
    def __init__(self) -> None:
        self.defs: dict[str, Any] = {}
        self._lazy_names: dict[int, str] = {}

    def convert(self, schema: ZodType) -> dict[str, Any]:
        out = self._family(schema)
        internals = schema.internals
        if internals.nilable and out:
            out = {"anyOf": [out, {"type": "null"}]}
        if internals.has_default and internals.default_func is None:
            out["default"] = _json_value(internals.default_value, "default value")
        meta = GLOBAL_REGISTRY.get(schema)
        if meta is not None:
            if meta.title:
                out["title"] = meta.title
            if meta.description:
                out["description"] = meta.description
            if meta.examples:
                out["examples"] = [_json_value(e, "example") for e in meta.examples]
        return out

    # --- Families ---

    def _family(self, schema: ZodType) -> dict[str, Any]:
        if isinstance(schema, ZodLazy):
            return self._lazy(schema)
        if isinstance(schema, ZodBool):
            return {"type": "boolean"}
        if isinstance(schema, ZodString):
            return self._string(schema)
        if isinstance(schema, (ZodInteger, ZodBigInt)):
            return self._numeric(schema, "integer")
        if isinstance(schema, ZodFloat):
            return self._numeric(schema, "number")
        if isinstance(schema, ZodStringBool):
            if schema.case_sensitive:
                return {"type": "string", "enum": [*schema.truthy, *schema.falsy]}
            return {"type": "string"}
        if isinstance(schema, ZodNil):
            return {"type": "null"}
        if isinstance(schema, ZodNever):
            return {"not": {}}
        if isinstance(schema, ZodAny):
            return {}
        if isinstance(schema, ZodLiteral):
            values = [_json_value(v, "literal") for v in schema.values]
            return {"const": values[0]} if len(values) == 1 else {"enum": values}
        if isinstance(schema, ZodEnum):
            return {"enum": [_json_value(v, "enum value") for v in schema.values]}
        if isinstance(schema, ZodObject):
            return self._object(schema)
        if isinstance(schema, ZodStruct):
            return self._struct(schema)
        if isinstance(schema, ZodRecord):
            return self._record(schema)
        if isinstance(schema, ZodTuple):
            return self._tuple(schema)
        if isinstance(schema, ZodSlice):
            return self._sized(schema, {"type": "array", "items": self.convert(schema.element)})
        if isinstance(schema, ZodSet):
            out = {"type": "array", "uniqueItems": True, "items": self.convert(schema.element)}
            return self._sized(schema, out)
        if isinstance(schema, (ZodDiscriminatedUnion, ZodXor)):
            return {"oneOf": [self.convert(o) for o in schema.options]}
        if isinstance(schema, ZodUnion):
            return {"anyOf": [self.convert(o) for o in schema.options]}
        if isinstance(schema, ZodIntersection):
            return {"allOf": [self.convert(schema.left), self.convert(schema.right)]}
        if isinstance(schema, ZodPipe):
            return self.convert(schema.in_)
        if isinstance(schema, (ZodTransform, ZodCustom, ZodComplex, ZodTime, ZodMap)):
            raise ValueError(f"{schema.type.value} schemas have no JSON Schema representation")
        raise ValueError(f"Unsupported schema for JSON Schema export: {type(schema).__name__}")

    def _lazy(self, schema: ZodLazy) -> dict[str, Any]:
        name = self._lazy_names.get(id(schema))
        if name is None:
            name = f"schema{len(self._lazy_names)}"
            self._lazy_names[id(schema)] = name
            self.defs[name] = self.convert(schema.resolve())
        return {"$ref": f"#/$defs/{name}"}

    def _string(self, schema: ZodString) -> dict[str, Any]:
        out: dict[str, Any] = {"type": "string"}
        patterns: list[str] = []
        for check in schema.internals.checks:
            detail = check.detail
            if check.kind == "format":
                fmt = detail["format"]
                if fmt in _STRING_FORMATS:
                    out.setdefault("format", _STRING_FORMATS[fmt])
                elif fmt == "base64":
                    out["contentEncoding"] = "base64"
                elif fmt == "regex":
                    patterns.append(detail["pattern"])
                elif fmt in ID_PATTERNS:
                    patterns.append(ID_PATTERNS[fmt].pattern)
                elif fmt in _PATTERN_FORMATS:
                    patterns.append(_PATTERN_FORMATS[fmt](detail))
            else:
                _apply_length(out, check.kind, detail, "Length")
        if patterns:
            out["pattern"] = patterns[0]
            if len(patterns) > 1:
                out["allOf"] = [{"pattern": p} for p in patterns[1:]]
        return out

    def _numeric(self, schema: ZodType, json_type: str) -> dict[str, Any]:
        out: dict[str, Any] = {"type": json_type}
        for check in schema.internals.checks:
            detail = check.detail
            if check.kind == "min" and "inclusive" in detail:
                _tighten(out, detail["minimum"], detail["inclusive"], lower=True)
            elif check.kind == "max" and "inclusive" in detail:
                _tighten(out, detail["maximum"], detail["inclusive"], lower=False)
            elif check.kind == "multiple_of":
                out["multipleOf"] = detail["multiple_of"]
        if schema.type is ZodTypeCode.FLOAT32:
            _tighten(out, -FLOAT32_MAX, True, lower=True)
            _tighten(out, FLOAT32_MAX, True, lower=False)
        return out

    def _sized(self, schema: ZodType, out: dict[str, Any]) -> dict[str, Any]:
        for check in schema.internals.checks:
            _apply_length(out, check.kind, check.detail, "Items")
        return out

    def _fields(self, shape: dict[str, ZodType], keys: dict[str, str] | None = None) -> tuple[dict, list]:
        properties: dict[str, Any] = {}
        required: list[str] = []
        for name, field in shape.items():
            key = keys.get(name, name) if keys else name
            properties[key] = self.convert(field)
            if not field._optional_in():
                required.append(key)
        return properties, required

    def _object(self, schema: ZodObject) -> dict[str, Any]:
        properties, required = self._fields(schema.shape)
        out: dict[str, Any] = {"type": "object", "properties": properties}
        if required:
            out["required"] = required
        if schema.catchall_schema is not None:
            out["additionalProperties"] = self.convert(schema.catchall_schema)
        elif schema.mode == OBJECT_STRICT:
            out["additionalProperties"] = False
        elif schema.mode == OBJECT_LOOSE:
            out["additionalProperties"] = True
        return out

    def _struct(self, schema: ZodStruct) -> dict[str, Any]:
        keys = schema.field_keys
        properties, required = self._fields(schema.shape, keys)
        for name, key in keys.items():
            if name not in schema.shape:
                properties[key] = {}
        if schema.is_partial:
            exceptions = {keys[name] for name in schema.partial_exceptions}
            required = [key for key in required if key in exceptions]
        out: dict[str, Any] = {"type": "object", "properties": properties}
        if required:
            out["required"] = required
        if schema.is_strict:
            out["additionalProperties"] = False
        return out

    def _record(self, schema: ZodRecord) -> dict[str, Any]:
        value = self.convert(schema.value_schema)
        keys = finite_keys(schema.key_schema)
        out: dict[str, Any] = {"type": "object"}
        if keys is not None:
            out["properties"] = {k: value for k in keys}
            if schema.mode == EXHAUSTIVE and not schema.value_schema._optional_in():
                out["required"] = list(keys)
            if schema.mode != RECORD_LOOSE:
                out["additionalProperties"] = False
        else:
            key = self.convert(schema.key_schema)
            if key and key != {"type": "string"}:
                out["propertyNames"] = key
            out["additionalProperties"] = value
        for check in schema.internals.checks:
            _apply_length(out, check.kind, check.detail, "Properties")
        return out

    def _tuple(self, schema: ZodTuple) -> dict[str, Any]:
        out: dict[str, Any] = {"type": "array"}
        if schema.items:
            out["prefixItems"] = [self.convert(s) for s in schema.items]
        rest = schema.rest_schema
        out["items"] = self.convert(rest) if rest is not None else False
        required = schema.required_count
        if required:
            out["minItems"] = required
        if rest is None:
            out["maxItems"] = len(schema.items)
        return self._sized(schema, out)


def _apply_length(out: dict[str, Any], kind: str, detail: dict[str, Any], suffix: str) -> None:
    if kind == "min" and "minimum" in detail:
        out[f"min{suffix}"] = max(out.get(f"min{suffix}", 0), detail["minimum"])
    elif kind == "max" and "maximum" in detail:
        current = out.get(f"max{suffix}")
        out[f"max{suffix}"] = detail["maximum"] if current is None else min(current, detail["maximum"])
    elif kind == "size" and "size" in detail:
        out[f"min{suffix}"] = out[f"max{suffix}"] = detail["size"]


def _tighten(out: dict[str, Any], bound: Any, inclusive: bool, lower: bool) -> None:
    """Keep only the tightest lower (or upper) bound on ``out``."""
    inc_key, exc_key = ("minimum", "exclusiveMinimum") if lower else ("maximum", "exclusiveMaximum")
    current = out.get(inc_key, out.get(exc_key))
    if current is not None:
        tighter = bound > current if lower else bound < current
        same_but_exclusive = bound == current and not inclusive
        if not (tighter or same_but_exclusive):
            return
    out.pop(inc_key, None)
    out.pop(exc_key, None)
    out[inc_key if inclusive else exc_key] = bound
