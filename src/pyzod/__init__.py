"""pyzod: runtime schema validation with composable, Zod-style schemas."""

import logging

from . import coerce
from .builders import (
    any, array, bigint, bigint_ptr, boolean, boolean_ptr, check,
    complex64, complex64_ptr, complex128, complex128_ptr,
    custom, discriminated_union, enum, float32, float32_ptr, float64, float64_ptr,
    int8, int8_ptr, int16, int16_ptr, int32, int32_ptr, int64, int64_ptr,
    instance_of, integer, integer_ptr, intersection, lazy, literal, loose_object, loose_record,
    map, map_ptr, never, nil, nilable, non_optional, nullish, number, number_ptr,
    object, object_ptr, optional, partial_record, pipe, record, record_ptr,
    set, slice, slice_ptr, strict_object, string, string_ptr, stringbool, struct, struct_ptr,
    time, time_ptr, transform, tuple, uint, uint_ptr, uint8, uint8_ptr,
    uint16, uint16_ptr, uint32, uint32_ptr, uint64, uint64_ptr, union, unknown, xor,
)
from .checks import Check
from .config import (
    Config, configure, get_config, reset_config,
    config_to_dict, config_from_dict, config_from_json, config_from_yaml, load_config,
)
from .context import ParseContext, ParsePayload, RefinementContext
from .internals import Constraint, SchemaInternals, ZodTypeCode
from .issues import (
    ErrorTree, FlattenedError, Issue, IssueCode, RawIssue, SchemaDefinitionError, ZodError,
    flatten_error, format_error, format_path, prettify_error, treeify_error,
)
from .json_schema import to_json_schema
from .literals import ZodEnum, ZodLiteral
from .locales import available_locales, get_locale, register_locale
from .numbers import ZodBigInt, ZodComplex, ZodFloat, ZodInteger
from .objects import ZodObject, ZodStruct
from .params import SchemaParams
from .primitives import ZodAny, ZodBool, ZodCustom, ZodNever, ZodNil, ZodStringBool, ZodUnknown
from .records import ZodMap, ZodRecord
from .registry import GLOBAL_REGISTRY, GlobalMeta, Registry
from .schema import SafeParseResult, ZodType
from .sequences import ZodArray, ZodSet, ZodSlice, ZodTuple
from .strings import ZodString
from .temporal import ZodTime
from .unions import ZodDiscriminatedUnion, ZodIntersection, ZodUnion, ZodXor
from .wrappers import ZodLazy, ZodPipe, ZodTransform

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__all__ = [
    "coerce",
    "any", "array", "bigint", "bigint_ptr", "boolean", "boolean_ptr", "check",
    "complex64", "complex64_ptr", "complex128", "complex128_ptr",
    "custom", "discriminated_union", "enum", "float32", "float32_ptr", "float64", "float64_ptr",
    "int8", "int8_ptr", "int16", "int16_ptr", "int32", "int32_ptr", "int64", "int64_ptr",
    "instance_of", "integer", "integer_ptr", "intersection", "lazy", "literal", "loose_object", "loose_record",
    "map", "map_ptr", "never", "nil", "nilable", "non_optional", "nullish", "number", "number_ptr",
    "object", "object_ptr", "optional", "partial_record", "pipe", "record", "record_ptr",
    "set", "slice", "slice_ptr", "strict_object", "string", "string_ptr", "stringbool", "struct", "struct_ptr",
    "time", "time_ptr", "transform", "tuple", "uint", "uint_ptr", "uint8", "uint8_ptr",
    "uint16", "uint16_ptr", "uint32", "uint32_ptr", "uint64", "uint64_ptr", "union", "unknown", "xor",
    "Check",
    "Config", "configure", "get_config", "reset_config",
    "config_to_dict", "config_from_dict", "config_from_json", "config_from_yaml", "load_config",
    "ParseContext", "ParsePayload", "RefinementContext",
    "Constraint", "SchemaInternals", "ZodTypeCode",
    "ErrorTree", "FlattenedError", "Issue", "IssueCode", "RawIssue", "SchemaDefinitionError", "ZodError",
    "flatten_error", "format_error", "format_path", "prettify_error", "treeify_error",
    "to_json_schema",
    "available_locales", "get_locale", "register_locale",
    "SchemaParams",
    "GLOBAL_REGISTRY", "GlobalMeta", "Registry",
    "SafeParseResult", "ZodType",
    "ZodAny", "ZodArray", "ZodBigInt", "ZodBool", "ZodComplex", "ZodCustom", "ZodDiscriminatedUnion",
    "ZodEnum", "ZodFloat", "ZodInteger", "ZodIntersection", "ZodLazy", "ZodLiteral",
    "ZodMap", "ZodNever", "ZodNil", "ZodObject", "ZodPipe", "ZodRecord", "ZodSet",
    "ZodSlice", "ZodString", "ZodStringBool", "ZodStruct", "ZodTime", "ZodTransform", "ZodTuple",
    "ZodUnion", "ZodUnknown", "ZodXor",
]
