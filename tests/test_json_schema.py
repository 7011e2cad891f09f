"""Tests for JSON Schema export."""

from dataclasses import dataclass, field

import pytest
from jsonschema import Draft202012Validator

import pyzod as z
from pyzod.json_schema import DRAFT_2020_12


@dataclass
class Account:
    login: str = field(metadata={"alias": "userName"})
    active: bool = True


def _body(schema):
    doc = z.to_json_schema(schema)
    assert doc.pop("$schema") == DRAFT_2020_12
    return doc


class TestScalars:
    def test_string_with_length(self):
        assert _body(z.string().min(1).max(5)) == {"type": "string", "minLength": 1, "maxLength": 5}

    def test_string_formats(self):
        assert _body(z.string().email())["format"] == "email"
        assert _body(z.string().url())["format"] == "uri"
        assert _body(z.string().iso_datetime())["format"] == "date-time"
        assert _body(z.string().base64())["contentEncoding"] == "base64"

    def test_id_and_text_formats(self):
        assert _body(z.string().ulid())["pattern"] == "^[0-9A-HJKMNP-TV-Za-hjkmnp-tv-z]{26}$"
        assert _body(z.string().nanoid())["pattern"] == "^[a-zA-Z0-9_-]{21}$"
        assert _body(z.string().jwt())["format"] == "jwt"
        assert _body(z.string().emoji())["format"] == "emoji"

    def test_stringbool(self):
        assert _body(z.stringbool()) == {"type": "string"}
        doc = _body(z.stringbool(truthy=["Y"], falsy=["N"], case="sensitive"))
        assert doc == {"type": "string", "enum": ["Y", "N"]}

    def test_patterns(self):
        doc = _body(z.string().regex(r"^a").ends_with("z"))
        assert doc["pattern"] == "^a"
        assert doc["allOf"] == [{"pattern": "z$"}]

    def test_integer_bounds_tightened(self):
        doc = _body(z.integer().min(18).lt(100))
        assert doc["type"] == "integer"
        assert doc["minimum"] == 18
        assert doc["exclusiveMaximum"] == 100
        assert "maximum" not in doc

    def test_sized_integer_range(self):
        assert _body(z.uint8()) == {"type": "integer", "minimum": 0, "maximum": 255}

    def test_number_multiple_of(self):
        doc = _body(z.float64().multiple_of(0.5))
        assert doc == {"type": "number", "multipleOf": 0.5}

    def test_misc(self):
        assert _body(z.boolean()) == {"type": "boolean"}
        assert _body(z.nil()) == {"type": "null"}
        assert _body(z.any()) == {}
        assert _body(z.never()) == {"not": {}}

    def test_literal_and_enum(self):
        assert _body(z.literal("a")) == {"const": "a"}
        assert _body(z.literal("a", "b")) == {"enum": ["a", "b"]}
        assert _body(z.enum("x", "y")) == {"enum": ["x", "y"]}

    def test_nilable(self):
        assert _body(z.boolean().nilable()) == {"anyOf": [{"type": "boolean"}, {"type": "null"}]}

    def test_default_and_meta(self):
        doc = _body(z.string().default("guest").describe("user name").meta(title="Name", examples=["ada"]))
        assert doc["default"] == "guest"
        assert doc["description"] == "user name"
        assert doc["title"] == "Name"
        assert doc["examples"] == ["ada"]


class TestContainers:
    def test_object(self):
        schema = z.object({"name": z.string(), "age": z.integer().min(18).optional()})
        doc = _body(schema)
        assert doc["type"] == "object"
        assert doc["required"] == ["name"]
        assert doc["properties"]["age"]["minimum"] == 18
        assert "additionalProperties" not in doc

    def test_object_modes(self):
        assert _body(z.strict_object({}))["additionalProperties"] is False
        assert _body(z.loose_object({}))["additionalProperties"] is True
        doc = _body(z.object({}).catchall(z.integer()))
        assert doc["additionalProperties"]["type"] == "integer"

    def test_struct_uses_aliases(self):
        doc = _body(z.struct(Account, {"login": z.string().min(3)}).strict())
        assert doc["properties"]["userName"] == {"type": "string", "minLength": 3}
        assert doc["properties"]["active"] == {}
        assert doc["required"] == ["userName"]
        assert doc["additionalProperties"] is False

    def test_partial_struct_has_no_required(self):
        doc = _body(z.struct(Account, {"login": z.string()}).partial())
        assert "required" not in doc

    def test_exhaustive_record(self):
        doc = _body(z.record(z.enum("id", "name"), z.string()))
        assert doc["required"] == ["id", "name"]
        assert doc["additionalProperties"] is False
        assert set(doc["properties"]) == {"id", "name"}

    def test_open_record(self):
        doc = _body(z.record(z.string().min(2), z.integer()).min(1))
        assert doc["propertyNames"] == {"type": "string", "minLength": 2}
        assert doc["additionalProperties"]["type"] == "integer"
        assert doc["minProperties"] == 1

    def test_slice_and_set(self):
        doc = _body(z.slice(z.string()).min(1))
        assert doc == {"type": "array", "items": {"type": "string"}, "minItems": 1}
        assert _body(z.set(z.string()))["uniqueItems"] is True

    def test_tuple(self):
        doc = _body(z.tuple([z.string(), z.boolean().optional()]))
        assert doc["prefixItems"] == [{"type": "string"}, {"type": "boolean"}]
        assert doc["items"] is False
        assert doc["minItems"] == 1
        assert doc["maxItems"] == 2

    def test_array(self):
        doc = _body(z.array(z.string(), 3))
        assert doc["minItems"] == doc["maxItems"] == 3


class TestComposition:
    def test_union(self):
        assert _body(z.union([z.string(), z.boolean()])) == {
            "anyOf": [{"type": "string"}, {"type": "boolean"}],
        }

    def test_discriminated_union(self):
        schema = z.discriminated_union("type", [
            z.object({"type": z.literal("a")}),
            z.object({"type": z.literal("b")}),
        ])
        doc = _body(schema)
        assert [o["properties"]["type"] for o in doc["oneOf"]] == [{"const": "a"}, {"const": "b"}]

    def test_intersection(self):
        doc = _body(z.intersection(z.object({"a": z.string()}), z.object({"b": z.string()})))
        assert len(doc["allOf"]) == 2

    def test_pipe_describes_input(self):
        assert _body(z.string().pipe(z.string().min(1))) == {"type": "string"}

    def test_lazy_uses_defs(self):
        node = z.lazy(lambda: z.object({"children": z.slice(node)}))
        doc = _body(node)
        assert doc["$ref"] == "#/$defs/schema0"
        children = doc["$defs"]["schema0"]["properties"]["children"]
        assert children["items"] == {"$ref": "#/$defs/schema0"}


class TestUnsupported:
    @pytest.mark.parametrize("schema", [
        z.string().transform(len),
        z.time(),
        z.complex128(),
        z.map(z.integer(), z.string()),
        z.custom(callable),
        z.instance_of(int),
    ])
    def test_raises(self, schema):
        with pytest.raises(ValueError):
            z.to_json_schema(schema)

    def test_non_json_default(self):
        with pytest.raises(ValueError):
            z.to_json_schema(z.set(z.integer()).default({1}))

    def test_not_a_schema(self):
        with pytest.raises(TypeError):
            z.to_json_schema({"type": "string"})


class TestDocumentsValidate:
    def test_exported_document_accepts_valid_data(self):
        schema = z.object({
            "name": z.string().min(1),
            "age": z.integer().min(0),
            "tags": z.slice(z.string()),
            "role": z.enum("admin", "user").optional(),
        })
        validator = Draft202012Validator(z.to_json_schema(schema))
        good = {"name": "Ada", "age": 36, "tags": []}
        assert validator.is_valid(good)
        assert schema.safe_parse(good).success
        bad = {"name": "", "age": -1, "tags": [1]}
        assert not validator.is_valid(bad)
        assert not schema.safe_parse(bad).success

    def test_recursive_document(self):
        node = z.lazy(lambda: z.object({"name": z.string(), "children": z.slice(node)}))
        validator = Draft202012Validator(z.to_json_schema(node))
        assert validator.is_valid({"name": "a", "children": [{"name": "b", "children": []}]})
        assert not validator.is_valid({"name": "a", "children": [{"name": 1, "children": []}]})
