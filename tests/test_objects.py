"""Tests for object and struct schemas."""

from dataclasses import dataclass, field

import pytest

import pyzod as z
from pyzod import IssueCode, ZodError


@dataclass
class User:
    name: str
    nick: str = field(default="", metadata={"alias": "nickName"})
    age: int = 0


@dataclass(frozen=True)
class Point:
    x: int
    y: int


# --- Object ---

class TestObjectBasics:
    def test_valid_object(self):
        schema = z.object({"name": z.string(), "age": z.integer()})
        assert schema.parse({"name": "Ada", "age": 36}) == {"name": "Ada", "age": 36}

    def test_collects_every_field_issue(self):
        schema = z.object({
            "name": z.string().min(3),
            "age": z.integer().min(18),
            "email": z.string().email(),
        })
        with pytest.raises(ZodError) as exc_info:
            schema.parse({"name": "Jo", "age": 16, "email": "x"})
        issues = exc_info.value.issues
        assert [i.path for i in issues] == [("name",), ("age",), ("email",)]
        assert [i.code for i in issues] == [
            IssueCode.TOO_SMALL, IssueCode.TOO_SMALL, IssueCode.INVALID_FORMAT,
        ]
        assert "(and 2 more issues)" in str(exc_info.value)
        assert str(exc_info.value).startswith("Too small: expected string to have >=3 characters at name")

    def test_missing_key(self):
        with pytest.raises(ZodError) as exc_info:
            z.object({"name": z.string()}).parse({})
        issue = exc_info.value.issues[0]
        assert issue.code is IssueCode.INVALID_TYPE
        assert issue.path == ("name",)
        assert issue.received == "missing"
        assert issue.message == "Required: expected string, received nothing"

    def test_optional_key_may_be_missing(self):
        schema = z.object({"name": z.string(), "age": z.integer().optional()})
        assert schema.parse({"name": "Ada"}) == {"name": "Ada"}

    def test_default_fills_missing_key(self):
        schema = z.object({"role": z.string().default("user")})
        assert schema.parse({}) == {"role": "user"}

    def test_exact_optional(self):
        schema = z.object({"a": z.string().exact_optional()})
        assert schema.parse({}) == {}
        with pytest.raises(ZodError) as exc_info:
            schema.parse({"a": None})
        issue = exc_info.value.issues[0]
        assert issue.code is IssueCode.INVALID_TYPE
        assert issue.received == "nil"

    def test_nilable_requires_the_key(self):
        schema = z.object({"a": z.string().nilable()})
        assert schema.parse({"a": None}) == {"a": None}
        assert not schema.safe_parse({}).success

    def test_non_mapping_input(self):
        with pytest.raises(ZodError) as exc_info:
            z.object({"a": z.string()}).parse([1, 2])
        issue = exc_info.value.issues[0]
        assert issue.expected == "object"
        assert issue.received == "slice"

    def test_dataclass_instance_as_input(self):
        schema = z.object({"x": z.integer(), "y": z.integer()})
        assert schema.parse(Point(1, 2)) == {"x": 1, "y": 2}

    def test_nested_paths(self):
        schema = z.object({"users": z.slice(z.object({"email": z.string().email()}))})
        with pytest.raises(ZodError) as exc_info:
            schema.parse({"users": [{"email": "a@b.co"}, {"email": "nope"}]})
        assert exc_info.value.issues[0].path == ("users", 1, "email")

    def test_parse_is_idempotent(self):
        schema = z.object({"name": z.string().trim(), "tags": z.slice(z.string())})
        once = schema.parse({"name": "  Ada ", "tags": ["a"], "extra": True})
        assert schema.parse(once) == once

    def test_input_not_mutated(self):
        data = {"name": "Ada", "extra": 1}
        z.object({"name": z.string()}).parse(data)
        assert data == {"name": "Ada", "extra": 1}

    def test_non_string_shape_key(self):
        with pytest.raises(TypeError):
            z.object({1: z.string()})


class TestUnknownKeys:
    def test_strip_is_default(self):
        assert z.object({"a": z.string()}).parse({"a": "x", "b": 1}) == {"a": "x"}

    def test_strict(self):
        with pytest.raises(ZodError) as exc_info:
            z.strict_object({"a": z.string()}).parse({"a": "x", "b": 1})
        issue = exc_info.value.issues[0]
        assert issue.code is IssueCode.UNRECOGNIZED_KEYS
        assert issue.path == ()
        assert issue.keys == ["b"]
        assert issue.message == 'Unrecognized key: "b"'

    def test_strict_method_and_strip_method(self):
        schema = z.object({"a": z.string()}).strict()
        assert schema.mode == "strict"
        assert schema.strip().parse({"a": "x", "b": 1}) == {"a": "x"}

    def test_loose_keeps_unknown_keys(self):
        assert z.loose_object({"a": z.string()}).parse({"a": "x", "b": 1}) == {"a": "x", "b": 1}
        assert z.object({"a": z.string()}).passthrough().parse({"b": 1, "a": "x"}) == {"a": "x", "b": 1}

    def test_catchall_validates_unknown_keys(self):
        schema = z.object({"a": z.string()}).catchall(z.integer())
        assert schema.parse({"a": "x", "b": 1}) == {"a": "x", "b": 1}
        with pytest.raises(ZodError) as exc_info:
            schema.parse({"a": "x", "b": "y"})
        assert exc_info.value.issues[0].path == ("b",)


class TestObjectDerivation:
    def setup_method(self):
        self.schema = z.object({"a": z.string(), "b": z.integer(), "c": z.boolean()})

    def test_pick(self):
        assert list(self.schema.pick("a", "c").shape) == ["a", "c"]

    def test_omit(self):
        assert list(self.schema.omit("b").shape) == ["a", "c"]

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValueError, match="zz"):
            self.schema.pick("zz")
        with pytest.raises(ValueError):
            self.schema.omit("zz")
        with pytest.raises(ValueError):
            self.schema.partial("zz")

    def test_pick_omit_refuse_refined(self):
        refined = self.schema.refine(lambda d: True)
        with pytest.raises(ValueError):
            refined.pick("a")
        with pytest.raises(ValueError):
            refined.omit("a")

    def test_extend(self):
        extended = self.schema.extend({"d": z.string()})
        assert list(extended.shape) == ["a", "b", "c", "d"]
        assert "d" not in self.schema.shape

    def test_extend_refined_overwrite(self):
        refined = self.schema.refine(lambda d: True)
        with pytest.raises(ValueError, match="safe_extend"):
            refined.extend({"a": z.integer()})
        assert refined.safe_extend({"a": z.integer()}).parse({"a": 1, "b": 2, "c": True})["a"] == 1
        assert "d" in refined.extend({"d": z.string()}).shape

    def test_merge_takes_other_mode(self):
        merged = self.schema.merge(z.strict_object({"d": z.string()}))
        assert merged.mode == "strict"
        assert list(merged.shape) == ["a", "b", "c", "d"]
        with pytest.raises(TypeError):
            self.schema.merge(z.string())

    def test_partial(self):
        assert self.schema.partial().parse({}) == {}
        some = self.schema.partial("a")
        assert not some.safe_parse({}).success
        assert some.parse({"b": 1, "c": False}) == {"b": 1, "c": False}

    def test_required(self):
        schema = self.schema.partial().required("a")
        with pytest.raises(ZodError) as exc_info:
            schema.parse({})
        assert [i.path for i in exc_info.value.issues] == [("a",)]

    def test_keyof(self):
        keys = self.schema.keyof()
        assert keys.parse("b") == "b"
        assert not keys.safe_parse("z").success
        with pytest.raises(ValueError):
            z.object({}).keyof()

    def test_shape_is_a_copy(self):
        shape = self.schema.shape
        shape["zz"] = z.string()
        assert "zz" not in self.schema.shape

    def test_property_check(self):
        schema = z.object({"a": z.string()}).property("a", z.string().min(3))
        with pytest.raises(ZodError) as exc_info:
            schema.parse({"a": "ab"})
        issue = exc_info.value.issues[0]
        assert issue.path == ("a",)
        assert issue.code is IssueCode.TOO_SMALL

    def test_object_checks_run_after_fields(self):
        calls = []
        schema = z.object({"a": z.string()}).refine(lambda d: calls.append(d) or True)
        assert not schema.safe_parse({"a": 1}).success
        assert calls == []


class TestObjectPtr:
    def test_unchanged_input_keeps_identity(self):
        data = {"name": "Ada"}
        assert z.object_ptr({"name": z.string()}).parse(data) is data

    def test_stripped_keys_not_removed_from_input(self):
        data = {"name": "Ada", "extra": 1}
        out = z.object_ptr({"name": z.string().trim()}).parse(data)
        assert out == {"name": "Ada"}
        assert out is not data
        assert data == {"name": "Ada", "extra": 1}

    def test_optional_object_leaves_input_alone(self):
        data = {"name": "Ada", "extra": 1}
        assert z.object({"name": z.string()}).optional().parse(data) == {"name": "Ada"}
        assert data == {"name": "Ada", "extra": 1}

    def test_nested_optional_object_leaves_input_alone(self):
        inner = {"a": "x", "b": 2}
        schema = z.object({"inner": z.object({"a": z.string()}).optional()})
        assert schema.parse({"inner": inner}) == {"inner": {"a": "x"}}
        assert inner == {"a": "x", "b": 2}

    def test_coerced_children_not_written_back(self):
        data = {"n": "5"}
        out = z.object({"n": z.coerce.integer()}).nilable().parse(data)
        assert out == {"n": 5}
        assert data == {"n": "5"}

    def test_overwrite_refills_input(self):
        data = {"b": 1}
        out = z.object_ptr({"b": z.integer()}).overwrite(lambda d: {**d, "seen": True}).parse(data)
        assert out is data
        assert data == {"b": 1, "seen": True}

    def test_none_accepted(self):
        assert z.object_ptr({"name": z.string()}).parse(None) is None


# --- Struct ---

class TestStruct:
    def test_mapping_input(self):
        schema = z.struct(User, {"name": z.string().min(2)})
        user = schema.parse({"name": "Ada", "nickName": "ada", "age": 3})
        assert user == User(name="Ada", nick="ada", age=3)

    def test_field_name_also_accepted(self):
        user = z.struct(User).parse({"name": "Ada", "nick": "a"})
        assert user.nick == "a"

    def test_issue_path_uses_alias_for_mapping(self):
        schema = z.struct(User, {"nick": z.string().min(3)})
        with pytest.raises(ZodError) as exc_info:
            schema.parse({"name": "Ada", "nickName": "a"})
        assert exc_info.value.issues[0].path == ("nickName",)

    def test_issue_path_uses_field_name_for_instance(self):
        schema = z.struct(User, {"nick": z.string().min(3)})
        with pytest.raises(ZodError) as exc_info:
            schema.parse(User(name="Ada", nick="a"))
        assert exc_info.value.issues[0].path == ("nick",)

    def test_instance_input_returns_new_instance(self):
        original = User(name=" Ada ")
        out = z.struct(User, {"name": z.string().trim()}).parse(original)
        assert out == User(name="Ada")
        assert original.name == " Ada "

    def test_missing_shape_field(self):
        with pytest.raises(ZodError) as exc_info:
            z.struct(User, {"name": z.string()}).parse({"age": 1})
        issue = exc_info.value.issues[0]
        assert issue.path == ("name",)
        assert issue.received == "missing"
        assert issue.expected == "string"

    def test_unconstructible_input(self):
        with pytest.raises(ZodError) as exc_info:
            z.struct(User).parse({"age": 1})
        issue = exc_info.value.issues[0]
        assert issue.code is IssueCode.TYPE_CONVERSION
        assert issue.expected == "User"

    def test_wrong_type(self):
        with pytest.raises(ZodError) as exc_info:
            z.struct(User).parse("Ada")
        assert exc_info.value.issues[0].expected == "User"

    def test_strict_reports_unknown_keys(self):
        schema = z.struct(User).strict()
        assert schema.is_strict
        with pytest.raises(ZodError) as exc_info:
            schema.parse({"name": "Ada", "bogus": 1})
        assert exc_info.value.issues[0].keys == ["bogus"]
        assert z.struct(User).parse({"name": "Ada", "bogus": 1}) == User(name="Ada")

    def test_partial(self):
        schema = z.struct(User, {"name": z.string()}).partial()
        assert schema.is_partial
        assert schema.parse({}) == User(name=None)

    def test_partial_with_required_field(self):
        schema = z.struct(User, {"name": z.string()}).partial().required("name")
        assert schema.partial_exceptions == frozenset({"name"})
        with pytest.raises(ZodError) as exc_info:
            schema.parse({})
        assert exc_info.value.issues[0].path == ("name",)

    def test_required_leaves_partial_mode(self):
        schema = z.struct(User, {"name": z.string()}).partial().required()
        assert not schema.is_partial

    def test_field_keys(self):
        assert z.struct(User).field_keys == {"name": "name", "nick": "nickName", "age": "age"}

    def test_unknown_shape_field(self):
        with pytest.raises(ValueError, match="bogus"):
            z.struct(User, {"bogus": z.string()})
        with pytest.raises(ValueError):
            z.struct(User).partial("bogus")

    def test_extend(self):
        schema = z.struct(User).extend({"age": z.integer().min(18)})
        assert not schema.safe_parse({"name": "Ada", "age": 3}).success
        with pytest.raises(ValueError):
            z.struct(User).extend({"bogus": z.string()})

    def test_requires_dataclass(self):
        with pytest.raises(TypeError):
            z.struct(dict)
        with pytest.raises(TypeError):
            z.struct(User(name="x"))


class TestStructPtr:
    def test_equal_instance_keeps_identity(self):
        original = User(name="Ada")
        assert z.struct_ptr(User, {"name": z.string()}).parse(original) is original

    def test_changed_fields_not_written_back(self):
        original = User(name=" Ada ")
        out = z.struct_ptr(User, {"name": z.string().trim()}).parse(original)
        assert out == User(name="Ada")
        assert original.name == " Ada "

    def test_overwrite_updates_instance(self):
        original = User(name="ada")
        schema = z.struct_ptr(User, {"name": z.string()}).overwrite(
            lambda u: User(name=u.name.title(), nick=u.nick, age=u.age)
        )
        out = schema.parse(original)
        assert out is original
        assert original.name == "Ada"

    def test_none_accepted(self):
        assert z.struct_ptr(User).parse(None) is None

    def test_frozen_instance_replaced(self):
        original = Point(1, 2)
        out = z.struct_ptr(Point, {"x": z.integer().overwrite(lambda n: n + 1)}).parse(original)
        assert out == Point(2, 2)
        assert original == Point(1, 2)
