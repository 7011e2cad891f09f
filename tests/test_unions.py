"""Tests for union, discriminated union, intersection, xor and lazy schemas."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

import pyzod as z
from pyzod import IssueCode, SchemaDefinitionError, ZodError


def _shape_union():
    return z.discriminated_union(
        "type",
        [
            z.object({"type": z.literal("a"), "a": z.string()}),
            z.object({"type": z.literal("b"), "b": z.string()}),
        ],
    )


class TestUnion:
    def test_first_match_wins(self):
        schema = z.union([z.string().transform(lambda s: "first"), z.string()])
        assert schema.parse("x") == "first"

    def test_mixed_types(self):
        schema = z.union([z.string(), z.integer()])
        assert schema.parse("a") == "a"
        assert schema.parse(1) == 1

    def test_no_match_collects_option_issues(self):
        with pytest.raises(ZodError) as exc_info:
            z.union([z.string(), z.integer()]).parse(1.5)
        issues = exc_info.value.issues
        assert len(issues) == 1
        assert issues[0].code is IssueCode.INVALID_UNION
        assert issues[0].message == "Invalid input"
        assert [option[0].expected for option in issues[0].union_errors] == ["string", "int"]

    def test_nested_option_paths_are_absolute(self):
        schema = z.object({"v": z.union([z.object({"n": z.integer()}), z.string()])})
        with pytest.raises(ZodError) as exc_info:
            schema.parse({"v": {"n": "x"}})
        union_issue = exc_info.value.issues[0]
        assert union_issue.path == ("v",)
        assert union_issue.union_errors[0][0].path == ("v", "n")

    def test_nil_option(self):
        schema = z.union([z.string(), z.nil()])
        assert schema.parse(None) is None
        assert not z.union([z.string()]).safe_parse(None).success

    def test_empty_union(self):
        with pytest.raises(ValueError):
            z.union([])

    def test_optional_option_makes_key_optional(self):
        schema = z.object({"v": z.union([z.string().optional(), z.integer()])})
        assert schema.safe_parse({}).success


class TestDiscriminatedUnion:
    def test_selects_option(self):
        assert _shape_union().parse({"type": "b", "b": "x"}) == {"type": "b", "b": "x"}

    def test_unknown_discriminator(self):
        with pytest.raises(ZodError) as exc_info:
            _shape_union().parse({"type": "x", "a": "abc"})
        issues = exc_info.value.issues
        assert len(issues) == 1
        assert issues[0].code is IssueCode.INVALID_UNION
        assert issues[0].path == ("type",)
        assert issues[0].message == "Invalid input: No matching discriminator"

    def test_missing_discriminator(self):
        with pytest.raises(ZodError) as exc_info:
            _shape_union().parse({"a": "abc"})
        issue = exc_info.value.issues[0]
        assert issue.path == ("type",)
        assert issue.input is None

    def test_option_issues_reported_directly(self):
        with pytest.raises(ZodError) as exc_info:
            _shape_union().parse({"type": "a", "a": 1})
        issue = exc_info.value.issues[0]
        assert issue.code is IssueCode.INVALID_TYPE
        assert issue.path == ("a",)

    def test_only_the_selected_option_runs(self):
        calls = []
        schema = z.discriminated_union("type", [
            z.object({"type": z.literal("a")}).refine(lambda d: calls.append("a") or True),
            z.object({"type": z.literal("b")}).refine(lambda d: calls.append("b") or True),
        ])
        schema.parse({"type": "b"})
        assert calls == ["b"]

    def test_enum_discriminator(self):
        schema = z.discriminated_union("kind", [
            z.object({"kind": z.enum("x", "y"), "n": z.integer()}),
            z.object({"kind": z.literal("z")}),
        ])
        assert schema.parse({"kind": "y", "n": 1}) == {"kind": "y", "n": 1}
        assert schema.option_for("x") is schema.options[0]
        assert schema.option_for("z") is schema.options[1]
        assert schema.option_for("q") is None
        assert schema.option_for([]) is None

    def test_union_fallback(self):
        options = [
            z.object({"type": z.literal("a").optional(), "a": z.string()}),
            z.object({"type": z.literal("b"), "b": z.string()}),
        ]
        assert not z.discriminated_union("type", options).safe_parse({"a": "x"}).success
        fallback = z.discriminated_union("type", options, {"union_fallback": True})
        assert fallback.parse({"a": "x"}) == {"a": "x"}

    def test_struct_options(self):
        from dataclasses import dataclass

        @dataclass
        class Cat:
            type: str
            lives: int = 9

        schema = z.discriminated_union("type", [z.struct(Cat, {"type": z.literal("cat")})])
        assert schema.parse({"type": "cat"}) == Cat(type="cat")
        assert schema.parse(Cat(type="cat", lives=3)).lives == 3

    def test_non_mapping_input(self):
        with pytest.raises(ZodError) as exc_info:
            _shape_union().parse("a")
        assert exc_info.value.issues[0].expected == "object"

    def test_construction_violations(self):
        with pytest.raises(SchemaDefinitionError) as exc_info:
            z.discriminated_union("type", [
                z.string(),
                z.object({"other": z.string()}),
                z.object({"type": z.string()}),
                z.object({"type": z.literal("a")}),
                z.object({"type": z.literal("a")}),
            ])
        violations = exc_info.value.violations
        assert len(violations) == 4
        assert "option 0" in violations[0]
        assert "duplicate" in violations[3]

    def test_no_options(self):
        with pytest.raises(SchemaDefinitionError):
            z.discriminated_union("type", [])

    def test_definition_error_is_value_error(self):
        with pytest.raises(ValueError):
            z.discriminated_union("type", [z.integer()])


class TestIntersection:
    def test_merges_objects(self):
        schema = z.intersection(z.object({"a": z.string()}), z.object({"b": z.integer()}))
        assert schema.parse({"a": "x", "b": 1, "c": 0}) == {"a": "x", "b": 1}

    def test_both_sides_report(self):
        schema = z.intersection(z.object({"a": z.string()}), z.object({"b": z.integer()}))
        with pytest.raises(ZodError) as exc_info:
            schema.parse({})
        assert [i.path for i in exc_info.value.issues] == [("a",), ("b",)]

    def test_incompatible_results(self):
        schema = z.intersection(z.string(), z.string().transform(str.upper))
        with pytest.raises(ZodError) as exc_info:
            schema.parse("a")
        issue = exc_info.value.issues[0]
        assert issue.code is IssueCode.INCOMPATIBLE_TYPES
        assert issue.path == ()

    def test_equal_scalars(self):
        assert z.intersection(z.integer(), z.integer().min(0)).parse(3) == 3

    def test_and_method(self):
        schema = z.string().and_(z.string().max(3))
        assert not schema.safe_parse("abcd").success


class TestXor:
    def test_exactly_one(self):
        assert z.xor([z.string(), z.integer()]).parse("a") == "a"

    def test_several_matches(self):
        with pytest.raises(ZodError) as exc_info:
            z.xor([z.string(), z.string().min(1)]).parse("a")
        issue = exc_info.value.issues[0]
        assert issue.code is IssueCode.INVALID_UNION
        assert "2 options matched" in issue.message

    def test_no_match(self):
        with pytest.raises(ZodError) as exc_info:
            z.xor([z.string(), z.string().min(1)]).parse(1)
        issue = exc_info.value.issues[0]
        assert issue.code is IssueCode.INVALID_UNION
        assert len(issue.union_errors) == 2


# --- Lazy ---

def _tree():
    node = z.lazy(lambda: z.object({"name": z.string(), "children": z.slice(node)}))
    return node


def _nested(levels):
    data = {"name": "leaf", "children": []}
    for _ in range(levels):
        data = {"name": "n", "children": [data]}
    return data


class TestLazy:
    def test_recursive_schema(self):
        data = _nested(3)
        assert _tree().parse(data) == data

    def test_recursive_issue_path(self):
        data = {"name": "root", "children": [{"name": 1, "children": []}]}
        with pytest.raises(ZodError) as exc_info:
            _tree().parse(data)
        assert exc_info.value.issues[0].path == ("children", 0, "name")

    def test_depth_guard(self, caplog):
        z.configure(max_lazy_depth=3)
        with caplog.at_level(logging.WARNING, logger="pyzod.wrappers"):
            with pytest.raises(ZodError) as exc_info:
                _tree().parse(_nested(3))
        issue = exc_info.value.issues[0]
        assert issue.code is IssueCode.INVALID_SCHEMA
        assert issue.path == ("children", 0, "children", 0, "children", 0)
        assert issue.properties["reason"] == "depth"
        assert "guard tripped" in caplog.text

    def test_cycle_detected(self):
        data = {"name": "loop", "children": []}
        data["children"].append(data)
        with pytest.raises(ZodError) as exc_info:
            _tree().parse(data)
        issue = exc_info.value.issues[0]
        assert issue.code is IssueCode.INVALID_SCHEMA
        assert issue.path == ("children", 0)
        assert issue.properties["reason"] == "cycle"

    def test_shared_subtrees_are_not_cycles(self):
        leaf = {"name": "leaf", "children": []}
        data = {"name": "root", "children": [leaf, leaf]}
        assert _tree().parse(data) == data

    def test_getter_called_once(self):
        calls = []

        def getter():
            calls.append(1)
            return z.string()

        schema = z.lazy(getter)
        schema.parse("a")
        schema.parse("b")
        assert len(calls) == 1

    def test_getter_resolved_once_across_threads(self):
        calls = []
        gate = threading.Event()

        def getter():
            gate.wait(1)
            calls.append(1)
            return z.integer()

        schema = z.lazy(getter)
        with ThreadPoolExecutor(max_workers=8) as pool:
            futures = [pool.submit(schema.parse, n) for n in range(8)]
            gate.set()
            results = sorted(f.result() for f in futures)
        assert results == list(range(8))
        assert len(calls) == 1

    def test_getter_must_return_schema(self):
        with pytest.raises(TypeError):
            z.lazy(lambda: "nope").parse("a")
        with pytest.raises(TypeError):
            z.lazy("nope")
