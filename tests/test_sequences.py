"""Tests for slice, array, tuple and set schemas."""

import pytest

import pyzod as z
from pyzod import IssueCode, ZodError


class TestSlice:
    def test_valid(self):
        assert z.slice(z.integer()).parse([1, 2]) == [1, 2]

    def test_tuple_input_becomes_list(self):
        assert z.slice(z.integer()).parse((1, 2)) == [1, 2]

    def test_element_issue_paths(self):
        with pytest.raises(ZodError) as exc_info:
            z.slice(z.integer()).parse([1, "a", 3, "b"])
        assert [i.path for i in exc_info.value.issues] == [(1,), (3,)]

    def test_overwrite_seen_by_later_checks(self):
        schema = z.slice(z.integer()).overwrite(sorted).min(3)
        with pytest.raises(ZodError) as exc_info:
            schema.parse([3, 1])
        issue = exc_info.value.issues[0]
        assert issue.code is IssueCode.TOO_SMALL
        assert issue.input == [1, 3]
        assert issue.message == "Too small: expected slice to have >=3 items"

    def test_length_checks(self):
        assert not z.slice(z.integer()).max(1).safe_parse([1, 2]).success
        assert not z.slice(z.integer()).length(2).safe_parse([1]).success
        assert not z.slice(z.integer()).non_empty().safe_parse([]).success

    def test_wrong_type(self):
        with pytest.raises(ZodError) as exc_info:
            z.slice(z.integer()).parse("12")
        assert exc_info.value.issues[0].expected == "slice"

    def test_input_not_mutated(self):
        data = [3, 1, 2]
        assert z.slice(z.integer()).overwrite(sorted).parse(data) == [1, 2, 3]
        assert data == [3, 1, 2]

    def test_slice_ptr_identity(self):
        data = [3, 1, 2]
        out = z.slice_ptr(z.integer()).overwrite(sorted).parse(data)
        assert out is data
        assert data == [1, 2, 3]
        assert z.slice_ptr(z.integer()).parse(None) is None

    def test_slice_ptr_coerced_elements_not_written_back(self):
        data = ["1", "2"]
        out = z.slice_ptr(z.coerce.integer()).parse(data)
        assert out == [1, 2]
        assert data == ["1", "2"]

    def test_refine_receives_validated_elements(self):
        schema = z.slice(z.integer()).refine(lambda xs: sum(xs) > 0)
        result = schema.safe_parse([1, "a"])
        assert not result.success
        assert [i.path for i in result.error.issues] == [(1,)]
        assert schema.parse([1, 2]) == [1, 2]
        assert not schema.safe_parse([-1]).success

    def test_refine_runs_after_overwrite(self):
        schema = z.slice(z.integer()).refine(lambda xs: xs == sorted(xs)).overwrite(sorted)
        assert schema.parse([2, 1]) == [1, 2]

    def test_refine_skipped_when_length_fails(self):
        calls = []
        schema = z.slice(z.integer()).min(2).refine(lambda xs: calls.append(xs) or True)
        assert not schema.safe_parse([1]).success
        assert calls == []


class TestArray:
    def test_output_is_tuple(self):
        assert z.array(z.integer(), 2).parse([1, 2]) == (1, 2)

    def test_exact_length(self):
        with pytest.raises(ZodError) as exc_info:
            z.array(z.integer(), 3).parse([1, 2])
        issue = exc_info.value.issues[0]
        assert issue.code is IssueCode.TOO_SMALL
        assert issue.origin == "array"
        assert not z.array(z.integer(), 1).safe_parse([1, 2]).success

    def test_negative_size(self):
        with pytest.raises(ValueError):
            z.array(z.integer(), -1)

    def test_fixed_length(self):
        assert z.array(z.string(), 4).fixed_length == 4


class TestTuple:
    def test_valid(self):
        assert z.tuple([z.string(), z.integer()]).parse(["a", 1]) == ("a", 1)

    def test_too_short(self):
        with pytest.raises(ZodError) as exc_info:
            z.tuple([z.string(), z.integer()]).parse(["a"])
        issue = exc_info.value.issues[0]
        assert issue.code is IssueCode.TOO_SMALL
        assert issue.minimum == 2

    def test_too_long_without_rest(self):
        with pytest.raises(ZodError) as exc_info:
            z.tuple([z.string()]).parse(["a", 1])
        issue = exc_info.value.issues[0]
        assert issue.code is IssueCode.TOO_BIG
        assert issue.maximum == 1

    def test_rest(self):
        schema = z.tuple([z.string()], z.integer())
        assert schema.parse(["a", 1, 2]) == ("a", 1, 2)
        with pytest.raises(ZodError) as exc_info:
            schema.parse(["a", 1, "x"])
        assert exc_info.value.issues[0].path == (2,)
        assert z.tuple([z.string()]).rest(z.integer()).parse(["a", 5]) == ("a", 5)

    def test_trailing_optional_items(self):
        schema = z.tuple([z.string(), z.integer().optional()])
        assert schema.required_count == 1
        assert schema.parse(["a"]) == ("a",)
        assert schema.parse(["a", 2]) == ("a", 2)

    def test_item_issue_path(self):
        with pytest.raises(ZodError) as exc_info:
            z.tuple([z.string(), z.integer()]).parse(["a", "b"])
        assert exc_info.value.issues[0].path == (1,)

    def test_refine_sees_validated_items(self):
        schema = z.tuple([z.integer(), z.integer()]).refine(lambda t: t[0] < t[1])
        assert schema.parse([1, 2]) == (1, 2)
        result = schema.safe_parse([1, "x"])
        assert [i.code for i in result.error.issues] == [IssueCode.INVALID_TYPE]


class TestSet:
    def test_valid(self):
        assert z.set(z.integer()).parse({1, 2}) == {1, 2}
        assert z.set(z.integer()).parse(frozenset({1})) == {1}

    def test_list_is_not_a_set(self):
        with pytest.raises(ZodError) as exc_info:
            z.set(z.integer()).parse([1, 2])
        assert exc_info.value.issues[0].expected == "set"

    def test_element_issue_has_no_path(self):
        with pytest.raises(ZodError) as exc_info:
            z.set(z.integer()).parse({"a"})
        issue = exc_info.value.issues[0]
        assert issue.path == ()
        assert issue.code is IssueCode.INVALID_TYPE

    def test_size_checks(self):
        with pytest.raises(ZodError) as exc_info:
            z.set(z.integer()).min(2).parse({1})
        assert exc_info.value.issues[0].message == "Too small: expected set to have >=2 items"
