"""Tests for global configuration, locales and the metadata registry."""

import json
import logging

import pytest

import pyzod as z
from pyzod import (
    Config, GlobalMeta, ParseContext, Registry, ZodError,
    config_from_dict, config_from_json, config_from_yaml, config_to_dict,
    configure, get_config, load_config, register_locale,
)
from pyzod.registry import meta_from_dict


class TestConfig:
    def test_defaults(self):
        config = get_config()
        assert config.locale == "en"
        assert config.report_input is True
        assert config.max_lazy_depth == 64
        assert config.error_map is None

    def test_invalid_values(self):
        with pytest.raises(ValueError, match="locale"):
            Config(locale="")
        with pytest.raises(ValueError, match="max_lazy_depth"):
            Config(max_lazy_depth=0)
        with pytest.raises(ValueError, match="report_input"):
            Config(report_input="yes")
        with pytest.raises(ValueError, match="error_map"):
            Config(error_map="not callable")

    def test_configure_replaces_fields(self):
        before = get_config()
        after = configure(max_lazy_depth=10)
        assert after.max_lazy_depth == 10
        assert before.max_lazy_depth == 64
        assert get_config() is after

    def test_configure_unknown_field(self):
        with pytest.raises(ValueError, match="bogus"):
            configure(bogus=1)

    def test_configure_logs(self, caplog):
        with caplog.at_level(logging.INFO, logger="pyzod.config"):
            configure(locale="en")
        assert "configuration updated" in caplog.text

    def test_reset(self):
        configure(report_input=False)
        z.reset_config()
        assert get_config().report_input is True


class TestReportInput:
    def test_input_reported_by_default(self):
        issue = z.string().safe_parse(5).error.issues[0]
        assert issue.input == 5

    def test_disabled_globally(self):
        configure(report_input=False)
        issue = z.string().safe_parse(5).error.issues[0]
        assert issue.input is None

    def test_context_overrides_config(self):
        configure(report_input=False)
        ctx = ParseContext(report_input=True)
        assert z.string().safe_parse(5, ctx).error.issues[0].input == 5
        ctx = ParseContext(report_input=False)
        configure(report_input=True)
        assert z.string().safe_parse(5, ctx).error.issues[0].input is None


class TestConfigErrorMap:
    def test_global_error_map(self):
        configure(error_map=lambda issue: f"global {issue.code.value}")
        with pytest.raises(ZodError) as exc_info:
            z.string().parse(1)
        assert exc_info.value.issues[0].message == "global invalid_type"

    def test_context_beats_global(self):
        configure(error_map=lambda issue: "global")
        result = z.string().safe_parse(1, ParseContext(error="context"))
        assert result.error.issues[0].message == "context"

    def test_global_map_may_defer(self):
        configure(error_map=lambda issue: None)
        result = z.string().safe_parse(1)
        assert result.error.issues[0].message == "Invalid input: expected string, received int"


class TestConfigSerialization:
    def test_to_dict_omits_defaults(self):
        assert config_to_dict(Config()) == {"locale": "en"}
        assert config_to_dict(Config(report_input=False, max_lazy_depth=8)) == {
            "locale": "en", "report_input": False, "max_lazy_depth": 8,
        }

    def test_from_dict(self):
        assert config_from_dict({"max_lazy_depth": 5}).max_lazy_depth == 5
        with pytest.raises(ValueError, match="error_map"):
            config_from_dict({"error_map": None})
        with pytest.raises(ValueError):
            config_from_dict(["locale"])

    def test_from_json_string_and_file(self, tmp_path):
        assert config_from_json('{"report_input": false}').report_input is False
        path = tmp_path / "pyzod.json"
        path.write_text(json.dumps({"max_lazy_depth": 12}))
        assert config_from_json(path).max_lazy_depth == 12
        with pytest.raises(ValueError):
            config_from_json("[1, 2]")

    def test_from_yaml_string_and_file(self, tmp_path):
        assert config_from_yaml("locale: en\nreport_input: false\n").report_input is False
        assert config_from_yaml("") == Config()
        path = tmp_path / "pyzod.yml"
        path.write_text("max_lazy_depth: 7\n")
        assert config_from_yaml(path).max_lazy_depth == 7
        with pytest.raises(ValueError):
            config_from_yaml("- a\n- b\n")

    def test_load_config_installs(self, tmp_path):
        path = tmp_path / "pyzod.yaml"
        path.write_text("report_input: false\nmax_lazy_depth: 9\n")
        loaded = load_config(path)
        assert get_config() is loaded
        assert loaded.max_lazy_depth == 9
        assert z.string().safe_parse(1).error.issues[0].input is None

    def test_load_config_unsupported_suffix(self, tmp_path):
        path = tmp_path / "pyzod.toml"
        path.write_text("")
        with pytest.raises(ValueError, match="Unsupported"):
            load_config(path)


class TestLocales:
    def test_custom_locale(self):
        register_locale("shout", lambda issue: issue.code.value.upper())
        assert "shout" in z.available_locales()
        result = z.string().safe_parse(1, ParseContext(locale="shout"))
        assert result.error.issues[0].message == "INVALID_TYPE"

    def test_configured_locale(self):
        register_locale("terse", lambda issue: "bad")
        configure(locale="terse")
        assert z.integer().safe_parse("x").error.issues[0].message == "bad"

    def test_unknown_locale_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING, logger="pyzod.locales"):
            result = z.string().safe_parse(1, ParseContext(locale="xx"))
        assert result.error.issues[0].message.startswith("Invalid input")
        assert "Unknown locale" in caplog.text

    def test_register_validation(self):
        with pytest.raises(ValueError):
            register_locale("", lambda issue: "x")
        with pytest.raises(TypeError):
            register_locale("bad", "not callable")

    def test_get_locale(self):
        assert z.get_locale("en") is z.get_locale(None)


class TestRegistry:
    def test_add_get_remove(self):
        registry = Registry()
        schema = z.string()
        assert registry.get(schema) is None
        registry.add(schema, {"owner": "team"})
        assert registry.has(schema)
        assert registry.get(schema) == {"owner": "team"}
        assert len(registry) == 1
        registry.remove(schema)
        assert not registry.has(schema)

    def test_clear(self):
        registry = Registry()
        registry.add(z.string(), 1)
        kept = z.integer()
        registry.add(kept, 2)
        registry.clear()
        assert len(registry) == 0

    def test_keys_are_weak(self):
        registry = Registry()
        registry.add(z.string(), "gone")
        import gc
        gc.collect()
        assert len(registry) == 0

    def test_global_registry_holds_descriptions(self):
        schema = z.string().describe("a name")
        assert z.GLOBAL_REGISTRY.get(schema).description == "a name"


class TestGlobalMeta:
    def test_merge(self):
        base = GlobalMeta(title="T", description="old", extra={"a": 1})
        merged = base.merge(GlobalMeta(description="new", extra={"b": 2}))
        assert merged.title == "T"
        assert merged.description == "new"
        assert merged.extra == {"a": 1, "b": 2}

    def test_to_dict(self):
        meta = GlobalMeta(id="user", examples=("a",), extra={"deprecated": True})
        assert meta.to_dict() == {"id": "user", "examples": ["a"], "deprecated": True}

    def test_from_dict(self):
        meta = meta_from_dict({"title": "T", "examples": ["x"], "owner": "team"})
        assert meta.title == "T"
        assert meta.examples == ("x",)
        assert meta.extra == {"owner": "team"}
