"""Tests for the completion function catalog."""

import json

import pytest

from kvlens.completion import (
    DEFAULT_FUNCTIONS,
    FunctionCatalog,
    FunctionEntry,
    UsageStyle,
    classify_usage,
    default_catalog,
)
from kvlens.exceptions import DataLoadError


class TestClassifyUsage:
    """Test method versus global insertion style."""

    def test_method(self):
        assert classify_usage("list.filter(x, expr) -> list") is UsageStyle.METHOD

    def test_global(self):
        assert classify_usage("has(field) -> bool") is UsageStyle.GLOBAL

    def test_dot_inside_arguments_is_global(self):
        assert classify_usage("size(_.items) -> int") is UsageStyle.GLOBAL

    def test_namespaced_global(self):
        assert classify_usage("regex.extract(string, string)", "regex.extract") is UsageStyle.GLOBAL

    def test_no_usage(self):
        assert classify_usage("") is UsageStyle.GLOBAL


class TestFunctionEntry:
    """Test parsing and type compatibility of catalog entries."""

    def test_parse_full_line(self):
        entry = FunctionEntry.parse("filter() - list.filter(x, predicate) -> list | _.items.filter(x, x.active)")
        assert entry.name == "filter"
        assert entry.usage == "list.filter(x, predicate) -> list"
        assert entry.description == "_.items.filter(x, x.active)"
        assert entry.label == "filter()"
        assert entry.style is UsageStyle.METHOD
        assert entry.receiver == "list"

    def test_parse_name_only(self):
        entry = FunctionEntry.parse("now()")
        assert entry.name == "now"
        assert entry.usage == ""

    def test_first_param(self):
        assert FunctionEntry.parse("size() - size(any) -> int").first_param == "any"
        assert FunctionEntry.parse("now() - now() -> timestamp").first_param is None

    def test_method_applies_to_receiver_type(self):
        entry = FunctionEntry.parse("contains() - string.contains(string) -> bool")
        assert entry.applies_to("string")
        assert not entry.applies_to("int")

    def test_collection_helpers_apply_to_maps_and_lists(self):
        entry = FunctionEntry.parse("filter() - list.filter(x, predicate) -> list")
        assert entry.applies_to("map")
        assert entry.applies_to("list")
        assert not entry.applies_to("string")

    def test_untyped_params_apply_everywhere(self):
        entry = FunctionEntry.parse("has() - has(field) -> bool")
        assert entry.applies_to("string")

    def test_unknown_node_type(self):
        entry = FunctionEntry.parse("trim() - string.trim() -> string")
        assert entry.applies_to("any")

    def test_str_round_trips(self):
        line = "has() - has(field) -> bool | has(_.metadata)"
        assert str(FunctionEntry.parse(line)) == line


class TestFunctionCatalog:
    """Test catalog deduplication, lookup and loading."""

    def test_dedupes_case_insensitively(self):
        catalog = FunctionCatalog(["size() - size(any) -> int", "SIZE() - SIZE(list) -> int"])
        assert len(catalog) == 1
        assert catalog.get("size").usage == "size(any) -> int"

    def test_later_entry_fills_missing_usage(self):
        catalog = FunctionCatalog(["size()", "size() - size(any) -> int"])
        assert catalog.get("size()").usage == "size(any) -> int"

    def test_contains(self):
        catalog = FunctionCatalog(["keys() - map.keys() -> list"])
        assert "keys" in catalog
        assert "keys()" in catalog
        assert "values" not in catalog

    def test_for_type_keeps_order(self):
        catalog = FunctionCatalog(
            [
                "upperAscii() - string.upperAscii() -> string",
                "keys() - map.keys() -> list",
                "size() - size(any) -> int",
            ]
        )
        assert [e.name for e in catalog.for_type("map")] == ["keys", "size"]

    def test_default_catalog(self):
        catalog = default_catalog()
        assert len(catalog) == len(DEFAULT_FUNCTIONS)
        assert catalog.get("regex.extract").style is UsageStyle.GLOBAL
        assert catalog.get("filter").style is UsageStyle.METHOD

    def test_from_file(self, tmp_path):
        path = tmp_path / "functions.json"
        path.write_text(
            json.dumps(
                [
                    "now() - now() -> timestamp",
                    {"name": "base64.encode()", "usage": "base64.encode(bytes) -> string"},
                    42,
                ]
            ),
            encoding="utf-8",
        )
        catalog = FunctionCatalog.from_file(path)
        assert [e.name for e in catalog] == ["now", "base64.encode"]
        assert catalog.get("base64.encode").style is UsageStyle.GLOBAL

    def test_from_file_wrong_shape(self, tmp_path):
        path = tmp_path / "functions.json"
        path.write_text('{"name": "x"}', encoding="utf-8")
        with pytest.raises(DataLoadError):
            FunctionCatalog.from_file(path)

    def test_from_missing_file(self, tmp_path):
        with pytest.raises(DataLoadError):
            FunctionCatalog.from_file(tmp_path / "nope.json")
