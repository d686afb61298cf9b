"""Tests for specfront.nodes -- composition, lookup, conversion and rendering."""

from __future__ import annotations

import re
import textwrap

import pytest
import yaml

from specfront.exceptions import ParseError
from specfront.nodes import (
    Mapping,
    Scalar,
    Sequence,
    compose,
    describe,
    from_python,
    render_yaml,
    string_value,
    to_python,
)


# ---------------------------------------------------------------------------
# compose
# ---------------------------------------------------------------------------


class TestCompose:
    def test_mapping_preserves_source_order(self) -> None:
        root = compose("zebra: 1\napple: 2\nmango: 3\n")
        assert isinstance(root, Mapping)
        assert root.keys() == ["zebra", "apple", "mango"]

    def test_duplicate_keys_are_kept_and_first_wins(self) -> None:
        root = compose("a: 1\nb: 2\na: 3\n")
        assert root.keys() == ["a", "b", "a"]
        assert root.get("a") == Scalar(1)

    def test_scalar_types(self) -> None:
        root = compose(
            textwrap.dedent("""\
                s: hello
                i: 42
                f: 1.5
                t: true
                n: null
                q: "42"
            """)
        )
        assert root.get("s") == Scalar("hello")
        assert root.get("i") == Scalar(42)
        assert root.get("f") == Scalar(1.5)
        assert root.get("t") == Scalar(True)
        assert root.get("n") == Scalar(None)
        assert root.get("q") == Scalar("42")

    def test_timestamps_stay_strings(self) -> None:
        root = compose("date: 2024-01-02\n")
        assert root.get("date") == Scalar("2024-01-02")

    def test_json_is_accepted(self) -> None:
        root = compose('{"swagger": "2.0", "tags": [{"name": "pets"}]}')
        assert to_python(root) == {"swagger": "2.0", "tags": [{"name": "pets"}]}

    def test_bytes_input(self) -> None:
        root = compose("key: värde\n".encode("utf-8"))
        assert root.get("key") == Scalar("värde")

    def test_empty_document_is_empty_mapping(self) -> None:
        assert compose("") == Mapping()
        assert compose("# only a comment\n") == Mapping()

    def test_positions_are_one_based(self) -> None:
        root = compose("first: 1\nsecond:\n  - x\n")
        second = root.get("second")
        assert isinstance(second, Sequence)
        assert (second[0].line, second[0].column) == (3, 5)

    def test_positions_do_not_affect_equality(self) -> None:
        assert compose("a: [1, 2]") == compose("\n\n   a:\n    - 1\n    - 2\n")

    def test_aliases_share_converted_nodes(self) -> None:
        root = compose("base: &b {x: 1}\ncopy: *b\n")
        assert root.get("base") is root.get("copy")

    def test_malformed_yaml_reports_line_and_column(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            compose("a: 1\nb: [unclosed\n", locator="/tmp/bad.yaml")
        err = exc_info.value
        assert err.locator == "/tmp/bad.yaml"
        assert err.line is not None and err.line >= 2
        assert err.column is not None
        assert "/tmp/bad.yaml" in str(err)

    def test_multiple_documents_rejected(self) -> None:
        with pytest.raises(ParseError):
            compose("a: 1\n---\nb: 2\n")

    def test_non_scalar_key_rejected(self) -> None:
        with pytest.raises(ParseError, match="Mapping keys must be scalars"):
            compose("? [a, b]\n: value\n")

    def test_recursive_alias_rejected(self) -> None:
        with pytest.raises(ParseError, match="Recursive alias"):
            compose("a: &x\n  b: *x\n")


# ---------------------------------------------------------------------------
# Mapping helpers
# ---------------------------------------------------------------------------


class TestMappingHelpers:
    @pytest.fixture()
    def mapping(self) -> Mapping:
        return compose("swagger: '2.0'\ninfo: {}\nx-book: 1\nbogus: 2\n")

    def test_get_default(self, mapping: Mapping) -> None:
        assert mapping.get("missing") is None
        assert mapping.get("missing", Scalar("d")) == Scalar("d")

    def test_has_key(self, mapping: Mapping) -> None:
        assert mapping.has_key("info")
        assert not mapping.has_key("paths")

    def test_sorted_keys(self, mapping: Mapping) -> None:
        assert mapping.sorted_keys() == ["bogus", "info", "swagger", "x-book"]

    def test_missing_keys(self, mapping: Mapping) -> None:
        assert mapping.missing_keys(["swagger", "paths", "info"]) == ["paths"]

    def test_invalid_keys_with_patterns(self, mapping: Mapping) -> None:
        assert mapping.invalid_keys(["swagger", "info"], [re.compile("^x-")]) == ["bogus"]

    def test_invalid_keys_without_patterns(self, mapping: Mapping) -> None:
        assert mapping.invalid_keys(["swagger", "info"]) == ["x-book", "bogus"]


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


class TestConversion:
    def test_to_python_keeps_first_duplicate(self) -> None:
        assert to_python(compose("a: 1\na: 2\n")) == {"a": 1}

    def test_from_python(self) -> None:
        node = from_python({"a": [1, "two", None], "b": {"c": True}})
        assert node == compose("a: [1, two, null]\nb: {c: true}\n")

    def test_from_python_rejects_unknown_types(self) -> None:
        with pytest.raises(TypeError):
            from_python({"a": object()})

    def test_string_value(self) -> None:
        assert string_value(Scalar("x")) == "x"
        assert string_value(Scalar(200)) == "200"
        assert string_value(Scalar(True)) is None
        assert string_value(Scalar(1.5)) is None
        assert string_value(Sequence()) is None
        assert string_value(None) is None


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestRenderYaml:
    def test_render_preserves_order_and_values(self) -> None:
        node = compose("zebra: 1\napple: [a, 'true', 3.5]\nnothing: null\n")
        text = render_yaml(node)
        assert text.index("zebra") < text.index("apple")
        assert yaml.safe_load(text) == {"zebra": 1, "apple": ["a", "true", 3.5], "nothing": None}

    def test_render_scalar_root(self) -> None:
        assert yaml.safe_load(render_yaml(Scalar("hello"))) == "hello"

    def test_render_unicode(self) -> None:
        assert "värde" in render_yaml(Scalar("värde"))


class TestDescribe:
    def test_indented_dump(self) -> None:
        node = compose("a:\n  b: 1\nc: [x]\n")
        assert describe(node) == "a:\n  b:\n    1\nc:\n  0:\n    x\n"
