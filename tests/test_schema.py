"""
Tests for table description parsing.

Test philosophy:
- Column definitions in every accepted spelling normalize identically
- Nested descriptions flatten in traversal order with depth and container
- The single-key mapping ambiguity resolves the documented way
- Every malformed description raises SchemaError
"""

from __future__ import annotations

import pytest

from vizdata.exceptions import SchemaError
from vizdata.schema import (
    ColumnContainer,
    ColumnType,
    Schema,
    is_column_definition,
    parse_column,
    parse_description,
)


def summary(schema: Schema) -> list[tuple[str, str, str, int, str]]:
    """(id, label, type, depth, container) per column."""
    return [
        (c.id, c.label, c.type.value, c.depth, c.container.value)
        for c in schema
    ]


# =============================================================================
# Column definitions
# =============================================================================

class TestParseColumn:
    """Test parsing of single column definitions."""

    def test_bare_string(self) -> None:
        """A bare id is a string column labelled with its id."""
        column = parse_column("abc")

        assert column.id == "abc"
        assert column.label == "abc"
        assert column.type == ColumnType.STRING
        assert column.custom_properties == {}
        assert column.depth is None
        assert column.container is None

    def test_equivalent_spellings(self) -> None:
        """'a', ['a'] and ['a', 'string'] describe the same column."""
        assert parse_column("a") == parse_column(["a"]) == parse_column(["a", "string"])
        assert parse_column(("a",)) == parse_column("a")

    def test_type_and_label(self) -> None:
        column = parse_column(["a", "number", "b"])

        assert column.id == "a"
        assert column.label == "b"
        assert column.type == ColumnType.NUMBER

    def test_type_is_case_insensitive(self) -> None:
        assert parse_column(("d", "DateTime")).type == ColumnType.DATETIME

    def test_custom_properties(self) -> None:
        column = parse_column(["i", "string", "l", {"key": "value"}])

        assert column.label == "l"
        assert column.custom_properties == {"key": "value"}

    def test_as_dict(self) -> None:
        column = parse_column(("a", "timeofday"))

        assert column.as_dict() == {
            "id": "a",
            "label": "a",
            "type": "timeofday",
            "custom_properties": {},
            "depth": None,
            "container": None,
        }


class TestParseColumnErrors:
    """Test rejection of malformed column definitions."""

    @pytest.mark.parametrize("description", [None, "", [], ()])
    def test_empty(self, description: object) -> None:
        with pytest.raises(SchemaError) as exc_info:
            parse_column(description)

        assert "empty" in exc_info.value.message

    def test_numeric_input(self) -> None:
        with pytest.raises(SchemaError):
            parse_column(5)

    def test_numeric_element(self) -> None:
        with pytest.raises(SchemaError) as exc_info:
            parse_column(["a", 5, "c"])

        assert exc_info.value.description == ["a", 5, "c"]

    def test_unknown_type(self) -> None:
        with pytest.raises(SchemaError) as exc_info:
            parse_column(["a", "blah"])

        assert "blah" in exc_info.value.message

    def test_properties_not_a_mapping(self) -> None:
        with pytest.raises(SchemaError):
            parse_column(["a", "number", "c", "d"])

    def test_properties_with_non_string_keys(self) -> None:
        with pytest.raises(SchemaError):
            parse_column(["a", "number", "c", {1: "x"}])

    def test_too_many_fields(self) -> None:
        with pytest.raises(SchemaError):
            parse_column(["a", "number", "c", {}, "extra"])


class TestIsColumnDefinition:
    """Test the leaf test used by the normalizer."""

    def test_string_is_leaf(self) -> None:
        assert is_column_definition("a")

    def test_sequence_with_type_is_leaf(self) -> None:
        assert is_column_definition(("a", "number"))
        assert is_column_definition(["a", "NUMBER", "label"])

    def test_sequence_of_columns_is_not_leaf(self) -> None:
        assert not is_column_definition([("a", "number"), ("b", "string")])
        assert not is_column_definition(["a", "b"])

    def test_single_element_sequence_is_not_leaf(self) -> None:
        assert not is_column_definition(["a"])


# =============================================================================
# Description normalization
# =============================================================================

class TestParseDescription:
    """Test flattening of nested descriptions."""

    def test_single_column(self) -> None:
        schema = parse_description(("a", "number"))

        assert summary(schema) == [("a", "a", "number", 0, "scalar")]

    def test_flat_sequence(self) -> None:
        schema = parse_description([("a", "date"), ("b", "timeofday")])

        assert summary(schema) == [
            ("a", "a", "date", 0, "sequence"),
            ("b", "b", "timeofday", 0, "sequence"),
        ]

    def test_mapping_over_sequence(self) -> None:
        schema = parse_description({"a": [("b", "number"), ("c", "string", "column c")]})

        assert summary(schema) == [
            ("a", "a", "string", 0, "mapping"),
            ("b", "b", "number", 1, "sequence"),
            ("c", "column c", "string", 1, "sequence"),
        ]

    def test_innermost_mapping(self) -> None:
        schema = parse_description({"a": ("number", "column a"), "b": ("string", "column b")})

        assert summary(schema) == [
            ("a", "column a", "number", 0, "mapping"),
            ("b", "column b", "string", 0, "mapping"),
        ]

    def test_innermost_mapping_with_type_strings(self) -> None:
        schema = parse_description({"a": "number", "b": "string"})

        assert schema.ids == ["a", "b"]
        assert schema.last_depth == 0

    def test_tuple_key_over_mapping(self) -> None:
        schema = parse_description({("a", "number", "column a"): {"b": "number", "c": "string"}})

        assert summary(schema) == [
            ("a", "column a", "number", 0, "mapping"),
            ("b", "b", "number", 1, "mapping"),
            ("c", "c", "string", 1, "mapping"),
        ]

    def test_tuple_key_over_scalar(self) -> None:
        schema = parse_description({("a", "number", "column a"): ("b", "string", "column b")})

        assert summary(schema) == [
            ("a", "column a", "number", 0, "mapping"),
            ("b", "column b", "string", 1, "scalar"),
        ]

    def test_three_levels(self) -> None:
        schema = parse_description({("a", "number"): {"b": [("c", "number"), "d"]}})

        assert [(c.id, c.depth) for c in schema] == [("a", 0), ("b", 1), ("c", 2), ("d", 2)]
        assert schema.last_depth == 2

    def test_schema_lookup(self) -> None:
        schema = parse_description([("a", "number"), "b"])

        assert len(schema) == 2
        assert "a" in schema
        assert "z" not in schema
        assert schema.get("a").type == ColumnType.NUMBER
        assert schema[1].id == "b"


class TestAmbiguousMappings:
    """Single-key mappings whose value is a short sequence."""

    def test_short_sequence_is_type_and_label(self) -> None:
        schema = parse_description({"a": ("number", "column a")})

        assert summary(schema) == [("a", "column a", "number", 0, "mapping")]

    def test_short_sequence_starting_with_id_fails(self) -> None:
        """{'a': ('b', 'number')} reads 'b' as a type."""
        with pytest.raises(SchemaError):
            parse_description({"a": ("b", "number")})

    def test_padded_sequence_is_nested_column(self) -> None:
        schema = parse_description({"a": ("b", "number", "b", {})})

        assert summary(schema) == [
            ("a", "a", "string", 0, "mapping"),
            ("b", "b", "number", 1, "scalar"),
        ]

    def test_tuple_key_is_nested_column(self) -> None:
        schema = parse_description({("a",): ("b", "number")})

        assert summary(schema) == [
            ("a", "a", "string", 0, "mapping"),
            ("b", "b", "number", 1, "scalar"),
        ]


class TestParseDescriptionErrors:
    """Test rejection of malformed descriptions."""

    @pytest.mark.parametrize(
        "description",
        [
            {},
            [],
            {"a": []},
            {"a": {"b": {}}},
        ],
    )
    def test_empty_containers(self, description: object) -> None:
        with pytest.raises(SchemaError):
            parse_description(description)

    def test_numeric_definition_in_mapping(self) -> None:
        with pytest.raises(SchemaError):
            parse_description({"a": 5})

    def test_numeric_definition_in_sequence(self) -> None:
        with pytest.raises(SchemaError):
            parse_description([("a", "number"), 6])

    def test_not_iterable(self) -> None:
        with pytest.raises(SchemaError) as exc_info:
            parse_description(5)

        assert "iterable" in exc_info.value.message

    def test_duplicate_ids(self) -> None:
        with pytest.raises(SchemaError) as exc_info:
            parse_description({("a", "number"): [("a", "string")]})

        assert "Duplicate" in exc_info.value.message

    def test_depth_limit(self) -> None:
        description: object = ("z", "number")
        for i in range(5):
            description = {(f"c{i}",): description}

        assert len(parse_description(description)) == 6
        with pytest.raises(SchemaError) as exc_info:
            parse_description(description, max_depth=3)

        assert "deeply nested" in exc_info.value.message

    def test_depth_limit_from_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from vizdata.config import reset_config

        monkeypatch.setenv("VIZDATA_MAX_DESCRIPTION_DEPTH", "2")
        reset_config()

        with pytest.raises(SchemaError):
            parse_description({("a",): {("b",): ("c", "number")}})

    def test_error_serializes(self) -> None:
        with pytest.raises(SchemaError) as exc_info:
            parse_description({})

        data = exc_info.value.to_dict()
        assert data["error_type"] == "SchemaError"
        assert data["description"] == "{}"
