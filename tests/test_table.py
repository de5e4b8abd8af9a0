"""
Tests for the DataTable aggregate.

These tests go through the public DataTable API only: construction,
appending, row properties and ordering. Output formats are covered in
test_renderers.py.
"""

from __future__ import annotations

import pytest

from vizdata import DataTable
from vizdata.exceptions import (
    CardinalityError,
    SchemaError,
    StructuralMismatchError,
)


# =============================================================================
# Construction
# =============================================================================

class TestConstruction:
    """Test building tables."""

    def test_empty_table(self) -> None:
        table = DataTable([("a", "number"), ("b", "string")])

        assert table.number_of_rows() == 0
        assert len(table) == 0
        assert [c.id for c in table.columns] == ["a", "b"]
        assert table.custom_properties == {}

    def test_initial_data(self) -> None:
        table = DataTable([("a", "number")], [[1], [2], [3]])

        assert table.number_of_rows() == 3

    def test_initial_custom_properties(self) -> None:
        properties = {"k": "v"}
        table = DataTable(["a"], custom_properties=properties)
        properties["k"] = "changed"

        assert table.custom_properties == {"k": "v"}

    def test_invalid_description(self) -> None:
        with pytest.raises(SchemaError):
            DataTable({})

    def test_initial_data_must_match(self) -> None:
        with pytest.raises(StructuralMismatchError):
            DataTable({"a": "number", "b": "string"}, [[1, "a"]])

    def test_repr(self) -> None:
        table = DataTable(["a", "b"], [["x", "y"]])

        assert repr(table) == "DataTable(columns=['a', 'b'], rows=1)"


# =============================================================================
# Appending
# =============================================================================

class TestAppendData:
    """Test appending rows."""

    def test_append_sequence_rows(self) -> None:
        table = DataTable([("a", "number"), ("b", "string")])

        with pytest.raises(CardinalityError):
            table.append_data([[1, "a", True]])
        with pytest.raises(StructuralMismatchError):
            table.append_data({1: ["a"], 2: ["b"]})

        table.append_data([[1, "a"], [2, "b"]])
        assert table.number_of_rows() == 2

        table.append_data([[3, "c"], [4]])
        assert table.number_of_rows() == 4
        assert table.rows[3].get("b") is None

    def test_append_mapping_rows(self) -> None:
        table = DataTable({"a": "number", "b": "string"})

        with pytest.raises(StructuralMismatchError):
            table.append_data([[1, "a"]])
        with pytest.raises(StructuralMismatchError):
            table.append_data({5: {"b": "z"}})

        table.append_data([{"a": 1, "b": "z"}])
        assert table.number_of_rows() == 1

    def test_append_nested_sequence(self) -> None:
        table = DataTable({("a", "number"): [("b", "string")]})

        with pytest.raises(StructuralMismatchError):
            table.append_data([[1, "a"]])
        with pytest.raises(StructuralMismatchError):
            table.append_data({5: {"b": "z"}})

        table.append_data({5: ["z"], 6: ["w"]})
        assert table.number_of_rows() == 2

    def test_append_nested_mapping(self) -> None:
        table = DataTable({("a", "number"): {"b": "string", "c": "number"}})

        with pytest.raises(StructuralMismatchError):
            table.append_data([[1, "a"]])
        with pytest.raises(StructuralMismatchError):
            table.append_data({1: ["a", 2]})

        table.append_data({5: {"b": "z", "c": 6}, 7: {"c": 8}, 9: {}})
        assert table.number_of_rows() == 3

    def test_rows_before_error_are_kept(self) -> None:
        table = DataTable([("a", "number"), ("b", "string")])

        with pytest.raises(CardinalityError):
            table.append_data([[1, "a"], [2, "b"], [3, "c", "extra"], [4, "d"]])

        assert table.number_of_rows() == 2

    def test_row_properties_per_call(self) -> None:
        table = DataTable([("a", "number")])
        table.append_data([[1], [2]], {"batch": "1"})
        table.append_data([[3]])

        assert [r.custom_properties for r in table.rows] == [
            {"batch": "1"},
            {"batch": "1"},
            {},
        ]

    def test_type_errors_surface_at_render_time(self) -> None:
        table = DataTable([("a", "number")])
        table.append_data([["not a number"]])

        assert table.number_of_rows() == 1

    def test_rows_cannot_be_edited(self) -> None:
        table = DataTable([("a", "number"), ("b", "string")], [[1, "x"]])

        with pytest.raises(TypeError):
            table.rows[0].cells["a"] = table.rows[0].cells["b"]  # type: ignore[index]

        assert table.to_json() == (
            "{cols:[{id:'a',label:'a',type:'number'},{id:'b',label:'b',type:'string'}],"
            "rows:[{c:[{v:1},{v:'x'}]}]}"
        )


# =============================================================================
# Row properties and ordering
# =============================================================================

class TestSetRowsCustomProperties:
    """Test replacing row properties after the fact."""

    def test_single_row(self) -> None:
        table = DataTable([("a", "number")], [[1], [2]])

        table.set_rows_custom_properties(1, {"k": "v"})

        assert table.rows[0].custom_properties == {}
        assert table.rows[1].custom_properties == {"k": "v"}

    def test_several_rows(self) -> None:
        table = DataTable([("a", "number")], [[1], [2], [3]])

        table.set_rows_custom_properties([0, 2], {"k": "v"})

        assert [r.custom_properties for r in table.rows] == [{"k": "v"}, {}, {"k": "v"}]

    def test_cells_are_kept(self) -> None:
        table = DataTable([("a", "number")], [[(1, "one")]])

        table.set_rows_custom_properties(0, {"k": "v"})

        assert table.rows[0].get("a").formatted == "one"

    def test_out_of_range(self) -> None:
        table = DataTable([("a", "number")], [[1]])

        with pytest.raises(SchemaError):
            table.set_rows_custom_properties([0, 5], {"k": "v"})

        assert table.rows[0].custom_properties == {}


class TestPreparedData:
    """Test row ordering through the table."""

    def test_two_key_order(self) -> None:
        data = [["b", 3], ["a", 3], ["a", 2], ["b", 1]]
        table = DataTable(["col1", ("col2", "number")], data)

        ordered = table.prepared_data(order_by=["col2", "col1"])

        assert [[r.get("col1").value, r.get("col2").value] for r in ordered] == sorted(
            data, key=lambda r: (r[1], r[0])
        )

    def test_rendering_does_not_reorder_table(self) -> None:
        table = DataTable([("a", "number")], [[2], [1]])

        table.to_json(order_by="a")

        assert [r.get("a").value for r in table.rows] == [2, 1]
