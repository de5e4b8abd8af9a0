"""
Binds append payloads to a normalized Schema.

The binder walks the payload in lock-step with the column list, keeping
an explicit cursor into the Schema. What it expects at each position is
decided by that column's container kind:

- SCALAR: the fragment is the value; the row is complete
- SEQUENCE: the fragment is a list/tuple whose items fill consecutive
  columns; missing trailing items are left unset
- MAPPING, last level: the fragment's keys name the remaining columns
- MAPPING, outer level: each key is this column's value and its value is
  the fragment for the next column

Rows are yielded as soon as they are complete, so a caller appending them
one by one keeps every row produced before an error.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from vizdata.exceptions import CardinalityError, StructuralMismatchError
from vizdata.schema.models import ColumnContainer, Schema
from vizdata.values import Cell, ValueKind, classify, type_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Row:
    """
    One bound row.

    Attributes:
        cells: Cell per column id. Columns without a value are absent.
        custom_properties: Row-level custom properties.

    Both mappings are copied on construction and are read-only.
    """

    cells: Mapping[str, Cell] = field(default_factory=dict)
    custom_properties: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "cells", MappingProxyType(dict(self.cells)))
        object.__setattr__(self, "custom_properties", MappingProxyType(dict(self.custom_properties)))

    def get(self, column_id: str) -> Cell | None:
        return self.cells.get(column_id)

    def with_properties(self, custom_properties: Mapping[str, Any] | None) -> "Row":
        return Row(dict(self.cells), dict(custom_properties or {}))


class DataBinder:
    """
    Matches payloads against a Schema and produces Rows.

    Example:
        binder = DataBinder(parse_description([("a", "number"), ("b", "string")]))
        rows = list(binder.bind([[1, "z"], [2, "w"]]))
    """

    def __init__(self, schema: Schema) -> None:
        self.schema = schema

    def bind(
        self,
        payload: Any,
        custom_properties: Mapping[str, Any] | None = None,
    ) -> Iterator[Row]:
        """
        Bind a payload, yielding rows as they are completed.

        If the description has a single level (last column at depth 0),
        each element of the payload is one row. Iterating a mapping
        payload iterates its keys. Otherwise the whole payload is one
        nested structure.

        Raises:
            StructuralMismatchError: A fragment has the wrong container kind.
            CardinalityError: A sequence has more items than columns.
        """
        properties = dict(custom_properties or {})

        if self.schema.last_depth == 0:
            kind = classify(payload)
            if kind not in (ValueKind.SEQUENCE, ValueKind.MAPPING) and not _is_row_iterable(payload):
                raise StructuralMismatchError(
                    f"Expected an iterable of rows, got {type_name(payload)}",
                    self.schema[0].id,
                    0,
                )
            for element in payload:
                yield from self._bind_fragment({}, properties, element, 0)
        else:
            yield from self._bind_fragment({}, properties, payload, 0)

    def _bind_fragment(
        self,
        cells: dict[str, Cell],
        properties: dict[str, Any],
        fragment: Any,
        index: int,
    ) -> Iterator[Row]:
        if index >= len(self.schema):
            raise StructuralMismatchError(
                "The data does not match description, too deep",
                None,
                index,
            )

        column = self.schema[index]

        if column.container is ColumnContainer.SCALAR:
            cells[column.id] = Cell.of(fragment)
            yield Row(cells, dict(properties))
            return

        if column.container is ColumnContainer.SEQUENCE:
            if classify(fragment) is not ValueKind.SEQUENCE:
                raise StructuralMismatchError(
                    f"Expected list at column '{column.id}', got {type_name(fragment)}",
                    column.id,
                    index,
                )
            if index + len(fragment) > len(self.schema):
                raise CardinalityError(
                    f"Too many elements given in data: {len(fragment)} for "
                    f"{len(self.schema) - index} remaining columns",
                    column.id,
                    index,
                )
            for offset, item in enumerate(fragment):
                cells[self.schema[index + offset].id] = Cell.of(item)
            yield Row(cells, dict(properties))
            return

        # MAPPING
        if classify(fragment) is not ValueKind.MAPPING:
            raise StructuralMismatchError(
                f"Expected mapping at column '{column.id}', got {type_name(fragment)}",
                column.id,
                index,
            )

        if column.depth == self.schema.last_depth:
            for remaining in self.schema.columns[index:]:
                if remaining.id in fragment:
                    cells[remaining.id] = Cell.of(fragment[remaining.id])
            yield Row(cells, dict(properties))
            return

        if not fragment:
            # Row with only the outer columns filled in.
            yield Row(cells, dict(properties))
            return

        for key, value in fragment.items():
            branch = dict(cells)
            branch[column.id] = Cell.of(key)
            yield from self._bind_fragment(branch, properties, value, index + 1)


def _is_row_iterable(payload: Any) -> bool:
    """Generators, sets and other iterables are accepted; text is not."""
    if isinstance(payload, (str, bytes, bytearray)):
        return False
    try:
        iter(payload)
    except TypeError:
        return False
    return True


def bind_rows(
    schema: Schema,
    payload: Any,
    custom_properties: Mapping[str, Any] | None = None,
) -> list[Row]:
    """Bind a whole payload eagerly. Convenience wrapper around DataBinder."""
    rows = list(DataBinder(schema).bind(payload, custom_properties))
    logger.debug("Bound %d rows against %d columns", len(rows), len(schema))
    return rows
