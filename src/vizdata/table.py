"""
DataTable: a typed table built from a nested description.

Usage:
    from vizdata import DataTable

    table = DataTable([("name", "string", "Name"), ("salary", "number")])
    table.append_data([["Jim", 800], ["Bob", (700, "$700")]])
    print(table.to_json_response(order_by=("salary", "desc")))

The description fixes the columns for the table's lifetime; rows can only
be appended. Rendering never modifies the table.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Sequence

from vizdata.binder import DataBinder, Row
from vizdata.exceptions import SchemaError
from vizdata.output.renderers import (
    render,
    render_csv,
    render_html,
    render_js_code,
    render_json,
    render_json_response,
    render_tsv_excel,
)
from vizdata.output.request import parse_request_options
from vizdata.ordering import sort_rows
from vizdata.schema.models import ColumnDescriptor, Schema
from vizdata.schema.parser import parse_description

logger = logging.getLogger(__name__)


class DataTable:
    """
    Columns, rows and custom properties of one table.

    Attributes:
        custom_properties: Table-level custom properties. May be replaced
            at any time; renderers read it on every call.
    """

    def __init__(
        self,
        table_description: Any,
        data: Any = None,
        custom_properties: Mapping[str, Any] | None = None,
    ) -> None:
        """
        Build a table from a description and optional initial data.

        Raises:
            SchemaError: The description is invalid.
            BindingError: data does not match the description.
        """
        self._schema = parse_description(table_description)
        self._binder = DataBinder(self._schema)
        self._rows: list[Row] = []
        self.custom_properties: dict[str, Any] = dict(custom_properties or {})
        if data is not None:
            self.append_data(data)

    # ── Columns and rows ────────────────────────────────────────────────

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def columns(self) -> tuple[ColumnDescriptor, ...]:
        """Normalized columns, in traversal order."""
        return self._schema.columns

    @property
    def rows(self) -> tuple[Row, ...]:
        """Bound rows in insertion order. Read-only view."""
        return tuple(self._rows)

    def number_of_rows(self) -> int:
        return len(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"DataTable(columns={self._schema.ids!r}, rows={len(self._rows)})"

    def append_data(
        self,
        data: Any,
        custom_properties: Mapping[str, Any] | None = None,
    ) -> None:
        """
        Bind data against the description and append the resulting rows.

        custom_properties is attached to every row produced by this call.
        Rows are appended as soon as they are bound, so when an error is
        raised part way through, the rows before it remain in the table.

        Raises:
            StructuralMismatchError: data has the wrong shape.
            CardinalityError: A list has more items than columns.
        """
        before = len(self._rows)
        try:
            for row in self._binder.bind(data, custom_properties):
                self._rows.append(row)
        finally:
            logger.debug(
                "Appended %d rows (total %d)",
                len(self._rows) - before,
                len(self._rows),
            )

    def set_rows_custom_properties(
        self,
        rows: int | Sequence[int],
        custom_properties: Mapping[str, Any] | None,
    ) -> None:
        """
        Replace the custom properties of one or more existing rows.

        Raises:
            SchemaError: A row index is out of range.
        """
        indices = [rows] if isinstance(rows, int) else list(rows)
        for index in indices:
            if not isinstance(index, int) or not 0 <= index < len(self._rows):
                raise SchemaError(
                    f"Row index {index!r} out of range for {len(self._rows)} rows",
                    index,
                )
        for index in indices:
            self._rows[index] = self._rows[index].with_properties(custom_properties)

    def prepared_data(self, order_by: Any = None) -> list[Row]:
        """Rows in the requested order. See vizdata.ordering for order_by."""
        return sort_rows(self._rows, order_by)

    # ── Rendering ───────────────────────────────────────────────────────

    def to_json(
        self,
        columns_order: Sequence[str] | None = None,
        order_by: Any = None,
    ) -> str:
        return render_json(self, columns_order, order_by)

    def to_js_code(
        self,
        name: str | None = None,
        columns_order: Sequence[str] | None = None,
        order_by: Any = None,
    ) -> str:
        return render_js_code(self, name, columns_order, order_by)

    def to_csv(
        self,
        columns_order: Sequence[str] | None = None,
        order_by: Any = None,
        separator: str | None = None,
    ) -> str:
        return render_csv(self, columns_order, order_by, separator)

    def to_tsv_excel(
        self,
        columns_order: Sequence[str] | None = None,
        order_by: Any = None,
    ) -> str:
        return render_tsv_excel(self, columns_order, order_by)

    def to_html(
        self,
        columns_order: Sequence[str] | None = None,
        order_by: Any = None,
    ) -> str:
        return render_html(self, columns_order, order_by)

    def to_json_response(
        self,
        columns_order: Sequence[str] | None = None,
        order_by: Any = None,
        req_id: int | str = 0,
        response_handler: str | None = None,
    ) -> str:
        return render_json_response(self, columns_order, order_by, req_id, response_handler)

    def to_response(
        self,
        columns_order: Sequence[str] | None = None,
        order_by: Any = None,
        tqx: str = "",
    ) -> str:
        """
        Render the table as requested by a tqx request-options string.

        Raises:
            RequestOptionsError: tqx is malformed or names an unsupported
                format or version.
        """
        options = parse_request_options(tqx)
        return render(
            self,
            options.out,
            columns_order,
            order_by,
            req_id=options.req_id,
            response_handler=options.response_handler,
        )
