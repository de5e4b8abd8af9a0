"""
Output renderers for different formats.

Separates presentation from the table model. Every renderer takes the
same columns_order / order_by arguments, encodes cells through
vizdata.encoder, and returns one string. An encoding error aborts the
whole render; nothing is returned partially.

Formats:
- render_json: JS-literal JSON for the DataTable constructor
- render_js_code: JS statements building a DataTable
- render_csv / render_tsv_excel: delimited text
- render_html: an HTML table page
- render_json_response: JSON wrapped in the data-source response envelope
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Sequence

from vizdata.config import get_config
from vizdata.encoder import (
    NULL,
    EncodedCell,
    encode_cell,
    escape_csv,
    escape_custom_properties,
    escape_html,
    escape_value,
    to_text,
)
from vizdata.ordering import ordered_columns, sort_rows
from vizdata.schema.models import ColumnDescriptor
from vizdata.values import Cell

if TYPE_CHECKING:
    from vizdata.binder import Row
    from vizdata.table import DataTable

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "0.6"


class OutputFormat(str, Enum):
    """Output formats selectable through the request options ('out')."""

    JSON = "json"
    HTML = "html"
    CSV = "csv"
    TSV_EXCEL = "tsv-excel"


def _prepare(
    table: "DataTable",
    columns_order: Sequence[str] | None,
    order_by: Any,
) -> tuple[list[ColumnDescriptor], list["Row"]]:
    """Resolve the column order and the row order for one render."""
    schema = table.schema
    columns = [schema.get(column_id) for column_id in ordered_columns(schema.ids, columns_order)]
    rows = sort_rows(table.rows, order_by)
    return columns, rows


# =============================================================================
# JSON (JS literal) renderer
# =============================================================================


def _column_json(column: ColumnDescriptor) -> str:
    parts = [
        f"id:{escape_value(column.id)}",
        f"label:{escape_value(column.label)}",
        f"type:'{column.type.value}'",
    ]
    if column.custom_properties:
        parts.append(f"p:{escape_custom_properties(column.custom_properties)}")
    return "{" + ",".join(parts) + "}"


def _cell_json(encoded: EncodedCell) -> str:
    parts = [f"v:{encoded.value}"]
    if encoded.formatted is not None:
        parts.append(f"f:{encoded.formatted}")
    if encoded.properties:
        parts.append(f"p:{escape_custom_properties(encoded.properties)}")
    return "{" + ",".join(parts) + "}"


def render_json(
    table: "DataTable",
    columns_order: Sequence[str] | None = None,
    order_by: Any = None,
) -> str:
    """
    Render the table as a JS-literal JSON string.

    The result can be passed straight to the google.visualization.DataTable
    constructor. A missing or None cell is left out (an empty slot between
    commas) unless it is in the last column, which always gets {v:null}.

    Example result (without the newlines):
        {cols:[{id:'a',label:'a',type:'number'},{id:'b',label:'b',type:'string'}],
         rows:[{c:[{v:1},{v:'z'}]},{c:[{v:3,f:'3$'},{v:null}]}],
         p:{'foo':'bar'}}
    """
    columns, rows = _prepare(table, columns_order, order_by)
    last_id = columns[-1].id if columns else None

    cols_json = [_column_json(column) for column in columns]

    rows_json = []
    for row in rows:
        cells_json = []
        for column in columns:
            cell = row.get(column.id)
            if (cell is None or cell.is_null) and column.id != last_id:
                cells_json.append("")
                continue
            if cell is None:
                cells_json.append(f"{{v:{NULL}}}")
                continue
            cells_json.append(_cell_json(encode_cell(cell, column.type)))
        row_json = "{c:[" + ",".join(cells_json) + "]"
        if row.custom_properties:
            row_json += f",p:{escape_custom_properties(row.custom_properties)}"
        rows_json.append(row_json + "}")

    result = "{cols:[" + ",".join(cols_json) + "],rows:[" + ",".join(rows_json) + "]"
    if table.custom_properties:
        result += f",p:{escape_custom_properties(table.custom_properties)}"
    return result + "}"


# =============================================================================
# JS code renderer
# =============================================================================


def render_js_code(
    table: "DataTable",
    name: str | None = None,
    columns_order: Sequence[str] | None = None,
    order_by: Any = None,
) -> str:
    """
    Render the table as JS code that builds an equivalent DataTable.

    Typically used for debugging. If name is None, uses
    Config.js_table_name.

    Example result:
        var tab1 = new google.visualization.DataTable();
        tab1.addColumn('string', 'a', 'a');
        tab1.addColumn('number', 'b', 'b');
        tab1.addRows(2);
        tab1.setCell(0, 0, 'a');
        tab1.setCell(0, 1, 1, null, {'foo':'bar'});
        tab1.setCell(1, 1, 3, '3$');
    """
    name = name or get_config().js_table_name
    columns, rows = _prepare(table, columns_order, order_by)

    lines = [f"var {name} = new google.visualization.DataTable();"]
    if table.custom_properties:
        lines.append(f"{name}.setTableProperties({escape_custom_properties(table.custom_properties)});")

    for index, column in enumerate(columns):
        lines.append(
            f"{name}.addColumn('{column.type.value}', "
            f"{escape_value(column.label)}, {escape_value(column.id)});"
        )
        if column.custom_properties:
            lines.append(
                f"{name}.setColumnProperties({index}, "
                f"{escape_custom_properties(column.custom_properties)});"
            )

    lines.append(f"{name}.addRows({len(rows)});")

    for row_index, row in enumerate(rows):
        for column_index, column in enumerate(columns):
            cell = row.get(column.id)
            if cell is None or cell.is_null:
                continue
            encoded = encode_cell(cell, column.type)
            args = [str(row_index), str(column_index), encoded.value]
            if encoded.has_format:
                args.append(encoded.formatted if encoded.formatted is not None else NULL)
                if encoded.properties:
                    args.append(escape_custom_properties(encoded.properties))
            lines.append(f"{name}.setCell({', '.join(args)});")
        if row.custom_properties:
            lines.append(
                f"{name}.setRowProperties({row_index}, "
                f"{escape_custom_properties(row.custom_properties)});"
            )

    return "\n".join(lines) + "\n"


# =============================================================================
# Delimited text renderers
# =============================================================================


def _csv_field(cell: Cell | None, column: ColumnDescriptor) -> str:
    if cell is None or cell.is_null:
        return '""'
    encoded = encode_cell(cell, column.type, escape_csv)
    if column.type.is_date_family and encoded.formatted is not None:
        return encoded.formatted
    if encoded.value == NULL:
        return '""'
    if column.type.is_date_family:
        # Date constructors contain commas.
        return f'"{encoded.value}"'
    return encoded.value


def render_csv(
    table: "DataTable",
    columns_order: Sequence[str] | None = None,
    order_by: Any = None,
    separator: str | None = None,
) -> str:
    """
    Render the table as CSV.

    If separator is None, uses Config.csv_separator. Formatted values are
    used for date, datetime and timeofday columns only.

    Example result:
        "a", "b", "c"
        1, "z", 2
        3, "w", ""
    """
    if separator is None:
        separator = get_config().csv_separator
    columns, rows = _prepare(table, columns_order, order_by)

    header = separator.join(escape_csv(column.label) for column in columns)
    lines = [
        separator.join(_csv_field(row.get(column.id), column) for column in columns)
        for row in rows
    ]
    # The header line is always newline-terminated, even for an empty table.
    return header + "\n" + "\n".join(lines)


def render_tsv_excel(
    table: "DataTable",
    columns_order: Sequence[str] | None = None,
    order_by: Any = None,
) -> str:
    """Render the table as tab-separated values for spreadsheet import."""
    return render_csv(table, columns_order, order_by, separator="\t")


# =============================================================================
# HTML renderer
# =============================================================================


def render_html(
    table: "DataTable",
    columns_order: Sequence[str] | None = None,
    order_by: Any = None,
) -> str:
    """
    Render the table as an HTML page.

    Cells show the formatted value when one is given. Example result
    (without the newlines):
        <html><body><table border='1'>
         <thead><tr><th>a</th><th>b</th></tr></thead>
         <tbody><tr><td>1</td><td>z</td></tr><tr><td>3$</td><td></td></tr></tbody>
        </table></body></html>
    """
    columns, rows = _prepare(table, columns_order, order_by)

    header = "".join(f"<th>{escape_html(column.label)}</th>" for column in columns)

    body_rows = []
    for row in rows:
        cells_html = []
        for column in columns:
            cell = row.get(column.id)
            text = ""
            if cell is not None and not cell.is_null:
                encoded = encode_cell(cell, column.type, to_text)
                if encoded.formatted is not None:
                    text = encoded.formatted
                elif encoded.value != NULL:
                    text = encoded.value
            cells_html.append(f"<td>{escape_html(text)}</td>")
        body_rows.append("<tr>" + "".join(cells_html) + "</tr>")

    return (
        "<html><body><table border='1'>"
        f"<thead><tr>{header}</tr></thead>"
        f"<tbody>{''.join(body_rows)}</tbody>"
        "</table></body></html>"
    )


# =============================================================================
# Data-source response renderer
# =============================================================================


def render_json_response(
    table: "DataTable",
    columns_order: Sequence[str] | None = None,
    order_by: Any = None,
    req_id: int | str = 0,
    response_handler: str | None = None,
) -> str:
    """
    Render the table wrapped in the data-source response envelope.

    If response_handler is None, uses Config.response_handler. Example
    result (newlines added):
        google.visualization.Query.setResponse({
            'version':'0.6', 'reqId':'0', 'status':'OK',
            'table': {cols:[...],rows:[...]}});
    """
    response_handler = response_handler or get_config().response_handler
    table_json = render_json(table, columns_order, order_by)
    return (
        f"{response_handler}({{'version':'{PROTOCOL_VERSION}', 'reqId':'{req_id}', "
        f"'status':'OK', 'table': {table_json}}});"
    )


def render(
    table: "DataTable",
    format: OutputFormat = OutputFormat.JSON,
    columns_order: Sequence[str] | None = None,
    order_by: Any = None,
    req_id: int | str = 0,
    response_handler: str | None = None,
) -> str:
    """
    Render the table in the format selected by a request.

    JSON requests get the full response envelope; the other formats are
    returned bare.
    """
    logger.debug("Rendering %d rows as %s", len(table.rows), format.value)
    if format == OutputFormat.JSON:
        return render_json_response(table, columns_order, order_by, req_id, response_handler)
    elif format == OutputFormat.HTML:
        return render_html(table, columns_order, order_by)
    elif format == OutputFormat.CSV:
        return render_csv(table, columns_order, order_by)
    elif format == OutputFormat.TSV_EXCEL:
        return render_tsv_excel(table, columns_order, order_by)
    else:
        raise ValueError(f"Unknown output format: {format}")
