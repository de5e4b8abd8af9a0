"""
Type-directed value encoder.

Translates one cell value plus its column's declared type into the text
the renderers emit. String escaping is pluggable so the same encoder
serves JS literals, CSV fields and HTML cells.

Examples:
    encode_value(None, "boolean")        -> "null"
    encode_value(False, "boolean")       -> "false"
    encode_value((5, "5$"), "number")    -> ("5", "'5$'")
    encode_value((None, "5$"), "number") -> ("null", "'5$'")
    encode_value(date(2010, 1, 2), "date") -> "new Date(2010,0,2)"

Months are emitted zero-based, matching the JS Date constructor.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from decimal import Decimal
from typing import Any, NamedTuple

from vizdata.exceptions import SchemaError, TypeMismatchError
from vizdata.schema.models import ColumnType
from vizdata.values import Cell, CellShape, ValueKind, classify, type_name

Escaper = Callable[[Any], str]

NULL = "null"

# Characters with a short escape in both JS and Python string literals.
_SHORT_ESCAPES = {
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}


# Characters that browsers handle inconsistently inside string literals.
_UNSAFE_RANGES = (
    (0x0000, 0x001F),
    (0x007F, 0x009F),
    (0x00AD, 0x00AD),
    (0x0600, 0x0604),
    (0x070F, 0x070F),
    (0x17B4, 0x17B5),
    (0x200C, 0x200F),
    (0x2028, 0x202F),
    (0x2060, 0x206F),
    (0xFEFF, 0xFEFF),
    (0xFFF0, 0xFFFF),
)


def _needs_unicode_escape(char: str) -> bool:
    code = ord(char)
    return any(low <= code <= high for low, high in _UNSAFE_RANGES)


def escape_value(value: Any) -> str:
    """
    Quote a value as a JS string literal.

    Single quotes are used unless the text contains one, in which case
    double quotes are used. Backslashes, the chosen quote, and control,
    format or line-separator characters are escaped; other non-ASCII text
    is kept.
    The result is also a valid Python literal.
    """
    text = str(value)
    quote = '"' if "'" in text else "'"
    parts = []
    for char in text:
        if char in _SHORT_ESCAPES:
            parts.append(_SHORT_ESCAPES[char])
        elif char == quote:
            parts.append("\\" + char)
        elif _needs_unicode_escape(char):
            parts.append(f"\\u{ord(char):04x}")
        else:
            parts.append(char)
    return quote + "".join(parts) + quote


def escape_custom_properties(properties: Mapping[str, Any]) -> str:
    """Render a custom properties mapping as a JS object literal."""
    items = [f"{escape_value(key)}:{escape_value(value)}" for key, value in properties.items()]
    return "{" + ",".join(items) + "}"


def escape_csv(value: Any) -> str:
    """Double-quote a value for CSV, doubling inner double quotes."""
    return '"' + str(value).replace('"', '""') + '"'


def escape_html(value: Any) -> str:
    """Replace &, <, > and \" with HTML entities."""
    return (
        str(value)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def to_text(value: Any) -> str:
    """Identity escaper: plain text, no quoting."""
    return str(value)


class EncodedCell(NamedTuple):
    """Encoded form of one cell."""

    value: str
    formatted: str | None
    properties: Mapping[str, Any] | None
    shape: CellShape

    @property
    def has_format(self) -> bool:
        """True for cells given as (value, formatted[, properties])."""
        return self.shape in (CellShape.PAIR, CellShape.TRIPLE)


def _type_label(column_type: ColumnType | str) -> str:
    return column_type.value if isinstance(column_type, ColumnType) else str(column_type)


def _resolve_type(column_type: ColumnType | str) -> ColumnType:
    if isinstance(column_type, ColumnType):
        return column_type
    try:
        return ColumnType(str(column_type).lower())
    except ValueError:
        raise SchemaError(f"Unsupported type {column_type}", column_type) from None


def _encode_scalar(value: Any, column_type: ColumnType | str, escape: Escaper) -> str:
    """Encode a bare value (no formatted text)."""
    kind = classify(value)
    if kind is ValueKind.NULL:
        return NULL

    resolved = _resolve_type(column_type)

    if resolved is ColumnType.BOOLEAN:
        return "true" if value else "false"

    if resolved is ColumnType.NUMBER:
        if kind is not ValueKind.NUMBER:
            raise TypeMismatchError(
                f"Wrong type {type_name(value)} when expected number",
                resolved.value,
                type_name(value),
            )
        if isinstance(value, float):
            if math.isnan(value):
                return "NaN"
            if math.isinf(value):
                return "Infinity" if value > 0 else "-Infinity"
            return repr(value)
        if isinstance(value, Decimal) and not value.is_finite():
            if value.is_nan():
                return "NaN"
            return "-Infinity" if value.is_signed() else "Infinity"
        return str(value)

    if resolved is ColumnType.STRING:
        if isinstance(value, list):
            raise TypeMismatchError(
                "Lists are not allowed as string values",
                resolved.value,
                type_name(value),
            )
        return escape(value)

    if resolved is ColumnType.DATE:
        if kind not in (ValueKind.DATE, ValueKind.DATETIME):
            raise TypeMismatchError(
                f"Wrong type {type_name(value)} when expected date",
                resolved.value,
                type_name(value),
            )
        return f"new Date({value.year},{value.month - 1},{value.day})"

    if resolved is ColumnType.TIMEOFDAY:
        if kind not in (ValueKind.TIME, ValueKind.DATETIME):
            raise TypeMismatchError(
                f"Wrong type {type_name(value)} when expected time",
                resolved.value,
                type_name(value),
            )
        return f"[{value.hour},{value.minute},{value.second}]"

    # ColumnType.DATETIME
    if kind is not ValueKind.DATETIME:
        raise TypeMismatchError(
            f"Wrong type {type_name(value)} when expected datetime",
            resolved.value,
            type_name(value),
        )
    return (
        f"new Date({value.year},{value.month - 1},{value.day},"
        f"{value.hour},{value.minute},{value.second})"
    )


def encode_cell(
    cell: Cell,
    column_type: ColumnType | str,
    escape: Escaper = escape_value,
) -> EncodedCell:
    """
    Encode a bound cell.

    Raises:
        TypeMismatchError: The value does not fit the column type, the
            formatted text is not a string, the properties are not a
            mapping, or the tuple form has the wrong arity.
        SchemaError: The column type is not one of the supported types.
    """
    if cell.shape is CellShape.MALFORMED:
        raise TypeMismatchError(
            f"Wrong format for value and formatting - {cell.raw!r}",
            _type_label(column_type),
            type_name(cell.raw),
        )

    if cell.shape is CellShape.BARE:
        return EncodedCell(_encode_scalar(cell.value, column_type, escape), None, None, cell.shape)

    if cell.shape is CellShape.TRIPLE and not isinstance(cell.properties, Mapping):
        raise TypeMismatchError(
            f"Wrong format for value and formatting - {cell.raw!r}",
            _type_label(column_type),
            type_name(cell.properties),
        )
    if cell.formatted is not None and not isinstance(cell.formatted, str):
        raise TypeMismatchError(
            f"Formatted value is not string, given {type_name(cell.formatted)}",
            _type_label(column_type),
            type_name(cell.formatted),
        )

    encoded = _encode_scalar(cell.value, column_type, escape)
    formatted = escape(cell.formatted) if cell.formatted is not None else None
    return EncodedCell(encoded, formatted, cell.properties, cell.shape)


def encode_value(
    value: Any,
    column_type: ColumnType | str,
    escape: Escaper = escape_value,
) -> str | tuple[str, str | None]:
    """
    Encode a raw payload value.

    Returns:
        The encoded string for a bare value, or (encoded value, encoded
        formatted text or None) for the (value, formatted[, properties])
        forms. Custom properties are only validated here; renderers emit
        them through encode_cell().
    """
    encoded = encode_cell(Cell.of(value), column_type, escape)
    if encoded.has_format:
        return encoded.value, encoded.formatted
    return encoded.value
