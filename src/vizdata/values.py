"""
Value model shared by the parser, binder, encoder and renderers.

Two closed types live here:

- ValueKind: the runtime shape of an arbitrary Python value (string,
  number, boolean, date, sequence, mapping, null, other). classify() is
  the single place where isinstance() sniffing happens.
- Cell: a payload leaf after binding. A bare value, a (value, formatted)
  pair or a (value, formatted, properties) triple. Tuples of any other
  arity are kept as MALFORMED so the encoder can reject them lazily.
"""

from __future__ import annotations

import datetime
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any


class ValueKind(str, Enum):
    """Runtime shape of a value."""

    NULL = "null"
    STRING = "string"
    BOOLEAN = "boolean"
    NUMBER = "number"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    OTHER = "other"

    @property
    def is_date_like(self) -> bool:
        return self in (ValueKind.DATE, ValueKind.DATETIME, ValueKind.TIME)


def classify(value: Any) -> ValueKind:
    """
    Decide the ValueKind of a value.

    bool is checked before numbers (bool is an int subclass), and datetime
    before date (datetime is a date subclass).
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float, Decimal)):
        return ValueKind.NUMBER
    if isinstance(value, datetime.datetime):
        return ValueKind.DATETIME
    if isinstance(value, datetime.date):
        return ValueKind.DATE
    if isinstance(value, datetime.time):
        return ValueKind.TIME
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    return ValueKind.OTHER


def type_name(value: Any) -> str:
    """Short type name used in error messages."""
    return type(value).__name__


class CellShape(str, Enum):
    """How a cell was given in the payload."""

    BARE = "bare"
    PAIR = "pair"
    TRIPLE = "triple"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class Cell:
    """
    One bound cell.

    Attributes:
        value: The raw (pre-encoding) value. Used for sorting.
        formatted: Formatted text for PAIR/TRIPLE cells (may be None).
        properties: Custom properties for TRIPLE cells.
        shape: Which of the accepted payload forms produced the cell.
        raw: The payload leaf exactly as given.
    """

    value: Any
    formatted: Any = None
    properties: Any = None
    shape: CellShape = CellShape.BARE
    raw: Any = None

    @classmethod
    def of(cls, raw: Any) -> "Cell":
        """Classify a payload leaf. Never raises."""
        if isinstance(raw, Cell):
            return raw
        if isinstance(raw, tuple):
            if len(raw) == 2:
                return cls(raw[0], raw[1], None, CellShape.PAIR, raw)
            if len(raw) == 3:
                return cls(raw[0], raw[1], raw[2], CellShape.TRIPLE, raw)
            return cls(None, None, None, CellShape.MALFORMED, raw)
        return cls(raw, None, None, CellShape.BARE, raw)

    @property
    def is_null(self) -> bool:
        """True for a bare None. Pairs and triples are never null cells."""
        return self.shape is CellShape.BARE and self.value is None

    @property
    def has_properties(self) -> bool:
        return self.shape is CellShape.TRIPLE and bool(self.properties)
