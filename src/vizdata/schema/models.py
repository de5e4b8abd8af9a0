"""
Pydantic models for normalized table descriptions.

The structure is:
- ColumnDescriptor: one column after parsing (id, label, type, properties)
  annotated with where its values live in an append payload
- Schema: the flat, ordered, depth-annotated column list of a table

Column types map one-to-one onto the visualization client's DataTable
column types.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, Field


class ColumnType(str, Enum):
    """Supported column data types."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    TIMEOFDAY = "timeofday"

    @classmethod
    def names(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)

    @property
    def is_date_family(self) -> bool:
        """Date-family values render with commas and need quoting in CSV."""
        return self in (ColumnType.DATE, ColumnType.DATETIME, ColumnType.TIMEOFDAY)


class ColumnContainer(str, Enum):
    """
    How a column's values are found in an append payload.

    - SCALAR: the payload fragment itself is the value
    - SEQUENCE: the value is at a position in a list
    - MAPPING: the value is a key (outer levels) or a key's value (last level)
    """
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


class ColumnDescriptor(BaseModel):
    """
    A single normalized column.

    depth and container are filled in by the schema normalizer; a
    descriptor straight out of parse_column() leaves them unset.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique column identifier")
    label: str = Field(..., description="Display label (defaults to id)")
    type: ColumnType = Field(ColumnType.STRING, description="Column data type")
    custom_properties: dict[str, Any] = Field(
        default_factory=dict,
        description="Column custom properties, in insertion order",
    )
    depth: int | None = Field(None, ge=0, description="Nesting level in the description")
    container: ColumnContainer | None = Field(None, description="Payload container kind")

    def placed(self, depth: int, container: ColumnContainer) -> "ColumnDescriptor":
        """Return a copy positioned at the given depth and container."""
        return self.model_copy(update={"depth": depth, "container": container})

    def as_dict(self) -> dict[str, Any]:
        """Plain dict view, with enum values flattened to strings."""
        return self.model_dump(mode="json")


class Schema:
    """
    Immutable, ordered list of normalized columns.

    Acts as the state table the data binder walks: each position is keyed
    by (container, depth), and the binder moves a cursor over it.
    """

    __slots__ = ("_columns", "_by_id")

    def __init__(self, columns: list[ColumnDescriptor] | tuple[ColumnDescriptor, ...]) -> None:
        self._columns: tuple[ColumnDescriptor, ...] = tuple(columns)
        self._by_id: dict[str, ColumnDescriptor] = {c.id: c for c in self._columns}

    def __len__(self) -> int:
        return len(self._columns)

    def __iter__(self) -> Iterator[ColumnDescriptor]:
        return iter(self._columns)

    def __getitem__(self, index: int) -> ColumnDescriptor:
        return self._columns[index]

    def __contains__(self, column_id: object) -> bool:
        return column_id in self._by_id

    def __repr__(self) -> str:
        return f"Schema({[c.id for c in self._columns]!r})"

    @property
    def columns(self) -> tuple[ColumnDescriptor, ...]:
        return self._columns

    @property
    def ids(self) -> list[str]:
        return [c.id for c in self._columns]

    @property
    def last_depth(self) -> int:
        """Depth of the last column - the deepest level of the description."""
        return self._columns[-1].depth or 0

    def get(self, column_id: str) -> ColumnDescriptor:
        return self._by_id[column_id]
