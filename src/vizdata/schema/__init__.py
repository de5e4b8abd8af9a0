"""Table description parsing module."""

from vizdata.schema.models import ColumnContainer, ColumnDescriptor, ColumnType, Schema
from vizdata.schema.parser import is_column_definition, parse_column, parse_description

__all__ = [
    "ColumnContainer",
    "ColumnDescriptor",
    "ColumnType",
    "Schema",
    "is_column_definition",
    "parse_column",
    "parse_description",
]
