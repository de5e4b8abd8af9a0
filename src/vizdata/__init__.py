"""vizdata - Typed data tables for the visualization client, with JSON, JS, CSV and HTML output."""

__version__ = "0.1.0"
__license__ = "MIT"

# Exception hierarchy (import first so other modules can use it)
from vizdata.exceptions import (
    DataTableError,
    SchemaError,
    BindingError,
    StructuralMismatchError,
    CardinalityError,
    TypeMismatchError,
    RequestOptionsError,
    UnsupportedFormatError,
    UnsupportedVersionError,
)

from vizdata.config import Config, get_config, reset_config
from vizdata.schema import ColumnContainer, ColumnDescriptor, ColumnType, Schema, parse_column, parse_description
from vizdata.values import Cell, CellShape
from vizdata.encoder import encode_value, escape_value
from vizdata.binder import DataBinder, Row
from vizdata.ordering import build_comparator, sort_rows
from vizdata.output import OutputFormat, RequestOptions, parse_request_options
from vizdata.table import DataTable

__all__ = [
    # Version
    "__version__",
    # Exceptions
    "DataTableError",
    "SchemaError",
    "BindingError",
    "StructuralMismatchError",
    "CardinalityError",
    "TypeMismatchError",
    "RequestOptionsError",
    "UnsupportedFormatError",
    "UnsupportedVersionError",
    # Config
    "Config",
    "get_config",
    "reset_config",
    # Schema
    "ColumnContainer",
    "ColumnDescriptor",
    "ColumnType",
    "Schema",
    "parse_column",
    "parse_description",
    # Values and encoding
    "Cell",
    "CellShape",
    "encode_value",
    "escape_value",
    # Binding and ordering
    "DataBinder",
    "Row",
    "build_comparator",
    "sort_rows",
    # Output
    "OutputFormat",
    "RequestOptions",
    "parse_request_options",
    # Table
    "DataTable",
]
