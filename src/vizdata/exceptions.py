"""
Package-level exception hierarchy for vizdata.

All exceptions inherit from DataTableError, enabling:
- Catching all vizdata errors with a single except clause
- Context fields for debugging (column_id, index, column_type, etc.)
- Structured serialization via to_dict() for JSON error responses

Hierarchy:
    DataTableError
    ├── SchemaError              – Malformed or unsupported table description
    ├── BindingError             – Payload does not fit the column list
    │   ├── StructuralMismatchError – Wrong container kind at some column
    │   └── CardinalityError        – More payload elements than columns
    ├── TypeMismatchError        – Value incompatible with its column type
    └── RequestOptionsError      – Malformed request-options (tqx) string
        ├── UnsupportedFormatError  – Unknown 'out' value
        └── UnsupportedVersionError – Unknown protocol 'version'
"""

from __future__ import annotations

from typing import Any


class DataTableError(Exception):
    """
    Base exception for all vizdata errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON error responses."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
        }


# ── Schema Errors ────────────────────────────────────────────────────────


class SchemaError(DataTableError):
    """
    A table description (or a single column definition) is invalid.

    Raised for empty or non-iterable descriptions, unknown column types,
    column definitions with more than four elements, duplicate ids and
    unknown column ids passed to a renderer.

    Attributes:
        description: The offending description fragment, when known.
    """

    def __init__(self, message: str, description: Any = None) -> None:
        self.description = description
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["description"] = repr(self.description) if self.description is not None else None
        return result


# ── Binding Errors ───────────────────────────────────────────────────────


class BindingError(DataTableError):
    """
    Appended data does not match the table description.

    Attributes:
        column_id: Id of the column the binder was positioned on.
        index: Cursor position in the normalized column list.
    """

    def __init__(
        self,
        message: str,
        column_id: str | None = None,
        index: int | None = None,
    ) -> None:
        self.column_id = column_id
        self.index = index
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["column_id"] = self.column_id
        result["index"] = self.index
        return result


class StructuralMismatchError(BindingError):
    """The payload has the wrong container kind for the current column."""
    pass


class CardinalityError(BindingError):
    """The payload has more elements than there are remaining columns."""
    pass


# ── Value Errors ─────────────────────────────────────────────────────────


class TypeMismatchError(DataTableError):
    """
    A cell value cannot be encoded as its column's declared type.

    Raised lazily, when a renderer encodes the value.

    Attributes:
        column_type: The declared column type.
        value_type: Python type name of the rejected value.
    """

    def __init__(
        self,
        message: str,
        column_type: str | None = None,
        value_type: str | None = None,
    ) -> None:
        self.column_type = column_type
        self.value_type = value_type
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["column_type"] = self.column_type
        result["value_type"] = self.value_type
        return result


# ── Request Option Errors ────────────────────────────────────────────────


class RequestOptionsError(DataTableError):
    """
    The request-options string could not be parsed.

    Attributes:
        option: The option segment or key that caused the error.
    """

    def __init__(self, message: str, option: str | None = None) -> None:
        self.option = option
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["option"] = self.option
        return result


class UnsupportedFormatError(RequestOptionsError):
    """The requested output format ('out') is not supported."""
    pass


class UnsupportedVersionError(RequestOptionsError):
    """The requested protocol version is not supported."""
    pass
