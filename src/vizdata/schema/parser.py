"""
Parser for table descriptions.

This module handles:
- Parsing a single column definition ('id' or (id, type, label, props))
- Normalizing a nested description (strings, sequences and mappings)
  into a flat Schema
- Enforcing the nesting limit from the configuration

A description is one of:
    'id'                                  one scalar column
    ('id', 'type'[, 'label'[, {props}]])  one scalar column
    [coldef, coldef, ...]                 columns found by list position
    {'id': 'type', 'id2': (...), ...}     columns found by mapping key
    {coldef: <description>}               key column over a nested level

Example:
    >>> schema = parse_description({("a", "number"): [("b", "number"), "c"]})
    >>> [(c.id, c.depth, c.container.value) for c in schema]
    [('a', 0, 'mapping'), ('b', 1, 'sequence'), ('c', 1, 'sequence')]

NOTE: a single-key mapping whose value is a short sequence is ambiguous.
{'a': ('b', 'c')} could be column 'a' of type 'b' with label 'c', or
column 'a' over a nested column 'b' of type 'c'. The first reading wins.
To get the second, make the key a tuple ({('a',): ('b', 'c')}) or pad the
value to four elements ({'a': ('b', 'c', 'b', {})}).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from vizdata.config import get_config
from vizdata.exceptions import SchemaError
from vizdata.schema.models import ColumnContainer, ColumnDescriptor, ColumnType, Schema
from vizdata.values import ValueKind, classify, type_name

logger = logging.getLogger(__name__)

# Longest column definition: (id, type, label, custom_properties)
MAX_COLUMN_FIELDS = 4


def parse_column(description: Any) -> ColumnDescriptor:
    """
    Parse a single column definition.

    Args:
        description: 'id', or a list/tuple of (id[, type[, label[, props]]])

    Returns:
        ColumnDescriptor with depth and container left unset. The type
        defaults to string, the label to the id and the custom properties
        to an empty dict.

    Raises:
        SchemaError: Empty description, non-string id/type/label, unknown
            type, non-mapping custom properties or more than four fields.
    """
    if not description:
        raise SchemaError("Description error: empty description given", description)

    kind = classify(description)
    if kind is ValueKind.STRING:
        description = (description,)
    elif kind is not ValueKind.SEQUENCE:
        raise SchemaError(
            f"Description error: expected either string or sequence, got {type_name(description)}",
            description,
        )

    if len(description) > MAX_COLUMN_FIELDS:
        raise SchemaError(
            f"Description error: sequence of length {len(description)} "
            f"(max {MAX_COLUMN_FIELDS})",
            description,
        )

    for field in description[:3]:
        if not isinstance(field, str):
            raise SchemaError(
                "Description error: expected sequence of strings, "
                f"current element of type {type_name(field)}",
                description,
            )

    column_id = description[0]
    type_token = description[1].lower() if len(description) > 1 else ColumnType.STRING.value
    label = description[2] if len(description) > 2 else column_id

    custom_properties: dict[str, Any] = {}
    if len(description) > 3:
        properties = description[3]
        if not isinstance(properties, Mapping) or not all(
            isinstance(key, str) for key in properties
        ):
            raise SchemaError(
                "Description error: expected custom properties mapping with string keys, "
                f"got {type_name(properties)}",
                description,
            )
        custom_properties = dict(properties)

    if type_token not in ColumnType.names():
        raise SchemaError(f"Description error: unsupported type '{type_token}'", description)

    return ColumnDescriptor(
        id=column_id,
        label=label,
        type=ColumnType(type_token),
        custom_properties=custom_properties,
    )


def is_column_definition(description: Any) -> bool:
    """
    Leaf test: does this description define exactly one column?

    True for a bare string, or a sequence whose second element names a
    column type. A one-element sequence is a list of one column, not a leaf.
    """
    kind = classify(description)
    if kind is ValueKind.STRING:
        return True
    if kind is ValueKind.SEQUENCE and len(description) > 1:
        second = description[1]
        return isinstance(second, str) and second.lower() in ColumnType.names()
    return False


def _is_innermost_mapping(description: Mapping[Any, Any]) -> bool:
    """
    Decide whether a mapping is the last level of the description.

    More than one key means every key is a column. A single string key
    mapped to a sequence of fewer than four items starting with a string
    is read as (type[, label[, props]]) for that key.
    """
    if len(description) != 1:
        return True
    key, value = next(iter(description.items()))
    return (
        isinstance(key, str)
        and classify(value) is ValueKind.SEQUENCE
        and len(value) < MAX_COLUMN_FIELDS
        and len(value) > 0
        and isinstance(value[0], str)
    )


def _parse_level(description: Any, depth: int, max_depth: int) -> list[ColumnDescriptor]:
    """Normalize one level of the description, recursing into nested mappings."""
    if depth >= max_depth:
        raise SchemaError(
            f"Description too deeply nested: depth {depth} (max {max_depth})",
            description,
        )

    if is_column_definition(description):
        column = parse_column(description)
        return [column.placed(depth, ColumnContainer.SCALAR)]

    kind = classify(description)

    if kind is ValueKind.SEQUENCE:
        if len(description) == 0:
            raise SchemaError("Description sequences should not be empty", description)
        return [
            parse_column(item).placed(depth, ColumnContainer.SEQUENCE)
            for item in description
        ]

    if kind is not ValueKind.MAPPING:
        raise SchemaError(
            f"Expected an iterable object, got {type_name(description)}",
            description,
        )

    if len(description) == 0:
        raise SchemaError("Empty mappings are not allowed inside description", description)

    if _is_innermost_mapping(description):
        columns = []
        for key, value in description.items():
            if classify(value) is ValueKind.SEQUENCE:
                column = parse_column((key, *value))
            else:
                column = parse_column((key, value))
            columns.append(column.placed(depth, ColumnContainer.MAPPING))
        return columns

    # Outer mapping: exactly one key, which is a column over the next level.
    key, value = next(iter(description.items()))
    outer = parse_column(key).placed(depth, ColumnContainer.MAPPING)
    return [outer, *_parse_level(value, depth + 1, max_depth)]


def parse_description(description: Any, max_depth: int | None = None) -> Schema:
    """
    Normalize a table description into a flat Schema.

    Args:
        description: A description in any of the formats listed in the
            module docstring.
        max_depth: Nesting limit. If None, uses Config.max_description_depth.

    Returns:
        Schema: columns in traversal order, each with depth and container.

    Raises:
        SchemaError: If the description or any column definition is invalid,
            or if two columns share an id.
    """
    if max_depth is None:
        max_depth = get_config().max_description_depth

    columns = _parse_level(description, 0, max_depth)

    seen: set[str] = set()
    for column in columns:
        if column.id in seen:
            raise SchemaError(f"Duplicate column id '{column.id}'", description)
        seen.add(column.id)

    logger.debug(
        "Normalized description into %d columns (max depth %d)",
        len(columns),
        columns[-1].depth,
    )
    return Schema(columns)
