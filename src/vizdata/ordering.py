"""
Row ordering for renderers.

Accepted order_by forms:
    None / ""                         keep insertion order
    "col"                             one key, ascending
    ("col", "asc" | "desc")           one key with a direction
    ["col1", ("col2", "desc"), ...]   several keys, first has priority

Directions are case-insensitive. Comparisons use the raw cell values,
before any encoding; a missing or None value sorts before everything else.
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from vizdata.exceptions import SchemaError, TypeMismatchError
from vizdata.values import ValueKind, classify, type_name

if TYPE_CHECKING:
    from vizdata.binder import Row

RowComparator = Callable[["Row", "Row"], int]

_DIRECTIONS = ("asc", "desc")


@dataclass(frozen=True)
class SortKey:
    """One ordering key."""

    column_id: str
    descending: bool = False

    @property
    def multiplier(self) -> int:
        return -1 if self.descending else 1


def _is_direction_pair(value: Any) -> bool:
    return (
        classify(value) is ValueKind.SEQUENCE
        and len(value) == 2
        and isinstance(value[0], str)
        and isinstance(value[1], str)
        and value[1].lower() in _DIRECTIONS
    )


def parse_order_by(order_by: Any) -> list[SortKey]:
    """
    Normalize an order_by argument into SortKeys.

    Raises:
        SchemaError: An element is neither a column id nor an
            (id, 'asc'|'desc') pair.
    """
    if not order_by:
        return []

    if isinstance(order_by, str) or _is_direction_pair(order_by):
        order_by = (order_by,)

    if classify(order_by) is not ValueKind.SEQUENCE:
        raise SchemaError(
            f"Expected column id or sequence of sort keys, got {type_name(order_by)}",
            order_by,
        )

    keys = []
    for key in order_by:
        if isinstance(key, str):
            keys.append(SortKey(key))
        elif _is_direction_pair(key):
            keys.append(SortKey(key[0], key[1].lower() == "desc"))
        else:
            raise SchemaError(
                "Expected sort key with second value: 'asc' or 'desc'",
                key,
            )
    return keys


def _compare_values(left: Any, right: Any) -> int:
    if left is None and right is None:
        return 0
    if left is None:
        return -1
    if right is None:
        return 1
    try:
        if left == right:
            return 0
        return -1 if left < right else 1
    except TypeError:
        raise TypeMismatchError(
            f"Cannot order {type_name(left)} against {type_name(right)}",
            None,
            type_name(right),
        ) from None


def build_comparator(order_by: Any) -> RowComparator | None:
    """
    Build a multi-key row comparator.

    Returns:
        A cmp-style function over Rows, or None when no ordering is
        requested. Ties on one key fall through to the next; a tie on all
        keys compares equal.
    """
    keys = parse_order_by(order_by)
    if not keys:
        return None

    def compare(row1: "Row", row2: "Row") -> int:
        for key in keys:
            cell1 = row1.get(key.column_id)
            cell2 = row2.get(key.column_id)
            result = _compare_values(
                cell1.value if cell1 is not None else None,
                cell2.value if cell2 is not None else None,
            )
            if result:
                return key.multiplier * result
        return 0

    return compare


def sort_rows(rows: Iterable["Row"], order_by: Any = None) -> list["Row"]:
    """
    Return the rows in the requested order.

    Python's sort is stable, so rows equal on every key keep their
    insertion order.
    """
    comparator = build_comparator(order_by)
    if comparator is None:
        return list(rows)
    return sorted(rows, key=functools.cmp_to_key(comparator))


def ordered_columns(all_ids: Sequence[str], columns_order: Sequence[str] | None) -> list[str]:
    """
    Validate a renderer's columns_order argument.

    Raises:
        SchemaError: columns_order names an unknown or repeated column.
    """
    if columns_order is None:
        return list(all_ids)
    known = set(all_ids)
    seen: set[str] = set()
    for column_id in columns_order:
        if column_id not in known:
            raise SchemaError(f"Unknown column id '{column_id}' in columns order", column_id)
        if column_id in seen:
            raise SchemaError(f"Column id '{column_id}' repeated in columns order", column_id)
        seen.add(column_id)
    return list(columns_order)
