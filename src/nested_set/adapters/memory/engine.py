"""In-memory StorageEngine adapter.

Holds a flat list of row dicts and evaluates ``TreeQuery`` predicates in
Python. Useful for tests and for small trees loaded wholesale.
"""

from __future__ import annotations

import operator
from typing import TYPE_CHECKING, Any

import structlog

from nested_set.domain.models import Comparator

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from nested_set.domain.models import Predicate
    from nested_set.domain.query import TreeQuery

logger = structlog.get_logger(__name__)

_OPERATORS: dict[Comparator, Callable[[Any, Any], bool]] = {
    Comparator.LT: operator.lt,
    Comparator.LE: operator.le,
    Comparator.GT: operator.gt,
    Comparator.GE: operator.ge,
    Comparator.EQ: operator.eq,
}


def _matches(row: Mapping[str, Any], predicate: Predicate) -> bool:
    # A missing column never satisfies a condition, as with SQL NULL.
    value = row.get(predicate.field)
    if value is None:
        return False
    try:
        return _OPERATORS[predicate.op](value, predicate.value)
    except TypeError:
        return False


class InMemoryStorageEngine:
    """StorageEngine over a list of rows."""

    def __init__(self, rows: Iterable[Mapping[str, Any]] = ()) -> None:
        self._rows: list[dict[str, Any]] = [dict(row) for row in rows]

    def add(self, row: Mapping[str, Any]) -> None:
        self._rows.append(dict(row))

    def __len__(self) -> int:
        return len(self._rows)

    def fetch(self, query: TreeQuery) -> list[dict[str, Any]]:
        matched = [
            row for row in self._rows if all(_matches(row, p) for p in query.predicates)
        ]
        if query.ordering is not None:
            field = query.ordering.field
            # Rows lacking the sort key sort after the others.
            matched.sort(
                key=lambda row: (row.get(field) is None, row.get(field)),
                reverse=query.ordering.descending,
            )
        if query.limit is not None:
            matched = matched[: query.limit]
        logger.debug("memory_query", predicates=len(query.predicates), rows=len(matched))
        return [dict(row) for row in matched]
