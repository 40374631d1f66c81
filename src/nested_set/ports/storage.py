"""Storage engine port interface.

Uses typing.Protocol for structural subtyping (not ABCs).
The memory, SQLite and Neo4j adapters implement this protocol.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from nested_set.domain.query import TreeQuery


class StorageEngine(Protocol):
    """Protocol for the query-execution engine holding the node rows."""

    def fetch(self, query: TreeQuery) -> Iterable[Mapping[str, Any]]:
        """Return the rows matching every predicate of ``query``.

        Rows must follow ``query.ordering`` when set and contain at most
        ``query.limit`` entries when a limit is set. Engines must support
        ``<, <=, >, >=, ==`` on integer fields and ``==`` on the root field.
        """
        ...


class EntityFactory(Protocol):
    """Builds a caller-side entity instance from a returned row."""

    def __call__(self, row: Mapping[str, Any]) -> Any: ...
