"""Neo4j StorageEngine adapter.

Implements the StorageEngine protocol using the neo4j sync driver. Each
fetch runs one read transaction and returns node property dicts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from neo4j import GraphDatabase

from nested_set.adapters.neo4j.queries import NODE_VAR, build_traversal_cypher, quote_name

if TYPE_CHECKING:
    from neo4j import Driver, ManagedTransaction

    from nested_set.domain.query import TreeQuery
    from nested_set.settings import Neo4jSettings

logger = structlog.get_logger(__name__)


def _read_nodes(
    tx: ManagedTransaction,
    cypher: str,
    params: dict[str, Any],
) -> list[dict[str, Any]]:
    result = tx.run(cypher, params)
    return [dict(record[NODE_VAR]) for record in result]


class Neo4jStorageEngine:
    """StorageEngine over ``(:<label>)`` nodes in Neo4j."""

    def __init__(self, settings: Neo4jSettings) -> None:
        self._settings = settings
        self._label = settings.label
        quote_name(self._label)
        self._driver: Driver = GraphDatabase.driver(
            settings.uri,
            auth=(settings.username, settings.password),
            max_connection_pool_size=settings.max_connection_pool_size,
        )
        self._database = settings.database

    def fetch(self, query: TreeQuery) -> list[dict[str, Any]]:
        cypher, params = build_traversal_cypher(query, self._label)
        with self._driver.session(database=self._database) as session:
            rows = session.execute_read(_read_nodes, cypher, params)
        logger.debug("neo4j_query", cypher=cypher, rows=len(rows))
        return rows

    def close(self) -> None:
        """Release connections."""
        self._driver.close()
