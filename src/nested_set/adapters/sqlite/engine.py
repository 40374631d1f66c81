"""SQLite StorageEngine adapter.

Compiles a ``TreeQuery`` into a parameterized ``SELECT``. Values are always
bound with ``?`` placeholders; field and table names are validated as plain
identifiers and double-quoted.
"""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING, Any

import structlog

from nested_set.domain.attributes import FIELD_NAME_PATTERN
from nested_set.domain.errors import InvalidArgumentError
from nested_set.domain.models import Comparator
from nested_set.settings import SQLiteSettings

if TYPE_CHECKING:
    from nested_set.domain.query import TreeQuery

logger = structlog.get_logger(__name__)

_SQL_OPERATORS: dict[Comparator, str] = {
    Comparator.LT: "<",
    Comparator.LE: "<=",
    Comparator.GT: ">",
    Comparator.GE: ">=",
    Comparator.EQ: "=",
}


def quote_identifier(name: str) -> str:
    if not FIELD_NAME_PATTERN.match(name):
        raise InvalidArgumentError("field", f"'{name}' is not a valid identifier")
    return f'"{name}"'


def compile_select(query: TreeQuery, table: str) -> tuple[str, list[Any]]:
    """Return ``(sql, params)`` for ``query`` against ``table``."""
    sql = f"SELECT * FROM {quote_identifier(table)}"
    params: list[Any] = []

    if query.predicates:
        conditions = []
        for predicate in query.predicates:
            conditions.append(
                f"{quote_identifier(predicate.field)} {_SQL_OPERATORS[predicate.op]} ?"
            )
            params.append(predicate.value)
        sql += " WHERE " + " AND ".join(conditions)

    if query.ordering is not None:
        direction = "DESC" if query.ordering.descending else "ASC"
        sql += f" ORDER BY {quote_identifier(query.ordering.field)} {direction}"

    if query.limit is not None:
        sql += " LIMIT ?"
        params.append(query.limit)

    return sql, params


class SQLiteStorageEngine:
    """StorageEngine over one SQLite table of nested-set rows."""

    def __init__(
        self,
        connection: sqlite3.Connection | None = None,
        settings: SQLiteSettings | None = None,
    ) -> None:
        self._settings = settings or SQLiteSettings()
        self._table = self._settings.table
        quote_identifier(self._table)
        self._connection = connection or sqlite3.connect(self._settings.path)

    @property
    def connection(self) -> sqlite3.Connection:
        return self._connection

    def fetch(self, query: TreeQuery) -> list[dict[str, Any]]:
        sql, params = compile_select(query, self._table)
        logger.debug("sqlite_query", sql=sql, params=len(params))
        # Row factory is set per cursor; a caller's connection is left untouched.
        cursor = self._connection.cursor()
        cursor.row_factory = sqlite3.Row
        try:
            cursor.execute(sql, params)
            return [dict(row) for row in cursor.fetchall()]
        finally:
            cursor.close()

    def close(self) -> None:
        self._connection.close()
