"""Shared pytest fixtures for the nested-set test suite.

Two trees (root ids 1 and 2) share one store; their ``_lft``/``_rgt``
numbering overlaps on purpose so root-id isolation is always exercised.
No external services are required.
"""

from __future__ import annotations

import sqlite3

import pytest

from nested_set.adapters.memory.engine import InMemoryStorageEngine
from nested_set.adapters.sqlite.engine import SQLiteStorageEngine
from nested_set.behavior import NestedSetBehavior
from nested_set.domain.attributes import TreeAttributeMap
from tests.fixtures.trees import SAMPLE_OUTLINE, build_rows, by_name


@pytest.fixture()
def attributes() -> TreeAttributeMap:
    """Default multi-root mapping."""
    return TreeAttributeMap()


@pytest.fixture()
def single_root_attributes() -> TreeAttributeMap:
    return TreeAttributeMap(multi_root=False)


@pytest.fixture()
def forest_rows() -> list[dict]:
    """The sample outline numbered twice: tree 1 (plain names), tree 2 ("t2-")."""
    return build_rows(SAMPLE_OUTLINE, root=1) + build_rows(SAMPLE_OUTLINE, root=2, prefix="t2-")


@pytest.fixture()
def tree(forest_rows: list[dict]) -> dict[str, dict]:
    """Rows of both trees keyed by name."""
    return by_name(forest_rows)


@pytest.fixture()
def memory_engine(forest_rows: list[dict]) -> InMemoryStorageEngine:
    return InMemoryStorageEngine(forest_rows)


@pytest.fixture()
def behavior(
    attributes: TreeAttributeMap,
    memory_engine: InMemoryStorageEngine,
) -> NestedSetBehavior:
    return NestedSetBehavior(attributes, storage=memory_engine)


@pytest.fixture()
def sqlite_engine(forest_rows: list[dict]):
    """SQLite in-memory table loaded with the forest rows."""
    connection = sqlite3.connect(":memory:")
    connection.execute(
        'CREATE TABLE "nodes" ('
        '"id" INTEGER PRIMARY KEY, "root" INTEGER, "_lft" INTEGER, '
        '"_rgt" INTEGER, "level" INTEGER, "name" TEXT)'
    )
    connection.executemany(
        'INSERT INTO "nodes" ("id", "root", "_lft", "_rgt", "level", "name") '
        "VALUES (:id, :root, :_lft, :_rgt, :level, :name)",
        forest_rows,
    )
    engine = SQLiteStorageEngine(connection)

    yield engine

    engine.close()
