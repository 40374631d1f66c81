"""Application settings via Pydantic BaseSettings.

All configuration uses the NS_ environment variable prefix. The storage
handle itself is never configured here: it is injected into
``NestedSetBehavior`` explicitly.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

from nested_set.domain.attributes import TreeAttributeMap


class TreeSettings(BaseSettings):
    """Nested-set column mapping."""

    model_config = {"env_prefix": "NS_TREE_"}

    multi_root: bool = True
    root_field: str = "root"
    left_field: str = "_lft"
    right_field: str = "_rgt"
    level_field: str = "level"
    primary_key_field: str = "id"

    def to_attribute_map(self) -> TreeAttributeMap:
        """Build the validated, immutable attribute map."""
        return TreeAttributeMap(
            left_field=self.left_field,
            right_field=self.right_field,
            level_field=self.level_field,
            root_field=self.root_field,
            primary_key_field=self.primary_key_field,
            multi_root=self.multi_root,
        )


class SQLiteSettings(BaseSettings):
    """SQLite storage settings."""

    model_config = {"env_prefix": "NS_SQLITE_"}

    path: str = ":memory:"
    table: str = "nodes"


class Neo4jSettings(BaseSettings):
    """Neo4j connection settings."""

    model_config = {"env_prefix": "NS_NEO4J_"}

    uri: str = "bolt://localhost:7687"
    username: str = "neo4j"
    password: str = "nested-set-dev-password"
    database: str = "neo4j"
    label: str = "Node"
    max_connection_pool_size: int = 50


class Settings(BaseSettings):
    """Root settings."""

    model_config = {"env_prefix": "NS_"}

    app_name: str = "nested-set"

    tree: TreeSettings = Field(default_factory=TreeSettings)
    sqlite: SQLiteSettings = Field(default_factory=SQLiteSettings)
    neo4j: Neo4jSettings = Field(default_factory=Neo4jSettings)
