"""Attribute mapping for nested-set nodes.

Binds the logical roles of a node (left bound, right bound, level, root
identifier, primary key) to concrete field names. Immutable and validated
eagerly on construction.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, fields

from nested_set.domain.errors import ConfigurationError

# Field names are quoted into query text by the adapters, so they must be
# plain identifiers.
FIELD_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class TreeAttributeMap:
    """Field names of the nested-set columns plus the multi-root flag."""

    left_field: str = "_lft"
    right_field: str = "_rgt"
    level_field: str = "level"
    root_field: str = "root"
    primary_key_field: str = "id"
    multi_root: bool = True

    def __post_init__(self) -> None:
        for f in fields(self):
            if f.name == "multi_root":
                continue
            value = getattr(self, f.name)
            if f.name == "root_field" and not self.multi_root and not value:
                # Single-root mode ignores the root identifier entirely.
                continue
            if not isinstance(value, str) or not value:
                if f.name == "root_field":
                    raise ConfigurationError(f.name, "multi-root mode requires a root field")
                raise ConfigurationError(f.name, "field name must be a non-empty string")
            if not FIELD_NAME_PATTERN.match(value):
                raise ConfigurationError(f.name, f"'{value}' is not a valid field name")

        if not isinstance(self.multi_root, bool):
            raise ConfigurationError("multi_root", "must be a boolean")

