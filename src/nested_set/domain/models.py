"""Domain models for nested-set traversal.

Pure Python + Pydantic v2. Zero framework imports.

A traversal is described by a ``TraversalSpec``: an ordered list of
``Predicate`` values (field, comparator, typed value), an optional
``Ordering`` and an optional row limit. Values are carried as data and are
bound as query parameters by the storage adapters, never interpolated.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, Field

# Namespace of the pre-execution hook names, e.g. ``nestedset:beforeParent``
EVENT_NAMESPACE = "nestedset"

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Comparator(enum.StrEnum):
    """Comparison operators a storage engine must support."""

    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    EQ = "=="


class TraversalKind(enum.StrEnum):
    """Traversal operation kinds.

    ``children`` is a depth-1 ``descendants`` traversal and shares its kind.
    """

    DESCENDANTS = "descendants"
    ANCESTORS = "ancestors"
    ROOTS = "roots"
    PARENT = "parent"
    PREV = "prev"
    NEXT = "next"

    @property
    def event_name(self) -> str:
        """Name of the pre-execution hook fired for this kind."""
        return f"{EVENT_NAMESPACE}:before{self.value.capitalize()}"

    @property
    def single(self) -> bool:
        """Whether the traversal yields at most one row."""
        return self in _SINGLE_ROW_KINDS


_SINGLE_ROW_KINDS = frozenset({TraversalKind.PARENT, TraversalKind.PREV, TraversalKind.NEXT})

# ---------------------------------------------------------------------------
# Value models
# ---------------------------------------------------------------------------


class Predicate(BaseModel):
    """A single ``field <op> value`` condition. Predicates are AND-ed."""

    model_config = {"frozen": True}

    field: str
    op: Comparator
    value: Any


class Ordering(BaseModel):
    """Sort key for a traversal."""

    model_config = {"frozen": True}

    field: str
    descending: bool = False


class TraversalSpec(BaseModel):
    """Predicates, ordering and limit describing which rows satisfy a traversal.

    ``params`` holds the caller-supplied traversal parameters (depth,
    include_self) so the dispatcher can expose them to hook observers.
    """

    model_config = {"frozen": True}

    kind: TraversalKind
    predicates: tuple[Predicate, ...] = ()
    order_by: Ordering | None = None
    limit: int | None = None
    params: dict[str, Any] = Field(default_factory=dict)

    @property
    def single(self) -> bool:
        return self.kind.single
