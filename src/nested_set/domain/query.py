"""Mutable traversal query.

A ``TreeQuery`` is built from a ``TraversalSpec`` by the dispatcher and is
the object hook observers may narrow or widen before execution. Storage
adapters compile it into their own parameterized query language.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from nested_set.domain.errors import InvalidArgumentError
from nested_set.domain.models import Comparator, Ordering, Predicate

if TYPE_CHECKING:
    from nested_set.domain.models import TraversalSpec


class TreeQuery:
    """AND-ed predicates, an optional ordering and an optional row limit."""

    def __init__(
        self,
        predicates: list[Predicate] | None = None,
        ordering: Ordering | None = None,
        limit: int | None = None,
    ) -> None:
        self.predicates: list[Predicate] = list(predicates or [])
        self.ordering = ordering
        self.limit: int | None = None
        self.set_limit(limit)

    @classmethod
    def from_spec(cls, spec: TraversalSpec) -> TreeQuery:
        return cls(list(spec.predicates), spec.order_by, spec.limit)

    def where(self, field: str, op: Comparator | str, value: Any) -> TreeQuery:
        """Add a condition. Returns self for chaining."""
        try:
            comparator = Comparator(op)
        except ValueError:
            raise InvalidArgumentError("op", f"unsupported comparator '{op}'") from None
        self.predicates.append(Predicate(field=field, op=comparator, value=value))
        return self

    def order_by(self, field: str, descending: bool = False) -> TreeQuery:
        self.ordering = Ordering(field=field, descending=descending)
        return self

    def clear_ordering(self) -> TreeQuery:
        self.ordering = None
        return self

    def set_limit(self, limit: int | None) -> TreeQuery:
        """Set the row limit; ``None`` removes it."""
        if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int)):
            raise InvalidArgumentError("limit", "expected an integer")
        if limit is not None and limit < 1:
            raise InvalidArgumentError("limit", f"must be >= 1, got {limit}")
        self.limit = limit
        return self

    def fields(self) -> set[str]:
        """All field names referenced by predicates and ordering."""
        names = {p.field for p in self.predicates}
        if self.ordering is not None:
            names.add(self.ordering.field)
        return names

    def __repr__(self) -> str:
        conditions = " AND ".join(f"{p.field} {p.op} {p.value!r}" for p in self.predicates)
        return f"TreeQuery(where={conditions!r}, ordering={self.ordering!r}, limit={self.limit})"
