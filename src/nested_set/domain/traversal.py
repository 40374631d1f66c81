"""Nested-set traversal algebra.

Every function takes a ``NodeView`` (plus traversal parameters) and returns
a ``TraversalSpec`` describing the rows that satisfy the traversal. No I/O
happens here; a node that no longer exists in storage still yields a
well-formed spec and the absence is only discovered at execution.

Interval rules relied upon (for nodes of the same tree):
  - descendants of N lie strictly inside (N.left, N.right)
  - ancestors of N strictly enclose N's interval
  - the immediate previous sibling ends at N.left - 1
  - the immediate next sibling starts at N.right + 1
  - roots start at 1

In multi-root mode every node-relative traversal is restricted to rows that
share the subject's root identifier, because numbering restarts per tree.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from nested_set.domain.errors import InvalidArgumentError
from nested_set.domain.models import (
    Comparator,
    Ordering,
    Predicate,
    TraversalKind,
    TraversalSpec,
)
from nested_set.domain.node import NodeView

if TYPE_CHECKING:
    from nested_set.domain.attributes import TreeAttributeMap

ROOT_LEFT_BOUND = 1


def validate_depth(depth: int | None) -> int | None:
    """Reject depths that are not ``None`` or a non-negative integer."""
    if depth is None:
        return None
    if isinstance(depth, bool) or not isinstance(depth, int):
        raise InvalidArgumentError("depth", f"expected an integer, got {type(depth).__name__}")
    if depth < 0:
        raise InvalidArgumentError("depth", f"must be >= 0, got {depth}")
    return depth


def _root_filter(node: NodeView) -> tuple[Predicate, ...]:
    attrs = node.attributes
    if not attrs.multi_root:
        return ()
    return (Predicate(field=attrs.root_field, op=Comparator.EQ, value=node.root_id),)


# ---------------------------------------------------------------------------
# Multi-row traversals
# ---------------------------------------------------------------------------


def descendants(
    node: NodeView,
    depth: int | None = None,
    include_self: bool = False,
) -> TraversalSpec:
    """Rows nested inside ``node``'s interval, in pre-order (ascending left).

    ``depth`` bounds how many levels below ``node`` are returned; ``depth=0``
    yields nothing unless ``include_self`` is set, in which case only the
    node itself matches.
    """
    depth = validate_depth(depth)
    if not isinstance(include_self, bool):
        raise InvalidArgumentError("include_self", "must be a boolean")

    attrs = node.attributes
    predicates = [
        Predicate(
            field=attrs.left_field,
            op=Comparator.GE if include_self else Comparator.GT,
            value=node.left,
        ),
        Predicate(
            field=attrs.right_field,
            op=Comparator.LE if include_self else Comparator.LT,
            value=node.right,
        ),
    ]
    if depth is not None:
        predicates.append(
            Predicate(field=attrs.level_field, op=Comparator.LE, value=node.level + depth)
        )
    predicates.extend(_root_filter(node))

    return TraversalSpec(
        kind=TraversalKind.DESCENDANTS,
        predicates=tuple(predicates),
        order_by=Ordering(field=attrs.left_field),
        params={"depth": depth, "include_self": include_self},
    )


def children(node: NodeView) -> TraversalSpec:
    """Direct children only: descendants exactly one level deeper."""
    return descendants(node, depth=1, include_self=False)


def ancestors(node: NodeView, depth: int | None = None) -> TraversalSpec:
    """Rows whose interval encloses ``node``'s, ordered root first.

    ``depth`` limits how many levels above ``node`` are returned.
    """
    depth = validate_depth(depth)

    attrs = node.attributes
    predicates = [
        Predicate(field=attrs.left_field, op=Comparator.LT, value=node.left),
        Predicate(field=attrs.right_field, op=Comparator.GT, value=node.right),
    ]
    if depth is not None:
        predicates.append(
            Predicate(field=attrs.level_field, op=Comparator.GE, value=node.level - depth)
        )
    predicates.extend(_root_filter(node))

    return TraversalSpec(
        kind=TraversalKind.ANCESTORS,
        predicates=tuple(predicates),
        order_by=Ordering(field=attrs.left_field),
        params={"depth": depth},
    )


def roots(attrs: TreeAttributeMap) -> TraversalSpec:
    """Every tree's root row. Not restricted by root identifier."""
    return TraversalSpec(
        kind=TraversalKind.ROOTS,
        predicates=(Predicate(field=attrs.left_field, op=Comparator.EQ, value=ROOT_LEFT_BOUND),),
    )


# ---------------------------------------------------------------------------
# Single-row traversals
# ---------------------------------------------------------------------------


def parent(node: NodeView) -> TraversalSpec:
    """The nearest enclosing interval.

    Among the ancestors, the parent has the smallest right bound; ordering by
    ascending right and taking one row selects it.
    """
    attrs = node.attributes
    predicates = (
        Predicate(field=attrs.left_field, op=Comparator.LT, value=node.left),
        Predicate(field=attrs.right_field, op=Comparator.GT, value=node.right),
        *_root_filter(node),
    )
    return TraversalSpec(
        kind=TraversalKind.PARENT,
        predicates=predicates,
        order_by=Ordering(field=attrs.right_field),
        limit=1,
    )


def prev_sibling(node: NodeView) -> TraversalSpec:
    attrs = node.attributes
    predicates = (
        Predicate(field=attrs.right_field, op=Comparator.EQ, value=node.left - 1),
        *_root_filter(node),
    )
    return TraversalSpec(kind=TraversalKind.PREV, predicates=predicates, limit=1)


def next_sibling(node: NodeView) -> TraversalSpec:
    attrs = node.attributes
    predicates = (
        Predicate(field=attrs.left_field, op=Comparator.EQ, value=node.right + 1),
        *_root_filter(node),
    )
    return TraversalSpec(kind=TraversalKind.NEXT, predicates=predicates, limit=1)


# ---------------------------------------------------------------------------
# Derived predicates (no storage access)
# ---------------------------------------------------------------------------


def is_leaf(node: NodeView) -> bool:
    return node.right - node.left == 1


def is_root(node: NodeView) -> bool:
    return node.left == ROOT_LEFT_BOUND


def is_descendant_of(node: NodeView, other: NodeView) -> bool:
    """Whether ``node`` lies strictly inside ``other``'s interval (same tree)."""
    if not isinstance(other, NodeView):
        raise InvalidArgumentError("other", "expected a NodeView")
    result = node.left > other.left and node.right < other.right
    if node.attributes.multi_root:
        result = result and node.root_id == other.root_id
    return result
