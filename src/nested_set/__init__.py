"""Nested-set tree traversal over flat row sets.

Typical use::

    behavior = NestedSetBehavior(TreeAttributeMap(), storage=engine)
    node = behavior.bind(row)
    for child in node.children():
        ...
"""

from nested_set.behavior import NOT_HANDLED, BoundNode, NestedSetBehavior, dispatch_missing_method
from nested_set.domain.attributes import TreeAttributeMap
from nested_set.domain.errors import (
    ConfigurationError,
    ExecutionError,
    InvalidArgumentError,
    InvalidNodeError,
    NestedSetError,
)
from nested_set.domain.models import Comparator, Ordering, Predicate, TraversalKind, TraversalSpec
from nested_set.domain.node import NodeView
from nested_set.domain.query import TreeQuery
from nested_set.service.dispatcher import QueryDispatcher, ResultSet
from nested_set.service.hooks import HookRegistry, QueryEvent

__version__ = "0.1.0"

__all__ = [
    "NOT_HANDLED",
    "BoundNode",
    "Comparator",
    "ConfigurationError",
    "ExecutionError",
    "HookRegistry",
    "InvalidArgumentError",
    "InvalidNodeError",
    "NestedSetBehavior",
    "NestedSetError",
    "NodeView",
    "Ordering",
    "Predicate",
    "QueryDispatcher",
    "QueryEvent",
    "ResultSet",
    "TraversalKind",
    "TraversalSpec",
    "TreeAttributeMap",
    "TreeQuery",
    "dispatch_missing_method",
]
