"""Binding of nested-set traversal operations to arbitrary entity types.

Entities are never modified. A ``NestedSetBehavior`` either wraps an entity
explicitly (``behavior.bind(entity)``) or is installed as a class attribute
and acts as a descriptor (``Category.tree = behavior``, then
``category.tree.children()``). Hosts that route unknown method names
through a chain of behaviors use ``missing_method`` / ``dispatch_missing_method``.

The storage engine is injected, either directly or through an explicit
resolver callable that is invoked once on first use.
"""

from __future__ import annotations

import enum
import threading
from typing import TYPE_CHECKING, Any

import structlog

from nested_set.domain import traversal
from nested_set.domain.attributes import TreeAttributeMap
from nested_set.domain.errors import ConfigurationError
from nested_set.domain.node import NodeView
from nested_set.service.dispatcher import QueryDispatcher
from nested_set.service.hooks import HookRegistry

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from nested_set.domain.models import TraversalSpec
    from nested_set.ports.storage import EntityFactory, StorageEngine
    from nested_set.service.dispatcher import ResultSet
    from nested_set.settings import TreeSettings

logger = structlog.get_logger(__name__)


class _NotHandled(enum.Enum):
    NOT_HANDLED = "not_handled"


# Returned by ``missing_method`` for names this behavior does not provide.
NOT_HANDLED = _NotHandled.NOT_HANDLED

# Operation name -> BoundNode attribute. ``prev``/``next`` are short aliases.
OPERATIONS: dict[str, str] = {
    "descendants": "descendants",
    "children": "children",
    "ancestors": "ancestors",
    "roots": "roots",
    "parent": "parent",
    "prev_sibling": "prev_sibling",
    "next_sibling": "next_sibling",
    "prev": "prev_sibling",
    "next": "next_sibling",
    "is_leaf": "is_leaf",
    "is_root": "is_root",
    "is_descendant_of": "is_descendant_of",
    "is_new_record": "is_new_record",
}


class BoundNode:
    """Traversal operations with one entity bound as the subject."""

    def __init__(self, behavior: NestedSetBehavior, entity: Any) -> None:
        self._behavior = behavior
        self._view = NodeView(entity, behavior.attributes)

    @property
    def view(self) -> NodeView:
        return self._view

    @property
    def entity(self) -> Any:
        return self._view.entity

    # -- Multi-row traversals -------------------------------------------

    def descendants(self, depth: int | None = None, include_self: bool = False) -> ResultSet:
        return self._execute(traversal.descendants(self._view, depth, include_self))

    def children(self) -> ResultSet:
        return self._execute(traversal.children(self._view))

    def ancestors(self, depth: int | None = None) -> ResultSet:
        return self._execute(traversal.ancestors(self._view, depth))

    def roots(self) -> ResultSet:
        return self._execute(traversal.roots(self._behavior.attributes))

    # -- Single-row traversals ------------------------------------------

    def parent(self) -> Any | None:
        return self._execute(traversal.parent(self._view))

    def prev_sibling(self) -> Any | None:
        return self._execute(traversal.prev_sibling(self._view))

    def next_sibling(self) -> Any | None:
        return self._execute(traversal.next_sibling(self._view))

    # -- Derived predicates ---------------------------------------------

    def is_leaf(self) -> bool:
        return traversal.is_leaf(self._view)

    def is_root(self) -> bool:
        return traversal.is_root(self._view)

    def is_descendant_of(self, other: Any) -> bool:
        """``other`` may be an entity, a ``BoundNode`` or a ``NodeView``."""
        if isinstance(other, BoundNode):
            other = other.view
        elif not isinstance(other, NodeView):
            other = NodeView(other, self._behavior.attributes)
        return traversal.is_descendant_of(self._view, other)

    def is_new_record(self) -> bool:
        return self._view.is_new_record

    def _execute(self, spec: TraversalSpec) -> Any:
        return self._behavior.dispatcher.execute(spec, owner=self._view.entity)

    def __repr__(self) -> str:
        return f"BoundNode({self._view.entity!r})"


class NestedSetBehavior:
    """Grants the traversal operations to entities of any type."""

    def __init__(
        self,
        attributes: TreeAttributeMap | None = None,
        storage: StorageEngine | None = None,
        storage_resolver: Callable[[], StorageEngine | None] | None = None,
        hooks: HookRegistry | None = None,
        entity_factory: EntityFactory | None = None,
    ) -> None:
        self._attributes = attributes if attributes is not None else TreeAttributeMap()
        self._storage = storage
        self._storage_resolver = storage_resolver
        self._hooks = hooks if hooks is not None else HookRegistry()
        self._entity_factory = entity_factory
        self._dispatcher: QueryDispatcher | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: TreeSettings, **kwargs: Any) -> NestedSetBehavior:
        return cls(settings.to_attribute_map(), **kwargs)

    @property
    def attributes(self) -> TreeAttributeMap:
        return self._attributes

    @property
    def hooks(self) -> HookRegistry:
        return self._hooks

    @property
    def dispatcher(self) -> QueryDispatcher:
        """The dispatcher over the resolved storage engine, built on first use."""
        if self._dispatcher is None:
            with self._lock:
                # re-check: another thread may have resolved while we waited
                if self._dispatcher is None:
                    self._dispatcher = QueryDispatcher(
                        self._resolve_storage(),
                        hooks=self._hooks,
                        entity_factory=self._entity_factory,
                    )
        return self._dispatcher

    def _resolve_storage(self) -> StorageEngine:
        if self._storage is not None:
            return self._storage
        if self._storage_resolver is None:
            raise ConfigurationError("storage", "no storage engine configured")
        storage = self._storage_resolver()
        if storage is None:
            raise ConfigurationError("storage", "storage resolver returned no engine")
        self._storage = storage
        logger.debug("storage_resolved", engine=type(storage).__name__)
        return storage

    def bind(self, entity: Any) -> BoundNode:
        return BoundNode(self, entity)

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return self.bind(instance)

    def handles(self, name: str) -> bool:
        return name in OPERATIONS

    def missing_method(self, entity: Any, name: str, *args: Any, **kwargs: Any) -> Any:
        """Run operation ``name`` for ``entity``, or return ``NOT_HANDLED``."""
        attr = OPERATIONS.get(name)
        if attr is None:
            return NOT_HANDLED
        return getattr(self.bind(entity), attr)(*args, **kwargs)


def dispatch_missing_method(
    behaviors: Iterable[NestedSetBehavior],
    entity: Any,
    name: str,
    *args: Any,
    **kwargs: Any,
) -> Any:
    """Offer ``name`` to each behavior in turn; the first that handles it wins."""
    for behavior in behaviors:
        result = behavior.missing_method(entity, name, *args, **kwargs)
        if result is not NOT_HANDLED:
            return result
    msg = f"{type(entity).__name__!r} object has no attribute {name!r}"
    raise AttributeError(msg)
