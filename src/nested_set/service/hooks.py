"""Pre-execution hooks for traversal queries.

Each traversal fires exactly one ``QueryEvent`` before the query reaches the
storage engine. Observers are registered per traversal kind or for all
kinds, and run in registration order (kind-specific observers first).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from collections.abc import Callable

    from nested_set.domain.models import TraversalKind
    from nested_set.domain.query import TreeQuery
    from nested_set.ports.hooks import QueryObserver

logger = structlog.get_logger(__name__)


@dataclass
class QueryEvent:
    """Carries the mutable query and the traversal context to observers.

    ``context`` always holds ``owner`` (the subject entity) and, where the
    traversal takes them, ``depth`` and ``include_self``.
    """

    kind: TraversalKind
    query: TreeQuery
    context: dict[str, Any] = field(default_factory=dict)
    cancelled: bool = False

    @property
    def name(self) -> str:
        return self.kind.event_name

    def cancel(self) -> None:
        """Skip execution; the traversal returns an empty result."""
        self.cancelled = True


class HookRegistry:
    """Observer registry keyed by traversal kind (``None`` = every kind)."""

    def __init__(self) -> None:
        self._observers: dict[TraversalKind | None, list[QueryObserver]] = {}

    def subscribe(
        self,
        observer: QueryObserver,
        kind: TraversalKind | None = None,
    ) -> Callable[[], None]:
        """Register ``observer``. Returns a callable that unregisters it."""
        self._observers.setdefault(kind, []).append(observer)

        def unsubscribe() -> None:
            observers = self._observers.get(kind, [])
            if observer in observers:
                observers.remove(observer)

        return unsubscribe

    def observers_for(self, kind: TraversalKind) -> list[QueryObserver]:
        return [*self._observers.get(kind, []), *self._observers.get(None, [])]

    def fire(self, event: QueryEvent) -> QueryEvent:
        observers = self.observers_for(event.kind)
        for observer in observers:
            observer(event)
        if observers:
            logger.debug(
                "hook_fired",
                event_name=event.name,
                observers=len(observers),
                cancelled=event.cancelled,
            )
        return event
