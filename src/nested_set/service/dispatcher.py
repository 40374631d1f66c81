"""Traversal query dispatcher.

Turns a ``TraversalSpec`` into a ``TreeQuery``, fires the pre-execution
hook, executes the query against the storage engine and shapes the rows:
a lazy ``ResultSet`` for multi-row traversals, the first entity or ``None``
for ``parent`` / ``prev`` / ``next``.

Engine failures are wrapped in ``ExecutionError``; nothing is retried.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from nested_set.domain.errors import ExecutionError, NestedSetError
from nested_set.domain.query import TreeQuery
from nested_set.service.hooks import HookRegistry, QueryEvent

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from nested_set.domain.models import TraversalKind, TraversalSpec
    from nested_set.ports.storage import EntityFactory, StorageEngine

logger = structlog.get_logger(__name__)


def _row_as_dict(row: Mapping[str, Any]) -> dict[str, Any]:
    return dict(row)


class ResultSet:
    """Lazily maps engine rows to entities, preserving engine order.

    Iterable once, like a database cursor.
    """

    def __init__(
        self,
        kind: TraversalKind,
        rows: Iterable[Mapping[str, Any]],
        entity_factory: EntityFactory,
    ) -> None:
        self._kind = kind
        self._rows = rows
        self._entity_factory = entity_factory

    @classmethod
    def empty(cls, kind: TraversalKind) -> ResultSet:
        return cls(kind, (), _row_as_dict)

    def __iter__(self) -> Iterator[Any]:
        rows = iter(self._rows)
        while True:
            try:
                row = next(rows)
            except StopIteration:
                return
            except NestedSetError:
                raise
            except Exception as exc:
                logger.error("storage_failed", kind=str(self._kind), exc_info=exc)
                raise ExecutionError(str(self._kind), f"row iteration failed: {exc}") from exc
            yield self._entity_factory(row)

    def first(self) -> Any | None:
        return next(iter(self), None)

    def to_list(self) -> list[Any]:
        return list(self)


class QueryDispatcher:
    """Executes traversal specs against a storage engine."""

    def __init__(
        self,
        storage: StorageEngine,
        hooks: HookRegistry | None = None,
        entity_factory: EntityFactory | None = None,
    ) -> None:
        self._storage = storage
        self._hooks = hooks if hooks is not None else HookRegistry()
        self._entity_factory: EntityFactory = entity_factory or _row_as_dict

    @property
    def hooks(self) -> HookRegistry:
        return self._hooks

    def execute(self, spec: TraversalSpec, owner: Any = None) -> ResultSet | Any | None:
        """Run ``spec`` for ``owner``.

        Returns a ``ResultSet`` for multi-row kinds, otherwise the first
        entity or ``None``.
        """
        query = TreeQuery.from_spec(spec)
        event = QueryEvent(kind=spec.kind, query=query, context={"owner": owner, **spec.params})
        self._hooks.fire(event)

        if event.cancelled:
            logger.debug("traversal_cancelled", kind=str(spec.kind))
            return None if spec.single else ResultSet.empty(spec.kind)

        rows = self._fetch(spec.kind, query)
        logger.debug(
            "traversal_executed",
            kind=str(spec.kind),
            predicates=len(query.predicates),
            limit=query.limit,
        )
        result = ResultSet(spec.kind, rows, self._entity_factory)
        return result.first() if spec.single else result

    def _fetch(self, kind: TraversalKind, query: TreeQuery) -> Iterable[Mapping[str, Any]]:
        try:
            return self._storage.fetch(query)
        except NestedSetError:
            raise
        except Exception as exc:
            logger.error("storage_failed", kind=str(kind), exc_info=exc)
            raise ExecutionError(str(kind), f"storage engine failed: {exc}") from exc
