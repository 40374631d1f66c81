"""Query observer port interface."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from nested_set.service.hooks import QueryEvent


class QueryObserver(Protocol):
    """Callback invoked once per traversal, before execution.

    Observers may read and mutate ``event.query`` in place and may call
    ``event.cancel()`` to skip execution. They must not raise for flow
    control; anything they raise propagates to the traversal caller.
    """

    def __call__(self, event: QueryEvent) -> None: ...
