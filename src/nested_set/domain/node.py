"""Read-only view over one entity's nested-set attributes.

The entity may be a mapping (a raw row) or any object exposing the mapped
fields as attributes. The view never mutates the entity and holds no
storage of its own; values are read on access.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from nested_set.domain.errors import InvalidNodeError

if TYPE_CHECKING:
    from nested_set.domain.attributes import TreeAttributeMap

_MISSING = object()


def read_field(entity: Any, field: str) -> Any:
    """Read ``field`` from a mapping or an attribute-bearing object.

    Returns ``None`` when the field is absent.
    """
    if isinstance(entity, Mapping):
        return entity.get(field)
    value = getattr(entity, field, _MISSING)
    return None if value is _MISSING else value


class NodeView:
    """Typed accessors for the mapped attributes of a single entity."""

    __slots__ = ("_attributes", "_entity")

    def __init__(self, entity: Any, attributes: TreeAttributeMap) -> None:
        self._entity = entity
        self._attributes = attributes

    @property
    def entity(self) -> Any:
        return self._entity

    @property
    def attributes(self) -> TreeAttributeMap:
        return self._attributes

    @property
    def left(self) -> int:
        return self._integer(self._attributes.left_field)

    @property
    def right(self) -> int:
        return self._integer(self._attributes.right_field)

    @property
    def level(self) -> int:
        return self._integer(self._attributes.level_field)

    @property
    def root_id(self) -> Any:
        """Tree identifier, or ``None`` in single-root mode."""
        if not self._attributes.multi_root:
            return None
        field = self._attributes.root_field
        value = read_field(self._entity, field)
        if value is None:
            raise InvalidNodeError(field, "root identifier is required in multi-root mode")
        return value

    @property
    def primary_key(self) -> Any:
        field = self._attributes.primary_key_field
        value = read_field(self._entity, field)
        if value is None:
            raise InvalidNodeError(field, "node has no primary key (not persisted yet?)")
        return value

    @property
    def is_new_record(self) -> bool:
        """True for a transient entity that has no primary key yet."""
        return read_field(self._entity, self._attributes.primary_key_field) is None

    def _integer(self, field: str) -> int:
        value = read_field(self._entity, field)
        if value is None:
            raise InvalidNodeError(field, "attribute is missing")
        # bool is an int subclass but never a valid bound or level
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidNodeError(field, f"expected an integer, got {type(value).__name__}")
        return value

    def __repr__(self) -> str:
        return f"NodeView({self._entity!r})"
