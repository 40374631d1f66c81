"""Cypher compilation for nested-set traversal queries.

Nodes are stored as ``(:<Label>)`` with the mapped fields as properties.
Values are always passed as parameters (``$p0``, ``$p1``, ... and
``$limit``); property names and the label are validated as identifiers and
backtick-quoted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from nested_set.domain.attributes import FIELD_NAME_PATTERN
from nested_set.domain.errors import InvalidArgumentError
from nested_set.domain.models import Comparator

if TYPE_CHECKING:
    from nested_set.domain.query import TreeQuery

NODE_VAR = "n"

_CYPHER_OPERATORS: dict[Comparator, str] = {
    Comparator.LT: "<",
    Comparator.LE: "<=",
    Comparator.GT: ">",
    Comparator.GE: ">=",
    Comparator.EQ: "=",
}


def quote_name(name: str) -> str:
    if not FIELD_NAME_PATTERN.match(name):
        raise InvalidArgumentError("field", f"'{name}' is not a valid identifier")
    return f"`{name}`"


def build_traversal_cypher(query: TreeQuery, label: str) -> tuple[str, dict[str, Any]]:
    """Return ``(cypher, params)`` matching ``query`` over ``label`` nodes."""
    cypher = f"MATCH ({NODE_VAR}:{quote_name(label)})"
    params: dict[str, Any] = {}

    if query.predicates:
        conditions = []
        for i, predicate in enumerate(query.predicates):
            key = f"p{i}"
            conditions.append(
                f"{NODE_VAR}.{quote_name(predicate.field)} "
                f"{_CYPHER_OPERATORS[predicate.op]} ${key}"
            )
            params[key] = predicate.value
        cypher += " WHERE " + " AND ".join(conditions)

    cypher += f" RETURN {NODE_VAR}"

    if query.ordering is not None:
        direction = "DESC" if query.ordering.descending else "ASC"
        cypher += f" ORDER BY {NODE_VAR}.{quote_name(query.ordering.field)} {direction}"

    if query.limit is not None:
        cypher += " LIMIT $limit"
        params["limit"] = query.limit

    return cypher, params
