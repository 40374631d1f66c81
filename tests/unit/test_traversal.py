"""Unit tests for nested_set.domain.traversal.

Pure unit tests with no storage involved. They pin the exact predicates,
ordering and limit produced for each traversal.
"""

from __future__ import annotations

import pytest

from nested_set.domain import traversal
from nested_set.domain.attributes import TreeAttributeMap
from nested_set.domain.errors import InvalidArgumentError, InvalidNodeError
from nested_set.domain.models import Comparator, Ordering, Predicate, TraversalKind
from nested_set.domain.node import NodeView
from tests.fixtures.trees import make_node


def _p(field: str, op: str, value: object) -> Predicate:
    return Predicate(field=field, op=Comparator(op), value=value)


@pytest.fixture()
def node(attributes: TreeAttributeMap) -> NodeView:
    """B in the A[1,10] B[2,5] C[3,4] D[6,9] scenario, tree 7."""
    return NodeView(make_node(root=7, _lft=2, _rgt=5, level=1), attributes)


@pytest.fixture()
def single_node(single_root_attributes: TreeAttributeMap) -> NodeView:
    return NodeView(make_node(root=7, _lft=2, _rgt=5, level=1), single_root_attributes)


# ---------------------------------------------------------------------------
# descendants / children
# ---------------------------------------------------------------------------


class TestDescendants:
    def test_unbounded(self, node: NodeView) -> None:
        spec = traversal.descendants(node)

        assert spec.kind is TraversalKind.DESCENDANTS
        assert spec.predicates == (
            _p("_lft", ">", 2),
            _p("_rgt", "<", 5),
            _p("root", "==", 7),
        )
        assert spec.order_by == Ordering(field="_lft")
        assert spec.limit is None
        assert spec.single is False

    def test_include_self_uses_inclusive_bounds(self, node: NodeView) -> None:
        spec = traversal.descendants(node, include_self=True)
        assert spec.predicates[:2] == (_p("_lft", ">=", 2), _p("_rgt", "<=", 5))

    def test_depth_bounds_level(self, node: NodeView) -> None:
        spec = traversal.descendants(node, depth=2)
        assert _p("level", "<=", 3) in spec.predicates

    def test_depth_zero_is_accepted(self, node: NodeView) -> None:
        spec = traversal.descendants(node, depth=0)
        assert _p("level", "<=", 1) in spec.predicates

    def test_single_root_mode_has_no_root_filter(self, single_node: NodeView) -> None:
        spec = traversal.descendants(single_node)
        assert all(p.field != "root" for p in spec.predicates)

    def test_params_are_recorded(self, node: NodeView) -> None:
        spec = traversal.descendants(node, depth=3, include_self=True)
        assert spec.params == {"depth": 3, "include_self": True}

    @pytest.mark.parametrize("depth", [-1, -10])
    def test_negative_depth_rejected(self, node: NodeView, depth: int) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            traversal.descendants(node, depth=depth)
        assert exc_info.value.argument == "depth"

    @pytest.mark.parametrize("depth", [1.5, "2", True])
    def test_non_integer_depth_rejected(self, node: NodeView, depth: object) -> None:
        with pytest.raises(InvalidArgumentError):
            traversal.descendants(node, depth=depth)  # type: ignore[arg-type]

    def test_non_boolean_include_self_rejected(self, node: NodeView) -> None:
        with pytest.raises(InvalidArgumentError):
            traversal.descendants(node, include_self="yes")  # type: ignore[arg-type]


class TestChildren:
    def test_is_depth_one_descendants(self, node: NodeView) -> None:
        assert traversal.children(node) == traversal.descendants(node, depth=1)

    def test_fires_as_descendants(self, node: NodeView) -> None:
        spec = traversal.children(node)
        assert spec.kind is TraversalKind.DESCENDANTS
        assert spec.params == {"depth": 1, "include_self": False}


# ---------------------------------------------------------------------------
# ancestors / roots
# ---------------------------------------------------------------------------


class TestAncestors:
    def test_unbounded(self, node: NodeView) -> None:
        spec = traversal.ancestors(node)

        assert spec.kind is TraversalKind.ANCESTORS
        assert spec.predicates == (
            _p("_lft", "<", 2),
            _p("_rgt", ">", 5),
            _p("root", "==", 7),
        )
        assert spec.order_by == Ordering(field="_lft")
        assert spec.limit is None

    def test_depth_bounds_level_from_below(self, node: NodeView) -> None:
        spec = traversal.ancestors(node, depth=1)
        assert _p("level", ">=", 0) in spec.predicates

    def test_negative_depth_rejected(self, node: NodeView) -> None:
        with pytest.raises(InvalidArgumentError):
            traversal.ancestors(node, depth=-1)


class TestRoots:
    def test_only_left_bound_predicate(self, attributes: TreeAttributeMap) -> None:
        spec = traversal.roots(attributes)

        assert spec.kind is TraversalKind.ROOTS
        assert spec.predicates == (_p("_lft", "==", 1),)
        assert spec.order_by is None
        assert spec.limit is None

    def test_custom_left_field(self) -> None:
        spec = traversal.roots(TreeAttributeMap(left_field="lft"))
        assert spec.predicates == (_p("lft", "==", 1),)


# ---------------------------------------------------------------------------
# parent / siblings
# ---------------------------------------------------------------------------


class TestParent:
    def test_nearest_enclosing_interval(self, node: NodeView) -> None:
        spec = traversal.parent(node)

        assert spec.kind is TraversalKind.PARENT
        assert spec.predicates == (
            _p("_lft", "<", 2),
            _p("_rgt", ">", 5),
            _p("root", "==", 7),
        )
        assert spec.order_by == Ordering(field="_rgt")
        assert spec.limit == 1
        assert spec.single is True


class TestSiblings:
    def test_prev_sibling_ends_just_before(self, node: NodeView) -> None:
        spec = traversal.prev_sibling(node)

        assert spec.kind is TraversalKind.PREV
        assert spec.predicates == (_p("_rgt", "==", 1), _p("root", "==", 7))
        assert spec.order_by is None
        assert spec.single is True

    def test_next_sibling_starts_just_after(self, node: NodeView) -> None:
        spec = traversal.next_sibling(node)

        assert spec.kind is TraversalKind.NEXT
        assert spec.predicates == (_p("_lft", "==", 6), _p("root", "==", 7))
        assert spec.single is True

    def test_single_root_siblings_have_no_root_filter(self, single_node: NodeView) -> None:
        assert traversal.next_sibling(single_node).predicates == (_p("_lft", "==", 6),)
        assert traversal.prev_sibling(single_node).predicates == (_p("_rgt", "==", 1),)


# ---------------------------------------------------------------------------
# Derived predicates
# ---------------------------------------------------------------------------


class TestDerivedPredicates:
    def test_is_leaf(self, attributes: TreeAttributeMap) -> None:
        assert traversal.is_leaf(NodeView(make_node(_lft=3, _rgt=4), attributes))
        assert not traversal.is_leaf(NodeView(make_node(_lft=2, _rgt=5), attributes))

    def test_is_root(self, attributes: TreeAttributeMap) -> None:
        assert traversal.is_root(NodeView(make_node(_lft=1, _rgt=10), attributes))
        assert not traversal.is_root(NodeView(make_node(_lft=2, _rgt=5), attributes))

    def test_is_descendant_of_same_tree(self, attributes: TreeAttributeMap) -> None:
        outer = NodeView(make_node(root=1, _lft=1, _rgt=10), attributes)
        inner = NodeView(make_node(root=1, _lft=3, _rgt=4), attributes)

        assert traversal.is_descendant_of(inner, outer)
        assert not traversal.is_descendant_of(outer, inner)
        assert not traversal.is_descendant_of(outer, outer)

    def test_is_descendant_of_other_tree_is_false(self, attributes: TreeAttributeMap) -> None:
        outer = NodeView(make_node(root=1, _lft=1, _rgt=10), attributes)
        inner = NodeView(make_node(root=2, _lft=3, _rgt=4), attributes)
        assert not traversal.is_descendant_of(inner, outer)

    def test_single_root_ignores_root_values(
        self, single_root_attributes: TreeAttributeMap
    ) -> None:
        outer = NodeView(make_node(root=1, _lft=1, _rgt=10), single_root_attributes)
        inner = NodeView(make_node(root=2, _lft=3, _rgt=4), single_root_attributes)
        assert traversal.is_descendant_of(inner, outer)

    def test_is_descendant_of_requires_node_view(self, node: NodeView) -> None:
        with pytest.raises(InvalidArgumentError):
            traversal.is_descendant_of(node, {"_lft": 1})  # type: ignore[arg-type]


class TestStaleOrIncompleteNodes:
    def test_stale_node_still_builds_spec(self, attributes: TreeAttributeMap) -> None:
        """A node deleted from storage still produces a well-formed spec."""
        ghost = NodeView(make_node(id=999, root=42, _lft=500, _rgt=501, level=9), attributes)
        spec = traversal.parent(ghost)
        assert spec.predicates[0] == _p("_lft", "<", 500)

    def test_unpersisted_node_raises(self, attributes: TreeAttributeMap) -> None:
        transient = NodeView({"name": "draft"}, attributes)
        with pytest.raises(InvalidNodeError):
            traversal.descendants(transient)
