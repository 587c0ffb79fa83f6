"""
Tests for the incrementally materialized tree view.

These tests verify that:
1. reset/expand_all build the frontier from the canonical sequence
2. expand/collapse only touch the rows below one node
3. Repeated and stale operations are harmless no-ops
4. Routing rows sit between a node and its BOM children
"""

import pytest

from bomtree.view import NodeKind, TreeViewState

from conftest import bom_row, make_session


def view_of(session):
    view = TreeViewState(session)
    view.collapse_all()
    return view


def labels(view):
    """Compact picture of the visible rows: component id, '*' for routing description."""
    out = []
    for node in view:
        if node.kind is NodeKind.ROUTING:
            out.append("*" + node.record["DESCRIPTION"])
        else:
            out.append(node.component_id)
    return out


def find(view, component_id):
    for node in view:
        if node.kind is NodeKind.BOM and node.component_id == component_id:
            return node
    raise AssertionError(f"{component_id} is not visible")


# =============================================================================
# RESET / COLLAPSE ALL
# =============================================================================

def test_collapse_all_shows_level_one_rows_in_canonical_order(session):
    view = view_of(session)

    assert labels(view) == ["A", "B", "C"]
    assert all(not node.expanded for node in view)


def test_reset_is_level_subsequence_of_canonical(session):
    view = TreeViewState(session)
    canonical = list(session.canonical)

    for level in (1, 2, 3):
        view.reset(level)
        positions = [node.record.position for node in view]
        expected = [
            p for p in canonical
            if str(session.record_at(p)["階層"]) == str(level)
        ]
        assert positions == expected


def test_reset_to_missing_level_is_empty(session):
    view = TreeViewState(session)
    view.reset(9)

    assert len(view) == 0


def test_indicators_after_reset(routed_session):
    view = view_of(routed_session)

    assert [node.indicator for node in view] == ["+", "+", ""]


# =============================================================================
# EXPAND ALL
# =============================================================================

def test_expand_all_materializes_canonical_sequence(session):
    view = view_of(session)
    view.expand_all()

    assert [node.record.position for node in view] == list(session.canonical)
    assert {n.component_id for n in view if n.expanded} == {"A", "A2", "B"}


def test_expand_all_inserts_routing_before_bom_children(routed_session):
    view = view_of(routed_session)
    view.expand_all()

    assert labels(view) == [
        "A", "*Cut", "*Weld", "A2", "X", "A1",
        "B", "*Drill", "*Paint", "B1",
        "C",
    ]


def test_expand_all_links_children_to_their_parent_rows(session):
    view = view_of(session)
    view.expand_all()

    a, a2, x = find(view, "A"), find(view, "A2"), find(view, "X")
    assert a.parent is None
    assert a2.parent is a
    assert x.parent is a2


def test_collapse_all_then_expand_all_matches_direct_expand_all(routed_session):
    direct = TreeViewState(routed_session)
    direct.expand_all()

    view = view_of(routed_session)
    view.expand(find(view, "A"))
    view.collapse_all()
    view.expand_all()

    assert [n.record for n in view] == [n.record for n in direct]


# =============================================================================
# EXPAND / COLLAPSE
# =============================================================================

def test_expand_inserts_direct_children_only(session):
    view = view_of(session)
    a = find(view, "A")

    assert view.expand(a) is True
    assert labels(view) == ["A", "A2", "A1", "B", "C"]
    assert a.expanded
    assert a.indicator == "-"
    assert find(view, "A2").indicator == "+"
    assert find(view, "A1").indicator == ""


def test_expand_places_routing_steps_first(routed_session):
    view = view_of(routed_session)
    view.expand(find(view, "A"))

    assert labels(view) == ["A", "*Cut", "*Weld", "A2", "A1", "B", "C"]
    assert [n.level_label for n in view][:3] == ["1", "1R", "1R"]


def test_nested_expand_then_collapse_of_ancestor(routed_session):
    view = view_of(routed_session)
    view.expand(find(view, "A"))
    view.expand(find(view, "A2"))
    assert labels(view) == ["A", "*Cut", "*Weld", "A2", "X", "A1", "B", "C"]

    view.collapse(find(view, "A"))

    assert labels(view) == ["A", "B", "C"]
    assert find(view, "A").indicator == "+"


@pytest.mark.parametrize("component_id", ["A", "B"])
def test_expand_then_collapse_restores_exact_rows(routed_session, component_id):
    view = view_of(routed_session)
    view.expand(find(view, "A"))
    before = view.rows

    node = find(view, component_id)
    if node.expanded:
        view.collapse(node)
        before = view.rows

    view.expand(node)
    view.collapse(node)

    assert len(view.rows) == len(before)
    assert all(a is b for a, b in zip(view.rows, before))


def test_expand_is_idempotent(routed_session):
    view = view_of(routed_session)
    a = find(view, "A")

    assert view.expand(a) is True
    snapshot = view.rows
    assert view.expand(a) is False
    assert all(x is y for x, y in zip(view.rows, snapshot))
    assert len(view) == len(snapshot)


def test_collapse_is_idempotent(session):
    view = view_of(session)
    a = find(view, "A")
    view.expand(a)

    assert view.collapse(a) is True
    assert view.collapse(a) is False
    assert labels(view) == ["A", "B", "C"]


def test_collapse_removes_routing_rows(routed_session):
    view = view_of(routed_session)
    b = find(view, "B")
    view.expand(b)
    assert labels(view) == ["A", "B", "*Drill", "*Paint", "B1", "C"]

    view.collapse(b)

    assert labels(view) == ["A", "B", "C"]
    assert all(node.kind is NodeKind.BOM for node in view)


def test_expand_leaf_is_noop(session):
    view = view_of(session)
    c = find(view, "C")

    assert view.expand(c) is False
    assert not c.expanded
    assert labels(view) == ["A", "B", "C"]


def test_component_with_only_routing_can_expand():
    session = make_session(
        [bom_row("1", "P", "A", "1")],
        [{"COMPONENT": "A", "OP_SEQ": "10", "DESCRIPTION": "Assemble"}],
    )
    view = view_of(session)
    a = find(view, "A")

    assert a.indicator == "+"
    assert view.expand(a) is True
    assert labels(view) == ["A", "*Assemble"]
    assert view.collapse(a) is True
    assert labels(view) == ["A"]


def test_routing_rows_cannot_be_expanded_or_collapsed(routed_session):
    view = view_of(routed_session)
    view.expand(find(view, "A"))
    cut = view.node_at(1)
    before = view.rows

    assert cut.is_routing
    assert view.expand(cut) is False
    assert view.collapse(cut) is False
    assert view.toggle(cut) is False
    assert all(x is y for x, y in zip(view.rows, before))


def test_stale_rows_are_ignored(session):
    view = view_of(session)
    view.expand(find(view, "A"))
    a2 = find(view, "A2")
    view.collapse(find(view, "A"))

    assert not view.is_visible(a2)
    assert view.index_of(a2) is None
    assert view.expand(a2) is False
    assert labels(view) == ["A", "B", "C"]


def test_stale_rows_after_reset_are_ignored(session):
    view = view_of(session)
    old_a = find(view, "A")
    view.expand(old_a)
    view.collapse_all()

    assert view.collapse(old_a) is False
    assert labels(view) == ["A", "B", "C"]


def test_toggle_alternates(session):
    view = view_of(session)
    b = find(view, "B")

    assert view.toggle(b) is True
    assert labels(view) == ["A", "B", "B1", "C"]
    assert view.toggle(b) is True
    assert labels(view) == ["A", "B", "C"]


def test_collapse_after_expand_all_keeps_siblings(routed_session):
    view = view_of(routed_session)
    view.expand_all()

    view.collapse(find(view, "A2"))
    assert labels(view) == [
        "A", "*Cut", "*Weld", "A2", "A1",
        "B", "*Drill", "*Paint", "B1",
        "C",
    ]

    view.collapse(find(view, "A"))
    assert labels(view) == ["A", "B", "*Drill", "*Paint", "B1", "C"]


# =============================================================================
# SHARED SUB-ASSEMBLIES
# =============================================================================

@pytest.fixture
def shared_session():
    return make_session([
        bom_row("1", "P", "A", "1"),
        bom_row("1", "P", "B", "2"),
        bom_row("2", "A", "S", "1"),
        bom_row("2", "B", "S", "1"),
        bom_row("3", "S", "S1", "1"),
    ])


def test_shared_subassembly_opens_under_each_parent(shared_session):
    view = view_of(shared_session)
    view.expand(find(view, "A"))
    view.expand(find(view, "B"))

    s_nodes = [n for n in view if n.component_id == "S"]
    assert len(s_nodes) == 2
    assert s_nodes[0] is not s_nodes[1]

    view.expand(s_nodes[0])
    view.expand(s_nodes[1])

    assert labels(view) == ["A", "S", "S1", "B", "S", "S1"]
    s1_nodes = [n for n in view if n.component_id == "S1"]
    assert s1_nodes[0].record is s1_nodes[1].record
    assert s1_nodes[0] is not s1_nodes[1]


def test_collapsing_one_shared_instance_leaves_the_other(shared_session):
    view = view_of(shared_session)
    view.expand_all()
    first_s = [n for n in view if n.component_id == "S"][0]

    view.collapse(first_s)

    assert labels(view) == ["A", "S", "B", "S", "S1"]


# =============================================================================
# CYCLES
# =============================================================================

def test_view_over_truncated_cycle():
    session = make_session([
        bom_row("1", "A", "B", "1"),
        bom_row("2", "B", "C", "1"),
        bom_row("3", "C", "B", "1"),
    ])
    view = view_of(session)
    view.expand_all()

    assert labels(view) == ["B", "C"]
    assert len(session.explosion.truncated) == 1


# =============================================================================
# UNPARSABLE LEVELS
# =============================================================================

def test_unparsable_level_counts_as_deepest():
    session = make_session([
        bom_row("1", "P", "A", "1"),
        bom_row("?", "A", "B", "1"),
        bom_row("?", "B", "C", "1"),
        bom_row("1", "P", "D", "2"),
    ])
    view = view_of(session)
    view.expand_all()
    b = find(view, "B")

    # nothing after B is strictly deeper than "infinitely deep"
    assert view.collapse(b) is True
    assert labels(view) == ["A", "B", "C", "D"]
    assert not b.expanded

    # re-expanding finds C already in place under B
    assert view.expand(b) is True
    assert labels(view) == ["A", "B", "C", "D"]

    # a parseable ancestor still removes the unparsable rows below it
    view.collapse(find(view, "A"))
    assert labels(view) == ["A", "D"]
