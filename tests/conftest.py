"""Shared sample data for the bomtree test suite.

Sample BOM (root P), by record position:

    0  level 1  P  -> A   seq 10
    1  level 2  A  -> A1  seq 20
    2  level 2  A  -> A2  seq 10
    3  level 1  P  -> B   seq 20
    4  level 3  A2 -> X   seq 10
    5  level 1  P  -> C   (no seq)
    6  level 2  B  -> B1  seq 10

Canonical order: 0, 2, 4, 1, 3, 6, 5

Sample routing: A -> Cut(10), Weld(20); B -> Drill(5), Paint(no seq);
Z -> Unused (not in the BOM).
"""

import pytest

from bomtree.models import Table
from bomtree.session import build_session


def bom_row(level, parent, child, seq, **extra):
    row = {"階層": level, "PARENT": parent, "CHILD": child, "組合項次": seq, "品名": f"Part {child}"}
    row.update(extra)
    return row


def routing_row(component, op_seq, description):
    return {"COMPONENT": component, "OP_SEQ": op_seq, "DESCRIPTION": description}


def make_session(rows, routing_rows=None, **kwargs):
    routing_table = Table.from_rows(routing_rows) if routing_rows is not None else None
    return build_session(Table.from_rows(rows), routing_table, **kwargs)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def bom_rows():
    return [
        bom_row("1", "P", "A", "10"),
        bom_row("2", "A", "A1", "20"),
        bom_row("2", "A", "A2", "10"),
        bom_row("1", "P", "B", "20"),
        bom_row("3", "A2", "X", "10"),
        bom_row("1", "P", "C", None),
        bom_row("2", "B", "B1", "10"),
    ]


@pytest.fixture
def routing_rows():
    return [
        routing_row("A", "20", "Weld"),
        routing_row("A", "10", "Cut"),
        routing_row("B", None, "Paint"),
        routing_row("B", "5", "Drill"),
        routing_row("Z", "1", "Unused"),
    ]


@pytest.fixture
def session(bom_rows):
    return make_session(bom_rows)


@pytest.fixture
def routed_session(bom_rows, routing_rows):
    return make_session(bom_rows, routing_rows)
