"""
Each test starts from a hand-written tree, reduces one subset, and compares
the applied templates and the resulting tree with the textbook outcome.
"""

import pytest

from pqtree import PQTree
from pqtree._templates import TEMPLATE_NAMES
from pqtree.bracket import parse_bracket
from pqtree.pertinence import classify_children
from pqtree.reduction import ReductionContext, select_template
from pqtree.types import TemplateApplication


def reduce(text: str, subset: str) -> tuple[bool, list[str], str]:
    """
    Reduce `subset` (one character per element) on the tree given by `text`.
    """
    applied: list[TemplateApplication] = []
    pq = PQTree.from_bracket_string(
        text, config={"debug": False, "verify": True}, tracer=applied.append
    )
    accepted = pq.accept(set(subset))
    return (accepted, [x["template"] for x in applied], pq.to_bracket_string())


def test_catalogue_order():
    assert TEMPLATE_NAMES == [
        "L1",
        "P0",
        "P1",
        "P2",
        "P3",
        "P4_0",
        "P4",
        "P5",
        "P6",
        "Q0",
        "Q1",
        "Q2_0",
        "Q2_1",
        "Q3_0",
        "Q3_1a",
        "Q3_1b",
        "Q3_2",
    ]


@pytest.mark.parametrize(
    "text,template",
    [
        ("('1','2');", "P0"),
        ("['1','2'];", "Q0"),
    ],
)
def test_empty_templates(text: str, template: str):
    # Empty nodes are never visited by a reduction, so the templates are
    # checked directly.
    tree, _ = parse_bracket(text)
    assert tree.root is not None
    ctx = ReductionContext(tree, tree.root)
    children = classify_children(tree, tree.root, ctx.states)

    selected = select_template(ctx, tree.root, children)
    assert selected is not None
    name, _, apply = selected
    assert name == template
    assert apply(ctx, tree.root, children) == "empty"


def test_p1():
    assert reduce("('1','2',('3','4'));", "34") == (
        True,
        ["L1", "L1", "P1"],
        "('1','2',('3','4'));",
    )


def test_p2():
    assert reduce("('1','2','3','4');", "12") == (
        True,
        ["L1", "L1", "P2"],
        "('3','4',('1','2'));",
    )


def test_p3_and_p6_without_empty_children():
    assert reduce("(('1','2'),('3','4'));", "23") == (
        True,
        ["L1", "P3", "L1", "P3", "P6"],
        "['1','2','3','4'];",
    )


def test_p4_0():
    assert reduce("(('1','2'),'3');", "23") == (
        True,
        ["L1", "P3", "L1", "P4_0"],
        "['1','2','3'];",
    )


def test_p4():
    # The root keeps its empty child and stays a P-node.
    assert reduce("('0',('1','2'),'3');", "23") == (
        True,
        ["L1", "P3", "L1", "P4"],
        "('0',['1','2','3']);",
    )


def test_p5():
    assert reduce("('0',(('1','2'),'3'),'4');", "234") == (
        True,
        ["L1", "P3", "L1", "P5", "L1", "P4"],
        "('0',['1','2','3','4']);",
    )


def test_p6_with_empty_children():
    assert reduce("('0',('1','2'),('3','4'));", "23") == (
        True,
        ["L1", "P3", "L1", "P3", "P6"],
        "('0',['1','2','3','4']);",
    )


def test_q1():
    assert reduce("['1','2','3'];", "123") == (
        True,
        ["L1", "L1", "L1", "Q1"],
        "['1','2','3'];",
    )


def test_q2_0():
    assert reduce("('0',['1','2','3']);", "023") == (
        True,
        ["L1", "L1", "L1", "Q2_0", "P4_0"],
        "['1','2','3','0'];",
    )


def test_q2_1():
    assert reduce("('0',['1',('2','3'),'4']);", "034") == (
        True,
        ["L1", "L1", "P3", "L1", "Q2_1", "P4_0"],
        "['1','2','3','4','0'];",
    )


def test_q2_1_wins_over_q3_1a():
    assert reduce("['1',('2','3'),'4'];", "34") == (
        True,
        ["L1", "P3", "L1", "Q2_1"],
        "['1','2','3','4'];",
    )


def test_q3_0():
    assert reduce("['1','2','3','4'];", "23") == (
        True,
        ["L1", "L1", "Q3_0"],
        "['1','2','3','4'];",
    )


def test_q3_1a():
    assert reduce("['1',('2','3'),'4','5'];", "34") == (
        True,
        ["L1", "P3", "L1", "Q3_1a"],
        "['1','2','3','4','5'];",
    )


def test_q3_1b():
    assert reduce("['1','2',('3','4'),'5'];", "23") == (
        True,
        ["L1", "L1", "P3", "Q3_1b"],
        "['1','2','3','4','5'];",
    )


def test_q3_2():
    assert reduce("[('1','2'),'3',('4','5')];", "234") == (
        True,
        ["L1", "P3", "L1", "L1", "P3", "Q3_2"],
        "['1','2','3','4','5'];",
    )


def test_non_root_q_node_with_inner_run():
    # `2` sits in the middle of a Q-node that is not the pertinent root.
    assert reduce("('0',['1','2','3']);", "02") == (
        False,
        ["L1", "L1"],
        "('0',['1','2','3']);",
    )


def test_non_root_p_node_with_two_partial_children():
    assert reduce("('0',(('1','2'),('3','4')));", "023") == (
        False,
        ["L1", "L1", "P3", "L1", "P3"],
        "('0',(('1','2'),('3','4')));",
    )


def test_tracer_records_states():
    applied: list[TemplateApplication] = []
    pq = PQTree.from_bracket_string("('1','2','3','4');", tracer=applied.append)
    assert pq.accept({"1", "2"})
    assert applied == [
        {"template": "L1", "node": 1, "state": "full"},
        {"template": "L1", "node": 2, "state": "full"},
        {"template": "P2", "node": 0, "state": None},
    ]

    applied.clear()
    pq = PQTree.from_bracket_string("['1','2','3','4'];", tracer=applied.append)
    assert pq.accept({"2", "3"})
    assert applied[-1] == {"template": "Q3_0", "node": 0, "state": "doubly_partial"}
