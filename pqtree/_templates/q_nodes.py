"""
Templates for Q-nodes.

The children of a Q-node have a fixed order, so these templates look at the
sequence of child states, written as a pattern string with one letter per
child (see :class:`ChildStates<pqtree.pertinence.ChildStates>`), and match
it against regular expressions.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pqtree.pertinence import ChildStates
    from pqtree.reduction import ReductionContext
    from pqtree.types import NodeState

ALL_EMPTY = re.compile("E+")
ALL_FULL = re.compile("F+")
EMPTY_THEN_FULL = re.compile("E+F+|F+E+")
PARTIAL_BEFORE_FULL = re.compile("E*PF*")
PARTIAL_AFTER_FULL = re.compile("F*PE*")
FULL_IN_THE_MIDDLE = re.compile("E+F+E+")
PARTIAL_AT_RUN_START = re.compile("E*PF*E*")
PARTIAL_AT_RUN_END = re.compile("E*F*PE*")
PARTIAL_AT_BOTH_ENDS = re.compile("E*PF*PE*")


def _is_q(ctx: ReductionContext, node: int) -> bool:
    return ctx.tree.kind(node) == "Q"


def _is_q_root(ctx: ReductionContext, node: int) -> bool:
    return ctx.tree.kind(node) == "Q" and node == ctx.pertinent_root


def match_q0(ctx: ReductionContext, node: int, c: ChildStates) -> bool:
    return _is_q(ctx, node) and ALL_EMPTY.fullmatch(c.pattern) is not None


def apply_q0(ctx: ReductionContext, node: int, c: ChildStates) -> NodeState | None:
    return "empty"


def match_q1(ctx: ReductionContext, node: int, c: ChildStates) -> bool:
    return _is_q(ctx, node) and ALL_FULL.fullmatch(c.pattern) is not None


def apply_q1(ctx: ReductionContext, node: int, c: ChildStates) -> NodeState | None:
    return "full"


def match_q2_0(ctx: ReductionContext, node: int, c: ChildStates) -> bool:
    return _is_q(ctx, node) and EMPTY_THEN_FULL.fullmatch(c.pattern) is not None


def apply_q2_0(ctx: ReductionContext, node: int, c: ChildStates) -> NodeState | None:
    # Already in the right shape.
    return "partial"


def match_q2_1(ctx: ReductionContext, node: int, c: ChildStates) -> bool:
    return _is_q(ctx, node) and (
        PARTIAL_BEFORE_FULL.fullmatch(c.pattern) is not None
        or PARTIAL_AFTER_FULL.fullmatch(c.pattern) is not None
    )


def apply_q2_1(ctx: ReductionContext, node: int, c: ChildStates) -> NodeState | None:
    """
    The partial child sits between the empty and the full children and is
    spliced into the node, with its empty end towards the empty side.
    """
    partial = c.partial[0]
    empty_first = PARTIAL_BEFORE_FULL.fullmatch(c.pattern) is not None
    ctx.splice(node, {partial: empty_first})
    return "partial"


def match_q3_0(ctx: ReductionContext, node: int, c: ChildStates) -> bool:
    return _is_q_root(ctx, node) and FULL_IN_THE_MIDDLE.fullmatch(c.pattern) is not None


def apply_q3_0(ctx: ReductionContext, node: int, c: ChildStates) -> NodeState | None:
    # The full run is already consecutive.
    return "doubly_partial"


def match_q3_1a(ctx: ReductionContext, node: int, c: ChildStates) -> bool:
    return (
        _is_q_root(ctx, node)
        and PARTIAL_AT_RUN_START.fullmatch(c.pattern) is not None
    )


def apply_q3_1a(ctx: ReductionContext, node: int, c: ChildStates) -> NodeState | None:
    ctx.splice(node, {c.partial[0]: True})
    return None


def match_q3_1b(ctx: ReductionContext, node: int, c: ChildStates) -> bool:
    return (
        _is_q_root(ctx, node) and PARTIAL_AT_RUN_END.fullmatch(c.pattern) is not None
    )


def apply_q3_1b(ctx: ReductionContext, node: int, c: ChildStates) -> NodeState | None:
    ctx.splice(node, {c.partial[0]: False})
    return None


def match_q3_2(ctx: ReductionContext, node: int, c: ChildStates) -> bool:
    return (
        _is_q_root(ctx, node)
        and PARTIAL_AT_BOTH_ENDS.fullmatch(c.pattern) is not None
    )


def apply_q3_2(ctx: ReductionContext, node: int, c: ChildStates) -> NodeState | None:
    """
    Both partial children are spliced into the pertinent root, the first one
    with its empty end on the left, the second one with its empty end on the
    right, so that the full children of all three nodes become one run.
    """
    first, second = c.partial
    ctx.splice(node, {first: True, second: False})
    return None
