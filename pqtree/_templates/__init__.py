"""
The catalogue of reduction templates, in priority order.

Several predicates overlap (e.g. `Q2_1` and `Q3_1a` both accept a partial
child followed by full children at the pertinent root), so the order below
is part of the algorithm: the first matching template wins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from pqtree.pertinence import ChildStates
    from pqtree.reduction import ReductionContext
    from pqtree.types import NodeState

    MatchFunction = Callable[[ReductionContext, int, ChildStates], bool]
    ApplyFunction = Callable[[ReductionContext, int, ChildStates], NodeState | None]
    Template = tuple[str, MatchFunction, ApplyFunction]

from pqtree._templates.p_nodes import (
    apply_l1,
    apply_p0,
    apply_p1,
    apply_p2,
    apply_p3,
    apply_p4,
    apply_p4_0,
    apply_p5,
    apply_p6,
    match_l1,
    match_p0,
    match_p1,
    match_p2,
    match_p3,
    match_p4,
    match_p4_0,
    match_p5,
    match_p6,
)
from pqtree._templates.q_nodes import (
    apply_q0,
    apply_q1,
    apply_q2_0,
    apply_q2_1,
    apply_q3_0,
    apply_q3_1a,
    apply_q3_1b,
    apply_q3_2,
    match_q0,
    match_q1,
    match_q2_0,
    match_q2_1,
    match_q3_0,
    match_q3_1a,
    match_q3_1b,
    match_q3_2,
)

TEMPLATES: list[Template] = [
    ("L1", match_l1, apply_l1),
    ("P0", match_p0, apply_p0),
    ("P1", match_p1, apply_p1),
    ("P2", match_p2, apply_p2),
    ("P3", match_p3, apply_p3),
    ("P4_0", match_p4_0, apply_p4_0),
    ("P4", match_p4, apply_p4),
    ("P5", match_p5, apply_p5),
    ("P6", match_p6, apply_p6),
    ("Q0", match_q0, apply_q0),
    ("Q1", match_q1, apply_q1),
    ("Q2_0", match_q2_0, apply_q2_0),
    ("Q2_1", match_q2_1, apply_q2_1),
    ("Q3_0", match_q3_0, apply_q3_0),
    ("Q3_1a", match_q3_1a, apply_q3_1a),
    ("Q3_1b", match_q3_1b, apply_q3_1b),
    ("Q3_2", match_q3_2, apply_q3_2),
]
"""Ordered `(name, match, apply)` entries. The first matching template is applied."""

TEMPLATE_NAMES: list[str] = [name for name, _, _ in TEMPLATES]
"""Names of all templates, in catalogue order."""
