"""
Templates for leaves and P-nodes.

Each template is a `match_*` predicate and an `apply_*` rewrite. The
predicates assume that all templates listed before them in the catalogue did
not match. The rewrites return the state of the node for its parent, or
`None` if the node is the pertinent root (which has no parent in the
reduction).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pqtree.pertinence import ChildStates
    from pqtree.reduction import ReductionContext
    from pqtree.types import NodeState


def match_l1(ctx: ReductionContext, node: int, c: ChildStates) -> bool:
    return ctx.tree.kind(node) == "leaf"


def apply_l1(ctx: ReductionContext, node: int, c: ChildStates) -> NodeState | None:
    # Only leaves of the reduced subset are ever visited.
    return "full"


def match_p0(ctx: ReductionContext, node: int, c: ChildStates) -> bool:
    return ctx.tree.kind(node) == "P" and c.non_empty() == 0


def apply_p0(ctx: ReductionContext, node: int, c: ChildStates) -> NodeState | None:
    return "empty"


def match_p1(ctx: ReductionContext, node: int, c: ChildStates) -> bool:
    return ctx.tree.kind(node) == "P" and len(c.full) == len(c)


def apply_p1(ctx: ReductionContext, node: int, c: ChildStates) -> NodeState | None:
    return "full"


def _only_full_and_empty(c: ChildStates) -> bool:
    return (
        len(c.full) > 0
        and len(c.empty) > 0
        and len(c.partial) == 0
        and len(c.doubly_partial) == 0
    )


def match_p2(ctx: ReductionContext, node: int, c: ChildStates) -> bool:
    return (
        ctx.tree.kind(node) == "P"
        and node == ctx.pertinent_root
        and _only_full_and_empty(c)
    )


def apply_p2(ctx: ReductionContext, node: int, c: ChildStates) -> NodeState | None:
    """
    The full children of the pertinent root are moved under a new P-node,
    which becomes one more child of the root.
    """
    if len(c.full) > 1:
        full = ctx.group(c.full, "full")
        assert full is not None
        ctx.tree.new_edge(node, full)
    return None


def match_p3(ctx: ReductionContext, node: int, c: ChildStates) -> bool:
    return (
        ctx.tree.kind(node) == "P"
        and node != ctx.pertinent_root
        and _only_full_and_empty(c)
    )


def apply_p3(ctx: ReductionContext, node: int, c: ChildStates) -> NodeState | None:
    """
    The node becomes a partial Q-node with two children: the group of empty
    children and the group of full children.
    """
    empty = ctx.group(c.empty, "empty")
    full = ctx.group(c.full, "full")
    ctx.tree.set_children(node, [empty, full])
    ctx.tree.set_kind(node, "Q")
    return "partial"


def _single_partial(c: ChildStates) -> bool:
    return len(c.partial) == 1 and len(c.doubly_partial) == 0


def match_p4_0(ctx: ReductionContext, node: int, c: ChildStates) -> bool:
    return (
        ctx.tree.kind(node) == "P"
        and node == ctx.pertinent_root
        and len(c.empty) == 0
        and _single_partial(c)
    )


def apply_p4_0(ctx: ReductionContext, node: int, c: ChildStates) -> NodeState | None:
    """
    Without empty children, the pertinent root takes over the children of its
    partial child and appends its full children at the full end.
    """
    partial = c.partial[0]
    sequence = ctx.oriented(partial, empty_first=True)
    full = ctx.group(c.full, "full")
    if full is not None:
        sequence.append(full)
    ctx.tree.set_children(node, sequence)
    ctx.discard(partial)
    ctx.tree.set_kind(node, "Q")
    return None


def match_p4(ctx: ReductionContext, node: int, c: ChildStates) -> bool:
    return (
        ctx.tree.kind(node) == "P"
        and node == ctx.pertinent_root
        and _single_partial(c)
    )


def apply_p4(ctx: ReductionContext, node: int, c: ChildStates) -> NodeState | None:
    """
    The full children of the pertinent root are appended (as one group) to the
    full end of its partial child. The root stays a P-node, keeping its empty
    children and the extended partial child.
    """
    partial = c.partial[0]
    full = ctx.group(c.full, "full")
    if full is not None:
        sequence = ctx.oriented(partial, empty_first=True)
        sequence.append(full)
        ctx.tree.set_children(partial, sequence)
    return None


def match_p5(ctx: ReductionContext, node: int, c: ChildStates) -> bool:
    return (
        ctx.tree.kind(node) == "P"
        and node != ctx.pertinent_root
        and _single_partial(c)
    )


def apply_p5(ctx: ReductionContext, node: int, c: ChildStates) -> NodeState | None:
    """
    The node becomes a partial Q-node: the group of empty children, then the
    children of the partial child (empty end first), then the group of full
    children.
    """
    partial = c.partial[0]
    empty = ctx.group(c.empty, "empty")
    full = ctx.group(c.full, "full")

    sequence: list[int] = []
    if empty is not None:
        sequence.append(empty)
    sequence.extend(ctx.oriented(partial, empty_first=True))
    if full is not None:
        sequence.append(full)

    ctx.tree.set_children(node, sequence)
    ctx.discard(partial)
    ctx.tree.set_kind(node, "Q")
    return "partial"


def match_p6(ctx: ReductionContext, node: int, c: ChildStates) -> bool:
    return (
        ctx.tree.kind(node) == "P"
        and node == ctx.pertinent_root
        and len(c.partial) == 2
        and len(c.doubly_partial) == 0
    )


def apply_p6(ctx: ReductionContext, node: int, c: ChildStates) -> NodeState | None:
    """
    The two partial children are merged into one Q-node with the full
    children (as one group) in the middle and the empty runs at both ends.
    If the root has empty children, the merged Q-node becomes a new,
    doubly partial child of the root. Otherwise, the root itself turns into
    the merged Q-node.
    """
    first, second = c.partial
    full = ctx.group(c.full, "full")

    sequence = ctx.oriented(first, empty_first=True)
    if full is not None:
        sequence.append(full)
    sequence.extend(ctx.oriented(second, empty_first=False))

    if len(c.empty) == 0:
        ctx.tree.set_children(node, sequence)
        ctx.tree.set_kind(node, "Q")
    else:
        merged = ctx.tree.new_node("Q")
        ctx.tree.set_children(merged, sequence)
        ctx.states[merged] = "doubly_partial"
        ctx.tree.new_edge(node, merged)

    ctx.discard(first)
    ctx.discard(second)
    return None
