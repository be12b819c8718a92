"""
The Booth-Lueker reduction of a PQ-tree.

A reduction makes the leaves of one subset consecutive in every ordering
represented by the tree. The pertinent sub-tree is processed bottom-up and
at every node the first matching template of
:data:`TEMPLATES<pqtree._templates.TEMPLATES>` rewrites the node and reports
its state to the parent. If no template matches, the subset is not compatible
with the tree and the reduction stops.

The reduction works in place and does not undo anything when it fails; the
caller is responsible for restoring the tree (see :meth:`pqtree.PQTree.accept`).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Callable, Iterable

    from pqtree._templates import Template
    from pqtree.ordered_tree import OrderedTree
    from pqtree.types import (
        Element,
        NodeState,
        PQTreeConfiguration,
        TemplateApplication,
    )

from pqtree._templates import TEMPLATES
from pqtree.bracket import write_bracket
from pqtree.pertinence import ChildStates, classify_children, pertinent_root


class ReductionContext:
    """
    State shared by the templates during one reduction.

    Besides the data, it provides the small rewriting steps the templates are
    built from (grouping children, orienting and splicing partial nodes).
    """

    __slots__ = ("tree", "pertinent_root", "states", "applied")

    def __init__(self, tree: OrderedTree, pertinent_root: int):
        self.tree = tree
        self.pertinent_root = pertinent_root
        self.states: dict[int, NodeState] = {}
        """
        States of the already processed nodes. Missing nodes are empty.
        """
        self.applied: list[str] = []
        """
        Names of the applied templates, in the order of application.
        """

    def state(self, node: int) -> NodeState:
        return self.states.get(node, "empty")

    def is_empty(self, node: int) -> bool:
        return self.state(node) == "empty"

    def group(self, nodes: list[int], state: NodeState) -> int | None:
        """
        Collect `nodes` under a new P-node with the given `state`.

        A single node is returned as is (it stays where it is, the caller
        moves it), and `None` is returned for an empty list.
        """
        if len(nodes) == 0:
            return None
        if len(nodes) == 1:
            return nodes[0]
        group = self.tree.new_node("P")
        self.tree.set_children(group, nodes)
        self.states[group] = state
        return group

    def oriented(self, partial: int, empty_first: bool) -> list[int]:
        """
        The children of a partial node, ordered so that the empty children
        come first (or last, if `empty_first` is `False`).
        """
        children = self.tree.children(partial)
        if self.is_empty(children[0]) == empty_first:
            return children
        return children[::-1]

    def discard(self, node: int):
        """
        Remove a node whose children were all moved elsewhere.
        """
        self.tree.detach(node)
        self.tree.delete_node(node)
        self.states.pop(node, None)

    def splice(self, node: int, orientations: dict[int, bool]):
        """
        Replace partial children of `node` by their own children.

        `orientations` maps each spliced child to the `empty_first` argument
        of :meth:`oriented`. The spliced nodes are deleted.
        """
        sequence: list[int] = []
        for child in self.tree.children(node):
            if child in orientations:
                sequence.extend(self.oriented(child, orientations[child]))
            else:
                sequence.append(child)
        self.tree.set_children(node, sequence)
        for child in orientations:
            self.discard(child)


def select_template(
    ctx: ReductionContext, node: int, children: ChildStates
) -> Template | None:
    """
    The first template in catalogue order that matches `node`, or `None`.
    """
    for template in TEMPLATES:
        if template[1](ctx, node, children):
            return template
    return None


def reduce_tree(
    tree: OrderedTree,
    leaves: dict[Element, int],
    subset: Iterable[Element],
    config: PQTreeConfiguration,
    tracer: Callable[[TemplateApplication], None] | None = None,
) -> tuple[bool, list[str]]:
    """
    Reduce `tree` so that the leaves of `subset` become consecutive.

    Parameters
    ----------
    tree : OrderedTree
        The PQ-tree structure. Modified in place, even if the reduction fails.
    leaves : dict[Element, int]
        Maps every element to its leaf in `tree`.
    subset : Iterable[Element]
        The subset to reduce. Must have at least two elements, all of them in
        `leaves`.
    config : PQTreeConfiguration
        Controls debug output and structural verification.
    tracer : Callable[[TemplateApplication], None] | None
        Optional callback invoked after every applied template.

    Returns
    -------
    tuple[bool, list[str]]
        Whether the reduction succeeded, and the names of the applied templates.

    Raises
    ------
    RuntimeError
        If the tree is malformed (either before the reduction, or after a
        template has been applied while `config["verify"]` is set).
    """
    root, below = pertinent_root(tree, leaves, subset)
    ctx = ReductionContext(tree, root)

    if config["debug"]:
        print(
            f"Reducing {len(below)} pertinent node(s) below root {root}: {write_bracket(tree, root)}"
        )

    for node in tree.postorder(root, keep=below.__contains__):
        children = classify_children(tree, node, ctx.states)
        template = select_template(ctx, node, children)
        if template is None:
            if config["debug"]:
                print(
                    f"[{node}] No template matches {tree.kind(node)}-node with children {children.pattern}."
                )
            return (False, ctx.applied)

        name, _, apply = template
        state = apply(ctx, node, children)
        if state is not None:
            ctx.states[node] = state
        ctx.applied.append(name)

        if config["debug"] and tree.kind(node) != "leaf":
            print(f"[{node}] {name} -> {write_bracket(tree, node)}")
        if tracer is not None:
            tracer({"template": name, "node": node, "state": state})
        if config["verify"] and not tree.is_valid():
            raise RuntimeError(f"Template {name} produced a malformed tree at node {node}.")

    return (True, ctx.applied)
