"""
Classification of PQ-tree nodes with respect to the subset that is being reduced.

During one reduction, every node of the pertinent sub-tree is given one of the
:data:`NodeState<pqtree.types.NodeState>` values:

 - `"full"`: every leaf below the node belongs to the subset;
 - `"empty"`: no leaf below the node belongs to the subset;
 - `"partial"`: the node is a Q-node whose children read as a run of empty
   children followed by a run of full children (or the reverse);
 - `"doubly_partial"`: the full children form a run that touches neither end.
   This is only ever produced at the pertinent root.

States live in a dictionary that is created for a single reduction and
then thrown away. Nodes without an entry are empty.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Iterable

    from pqtree.ordered_tree import OrderedTree
    from pqtree.types import Element, NodeState

STATE_LETTERS: dict[NodeState, str] = {
    "empty": "E",
    "full": "F",
    "partial": "P",
    "doubly_partial": "D",
}
"""One-letter codes of node states used in child patterns."""


def pertinent_root(
    tree: OrderedTree,
    leaves: dict[Element, int],
    subset: Iterable[Element],
) -> tuple[int, dict[int, int]]:
    """
    Find the pertinent root of `subset`: the deepest node whose sub-tree
    contains all leaves of `subset`.

    For each element, the path from its leaf towards the root is walked and
    every node on the way counts one more member below it. The walk stops at
    the first node that has seen all members.

    Parameters
    ----------
    tree : OrderedTree
        The PQ-tree structure.
    leaves : dict[Element, int]
        Maps every element to its leaf in `tree`.
    subset : Iterable[Element]
        The reduced subset. Must contain at least one element, all of them
        present in `leaves`.

    Returns
    -------
    tuple[int, dict[int, int]]
        The pertinent root, and the number of subset members below every node
        of the pertinent sub-tree. Nodes above the pertinent root and nodes
        with no members below them have no entry.

    Raises
    ------
    RuntimeError
        If no node sees all members, which means the tree is malformed.
    """
    members = list(subset)
    below: dict[int, int] = {}
    root: int | None = None

    for element in members:
        node: int | None = leaves[element]
        while node is not None:
            count = below.get(node, 0) + 1
            below[node] = count
            if count == len(members):
                root = node
                break
            node = tree.parent(node)

    if root is None:
        raise RuntimeError(
            f"Pertinent root not found for a subset of {len(members)} elements."
        )

    # Ancestors of the pertinent root do not take part in the reduction.
    ancestor = tree.parent(root)
    while ancestor is not None:
        below.pop(ancestor, None)
        ancestor = tree.parent(ancestor)

    return (root, below)


class ChildStates:
    """
    The children of one node, split by their states.

    All lists keep the left-to-right order of the children. The `pattern`
    contains one letter per child (`E`, `F`, `P` or `D`, see
    :data:`STATE_LETTERS`), which lets Q-node templates match the child
    sequence with regular expressions.
    """

    __slots__ = ("children", "full", "empty", "partial", "doubly_partial", "pattern")

    def __init__(self, children: list[int], states: dict[int, NodeState]):
        self.children = children
        self.full: list[int] = []
        self.empty: list[int] = []
        self.partial: list[int] = []
        self.doubly_partial: list[int] = []

        letters: list[str] = []
        for child in children:
            state = states.get(child, "empty")
            if state == "full":
                self.full.append(child)
            elif state == "empty":
                self.empty.append(child)
            elif state == "partial":
                self.partial.append(child)
            else:
                self.doubly_partial.append(child)
            letters.append(STATE_LETTERS[state])
        self.pattern = "".join(letters)

    def __len__(self) -> int:
        return len(self.children)

    def __repr__(self) -> str:
        return f"ChildStates({self.pattern})"

    def non_empty(self) -> int:
        """
        Number of children that are not empty.
        """
        return len(self.children) - len(self.empty)


def classify_children(
    tree: OrderedTree, node: int, states: dict[int, NodeState]
) -> ChildStates:
    """
    Split the children of `node` by their (already computed) states.
    """
    return ChildStates(tree.children(node), states)
