from __future__ import annotations

from typing import TYPE_CHECKING, Hashable, Literal, TypeAlias, TypedDict

if TYPE_CHECKING:
    from pqtree.ordered_tree import OrderedTree

Element: TypeAlias = Hashable
"""Type alias for `Hashable`. Represents one member of the ground set of a PQ-tree."""
NodeKind: TypeAlias = Literal["P", "Q", "leaf"]
"""Type alias for `Literal["P", "Q", "leaf"]`. The kind of a PQ-tree node."""
NodeState: TypeAlias = Literal["full", "empty", "partial", "doubly_partial"]
"""Type alias for the per-call classification of a node with respect to the reduced subset."""


class NodeData(TypedDict, total=False):
    """
    A `TypedDict` class that stores the data of a PQ-tree node (see :class:`pqtree.ordered_tree.OrderedTree`).

    This class is not directly used at runtime, and only exists for static type-checking.
    At runtime, an untyped dictionary is used because that is what is returned by
    `networkx.DiGraph.nodes[node]`.
    """

    kind: NodeKind
    """
    Whether the node is a P-node (children can be permuted freely), a Q-node
    (children order is fixed up to reversal), or a leaf.
    """

    element: Element
    """
    The ground set element represented by a leaf. Internal nodes have no element.
    """


class TemplateApplication(TypedDict):
    """
    Describes one template applied during a reduction. Instances are passed
    to the `tracer` of a :class:`pqtree.PQTree`.
    """

    template: str
    """
    The Booth-Lueker name of the template, e.g. `"P3"` or `"Q2_1"`.
    """

    node: int
    """
    The tree node the template was applied to.
    """

    state: NodeState | None
    """
    The state the template derived for the node, or `None` if the node is the
    pertinent root and no state is needed.
    """


class PQTreeConfiguration(TypedDict):
    """
    Describes the configuration options of a `PQTree`.

    Use :meth:`PQTree.default_config` to create a configuration dictionary
    pre-populated with default values.
    """

    debug: bool
    """
    If `True`, the `PQTree` will print messages describing each reduction:
    the pertinent root, the templates that were applied and the rewritten
    sub-trees, and the final verdict.

    [Default: False]
    """

    verify: bool
    """
    If `True`, the tree structure is validated after every applied template,
    and the verdict of every `accept` call is compared with the ordering
    returned by `extract_ordering` (an accepted subset must be consecutive in
    it, a rejected one must not be). Any disagreement raises a `RuntimeError`.

    This roughly doubles the cost of every `accept` call, so it is mainly
    intended for testing.

    [Default: False]
    """


class PQTreeState(TypedDict):
    """
    A `TypedDict` class that stores the state of a PQ-tree (see :class:`pqtree.PQTree`).
    Used for pickling.
    """

    ground_set: tuple[Element, ...]
    """
    The ground set in construction order.
    """

    tree: OrderedTree
    """
    The underlying ordered tree.
    """

    leaves: dict[Element, int]
    """
    Maps every ground set element to its leaf node in `tree`.
    """

    config: PQTreeConfiguration
    """
    The configuration of the tree.
    """

    statistics: dict[str, int]
    """
    How many times each reduction template was applied.
    """
