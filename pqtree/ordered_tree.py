"""
A rooted ordered tree on top of `networkx.DiGraph`.

Every node is an integer. Edges point from parents to children, and the
left-to-right order of the children of a node is the insertion order of its
out-edges (`networkx` keeps adjacency in insertion-ordered dictionaries).
Node attributes follow :class:`NodeData<pqtree.types.NodeData>`.

The tree is not thread safe; all mutation is expected to happen from a
single thread.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

if TYPE_CHECKING:
    from typing import Callable, Iterable, Iterator

    from pqtree.types import Element, NodeKind

import networkx as nx  # type: ignore


class OrderedTree:
    """
    Rooted tree with ordered children and typed nodes.

    Examples
    --------
    >>> from pqtree.ordered_tree import OrderedTree
    >>> tree = OrderedTree()
    >>> root = tree.new_node("P")
    >>> tree.root = root
    >>> a = tree.new_node("leaf", "a")
    >>> b = tree.new_node("leaf", "b")
    >>> tree.new_edge(root, b)
    >>> tree.new_edge(root, a)
    >>> [tree.element(x) for x in tree.children(root)]
    ['b', 'a']
    >>> [tree.kind(x) for x in tree.postorder()]
    ['leaf', 'leaf', 'P']
    """

    __slots__ = ("graph", "root", "_next_id")

    def __init__(self):
        self.graph: nx.DiGraph = nx.DiGraph()
        """
        The `networkx.DiGraph` storing the nodes (with their `kind` and
        `element` attributes) and the parent-to-child edges.
        """

        self.root: int | None = None
        """
        The root node, or `None` for an empty tree.
        """

        self._next_id = 0

    def __len__(self) -> int:
        """
        Returns the number of nodes in this tree.
        """
        return self.graph.number_of_nodes()

    def __contains__(self, node: object) -> bool:
        return node in self.graph

    def new_node(self, kind: NodeKind, element: Element | None = None) -> int:
        """
        Create a new detached node and return its ID.

        Parameters
        ----------
        kind : NodeKind
            The kind of the node (`"P"`, `"Q"`, or `"leaf"`).
        element : Element | None
            The element represented by a leaf. Must be `None` for internal nodes.

        Returns
        -------
        int
            The ID of the new node.
        """
        node = self._next_id
        self._next_id += 1
        if kind == "leaf":
            self.graph.add_node(node, kind=kind, element=element)
        else:
            assert element is None, "Only leaves can carry an element."
            self.graph.add_node(node, kind=kind)
        return node

    def new_edge(self, parent: int, child: int):
        """
        Append `child` to the end of the child list of `parent`.

        The child must not have a parent already (use :meth:`detach` first).
        """
        if self.graph.in_degree(child) > 0:  # type: ignore
            raise ValueError(f"Node {child} already has a parent.")
        if child == self.root:
            raise ValueError(f"Node {child} is the root and cannot have a parent.")
        self.graph.add_edge(parent, child)

    def delete_edge(self, parent: int, child: int):
        self.graph.remove_edge(parent, child)

    def detach(self, node: int):
        """
        Remove the edge between `node` and its parent (if there is one).
        """
        parent = self.parent(node)
        if parent is not None:
            self.graph.remove_edge(parent, node)

    def delete_node(self, node: int):
        """
        Delete a node that has no remaining edges.

        Raises
        ------
        RuntimeError
            If the node still has a parent or children.
        """
        if self.graph.degree(node) > 0:  # type: ignore
            raise RuntimeError(f"Cannot delete node {node}, it still has edges.")
        if node == self.root:
            self.root = None
        self.graph.remove_node(node)

    def children(self, node: int) -> list[int]:
        """
        The children of `node` in left-to-right order.
        """
        return list(self.graph.successors(node))  # type: ignore

    def out_degree(self, node: int) -> int:
        return cast(int, self.graph.out_degree(node))

    def parent(self, node: int) -> int | None:
        """
        The parent of `node`, or `None` for the root or a detached node.
        """
        for parent in self.graph.predecessors(node):  # type: ignore
            return cast(int, parent)
        return None

    def kind(self, node: int) -> NodeKind:
        return cast("NodeKind", self.graph.nodes[node]["kind"])

    def set_kind(self, node: int, kind: NodeKind):
        assert kind != "leaf", "Internal nodes cannot be turned into leaves."
        self.graph.nodes[node]["kind"] = kind

    def element(self, node: int) -> Element:
        """
        The element represented by a leaf.

        Raises
        ------
        KeyError
            If `node` is not a leaf.
        """
        return self.graph.nodes[node]["element"]

    def set_children(self, node: int, children: Iterable[int]):
        """
        Replace the child list of `node` with `children` (in this order).

        Each new child is first detached from its current parent, so nodes can
        be moved from anywhere in the tree. Former children of `node` that are
        not part of the new list become detached.
        """
        children = list(children)
        for child in self.children(node):
            self.graph.remove_edge(node, child)
        for child in children:
            self.detach(child)
            self.new_edge(node, child)

    def postorder(
        self,
        root: int | None = None,
        keep: Callable[[int], bool] | None = None,
    ) -> Iterator[int]:
        """
        Lazily iterate over the sub-tree of `root` with children before parents.

        If `keep` is given, the traversal only descends into children for
        which `keep(child)` is `True`. The root itself is always visited.

        The children of a node are read when the traversal first enters the
        node, so callers may restructure a node's sub-tree as soon as the node
        has been yielded, as long as they do not touch nodes that are still
        waiting on the traversal stack.

        Parameters
        ----------
        root : int | None
            The root of the traversed sub-tree. Defaults to the tree root.
        keep : Callable[[int], bool] | None
            Optional filter restricting which children are entered.

        Returns
        -------
        Iterator[int]
            The visited nodes in postorder.
        """
        if root is None:
            root = self.root
        if root is None:
            return

        stack: list[tuple[int, Iterator[int]]] = [(root, self._kept(root, keep))]
        while len(stack) > 0:
            node, pending = stack[-1]
            child = next(pending, None)
            if child is None:
                stack.pop()
                yield node
            else:
                stack.append((child, self._kept(child, keep)))

    def _kept(self, node: int, keep: Callable[[int], bool] | None) -> Iterator[int]:
        children = self.children(node)
        if keep is None:
            return iter(children)
        return iter([c for c in children if keep(c)])

    def clone(self) -> tuple[OrderedTree, dict[int, int]]:
        """
        Create a structurally identical, fully independent copy of this tree.

        The copy uses fresh node IDs (assigned in preorder, starting with
        `0` for the root).

        Returns
        -------
        tuple[OrderedTree, dict[int, int]]
            The copy, and a dictionary mapping every node of this tree to the
            corresponding node of the copy.
        """
        copy = OrderedTree()
        old_to_new: dict[int, int] = {}
        if self.root is None:
            return (copy, old_to_new)

        stack = [self.root]
        while len(stack) > 0:
            node = stack.pop()
            data = self.graph.nodes[node]
            new_node = copy.new_node(data["kind"], data.get("element"))
            old_to_new[node] = new_node
            parent = self.parent(node)
            if parent is not None:
                copy.new_edge(old_to_new[parent], new_node)
            else:
                copy.root = new_node
            # Push in reverse so that children are copied left to right.
            stack.extend(reversed(self.children(node)))

        return (copy, old_to_new)

    def is_valid(self) -> bool:
        """
        `True` if this is a well-formed tree: the graph is an arborescence
        rooted in `root`, every internal node has at least one child, and
        leaves have none.
        """
        if self.root is None:
            return len(self) == 0
        if not nx.is_arborescence(self.graph):  # type: ignore
            return False
        if self.graph.in_degree(self.root) != 0:  # type: ignore
            return False
        for node, kind in self.graph.nodes(data="kind"):  # type: ignore
            if (kind == "leaf") != (self.graph.out_degree(node) == 0):  # type: ignore
                return False
        return True
