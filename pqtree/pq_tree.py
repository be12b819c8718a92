from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Callable, Iterable

from pqtree._templates import TEMPLATE_NAMES
from pqtree.bracket import parse_bracket, write_bracket
from pqtree.consecutive import is_consecutive
from pqtree.ordered_tree import OrderedTree
from pqtree.reduction import reduce_tree
from pqtree.types import (
    Element,
    PQTreeConfiguration,
    PQTreeState,
    TemplateApplication,
)


class PQTree:
    """
    PQ-tree over a fixed ground set (Booth and Lueker, 1976).

    A PQ-tree represents all orderings of its ground set in which each of the
    previously accepted subsets appears consecutively. Subsets are added one
    at a time with :meth:`accept`, which either refines the tree, or rejects
    the subset and leaves the tree exactly as it was.

    This is not the linear time variant of the algorithm: every call to
    :meth:`accept` takes a snapshot of the whole tree so that a rejected
    subset can be rolled back.

    Examples
    --------
    >>> from pqtree import PQTree
    >>> pq = PQTree([1, 2, 3, 4, 5])
    >>> pq.accept({1, 2})
    True
    >>> pq.accept({4, 5})
    True
    >>> pq.to_bracket_string()
    "('3',('1','2'),('4','5'));"
    >>> pq.accept({2, 3, 4})
    True
    >>> pq.to_bracket_string()
    "['1','2','3','4','5'];"
    >>> pq.accept({1, 3})
    False
    >>> pq.extract_ordering()
    [1, 2, 3, 4, 5]
    """

    __slots__ = (
        "ground_set",
        "tree",
        "leaves",
        "config",
        "tracer",
        "statistics",
    )

    def __init__(
        self,
        ground_set: Iterable[Element],
        config: PQTreeConfiguration | None = None,
        tracer: Callable[[TemplateApplication], None] | None = None,
    ):
        if config is None:
            config = PQTree.default_config()
        self.config = config

        self.ground_set: tuple[Element, ...] = tuple(dict.fromkeys(ground_set))
        """
        The elements ordered by this tree, in the order in which they were
        first given.
        """
        if len(self.ground_set) == 0:
            raise ValueError("A PQ-tree needs a non-empty ground set.")

        self.tree: OrderedTree = OrderedTree()
        """
        The tree structure (see :class:`pqtree.ordered_tree.OrderedTree`).
        """

        self.leaves: dict[Element, int] = {}
        """
        Maps every element of the ground set to its leaf in `tree`.
        """

        self.tracer: Callable[[TemplateApplication], None] | None = tracer
        """
        Optional callback that is notified about every template applied by
        :meth:`accept`.
        """

        self.statistics: dict[str, int] = {}
        """
        How many times each template was applied (see :meth:`reductions_used`).
        """

        # Initially, every ordering is allowed.
        root = self.tree.new_node("P")
        self.tree.root = root
        for element in self.ground_set:
            leaf = self.tree.new_node("leaf", element)
            self.tree.new_edge(root, leaf)
            self.leaves[element] = leaf

        if self.config["debug"]:
            print(f"Created PQ-tree with {len(self.ground_set)} elements.")

    def __getstate__(self) -> PQTreeState:
        return {
            "ground_set": self.ground_set,
            "tree": self.tree,
            "leaves": self.leaves,
            "config": self.config,
            "statistics": self.statistics,
        }

    def __setstate__(self, state: PQTreeState):
        self.ground_set = state["ground_set"]
        self.tree = state["tree"]
        self.leaves = state["leaves"]
        self.config = state["config"]
        self.statistics = state["statistics"]
        # Callbacks are not persisted.
        self.tracer = None

    def __copy__(self) -> PQTree:
        (tree, leaves) = self._snapshot()
        result = PQTree.__new__(PQTree)
        result.__setstate__(
            {
                "ground_set": self.ground_set,
                "tree": tree,
                "leaves": leaves,
                "config": self.config.copy(),
                "statistics": self.statistics.copy(),
            }
        )
        result.tracer = self.tracer
        return result

    def __deepcopy__(self, memo: dict[int, object]) -> PQTree:
        # `__copy__` already clones the whole tree.
        return self.__copy__()

    def __len__(self) -> int:
        """
        Returns the number of nodes in this `PQTree`.
        """
        return len(self.tree)

    def __repr__(self) -> str:
        return f"PQTree({self.to_bracket_string()})"

    @staticmethod
    def default_config() -> PQTreeConfiguration:
        return {
            "debug": False,
            "verify": False,
        }

    @staticmethod
    def from_bracket_string(
        text: str,
        element: Callable[[str], Element] = str,
        config: PQTreeConfiguration | None = None,
        tracer: Callable[[TemplateApplication], None] | None = None,
    ) -> PQTree:
        """
        Build a PQ-tree from its bracket string (see :meth:`to_bracket_string`).

        The ground set consists of the leaves in the order in which they
        appear in the text.

        Parameters
        ----------
        text : str
            The bracket string, e.g. `"('1',['2','3','4']);"`.
        element : Callable[[str], Element]
            Converts leaf names into elements. Defaults to `str`.
        config : PQTreeConfiguration | None
            An optional configuration object.
        tracer : Callable[[TemplateApplication], None] | None
            An optional template callback.

        Returns
        -------
        PQTree
            The parsed tree.

        Raises
        ------
        ValueError
            If the text is not a valid bracket string.

        Example
        -------
        >>> from pqtree import PQTree
        >>> pq = PQTree.from_bracket_string("('1',['2','3','4']);", element=int)
        >>> pq.ground_set
        (1, 2, 3, 4)
        >>> pq.accept({1, 2})
        True
        >>> pq.to_bracket_string()
        "['4','3','2','1'];"
        """
        (tree, leaves) = parse_bracket(text, element)
        result = PQTree.__new__(PQTree)
        result.__setstate__(
            {
                "ground_set": tuple(leaves),
                "tree": tree,
                "leaves": leaves,
                "config": PQTree.default_config() if config is None else config,
                "statistics": {},
            }
        )
        result.tracer = tracer
        return result

    def leaf(self, element: Element) -> int:
        """
        Return the tree node of the leaf representing `element`.

        Raises
        ------
        KeyError
            If `element` is not part of the ground set.
        """
        if element not in self.leaves:
            raise KeyError(f"Element `{element}` is not part of the ground set.")
        return self.leaves[element]

    def accept(self, subset: Iterable[Element]) -> bool:
        """
        Attempt to add the constraint that `subset` must be consecutive.

        If the constraint is compatible with the constraints accepted so far,
        the tree is refined and `True` is returned. Otherwise, the tree is left
        unchanged and `False` is returned. Subsets with at most one element
        are always accepted without any change.

        Parameters
        ----------
        subset : Iterable[Element]
            Elements of the ground set that must appear consecutively.

        Returns
        -------
        bool
            `True` if the subset was accepted.

        Raises
        ------
        ValueError
            If `subset` contains elements that are not in the ground set.
        RuntimeError
            If an internal inconsistency is detected. The tree is restored
            to its previous state before the error is raised.
        """
        members = self._members(subset)
        if len(members) <= 1:
            return True

        if self.config["debug"]:
            print(f"Accepting {len(members)} elements: {sorted(members, key=str)}")

        snapshot = self._snapshot()
        try:
            (accepted, applied) = reduce_tree(
                self.tree, self.leaves, members, self.config, self.tracer
            )
            if accepted and not self._is_consistent():
                raise RuntimeError("The reduction produced a malformed PQ-tree.")
        except Exception:
            (self.tree, self.leaves) = snapshot
            raise

        for name in applied:
            self.statistics[name] = self.statistics.get(name, 0) + 1

        if not accepted:
            (self.tree, self.leaves) = snapshot
            if self.config["debug"]:
                print("Subset rejected. The tree was rolled back.")
        elif self.config["debug"]:
            print(f"Subset accepted. Tree: {self.to_bracket_string()}")

        if self.config["verify"]:
            self._verify(members, accepted)

        return accepted

    def accept_all(self, subsets: Iterable[Iterable[Element]]) -> list[frozenset[Element]]:
        """
        Call :meth:`accept` for every subset, in the given order.

        Returns
        -------
        list[frozenset[Element]]
            The rejected subsets, in the order in which they were rejected.
        """
        rejected: list[frozenset[Element]] = []
        for subset in subsets:
            members = frozenset(subset)
            if not self.accept(members):
                rejected.append(members)
        if self.config["debug"]:
            print(f"Rejected {len(rejected)} subset(s).")
        return rejected

    def extract_ordering(self) -> list[Element]:
        """
        Return one of the orderings represented by this tree (the leaves in
        left-to-right order). Every accepted subset is consecutive in it.
        """
        return [
            self.tree.element(node)
            for node in self.tree.postorder()
            if self.tree.kind(node) == "leaf"
        ]

    def check(self, subset: Iterable[Element]) -> bool:
        """
        Checks if `subset` is consecutive in the ordering returned by
        :meth:`extract_ordering`.

        This is independent of the reduction algorithm and can be used to
        validate its results.

        Raises
        ------
        ValueError
            If `subset` contains elements that are not in the ground set.
        """
        return is_consecutive(self.extract_ordering(), self._members(subset))

    def check_all(
        self, subsets: Iterable[Iterable[Element]]
    ) -> dict[frozenset[Element], bool]:
        """
        Like :meth:`check`, but for several subsets at once.

        Returns
        -------
        dict[frozenset[Element], bool]
            For every subset, whether it is consecutive in the extracted ordering.
        """
        ordering = self.extract_ordering()
        result: dict[frozenset[Element], bool] = {}
        for subset in subsets:
            members = frozenset(self._members(subset))
            result[members] = is_consecutive(ordering, members)
        return result

    def to_bracket_string(self, node: int | None = None) -> str:
        """
        Write the tree (or the sub-tree of `node`) as a bracket string.

        P-nodes are written as `(...)`, Q-nodes as `[...]`, and leaves as
        their quoted element, e.g. `('1',['2','3','4']);`.
        """
        return write_bracket(self.tree, node)

    def reductions_used(self) -> dict[str, int]:
        """
        How many times each template was applied over the lifetime of this
        tree, including templates applied during rejected calls.

        Templates that were never applied are omitted. Keys follow the
        catalogue order.
        """
        return {
            name: self.statistics[name]
            for name in TEMPLATE_NAMES
            if name in self.statistics
        }

    def summary(self) -> str:
        """
        Return a summary of the PQ-tree as a string.
        """
        kinds = [self.tree.kind(node) for node in self.tree.postorder()]
        used = self.reductions_used()
        report = (
            f"PQ-tree with {len(self.ground_set)} elements and {len(kinds)} nodes "
            f"({kinds.count('P')} P-nodes, {kinds.count('Q')} Q-nodes).\n"
            f"Tree: {self.to_bracket_string()}\n"
            f"Ordering: {', '.join(str(x) for x in self.extract_ordering())}"
        )
        if len(used) > 0:
            report += "\nReductions used: " + ", ".join(
                f"{name} ({count})" for name, count in used.items()
            )
        return report

    def _members(self, subset: Iterable[Element]) -> set[Element]:
        members = set(subset)
        unknown = members.difference(self.leaves)
        if len(unknown) > 0:
            raise ValueError(
                f"Elements {sorted(unknown, key=str)} are not part of the ground set."
            )
        return members

    def _snapshot(self) -> tuple[OrderedTree, dict[Element, int]]:
        (tree, old_to_new) = self.tree.clone()
        leaves = {element: old_to_new[leaf] for element, leaf in self.leaves.items()}
        return (tree, leaves)

    def _is_consistent(self) -> bool:
        if not self.tree.is_valid():
            return False
        for element, leaf in self.leaves.items():
            if leaf not in self.tree or self.tree.kind(leaf) != "leaf":
                return False
            if self.tree.element(leaf) != element:
                return False
        return True

    def _verify(self, members: set[Element], accepted: bool):
        ordering = self.extract_ordering()
        if len(ordering) != len(self.ground_set) or set(ordering) != set(self.ground_set):
            raise RuntimeError(f"Ordering {ordering} is not a permutation of the ground set.")
        consecutive = is_consecutive(ordering, members)
        if consecutive != accepted:
            verdict = "accepted" if accepted else "rejected"
            raise RuntimeError(
                f"Subset {sorted(members, key=str)} was {verdict}, but consecutive={consecutive} in {ordering}."
            )
