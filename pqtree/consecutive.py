"""
Utilities for the consecutive arrangement problem.

Given a ground set and a family of its subsets, the task is to find an
ordering of the ground set in which every subset appears as one block of
consecutive elements. In matrix form, this is the *consecutive ones
property*: a permutation of the columns of a 0/1 matrix such that the ones
in every row are consecutive. Both variants are solved with a
:class:`PQTree<pqtree.PQTree>` (Booth and Lueker, 1976).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from typing import Iterable, Sequence

    from pqtree.types import Element, PQTreeConfiguration


def is_consecutive(ordering: Sequence[Element], subset: Iterable[Element]) -> bool:
    """
    Checks if the elements of `subset` occupy a consecutive range of
    positions in `ordering`.

    Empty subsets and singletons are always consecutive.

    Parameters
    ----------
    ordering : Sequence[Element]
        An ordering (without duplicates).
    subset : Iterable[Element]
        The elements to check. Every element must appear in `ordering`.

    Returns
    -------
    bool
        `True` if the elements of `subset` are consecutive in `ordering`.

    Raises
    ------
    ValueError
        If `subset` contains an element that is not in `ordering`.

    Example
    -------
    >>> from pqtree.consecutive import is_consecutive
    >>> is_consecutive([1, 2, 3, 4], {3, 2})
    True
    >>> is_consecutive([1, 2, 3, 4], {1, 3})
    False
    """
    members = set(subset)
    if len(members) <= 1:
        if len(members) == 1 and next(iter(members)) not in ordering:
            raise ValueError(f"Element `{next(iter(members))}` is not in the ordering.")
        return True

    positions = [i for i, x in enumerate(ordering) if x in members]
    if len(positions) != len(members):
        missing = members.difference(ordering)
        raise ValueError(f"Elements {sorted(map(str, missing))} are not in the ordering.")
    return positions[-1] - positions[0] + 1 == len(members)


def consecutive_ordering(
    ground_set: Iterable[Element],
    subsets: Iterable[Iterable[Element]],
    config: PQTreeConfiguration | None = None,
) -> list[Element] | None:
    """
    Find an ordering of `ground_set` in which every subset is consecutive.

    Parameters
    ----------
    ground_set : Iterable[Element]
        The elements to order.
    subsets : Iterable[Iterable[Element]]
        The subsets that must each form a consecutive block.
    config : PQTreeConfiguration | None
        Optional configuration of the underlying :class:`PQTree<pqtree.PQTree>`.

    Returns
    -------
    list[Element] | None
        A suitable ordering, or `None` if the subsets cannot all be made
        consecutive at the same time.

    Example
    -------
    >>> from pqtree.consecutive import consecutive_ordering
    >>> consecutive_ordering(range(1, 6), [{1, 2}, {4, 5}, {2, 3, 4}])
    [1, 2, 3, 4, 5]
    >>> consecutive_ordering(range(1, 5), [{1, 2}, {2, 3}, {1, 3}]) is None
    True
    """
    from pqtree.pq_tree import PQTree

    pq = PQTree(ground_set, config)
    for subset in subsets:
        if not pq.accept(subset):
            return None
    return pq.extract_ordering()


def consecutive_ones_ordering(
    matrix: Sequence[Sequence[Literal[0, 1]]],
    config: PQTreeConfiguration | None = None,
) -> list[int] | None:
    """
    Find a column permutation under which the ones of every row of a 0/1
    matrix are consecutive.

    Parameters
    ----------
    matrix : Sequence[Sequence[Literal[0, 1]]]
        The matrix, as a sequence of rows of equal length.
    config : PQTreeConfiguration | None
        Optional configuration of the underlying :class:`PQTree<pqtree.PQTree>`.

    Returns
    -------
    list[int] | None
        The column indices in their new order, or `None` if the matrix does
        not have the consecutive ones property.

    Raises
    ------
    ValueError
        If the rows are not all of the same length.

    Example
    -------
    >>> from pqtree.consecutive import consecutive_ones_ordering
    >>> consecutive_ones_ordering([
    ...     [1, 0, 1, 0],
    ...     [0, 1, 0, 1],
    ...     [1, 0, 0, 1],
    ... ])
    [2, 0, 3, 1]
    """
    if len(matrix) == 0:
        return []
    columns = len(matrix[0])
    for row in matrix:
        if len(row) != columns:
            raise ValueError(
                f"All rows must have {columns} columns, found a row with {len(row)}."
            )
    if columns == 0:
        return []

    rows = [{i for i, value in enumerate(row) if value == 1} for row in matrix]
    ordering = consecutive_ordering(range(columns), rows, config)
    if ordering is None:
        return None
    return [int(i) for i in ordering]
