"""
Compare PQ-tree reductions with an exhaustive search over all permutations
of small ground sets.

The tests take a `ground_size` argument, which is supplied by `conftest.py`
for every size up to `--groundsize`.
"""

import itertools
import random

from pqtree import PQTree
from pqtree.consecutive import is_consecutive

Ordering = tuple[int, ...]


def tree_orderings(pq: PQTree) -> set[Ordering]:
    """
    All orderings of the ground set represented by `pq` (every permutation of
    P-node children and both directions of Q-node children).
    """
    tree = pq.tree

    def frontiers(node: int) -> list[Ordering]:
        kind = tree.kind(node)
        if kind == "leaf":
            return [(tree.element(node),)]
        parts = [frontiers(child) for child in tree.children(node)]
        if kind == "P":
            arrangements = list(itertools.permutations(parts))
        else:
            arrangements = [parts, parts[::-1]]
        result: list[Ordering] = []
        for arrangement in arrangements:
            for blocks in itertools.product(*arrangement):
                result.append(tuple(x for block in blocks for x in block))
        return result

    assert tree.root is not None
    return set(frontiers(tree.root))


def random_family(rng: random.Random, size: int) -> list[set[int]]:
    count = rng.randint(1, size + 2)
    family: list[set[int]] = []
    for _ in range(count):
        family.append(set(rng.sample(range(size), rng.randint(2, size))))
    return family


def test_initial_tree(ground_size: int):
    pq = PQTree(range(ground_size))
    assert tree_orderings(pq) == set(itertools.permutations(range(ground_size)))


def test_random_families(ground_size: int):
    rng = random.Random(ground_size)
    for _ in range(30):
        pq = PQTree(range(ground_size))
        allowed = set(itertools.permutations(range(ground_size)))

        for subset in random_family(rng, ground_size):
            remaining = {p for p in allowed if is_consecutive(p, subset)}
            before = pq.to_bracket_string()

            accepted = pq.accept(subset)
            assert accepted == (len(remaining) > 0)
            if accepted:
                allowed = remaining
            else:
                assert pq.to_bracket_string() == before

            assert pq.tree.is_valid()
            assert tree_orderings(pq) == allowed
            assert tuple(pq.extract_ordering()) in allowed


def test_interval_families(ground_size: int):
    # Intervals of the identity ordering are always compatible.
    rng = random.Random(1000 + ground_size)
    for _ in range(10):
        pq = PQTree(range(ground_size))
        intervals: list[set[int]] = []
        for _ in range(ground_size):
            start = rng.randrange(ground_size - 1)
            end = rng.randrange(start + 2, ground_size + 1)
            intervals.append(set(range(start, end)))
        assert pq.accept_all(intervals) == []

        ordering = pq.extract_ordering()
        for interval in intervals:
            assert is_consecutive(ordering, interval)
        assert tuple(range(ground_size)) in tree_orderings(pq)
