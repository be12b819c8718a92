from pqtree.consecutive import (
    consecutive_ones_ordering,
    consecutive_ordering,
    is_consecutive,
)
from pqtree.pq_tree import PQTree

__all__ = [
    "PQTree",
    "consecutive_ordering",
    "consecutive_ones_ordering",
    "is_consecutive",
]
