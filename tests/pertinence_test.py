import pytest

from pqtree.bracket import parse_bracket
from pqtree.pertinence import ChildStates, classify_children, pertinent_root

# Node IDs follow the order of the bracket string:
# 0: root, 1: '1', 2: Q, 3: '2', 4: '3', 5: '4', 6: P, 7: '5', 8: '6'
TREE = "('1',['2','3','4'],('5','6'));"


def test_pertinent_root():
    tree, leaves = parse_bracket(TREE, int)

    root, below = pertinent_root(tree, leaves, {2, 3})
    assert root == 2
    # The count of the tree root is removed, it is above the pertinent root.
    assert below == {3: 1, 4: 1, 2: 2}

    root, below = pertinent_root(tree, leaves, {1, 5})
    assert root == 0
    assert below == {1: 1, 7: 1, 6: 1, 0: 2}

    root, below = pertinent_root(tree, leaves, {4, 6})
    assert root == 0
    assert below == {5: 1, 2: 1, 8: 1, 6: 1, 0: 2}

    root, below = pertinent_root(tree, leaves, {5, 6})
    assert root == 6
    assert below == {7: 1, 8: 1, 6: 2}

    # A single element is its own pertinent root.
    root, below = pertinent_root(tree, leaves, {3})
    assert root == 4
    assert below == {4: 1}


def test_pertinent_root_malformed():
    tree, leaves = parse_bracket(TREE, int)
    # Cut the ('5','6') sub-tree off the tree.
    tree.detach(6)
    with pytest.raises(RuntimeError):
        pertinent_root(tree, leaves, {1, 5})


def test_classify_children():
    tree, _ = parse_bracket(TREE, int)

    children = classify_children(tree, 2, {3: "full", 5: "partial"})
    assert children.children == [3, 4, 5]
    assert children.pattern == "FEP"
    assert children.full == [3]
    assert children.empty == [4]
    assert children.partial == [5]
    assert children.doubly_partial == []
    assert len(children) == 3
    assert children.non_empty() == 2
    assert repr(children) == "ChildStates(FEP)"

    children = classify_children(tree, 0, {})
    assert children.pattern == "EEE"
    assert children.non_empty() == 0

    children = ChildStates([1, 2, 6], {1: "doubly_partial", 6: "full"})
    assert children.pattern == "DEF"
    assert children.doubly_partial == [1]
