import pytest

from pqtree.bracket import parse_bracket, write_bracket
from pqtree.ordered_tree import OrderedTree


def test_round_trip():
    for text in [
        "('1',['2','3','4']);",
        "['a','b'];",
        "(['x',('y','z')],'w',['u','v','t']);",
        "'single';",
    ]:
        tree, _ = parse_bracket(text)
        assert tree.is_valid()
        assert write_bracket(tree) == text


def test_parse_structure():
    tree, leaves = parse_bracket("('1',['2','3','4']);", int)

    assert leaves == {1: 1, 2: 3, 3: 4, 4: 5}
    assert tree.root == 0
    assert tree.kind(0) == "P"
    assert tree.kind(2) == "Q"
    assert tree.children(0) == [1, 2]
    assert tree.children(2) == [3, 4, 5]
    assert tree.element(5) == 4


def test_parse_lenient_input():
    # Whitespace between tokens and the final `;` are optional.
    tree, _ = parse_bracket("  ( 'a' , [ 'b' ,'c' ] )  ")
    assert write_bracket(tree) == "('a',['b','c']);"

    # Spaces inside quotes are part of the element.
    tree, leaves = parse_bracket("('a b','c');")
    assert "a b" in leaves
    assert write_bracket(tree) == "('a b','c');"


def test_write_subtree():
    tree, _ = parse_bracket("('1',['2','3','4']);")
    assert write_bracket(tree, 2) == "['2','3','4'];"
    assert write_bracket(tree, 1) == "'1';"
    assert write_bracket(OrderedTree()) == ";"


def test_parse_errors():
    for text in [
        "",
        ";",
        "(",
        "('a','b'",
        "('a','b'));",
        "('a',,'b');",
        "('a','b',);",
        "(,'a');",
        "();",
        "[];",
        "('a'];",
        "('a' 'b');",
        "'a''b';",
        "['a'],'b';",
        "('a');'b'",
        "('a');;",
        "('a','b') x",
        "('a',b);",
    ]:
        with pytest.raises(ValueError):
            parse_bracket(text)


def test_parse_duplicates():
    with pytest.raises(ValueError):
        parse_bracket("('a',['b','a']);")

    # Duplicates are detected after conversion.
    with pytest.raises(ValueError):
        parse_bracket("('1','01');", int)

    # Conversion errors propagate.
    with pytest.raises(ValueError):
        parse_bracket("('1','x');", int)
