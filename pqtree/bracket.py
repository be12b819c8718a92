"""
Conversion between PQ-trees and their bracket string representation.

In a bracket string, a P-node is written as a parenthesized list of its
children, a Q-node as a bracketed list, and a leaf as its element in single
quotes. Children are separated by commas (no spaces) and the whole string is
terminated by a semicolon, e.g. `('1',['2','3','4']);`.

Element names must not contain single quotes, since they would not survive
parsing.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Callable

    from pqtree.types import Element

from pqtree.ordered_tree import OrderedTree

BRACKETS = {"P": ("(", ")"), "Q": ("[", "]")}
"""Opening and closing characters of P-nodes and Q-nodes."""

_TOKEN = re.compile(r"\s*(?:([(\[])|([)\]])|(,)|'([^']*)'|(;))")


def write_bracket(tree: OrderedTree, node: int | None = None) -> str:
    """
    Write the sub-tree of `node` (or the whole tree) as a bracket string.

    Parameters
    ----------
    tree : OrderedTree
        The PQ-tree structure.
    node : int | None
        The root of the written sub-tree. Defaults to the tree root.

    Returns
    -------
    str
        The bracket string, including the final `;`.

    Example
    -------
    >>> from pqtree.bracket import parse_bracket, write_bracket
    >>> tree, _ = parse_bracket("( 'a', ['b','c','d'] );")
    >>> write_bracket(tree)
    "('a',['b','c','d']);"
    """
    if node is None:
        node = tree.root
    if node is None:
        return ";"

    parts: list[str] = []
    stack: list[int | str] = [node]
    while len(stack) > 0:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
            continue
        kind = tree.kind(item)
        if kind == "leaf":
            parts.append(f"'{tree.element(item)}'")
            continue
        opening, closing = BRACKETS[kind]
        parts.append(opening)
        items: list[int | str] = []
        for i, child in enumerate(tree.children(item)):
            if i > 0:
                items.append(",")
            items.append(child)
        items.append(closing)
        stack.extend(reversed(items))

    parts.append(";")
    return "".join(parts)


def parse_bracket(
    text: str, element: Callable[[str], Element] = str
) -> tuple[OrderedTree, dict[Element, int]]:
    """
    Build an ordered tree from a bracket string.

    The final `;` is optional and whitespace between tokens is ignored.

    Parameters
    ----------
    text : str
        The bracket string.
    element : Callable[[str], Element]
        Converts the quoted leaf names into elements (e.g. `int`).
        Defaults to `str`.

    Returns
    -------
    tuple[OrderedTree, dict[Element, int]]
        The tree, and a dictionary mapping every element to its leaf.

    Raises
    ------
    ValueError
        If the text is not a well-formed bracket string, contains an empty
        P-node or Q-node, or mentions the same element twice.
    """
    tree = OrderedTree()
    leaves: dict[Element, int] = {}
    # Open internal nodes together with their expected closing character.
    stack: list[tuple[int, str]] = []
    expect_item = True
    finished = False

    text = text.strip()
    position = 0
    while position < len(text):
        match = _TOKEN.match(text, position)
        if match is None or finished:
            raise ValueError(f"Unexpected input at position {position}: `{text[position:]}`.")
        opening, closing, comma, leaf, _ = match.groups()
        token_start = position
        position = match.end()

        if opening is not None or leaf is not None:
            if not expect_item:
                raise ValueError(f"Missing `,` before position {token_start}.")
            if opening is not None:
                node = tree.new_node("P" if opening == "(" else "Q")
            else:
                value = element(leaf)
                if value in leaves:
                    raise ValueError(f"Element `{value}` appears more than once.")
                node = tree.new_node("leaf", value)
                leaves[value] = node

            if len(stack) > 0:
                tree.new_edge(stack[-1][0], node)
            else:
                tree.root = node

            if opening is not None:
                stack.append((node, BRACKETS["P" if opening == "(" else "Q"][1]))
                expect_item = True
            else:
                expect_item = False
        elif closing is not None:
            if len(stack) == 0 or stack[-1][1] != closing:
                raise ValueError(f"Unbalanced `{closing}` at position {token_start}.")
            if expect_item:
                raise ValueError(f"Empty node or trailing `,` at position {token_start}.")
            stack.pop()
        elif comma is not None:
            if len(stack) == 0 or expect_item:
                raise ValueError(f"Unexpected `,` at position {token_start}.")
            expect_item = True
        else:
            if len(stack) > 0 or tree.root is None:
                raise ValueError(f"Unexpected `;` at position {token_start}.")
            finished = True

    if len(stack) > 0 or tree.root is None:
        raise ValueError("Incomplete bracket string.")

    return (tree, leaves)
