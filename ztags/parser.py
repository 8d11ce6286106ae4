"""
Zig syntax trees via tree-sitter.

`parse()` hands the source bytes to the tree-sitter Zig grammar and wraps the
result together with the source, so the tree walker can slice node text by
byte offset. A tree containing ERROR or MISSING nodes is rejected with a
`ParseError` pointing at the first of them.
"""

from __future__ import annotations

from typing import Iterator, Optional, Union

import tree_sitter as ts
import tree_sitter_zig as tszig

from .errors import ParseError

# ---------------------------------------------------------------------- #
ZIG_LANGUAGE = ts.Language(tszig.language())
_parser: Optional[ts.Parser] = None


def _get_parser() -> ts.Parser:
    global _parser
    if _parser is None:
        _parser = ts.Parser(ZIG_LANGUAGE)
    return _parser


class Ast:
    """A parsed Zig file: the tree-sitter tree plus the bytes it was parsed from."""

    def __init__(self, source: bytes, tree: ts.Tree):
        self.source = source
        self.tree = tree

    @property
    def root_node(self) -> ts.Node:
        return self.tree.root_node

    def text(self, node: ts.Node) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def iter_nodes(node: ts.Node) -> Iterator[ts.Node]:
    """Every node under `node` (itself included), in source order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def first_error(node: ts.Node) -> Optional[ts.Node]:
    if not node.has_error:
        return None
    for child in iter_nodes(node):
        if child.is_error or child.is_missing:
            return child
    return node


def parse(source: Union[bytes, str]) -> Ast:
    """Parse Zig `source`, raising `ParseError` on malformed input."""
    if isinstance(source, str):
        source = source.encode("utf-8")

    tree = _get_parser().parse(source)
    error = first_error(tree.root_node)
    if error is not None:
        row, column = error.start_point
        if error.is_missing:
            message = f"expected '{error.type}'"
        else:
            near = source[error.start_byte:error.end_byte].split(b"\n", 1)[0]
            message = f"syntax error near '{near.decode('utf-8', errors='replace')}'"
        raise ParseError(message, row + 1, column + 1)

    return Ast(source, tree)
