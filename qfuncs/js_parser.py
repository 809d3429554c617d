"""Parse JavaScript source text with Tree-sitter."""

import logging
from functools import lru_cache

from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_language

from qfuncs.errors import ParseError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_parser() -> Parser:
    """Get the shared JavaScript parser."""
    parser = Parser(get_language("javascript"))
    logger.debug("Loaded javascript parser")
    return parser


def parse_program(src: str, filename: str = "<source>") -> Node:
    """Parse a program fragment and return its root node.

    Tree-sitter recovers from syntax errors, so a tree containing error
    or missing nodes is rejected here.

    Raises:
        ParseError: If the source is not valid JavaScript
    """
    tree = get_parser().parse(src.encode("utf-8"))
    root = tree.root_node
    if root.has_error:
        location = _first_error_location(root)
        raise ParseError(f"syntax error in {filename} at {location}")
    return root


def node_text(node: Node) -> str:
    return node.text.decode("utf-8") if node.text is not None else ""


def top_level_statements(root: Node) -> list[Node]:
    """Named top-level children of a program, comments excluded."""
    return [c for c in root.named_children if c.type != "comment"]


def _first_error_location(node: Node) -> str:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            row, column = current.start_point
            return f"line {row + 1}, column {column + 1}"
        stack.extend(reversed(current.children))
    row, column = node.start_point
    return f"line {row + 1}, column {column + 1}"
