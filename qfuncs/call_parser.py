"""Extract argument types from a test call's source text."""

import logging

from tree_sitter import Node

from qfuncs.errors import NoMatchingCall
from qfuncs.js_parser import node_text, parse_program, top_level_statements
from qfuncs.models import TypeTag

logger = logging.getLogger(__name__)

# Argument node types by the type they are taken to represent.
# Identifiers count as strings: test calls pass bare words like hostnames.
ARGUMENT_TYPES = {
    "string": TypeTag.STRING,
    "template_string": TypeTag.STRING,
    "identifier": TypeTag.STRING,
    "undefined": TypeTag.STRING,
    "regex": TypeTag.STRING,
    "number": TypeTag.NUMBER,
    "true": TypeTag.BOOLEAN,
    "false": TypeTag.BOOLEAN,
}


def parse_call(name: str, src: str) -> list[TypeTag]:
    """Parse a test call and classify its arguments by their literal shape.

    Nothing is evaluated. The first top-level expression statement calling
    `name` is used.

    Args:
        name: Name of the function under test
        src: Source text of the test call

    Returns:
        One type tag per argument, in order

    Raises:
        ParseError: If the call does not parse
        NoMatchingCall: If no statement calls `name`
    """
    root = parse_program(src, filename=f"{name}.js")

    for stmt in top_level_statements(root):
        call = _matching_call(stmt, name)
        if call is None:
            continue
        args = call.child_by_field_name("arguments")
        types = [_classify_argument(a) for a in _argument_nodes(args)]
        logger.debug(f"Parsed call to {name}: {[str(t) for t in types]}")
        return types

    raise NoMatchingCall("no matching function call found")


def _matching_call(stmt: Node, name: str) -> Node | None:
    if stmt.type != "expression_statement" or not stmt.named_children:
        return None
    expr = stmt.named_children[0]
    if expr.type != "call_expression":
        return None
    callee = expr.child_by_field_name("function")
    if callee is None or callee.type != "identifier" or node_text(callee) != name:
        return None
    return expr


def _argument_nodes(args: Node | None) -> list[Node]:
    if args is None:
        return []
    return [a for a in args.named_children if a.type != "comment"]


def _classify_argument(node: Node) -> TypeTag:
    return ARGUMENT_TYPES.get(node.type, TypeTag.UNKNOWN)
