"""Recover declared parameter names from function source text."""

import logging

from tree_sitter import Node

from qfuncs.errors import NoDeclaration, NoMatchingDeclaration, ParseError
from qfuncs.js_parser import node_text, parse_program, top_level_statements
from qfuncs.models import Parameter, TypeTag

logger = logging.getLogger(__name__)

DECLARATION_TYPES = {
    "function_declaration",
    "generator_function_declaration",
    "class_declaration",
    "variable_declaration",
    "lexical_declaration",
}


def parse_function(name: str, src: str) -> list[Parameter]:
    """Find the declaration of `name` and return its parameters.

    The source may declare helper functions, only the first function
    declaration named `name` is used. Parameter types are left UNKNOWN.

    Raises:
        ParseError: If the source does not parse
        NoDeclaration: If the source declares nothing
        NoMatchingDeclaration: If no function declaration is named `name`
    """
    try:
        root = parse_program(src, filename=f"{name}.js")
    except ParseError as e:
        raise ParseError(f"cannot parse source for function '{name}': {e}") from e

    declarations = [
        s for s in top_level_statements(root) if s.type in DECLARATION_TYPES
    ]
    if not declarations:
        raise NoDeclaration("no function declaration found")

    for decl in declarations:
        if decl.type != "function_declaration":
            continue
        decl_name = decl.child_by_field_name("name")
        if decl_name is not None and node_text(decl_name) == name:
            params = _parameters(decl)
            logger.debug(f"Parsed function {name}({', '.join(p.name for p in params)})")
            return params

    raise NoMatchingDeclaration(f"no function declaration named '{name}' found")


def _parameters(decl: Node) -> list[Parameter]:
    formal = decl.child_by_field_name("parameters")
    if formal is None:
        return []
    params = []
    for node in formal.named_children:
        if node.type == "comment":
            continue
        params.append(Parameter(name=_parameter_name(node), type=TypeTag.UNKNOWN))
    return params


def _parameter_name(node: Node) -> str:
    if node.type == "assignment_pattern":
        left = node.child_by_field_name("left")
        if left is not None:
            return _parameter_name(left)
    if node.type == "rest_pattern":
        for child in node.named_children:
            return _parameter_name(child)
    return node_text(node)
