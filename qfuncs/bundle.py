"""Write generated functions to an XML bundle."""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from qfuncs.models import GeneratedFunction

logger = logging.getLogger(__name__)

SCRIPT_ENGINE = "javascript"
USERNAME = "admin"


def build_bundle(functions: list[GeneratedFunction]) -> ET.Element:
    """Build the bundle element tree, one custom_function per function."""
    content = ET.Element("content")
    for fn in functions:
        definition = fn.definition
        signature = fn.signature
        element = ET.SubElement(content, "custom_function")
        fields = [
            ("namespace", definition.namespace),
            ("name", definition.name),
            ("return_type", str(signature.return_type)),
            ("parameter_types", signature.parameter_types_text),
            ("execute_function_name", definition.name),
            ("script_engine", SCRIPT_ENGINE),
            ("varargs", "true" if signature.var_args else "false"),
            ("script", fn.script),
            ("username", USERNAME),
        ]
        for tag, text in fields:
            ET.SubElement(element, tag).text = text
    return content


def bundle_to_string(functions: list[GeneratedFunction]) -> str:
    content = build_bundle(functions)
    ET.indent(content, space="  ")
    return ET.tostring(content, encoding="unicode")


def write_bundle(functions: list[GeneratedFunction], path: Path) -> None:
    """Write the bundle for the given functions to path."""
    path.write_text(bundle_to_string(functions), encoding="utf-8")
    logger.info(f"Wrote {len(functions)} functions to {path}")
