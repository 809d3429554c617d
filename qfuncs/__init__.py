"""Infer and verify signatures of JavaScript custom functions."""

from qfuncs.errors import (
    ConfigError,
    IncludeError,
    InvalidTestCase,
    NoDeclaration,
    NoMatchingCall,
    NoMatchingDeclaration,
    ParseError,
    QfuncsError,
    ScriptError,
    TestExpectationFailure,
    UninferredParameterType,
    UninferredReturnType,
)
from qfuncs.models import (
    ConsolidatedSignature,
    FunctionDefinition,
    FunctionOverrides,
    TestCase,
    TypeTag,
)

__all__ = [
    # Models
    "TypeTag",
    "TestCase",
    "FunctionDefinition",
    "FunctionOverrides",
    "ConsolidatedSignature",
    # Errors
    "QfuncsError",
    "ConfigError",
    "IncludeError",
    "ParseError",
    "NoMatchingCall",
    "NoDeclaration",
    "NoMatchingDeclaration",
    "ScriptError",
    "TestExpectationFailure",
    "InvalidTestCase",
    "UninferredParameterType",
    "UninferredReturnType",
]
