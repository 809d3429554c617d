"""Error types raised while generating functions."""


class QfuncsError(Exception):
    """Base class for errors that abort processing of a function."""


class ConfigError(QfuncsError):
    """A configuration file is malformed or contains unknown keys."""


class IncludeError(QfuncsError):
    """An include group could not be read."""


class ParseError(QfuncsError):
    """JavaScript source text could not be parsed."""


class NoMatchingCall(QfuncsError):
    """A test call does not call the function under test."""


class NoDeclaration(QfuncsError):
    """Function source contains no declarations at all."""


class NoMatchingDeclaration(QfuncsError):
    """Function source does not declare a function with the expected name."""


class ScriptError(QfuncsError):
    """Executing includes, source or a test call raised in the sandbox.

    `step` names where it happened: includes, source, call or context.
    """

    def __init__(self, message: str, step: str = "call"):
        super().__init__(message)
        self.step = step


class TestExpectationFailure(QfuncsError):
    """A test call did not produce the outcome its test case declares."""

    __test__ = False


class InvalidTestCase(QfuncsError):
    """A test case sets none of 'expect', 'error' or 'null'."""


class UninferredParameterType(QfuncsError):
    """Parameter types could not be inferred and were not declared."""


class UninferredReturnType(QfuncsError):
    """The return type could not be inferred and was not declared."""
