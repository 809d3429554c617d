"""Data models for function definitions and inferred signatures."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from qfuncs.errors import QfuncsError


class TypeTag(Enum):
    """Type of a function parameter or return value.

    UNKNOWN means nothing was observed yet, UNDECIDABLE means observations
    conflicted. Neither may appear in a finalized signature.
    """

    UNKNOWN = "Unknown"
    UNDECIDABLE = "Undecidable"
    STRING = "String"
    NUMBER = "Number"
    LONG = "Long"
    HOST = "Host"
    PORT = "Port"
    BOOLEAN = "Boolean"

    def __str__(self) -> str:
        return self.value

    @property
    def is_domain(self) -> bool:
        return self not in (TypeTag.UNKNOWN, TypeTag.UNDECIDABLE)

    @classmethod
    def parse(cls, name: str) -> "TypeTag":
        """Parse a domain type name such as 'Number'.

        Raises:
            ValueError: If the name is not a domain type
        """
        for tag in cls:
            if tag.is_domain and tag.value == name:
                return tag
        raise ValueError(f"unknown type name '{name}'")


DOMAIN_TYPE_NAMES = [t.value for t in TypeTag if t.is_domain]


def parse_type_list(text: str) -> list[TypeTag]:
    """Parse a space-separated list of type names."""
    return [TypeTag.parse(name) for name in text.split()]


def format_type_list(tags: list[TypeTag]) -> str:
    return " ".join(str(t) for t in tags)


@dataclass
class TestCase:
    """A single example call with its expected outcome.

    `expect` is None when the author gave no expected value.
    """

    __test__ = False

    call: str
    expect: Any = None
    error: bool = False
    null: bool = False

    @property
    def has_expectation(self) -> bool:
        return self.expect is not None or self.error or self.null


@dataclass
class FunctionOverrides:
    """Author-declared signature fields. None means the field was not written."""

    parameter_types: str | None = None
    return_type: str | None = None
    var_args: bool | None = None


@dataclass
class FunctionDefinition:
    """A function as authored in a configuration file."""

    namespace: str
    name: str
    source: str
    description: str = ""
    includes: list[str] = field(default_factory=list)
    tests: list[TestCase] = field(default_factory=list)
    overrides: FunctionOverrides = field(default_factory=FunctionOverrides)

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}::{self.name}"


@dataclass
class ConfigFile:
    """Content of a single configuration file."""

    path: Path
    namespace: str
    author: str = ""
    author_email: str = ""
    functions: dict[str, FunctionDefinition] = field(default_factory=dict)


@dataclass
class Parameter:
    """A declared parameter and the type bound to it, if any."""

    name: str
    type: TypeTag | None = TypeTag.UNKNOWN


@dataclass
class ConsolidatedTypes:
    """Types merged across all test cases of one function.

    `vararg_element_type` merges every argument of every call. Vararg
    signatures keep the first position's type; the element type is only
    compared against it to log mixed vararg arguments.
    """

    parameter_types: list[TypeTag]
    var_args: bool
    vararg_element_type: TypeTag
    return_type: TypeTag


@dataclass
class ConsolidatedSignature:
    """A finalized, fully-typed function signature."""

    qualified_name: str
    parameters: list[Parameter]
    parameter_types: list[TypeTag]
    return_type: TypeTag
    var_args: bool

    @property
    def parameter_types_text(self) -> str:
        return format_type_list(self.parameter_types)

    def render(self) -> str:
        """Render as e.g. 'net::add(a Number, b Number)'."""
        params = []
        for p in self.parameters:
            params.append(p.name if p.type is None else f"{p.name} {p.type}")
        text = f"{self.qualified_name}(" + ", ".join(params)
        if self.var_args:
            text += " [varargs]"
        return text + ")"

    def describe(self) -> str:
        return f"Generated function {self.render()} => {self.return_type}"


@dataclass
class GeneratedFunction:
    """A function ready to be written to the bundle."""

    definition: FunctionDefinition
    signature: ConsolidatedSignature
    script: str


@dataclass
class FunctionFailure:
    """A fatal error that stopped processing of one function."""

    qualified_name: str
    error: QfuncsError
    test_index: int | None = None

    @property
    def message(self) -> str:
        if self.test_index is not None:
            return (
                f"test {self.test_index} for function "
                f"'{self.qualified_name}': {self.error}"
            )
        return f"function '{self.qualified_name}': {self.error}"


@dataclass
class GenerationReport:
    """Outcome of a generation run, in deterministic function order."""

    functions: list[GeneratedFunction] = field(default_factory=list)
    failures: list[FunctionFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures
