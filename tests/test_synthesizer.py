"""Tests for signature synthesis."""

import logging

import pytest

from qfuncs.errors import UninferredParameterType, UninferredReturnType
from qfuncs.models import (
    ConsolidatedTypes,
    FunctionDefinition,
    FunctionOverrides,
    Parameter,
    TypeTag,
)
from qfuncs.synthesizer import synthesize

S = TypeTag.STRING
N = TypeTag.NUMBER
U = TypeTag.UNKNOWN


class TestSynthesize:
    def given_function(self, *names, **overrides):
        self.definition = FunctionDefinition(
            namespace="net",
            name="f",
            source="",
            overrides=FunctionOverrides(**overrides),
        )
        self.parameters = [Parameter(n) for n in names]

    def given_inferred(self, types, return_type=N, var_args=False):
        self.inferred = ConsolidatedTypes(
            parameter_types=list(types),
            var_args=var_args,
            vararg_element_type=types[0] if types else U,
            return_type=return_type,
        )

    def when_synthesized(self):
        self.signature = synthesize(self.definition, self.parameters, self.inferred)

    def test_uses_inferred_types(self):
        """Without overrides, inferred types are bound to parameter names."""
        self.given_function("a", "b")
        self.given_inferred([N, N])
        self.when_synthesized()
        assert self.signature.parameter_types == [N, N]
        assert [p.type for p in self.signature.parameters] == [N, N]
        assert self.signature.return_type == N
        assert self.signature.var_args is False

    def test_unknown_parameter_requires_declaration(self):
        """A position that could not be inferred fails loudly."""
        self.given_function("a", "b")
        self.given_inferred([S, U])
        with pytest.raises(UninferredParameterType) as exc_info:
            self.when_synthesized()
        assert "parameter_types" in str(exc_info.value)
        assert "net::f" in str(exc_info.value)

    def test_declared_parameter_types_win(self):
        """Declared types are used even where inference failed."""
        self.given_function("host", "port", parameter_types="Host Port")
        self.given_inferred([S, U])
        self.when_synthesized()
        assert self.signature.parameter_types == [TypeTag.HOST, TypeTag.PORT]
        assert self.signature.render() == "net::f(host Host, port Port)"

    def test_unknown_return_type_requires_declaration(self):
        self.given_function("a")
        self.given_inferred([S], return_type=U)
        with pytest.raises(UninferredReturnType):
            self.when_synthesized()

    def test_declared_return_type_wins(self):
        self.given_function("a", return_type="Long")
        self.given_inferred([S], return_type=N)
        self.when_synthesized()
        assert self.signature.return_type == TypeTag.LONG

    def test_vararg_keeps_first_type_only(self):
        """Vararg functions emit one representative element type."""
        self.given_function("a", "b")
        self.given_inferred([N, N], var_args=True)
        self.when_synthesized()
        assert self.signature.var_args is True
        assert self.signature.parameter_types == [N]
        assert self.signature.render() == "net::f(a Number, b [varargs])"

    def test_explicit_false_var_args_wins(self):
        """var_args = false still overrides an inferred vararg."""
        self.given_function("a", "b", var_args=False)
        self.given_inferred([N, N], var_args=True)
        self.when_synthesized()
        assert self.signature.var_args is False
        assert self.signature.parameter_types == [N, N]

    def test_explicit_true_var_args_wins(self):
        self.given_function("a", "b", var_args=True)
        self.given_inferred([S, S])
        self.when_synthesized()
        assert self.signature.var_args is True
        assert self.signature.parameter_types == [S]

    def test_empty_declared_parameter_types(self):
        """An explicitly empty declaration still suppresses inference."""
        self.given_function(parameter_types="")
        self.given_inferred([U])
        self.when_synthesized()
        assert self.signature.parameter_types == []

    def test_parameter_without_observations_requires_declaration(self):
        """f(a, b) tested only as f(1) leaves b without a type."""
        self.given_function("a", "b")
        self.given_inferred([N])
        with pytest.raises(UninferredParameterType):
            self.when_synthesized()

    def test_untested_function_requires_parameter_declaration(self):
        """A declared return type does not excuse untyped parameters."""
        self.given_function("a", return_type="Number")
        self.given_inferred([], return_type=U)
        with pytest.raises(UninferredParameterType):
            self.when_synthesized()

    def test_untested_vararg_requires_parameter_declaration(self):
        self.given_function("a", "b", var_args=True, return_type="Number")
        self.given_inferred([], return_type=U)
        with pytest.raises(UninferredParameterType):
            self.when_synthesized()

    def test_untested_function_without_parameters(self):
        self.given_function(return_type="Boolean")
        self.given_inferred([], return_type=U)
        self.when_synthesized()
        assert self.signature.parameter_types == []
        assert self.signature.render() == "net::f()"

    def test_mixed_vararg_elements_keep_first_type(self, caplog):
        """Mixed trailing arguments are logged but do not change the type."""
        self.given_function("a", "b")
        self.given_inferred([N, N], var_args=True)
        self.inferred.vararg_element_type = U
        with caplog.at_level(logging.INFO, logger="qfuncs.synthesizer"):
            self.when_synthesized()
        assert self.signature.parameter_types == [N]
        assert any("not all Number" in r.getMessage() for r in caplog.records)
