"""Build the final signature from inferred types and author overrides."""

import logging

from qfuncs.errors import UninferredParameterType, UninferredReturnType
from qfuncs.models import (
    DOMAIN_TYPE_NAMES,
    ConsolidatedSignature,
    ConsolidatedTypes,
    FunctionDefinition,
    Parameter,
    TypeTag,
    parse_type_list,
)

logger = logging.getLogger(__name__)

_TYPE_CHOICES = "|".join(DOMAIN_TYPE_NAMES)


def synthesize(
    definition: FunctionDefinition,
    parameters: list[Parameter],
    inferred: ConsolidatedTypes,
) -> ConsolidatedSignature:
    """Finalize a function's signature.

    A field the author wrote always wins over inference, even when it holds
    the default value. Inferred fields must be fully known.

    Args:
        definition: The function definition with its overrides
        parameters: Declared parameters, in order
        inferred: Consolidated types from the test cases

    Returns:
        The finalized signature

    Raises:
        UninferredParameterType: If a parameter type is unknown or untested
            and not declared
        UninferredReturnType: If the return type is unknown and not declared
    """
    overrides = definition.overrides
    qualified_name = definition.qualified_name

    var_args = inferred.var_args
    if overrides.var_args is not None:
        var_args = overrides.var_args

    if overrides.parameter_types is not None:
        parameter_types = parse_type_list(overrides.parameter_types)
    else:
        required = min(len(parameters), 1) if var_args else len(parameters)
        if len(inferred.parameter_types) < required or any(
            not t.is_domain for t in inferred.parameter_types
        ):
            raise UninferredParameterType(
                f"Parameter Types for function '{qualified_name}' could not be "
                f"inferred, please specify them with "
                f"'parameter_types = \"[{_TYPE_CHOICES}] [...]\"' "
                f"or set 'var_args = true'"
            )
        parameter_types = list(inferred.parameter_types)
        if var_args:
            parameter_types = parameter_types[:1]
            if parameter_types and inferred.vararg_element_type != parameter_types[0]:
                logger.info(
                    f"Vararg arguments of function '{qualified_name}' are not all "
                    f"{parameter_types[0]}, keeping the first argument's type"
                )

    if overrides.return_type is not None:
        return_type = TypeTag.parse(overrides.return_type)
    elif inferred.return_type.is_domain:
        return_type = inferred.return_type
    else:
        raise UninferredReturnType(
            f"Return type for function '{qualified_name}' could not be inferred, "
            f"please specify it with 'return_type = \"[{_TYPE_CHOICES}]\"' "
            f"or add test functions"
        )

    bound = [
        Parameter(
            name=p.name,
            type=parameter_types[i] if i < len(parameter_types) else None,
        )
        for i, p in enumerate(parameters)
    ]

    signature = ConsolidatedSignature(
        qualified_name=qualified_name,
        parameters=bound,
        parameter_types=parameter_types,
        return_type=return_type,
        var_args=var_args,
    )
    logger.info(f"Synthesized {signature.render()} => {return_type}")
    return signature
