"""Merge type observations from multiple test cases into one signature."""

import logging

from qfuncs.models import ConsolidatedTypes, TypeTag

logger = logging.getLogger(__name__)


def merge_type(state: TypeTag, observed: TypeTag) -> TypeTag:
    """Merge a new observation into the current state.

    UNKNOWN observations are ignored, UNDECIDABLE is absorbing, and two
    different concrete types make the state UNDECIDABLE.
    """
    if observed == TypeTag.UNKNOWN or state == TypeTag.UNDECIDABLE:
        return state
    if state == TypeTag.UNKNOWN:
        return observed
    if observed != state:
        return TypeTag.UNDECIDABLE
    return state


def _settle(tag: TypeTag) -> TypeTag:
    # Conflicts must be resolved by the author, same as missing observations
    return TypeTag.UNKNOWN if tag == TypeTag.UNDECIDABLE else tag


def consolidate_arguments(
    observations: list[list[TypeTag]],
) -> tuple[list[TypeTag], bool, TypeTag]:
    """Merge per-test argument types positionally.

    Args:
        observations: Argument types of each test call, in test order

    Returns:
        Tuple of (types per position, vararg flag, vararg element type)
    """
    if not observations:
        return [], False, TypeTag.UNKNOWN

    types = list(observations[0])
    var_args = False
    element_type = TypeTag.UNKNOWN
    for tag in types:
        element_type = merge_type(element_type, tag)

    for observed in observations[1:]:
        if len(observed) != len(types):
            var_args = True
        for i, tag in enumerate(observed):
            element_type = merge_type(element_type, tag)
            if i < len(types):
                types[i] = merge_type(types[i], tag)

    for i, tag in enumerate(types):
        if tag == TypeTag.UNDECIDABLE:
            logger.info(f"Conflicting argument types observed at position {i}")

    return [_settle(t) for t in types], var_args, _settle(element_type)


def consolidate_return_types(outcomes: list[TypeTag]) -> TypeTag:
    """Merge the return types observed by each test call."""
    state = TypeTag.UNKNOWN
    for tag in outcomes:
        state = merge_type(state, tag)
    if state == TypeTag.UNDECIDABLE:
        logger.info("Conflicting return types observed")
    return _settle(state)


def consolidate(
    observations: list[list[TypeTag]], outcomes: list[TypeTag]
) -> ConsolidatedTypes:
    """Consolidate argument and return observations of one function."""
    types, var_args, element_type = consolidate_arguments(observations)
    return ConsolidatedTypes(
        parameter_types=types,
        var_args=var_args,
        vararg_element_type=element_type,
        return_type=consolidate_return_types(outcomes),
    )
