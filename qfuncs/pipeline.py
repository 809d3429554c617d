"""Generation pipeline that orchestrates parsing, execution and inference."""

import asyncio
import logging
from pathlib import Path

from qfuncs.call_parser import parse_call
from qfuncs.consolidator import consolidate
from qfuncs.errors import InvalidTestCase, QfuncsError
from qfuncs.function_parser import parse_function
from qfuncs.includes import DEFAULT_INCLUDES_DIR, compile_includes
from qfuncs.models import (
    ConfigFile,
    FunctionDefinition,
    FunctionFailure,
    GeneratedFunction,
    GenerationReport,
    TypeTag,
)
from qfuncs.sandbox import Sandbox
from qfuncs.synthesizer import synthesize

logger = logging.getLogger(__name__)

DEFAULT_JOBS = 4


class _TestError(Exception):
    """Carries the 1-based index of the test that failed."""

    def __init__(self, index: int, error: QfuncsError):
        super().__init__(str(error))
        self.index = index
        self.error = error


async def process_function(
    sandbox: Sandbox,
    definition: FunctionDefinition,
    includes_dir: Path = DEFAULT_INCLUDES_DIR,
) -> GeneratedFunction | FunctionFailure:
    """Infer, verify and finalize the signature of one function.

    Args:
        sandbox: Started sandbox to run test calls in
        definition: The function definition
        includes_dir: Directory holding include groups

    Returns:
        The generated function, or the failure that stopped processing
    """
    name = definition.qualified_name
    logger.info(f"Processing function {name}")
    try:
        return await _process(sandbox, definition, includes_dir)
    except _TestError as e:
        logger.debug(f"Test {e.index} for function {name} failed: {e.error}")
        return FunctionFailure(qualified_name=name, error=e.error, test_index=e.index)
    except QfuncsError as e:
        logger.debug(f"Function {name} failed: {e}")
        return FunctionFailure(qualified_name=name, error=e)


async def _process(
    sandbox: Sandbox, definition: FunctionDefinition, includes_dir: Path
) -> GeneratedFunction:
    parameters = parse_function(definition.name, definition.source)

    for i, test in enumerate(definition.tests, start=1):
        if not test.has_expectation:
            raise _TestError(
                i,
                InvalidTestCase(
                    "test call does not specify at least one of the fields "
                    "'expect', 'error' or 'null'"
                ),
            )

    includes = compile_includes(definition.includes, includes_dir)

    observations: list[list[TypeTag]] = []
    outcomes: list[TypeTag] = []
    for i, test in enumerate(definition.tests, start=1):
        try:
            observations.append(parse_call(definition.name, test.call))
            outcomes.append(await sandbox.execute(includes, definition.source, test))
        except QfuncsError as e:
            raise _TestError(i, e) from e

    inferred = consolidate(observations, outcomes)
    signature = synthesize(definition, parameters, inferred)
    return GeneratedFunction(
        definition=definition,
        signature=signature,
        script=includes + definition.source,
    )


async def generate_functions(
    sandbox: Sandbox,
    definitions: list[FunctionDefinition],
    includes_dir: Path = DEFAULT_INCLUDES_DIR,
    jobs: int = DEFAULT_JOBS,
) -> GenerationReport:
    """Process functions concurrently, reporting in the given order.

    A failing function does not stop the others.
    """
    semaphore = asyncio.Semaphore(max(1, jobs))

    async def run(definition: FunctionDefinition):
        async with semaphore:
            return await process_function(sandbox, definition, includes_dir)

    results = await asyncio.gather(*(run(d) for d in definitions))

    report = GenerationReport()
    for result in results:
        if isinstance(result, FunctionFailure):
            report.failures.append(result)
        else:
            report.functions.append(result)
    logger.info(
        f"Generation complete: {len(report.functions)} functions, "
        f"{len(report.failures)} failures"
    )
    return report


def ordered_definitions(configs: list[ConfigFile]) -> list[FunctionDefinition]:
    """Functions of all configs, in config order then by name."""
    definitions = []
    for config in configs:
        for name in sorted(config.functions):
            definitions.append(config.functions[name])
    return definitions


async def generate(
    configs: list[ConfigFile],
    includes_dir: Path = DEFAULT_INCLUDES_DIR,
    jobs: int = DEFAULT_JOBS,
) -> GenerationReport:
    """Generate all functions defined in the given configs."""
    definitions = ordered_definitions(configs)
    async with Sandbox() as sandbox:
        return await generate_functions(sandbox, definitions, includes_dir, jobs)
