"""Execute test calls in isolated browser contexts using Playwright."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, async_playwright

from qfuncs.classifier import classify_value, display_value
from qfuncs.errors import ScriptError, TestExpectationFailure
from qfuncs.models import TestCase, TypeTag

logger = logging.getLogger(__name__)

# Indirect eval runs the call as a global program and sees every global
# binding left by the loaded scripts, including let, const and class.
RUN_SCRIPT = "source => (0, eval)(source)"

# Runs the text as a classic script element so top-level let, const and
# class declarations stay in the global scope for the later steps. Errors
# raised while the script runs are rethrown to the caller.
LOAD_SCRIPT = """source => {
  let failure = null;
  const onError = event => {
    failure = event.error != null ? event.error : new Error(event.message);
    event.preventDefault();
  };
  window.addEventListener('error', onError);
  const script = document.createElement('script');
  script.textContent = source;
  try {
    document.documentElement.appendChild(script);
  } finally {
    window.removeEventListener('error', onError);
    script.remove();
  }
  if (failure !== null) {
    throw failure;
  }
}"""


class Sandbox:
    """Run JavaScript test calls in a headless browser.

    One browser is shared, but every test call gets its own browser
    context, so no globals survive from one call to the next.
    """

    def __init__(self):
        self._playwright = None
        self._browser = None

    async def __aenter__(self):
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch()
        except BaseException:
            await self._playwright.stop()
            self._playwright = None
            raise
        logger.info("Browser launched")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the browser and cleanup resources."""
        if self._browser:
            await self._browser.close()
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None
        logger.info("Browser closed")

    @asynccontextmanager
    async def isolated_page(self) -> AsyncIterator[Page]:
        """Yield a blank page in a fresh context, discarded on exit.

        Raises:
            ScriptError: If the browser cannot provide a new context
        """
        if self._browser is None:
            raise RuntimeError("Sandbox is not started")
        try:
            context = await self._browser.new_context()
        except PlaywrightError as e:
            raise ScriptError(
                f"cannot create execution context: {_first_line(e)}", step="context"
            ) from e
        try:
            try:
                page = await context.new_page()
            except PlaywrightError as e:
                raise ScriptError(
                    f"cannot create execution context: {_first_line(e)}",
                    step="context",
                ) from e
            yield page
        finally:
            await context.close()

    async def execute(self, includes: str, source: str, test: TestCase) -> TypeTag:
        """Execute one test call and check it against its expectation.

        Args:
            includes: Concatenated include scripts
            source: Function source
            test: The test case to run

        Returns:
            The type of the returned value, UNKNOWN if nothing was returned
            or the call was expected to fail

        Raises:
            ScriptError: If includes or source fail, or the call fails
                without the test expecting an error
            TestExpectationFailure: If the result does not match
        """
        async with self.isolated_page() as page:
            await _load(page, includes, "includes")
            await _load(page, source, "source")
            try:
                result = await page.evaluate(RUN_SCRIPT, test.call)
            except PlaywrightError as e:
                if test.error:
                    logger.debug(f"Test call failed as expected: {_first_line(e)}")
                    return TypeTag.UNKNOWN
                raise ScriptError(
                    f"failed executing test call: {_first_line(e)}", step="call"
                ) from e

        return check_outcome(test, result)


async def _load(page: Page, script: str, step: str) -> None:
    try:
        await page.evaluate(LOAD_SCRIPT, script)
    except PlaywrightError as e:
        what = "includes" if step == "includes" else "source code"
        raise ScriptError(f"failed executing {what}: {_first_line(e)}", step=step) from e


def check_outcome(test: TestCase, result: Any) -> TypeTag:
    """Check a successful call's result against the test case.

    Raises:
        TestExpectationFailure: If the result does not match
    """
    if test.error:
        raise TestExpectationFailure(
            "test call was supposed to fail but executed successfully"
        )

    actual = display_value(result)
    if test.null:
        if result is not None:
            raise TestExpectationFailure(
                f"test call returned unexpected result: expected null, got '{actual}'"
            )
        return TypeTag.UNKNOWN

    expected = display_value(test.expect)
    if expected != actual:
        raise TestExpectationFailure(
            f"test call returned unexpected result: expected '{expected}', got '{actual}'"
        )
    return classify_value(result)


def _first_line(error: PlaywrightError) -> str:
    message = error.message or str(error)
    return message.strip().splitlines()[0] if message.strip() else "unknown error"
