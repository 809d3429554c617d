"""Tests for CLI interface."""

import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from qfuncs.cli import run_cli


@pytest.fixture
def fixtures_path():
    return Path(__file__).parent / "fixtures"


class TestCLI:
    def given_fixture_configs(self, fixtures_path, tmp_path):
        self.bundle = tmp_path / "bundle.xml"
        self.args = [
            "generate",
            str(fixtures_path / "configs"),
            "--includes-dir",
            str(fixtures_path / "includes"),
            "--bundle",
            str(self.bundle),
        ]

    def given_failing_config(self, tmp_path):
        config = tmp_path / "bad.toml"
        config.write_text(
            'namespace = "bad"\n'
            "[function.f]\n"
            'source = "function f(a) { return a; }"\n'
            "[[function.f.tests]]\n"
            'call = "f(1)"\n'
            "expect = 2\n"
        )
        self.bundle = tmp_path / "bundle.xml"
        self.args = ["generate", str(config), "--bundle", str(self.bundle)]

    def given_no_args(self):
        self.args = []

    async def when_cli_is_run_capturing_output(self, capsys):
        self.exit_code = await run_cli(self.args)
        self.captured = capsys.readouterr()

    def then_exit_code_is_zero(self):
        assert self.exit_code == 0

    def then_exit_code_is_nonzero(self):
        assert self.exit_code != 0

    @pytest.mark.asyncio
    async def test_generates_bundle(self, fixtures_path, tmp_path, capsys):
        """generate prints signatures in name order and writes the bundle."""
        self.given_fixture_configs(fixtures_path, tmp_path)
        await self.when_cli_is_run_capturing_output(capsys)
        self.then_exit_code_is_zero()
        lines = self.captured.out.splitlines()
        assert lines[0] == "Generated function net::add(a Number, b Number) => Number"
        assert lines[1] == "Generated function net::is_private(host Host) => Boolean"
        assert lines[2] == f"wrote bundle to {self.bundle}."
        root = ET.parse(self.bundle).getroot()
        names = [fn.findtext("name") for fn in root.findall("custom_function")]
        assert names == ["add", "is_private"]

    @pytest.mark.asyncio
    async def test_failed_test_reports_error(self, tmp_path, capsys):
        """A failing test is reported on stderr and no bundle is written."""
        self.given_failing_config(tmp_path)
        await self.when_cli_is_run_capturing_output(capsys)
        self.then_exit_code_is_nonzero()
        assert "test 1 for function 'bad::f'" in self.captured.err
        assert "expected '2', got '1'" in self.captured.err
        assert not self.bundle.exists()

    @pytest.mark.asyncio
    async def test_missing_config_path(self, tmp_path, capsys):
        self.args = ["generate", str(tmp_path / "nope")]
        await self.when_cli_is_run_capturing_output(capsys)
        self.then_exit_code_is_nonzero()
        assert "Error:" in self.captured.err

    @pytest.mark.asyncio
    async def test_no_command_shows_help(self, capsys):
        self.given_no_args()
        await self.when_cli_is_run_capturing_output(capsys)
        self.then_exit_code_is_nonzero()
        assert "generate" in self.captured.err
