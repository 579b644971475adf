"""Tests for CLI commands."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from expression_machine.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Create a config file with bracket groups and a preset variable."""
    path = tmp_path / "exprm.toml"
    path.write_text(
        """
[expression_machine.tokens]
begin_group = "["
end_group = "]"

[expression_machine.variables]
width = 800
"""
    )
    return path


class TestEvalCommand:
    """exprm eval"""

    def test_arithmetic(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "2 * 5 + (3 - (10 / 2)) * 2"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "6.0"

    def test_variables(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "value * 0.5", "--var", "value=800"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "400.0"

    def test_builtin_function(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "sqrt(16) + abs(0 - 2)"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "6.0"

    def test_compile_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "(1 + 2"])
        assert result.exit_code == 1

    def test_empty_expression_is_compile_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", ""])
        assert result.exit_code == 1

    def test_missing_variable(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "ghost * 2"])
        assert result.exit_code == 2

    def test_bad_assignment(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "x", "--var", "x"])
        assert result.exit_code != 0

    def test_callback_domain_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "sqrt(0 - 1)"])
        assert result.exit_code == 2

    def test_config_file(self, cli_runner: CliRunner, config_file: Path) -> None:
        result = cli_runner.invoke(app, ["eval", "[width + 200] / 2", "--config", str(config_file)])
        assert result.exit_code == 0
        assert result.stdout.strip() == "500.0"

    def test_invalid_config_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text('[expression_machine.tokens]\nadd = "-"\n')
        result = cli_runner.invoke(app, ["eval", "1", "--config", str(path)])
        assert result.exit_code == 1


class TestInspectCommands:
    """exprm tokens / exprm tree"""

    def test_tree(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["tree", "10 - 2 - 3"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "((10 - 2) - 3)"

    def test_tree_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["tree", "5 +"])
        assert result.exit_code == 1

    def test_tree_empty_expression(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["tree", ""])
        assert result.exit_code == 1

    def test_tokens(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["tokens", "do(x)"])
        assert result.exit_code == 0
        assert "begin_group" in result.stdout
        assert "end_group" in result.stdout

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "exprm version" in result.stdout
