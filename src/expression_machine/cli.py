"""
Expression Machine CLI.

Commands:
- eval: Compile and evaluate an expression
- tokens: Show the tokens an expression splits into
- tree: Show how an expression is grouped
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from expression_machine import __version__
from expression_machine.core.config import DEFAULT_CONFIG_FILE, MachineConfig, load_config
from expression_machine.core.errors import (
    ConfigError,
    ExpressionEvalError,
    ExpressionParseError,
)
from expression_machine.core.expression_lang.float32 import format_float32
from expression_machine.core.expression_lang.tokenizer import tokenize
from expression_machine.core.ir.nodes import render
from expression_machine.core.machine import Machine

console = Console()
err_console = Console(stderr=True)

# Unary math functions available to expressions evaluated from the command line.
BUILTIN_FUNCTIONS = {
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "sqrt": math.sqrt,
    "abs": abs,
    "floor": math.floor,
    "ceil": math.ceil,
    "exp": math.exp,
    "log": math.log,
}

app = typer.Typer(
    help="Compile and evaluate arithmetic expressions.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"exprm version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            envvar="EXPRM_LOG_LEVEL",
            help="Logging level (DEBUG, INFO, WARNING, ERROR)",
        ),
    ] = "WARNING",
) -> None:
    """Expression Machine CLI main callback for global options."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _parse_assignment(text: str) -> tuple[str, float]:
    name, sep, value = text.partition("=")
    if not sep or not name.strip():
        raise typer.BadParameter(f"Expected name=value, got {text!r}")
    try:
        return name.strip(), float(value)
    except ValueError:
        raise typer.BadParameter(f"Value for {name.strip()!r} is not a number: {value!r}") from None


def _load(config_path: Path | None) -> MachineConfig:
    path = config_path or Path(DEFAULT_CONFIG_FILE)
    try:
        return load_config(path)
    except ConfigError as e:
        err_console.print(f"[red]Config error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(code=1) from e


def _report_parse_error(error: ExpressionParseError) -> None:
    err_console.print(f"[red]Compilation failed:[/red] {escape(str(error.error))}", highlight=False)
    if error.context is not None:
        err_console.print(error.context.format(), highlight=False, markup=False)


@app.command("eval")
def eval_command(
    expression: Annotated[str, typer.Argument(help="Expression to evaluate")],
    variables: Annotated[
        list[str] | None,
        typer.Option("--var", "-V", help="Variable binding as name=value (repeatable)"),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help=f"Config file (default: {DEFAULT_CONFIG_FILE})"),
    ] = None,
) -> None:
    """Evaluate EXPRESSION and print the result."""
    config = _load(config_path)
    try:
        machine = config.create_machine(expression)
    except ExpressionParseError as e:
        _report_parse_error(e)
        raise typer.Exit(code=1) from e

    with machine:
        for name, function in BUILTIN_FUNCTIONS.items():
            machine.set_function(name, function)
        for assignment in variables or []:
            name, value = _parse_assignment(assignment)
            machine.set_variable(name, value)

        try:
            result = machine.evaluate()
        except ExpressionEvalError as e:
            err_console.print(f"[red]Evaluation failed:[/red] {escape(str(e))}", highlight=False)
            raise typer.Exit(code=2) from e
        except (ValueError, OverflowError) as e:
            # Raised by math callbacks outside their domain, e.g. sqrt(0 - 1).
            err_console.print(f"[red]Evaluation failed:[/red] {escape(str(e))}", highlight=False)
            raise typer.Exit(code=2) from e

    typer.echo(format_float32(result))


@app.command("tokens")
def tokens_command(
    expression: Annotated[str, typer.Argument(help="Expression to tokenize")],
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help=f"Config file (default: {DEFAULT_CONFIG_FILE})"),
    ] = None,
) -> None:
    """Show the tokens EXPRESSION splits into."""
    config = _load(config_path)
    tokens = tokenize(expression, config.build_token_map())

    if not tokens:
        console.print("[dim]No tokens.[/dim]")
        return

    table = Table(title="Tokens")
    table.add_column("Kind")
    table.add_column("Start", justify="right")
    table.add_column("Length", justify="right")
    table.add_column("Text")
    for token in tokens:
        table.add_row(str(token.kind), str(token.start), str(token.length), token.text(expression))

    console.print(table)


@app.command("tree")
def tree_command(
    expression: Annotated[str, typer.Argument(help="Expression to parse")],
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help=f"Config file (default: {DEFAULT_CONFIG_FILE})"),
    ] = None,
) -> None:
    """Print EXPRESSION fully parenthesized, showing how it is grouped."""
    config = _load(config_path)
    machine = Machine(token_map=config.build_token_map())
    with machine:
        result = machine.set_source(expression)
        if result.error is not None:
            _report_parse_error(ExpressionParseError(result.error, expression))
            raise typer.Exit(code=1)
        typer.echo(render(machine.tree, machine.source))


def main() -> None:
    app(standalone_mode=True)


if __name__ == "__main__":
    main()
