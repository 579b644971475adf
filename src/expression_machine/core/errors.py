"""
Error types for expression compilation, evaluation, and machine lifecycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from expression_machine.core.expression_lang.compilation import CompilationError


class ExpressionMachineError(Exception):
    """Base exception for all expression machine errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.message}\n{self.context.format()}"
        return self.message


class ExpressionParseError(ExpressionMachineError):
    """
    Raised when source text cannot be compiled into a tree.

    Carries the structured ``CompilationError`` so callers can branch on
    its kind instead of the message text.
    """

    def __init__(self, error: CompilationError, source: str | None = None):
        self.error = error
        context = None
        if source is not None and error.position is not None:
            context = ErrorContext(source=source, position=error.position)
        super().__init__(f"{error.kind.value}: {error.message}", context)


class ExpressionEvalError(ExpressionMachineError):
    """Raised when a compiled tree cannot be evaluated."""

    pass


class VariableNotFoundError(ExpressionEvalError, KeyError):
    """Raised when an expression (or the host) reads a variable that was never set."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Variable `{name}` not found")

    def __str__(self) -> str:
        return self.message


class FunctionNotFoundError(ExpressionEvalError, KeyError):
    """Raised when an expression (or the host) calls a function that was never set."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Function `{name}` not found")

    def __str__(self) -> str:
        return self.message


class EmptyTreeError(ExpressionEvalError):
    """
    Raised when evaluating a machine that holds no compiled tree.

    This happens before any source has been set, or after the last
    ``set_source`` call failed to compile.
    """

    pass


class MachineDisposedError(ExpressionMachineError):
    """Raised when a machine is used after ``dispose()``."""

    pass


class ConfigError(ExpressionMachineError):
    """Raised when a configuration file cannot be loaded or validated."""

    pass


@dataclass
class ErrorContext:
    """
    Location of an error inside a single-line expression source.

    Attributes:
        source: The full expression text
        position: Zero-based character offset of the offending token
    """

    source: str
    position: int

    def format(self) -> str:
        """
        Format the source with a caret under the error position.

        Returns:
            Two lines, e.g. ``"  | (5 + 2"`` followed by the marker line.
        """
        prefix = "  | "
        marker_pos = len(prefix) + min(self.position, len(self.source))
        return f"{prefix}{self.source}\n{' ' * marker_pos}^"
