"""
Expression Machine - an embeddable arithmetic expression language.

Compiles expressions such as ``width * 0.5 + offset(2)`` into a tree once
and evaluates it repeatedly against host-supplied variables and functions.
"""

from __future__ import annotations

import re
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

# Re-export commonly used types for convenience
from .core import ir
from .core.errors import (
    ConfigError,
    EmptyTreeError,
    ExpressionEvalError,
    ExpressionMachineError,
    ExpressionParseError,
    FunctionNotFoundError,
    MachineDisposedError,
    VariableNotFoundError,
)
from .core.expression_lang import (
    CompilationError,
    CompilationErrorKind,
    CompilationResult,
    TokenKind,
    TokenMap,
)
from .core.machine import Machine


def _get_version() -> str:
    """Get version from pyproject.toml (editable) or importlib.metadata (installed)."""
    # In editable mode, read directly from pyproject.toml for live updates
    pyproject = _Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        content = pyproject.read_text()
        if match := re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE):
            return match.group(1)

    # Fall back to installed metadata
    try:
        return _metadata_version("expression-machine")
    except Exception:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "ir",
    "CompilationError",
    "CompilationErrorKind",
    "CompilationResult",
    "ConfigError",
    "EmptyTreeError",
    "ExpressionEvalError",
    "ExpressionMachineError",
    "ExpressionParseError",
    "FunctionNotFoundError",
    "Machine",
    "MachineDisposedError",
    "TokenKind",
    "TokenMap",
    "VariableNotFoundError",
]
