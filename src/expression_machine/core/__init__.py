"""
Core compilation and evaluation components.
"""

from .errors import (
    ConfigError,
    EmptyTreeError,
    ExpressionEvalError,
    ExpressionMachineError,
    ExpressionParseError,
    FunctionNotFoundError,
    MachineDisposedError,
    VariableNotFoundError,
)
from .machine import Machine

__all__ = [
    "ConfigError",
    "EmptyTreeError",
    "ExpressionEvalError",
    "ExpressionMachineError",
    "ExpressionParseError",
    "FunctionNotFoundError",
    "Machine",
    "MachineDisposedError",
    "VariableNotFoundError",
]
