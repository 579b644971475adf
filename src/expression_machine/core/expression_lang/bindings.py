"""
Variable and function tables consulted during evaluation.
"""

from __future__ import annotations

from collections.abc import Callable

from expression_machine.core.errors import FunctionNotFoundError, VariableNotFoundError
from expression_machine.core.expression_lang.float32 import to_float32

Function = Callable[[float], float]


class BindingEnvironment:
    """
    Name → value and name → callback tables.

    Names are matched exactly (case-sensitive). Variable values and function
    results are rounded to single precision.
    """

    def __init__(self) -> None:
        self.variables: dict[str, float] = {}
        self.functions: dict[str, Function] = {}

    # -- Variables --

    def set_variable(self, name: str, value: float) -> None:
        self.variables[name] = to_float32(float(value))

    def get_variable(self, name: str) -> float:
        try:
            return self.variables[name]
        except KeyError:
            raise VariableNotFoundError(name) from None

    def contains_variable(self, name: str) -> bool:
        return name in self.variables

    def clear_variables(self) -> None:
        self.variables.clear()

    # -- Functions --

    def set_function(self, name: str, function: Function) -> None:
        if not callable(function):
            raise TypeError(f"Function `{name}` must be callable, got {type(function).__name__}")
        self.functions[name] = function

    def invoke_function(self, name: str, value: float) -> float:
        """Call the function bound to ``name`` with a single float argument."""
        try:
            function = self.functions[name]
        except KeyError:
            raise FunctionNotFoundError(name) from None
        return to_float32(float(function(value)))

    def contains_function(self, name: str) -> bool:
        return name in self.functions

    def clear_functions(self) -> None:
        self.functions.clear()

    def clear(self) -> None:
        self.clear_variables()
        self.clear_functions()
