"""
Expression evaluator.

Walks a compiled tree against the source it was parsed from and a binding
environment. Pure with respect to the tree; only reads the bindings.
Does NOT use Python's eval().
"""

from __future__ import annotations

from collections.abc import Callable

from expression_machine.core.errors import (
    EmptyTreeError,
    ExpressionEvalError,
    FunctionNotFoundError,
)
from expression_machine.core.expression_lang import float32
from expression_machine.core.expression_lang.bindings import BindingEnvironment
from expression_machine.core.ir.nodes import (
    BinaryNode,
    BinaryOp,
    CallNode,
    EmptyNode,
    Node,
    ValueNode,
)

_OPERATIONS: dict[BinaryOp, Callable[[float, float], float]] = {
    BinaryOp.ADD: float32.add,
    BinaryOp.SUB: float32.sub,
    BinaryOp.MUL: float32.mul,
    BinaryOp.DIV: float32.div,
}


def evaluate(node: Node, source: str, bindings: BindingEnvironment) -> float:
    """Evaluate a tree to a single-precision float.

    Args:
        node: Compiled expression tree.
        source: The source text the tree was parsed from.
        bindings: Variables and functions referenced by the tree.

    Returns:
        The computed value. Division by zero and overflow follow IEEE-754
        and produce ``inf``/``nan`` rather than raising.

    Raises:
        VariableNotFoundError: A referenced variable is not bound.
        FunctionNotFoundError: A called function is not bound.
        EmptyTreeError: ``node`` is the empty placeholder.
    """
    return _interpret(node, source, bindings)


def _interpret(node: Node, source: str, bindings: BindingEnvironment) -> float:
    """Post-order walk with an explicit stack; tree depth is not bounded by recursion."""
    values: list[float] = []
    # (node, children already evaluated)
    pending: list[tuple[Node, bool]] = [(node, False)]

    while pending:
        current, ready = pending.pop()

        if isinstance(current, ValueNode):
            values.append(_interpret_value(current, source, bindings))

        elif isinstance(current, BinaryNode):
            if ready:
                right = values.pop()
                left = values.pop()
                values.append(_OPERATIONS[current.op](left, right))
            else:
                pending.append((current, True))
                pending.append((current.right, False))
                pending.append((current.left, False))

        elif isinstance(current, CallNode):
            name = current.name(source)
            if ready:
                value = 0.0 if current.argument is None else values.pop()
                values.append(bindings.invoke_function(name, value))
            else:
                # Missing function is reported before the argument is evaluated.
                if not bindings.contains_function(name):
                    raise FunctionNotFoundError(name)
                pending.append((current, True))
                if current.argument is not None:
                    pending.append((current.argument, False))

        elif isinstance(current, EmptyNode):
            raise EmptyTreeError("Nothing is compiled; set a valid source before evaluating")

        else:
            raise ExpressionEvalError(f"Unknown node type: {type(current).__name__}")

    return values.pop()


def _interpret_value(node: ValueNode, source: str, bindings: BindingEnvironment) -> float:
    """A literal if the span parses as a number, otherwise a variable name."""
    text = node.text(source)
    literal = float32.parse_float32(text)
    if literal is not None:
        return literal
    return bindings.get_variable(text)
