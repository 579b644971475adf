"""
Expression tree types.

Nodes reference the source text by offset and length rather than holding
copies, so a tree is only meaningful together with the source it was
parsed from. Every composite node exclusively owns its children; trees are
immutable and never share nodes.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary arithmetic operators."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class ValueNode(BaseModel):
    """
    A numeric literal or an identifier.

    Whether the span is a literal or a variable name is decided at
    evaluation time.
    """

    start: int = Field(ge=0, description="Offset of the span in the source")
    length: int = Field(ge=0, description="Length of the span")

    model_config = ConfigDict(frozen=True)

    def text(self, source: str) -> str:
        return source[self.start : self.start + self.length]


class BinaryNode(BaseModel):
    """Binary operation: left op right."""

    op: BinaryOp
    left: Node
    right: Node

    model_config = ConfigDict(frozen=True)


class CallNode(BaseModel):
    """
    Single-argument function call: name(argument).

    A call written with empty parentheses has no argument and is invoked
    with 0.
    """

    name_start: int = Field(ge=0)
    name_length: int = Field(ge=0)
    argument: Node | None = Field(default=None, description="Argument expression, if any")

    model_config = ConfigDict(frozen=True)

    def name(self, source: str) -> str:
        return source[self.name_start : self.name_start + self.name_length]


class EmptyNode(BaseModel):
    """Placeholder tree held by a machine that has nothing compiled."""

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Node = ValueNode | BinaryNode | CallNode | EmptyNode

# Rebuild models for recursive forward references
BinaryNode.model_rebuild()
CallNode.model_rebuild()

EMPTY_TREE = EmptyNode()


def is_empty(node: Node) -> bool:
    """True for the shared empty placeholder (compared by identity)."""
    return node is EMPTY_TREE


def iter_nodes(node: Node) -> Iterator[Node]:
    """Yield every node in the tree depth-first, children before their parent."""
    pending: list[tuple[Node, bool]] = [(node, False)]
    while pending:
        current, expanded = pending.pop()
        if expanded:
            yield current
            continue
        pending.append((current, True))
        if isinstance(current, BinaryNode):
            pending.append((current.right, False))
            pending.append((current.left, False))
        elif isinstance(current, CallNode) and current.argument is not None:
            pending.append((current.argument, False))


def render(node: Node, source: str) -> str:
    """Render a tree as fully parenthesized text, e.g. ``((a + b) - c)``."""
    parts: list[str] = []
    for current in iter_nodes(node):
        if isinstance(current, ValueNode):
            parts.append(current.text(source))
        elif isinstance(current, BinaryNode):
            right = parts.pop()
            left = parts.pop()
            parts.append(f"({left} {current.op.value} {right})")
        elif isinstance(current, CallNode):
            arg = parts.pop() if current.argument is not None else ""
            parts.append(f"{current.name(source)}({arg})")
        else:
            parts.append("")
    return parts.pop()
