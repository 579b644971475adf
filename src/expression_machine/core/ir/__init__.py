"""
Intermediate representation for compiled expressions.
"""

from .nodes import (
    EMPTY_TREE,
    BinaryNode,
    BinaryOp,
    CallNode,
    EmptyNode,
    Node,
    ValueNode,
    is_empty,
    iter_nodes,
    render,
)

__all__ = [
    "EMPTY_TREE",
    "BinaryNode",
    "BinaryOp",
    "CallNode",
    "EmptyNode",
    "Node",
    "ValueNode",
    "is_empty",
    "iter_nodes",
    "render",
]
