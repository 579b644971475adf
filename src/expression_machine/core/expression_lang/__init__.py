"""
Expression language: tokenizer, parser, and evaluator.

Usage:
    from expression_machine.core.expression_lang import BindingEnvironment, evaluate, parse_expr

    source = "width * 0.5"
    tree = parse_expr(source)
    bindings = BindingEnvironment()
    bindings.set_variable("width", 800)
    result = evaluate(tree, source, bindings)
    # result == 400.0
"""

from expression_machine.core.expression_lang.bindings import BindingEnvironment
from expression_machine.core.expression_lang.compilation import (
    CompilationError,
    CompilationErrorKind,
    CompilationResult,
)
from expression_machine.core.expression_lang.evaluator import evaluate
from expression_machine.core.expression_lang.parser import ParseOutcome, parse, parse_expr
from expression_machine.core.expression_lang.token_map import TokenKind, TokenMap
from expression_machine.core.expression_lang.tokenizer import Token, tokenize

__all__ = [
    "BindingEnvironment",
    "CompilationError",
    "CompilationErrorKind",
    "CompilationResult",
    "ParseOutcome",
    "Token",
    "TokenKind",
    "TokenMap",
    "evaluate",
    "parse",
    "parse_expr",
    "tokenize",
]
