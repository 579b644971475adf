"""
Recursive descent parser for the expression language.

Grammar (precedence low to high):
    expression  → factor (("+" | "-") factor)*
    factor      → term (("*" | "/") term)*
    term        → VALUE "(" expression? ")"
                | VALUE
                | "(" expression ")"

Both binary levels fold to the left, so ``a - b - c`` parses as
``((a - b) - c)``. A call is formed only when a VALUE is immediately
followed by "("; empty parentheses mean "no argument".

Operator chains are folded in loops and may be arbitrarily long. Groups and
call arguments recurse, so their nesting is capped at ``MAX_NESTING_DEPTH``.
"""

from __future__ import annotations

from typing import NamedTuple

from expression_machine.core.errors import ExpressionParseError
from expression_machine.core.expression_lang.compilation import (
    CompilationError,
    CompilationErrorKind,
)
from expression_machine.core.expression_lang.token_map import TokenKind, TokenMap
from expression_machine.core.expression_lang.tokenizer import Token, tokenize
from expression_machine.core.ir.nodes import (
    BinaryNode,
    BinaryOp,
    CallNode,
    Node,
    ValueNode,
)

MAX_NESTING_DEPTH = 128

_ADDITIVE: dict[TokenKind, BinaryOp] = {
    TokenKind.ADD: BinaryOp.ADD,
    TokenKind.SUBTRACT: BinaryOp.SUB,
}

_MULTIPLICATIVE: dict[TokenKind, BinaryOp] = {
    TokenKind.MULTIPLY: BinaryOp.MUL,
    TokenKind.DIVIDE: BinaryOp.DIV,
}


class ParseOutcome(NamedTuple):
    """Either a tree or the error that prevented building one."""

    tree: Node | None
    error: CompilationError | None

    @property
    def success(self) -> bool:
        return self.error is None


class _Parser:
    """Recursive descent parser over a token list."""

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.pos = 0
        self.depth = 0

    @property
    def current(self) -> Token | None:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def fail(self, kind: CompilationErrorKind, message: str, pos: int | None) -> ExpressionParseError:
        return ExpressionParseError(CompilationError(kind=kind, message=message, position=pos))

    def _end_position(self) -> int:
        return self.tokens[-1].end if self.tokens else 0

    def _enter_group(self, open_tok: Token) -> None:
        self.depth += 1
        if self.depth > MAX_NESTING_DEPTH:
            raise self.fail(
                CompilationErrorKind.NESTING_TOO_DEEP,
                f"Groups nest deeper than {MAX_NESTING_DEPTH} levels",
                open_tok.start,
            )

    # -- Grammar rules --

    def parse(self) -> Node:
        """Parse a complete expression and require every token to be consumed."""
        node = self.parse_expression()
        tok = self.current
        if tok is not None:
            raise self.fail(
                CompilationErrorKind.UNEXPECTED_TOKEN,
                f"Unexpected `{tok.kind}` token after a complete expression",
                tok.start,
            )
        return node

    def parse_expression(self) -> Node:
        """factor (('+' | '-') factor)*"""
        left = self.parse_factor()
        while self.current is not None and self.current.kind in _ADDITIVE:
            op = _ADDITIVE[self.advance().kind]
            right = self.parse_factor()
            left = BinaryNode(op=op, left=left, right=right)
        return left

    def parse_factor(self) -> Node:
        """term (('*' | '/') term)*"""
        left = self.parse_term()
        while self.current is not None and self.current.kind in _MULTIPLICATIVE:
            op = _MULTIPLICATIVE[self.advance().kind]
            right = self.parse_term()
            left = BinaryNode(op=op, left=left, right=right)
        return left

    def parse_term(self) -> Node:
        """VALUE '(' expression? ')' | VALUE | '(' expression ')'"""
        tok = self.current
        if tok is None:
            if self.tokens:
                last = self.tokens[-1]
                message = f"Expected a token after `{last.kind}`"
            else:
                message = "Expected a token but the expression is empty"
            raise self.fail(
                CompilationErrorKind.EXPECTED_ADDITIONAL_TOKEN, message, self._end_position()
            )

        # Parenthesized expression
        if tok.kind == TokenKind.BEGIN_GROUP:
            self.advance()
            self._enter_group(tok)
            node = self.parse_expression()
            self._expect_group_close(tok)
            self.depth -= 1
            return node

        if tok.kind == TokenKind.VALUE:
            self.advance()
            nxt = self.current
            if nxt is not None and nxt.kind == TokenKind.BEGIN_GROUP:
                return self._parse_call(tok)
            return ValueNode(start=tok.start, length=tok.length)

        raise self.fail(
            CompilationErrorKind.UNEXPECTED_TOKEN,
            f"Expected a value or a group but found `{tok.kind}`",
            tok.start,
        )

    def _parse_call(self, name_tok: Token) -> CallNode:
        """VALUE '(' expression? ')'"""
        open_tok = self.advance()
        self._enter_group(open_tok)
        argument: Node | None = None
        nxt = self.current
        if nxt is not None and nxt.kind != TokenKind.END_GROUP:
            argument = self.parse_expression()
        self._expect_group_close(open_tok)
        self.depth -= 1
        return CallNode(name_start=name_tok.start, name_length=name_tok.length, argument=argument)

    def _expect_group_close(self, open_tok: Token) -> None:
        tok = self.current
        if tok is None:
            raise self.fail(
                CompilationErrorKind.EXPECTED_GROUP_CLOSE_TOKEN,
                f"Expected `end_group` to close the group opened at {open_tok.start}",
                self._end_position(),
            )
        if tok.kind != TokenKind.END_GROUP:
            raise self.fail(
                CompilationErrorKind.EXPECTED_GROUP_CLOSE_TOKEN,
                f"Expected `end_group` to close the group opened at {open_tok.start}, "
                f"found `{tok.kind}`",
                tok.start,
            )
        self.advance()


def _parse_tree(tokens: list[Token]) -> Node:
    try:
        return _Parser(tokens).parse()
    except RecursionError:
        # Only reachable when the caller is already deep in its own stack.
        raise ExpressionParseError(
            CompilationError(
                kind=CompilationErrorKind.NESTING_TOO_DEEP,
                message="Expression is nested too deeply to parse",
            )
        ) from None


def parse(tokens: list[Token]) -> ParseOutcome:
    """Parse a token list into a tree.

    Malformed input is reported through the returned outcome rather than
    raised. Any partially built subtree is dropped with the parser.
    """
    try:
        tree = _parse_tree(tokens)
    except ExpressionParseError as e:
        return ParseOutcome(tree=None, error=e.error)
    return ParseOutcome(tree=tree, error=None)


def parse_expr(source: str, token_map: TokenMap | None = None) -> Node:
    """Parse an expression string into a tree.

    Args:
        source: Expression string (e.g., "width * 0.5 + offset(2)")
        token_map: Character table; the default map when omitted.

    Returns:
        Parsed expression tree.

    Raises:
        ExpressionParseError: If the expression is invalid.
    """
    try:
        return _parse_tree(tokenize(source, token_map))
    except ExpressionParseError as e:
        raise ExpressionParseError(e.error, source) from None
