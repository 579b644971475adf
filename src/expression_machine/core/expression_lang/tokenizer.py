"""
Tokenizer for the expression language.

Converts an expression string into a list of tokens. Tokens reference the
source by offset and never copy text.
"""

from __future__ import annotations

from expression_machine.core.expression_lang.token_map import TokenKind, TokenMap


class Token:
    """A single token from the expression tokenizer."""

    __slots__ = ("kind", "start", "length")

    def __init__(self, kind: TokenKind, start: int, length: int) -> None:
        self.kind = kind
        self.start = start
        self.length = length

    @property
    def end(self) -> int:
        return self.start + self.length

    def text(self, source: str) -> str:
        """Slice this token's text out of ``source``."""
        return source[self.start : self.end]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return (self.kind, self.start, self.length) == (other.kind, other.start, other.length)

    def __hash__(self) -> int:
        return hash((self.kind, self.start, self.length))

    def __repr__(self) -> str:
        return f"Token({self.kind}, start={self.start}, length={self.length})"


def tokenize(source: str, token_map: TokenMap | None = None) -> list[Token]:
    """Tokenize an expression string into a list of tokens.

    Any character that is neither ignorable nor a token character is part
    of a VALUE run, so numbers and identifiers share one token kind and
    tokenizing never fails.
    """
    token_map = token_map or TokenMap.default()
    tokens: list[Token] = []
    i = 0
    n = len(source)

    while i < n:
        c = source[i]

        if token_map.is_ignored(c):
            i += 1
            continue

        kind = token_map.kind_of(c)
        if kind is not None:
            tokens.append(Token(kind, i, 1))
            i += 1
            continue

        start = i
        i += 1
        while i < n and not token_map.is_ignored(source[i]) and token_map.kind_of(source[i]) is None:
            i += 1
        tokens.append(Token(TokenKind.VALUE, start, i - start))

    return tokens
