"""
Character table used by the tokenizer.

Maps single characters to operator/punctuation token kinds and lists the
characters the tokenizer skips.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import StrEnum, auto


class TokenKind(StrEnum):
    """Token types for the expression language."""

    # Numeric literal or identifier run
    VALUE = auto()

    # Operators
    ADD = auto()
    SUBTRACT = auto()
    MULTIPLY = auto()
    DIVIDE = auto()

    # Punctuation
    BEGIN_GROUP = auto()
    END_GROUP = auto()


DEFAULT_TOKENS: dict[TokenKind, str] = {
    TokenKind.ADD: "+",
    TokenKind.SUBTRACT: "-",
    TokenKind.MULTIPLY: "*",
    TokenKind.DIVIDE: "/",
    TokenKind.BEGIN_GROUP: "(",
    TokenKind.END_GROUP: ")",
}

DEFAULT_IGNORE: tuple[str, ...] = (" ", "\t")


class TokenMap:
    """
    Immutable character table shared read-only by the tokenizer.

    ``VALUE`` has no character: anything that is neither mapped nor
    ignored belongs to a value run.
    """

    __slots__ = ("_by_kind", "_by_char", "_ignore")

    def __init__(
        self,
        tokens: Mapping[TokenKind, str] | None = None,
        ignore: Iterable[str] | None = None,
    ) -> None:
        by_kind = dict(DEFAULT_TOKENS)
        if tokens:
            by_kind.update(tokens)
        ignore_set = frozenset(DEFAULT_IGNORE if ignore is None else ignore)

        if TokenKind.VALUE in by_kind:
            raise ValueError("VALUE tokens have no single-character form")
        for kind, char in by_kind.items():
            if len(char) != 1:
                raise ValueError(f"Token character for {kind} must be one character, got {char!r}")
            if char in ignore_set:
                raise ValueError(f"Token character {char!r} for {kind} is also ignored")
        for char in ignore_set:
            if len(char) != 1:
                raise ValueError(f"Ignored entries must be one character, got {char!r}")

        by_char = {char: kind for kind, char in by_kind.items()}
        if len(by_char) != len(by_kind):
            raise ValueError("Token characters must be distinct")

        self._by_kind = by_kind
        self._by_char = by_char
        self._ignore = ignore_set

    @classmethod
    def default(cls) -> TokenMap:
        return _DEFAULT_MAP

    def kind_of(self, char: str) -> TokenKind | None:
        """Return the token kind for ``char``, or None if it is not a token character."""
        return self._by_char.get(char)

    def is_ignored(self, char: str) -> bool:
        return char in self._ignore

    def character(self, kind: TokenKind) -> str:
        """Return the character for an operator/punctuation kind."""
        if kind == TokenKind.VALUE:
            raise KeyError("VALUE tokens have no single-character form")
        return self._by_kind[kind]

    @property
    def ignore(self) -> frozenset[str]:
        return self._ignore

    def __repr__(self) -> str:
        chars = "".join(self._by_kind[k] for k in TokenKind if k != TokenKind.VALUE)
        return f"TokenMap(tokens={chars!r}, ignore={sorted(self._ignore)!r})"


_DEFAULT_MAP = TokenMap()
