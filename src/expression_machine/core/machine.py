"""
The expression machine: owns a source string, its compiled tree, and the
variable/function tables the tree is evaluated against.

A host typically keeps one machine per formula, re-sets the source and the
variable values as they change, and calls ``evaluate()`` whenever it needs
the number. Re-setting an unchanged source is free.

Machines are not thread-safe. Callbacks registered with ``set_function``
must not call back into the machine that invokes them.
"""

from __future__ import annotations

import logging
from types import TracebackType

from expression_machine.core.errors import ExpressionParseError, MachineDisposedError
from expression_machine.core.expression_lang.bindings import BindingEnvironment, Function
from expression_machine.core.expression_lang.compilation import (
    CompilationError,
    CompilationResult,
)
from expression_machine.core.expression_lang.evaluator import evaluate
from expression_machine.core.expression_lang.float32 import parse_float32
from expression_machine.core.expression_lang.parser import parse
from expression_machine.core.expression_lang.token_map import TokenKind, TokenMap
from expression_machine.core.expression_lang.tokenizer import Token, tokenize
from expression_machine.core.ir.nodes import EMPTY_TREE, Node, ValueNode

logger = logging.getLogger(__name__)


class Machine:
    """Compiles and evaluates a single expression source."""

    def __init__(self, source: str | None = None, *, token_map: TokenMap | None = None) -> None:
        """
        Create a machine, optionally compiling ``source`` immediately.

        Raises:
            ExpressionParseError: If ``source`` is given and does not compile.
        """
        self._token_map = token_map or TokenMap.default()
        self._bindings = BindingEnvironment()
        self._source = ""
        self._tokens: list[Token] = []
        self._tree: Node = EMPTY_TREE
        self._literal: float | None = None
        self._last_error: CompilationError | None = None
        self._disposed = False
        self.compile_count = 0

        if source is not None:
            error = self._compile(source)
            if error is not None:
                raise ExpressionParseError(error, source)

    # -- Lifecycle --

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Release the tree, tokens and binding tables. The machine is unusable afterwards."""
        self._ensure_alive()
        self._tree = EMPTY_TREE
        self._tokens = []
        self._literal = None
        self._bindings.clear()
        self._disposed = True

    def __enter__(self) -> Machine:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if not self._disposed:
            self.dispose()

    def _ensure_alive(self) -> None:
        if self._disposed:
            raise MachineDisposedError("Machine has been disposed")

    # -- Source --

    @property
    def source(self) -> str:
        self._ensure_alive()
        return self._source

    def get_source(self) -> str:
        return self.source

    @property
    def tree(self) -> Node:
        """The compiled tree, or the empty placeholder if nothing compiled."""
        self._ensure_alive()
        return self._tree

    @property
    def tokens(self) -> tuple[Token, ...]:
        self._ensure_alive()
        return tuple(self._tokens)

    @property
    def token_map(self) -> TokenMap:
        return self._token_map

    def set_source(self, source: str) -> CompilationResult:
        """
        Replace the source and recompile it.

        An unchanged source is not recompiled; the outcome of its last
        compilation is returned again. On failure (an empty source included)
        the machine holds the empty tree until a later call succeeds.
        """
        self._ensure_alive()
        if self.compile_count and source == self._source:
            if self._last_error is not None:
                return CompilationResult.failure(self._last_error)
            return CompilationResult.ok()

        error = self._compile(source)
        if error is not None:
            return CompilationResult.failure(error)
        return CompilationResult.ok()

    def try_set_source(self, source: str) -> tuple[bool, CompilationError | None]:
        """Like ``set_source`` but returns ``(success, error)``."""
        result = self.set_source(source)
        return result.success, result.error

    def _compile(self, source: str) -> CompilationError | None:
        self._source = source
        self._tree = EMPTY_TREE
        self._literal = None
        self._last_error = None
        self.compile_count += 1

        literal = parse_float32(source)
        if literal is not None:
            # Plain numbers skip tokenizing and parsing entirely.
            stripped = source.strip()
            start = source.index(stripped) if stripped else 0
            self._tokens = [Token(TokenKind.VALUE, start, len(stripped))]
            self._tree = ValueNode(start=start, length=len(stripped))
            self._literal = literal
            logger.debug("Compiled numeric literal %r", source)
            return None

        self._tokens = tokenize(source, self._token_map)
        outcome = parse(self._tokens)
        if outcome.tree is None:
            self._last_error = outcome.error
            logger.debug("Failed to compile %r: %s", source, outcome.error)
            return outcome.error

        self._tree = outcome.tree
        logger.debug("Compiled %r into %d tokens", source, len(self._tokens))
        return None

    def get_token(self, start: int, length: int) -> str:
        """Return the source text of a token span."""
        self._ensure_alive()
        if start < 0:
            raise IndexError(f"Start index `{start}` is out of bounds")
        if length < 0:
            raise IndexError(f"Length `{length}` is out of bounds")
        if start + length > len(self._source):
            raise IndexError(
                f"Token starting at `{start}` with length `{length}` is out of bounds"
            )
        return self._source[start : start + length]

    # -- Variables --

    def set_variable(self, name: str, value: float) -> None:
        self._ensure_alive()
        self._bindings.set_variable(name, value)

    def get_variable(self, name: str) -> float:
        """Raises VariableNotFoundError if ``name`` was never set."""
        self._ensure_alive()
        return self._bindings.get_variable(name)

    def contains_variable(self, name: str) -> bool:
        self._ensure_alive()
        return self._bindings.contains_variable(name)

    def clear_variables(self) -> None:
        self._ensure_alive()
        self._bindings.clear_variables()

    # -- Functions --

    def set_function(self, name: str, function: Function) -> None:
        self._ensure_alive()
        self._bindings.set_function(name, function)

    def invoke_function(self, name: str, value: float) -> float:
        """Raises FunctionNotFoundError if ``name`` was never set."""
        self._ensure_alive()
        return self._bindings.invoke_function(name, value)

    def contains_function(self, name: str) -> bool:
        self._ensure_alive()
        return self._bindings.contains_function(name)

    def clear_functions(self) -> None:
        self._ensure_alive()
        self._bindings.clear_functions()

    # -- Evaluation --

    def evaluate(self) -> float:
        """
        Evaluate the compiled source.

        Raises:
            EmptyTreeError: Nothing is compiled.
            VariableNotFoundError: A referenced variable is not set.
            FunctionNotFoundError: A called function is not set.
        """
        self._ensure_alive()
        if self._literal is not None:
            return self._literal
        return evaluate(self._tree, self._source, self._bindings)

    def __repr__(self) -> str:
        if self._disposed:
            return "Machine(<disposed>)"
        return f"Machine({self._source!r})"
