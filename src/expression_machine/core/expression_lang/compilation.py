"""
Compilation outcome types.

Compiling never raises for malformed input: the outcome is returned as a
value so hosts can re-set sources in a loop without exception handling.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class CompilationErrorKind(StrEnum):
    """Why a source failed to compile."""

    EXPECTED_ADDITIONAL_TOKEN = "ExpectedAdditionalToken"
    EXPECTED_GROUP_CLOSE_TOKEN = "ExpectedGroupCloseToken"
    UNEXPECTED_TOKEN = "UnexpectedToken"
    NESTING_TOO_DEEP = "NestingTooDeep"


class CompilationError(BaseModel):
    """A typed compilation diagnostic."""

    kind: CompilationErrorKind
    message: str
    position: int | None = Field(
        default=None, description="Source offset the error refers to, when known"
    )

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class CompilationResult(BaseModel):
    """Outcome of one compilation attempt."""

    error: CompilationError | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def success(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls) -> CompilationResult:
        return SUCCESS

    @classmethod
    def failure(cls, error: CompilationError) -> CompilationResult:
        return cls(error=error)


SUCCESS = CompilationResult()
