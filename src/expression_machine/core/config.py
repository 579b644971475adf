"""
Machine configuration models.

Configuration is loaded from the ``[expression_machine]`` section of a TOML
file (``exprm.toml`` by default)::

    [expression_machine]
    ignore = [" ", "\\t"]

    [expression_machine.tokens]
    begin_group = "["
    end_group = "]"

    [expression_machine.variables]
    width = 800
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from expression_machine.core.errors import ConfigError
from expression_machine.core.expression_lang.token_map import (
    DEFAULT_IGNORE,
    DEFAULT_TOKENS,
    TokenKind,
    TokenMap,
)
from expression_machine.core.machine import Machine

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "exprm.toml"
CONFIG_SECTION = "expression_machine"


class TokenCharacters(BaseModel):
    """Characters for each operator and punctuation token."""

    add: str = DEFAULT_TOKENS[TokenKind.ADD]
    subtract: str = DEFAULT_TOKENS[TokenKind.SUBTRACT]
    multiply: str = DEFAULT_TOKENS[TokenKind.MULTIPLY]
    divide: str = DEFAULT_TOKENS[TokenKind.DIVIDE]
    begin_group: str = DEFAULT_TOKENS[TokenKind.BEGIN_GROUP]
    end_group: str = DEFAULT_TOKENS[TokenKind.END_GROUP]

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("*")
    @classmethod
    def validate_single_character(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError(f"Token characters must be exactly one character, got {v!r}")
        return v

    @model_validator(mode="after")
    def validate_distinct(self) -> TokenCharacters:
        chars = list(self.model_dump().values())
        if len(set(chars)) != len(chars):
            raise ValueError("Token characters must be distinct")
        return self

    def as_mapping(self) -> dict[TokenKind, str]:
        return {TokenKind(name): char for name, char in self.model_dump().items()}


class MachineConfig(BaseModel):
    """Top-level machine configuration."""

    tokens: TokenCharacters = Field(default_factory=TokenCharacters)
    ignore: list[str] = Field(default_factory=lambda: list(DEFAULT_IGNORE))
    variables: dict[str, float] = Field(default_factory=dict)

    model_config = {"extra": "forbid"}

    @field_validator("ignore")
    @classmethod
    def validate_ignore(cls, v: list[str]) -> list[str]:
        for char in v:
            if len(char) != 1:
                raise ValueError(f"Ignored entries must be one character, got {char!r}")
        return v

    @model_validator(mode="after")
    def validate_no_overlap(self) -> MachineConfig:
        overlap = set(self.ignore) & set(self.tokens.model_dump().values())
        if overlap:
            raise ValueError(f"Characters cannot be both tokens and ignored: {sorted(overlap)}")
        return self

    def build_token_map(self) -> TokenMap:
        return TokenMap(tokens=self.tokens.as_mapping(), ignore=self.ignore)

    def create_machine(self, source: str | None = None) -> Machine:
        """Create a machine using this token map with the configured variables set.

        Raises:
            ExpressionParseError: If ``source`` is given and does not compile.
        """
        machine = Machine(source, token_map=self.build_token_map())
        for name, value in self.variables.items():
            machine.set_variable(name, value)
        return machine


# =============================================================================
# Configuration Loading
# =============================================================================


def load_config(toml_path: Path) -> MachineConfig:
    """
    Load machine configuration from a TOML file.

    Args:
        toml_path: Path to the TOML file

    Returns:
        MachineConfig with values from file, or defaults when the file or
        the ``[expression_machine]`` section is missing

    Raises:
        ConfigError: If the file is not valid TOML or holds invalid values
    """
    if not toml_path.exists():
        logger.debug("No config file at %s, using defaults", toml_path)
        return MachineConfig()

    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {toml_path}: {e}") from e

    section = data.get(CONFIG_SECTION, {})
    if not section:
        return MachineConfig()

    return _parse_config(section, toml_path)


def _parse_config(data: dict[str, Any], source: Path) -> MachineConfig:
    """Parse config dict into MachineConfig."""
    try:
        return MachineConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid [{CONFIG_SECTION}] section in {source}:\n{e}") from e
