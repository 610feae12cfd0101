"""Centralized configuration for mermaid-sequence."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ParseConfig:
    """Configuration for the parsing pipeline."""

    strict: bool = False  # raise on the first diagnostic instead of recovering


@dataclass
class SerializeConfig:
    """Configuration for the serializer."""

    indent: int = 4
    declare_implicit: bool = True

    def __post_init__(self) -> None:
        if self.indent < 0:
            raise ValueError(f"indent must be non-negative, got {self.indent}")
