"""Parse errors and recoverable diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class DiagnosticKind(Enum):
    UnrecognizedStatement = auto()
    UnbalancedBlock = auto()
    InvalidBranchContext = auto()


@dataclass(frozen=True)
class Diagnostic:
    """A recoverable problem found while parsing one source line."""

    kind: DiagnosticKind
    line: int
    message: str
    source: str = ""

    def __str__(self) -> str:
        return f"line {self.line}: {self.message}"


class ParseError(ValueError):
    """Raised when the input cannot be turned into a diagram."""

    def __init__(self, message: str, line: int | None = None, diagnostics: list[Diagnostic] | None = None) -> None:
        super().__init__(message)
        self.line = line
        self.diagnostics = list(diagnostics or [])


class MissingHeaderError(ParseError):
    """The first significant line is not ``sequenceDiagram``."""


class StatementSyntaxError(ValueError):
    """A classified line does not match the form of its statement kind."""


class StructureError(ValueError):
    """Base for block-nesting violations raised by the block stack."""


class UnbalancedBlockError(StructureError):
    """``end`` without an open frame."""


class InvalidBranchError(StructureError):
    """``else``/``and``/``option`` outside a frame of the matching kind."""
