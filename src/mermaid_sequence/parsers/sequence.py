"""Sequence diagram parser — line-oriented, classify then parse.

Pipeline per line: trim and drop comments, classify, parse the statement,
fold it into a :class:`DiagramAssembler`. Structural problems are recorded
as diagnostics on the returned model; only a missing ``sequenceDiagram``
header (or any diagnostic in strict mode) aborts the parse.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from mermaid_sequence.config import ParseConfig
from mermaid_sequence.errors import (
    Diagnostic,
    DiagnosticKind,
    InvalidBranchError,
    MissingHeaderError,
    ParseError,
    StatementSyntaxError,
    UnbalancedBlockError,
)
from mermaid_sequence.grammar import HEADER
from mermaid_sequence.ir.assembler import DiagramAssembler
from mermaid_sequence.ir.model import DiagramModel
from mermaid_sequence.parsers.classifier import classify
from mermaid_sequence.parsers.statements import parse_statement
from mermaid_sequence.types import LineKind

logger = logging.getLogger(__name__)


def significant_lines(src: str) -> Iterator[tuple[int, str]]:
    """Yield ``(line_number, trimmed_line)`` for non-blank, non-comment lines."""
    for number, raw in enumerate(src.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("%%"):
            continue
        yield number, line


@dataclass
class _SequenceCursor:
    """Per-parse state; a fresh one is made for every call."""

    config: ParseConfig
    assembler: DiagramAssembler = field(default_factory=DiagramAssembler)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def report(self, kind: DiagnosticKind, line: int, message: str, source: str = "") -> None:
        diagnostic = Diagnostic(kind=kind, line=line, message=message, source=source)
        logger.warning("%s", diagnostic)
        self.diagnostics.append(diagnostic)
        if self.config.strict:
            raise ParseError(str(diagnostic), line=line, diagnostics=self.diagnostics)

    def parse_header(self, lines: Iterator[tuple[int, str]]) -> None:
        first = next(lines, None)
        if first is None:
            raise MissingHeaderError(f"empty input; expected '{HEADER}'")
        number, line = first
        if classify(line) != LineKind.Header:
            raise MissingHeaderError(f"line {number}: expected '{HEADER}', got {line!r}", line=number)

    def parse_line(self, number: int, line: str) -> None:
        kind = classify(line)
        try:
            statement = parse_statement(kind, line)
        except StatementSyntaxError as e:
            self.report(DiagnosticKind.UnrecognizedStatement, number, f"{e}; line skipped", line)
            return

        try:
            self.assembler.feed(statement, number)
        except InvalidBranchError as e:
            if self.assembler.extend_label(line):
                self.report(DiagnosticKind.InvalidBranchContext, number, f"{e}; kept as label text", line)
            else:
                self.report(DiagnosticKind.InvalidBranchContext, number, f"{e}; line skipped", line)
        except UnbalancedBlockError as e:
            self.report(DiagnosticKind.UnbalancedBlock, number, f"{e}; line skipped", line)

    def close_open_frames(self) -> None:
        for frame in reversed(self.assembler.open_frames()):
            self.report(
                DiagnosticKind.UnbalancedBlock,
                frame.line or 0,
                f"'{frame.keyword}' is never closed with 'end'",
            )

    def parse_diagram(self, src: str) -> DiagramModel:
        lines = significant_lines(src)
        self.parse_header(lines)
        for number, line in lines:
            self.parse_line(number, line)
        self.close_open_frames()
        model = self.assembler.build()
        model.diagnostics = list(self.diagnostics)
        return model


class SequenceParser:
    """sequenceDiagram parser."""

    def __init__(self, config: ParseConfig | None = None) -> None:
        self.config = config or ParseConfig()

    def parse(self, src: str) -> DiagramModel:
        cursor = _SequenceCursor(config=self.config)
        return cursor.parse_diagram(src)
