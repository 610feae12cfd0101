"""Parser registry — detect the diagram type and dispatch to the right parser."""

from __future__ import annotations

from mermaid_sequence.config import ParseConfig
from mermaid_sequence.errors import MissingHeaderError
from mermaid_sequence.grammar import HEADER
from mermaid_sequence.ir.model import DiagramModel
from mermaid_sequence.parsers.base import Parser
from mermaid_sequence.parsers.classifier import classify
from mermaid_sequence.parsers.sequence import SequenceParser, significant_lines
from mermaid_sequence.types import LineKind


def detect_type(src: str) -> str | None:
    """Detect the diagram type from source text. Returns 'sequence' or None."""
    for _, line in significant_lines(src):
        if classify(line) == LineKind.Header:
            return "sequence"
        return None
    return None


_PARSERS: dict[str, type[SequenceParser]] = {
    "sequence": SequenceParser,
}


def get_parser(diagram_type: str, config: ParseConfig | None = None) -> Parser:
    parser_cls = _PARSERS.get(diagram_type)
    if parser_cls is None:
        raise MissingHeaderError(f"Unsupported diagram type: {diagram_type}; expected '{HEADER}'")
    return parser_cls(config)


def parse(src: str, config: ParseConfig | None = None) -> DiagramModel:
    """Detect the diagram type and parse to a DiagramModel.

    Raises MissingHeaderError if the input is empty or not a sequence diagram.
    """
    # Undetected input still goes to the sequence parser so the error names the offending line.
    diagram_type = detect_type(src) or "sequence"
    return get_parser(diagram_type, config).parse(src)
