"""mermaid-sequence: parse and serialize Mermaid sequenceDiagram text."""

from mermaid_sequence.config import ParseConfig, SerializeConfig
from mermaid_sequence.errors import Diagnostic, DiagnosticKind, MissingHeaderError, ParseError
from mermaid_sequence.ir.assembler import DiagramAssembler
from mermaid_sequence.ir.model import DiagramModel
from mermaid_sequence.parsers import parse
from mermaid_sequence.renderers.mermaid import serialize
from mermaid_sequence.types import ArrowType, BlockKind, NotePlacement, ParticipantKind

__all__ = [
    "ArrowType",
    "BlockKind",
    "Diagnostic",
    "DiagnosticKind",
    "DiagramAssembler",
    "DiagramModel",
    "MissingHeaderError",
    "NotePlacement",
    "ParseConfig",
    "ParseError",
    "ParticipantKind",
    "SerializeConfig",
    "format_text",
    "parse",
    "serialize",
]


def format_text(src: str, indent: int = 4, strict: bool = False) -> str:
    """Parse Mermaid sequenceDiagram text and re-emit it in canonical form.

    Args:
        src: Mermaid source string.
        indent: Spaces per nesting level in the output.
        strict: Raise ParseError on the first diagnostic instead of recovering.

    Returns:
        The canonical text, ending with a newline.

    Raises:
        ValueError: If the input cannot be parsed or indent is negative.
    """
    model = parse(src, ParseConfig(strict=strict))
    return serialize(model, SerializeConfig(indent=indent))
