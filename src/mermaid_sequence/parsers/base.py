"""Base parser protocol."""

from __future__ import annotations

from typing import Protocol

from mermaid_sequence.ir.model import DiagramModel


class Parser(Protocol):
    """Protocol that all diagram parsers must implement."""

    def parse(self, src: str) -> DiagramModel:
        """Parse source text into a DiagramModel."""
        ...
