"""Base renderer protocol."""

from __future__ import annotations

from typing import Protocol

from mermaid_sequence.ir.model import DiagramModel


class Renderer(Protocol):
    """Protocol that all renderers must implement."""

    def render(self, model: DiagramModel) -> str:
        """Render a diagram model to an output string."""
        ...
