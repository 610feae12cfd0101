"""Renderers: DiagramModel back to text."""

from mermaid_sequence.renderers.base import Renderer
from mermaid_sequence.renderers.mermaid import MermaidSerializer, serialize

__all__ = ["MermaidSerializer", "Renderer", "serialize"]
