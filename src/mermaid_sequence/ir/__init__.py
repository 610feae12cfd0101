"""Intermediate representation: diagram model, assembler and derived views."""

from mermaid_sequence.ir.activations import Activation, activation_spans
from mermaid_sequence.ir.assembler import DiagramAssembler
from mermaid_sequence.ir.graph import InteractionGraph, MessageData, ParticipantData
from mermaid_sequence.ir.model import (
    BlockBranch,
    BlockEnd,
    BlockStart,
    Box,
    Branch,
    ControlStructure,
    DiagramModel,
    Directive,
    Link,
    Message,
    Note,
    Participant,
)

__all__ = [
    "Activation",
    "BlockBranch",
    "BlockEnd",
    "BlockStart",
    "Box",
    "Branch",
    "ControlStructure",
    "DiagramAssembler",
    "DiagramModel",
    "Directive",
    "InteractionGraph",
    "Link",
    "Message",
    "MessageData",
    "Note",
    "Participant",
    "ParticipantData",
    "activation_spans",
]
