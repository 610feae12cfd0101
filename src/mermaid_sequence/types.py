"""Shared type definitions for mermaid-sequence.

Enums used across the grammar, parsers, IR, and renderers.
"""

from __future__ import annotations

from enum import Enum, auto


class ArrowType(Enum):
    Solid = auto()  # ->
    Dashed = auto()  # -->
    SolidArrow = auto()  # ->>
    DashedArrow = auto()  # -->>
    SolidBidir = auto()  # <<->>
    DashedBidir = auto()  # <<-->>
    SolidCross = auto()  # -x
    DashedCross = auto()  # --x
    SolidOpen = auto()  # -)
    DashedOpen = auto()  # --)

    @classmethod
    def default(cls) -> ArrowType:
        return cls.SolidArrow


class LineStyle(Enum):
    Solid = auto()
    Dashed = auto()


class HeadStyle(Enum):
    Plain = auto()  # no arrowhead
    Arrow = auto()
    BothArrow = auto()
    Cross = auto()
    Open = auto()


class ParticipantKind(Enum):
    Participant = auto()  # rendered as a box
    Actor = auto()  # rendered as a stick figure

    @classmethod
    def default(cls) -> ParticipantKind:
        return cls.Participant


class NotePlacement(Enum):
    Left = auto()  # Note left of A
    Right = auto()  # Note right of A
    Over = auto()  # Note over A[,B...]


class BlockKind(Enum):
    Loop = auto()
    Alt = auto()
    Opt = auto()
    Par = auto()
    Critical = auto()
    Break = auto()
    Rect = auto()


class DirectiveKind(Enum):
    Activate = auto()
    Deactivate = auto()
    Create = auto()
    Destroy = auto()


class StatementKind(Enum):
    """Discriminant for every statement the parser or assembler handles."""

    Message = auto()
    Note = auto()
    BlockStart = auto()
    BlockBranch = auto()
    BlockEnd = auto()
    Directive = auto()
    # Parser-only statements; never stored in a timeline.
    Declaration = auto()
    BoxStart = auto()
    Link = auto()
    Autonumber = auto()


class LineKind(Enum):
    Header = auto()
    Autonumber = auto()
    Participant = auto()
    Destroy = auto()
    NoteLeft = auto()
    NoteRight = auto()
    NoteOver = auto()
    Activation = auto()
    Link = auto()
    BlockStart = auto()
    BoxStart = auto()
    Branch = auto()
    End = auto()
    Message = auto()
    Unknown = auto()
