"""Statements produced by the statement parser.

Timeline statements (Message, Note, BlockStart, BlockBranch, BlockEnd,
Directive) are the model types themselves, with ``order`` left unset until
assembly. The records here never reach a timeline: they declare
participants, open boxes, attach links or switch on autonumbering.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from mermaid_sequence.ir.model import (
    BlockBranch,
    BlockEnd,
    BlockStart,
    Directive,
    Link,
    Message,
    Note,
)
from mermaid_sequence.types import ParticipantKind, StatementKind


@dataclass
class ParticipantDeclaration:
    id: str
    kind: ParticipantKind = field(default_factory=ParticipantKind.default)
    label: str | None = None
    created: bool = False
    tag: StatementKind = field(default=StatementKind.Declaration, init=False, repr=False)


@dataclass
class BoxStart:
    color: str | None = None
    label: str | None = None
    tag: StatementKind = field(default=StatementKind.BoxStart, init=False, repr=False)


@dataclass
class LinkDeclaration:
    participant_id: str
    links: list[Link] = field(default_factory=list)
    tag: StatementKind = field(default=StatementKind.Link, init=False, repr=False)


@dataclass
class Autonumber:
    tag: StatementKind = field(default=StatementKind.Autonumber, init=False, repr=False)


Statement = (
    Message
    | Note
    | BlockStart
    | BlockBranch
    | BlockEnd
    | Directive
    | ParticipantDeclaration
    | BoxStart
    | LinkDeclaration
    | Autonumber
)
