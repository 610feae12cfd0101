"""Diagram model for Mermaid sequence diagrams.

These types are what ``parse`` produces and ``serialize`` consumes:
participants, the flat order-indexed timeline, the nested block tree built
from it, boxes and the autonumber flag.

Every timeline statement carries an explicit ``tag`` discriminant
(:class:`StatementKind`) and an ``order`` equal to its index in
``DiagramModel.timeline``.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from mermaid_sequence.errors import Diagnostic
from mermaid_sequence.grammar import split_lines
from mermaid_sequence.types import (
    ArrowType,
    BlockKind,
    DirectiveKind,
    NotePlacement,
    ParticipantKind,
    StatementKind,
)


@dataclass
class Link:
    label: str
    url: str


@dataclass
class Participant:
    id: str
    kind: ParticipantKind = field(default_factory=ParticipantKind.default)
    label: str | None = None
    explicit: bool = True
    created_at: int | None = None
    destroyed_at: int | None = None
    links: list[Link] = field(default_factory=list)

    @classmethod
    def implicit(cls, id: str) -> Participant:
        """A participant inferred from its first reference."""
        return cls(id=id, explicit=False)

    @property
    def display_label(self) -> str:
        return self.label or self.id


@dataclass
class Message:
    from_id: str
    to_id: str
    arrow: ArrowType = field(default_factory=ArrowType.default)
    text: str | None = None
    order: int = -1
    activate_source: bool = False
    deactivate_source: bool = False
    activate_target: bool = False
    deactivate_target: bool = False
    tag: StatementKind = field(default=StatementKind.Message, init=False, repr=False)

    def involves(self, participant_id: str) -> bool:
        return participant_id in (self.from_id, self.to_id)

    def text_lines(self) -> list[str]:
        return split_lines(self.text) if self.text else []

    def validate(self) -> None:
        if self.activate_source and self.deactivate_source:
            raise ValueError(f"message {self.from_id}->{self.to_id}: source both activated and deactivated")
        if self.activate_target and self.deactivate_target:
            raise ValueError(f"message {self.from_id}->{self.to_id}: target both activated and deactivated")


@dataclass
class Note:
    placement: NotePlacement
    target_ids: list[str]
    text: str = ""
    order: int = -1
    tag: StatementKind = field(default=StatementKind.Note, init=False, repr=False)

    def text_lines(self) -> list[str]:
        return split_lines(self.text) if self.text else []

    def validate(self) -> None:
        if not self.target_ids:
            raise ValueError("note needs at least one target")
        if self.placement != NotePlacement.Over and len(self.target_ids) != 1:
            raise ValueError(f"note {self.placement.name.lower()} of needs exactly one target, got {self.target_ids}")


@dataclass
class Directive:
    """activate/deactivate/create/destroy kept as its own timeline statement."""

    kind: DirectiveKind
    participant_id: str
    order: int = -1
    tag: StatementKind = field(default=StatementKind.Directive, init=False, repr=False)


@dataclass
class Branch:
    label: str | None
    start_order: int
    statements: list[TreeItem] = field(default_factory=list)


@dataclass
class ControlStructure:
    """A loop/alt/opt/par/critical/break/rect region of the timeline.

    ``branches[0]`` is the opening section; ``else``/``and``/``option`` add
    more. ``end_order`` is None while the block is still open.
    """

    kind: BlockKind
    label: str | None = None
    color: str | None = None
    branches: list[Branch] = field(default_factory=list)
    start_order: int = -1
    end_order: int | None = None
    # tree node for the block opened at start_order
    tag: StatementKind = field(default=StatementKind.BlockStart, init=False, repr=False)

    def statements(self) -> Iterator[TreeItem]:
        """Direct children across all branches, in order."""
        for branch in self.branches:
            yield from branch.statements

    def contains(self, order: int) -> bool:
        end = self.end_order if self.end_order is not None else float("inf")
        return self.start_order < order < end


@dataclass
class BlockStart:
    block: ControlStructure
    order: int = -1
    tag: StatementKind = field(default=StatementKind.BlockStart, init=False, repr=False)


@dataclass
class BlockBranch:
    keyword: str
    label: str | None = None
    order: int = -1
    block_order: int = -1
    branch_index: int = 0
    tag: StatementKind = field(default=StatementKind.BlockBranch, init=False, repr=False)


@dataclass
class BlockEnd:
    order: int = -1
    block_order: int = -1
    tag: StatementKind = field(default=StatementKind.BlockEnd, init=False, repr=False)


@dataclass
class Box:
    label: str | None = None
    color: str | None = None
    participant_ids: list[str] = field(default_factory=list)


TimelineItem = Message | Note | BlockStart | BlockBranch | BlockEnd | Directive
TreeItem = Message | Note | Directive | ControlStructure


@dataclass
class DiagramModel:
    participants: list[Participant] = field(default_factory=list)
    timeline: list[TimelineItem] = field(default_factory=list)
    statements: list[TreeItem] = field(default_factory=list)
    boxes: list[Box] = field(default_factory=list)
    autonumber: bool = False
    diagnostics: list[Diagnostic] = field(default_factory=list, compare=False)

    def participant(self, participant_id: str) -> Participant | None:
        for p in self.participants:
            if p.id == participant_id:
                return p
        return None

    def participant_ids(self) -> list[str]:
        return [p.id for p in self.participants]

    def messages(self) -> list[Message]:
        return [item for item in self.timeline if item.tag == StatementKind.Message]

    def notes(self) -> list[Note]:
        return [item for item in self.timeline if item.tag == StatementKind.Note]

    def directives(self) -> list[Directive]:
        return [item for item in self.timeline if item.tag == StatementKind.Directive]

    def blocks(self) -> list[ControlStructure]:
        """All control structures, outermost first, in start order."""
        return [item.block for item in self.timeline if item.tag == StatementKind.BlockStart]

    def block_at(self, order: int) -> ControlStructure | None:
        """The block whose start statement sits at ``order``."""
        if 0 <= order < len(self.timeline):
            item = self.timeline[order]
            if item.tag == StatementKind.BlockStart:
                return item.block
        return None

    def box_of(self, participant_id: str) -> Box | None:
        for box in self.boxes:
            if participant_id in box.participant_ids:
                return box
        return None

    def created_ids(self) -> set[str]:
        return {d.participant_id for d in self.directives() if d.kind == DirectiveKind.Create}
