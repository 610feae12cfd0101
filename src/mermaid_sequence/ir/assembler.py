"""DiagramAssembler — folds statements into a DiagramModel.

The parser feeds one statement per source line through :meth:`feed`; editor
code can call the individual methods (``add_message``, ``start_block``, …)
directly to build a model. Both paths share the same ordering, nesting,
activation and create/destroy bookkeeping, so a model built either way
serializes and re-parses to an equal model.

Every timeline statement takes the next order index; box frames take none.
:meth:`build` returns an independent snapshot, so an assembler can keep
being mutated after a model has been taken from it.
"""

from __future__ import annotations

import copy
import logging

from mermaid_sequence.errors import InvalidBranchError
from mermaid_sequence.grammar import BRANCH_FOR_BLOCK, CROSS_ARROWS, KEYWORD_FOR_BLOCK, normalize_text
from mermaid_sequence.ir.blocks import BlockStack, Frame
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
    TimelineItem,
    TreeItem,
)
from mermaid_sequence.ir.participants import ParticipantResolver
from mermaid_sequence.ir.statements import Statement
from mermaid_sequence.types import (
    ArrowType,
    BlockKind,
    DirectiveKind,
    NotePlacement,
    ParticipantKind,
    StatementKind,
)

logger = logging.getLogger(__name__)


class DiagramAssembler:
    def __init__(self) -> None:
        self._participants = ParticipantResolver()
        self._timeline: list[TimelineItem] = []
        self._statements: list[TreeItem] = []
        self._boxes: list[Box] = []
        self._autonumber = False
        self._stack = BlockStack()
        # participant id -> order of the create/destroy directive still waiting for a message
        self._pending_create: dict[str, int] = {}
        self._pending_destroy: dict[str, int] = {}

    # ── Internal helpers ──────────────────────────────────────────────────────

    def _current_list(self) -> list[TreeItem]:
        frame = self._stack.innermost_block()
        if frame is None:
            return self._statements
        assert frame.block is not None
        return frame.block.branches[-1].statements

    def _append(self, item: TimelineItem, tree_item: TreeItem | None = None) -> None:
        item.order = len(self._timeline)
        if tree_item is not None:
            self._current_list().append(tree_item)
        self._timeline.append(item)

    def _last_item(self) -> TimelineItem | None:
        return self._timeline[-1] if self._timeline else None

    def _join_box(self, participant_id: str) -> None:
        frame = self._stack.innermost_box()
        if frame is None or frame.box is None:
            return
        if any(participant_id in box.participant_ids for box in self._boxes):
            return
        frame.box.participant_ids.append(participant_id)

    # ── Declarations ──────────────────────────────────────────────────────────

    def declare(
        self,
        participant_id: str,
        kind: ParticipantKind = ParticipantKind.Participant,
        label: str | None = None,
    ) -> Participant:
        """Declare a participant explicitly; joins the innermost open box."""
        participant = self._participants.declare(participant_id, kind, label, explicit=True)
        self._join_box(participant_id)
        return participant

    def create(
        self,
        participant_id: str,
        kind: ParticipantKind = ParticipantKind.Participant,
        label: str | None = None,
    ) -> Directive:
        """``create participant X``: declare X and mark its creation point.

        Created participants never join an open box; Mermaid has no
        ``create`` inside ``box``.
        """
        self._participants.declare(participant_id, kind, label, explicit=True)
        directive = Directive(kind=DirectiveKind.Create, participant_id=participant_id)
        self._append(directive, directive)
        self._pending_create[participant_id] = directive.order
        return directive

    def destroy(self, participant_id: str) -> Directive:
        """``destroy X``: binds to the directly preceding message involving X, else the next one."""
        participant = self._participants.resolve_or_register(participant_id)
        prev = self._last_item()
        directive = Directive(kind=DirectiveKind.Destroy, participant_id=participant_id)
        self._append(directive, directive)
        if prev is not None and prev.tag == StatementKind.Message and prev.involves(participant_id):
            participant.destroyed_at = prev.order
        else:
            self._pending_destroy[participant_id] = directive.order
        return directive

    def add_link(self, participant_id: str, label: str, url: str) -> Link:
        participant = self._participants.resolve_or_register(participant_id)
        link = Link(label=label.strip(), url=url.strip())
        participant.links.append(link)
        return link

    def set_autonumber(self, enabled: bool = True) -> None:
        self._autonumber = enabled

    def open_box(self, color: str | None = None, label: str | None = None, line: int | None = None) -> Box:
        box = Box(label=label, color=color)
        self._boxes.append(box)
        self._stack.push(Frame(box=box, line=line))
        return box

    # ── Timeline statements ───────────────────────────────────────────────────

    def add_message(
        self,
        from_id: str,
        to_id: str,
        arrow: ArrowType = ArrowType.SolidArrow,
        text: str | None = None,
        *,
        activate_source: bool = False,
        deactivate_source: bool = False,
        activate_target: bool = False,
        deactivate_target: bool = False,
    ) -> Message:
        message = Message(
            from_id=from_id,
            to_id=to_id,
            arrow=arrow,
            text=text,
            activate_source=activate_source,
            deactivate_source=deactivate_source,
            activate_target=activate_target,
            deactivate_target=deactivate_target,
        )
        return self._add_message(message)

    def _add_message(self, message: Message) -> Message:
        message.validate()
        message.text = normalize_text(message.text)
        self._participants.resolve_or_register(message.from_id)
        target = self._participants.resolve_or_register(message.to_id)
        self._append(message, message)
        for pid in dict.fromkeys((message.from_id, message.to_id)):
            participant = self._participants.get(pid)
            assert participant is not None
            if self._pending_create.pop(pid, None) is not None:
                participant.created_at = message.order
            if self._pending_destroy.pop(pid, None) is not None:
                participant.destroyed_at = message.order
        if message.arrow in CROSS_ARROWS and target.destroyed_at is None:
            target.destroyed_at = message.order
        return message

    def add_note(self, placement: NotePlacement, target_ids: list[str], text: str = "") -> Note:
        note = Note(placement=placement, target_ids=list(target_ids), text=text)
        return self._add_note(note)

    def _add_note(self, note: Note) -> Note:
        note.validate()
        note.text = normalize_text(note.text) or ""
        for pid in note.target_ids:
            self._participants.resolve_or_register(pid)
        self._append(note, note)
        return note

    def activate(self, participant_id: str) -> Message | Directive:
        return self._activation(participant_id, activate=True)

    def deactivate(self, participant_id: str) -> Message | Directive:
        return self._activation(participant_id, activate=False)

    def _activation(self, participant_id: str, activate: bool) -> Message | Directive:
        """Fold into the preceding message's shorthand flag when possible."""
        self._participants.resolve_or_register(participant_id)
        prev = self._last_item()
        if prev is not None and prev.tag == StatementKind.Message:
            if prev.to_id == participant_id and not (prev.activate_target or prev.deactivate_target):
                if activate:
                    prev.activate_target = True
                else:
                    prev.deactivate_target = True
                return prev
            if prev.from_id == participant_id and not (prev.activate_source or prev.deactivate_source):
                if activate:
                    prev.activate_source = True
                else:
                    prev.deactivate_source = True
                return prev
        kind = DirectiveKind.Activate if activate else DirectiveKind.Deactivate
        directive = Directive(kind=kind, participant_id=participant_id)
        self._append(directive, directive)
        return directive

    # ── Blocks ────────────────────────────────────────────────────────────────

    def start_block(
        self,
        kind: BlockKind,
        label: str | None = None,
        color: str | None = None,
        line: int | None = None,
    ) -> ControlStructure:
        block = ControlStructure(kind=kind, label=label or None, color=color or None)
        self._open_block(BlockStart(block=block), line)
        return block

    def _open_block(self, start: BlockStart, line: int | None) -> None:
        block = start.block
        self._append(start, block)
        block.start_order = start.order
        block.end_order = None
        block.branches = [Branch(label=block.label, start_order=start.order)]
        self._stack.push(Frame(block=block, line=line))

    def add_branch(self, label: str | None = None, line: int | None = None) -> Branch:
        """Start the next ``else``/``and``/``option`` section of the innermost block."""
        top = self._stack.top
        if top is None or top.block is None or top.block.kind not in BRANCH_FOR_BLOCK:
            where = top.keyword if top is not None else "no block"
            raise InvalidBranchError(f"cannot add a branch to {where}")
        item = BlockBranch(keyword=BRANCH_FOR_BLOCK[top.block.kind], label=label or None)
        return self._add_branch(item)

    def _add_branch(self, item: BlockBranch) -> Branch:
        frame = self._stack.branch(item.keyword)
        block = frame.block
        assert block is not None
        item.block_order = block.start_order
        item.branch_index = len(block.branches)
        self._append(item)
        branch = Branch(label=item.label, start_order=item.order)
        block.branches.append(branch)
        return branch

    def end(self) -> ControlStructure | Box:
        """Close the innermost block or box."""
        return self._end(BlockEnd())

    def _end(self, item: BlockEnd) -> ControlStructure | Box:
        frame = self._stack.pop()
        if frame.block is None:
            assert frame.box is not None
            return frame.box
        block = frame.block
        item.block_order = block.start_order
        self._append(item)
        block.end_order = item.order
        return block

    def extend_label(self, text: str) -> bool:
        """Append ``text`` to the current branch label of the innermost block.

        Returns False if no block is open.
        """
        frame = self._stack.innermost_block()
        if frame is None or frame.block is None:
            return False
        block = frame.block
        branch = block.branches[-1]
        branch.label = f"{branch.label} {text}" if branch.label else text
        if len(block.branches) == 1:
            block.label = branch.label
        else:
            item = self._timeline[branch.start_order]
            if item.tag == StatementKind.BlockBranch:
                item.label = branch.label
        return True

    def open_frames(self) -> list[Frame]:
        """Frames still open, innermost first."""
        return self._stack.frames()

    # ── Statement dispatch ────────────────────────────────────────────────────

    def feed(self, statement: Statement, line: int | None = None) -> None:
        """Fold one parsed statement into the diagram."""
        tag = statement.tag
        if tag == StatementKind.Message:
            self._add_message(statement)
        elif tag == StatementKind.Note:
            self._add_note(statement)
        elif tag == StatementKind.BlockStart:
            self._open_block(statement, line)
        elif tag == StatementKind.BlockBranch:
            self._add_branch(statement)
        elif tag == StatementKind.BlockEnd:
            self._end(statement)
        elif tag == StatementKind.Directive:
            self._feed_directive(statement)
        elif tag == StatementKind.Declaration:
            if statement.created:
                self.create(statement.id, statement.kind, statement.label)
            else:
                self.declare(statement.id, statement.kind, statement.label)
        elif tag == StatementKind.BoxStart:
            self.open_box(statement.color, statement.label, line)
        elif tag == StatementKind.Link:
            for link in statement.links:
                self.add_link(statement.participant_id, link.label, link.url)
        elif tag == StatementKind.Autonumber:
            self.set_autonumber(True)
        else:
            raise ValueError(f"unhandled statement kind: {tag}")

    def _feed_directive(self, directive: Directive) -> None:
        kind = directive.kind
        if kind == DirectiveKind.Activate:
            self.activate(directive.participant_id)
        elif kind == DirectiveKind.Deactivate:
            self.deactivate(directive.participant_id)
        elif kind == DirectiveKind.Destroy:
            self.destroy(directive.participant_id)
        elif kind == DirectiveKind.Create:
            existing = self._participants.get(directive.participant_id)
            if existing is None:
                self.create(directive.participant_id)
            else:
                self.create(existing.id, existing.kind, existing.label)
        else:
            raise ValueError(f"unhandled directive kind: {kind}")

    # ── Output ────────────────────────────────────────────────────────────────

    def build(self) -> DiagramModel:
        """Snapshot the current state as an independent DiagramModel.

        Blocks still open are clamped to end at the timeline length, and
        create/destroy directives that never met a message fall back to
        their own order.
        """
        live = DiagramModel(
            participants=self._participants.participants(),
            timeline=self._timeline,
            statements=self._statements,
            boxes=self._boxes,
            autonumber=self._autonumber,
        )
        model = copy.deepcopy(live)
        length = len(model.timeline)
        for block in model.blocks():
            if block.end_order is None:
                logger.debug("clamping open %s block at order %d", KEYWORD_FOR_BLOCK[block.kind], block.start_order)
                block.end_order = length
        for pid, order in self._pending_create.items():
            participant = model.participant(pid)
            if participant is not None and participant.created_at is None:
                participant.created_at = order
        for pid, order in self._pending_destroy.items():
            participant = model.participant(pid)
            if participant is not None and participant.destroyed_at is None:
                participant.destroyed_at = order
        return model
