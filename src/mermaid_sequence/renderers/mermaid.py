"""Mermaid text serializer — the inverse of the sequence parser.

Walks a DiagramModel in canonical order and emits one line per statement:
header, autonumber, participant declarations (boxed ones inside
``box … end``), links, then the timeline with one indent level per open
block. The output re-parses to an equal model.
"""

from __future__ import annotations

import logging

from mermaid_sequence.config import SerializeConfig
from mermaid_sequence.grammar import (
    AUTONUMBER,
    BRANCH_FOR_BLOCK,
    END,
    HEADER,
    KEYWORD_FOR_BLOCK,
    escape_text,
    label_starts_with_color,
    token_for,
)
from mermaid_sequence.ir.model import (
    Box,
    ControlStructure,
    DiagramModel,
    Directive,
    Message,
    Note,
    Participant,
)
from mermaid_sequence.renderers.base import Renderer
from mermaid_sequence.types import (
    BlockKind,
    DirectiveKind,
    NotePlacement,
    ParticipantKind,
    StatementKind,
)

logger = logging.getLogger(__name__)

_PLACEMENT_WORDS: dict[NotePlacement, str] = {
    NotePlacement.Left: "left of",
    NotePlacement.Right: "right of",
    NotePlacement.Over: "over",
}

_DIRECTIVE_WORDS: dict[DirectiveKind, str] = {
    DirectiveKind.Activate: "activate",
    DirectiveKind.Deactivate: "deactivate",
    DirectiveKind.Destroy: "destroy",
}


# ─── Line formatters ─────────────────────────────────────────────────────────


def _join(*parts: str | None) -> str:
    return " ".join(p for p in parts if p)


def format_declaration(participant: Participant) -> str:
    keyword = "actor" if participant.kind == ParticipantKind.Actor else "participant"
    if participant.label:
        return f"{keyword} {participant.id} as {participant.label}"
    return f"{keyword} {participant.id}"


def format_box(box: Box) -> str:
    color = box.color
    if color is None and label_starts_with_color(box.label):
        color = "transparent"
    return _join("box", color, box.label)


def format_links(participant: Participant) -> list[str]:
    return [f"link {participant.id}: {link.label} @ {link.url}" for link in participant.links]


def _with_text(head: str, text: str | None) -> str:
    if text is None:
        return head
    if not text:
        return f"{head}:"
    return f"{head}: {escape_text(text)}"


def format_message(message: Message) -> str:
    source_marker = "+" if message.activate_source else "-" if message.deactivate_source else ""
    target_marker = "+" if message.activate_target else "-" if message.deactivate_target else ""
    head = f"{source_marker}{message.from_id}{token_for(message.arrow)}{target_marker}{message.to_id}"
    return _with_text(head, message.text)


def format_note(note: Note) -> str:
    targets = ",".join(note.target_ids) if note.placement == NotePlacement.Over else note.target_ids[0]
    return _with_text(f"Note {_PLACEMENT_WORDS[note.placement]} {targets}", note.text)


def format_block_start(block: ControlStructure) -> str:
    keyword = KEYWORD_FOR_BLOCK[block.kind]
    if block.kind == BlockKind.Rect:
        return _join(keyword, block.color)
    return _join(keyword, block.label)


# ─── Serializer ──────────────────────────────────────────────────────────────


class MermaidSerializer:
    """Renders a DiagramModel back to sequenceDiagram text."""

    def __init__(self, config: SerializeConfig | None = None) -> None:
        self.config = config or SerializeConfig()

    def _pad(self, depth: int) -> str:
        return " " * (self.config.indent * depth)

    def render(self, model: DiagramModel) -> str:
        lines = [HEADER]
        if model.autonumber:
            lines.append(self._pad(1) + AUTONUMBER)
        lines.extend(self._declarations(model))
        lines.extend(self._links(model))
        lines.extend(self._timeline(model))
        return "\n".join(lines) + "\n"

    def _declarations(self, model: DiagramModel) -> list[str]:
        created = model.created_ids()
        emitted: set[str] = set()
        emitted_boxes: list[Box] = []
        lines: list[str] = []

        for participant in model.participants:
            if participant.id in emitted or participant.id in created:
                continue
            box = model.box_of(participant.id)
            if box is not None:
                lines.extend(self._box(model, box, created, emitted))
                emitted_boxes.append(box)
                continue
            if not participant.explicit and not self.config.declare_implicit:
                continue
            lines.append(self._pad(1) + format_declaration(participant))
            emitted.add(participant.id)

        for box in model.boxes:
            if not any(box is done for done in emitted_boxes):
                lines.extend(self._box(model, box, created, emitted))
        return lines

    def _box(self, model: DiagramModel, box: Box, created: set[str], emitted: set[str]) -> list[str]:
        lines = [self._pad(1) + format_box(box)]
        for pid in box.participant_ids:
            member = model.participant(pid)
            if member is None or pid in created or pid in emitted:
                continue
            lines.append(self._pad(2) + format_declaration(member))
            emitted.add(pid)
        lines.append(self._pad(1) + END)
        return lines

    def _links(self, model: DiagramModel) -> list[str]:
        created = model.created_ids()
        lines: list[str] = []
        for participant in model.participants:
            if participant.id in created:
                continue
            lines.extend(self._pad(1) + link for link in format_links(participant))
        return lines

    def _directive(self, model: DiagramModel, directive: Directive, pad: str) -> list[str]:
        if directive.kind == DirectiveKind.Create:
            participant = model.participant(directive.participant_id) or Participant(id=directive.participant_id)
            lines = [f"{pad}create {format_declaration(participant)}"]
            lines.extend(pad + link for link in format_links(participant))
            return lines
        return [f"{pad}{_DIRECTIVE_WORDS[directive.kind]} {directive.participant_id}"]

    def _timeline(self, model: DiagramModel) -> list[str]:
        lines: list[str] = []
        open_blocks: list[ControlStructure] = []

        for item in model.timeline:
            depth = len(open_blocks) + 1
            tag = item.tag
            if tag == StatementKind.Message:
                lines.append(self._pad(depth) + format_message(item))
            elif tag == StatementKind.Note:
                lines.append(self._pad(depth) + format_note(item))
            elif tag == StatementKind.Directive:
                lines.extend(self._directive(model, item, self._pad(depth)))
            elif tag == StatementKind.BlockStart:
                lines.append(self._pad(depth) + format_block_start(item.block))
                open_blocks.append(item.block)
            elif tag == StatementKind.BlockBranch:
                keyword = item.keyword
                if open_blocks:
                    keyword = BRANCH_FOR_BLOCK.get(open_blocks[-1].kind, keyword)
                lines.append(self._pad(max(depth - 1, 1)) + _join(keyword, item.label))
            elif tag == StatementKind.BlockEnd:
                if not open_blocks:
                    logger.debug("dropping orphan block end at order %d", item.order)
                    continue
                open_blocks.pop()
                lines.append(self._pad(depth - 1) + END)
            else:
                raise ValueError(f"unhandled timeline item: {tag}")

        # Blocks left open in the model are closed at the end of the timeline.
        while open_blocks:
            open_blocks.pop()
            lines.append(self._pad(len(open_blocks) + 1) + END)
        return lines


def serialize(model: DiagramModel, config: SerializeConfig | None = None) -> str:
    """Serialize a DiagramModel to Mermaid sequenceDiagram text."""
    renderer: Renderer = MermaidSerializer(config)
    return renderer.render(model)
