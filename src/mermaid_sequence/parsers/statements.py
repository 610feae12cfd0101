"""Statement parser — turns a classified line into a concrete statement.

Each ``_parse_*`` function handles one :class:`LineKind` and raises
:class:`StatementSyntaxError` when the line has the right keyword but not
the right shape.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable

from mermaid_sequence.errors import StatementSyntaxError
from mermaid_sequence.grammar import BLOCK_KEYWORDS, find_arrow, split_color, unescape_text
from mermaid_sequence.ir.model import (
    BlockBranch,
    BlockEnd,
    BlockStart,
    ControlStructure,
    Directive,
    Link,
    Message,
    Note,
)
from mermaid_sequence.ir.statements import (
    Autonumber,
    BoxStart,
    LinkDeclaration,
    ParticipantDeclaration,
    Statement,
)
from mermaid_sequence.parsers.classifier import split_keyword
from mermaid_sequence.types import BlockKind, DirectiveKind, LineKind, NotePlacement, ParticipantKind

# ─── Patterns ────────────────────────────────────────────────────────────────

_DECLARATION_RE = re.compile(r"^(?:create\s+)?(participant|actor)\s+(.+?)(?:\s+as\s+(.+))?$")
_NOTE_RE = re.compile(r"^note\s+(over|left\s+of|right\s+of)\s+([^:]+?)\s*:(.*)$", re.IGNORECASE)
_LINK_RE = re.compile(r"^link\s+([^:]+?)\s*:\s*(.+?)\s*@\s*(\S.*)$")
_LINKS_RE = re.compile(r"^links\s+([^:]+?)\s*:\s*(\{.*\})$")

_PARTICIPANT_KINDS: dict[str, ParticipantKind] = {
    "participant": ParticipantKind.Participant,
    "actor": ParticipantKind.Actor,
}

_PLACEMENTS: dict[str, NotePlacement] = {
    "over": NotePlacement.Over,
    "left": NotePlacement.Left,
    "right": NotePlacement.Right,
}


# ─── Helpers ─────────────────────────────────────────────────────────────────


def _text_after_colon(raw: str) -> str:
    return unescape_text(raw.strip())


def _check_id(participant_id: str, line: str) -> str:
    participant_id = participant_id.strip()
    if not participant_id:
        raise StatementSyntaxError(f"missing participant id in {line!r}")
    if any(ch in participant_id for ch in ",:<>") or find_arrow(participant_id) is not None:
        raise StatementSyntaxError(f"invalid participant id {participant_id!r}")
    return participant_id


def _strip_source_marker(segment: str) -> tuple[str, bool, bool]:
    """Source endpoint: leading ``+``/``-`` or trailing ``+``."""
    segment = segment.strip()
    if segment.startswith("+"):
        return segment[1:], True, False
    if segment.startswith("-"):
        return segment[1:], False, True
    if segment.endswith("+"):
        return segment[:-1], True, False
    return segment, False, False


def _strip_target_marker(segment: str) -> tuple[str, bool, bool]:
    """Target endpoint: leading or trailing ``+``/``-``."""
    segment = segment.strip()
    if segment.startswith("+"):
        return segment[1:], True, False
    if segment.startswith("-"):
        return segment[1:], False, True
    if segment.endswith("+"):
        return segment[:-1], True, False
    if segment.endswith("-"):
        return segment[:-1], False, True
    return segment, False, False


# ─── Statement parsers ───────────────────────────────────────────────────────


def _parse_autonumber(line: str) -> Statement:
    return Autonumber()


def _parse_declaration(line: str) -> Statement:
    m = _DECLARATION_RE.match(line)
    if not m:
        raise StatementSyntaxError(f"malformed declaration: {line!r}")
    keyword, participant_id, label = m.groups()
    return ParticipantDeclaration(
        id=_check_id(participant_id, line),
        kind=_PARTICIPANT_KINDS[keyword],
        label=label.strip() if label else None,
        created=line.startswith("create"),
    )


def _parse_destroy(line: str) -> Statement:
    _, rest = split_keyword(line)
    return Directive(kind=DirectiveKind.Destroy, participant_id=_check_id(rest, line))


def _parse_activation(line: str) -> Statement:
    word, rest = split_keyword(line)
    kind = DirectiveKind.Activate if word == "activate" else DirectiveKind.Deactivate
    return Directive(kind=kind, participant_id=_check_id(rest, line))


def _parse_note(line: str) -> Statement:
    m = _NOTE_RE.match(line)
    if not m:
        raise StatementSyntaxError(f"malformed note: {line!r}")
    where, targets, text = m.groups()
    placement = _PLACEMENTS[where.split()[0].lower()]
    if placement == NotePlacement.Over:
        target_ids = [_check_id(t, line) for t in targets.split(",")]
    else:
        target_ids = [_check_id(targets, line)]
    return Note(placement=placement, target_ids=target_ids, text=_text_after_colon(text))


def _parse_link(line: str) -> Statement:
    m = _LINK_RE.match(line)
    if m:
        participant_id, label, url = m.groups()
        return LinkDeclaration(participant_id=_check_id(participant_id, line), links=[Link(label=label, url=url)])
    m = _LINKS_RE.match(line)
    if not m:
        raise StatementSyntaxError(f"malformed link: {line!r}")
    participant_id, payload = m.groups()
    try:
        mapping = json.loads(payload)
    except json.JSONDecodeError as e:
        raise StatementSyntaxError(f"invalid links JSON: {e}") from e
    if not isinstance(mapping, dict):
        raise StatementSyntaxError("links JSON must be an object")
    links = [Link(label=str(label), url=str(url)) for label, url in mapping.items()]
    return LinkDeclaration(participant_id=_check_id(participant_id, line), links=links)


def _parse_block_start(line: str) -> Statement:
    word, rest = split_keyword(line)
    kind = BLOCK_KEYWORDS[word]
    if kind == BlockKind.Rect:
        return BlockStart(block=ControlStructure(kind=kind, color=rest or None))
    return BlockStart(block=ControlStructure(kind=kind, label=rest or None))


def _parse_box(line: str) -> Statement:
    _, rest = split_keyword(line)
    color, label = split_color(rest)
    return BoxStart(color=color, label=label)


def _parse_branch(line: str) -> Statement:
    word, rest = split_keyword(line)
    return BlockBranch(keyword=word, label=rest or None)


def _parse_end(line: str) -> Statement:
    return BlockEnd()


def _parse_message(line: str) -> Statement:
    head, sep, tail = line.partition(":")
    found = find_arrow(head)
    if found is None:
        raise StatementSyntaxError(f"no arrow in message: {line!r}")
    start, end, arrow = found
    source, activate_source, deactivate_source = _strip_source_marker(head[:start])
    target, activate_target, deactivate_target = _strip_target_marker(head[end:])
    return Message(
        from_id=_check_id(source, line),
        to_id=_check_id(target, line),
        arrow=arrow,
        text=_text_after_colon(tail) if sep else None,
        activate_source=activate_source,
        deactivate_source=deactivate_source,
        activate_target=activate_target,
        deactivate_target=deactivate_target,
    )


_PARSERS: dict[LineKind, Callable[[str], Statement]] = {
    LineKind.Autonumber: _parse_autonumber,
    LineKind.Participant: _parse_declaration,
    LineKind.Destroy: _parse_destroy,
    LineKind.Activation: _parse_activation,
    LineKind.NoteLeft: _parse_note,
    LineKind.NoteRight: _parse_note,
    LineKind.NoteOver: _parse_note,
    LineKind.Link: _parse_link,
    LineKind.BlockStart: _parse_block_start,
    LineKind.BoxStart: _parse_box,
    LineKind.Branch: _parse_branch,
    LineKind.End: _parse_end,
    LineKind.Message: _parse_message,
}


def parse_statement(kind: LineKind, line: str) -> Statement:
    """Parse a line already classified as ``kind``.

    Raises StatementSyntaxError if the line does not have the form of its kind
    (including Header and Unknown, which carry no statement).
    """
    parser = _PARSERS.get(kind)
    if parser is None:
        raise StatementSyntaxError(f"unrecognized statement: {line!r}")
    return parser(line)
