"""Line classifier — decides the statement kind of one source line.

Works on a single trimmed, comment-free line and only looks at the leading
keyword (or, failing that, for an arrow literal) without parsing the rest.
"""

from __future__ import annotations

import re

from mermaid_sequence.grammar import AUTONUMBER, BLOCK_KEYWORDS, BRANCH_KEYWORDS, END, HEADER, find_arrow
from mermaid_sequence.types import LineKind

_NOTE_RE = re.compile(r"note\s+(over|left\s+of|right\s+of)\s+\S", re.IGNORECASE)

_NOTE_KINDS: dict[str, LineKind] = {
    "over": LineKind.NoteOver,
    "left": LineKind.NoteLeft,
    "right": LineKind.NoteRight,
}

_DECLARATION_KEYWORDS = ("participant", "actor")


def split_keyword(line: str) -> tuple[str, str]:
    """Split a line into its first whitespace-delimited word and the stripped rest."""
    parts = line.split(None, 1)
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1].strip()


def message_head(line: str) -> str:
    """The part of a message line before its first colon."""
    return line.split(":", 1)[0]


def classify(line: str) -> LineKind:
    """Classify one trimmed, comment-stripped source line."""
    word, rest = split_keyword(line)

    if word == HEADER and not rest:
        return LineKind.Header
    if word == AUTONUMBER and not rest:
        return LineKind.Autonumber
    if word in _DECLARATION_KEYWORDS and rest:
        return LineKind.Participant
    if word == "create":
        inner, inner_rest = split_keyword(rest)
        if inner in _DECLARATION_KEYWORDS and inner_rest:
            return LineKind.Participant
    if word == "destroy" and rest:
        return LineKind.Destroy
    if word.lower() == "note":
        m = _NOTE_RE.match(line)
        if m:
            return _NOTE_KINDS[m.group(1).split()[0].lower()]
        return LineKind.Unknown
    if word in ("activate", "deactivate") and rest:
        return LineKind.Activation
    if word in ("link", "links") and ":" in rest:
        return LineKind.Link
    if word in BLOCK_KEYWORDS:
        return LineKind.BlockStart
    if word == "box":
        return LineKind.BoxStart
    if word in BRANCH_KEYWORDS:
        return LineKind.Branch
    if line == END:
        return LineKind.End
    if find_arrow(message_head(line)) is not None:
        return LineKind.Message
    return LineKind.Unknown
