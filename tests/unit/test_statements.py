"""Tests for mermaid_sequence.parsers.statements."""

import pytest

from mermaid_sequence.errors import StatementSyntaxError
from mermaid_sequence.parsers.statements import parse_statement
from mermaid_sequence.types import (
    ArrowType,
    BlockKind,
    DirectiveKind,
    LineKind,
    NotePlacement,
    ParticipantKind,
    StatementKind,
)


class TestMessage:
    def test_plain(self):
        msg = parse_statement(LineKind.Message, "Alice->>Bob: Hello")
        assert msg.tag == StatementKind.Message
        assert (msg.from_id, msg.to_id, msg.arrow, msg.text) == ("Alice", "Bob", ArrowType.SolidArrow, "Hello")

    def test_spaces_around_arrow(self):
        msg = parse_statement(LineKind.Message, "Alice -->> Bob : Hi")
        assert (msg.from_id, msg.to_id, msg.arrow, msg.text) == ("Alice", "Bob", ArrowType.DashedArrow, "Hi")

    def test_no_text(self):
        assert parse_statement(LineKind.Message, "A->>B").text is None

    def test_empty_text(self):
        assert parse_statement(LineKind.Message, "A->>B:").text == ""

    def test_text_keeps_later_colons(self):
        assert parse_statement(LineKind.Message, "A->>B: time: 10:30").text == "time: 10:30"

    def test_quoted_text_unwrapped(self):
        assert parse_statement(LineKind.Message, 'A->>B: "the end"').text == "the end"

    def test_activation_markers(self):
        msg = parse_statement(LineKind.Message, "+A->>-B: x")
        assert msg.activate_source and not msg.deactivate_source
        assert msg.deactivate_target and not msg.activate_target
        assert (msg.from_id, msg.to_id) == ("A", "B")

    def test_trailing_markers(self):
        msg = parse_statement(LineKind.Message, "A+->>B+: x")
        assert msg.activate_source
        assert msg.activate_target
        assert (msg.from_id, msg.to_id) == ("A", "B")

    def test_cross_arrow(self):
        msg = parse_statement(LineKind.Message, "A--xB: bye")
        assert msg.arrow == ArrowType.DashedCross

    def test_missing_source(self):
        with pytest.raises(StatementSyntaxError):
            parse_statement(LineKind.Message, "->>B: x")

    def test_comma_in_id(self):
        with pytest.raises(StatementSyntaxError):
            parse_statement(LineKind.Message, "A,B->>C: x")


    @pytest.mark.parametrize("line", ["web-xfer->>api: hi", "A->>B>C: x", "A<B->>C: x"])
    def test_arrow_characters_in_id(self, line):
        with pytest.raises(StatementSyntaxError):
            parse_statement(LineKind.Message, line)


class TestDeclaration:
    def test_participant(self):
        decl = parse_statement(LineKind.Participant, "participant A")
        assert decl.tag == StatementKind.Declaration
        assert (decl.id, decl.kind, decl.label, decl.created) == ("A", ParticipantKind.Participant, None, False)

    def test_actor_with_alias(self):
        decl = parse_statement(LineKind.Participant, "actor B as Bob the Builder")
        assert (decl.id, decl.kind, decl.label) == ("B", ParticipantKind.Actor, "Bob the Builder")

    def test_create(self):
        decl = parse_statement(LineKind.Participant, "create actor C")
        assert decl.created
        assert decl.kind == ParticipantKind.Actor


class TestNote:
    def test_over_two(self):
        note = parse_statement(LineKind.NoteOver, "Note over A, B: shared")
        assert note.placement == NotePlacement.Over
        assert note.target_ids == ["A", "B"]
        assert note.text == "shared"

    def test_left_of(self):
        note = parse_statement(LineKind.NoteLeft, "note left of A: x")
        assert note.placement == NotePlacement.Left
        assert note.target_ids == ["A"]

    def test_right_of_two_targets_rejected(self):
        with pytest.raises(StatementSyntaxError):
            parse_statement(LineKind.NoteRight, "Note right of A,B: x")

    def test_missing_colon_rejected(self):
        with pytest.raises(StatementSyntaxError):
            parse_statement(LineKind.NoteOver, "Note over A")


class TestDirectives:
    def test_activate(self):
        d = parse_statement(LineKind.Activation, "activate A")
        assert (d.kind, d.participant_id) == (DirectiveKind.Activate, "A")

    def test_deactivate(self):
        d = parse_statement(LineKind.Activation, "deactivate A")
        assert d.kind == DirectiveKind.Deactivate

    def test_destroy(self):
        d = parse_statement(LineKind.Destroy, "destroy A")
        assert (d.kind, d.participant_id) == (DirectiveKind.Destroy, "A")


class TestLinks:
    def test_single(self):
        stmt = parse_statement(LineKind.Link, "link A: Dashboard @ https://example.com/a?b=1")
        assert stmt.participant_id == "A"
        assert [(link.label, link.url) for link in stmt.links] == [("Dashboard", "https://example.com/a?b=1")]

    def test_json(self):
        stmt = parse_statement(LineKind.Link, 'links A: {"Docs": "https://d", "Repo": "https://r"}')
        assert [(link.label, link.url) for link in stmt.links] == [("Docs", "https://d"), ("Repo", "https://r")]

    def test_bad_json(self):
        with pytest.raises(StatementSyntaxError):
            parse_statement(LineKind.Link, "links A: {oops}")

    def test_missing_url(self):
        with pytest.raises(StatementSyntaxError):
            parse_statement(LineKind.Link, "link A: Dashboard")


class TestBlocks:
    def test_loop_label(self):
        start = parse_statement(LineKind.BlockStart, "loop Every minute")
        assert start.block.kind == BlockKind.Loop
        assert start.block.label == "Every minute"

    def test_block_without_label(self):
        assert parse_statement(LineKind.BlockStart, "opt").block.label is None

    def test_rect_color(self):
        block = parse_statement(LineKind.BlockStart, "rect rgb(0, 0, 255)").block
        assert block.kind == BlockKind.Rect
        assert block.color == "rgb(0, 0, 255)"
        assert block.label is None

    def test_box(self):
        box = parse_statement(LineKind.BoxStart, "box Purple Alice & John")
        assert (box.color, box.label) == ("Purple", "Alice & John")

    def test_branch(self):
        branch = parse_statement(LineKind.Branch, "else is well")
        assert (branch.keyword, branch.label) == ("else", "is well")

    def test_end(self):
        assert parse_statement(LineKind.End, "end").tag == StatementKind.BlockEnd


def test_autonumber():
    assert parse_statement(LineKind.Autonumber, "autonumber").tag == StatementKind.Autonumber


@pytest.mark.parametrize("kind", [LineKind.Unknown, LineKind.Header])
def test_no_statement_kinds_raise(kind: LineKind):
    with pytest.raises(StatementSyntaxError):
        parse_statement(kind, "whatever")
