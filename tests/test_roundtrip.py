"""Round-trip properties: parse(serialize(m)) == m and serializer idempotence."""

import copy

import pytest

from mermaid_sequence import format_text, parse, serialize
from mermaid_sequence.ir.assembler import DiagramAssembler
from mermaid_sequence.ir.model import DiagramModel
from mermaid_sequence.types import ArrowType, BlockKind, NotePlacement, ParticipantKind


def _declared(model: DiagramModel) -> DiagramModel:
    """Copy of ``model`` with every participant marked explicit."""
    model = copy.deepcopy(model)
    for participant in model.participants:
        participant.explicit = True
    return model


def _assert_round_trip(model: DiagramModel) -> None:
    assert _declared(parse(serialize(model))) == _declared(model)


def _rich_model() -> DiagramModel:
    asm = DiagramAssembler()
    asm.set_autonumber()
    asm.open_box("Aqua", "Front")
    asm.declare("U", ParticipantKind.Actor, "User")
    asm.declare("W")
    asm.end()
    asm.declare("API", label="Public API")
    asm.add_link("API", "Docs", "https://example.com/docs")
    asm.add_message("U", "W", text="open", activate_target=True)
    asm.start_block(BlockKind.Alt, "cached")
    asm.add_message("W", "U", ArrowType.DashedArrow, "page")
    asm.add_branch("miss")
    asm.start_block(BlockKind.Loop, "retry")
    asm.add_message("W", "API", ArrowType.SolidOpen, "fetch")
    asm.add_note(NotePlacement.Over, ["W", "API"], "line one\nline two")
    asm.end()
    asm.end()
    asm.start_block(BlockKind.Rect, color="rgb(10, 20, 30)")
    asm.add_message("W", "U", ArrowType.Dashed, "the end", deactivate_source=True)
    asm.end()
    asm.create("Job", ParticipantKind.Participant, "Worker")
    asm.add_message("API", "Job", ArrowType.SolidCross, "run")
    asm.start_block(BlockKind.Par, "both")
    asm.add_message("API", "Job", text="a")
    asm.add_branch("other")
    asm.add_message("API", "W", text="b")
    asm.end()
    asm.activate("W")
    asm.deactivate("W")
    asm.add_note(NotePlacement.Left, ["U"], '"quoted"')
    asm.add_message("U", "API", ArrowType.SolidBidir)
    asm.destroy("U")
    return asm.build()


class TestRoundTrip:
    def test_rich_model(self):
        _assert_round_trip(_rich_model())

    def test_empty_model(self):
        _assert_round_trip(DiagramAssembler().build())

    @pytest.mark.parametrize("arrow", list(ArrowType))
    def test_every_arrow(self, arrow: ArrowType):
        asm = DiagramAssembler()
        asm.add_message("A", "B", arrow, "x")
        model = parse(serialize(asm.build()))
        assert model.messages()[0].arrow == arrow

    @pytest.mark.parametrize("kind", [k for k in BlockKind if k != BlockKind.Rect])
    def test_every_block_kind(self, kind: BlockKind):
        asm = DiagramAssembler()
        asm.start_block(kind, "label")
        asm.add_message("A", "B")
        asm.end()
        _assert_round_trip(asm.build())

    @pytest.mark.parametrize("text", ["the end", "End", '"already quoted"', "a: b", "x<br>y", ""])
    def test_text_escaping(self, text: str):
        asm = DiagramAssembler()
        asm.add_message("A", "B", text=text)
        asm.add_note(NotePlacement.Over, ["A"], text)
        model = parse(serialize(asm.build()))
        assert model.messages()[0].text == text
        assert model.notes()[0].text == text

    def test_create_inside_box(self):
        asm = DiagramAssembler()
        asm.open_box("Aqua", "Team")
        asm.declare("A")
        asm.create("C")
        asm.end()
        asm.add_message("A", "C")
        model = asm.build()
        _assert_round_trip(model)
        assert parse(serialize(model)).boxes[0].participant_ids == ["A"]

    @pytest.mark.parametrize(
        "color,label",
        [
            (None, "Red Team"),
            (None, "#fff team"),
            (None, "rgb(1, 2, 3) Team"),
            (None, "Transparent things"),
            (None, "Blue"),
            ("transparent", "Team"),
            ("Aqua", "Red Team"),
            (None, "Backend"),
        ],
    )
    def test_box_label_starting_with_color(self, color, label):
        asm = DiagramAssembler()
        asm.open_box(color, label)
        asm.declare("A")
        asm.end()
        model = asm.build()
        _assert_round_trip(model)
        (box,) = parse(serialize(model)).boxes
        assert (box.color, box.label) == (color, label)

    def test_destroy_marker(self):
        model = parse(serialize(_rich_model()))
        assert model.participant("Job").destroyed_at == model.messages()[4].order
        assert model.participant("U").destroyed_at == model.messages()[-1].order


SOURCES = [
    "sequenceDiagram\nA->>B: hi\nC->>A: yo\n",
    "sequenceDiagram\nloop\nA->>B\nend\nopt o\nB-->>A\nend\n",
    "sequenceDiagram\nA->>B\nend\nloop never closed\nB->>A\n",
    "sequenceDiagram\ncreate participant X\nA->>X\ndestroy X\nA-xB\n",
    "sequenceDiagram\nbox Team\nparticipant A\nend\nbox Other\nparticipant A\nend\nA->>A\n",
    "sequenceDiagram\nalt a\nand b\nelse c\nend\n",
]


@pytest.mark.parametrize("src", SOURCES)
def test_idempotent(src: str):
    once = format_text(src)
    assert format_text(once) == once
