"""Tests for mermaid_sequence.renderers.mermaid — canonical text output."""

import pytest

from mermaid_sequence import parse, serialize
from mermaid_sequence.config import SerializeConfig
from mermaid_sequence.ir.assembler import DiagramAssembler
from mermaid_sequence.ir.model import (
    BlockBranch,
    BlockEnd,
    BlockStart,
    Box,
    ControlStructure,
    DiagramModel,
    Message,
    Note,
    Participant,
)
from mermaid_sequence.renderers import Renderer
from mermaid_sequence.renderers.mermaid import MermaidSerializer, format_box, format_message, format_note
from mermaid_sequence.types import ArrowType, BlockKind, NotePlacement, ParticipantKind


def _lines(text: str) -> list[str]:
    return text.splitlines()


def test_empty_model():
    assert serialize(DiagramModel()) == "sequenceDiagram\n"


def test_header_and_declarations():
    asm = DiagramAssembler()
    asm.declare("A", ParticipantKind.Actor, "Alice")
    asm.add_message("A", "B", text="hi")
    assert _lines(serialize(asm.build())) == [
        "sequenceDiagram",
        "    actor A as Alice",
        "    participant B",
        "    A->>B: hi",
    ]


def test_autonumber_line():
    asm = DiagramAssembler()
    asm.set_autonumber()
    assert _lines(serialize(asm.build()))[1] == "    autonumber"


@pytest.mark.parametrize(
    "arrow,token",
    [
        (ArrowType.Solid, "->"),
        (ArrowType.Dashed, "-->"),
        (ArrowType.SolidArrow, "->>"),
        (ArrowType.DashedArrow, "-->>"),
        (ArrowType.SolidBidir, "<<->>"),
        (ArrowType.DashedBidir, "<<-->>"),
        (ArrowType.SolidCross, "-x"),
        (ArrowType.DashedCross, "--x"),
        (ArrowType.SolidOpen, "-)"),
        (ArrowType.DashedOpen, "--)"),
    ],
)
def test_arrow_tokens(arrow: ArrowType, token: str):
    assert format_message(Message(from_id="A", to_id="B", arrow=arrow, text="t")) == f"A{token}B: t"


def test_message_markers():
    msg = Message(from_id="A", to_id="B", activate_source=True, deactivate_target=True)
    assert format_message(msg) == "+A->>-B"


def test_message_empty_text():
    assert format_message(Message(from_id="A", to_id="B", text="")) == "A->>B:"


def test_reserved_word_is_quoted():
    assert format_message(Message(from_id="A", to_id="B", text="the end")) == 'A->>B: "the end"'


def test_notes():
    assert format_note(Note(placement=NotePlacement.Over, target_ids=["A", "B"], text="x")) == "Note over A,B: x"
    assert format_note(Note(placement=NotePlacement.Left, target_ids=["A"], text="x")) == "Note left of A: x"
    assert format_note(Note(placement=NotePlacement.Right, target_ids=["A"], text="")) == "Note right of A:"


def test_block_indentation():
    src = "sequenceDiagram\nalt a\nloop l\nA->>B\nend\nelse b\nB->>A\nend\n"
    assert _lines(serialize(parse(src))) == [
        "sequenceDiagram",
        "    participant A",
        "    participant B",
        "    alt a",
        "        loop l",
        "            A->>B",
        "        end",
        "    else b",
        "        B->>A",
        "    end",
    ]


def test_custom_indent():
    src = "sequenceDiagram\nopt o\nA->>B\nend\n"
    out = serialize(parse(src), SerializeConfig(indent=2))
    assert _lines(out)[-3:] == ["  opt o", "    A->>B", "  end"]


def test_negative_indent_rejected():
    with pytest.raises(ValueError):
        SerializeConfig(indent=-2)


def test_declare_implicit_off():
    model = parse("sequenceDiagram\nparticipant A\nA->>B: hi\n")
    out = serialize(model, SerializeConfig(declare_implicit=False))
    assert _lines(out) == ["sequenceDiagram", "    participant A", "    A->>B: hi"]


def test_boxes_group_members():
    src = "sequenceDiagram\nparticipant X\nbox Aqua Team\nparticipant A\nparticipant B\nend\nA->>X\n"
    assert _lines(serialize(parse(src))) == [
        "sequenceDiagram",
        "    participant X",
        "    box Aqua Team",
        "        participant A",
        "        participant B",
        "    end",
        "    A->>X",
    ]


def test_empty_box_is_kept():
    out = serialize(parse("sequenceDiagram\nbox Gray\nend\n"))
    assert _lines(out) == ["sequenceDiagram", "    box Gray", "    end"]


def test_box_label_starting_with_color_gets_transparent():
    assert format_box(Box(label="Red Team")) == "box transparent Red Team"
    assert format_box(Box(label="Team")) == "box Team"
    assert format_box(Box(label="Red Team", color="Aqua")) == "box Aqua Red Team"


def test_created_participant_stays_out_of_box():
    src = "sequenceDiagram\nbox Aqua Team\nparticipant A\ncreate participant C\nend\nA->>C\n"
    assert _lines(serialize(parse(src))) == [
        "sequenceDiagram",
        "    box Aqua Team",
        "        participant A",
        "    end",
        "    create participant C",
        "    A->>C",
    ]


def test_serializer_is_a_renderer():
    model = parse("sequenceDiagram\nA->>B: hi\n")
    renderer: Renderer = MermaidSerializer(SerializeConfig(indent=2))
    assert renderer.render(model) == serialize(model, SerializeConfig(indent=2))


def test_created_participant_declared_in_timeline():
    src = "sequenceDiagram\nparticipant A\nA->>A: boot\ncreate actor C as Cache\nlink C: Docs @ https://d\nA->>C: hi\n"
    assert _lines(serialize(parse(src))) == [
        "sequenceDiagram",
        "    participant A",
        "    A->>A: boot",
        "    create actor C as Cache",
        "    link C: Docs @ https://d",
        "    A->>C: hi",
    ]


def test_rect_uses_color():
    out = serialize(parse("sequenceDiagram\nrect #eee\nA->>B\nend\n"))
    assert "    rect #eee" in _lines(out)


def test_unclosed_block_is_closed():
    asm = DiagramAssembler()
    asm.start_block(BlockKind.Loop, "l")
    asm.add_message("A", "B")
    assert _lines(serialize(asm.build()))[-2:] == ["        A->>B", "    end"]


def test_hand_built_model_with_orphans():
    block = ControlStructure(kind=BlockKind.Alt, label="a", start_order=1)
    model = DiagramModel(
        participants=[Participant(id="A")],
        timeline=[
            BlockEnd(order=0),
            BlockStart(block=block, order=1),
            BlockBranch(keyword="and", label="b", order=2),
        ],
    )
    assert _lines(MermaidSerializer().render(model)) == [
        "sequenceDiagram",
        "    participant A",
        "    alt a",
        "    else b",
        "    end",
    ]
