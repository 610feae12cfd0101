"""Lexical tables for the Mermaid sequenceDiagram dialect.

Arrow literals, statement keywords, box color tokens and the text escaping
rules shared by the parser and the serializer. Everything here is an
immutable table or a pure function.
"""

from __future__ import annotations

import re

from mermaid_sequence.types import ArrowType, BlockKind, HeadStyle, LineStyle

# ─── Arrows ──────────────────────────────────────────────────────────────────

_ARROWS: dict[ArrowType, tuple[str, LineStyle, HeadStyle]] = {
    ArrowType.Solid: ("->", LineStyle.Solid, HeadStyle.Plain),
    ArrowType.Dashed: ("-->", LineStyle.Dashed, HeadStyle.Plain),
    ArrowType.SolidArrow: ("->>", LineStyle.Solid, HeadStyle.Arrow),
    ArrowType.DashedArrow: ("-->>", LineStyle.Dashed, HeadStyle.Arrow),
    ArrowType.SolidBidir: ("<<->>", LineStyle.Solid, HeadStyle.BothArrow),
    ArrowType.DashedBidir: ("<<-->>", LineStyle.Dashed, HeadStyle.BothArrow),
    ArrowType.SolidCross: ("-x", LineStyle.Solid, HeadStyle.Cross),
    ArrowType.DashedCross: ("--x", LineStyle.Dashed, HeadStyle.Cross),
    ArrowType.SolidOpen: ("-)", LineStyle.Solid, HeadStyle.Open),
    ArrowType.DashedOpen: ("--)", LineStyle.Dashed, HeadStyle.Open),
}

# Scan priority at each position: bidirectional, then cross/open, then plain.
# Within a group longer literals come first ("-->>" before "->>" before "->").
ARROW_PATTERNS: list[tuple[str, ArrowType]] = [
    ("<<-->>", ArrowType.DashedBidir),
    ("<<->>", ArrowType.SolidBidir),
    ("--x", ArrowType.DashedCross),
    ("-x", ArrowType.SolidCross),
    ("--)", ArrowType.DashedOpen),
    ("-)", ArrowType.SolidOpen),
    ("-->>", ArrowType.DashedArrow),
    ("->>", ArrowType.SolidArrow),
    ("-->", ArrowType.Dashed),
    ("->", ArrowType.Solid),
]

_BY_TOKEN: dict[str, ArrowType] = {token: arrow for token, arrow in ARROW_PATTERNS}
_BY_STYLES: dict[tuple[LineStyle, HeadStyle], ArrowType] = {
    (line, head): arrow for arrow, (_, line, head) in _ARROWS.items()
}

CROSS_ARROWS = frozenset({ArrowType.SolidCross, ArrowType.DashedCross})


def token_for(arrow: ArrowType) -> str:
    """Return the literal Mermaid token for an arrow type."""
    return _ARROWS[arrow][0]


def type_for(literal: str) -> ArrowType | None:
    """Return the arrow type for an exact literal, or None if unrecognized."""
    return _BY_TOKEN.get(literal)


def styles_for(arrow: ArrowType) -> tuple[LineStyle, HeadStyle]:
    _, line, head = _ARROWS[arrow]
    return line, head


def arrow_for(line: LineStyle, head: HeadStyle) -> ArrowType | None:
    return _BY_STYLES.get((line, head))


def find_arrow(text: str) -> tuple[int, int, ArrowType] | None:
    """Find the leftmost arrow literal in ``text``.

    Returns ``(start, end, arrow_type)`` or None. At each position the
    patterns are tried in priority order so that ``-->>`` is never read as
    ``-->`` followed by a stray ``>``.
    """
    for pos in range(len(text)):
        if text[pos] not in "-<":
            continue
        for token, arrow in ARROW_PATTERNS:
            if text.startswith(token, pos):
                return pos, pos + len(token), arrow
    return None


# ─── Keywords ────────────────────────────────────────────────────────────────

HEADER = "sequenceDiagram"
AUTONUMBER = "autonumber"
END = "end"

BLOCK_KEYWORDS: dict[str, BlockKind] = {
    "loop": BlockKind.Loop,
    "alt": BlockKind.Alt,
    "opt": BlockKind.Opt,
    "par": BlockKind.Par,
    "critical": BlockKind.Critical,
    "break": BlockKind.Break,
    "rect": BlockKind.Rect,
}

KEYWORD_FOR_BLOCK: dict[BlockKind, str] = {kind: word for word, kind in BLOCK_KEYWORDS.items()}

# Branch keyword -> the only block kind it may continue.
BRANCH_KEYWORDS: dict[str, BlockKind] = {
    "else": BlockKind.Alt,
    "and": BlockKind.Par,
    "option": BlockKind.Critical,
}

BRANCH_FOR_BLOCK: dict[BlockKind, str] = {kind: word for word, kind in BRANCH_KEYWORDS.items()}


# ─── Box colors ──────────────────────────────────────────────────────────────

CSS_COLOR_NAMES = frozenset(
    """
    aliceblue antiquewhite aqua aquamarine azure beige bisque black blanchedalmond blue
    blueviolet brown burlywood cadetblue chartreuse chocolate coral cornflowerblue cornsilk
    crimson cyan darkblue darkcyan darkgoldenrod darkgray darkgreen darkgrey darkkhaki
    darkmagenta darkolivegreen darkorange darkorchid darkred darksalmon darkseagreen
    darkslateblue darkslategray darkslategrey darkturquoise darkviolet deeppink deepskyblue
    dimgray dimgrey dodgerblue firebrick floralwhite forestgreen fuchsia gainsboro ghostwhite
    gold goldenrod gray green greenyellow grey honeydew hotpink indianred indigo ivory khaki
    lavender lavenderblush lawngreen lemonchiffon lightblue lightcoral lightcyan
    lightgoldenrodyellow lightgray lightgreen lightgrey lightpink lightsalmon lightseagreen
    lightskyblue lightslategray lightslategrey lightsteelblue lightyellow lime limegreen linen
    magenta maroon mediumaquamarine mediumblue mediumorchid mediumpurple mediumseagreen
    mediumslateblue mediumspringgreen mediumturquoise mediumvioletred midnightblue mintcream
    mistyrose moccasin navajowhite navy oldlace olive olivedrab orange orangered orchid
    palegoldenrod palegreen paleturquoise palevioletred papayawhip peachpuff peru pink plum
    powderblue purple rebeccapurple red rosybrown royalblue saddlebrown salmon sandybrown
    seagreen seashell sienna silver skyblue slateblue slategray slategrey snow springgreen
    steelblue tan teal thistle tomato turquoise violet wheat white whitesmoke yellow
    yellowgreen transparent
    """.split()
)

_COLOR_CALL_RE = re.compile(r"(?:rgba?|hsla?)\([^)]*\)|#[0-9a-fA-F]{3,8}(?![^\s])")
_COLOR_TOKEN_RE = re.compile(_COLOR_CALL_RE.pattern + r"|\S+")


def _leading_token(text: str) -> str:
    m = _COLOR_TOKEN_RE.match(text)
    return m.group(0) if m else ""


def split_color(text: str) -> tuple[str | None, str | None]:
    """Split ``[color] [label]`` into its parts.

    The leading token counts as a color only if it is a CSS color name,
    a ``#hex`` value or an ``rgb()``/``rgba()``/``hsl()``/``hsla()`` call.
    ``transparent`` in front of a label that itself starts with a color
    means no color: ``transparent Red Team`` is labelled ``Red Team``.
    """
    text = text.strip()
    if not text:
        return None, None
    token = _leading_token(text)
    if not is_color(token):
        return None, text
    rest = text[len(token) :].strip()
    if token.lower() == "transparent" and is_color(_leading_token(rest)):
        return None, rest
    return token, rest or None


def label_starts_with_color(label: str | None) -> bool:
    """True if ``label`` on its own would re-parse with its first word as the color."""
    if not label:
        return False
    return is_color(_leading_token(label.strip()))


def is_color(token: str) -> bool:
    if not token:
        return False
    if token.startswith("#") or token.endswith(")"):
        return _COLOR_CALL_RE.fullmatch(token) is not None
    return token.lower() in CSS_COLOR_NAMES


# ─── Text escaping ───────────────────────────────────────────────────────────

_END_WORD_RE = re.compile(r"\bend\b", re.IGNORECASE)
_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)


def normalize_text(text: str | None) -> str | None:
    """Canonical in-model form: stripped, newlines as ``<br>`` markers."""
    if text is None:
        return None
    return text.strip().replace("\r\n", "\n").replace("\n", "<br>")


def needs_quotes(text: str) -> bool:
    """True if the text would be misread on re-parse without quoting."""
    if _END_WORD_RE.search(text):
        return True
    return len(text) >= 2 and text.startswith('"') and text.endswith('"')


def escape_text(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\n", "<br>")
    if needs_quotes(text):
        return f'"{text}"'
    return text


def unescape_text(raw: str) -> str:
    """Inverse of :func:`escape_text` for an already-stripped source fragment."""
    if len(raw) >= 2 and raw.startswith('"') and raw.endswith('"'):
        return raw[1:-1]
    return raw


def split_lines(text: str) -> list[str]:
    """Split text on ``<br>`` line-break markers."""
    return _BR_RE.split(text)
