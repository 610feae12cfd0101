"""LIFO stack of open block and box frames.

Turns flat block-start / branch / end statements into proper nesting.
Frames unwind in strict LIFO order; a branch keyword is only valid when the
innermost frame is a block of the matching kind.
"""

from __future__ import annotations

from dataclasses import dataclass

from mermaid_sequence.errors import InvalidBranchError, UnbalancedBlockError
from mermaid_sequence.grammar import BRANCH_KEYWORDS, KEYWORD_FOR_BLOCK
from mermaid_sequence.ir.model import Box, ControlStructure


@dataclass
class Frame:
    """One open ``block … end`` or ``box … end`` region."""

    block: ControlStructure | None = None
    box: Box | None = None
    line: int | None = None

    @property
    def is_box(self) -> bool:
        return self.block is None

    @property
    def keyword(self) -> str:
        if self.block is None:
            return "box"
        return KEYWORD_FOR_BLOCK[self.block.kind]


class BlockStack:
    def __init__(self) -> None:
        self._frames: list[Frame] = []

    def __len__(self) -> int:
        return len(self._frames)

    @property
    def top(self) -> Frame | None:
        return self._frames[-1] if self._frames else None

    def innermost_block(self) -> Frame | None:
        """The innermost frame that is a block (not a box)."""
        for frame in reversed(self._frames):
            if not frame.is_box:
                return frame
        return None

    def innermost_box(self) -> Frame | None:
        for frame in reversed(self._frames):
            if frame.is_box:
                return frame
        return None

    def push(self, frame: Frame) -> None:
        self._frames.append(frame)

    def branch(self, keyword: str) -> Frame:
        """Validate a branch keyword against the innermost frame and return it."""
        expected = BRANCH_KEYWORDS.get(keyword)
        if expected is None:
            raise ValueError(f"not a branch keyword: {keyword!r}")
        top = self.top
        wanted = KEYWORD_FOR_BLOCK[expected]
        if top is None:
            raise InvalidBranchError(f"'{keyword}' outside any block; it is only valid inside '{wanted}'")
        if top.block is None or top.block.kind != expected:
            raise InvalidBranchError(f"'{keyword}' is only valid inside '{wanted}', not '{top.keyword}'")
        return top

    def pop(self) -> Frame:
        if not self._frames:
            raise UnbalancedBlockError("'end' without an open block")
        return self._frames.pop()

    def frames(self) -> list[Frame]:
        """Open frames, innermost first, without removing them."""
        return list(reversed(self._frames))
