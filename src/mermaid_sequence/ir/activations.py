"""Activation spans — pair activate/deactivate points per participant.

Both the message shorthand flags (``->>+B``, ``-A->>B``) and standalone
``activate``/``deactivate`` directives count. Activations nest, so each
participant keeps its own stack and every span records its nesting depth.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from mermaid_sequence.ir.model import DiagramModel
from mermaid_sequence.types import DirectiveKind, StatementKind

logger = logging.getLogger(__name__)


@dataclass
class Activation:
    participant_id: str
    start_order: int
    end_order: int
    depth: int = 0

    def covers(self, order: int) -> bool:
        return self.start_order <= order <= self.end_order


def _events(model: DiagramModel) -> list[tuple[int, str, bool]]:
    """(order, participant_id, is_activate) in timeline order."""
    events: list[tuple[int, str, bool]] = []
    for item in model.timeline:
        if item.tag == StatementKind.Message:
            if item.activate_source:
                events.append((item.order, item.from_id, True))
            elif item.deactivate_source:
                events.append((item.order, item.from_id, False))
            if item.activate_target:
                events.append((item.order, item.to_id, True))
            elif item.deactivate_target:
                events.append((item.order, item.to_id, False))
        elif item.tag == StatementKind.Directive:
            if item.kind == DirectiveKind.Activate:
                events.append((item.order, item.participant_id, True))
            elif item.kind == DirectiveKind.Deactivate:
                events.append((item.order, item.participant_id, False))
    return events


def activation_spans(model: DiagramModel) -> list[Activation]:
    """All activation spans, sorted by start order then depth.

    A deactivate with nothing open is ignored; spans still open at the end
    run to ``len(model.timeline)``.
    """
    stacks: dict[str, list[Activation]] = {}
    spans: list[Activation] = []

    for order, pid, is_activate in _events(model):
        stack = stacks.setdefault(pid, [])
        if is_activate:
            span = Activation(participant_id=pid, start_order=order, end_order=-1, depth=len(stack))
            stack.append(span)
            spans.append(span)
        elif stack:
            stack.pop().end_order = order
        else:
            logger.debug("ignoring deactivate of inactive participant %s at order %d", pid, order)

    length = len(model.timeline)
    for span in spans:
        if span.end_order < 0:
            span.end_order = length

    spans.sort(key=lambda s: (s.start_order, s.depth))
    return spans


def active_at(model: DiagramModel, order: int) -> dict[str, int]:
    """Participant id -> activation depth count at ``order``."""
    counts: dict[str, int] = {}
    for span in activation_spans(model):
        if span.covers(order):
            counts[span.participant_id] = counts.get(span.participant_id, 0) + 1
    return counts
