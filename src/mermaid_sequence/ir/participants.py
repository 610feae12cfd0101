"""Ordered registry of participant ids.

Explicit ``participant``/``actor`` declarations and implicit registration
on first reference both go through here. The first registration of an id
fixes its position in the ordering. Later declarations update kind and
label in place.
"""

from __future__ import annotations

import logging

from mermaid_sequence.ir.model import Participant
from mermaid_sequence.types import ParticipantKind

logger = logging.getLogger(__name__)


class ParticipantResolver:
    def __init__(self) -> None:
        self._by_id: dict[str, Participant] = {}

    def __contains__(self, participant_id: str) -> bool:
        return participant_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, participant_id: str) -> Participant | None:
        return self._by_id.get(participant_id)

    def declare(
        self,
        participant_id: str,
        kind: ParticipantKind = ParticipantKind.Participant,
        label: str | None = None,
        explicit: bool = True,
    ) -> Participant:
        """Register or update a participant from a declaration."""
        if not participant_id:
            raise ValueError("participant id must not be empty")
        existing = self._by_id.get(participant_id)
        if existing is None:
            participant = Participant(id=participant_id, kind=kind, label=label, explicit=explicit)
            self._by_id[participant_id] = participant
            return participant
        existing.kind = kind
        if label is not None:
            existing.label = label
        existing.explicit = existing.explicit or explicit
        return existing

    def resolve_or_register(self, participant_id: str) -> Participant:
        """Return the participant for ``participant_id``, registering it implicitly if unseen."""
        existing = self._by_id.get(participant_id)
        if existing is not None:
            return existing
        if not participant_id:
            raise ValueError("participant id must not be empty")
        logger.debug("implicitly registering participant %r", participant_id)
        participant = Participant.implicit(participant_id)
        self._by_id[participant_id] = participant
        return participant

    def participants(self) -> list[Participant]:
        """All participants in first-registration order."""
        return list(self._by_id.values())
