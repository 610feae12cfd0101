"""Interaction graph — converts a DiagramModel into a networkx MultiDiGraph.

Nodes are participants (in declaration order), edges are messages. Two
participants may exchange many messages, so every edge is keyed by the
message's timeline order.
"""

from __future__ import annotations

from dataclasses import dataclass

import networkx as nx

from mermaid_sequence.ir.model import DiagramModel, Message
from mermaid_sequence.types import ArrowType, ParticipantKind


@dataclass
class ParticipantData:
    id: str
    label: str
    kind: ParticipantKind
    explicit: bool
    box: str | None = None


@dataclass
class MessageData:
    order: int
    arrow: ArrowType
    text: str | None


class InteractionGraph:
    """Who-talks-to-whom view of a diagram.

    Wraps a networkx MultiDiGraph and exposes helpers for topology queries.
    """

    def __init__(self, digraph: nx.MultiDiGraph, noted: set[str]) -> None:
        self.digraph = digraph
        self.noted = noted

    @classmethod
    def from_model(cls, model: DiagramModel) -> InteractionGraph:
        """Build an InteractionGraph from a DiagramModel."""
        digraph: nx.MultiDiGraph = nx.MultiDiGraph()

        for participant in model.participants:
            box = model.box_of(participant.id)
            data = ParticipantData(
                id=participant.id,
                label=participant.display_label,
                kind=participant.kind,
                explicit=participant.explicit,
                box=box.label if box is not None else None,
            )
            digraph.add_node(participant.id, data=data)

        for message in model.messages():
            _add_message(digraph, message)

        noted = {pid for note in model.notes() for pid in note.target_ids}
        return cls(digraph=digraph, noted=noted)

    def participant_count(self) -> int:
        return self.digraph.number_of_nodes()

    def message_count(self) -> int:
        return self.digraph.number_of_edges()

    def in_degree(self, participant_id: str) -> int:
        if participant_id not in self.digraph:
            return 0
        return self.digraph.in_degree(participant_id)

    def out_degree(self, participant_id: str) -> int:
        if participant_id not in self.digraph:
            return 0
        return self.digraph.out_degree(participant_id)

    def isolated_participants(self) -> list[str]:
        """Participants that take part in no message and no note."""
        return [pid for pid in self.digraph.nodes if self.digraph.degree(pid) == 0 and pid not in self.noted]

    def interactions(self, from_id: str, to_id: str) -> list[MessageData]:
        """Messages sent from ``from_id`` to ``to_id``, in timeline order."""
        if not self.digraph.has_edge(from_id, to_id):
            return []
        edges = self.digraph.get_edge_data(from_id, to_id)
        return [edges[key]["data"] for key in sorted(edges)]

    def busiest_participant(self) -> str | None:
        """The participant with the most sent plus received messages; ties go to the earliest declared."""
        best: str | None = None
        best_degree = -1
        for pid in self.digraph.nodes:
            degree = self.digraph.degree(pid)
            if degree > best_degree:
                best, best_degree = pid, degree
        return best

    def adjacency_list(self) -> list[tuple[str, list[str]]]:
        result: list[tuple[str, list[str]]] = []
        for pid in self.digraph.nodes:
            neighbors = sorted(set(self.digraph.successors(pid)))
            result.append((pid, neighbors))
        result.sort(key=lambda x: x[0])
        return result


def _add_message(digraph: nx.MultiDiGraph, message: Message) -> None:
    for pid in (message.from_id, message.to_id):
        if pid not in digraph:
            digraph.add_node(pid, data=ParticipantData(id=pid, label=pid, kind=ParticipantKind.Participant, explicit=False))
    data = MessageData(order=message.order, arrow=message.arrow, text=message.text)
    digraph.add_edge(message.from_id, message.to_id, key=message.order, data=data)
