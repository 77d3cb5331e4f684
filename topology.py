"""
Static router topology: node count plus undirected weighted edges.

Edge endpoints are 1-based, matching how routers are labelled in input and
output ("Node 1" .. "Node N"). The routing table is 0-based internally.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence, Tuple
import numbers

from errors import ValidationError
from routing_table import RoutingTable


@dataclass(frozen=True)
class Edge:
    """Undirected link between two routers (1-based labels)."""
    src: int
    dest: int
    cost: int


def _is_int(value: object) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def check_node_label(name: str, label: object, node_count: int) -> int:
    """
    Validate a 1-based router label and return the 0-based index.
    """
    if not _is_int(label):
        raise ValidationError(name, f"expected an integer node label, got {label!r}")
    if not 1 <= label <= node_count:  # type: ignore[operator]
        raise ValidationError(name, f"node {label} is outside [1, {node_count}]")
    return int(label) - 1  # type: ignore[arg-type]


@dataclass(frozen=True)
class Topology:
    """
    Validated network description.

    Duplicate edges are allowed; when the table is built the last one wins.
    """
    node_count: int
    edges: Tuple[Edge, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not _is_int(self.node_count) or self.node_count < 1:
            raise ValidationError("node_count", f"expected an integer >= 1, got {self.node_count!r}")
        # Accept any sequence but store an immutable tuple.
        object.__setattr__(self, "edges", tuple(self.edges))
        for idx, edge in enumerate(self.edges):
            prefix = f"edges[{idx}]"
            src = check_node_label(f"{prefix}.src", edge.src, self.node_count)
            dest = check_node_label(f"{prefix}.dest", edge.dest, self.node_count)
            if src == dest:
                raise ValidationError(f"{prefix}.dest", "self-loops are not allowed")
            if not _is_int(edge.cost):
                raise ValidationError(f"{prefix}.cost", f"expected an integer cost, got {edge.cost!r}")
            if edge.cost < 0:
                raise ValidationError(f"{prefix}.cost", f"cost must be non-negative, got {edge.cost}")

    @classmethod
    def from_triples(cls, node_count: int, triples: Iterable[Sequence[int]]) -> "Topology":
        """Build from plain (src, dest, cost) triples."""
        edges = []
        for idx, triple in enumerate(triples):
            if len(triple) != 3:
                raise ValidationError(f"edges[{idx}]", f"expected (src, dest, cost), got {tuple(triple)!r}")
            src, dest, cost = triple
            edges.append(Edge(src, dest, cost))
        return cls(node_count, tuple(edges))

    def initial_table(self) -> RoutingTable:
        """
        Routing table before any exchange: direct links only.

        Each edge sets both directed distances and both neighbour flags;
        every other entry is infinity except the zero diagonal.
        """
        table = RoutingTable.empty(self.node_count)
        for edge in self.edges:
            table.set_link(edge.src - 1, edge.dest - 1, float(edge.cost))
        return table
