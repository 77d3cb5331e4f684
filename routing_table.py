"""
Routing table state shared by every node in a synchronous DVR run.

distances[i][j] is node i's current estimate of the cost to reach node j.
neighbors[i][j] is True iff a direct link currently joins i and j.
"""

from __future__ import annotations

from typing import List
import math

import numpy as np

INF: float = math.inf


class RoutingTable:
    """
    N x N distance matrix plus the direct-neighbour mask.

    Distances are stored as floats so that math.inf can mark unreachable
    destinations; finite entries always hold whole-number costs.
    """

    def __init__(self, distances: np.ndarray, neighbors: np.ndarray) -> None:
        if distances.shape != neighbors.shape or distances.ndim != 2:
            raise ValueError("distances and neighbors must be matching square matrices")
        if distances.shape[0] != distances.shape[1]:
            raise ValueError("routing table must be square")
        self.distances = distances
        self.neighbors = neighbors

    @classmethod
    def empty(cls, n: int) -> "RoutingTable":
        """Every node unreachable except itself; no links."""
        distances = np.full((n, n), INF, dtype=float)
        np.fill_diagonal(distances, 0.0)
        neighbors = np.zeros((n, n), dtype=bool)
        return cls(distances, neighbors)

    @property
    def node_count(self) -> int:
        return int(self.distances.shape[0])

    def distance(self, node: int, dest: int) -> float:
        return float(self.distances[node, dest])

    def is_neighbor(self, node: int, other: int) -> bool:
        return bool(self.neighbors[node, other])

    def neighbors_of(self, node: int) -> List[int]:
        """Indices of the nodes directly linked to `node`, ascending."""
        return [int(k) for k in np.flatnonzero(self.neighbors[node])]

    def set_link(self, a: int, b: int, cost: float) -> None:
        """Materialise an undirected link in both directions."""
        self.distances[a, b] = cost
        self.distances[b, a] = cost
        self.neighbors[a, b] = True
        self.neighbors[b, a] = True

    def snapshot(self) -> np.ndarray:
        """Independent copy of the distance matrix."""
        return self.distances.copy()

    def copy(self) -> "RoutingTable":
        return RoutingTable(self.distances.copy(), self.neighbors.copy())

    def is_symmetric(self) -> bool:
        # array_equal treats inf == inf as equal, which is what we want here
        return bool(np.array_equal(self.distances, self.distances.T))

    def __repr__(self) -> str:
        return f"RoutingTable(n={self.node_count})"
