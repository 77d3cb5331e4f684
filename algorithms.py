"""
Algorithm interfaces for distance-vector routing.

Keeps the relaxation rule separate from the convergence loop and the
simulation lifecycle.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List
import math

import numpy as np


class RelaxationPolicy(Enum):
    """
    When a recomputed distance replaces the current one.

    IMPROVE_ONLY: only strictly shorter distances are written. Used while
        converging a failure-free topology.
    TRACK_CHANGES: any different distance is written, so estimates may also
        grow. Used after a link failure; this is what lets stale routes
        count up toward infinity instead of freezing in place.
    """

    IMPROVE_ONLY = "improve_only"
    TRACK_CHANGES = "track_changes"


@dataclass(frozen=True)
class DistanceChange:
    """One table cell rewritten during a round (0-based indices)."""
    node: int
    destination: int
    previous: float
    current: float

    @property
    def worsened(self) -> bool:
        """True when a finite estimate got larger (or became unreachable)."""
        return math.isfinite(self.previous) and self.current > self.previous


@dataclass
class RoundOutcome:
    """
    Result of one synchronous round, before it is committed to a table.
    """
    distances: np.ndarray
    changed: bool
    changes: List[DistanceChange] = field(default_factory=list)

    @property
    def regressions(self) -> List[DistanceChange]:
        return [c for c in self.changes if c.worsened]


class DistanceVectorEngine(ABC):
    """
    Interface for one synchronous Bellman-Ford-style round over all nodes.
    """

    @abstractmethod
    def relax(
        self,
        distances: np.ndarray,
        neighbors: np.ndarray,
        policy: RelaxationPolicy,
    ) -> RoundOutcome:
        """
        Compute the next distance matrix from the current one.

        Args:
            distances: current N x N estimates (not modified).
            neighbors: N x N direct-link mask.
            policy: rule deciding which recomputed values are written.

        Returns:
            RoundOutcome holding the new matrix and every rewritten cell.
        """
        raise NotImplementedError
