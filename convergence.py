"""
Convergence loop for synchronous distance-vector routing.

Runs relaxation rounds over a RoutingTable until a round changes nothing or
the round cap is reached. Round 0 is the table as handed in (initial or
just after a failure); executed rounds are numbered from 1.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional
import warnings

import numpy as np

from algorithms import DistanceVectorEngine, RelaxationPolicy, RoundOutcome
from distance_vector_engine import SynchronousDistanceVectorEngine
from errors import ConvergenceCapped
from routing_table import RoutingTable

MAX_ROUNDS = 100


@dataclass(frozen=True)
class RoundSnapshot:
    """Full distance matrix as committed at the end of a round."""
    round: int
    distances: np.ndarray
    changed: bool


@dataclass(frozen=True)
class Regression:
    """
    A finite distance that got worse during a round (0-based indices).
    """
    round: int
    node: int
    destination: int
    previous: float
    current: float


@dataclass
class ConvergenceResult:
    policy: RelaxationPolicy
    rounds: int = 0
    capped: bool = False
    history: List[RoundSnapshot] = field(default_factory=list)
    regressions: List[Regression] = field(default_factory=list)

    @property
    def converged(self) -> bool:
        return not self.capped

    @property
    def final(self) -> np.ndarray:
        return self.history[-1].distances


RoundCallback = Callable[[RoundSnapshot], None]


class ConvergenceEngine:
    """
    Drives a DistanceVectorEngine to a fixed point.

    The table is mutated in place: each round's matrix replaces the previous
    one in a single assignment.
    """

    def __init__(
        self,
        engine: Optional[DistanceVectorEngine] = None,
        max_rounds: int = MAX_ROUNDS,
    ) -> None:
        if max_rounds < 1:
            raise ValueError(f"max_rounds must be >= 1, got {max_rounds}")
        self._engine = engine or SynchronousDistanceVectorEngine()
        self._max_rounds = max_rounds

    @property
    def max_rounds(self) -> int:
        return self._max_rounds

    def step(self, table: RoutingTable, policy: RelaxationPolicy) -> bool:
        """
        Run and commit a single round. Returns True if any entry changed.
        """
        return self._commit_round(table, policy).changed

    def run(
        self,
        table: RoutingTable,
        policy: RelaxationPolicy = RelaxationPolicy.IMPROVE_ONLY,
        on_round: Optional[RoundCallback] = None,
    ) -> ConvergenceResult:
        """
        Iterate until no entry changes or max_rounds rounds have run.

        Hitting the cap emits a ConvergenceCapped warning and sets
        result.capped; the table keeps whatever the last round produced.
        """
        result = ConvergenceResult(policy=policy)
        self._record(result, RoundSnapshot(0, table.snapshot(), False), on_round)

        while True:
            result.rounds += 1
            outcome = self._commit_round(table, policy)

            for change in outcome.regressions:
                result.regressions.append(
                    Regression(
                        round=result.rounds,
                        node=change.node,
                        destination=change.destination,
                        previous=change.previous,
                        current=change.current,
                    )
                )
            self._record(
                result,
                RoundSnapshot(result.rounds, table.snapshot(), outcome.changed),
                on_round,
            )

            if not outcome.changed:
                break
            if result.rounds >= self._max_rounds:
                result.capped = True
                warnings.warn(ConvergenceCapped(result.rounds), stacklevel=2)
                break

        return result

    def _commit_round(self, table: RoutingTable, policy: RelaxationPolicy) -> RoundOutcome:
        outcome = self._engine.relax(table.distances, table.neighbors, policy)
        table.distances = outcome.distances
        return outcome

    @staticmethod
    def _record(
        result: ConvergenceResult,
        snapshot: RoundSnapshot,
        on_round: Optional[RoundCallback],
    ) -> None:
        result.history.append(snapshot)
        if on_round is not None:
            on_round(snapshot)
