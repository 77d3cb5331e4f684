"""
Two-phase DVR simulation: converge, fail one link, re-converge, classify.

The lifecycle is an explicit state machine so each reporting boundary can be
driven and tested on its own:

    INITIAL -> CONVERGING -> CONVERGED -> FAILED -> RECONVERGING -> TERMINAL
                                  \\-------------------------------> TERMINAL
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from algorithms import DistanceVectorEngine, RelaxationPolicy
from anomaly import INFINITY_THRESHOLD, AnomalyReport, classify_count_to_infinity, find_rising_pairs
from convergence import MAX_ROUNDS, ConvergenceEngine, ConvergenceResult, RoundCallback
from errors import SimulationStateError
from failure import LinkFailure, inject_link_failure
from routing_table import RoutingTable
from topology import Topology


class SimulationPhase(Enum):
    INITIAL = "initial"
    CONVERGING = "converging"
    CONVERGED = "converged"
    FAILED = "failed"
    RECONVERGING = "reconverging"
    TERMINAL = "terminal"


@dataclass
class SimulationReport:
    """
    Everything a caller needs to narrate a run.

    failure, reconvergence and anomalies are None when no link was failed.
    """
    initial: ConvergenceResult
    failure: Optional[LinkFailure] = None
    reconvergence: Optional[ConvergenceResult] = None
    anomalies: Optional[AnomalyReport] = None
    rising: List[Tuple[int, int]] = field(default_factory=list)


class DVRSimulation:
    """
    Owns one RoutingTable for the whole run and mutates it in place.
    """

    def __init__(
        self,
        topology: Topology,
        engine: Optional[DistanceVectorEngine] = None,
        max_rounds: int = MAX_ROUNDS,
        threshold: float = INFINITY_THRESHOLD,
        on_round: Optional[RoundCallback] = None,
    ) -> None:
        self._topology = topology
        self._convergence = ConvergenceEngine(engine, max_rounds=max_rounds)
        self._threshold = threshold
        self._on_round = on_round
        self._table: RoutingTable = topology.initial_table()
        self._phase = SimulationPhase.INITIAL
        self._initial: Optional[ConvergenceResult] = None
        self._failure: Optional[LinkFailure] = None
        self._report: Optional[SimulationReport] = None

    @property
    def phase(self) -> SimulationPhase:
        return self._phase

    @property
    def table(self) -> RoutingTable:
        return self._table

    @property
    def topology(self) -> Topology:
        return self._topology

    @property
    def report(self) -> Optional[SimulationReport]:
        """Final report once TERMINAL, else None."""
        return self._report

    # --- Lifecycle -----------------------------------------------------------

    def converge(self) -> ConvergenceResult:
        """Converge the failure-free topology (strict-improvement policy)."""
        self._require(SimulationPhase.INITIAL, "converge")
        self._phase = SimulationPhase.CONVERGING
        self._initial = self._convergence.run(
            self._table, RelaxationPolicy.IMPROVE_ONLY, on_round=self._on_round
        )
        self._phase = SimulationPhase.CONVERGED
        return self._initial

    def fail_link(self, fail_src: int, fail_dest: int) -> LinkFailure:
        """Take down one direct link (1-based labels)."""
        self._require(SimulationPhase.CONVERGED, "fail_link")
        self._failure = inject_link_failure(self._table, fail_src, fail_dest)
        self._phase = SimulationPhase.FAILED
        return self._failure

    def reconverge(self) -> SimulationReport:
        """
        Re-converge after the failure, letting distances grow, then classify.
        """
        self._require(SimulationPhase.FAILED, "reconverge")
        assert self._initial is not None
        self._phase = SimulationPhase.RECONVERGING
        result = self._convergence.run(
            self._table, RelaxationPolicy.TRACK_CHANGES, on_round=self._on_round
        )
        self._report = SimulationReport(
            initial=self._initial,
            failure=self._failure,
            reconvergence=result,
            anomalies=classify_count_to_infinity(self._table.distances, self._threshold),
            rising=find_rising_pairs(s.distances for s in result.history),
        )
        self._phase = SimulationPhase.TERMINAL
        return self._report

    def finish(self) -> SimulationReport:
        """End the run without a failure."""
        self._require(SimulationPhase.CONVERGED, "finish")
        assert self._initial is not None
        self._report = SimulationReport(initial=self._initial)
        self._phase = SimulationPhase.TERMINAL
        return self._report

    def run(self, failure: Optional[Tuple[int, int]] = None) -> SimulationReport:
        """Drive the whole lifecycle; `failure` is an optional 1-based link."""
        self.converge()
        if failure is None:
            return self.finish()
        self.fail_link(*failure)
        return self.reconverge()

    # --- Internal helpers ----------------------------------------------------

    def _require(self, expected: SimulationPhase, action: str) -> None:
        if self._phase is not expected:
            raise SimulationStateError(
                f"cannot {action} in phase {self._phase.value}; expected {expected.value}"
            )
