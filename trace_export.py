"""
CSV export of per-round routing tables for offline analysis.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Tuple
import csv
import math

from convergence import ConvergenceResult
from simulation import SimulationReport

FIELDNAMES = ["phase", "round", "node", "destination", "distance"]


def _cell(value: float) -> object:
    return "inf" if math.isinf(value) else int(value)


def _rows(phase: str, result: ConvergenceResult) -> Iterable[dict]:
    for snap in result.history:
        n = snap.distances.shape[0]
        for i in range(n):
            for j in range(n):
                yield {
                    "phase": phase,
                    "round": snap.round,
                    "node": i + 1,
                    "destination": j + 1,
                    "distance": _cell(float(snap.distances[i, j])),
                }


def write_history_csv(path: Path, phases: Iterable[Tuple[str, ConvergenceResult]]) -> int:
    """
    Write one row per (phase, round, node, destination). Returns the row count.

    Node labels are 1-based; unreachable distances are written as "inf".
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        for phase, result in phases:
            for row in _rows(phase, result):
                writer.writerow(row)
                count += 1
    return count


def write_trace_csv(path: Path, report: SimulationReport) -> int:
    """Write both phases of a simulation report."""
    phases = [("initial", report.initial)]
    if report.reconvergence is not None:
        phases.append(("reconvergence", report.reconvergence))
    return write_history_csv(path, phases)
