"""
Human-readable output for routing tables and post-failure narration.

Display only: nothing here feeds back into the simulation.
"""

from __future__ import annotations

from typing import Iterable, List
import math

import numpy as np

from anomaly import INFINITY_THRESHOLD, AnomalyReport
from convergence import Regression

CELL_WIDTH = 5


def format_cell(value: float, large: float = INFINITY_THRESHOLD) -> str:
    if math.isinf(value):
        return "INF"
    if value >= large:
        return f"{int(large)}+"
    return str(int(value))


def format_table(distances: np.ndarray, iteration: int) -> str:
    n = distances.shape[0]
    lines: List[str] = [f"=== Iteration {iteration} ==="]
    lines.append("Node |" + "".join(f"N{i + 1}".rjust(CELL_WIDTH + 1) for i in range(n)))
    lines.append("-" * (CELL_WIDTH + 1) * (n + 1))
    for i in range(n):
        row = "".join(format_cell(float(v)).rjust(CELL_WIDTH + 1) for v in distances[i])
        lines.append(f"N{i + 1}".ljust(4) + " |" + row)
    return "\n".join(lines)


def format_regressions(regressions: Iterable[Regression]) -> str:
    lines: List[str] = []
    for r in regressions:
        new = "INF" if math.isinf(r.current) else str(int(r.current))
        lines.append(
            f"Round {r.round}: Node {r.node + 1} updated its distance to Node "
            f"{r.destination + 1}: {int(r.previous)} -> {new}"
        )
    return "\n".join(lines)


def format_anomalies(report: AnomalyReport) -> str:
    threshold = int(report.threshold)
    if not report:
        return f"No count-to-infinity problems detected (threshold: {threshold})."
    lines = [f"Nodes showing count-to-infinity pattern (threshold: {threshold}):"]
    for p in report.pairs:
        lines.append(
            f"Node {p.node + 1} to Node {p.destination + 1} (Current distance: {int(p.distance)})"
        )
    return "\n".join(lines)
