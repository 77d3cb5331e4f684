"""
Count-to-infinity detection on a post-failure routing table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple
import math

import numpy as np

INFINITY_THRESHOLD = 100


@dataclass(frozen=True)
class AnomalyPair:
    """Ordered (node, destination) pair with a suspiciously large distance (0-based)."""
    node: int
    destination: int
    distance: float


@dataclass
class AnomalyReport:
    threshold: float
    pairs: List[AnomalyPair] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def labels(self) -> List[Tuple[int, int]]:
        """Flagged pairs as 1-based router labels."""
        return [(p.node + 1, p.destination + 1) for p in self.pairs]


def classify_count_to_infinity(
    distances: np.ndarray, threshold: float = INFINITY_THRESHOLD
) -> AnomalyReport:
    """
    Flag every i != j whose finite distance is at or above `threshold`.

    Infinity means "known unreachable" and is never flagged. This is a
    magnitude heuristic: a genuinely long finite path is flagged as well.
    """
    report = AnomalyReport(threshold=threshold)
    n = distances.shape[0]
    for i in range(n):
        for j in range(n):
            d = float(distances[i, j])
            if i != j and math.isfinite(d) and d >= threshold:
                report.pairs.append(AnomalyPair(i, j, d))
    return report


def find_rising_pairs(history: Iterable[np.ndarray], window: int = 3) -> List[Tuple[int, int]]:
    """
    Pairs whose finite distance strictly increased across the last `window`
    finite observations.

    Complements the threshold scan: catches counting that is still well
    below the threshold, and ignores long but stable paths. Rounds where the
    estimate was infinity are skipped, since count-to-infinity between two
    nodes typically alternates between a growing value and infinity.
    """
    if window < 2:
        raise ValueError(f"window must be >= 2, got {window}")
    matrices = list(history)
    if not matrices:
        return []

    n = matrices[0].shape[0]
    rising: List[Tuple[int, int]] = []
    for i in range(n):
        for j in range(n):
            if i == j:
                continue
            seen = [float(m[i, j]) for m in matrices if math.isfinite(m[i, j])]
            # Collapse repeats so a value held across rounds is not a rise.
            trail: List[float] = []
            for value in seen:
                if not trail or value != trail[-1]:
                    trail.append(value)
            tail = trail[-window:]
            if len(tail) == window and all(a < b for a, b in zip(tail, tail[1:])):
                rising.append((i, j))
    return rising
