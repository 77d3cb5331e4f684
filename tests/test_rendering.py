import math

import numpy as np

from anomaly import classify_count_to_infinity
from convergence import Regression
from rendering import format_anomalies, format_cell, format_regressions, format_table


def test_format_cell_markers():
    assert format_cell(math.inf) == "INF"
    assert format_cell(100.0) == "100+"
    assert format_cell(250.0) == "100+"
    assert format_cell(7.0) == "7"
    assert format_cell(0.0) == "0"


def test_format_table_layout():
    distances = np.array([[0.0, 1.0], [math.inf, 0.0]])

    lines = format_table(distances, 3).splitlines()

    assert lines[0] == "=== Iteration 3 ==="
    assert lines[1] == "Node |    N1    N2"
    assert lines[2] == "-" * 18
    assert lines[3] == "N1   |     0     1"
    assert lines[4] == "N2   |   INF     0"


def test_format_regressions_uses_one_based_labels():
    text = format_regressions([Regression(round=2, node=1, destination=0, previous=3.0, current=math.inf)])
    assert text == "Round 2: Node 2 updated its distance to Node 1: 3 -> INF"


def test_format_anomalies_empty_and_flagged():
    clean = classify_count_to_infinity(np.array([[0.0, math.inf], [math.inf, 0.0]]))
    assert format_anomalies(clean) == "No count-to-infinity problems detected (threshold: 100)."

    flagged = classify_count_to_infinity(np.array([[0.0, 1.0], [102.0, 0.0]]))
    assert format_anomalies(flagged).splitlines() == [
        "Nodes showing count-to-infinity pattern (threshold: 100):",
        "Node 2 to Node 1 (Current distance: 102)",
    ]
