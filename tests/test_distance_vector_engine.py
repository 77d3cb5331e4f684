import math

import numpy as np

from algorithms import RelaxationPolicy
from distance_vector_engine import SynchronousDistanceVectorEngine
from routing_table import INF
from topology import Topology


def _line3():
    return Topology.from_triples(3, [(1, 2, 1), (2, 3, 1)]).initial_table()


def test_relax_learns_two_hop_route_via_neighbour():
    """Node 1 should reach node 3 through node 2 after one round."""
    table = _line3()
    dv = SynchronousDistanceVectorEngine()

    outcome = dv.relax(table.distances, table.neighbors, RelaxationPolicy.IMPROVE_ONLY)

    assert outcome.changed
    assert outcome.distances[0, 2] == 2.0  # 1 + 1
    assert outcome.distances[2, 0] == 2.0
    assert {(c.node, c.destination) for c in outcome.changes} == {(0, 2), (2, 0)}


def test_relax_does_not_mutate_input_matrix():
    table = _line3()
    before = table.snapshot()
    dv = SynchronousDistanceVectorEngine()

    dv.relax(table.distances, table.neighbors, RelaxationPolicy.IMPROVE_ONLY)

    assert np.array_equal(table.distances, before)


def test_relax_chooses_best_from_multiple_neighbours():
    """Choose the cheapest neighbour per destination when several compete."""
    # 1-2 (1), 1-3 (5), 2-4 (10), 3-4 (1)
    table = Topology.from_triples(4, [(1, 2, 1), (1, 3, 5), (2, 4, 10), (3, 4, 1)]).initial_table()
    dv = SynchronousDistanceVectorEngine()

    outcome = dv.relax(table.distances, table.neighbors, RelaxationPolicy.IMPROVE_ONLY)

    # node 1 -> 4: min(1 + 10 via 2, 5 + 1 via 3)
    assert outcome.distances[0, 3] == 6.0


def test_relax_only_uses_direct_neighbours():
    """A finite estimate held by a non-neighbour must not be used."""
    table = Topology.from_triples(3, [(1, 2, 4)]).initial_table()
    # Node 3 claims to know node 2, but node 1 is not linked to node 3.
    table.distances[2, 1] = 1.0
    dv = SynchronousDistanceVectorEngine()

    outcome = dv.relax(table.distances, table.neighbors, RelaxationPolicy.IMPROVE_ONLY)

    assert outcome.distances[0, 1] == 4.0
    assert math.isinf(outcome.distances[0, 2])


def test_improve_only_never_raises_a_distance():
    table = _line3()
    table.distances[0, 2] = 1.0  # optimistic, cannot be justified by neighbours
    dv = SynchronousDistanceVectorEngine()

    outcome = dv.relax(table.distances, table.neighbors, RelaxationPolicy.IMPROVE_ONLY)

    assert outcome.distances[0, 2] == 1.0
    assert outcome.regressions == []


def test_track_changes_lets_distances_worsen():
    table = _line3()
    table.distances[0, 2] = 1.0
    dv = SynchronousDistanceVectorEngine()

    outcome = dv.relax(table.distances, table.neighbors, RelaxationPolicy.TRACK_CHANGES)

    assert outcome.distances[0, 2] == 2.0
    [regression] = outcome.regressions
    assert (regression.node, regression.destination) == (0, 2)
    assert (regression.previous, regression.current) == (1.0, 2.0)


def test_isolated_node_loses_stale_routes_under_track_changes():
    """With no neighbours left every remote destination becomes unreachable."""
    table = _line3()
    table.distances[0, 2] = 2.0
    table.distances[0, 1] = INF
    table.distances[1, 0] = INF
    table.neighbors[0, 1] = False
    table.neighbors[1, 0] = False
    dv = SynchronousDistanceVectorEngine()

    outcome = dv.relax(table.distances, table.neighbors, RelaxationPolicy.TRACK_CHANGES)

    assert outcome.distances[0, 0] == 0.0
    assert math.isinf(outcome.distances[0, 2])
    # finite -> unreachable counts as a regression
    assert any(r.node == 0 and r.destination == 2 for r in outcome.regressions)


def test_self_distance_is_never_rewritten():
    table = _line3()
    dv = SynchronousDistanceVectorEngine()

    for policy in RelaxationPolicy:
        outcome = dv.relax(table.distances, table.neighbors, policy)
        assert np.all(np.diag(outcome.distances) == 0.0)
        assert all(c.node != c.destination for c in outcome.changes)
