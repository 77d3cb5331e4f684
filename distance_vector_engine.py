"""
Synchronous Bellman-Ford-style distance-vector engine.

Every node recomputes its whole vector from the same pre-round matrix, as if
all routers broadcast their vectors at once. Results are written into a
fresh matrix so no node sees another node's update within a round.
"""

import numpy as np

from algorithms import DistanceChange, DistanceVectorEngine, RelaxationPolicy, RoundOutcome
from routing_table import INF


class SynchronousDistanceVectorEngine(DistanceVectorEngine):
    """
    One relaxation round using direct neighbours only.
    """

    def relax(
        self,
        distances: np.ndarray,
        neighbors: np.ndarray,
        policy: RelaxationPolicy,
    ) -> RoundOutcome:
        """
        Relax every (node, destination) pair through the node's neighbours.

        For node i the candidate cost to j is the minimum over neighbours k
        of old[i][k] + old[k][j]. A node trusts whatever its neighbour
        currently advertises and has no idea which path that figure came
        from; after a failure this is exactly how two neighbours keep
        feeding each other stale routes. Destinations with no finite
        candidate get infinity.
        """
        old = distances
        n = old.shape[0]
        new = old.copy()
        outcome = RoundOutcome(distances=new, changed=False)

        for node in range(n):
            hops = np.flatnonzero(neighbors[node])
            if hops.size:
                # row r: cost via hops[r] to every destination; inf propagates
                via = old[node, hops][:, np.newaxis] + old[hops, :]
                best = via.min(axis=0)
            else:
                best = np.full(n, INF)
            best[node] = old[node, node]

            current = old[node]
            if policy is RelaxationPolicy.IMPROVE_ONLY:
                mask = best < current
            else:
                mask = best != current
            if not mask.any():
                continue

            outcome.changed = True
            new[node, mask] = best[mask]
            for dest in np.flatnonzero(mask):
                outcome.changes.append(
                    DistanceChange(
                        node=node,
                        destination=int(dest),
                        previous=float(current[dest]),
                        current=float(best[dest]),
                    )
                )

        return outcome
