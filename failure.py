"""
Single link-failure injection.

Only the failed link itself is touched. Multi-hop estimates that were routed
over it stay in the table until the next convergence run finds them stale.
"""

from __future__ import annotations

from dataclasses import dataclass

from errors import ValidationError
from routing_table import INF, RoutingTable
from topology import check_node_label


@dataclass(frozen=True)
class LinkFailure:
    """Link to take down, as 1-based router labels."""
    src: int
    dest: int


def inject_link_failure(table: RoutingTable, fail_src: int, fail_dest: int) -> LinkFailure:
    """
    Remove the direct link fail_src <-> fail_dest from the table in place.

    Both directed distances become infinity and both neighbour flags are
    cleared. Raises ValidationError, without modifying the table, if either
    label is out of range or the two nodes are not currently linked.
    """
    n = table.node_count
    src = check_node_label("fail_src", fail_src, n)
    dest = check_node_label("fail_dest", fail_dest, n)
    if src == dest:
        raise ValidationError("fail_dest", "a node cannot fail a link to itself")
    if not (table.is_neighbor(src, dest) and table.is_neighbor(dest, src)):
        raise ValidationError(
            "fail_dest", f"Node {fail_src} and Node {fail_dest} are not directly linked"
        )

    table.distances[src, dest] = INF
    table.distances[dest, src] = INF
    table.neighbors[src, dest] = False
    table.neighbors[dest, src] = False
    return LinkFailure(fail_src, fail_dest)
