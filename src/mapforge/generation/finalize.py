"""Prune untouched nodes and open the first layer."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mapforge.graph.model import NodeState
from mapforge.observability.logging import get_logger

if TYPE_CHECKING:
    from mapforge.graph.model import MapGraph

log = get_logger(__name__)


def prune_isolated_nodes(graph: MapGraph) -> int:
    """Deactivate every node without incoming or outgoing edges.

    Returns:
        Number of nodes deactivated.
    """
    pruned = 0
    for node in graph.nodes():
        if node.has_no_connections():
            node.active = False
            pruned += 1
    return pruned


def mark_starting_nodes(graph: MapGraph) -> int:
    """Make every active layer-0 node attainable.

    Returns:
        Number of starting nodes.
    """
    starting = 0
    for node in graph.layer_nodes(0):
        if node.active:
            node.state = NodeState.ATTAINABLE
            starting += 1
    return starting


def finalize_graph(graph: MapGraph) -> None:
    pruned = prune_isolated_nodes(graph)
    starting = mark_starting_nodes(graph)
    log.debug("graph_finalized", pruned=pruned, starting_nodes=starting)
