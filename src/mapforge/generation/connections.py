"""Turn planned paths into graph edges."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mapforge.observability.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mapforge.graph.model import MapGraph, Path

log = get_logger(__name__)


def assemble_connections(graph: MapGraph, paths: Iterable[Path]) -> int:
    """Add one edge per consecutive pair of points on every path.

    Paths run from the boss downward, so each pair ``(upper, lower)``
    becomes the edge ``lower -> upper``. Shared segments collapse into a
    single edge.

    Returns:
        Number of distinct edges in the graph afterwards.
    """
    for path in paths:
        for upper, lower in zip(path, path[1:], strict=False):
            graph.add_edge(lower, upper)

    edge_count = len(graph.edges())
    log.debug("connections_assembled", edges=edge_count)
    return edge_count
