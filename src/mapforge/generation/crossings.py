"""Resolve crossing diagonal edges inside 2x2 cells.

A cell is the four nodes ``node=(i, j)``, ``right=(i+1, j)``,
``top=(i, j+1)`` and ``top_right=(i+1, j+1)``. When both diagonals
``node -> top_right`` and ``right -> top`` exist they cross. Both straight
edges are added first, then one or both diagonals are dropped at random.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from mapforge.graph.model import Point
from mapforge.observability.logging import get_logger

if TYPE_CHECKING:
    from random import Random

    from mapforge.graph.model import MapGraph

log = get_logger(__name__)

# Cumulative thresholds for the removal roll.
REMOVE_BOTH_BELOW = 0.2
REMOVE_RISING_BELOW = 0.6


@dataclass(frozen=True)
class CrossResolution:
    """What happened to one crossing cell.

    Attributes:
        cell: Lower-left corner of the cell.
        removed: Diagonals removed, as ``(from, to)`` pairs.
    """

    cell: Point
    removed: tuple[tuple[Point, Point], ...]


def _active_corners(graph: MapGraph, i: int, j: int) -> tuple[Point, Point, Point, Point] | None:
    corners = (Point(i, j), Point(i + 1, j), Point(i, j + 1), Point(i + 1, j + 1))
    for corner in corners:
        node = graph.node(corner)
        if node is None or not node.active:
            return None
    return corners


def find_cross_connections(graph: MapGraph) -> list[Point]:
    """Lower-left corners of every cell whose diagonals cross."""
    found = []
    for i in range(graph.width - 1):
        for j in range(graph.layer_count - 1):
            corners = _active_corners(graph, i, j)
            if corners is None:
                continue
            node, right, top, top_right = corners
            if graph.has_edge(node, top_right) and graph.has_edge(right, top):
                found.append(node)
    return found


def resolve_cross_connections(graph: MapGraph, rng: Random) -> list[CrossResolution]:
    """Remove crossings in one pass, columns outer and layers inner.

    Returns:
        One CrossResolution per crossing found.
    """
    resolutions = []
    for i in range(graph.width - 1):
        for j in range(graph.layer_count - 1):
            corners = _active_corners(graph, i, j)
            if corners is None:
                continue
            node, right, top, top_right = corners
            if not graph.has_edge(node, top_right) or not graph.has_edge(right, top):
                continue

            graph.add_edge(node, top)
            graph.add_edge(right, top_right)

            roll = rng.random()
            if roll < REMOVE_BOTH_BELOW:
                removed = ((node, top_right), (right, top))
            elif roll < REMOVE_RISING_BELOW:
                removed = ((node, top_right),)
            else:
                removed = ((right, top),)
            for from_point, to_point in removed:
                graph.remove_edge(from_point, to_point)

            resolutions.append(CrossResolution(cell=node, removed=removed))

    log.debug("cross_connections_resolved", count=len(resolutions))
    return resolutions
