"""Layered map graph.

The graph is an arena of ``MapNode`` records indexed by ``Point`` (column,
layer). Its shape is fixed when it is built; later stages only toggle the
active flag and add or remove edges. Edges always point from layer ``y`` to
layer ``y + 1`` and are stored on both endpoints, so every mutation goes
through ``MapGraph.add_edge`` / ``MapGraph.remove_edge``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from mapforge.graph.errors import EdgeEndpointError, EdgeLayerError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from mapforge.config import NodeBlueprint


@dataclass(frozen=True, order=True)
class Point:
    """Grid coordinate: ``x`` is the column, ``y`` the layer."""

    x: int
    y: int

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


Path = tuple[Point, ...]


class NodeState(StrEnum):
    """Player-facing state of a node.

    Generation only produces UNVISITED and ATTAINABLE; the other states
    belong to whoever drives play on the finished map.
    """

    LOCKED = "locked"
    UNVISITED = "unvisited"
    ATTAINABLE = "attainable"
    VISITED = "visited"


@dataclass(eq=False)
class MapNode:
    """One (column, layer) slot of the map."""

    point: Point
    blueprint: NodeBlueprint | None = None
    active: bool = True
    state: NodeState = NodeState.UNVISITED
    _outgoing: set[Point] = field(default_factory=set, repr=False)
    _incoming: set[Point] = field(default_factory=set, repr=False)

    @property
    def layer(self) -> int:
        return self.point.y

    @property
    def column(self) -> int:
        return self.point.x

    @property
    def outgoing(self) -> frozenset[Point]:
        """Coordinates this node leads to (one layer up)."""
        return frozenset(self._outgoing)

    @property
    def incoming(self) -> frozenset[Point]:
        """Coordinates leading into this node (one layer down)."""
        return frozenset(self._incoming)

    def has_no_connections(self) -> bool:
        return not self._outgoing and not self._incoming


class MapGraph:
    """Fixed ``[layer_count][width]`` grid of nodes plus forward edges."""

    def __init__(self, width: int, layer_count: int) -> None:
        if width < 1:
            raise ValueError(f"width must be >= 1, got {width}")
        if layer_count < 1:
            raise ValueError(f"layer_count must be >= 1, got {layer_count}")
        self.width = width
        self.layer_count = layer_count
        self._layers: list[list[MapNode]] = [
            [MapNode(Point(x, y)) for x in range(width)] for y in range(layer_count)
        ]

    def __repr__(self) -> str:
        return f"MapGraph(width={self.width}, layer_count={self.layer_count})"

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    @property
    def layers(self) -> list[list[MapNode]]:
        """Nodes grouped by layer, bottom layer first."""
        return [list(layer) for layer in self._layers]

    def contains(self, point: Point) -> bool:
        return 0 <= point.y < self.layer_count and 0 <= point.x < self.width

    def node(self, point: Point) -> MapNode | None:
        """Return the node at *point*, or None outside the grid."""
        if not self.contains(point):
            return None
        return self._layers[point.y][point.x]

    def nodes(self) -> Iterator[MapNode]:
        """Iterate over every node, layer by layer."""
        for layer in self._layers:
            yield from layer

    def active_nodes(self) -> Iterator[MapNode]:
        return (n for n in self.nodes() if n.active)

    def layer_nodes(self, layer: int) -> list[MapNode]:
        return list(self._layers[layer])

    # -------------------------------------------------------------------------
    # Edges
    # -------------------------------------------------------------------------

    def has_edge(self, from_point: Point, to_point: Point) -> bool:
        node = self.node(from_point)
        return node is not None and to_point in node._outgoing

    def add_edge(self, from_point: Point, to_point: Point) -> None:
        """Connect *from_point* to *to_point* on both endpoints.

        Adding an existing edge is a no-op.

        Raises:
            EdgeEndpointError: If either endpoint lies outside the grid.
            EdgeLayerError: If *to_point* is not exactly one layer above.
        """
        source = self.node(from_point)
        target = self.node(to_point)
        if source is None or target is None:
            if source is None and target is None:
                missing = "both"
            elif source is None:
                missing = "from"
            else:
                missing = "to"
            raise EdgeEndpointError(from_point=from_point, to_point=to_point, missing=missing)
        if to_point.y != from_point.y + 1:
            raise EdgeLayerError(from_point=from_point, to_point=to_point)

        source._outgoing.add(to_point)
        target._incoming.add(from_point)

    def remove_edge(self, from_point: Point, to_point: Point) -> None:
        """Disconnect *from_point* from *to_point*; missing edges are ignored."""
        source = self.node(from_point)
        target = self.node(to_point)
        if source is not None:
            source._outgoing.discard(to_point)
        if target is not None:
            target._incoming.discard(from_point)

    def edges(self) -> list[tuple[Point, Point]]:
        """All edges as ``(from, to)`` pairs, sorted."""
        return sorted((node.point, target) for node in self.nodes() for target in node._outgoing)
