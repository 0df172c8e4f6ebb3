"""Graph package - the layered map graph and its error types."""

from mapforge.graph.errors import (
    EdgeEndpointError,
    EdgeLayerError,
    MapGraphError,
    WalkPreconditionError,
)
from mapforge.graph.model import MapGraph, MapNode, NodeState, Path, Point

__all__ = [
    "EdgeEndpointError",
    "EdgeLayerError",
    "MapGraph",
    "MapGraphError",
    "MapNode",
    "NodeState",
    "Path",
    "Point",
    "WalkPreconditionError",
]
