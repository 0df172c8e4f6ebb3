"""Graph error types.

These errors signal a caller bug: the pipeline's own call sites never
trigger them on a well-formed config.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mapforge.graph.model import Point


class MapGraphError(Exception):
    """Base class for map graph violations."""


@dataclass
class EdgeEndpointError(MapGraphError):
    """Raised when an edge references a coordinate outside the grid.

    Attributes:
        from_point: Source coordinate.
        to_point: Target coordinate.
        missing: Which endpoint is missing ("from", "to", or "both").
    """

    from_point: Point
    to_point: Point
    missing: str  # "from", "to", or "both"

    def __post_init__(self) -> None:
        if self.missing == "both":
            msg = f"Edge endpoints not found: {self.from_point} and {self.to_point}"
        elif self.missing == "from":
            msg = f"Edge source not found: {self.from_point}"
        else:
            msg = f"Edge target not found: {self.to_point}"
        super().__init__(msg)


@dataclass
class EdgeLayerError(MapGraphError):
    """Raised when an edge does not go exactly one layer up."""

    from_point: Point
    to_point: Point

    def __post_init__(self) -> None:
        super().__init__(
            f"Edge {self.from_point} -> {self.to_point} must connect layer "
            f"{self.from_point.y} to layer {self.from_point.y + 1}"
        )


@dataclass
class WalkPreconditionError(MapGraphError, ValueError):
    """Raised when a random walk is asked to stay on its own layer."""

    start: Point
    to_y: int

    def __post_init__(self) -> None:
        super().__init__(
            f"Walk from {self.start} to layer {self.to_y}: points are on the same layer"
        )
