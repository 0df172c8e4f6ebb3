"""Map generation pipeline.

Runs the stages in order on a fresh graph:

1. build      - allocate nodes, assign blueprints
2. paths      - place the boss, walk paths down to layer 0
3. connect    - turn paths into edges
4. crossings  - resolve crossing diagonals
5. finalize   - prune isolated nodes, open layer 0

All randomness comes from one injected ``random.Random``; a fixed seed
reproduces the same map, retry loop included.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from random import Random
from typing import TYPE_CHECKING

from mapforge.config import MapConfig, MapConfigError
from mapforge.generation.builder import build_graph
from mapforge.generation.connections import assemble_connections
from mapforge.generation.crossings import CrossResolution, resolve_cross_connections
from mapforge.generation.finalize import finalize_graph
from mapforge.generation.paths import PathDiagnostics, plan_paths
from mapforge.observability.logging import get_logger

if TYPE_CHECKING:
    from mapforge.graph.model import MapGraph, Path, Point

log = get_logger(__name__)


@dataclass
class GeneratedMap:
    """A finished map and the bookkeeping that produced it."""

    config: MapConfig
    graph: MapGraph
    boss: Point
    paths: tuple[Path, ...]
    diagnostics: PathDiagnostics
    seed: int | None = None
    cross_resolutions: list[CrossResolution] = field(default_factory=list)

    @property
    def starting_nodes(self) -> list[Point]:
        return [n.point for n in self.graph.layer_nodes(0) if n.active]


def generate_map(config: MapConfig | None, rng: Random, *, seed: int | None = None) -> GeneratedMap:
    """Run every stage once against a new graph.

    Args:
        config: Map configuration.
        rng: Source of all randomness for this run.
        seed: Seed *rng* was created from, recorded on the result only.

    Returns:
        The generated map.

    Raises:
        MapConfigError: If *config* is missing or unusable.
    """
    config = _require_config(config)

    log.info(
        "generation_started",
        config=config.name,
        width=config.grid_width,
        layers=config.layer_count,
        seed=seed,
    )

    graph = build_graph(config, rng)
    log.debug("stage_completed", stage="build")

    plan = plan_paths(config, rng)
    log.debug("stage_completed", stage="paths", paths=len(plan.paths))

    assemble_connections(graph, plan.paths)
    log.debug("stage_completed", stage="connect")

    resolutions = resolve_cross_connections(graph, rng)
    log.debug("stage_completed", stage="crossings", resolved=len(resolutions))

    finalize_graph(graph)
    log.debug("stage_completed", stage="finalize")

    result = GeneratedMap(
        config=config,
        graph=graph,
        boss=plan.boss,
        paths=plan.paths,
        diagnostics=plan.diagnostics,
        seed=seed,
        cross_resolutions=resolutions,
    )
    log.info(
        "generation_completed",
        config=config.name,
        active_nodes=sum(1 for _ in graph.active_nodes()),
        edges=len(graph.edges()),
        starting_nodes=len(result.starting_nodes),
    )
    return result


def _require_config(config: MapConfig | None) -> MapConfig:
    if config is None:
        raise MapConfigError(None, "No config provided")
    if not isinstance(config, MapConfig):
        raise MapConfigError(None, f"Expected MapConfig, got {type(config).__name__}")
    # model_construct() skips validation, so re-check what the stages rely on
    if config.grid_width < 1:
        raise MapConfigError(None, f"grid_width must be >= 1, got {config.grid_width}")
    if not config.layers:
        raise MapConfigError(None, "At least one layer is required")
    return config


class MapGenerator:
    """Reusable generator bound to one config.

    With a *seed* every ``generate()`` call starts from ``Random(seed)`` and
    returns the same map. With an explicit *rng* the caller owns the stream
    and successive calls continue it.
    """

    def __init__(
        self,
        config: MapConfig | None,
        *,
        seed: int | None = None,
        rng: Random | None = None,
    ) -> None:
        if seed is not None and rng is not None:
            raise ValueError("Pass either seed or rng, not both")
        self.config = _require_config(config)
        self.seed = seed
        self._rng = rng

    def generate(self) -> GeneratedMap:
        """Discard any previous state and build a new map."""
        if self.seed is not None:
            rng = Random(self.seed)
        elif self._rng is not None:
            rng = self._rng
        else:
            rng = Random()
        return generate_map(self.config, rng, seed=self.seed)
