"""Allocate the node grid and assign blueprints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mapforge.graph.model import MapGraph
from mapforge.observability.logging import get_logger

if TYPE_CHECKING:
    from random import Random

    from mapforge.config import MapConfig, NodeBlueprint

log = get_logger(__name__)


def pick_random_blueprint(pool: list[NodeBlueprint], rng: Random) -> NodeBlueprint | None:
    """Uniform draw from *pool*; an empty pool yields no blueprint."""
    if not pool:
        return None
    return rng.choice(pool)


def build_graph(config: MapConfig, rng: Random) -> MapGraph:
    """Create an edge-free ``[layers][grid_width]`` graph.

    Each node rolls independently: with probability ``randomize_nodes`` of
    its layer it takes a blueprint from the random pool, otherwise the
    layer's default blueprint.
    """
    graph = MapGraph(config.grid_width, config.layer_count)
    pool = config.random_pool()
    randomized = 0

    for layer_index, layer in enumerate(config.layers):
        default = config.get_blueprint(layer.node)
        for node in graph.layer_nodes(layer_index):
            if rng.random() < layer.randomize_nodes:
                node.blueprint = pick_random_blueprint(pool, rng)
                randomized += 1
            else:
                node.blueprint = default

    log.debug(
        "graph_built",
        width=graph.width,
        layers=graph.layer_count,
        randomized_nodes=randomized,
    )
    return graph
