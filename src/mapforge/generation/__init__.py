"""Map generation stages and the pipeline that runs them."""

from mapforge.generation.builder import build_graph, pick_random_blueprint
from mapforge.generation.connections import assemble_connections
from mapforge.generation.crossings import (
    CrossResolution,
    find_cross_connections,
    resolve_cross_connections,
)
from mapforge.generation.finalize import finalize_graph, mark_starting_nodes, prune_isolated_nodes
from mapforge.generation.paths import (
    MAX_PATH_ATTEMPTS,
    PathDiagnostics,
    PathPlan,
    distinct_starting_columns,
    plan_paths,
    random_walk,
    sample_pre_boss_points,
    select_boss_point,
)
from mapforge.generation.pipeline import GeneratedMap, MapGenerator, generate_map

__all__ = [
    "MAX_PATH_ATTEMPTS",
    "CrossResolution",
    "GeneratedMap",
    "MapGenerator",
    "PathDiagnostics",
    "PathPlan",
    "assemble_connections",
    "build_graph",
    "distinct_starting_columns",
    "finalize_graph",
    "find_cross_connections",
    "generate_map",
    "mark_starting_nodes",
    "pick_random_blueprint",
    "plan_paths",
    "prune_isolated_nodes",
    "random_walk",
    "resolve_cross_connections",
    "sample_pre_boss_points",
    "select_boss_point",
]
