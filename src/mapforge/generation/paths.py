"""Path planning: boss placement and random walks down to the first layer.

Every path starts at the boss point, drops to one of the pre-boss anchors
on the layer below it, then wanders down one layer per step (moving at most
one column sideways) until it reaches layer 0. Extra walks are added until
enough distinct starting columns are covered or the attempt budget runs out.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from mapforge.graph.errors import WalkPreconditionError
from mapforge.graph.model import Path, Point
from mapforge.observability.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable
    from random import Random

    from mapforge.config import MapConfig

log = get_logger(__name__)

# Total walks (initial ones included) before the diversity loop gives up.
MAX_PATH_ATTEMPTS = 100


@dataclass(frozen=True)
class PathDiagnostics:
    """Bookkeeping from a planning run, reported for logging and display.

    Attributes:
        attempts: Walks generated, initial per-anchor walks included.
        starting_target: Requested number of distinct layer-0 columns.
        distinct_starting_columns: Distinct layer-0 columns actually reached.
        pre_boss_points: Anchors chosen on the layer below the boss.
    """

    attempts: int
    starting_target: int
    distinct_starting_columns: int
    pre_boss_points: tuple[Point, ...] = ()

    @property
    def target_met(self) -> bool:
        return self.distinct_starting_columns >= self.starting_target

    @property
    def shortfall(self) -> int:
        return max(0, self.starting_target - self.distinct_starting_columns)


@dataclass(frozen=True)
class PathPlan:
    """Output of path planning."""

    boss: Point
    paths: tuple[Path, ...]
    diagnostics: PathDiagnostics


def select_boss_point(width: int, layer_count: int, rng: Random) -> Point:
    """Boss sits in the middle column of the top layer.

    For even widths the two middle columns are equally likely.
    """
    y = layer_count - 1
    if width % 2 == 1:
        return Point(width // 2, y)
    if rng.randrange(2) == 0:
        return Point(width // 2, y)
    return Point(width // 2 - 1, y)


def sample_pre_boss_points(width: int, boss: Point, count: int, rng: Random) -> list[Point]:
    """Pick *count* distinct columns on the layer below the boss."""
    columns = list(range(width))
    rng.shuffle(columns)
    return [Point(x, boss.y - 1) for x in columns[:count]]


def random_walk(
    start: Point,
    to_y: int,
    width: int,
    rng: Random,
    *,
    first_step_unconstrained: bool = False,
) -> list[Point]:
    """Walk from *start* to layer *to_y*, one layer per step.

    Each step keeps the column or shifts it by one, chosen uniformly among
    the moves that stay inside ``[0, width)``. With
    *first_step_unconstrained* the first step may land on any column.

    Returns:
        The visited points, *start* first and a point on *to_y* last.

    Raises:
        WalkPreconditionError: If *start* already lies on *to_y*.
    """
    if start.y == to_y:
        raise WalkPreconditionError(start=start, to_y=to_y)

    direction = -1 if start.y > to_y else 1
    path = [start]
    while path[-1].y != to_y:
        last = path[-1]
        if first_step_unconstrained and last == start:
            candidates = list(range(width))
        else:
            candidates = [last.x]
            if last.x - 1 >= 0:
                candidates.append(last.x - 1)
            if last.x + 1 < width:
                candidates.append(last.x + 1)
        path.append(Point(rng.choice(candidates), last.y + direction))
    return path


def distinct_starting_columns(paths: Iterable[Path]) -> set[int]:
    """Columns of the last (layer 0) point of each path."""
    return {path[-1].x for path in paths}


def plan_paths(config: MapConfig, rng: Random) -> PathPlan:
    """Generate the boss point and the full set of boss-to-start paths."""
    width = config.grid_width
    boss = select_boss_point(width, config.layer_count, rng)
    starting_target = config.num_starting_nodes.sample(rng)

    if config.layer_count == 1:
        log.debug("single_layer_map", boss=str(boss))
        return PathPlan(
            boss=boss,
            paths=((boss,),),
            diagnostics=PathDiagnostics(
                attempts=0,
                starting_target=starting_target,
                distinct_starting_columns=1,
            ),
        )

    pre_boss_count = config.num_pre_boss_nodes.sample(rng)
    pre_boss_points = sample_pre_boss_points(width, boss, pre_boss_count, rng)

    paths: list[Path] = []
    attempts = 0

    def add_walk(anchor: Point) -> None:
        nonlocal attempts
        walk = random_walk(anchor, 0, width, rng) if anchor.y > 0 else [anchor]
        paths.append((boss, *walk))
        attempts += 1

    for point in pre_boss_points:
        add_walk(point)

    if not pre_boss_points:
        log.warning("no_pre_boss_points", pre_boss_count=pre_boss_count)
    else:
        while (
            len(distinct_starting_columns(paths)) < starting_target
            and attempts < MAX_PATH_ATTEMPTS
        ):
            add_walk(rng.choice(pre_boss_points))

    diagnostics = PathDiagnostics(
        attempts=attempts,
        starting_target=starting_target,
        distinct_starting_columns=len(distinct_starting_columns(paths)),
        pre_boss_points=tuple(pre_boss_points),
    )
    log.info(
        "paths_planned",
        attempts=attempts,
        paths=len(paths),
        target=starting_target,
        distinct=diagnostics.distinct_starting_columns,
    )
    if not diagnostics.target_met:
        log.warning(
            "starting_diversity_shortfall",
            target=starting_target,
            achieved=diagnostics.distinct_starting_columns,
            attempts=attempts,
        )

    return PathPlan(boss=boss, paths=tuple(paths), diagnostics=diagnostics)
