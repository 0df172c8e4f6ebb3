"""Structural checks for a generated map.

Each check reports pass, warn or fail. Failures mean a broken graph;
warnings flag soft outcomes such as too few distinct starting columns.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from mapforge.generation.crossings import find_cross_connections
from mapforge.graph.model import NodeState
from mapforge.observability.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from mapforge.generation.pipeline import GeneratedMap
    from mapforge.graph.model import Point

log = get_logger(__name__)

# Cap on offending items quoted in a failure message.
_MAX_LISTED = 5


@dataclass
class ValidationCheck:
    """Result of a single validation check.

    Attributes:
        name: Identifier for the check.
        severity: "pass", "warn", or "fail".
        message: Human-readable description of the result.
    """

    name: str
    severity: Literal["pass", "warn", "fail"]
    message: str = ""


@dataclass
class ValidationReport:
    """Aggregated results of validation checks."""

    checks: list[ValidationCheck] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        """True if any check has severity 'fail'."""
        return any(c.severity == "fail" for c in self.checks)

    @property
    def has_warnings(self) -> bool:
        """True if any check has severity 'warn'."""
        return any(c.severity == "warn" for c in self.checks)

    @property
    def summary(self) -> str:
        """Human-readable summary of all checks."""
        fails = [c for c in self.checks if c.severity == "fail"]
        warns = [c for c in self.checks if c.severity == "warn"]
        passes = [c for c in self.checks if c.severity == "pass"]

        parts: list[str] = []
        if fails:
            parts.append(f"{len(fails)} failed")
        if warns:
            parts.append(f"{len(warns)} warnings")
        if passes:
            parts.append(f"{len(passes)} passed")
        return ", ".join(parts)


def _listing(items: list[str]) -> str:
    shown = ", ".join(items[:_MAX_LISTED])
    if len(items) > _MAX_LISTED:
        shown += f", ... ({len(items) - _MAX_LISTED} more)"
    return shown


def _result(name: str, problems: list[str], ok_message: str) -> ValidationCheck:
    if problems:
        return ValidationCheck(name, "fail", _listing(problems))
    return ValidationCheck(name, "pass", ok_message)


def check_layer_adjacency(result: GeneratedMap) -> ValidationCheck:
    """Every edge goes exactly one layer up."""
    bad = [f"{a}->{b}" for a, b in result.graph.edges() if b.y != a.y + 1]
    return _result("layer_adjacency", bad, "All edges connect adjacent layers")


def check_reciprocal_adjacency(result: GeneratedMap) -> ValidationCheck:
    """Outgoing and incoming sets mirror each other."""
    graph = result.graph
    bad: list[str] = []
    for node in graph.nodes():
        for target in node.outgoing:
            other = graph.node(target)
            if other is None or node.point not in other.incoming:
                bad.append(f"{node.point}->{target}")
        for source in node.incoming:
            other = graph.node(source)
            if other is None or node.point not in other.outgoing:
                bad.append(f"{source}->{node.point}")
    return _result("reciprocal_adjacency", bad, "Adjacency sets are consistent")


def check_boss_position(result: GeneratedMap) -> ValidationCheck:
    """Boss is on the top layer in a middle column and ends every path."""
    graph = result.graph
    boss = result.boss
    width = graph.width
    problems: list[str] = []

    if boss.y != graph.layer_count - 1:
        problems.append(f"boss {boss} not on top layer {graph.layer_count - 1}")
    middle = {width // 2} if width % 2 == 1 else {width // 2, width // 2 - 1}
    if boss.x not in middle:
        problems.append(f"boss column {boss.x} not in {sorted(middle)}")
    stray = [str(path[0]) for path in result.paths if path[0] != boss]
    if stray:
        problems.append(f"paths not starting at boss: {_listing(stray)}")
    return _result("boss_position", problems, f"Boss at {boss}")


def check_path_monotonicity(result: GeneratedMap) -> ValidationCheck:
    """Paths descend one layer per step, shift at most one column, end on 0."""
    problems: list[str] = []
    for index, path in enumerate(result.paths):
        if path[-1].y != 0:
            problems.append(f"path {index} ends on layer {path[-1].y}")
        for upper, lower in zip(path, path[1:], strict=False):
            if lower.y != upper.y - 1:
                problems.append(f"path {index} jumps {upper}->{lower}")
            # The boss-to-anchor hop may cross any number of columns.
            elif upper != result.boss and abs(lower.x - upper.x) > 1:
                problems.append(f"path {index} shifts {upper}->{lower}")
    return _result("path_monotonicity", problems, f"{len(result.paths)} paths descend cleanly")


def check_no_cross_connections(result: GeneratedMap) -> ValidationCheck:
    """No 2x2 cell keeps both crossing diagonals."""
    cells = [str(p) for p in find_cross_connections(result.graph)]
    return _result("no_cross_connections", cells, "No crossing diagonals")


def check_pruning(result: GeneratedMap) -> ValidationCheck:
    """A node is inactive exactly when it has no edges."""
    bad = [
        str(node.point)
        for node in result.graph.nodes()
        if node.active == node.has_no_connections()
    ]
    return _result("pruning", bad, "Inactive nodes are exactly the isolated ones")


def check_starting_nodes(result: GeneratedMap) -> ValidationCheck:
    """Active layer-0 nodes are attainable; no other node is."""
    bad: list[str] = []
    for node in result.graph.nodes():
        should_be_open = node.layer == 0 and node.active
        if should_be_open != (node.state == NodeState.ATTAINABLE):
            bad.append(f"{node.point}={node.state.value}")
    return _result("starting_nodes_attainable", bad, "Starting layer is attainable")


def check_boss_reachability(result: GeneratedMap) -> ValidationCheck:
    """Every active node can reach the boss."""
    graph = result.graph
    boss_node = graph.node(result.boss)
    if boss_node is None or not boss_node.active:
        active = sum(1 for _ in graph.active_nodes())
        if active == 0:
            return ValidationCheck("boss_reachability", "warn", "Map has no active nodes")
        return ValidationCheck("boss_reachability", "fail", f"Boss {result.boss} is inactive")

    # Walk incoming edges backwards from the boss.
    reaches_boss: set[Point] = {result.boss}
    queue: deque[Point] = deque([result.boss])
    while queue:
        current = graph.node(queue.popleft())
        if current is None:
            continue
        for source in current.incoming:
            if source not in reaches_boss:
                reaches_boss.add(source)
                queue.append(source)

    stranded = [str(n.point) for n in graph.active_nodes() if n.point not in reaches_boss]
    return _result("boss_reachability", stranded, "Every active node reaches the boss")


def check_starting_diversity(result: GeneratedMap) -> ValidationCheck:
    """Warn when fewer distinct starting columns were reached than requested."""
    diag = result.diagnostics
    message = (
        f"{diag.distinct_starting_columns}/{diag.starting_target} starting columns "
        f"after {diag.attempts} attempts"
    )
    if diag.target_met:
        return ValidationCheck("starting_diversity", "pass", message)
    return ValidationCheck("starting_diversity", "warn", message)


CHECKS: tuple[Callable[[GeneratedMap], ValidationCheck], ...] = (
    check_layer_adjacency,
    check_reciprocal_adjacency,
    check_boss_position,
    check_path_monotonicity,
    check_no_cross_connections,
    check_pruning,
    check_starting_nodes,
    check_boss_reachability,
    check_starting_diversity,
)


def validate_map(result: GeneratedMap) -> ValidationReport:
    """Run every structural check against *result*."""
    report = ValidationReport(checks=[check(result) for check in CHECKS])
    log.info("map_validated", summary=report.summary)
    return report
