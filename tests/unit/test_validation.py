"""Tests for structural map validation."""

from __future__ import annotations

from dataclasses import replace

import pytest

from mapforge.config import MapConfig  # noqa: TC001 - fixture type
from mapforge.generation import GeneratedMap, MapGenerator, PathDiagnostics, finalize_graph
from mapforge.graph import NodeState, Point
from mapforge.validation import (
    CHECKS,
    ValidationCheck,
    ValidationReport,
    check_boss_position,
    check_boss_reachability,
    check_layer_adjacency,
    check_no_cross_connections,
    check_path_monotonicity,
    check_pruning,
    check_reciprocal_adjacency,
    check_starting_diversity,
    check_starting_nodes,
    validate_map,
)
from tests.fixtures.map_fixtures import make_config, make_cross_graph


@pytest.fixture
def generated(small_config: MapConfig) -> GeneratedMap:
    return MapGenerator(small_config, seed=7).generate()


class TestValidationReport:
    def test_summary_counts(self) -> None:
        report = ValidationReport(
            checks=[
                ValidationCheck("a", "pass"),
                ValidationCheck("b", "warn", "soft"),
                ValidationCheck("c", "fail", "broken"),
                ValidationCheck("d", "pass"),
            ]
        )

        assert report.has_failures
        assert report.has_warnings
        assert report.summary == "1 failed, 1 warnings, 2 passed"

    def test_empty_report(self) -> None:
        report = ValidationReport()
        assert not report.has_failures
        assert not report.has_warnings
        assert report.summary == ""


class TestValidateMap:
    def test_generated_map_passes_every_check(self, generated: GeneratedMap) -> None:
        report = validate_map(generated)

        assert len(report.checks) == len(CHECKS)
        assert [c.severity for c in report.checks] == ["pass"] * len(CHECKS)

    def test_check_names(self, generated: GeneratedMap) -> None:
        names = [c.name for c in validate_map(generated).checks]
        assert names == [
            "layer_adjacency",
            "reciprocal_adjacency",
            "boss_position",
            "path_monotonicity",
            "no_cross_connections",
            "pruning",
            "starting_nodes_attainable",
            "boss_reachability",
            "starting_diversity",
        ]

    def test_many_seeds_never_fail(self) -> None:
        config = make_config(width=7, layer_count=15, starting=(2, 5), pre_boss=(1, 3))
        for seed in range(20):
            report = validate_map(MapGenerator(config, seed=seed).generate())
            assert not report.has_failures, report.summary


class TestIndividualChecks:
    def test_layer_adjacency_flags_skipping_edge(self, generated: GeneratedMap) -> None:
        source = generated.graph.node(Point(0, 0))
        target = generated.graph.node(Point(0, 2))
        assert source is not None and target is not None
        # Bypass add_edge, which refuses this edge.
        source._outgoing.add(target.point)
        target._incoming.add(source.point)

        check = check_layer_adjacency(generated)
        assert check.severity == "fail"
        assert "(0, 0)->(0, 2)" in check.message

    def test_reciprocal_adjacency_flags_one_sided_edge(self, generated: GeneratedMap) -> None:
        node = generated.graph.node(Point(4, 0))
        assert node is not None
        node._outgoing.add(Point(0, 1))

        assert check_reciprocal_adjacency(generated).severity == "fail"

    def test_boss_position_flags_wrong_column(self, generated: GeneratedMap) -> None:
        moved = replace(generated, boss=Point(0, 3))

        check = check_boss_position(moved)
        assert check.severity == "fail"
        assert "boss column 0" in check.message

    def test_path_monotonicity_flags_sideways_jump(self, generated: GeneratedMap) -> None:
        bad_path = (Point(2, 3), Point(2, 2), Point(0, 1), Point(0, 0))
        broken = replace(generated, paths=(*generated.paths, bad_path))

        check = check_path_monotonicity(broken)
        assert check.severity == "fail"
        assert "shifts" in check.message

    def test_path_monotonicity_allows_wide_boss_hop(self, generated: GeneratedMap) -> None:
        wide = (Point(2, 3), Point(0, 2), Point(0, 1), Point(0, 0))
        result = replace(generated, paths=(wide,))
        assert check_path_monotonicity(result).severity == "pass"

    def test_path_monotonicity_flags_short_path(self, generated: GeneratedMap) -> None:
        result = replace(generated, paths=((Point(2, 3), Point(2, 2)),))
        check = check_path_monotonicity(result)
        assert check.severity == "fail"
        assert "ends on layer 2" in check.message

    def test_no_cross_connections_flags_crossing(self, generated: GeneratedMap) -> None:
        graph = make_cross_graph()
        result = replace(generated, graph=graph)

        check = check_no_cross_connections(result)
        assert check.severity == "fail"
        assert "(0, 0)" in check.message

    def test_pruning_flags_active_isolated_node(self, generated: GeneratedMap) -> None:
        # Only the boss survives on the top layer.
        node = generated.graph.node(Point(0, 3))
        assert node is not None and not node.active
        node.active = True

        check = check_pruning(generated)
        assert check.severity == "fail"
        assert "(0, 3)" in check.message

    def test_starting_nodes_flags_closed_start(self, generated: GeneratedMap) -> None:
        start = generated.graph.node(generated.starting_nodes[0])
        assert start is not None
        start.state = NodeState.UNVISITED

        assert check_starting_nodes(generated).severity == "fail"

    def test_starting_nodes_flags_open_upper_node(self, generated: GeneratedMap) -> None:
        boss = generated.graph.node(generated.boss)
        assert boss is not None
        boss.state = NodeState.ATTAINABLE

        assert check_starting_nodes(generated).severity == "fail"

    def test_boss_reachability_flags_stranded_node(self, generated: GeneratedMap) -> None:
        node = generated.graph.node(Point(0, 3))
        assert node is not None
        node.active = True

        check = check_boss_reachability(generated)
        assert check.severity == "fail"
        assert "(0, 3)" in check.message

    def test_boss_reachability_warns_on_empty_map(self) -> None:
        config = make_config(starting=(1, 1), pre_boss=(0, 0))
        result = MapGenerator(config, seed=0).generate()

        assert check_boss_reachability(result).severity == "warn"

    def test_boss_reachability_fails_on_inactive_boss(self, generated: GeneratedMap) -> None:
        graph = make_cross_graph()
        finalize_graph(graph)
        # A boss point outside the grid has no node at all.
        result = replace(generated, graph=graph, boss=Point(5, 1))

        check = check_boss_reachability(result)
        assert check.severity == "fail"
        assert "inactive" in check.message

    def test_starting_diversity_warns_on_shortfall(self, generated: GeneratedMap) -> None:
        short = replace(
            generated,
            diagnostics=PathDiagnostics(
                attempts=100, starting_target=5, distinct_starting_columns=2
            ),
        )

        check = check_starting_diversity(short)
        assert check.severity == "warn"
        assert check.message == "2/5 starting columns after 100 attempts"

    def test_unreachable_target_only_warns(self) -> None:
        config = make_config(width=3, layer_count=5, starting=(10, 10), pre_boss=(1, 1))
        report = validate_map(MapGenerator(config, seed=3).generate())

        assert not report.has_failures
        assert report.has_warnings
