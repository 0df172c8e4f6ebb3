"""Tests for the layered map graph."""

from __future__ import annotations

import pytest

from mapforge.graph import (
    EdgeEndpointError,
    EdgeLayerError,
    MapGraph,
    NodeState,
    Point,
)


class TestPoint:
    """Tests for the Point value type."""

    def test_structural_equality(self) -> None:
        """Points with the same coordinates are equal and hash alike."""
        assert Point(1, 2) == Point(1, 2)
        assert hash(Point(1, 2)) == hash(Point(1, 2))
        assert Point(1, 2) != Point(2, 1)

    def test_usable_as_dict_key_and_set_member(self) -> None:
        lookup = {Point(0, 0): "start"}
        assert lookup[Point(0, 0)] == "start"
        assert Point(3, 1) in {Point(3, 1), Point(0, 0)}

    def test_is_immutable(self) -> None:
        point = Point(1, 1)
        with pytest.raises(AttributeError):
            point.x = 5  # type: ignore[misc]

    def test_orders_by_column_then_layer(self) -> None:
        assert sorted([Point(1, 0), Point(0, 2), Point(0, 1)]) == [
            Point(0, 1),
            Point(0, 2),
            Point(1, 0),
        ]


class TestMapGraphShape:
    """Tests for grid allocation and lookup."""

    def test_allocates_every_slot(self) -> None:
        graph = MapGraph(3, 4)

        layers = graph.layers
        assert len(layers) == 4
        assert all(len(layer) == 3 for layer in layers)
        assert layers[2][1].point == Point(1, 2)

    def test_new_nodes_are_active_unvisited_and_unconnected(self) -> None:
        graph = MapGraph(2, 2)

        for node in graph.nodes():
            assert node.active
            assert node.state == NodeState.UNVISITED
            assert node.blueprint is None
            assert node.has_no_connections()

    @pytest.mark.parametrize(
        "point",
        [Point(3, 0), Point(0, 4), Point(-1, 0), Point(0, -1), Point(5, 5)],
    )
    def test_out_of_range_lookup_returns_none(self, point: Point) -> None:
        """Lookups past the grid edge report absence instead of failing."""
        graph = MapGraph(3, 4)
        assert graph.node(point) is None

    def test_rejects_empty_dimensions(self) -> None:
        with pytest.raises(ValueError, match="width"):
            MapGraph(0, 3)
        with pytest.raises(ValueError, match="layer_count"):
            MapGraph(3, 0)

    def test_layers_returns_copies(self) -> None:
        """Mutating the returned lists does not change the grid shape."""
        graph = MapGraph(2, 2)
        graph.layers[0].clear()
        assert len(graph.layer_nodes(0)) == 2


class TestMapGraphEdges:
    """Tests for edge bookkeeping."""

    def test_add_edge_updates_both_endpoints(self) -> None:
        graph = MapGraph(2, 2)
        graph.add_edge(Point(0, 0), Point(1, 1))

        source = graph.node(Point(0, 0))
        target = graph.node(Point(1, 1))
        assert source is not None and target is not None
        assert source.outgoing == {Point(1, 1)}
        assert target.incoming == {Point(0, 0)}
        assert graph.has_edge(Point(0, 0), Point(1, 1))

    def test_add_edge_is_idempotent(self) -> None:
        graph = MapGraph(2, 2)
        graph.add_edge(Point(0, 0), Point(0, 1))
        graph.add_edge(Point(0, 0), Point(0, 1))

        source = graph.node(Point(0, 0))
        target = graph.node(Point(0, 1))
        assert source is not None and target is not None
        assert len(source.outgoing) == 1
        assert len(target.incoming) == 1
        assert graph.edges() == [(Point(0, 0), Point(0, 1))]

    @pytest.mark.parametrize(
        ("from_point", "to_point"),
        [
            (Point(0, 0), Point(0, 0)),  # same layer
            (Point(0, 1), Point(0, 0)),  # downward
            (Point(0, 0), Point(0, 2)),  # skips a layer
        ],
    )
    def test_add_edge_rejects_non_adjacent_layers(self, from_point: Point, to_point: Point) -> None:
        graph = MapGraph(2, 3)
        with pytest.raises(EdgeLayerError):
            graph.add_edge(from_point, to_point)
        assert graph.edges() == []

    def test_add_edge_rejects_points_outside_grid(self) -> None:
        graph = MapGraph(2, 2)

        with pytest.raises(EdgeEndpointError, match="target not found") as exc_info:
            graph.add_edge(Point(0, 0), Point(2, 1))
        assert exc_info.value.missing == "to"

        with pytest.raises(EdgeEndpointError, match="source not found"):
            graph.add_edge(Point(-1, 0), Point(0, 1))

        with pytest.raises(EdgeEndpointError, match="endpoints not found"):
            graph.add_edge(Point(5, 5), Point(5, 6))

    def test_remove_edge_updates_both_endpoints(self) -> None:
        graph = MapGraph(2, 2)
        graph.add_edge(Point(0, 0), Point(1, 1))
        graph.remove_edge(Point(0, 0), Point(1, 1))

        assert not graph.has_edge(Point(0, 0), Point(1, 1))
        assert all(node.has_no_connections() for node in graph.nodes())

    def test_remove_missing_edge_is_noop(self) -> None:
        graph = MapGraph(2, 2)
        graph.add_edge(Point(0, 0), Point(0, 1))

        graph.remove_edge(Point(1, 0), Point(1, 1))
        graph.remove_edge(Point(7, 7), Point(7, 8))

        assert graph.edges() == [(Point(0, 0), Point(0, 1))]

    def test_adjacency_views_are_read_only(self) -> None:
        graph = MapGraph(2, 2)
        graph.add_edge(Point(0, 0), Point(0, 1))
        node = graph.node(Point(0, 0))
        assert node is not None

        with pytest.raises(AttributeError):
            node.outgoing.add(Point(1, 1))  # type: ignore[attr-defined]

    def test_edges_are_sorted(self) -> None:
        graph = MapGraph(3, 2)
        graph.add_edge(Point(2, 0), Point(1, 1))
        graph.add_edge(Point(0, 0), Point(1, 1))
        graph.add_edge(Point(0, 0), Point(0, 1))

        assert graph.edges() == [
            (Point(0, 0), Point(0, 1)),
            (Point(0, 0), Point(1, 1)),
            (Point(2, 0), Point(1, 1)),
        ]

    def test_active_nodes_skips_inactive(self) -> None:
        graph = MapGraph(2, 1)
        node = graph.node(Point(1, 0))
        assert node is not None
        node.active = False

        assert [n.point for n in graph.active_nodes()] == [Point(0, 0)]
