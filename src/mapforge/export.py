"""JSON export format.

Serializes a generated map to a structured JSON document suitable for
game engines, renderers, or programmatic analysis.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

    from mapforge.generation.pipeline import GeneratedMap
    from mapforge.graph.model import MapNode, Point

FORMAT_VERSION = 1


def _point(point: Point) -> list[int]:
    return [point.x, point.y]


def _node_to_dict(node: MapNode) -> dict[str, Any]:
    blueprint = node.blueprint
    return {
        "x": node.column,
        "y": node.layer,
        "blueprint": blueprint.name if blueprint else None,
        "node_type": blueprint.node_type.value if blueprint else None,
        "active": node.active,
        "state": node.state.value,
        "outgoing": [_point(p) for p in sorted(node.outgoing)],
        "incoming": [_point(p) for p in sorted(node.incoming)],
    }


def map_to_dict(result: GeneratedMap) -> dict[str, Any]:
    """Build a JSON-ready dict describing *result*."""
    graph = result.graph
    diag = result.diagnostics
    return {
        "format_version": FORMAT_VERSION,
        "config": result.config.name,
        "seed": result.seed,
        "grid_width": graph.width,
        "layer_count": graph.layer_count,
        "boss": _point(result.boss),
        "diagnostics": {
            "attempts": diag.attempts,
            "starting_target": diag.starting_target,
            "distinct_starting_columns": diag.distinct_starting_columns,
            "target_met": diag.target_met,
            "pre_boss_points": [_point(p) for p in diag.pre_boss_points],
        },
        "paths": [[_point(p) for p in path] for path in result.paths],
        "layers": [[_node_to_dict(node) for node in layer] for layer in graph.layers],
    }


def map_to_json(result: GeneratedMap) -> str:
    return json.dumps(map_to_dict(result), indent=2, ensure_ascii=False)


class JsonExporter:
    """Export a generated map as structured JSON."""

    format_name = "json"

    def export(self, result: GeneratedMap, output_path: Path) -> Path:
        """Write map data as formatted JSON.

        Args:
            result: Generated map.
            output_path: File to write; parent directories are created.

        Returns:
            Path to the written file.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(map_to_json(result) + "\n", encoding="utf-8")
        return output_path
