"""Map graph visualization.

Renders the active part of a generated map as DOT (Graphviz) or Mermaid
markup. Layers become ranks; no coordinates are computed here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mapforge.config import NodeType
from mapforge.graph.model import NodeState
from mapforge.observability.logging import get_logger

if TYPE_CHECKING:
    from mapforge.generation.pipeline import GeneratedMap
    from mapforge.graph.model import MapNode, Point

log = get_logger(__name__)

_TYPE_COLORS = {
    NodeType.MINOR_ENEMY: "#D3D3D3",  # light grey
    NodeType.ELITE_ENEMY: "#FFA07A",  # light salmon
    NodeType.REST_SITE: "#98FB98",  # pale green
    NodeType.TREASURE: "#FFD700",  # gold
    NodeType.STORE: "#87CEEB",  # sky blue
    NodeType.BOSS: "#FFB6C1",  # light pink
    NodeType.MYSTERY: "#DDA0DD",  # plum
}
_DEFAULT_COLOR = "#FFFFFF"
_START_BORDER = "#228B22"  # forest green


def node_id(point: Point) -> str:
    """Stable identifier usable in both DOT and Mermaid."""
    return f"n{point.x}_{point.y}"


def node_label(node: MapNode) -> str:
    blueprint = node.blueprint
    name = blueprint.name if blueprint else "empty"
    return f"{name} ({node.column},{node.layer})"


def _fill_color(node: MapNode) -> str:
    if node.blueprint is None:
        return _DEFAULT_COLOR
    return _TYPE_COLORS.get(node.blueprint.node_type, _DEFAULT_COLOR)


def render_dot(result: GeneratedMap, *, no_labels: bool = False) -> str:
    """Render the active nodes and edges of *result* as DOT markup.

    Args:
        result: Generated map.
        no_labels: If True, label nodes with coordinates only.

    Returns:
        DOT format string.
    """
    graph = result.graph
    lines = [
        "digraph map {",
        "  rankdir=BT;",
        '  node [fontname="Helvetica" fontsize=10 style="filled,solid"];',
        "",
    ]

    for layer in graph.layers:
        active = [n for n in layer if n.active]
        if not active:
            continue
        lines.append("  { rank=same;")
        for node in active:
            label = f"{node.column},{node.layer}" if no_labels else node_label(node)
            attrs = {
                "shape": "doubleoctagon" if node.point == result.boss else "circle",
                "fillcolor": f'"{_fill_color(node)}"',
                "label": f'"{_dot_escape(label)}"',
            }
            if node.state == NodeState.ATTAINABLE:
                attrs["color"] = f'"{_START_BORDER}"'
                attrs["penwidth"] = '"2.5"'
            attr_str = " ".join(f"{k}={v}" for k, v in attrs.items())
            lines.append(f"    {node_id(node.point)} [{attr_str}];")
        lines.append("  }")

    lines.append("")
    for from_point, to_point in graph.edges():
        lines.append(f"  {node_id(from_point)} -> {node_id(to_point)};")

    lines.append("}")
    log.debug("map_rendered", format="dot", edges=len(graph.edges()))
    return "\n".join(lines)


def render_mermaid(result: GeneratedMap, *, no_labels: bool = False) -> str:
    """Render the active nodes and edges of *result* as Mermaid markup.

    Args:
        result: Generated map.
        no_labels: If True, label nodes with coordinates only.

    Returns:
        Mermaid format string.
    """
    graph = result.graph
    lines = ["graph BT"]

    for node in graph.active_nodes():
        safe_id = node_id(node.point)
        label = f"{node.column},{node.layer}" if no_labels else node_label(node)
        label = _mermaid_escape(label)
        if node.point == result.boss:
            lines.append(f'  {safe_id}{{{{"{label}"}}}}:::boss')
        elif node.state == NodeState.ATTAINABLE:
            lines.append(f'  {safe_id}(["{label}"]):::start')
        else:
            lines.append(f'  {safe_id}("{label}")')

    lines.append("")
    for from_point, to_point in graph.edges():
        lines.append(f"  {node_id(from_point)} --> {node_id(to_point)}")

    lines.append("")
    lines.append(f"  classDef start stroke:{_START_BORDER},stroke-width:3px")
    lines.append(f"  classDef boss fill:{_TYPE_COLORS[NodeType.BOSS]},stroke:#333")
    log.debug("map_rendered", format="mermaid", edges=len(graph.edges()))
    return "\n".join(lines)


def _dot_escape(text: str) -> str:
    """Escape special characters for DOT labels."""
    return text.replace('"', '\\"').replace("\n", "\\n")


def _mermaid_escape(text: str) -> str:
    """Escape special characters for Mermaid labels."""
    return text.replace('"', "&quot;").replace("\n", " ")
