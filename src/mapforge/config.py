"""Map configuration models and loading.

The configuration is owned by the host (a YAML file, usually) and consumed
read-only by the generation pipeline. Validation happens once, when the
models are constructed, so the pipeline can assume a well-formed config.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path  # noqa: TC003 - used at runtime
from random import Random  # noqa: TC003 - used in method signatures
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator
from ruamel.yaml import YAML

DEFAULT_GRID_WIDTH = 7
DEFAULT_LAYER_COUNT = 15


class NodeType(StrEnum):
    """Kind of encounter a map node represents."""

    MINOR_ENEMY = "minor_enemy"
    ELITE_ENEMY = "elite_enemy"
    REST_SITE = "rest_site"
    TREASURE = "treasure"
    STORE = "store"
    BOSS = "boss"
    MYSTERY = "mystery"


class NodeBlueprint(BaseModel):
    """Content descriptor assigned to a node."""

    name: str = Field(min_length=1)
    node_type: NodeType
    sprite: str | None = Field(default=None, description="Opaque presentation reference")


class IntRange(BaseModel):
    """Inclusive integer range sampled uniformly."""

    min: int
    max: int

    @model_validator(mode="after")
    def _ordered(self) -> IntRange:
        if self.min > self.max:
            msg = f"min ({self.min}) must not exceed max ({self.max})"
            raise ValueError(msg)
        return self

    @classmethod
    def exactly(cls, value: int) -> IntRange:
        """Range that always samples *value*."""
        return cls(min=value, max=value)

    def sample(self, rng: Random) -> int:
        """Draw an integer in ``[min, max]``."""
        return rng.randint(self.min, self.max)


class FloatRange(BaseModel):
    """Inclusive float range sampled uniformly."""

    min: float
    max: float

    @model_validator(mode="after")
    def _ordered(self) -> FloatRange:
        if self.min > self.max:
            msg = f"min ({self.min}) must not exceed max ({self.max})"
            raise ValueError(msg)
        return self

    def sample(self, rng: Random) -> float:
        """Draw a float in ``[min, max]``."""
        return rng.uniform(self.min, self.max)


class LayerConfig(BaseModel):
    """Parameters for one layer of the map.

    Only ``node`` and ``randomize_nodes`` affect the generated graph. The
    distance and position fields are carried for presentation code.
    """

    node: str | None = Field(default=None, description="Default blueprint name for this layer")
    distance_from_previous_layer: FloatRange = Field(
        default_factory=lambda: FloatRange(min=3.0, max=3.0)
    )
    nodes_apart_distance: float = Field(default=2.0, ge=0)
    randomize_position: float = Field(default=0.0, ge=0, le=1)
    randomize_nodes: float = Field(
        default=0.0, ge=0, le=1, description="Probability of drawing from the random pool"
    )


class MapConfig(BaseModel):
    """Complete description of a map to generate."""

    name: str = "unnamed"
    grid_width: int = Field(default=DEFAULT_GRID_WIDTH, ge=1)
    layers: list[LayerConfig] = Field(min_length=1)
    num_starting_nodes: IntRange = Field(default_factory=lambda: IntRange(min=2, max=5))
    num_pre_boss_nodes: IntRange = Field(default_factory=lambda: IntRange(min=1, max=3))
    blueprints: list[NodeBlueprint] = Field(default_factory=list)
    random_nodes: list[str] = Field(
        default_factory=list, description="Blueprint names forming the random pool"
    )

    @model_validator(mode="after")
    def _check_references(self) -> MapConfig:
        for label, value_range in (
            ("num_starting_nodes", self.num_starting_nodes),
            ("num_pre_boss_nodes", self.num_pre_boss_nodes),
        ):
            if value_range.min < 0:
                msg = f"{label}.min must be >= 0, got {value_range.min}"
                raise ValueError(msg)

        names = [bp.name for bp in self.blueprints]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            msg = f"Duplicate blueprint names: {', '.join(duplicates)}"
            raise ValueError(msg)

        known = set(names)
        for index, layer in enumerate(self.layers):
            if layer.node is not None and layer.node not in known:
                msg = f"Layer {index} references unknown blueprint {layer.node!r}"
                raise ValueError(msg)
        unknown_pool = [n for n in self.random_nodes if n not in known]
        if unknown_pool:
            msg = f"random_nodes references unknown blueprints: {', '.join(unknown_pool)}"
            raise ValueError(msg)
        return self

    @property
    def layer_count(self) -> int:
        return len(self.layers)

    def get_blueprint(self, name: str | None) -> NodeBlueprint | None:
        """Look up a blueprint by name, or None if *name* is None."""
        if name is None:
            return None
        for blueprint in self.blueprints:
            if blueprint.name == name:
                return blueprint
        raise KeyError(name)

    def random_pool(self) -> list[NodeBlueprint]:
        """Blueprints eligible for random substitution, in config order."""
        return [bp for name in self.random_nodes if (bp := self.get_blueprint(name)) is not None]


class MapConfigError(Exception):
    """Raised when map configuration cannot be loaded or is unusable."""

    def __init__(self, path: Path | None, reason: str) -> None:
        self.path = path
        self.reason = reason
        where = f" at {path}" if path is not None else ""
        super().__init__(f"Invalid map config{where}: {reason}")


def load_map_config(config_path: Path) -> MapConfig:
    """Load a map configuration from a YAML file.

    Args:
        config_path: Path to the YAML file.

    Returns:
        Validated MapConfig.

    Raises:
        MapConfigError: If the file is missing, empty, unparsable or invalid.
    """
    if not config_path.exists():
        raise MapConfigError(config_path, "File not found")

    yaml = YAML(typ="safe")
    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.load(f)
    except Exception as e:
        raise MapConfigError(config_path, str(e)) from e

    if data is None:
        raise MapConfigError(config_path, "Empty file")
    if not isinstance(data, dict):
        raise MapConfigError(config_path, "Top level must be a mapping")

    try:
        return MapConfig.model_validate(data)
    except ValidationError as e:
        raise MapConfigError(config_path, _format_validation_error(e)) from e


def save_map_config(config: MapConfig, config_path: Path) -> None:
    """Write *config* to *config_path* as YAML."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    yaml = YAML()
    yaml.default_flow_style = False
    data: dict[str, Any] = config.model_dump(mode="json", exclude_none=True)
    with config_path.open("w", encoding="utf-8") as f:
        yaml.dump(data, f)


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item["loc"]) or "<root>"
        parts.append(f"{loc}: {item['msg']}")
    return "; ".join(parts)


def create_default_config(name: str = "act_one") -> MapConfig:
    """Create a default map configuration.

    The preset mirrors a classic three-act spire map: fifteen layers on a
    seven-column grid, enemies at the bottom, a treasure layer midway, a
    rest layer before the boss.

    Args:
        name: Config name.

    Returns:
        MapConfig with default values.
    """
    blueprints = [
        NodeBlueprint(name="minor_enemy", node_type=NodeType.MINOR_ENEMY),
        NodeBlueprint(name="elite_enemy", node_type=NodeType.ELITE_ENEMY),
        NodeBlueprint(name="rest_site", node_type=NodeType.REST_SITE),
        NodeBlueprint(name="treasure", node_type=NodeType.TREASURE),
        NodeBlueprint(name="store", node_type=NodeType.STORE),
        NodeBlueprint(name="mystery", node_type=NodeType.MYSTERY),
        NodeBlueprint(name="boss", node_type=NodeType.BOSS),
    ]

    def layer(node: str, randomize: float) -> LayerConfig:
        return LayerConfig(node=node, randomize_nodes=randomize, randomize_position=0.5)

    layers = [layer("minor_enemy", 0.0)]
    layers += [layer("minor_enemy", 0.5) for _ in range(6)]
    layers.append(layer("treasure", 0.0))
    layers += [layer("minor_enemy", 0.7) for _ in range(5)]
    layers.append(layer("rest_site", 0.0))
    layers.append(layer("boss", 0.0))

    return MapConfig(
        name=name,
        grid_width=DEFAULT_GRID_WIDTH,
        layers=layers,
        num_starting_nodes=IntRange(min=2, max=5),
        num_pre_boss_nodes=IntRange(min=1, max=3),
        blueprints=blueprints,
        random_nodes=["elite_enemy", "rest_site", "store", "mystery", "treasure"],
    )
