"""mapforge - layered roguelike map generation."""

__version__ = "0.1.0"
