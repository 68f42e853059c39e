"""A small terminal roguelike: level grid, chunked world state, enemy AI and save files."""

__version__ = "0.1.0"