"""Enemies and the simple chase step that steers them toward the player."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Sequence


class Direction(IntEnum):
    """A step on the grid; the values match the game's move codes."""

    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    @property
    def offset(self) -> tuple[int, int]:
        """The (dx, dy) change in position for one step this way."""
        return _OFFSETS[self]


_OFFSETS = {
    Direction.UP: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
}


@dataclass
class Enemy:
    """A creature placed on the level."""

    x: int = 0
    y: int = 0
    icon: str = "G"
    name: str = "Goblin"
    health: int = 0


def _is_open(collision_map: Sequence[Sequence[int]], x: int, y: int) -> bool:
    if not 0 <= y < len(collision_map):
        return False
    row = collision_map[y]
    return 0 <= x < len(row) and row[x] == 0


def follow_player(
    collision_map: Sequence[Sequence[int]],
    enemy_x: int,
    enemy_y: int,
    player_x: int,
    player_y: int,
) -> Optional[Direction]:
    """Pick a step toward the player, or None when every neighbour is blocked.

    The axis with the larger distance is tried first, then the other one,
    then every direction in turn. Cells outside the map count as blocked.
    """
    dx = player_x - enemy_x
    dy = player_y - enemy_y

    horizontal = Direction.RIGHT if dx > 0 else Direction.LEFT
    vertical = Direction.DOWN if dy > 0 else Direction.UP
    preferred = (horizontal, vertical) if abs(dx) > abs(dy) else (vertical, horizontal)

    def is_free(direction: Direction) -> bool:
        ox, oy = direction.offset
        return _is_open(collision_map, enemy_x + ox, enemy_y + oy)

    for direction in preferred:
        if is_free(direction):
            return direction
    for direction in Direction:
        if is_free(direction):
            return direction
    return None