"""Data types that make up the persistent game world."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional

from valdmir.enemy import Enemy

MAX_MEMORIES = 10
MAX_PATH_LENGTH = 64
SLOT_COUNT = 10

AI_IDLE = 0
AI_PATROL = 1
AI_CHASE = 2


def _now() -> int:
    return int(time.time())


class TileType(IntEnum):
    EMPTY = 0
    FLOOR = 1
    WALL = 2
    DOOR = 3
    WATER = 4
    LAVA = 5


# display character, walkable, transparent
_TILE_TRAITS = {
    TileType.EMPTY: (" ", False, True),
    TileType.FLOOR: (".", True, True),
    TileType.WALL: ("w", False, False),
    TileType.DOOR: ("+", True, False),
    TileType.WATER: ("~", False, True),
    TileType.LAVA: ("^", False, True),
}


@dataclass
class GameItem:
    """An item lying in the world or carried."""

    name: str = ""
    icon: str = " "
    value: int = 0
    weight: float = 0.0
    type: int = 0
    properties: list[int] = field(default_factory=lambda: [0] * SLOT_COUNT)


@dataclass
class WorldTile:
    """One cell of a chunk."""

    type: TileType = TileType.FLOOR
    display_char: str = "."
    walkable: bool = True
    transparent: bool = True
    entity_id: int = 0
    item_id: int = 0

    def apply_type(self, tile_type: TileType | int) -> None:
        """Change the tile's type and the look and properties that go with it."""
        tile_type = TileType(tile_type)
        self.type = tile_type
        self.display_char, self.walkable, self.transparent = _TILE_TRAITS[tile_type]


@dataclass
class WorldChunk:
    """A rectangular block of tiles; new chunks are filled with floor."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    tiles: list[list[WorldTile]] = field(default_factory=list)
    active: bool = True
    last_updated: int = field(default_factory=_now)

    def __post_init__(self) -> None:
        if not self.tiles:
            self.tiles = [[WorldTile() for _ in range(self.width)] for _ in range(self.height)]

    def tile_at(self, x: int, y: int) -> Optional[WorldTile]:
        """The tile at (x, y), or None outside the chunk."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.tiles[y][x]
        return None


@dataclass
class World:
    """All chunks plus world-wide settings."""

    name: str = ""
    chunks: list[WorldChunk] = field(default_factory=list)
    chunk_width: int = 0
    chunk_height: int = 0
    current_chunk_x: int = 0
    current_chunk_y: int = 0
    seed: int = 0
    world_time: int = 0
    turn_counter: int = 0

    @property
    def chunk_count(self) -> int:
        return len(self.chunks)


@dataclass
class Player:
    """The player's character and attributes."""

    id: int = 0
    name: str = ""
    x: int = 3
    y: int = 3
    chunk_x: int = 0
    chunk_y: int = 0
    health: int = 20
    max_health: int = 20
    strength: int = 0
    dexterity: int = 0
    intelligence: int = 0
    level: int = 1
    xp: int = 0
    inventory_id: int = 0
    equipment_slots: list[int] = field(default_factory=lambda: [0] * SLOT_COUNT)
    faction_relations: list[int] = field(default_factory=lambda: [0] * SLOT_COUNT)
    status_effects: list[int] = field(default_factory=lambda: [0] * SLOT_COUNT)


@dataclass
class Memory:
    """Something an enemy saw, where and when."""

    entity_id: int
    x: int
    y: int
    time_seen: int


@dataclass
class AIEnemy:
    """An enemy with the state its AI needs."""

    base: Enemy = field(default_factory=Enemy)
    id: int = 0
    faction_id: int = 1
    ai_state: int = AI_IDLE
    ai_target_id: int = 0
    detection_radius: int = 5
    memories: list[Memory] = field(default_factory=list)
    path: list[tuple[int, int]] = field(default_factory=list)
    path_index: int = 0
    behavior_flags: int = 0
    last_action_time: int = 0

    @property
    def memory_count(self) -> int:
        return len(self.memories)

    @property
    def path_length(self) -> int:
        return len(self.path)