"""The whole persistent game state: player, world chunks, enemies and items."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional

from valdmir.models import (
    AIEnemy,
    GameItem,
    Player,
    TileType,
    World,
    WorldChunk,
    WorldTile,
)

DEFAULT_WORLD_NAME = "Default World"
_WALL_THRESHOLD = 70


def _now() -> int:
    return int(time.time())


def _c_remainder(value: int, divisor: int) -> int:
    """Remainder that keeps the sign of the dividend, as integer division truncates."""
    remainder = abs(value) % divisor
    return -remainder if value < 0 else remainder


def _generated_tile(value: int) -> WorldTile:
    tile = WorldTile()
    tile.apply_type(TileType.FLOOR if value < _WALL_THRESHOLD else TileType.WALL)
    return tile


@dataclass
class GameState:
    """Everything that belongs to a running or saved game."""

    player: Player = field(default_factory=Player)
    world: World = field(default_factory=World)
    enemies: list[AIEnemy] = field(default_factory=list)
    items: list[GameItem] = field(default_factory=list)
    active_effects: int = 0
    save_file: str = ""
    is_loaded: bool = False
    real_start_time: int = field(default_factory=_now)
    paused: bool = False
    debug_mode: bool = False

    @property
    def enemy_count(self) -> int:
        return len(self.enemies)

    @property
    def item_count(self) -> int:
        return len(self.items)

    # World and chunks

    def init_world(self, width: int, height: int, seed: int) -> None:
        """Reset the world to a single all-floor chunk at (0, 0)."""
        now = _now()
        self.world = World(
            name=DEFAULT_WORLD_NAME,
            chunk_width=width,
            chunk_height=height,
            seed=seed,
            world_time=now,
            turn_counter=0,
            chunks=[WorldChunk(x=0, y=0, width=width, height=height, active=True, last_updated=now)],
        )

    def load_chunk(self, chunk_x: int, chunk_y: int) -> WorldChunk:
        """Activate the chunk at these coordinates, generating it if it is new.

        The loaded chunk becomes the current one.
        """
        chunk = self.get_chunk_at(chunk_x, chunk_y)
        if chunk is None:
            world = self.world
            tiles = [
                [
                    _generated_tile(
                        _c_remainder(
                            x * 7 + y * 13 + world.seed + chunk_x * 31 + chunk_y * 47, 100
                        )
                    )
                    for x in range(world.chunk_width)
                ]
                for y in range(world.chunk_height)
            ]
            chunk = WorldChunk(
                x=chunk_x,
                y=chunk_y,
                width=world.chunk_width,
                height=world.chunk_height,
                tiles=tiles,
            )
            world.chunks.append(chunk)
        chunk.active = True
        self.world.current_chunk_x = chunk_x
        self.world.current_chunk_y = chunk_y
        return chunk

    def unload_chunk(self, chunk_x: int, chunk_y: int) -> None:
        """Mark a chunk inactive; it stays in the world."""
        chunk = self.get_chunk_at(chunk_x, chunk_y)
        if chunk is not None:
            chunk.active = False
            chunk.last_updated = _now()

    def get_chunk_at(self, chunk_x: int, chunk_y: int) -> Optional[WorldChunk]:
        return next(
            (c for c in self.world.chunks if c.x == chunk_x and c.y == chunk_y), None
        )

    def get_chunk_index(self, chunk_x: int, chunk_y: int) -> int:
        """Position of the chunk in the world's list, or -1 if absent."""
        return next(
            (
                index
                for index, c in enumerate(self.world.chunks)
                if c.x == chunk_x and c.y == chunk_y
            ),
            -1,
        )

    # Tiles

    def _current_chunk(self) -> Optional[WorldChunk]:
        return self.get_chunk_at(self.world.current_chunk_x, self.world.current_chunk_y)

    def get_tile(self, x: int, y: int) -> Optional[WorldTile]:
        """The tile at (x, y) in the current chunk, or None."""
        chunk = self._current_chunk()
        return chunk.tile_at(x, y) if chunk is not None else None

    def set_tile(self, x: int, y: int, tile_type: TileType | int) -> None:
        tile = self.get_tile(x, y)
        if tile is not None:
            tile.apply_type(tile_type)

    def is_walkable(self, x: int, y: int) -> bool:
        tile = self.get_tile(x, y)
        return tile is not None and tile.walkable and tile.entity_id == 0

    # Enemies

    def move_entity(self, entity_id: int, new_x: int, new_y: int) -> None:
        """Move an enemy and keep the tiles' entity references in step."""
        enemy = self.get_enemy(entity_id)
        if enemy is None:
            return
        old_tile = self.get_tile(enemy.base.x, enemy.base.y)
        if old_tile is not None:
            old_tile.entity_id = 0
        enemy.base.x = new_x
        enemy.base.y = new_y
        new_tile = self.get_tile(new_x, new_y)
        if new_tile is not None:
            new_tile.entity_id = entity_id

    def add_enemy(self, enemy: AIEnemy) -> int:
        """Add an enemy, give it the next id and mark its tile. Returns the id."""
        enemy.id = self.enemy_count + 1
        self.enemies.append(enemy)
        tile = self.get_tile(enemy.base.x, enemy.base.y)
        if tile is not None:
            tile.entity_id = enemy.id
        return enemy.id

    def remove_enemy(self, enemy_id: int) -> None:
        enemy = self.get_enemy(enemy_id)
        if enemy is None:
            return
        tile = self.get_tile(enemy.base.x, enemy.base.y)
        if tile is not None:
            tile.entity_id = 0
        self.enemies.remove(enemy)

    def get_enemy(self, enemy_id: int) -> Optional[AIEnemy]:
        if enemy_id <= 0:
            return None
        return next((e for e in self.enemies if e.id == enemy_id), None)

    def get_enemy_at(self, x: int, y: int) -> Optional[AIEnemy]:
        tile = self.get_tile(x, y)
        if tile is None or tile.entity_id <= 0:
            return None
        return self.get_enemy(tile.entity_id)

    # Items

    def _all_tiles(self):
        for chunk in self.world.chunks:
            for row in chunk.tiles:
                yield from row

    def add_item(self, item: GameItem, x: int, y: int) -> int:
        """Add an item, placing it on (x, y) when both are non-negative. Returns its id."""
        self.items.append(item)
        item_id = self.item_count
        if x >= 0 and y >= 0:
            tile = self.get_tile(x, y)
            if tile is not None:
                tile.item_id = item_id
        return item_id

    def get_item(self, item_id: int) -> Optional[GameItem]:
        if 0 < item_id <= self.item_count:
            return self.items[item_id - 1]
        return None

    def remove_item(self, item_id: int) -> None:
        """Remove an item; tiles lose it and later items' ids shift down by one."""
        if not 0 < item_id <= self.item_count:
            return
        del self.items[item_id - 1]
        for tile in self._all_tiles():
            if tile.item_id == item_id:
                tile.item_id = 0
            elif tile.item_id > item_id:
                tile.item_id -= 1

    # Logging

    def log_event(self, message: str) -> None:
        """Print a message, but only in debug mode."""
        if self.debug_mode:
            print(message)