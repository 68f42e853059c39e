"""Copying the current chunk between the game state and the drawn level grid."""

from __future__ import annotations

from valdmir.engine import HEIGHT, WIDTH, Engine
from valdmir.enemy import Enemy
from valdmir.models import AI_IDLE, AIEnemy, TileType
from valdmir.state import GameState

_SPAWN_HEALTH = 10
_SPAWN_FACTION = 1
_SPAWN_DETECTION_RADIUS = 5


def world_to_engine(state: GameState, engine: Engine) -> None:
    """Draw the current chunk, its enemies and the player onto the engine grid.

    Does nothing when the current chunk does not exist.
    """
    chunk = state.get_chunk_at(state.world.current_chunk_x, state.world.current_chunk_y)
    if chunk is None:
        return

    for y in range(min(chunk.height, HEIGHT)):
        for x in range(min(chunk.width, WIDTH)):
            tile = chunk.tiles[y][x]
            char = tile.display_char
            engine.collision_map[y][x] = 0 if tile.walkable else 1
            if tile.entity_id > 0:
                enemy = state.get_enemy(tile.entity_id)
                if enemy is not None:
                    char = enemy.base.icon
            if state.player.x == x and state.player.y == y:
                char = "@"
            engine.world[y][x] = char

    engine.enemies = [
        Enemy(
            x=ai.base.x,
            y=ai.base.y,
            icon=ai.base.icon,
            name=ai.base.name,
            health=ai.base.health,
        )
        for ai in state.enemies
        if 0 <= ai.base.x < WIDTH and 0 <= ai.base.y < HEIGHT
    ]


def engine_to_world(state: GameState, engine: Engine) -> None:
    """Store the engine grid into the current chunk, loading the chunk if needed.

    Walls and floor become tiles, the player's cell becomes floor and sets the
    player's position, and each engine enemy becomes a new AI enemy on floor.
    """
    world = state.world
    chunk = state.get_chunk_at(world.current_chunk_x, world.current_chunk_y)
    if chunk is None:
        chunk = state.load_chunk(world.current_chunk_x, world.current_chunk_y)

    for y in range(min(chunk.height, HEIGHT)):
        for x in range(min(chunk.width, WIDTH)):
            tile = chunk.tiles[y][x]
            char = engine.world[y][x]
            if char == "w":
                tile.apply_type(TileType.WALL)
            elif char == ".":
                tile.apply_type(TileType.FLOOR)
            elif char == "@":
                tile.apply_type(TileType.FLOOR)
                state.player.x = x
                state.player.y = y
            else:
                found = next((e for e in engine.enemies if e.x == x and e.y == y), None)
                if found is None:
                    continue
                tile.apply_type(TileType.FLOOR)
                state.add_enemy(
                    AIEnemy(
                        base=Enemy(
                            x=x,
                            y=y,
                            icon=found.icon,
                            name=found.name,
                            health=_SPAWN_HEALTH,
                        ),
                        faction_id=_SPAWN_FACTION,
                        ai_state=AI_IDLE,
                        detection_radius=_SPAWN_DETECTION_RADIUS,
                        behavior_flags=0,
                    )
                )