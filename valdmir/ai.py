"""Enemy perception, memory and behaviour, plus the per-turn world update."""

from __future__ import annotations

import math
import random
import time
from typing import Optional

from valdmir.enemy import Direction
from valdmir.models import (
    AI_CHASE,
    AI_IDLE,
    AI_PATROL,
    MAX_MEMORIES,
    AIEnemy,
    Memory,
    WorldChunk,
)
from valdmir.state import GameState

PLAYER_ID = 0

_default_rng = random.Random()


def _pick_rng(rng: Optional[random.Random]) -> random.Random:
    return _default_rng if rng is None else rng


def get_distance(x1: int, y1: int, x2: int, y2: int) -> int:
    """Straight-line distance between two cells, rounded down."""
    dx = x2 - x1
    dy = y2 - y1
    return math.isqrt(dx * dx + dy * dy)


def line_of_sight(state: GameState, x1: int, y1: int, x2: int, y2: int) -> bool:
    """Whether no opaque tile lies strictly between the two cells."""
    dx = abs(x2 - x1)
    dy = abs(y2 - y1)
    sx = 1 if x1 < x2 else -1
    sy = 1 if y1 < y2 else -1
    err = dx - dy
    x, y = x1, y1
    while (x, y) != (x2, y2):
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy
        if (x, y) == (x2, y2):
            continue
        tile = state.get_tile(x, y)
        if tile is not None and not tile.transparent:
            return False
    return True


def can_detect_player(state: GameState, enemy: AIEnemy) -> bool:
    """Whether the player is within the enemy's radius and in plain view."""
    player = state.player
    distance = get_distance(enemy.base.x, enemy.base.y, player.x, player.y)
    if distance > enemy.detection_radius:
        return False
    return line_of_sight(state, enemy.base.x, enemy.base.y, player.x, player.y)


def update_enemy_memory(
    state: GameState, enemy: AIEnemy, entity_id: int, x: int, y: int
) -> None:
    """Remember where an entity was seen, forgetting the oldest memory when full."""
    now = state.world.world_time
    for memory in enemy.memories:
        if memory.entity_id == entity_id:
            memory.x, memory.y, memory.time_seen = x, y, now
            return

    if len(enemy.memories) < MAX_MEMORIES:
        enemy.memories.append(Memory(entity_id=entity_id, x=x, y=y, time_seen=now))
        return

    older = [memory for memory in enemy.memories if memory.time_seen < now]
    oldest = min(older, key=lambda m: m.time_seen) if older else enemy.memories[0]
    oldest.entity_id = entity_id
    oldest.x, oldest.y, oldest.time_seen = x, y, now


def calculate_path(enemy: AIEnemy, target_x: int, target_y: int) -> None:
    """Set a direct path from the enemy's position to the target."""
    enemy.path = [(enemy.base.x, enemy.base.y), (target_x, target_y)]
    enemy.path_index = 0


def _start_chase(state: GameState, enemy: AIEnemy) -> None:
    enemy.ai_state = AI_CHASE
    enemy.ai_target_id = PLAYER_ID
    update_enemy_memory(state, enemy, PLAYER_ID, state.player.x, state.player.y)


def _newest_player_memory(enemy: AIEnemy) -> Memory:
    target = enemy.memories[0]
    newest_time = 0
    for memory in enemy.memories:
        if memory.entity_id == PLAYER_ID and memory.time_seen > newest_time:
            target, newest_time = memory, memory.time_seen
    return target


def process_enemy_ai(
    state: GameState, enemy: AIEnemy, rng: Optional[random.Random] = None
) -> None:
    """Run one turn of an enemy's idle, patrol or chase behaviour."""
    rng = _pick_rng(rng)
    sees_player = can_detect_player(state, enemy)

    if enemy.ai_state == AI_IDLE:
        if sees_player:
            _start_chase(state, enemy)
        elif rng.randrange(4) == 0:
            enemy.ai_state = AI_PATROL

    elif enemy.ai_state == AI_PATROL:
        if sees_player:
            _start_chase(state, enemy)
        else:
            ox, oy = Direction(rng.randrange(4)).offset
            new_x, new_y = enemy.base.x + ox, enemy.base.y + oy
            if state.is_walkable(new_x, new_y):
                state.move_entity(enemy.id, new_x, new_y)

    elif enemy.ai_state == AI_CHASE:
        if sees_player:
            update_enemy_memory(state, enemy, PLAYER_ID, state.player.x, state.player.y)
            calculate_path(enemy, state.player.x, state.player.y)

        if enemy.path and enemy.path_index < len(enemy.path):
            next_x, next_y = enemy.path[enemy.path_index]
            if state.is_walkable(next_x, next_y):
                state.move_entity(enemy.id, next_x, next_y)
            enemy.path_index += 1
        elif not sees_player:
            if enemy.memories:
                target = _newest_player_memory(enemy)
                calculate_path(enemy, target.x, target.y)
            else:
                enemy.ai_state = AI_IDLE


def simulate_world_chunk(chunk: WorldChunk) -> None:
    """Advance a chunk's own simulation; for now this only stamps the time."""
    chunk.last_updated = int(time.time())


def update_game_state(state: GameState, rng: Optional[random.Random] = None) -> None:
    """Advance the world by one turn: clocks, active chunks and every enemy."""
    rng = _pick_rng(rng)
    state.world.world_time += 1
    state.world.turn_counter += 1
    for chunk in state.world.chunks:
        if chunk.active:
            simulate_world_chunk(chunk)
    for enemy in list(state.enemies):
        process_enemy_ai(state, enemy, rng)


def roll_dice(num_dice: int, num_sides: int, rng: Optional[random.Random] = None) -> int:
    """Sum of num_dice rolls of a num_sides-sided die."""
    rng = _pick_rng(rng)
    if num_dice > 0 and num_sides < 1:
        raise ValueError("a die needs at least one side")
    return sum(rng.randrange(num_sides) + 1 for _ in range(num_dice))


def chance(probability: float, rng: Optional[random.Random] = None) -> bool:
    """True with the given probability."""
    return _pick_rng(rng).random() < probability