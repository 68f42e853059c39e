"""Reading and writing the line-based save file."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator, Union

from valdmir.enemy import Enemy
from valdmir.models import AIEnemy, GameItem, TileType, WorldChunk, WorldTile
from valdmir.state import GameState

HEADER = "ROGUELIKE_SAVE_v1"
HEADER_PREFIX = "ROGUELIKE_SAVE"

_INT = r"([+-]?\d+)"
_CHUNK_RE = re.compile(r"CHUNK " + " ".join([_INT] * 6))
_TILE_RE = re.compile(rf"{_INT} (.) {_INT} {_INT} {_INT} {_INT}")
_ITEM_RE = re.compile(rf"(.*) (.) {_INT} (\S+) {_INT}")


class SaveFormatError(ValueError):
    """The save data is malformed."""


def dump_state(state: GameState) -> str:
    """The save-file text for a game state."""
    player = state.player
    world = state.world
    lines = [
        HEADER,
        "PLAYER",
        f"{player.x} {player.y} {player.health} {player.max_health} "
        f"{player.strength} {player.level} {player.name}",
        "WORLD",
        f"{world.name} {world.chunk_count} {world.chunk_width} "
        f"{world.chunk_height} {world.seed} {world.world_time}",
        "CHUNKS",
    ]
    for chunk in world.chunks:
        lines.append(
            f"CHUNK {chunk.x} {chunk.y} {chunk.width} {chunk.height} "
            f"{int(chunk.active)} {chunk.last_updated}"
        )
        lines.extend(
            f"{int(tile.type)} {tile.display_char} {int(tile.walkable)} "
            f"{int(tile.transparent)} {tile.entity_id} {tile.item_id}"
            for row in chunk.tiles
            for tile in row
        )
    lines.append(f"ENEMIES {state.enemy_count}")
    lines.extend(
        f"{e.id} {e.base.x} {e.base.y} {e.base.health} {e.faction_id} "
        f"{e.ai_state} {e.detection_radius} {e.behavior_flags}"
        for e in state.enemies
    )
    lines.append(f"ITEMS {state.item_count}")
    lines.extend(
        f"{item.name} {item.icon} {item.value} {item.weight:f} {item.type}"
        for item in state.items
    )
    lines.append("END")
    return "\n".join(lines) + "\n"


def _take(lines: Iterator[str], error: str) -> str:
    line = next(lines, None)
    if line is None:
        raise SaveFormatError(error)
    return line


def _ints(fields: list[str], error: str) -> list[int]:
    try:
        return [int(value) for value in fields]
    except ValueError:
        raise SaveFormatError(error) from None


def _read_player(state: GameState, line: str) -> None:
    error = "Error reading player data"
    fields = line.split(" ", 6)
    if len(fields) < 6:
        raise SaveFormatError(error)
    player = state.player
    (player.x, player.y, player.health, player.max_health,
     player.strength, player.level) = _ints(fields[:6], error)
    player.name = fields[6] if len(fields) == 7 else ""


def _read_world(state: GameState, line: str) -> int:
    error = "Error reading world data"
    fields = line.rsplit(" ", 5)
    if len(fields) != 6:
        raise SaveFormatError(error)
    world = state.world
    world.name = fields[0]
    count, world.chunk_width, world.chunk_height, world.seed, world.world_time = _ints(
        fields[1:], error
    )
    return count


def _read_tile(line: str) -> WorldTile:
    match = _TILE_RE.fullmatch(line)
    if match is None:
        raise SaveFormatError("Error reading tile data")
    type_code, char, walkable, transparent, entity_id, item_id = match.groups()
    try:
        tile_type = TileType(int(type_code))
    except ValueError:
        raise SaveFormatError("Error reading tile data") from None
    return WorldTile(
        type=tile_type,
        display_char=char,
        walkable=bool(int(walkable)),
        transparent=bool(int(transparent)),
        entity_id=int(entity_id),
        item_id=int(item_id),
    )


def _read_chunk(lines: Iterator[str]) -> WorldChunk:
    error = "Error reading chunk header"
    match = _CHUNK_RE.fullmatch(_take(lines, error))
    if match is None:
        raise SaveFormatError(error)
    x, y, width, height, active, last_updated = (int(v) for v in match.groups())
    tiles = [
        [_read_tile(_take(lines, "Error reading tile data")) for _ in range(width)]
        for _ in range(height)
    ]
    return WorldChunk(
        x=x,
        y=y,
        width=width,
        height=height,
        tiles=tiles,
        active=bool(active),
        last_updated=last_updated,
    )


def _read_enemy(line: str) -> AIEnemy:
    error = "Error reading enemy data"
    fields = line.split()
    if len(fields) != 8:
        raise SaveFormatError(error)
    enemy_id, x, y, health, faction, ai_state, radius, flags = _ints(fields, error)
    return AIEnemy(
        base=Enemy(x=x, y=y, icon="G", name="Goblin", health=health),
        id=enemy_id,
        faction_id=faction,
        ai_state=ai_state,
        detection_radius=radius,
        behavior_flags=flags,
    )


def _read_item(line: str) -> GameItem:
    error = "Error reading item data"
    match = _ITEM_RE.fullmatch(line)
    if match is None:
        raise SaveFormatError(error)
    name, icon, value, weight, item_type = match.groups()
    try:
        weight_value = float(weight)
    except ValueError:
        raise SaveFormatError(error) from None
    return GameItem(
        name=name, icon=icon, value=int(value), weight=weight_value, type=int(item_type)
    )


def _section_count(line: str, keyword: str, error: str) -> int:
    match = re.match(rf"{keyword}\s*{_INT}", line)
    if match is None:
        raise SaveFormatError(error)
    return int(match.group(1))


def parse_state(text: str) -> GameState:
    """Build a game state from save-file text; raises SaveFormatError if malformed."""
    lines = iter(text.splitlines())
    header = next(lines, None)
    if header is None or not header.startswith(HEADER_PREFIX):
        raise SaveFormatError("Invalid save file format")

    state = GameState()
    declared_chunks = 0
    for line in lines:
        if line == "PLAYER":
            _read_player(state, _take(lines, "Error reading player data"))
        elif line == "WORLD":
            declared_chunks = _read_world(state, _take(lines, "Error reading world data"))
        elif line == "CHUNKS":
            state.world.chunks = [_read_chunk(lines) for _ in range(declared_chunks)]
        elif line.startswith("ENEMIES"):
            count = _section_count(line, "ENEMIES", "Error reading enemy count")
            state.enemies = [
                _read_enemy(_take(lines, "Error reading enemy data")) for _ in range(count)
            ]
        elif line.startswith("ITEMS"):
            count = _section_count(line, "ITEMS", "Error reading item count")
            state.items = [
                _read_item(_take(lines, "Error reading item data")) for _ in range(count)
            ]
        elif line == "END":
            break

    state.is_loaded = True
    return state


def save_game(state: GameState, path: Union[str, Path]) -> None:
    """Write the game state to a save file."""
    Path(path).write_text(dump_state(state), encoding="utf-8")


def load_game(path: Union[str, Path]) -> GameState:
    """Read a game state from a save file."""
    state = parse_state(Path(path).read_text(encoding="utf-8"))
    state.save_file = str(path)
    return state