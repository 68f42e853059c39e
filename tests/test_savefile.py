import pytest

from valdmir.enemy import Enemy
from valdmir.models import AIEnemy, GameItem, TileType
from valdmir.savefile import (
    SaveFormatError,
    dump_state,
    load_game,
    parse_state,
    save_game,
)
from valdmir.state import GameState


def make_state():
    state = GameState()
    state.init_world(4, 3, 11)
    state.player.name = "Hero"
    state.player.x = 2
    state.player.y = 1
    state.player.strength = 7
    state.set_tile(1, 1, TileType.WALL)
    state.set_tile(0, 2, TileType.EMPTY)
    state.add_enemy(
        AIEnemy(base=Enemy(x=3, y=2, health=9), faction_id=2, ai_state=1,
                detection_radius=4, behavior_flags=6)
    )
    state.add_item(GameItem(name="Iron Sword", icon="/", value=30, weight=1.5, type=2), 0, 0)
    return state


def test_dump_starts_with_header_and_ends_with_end():
    text = dump_state(make_state())
    assert text.startswith("ROGUELIKE_SAVE_v1\nPLAYER\n")
    assert text.endswith("END\n")


def test_round_trip_player():
    state = make_state()
    loaded = parse_state(dump_state(state))
    assert loaded.player.name == "Hero"
    assert (loaded.player.x, loaded.player.y) == (2, 1)
    assert loaded.player.strength == 7
    assert loaded.player.health == state.player.health
    assert loaded.player.level == state.player.level


def test_round_trip_world_and_chunks():
    state = make_state()
    state.load_chunk(1, 0)
    loaded = parse_state(dump_state(state))
    assert loaded.world.name == "Default World"
    assert loaded.world.seed == 11
    assert loaded.world.world_time == state.world.world_time
    assert (loaded.world.chunk_width, loaded.world.chunk_height) == (4, 3)
    assert loaded.world.chunks == state.world.chunks


def test_empty_tile_character_survives():
    loaded = parse_state(dump_state(make_state()))
    tile = loaded.world.chunks[0].tile_at(0, 2)
    assert tile.type == TileType.EMPTY
    assert tile.display_char == " "


def test_round_trip_enemy_gets_default_look():
    loaded = parse_state(dump_state(make_state()))
    assert loaded.enemy_count == 1
    enemy = loaded.enemies[0]
    assert (enemy.id, enemy.base.x, enemy.base.y, enemy.base.health) == (1, 3, 2, 9)
    assert (enemy.faction_id, enemy.ai_state, enemy.detection_radius, enemy.behavior_flags) == (2, 1, 4, 6)
    assert (enemy.base.icon, enemy.base.name) == ("G", "Goblin")


def test_round_trip_items():
    state = make_state()
    loaded = parse_state(dump_state(state))
    assert loaded.items == state.items
    assert loaded.world.chunks[0].tile_at(0, 0).item_id == 1


def test_parse_marks_state_loaded():
    assert parse_state(dump_state(make_state())).is_loaded is True


def test_header_prefix_is_enough():
    loaded = parse_state("ROGUELIKE_SAVE_v9\nEND\n")
    assert loaded.world.chunks == []
    assert loaded.is_loaded is True


def test_bad_header_rejected():
    with pytest.raises(SaveFormatError):
        parse_state("NOT_A_SAVE\nEND\n")


def test_empty_text_rejected():
    with pytest.raises(SaveFormatError):
        parse_state("")


def test_truncated_player_rejected():
    with pytest.raises(SaveFormatError, match="player"):
        parse_state("ROGUELIKE_SAVE_v1\nPLAYER\n1 2 x\n")


def test_missing_chunk_rejected():
    text = "ROGUELIKE_SAVE_v1\nWORLD\nW 2 1 1 0 0\nCHUNKS\nCHUNK 0 0 1 1 1 0\n1 . 1 1 0 0\nEND\n"
    with pytest.raises(SaveFormatError, match="chunk header"):
        parse_state(text)


def test_unknown_tile_type_rejected():
    text = "ROGUELIKE_SAVE_v1\nWORLD\nW 1 1 1 0 0\nCHUNKS\nCHUNK 0 0 1 1 1 0\n9 . 1 1 0 0\nEND\n"
    with pytest.raises(SaveFormatError, match="tile"):
        parse_state(text)


def test_bad_enemy_line_rejected():
    with pytest.raises(SaveFormatError, match="enemy"):
        parse_state("ROGUELIKE_SAVE_v1\nENEMIES 1\n1 2 3\nEND\n")


def test_unknown_lines_are_ignored():
    text = dump_state(make_state()).replace("WORLD\n", "NOTE whatever\nWORLD\n", 1)
    assert parse_state(text).world.name == "Default World"


def test_save_and_load_file(tmp_path):
    path = tmp_path / "savegame.sav"
    state = make_state()
    save_game(state, path)
    loaded = load_game(path)
    assert loaded.save_file == str(path)
    assert loaded.world.chunks == state.world.chunks
    assert path.read_text(encoding="utf-8") == dump_state(state)


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_game(tmp_path / "absent.sav")