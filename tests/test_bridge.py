from valdmir.bridge import engine_to_world, world_to_engine
from valdmir.engine import HEIGHT, WIDTH, Engine
from valdmir.enemy import Enemy
from valdmir.models import AIEnemy, TileType
from valdmir.state import GameState


def level_text(goblin=None):
    rows = ["w" * WIDTH] + ["w" + "0" * (WIDTH - 2) + "w" for _ in range(HEIGHT - 2)]
    rows.append("w" * WIDTH)
    if goblin is not None:
        x, y = goblin
        row = rows[y]
        rows[y] = row[:x] + "G" + row[x + 1:]
    return "".join(rows)


def fresh_state():
    state = GameState()
    state.init_world(WIDTH, HEIGHT, 0)
    return state


def test_engine_to_world_copies_walls_and_floor():
    engine = Engine()
    engine.init_level(level_text())
    state = fresh_state()
    engine_to_world(state, engine)
    assert state.get_tile(0, 0).type == TileType.WALL
    assert state.get_tile(0, 0).walkable is False
    assert state.get_tile(5, 5).type == TileType.FLOOR
    assert state.get_tile(5, 5).walkable is True


def test_engine_to_world_reads_player_position():
    engine = Engine()
    engine.init_level(level_text())
    engine.world[6][4] = "@"
    state = fresh_state()
    engine_to_world(state, engine)
    assert (state.player.x, state.player.y) == (4, 6)
    assert state.get_tile(4, 6).display_char == "."


def test_engine_to_world_creates_enemies():
    engine = Engine()
    engine.init_level(level_text(goblin=(10, 5)))
    state = fresh_state()
    engine_to_world(state, engine)
    assert state.enemy_count == 1
    enemy = state.enemies[0]
    assert enemy.id == 1
    assert (enemy.base.x, enemy.base.y) == (10, 5)
    assert enemy.base.health == 10
    assert enemy.base.name == "Goblin"
    assert enemy.detection_radius == 5
    assert state.get_tile(10, 5).entity_id == 1
    assert state.get_tile(10, 5).type == TileType.FLOOR


def test_engine_to_world_loads_missing_chunk():
    engine = Engine()
    engine.init_level(level_text())
    state = fresh_state()
    state.world.current_chunk_x = 1
    engine_to_world(state, engine)
    assert state.get_chunk_index(1, 0) == 1
    assert state.get_tile(0, 0).type == TileType.WALL
    assert state.get_tile(3, 3).type == TileType.FLOOR


def test_world_to_engine_draws_tiles_and_collisions():
    state = fresh_state()
    state.set_tile(5, 5, TileType.WALL)
    state.player.x, state.player.y = 2, 2
    engine = Engine()
    world_to_engine(state, engine)
    assert engine.world[5][5] == "w"
    assert engine.collision_map[5][5] == 1
    assert engine.world[0][0] == "."
    assert engine.collision_map[0][0] == 0
    assert engine.world[2][2] == "@"


def test_world_to_engine_rebuilds_enemy_list():
    state = fresh_state()
    state.add_enemy(AIEnemy(base=Enemy(x=7, y=4, icon="G", name="Goblin", health=3)))
    state.enemies.append(AIEnemy(base=Enemy(x=WIDTH + 5, y=1), id=2))
    engine = Engine()
    engine.enemies.append(Enemy(x=1, y=1))
    world_to_engine(state, engine)
    assert engine.world[4][7] == "G"
    assert [(e.x, e.y, e.health) for e in engine.enemies] == [(7, 4, 3)]


def test_world_to_engine_without_chunk_leaves_engine_alone():
    state = GameState()
    engine = Engine()
    engine.enemies.append(Enemy(x=1, y=1))
    world_to_engine(state, engine)
    assert engine.world[0][0] == " "
    assert engine.enemy_count == 1


def test_round_trip_keeps_layout():
    engine = Engine()
    engine.init_level(level_text())
    state = fresh_state()
    engine_to_world(state, engine)
    copy = Engine()
    world_to_engine(state, copy)
    for row, other in zip(engine.world, copy.world):
        assert [c for c in row if c != "@"] == [c for c in other if c != "@"] or "@" in other
    assert copy.world[0] == engine.world[0]
    assert copy.collision_map[1][1] == engine.collision_map[1][1]