import pytest

from valdmir.enemy import Enemy
from valdmir.engine import HEIGHT, MAX_ENEMIES, WIDTH, Engine, Inventory, Item


def level_text(goblin=(4, 2)):
    grid = []
    for row in range(HEIGHT):
        if row in (0, HEIGHT - 1):
            grid.append(["w"] * WIDTH)
        else:
            grid.append(["w"] + ["0"] * (WIDTH - 2) + ["w"])
    gx, gy = goblin
    grid[gy][gx] = "G"
    return "".join("".join(row) for row in grid)


@pytest.fixture
def engine():
    eng = Engine()
    eng.init_level(level_text())
    return eng


def test_fresh_engine_has_full_size_grids():
    eng = Engine()
    assert len(eng.world) == HEIGHT and all(len(r) == WIDTH for r in eng.world)
    assert len(eng.collision_map) == HEIGHT
    assert all(v == 0 for r in eng.collision_map for v in r)


def test_init_level_sets_world(engine):
    assert engine.world[0][0] == "w"
    assert engine.world[1][1] == "."
    assert engine.world[2][4] == "G"
    assert engine.world[HEIGHT - 1][WIDTH - 1] == "w"


def test_init_level_sets_collisions(engine):
    assert engine.collision_map[0][0] == 1
    assert engine.collision_map[1][1] == 0
    assert engine.collision_map[2][4] == 1


def test_init_level_places_goblin_by_column_and_row(engine):
    assert engine.enemies == [Enemy(x=4, y=2, icon="G", name="Goblin")]
    assert engine.enemy_count == 1


def test_init_level_replaces_enemies(engine):
    engine.init_level(level_text(goblin=(7, 5)))
    assert [(e.x, e.y) for e in engine.enemies] == [(7, 5)]


def test_each_character_consumes_a_cell():
    eng = Engine()
    eng.init_level("w\nw")
    assert eng.world[0][:3] == ["w", " ", "w"]
    assert eng.collision_map[0][:3] == [1, 0, 1]


def test_short_level_leaves_rest_untouched():
    eng = Engine()
    eng.init_level("0" * WIDTH)
    assert all(c == "." for c in eng.world[0])
    assert all(c == " " for c in eng.world[1])


def test_collision_report_round_trip(engine):
    report = engine.collision_report()
    lines = report.splitlines()
    assert len(lines) == HEIGHT
    assert all(line.endswith(" ") for line in lines)
    assert [[int(v) for v in line.split()] for line in lines] == engine.collision_map


def test_write_collision_file(engine, tmp_path):
    target = tmp_path / "collisions.txt"
    engine.write_collision_file(target)
    assert target.read_text() == engine.collision_report()


def test_turn_counts(engine):
    engine.turn()
    engine.turn()
    assert engine.turn_count == 2


def test_init_enemy_ignores_unknown_kind():
    eng = Engine()
    assert eng.init_enemy("X", 1, 1) is None
    assert eng.enemies == []


def test_init_enemy_limit():
    eng = Engine()
    for i in range(MAX_ENEMIES):
        eng.init_enemy("G", i, 0)
    with pytest.raises(ValueError):
        eng.init_enemy("G", 0, 1)
    assert eng.enemy_count == MAX_ENEMIES


def test_render(engine):
    engine.inventory.contents.append(Item(name="Sword", icon="/"))
    screen = engine.render()
    assert "Valdmir!" in screen
    assert f"Enemy Count: {engine.enemy_count}\n" in screen
    assert "\033[92mG " in screen
    assert "\033[100m  \033[40m" in screen
    assert screen.endswith("Enemy List: \nGoblin\n")
    assert "/\n" in screen
    assert screen.count("\n\033[40m") == HEIGHT


def test_inventory_size():
    inv = Inventory()
    assert inv.size == 0
    inv.contents.extend([Item("a", "a"), Item("b", "b")])
    assert inv.size == 2