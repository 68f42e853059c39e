# valdmir

A small roguelike for the terminal. You walk a walled level as `@` while
goblins (`G`) wander about. The game state can be saved to and loaded from a
plain text file.

## Installing

```
pip install .
```

To run the tests as well:

```
pip install .[test]
pytest
```

## Playing

Put a level file named `2.lvl` in the current directory and run:

```
valdmir
```

Options:

- `--level PATH` plays another level file (default `2.lvl`).
- `--save PATH` uses another save file (default `savegame.sav`).

If the level file cannot be read, the command prints an error and exits with
status 1.

### Level files

A level is read as a stream of characters that fill a 20 by 14 grid one cell
at a time, row by row. Every character takes up a cell, line breaks included.
`w` is a wall, `0` is floor and `G` places a goblin. Any other character
leaves its cell blank. The player starts at column 3, row 3.

### Controls

| Key | Action                          |
|-----|---------------------------------|
| w   | move up                         |
| a   | move left                       |
| s   | move down                       |
| d   | move right                      |
| z   | save to the save file           |
| x   | load from the save file         |
| q   | quit                            |

Walls block movement. A goblin's starting cell is also blocked. Once a goblin
has wandered onto open floor, stepping into it attacks it. The attack removes
the goblin and costs you 2 health.

Each move or attack takes a turn. On every turn each goblin has a one-in-four
chance to step in a random direction. The game ends when your health reaches
zero.

On Windows the command runs `setup.bat` and `cls` to prepare the console. On
other systems it clears the screen with escape codes.

## Using it as a library

The pieces can also be used on their own:

- `valdmir.engine.Engine` holds the level grid, the collision map, the enemy
  list and the inventory.
  - `init_level` builds a level from text.
  - `render` returns the screen text.
  - `collision_report` and `write_collision_file` show the collision grid.
- `valdmir.state.GameState` holds the player, the world as chunks of tiles,
  the enemies and the items.
  - `init_world` and `load_chunk` create chunks. New chunks are generated from
    the world seed.
  - `get_tile`, `set_tile` and `is_walkable` work on tiles.
  - `add_enemy`, `move_entity`, `remove_enemy`, `get_enemy` and `get_enemy_at`
    manage enemies.
  - `add_item`, `get_item` and `remove_item` manage items.
- `valdmir.models` defines the data types, including `TileType`, `WorldTile`,
  `WorldChunk`, `World`, `Player`, `AIEnemy` and `GameItem`.
- `valdmir.ai` provides:
  - `get_distance`, `line_of_sight` and `can_detect_player`;
  - the enemy memory and path functions;
  - `process_enemy_ai` and the per-turn `update_game_state`;
  - `roll_dice` and `chance`.

  Functions that use randomness take an optional `random.Random`.
- `valdmir.savefile` turns a state into save-file text and back:
  - `dump_state` and `parse_state` work on text;
  - `save_game` and `load_game` work on files.

  Malformed save data raises `SaveFormatError`.
- `valdmir.bridge` copies the current chunk between the engine grid and the
  game state, with `world_to_engine` and `engine_to_world`.
- `valdmir.enemy.follow_player` picks a `Direction` for an enemy chasing the
  player, or `None` when it is boxed in.
- `valdmir.game.Game` ties these together: level loading, key handling, enemy
  turns, saving and loading.

```python
from valdmir.state import GameState
from valdmir.savefile import dump_state, parse_state

state = GameState()
state.init_world(20, 14, seed=42)
state.load_chunk(1, 0)
restored = parse_state(dump_state(state))
```

## What it does not do

- There is no title menu. The command starts straight into the level.
- The inventory is shown as a row of item icons, but the game has no way to
  pick up, use or inspect items.
- There are no character, inventory or map screens.
- The enemies on screen only wander at random. The chasing and memory logic in
  `valdmir.ai` runs on the game state's enemies and does not move what is
  drawn.