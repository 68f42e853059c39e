"""The playable game: level loading, key handling, enemy turns and the main loop."""

from __future__ import annotations

import argparse
import os
import random
import subprocess
import sys
import time
from pathlib import Path
from typing import Optional, TextIO, Union

from valdmir.ai import update_game_state
from valdmir.bridge import engine_to_world, world_to_engine
from valdmir.engine import HEIGHT, WIDTH, Engine
from valdmir.enemy import Direction, Enemy
from valdmir.models import Player
from valdmir.savefile import SaveFormatError, load_game, save_game
from valdmir.state import GameState

DEFAULT_LEVEL = "2.lvl"
DEFAULT_SAVE = "savegame.sav"
START_X = 3
START_Y = 3
ATTACK_COST = 2

_MOVES = {
    "w": Direction.UP,
    "a": Direction.LEFT,
    "s": Direction.DOWN,
    "d": Direction.RIGHT,
}

_CONTROLS = "Controls: w,a,s,d to move, z to save, x to load, q to quit\n"


class Game:
    """One running game: the persistent state, the drawn level and the player."""

    def __init__(
        self,
        out: Optional[TextIO] = None,
        rng: Optional[random.Random] = None,
        save_path: Union[str, Path] = DEFAULT_SAVE,
    ) -> None:
        self.out = out if out is not None else sys.stdout
        self.rng = rng if rng is not None else random.Random()
        self.save_path = save_path
        self.state = GameState()
        self.engine = Engine()
        self.user = Player()
        self.player_x = START_X
        self.player_y = START_Y
        self.running = True

    def load_level(self, path: Union[str, Path]) -> None:
        """Read a level file and build both the drawn level and the world from it."""
        text = Path(path).read_text()
        self.engine.init_level(text)
        self.state.init_world(WIDTH, HEIGHT, int(time.time()))
        engine_to_world(self.state, self.engine)
        self.state.player.x = self.player_x
        self.state.player.y = self.player_y
        self.engine.world[self.player_y][self.player_x] = "@"

    def status_text(self) -> str:
        user = self.user
        return (
            f"\nHealth: {user.health}/{user.max_health} | Level: {user.level}\n"
            + _CONTROLS
        )

    def _draw(self) -> None:
        self.out.write("\033[H" + self.engine.render() + self.status_text())
        self.out.flush()

    def _is_open(self, x: int, y: int) -> bool:
        return (
            0 <= y < HEIGHT
            and 0 <= x < WIDTH
            and self.engine.collision_map[y][x] != 1
        )

    def _enemy_at(self, x: int, y: int) -> Optional[Enemy]:
        return next((e for e in self.engine.enemies if e.x == x and e.y == y), None)

    def _attack(self, enemy: Enemy) -> None:
        self.out.write(f"\nYou attack the {enemy.name}!\n")
        self.state.player.health -= ATTACK_COST
        self.user.health = self.state.player.health
        self.engine.world[enemy.y][enemy.x] = "."
        if self.state.get_enemy_at(enemy.x, enemy.y) is not None:
            tile = self.state.get_tile(enemy.x, enemy.y)
            if tile is not None:
                tile.entity_id = 0
        self.engine.enemies.remove(enemy)

    def handle_key(self, key: str) -> None:
        """Act on one key press; a valid move or attack advances a turn."""
        world = self.engine.world
        world[self.player_y][self.player_x] = "."
        new_x, new_y = self.player_x, self.player_y

        if key in _MOVES:
            dx, dy = _MOVES[key].offset
            new_x += dx
            new_y += dy
        elif key == "q":
            self.running = False
            world[self.player_y][self.player_x] = "@"
            return
        elif key == "z":
            self.save(self.save_path)
        elif key == "x":
            if self.load(self.save_path):
                self._draw()
            new_x, new_y = self.player_x, self.player_y
            world = self.engine.world
            world[self.player_y][self.player_x] = "."

        if not self._is_open(new_x, new_y):
            world[self.player_y][self.player_x] = "@"
            return

        enemy = self._enemy_at(new_x, new_y)
        if enemy is not None:
            self._attack(enemy)
        else:
            self.player_x, self.player_y = new_x, new_y
            self.state.player.x = new_x
            self.state.player.y = new_y

        world[self.player_y][self.player_x] = "@"
        self._draw()

        self.engine.turn()
        self.process_enemy_turns()
        update_game_state(self.state, self.rng)

        if self.user.health <= 0:
            self.out.write("\nYou have died! Game over.\n")
            self.running = False

    def process_enemy_turns(self) -> None:
        """Each enemy has a one-in-four chance to step in a random direction."""
        world = self.engine.world
        for enemy in self.engine.enemies:
            if self.rng.randrange(4) != 0:
                continue
            dx, dy = Direction(self.rng.randrange(4)).offset
            new_x, new_y = enemy.x + dx, enemy.y + dy
            if not self._is_open(new_x, new_y):
                continue
            if (new_x, new_y) == (self.player_x, self.player_y):
                continue
            world[enemy.y][enemy.x] = "."
            enemy.x, enemy.y = new_x, new_y
            world[new_y][new_x] = enemy.icon

    def save(self, path: Union[str, Path]) -> None:
        save_game(self.state, path)
        self.out.write(f"Game saved to {path}\n")

    def load(self, path: Union[str, Path]) -> bool:
        """Replace the game with a saved one; False if it cannot be read."""
        try:
            loaded = load_game(path)
        except OSError:
            self.out.write(f"Could not open save file: {path}\n")
            return False
        except SaveFormatError as exc:
            self.out.write(f"{exc}\n")
            return False

        self.state = loaded
        self.out.write(f"Game loaded from {path}\n")
        world_to_engine(self.state, self.engine)
        self.player_x = self.state.player.x
        self.player_y = self.state.player.y
        self.user.health = self.state.player.health
        self.user.max_health = self.state.player.max_health
        self.user.level = self.state.player.level
        return True


def init_color() -> None:
    """Prepare the console for colour output and clear it."""
    if os.name == "nt":
        subprocess.run("setup.bat", shell=True, check=False)
        subprocess.run("cls", shell=True, check=False)
    else:
        sys.stdout.write("\033[2J\033[H")
        sys.stdout.flush()


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="valdmir", description="A small roguelike.")
    parser.add_argument("--level", default=DEFAULT_LEVEL, help="level file to play")
    parser.add_argument("--save", default=DEFAULT_SAVE, help="save file to use")
    args = parser.parse_args(argv)

    game = Game(save_path=args.save)
    try:
        game.load_level(args.level)
    except OSError:
        print("Error! No level file in directory!")
        return 1
    print("Loaded Level")

    from blessed import Terminal

    init_color()
    game._draw()
    terminal = Terminal()
    with terminal.cbreak():
        while game.running:
            key = terminal.inkey()
            if key:
                game.handle_key(str(key))

    print("\nThanks for playing!")
    return 0


if __name__ == "__main__":
    sys.exit(main())