"""The fixed-size level grid the game draws and moves things on."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Union

from valdmir.enemy import Enemy

HEIGHT = 14
WIDTH = 20
MAX_ENEMIES = 20

_CELL_ART = {
    "@": "\033[33m@ ",
    "w": "\033[100m  \033[40m",
    ".": "\033[47m  ",
    "G": "\033[92mG ",
}


@dataclass
class Item:
    """Something the player carries."""

    name: str
    icon: str
    value: int = 0
    weight: float = 0.0


@dataclass
class Inventory:
    contents: list[Item] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.contents)


def _blank(fill):
    return lambda: [[fill] * WIDTH for _ in range(HEIGHT)]


def _cells(text: str) -> Iterator[tuple[int, int, str]]:
    """Pair each character of a level with the cell it fills, row by row."""
    for (row, col), char in zip(itertools.product(range(HEIGHT), range(WIDTH)), text):
        yield row, col, char


@dataclass
class Engine:
    """The level as drawn: a character grid, a collision grid and its enemies."""

    world: list[list[str]] = field(default_factory=_blank(" "))
    collision_map: list[list[int]] = field(default_factory=_blank(0))
    enemies: list[Enemy] = field(default_factory=list)
    inventory: Inventory = field(default_factory=Inventory)
    turn_count: int = 0

    @property
    def enemy_count(self) -> int:
        return len(self.enemies)

    def turn(self) -> None:
        self.turn_count += 1

    def render(self) -> str:
        """The screen text: header, inventory, the grid and the enemy list."""
        parts = [
            "\033[93m                Valdmir!\n",
            "\033[96mItems: \n",
            f"Enemy Count: {self.enemy_count}\n",
            "".join(item.icon for item in self.inventory.contents),
            "\n",
        ]
        for row in self.world:
            parts.append("".join(_CELL_ART.get(char, "") for char in row))
            parts.append("\n\033[40m")
        parts.append("Enemy List: \n")
        parts.extend(f"{enemy.name}\n" for enemy in self.enemies)
        return "".join(parts)

    def init_enemy(self, kind: str, x: int, y: int) -> Optional[Enemy]:
        """Place an enemy of the given kind; unknown kinds are ignored."""
        if kind != "G":
            return None
        if self.enemy_count >= MAX_ENEMIES:
            raise ValueError(f"a level holds at most {MAX_ENEMIES} enemies")
        goblin = Enemy(x=x, y=y, icon="G", name="Goblin")
        self.enemies.append(goblin)
        return goblin

    def init_level(self, text: str) -> None:
        """Build the level from a stream of WIDTH*HEIGHT cell characters.

        Every character fills one cell, row by row: 'w' is wall, '0' floor and
        'G' a goblin. Other characters leave their cell as it was.
        """
        self.enemies.clear()
        for row, col, char in _cells(text):
            if char == "w":
                self.world[row][col] = "w"
            elif char == "0":
                self.world[row][col] = "."
            elif char == "G":
                self.world[row][col] = "G"
                self.init_enemy("G", col, row)
        self.generate_collision_map(text)

    def generate_collision_map(self, text: str) -> None:
        """Mark walls and goblins as blocked, floor as open."""
        blocking = {"w": 1, "G": 1, "0": 0}
        for row, col, char in _cells(text):
            if char in blocking:
                self.collision_map[row][col] = blocking[char]

    def collision_report(self) -> str:
        """The collision grid as text, one row per line."""
        return "".join(
            "".join(f"{value} " for value in row) + "\n" for row in self.collision_map
        )

    def write_collision_file(self, path: Union[str, Path]) -> None:
        """Dump the collision grid to a file for debugging."""
        Path(path).write_text(self.collision_report())