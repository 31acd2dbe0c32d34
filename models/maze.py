"""Maze grid models for Maze Duel Server."""

from enum import Enum

from pydantic import BaseModel


class CellState(str, Enum):
    """What occupies a single maze cell."""
    EMPTY = "empty"                 # Walkable
    WALL = "wall"                   # Blocks movement, destructible by attack
    OCCUPIED = "occupied"           # A combatant stands here


class Direction(str, Enum):
    """The four cardinal directions. No diagonals."""
    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"


class Maze(BaseModel):
    """A rectangular maze."""
    width: int
    height: int
    grid: list[list[CellState]]     # 2D grid [y][x]
