"""Maze generation and cell/adjacency queries for Maze Duel Server."""

from __future__ import annotations

import random

from config import MAZE_MAX_SIZE, MAZE_MIN_SIZE, WALL_PROBABILITY
from engine.errors import InvalidDirectionError, OutOfBoundsError, ValidationError
from models.maze import CellState, Direction, Maze

_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.NORTH: (0, -1),
    Direction.SOUTH: (0, 1),
    Direction.EAST: (1, 0),
    Direction.WEST: (-1, 0),
}


def generate_maze(
    width: int,
    height: int,
    rng: random.Random | None = None,
    wall_probability: float = WALL_PROBABILITY,
) -> Maze:
    """Build a randomized maze.

    The border is solid wall. Each interior cell becomes a wall with
    ``wall_probability``, except the two start cells, which are always
    left empty. No path between the start cells is guaranteed; walls can
    be destroyed by attacks, so every maze is still playable.

    Args:
        width: Number of columns, border included.
        height: Number of rows, border included.
        rng: Optional Random instance for seeded/testing generation.
        wall_probability: Chance for an interior cell to be a wall.

    Returns:
        A Maze with grid indexed as grid[y][x].

    Raises:
        ValidationError: If a side is outside the allowed range.
    """
    for label, size in (("width", width), ("height", height)):
        if not MAZE_MIN_SIZE <= size <= MAZE_MAX_SIZE:
            raise ValidationError(
                f"Maze {label} must be between {MAZE_MIN_SIZE} and "
                f"{MAZE_MAX_SIZE}, got {size}"
            )

    rng = rng or random.Random()

    grid: list[list[CellState]] = []
    for y in range(height):
        row = []
        for x in range(width):
            if x in (0, width - 1) or y in (0, height - 1):
                row.append(CellState.WALL)
            elif rng.random() < wall_probability:
                row.append(CellState.WALL)
            else:
                row.append(CellState.EMPTY)
        grid.append(row)

    maze = Maze(width=width, height=height, grid=grid)
    for pos in start_positions(maze):
        set_cell(maze, pos, CellState.EMPTY)
    return maze


def start_positions(maze: Maze) -> list[tuple[int, int]]:
    """Starting cells in join order: top-left and bottom-right interior."""
    return [(1, 1), (maze.width - 2, maze.height - 2)]


def in_bounds(maze: Maze, position: tuple[int, int]) -> bool:
    """Check if a position lies inside the maze."""
    x, y = position
    return 0 <= x < maze.width and 0 <= y < maze.height


def cell_at(maze: Maze, position: tuple[int, int]) -> CellState:
    """Get the state of a cell.

    Raises:
        OutOfBoundsError: If the position is outside the maze.
    """
    if not in_bounds(maze, position):
        raise OutOfBoundsError(f"Position {tuple(position)} is out of bounds")
    x, y = position
    return maze.grid[y][x]


def set_cell(maze: Maze, position: tuple[int, int], state: CellState) -> None:
    """Overwrite a cell. Keeping the maze consistent is the caller's job."""
    if not in_bounds(maze, position):
        raise OutOfBoundsError(f"Position {tuple(position)} is out of bounds")
    x, y = position
    maze.grid[y][x] = state


def is_passable(maze: Maze, position: tuple[int, int]) -> bool:
    """True if the position is inside the maze and empty."""
    return in_bounds(maze, position) and cell_at(maze, position) == CellState.EMPTY


def neighbor_in_direction(
    position: tuple[int, int],
    direction: Direction | str,
) -> tuple[int, int]:
    """Position one step away in a cardinal direction.

    Pure arithmetic: the result may be out of bounds or on a wall.

    Raises:
        InvalidDirectionError: If direction is not north/south/east/west.
    """
    dx, dy = _OFFSETS[parse_direction(direction)]
    x, y = position
    return (x + dx, y + dy)


def parse_direction(direction: Direction | str) -> Direction:
    """Coerce a direction value, raising a typed error on garbage."""
    try:
        return Direction(direction)
    except ValueError:
        raise InvalidDirectionError(f"Invalid direction: {direction!r}") from None


def render(maze: Maze) -> str:
    """ASCII picture of the maze, one row per line (debugging aid)."""
    glyphs = {CellState.EMPTY: ".", CellState.WALL: "#", CellState.OCCUPIED: "@"}
    return "\n".join("".join(glyphs[cell] for cell in row) for row in maze.grid)
