"""Server-wide configuration constants for Maze Duel Server."""

import os

SERVER_NAME = "Maze Duel Server"
SERVER_VERSION = "0.1.0"

MAZE_MIN_SIZE = 5            # Smallest allowed maze side, border included
MAZE_MAX_SIZE = 30           # Largest allowed maze side, border included
DEFAULT_MAZE_WIDTH = 15
DEFAULT_MAZE_HEIGHT = 15
WALL_PROBABILITY = 0.3       # Chance an interior cell starts as a wall
MAX_COMBATANTS = 2           # Combatants per match

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
