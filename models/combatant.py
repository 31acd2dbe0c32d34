"""Combatant data model for Maze Duel Server."""

from enum import Enum

from pydantic import BaseModel, Field


class CombatantType(str, Enum):
    """Who controls a combatant."""
    USER = "user"
    AI = "ai"


class Combatant(BaseModel):
    """A participant standing in the maze.

    Human and AI combatants share this model; the ``type`` tag and the
    optional metadata fields are the only difference between them.
    """
    id: str = Field(frozen=True)
    name: str
    type: CombatantType = Field(frozen=True)
    position: tuple[int, int]           # Grid position (x, y)
    ai_script_id: str | None = None     # AI only: script the worker runs
    user_id: str | None = None          # USER only: account behind the player

    def relocate(self, position: tuple[int, int]) -> None:
        """Set a new position. Spatial rules are enforced by the match."""
        self.position = position
