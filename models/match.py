"""Match state, action and event models for Maze Duel Server."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel

from models.combatant import Combatant
from models.maze import Direction, Maze


class MatchMode(str, Enum):
    """Which kinds of combatant a match is set up for."""
    AI_VS_USER = "ai_vs_user"
    AI_VS_AI = "ai_vs_ai"


class MatchStatus(str, Enum):
    """Possible states for a match."""
    WAITING = "waiting"             # Fewer than two combatants
    PLAYING = "playing"             # Turns are being taken
    FINISHED = "finished"           # Someone landed a hit
    ERROR = "error"                 # Internal fault during resolution


class ActionType(str, Enum):
    """Actions a combatant can take on its turn."""
    MOVE = "move"
    ATTACK = "attack"


class ActionResult(str, Enum):
    """Outcome of a resolved action."""
    SUCCESS = "success"             # Moved, or destroyed a wall
    BLOCKED = "blocked"             # Move target not passable; turn kept
    HIT = "hit"                     # Attack struck the opponent
    MISS = "miss"                   # Attack found nothing


class MatchEvent(BaseModel):
    """One resolved action in the match log."""
    id: str
    turn: int
    combatant_id: str
    combatant_type: str
    action: ActionType
    direction: Direction
    result: ActionResult
    timestamp: datetime


class Match(BaseModel):
    """The full state of a match."""
    match_id: str
    mode: MatchMode
    maze: Maze
    combatants: list[Combatant] = []
    status: MatchStatus = MatchStatus.WAITING
    turn: int = 0                   # 1-based once playing
    winner_index: int | None = None
    error: str | None = None        # Fault text when status is ERROR
    event_log: list[MatchEvent] = []
    created_at: datetime
    updated_at: datetime


class MatchSnapshot(BaseModel):
    """Read-only view of a match handed to callers."""
    match_id: str
    mode: MatchMode
    status: MatchStatus
    turn: int
    current_turn_owner: str | None
    maze: Maze
    combatants: list[Combatant]
    winner: Combatant | None
    winner_index: int | None
    error: str | None
    created_at: datetime
    updated_at: datetime


class MatchSummary(BaseModel):
    """Compact listing entry for the match history."""
    match_id: str
    mode: MatchMode
    status: MatchStatus
    turn: int
    combatants: list[Combatant]
    created_at: datetime
    updated_at: datetime
