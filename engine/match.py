"""Match orchestration: creation, joining, turn order and action resolution."""

from __future__ import annotations

import logging
import random
from datetime import datetime, timezone
from uuid import uuid4

from config import MAX_COMBATANTS
from engine.errors import (
    CapacityExceededError,
    GameError,
    InternalError,
    InvalidActionError,
    InvalidModeError,
    MatchFinishedError,
    NotPlayingError,
    NotYourTurnError,
    UnknownCombatantError,
    ValidationError,
)
from engine.maze import (
    cell_at,
    generate_maze,
    in_bounds,
    is_passable,
    neighbor_in_direction,
    parse_direction,
    render,
    set_cell,
    start_positions,
)
from models.combatant import Combatant, CombatantType
from models.match import (
    ActionResult,
    ActionType,
    Match,
    MatchEvent,
    MatchMode,
    MatchSnapshot,
    MatchStatus,
    MatchSummary,
)
from models.maze import CellState, Direction, Maze

logger = logging.getLogger(__name__)


def create_match(
    mode: MatchMode | str,
    width: int,
    height: int,
    rng: random.Random | None = None,
    maze: Maze | None = None,
) -> Match:
    """Initialize a new match waiting for combatants.

    Args:
        mode: AI_VS_USER or AI_VS_AI (enum or its string value).
        width: Maze width in cells.
        height: Maze height in cells.
        rng: Optional Random instance for seeded maze generation.
        maze: Prebuilt maze to use instead of generating one.

    Returns:
        A fresh Match in WAITING status.

    Raises:
        InvalidModeError: If the mode is unknown.
        ValidationError: If the maze size is out of range.
    """
    try:
        mode = MatchMode(mode)
    except ValueError:
        raise InvalidModeError(f"Invalid game mode: {mode!r}") from None

    if maze is None:
        maze = generate_maze(width, height, rng=rng)

    now = _now()
    match = Match(
        match_id=str(uuid4()),
        mode=mode,
        maze=maze,
        created_at=now,
        updated_at=now,
    )
    logger.info(
        "Created match %s (%s, %dx%d)",
        match.match_id, mode.value, maze.width, maze.height,
    )
    logger.debug("Maze for %s:\n%s", match.match_id, render(maze))
    return match


def add_combatant(match: Match, combatant: Combatant) -> Match:
    """Place a combatant in the maze and add it to the match.

    Adding the second combatant starts play: status becomes PLAYING and
    the turn counter is set to 1.

    Raises:
        CapacityExceededError: If the match is already full.
        OutOfBoundsError: If the combatant's position is outside the maze.
        ValidationError: If the position is a wall or already occupied.
    """
    if len(match.combatants) >= MAX_COMBATANTS:
        raise CapacityExceededError()
    if match.status != MatchStatus.WAITING:
        raise NotPlayingError(
            f"Cannot join a match in {match.status.value} status"
        )

    cell = cell_at(match.maze, combatant.position)
    if cell != CellState.EMPTY:
        raise ValidationError(
            f"Start position {combatant.position} is not free ({cell.value})"
        )

    set_cell(match.maze, combatant.position, CellState.OCCUPIED)
    match.combatants.append(combatant)

    if len(match.combatants) == MAX_COMBATANTS:
        match.status = MatchStatus.PLAYING
        match.turn = 1
        logger.info(
            "Match %s started: %s vs %s",
            match.match_id, match.combatants[0].name, match.combatants[1].name,
        )

    match.updated_at = _now()
    return match


def join_match(
    match: Match,
    name: str,
    combatant_type: CombatantType | str,
    ai_script_id: str | None = None,
    user_id: str | None = None,
) -> Combatant:
    """Create a combatant at the next free start position and add it.

    The first combatant starts top-left, the second bottom-right.

    Returns:
        The newly added Combatant.
    """
    if len(match.combatants) >= MAX_COMBATANTS:
        raise CapacityExceededError()
    try:
        combatant_type = CombatantType(combatant_type)
    except ValueError:
        raise ValidationError(f"Invalid combatant type: {combatant_type!r}") from None

    position = start_positions(match.maze)[len(match.combatants)]
    combatant = Combatant(
        id=str(uuid4()),
        name=name,
        type=combatant_type,
        position=position,
        ai_script_id=ai_script_id,
        user_id=user_id,
    )
    add_combatant(match, combatant)
    logger.info(
        "%s combatant %s (%s) joined match %s at %s",
        combatant_type.value, combatant.name, combatant.id, match.match_id, position,
    )
    return combatant


def current_turn_owner(match: Match) -> str:
    """Get the id of the combatant allowed to act now.

    Raises:
        NotPlayingError: If the match does not have two combatants yet.
    """
    if len(match.combatants) != MAX_COMBATANTS or match.turn < 1:
        raise NotPlayingError("Turn order is undefined until two combatants have joined")
    return match.combatants[(match.turn - 1) % MAX_COMBATANTS].id


def process_action(
    match: Match,
    combatant_id: str,
    action: ActionType | str,
    direction: Direction | str,
) -> ActionResult:
    """Validate and resolve one action, advancing the turn if appropriate.

    A BLOCKED move does not consume the turn; every other result does.
    All checks run before any state is touched, so a rejected action
    leaves the match unchanged.

    Args:
        match: Current match (mutated in place).
        combatant_id: ID of the acting combatant.
        action: "move" or "attack".
        direction: "north", "south", "east" or "west".

    Returns:
        The ActionResult.

    Raises:
        NotPlayingError: If the match is not PLAYING (MatchFinishedError
            once it has been won).
        NotYourTurnError: If another combatant owns the turn.
        UnknownCombatantError: If the id is not in this match.
        InvalidActionError: If the action is not move/attack.
        InvalidDirectionError: If the direction is not a cardinal one.
        InternalError: If resolution failed unexpectedly; partial changes
            are undone and the match is moved to ERROR.
    """
    if match.status == MatchStatus.FINISHED:
        raise MatchFinishedError()
    if match.status != MatchStatus.PLAYING:
        raise NotPlayingError(f"Match is not in playing state ({match.status.value})")

    if combatant_id != current_turn_owner(match):
        raise NotYourTurnError()

    index = _combatant_index(match, combatant_id)
    if index is None:
        raise UnknownCombatantError(f"Combatant '{combatant_id}' not found")
    actor = match.combatants[index]

    try:
        action = ActionType(action)
    except ValueError:
        raise InvalidActionError(f"Invalid action: {action!r}") from None
    direction = parse_direction(direction)

    turn = match.turn
    saved_maze = match.maze.model_copy(deep=True)
    saved_position = actor.position
    try:
        if action == ActionType.MOVE:
            result = _resolve_move(match, actor, direction)
        else:
            result = _resolve_attack(match, index, direction)
    except GameError:
        _rollback(match, actor, saved_maze, saved_position)
        raise
    except Exception as e:
        _rollback(match, actor, saved_maze, saved_position)
        match.status = MatchStatus.ERROR
        match.error = f"{type(e).__name__}: {e}"
        match.updated_at = _now()
        logger.exception("Match %s moved to ERROR while resolving %s", match.match_id, action.value)
        raise InternalError(f"Action could not be resolved: {match.error}") from e

    if result != ActionResult.BLOCKED:
        match.turn += 1

    match.event_log.append(MatchEvent(
        id=str(uuid4()),
        turn=turn,
        combatant_id=actor.id,
        combatant_type=actor.type.value,
        action=action,
        direction=direction,
        result=result,
        timestamp=_now(),
    ))
    match.updated_at = _now()

    logger.debug(
        "Match %s turn %d: %s %s %s -> %s",
        match.match_id, turn, actor.name, action.value, direction.value, result.value,
    )
    return result


def _rollback(
    match: Match,
    actor: Combatant,
    maze: Maze,
    position: tuple[int, int],
) -> None:
    """Undo a half-applied resolution."""
    match.maze = maze
    actor.relocate(position)
    match.status = MatchStatus.PLAYING
    match.winner_index = None


def _resolve_move(match: Match, actor: Combatant, direction: Direction) -> ActionResult:
    """Step one cell; blocked by walls, the other combatant and the edge."""
    target = neighbor_in_direction(actor.position, direction)
    if not is_passable(match.maze, target):
        return ActionResult.BLOCKED

    set_cell(match.maze, actor.position, CellState.EMPTY)
    actor.relocate(target)
    set_cell(match.maze, target, CellState.OCCUPIED)
    return ActionResult.SUCCESS


def _resolve_attack(match: Match, actor_index: int, direction: Direction) -> ActionResult:
    """Strike the adjacent cell: walls crumble, a combatant there loses."""
    actor = match.combatants[actor_index]
    target = neighbor_in_direction(actor.position, direction)
    if not in_bounds(match.maze, target):
        return ActionResult.MISS

    cell = cell_at(match.maze, target)
    if cell == CellState.WALL:
        set_cell(match.maze, target, CellState.EMPTY)
        return ActionResult.SUCCESS

    if cell == CellState.OCCUPIED:
        for other in match.combatants:
            if tuple(other.position) == target:
                match.status = MatchStatus.FINISHED
                match.winner_index = actor_index
                logger.info(
                    "Match %s finished: %s hit %s on turn %d",
                    match.match_id, actor.name, other.name, match.turn,
                )
                return ActionResult.HIT

    return ActionResult.MISS


def match_snapshot(match: Match) -> MatchSnapshot:
    """Build a detached, read-only copy of the match state."""
    owner = None
    if match.status == MatchStatus.PLAYING:
        owner = current_turn_owner(match)

    winner = None
    if match.winner_index is not None:
        winner = match.combatants[match.winner_index].model_copy(deep=True)

    return MatchSnapshot(
        match_id=match.match_id,
        mode=match.mode,
        status=match.status,
        turn=match.turn,
        current_turn_owner=owner,
        maze=match.maze.model_copy(deep=True),
        combatants=[c.model_copy(deep=True) for c in match.combatants],
        winner=winner,
        winner_index=match.winner_index,
        error=match.error,
        created_at=match.created_at,
        updated_at=match.updated_at,
    )


def match_summary(match: Match) -> MatchSummary:
    """Compact history entry for a match."""
    return MatchSummary(
        match_id=match.match_id,
        mode=match.mode,
        status=match.status,
        turn=match.turn,
        combatants=[c.model_copy(deep=True) for c in match.combatants],
        created_at=match.created_at,
        updated_at=match.updated_at,
    )


def _combatant_index(match: Match, combatant_id: str) -> int | None:
    """Index of a combatant in join order, or None."""
    for i, combatant in enumerate(match.combatants):
        if combatant.id == combatant_id:
            return i
    return None


def _now() -> datetime:
    return datetime.now(timezone.utc)
