"""Match creation, combatant joining, listing and removal endpoints."""

from fastapi import APIRouter, Request
from pydantic import BaseModel

from config import DEFAULT_MAZE_HEIGHT, DEFAULT_MAZE_WIDTH
from engine.match import join_match, match_snapshot
from engine.registry import MatchRegistry
from models.match import MatchSnapshot, MatchStatus, MatchSummary

router = APIRouter()


class CreateMatchRequest(BaseModel):
    """Request body for creating a match. Sizes are clamped to 5..30.

    ``mode`` is a plain string so that bad values are reported with the
    engine's INVALID_GAME_MODE code.
    """
    mode: str                       # "ai_vs_user" | "ai_vs_ai"
    maze_width: int = DEFAULT_MAZE_WIDTH
    maze_height: int = DEFAULT_MAZE_HEIGHT


class CreateMatchResponse(BaseModel):
    """Response after creating a match."""
    match_id: str
    state: MatchSnapshot


class AddCombatantRequest(BaseModel):
    """Request body for adding a combatant to a match."""
    name: str
    type: str                       # "user" | "ai"
    ai_script_id: str | None = None
    user_id: str | None = None


class AddCombatantResponse(BaseModel):
    """Response after a combatant joined."""
    combatant_id: str
    status: MatchStatus
    position: tuple[int, int]


def _get_registry(request: Request) -> MatchRegistry:
    """Get the match registry from app state."""
    return request.app.state.registry


@router.post("", response_model=CreateMatchResponse)
def create_match(body: CreateMatchRequest, request: Request) -> CreateMatchResponse:
    """Create a new match and generate its maze."""
    registry = _get_registry(request)
    match = registry.create(body.mode, body.maze_width, body.maze_height)
    with registry.locked(match.match_id) as locked_match:
        state = match_snapshot(locked_match)
    return CreateMatchResponse(match_id=match.match_id, state=state)


@router.get("", response_model=list[MatchSummary])
def list_matches(request: Request) -> list[MatchSummary]:
    """List all matches held by this server, newest first."""
    registry = _get_registry(request)
    return registry.summaries()


@router.post("/{match_id}/combatants", response_model=AddCombatantResponse)
def add_combatant(
    match_id: str,
    body: AddCombatantRequest,
    request: Request,
) -> AddCombatantResponse:
    """Add a combatant. The second one to join starts the match."""
    registry = _get_registry(request)
    with registry.locked(match_id) as match:
        combatant = join_match(
            match,
            body.name,
            body.type,
            ai_script_id=body.ai_script_id,
            user_id=body.user_id,
        )
        return AddCombatantResponse(
            combatant_id=combatant.id,
            status=match.status,
            position=combatant.position,
        )


@router.delete("/{match_id}")
def delete_match(match_id: str, request: Request) -> dict:
    """Destroy a match and free its resources."""
    registry = _get_registry(request)
    with registry.locked(match_id):
        registry.remove(match_id)
    return {"match_id": match_id, "removed": True}
