"""Action submission, state retrieval, and match log endpoints."""

from fastapi import APIRouter, Request
from pydantic import BaseModel

from engine.match import match_snapshot, process_action
from engine.registry import MatchRegistry
from models.match import ActionResult, MatchEvent, MatchSnapshot

router = APIRouter()


class ActionRequest(BaseModel):
    """A combatant's requested action.

    ``action`` and ``direction`` are plain strings so that bad values are
    reported with the engine's INVALID_ACTION / INVALID_DIRECTION codes.
    """
    combatant_id: str
    action: str                     # "move" | "attack"
    direction: str                  # "north" | "south" | "east" | "west"


class ActionResponse(BaseModel):
    """The server's response after processing an action."""
    match_id: str
    result: ActionResult
    state: MatchSnapshot


def _get_registry(request: Request) -> MatchRegistry:
    """Get the match registry from app state."""
    return request.app.state.registry


@router.get("/{match_id}/state", response_model=MatchSnapshot)
def get_match_state(match_id: str, request: Request) -> MatchSnapshot:
    """Get the full match state."""
    with _get_registry(request).locked(match_id) as match:
        return match_snapshot(match)


@router.post("/{match_id}/action", response_model=ActionResponse)
def submit_action(match_id: str, action: ActionRequest, request: Request) -> ActionResponse:
    """Submit an action for the current turn.

    AI workers and human clients both go through this endpoint.
    """
    with _get_registry(request).locked(match_id) as match:
        result = process_action(match, action.combatant_id, action.action, action.direction)
        return ActionResponse(
            match_id=match_id,
            result=result,
            state=match_snapshot(match),
        )


@router.get("/{match_id}/log", response_model=list[MatchEvent])
def get_match_log(match_id: str, request: Request) -> list[MatchEvent]:
    """Get every resolved action of the match, oldest first."""
    with _get_registry(request).locked(match_id) as match:
        return [event.model_copy() for event in match.event_log]
