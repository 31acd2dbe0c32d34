"""FastAPI app entry point for Maze Duel Server."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.game import router as game_router
from api.lobby import router as lobby_router
from config import LOG_FORMAT, LOG_LEVEL, SERVER_NAME, SERVER_VERSION
from engine.errors import GameError
from engine.registry import MatchRegistry

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=SERVER_NAME,
    description="Turn-based maze combat between human and AI combatants",
    version=SERVER_VERSION,
)

app.state.registry = MatchRegistry()

app.include_router(lobby_router, prefix="/matches", tags=["Lobby"])
app.include_router(game_router, prefix="/matches", tags=["Game"])


@app.exception_handler(GameError)
def handle_game_error(request: Request, exc: GameError) -> JSONResponse:
    """Translate engine errors into JSON responses."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning(
            "%s %s rejected (%s): %s",
            request.method, request.url.path, exc.error_code, exc.message,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error_code": exc.error_code},
    )


@app.get("/")
def root() -> dict:
    """Root endpoint returning server info."""
    return {
        "name": SERVER_NAME,
        "version": SERVER_VERSION,
        "status": "running",
        "active_matches": len(app.state.registry),
    }


@app.get("/health")
def health() -> dict:
    """Health check endpoint."""
    return {"healthy": True}
