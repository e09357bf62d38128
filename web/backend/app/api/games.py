from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from chakra.errors import ChakraError, GameAlreadyOver

from ..schemas.game import (
    CreateGameRequest, GameStateResponse, MoveRequest, SelectRequest,
)
from ..services.serializer import session_to_payload
from ..services.session import session_manager

router = APIRouter(prefix="/games")


# ---------------------------------------------------------------------------
# Error helpers (returns the exact contract: {error_code, message, details})
# ---------------------------------------------------------------------------

def _err(status: int, error_code: str, message: str, details: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content={
            "error_code": error_code,
            "message": message,
            "details": details or {},
        },
    )


def _engine_err(exc: ChakraError, details: dict | None = None) -> JSONResponse:
    status = 409 if isinstance(exc, GameAlreadyOver) else 422
    return _err(status, exc.error_code, str(exc), details)


def _get_session_or_404(session_id: str):
    session = session_manager.get(session_id)
    if session is None:
        return None, _err(
            404, "SESSION_NOT_FOUND",
            f"Session '{session_id}' not found.",
        )
    return session, None


# ---------------------------------------------------------------------------
# POST /api/games  — create a new session
# ---------------------------------------------------------------------------

@router.post("", response_model=GameStateResponse)
def create_game(req: CreateGameRequest):
    try:
        session_id, session = session_manager.create(
            req.player_count, req.human_count, req.names, req.colors,
            req.enable_rotation,
        )
    except ChakraError as exc:
        return _engine_err(exc)
    return session_to_payload(session_id, session)


# ---------------------------------------------------------------------------
# GET /api/games/{session_id}  — fetch current state
# ---------------------------------------------------------------------------

@router.get("/{session_id}", response_model=GameStateResponse)
def get_game(session_id: str):
    session, err = _get_session_or_404(session_id)
    if err:
        return err
    with session.lock:
        return session_to_payload(session_id, session)


# ---------------------------------------------------------------------------
# POST /api/games/{session_id}/select  — human clicks a node
# ---------------------------------------------------------------------------

@router.post("/{session_id}/select", response_model=GameStateResponse)
def select_node(session_id: str, req: SelectRequest):
    session, err = _get_session_or_404(session_id)
    if err:
        return err

    with session.lock:
        session.last_turns = []
        try:
            session.game.select_node(req.node)
        except ChakraError as exc:
            return _engine_err(exc, {"node": req.node})
        return session_to_payload(session_id, session)


# ---------------------------------------------------------------------------
# POST /api/games/{session_id}/move  — human moves source -> dest
# ---------------------------------------------------------------------------

@router.post("/{session_id}/move", response_model=GameStateResponse)
def make_move(session_id: str, req: MoveRequest):
    session, err = _get_session_or_404(session_id)
    if err:
        return err

    with session.lock:
        session.last_turns = []
        try:
            session.game.attempt_move(req.source, req.dest)
        except ChakraError as exc:
            return _engine_err(exc, {"source": req.source, "dest": req.dest})
        return session_to_payload(session_id, session)


# ---------------------------------------------------------------------------
# POST /api/games/{session_id}/computer-move  — one automatic turn
#
# The frontend calls this repeatedly with its own delay between calls so
# that computer moves are visible one at a time.
# ---------------------------------------------------------------------------

@router.post("/{session_id}/computer-move", response_model=GameStateResponse)
def computer_move(session_id: str):
    session, err = _get_session_or_404(session_id)
    if err:
        return err

    with session.lock:
        if session.game.done:
            return _err(409, "GAME_ALREADY_OVER", "The game has already ended.")

        turn = session.game.play_computer_turn()
        if turn is None:
            return _err(
                409, "WAITING_FOR_HUMAN",
                f"It is {session.game.game.current.name}'s turn.",
                {"player": session.game.game.current_player},
            )
        session.last_turns = [turn]
        return session_to_payload(session_id, session)


# ---------------------------------------------------------------------------
# POST /api/games/{session_id}/reset  — restart the session
# ---------------------------------------------------------------------------

@router.post("/{session_id}/reset", response_model=GameStateResponse)
def reset_game(session_id: str):
    session, err = _get_session_or_404(session_id)
    if err:
        return err

    with session.lock:
        session.game.reset_game()
        session.last_turns = []
        return session_to_payload(session_id, session)


# ---------------------------------------------------------------------------
# DELETE /api/games/{session_id}  — clean up a session
# ---------------------------------------------------------------------------

@router.delete("/{session_id}", status_code=204)
def delete_game(session_id: str):
    session_manager.delete(session_id)
