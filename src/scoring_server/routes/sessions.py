"""Session endpoints — start, inspect and cancel the caller's session.

All endpoints require the ``X-User-ID`` header.  Each user has at most one
active session; starting a test replaces the previous one.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from scoring_rulesets.engine import ScoringEngine
from scoring_rulesets.models.session import ChatReply, SessionInfo
from scoring_rulesets.ruleset import TestStore

from scoring_server.dependencies import get_engine, get_store, get_user_id

router = APIRouter(tags=["sessions"])


class StartSessionRequest(BaseModel):
    """Body for POST /sessions."""
    test_name: str


@router.post("/sessions", status_code=201)
def start_session(
    body: StartSessionRequest,
    user_id: str = Depends(get_user_id),
    engine: ScoringEngine = Depends(get_engine),
    store: TestStore = Depends(get_store),
) -> ChatReply:
    """Start a test by name and return its first question.

    Raises 404 if the test does not exist.
    """
    # KeyError → 404 via the global handler
    store.get_test(body.test_name)
    return engine.start_test(user_id, body.test_name)


@router.get("/sessions/current")
def get_current_session(
    user_id: str = Depends(get_user_id),
    engine: ScoringEngine = Depends(get_engine),
) -> SessionInfo:
    """Return the caller's active session; 404 if there is none."""
    info = engine.session_info(user_id)
    if info is None:
        raise ValueError(f"Session not found: user_id={user_id}")
    return info


@router.delete("/sessions/current", status_code=204)
def cancel_session(
    user_id: str = Depends(get_user_id),
    engine: ScoringEngine = Depends(get_engine),
) -> None:
    """Discard the caller's active session.  Idempotent."""
    engine.cancel(user_id)
