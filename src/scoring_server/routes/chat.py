"""Chat endpoint — the HTTP stand-in for a chat transport.

One POST carries one user message; the response is the reply the bot would
send back.  Commands (``/start``, ``/apacheii``, ``/cancel``) and answers go
through the same endpoint, exactly as they would in a chat.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from scoring_rulesets.engine import ScoringEngine
from scoring_rulesets.models.session import ChatReply

from scoring_server.dependencies import get_engine, get_user_id

router = APIRouter(tags=["chat"])


class ChatMessageRequest(BaseModel):
    """Body for POST /chat/messages."""
    text: str


@router.post("/chat/messages")
def post_message(
    body: ChatMessageRequest,
    user_id: str = Depends(get_user_id),
    engine: ScoringEngine = Depends(get_engine),
) -> ChatReply:
    """Handle one inbound chat message and return the reply."""
    return engine.handle_message(user_id, body.text)
