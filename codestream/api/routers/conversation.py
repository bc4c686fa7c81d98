from fastapi import APIRouter, Depends, HTTPException, Request

from codestream.api.deps import get_conversation_state
from codestream.core import config
from codestream.schemas.generate import ConversationAction
from codestream.services.conversation import ConversationState

router = APIRouter(prefix="/api/conversation-state", tags=["conversation"])


@router.get("")
async def get_state(conversation: ConversationState | None = Depends(get_conversation_state)) -> dict:
    state = await conversation.snapshot() if conversation is not None else None
    return {"success": True, "state": state}


@router.post("")
async def update_state(body: ConversationAction, request: Request) -> dict:
    if body.action != "reset":
        raise HTTPException(status_code=400, detail=f"unknown action: {body.action}")
    state = ConversationState(max_messages=config.CONVERSATION_MAX_MESSAGES)
    request.app.state.conversation_state = state
    return {"success": True, "message": "Conversation state reset", "state": await state.snapshot()}


@router.delete("")
async def clear_state(request: Request) -> dict:
    request.app.state.conversation_state = None
    return {"success": True, "message": "Conversation state cleared"}
