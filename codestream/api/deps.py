from typing import Callable, Optional

from fastapi import Request

from codestream.providers.factory import ModelSelector
from codestream.services.conversation import ConversationState


def get_conversation_state(request: Request) -> Optional[ConversationState]:
    # may be None: disabled in config or dropped through the conversation-state endpoint
    return request.app.state.conversation_state


def get_model_selector(request: Request) -> ModelSelector:
    return request.app.state.model_selector


def get_conversation_lookup(request: Request) -> Callable[[], Optional[ConversationState]]:
    # streams outlive the request handler; read the state when it is needed, not up front
    return lambda: request.app.state.conversation_state
