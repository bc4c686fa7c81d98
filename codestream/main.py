# codestream/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from codestream.core import config
from codestream.api.routers.health import router as health_router
from codestream.api.routers.generate import router as generate_router
from codestream.api.routers.conversation import router as conversation_router
from codestream.providers.factory import build_selector
from codestream.services.conversation import ConversationState


def create_app() -> FastAPI:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(title="codestream", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # shared objects live on app.state and reach handlers through Depends(), never as bare globals
    app.state.model_selector = build_selector()
    app.state.conversation_state = (
        ConversationState(max_messages=config.CONVERSATION_MAX_MESSAGES)
        if config.ENABLE_CONVERSATION_STATE
        else None
    )

    # Routers
    app.include_router(health_router)
    app.include_router(generate_router)
    app.include_router(conversation_router)

    return app


app = create_app()
