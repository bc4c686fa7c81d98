import logging
from typing import Callable, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import ValidationError

from codestream.api.deps import get_conversation_lookup, get_model_selector
from codestream.core import config
from codestream.providers.factory import ModelSelector
from codestream.schemas.generate import GenerateRequest
from codestream.services.conversation import ConversationState
from codestream.services.prompt import build_system_prompt
from codestream.services.relay import stream_generation

router = APIRouter(prefix="/api", tags=["generate"])
logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


@router.post("/generate-ai-code-stream")
async def generate_ai_code_stream(
    request: Request,
    selector: ModelSelector = Depends(get_model_selector),
    conversation: Callable[[], Optional[ConversationState]] = Depends(get_conversation_lookup),
):
    # the body is parsed by hand: a missing prompt is a 400 with an {"error": ...} body,
    # not FastAPI's default 422
    try:
        try:
            req = GenerateRequest.model_validate(await request.json())
        except ValidationError as e:
            return JSONResponse({"error": str(e)}, status_code=400)

        if not req.prompt:
            return JSONResponse({"error": "prompt is required"}, status_code=400)

        logger.info("request received: model=%s is_edit=%s temperature=%s", req.model, req.is_edit, req.temperature)

        model = selector.select(req.model)
        logger.info("using %s model %s", *selector.resolve(req.model))

        system = build_system_prompt(req.system_prompt, req.file_contents)
        frames = stream_generation(
            model,
            req,
            system=system,
            max_tokens=config.MAX_TOKENS,
            conversation=conversation,
            scan_window=config.PACKAGE_SCAN_WINDOW,
        )
        return StreamingResponse(frames, media_type="text/event-stream", headers=SSE_HEADERS)
    except Exception as e:
        logger.exception("generate-ai-code-stream failed: %s", e)
        return JSONResponse({"error": str(e) or "Failed to generate code"}, status_code=500)
