import logging
from typing import AsyncIterator, Callable, List, Optional

from pydantic import BaseModel

from codestream.providers.base import LanguageModel
from codestream.schemas.generate import CompleteEvent, ErrorEvent, GenerateRequest, PackageEvent, TextEvent
from codestream.services.conversation import MessageSink, record_exchange
from codestream.services.packages import DEFAULT_WINDOW, PackageScanner

logger = logging.getLogger(__name__)


def sse_frame(event: BaseModel) -> str:
    return f"data: {event.model_dump_json()}\n\n"


async def stream_generation(
    model: LanguageModel,
    req: GenerateRequest,
    *,
    system: str,
    max_tokens: int,
    conversation: Optional[Callable[[], Optional[MessageSink]]] = None,
    scan_window: int = DEFAULT_WINDOW,
) -> AsyncIterator[str]:
    """
    Relay the model's token stream as SSE frames.

    Every chunk goes out as a `text` event first, then one `package` event per
    newly detected package name. After the last chunk a single `complete` event
    carries the full response; any failure ends the stream with one `error` event.
    `conversation` returns whatever conversation state is current (or None) and
    is called once, after `complete`.
    """
    scanner = PackageScanner(window=scan_window)
    acc: List[str] = []
    try:
        async for chunk in model.stream_text(
            system=system,
            prompt=req.prompt or "",
            temperature=req.temperature,
            max_tokens=max_tokens,
        ):
            acc.append(chunk)
            yield sse_frame(TextEvent(content=chunk))

            for name in scanner.feed(chunk):
                yield sse_frame(PackageEvent(name=name, message=f"📦 Package detected: {name}"))

        response = "".join(acc)
        packages = list(scanner.packages)
        logger.info("generated %d characters with %d packages", len(response), len(packages))
        yield sse_frame(CompleteEvent(
            response=response,
            packages=packages,
            message=f"Generated {len(response)} characters with {len(packages)} packages",
        ))

        # looked up only now: the state may have been reset or dropped while streaming
        sink = conversation() if conversation is not None else None
        if sink is not None:
            await record_exchange(
                sink,
                prompt=req.prompt or "",
                response=response,
                is_edit=req.is_edit,
                packages=packages,
            )
    except Exception as e:
        # headers are already sent, so the failure is reported in-band
        logger.exception("streaming error occurred: %s", e)
        yield sse_frame(ErrorEvent(error=str(e)))
