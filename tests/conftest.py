# tests/conftest.py
import os
import json
import asyncio
import logging
from typing import AsyncIterator, List, Optional, Tuple

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Ensure test-friendly env before the app modules read it
os.environ.setdefault("ENABLE_CONVERSATION_STATE", "true")
os.environ.setdefault("CONVERSATION_MAX_MESSAGES", "50")

# IMPORTANT: import the app after envs are set
from codestream.main import create_app
from codestream.providers.factory import ModelSelector


class FakeModel:
    """Stands in for a bound LanguageModel: yields canned chunks, optionally fails afterwards."""

    def __init__(self, chunks: List[str], error: Optional[Exception] = None) -> None:
        self.chunks = chunks
        self.error = error
        self.calls: List[dict] = []

    async def stream_text(self, *, system, prompt, temperature, max_tokens) -> AsyncIterator[str]:
        self.calls.append(
            {"system": system, "prompt": prompt, "temperature": temperature, "max_tokens": max_tokens}
        )
        for chunk in self.chunks:
            yield chunk
            await asyncio.sleep(0)
        if self.error is not None:
            raise self.error


class GatedModel(FakeModel):
    """Yields its chunks, then holds the stream open until `release` is set."""

    def __init__(self, chunks: List[str]) -> None:
        super().__init__(chunks)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def stream_text(self, *, system, prompt, temperature, max_tokens) -> AsyncIterator[str]:
        for chunk in self.chunks:
            yield chunk
        self.started.set()
        await self.release.wait()


class RecordingSelector(ModelSelector):
    """Real routing table, fake provider constructors that record (provider, model name)."""

    def __init__(self, model) -> None:
        self.built: List[Tuple[str, str]] = []
        super().__init__({name: self._factory(name, model) for name in ("anthropic", "openai", "groq", "cerebras")})

    def _factory(self, provider: str, model):
        def make(model_name: str):
            self.built.append((provider, model_name))
            return model
        return make


def parse_events(body: str) -> List[dict]:
    events = []
    for frame in body.split("\n\n"):
        if not frame.strip():
            continue
        assert frame.startswith("data: ")
        events.append(json.loads(frame[len("data: "):]))
    return events


@pytest.fixture
def app():
    return create_app()


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def install_model(app):
    # swap the app's selector for one that always hands out the given fake model
    def _install(model) -> RecordingSelector:
        selector = RecordingSelector(model)
        app.state.model_selector = selector
        return selector
    return _install


@pytest.fixture
def caplog_info(caplog):
    caplog.set_level(logging.INFO)
    return caplog
