# tests/test_providers.py
import json

import httpx
import pytest
import respx

from codestream.providers.anthropic import AnthropicProvider
from codestream.providers.base import ProviderError
from codestream.providers.openai_compat import OpenAICompatibleProvider

OPENAI_BASE = "https://api.openai.test/v1"
ANTHROPIC_BASE = "https://api.anthropic.test/v1"


def _sse(*payloads) -> bytes:
    lines = []
    for p in payloads:
        data = p if isinstance(p, str) else json.dumps(p)
        lines.append(f"data: {data}\n\n")
    return "".join(lines).encode("utf-8")


def _delta(text):
    return {"choices": [{"index": 0, "delta": {"content": text}}]}


async def _collect(model, **kwargs):
    opts = {"system": "sys", "prompt": "hi", "temperature": 0.7, "max_tokens": 64}
    opts.update(kwargs)
    return [c async for c in model.stream_text(**opts)]


@pytest.mark.asyncio
@respx.mock
async def test_openai_compatible_stream_ok():
    # Role-only first delta, two content deltas, then [DONE]; anything after [DONE] is ignored.
    route = respx.post(f"{OPENAI_BASE}/chat/completions").mock(
        return_value=httpx.Response(
            200,
            content=_sse({"choices": [{"delta": {"role": "assistant"}}]}, _delta("he"), _delta("llo"), "[DONE]", _delta("!")),
            headers={"Content-Type": "text/event-stream"},
        )
    )
    provider = OpenAICompatibleProvider("openai", api_key="sk-test", base_url=OPENAI_BASE)
    out = await _collect(provider.model("gpt-4"))
    assert "".join(out) == "hello"

    sent = json.loads(route.calls.last.request.content)
    assert sent["model"] == "gpt-4"
    assert sent["stream"] is True
    assert sent["max_tokens"] == 64
    assert sent["messages"] == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "hi"},
    ]
    assert route.calls.last.request.headers["authorization"] == "Bearer sk-test"


@pytest.mark.asyncio
@respx.mock
async def test_openai_compatible_http_error():
    respx.post(f"{OPENAI_BASE}/chat/completions").mock(
        return_value=httpx.Response(401, json={"error": {"message": "Invalid API key"}})
    )
    provider = OpenAICompatibleProvider("groq", api_key="bad", base_url=OPENAI_BASE)
    with pytest.raises(ProviderError, match=r"groq API error \(401\): Invalid API key"):
        await _collect(provider.model("openai/gpt-oss-20b"))


@pytest.mark.asyncio
@respx.mock
async def test_openai_compatible_error_mid_stream():
    respx.post(f"{OPENAI_BASE}/chat/completions").mock(
        return_value=httpx.Response(200, content=_sse(_delta("he"), {"error": {"message": "boom"}}))
    )
    provider = OpenAICompatibleProvider("cerebras", api_key="k", base_url=OPENAI_BASE)
    got = []
    with pytest.raises(ProviderError, match="boom"):
        async for c in provider.model("qwen").stream_text(system="", prompt="hi", temperature=0.7, max_tokens=8):
            got.append(c)
    assert got == ["he"]


@pytest.mark.asyncio
@respx.mock
async def test_connection_error_wrapped():
    respx.post(f"{OPENAI_BASE}/chat/completions").mock(side_effect=httpx.ConnectError("refused"))
    provider = OpenAICompatibleProvider("openai", api_key="k", base_url=OPENAI_BASE)
    with pytest.raises(ProviderError, match="openai HTTP error"):
        await _collect(provider.model("gpt-4"))


@pytest.mark.asyncio
@respx.mock
async def test_anthropic_stream_ok():
    body = (
        b'event: message_start\ndata: {"type":"message_start","message":{"id":"m1"}}\n\n'
        b'event: content_block_start\ndata: {"type":"content_block_start","index":0,"content_block":{"type":"text","text":""}}\n\n'
        b'event: ping\ndata: {"type":"ping"}\n\n'
        b'event: content_block_delta\ndata: {"type":"content_block_delta","index":0,"delta":{"type":"text_delta","text":"<package>"}}\n\n'
        b'event: content_block_delta\ndata: {"type":"content_block_delta","index":0,"delta":{"type":"text_delta","text":"three</package>"}}\n\n'
        b'event: content_block_stop\ndata: {"type":"content_block_stop","index":0}\n\n'
        b'event: message_stop\ndata: {"type":"message_stop"}\n\n'
    )
    route = respx.post(f"{ANTHROPIC_BASE}/messages").mock(
        return_value=httpx.Response(200, content=body, headers={"Content-Type": "text/event-stream"})
    )
    provider = AnthropicProvider(api_key="ak-test", base_url=ANTHROPIC_BASE)
    out = await _collect(provider.model("claude-x"))
    assert out == ["<package>", "three</package>"]

    req = route.calls.last.request
    sent = json.loads(req.content)
    assert sent["model"] == "claude-x"
    assert sent["system"] == "sys"
    assert sent["messages"] == [{"role": "user", "content": "hi"}]
    assert req.headers["x-api-key"] == "ak-test"
    assert req.headers["anthropic-version"]


@pytest.mark.asyncio
@respx.mock
async def test_anthropic_error_event():
    body = (
        b'event: content_block_delta\ndata: {"type":"content_block_delta","index":0,"delta":{"type":"text_delta","text":"par"}}\n\n'
        b'event: error\ndata: {"type":"error","error":{"type":"overloaded_error","message":"Overloaded"}}\n\n'
    )
    respx.post(f"{ANTHROPIC_BASE}/messages").mock(return_value=httpx.Response(200, content=body))
    provider = AnthropicProvider(api_key="k", base_url=ANTHROPIC_BASE)
    with pytest.raises(ProviderError, match="Overloaded"):
        await _collect(provider.model("claude-x"))


def test_missing_key_fails_on_bind():
    provider = AnthropicProvider(api_key="", base_url=ANTHROPIC_BASE)
    with pytest.raises(ProviderError, match="API key is not configured"):
        provider.model("claude-x")


def test_base_url_trailing_slash_trimmed():
    provider = OpenAICompatibleProvider("openai", api_key="k", base_url=OPENAI_BASE + "/")
    assert provider.base_url == OPENAI_BASE
