import json
import httpx
from typing import Any, AsyncIterator, Dict

from codestream.providers.base import Provider, ProviderError, error_detail

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicProvider(Provider):
    """
    Anthropic Messages API wrapper.
    - POST {base_url}/messages with stream=true
    - yields the text of every content_block_delta / text_delta event
    - an 'error' event mid-stream raises ProviderError
    """

    name = "anthropic"

    def _headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }

    async def request_stream(
        self,
        model: str,
        *,
        system: str,
        prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> AsyncIterator[str]:
        payload: Dict[str, Any] = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": max_tokens,
            "temperature": temperature,
            "stream": True,
        }
        if system:
            payload["system"] = system

        timeout = httpx.Timeout(self.timeout, connect=10.0)
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                async with client.stream(
                    "POST", f"{self.base_url}/messages", json=payload, headers=self._headers()
                ) as r:
                    if r.status_code >= 400:
                        body = await r.aread()
                        detail = error_detail(body, f"status {r.status_code}")
                        raise ProviderError(f"anthropic API error ({r.status_code}): {detail}")
                    async for line in r.aiter_lines():
                        # event: lines only repeat the type carried in the data payload
                        if not line.startswith("data:"):
                            continue
                        try:
                            data = json.loads(line[len("data:"):].strip())
                        except json.JSONDecodeError:
                            continue
                        kind = data.get("type")
                        if kind == "content_block_delta":
                            delta = data.get("delta") or {}
                            text = delta.get("text")
                            if delta.get("type") == "text_delta" and isinstance(text, str) and text:
                                yield text
                        elif kind == "message_stop":
                            break
                        elif kind == "error":
                            err = data.get("error") or {}
                            raise ProviderError(f"anthropic error: {err.get('message', 'stream error')}")
        except httpx.HTTPError as e:
            raise ProviderError(f"anthropic HTTP error: {e}") from e
