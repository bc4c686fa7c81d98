"""
Streaming client for OpenAI-compatible /chat/completions endpoints.
OpenAI, Groq and Cerebras all speak this wire format, so one class covers
the three of them with a different name, key and base url.
"""

import json
import httpx
from typing import Any, AsyncIterator, Dict, List

from codestream.providers.base import Provider, ProviderError, error_detail


def _build_messages(system: str, prompt: str) -> List[Dict[str, str]]:
    messages = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})
    return messages


class OpenAICompatibleProvider(Provider):
    def __init__(self, name: str, *, api_key: str, base_url: str, timeout: float = 120.0) -> None:
        super().__init__(api_key=api_key, base_url=base_url, timeout=timeout)
        self.name = name

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
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
            "messages": _build_messages(system, prompt),
            "temperature": temperature,
            "max_tokens": max_tokens,
            "stream": True,
        }
        timeout = httpx.Timeout(self.timeout, connect=10.0)
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                async with client.stream(
                    "POST", f"{self.base_url}/chat/completions", json=payload, headers=self._headers()
                ) as r:
                    if r.status_code >= 400:
                        body = await r.aread()
                        detail = error_detail(body, f"status {r.status_code}")
                        raise ProviderError(f"{self.name} API error ({r.status_code}): {detail}")
                    async for line in r.aiter_lines():
                        if not line.startswith("data:"):
                            continue
                        data_str = line[len("data:"):].strip()
                        if not data_str:
                            continue
                        if data_str == "[DONE]":
                            break
                        try:
                            data = json.loads(data_str)
                        except json.JSONDecodeError:
                            # ignore malformed lines
                            continue
                        err = data.get("error")
                        if err:
                            message = err.get("message") if isinstance(err, dict) else str(err)
                            raise ProviderError(f"{self.name} error: {message or 'stream error'}")
                        choices = data.get("choices") or []
                        if not choices:
                            continue
                        delta = choices[0].get("delta") or {}
                        chunk = delta.get("content")
                        if isinstance(chunk, str) and chunk:
                            yield chunk
        except httpx.HTTPError as e:
            raise ProviderError(f"{self.name} HTTP error: {e}") from e
