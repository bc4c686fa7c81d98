# declares the provider contract every upstream LLM client implements
# a provider knows how to open a token stream; a LanguageModel binds a provider to one model name

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import AsyncIterator, Callable, Optional


# one error type for provider faults so the api can tell them apart from user errors
class ProviderError(Exception):
    pass


class Provider:
    """
    Base class for hosted LLM providers.
    Subclasses implement request_stream(); everything else (credentials,
    base url, binding a model name) is shared.
    """

    name = "provider"

    def __init__(self, *, api_key: str, base_url: str, timeout: float = 120.0) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def model(self, model_name: str) -> "LanguageModel":
        if not self.api_key:
            raise ProviderError(f"{self.name} API key is not configured")
        return LanguageModel(provider=self, model=model_name)

    def request_stream(
        self,
        model: str,
        *,
        system: str,
        prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> AsyncIterator[str]:
        raise NotImplementedError  # implemented by providers/<name>.py


@dataclass(frozen=True)
class LanguageModel:
    provider: Provider
    model: str

    def stream_text(
        self,
        *,
        system: str,
        prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> AsyncIterator[str]:
        return self.provider.request_stream(
            self.model,
            system=system,
            prompt=prompt,
            temperature=temperature,
            max_tokens=max_tokens,
        )


# model name -> bound model; callers only rely on stream_text(...)
ModelFactory = Callable[[str], LanguageModel]


def error_detail(body: bytes, default: str) -> str:
    """Best-effort extraction of an upstream error message from a JSON error body."""
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        text = body.decode("utf-8", errors="replace").strip()
        return text or default
    err: Optional[object] = data.get("error") if isinstance(data, dict) else None
    if isinstance(err, dict) and isinstance(err.get("message"), str):
        return err["message"]
    if isinstance(err, str) and err:
        return err
    return default
