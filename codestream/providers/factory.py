"""
Model selection: turns a "provider/model" identifier into a bound LanguageModel.

Routes are checked in registration order; the first whose prefix (and optional
substring) matches wins. New providers are added by registering a factory and
a route, never by editing resolve().
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from codestream.core import config
from codestream.providers.anthropic import AnthropicProvider
from codestream.providers.base import LanguageModel, ModelFactory, ProviderError
from codestream.providers.openai_compat import OpenAICompatibleProvider


@dataclass(frozen=True)
class Route:
    prefix: str
    provider: str
    strip_prefix: bool = True
    contains: Optional[str] = None

    def matches(self, model_id: str) -> bool:
        if not model_id.startswith(self.prefix):
            return False
        return self.contains is None or self.contains in model_id

    def model_name(self, model_id: str) -> str:
        return model_id[len(self.prefix):] if self.strip_prefix else model_id


DEFAULT_ROUTES: Tuple[Route, ...] = (
    Route("anthropic/", "anthropic"),
    # gpt-oss models are served by groq under their full "openai/..." id
    Route("openai/", "groq", strip_prefix=False, contains="gpt-oss"),
    Route("openai/", "openai"),
    Route("cerebras/", "cerebras"),
)
DEFAULT_FALLBACK = "cerebras"


class ModelSelector:
    def __init__(
        self,
        factories: Optional[Dict[str, ModelFactory]] = None,
        routes: Tuple[Route, ...] = DEFAULT_ROUTES,
        fallback: str = DEFAULT_FALLBACK,
    ) -> None:
        self._factories: Dict[str, ModelFactory] = dict(factories or {})
        self._routes: List[Route] = list(routes)
        self._fallback = fallback

    def add_provider(self, name: str, factory: ModelFactory) -> None:
        self._factories[name] = factory

    def register(self, route: Route) -> None:
        self._routes.append(route)

    def resolve(self, model_id: str) -> Tuple[str, str]:
        """Return (provider name, model name) without touching any provider."""
        for route in self._routes:
            if route.matches(model_id):
                return route.provider, route.model_name(model_id)
        # unknown format: hand the identifier to the fallback provider as-is
        return self._fallback, model_id

    def select(self, model_id: str) -> LanguageModel:
        provider, model_name = self.resolve(model_id)
        factory = self._factories.get(provider)
        if factory is None:
            raise ProviderError(f"Unknown provider: {provider}")
        return factory(model_name)


def build_selector() -> ModelSelector:
    timeout = config.PROVIDER_TIMEOUT
    anthropic = AnthropicProvider(
        api_key=config.ANTHROPIC_API_KEY, base_url=config.ANTHROPIC_BASE_URL, timeout=timeout
    )
    openai = OpenAICompatibleProvider(
        "openai", api_key=config.OPENAI_API_KEY, base_url=config.OPENAI_BASE_URL, timeout=timeout
    )
    groq = OpenAICompatibleProvider(
        "groq", api_key=config.GROQ_API_KEY, base_url=config.GROQ_BASE_URL, timeout=timeout
    )
    cerebras = OpenAICompatibleProvider(
        "cerebras", api_key=config.CEREBRAS_API_KEY, base_url=config.CEREBRAS_BASE_URL, timeout=timeout
    )
    return ModelSelector(
        {
            "anthropic": anthropic.model,
            "openai": openai.model,
            "groq": groq.model,
            "cerebras": cerebras.model,
        }
    )
