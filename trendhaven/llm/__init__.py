from trendhaven.core.config import settings
from trendhaven.llm.base import OutfitAnalyzer, ProviderRegistry
from trendhaven.llm.local_provider import LocalProvider
from trendhaven.llm.openai_provider import OpenAIProvider


def register_default_providers() -> None:
    ProviderRegistry.register("local", LocalProvider())
    ProviderRegistry.register("openai", OpenAIProvider())


def get_analyzer() -> OutfitAnalyzer:
    return ProviderRegistry.get((settings.LLM_PROVIDER or "local").lower())


__all__ = [
    "OutfitAnalyzer",
    "ProviderRegistry",
    "LocalProvider",
    "OpenAIProvider",
    "get_analyzer",
    "register_default_providers",
]
