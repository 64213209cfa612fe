from __future__ import annotations
from typing import Protocol


class OutfitAnalyzer(Protocol):
    async def analyze_image(self, image_url: str, *, timeout_ms: int) -> str:
        """Return the raw model text describing one outfit photo."""
        ...

    async def rank_outfits(self, prompt: str, *, timeout_ms: int) -> str:
        """Return the raw model text listing outfit numbers, best first."""
        ...


class ProviderRegistry:
    _providers: dict[str, OutfitAnalyzer] = {}

    @classmethod
    def register(cls, name: str, provider: OutfitAnalyzer) -> None:
        cls._providers[name] = provider

    @classmethod
    def get(cls, name: str) -> OutfitAnalyzer:
        if name not in cls._providers:
            raise ValueError(f"Unknown provider: {name}")
        return cls._providers[name]
