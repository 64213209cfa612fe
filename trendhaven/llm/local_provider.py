from trendhaven.core.errors import TransientDependencyError
from trendhaven.llm.base import OutfitAnalyzer


class LocalProvider(OutfitAnalyzer):
    """Offline stand-in: no photo analysis, no ranking signal."""

    async def analyze_image(self, image_url: str, *, timeout_ms: int) -> str:
        raise TransientDependencyError("analyzer_disabled")

    async def rank_outfits(self, prompt: str, *, timeout_ms: int) -> str:
        return ""
