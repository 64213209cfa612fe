import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

from openai import APIError, AsyncOpenAI, OpenAIError

from trendhaven.core.config import settings
from trendhaven.core.errors import TransientDependencyError
from trendhaven.llm.base import OutfitAnalyzer
from trendhaven.llm.prompt_templates import build_analysis_prompt

logger = logging.getLogger("uvicorn.error")


class OpenAIProvider(OutfitAnalyzer):
    def __init__(
        self,
        client: Optional[Any] = None,
        model_analyze: Optional[str] = None,
        model_rank: Optional[str] = None,
    ):
        self.client = client
        self.model_analyze = model_analyze or settings.LLM_MODEL_ANALYZE
        self.model_rank = model_rank or settings.LLM_MODEL_RANK

    def _get_client(self) -> Any:
        if self.client is None:
            try:
                self.client = AsyncOpenAI()
            except OpenAIError as e:
                raise TransientDependencyError("analyzer_not_configured") from e
        return self.client

    async def _chat(self, messages: List[Dict[str, Any]], model: str, max_tokens: int, timeout_ms: int) -> str:
        client = self._get_client()
        start = time.perf_counter()
        logger.info("llm:openai request model=%s timeout_ms=%s", model, timeout_ms)
        try:
            resp = await asyncio.wait_for(
                client.chat.completions.create(model=model, messages=messages, max_tokens=max_tokens),
                timeout=timeout_ms / 1000.0,
            )
        except asyncio.TimeoutError:
            logger.warning("llm:openai timeout model=%s timeout_ms=%s", model, timeout_ms)
            raise
        except APIError as e:
            logger.warning("llm:openai error model=%s err=%s", model, type(e).__name__)
            raise TransientDependencyError("analyzer_unavailable") from e
        latency_ms = int((time.perf_counter() - start) * 1000)
        tokens = getattr(resp.usage, "total_tokens", 0) if resp.usage else 0
        logger.info("llm:openai done model=%s latency_ms=%s tokens=%s", model, latency_ms, tokens)
        if not resp.choices:
            return ""
        return resp.choices[0].message.content or ""

    async def analyze_image(self, image_url: str, *, timeout_ms: int) -> str:
        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": build_analysis_prompt()},
                    {"type": "image_url", "image_url": {"url": image_url}},
                ],
            }
        ]
        return await self._chat(messages, self.model_analyze, settings.LLM_ANALYZE_MAX_TOKENS, timeout_ms)

    async def rank_outfits(self, prompt: str, *, timeout_ms: int) -> str:
        messages = [{"role": "user", "content": prompt}]
        return await self._chat(messages, self.model_rank, settings.LLM_RANK_MAX_TOKENS, timeout_ms)
