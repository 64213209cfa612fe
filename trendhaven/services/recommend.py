"""Pick and order a handful of a user's outfits for a mood/occasion/weather.

The analyzer sees only stored metadata (category, rating, tags) and answers with
outfit numbers. Its answer decides the order when it is usable; otherwise the
result degrades to a deterministic ordering and this module never raises.

    empty collection     -> []                       (no analyzer call)
    blank answer         -> newest first             source="recent"
    usable numbers       -> analyzer order           source="ai"
    error/timeout/junk   -> rating desc, stable      source="top_rated"
"""
from __future__ import annotations

import asyncio
import hashlib
import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Sequence

from redis.exceptions import RedisError

from trendhaven.core.cache import cache_json_get, cache_json_set
from trendhaven.core.config import settings
from trendhaven.core.result import Err, Ok, Result
from trendhaven.llm.base import OutfitAnalyzer
from trendhaven.llm.prompt_templates import build_ranking_prompt
from trendhaven.models.models import OutfitRecord

logger = logging.getLogger("uvicorn.error")

_INDEX_TOKEN = re.compile(r"^#?\s*([+-]?\d+)")


@dataclass(frozen=True)
class RecommendationContext:
    mood: Optional[str] = None
    occasion: Optional[str] = None
    weather: Optional[str] = None


@dataclass
class Recommendation:
    outfits: list[OutfitRecord] = field(default_factory=list)
    source: str = "empty"


def parse_ranked_indices(text: Optional[str], count: int) -> Result[list[int]]:
    """Parse "3, 1, 2" into 0-based indices, first mention wins.

    Blank text is Ok([]) (no signal); non-blank text with nothing usable is an Err.
    """
    if not text or not text.strip():
        return Ok([])
    seen: set[int] = set()
    out: list[int] = []
    for token in text.split(","):
        m = _INDEX_TOKEN.match(token.strip())
        if not m:
            continue
        idx = int(m.group(1)) - 1
        if 0 <= idx < count and idx not in seen:
            seen.add(idx)
            out.append(idx)
    if not out:
        return Err("no_valid_indices")
    return Ok(out)


def top_rated(outfits: Sequence[OutfitRecord], limit: int) -> list[OutfitRecord]:
    # sorted() is stable, so equal ratings keep their newest-first order
    return sorted(outfits, key=lambda o: -o.rating)[:limit]


def _cache_key(prompt: str) -> str:
    return f"recs:rank:{hashlib.sha256(prompt.encode()).hexdigest()}"


async def _cached_rank(prompt: str) -> Optional[str]:
    try:
        cached = await cache_json_get(_cache_key(prompt))
    except RedisError:
        logger.warning("recs:cache unavailable on read")
        return None
    return cached.get("text") if isinstance(cached, dict) else None


async def _store_rank(prompt: str, text: str, timeout_s: float) -> None:
    if not text.strip():
        return
    try:
        await asyncio.wait_for(
            cache_json_set(_cache_key(prompt), {"text": text}, settings.RECS_CACHE_TTL_S), timeout=timeout_s
        )
    except (RedisError, asyncio.TimeoutError):
        logger.warning("recs:cache unavailable on write")


async def _fetch_rank(analyzer: OutfitAnalyzer, prompt: str, timeout_ms: int) -> tuple[str, bool]:
    cached = await _cached_rank(prompt)
    if cached is not None:
        return cached, True
    text = await analyzer.rank_outfits(prompt, timeout_ms=timeout_ms)
    return text or "", False


async def _rank(analyzer: OutfitAnalyzer, prompt: str, timeout_ms: int) -> str:
    # cache read, analyzer call and cache write all share one deadline
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_ms / 1000.0 + 0.1
    text, cached = await asyncio.wait_for(
        _fetch_rank(analyzer, prompt, timeout_ms), timeout=deadline - loop.time()
    )
    if not cached:
        await _store_rank(prompt, text, max(deadline - loop.time(), 0.0))
    return text


async def recommend_outfits(
    outfits: Sequence[OutfitRecord],
    ctx: RecommendationContext,
    analyzer: OutfitAnalyzer,
    *,
    timeout_ms: int,
    limit: int = 3,
) -> Recommendation:
    outfits = list(outfits)
    if not outfits:
        return Recommendation([], "empty")

    try:
        prompt = build_ranking_prompt(
            outfits, mood=ctx.mood, occasion=ctx.occasion, weather=ctx.weather, limit=limit
        )
        raw = await _rank(analyzer, prompt, timeout_ms)
    except Exception as e:
        logger.warning("recs:analyzer failed err=%s, using top rated", type(e).__name__)
        return Recommendation(top_rated(outfits, limit), "top_rated")

    parsed = parse_ranked_indices(raw, len(outfits))
    if isinstance(parsed, Err):
        logger.warning("recs:unusable answer reason=%s, using top rated", parsed.reason)
        return Recommendation(top_rated(outfits, limit), "top_rated")
    if not parsed.value:
        return Recommendation(outfits[:limit], "recent")
    return Recommendation([outfits[i] for i in parsed.value[:limit]], "ai")
