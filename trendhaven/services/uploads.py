"""Upload pipeline: store photo, analyze, normalize, persist.

Once the photo has been written it is released on every failure path, including
cancellation; a record is only inserted after a successful analysis.
"""
from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from trendhaven.core.config import settings
from trendhaven.core.errors import AnalysisFailed, AppError, TransientDependencyError
from trendhaven.core.result import Err
from trendhaven.llm.base import OutfitAnalyzer
from trendhaven.models.models import OutfitRecord
from trendhaven.schemas.outfits import OutfitAnalysis
from trendhaven.services.analysis import normalize_analysis
from trendhaven.services.images import to_analysis_data_url
from trendhaven.storage.base import ImageStore
from trendhaven.storage.keys import outfit_image_key

logger = logging.getLogger("uvicorn.error")

ANALYSIS_FAILED_MESSAGE = "Failed to analyze outfit. Please try again."


@dataclass(frozen=True)
class UploadContext:
    mood: Optional[str] = None
    occasion: Optional[str] = None
    season: Optional[str] = None


async def _analyze(analyzer: OutfitAnalyzer, image_url: str) -> str:
    timeout_ms = settings.LLM_ANALYZE_TIMEOUT_MS
    attempts = max(settings.LLM_ANALYZE_MAX_ATTEMPTS, 1)
    for attempt in range(1, attempts + 1):
        try:
            return await asyncio.wait_for(
                analyzer.analyze_image(image_url, timeout_ms=timeout_ms), timeout=timeout_ms / 1000.0 + 0.1
            )
        except (asyncio.TimeoutError, TransientDependencyError) as e:
            logger.warning("upload:analyzer attempt=%s/%s failed err=%s", attempt, attempts, type(e).__name__)
            if attempt == attempts:
                raise AnalysisFailed("analysis_failed", message=ANALYSIS_FAILED_MESSAGE) from e
        except Exception as e:
            logger.exception("upload:analyzer error")
            raise AnalysisFailed("analysis_failed", message=ANALYSIS_FAILED_MESSAGE) from e
    raise AnalysisFailed("analysis_failed", message=ANALYSIS_FAILED_MESSAGE)


async def _release(session: AsyncSession, store: ImageStore, key: str) -> None:
    try:
        await session.rollback()
    except Exception:
        logger.exception("upload:rollback failed key=%s", key)
    try:
        store.delete(key)
    except Exception:
        logger.exception("upload:image release failed key=%s", key)


async def analyze_and_store(
    session: AsyncSession,
    store: ImageStore,
    analyzer: OutfitAnalyzer,
    *,
    user_id: uuid.UUID,
    data: bytes,
    content_type: str,
    ctx: UploadContext,
) -> tuple[OutfitRecord, OutfitAnalysis]:
    key = outfit_image_key(str(user_id), content_type)
    try:
        store.save(key, data, content_type)
    except Exception as e:
        logger.exception("upload:image store failed user=%s", user_id)
        await _release(session, store, key)
        raise TransientDependencyError("image_store_unavailable") from e

    try:
        raw = await _analyze(analyzer, to_analysis_data_url(data, settings.LLM_VISION_IMAGE_MAX))
        parsed = normalize_analysis(raw)
        if isinstance(parsed, Err):
            logger.warning("upload:analysis rejected user=%s reason=%s", user_id, parsed.reason)
            raise AnalysisFailed("analysis_failed", message=ANALYSIS_FAILED_MESSAGE)
        analysis = parsed.value
        record = OutfitRecord(
            id=uuid.uuid4(),
            user_id=user_id,
            image_ref=key,
            category=analysis.category,
            rating=analysis.overall_rating,
            style_analysis=analysis.style_analysis(),
            mood=ctx.mood,
            occasion=ctx.occasion,
            season=ctx.season,
            favorite=False,
            created_at=datetime.now(timezone.utc),
        )
        session.add(record)
        await session.commit()
    except BaseException as e:
        await _release(session, store, key)
        if isinstance(e, AppError) or not isinstance(e, Exception):
            raise
        logger.exception("upload:persist failed user=%s", user_id)
        raise TransientDependencyError("persistence_failed", message="Failed to save outfit.") from e

    logger.info("upload:stored outfit=%s user=%s rating=%s", record.id, user_id, record.rating)
    return record, analysis
