import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy import delete, not_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from trendhaven.auth.deps import get_current_user_id
from trendhaven.core.config import settings
from trendhaven.core.db import get_session
from trendhaven.core.errors import NotFoundError, TransientDependencyError, ValidationError
from trendhaven.core.taxonomy import normalize_category, normalize_season
from trendhaven.llm import OutfitAnalyzer, get_analyzer
from trendhaven.models.models import OutfitRecord
from trendhaven.schemas.outfits import (
    CONTEXT_MAX_LEN,
    MessageOut,
    OutfitEnvelope,
    OutfitListOut,
    OutfitOut,
    OutfitUploadOut,
    RecommendationIn,
    RecommendationOut,
    StyleAnalysisOut,
)
from trendhaven.services.recommend import RecommendationContext, recommend_outfits
from trendhaven.services.uploads import UploadContext, analyze_and_store
from trendhaven.storage import ImageStore, get_image_store

router = APIRouter(prefix="/outfits", tags=["outfits"])
logger = logging.getLogger("uvicorn.error")


def outfit_out(o: OutfitRecord, store: ImageStore) -> OutfitOut:
    return OutfitOut(
        id=str(o.id),
        user_id=str(o.user_id),
        image_url=store.url(o.image_ref),
        category=o.category,
        rating=o.rating,
        style_analysis=StyleAnalysisOut.model_validate(o.style_analysis or {}),
        mood=o.mood,
        occasion=o.occasion,
        season=o.season,
        favorite=bool(o.favorite),
        created_at=o.created_at,
        updated_at=o.updated_at,
    )


def _parse_id(outfit_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(outfit_id)
    except ValueError:
        raise NotFoundError("outfit_not_found")


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


async def _user_outfits(session: AsyncSession, user_id: uuid.UUID, category: Optional[str] = None) -> List[OutfitRecord]:
    stmt = select(OutfitRecord).where(OutfitRecord.user_id == user_id)
    if category:
        stmt = stmt.where(OutfitRecord.category == category)
    stmt = stmt.order_by(OutfitRecord.created_at.desc(), OutfitRecord.id.desc())
    try:
        res = await session.execute(stmt)
    except SQLAlchemyError as e:
        logger.exception("outfits:store read failed user=%s", user_id)
        raise TransientDependencyError("store_unavailable") from e
    return list(res.scalars().all())


@router.post("/upload", response_model=OutfitUploadOut)
async def upload_outfit(
    image: Optional[UploadFile] = File(None),
    mood: Optional[str] = Form(None, max_length=CONTEXT_MAX_LEN),
    occasion: Optional[str] = Form(None, max_length=CONTEXT_MAX_LEN),
    season: Optional[str] = Form(None, max_length=16),
    session: AsyncSession = Depends(get_session),
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: ImageStore = Depends(get_image_store),
    analyzer: OutfitAnalyzer = Depends(get_analyzer),
):
    if image is None:
        raise ValidationError("no_image", message="No image file provided")
    content_type = (image.content_type or "").lower()
    if not content_type.startswith("image/"):
        raise ValidationError("invalid_image_type", message="Only image files are allowed")
    data = await image.read(settings.UPLOAD_MAX_BYTES + 1)
    if not data:
        raise ValidationError("no_image", message="No image file provided")
    if len(data) > settings.UPLOAD_MAX_BYTES:
        raise ValidationError("image_too_large", max_bytes=settings.UPLOAD_MAX_BYTES)
    season_val = None
    if _clean_text(season):
        season_val = normalize_season(season)
        if season_val is None:
            raise ValidationError("invalid_season")

    ctx = UploadContext(mood=_clean_text(mood), occasion=_clean_text(occasion), season=season_val)
    record, analysis = await analyze_and_store(
        session, store, analyzer, user_id=user_id, data=data, content_type=content_type, ctx=ctx
    )
    return OutfitUploadOut(
        outfit=outfit_out(record, store),
        analysis=analysis,
        message="Outfit analyzed and saved successfully",
    )


@router.get("", response_model=OutfitListOut)
async def list_outfits(
    category: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_session),
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: ImageStore = Depends(get_image_store),
):
    cat = None
    if category:
        cat = normalize_category(category)
        if cat is None:
            raise ValidationError("invalid_category")
    outfits = await _user_outfits(session, user_id, cat)
    return OutfitListOut(outfits=[outfit_out(o, store) for o in outfits])


@router.post("/recommendations", response_model=RecommendationOut)
async def recommendations(
    body: Optional[RecommendationIn] = None,
    session: AsyncSession = Depends(get_session),
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: ImageStore = Depends(get_image_store),
    analyzer: OutfitAnalyzer = Depends(get_analyzer),
):
    body = body or RecommendationIn()
    outfits = await _user_outfits(session, user_id)
    ctx = RecommendationContext(
        mood=_clean_text(body.mood), occasion=_clean_text(body.occasion), weather=_clean_text(body.weather)
    )
    rec = await recommend_outfits(
        outfits,
        ctx,
        analyzer,
        timeout_ms=settings.LLM_RECOMMEND_TIMEOUT_MS,
        limit=settings.RECS_MAX_RESULTS,
    )
    logger.info("recs:user=%s source=%s count=%s of=%s", user_id, rec.source, len(rec.outfits), len(outfits))
    return RecommendationOut(recommendations=[outfit_out(o, store) for o in rec.outfits])


@router.get("/{outfit_id}", response_model=OutfitEnvelope)
async def get_outfit(
    outfit_id: str,
    session: AsyncSession = Depends(get_session),
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: ImageStore = Depends(get_image_store),
):
    res = await session.execute(
        select(OutfitRecord).where(OutfitRecord.id == _parse_id(outfit_id), OutfitRecord.user_id == user_id)
    )
    outfit = res.scalar_one_or_none()
    if not outfit:
        raise NotFoundError("outfit_not_found")
    return OutfitEnvelope(outfit=outfit_out(outfit, store))


@router.patch("/{outfit_id}/favorite", response_model=OutfitEnvelope)
async def toggle_favorite(
    outfit_id: str,
    session: AsyncSession = Depends(get_session),
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: ImageStore = Depends(get_image_store),
):
    # single conditional UPDATE so concurrent toggles cannot lose a flip
    stmt = (
        update(OutfitRecord)
        .where(OutfitRecord.id == _parse_id(outfit_id), OutfitRecord.user_id == user_id)
        .values(favorite=not_(OutfitRecord.favorite), updated_at=datetime.now(timezone.utc))
        .returning(OutfitRecord)
        .execution_options(synchronize_session="fetch")
    )
    res = await session.execute(stmt)
    outfit = res.scalars().first()
    if not outfit:
        await session.rollback()
        raise NotFoundError("outfit_not_found")
    await session.commit()
    return OutfitEnvelope(outfit=outfit_out(outfit, store))


@router.delete("/{outfit_id}", response_model=MessageOut)
async def delete_outfit(
    outfit_id: str,
    session: AsyncSession = Depends(get_session),
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: ImageStore = Depends(get_image_store),
):
    stmt = (
        delete(OutfitRecord)
        .where(OutfitRecord.id == _parse_id(outfit_id), OutfitRecord.user_id == user_id)
        .returning(OutfitRecord.image_ref)
    )
    res = await session.execute(stmt)
    image_ref = res.scalar_one_or_none()
    if image_ref is None:
        await session.rollback()
        raise NotFoundError("outfit_not_found")
    await session.commit()
    try:
        store.delete(image_ref)
    except Exception:
        logger.exception("outfits:image release failed outfit=%s", outfit_id)
    return MessageOut(message="Outfit deleted successfully")
