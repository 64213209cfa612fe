import math
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trendhaven.core.taxonomy import MAX_TAGS, Category, Season, normalize_category

MAX_TAG_LEN = 32
CONTEXT_MAX_LEN = 100


def _coerce_score(v: object) -> int:
    if isinstance(v, bool):
        raise ValueError("score must be a number")
    if isinstance(v, (int, float)):
        num = float(v)
    elif isinstance(v, str):
        try:
            num = float(v.strip())
        except ValueError:
            raise ValueError("score must be a number")
    else:
        raise ValueError("score must be a number")
    if not math.isfinite(num) or num < 1 or num > 10:
        raise ValueError("score must be between 1 and 10")
    return int(math.floor(num + 0.5))


class OutfitAnalysis(BaseModel):
    """Validated analyzer judgment for one photo."""

    model_config = ConfigDict(populate_by_name=True)
    overall_rating: int = Field(alias="overallRating")
    style_score: int = Field(alias="styleScore")
    color_coordination: int = Field(alias="colorCoordination")
    trend_alignment: int = Field(alias="trendAlignment")
    category: Category
    tags: List[str]
    feedback: str

    @field_validator("overall_rating", "style_score", "color_coordination", "trend_alignment", mode="before")
    @classmethod
    def _scores(cls, v: object) -> int:
        return _coerce_score(v)

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v: object) -> str:
        cat = normalize_category(v)
        if cat is None:
            raise ValueError(f"unknown category: {v!r}")
        return cat

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, v: object) -> List[str]:
        if not isinstance(v, (list, tuple)):
            raise ValueError("tags must be a list")
        out: List[str] = []
        for t in v:
            if not isinstance(t, str):
                raise ValueError("tags must be strings")
            t = t.strip()
            if t:
                out.append(t[:MAX_TAG_LEN])
        return out[:MAX_TAGS]

    @field_validator("feedback", mode="before")
    @classmethod
    def _feedback(cls, v: object) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("feedback must be a non-empty string")
        return v.strip()

    def style_analysis(self) -> dict:
        return {
            "style_score": self.style_score,
            "color_coordination": self.color_coordination,
            "trend_alignment": self.trend_alignment,
            "tags": list(self.tags),
            "feedback": self.feedback,
        }


class StyleAnalysisOut(BaseModel):
    style_score: int
    color_coordination: int
    trend_alignment: int
    tags: List[str] = Field(default_factory=list)
    feedback: str = ""


class OutfitOut(BaseModel):
    id: str
    user_id: str
    image_url: str
    category: Category
    rating: int
    style_analysis: StyleAnalysisOut
    mood: Optional[str] = None
    occasion: Optional[str] = None
    season: Optional[Season] = None
    favorite: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None


class OutfitUploadOut(BaseModel):
    outfit: OutfitOut
    analysis: OutfitAnalysis
    message: str


class OutfitEnvelope(BaseModel):
    outfit: OutfitOut


class OutfitListOut(BaseModel):
    outfits: List[OutfitOut] = Field(default_factory=list)


class RecommendationIn(BaseModel):
    mood: Optional[str] = Field(None, max_length=CONTEXT_MAX_LEN)
    occasion: Optional[str] = Field(None, max_length=CONTEXT_MAX_LEN)
    weather: Optional[str] = Field(None, max_length=CONTEXT_MAX_LEN)


class RecommendationOut(BaseModel):
    recommendations: List[OutfitOut] = Field(default_factory=list)


class MessageOut(BaseModel):
    message: str
