from typing import Literal, Optional

Category = Literal["casual", "formal", "street", "party", "business", "athletic"]
Season = Literal["spring", "summer", "fall", "winter"]

CATEGORIES = ("casual", "formal", "street", "party", "business", "athletic")
SEASONS = ("spring", "summer", "fall", "winter")
MAX_TAGS = 5


def normalize_category(value: object) -> Optional[str]:
    if not isinstance(value, str):
        return None
    v = value.strip().lower()
    return v if v in CATEGORIES else None


def normalize_season(value: object) -> Optional[str]:
    if not isinstance(value, str):
        return None
    v = value.strip().lower()
    if v == "autumn":
        v = "fall"
    return v if v in SEASONS else None
