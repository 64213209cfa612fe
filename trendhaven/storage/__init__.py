from trendhaven.core.config import settings
from trendhaven.core.errors import ConfigurationError
from trendhaven.storage.base import ImageStore
from trendhaven.storage.local import LocalImageStore
from trendhaven.storage.r2 import R2ImageStore


def get_image_store() -> ImageStore:
    backend = (settings.STORAGE_BACKEND or "local").lower()
    if backend == "r2":
        if not settings.R2_BUCKET or not settings.R2_ENDPOINT:
            raise ConfigurationError("storage_not_configured")
        return R2ImageStore()
    return LocalImageStore(settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX)


__all__ = ["ImageStore", "LocalImageStore", "R2ImageStore", "get_image_store"]
