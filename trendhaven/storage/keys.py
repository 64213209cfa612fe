import uuid

EXT_BY_CONTENT_TYPE = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/heic": "heic",
    "image/heif": "heif",
}


def ext_for(content_type: str) -> str:
    return EXT_BY_CONTENT_TYPE.get((content_type or "").lower(), "jpg")


def outfit_image_key(user_id: str, content_type: str) -> str:
    return f"u/{user_id}/outfits/{uuid.uuid4().hex}.{ext_for(content_type)}"
