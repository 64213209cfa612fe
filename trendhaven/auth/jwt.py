import time
import uuid
import jwt
from typing import Any, Dict

from trendhaven.core.config import settings


def mint_access(user_id: str) -> str:
    now = int(time.time())
    claims = {
        "sub": user_id,
        "iat": now,
        "exp": now + settings.JWT_ACCESS_TTL_S,
        "jti": uuid.uuid4().hex,
        "typ": "access",
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def decode_token(tok: str) -> Dict[str, Any]:
    return jwt.decode(tok, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
