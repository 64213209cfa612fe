import uuid
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from trendhaven.auth.identity import is_revoked, require_configured, verify_access_token
from trendhaven.core.errors import AuthError

bearer = HTTPBearer(auto_error=False)


async def get_current_user_id(creds: HTTPAuthorizationCredentials = Depends(bearer)) -> uuid.UUID:
    require_configured()
    if not creds:
        raise AuthError("token_required")
    claims = verify_access_token(creds.credentials)
    if await is_revoked(claims):
        raise AuthError("invalid_token")
    try:
        return uuid.UUID(str(claims["sub"]))
    except ValueError:
        raise AuthError("invalid_token")


def get_bearer_token(creds: HTTPAuthorizationCredentials = Depends(bearer)) -> Optional[str]:
    return creds.credentials if creds else None
