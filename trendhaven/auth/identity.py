"""Identity provider: user accounts, access tokens and sign-out.

Tokens are stateless JWTs. Signing out records the token id in redis until the
token would have expired anyway, so every authenticated route can reject it.
"""
from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any, Dict

import jwt as pyjwt
from redis.exceptions import RedisError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from trendhaven.auth.jwt import decode_token, mint_access
from trendhaven.auth.passwords import hash_pw, needs_rehash, verify_pw
from trendhaven.core.cache import cache_json_get, cache_json_set
from trendhaven.core.config import settings
from trendhaven.core.errors import AuthError, ConfigurationError, ValidationError
from trendhaven.models.models import User

logger = logging.getLogger("uvicorn.error")

MIN_PASSWORD_LEN = 6


@dataclass(frozen=True)
class AuthSession:
    user: User
    token: str


def require_configured() -> None:
    if not settings.identity_configured:
        raise ConfigurationError("identity_not_configured")


def _revoked_key(jti: str) -> str:
    return f"auth:revoked:{jti}"


async def is_revoked(claims: Dict[str, Any]) -> bool:
    jti = claims.get("jti")
    if not jti:
        return False
    try:
        return bool(await cache_json_get(_revoked_key(jti)))
    except RedisError:
        logger.warning("auth:revocation lookup unavailable jti=%s", jti)
        return False


def verify_access_token(token: str) -> Dict[str, Any]:
    try:
        claims = decode_token(token)
    except pyjwt.PyJWTError:
        raise AuthError("invalid_token")
    if claims.get("typ") != "access" or not claims.get("sub"):
        raise AuthError("invalid_token")
    return claims


class IdentityProvider:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def sign_up(self, email: str, password: str) -> AuthSession:
        require_configured()
        email = _normalize_email(email)
        if len(password) < MIN_PASSWORD_LEN:
            raise ValidationError("weak_password")
        existing = await self.session.execute(select(User).where(User.email == email))
        if existing.scalar_one_or_none():
            raise ValidationError("email_exists")
        user = User(id=uuid.uuid4(), email=email, password_hash=hash_pw(password), is_anonymous=False)
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ValidationError("email_exists")
        logger.info("auth:signup user=%s", user.id)
        return AuthSession(user=user, token=mint_access(str(user.id)))

    async def sign_in(self, email: str, password: str) -> AuthSession:
        require_configured()
        res = await self.session.execute(select(User).where(User.email == _normalize_email(email)))
        user = res.scalar_one_or_none()
        if not user or not user.password_hash or not verify_pw(user.password_hash, password):
            raise AuthError("invalid_credentials")
        if needs_rehash(user.password_hash):
            user.password_hash = hash_pw(password)
            await self.session.commit()
        return AuthSession(user=user, token=mint_access(str(user.id)))

    async def sign_in_anonymous(self) -> AuthSession:
        require_configured()
        user = User(id=uuid.uuid4(), email=None, password_hash=None, is_anonymous=True)
        self.session.add(user)
        await self.session.commit()
        logger.info("auth:anonymous user=%s", user.id)
        return AuthSession(user=user, token=mint_access(str(user.id)))

    async def get_user(self, token: str) -> User:
        require_configured()
        claims = verify_access_token(token)
        if await is_revoked(claims):
            raise AuthError("invalid_token")
        try:
            user_id = uuid.UUID(str(claims["sub"]))
        except ValueError:
            raise AuthError("invalid_token")
        user = await self.session.get(User, user_id)
        if not user:
            raise AuthError("invalid_token")
        return user

    async def sign_out(self, token: str | None) -> None:
        if not token or not settings.identity_configured:
            return
        try:
            claims = verify_access_token(token)
        except AuthError:
            return
        jti = claims.get("jti")
        if not jti:
            return
        ttl = int(claims.get("exp", 0)) - int(time.time())
        if ttl <= 0:
            return
        try:
            await cache_json_set(_revoked_key(jti), {"sub": claims["sub"]}, ttl)
        except RedisError:
            logger.warning("auth:revocation store unavailable jti=%s", jti)


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()
