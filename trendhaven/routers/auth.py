from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from trendhaven.auth.deps import get_bearer_token
from trendhaven.auth.identity import AuthSession, IdentityProvider
from trendhaven.core.db import get_session
from trendhaven.core.errors import AuthError
from trendhaven.models.models import User
from trendhaven.schemas.auth import AuthOut, CredentialsIn, MeOut, UserOut
from trendhaven.schemas.outfits import MessageOut

router = APIRouter(prefix="/auth", tags=["auth"])


def get_identity(session: AsyncSession = Depends(get_session)) -> IdentityProvider:
    return IdentityProvider(session)


def user_out(user: User) -> UserOut:
    return UserOut(id=str(user.id), email=user.email, is_anonymous=bool(user.is_anonymous), created_at=user.created_at)


def _auth_out(auth: AuthSession, message: str) -> AuthOut:
    return AuthOut(user=user_out(auth.user), token=auth.token, message=message)


@router.post("/signup", response_model=AuthOut)
async def signup(body: CredentialsIn, identity: IdentityProvider = Depends(get_identity)):
    auth = await identity.sign_up(body.email, body.password)
    return _auth_out(auth, "Account created successfully")


@router.post("/signin", response_model=AuthOut)
async def signin(body: CredentialsIn, identity: IdentityProvider = Depends(get_identity)):
    auth = await identity.sign_in(body.email, body.password)
    return _auth_out(auth, "Signed in successfully")


@router.post("/signin-anonymous", response_model=AuthOut)
async def signin_anonymous(identity: IdentityProvider = Depends(get_identity)):
    auth = await identity.sign_in_anonymous()
    return _auth_out(auth, "Signed in anonymously")


@router.post("/signout", response_model=MessageOut)
async def signout(
    token: Optional[str] = Depends(get_bearer_token),
    identity: IdentityProvider = Depends(get_identity),
):
    await identity.sign_out(token)
    return MessageOut(message="Signed out successfully")


@router.get("/me", response_model=MeOut)
async def me(
    token: Optional[str] = Depends(get_bearer_token),
    identity: IdentityProvider = Depends(get_identity),
):
    if not token:
        raise AuthError("token_required")
    user = await identity.get_user(token)
    return MeOut(user=user_out(user))
