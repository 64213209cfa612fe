from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class CredentialsIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=256)


class UserOut(BaseModel):
    id: str
    email: Optional[str] = None
    is_anonymous: bool = False
    created_at: Optional[datetime] = None


class AuthOut(BaseModel):
    user: UserOut
    token: str
    message: str


class MeOut(BaseModel):
    user: UserOut
