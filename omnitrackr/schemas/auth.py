from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, field_validator

from omnitrackr.utils.sanitization import sanitize_string


@dataclass(frozen=True)
class AuthContext:
    """Identity resolved from the request's session token."""
    user_id: int
    username: str
    email: str
    session_id: str


class RegisterRequest(BaseModel):
    # Required-ness is checked by the auth service so every failure shares one envelope message
    username: str | None = None
    email: str | None = None
    password: str | None = None

    @field_validator("username", "email", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None

    @field_validator("username", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)


class UserPublic(BaseModel):
    id: int
    username: str
    email: str

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    session_id: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserPublic
