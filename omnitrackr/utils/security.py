import secrets
from datetime import datetime, timedelta, timezone

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

SESSION_TOKEN_BYTES = 32  # 256 bits, hex-encoded to 64 chars


def get_password_hash(password: str) -> str:
    # bcrypt only looks at the first 72 bytes
    return pwd_context.hash(password[:72])


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password[:72], hashed_password)


def generate_session_token() -> str:
    return secrets.token_hex(SESSION_TOKEN_BYTES)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def session_expiry(ttl_seconds: int, now: datetime | None = None) -> datetime:
    return (now or utcnow()) + timedelta(seconds=ttl_seconds)


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes even for timezone-aware columns."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_expired(expires_at: datetime, now: datetime | None = None) -> bool:
    return as_utc(expires_at) <= (now or utcnow())


def extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]
