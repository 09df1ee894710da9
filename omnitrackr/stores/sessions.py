from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from omnitrackr.models.user import UserSession
from omnitrackr.utils.security import generate_session_token, session_expiry, utcnow


async def create_session(db: AsyncSession, user_id: int, ttl_seconds: int) -> UserSession:
    session = UserSession(
        id=generate_session_token(),
        user_id=user_id,
        expires_at=session_expiry(ttl_seconds),
    )
    db.add(session)
    await db.flush()
    return session


async def get_session(db: AsyncSession, token: str) -> UserSession | None:
    result = await db.execute(select(UserSession).filter(UserSession.id == token))
    return result.scalars().first()


async def delete_session(db: AsyncSession, token: str) -> bool:
    result = await db.execute(delete(UserSession).where(UserSession.id == token))
    return result.rowcount > 0


async def delete_expired(db: AsyncSession, now: datetime | None = None) -> int:
    result = await db.execute(
        delete(UserSession).where(UserSession.expires_at <= (now or utcnow()))
    )
    return result.rowcount
