from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from omnitrackr.models.user import User


async def get_user(db: AsyncSession, user_id: int) -> User | None:
    return await db.get(User, user_id)


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    result = await db.execute(select(User).filter(User.username == username))
    return result.scalars().first()


async def username_exists(db: AsyncSession, username: str) -> bool:
    result = await db.execute(select(User.id).filter(User.username == username))
    return result.first() is not None


async def email_exists(db: AsyncSession, email: str) -> bool:
    result = await db.execute(select(User.id).filter(User.email == email))
    return result.first() is not None


async def create_user(db: AsyncSession, username: str, email: str, password_hash: str) -> User:
    user = User(username=username, email=email, password_hash=password_hash)
    db.add(user)
    await db.flush()
    return user

