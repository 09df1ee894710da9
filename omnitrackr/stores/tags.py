from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from omnitrackr.models.activity import Tag, activity_tags


async def get_tag(db: AsyncSession, tag_id: int) -> Tag | None:
    result = await db.execute(select(Tag).filter(Tag.id == tag_id))
    return result.scalars().first()


async def get_tags_by_ids(db: AsyncSession, tag_ids: list[int]) -> dict[int, Tag]:
    if not tag_ids:
        return {}
    result = await db.execute(select(Tag).where(Tag.id.in_(tag_ids)))
    return {tag.id: tag for tag in result.scalars().all()}


async def list_tags(db: AsyncSession, user_id: int) -> list[tuple[Tag, int]]:
    stmt = (
        select(Tag, func.count(activity_tags.c.activity_id).label("activity_count"))
        .outerjoin(activity_tags, activity_tags.c.tag_id == Tag.id)
        .filter(Tag.user_id == user_id)
        .group_by(Tag.id)
        .order_by(Tag.name, Tag.id)
    )
    result = await db.execute(stmt)
    return [(row.Tag, row.activity_count) for row in result.all()]


async def count_activities(db: AsyncSession, tag_id: int) -> int:
    result = await db.execute(
        select(func.count(activity_tags.c.activity_id)).where(activity_tags.c.tag_id == tag_id)
    )
    return result.scalar() or 0


async def name_exists(db: AsyncSession, user_id: int, name: str, exclude_id: int | None = None) -> bool:
    stmt = select(Tag.id).filter(Tag.user_id == user_id, Tag.name == name)
    if exclude_id is not None:
        stmt = stmt.filter(Tag.id != exclude_id)
    result = await db.execute(stmt)
    return result.first() is not None


async def create_tag(db: AsyncSession, user_id: int, name: str, color: str) -> Tag:
    tag = Tag(user_id=user_id, name=name, color=color)
    db.add(tag)
    await db.flush()
    return tag


async def delete_tag(db: AsyncSession, tag_id: int) -> None:
    await db.execute(delete(activity_tags).where(activity_tags.c.tag_id == tag_id))
    await db.execute(delete(Tag).where(Tag.id == tag_id))
