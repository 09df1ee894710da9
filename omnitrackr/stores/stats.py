from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from omnitrackr.models.activity import Activity, Category, Tag, activity_tags


async def count_overview(db: AsyncSession, user_id: int) -> dict[str, int]:
    totals = {}
    for key, model in (("total_activities", Activity), ("total_categories", Category), ("total_tags", Tag)):
        result = await db.execute(select(func.count(model.id)).filter(model.user_id == user_id))
        totals[key] = result.scalar() or 0
    return totals


async def category_counts(db: AsyncSession, user_id: int):
    """Rows of (id, name, color, activity_count), zero-count categories included."""
    stmt = (
        select(
            Category.id,
            Category.name,
            Category.color,
            func.count(Activity.id).label("activity_count"),
        )
        .outerjoin(Activity, Activity.category_id == Category.id)
        .filter(Category.user_id == user_id)
        .group_by(Category.id, Category.name, Category.color)
    )
    return (await db.execute(stmt)).all()


async def uncategorized_count(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(
        select(func.count(Activity.id)).filter(
            Activity.user_id == user_id, Activity.category_id.is_(None)
        )
    )
    return result.scalar() or 0


async def tag_counts(db: AsyncSession, user_id: int):
    stmt = (
        select(
            Tag.id,
            Tag.name,
            Tag.color,
            func.count(activity_tags.c.activity_id).label("activity_count"),
        )
        .outerjoin(activity_tags, activity_tags.c.tag_id == Tag.id)
        .filter(Tag.user_id == user_id)
        .group_by(Tag.id, Tag.name, Tag.color)
    )
    return (await db.execute(stmt)).all()


async def daily_counts(db: AsyncSession, user_id: int, since: datetime):
    """Rows of (day, count) for days with at least one activity, oldest first."""
    day = func.date(Activity.created_at).label("day")
    stmt = (
        select(day, func.count(Activity.id).label("count"))
        .filter(Activity.user_id == user_id, Activity.created_at >= since)
        .group_by(day)
        .order_by(day)
    )
    return (await db.execute(stmt)).all()
