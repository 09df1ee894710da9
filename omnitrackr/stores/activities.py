from sqlalchemy import delete, distinct, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from omnitrackr.models.activity import Activity, activity_tags


def _with_display_fields(stmt):
    # Category and tags come in batched SELECT ... IN queries, one per relationship
    return stmt.options(selectinload(Activity.category), selectinload(Activity.tags))


def tag_coverage_subquery(tag_ids: list[int]):
    """Ids of activities carrying every one of ``tag_ids``."""
    wanted = sorted(set(tag_ids))
    return (
        select(activity_tags.c.activity_id)
        .where(activity_tags.c.tag_id.in_(wanted))
        .group_by(activity_tags.c.activity_id)
        .having(func.count(distinct(activity_tags.c.tag_id)) == len(wanted))
    )


async def get_activity(db: AsyncSession, activity_id: int) -> Activity | None:
    stmt = _with_display_fields(select(Activity).filter(Activity.id == activity_id))
    result = await db.execute(stmt.execution_options(populate_existing=True))
    return result.scalars().first()


async def list_activities(
    db: AsyncSession,
    user_id: int,
    category_ids: list[int] | None = None,
    tag_ids: list[int] | None = None,
) -> list[Activity]:
    stmt = select(Activity).filter(Activity.user_id == user_id)
    if category_ids:
        stmt = stmt.filter(Activity.category_id.in_(sorted(set(category_ids))))
    if tag_ids:
        stmt = stmt.filter(Activity.id.in_(tag_coverage_subquery(tag_ids)))
    stmt = _with_display_fields(stmt).order_by(Activity.created_at.desc(), Activity.id.desc())
    result = await db.execute(stmt.execution_options(populate_existing=True))
    return list(result.scalars().all())


async def create_activity(
    db: AsyncSession, user_id: int, title: str, description: str, category_id: int | None
) -> Activity:
    activity = Activity(
        user_id=user_id,
        title=title,
        description=description,
        category_id=category_id,
    )
    db.add(activity)
    await db.flush()
    return activity


async def replace_tags(db: AsyncSession, activity_id: int, tag_ids: list[int]) -> None:
    """Clear-then-insert; the new set fully replaces the old one."""
    await db.execute(delete(activity_tags).where(activity_tags.c.activity_id == activity_id))
    if tag_ids:
        await db.execute(
            insert(activity_tags),
            [{"activity_id": activity_id, "tag_id": tag_id} for tag_id in tag_ids],
        )


async def delete_activity(db: AsyncSession, activity_id: int) -> None:
    await db.execute(delete(activity_tags).where(activity_tags.c.activity_id == activity_id))
    await db.execute(delete(Activity).where(Activity.id == activity_id))
