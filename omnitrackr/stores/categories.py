from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from omnitrackr.models.activity import Activity, Category


async def get_category(db: AsyncSession, category_id: int) -> Category | None:
    result = await db.execute(select(Category).filter(Category.id == category_id))
    return result.scalars().first()


async def list_categories(db: AsyncSession, user_id: int) -> list[tuple[Category, int]]:
    """Caller's categories by name, each with the number of activities filed under it."""
    stmt = (
        select(Category, func.count(Activity.id).label("activity_count"))
        .outerjoin(Activity, Activity.category_id == Category.id)
        .filter(Category.user_id == user_id)
        .group_by(Category.id)
        .order_by(Category.name, Category.id)
    )
    result = await db.execute(stmt)
    return [(row.Category, row.activity_count) for row in result.all()]


async def count_activities(db: AsyncSession, category_id: int) -> int:
    result = await db.execute(
        select(func.count(Activity.id)).filter(Activity.category_id == category_id)
    )
    return result.scalar() or 0


async def name_exists(db: AsyncSession, user_id: int, name: str, exclude_id: int | None = None) -> bool:
    stmt = select(Category.id).filter(Category.user_id == user_id, Category.name == name)
    if exclude_id is not None:
        stmt = stmt.filter(Category.id != exclude_id)
    result = await db.execute(stmt)
    return result.first() is not None


async def create_category(db: AsyncSession, user_id: int, name: str, color: str) -> Category:
    category = Category(user_id=user_id, name=name, color=color)
    db.add(category)
    await db.flush()
    return category


async def delete_category(db: AsyncSession, category_id: int) -> None:
    # Activities survive, they just lose their category
    await db.execute(
        update(Activity).where(Activity.category_id == category_id).values(category_id=None)
    )
    await db.execute(delete(Category).where(Category.id == category_id))
