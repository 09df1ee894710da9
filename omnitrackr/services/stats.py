from datetime import datetime, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from omnitrackr.schemas.auth import AuthContext
from omnitrackr.schemas.stats import CategoryCount, OverviewStats, TagCount, TimelinePoint
from omnitrackr.stores import stats as stats_store
from omnitrackr.utils.result import ErrorCode, ServiceError, service_result

UNCATEGORIZED_NAME = "Uncategorized"
UNCATEGORIZED_COLOR = "#CCCCCC"

DEFAULT_TIMELINE_DAYS = 30
MAX_TIMELINE_DAYS = 365


def check_days(days: int) -> int:
    if not 1 <= days <= MAX_TIMELINE_DAYS:
        raise ServiceError(
            ErrorCode.VALIDATION_ERROR,
            f"days must be between 1 and {MAX_TIMELINE_DAYS}",
            [{"field": "days", "value": days}],
        )
    return days


async def category_breakdown(db: AsyncSession, user_id: int) -> list[CategoryCount]:
    items = [
        CategoryCount(
            category_id=row.id,
            category_name=row.name,
            category_color=row.color,
            activity_count=row.activity_count,
        )
        for row in await stats_store.category_counts(db, user_id)
    ]
    uncategorized = await stats_store.uncategorized_count(db, user_id)
    if uncategorized > 0:
        items.append(CategoryCount(
            category_id=None,
            category_name=UNCATEGORIZED_NAME,
            category_color=UNCATEGORIZED_COLOR,
            activity_count=uncategorized,
        ))
    return sorted(items, key=lambda c: (-c.activity_count, c.category_name))


async def tag_distribution(db: AsyncSession, user_id: int) -> list[TagCount]:
    items = [
        TagCount(tag_id=row.id, tag_name=row.name, tag_color=row.color, activity_count=row.activity_count)
        for row in await stats_store.tag_counts(db, user_id)
    ]
    return sorted(items, key=lambda t: (-t.activity_count, t.tag_name))


async def daily_activity(db: AsyncSession, user_id: int, days: int) -> list[TimelinePoint]:
    """Sparse per-day creation counts for the trailing ``days`` window."""
    since = datetime.now(timezone.utc) - timedelta(days=days)
    rows = await stats_store.daily_counts(db, user_id, since)
    return [TimelinePoint(date=str(row.day), count=row.count) for row in rows]


@service_result
async def overview(db: AsyncSession, ctx: AuthContext) -> OverviewStats:
    return OverviewStats(**await stats_store.count_overview(db, ctx.user_id))


@service_result
async def by_category(db: AsyncSession, ctx: AuthContext) -> list[CategoryCount]:
    return await category_breakdown(db, ctx.user_id)


@service_result
async def by_tag(db: AsyncSession, ctx: AuthContext) -> list[TagCount]:
    return await tag_distribution(db, ctx.user_id)


@service_result
async def timeline(db: AsyncSession, ctx: AuthContext, days: int = DEFAULT_TIMELINE_DAYS) -> list[TimelinePoint]:
    return await daily_activity(db, ctx.user_id, check_days(days))
