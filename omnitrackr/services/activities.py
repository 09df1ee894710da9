import logging

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from omnitrackr.schemas.activity import ActivityCreate, ActivityResponse, ActivityUpdate
from omnitrackr.schemas.auth import AuthContext
from omnitrackr.services.ownership import ensure_owned
from omnitrackr.stores import activities as activity_store
from omnitrackr.stores import categories as category_store
from omnitrackr.stores import tags as tag_store
from omnitrackr.utils.result import ErrorCode, ServiceError, service_result

logger = logging.getLogger("omnitrackr.activities")


def parse_id_list(raw: str | None, field: str) -> list[int]:
    """Parse a comma-separated id filter such as ``"1, 2,3"``. Blank means no filter."""
    if raw is None or not raw.strip():
        return []
    ids = []
    for token in raw.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            ids.append(int(token))
        except ValueError:
            raise ServiceError(
                ErrorCode.VALIDATION_ERROR,
                f"{field} must be a comma-separated list of integers",
                [{"field": field, "value": token}],
            )
    return ids


def _dedupe(ids: list[int]) -> list[int]:
    return list(dict.fromkeys(ids))


async def _check_category(db: AsyncSession, ctx: AuthContext, category_id: int) -> None:
    category = await category_store.get_category(db, category_id)
    if category is None:
        raise ServiceError(ErrorCode.VALIDATION_ERROR, "Invalid category ID")
    if category.user_id != ctx.user_id:
        raise ServiceError(ErrorCode.FORBIDDEN, "Category does not belong to user")


async def _check_tags(db: AsyncSession, ctx: AuthContext, tag_ids: list[int]) -> None:
    found = await tag_store.get_tags_by_ids(db, tag_ids)
    for tag_id in tag_ids:
        tag = found.get(tag_id)
        if tag is None:
            raise ServiceError(ErrorCode.VALIDATION_ERROR, f"Invalid tag ID: {tag_id}")
        if tag.user_id != ctx.user_id:
            raise ServiceError(ErrorCode.FORBIDDEN, "Tag does not belong to user")


async def _load(db: AsyncSession, activity_id: int) -> ActivityResponse:
    return ActivityResponse.from_model(await activity_store.get_activity(db, activity_id))


@service_result
async def create_activity(db: AsyncSession, ctx: AuthContext, payload: ActivityCreate) -> ActivityResponse:
    if not payload.title:
        raise ServiceError(ErrorCode.VALIDATION_ERROR, "Activity title is required")

    tag_ids = _dedupe(payload.tag_ids or [])
    # All references are checked before anything is written
    if payload.category_id is not None:
        await _check_category(db, ctx, payload.category_id)
    if tag_ids:
        await _check_tags(db, ctx, tag_ids)

    activity = await activity_store.create_activity(
        db, ctx.user_id, payload.title, payload.description or "", payload.category_id
    )
    await activity_store.replace_tags(db, activity.id, tag_ids)
    await db.commit()
    logger.info("User %s created activity %s", ctx.user_id, activity.id)
    return await _load(db, activity.id)


@service_result
async def list_activities(
    db: AsyncSession,
    ctx: AuthContext,
    category_ids: str | None = None,
    tag_ids: str | None = None,
) -> list[ActivityResponse]:
    activities = await activity_store.list_activities(
        db,
        ctx.user_id,
        category_ids=parse_id_list(category_ids, "category_ids"),
        tag_ids=parse_id_list(tag_ids, "tag_ids"),
    )
    return [ActivityResponse.from_model(a) for a in activities]


@service_result
async def get_activity(db: AsyncSession, ctx: AuthContext, activity_id: int) -> ActivityResponse:
    activity = ensure_owned(await activity_store.get_activity(db, activity_id), ctx, "Activity")
    return ActivityResponse.from_model(activity)


@service_result
async def update_activity(
    db: AsyncSession, ctx: AuthContext, activity_id: int, payload: ActivityUpdate
) -> ActivityResponse:
    activity = ensure_owned(await activity_store.get_activity(db, activity_id), ctx, "Activity")
    fields = payload.model_fields_set

    if "title" in fields and not payload.title:
        raise ServiceError(ErrorCode.VALIDATION_ERROR, "Activity title cannot be empty")
    if "category_id" in fields and payload.category_id is not None:
        await _check_category(db, ctx, payload.category_id)
    new_tag_ids = None
    if "tag_ids" in fields:
        new_tag_ids = _dedupe(payload.tag_ids or [])
        if new_tag_ids:
            await _check_tags(db, ctx, new_tag_ids)

    if "title" in fields:
        activity.title = payload.title
    if "description" in fields:
        activity.description = payload.description or ""
    if "category_id" in fields:
        activity.category_id = payload.category_id
    if new_tag_ids is not None:
        await activity_store.replace_tags(db, activity.id, new_tag_ids)
        # Join rows live outside the activity row, so onupdate never sees them
        activity.updated_at = func.now()

    await db.commit()
    return await _load(db, activity.id)


@service_result
async def delete_activity(db: AsyncSession, ctx: AuthContext, activity_id: int) -> dict:
    activity = ensure_owned(await activity_store.get_activity(db, activity_id), ctx, "Activity")
    await activity_store.delete_activity(db, activity.id)
    await db.commit()
    logger.info("User %s deleted activity %s", ctx.user_id, activity_id)
    return {"message": "Activity deleted successfully"}
