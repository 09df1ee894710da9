import logging

from sqlalchemy.ext.asyncio import AsyncSession

from omnitrackr.models.activity import DEFAULT_TAG_COLOR
from omnitrackr.schemas.auth import AuthContext
from omnitrackr.schemas.tag import TagCreate, TagResponse, TagUpdate
from omnitrackr.services.ownership import ensure_owned
from omnitrackr.stores import tags as tag_store
from omnitrackr.utils.result import ErrorCode, ServiceError, service_result

logger = logging.getLogger("omnitrackr.tags")


def _response(tag, activity_count: int = 0) -> TagResponse:
    return TagResponse.model_validate(tag).model_copy(update={"activity_count": activity_count})


@service_result
async def create_tag(db: AsyncSession, ctx: AuthContext, payload: TagCreate) -> TagResponse:
    if not payload.name:
        raise ServiceError(ErrorCode.VALIDATION_ERROR, "Tag name is required")
    if await tag_store.name_exists(db, ctx.user_id, payload.name):
        raise ServiceError(ErrorCode.DUPLICATE_NAME, "Tag name already exists")

    tag = await tag_store.create_tag(db, ctx.user_id, payload.name, payload.color or DEFAULT_TAG_COLOR)
    await db.commit()
    await db.refresh(tag)
    logger.info("User %s created tag %s", ctx.user_id, tag.id)
    return _response(tag)


@service_result
async def list_tags(db: AsyncSession, ctx: AuthContext) -> list[TagResponse]:
    rows = await tag_store.list_tags(db, ctx.user_id)
    return [_response(tag, count) for tag, count in rows]


@service_result
async def get_tag(db: AsyncSession, ctx: AuthContext, tag_id: int) -> TagResponse:
    tag = ensure_owned(await tag_store.get_tag(db, tag_id), ctx, "Tag")
    return _response(tag, await tag_store.count_activities(db, tag.id))


@service_result
async def update_tag(db: AsyncSession, ctx: AuthContext, tag_id: int, payload: TagUpdate) -> TagResponse:
    tag = ensure_owned(await tag_store.get_tag(db, tag_id), ctx, "Tag")
    fields = payload.model_fields_set

    if "name" in fields:
        if not payload.name:
            raise ServiceError(ErrorCode.VALIDATION_ERROR, "Tag name cannot be empty")
        if await tag_store.name_exists(db, ctx.user_id, payload.name, exclude_id=tag.id):
            raise ServiceError(ErrorCode.DUPLICATE_NAME, "Tag name already exists")
        tag.name = payload.name

    if "color" in fields and payload.color is not None:
        tag.color = payload.color

    await db.commit()
    await db.refresh(tag)
    return _response(tag, await tag_store.count_activities(db, tag.id))


@service_result
async def delete_tag(db: AsyncSession, ctx: AuthContext, tag_id: int) -> dict:
    tag = ensure_owned(await tag_store.get_tag(db, tag_id), ctx, "Tag")
    await tag_store.delete_tag(db, tag.id)
    await db.commit()
    logger.info("User %s deleted tag %s", ctx.user_id, tag_id)
    return {"message": "Tag deleted successfully"}
