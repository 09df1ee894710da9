import logging

from sqlalchemy.ext.asyncio import AsyncSession

from omnitrackr.models.activity import DEFAULT_CATEGORY_COLOR
from omnitrackr.schemas.auth import AuthContext
from omnitrackr.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from omnitrackr.services.ownership import ensure_owned
from omnitrackr.stores import categories as category_store
from omnitrackr.utils.result import ErrorCode, ServiceError, service_result

logger = logging.getLogger("omnitrackr.categories")


def _response(category, activity_count: int = 0) -> CategoryResponse:
    return CategoryResponse.model_validate(category).model_copy(update={"activity_count": activity_count})


@service_result
async def create_category(db: AsyncSession, ctx: AuthContext, payload: CategoryCreate) -> CategoryResponse:
    if not payload.name:
        raise ServiceError(ErrorCode.VALIDATION_ERROR, "Category name is required")
    if await category_store.name_exists(db, ctx.user_id, payload.name):
        raise ServiceError(ErrorCode.DUPLICATE_NAME, "Category name already exists")

    category = await category_store.create_category(
        db, ctx.user_id, payload.name, payload.color or DEFAULT_CATEGORY_COLOR
    )
    await db.commit()
    await db.refresh(category)
    logger.info("User %s created category %s", ctx.user_id, category.id)
    return _response(category)


@service_result
async def list_categories(db: AsyncSession, ctx: AuthContext) -> list[CategoryResponse]:
    rows = await category_store.list_categories(db, ctx.user_id)
    return [_response(category, count) for category, count in rows]


@service_result
async def get_category(db: AsyncSession, ctx: AuthContext, category_id: int) -> CategoryResponse:
    category = ensure_owned(await category_store.get_category(db, category_id), ctx, "Category")
    return _response(category, await category_store.count_activities(db, category.id))


@service_result
async def update_category(
    db: AsyncSession, ctx: AuthContext, category_id: int, payload: CategoryUpdate
) -> CategoryResponse:
    category = ensure_owned(await category_store.get_category(db, category_id), ctx, "Category")
    fields = payload.model_fields_set

    if "name" in fields:
        if not payload.name:
            raise ServiceError(ErrorCode.VALIDATION_ERROR, "Category name cannot be empty")
        if await category_store.name_exists(db, ctx.user_id, payload.name, exclude_id=category.id):
            raise ServiceError(ErrorCode.DUPLICATE_NAME, "Category name already exists")
        category.name = payload.name

    # An explicit null color leaves the current one in place
    if "color" in fields and payload.color is not None:
        category.color = payload.color

    await db.commit()
    await db.refresh(category)
    return _response(category, await category_store.count_activities(db, category.id))


@service_result
async def delete_category(db: AsyncSession, ctx: AuthContext, category_id: int) -> dict:
    category = ensure_owned(await category_store.get_category(db, category_id), ctx, "Category")
    await category_store.delete_category(db, category.id)
    await db.commit()
    logger.info("User %s deleted category %s", ctx.user_id, category_id)
    return {"message": "Category deleted successfully"}
