from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from omnitrackr.dependencies import get_current_user, get_db
from omnitrackr.schemas.auth import AuthContext
from omnitrackr.schemas.category import CategoryCreate, CategoryUpdate
from omnitrackr.services import categories as category_service
from omnitrackr.utils.result import to_response

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: CategoryCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
):
    result = await category_service.create_category(db, current_user, payload)
    return to_response(result, status.HTTP_201_CREATED)


@router.get("")
async def list_categories(db: AsyncSession = Depends(get_db), current_user: AuthContext = Depends(get_current_user)):
    return to_response(await category_service.list_categories(db, current_user))


@router.get("/{category_id}")
async def get_category(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
):
    return to_response(await category_service.get_category(db, current_user, category_id))


@router.put("/{category_id}")
async def update_category(
    category_id: int,
    payload: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
):
    return to_response(await category_service.update_category(db, current_user, category_id, payload))


@router.delete("/{category_id}")
async def delete_category(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
):
    return to_response(await category_service.delete_category(db, current_user, category_id))
