from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from omnitrackr.dependencies import get_current_user, get_db
from omnitrackr.schemas.activity import ActivityCreate, ActivityUpdate
from omnitrackr.schemas.auth import AuthContext
from omnitrackr.services import activities as activity_service
from omnitrackr.utils.result import to_response

router = APIRouter(prefix="/api/activities", tags=["activities"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_activity(
    payload: ActivityCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
):
    result = await activity_service.create_activity(db, current_user, payload)
    return to_response(result, status.HTTP_201_CREATED)


@router.get("")
async def list_activities(
    category_ids: str | None = Query(None, description="Comma-separated category ids, any of"),
    tag_ids: str | None = Query(None, description="Comma-separated tag ids, all of"),
    db: AsyncSession = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
):
    result = await activity_service.list_activities(db, current_user, category_ids=category_ids, tag_ids=tag_ids)
    return to_response(result)


@router.get("/{activity_id}")
async def get_activity(
    activity_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
):
    return to_response(await activity_service.get_activity(db, current_user, activity_id))


@router.put("/{activity_id}")
async def update_activity(
    activity_id: int,
    payload: ActivityUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
):
    return to_response(await activity_service.update_activity(db, current_user, activity_id, payload))


@router.delete("/{activity_id}")
async def delete_activity(
    activity_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
):
    return to_response(await activity_service.delete_activity(db, current_user, activity_id))
