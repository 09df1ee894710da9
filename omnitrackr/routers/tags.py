from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from omnitrackr.dependencies import get_current_user, get_db
from omnitrackr.schemas.auth import AuthContext
from omnitrackr.schemas.tag import TagCreate, TagUpdate
from omnitrackr.services import tags as tag_service
from omnitrackr.utils.result import to_response

router = APIRouter(prefix="/api/tags", tags=["tags"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_tag(
    payload: TagCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
):
    return to_response(await tag_service.create_tag(db, current_user, payload), status.HTTP_201_CREATED)


@router.get("")
async def list_tags(db: AsyncSession = Depends(get_db), current_user: AuthContext = Depends(get_current_user)):
    return to_response(await tag_service.list_tags(db, current_user))


@router.get("/{tag_id}")
async def get_tag(tag_id: int, db: AsyncSession = Depends(get_db), current_user: AuthContext = Depends(get_current_user)):
    return to_response(await tag_service.get_tag(db, current_user, tag_id))


@router.put("/{tag_id}")
async def update_tag(
    tag_id: int,
    payload: TagUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
):
    return to_response(await tag_service.update_tag(db, current_user, tag_id, payload))


@router.delete("/{tag_id}")
async def delete_tag(tag_id: int, db: AsyncSession = Depends(get_db), current_user: AuthContext = Depends(get_current_user)):
    return to_response(await tag_service.delete_tag(db, current_user, tag_id))
