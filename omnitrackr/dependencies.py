from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from omnitrackr.config import settings
from omnitrackr.database import get_db as db_session
from omnitrackr.schemas.auth import AuthContext
from omnitrackr.services import auth as auth_service
from omnitrackr.utils.result import Err, ServiceError
from omnitrackr.utils.security import extract_bearer_token

BODY_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


def get_db(db: AsyncSession = Depends(db_session)):
    return db


async def extract_session_token(request: Request) -> str | None:
    """Bearer header, then cookie, then ``session_id`` query parameter, then JSON body."""
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token:
        return token

    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        return token

    token = request.query_params.get("session_id")
    if token:
        return token

    if request.method in BODY_METHODS and "application/json" in request.headers.get("content-type", ""):
        try:
            body = await request.json()
        except ValueError:
            return None
        if isinstance(body, dict) and isinstance(body.get("session_id"), str):
            return body["session_id"] or None
    return None


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> AuthContext:
    result = await auth_service.authenticate(db, await extract_session_token(request))
    if isinstance(result, Err):
        raise ServiceError(result.code, result.message, result.details)
    return result.data
