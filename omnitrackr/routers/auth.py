from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from omnitrackr.config import settings
from omnitrackr.dependencies import extract_session_token, get_current_user, get_db
from omnitrackr.schemas.auth import AuthContext, LoginRequest, RegisterRequest, UserPublic
from omnitrackr.services import auth as auth_service
from omnitrackr.utils.result import Ok, to_response

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db: AsyncSession = Depends(get_db)):
    result = await auth_service.register(db, payload)
    return to_response(result, status.HTTP_201_CREATED)


@router.post("/login")
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db)):
    result = await auth_service.login(db, payload)
    response = to_response(result)
    if isinstance(result, Ok):
        response.set_cookie(
            key=settings.SESSION_COOKIE_NAME,
            value=result.data.session_id,
            max_age=settings.SESSION_LIFETIME,
            httponly=True,
            samesite="lax",
            secure=settings.SESSION_COOKIE_SECURE,
        )
    return response


@router.post("/logout")
async def logout(request: Request, db: AsyncSession = Depends(get_db)):
    result = await auth_service.logout(db, await extract_session_token(request))
    response = to_response(result)
    if isinstance(result, Ok):
        response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response


@router.get("/validate")
async def validate(current_user: AuthContext = Depends(get_current_user)):
    user = UserPublic(id=current_user.user_id, username=current_user.username, email=current_user.email)
    return to_response(Ok(user))
