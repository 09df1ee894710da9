import logging

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.ext.asyncio import AsyncSession

from omnitrackr.config import settings
from omnitrackr.schemas.auth import AuthContext, LoginRequest, LoginResponse, RegisterRequest, UserPublic
from omnitrackr.stores import sessions as session_store
from omnitrackr.stores import users as user_store
from omnitrackr.utils.result import ErrorCode, ServiceError, service_result
from omnitrackr.utils.security import get_password_hash, is_expired, verify_password

logger = logging.getLogger("omnitrackr.auth")

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


@service_result
async def register(db: AsyncSession, payload: RegisterRequest) -> UserPublic:
    if not payload.username or not payload.email or not payload.password:
        raise ServiceError(ErrorCode.VALIDATION_ERROR, "Username, email, and password are required")

    if len(payload.username) < MIN_USERNAME_LENGTH:
        raise ServiceError(
            ErrorCode.VALIDATION_ERROR,
            f"Username must be at least {MIN_USERNAME_LENGTH} characters long",
        )

    try:
        validate_email(payload.email, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ServiceError(ErrorCode.VALIDATION_ERROR, "Invalid email format", [str(exc)])

    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise ServiceError(
            ErrorCode.VALIDATION_ERROR,
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
        )

    if await user_store.username_exists(db, payload.username):
        raise ServiceError(ErrorCode.DUPLICATE_USERNAME, "Username already exists")
    if await user_store.email_exists(db, payload.email):
        raise ServiceError(ErrorCode.DUPLICATE_EMAIL, "Email already exists")

    user = await user_store.create_user(
        db, payload.username, payload.email, get_password_hash(payload.password)
    )
    await db.commit()
    logger.info("Registered user %s (id=%s)", user.username, user.id)
    return UserPublic.model_validate(user)


@service_result
async def login(db: AsyncSession, payload: LoginRequest) -> LoginResponse:
    if not payload.username or not payload.password:
        raise ServiceError(ErrorCode.VALIDATION_ERROR, "Username and password are required")

    user = await user_store.get_user_by_username(db, payload.username)
    # Same error whether the user is unknown or the password is wrong
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.warning("Failed login for username %s", payload.username)
        raise ServiceError(ErrorCode.INVALID_CREDENTIALS, "Invalid username or password")

    session = await session_store.create_session(db, user.id, settings.SESSION_LIFETIME)
    await db.commit()
    logger.info("User %s logged in", user.username)
    return LoginResponse(
        session_id=session.id,
        expires_at=session.expires_at,
        user=UserPublic.model_validate(user),
    )


@service_result
async def logout(db: AsyncSession, token: str | None) -> dict:
    if not token:
        raise ServiceError(ErrorCode.VALIDATION_ERROR, "Session ID is required")

    # A token that is already gone is a failure, so a second logout is rejected
    session = await session_store.get_session(db, token)
    if session is None:
        raise ServiceError(ErrorCode.INVALID_SESSION, "Invalid or expired session")

    await session_store.delete_session(db, token)
    await db.commit()
    if is_expired(session.expires_at):
        logger.info("Evicted expired session for user id=%s", session.user_id)
        raise ServiceError(ErrorCode.INVALID_SESSION, "Invalid or expired session")
    logger.info("Session ended")
    return {"message": "Logged out successfully"}


@service_result
async def authenticate(db: AsyncSession, token: str | None) -> AuthContext:
    """Resolve a session token to the identity of its owner.

    An expired session is deleted on the spot and reported like an unknown one.
    """
    if not token:
        raise ServiceError(ErrorCode.UNAUTHORIZED, "No session provided")

    session = await session_store.get_session(db, token)
    if session is None:
        raise ServiceError(ErrorCode.INVALID_SESSION, "Invalid or expired session")

    if is_expired(session.expires_at):
        await session_store.delete_session(db, token)
        await db.commit()
        logger.info("Evicted expired session for user id=%s", session.user_id)
        raise ServiceError(ErrorCode.INVALID_SESSION, "Invalid or expired session")

    user = await user_store.get_user(db, session.user_id)
    if user is None:
        raise ServiceError(ErrorCode.UNAUTHORIZED, "User not found")

    return AuthContext(
        user_id=user.id,
        username=user.username,
        email=user.email,
        session_id=session.id,
    )
