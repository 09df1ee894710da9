from omnitrackr.schemas.auth import AuthContext
from omnitrackr.utils.result import ErrorCode, ServiceError


def ensure_owned(resource, ctx: AuthContext, label: str):
    """Existence first, then ownership: a foreign resource is FORBIDDEN, never NOT_FOUND."""
    if resource is None:
        raise ServiceError(ErrorCode.NOT_FOUND, f"{label} not found")
    if resource.user_id != ctx.user_id:
        raise ServiceError(ErrorCode.FORBIDDEN, "Access denied")
    return resource
