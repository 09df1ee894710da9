import logging
import traceback
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from omnitrackr.config import settings
from omnitrackr.database import Base, engine
from omnitrackr.models import activity, user  # noqa: F401  (registers tables on Base.metadata)
from omnitrackr.routers.activities import router as activities_router
from omnitrackr.routers.auth import router as auth_router
from omnitrackr.routers.categories import router as categories_router
from omnitrackr.routers.stats import router as stats_router
from omnitrackr.routers.tags import router as tags_router
from omnitrackr.utils.result import ErrorCode, ServiceError, error_response

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("omnitrackr")

if settings.ERROR_LOG_FILE:
    _error_handler = logging.FileHandler(settings.ERROR_LOG_FILE)
    _error_handler.setLevel(logging.ERROR)
    _error_handler.setFormatter(logging.Formatter("\n[%(asctime)s] %(levelname)s %(name)s:\n%(message)s"))
    logger.addHandler(_error_handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.AUTO_CREATE_TABLES:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ready")
    yield
    await engine.dispose()


app = FastAPI(
    lifespan=lifespan,
    title="OmniTrackr API",
    description="Personal activity tracking with categories, tags and statistics",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=settings.CORS_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    return error_response(exc.code, exc.message, exc.details)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if any(e.get("type") == "json_invalid" for e in errors):
        return error_response(ErrorCode.INVALID_JSON, "Invalid JSON in request body")
    details = [
        {"field": ".".join(str(p) for p in e.get("loc", ())), "message": e.get("msg", "")}
        for e in errors
    ]
    return error_response(ErrorCode.VALIDATION_ERROR, "Request validation failed", details)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return error_response(ErrorCode.NOT_FOUND, "Endpoint not found")
    if exc.status_code == 405:
        return error_response(ErrorCode.METHOD_NOT_ALLOWED, "Method not allowed")
    logger.warning("HTTP %s on %s: %s", exc.status_code, request.url.path, exc.detail)
    return error_response(ErrorCode.SERVER_ERROR, str(exc.detail))


# Global exception handler so nothing leaves the app outside the envelope
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(
        "500 Error at %s on %s %s:\n%s",
        datetime.now().isoformat(), request.method, request.url.path, traceback.format_exc(),
    )
    return error_response(ErrorCode.SERVER_ERROR, "Internal server error")


app.include_router(auth_router)
app.include_router(activities_router)
app.include_router(categories_router)
app.include_router(tags_router)
app.include_router(stats_router)


@app.get("/")
def root():
    return {"message": "OmniTrackr API running"}
