"""
Sports Rights & Pricing Admin API

FastAPI application for broadcast rights exclusivity and event pricing.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rightsdesk.config import settings
from rightsdesk.database import SessionLocal, init_db
from rightsdesk.exceptions import (
    RightsDeskError,
    ValidationError,
    InvalidTransitionError,
    NotFoundError,
    AuthorizationError,
    TransientStorageError,
    UpstreamServiceError,
)
from rightsdesk.api import (
    territories_router,
    broadcasters_router,
    packages_router,
    rights_router,
    pricing_router,
    health_router,
)
from rightsdesk.services.territory_service import TerritoryService
from rightsdesk.services.tier_config_service import TierConfigService

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InvalidTransitionError: status.HTTP_409_CONFLICT,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    TransientStorageError: status.HTTP_503_SERVICE_UNAVAILABLE,
    UpstreamServiceError: status.HTTP_502_BAD_GATEWAY,
}


def seed_reference_data() -> None:
    """Seed territories and tier bands when their tables are empty"""
    db = SessionLocal()
    try:
        TerritoryService(db).seed_defaults()
        TierConfigService(db).ensure_defaults()
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Note: In production, use Alembic migrations instead
    init_db()
    if settings.seed_reference_data:
        seed_reference_data()
    logger.info(f"{settings.app_name} {settings.app_version} started")
    yield


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Sports Rights & Pricing Admin API

    Back office for a sports streaming platform:
    - **Broadcasters** and their **rights packages** (sport, competition, season)
    - **Rights grants** per event with territory allow/block lists
    - **Exclusivity conflicts** and **broadcaster suggestions**
    - **Event pricing** with manual overrides, tier bands and history

    Identity is forwarded in the X-Admin-User-Id and X-Admin-Role headers.
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RightsDeskError)
async def rights_desk_exception_handler(request: Request, exc: RightsDeskError):
    """Map domain errors to HTTP statuses."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type in type(exc).__mro__:
        if error_type in ERROR_STATUS:
            status_code = ERROR_STATUS[error_type]
            break

    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({status_code}): {exc}")

    return JSONResponse(status_code=status_code, content={"detail": exc.message})


# Register routers
app.include_router(territories_router)
app.include_router(broadcasters_router)
app.include_router(packages_router)
app.include_router(rights_router)
app.include_router(pricing_router)
app.include_router(health_router)


@app.get("/", tags=["health"])
def root():
    """Root endpoint returning API info."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


@app.get("/health", tags=["health"])
def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


def run():
    """Serve the API with uvicorn"""
    import uvicorn

    uvicorn.run(
        "rightsdesk.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
