"""
FastAPI Application - Game Review Catalog
Backend for a personal video-game review catalog
"""

import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.core.errors import CatalogError
from app.core.genre_cache import GenreListCache
from app.core.logging import (
    clear_request_context,
    configure_logging,
    get_logger,
    set_request_context,
)

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup and shutdown events"""
    configure_logging()
    logger.info(
        "app_starting",
        environment=settings.ENVIRONMENT,
        database=settings.DATABASE_URL.split("@")[1]
        if "@" in settings.DATABASE_URL
        else "configured",
    )
    yield
    logger.info("app_stopping")


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Review catalog with genre/category classification and an archive of raw submissions",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.state.genre_cache = GenreListCache(settings.GENRE_CACHE_TTL)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Tag each request with an ID (client-supplied or generated) for log correlation."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    set_request_context(request_id)
    try:
        response = await call_next(request)
    finally:
        clear_request_context()
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Map domain errors to their HTTP status with a {"detail": message} body."""
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, error=exc.message)
    else:
        logger.info(
            "request_rejected",
            path=request.url.path,
            status_code=exc.status_code,
            error=exc.message,
        )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint - API information"""
    return {
        "name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint"""
    return {"status": "healthy"}


# Import and include routers
from app.api.v1 import router as api_router  # noqa: E402

app.include_router(api_router, prefix=settings.API_PREFIX)
