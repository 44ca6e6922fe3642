import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from jobboard.api.deps import get_cache
from jobboard.api.v1.router import api_router
from jobboard.cache.client import RedisCache
from jobboard.cache.keys import CacheTTL
from jobboard.core.database import create_engine, create_session_factory
from jobboard.core.exceptions import BackingStoreError
from jobboard.core.logging import setup_logging
from jobboard.core.settings import settings
from jobboard.core.supabase_client import SupabaseAuthClient
from jobboard.crud.job_post import CRUDJobPost
from jobboard.schemas.response import ErrorResponse, Messages
from jobboard.services.description_service import DescriptionGenerator
from jobboard.services.job_post_service import JobPostService

logger = logging.getLogger(__name__)


def configure_state(app: FastAPI) -> None:
    """Build the shared engine, cache and service objects on ``app.state``."""
    engine = create_engine()
    cache = RedisCache(
        url=settings.REDIS_URL,
        connect_timeout=settings.REDIS_CONNECT_TIMEOUT,
        operation_timeout=settings.CACHE_OPERATION_TIMEOUT,
    )
    ttl = CacheTTL(
        job_posts=settings.CACHE_TTL_JOB_POSTS,
        job_post=settings.CACHE_TTL_JOB_POST,
        job_posts_count=settings.CACHE_TTL_JOB_POSTS_COUNT,
    )

    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.cache = cache
    app.state.job_post_service = JobPostService(
        CRUDJobPost(app.state.session_factory),
        cache,
        ttl=ttl,
        default_limit=settings.DEFAULT_PAGE_SIZE,
        max_limit=settings.MAX_PAGE_SIZE,
    )
    app.state.auth_client = SupabaseAuthClient(
        settings.SUPABASE_URL, settings.SUPABASE_KEY, site_url=settings.SITE_URL
    )
    app.state.description_generator = DescriptionGenerator(
        settings.GROQ_API_KEY,
        api_base=settings.GROQ_API_BASE,
        model=settings.GROQ_MODEL,
        timeout=settings.LLM_TIMEOUT,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info(f"{settings.PROJECT_NAME} starting up...")
    if not hasattr(app.state, "job_post_service"):
        configure_state(app)

    yield

    # Shutdown
    logger.info(f"{settings.PROJECT_NAME} shutting down...")
    await app.state.cache.close()
    await app.state.engine.dispose()


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"422 Validation Error on {request.method} {request.url}")
    logger.debug(f"Validation errors: {exc.errors()}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": jsonable_encoder(exc.errors()),
            "url": str(request.url),
            "method": request.method,
        },
    )


async def backing_store_exception_handler(request: Request, exc: BackingStoreError):
    logger.error(f"Backing store failure on {request.method} {request.url}: {exc}")

    body = ErrorResponse(message=Messages.SERVICE_UNAVAILABLE, errors=[str(exc)])
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body.model_dump(),
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=settings.DESCRIPTION,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        lifespan=lifespan,
    )

    # Set up CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(BackingStoreError, backing_store_exception_handler)

    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get("/health")
    async def health_check(request: Request, cache: RedisCache = Depends(get_cache)):
        """Health check endpoint for monitoring and load balancers"""
        timestamp = datetime.now(timezone.utc).isoformat()
        cache_connected = await cache.ping()
        try:
            async with request.app.state.session_factory() as session:
                await session.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Health check failed: {e}")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={
                    "status": "unhealthy",
                    "timestamp": timestamp,
                    "error": str(e),
                    "database": "disconnected",
                    "cache": "connected" if cache_connected else "disconnected",
                },
            )

        return {
            "status": "healthy",
            "timestamp": timestamp,
            "version": settings.VERSION,
            "database": "connected",
            "cache": "connected" if cache_connected else "disconnected",
            "environment": settings.ENVIRONMENT,
        }

    return app


# Setup logging before creating the app
setup_logging()

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
