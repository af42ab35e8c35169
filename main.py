"""launchwatch - live launch stream aggregator entry point."""

import sentry_sdk
from fastapi import FastAPI
from fastapi.concurrency import asynccontextmanager
from fastapi.routing import APIRoute
from loguru import logger

from src.core.config import settings
from src.core.domain.exceptions import DomainException
from src.core.infrastructure.health import CatalogHealthResult, HealthStatus
from src.core.infrastructure.logging import setup_logging
from src.core.infrastructure.redis import redis_client
from src.core.interfaces.http.exceptions import (
    domain_exception_handler,
    global_exception_handler,
)
from src.core.interfaces.http.routers import api_router
from src.modules.streams.application import dependencies as streams_app_deps
from src.modules.streams.domain.entities import CatalogState
from src.modules.streams.infrastructure import dependencies as streams_infra_deps


def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate unique operation IDs for OpenAPI."""
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


# Initialize Sentry if configured
if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(
        dsn=str(settings.SENTRY_DSN),
        enable_tracing=True,
        environment=settings.ENVIRONMENT,
    )


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    logger.info("Starting launchwatch...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    runtime = streams_infra_deps.build_streams_runtime(redis_client=redis_client)
    streams_infra_deps.set_streams_runtime(runtime)

    logger.info(f"Loading stream catalog (cache: {runtime.cache_backend.name})...")
    await runtime.manager.initialize()
    runtime.playback.start_default()
    runtime.scheduler.start()

    yield

    logger.info("Shutting down launchwatch...")
    await runtime.close()
    streams_infra_deps.set_streams_runtime(None)
    await redis_client.close()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description=(
        "Aggregates live and upcoming launch streams from a fixed set of "
        "channels and picks what to play."
    ),
    version="0.1.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
    root_path=settings.ROOTPATH,
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)

# Dependency overrides (application -> infrastructure)
app.dependency_overrides[streams_app_deps.get_channel_manager] = (
    streams_infra_deps.get_channel_manager
)
app.dependency_overrides[streams_app_deps.get_playback_controller] = (
    streams_infra_deps.get_playback_controller
)

# Exception handlers
app.add_exception_handler(DomainException, domain_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint.

    The catalog is healthy once it has been loaded. A redis cache that cannot
    be reached only degrades the service, since the catalog keeps serving
    from memory.
    """
    runtime = streams_infra_deps.get_streams_runtime()
    manager = runtime.manager

    catalog_ok = manager.state in (CatalogState.READY, CatalogState.REFRESHING)
    catalog_health = CatalogHealthResult(
        status=HealthStatus.OK if catalog_ok else HealthStatus.ERROR,
        state=manager.state.value,
        entries=len(manager.entries),
        live=len(manager.live_videos),
        cache_backend=runtime.cache_backend.name,
        refresh_running=runtime.scheduler.is_running,
    )
    components = {"catalog": catalog_health.to_dict()}

    redis_ok = True
    if runtime.cache_backend.name == "redis":
        redis_health = await redis_client.health_check()
        redis_ok = redis_health.status == HealthStatus.OK
        components["redis"] = redis_health.to_dict()

    if not catalog_ok:
        overall_status = "unhealthy"
    elif redis_ok:
        overall_status = "healthy"
    else:
        overall_status = "degraded"

    return {
        "status": overall_status,
        "environment": settings.ENVIRONMENT,
        "version": "0.1.0",
        "components": components,
    }


@app.get("/", tags=["root"])
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to launchwatch",
        "docs": f"{settings.API_V1_STR}/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.SERVER_PORT,
        reload=settings.ENVIRONMENT == "local",
    )
