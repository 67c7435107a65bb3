"""
Number Portability Admin Console - FastAPI application

``create_app`` builds the ASGI app; the module-level ``app`` is what
uvicorn serves. Tests pass their own settings and a pre-built
``AppServices`` so no database is touched.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError

from .config.settings import Settings, get_settings
from .api.routes import api_router, health_router
from .api.routes.health import APP_NAME, APP_VERSION
from .api.middleware import CorrelationIdMiddleware, register_error_handlers
from .repositories.async_mongo import AsyncMongoContext
from .repositories.mongo_client import MongoContext
from .services.container import AppServices
from .utils.logger import setup_logging, get_logger

logger = get_logger(__name__)


def _connect(settings: Settings) -> AppServices:
    """Open both MongoDB clients and wire the services on top of them"""
    mongo = MongoContext(settings)
    try:
        mongo.create_indexes()
    except PyMongoError as e:
        # The feed reports the outage; the API still starts
        logger.error(f"Could not create request indexes: {e}")
    return AppServices.build(settings, mongo, AsyncMongoContext(settings))


def _cors_options(settings: Settings) -> Dict[str, Any]:
    # Browsers refuse credentials together with a wildcard origin
    if settings.cors_origins.strip() == "*":
        return {"allow_origins": ["*"], "allow_credentials": False}
    return {"allow_origins": settings.cors_origins_list, "allow_credentials": True}


def create_app(
    settings: Optional[Settings] = None,
    services: Optional[AppServices] = None
) -> FastAPI:
    """
    Build the admin API.
    
    Args:
        settings: Configuration; defaults to the environment
        services: Pre-wired service container. When omitted, the lifespan
            connects to MongoDB and owns (and finally closes) the container.
    """
    settings = settings or get_settings()
    
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = services is None
        container = _connect(settings) if owned else services
        app.state.services = container
        
        container.session.start()
        if settings.feed_enabled:
            await container.feed.start()
        logger.info(
            f"{APP_NAME} ready",
            extra={"role": container.session.identity.role.value}
        )
        
        try:
            yield
        finally:
            await container.feed.stop()
            if owned:
                container.close()
            app.state.services = None
            logger.info(f"{APP_NAME} stopped")
    
    docs_prefix = "/api" if settings.debug else None
    application = FastAPI(
        title=APP_NAME,
        description="Review, validate and reject mobile number portability requests",
        version=APP_VERSION,
        lifespan=lifespan,
        docs_url=f"{docs_prefix}/docs" if docs_prefix else None,
        redoc_url=f"{docs_prefix}/redoc" if docs_prefix else None,
        openapi_url=f"{docs_prefix}/openapi.json" if docs_prefix else None,
    )
    application.state.settings = settings
    
    application.add_middleware(
        CORSMiddleware,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-Id"],
        **_cors_options(settings),
    )
    application.add_middleware(CorrelationIdMiddleware)
    register_error_handlers(application)
    
    application.include_router(health_router, tags=["Health"])
    application.include_router(api_router, prefix="/api/v1")
    
    return application


setup_logging()
app = create_app()
