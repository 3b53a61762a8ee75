"""FastAPI application factory and configuration.

This module provides the application factory function for creating
and configuring the FastAPI application with middleware, routes,
and lifecycle handlers.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from boothcode.core.config import Settings, get_settings
from boothcode.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
    new_correlation_id,
)
from boothcode.domain.services.booth_sync_service import BoothCodeSyncService
from boothcode.domain.services.seller_code_generator import SellerCodeGenerator
from boothcode.infrastructure.auth.webhook_verifier import WebhookVerifier
from boothcode.infrastructure.registry import CodeRegistry, build_code_registry
from boothcode.infrastructure.services import (
    ShopifyCollectionProvider,
    WebkulSellerDirectoryProvider,
)

logger = get_logger(__name__)


def build_code_generator(settings: Settings, registry: CodeRegistry) -> SellerCodeGenerator:
    """Create the process-wide code generator for a registry."""
    return SellerCodeGenerator(
        registry,
        max_attempts=settings.code_max_attempts,
        step_max=settings.code_step_max,
        fallback_max_attempts=settings.code_fallback_max_attempts,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Builds the long-lived registry, generator and remote clients on startup
    and releases them on shutdown.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control is yielded to the application during its lifetime.
    """
    settings: Settings = app.state.settings

    configure_logging(settings)
    logger.info(
        "Starting BoothCode",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
        registry_backend=settings.registry_backend,
    )

    if not settings.shop_domain or not settings.admin_api_token:
        logger.warning("Shop domain or admin API token not configured; remote calls will fail")
    if app.state.webhook_verifier is None:
        logger.warning("Webhook secret not configured; signatures will not be verified")

    registry = build_code_registry(settings)
    try:
        await registry.load()
    except Exception as e:
        logger.error("Failed to load code registry", error=str(e))
        raise

    collections = ShopifyCollectionProvider.from_settings(settings)
    sellers = WebkulSellerDirectoryProvider.from_settings(settings)

    app.state.registry = registry
    app.state.sync_service = BoothCodeSyncService(
        generator=build_code_generator(settings, registry),
        collections=collections,
        sellers=sellers,
        default_title=settings.default_collection_title,
    )
    logger.info("BoothCode ready", issued_codes=await registry.count())

    yield

    logger.info("Shutting down BoothCode")
    app.state.sync_service = None
    await collections.aclose()
    await sellers.aclose()
    await registry.close()
    logger.info("Remote clients and registry closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings instance. If not provided, will load from environment.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Seller booth code webhooks",
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.registry = None
    app.state.sync_service = None
    app.state.webhook_verifier = (
        WebhookVerifier(settings.webhook_secret) if settings.webhook_secret else None
    )

    register_health_check(app)
    register_routes(app)
    register_exception_handlers(app)
    register_middleware(app)

    return app


def register_health_check(app: FastAPI) -> None:
    """Register health check endpoints.

    Args:
        app: FastAPI application instance.
    """

    @app.get("/health", tags=["health"])
    async def health_check():
        """Basic health check endpoint.

        Returns 200 if the service is running. Does not check the registry
        or remote services.
        """
        return {
            "status": "healthy",
            "service": app.state.settings.app_name,
            "version": app.state.settings.app_version,
        }

    @app.get("/ready", tags=["health"])
    async def readiness_check():
        """Readiness check endpoint.

        Returns 200 once the code registry is loaded and webhooks can be handled.
        """
        registry = app.state.registry
        if registry is None or app.state.sync_service is None:
            return JSONResponse(
                status_code=503,
                content={"status": "not_ready", "service": app.state.settings.app_name},
            )

        return {
            "status": "ready",
            "service": app.state.settings.app_name,
            "version": app.state.settings.app_version,
            "registry_backend": app.state.settings.registry_backend,
            "issued_codes": await registry.count(),
        }

    @app.get("/live", tags=["health"])
    async def liveness_check():
        """Liveness check endpoint."""
        return {
            "status": "alive",
            "service": app.state.settings.app_name,
            "version": app.state.settings.app_version,
        }


def register_routes(app: FastAPI) -> None:
    """Register API routes.

    Args:
        app: FastAPI application instance.
    """
    from boothcode.infrastructure.api.routes import webhooks_router

    app.include_router(webhooks_router, prefix="/webhooks", tags=["webhooks"])


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            path=str(request.url),
            method=request.method,
            error=str(exc),
            exc_type=type(exc).__name__,
        )
        return JSONResponse(status_code=500, content={"status": "error"})


def register_middleware(app: FastAPI) -> None:
    """Register custom middleware.

    Args:
        app: FastAPI application instance.
    """

    @app.middleware("http")
    async def logging_middleware(request, call_next):
        """Middleware to log all requests and add correlation ID."""
        correlation_id = request.headers.get("X-Correlation-ID") or new_correlation_id()
        bind_correlation_id(correlation_id)

        logger.info(
            "Request started",
            method=request.method,
            path=str(request.url.path),
        )

        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=str(request.url.path),
                status_code=response.status_code,
            )
            response.headers["X-Correlation-ID"] = correlation_id
            return response
        finally:
            clear_context()


# Create the application instance
app = create_app()
