import logging

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from app.api.routes_health import router as health_router
from app.api.routes_inventory import router as inventory_router
from app.api.routes_metrics import router as metrics_router
from app.core.config import settings
from app.core.errors import register_error_handlers
from app.core.logger import init_logging
from app.core.monitoring import init_monitoring

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    init_logging()
    init_monitoring()

    # Interactive docs are disabled in production
    is_production = settings.ENV.lower() == "prod"
    app = FastAPI(
        title=settings.APP_NAME,
        description="Products, categories and suppliers with inventory tracking",
        version="1.0.0",
        debug=False,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        openapi_url=None if is_production else "/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )
    register_error_handlers(app)
    app.include_router(inventory_router, prefix=settings.API_PREFIX)
    app.include_router(metrics_router, tags=["metrics"])
    app.include_router(health_router)

    # Register shutdown handler to close Redis pool
    @app.on_event("shutdown")
    async def shutdown_event():
        if settings.CACHE_BACKEND == "redis":
            from app.db.redis_client import close_redis_pool

            close_redis_pool()

    logger.info("%s started (env=%s, cache=%s)", settings.APP_NAME, settings.ENV, settings.CACHE_BACKEND)
    return app


app = create_app()
