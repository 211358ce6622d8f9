# artifact_catalog/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import settings
from .logging_conf import setup_logging
from .middleware import add_cors, install_request_logging, add_correlation_middleware, add_error_handlers
from .db.mongo import get_db, init_indexes
from .events import get_bus
from .routers import category_router, artifact_router, health_router
from .seeds import run_all_seeds

logger = logging.getLogger("artifact_catalog")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Logging first
    setup_logging()
    logger.info("Starting %s on %s:%s", settings.app_name, settings.host, settings.port)

    try:
        await init_indexes()
        logger.info("Mongo indexes initialized")
    except Exception as e:
        logger.exception("Failed to initialize Mongo indexes: %s", e)

    # Connect RabbitMQ (non-fatal if broker is temporarily unavailable)
    if settings.events_enabled:
        try:
            await get_bus().connect()
        except Exception as e:
            logger.warning("RabbitMQ connect failed (will continue without bus): %s", e)

    try:
        seed_meta = await run_all_seeds(get_db())
        logger.info("Seeding result: %s", seed_meta)
    except Exception as e:
        logger.warning("Seeding failed: %s", e)

    yield

    await get_bus().close()
    logger.info("Shutdown complete")


app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)

# Middlewares (last added runs first, so correlation ids exist before request logging)
add_cors(app)
install_request_logging(app)
add_correlation_middleware(app)
add_error_handlers(app)

# Routers
app.include_router(health_router)
app.include_router(category_router)
app.include_router(artifact_router)


@app.get("/")
async def root():
    return {
        "service": settings.service_name,
        "name": settings.app_name,
        "status": "ok",
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "artifact_catalog.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level="info",
    )
