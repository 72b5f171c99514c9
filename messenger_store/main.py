"""
Messenger store application entry
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from messenger_store.api.routes import api_v1_router
from messenger_store.api.middleware.error_handler import add_error_handlers
from messenger_store.api.middleware.logging import add_logging_middleware

from messenger_store.data import DataLayer
from messenger_store.services.blob_service import BlobReferenceService, create_blob_service
from messenger_store.services.chat_service import ChatService

from messenger_store.configs.settings import settings
from messenger_store.configs.storage_config import storage_config
from messenger_store.utils.logger import get_logger

logger = get_logger(__name__)


def create_app(data: Optional[DataLayer] = None, blobs: Optional[BlobReferenceService] = None) -> FastAPI:
    """Create FastAPI application; pass ``data``/``blobs`` to inject owned services"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifecycle management"""
        logger.info("Starting messenger store", debug=settings.debug, log_level=settings.log_level)

        data_layer = data or DataLayer()
        blob_service = blobs or create_blob_service()
        if blobs is None and storage_config.backend == "local":
            Path(storage_config.local_root).mkdir(parents=True, exist_ok=True)
        try:
            await data_layer.initialize()
            await blob_service.initialize()
            app.state.data = data_layer
            app.state.chat = ChatService(data_layer, blob_service)
            logger.info("Messenger store started")
            yield
        finally:
            logger.info("Shutting down messenger store...")
            try:
                await blob_service.close()
            except Exception as e:
                logger.error("Error during blob service cleanup", error=str(e))
            try:
                await data_layer.cleanup()
            except Exception as e:
                logger.error("Error during data layer cleanup", error=str(e))
            logger.info("Messenger store shutdown completed")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Conversation and message synchronization service",
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    add_error_handlers(app)
    add_logging_middleware(app)

    app.include_router(api_v1_router, prefix="/api/v1")

    # Local blobs are served by the app itself
    if blobs is None and storage_config.backend == "local":
        mount_path = urlparse(storage_config.public_base_url).path or "/blobs"
        app.mount(mount_path, StaticFiles(directory=storage_config.local_root, check_dir=False), name="blobs")

    if settings.debug:
        logger.info("=== Registered Routes ===")
        for route in app.routes:
            if hasattr(route, 'methods') and hasattr(route, 'path'):
                logger.info(f"  {sorted(route.methods)} -> {route.path}")

    @app.get("/", tags=["root"])
    async def root():
        """Root path - Service information"""
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "status": "running",
            "docs_url": "/docs" if settings.debug else "disabled",
            "api_prefixes": ["/api/v1"]
        }

    return app


app = create_app()

if __name__ == "__main__":
    logger.info(f"Server will be available at: http://{settings.host}:{settings.port}")
    uvicorn.run(
        "messenger_store.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=settings.debug,
    )
