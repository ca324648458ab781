"""Process startup for the item catalog service."""

import logging
import sys
from contextlib import contextmanager
from typing import Generator, Optional

import uvicorn

from ..config import get_settings, ServerSettings
from ..database.connection import DatabaseManager
from ..images import FileImageStore
from ..service import CatalogService
from ..store import DatabaseCatalogStore, JsonCatalogStore

logger = logging.getLogger(__name__)


def setup_logging(settings: ServerSettings) -> None:
    """Configure logging for the server."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format=settings.log_format,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logger.info(f"Logging configured at {settings.log_level} level")


@contextmanager
def open_service(settings: ServerSettings) -> Generator[CatalogService, None, None]:
    """Build the stores and the service for ``settings``, closing them on exit."""
    db_manager: Optional[DatabaseManager] = None

    if settings.storage_backend == "database":
        db_manager = DatabaseManager(settings)
        db_manager.initialize()
        catalog_store = DatabaseCatalogStore(db_manager)
    else:
        catalog_store = JsonCatalogStore(settings.catalog_path)

    image_store = FileImageStore(settings.images_dir)
    logger.info(
        f"Catalog backend: {settings.storage_backend}, images in {settings.images_dir}"
    )

    try:
        yield CatalogService(
            catalog_store,
            image_store,
            require_image=settings.require_image,
        )
    finally:
        if db_manager:
            db_manager.close()


def run_server() -> None:
    """Entry point for the console script."""
    settings = get_settings()
    setup_logging(settings)

    logger.info(f"Starting item catalog on {settings.host}:{settings.port}")

    try:
        uvicorn.run(
            "itemcatalog.server.app:app",
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error(f"Server failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    run_server()
