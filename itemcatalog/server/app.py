"""HTTP interface for the item catalog."""

import logging
import mimetypes
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse, Response

from .. import __version__
from ..config import get_settings, ServerSettings
from ..errors import InvalidArgumentError, NotFoundError, StorageError
from ..service import CatalogService
from .main import open_service

logger = logging.getLogger(__name__)


def create_app(settings: Optional[ServerSettings] = None) -> FastAPI:
    """Create the FastAPI application.

    Stores and the service are built when the application starts and torn
    down when it stops. Settings are read from the environment unless given.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        app_settings = settings or get_settings()
        with open_service(app_settings) as service:
            app.state.settings = app_settings
            app.state.service = service
            logger.info("Item catalog started")
            yield
        logger.info("Item catalog stopped")

    app = FastAPI(
        title="Item Catalog",
        description="Submit, list and search catalog items with images",
        version=__version__,
        lifespan=lifespan,
    )

    register_error_handlers(app)
    register_routes(app)
    return app


def get_service(request: Request) -> CatalogService:
    return request.app.state.service


def get_current_settings(request: Request) -> ServerSettings:
    return request.app.state.settings


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(InvalidArgumentError)
    async def invalid_argument(request: Request, exc: InvalidArgumentError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(StorageError)
    async def storage_failure(request: Request, exc: StorageError):
        logger.error(
            f"Storage failure on {request.method} {request.url.path}: {exc}",
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"detail": "storage failure"})


def register_routes(app: FastAPI) -> None:
    @app.get("/")
    def root():
        """Service information."""
        return {
            "service": "Item Catalog",
            "version": __version__,
            "endpoints": {
                "/items": "List items (GET) or submit a new item (POST)",
                "/items/{item_id}": "Item details",
                "/search?keyword=K": "Items whose name or category contains K",
                "/images/{image_name}": "Stored item image",
            },
        }

    @app.get("/items")
    def list_items(service: CatalogService = Depends(get_service)):
        return service.list_items().to_document()

    @app.post("/items", status_code=201)
    def add_item(
        name: str = Form(""),
        category: str = Form(""),
        image: Optional[UploadFile] = File(None),
        service: CatalogService = Depends(get_service),
        settings: ServerSettings = Depends(get_current_settings),
    ):
        content = None
        ext = ""
        if image is not None and image.filename:
            content = image.file.read(settings.max_upload_bytes + 1)
            if len(content) > settings.max_upload_bytes:
                raise HTTPException(
                    status_code=413,
                    detail=f"Image exceeds {settings.max_upload_bytes} bytes",
                )
            ext = os.path.splitext(image.filename)[1]

        item = service.create_item(name, category, content, ext)
        return {"message": f"item received: {item.name}"}

    @app.get("/items/{item_id}")
    def get_item(item_id: str, service: CatalogService = Depends(get_service)):
        return service.get_item(item_id).to_document()

    @app.get("/search")
    def search_items(
        keyword: Optional[str] = None,
        service: CatalogService = Depends(get_service),
    ):
        items = service.search_items(keyword)
        return {"items": [item.to_document() for item in items]}

    @app.get("/images/{image_name}")
    def get_image(image_name: str, service: CatalogService = Depends(get_service)):
        content = service.image_store.get(image_name)
        media_type, _ = mimetypes.guess_type(image_name)
        return Response(
            content=content, media_type=media_type or "application/octet-stream"
        )


app = create_app()
