"""Item catalog service: content-addressed images and a persisted, searchable item list."""

from .errors import (
    CatalogError,
    CorruptDataError,
    InvalidArgumentError,
    NotFoundError,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from .images import FileImageStore
from .model import Catalog, Item
from .service import CatalogService, IdGenerator

__version__ = "1.0.0"

__all__ = [
    "Catalog",
    "CatalogError",
    "CatalogService",
    "CorruptDataError",
    "FileImageStore",
    "IdGenerator",
    "InvalidArgumentError",
    "Item",
    "NotFoundError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
