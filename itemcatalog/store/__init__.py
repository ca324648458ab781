"""Catalog storage backends."""

from .base import BaseCatalogStore
from .document import JsonCatalogStore
from .relational import DatabaseCatalogStore

__all__ = ["BaseCatalogStore", "JsonCatalogStore", "DatabaseCatalogStore"]
