"""Exceptions raised by the catalog service and its stores."""


class CatalogError(Exception):
    """Base exception for all itemcatalog errors."""


class InvalidArgumentError(CatalogError):
    """Raised when a required input is missing, empty or malformed."""


class NotFoundError(CatalogError):
    """Raised when an item or image does not exist."""

    def __init__(self, kind: str, key: str) -> None:
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} not found: {key}")


class StorageError(CatalogError):
    """Base exception for persistence failures."""


class StorageWriteError(StorageError):
    """Raised when persisting data fails. Previously stored data is left intact."""


class StorageReadError(StorageError):
    """Raised when stored data exists but cannot be read."""


class CorruptDataError(StorageError):
    """Raised when the persisted catalog cannot be parsed as a valid catalog."""
