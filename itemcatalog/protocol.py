from contextlib import AbstractContextManager
from typing import runtime_checkable, Protocol

from .model import Catalog


@runtime_checkable
class CatalogStore(Protocol):
    def load(self) -> Catalog: ...
    def replace(self, catalog: Catalog) -> None: ...
    def locked(self) -> AbstractContextManager[None]: ...


@runtime_checkable
class ImageStore(Protocol):
    def put(self, content: bytes, ext: str = "") -> str: ...
    def get(self, key: str) -> bytes: ...
    def exists(self, key: str) -> bool: ...
