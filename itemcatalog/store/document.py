"""Catalog backend storing the whole catalog as one JSON document."""

import json
from pathlib import Path

from pydantic import ValidationError

from ..errors import CorruptDataError, StorageReadError, StorageWriteError
from ..fsutil import write_bytes_atomic
from ..model import Catalog
from .base import BaseCatalogStore


class JsonCatalogStore(BaseCatalogStore):
    """Persists the catalog as ``{"items": [...]}`` in a single file.

    ``replace`` rewrites the file atomically, so a failed write leaves the
    previous document in place.
    """

    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)

    def _load(self) -> Catalog:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            self.logger.debug(f"No catalog document at {self.path}, starting empty")
            return Catalog()
        except OSError as e:
            raise StorageReadError(f"failed to read {self.path}: {e}") from e

        try:
            return Catalog.model_validate_json(raw)
        except ValidationError as e:
            self.logger.error(f"Catalog document {self.path} is corrupt: {e}")
            raise CorruptDataError(f"invalid catalog document {self.path}: {e}") from e

    def _replace(self, catalog: Catalog) -> None:
        data = json.dumps(catalog.to_document(), ensure_ascii=False).encode("utf-8")
        try:
            write_bytes_atomic(self.path, data)
        except OSError as e:
            self.logger.error(f"Failed to write catalog document {self.path}: {e}")
            raise StorageWriteError(f"failed to write {self.path}: {e}") from e
