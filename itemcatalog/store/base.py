"""Base class for catalog storage backends."""

import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Generator

from ..model import Catalog


class BaseCatalogStore(ABC):
    """Base class for all catalog backends.

    Every ``load`` and ``replace`` runs under one re-entrant lock per store.
    Callers that read, modify and write back the catalog hold ``locked()``
    around the whole sequence so that concurrent writers cannot lose updates.
    """

    logger: logging.Logger

    def __init__(self):
        self._lock = threading.RLock()
        self.logger = logging.getLogger(self.__module__)

    @contextmanager
    def locked(self) -> Generator[None, None, None]:
        """Hold the store's write lock for the duration of the block."""
        with self._lock:
            yield

    def load(self) -> Catalog:
        """Return the persisted catalog, or an empty one if nothing is stored."""
        with self._lock:
            return self._load()

    def replace(self, catalog: Catalog) -> None:
        """Persist ``catalog`` in place of whatever is currently stored."""
        with self._lock:
            self._replace(catalog)
        self.logger.info(f"Persisted catalog with {len(catalog.items)} items")

    @abstractmethod
    def _load(self) -> Catalog:
        pass

    @abstractmethod
    def _replace(self, catalog: Catalog) -> None:
        pass
