"""Catalog business logic: create, list, look up and search items."""

import logging
import threading
import time
from typing import List, Optional

from .errors import InvalidArgumentError, NotFoundError
from .model import Catalog, Item
from .protocol import CatalogStore, ImageStore

logger = logging.getLogger(__name__)


class IdGenerator:
    """Issues item ids from a nanosecond clock, strictly increasing within the process."""

    def __init__(self, clock=time.time_ns):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            value = max(self._clock(), self._last + 1)
            self._last = value
        return str(value)


class CatalogService:
    """Item operations over an injected catalog store and image store.

    The service keeps no state of its own: every call re-reads the catalog.
    """

    def __init__(
        self,
        catalog_store: CatalogStore,
        image_store: ImageStore,
        require_image: bool = True,
        id_generator: Optional[IdGenerator] = None,
    ):
        self.catalog_store = catalog_store
        self.image_store = image_store
        self.require_image = require_image
        self.id_generator = id_generator or IdGenerator()

    def list_items(self) -> Catalog:
        """Return the whole catalog in insertion order."""
        return self.catalog_store.load()

    def get_item(self, item_id: str) -> Item:
        """Return the first item with ``item_id``.

        Raises:
            NotFoundError: if no item has that id
        """
        for item in self.catalog_store.load().items:
            if item.id == item_id:
                return item
        raise NotFoundError("item", item_id)

    def search_items(self, keyword: Optional[str]) -> List[Item]:
        """Return items whose name or category contains ``keyword`` (case-sensitive)."""
        if not keyword:
            raise InvalidArgumentError("keyword is required")

        return [
            item
            for item in self.catalog_store.load().items
            if keyword in item.name or keyword in item.category
        ]

    def create_item(
        self,
        name: str,
        category: str,
        image_content: Optional[bytes] = None,
        image_ext: Optional[str] = None,
    ) -> Item:
        """Store the image (if any), then append a new item to the catalog.

        The image is written before the catalog so that a stored item never
        points at a missing image. If the catalog write fails the image stays
        behind unreferenced.

        Raises:
            InvalidArgumentError: if the image is required and absent
            StorageWriteError: if the image or the catalog cannot be written
        """
        image_name = None
        if image_content:
            image_name = self.image_store.put(image_content, image_ext or "")
        elif self.require_image:
            raise InvalidArgumentError("image is required")

        with self.catalog_store.locked():
            catalog = self.catalog_store.load()

            # Ids persisted by an earlier process or another generator may collide
            taken = {existing.id for existing in catalog.items}
            item_id = self.id_generator.next_id()
            while item_id in taken:
                item_id = self.id_generator.next_id()

            item = Item(
                id=item_id,
                name=name,
                category=category,
                image_name=image_name,
            )
            self.catalog_store.replace(catalog.with_item(item))

        logger.info(f"Created item {item.id} ({item.name!r})")
        return item
