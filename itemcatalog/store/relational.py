"""Catalog backend storing items as rows of a relational table."""

from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from ..database.connection import DatabaseManager
from ..database.models import ItemRecord
from ..errors import CorruptDataError, StorageReadError, StorageWriteError
from ..model import Catalog
from .base import BaseCatalogStore


class DatabaseCatalogStore(BaseCatalogStore):
    """Persists the catalog in the ``items`` table.

    Row order follows the ``position`` column. ``replace`` deletes and
    re-inserts every row inside one transaction, so a failure rolls back to
    the previous contents.
    """

    def __init__(self, db_manager: DatabaseManager):
        super().__init__()
        self.db_manager = db_manager

    def _load(self) -> Catalog:
        try:
            with self.db_manager.get_session() as session:
                records = (
                    session.execute(select(ItemRecord).order_by(ItemRecord.position))
                    .scalars()
                    .all()
                )
                rows = [
                    {
                        "id": record.item_id,
                        "name": record.name,
                        "category": record.category,
                        "image_name": record.image_name,
                    }
                    for record in records
                ]
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to read items table: {e}")
            raise StorageReadError(f"failed to read items: {e}") from e

        try:
            return Catalog(items=rows)
        except ValidationError as e:
            self.logger.error(f"Items table holds invalid rows: {e}")
            raise CorruptDataError(f"invalid rows in items table: {e}") from e

    def _replace(self, catalog: Catalog) -> None:
        try:
            with self.db_manager.get_session() as session:
                session.execute(delete(ItemRecord))
                session.add_all(
                    ItemRecord(
                        position=position,
                        item_id=item.id,
                        name=item.name,
                        category=item.category,
                        image_name=item.image_name,
                    )
                    for position, item in enumerate(catalog.items, start=1)
                )
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to write items table: {e}")
            raise StorageWriteError(f"failed to write items: {e}") from e
