"""Versioned schema migrations for the items table."""

import logging
from datetime import datetime, timezone
from typing import Callable, List

from sqlalchemy import (
    Column,
    DateTime,
    Engine,
    Integer,
    MetaData,
    String,
    Table,
    inspect,
    text,
)
from sqlalchemy.sql import func

from .models import ItemRecord

logger = logging.getLogger(__name__)

MIGRATIONS_TABLE = "schema_migrations"


class Migration:
    """A single schema change identified by a sequential version number."""

    def __init__(
        self,
        version: int,
        description: str,
        up_sql: str | Callable[[Engine], None],
    ):
        """Initialize a migration.

        Args:
            version: Migration version number (should be sequential)
            description: Human-readable description of the migration
            up_sql: SQL statement(s) separated by ``;``, or a callable taking the engine
        """
        self.version = version
        self.description = description
        self.up_sql = up_sql

    def apply(self, engine: Engine) -> None:
        """Apply this migration to the database."""
        logger.info(f"Applying migration {self.version}: {self.description}")

        if callable(self.up_sql):
            self.up_sql(engine)
        else:
            with engine.begin() as conn:
                for statement in self.up_sql.split(";"):
                    statement = statement.strip()
                    if statement:
                        conn.execute(text(statement))

        logger.info(f"Migration {self.version} applied successfully")


class MigrationManager:
    """Tracks applied migrations in ``schema_migrations`` and applies pending ones."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.migrations: List[Migration] = []
        self._ensure_migration_table()

    def _ensure_migration_table(self) -> None:
        metadata = MetaData()
        Table(
            MIGRATIONS_TABLE,
            metadata,
            Column("version", Integer, primary_key=True),
            Column("description", String(255), nullable=False),
            Column(
                "applied_at",
                DateTime(timezone=True),
                nullable=False,
                default=func.now(),
            ),
        )
        metadata.create_all(self.engine)
        logger.debug("Migration tracking table ensured")

    def add_migration(self, migration: Migration) -> None:
        """Register a migration, keeping the list ordered by version."""
        self.migrations.append(migration)
        self.migrations.sort(key=lambda m: m.version)

    def get_applied_versions(self) -> List[int]:
        with self.engine.begin() as conn:
            result = conn.execute(
                text(f"SELECT version FROM {MIGRATIONS_TABLE} ORDER BY version")
            )
            return [row[0] for row in result]

    def get_pending_migrations(self) -> List[Migration]:
        applied_versions = set(self.get_applied_versions())
        return [m for m in self.migrations if m.version not in applied_versions]

    def apply_migrations(self) -> None:
        """Apply all pending migrations in version order."""
        pending = self.get_pending_migrations()

        if not pending:
            logger.info("No pending migrations")
            return

        logger.info(f"Applying {len(pending)} pending migrations")

        for migration in pending:
            try:
                migration.apply(self.engine)
                self._record_migration(migration)
            except Exception as e:
                logger.error(f"Migration {migration.version} failed: {e}")
                raise

    def _record_migration(self, migration: Migration) -> None:
        with self.engine.begin() as conn:
            conn.execute(
                text(
                    f"INSERT INTO {MIGRATIONS_TABLE} (version, description, applied_at) "
                    "VALUES (:version, :description, :applied_at)"
                ),
                {
                    "version": migration.version,
                    "description": migration.description,
                    "applied_at": datetime.now(timezone.utc),
                },
            )

    def get_current_version(self) -> int:
        """Get the current schema version (highest applied migration)."""
        applied_versions = self.get_applied_versions()
        return max(applied_versions) if applied_versions else 0


def _convert_legacy_items_table(engine: Engine) -> None:
    """Rebuild a legacy ``items(id, name, category, image_name)`` table.

    Older deployments keyed rows by ``id`` with no ordering column. Rows are
    copied in table scan order, so their positions follow the old listing order.
    """
    inspector = inspect(engine)

    if not inspector.has_table("items"):
        logger.info("Items table doesn't exist yet, skipping migration")
        return

    columns = {column["name"] for column in inspector.get_columns("items")}
    if "item_id" in columns:
        logger.info("Items table already has the current layout, skipping")
        return

    image_column = "image_name" if "image_name" in columns else "NULL"
    items_table = ItemRecord.__table__

    with engine.begin() as conn:
        rows = conn.execute(
            text(f"SELECT id, name, category, {image_column} FROM items")
        ).fetchall()

        records = [
            {
                "item_id": str(row[0]),
                "name": row[1] or "",
                "category": row[2] or "",
                "image_name": row[3] or None,
            }
            for row in rows
        ]
        ids = [record["item_id"] for record in records]
        if len(set(ids)) != len(ids):
            raise ValueError("legacy items table contains duplicate ids")

        conn.execute(text("DROP TABLE items"))
        items_table.create(conn)
        if records:
            conn.execute(items_table.insert(), records)

    logger.info(f"Converted {len(records)} legacy items to the current layout")


def get_all_migrations() -> List[Migration]:
    """Get all available migrations in order."""
    return [
        Migration(
            version=1,
            description="Convert legacy items table to positional layout",
            up_sql=_convert_legacy_items_table,
        ),
    ]


def setup_migrations(engine: Engine) -> MigrationManager:
    """Set up the migration manager with all migrations."""
    manager = MigrationManager(engine)
    for migration in get_all_migrations():
        manager.add_migration(migration)
    return manager
