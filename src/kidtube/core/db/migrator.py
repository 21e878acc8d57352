"""Versioned SQL migrations for the bookmark store."""

import hashlib
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, NamedTuple

import aiosqlite
import structlog

from .exceptions import MigrationError

logger = structlog.get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "migrations"


class Migration(NamedTuple):
    version: int
    filename: str
    sql: str
    checksum: str


class Migrator:
    """
    Applies ``NNN_description.sql`` files in version order.

    Applied versions are recorded in ``schema_migrations`` together with a
    SHA-256 checksum of the file; a file edited after it was applied is
    reported but not re-run.
    """

    def __init__(self, migrations_dir: Path = MIGRATIONS_DIR):
        self.migrations_dir = migrations_dir

    async def run_migrations(self, db: aiosqlite.Connection) -> int:
        """
        Run all pending migrations on an open connection.

        Returns:
            Number of migrations applied

        Raises:
            MigrationError: If a migration file cannot be read or fails to apply
        """
        await db.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                version INTEGER PRIMARY KEY,
                filename TEXT NOT NULL,
                checksum TEXT NOT NULL,
                applied_at TEXT NOT NULL
            )
            """
        )
        await db.commit()

        applied = await self._get_applied_checksums(db)
        available = self._load_migrations()

        for migration in available:
            recorded = applied.get(migration.version)
            if recorded is not None and recorded != migration.checksum:
                logger.warning(
                    "migration_checksum_mismatch",
                    version=migration.version,
                    filename=migration.filename,
                )

        pending = [m for m in available if m.version not in applied]
        if not pending:
            logger.debug("no_pending_migrations")
            return 0

        for migration in pending:
            logger.info(
                "migration_applying",
                version=migration.version,
                filename=migration.filename,
            )
            try:
                await db.executescript(migration.sql)
                await db.execute(
                    """
                    INSERT INTO schema_migrations (version, filename, checksum, applied_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    (
                        migration.version,
                        migration.filename,
                        migration.checksum,
                        datetime.now(timezone.utc).isoformat(),
                    ),
                )
                await db.commit()
            except aiosqlite.Error as e:
                await db.rollback()
                logger.error(
                    "migration_failed",
                    version=migration.version,
                    filename=migration.filename,
                    error=str(e),
                )
                raise MigrationError(
                    f"Migration {migration.filename} failed: {e}",
                    version=migration.version,
                    filename=migration.filename,
                ) from e

        logger.info("migrations_complete", applied=len(pending))
        return len(pending)

    async def _get_applied_checksums(self, db: aiosqlite.Connection) -> Dict[int, str]:
        cursor = await db.execute("SELECT version, checksum FROM schema_migrations")
        rows = await cursor.fetchall()
        return {row[0]: row[1] for row in rows}

    def _load_migrations(self) -> List[Migration]:
        if not self.migrations_dir.exists():
            logger.warning("migrations_dir_not_found", path=str(self.migrations_dir))
            return []

        migrations = []
        for sql_file in sorted(self.migrations_dir.glob("*.sql")):
            # "001_initial_schema.sql" -> 1
            try:
                version = int(sql_file.stem.split("_")[0])
            except ValueError:
                logger.warning("migration_filename_invalid", filename=sql_file.name)
                continue

            try:
                sql = sql_file.read_text(encoding="utf-8")
            except OSError as e:
                raise MigrationError(
                    f"Failed to read migration {sql_file.name}: {e}",
                    version=version,
                    filename=sql_file.name,
                ) from e

            checksum = hashlib.sha256(sql.encode()).hexdigest()
            migrations.append(Migration(version, sql_file.name, sql, checksum))

        migrations.sort(key=lambda m: m.version)
        return migrations
