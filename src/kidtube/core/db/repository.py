"""Bookmark repository: SQLite-backed storage of owners' video collections."""

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional, Sequence

import aiosqlite
import structlog

from .connection import DatabaseConnection
from .exceptions import DuplicateRecordError, QueryError
from .migrator import Migrator
from .models import BookmarkRecord, ChildProfile

logger = structlog.get_logger(__name__)

_BOOKMARK_COLUMNS = "user_id, youtube_video_id, title, added_at"
_PROFILE_COLUMNS = "user_id, child_name, date_of_birth, created_at, updated_at"


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


class BookmarkRepository:
    """
    Repository for bookmark and child profile records.

    Owners are matched with ``IS`` so a ``None`` owner (single-tenant mode)
    selects the rows stored without one.

    All requests share one connection, hence one open transaction. Each
    write holds ``_write_lock`` from its first statement through its commit
    or rollback, so a rollback only ever discards that write's own changes.
    """

    DEFAULT_CONNECTION_TIMEOUT = 30

    def __init__(self, db_path: Path, enable_wal: bool = True, timeout: int = 30):
        """
        Args:
            db_path: Absolute path to SQLite database file
            enable_wal: Enable Write-Ahead Logging mode
            timeout: Seconds to wait on a locked database
        """
        self.db_path = db_path
        self._db_connection = DatabaseConnection(db_path, enable_wal, timeout)
        self._connection: Optional[aiosqlite.Connection] = None
        self._write_lock = asyncio.Lock()

    @classmethod
    async def from_config(cls, config: Any) -> "BookmarkRepository":
        """
        Create, connect and migrate a repository from a Config.

        Args:
            config: Config instance (database_path, enable_wal, config_dir)

        Returns:
            Initialized BookmarkRepository
        """
        db_path = config.get_database_path()
        repo = cls(
            db_path=db_path,
            enable_wal=config.enable_wal,
            timeout=cls.DEFAULT_CONNECTION_TIMEOUT,
        )
        await repo.connect()
        await Migrator().run_migrations(repo._connection)

        logger.info("repository_initialized", db_path=str(db_path))
        return repo

    async def connect(self) -> None:
        """Establish database connection."""
        if self._connection is None:
            self._connection = await self._db_connection.connect()

    async def close(self) -> None:
        """Close database connection."""
        if self._connection is not None:
            await self._db_connection.close()
            self._connection = None

    async def __aenter__(self) -> "BookmarkRepository":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _execute(self, query: str, params: Sequence[Any] = ()) -> aiosqlite.Cursor:
        if self._connection is None:
            raise QueryError("No active connection")
        try:
            return await self._connection.execute(query, tuple(params))
        except aiosqlite.IntegrityError:
            raise
        except aiosqlite.Error as e:
            logger.error("query_failed", error=str(e))
            raise QueryError(f"Query failed: {e}", query=query, params=tuple(params)) from e

    async def _commit(self) -> None:
        try:
            await self._connection.commit()
        except aiosqlite.Error as e:
            raise QueryError(f"Commit failed: {e}") from e

    # ==================== Bookmarks ====================

    async def create_bookmark(
        self,
        owner_id: Optional[str],
        video_id: str,
        title: str,
    ) -> BookmarkRecord:
        """
        Insert a bookmark stamped with the current time.

        Raises:
            DuplicateRecordError: If the owner already bookmarked this video
            QueryError: If the insert fails for any other reason
        """
        added_at = _utcnow()
        async with self._write_lock:
            try:
                await self._execute(
                    "INSERT INTO videos (user_id, youtube_video_id, title, added_at) "
                    "VALUES (?, ?, ?, ?)",
                    (owner_id, video_id, title, added_at),
                )
            except aiosqlite.IntegrityError as e:
                await self._connection.rollback()
                raise DuplicateRecordError(
                    f"Video {video_id} is already bookmarked",
                    table="videos",
                    key="youtube_video_id",
                    value=video_id,
                ) from e
            await self._commit()

        logger.debug("bookmark_created", owner_id=owner_id, video_id=video_id)
        return BookmarkRecord(
            owner_id=owner_id,
            video_id=video_id,
            title=title,
            added_at=datetime.fromisoformat(added_at),
        )

    async def get_bookmark(
        self, owner_id: Optional[str], video_id: str
    ) -> Optional[BookmarkRecord]:
        cursor = await self._execute(
            f"SELECT {_BOOKMARK_COLUMNS} FROM videos "
            "WHERE user_id IS ? AND youtube_video_id = ?",
            (owner_id, video_id),
        )
        row = await cursor.fetchone()
        return BookmarkRecord.from_row(row) if row else None

    async def list_bookmarks(self, owner_id: Optional[str]) -> List[BookmarkRecord]:
        """List an owner's bookmarks, newest first."""
        cursor = await self._execute(
            f"SELECT {_BOOKMARK_COLUMNS} FROM videos WHERE user_id IS ? "
            "ORDER BY added_at DESC, id DESC",
            (owner_id,),
        )
        rows = await cursor.fetchall()
        return [BookmarkRecord.from_row(row) for row in rows]

    async def list_all_bookmarks(self) -> List[BookmarkRecord]:
        """List every bookmark of every owner, ordered by video id then insertion."""
        cursor = await self._execute(
            f"SELECT {_BOOKMARK_COLUMNS} FROM videos ORDER BY youtube_video_id, id"
        )
        rows = await cursor.fetchall()
        return [BookmarkRecord.from_row(row) for row in rows]

    async def update_bookmark_title(
        self, owner_id: Optional[str], video_id: str, title: str
    ) -> Optional[BookmarkRecord]:
        """
        Set a bookmark's title.

        Returns:
            The updated record, or None if the owner has no such bookmark
        """
        async with self._write_lock:
            cursor = await self._execute(
                "UPDATE videos SET title = ? WHERE user_id IS ? AND youtube_video_id = ?",
                (title, owner_id, video_id),
            )
            await self._commit()
        if cursor.rowcount == 0:
            return None
        return await self.get_bookmark(owner_id, video_id)

    async def delete_bookmark(self, owner_id: Optional[str], video_id: str) -> bool:
        """
        Delete a bookmark.

        Returns:
            True if a row was deleted
        """
        async with self._write_lock:
            cursor = await self._execute(
                "DELETE FROM videos WHERE user_id IS ? AND youtube_video_id = ?",
                (owner_id, video_id),
            )
            await self._commit()
        deleted = cursor.rowcount > 0
        logger.debug("bookmark_deleted", owner_id=owner_id, video_id=video_id, deleted=deleted)
        return deleted

    # ==================== Child profiles ====================

    async def get_child_profile(self, owner_id: Optional[str]) -> Optional[ChildProfile]:
        cursor = await self._execute(
            f"SELECT {_PROFILE_COLUMNS} FROM child_profiles WHERE user_id IS ?",
            (owner_id,),
        )
        row = await cursor.fetchone()
        return ChildProfile.from_row(row) if row else None

    async def upsert_child_profile(
        self,
        owner_id: Optional[str],
        child_name: str,
        date_of_birth: Optional[str] = None,
    ) -> ChildProfile:
        """Create the owner's child profile, or update it if one exists."""
        now = _utcnow()
        async with self._write_lock:
            cursor = await self._execute(
                "UPDATE child_profiles SET child_name = ?, date_of_birth = ?, updated_at = ? "
                "WHERE user_id IS ?",
                (child_name, date_of_birth, now, owner_id),
            )
            if cursor.rowcount == 0:
                try:
                    await self._execute(
                        "INSERT INTO child_profiles "
                        "(user_id, child_name, date_of_birth, created_at, updated_at) "
                        "VALUES (?, ?, ?, ?, ?)",
                        (owner_id, child_name, date_of_birth, now, now),
                    )
                except aiosqlite.IntegrityError as e:
                    await self._connection.rollback()
                    raise DuplicateRecordError(
                        "Child profile was created concurrently",
                        table="child_profiles",
                        key="user_id",
                        value=owner_id,
                    ) from e
            await self._commit()

        profile = await self.get_child_profile(owner_id)
        if profile is None:
            raise QueryError("Child profile missing after save")
        return profile
