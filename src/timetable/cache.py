"""Snapshot cache: the last Schedule per group key.

Every backend stores the JSON form of the snapshot, so a value read back is
structurally equal to the one written. A put fully replaces the previous
value for its key; backends keep that replace atomic so concurrent readers
see either the old or the new snapshot.

Backends:
  - SqliteScheduleCache: durable table (group_name TEXT PRIMARY KEY, schedule_json TEXT)
  - JsonDirScheduleCache: one <key>.json state file per group
  - MemoryScheduleCache: process-local, for tests and one-off runs
"""

import asyncio
import os
import sqlite3
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from urllib.parse import quote

import aiosqlite
from pydantic import ValidationError

from src.timetable.config import TimetableConfig
from src.timetable.errors import CacheUnavailableError
from src.timetable.logging import get_logger
from src.timetable.models import Schedule

logger = get_logger(__name__)


def _decode(key: str, blob: str) -> Schedule:
    try:
        return Schedule.model_validate_json(blob)
    except ValidationError as e:
        raise CacheUnavailableError(f"Corrupt cached schedule for {key!r}: {e}") from e


class ScheduleCache(ABC):
    """Key-value store of Schedule snapshots keyed by group key.

    Keys are opaque: callers normalize group names before using them.
    """

    @abstractmethod
    async def get(self, key: str) -> Schedule | None:
        """Cached snapshot for `key`, or None if nothing was stored yet.

        Raises:
            CacheUnavailableError: If the store can't be read or the value can't be decoded.
        """

    @abstractmethod
    async def put(self, key: str, schedule: Schedule) -> None:
        """Store `schedule` under `key`, replacing any previous value.

        Raises:
            CacheUnavailableError: If the store can't be written.
        """

    async def close(self) -> None:
        """Release backend resources."""

    async def __aenter__(self) -> "ScheduleCache":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


class MemoryScheduleCache(ScheduleCache):
    """In-process cache holding serialized snapshots."""

    def __init__(self) -> None:
        self._blobs: dict[str, str] = {}

    async def get(self, key: str) -> Schedule | None:
        blob = self._blobs.get(key)
        if blob is None:
            return None
        return _decode(key, blob)

    async def put(self, key: str, schedule: Schedule) -> None:
        self._blobs[key] = schedule.model_dump_json()


class SqliteScheduleCache(ScheduleCache):
    """Durable cache in a single SQLite table.

    The connection is opened lazily on first use and the table is created if
    it doesn't exist.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self._db: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    async def _connection(self) -> aiosqlite.Connection:
        async with self._lock:
            if self._db is None:
                self._db = await self._open()
                logger.info("cache_opened", backend="sqlite", path=self.path)
            return self._db

    async def _open(self) -> aiosqlite.Connection:
        db = None
        try:
            if self.path != ":memory:":
                Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            db = await aiosqlite.connect(self.path)
            await db.execute(
                """
                CREATE TABLE IF NOT EXISTS schedules (
                    group_name TEXT PRIMARY KEY,
                    schedule_json TEXT NOT NULL
                )
                """
            )
            await db.commit()
        except (sqlite3.Error, OSError) as e:
            if db is not None:
                await db.close()
            raise CacheUnavailableError(f"Cannot open cache {self.path}: {e}") from e
        return db

    async def get(self, key: str) -> Schedule | None:
        db = await self._connection()
        try:
            cur = await db.execute(
                "SELECT schedule_json FROM schedules WHERE group_name = ?", (key,)
            )
            row = await cur.fetchone()
            await cur.close()
        except sqlite3.Error as e:
            raise CacheUnavailableError(f"Cache read failed for {key!r}: {e}") from e

        if row is None:
            return None
        return _decode(key, row[0])

    async def put(self, key: str, schedule: Schedule) -> None:
        db = await self._connection()
        try:
            await db.execute(
                "INSERT OR REPLACE INTO schedules (group_name, schedule_json) VALUES (?, ?)",
                (key, schedule.model_dump_json()),
            )
            await db.commit()
        except sqlite3.Error as e:
            raise CacheUnavailableError(f"Cache write failed for {key!r}: {e}") from e

    async def close(self) -> None:
        async with self._lock:
            if self._db is not None:
                await self._db.close()
                self._db = None


class JsonDirScheduleCache(ScheduleCache):
    """One JSON state file per group key in `state_dir`.

    Writes go to a temporary file first and are moved into place with
    os.replace, so a reader never sees a half-written file.
    """

    def __init__(self, state_dir: str) -> None:
        self.state_dir = Path(state_dir)

    def _path(self, key: str) -> Path:
        # Keys may contain "/" or "." - quote them into a flat file name
        return self.state_dir / f"{quote(key, safe='')}.json"

    def _read(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def _write(self, key: str, blob: str) -> None:
        self.state_dir.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.state_dir,
            prefix=f"{path.stem}.",
            suffix=".tmp",
            delete=False,
        )
        try:
            with tmp:
                tmp.write(blob)
            os.replace(tmp.name, path)
        except OSError:
            Path(tmp.name).unlink(missing_ok=True)
            raise

    async def get(self, key: str) -> Schedule | None:
        try:
            blob = await asyncio.to_thread(self._read, key)
        except (OSError, UnicodeDecodeError) as e:
            raise CacheUnavailableError(f"Cache read failed for {key!r}: {e}") from e
        if blob is None:
            return None
        return _decode(key, blob)

    async def put(self, key: str, schedule: Schedule) -> None:
        try:
            await asyncio.to_thread(self._write, key, schedule.model_dump_json())
        except OSError as e:
            raise CacheUnavailableError(f"Cache write failed for {key!r}: {e}") from e


def open_cache(config: TimetableConfig) -> ScheduleCache:
    """Build the cache backend selected by configuration."""
    if config.cache_backend == "sqlite":
        return SqliteScheduleCache(config.cache_path)
    if config.cache_backend == "json":
        return JsonDirScheduleCache(config.state_dir)
    return MemoryScheduleCache()
