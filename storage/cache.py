"""
Offline snapshot cache for the letter-pair sheets

Holds exactly one snapshot of both sheet indices in a single SQLite slot.
Each save replaces the previous snapshot inside one transaction, so readers
see either the old snapshot or the new one.
"""

import json
import logging
import sqlite3
import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from api.models import CacheSnapshot, Category, Index
from utils.logging_config import log_cache_operation

logger = logging.getLogger(__name__)

CACHE_SLOT = "tsv_lookup_cache_v1"

# Only used to flag old data in status output; cached sheets never expire
CACHE_MAX_AGE = timedelta(hours=24)

DISPLAY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _entry_count(*indices: Index) -> int:
    return sum(len(entries) for index in indices for entries in index.values())


class SnapshotCache:
    """
    Single-slot persistent cache for both sheet indices

    Nothing here raises on storage problems: write failures are logged and
    reported through the return value, and an unreadable or corrupt slot
    reads back as "no cache".
    """

    def __init__(self,
                 db_path: str = "./data/lookup.db",
                 clock: Callable[[], datetime] = datetime.now):
        """
        Initialize the snapshot cache

        Args:
            db_path: Path to SQLite database file
            clock: Source of the capture time (overridable in tests)
        """
        self.db_path = str(db_path)
        self.clock = clock

        self._init_database()

    def _init_database(self):
        """Create the slot table if needed"""
        try:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            with sqlite3.connect(self.db_path) as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS snapshot_cache (
                        slot TEXT PRIMARY KEY,
                        captured_at_ms INTEGER NOT NULL,
                        captured_at_text TEXT NOT NULL,
                        payload_json TEXT NOT NULL
                    )
                """)
                conn.commit()
        except (sqlite3.Error, OSError) as e:
            logger.warning(f"Could not initialize snapshot cache at {self.db_path}: {e}")

    def save(self, corner: Index, edge: Index) -> bool:
        """
        Persist both indices as the current snapshot, replacing any prior one

        Args:
            corner: Corner sheet index
            edge: Edge sheet index

        Returns:
            True if the snapshot was written
        """
        start_time = time.time()
        now = self.clock()

        snapshot = CacheSnapshot(
            captured_at_ms=int(now.timestamp() * 1000),
            captured_at_text=now.strftime(DISPLAY_TIME_FORMAT),
            corner=corner,
            edge=edge
        )
        entry_count = _entry_count(corner, edge)

        try:
            payload_json = json.dumps(snapshot.to_dict(), ensure_ascii=False)

            with sqlite3.connect(self.db_path) as conn:
                conn.execute("""
                    INSERT OR REPLACE INTO snapshot_cache
                    (slot, captured_at_ms, captured_at_text, payload_json)
                    VALUES (?, ?, ?, ?)
                """, (
                    CACHE_SLOT,
                    snapshot.captured_at_ms,
                    snapshot.captured_at_text,
                    payload_json
                ))
                conn.commit()

        except (sqlite3.Error, TypeError, ValueError) as e:
            log_cache_operation(logger, 'SAVE', self.db_path, entry_count,
                                time.time() - start_time, success=False, error=str(e))
            return False

        log_cache_operation(logger, 'SAVE', self.db_path, entry_count, time.time() - start_time)
        return True

    def load(self) -> Optional[CacheSnapshot]:
        """
        Read the current snapshot

        Returns:
            CacheSnapshot, or None if there is none or it cannot be decoded
        """
        start_time = time.time()

        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.execute(
                    "SELECT payload_json FROM snapshot_cache WHERE slot = ?",
                    (CACHE_SLOT,)
                )
                row = cursor.fetchone()

            if not row:
                logger.debug("No cached snapshot")
                return None

            snapshot = CacheSnapshot.from_dict(json.loads(row[0]))

        except (sqlite3.Error, TypeError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            log_cache_operation(logger, 'LOAD', self.db_path, 0,
                                time.time() - start_time, success=False, error=str(e))
            return None

        log_cache_operation(logger, 'LOAD', self.db_path,
                            _entry_count(snapshot.corner, snapshot.edge),
                            time.time() - start_time)
        return snapshot

    def clear(self) -> bool:
        """
        Delete the persisted snapshot

        Returns:
            True if the slot is now empty
        """
        start_time = time.time()

        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.execute("DELETE FROM snapshot_cache WHERE slot = ?", (CACHE_SLOT,))
                conn.commit()
                deleted = cursor.rowcount
        except sqlite3.Error as e:
            log_cache_operation(logger, 'CLEAR', self.db_path, 0,
                                time.time() - start_time, success=False, error=str(e))
            return False

        log_cache_operation(logger, 'CLEAR', self.db_path, deleted, time.time() - start_time)
        return True

    def get_cache_stats(self) -> Dict[str, Any]:
        """
        Get cache statistics

        Returns:
            Dictionary with cache statistics
        """
        snapshot = self.load()
        if snapshot is None:
            return {'present': False, 'path': self.db_path}

        stats = {
            'present': True,
            'path': self.db_path,
            'captured_at': snapshot.captured_at_text,
            'age_hours': round(snapshot.age(self.clock()).total_seconds() / 3600, 1),
            'stale': snapshot.is_older_than(CACHE_MAX_AGE, self.clock()),
        }

        for category in Category:
            index = snapshot.index_for(category)
            stats[category.value] = {
                'keys': len(index),
                'entries': _entry_count(index),
            }

        try:
            stats['size_bytes'] = Path(self.db_path).stat().st_size
        except OSError:
            stats['size_bytes'] = 0

        return stats
