import sqlite3
import threading
from typing import Any, Dict, Iterable, List, Optional

from .cache_api import CacheAPI
from .uploader import BundleResult


class SQLiteUploadCache(CacheAPI):
    """
    SQLite-backed record of uploaded assets: key -> manifest link.

    All DB access is guarded by an RLock.
    """

    def __init__(self, db_path: str = "arbatch_cache.db"):
        self.db_path = db_path
        self._lock = threading.RLock()
        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        with self._lock:
            self.conn.execute("PRAGMA journal_mode=WAL;")
            self.conn.execute("PRAGMA synchronous=NORMAL;")

        self._init_tables()

    def _init_tables(self) -> None:
        with self._lock:
            self.conn.execute(
                """
                CREATE TABLE IF NOT EXISTS items (
                    key TEXT PRIMARY KEY,
                    link TEXT NOT NULL,
                    name TEXT,
                    uploaded_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
                """
            )
            self.conn.commit()

    def save_link(self, key: str, link: str, name: Optional[str] = None) -> None:
        """Insert or update a single cache entry."""
        with self._lock:
            self.conn.execute(
                "INSERT OR REPLACE INTO items (key, link, name) VALUES (?, ?, ?)",
                (key, link, name),
            )
            self.conn.commit()

    def save_bundle_result(self, result: BundleResult) -> None:
        """Persist every pair of an uploaded bundle in a single transaction."""
        if not len(result):
            return

        rows = [
            (key, link, manifest.get("name"))
            for key, link, manifest in zip(
                result.cache_keys, result.manifest_links, result.updated_manifests
            )
        ]
        with self._lock:
            cursor = self.conn.cursor()
            try:
                cursor.execute("BEGIN TRANSACTION")
                cursor.executemany(
                    "INSERT OR REPLACE INTO items (key, link, name) VALUES (?, ?, ?)",
                    rows,
                )
                self.conn.commit()
            except Exception:
                self.conn.rollback()
                raise

    def load_link(self, key: str) -> Optional[str]:
        with self._lock:
            row = self.conn.execute(
                "SELECT link FROM items WHERE key = ?", (key,)
            ).fetchone()
            return row["link"] if row else None

    def list_items(self) -> List[Dict[str, Any]]:
        """Return all cached entries in upload order."""
        with self._lock:
            cursor = self.conn.execute(
                "SELECT * FROM items ORDER BY uploaded_at, rowid"
            )
            return [dict(row) for row in cursor.fetchall()]

    def pending_assets(self, assets: Iterable[str]) -> List[str]:
        """Keys from assets that have no link yet, order preserved."""
        with self._lock:
            cached = {
                row[0] for row in self.conn.execute("SELECT key FROM items")
            }
        return [asset for asset in assets if asset not in cached]

    def close(self) -> None:
        with self._lock:
            self.conn.close()
