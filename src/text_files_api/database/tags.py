"""Tag rows `(tag, filename)` in the metadata store."""

import logging
from typing import Dict, Iterable, List, Optional

from text_files_api.database.pool import ConnectionPool, database_path_from_url
from text_files_api.utils.decorators import log_startup_step

logger = logging.getLogger(__name__)

TAGS_TABLE = "file_tags"


class TagStore:
    """
    Tag/filename associations.

    Rows carry no uniqueness or foreign-key constraint, so a filename can hold
    duplicate tags and tag rows can outlive their object. A file stored without
    tags gets a single row with a NULL tag; NULL tags are never returned.
    """

    def __init__(self, database_url: str, pool_size: int = 5):
        self.database_url = database_url
        self.pool = ConnectionPool(database_path_from_url(database_url), max_size=pool_size)

    @log_startup_step("ensure tags table")
    def init_table(self) -> None:
        """Create the tags table and its indexes if they do not exist."""
        with self.pool.connection() as conn:
            conn.execute(f'''
                CREATE TABLE IF NOT EXISTS {TAGS_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    tag VARCHAR(255),
                    filename VARCHAR(255) NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')
            conn.execute(f'CREATE INDEX IF NOT EXISTS idx_{TAGS_TABLE}_tag ON {TAGS_TABLE} (tag)')
            conn.execute(f'CREATE INDEX IF NOT EXISTS idx_{TAGS_TABLE}_filename ON {TAGS_TABLE} (filename)')
        logger.info(f"Table '{TAGS_TABLE}' is ready in {self.pool.db_path}")

    @staticmethod
    def _insert_rows(conn, filename: str, tags: Iterable[str]) -> None:
        rows = [(tag, filename) for tag in tags]
        if not rows:
            rows = [(None, filename)]
        conn.executemany(
            f'INSERT INTO {TAGS_TABLE} (tag, filename) VALUES (?, ?)',
            rows,
        )

    def add_tags(self, filename: str, tags: Optional[List[str]]) -> None:
        """Insert one row per tag, or a single NULL-tag row when `tags` is empty."""
        with self.pool.connection() as conn:
            self._insert_rows(conn, filename, tags or [])
        logger.debug(f"Added tags {tags or []} to {filename}")

    def get_tags(self, filename: str) -> List[str]:
        """Tags of `filename` in insertion order."""
        with self.pool.connection() as conn:
            cursor = conn.execute(
                f'SELECT tag FROM {TAGS_TABLE} WHERE filename = ? AND tag IS NOT NULL ORDER BY id',
                (filename,),
            )
            return [row["tag"] for row in cursor.fetchall()]

    def get_tags_for(self, filenames: Iterable[str]) -> Dict[str, List[str]]:
        """Tags of several files using a single checked-out connection."""
        result: Dict[str, List[str]] = {}
        with self.pool.connection() as conn:
            for filename in filenames:
                cursor = conn.execute(
                    f'SELECT tag FROM {TAGS_TABLE} WHERE filename = ? AND tag IS NOT NULL ORDER BY id',
                    (filename,),
                )
                result[filename] = [row["tag"] for row in cursor.fetchall()]
        return result

    def replace_tags(self, filename: str, tags: Optional[List[str]]) -> None:
        """Swap the full tag set of `filename` for `tags` in one transaction."""
        with self.pool.connection() as conn:
            conn.execute(f'DELETE FROM {TAGS_TABLE} WHERE filename = ?', (filename,))
            self._insert_rows(conn, filename, tags or [])
        logger.debug(f"Replaced tags of {filename} with {tags or []}")

    def delete_tags(self, filename: str) -> int:
        """Remove every row of `filename`; returns the number of rows deleted."""
        with self.pool.connection() as conn:
            cursor = conn.execute(f'DELETE FROM {TAGS_TABLE} WHERE filename = ?', (filename,))
            return cursor.rowcount

    def search_filenames(self, tags: List[str]) -> List[str]:
        """Distinct filenames carrying any of `tags`, sorted."""
        if not tags:
            return []
        placeholders = ", ".join("?" for _ in tags)
        with self.pool.connection() as conn:
            cursor = conn.execute(
                f'SELECT DISTINCT filename FROM {TAGS_TABLE} WHERE tag IN ({placeholders}) ORDER BY filename',
                list(tags),
            )
            return [row["filename"] for row in cursor.fetchall()]

    def ping(self) -> None:
        """Query the tags table; raises if it is missing or unreachable."""
        with self.pool.connection() as conn:
            conn.execute(f'SELECT 1 FROM {TAGS_TABLE} LIMIT 1').fetchone()

    def close(self) -> None:
        self.pool.close()
