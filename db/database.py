import sqlite3
import threading
from pathlib import Path

from db.models import SCHEMA_SQL


class Database:
    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        # One connection per thread: sync endpoints run in the threadpool
        self._local = threading.local()
        self._init_schema()

    def _get_conn(self) -> sqlite3.Connection:
        conn = getattr(self._local, "conn", None)
        if conn is None:
            conn = sqlite3.connect(str(self.db_path))
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL")
            self._local.conn = conn
        return conn

    def _init_schema(self):
        conn = self._get_conn()
        conn.executescript(SCHEMA_SQL)
        conn.commit()

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        conn = self._get_conn()
        cursor = conn.execute(sql, params)
        conn.commit()
        return cursor

    def fetchone(self, sql: str, params: tuple = ()) -> dict | None:
        cursor = self._get_conn().execute(sql, params)
        row = cursor.fetchone()
        return dict(row) if row else None

    def insert_rate_limit(self, user_id: str, endpoint: str, window_start: float) -> int:
        cursor = self.execute(
            "INSERT INTO api_rate_limits (user_id, endpoint, request_count, window_start) "
            "VALUES (?, ?, 1, ?)",
            (user_id, endpoint, window_start),
        )
        return cursor.lastrowid

    def count_requests_since(self, user_id: str, endpoint: str, since: float) -> int:
        row = self.fetchone(
            "SELECT COALESCE(SUM(request_count), 0) AS total FROM api_rate_limits "
            "WHERE user_id = ? AND endpoint = ? AND window_start >= ?",
            (user_id, endpoint, since),
        )
        return int(row["total"]) if row else 0

    def purge_rate_limits_before(self, cutoff: float) -> int:
        cursor = self.execute("DELETE FROM api_rate_limits WHERE window_start < ?", (cutoff,))
        return cursor.rowcount

    def close(self):
        conn = getattr(self._local, "conn", None)
        if conn is not None:
            conn.close()
            self._local.conn = None
