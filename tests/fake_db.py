from __future__ import annotations

from typing import Any, Optional


def normalize_sql(sql: str) -> str:
    return " ".join(sql.split())


class RecordingCursor:
    def __init__(self, conn: "RecordingConnection"):
        self._conn = conn
        self.lastrowid = conn.lastrowid

    def _record(self, sql, params):
        self._conn.statements.append((normalize_sql(sql), params))
        if self._conn.fail_on and self._conn.fail_on in normalize_sql(sql):
            raise self._conn.error

    def execute(self, sql, params=None):
        self._record(sql, params)

    def executemany(self, sql, rows):
        self._record(sql, list(rows))

    def fetchone(self):
        return self._conn.rows[0] if self._conn.rows else None

    def fetchall(self):
        return list(self._conn.rows)

    def close(self):
        pass


class RecordingConnection:
    """Stands in for a mysql.connector connection; keeps every statement run on it."""

    def __init__(
        self,
        *,
        rows: Optional[list[dict[str, Any]]] = None,
        fail_on: Optional[str] = None,
        error: Optional[Exception] = None,
        lastrowid: int = 41,
    ):
        self.rows = rows or []
        self.fail_on = fail_on
        self.error = error
        self.lastrowid = lastrowid
        self.statements: list[tuple[str, Any]] = []
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return RecordingCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True

    @property
    def last_sql(self) -> str:
        return self.statements[-1][0]

    @property
    def last_params(self):
        return self.statements[-1][1]


class RecordingConnectionFactory:
    def __init__(self, conn: RecordingConnection):
        self.conn = conn

    def connect(self):
        return self.conn
