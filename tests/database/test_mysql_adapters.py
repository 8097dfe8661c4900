from __future__ import annotations

from datetime import datetime

import pytest
from mysql.connector import pooling
from mysql.connector.constants import ClientFlag

from src.ojt_tracker.ojt_tracker.core.exceptions import NotFoundError
from src.ojt_tracker.ojt_tracker.database.connection import DBConfig, DatabaseConnection
from src.ojt_tracker.ojt_tracker.requests.mysql_request_repository import MySQLRequestRepository


class FakeCursor:
    """Replays (row, rowcount) for each execute() in order."""

    def __init__(self, script):
        self._script = list(script)
        self._row = None
        self.rowcount = 0
        self.executed: list[str] = []

    def execute(self, sql, params=()):
        self.executed.append(" ".join(sql.split()))
        self._row, self.rowcount = self._script.pop(0)

    def fetchone(self):
        return self._row

    def fetchall(self):
        return [self._row] if self._row else []

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, conn):
        self._conn = conn

    def connect(self):
        return self._conn


def _request_row(status="pending"):
    return {
        "request_id": 3,
        "student_id": 7,
        "department": "College of Computing",
        "current_shift_type": "regular",
        "requested_shift_type": "graveyard",
        "requested_shift_config": None,
        "reason": "Night team",
        "status": status,
        "requested_at": datetime(2025, 1, 6, 9, 0),
        "reviewed_at": None,
        "reviewed_by": None,
        "comments": None,
    }


def _repo(script):
    cur = FakeCursor(script)
    conn = FakeConnection(cur)
    return MySQLRequestRepository(FakeConnFactory(conn)), conn, cur


def test_approval_updates_request_and_student_in_one_transaction():
    repo, conn, cur = _repo([(_request_row(), 1), (None, 1), (None, 1)])

    assert repo.approve_schedule_change(request_id=3, reviewed_by=1, comments="ok") is True

    assert conn.committed and not conn.rolled_back
    assert cur.executed[0].endswith("FOR UPDATE")
    assert cur.executed[1].startswith("UPDATE schedule_change_requests")
    assert cur.executed[2].startswith("UPDATE students SET shift_type")


def test_approval_rolls_back_when_student_is_gone():
    repo, conn, _ = _repo([(_request_row(), 1), (None, 1), (None, 0)])

    with pytest.raises(NotFoundError):
        repo.approve_schedule_change(request_id=3, reviewed_by=1)

    assert conn.rolled_back and not conn.committed


def test_approval_of_reviewed_request_writes_nothing():
    repo, conn, cur = _repo([(_request_row(status="rejected"), 1)])

    assert repo.approve_schedule_change(request_id=3, reviewed_by=1) is False
    assert len(cur.executed) == 1


class FakePool:
    created: list["FakePool"] = []

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.removed = False
        FakePool.created.append(self)

    def get_connection(self):
        return object()

    def _remove_connections(self):
        self.removed = True
        return 2


@pytest.fixture
def fake_pool(monkeypatch):
    FakePool.created = []
    monkeypatch.setattr(pooling, "MySQLConnectionPool", FakePool)
    return FakePool


def _db():
    return DatabaseConnection(DBConfig(host="db", port=3306, user="ojt", password="x", database="ojt_tracker", pool_size=3))


def test_pool_reports_matched_rows(fake_pool):
    db = _db()
    db.connect()
    db.connect()

    assert len(fake_pool.created) == 1
    pool = fake_pool.created[0]
    assert ClientFlag.FOUND_ROWS in pool.kwargs["client_flags"]
    assert pool.kwargs["pool_size"] == 3


def test_shutdown_closes_idle_connections(fake_pool):
    db = _db()
    db.connect()

    db.shutdown()
    db.shutdown()

    assert fake_pool.created[0].removed is True
    db.connect()
    assert len(fake_pool.created) == 2
