import importlib

import pytest


class BadCursor:
    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def execute(self, sql, params=None):  # pragma: no cover - exercised via _get_conn
        from psycopg2 import OperationalError

        raise OperationalError("SSL connection has been closed unexpectedly")


class GoodCursor:
    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def execute(self, sql, params=None):
        return None


class FakeConn:
    autocommit = False
    closed = 0
    status = 0
    cursor_cls = GoodCursor

    def __init__(self):
        self.rollbacks = 0

    def cursor(self, cursor_factory=None):
        return self.cursor_cls()

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = 1


class BadConn(FakeConn):
    cursor_cls = BadCursor


class FakePool:
    def __init__(self, conns):
        self.conns = list(conns)
        self.calls_get = 0
        self.calls_put = []

    def getconn(self):
        self.calls_get += 1
        return self.conns.pop(0)

    def putconn(self, conn, close=False):
        self.calls_put.append((conn, close))
        if close:
            conn.close()


def test_pool_checkout_retries_on_stale_connection(monkeypatch):
    import trailhub.datastore_pg as pg
    pg = importlib.reload(pg)

    pool = FakePool([BadConn(), FakeConn()])
    monkeypatch.setattr(pg, "_POOL", pool)

    with pg._get_conn() as conn:
        assert type(conn) is FakeConn

    assert pool.calls_get == 2
    assert pool.calls_put[0][1] is True
    # the healthy connection goes back to the pool open
    assert pool.calls_put[-1] == (conn, False)


def test_pool_checkout_gives_up_after_one_retry(monkeypatch):
    import psycopg2

    import trailhub.datastore_pg as pg
    pg = importlib.reload(pg)

    pool = FakePool([BadConn(), BadConn()])
    monkeypatch.setattr(pg, "_POOL", pool)

    with pytest.raises(psycopg2.OperationalError):
        with pg._get_conn():
            pass
    assert pool.calls_get == 2
    assert all(close for _c, close in pool.calls_put)


def test_caller_error_rolls_back_before_release(monkeypatch):
    import trailhub.datastore_pg as pg
    pg = importlib.reload(pg)

    good = FakeConn()
    pool = FakePool([good])
    monkeypatch.setattr(pg, "_POOL", pool)

    with pytest.raises(ValueError):
        with pg._get_conn():
            raise ValueError("boom")
    assert good.rollbacks >= 1
    assert pool.calls_put == [(good, False)]
