from __future__ import annotations

import asyncio

import pytest
from sqlalchemy.exc import InvalidRequestError, OperationalError

from mysql_mcp_server.config.settings import Settings
from mysql_mcp_server.container import build_container
from mysql_mcp_server.infrastructure.db.engine import Database

WRITE_VERBS = {"insert", "update", "delete", "replace", "create", "drop", "alter", "truncate"}


def read_only_violation(sql: str) -> OperationalError:
    return OperationalError(sql, None, Exception(1792, "Cannot execute statement in a READ ONLY transaction."))


class FakeResult:
    def __init__(self, rows):
        self._rows = rows
        self.returns_rows = rows is not None

    def mappings(self):
        return self

    def all(self):
        return list(self._rows)


class FakeConnection:
    """Models one pooled MySQL connection the way SQLAlchemy drives it.

    Executing a statement outside a transaction autobegins one; the session
    access mode is captured when a transaction starts, as MySQL does.
    """

    def __init__(self, engine: "FakeEngine", ident: int):
        self.engine = engine
        self.ident = ident
        self.log: list[tuple] = []
        self.session_read_only = False
        self.in_tx = False
        self.tx_read_only = False
        self.invalidated = False

    def _fail(self, key: str) -> None:
        exc = self.engine.failures.get(key)
        if exc is not None:
            raise exc

    def _start_tx(self) -> None:
        self.in_tx = True
        self.tx_read_only = self.session_read_only

    async def exec_driver_sql(self, statement, parameters=None, execution_options=None):
        self.log.append(("exec", statement, parameters, execution_options))
        self._fail(statement)
        if not self.in_tx:
            self._start_tx()
        if self.engine.delay:
            await asyncio.sleep(self.engine.delay)

        if statement == "SET SESSION TRANSACTION READ ONLY":
            self.session_read_only = True
            return FakeResult(None)
        if statement == "SET SESSION TRANSACTION READ WRITE":
            self.session_read_only = False
            return FakeResult(None)

        verb = statement.split(None, 1)[0].lower() if statement.strip() else ""
        if verb in WRITE_VERBS:
            if self.tx_read_only:
                raise read_only_violation(statement)
            self.engine.writes.append(statement)
            return FakeResult(None)

        response = self.engine.responses.get(statement)
        if isinstance(response, BaseException):
            raise response
        return FakeResult(response)

    async def begin(self):
        self.log.append(("begin",))
        self._fail("begin")
        if self.in_tx:
            raise InvalidRequestError("a transaction is already begun")
        self._start_tx()

    async def commit(self):
        self.log.append(("commit",))
        self._fail("commit")
        self.in_tx = False

    async def rollback(self):
        self.log.append(("rollback",))
        self._fail("rollback")
        self.in_tx = False

    async def invalidate(self):
        self.log.append(("invalidate",))
        self.invalidated = True

    async def close(self):
        self.log.append(("close",))
        self.engine.check_in(self)

    def ops(self) -> list:
        """Compact view of the log: statements by text, everything else by name."""
        return [entry[1] if entry[0] == "exec" else entry[0] for entry in self.log]


class _Lease:
    def __init__(self, engine: "FakeEngine"):
        self.engine = engine
        self.conn: FakeConnection | None = None

    async def start(self) -> FakeConnection:
        self.conn = await self.engine.check_out()
        return self.conn

    async def __aenter__(self) -> FakeConnection:
        return await self.start()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.conn.close()


class FakeEngine:
    """Bounded pool of FakeConnections with the AsyncEngine surface the server uses."""

    def __init__(self, size: int = 3, responses: dict | None = None, delay: float = 0.0):
        self.size = size
        self.responses = responses or {}
        self.failures: dict[str, BaseException] = {}
        self.delay = delay
        self.writes: list[str] = []
        self.connections = [FakeConnection(self, i) for i in range(size)]
        self.released: list[dict] = []
        self.active = 0
        self.max_active = 0
        self.disposed = False
        self._idle: asyncio.Queue | None = None
        self._next_ident = size

    def connect(self) -> _Lease:
        return _Lease(self)

    async def check_out(self) -> FakeConnection:
        if self._idle is None:
            self._idle = asyncio.Queue()
            for c in self.connections:
                self._idle.put_nowait(c)
        conn = await self._idle.get()
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        return conn

    def check_in(self, conn: FakeConnection) -> None:
        self.released.append(
            {
                "ident": conn.ident,
                "read_only": conn.session_read_only,
                "in_tx": conn.in_tx,
                "invalidated": conn.invalidated,
            }
        )
        self.active -= 1
        if conn.invalidated:
            conn = FakeConnection(self, self._next_ident)
            self._next_ident += 1
            self.connections.append(conn)
        # pool reset-on-return
        conn.in_tx = False
        self._idle.put_nowait(conn)

    async def dispose(self) -> None:
        self.disposed = True


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def settings(monkeypatch) -> Settings:
    for var in ("MYSQL_HOST", "MYSQL_PORT", "MYSQL_PASS", "MYSQL_PASSWORD", "MYSQL_DB", "MYSQL_DATABASE"):
        monkeypatch.delenv(var, raising=False)
    return Settings(_env_file=None, host="db.local", port=3307, database="shop")


@pytest.fixture
def container(settings, fake_engine):
    return build_container(settings, Database(fake_engine))
