from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

from sqlalchemy.engine import Result
from sqlalchemy.ext.asyncio import AsyncEngine

from mysql_mcp_server.infrastructure.db.uow import ReadOnlyUnitOfWork

logger = logging.getLogger(__name__)

# hand the SQL text to the driver as-is; no %-style parameter interpolation
RAW = {"no_parameters": True}


def rows_of(result: Result) -> list[dict[str, Any]]:
    if not result.returns_rows:
        return []
    return [dict(r) for r in result.mappings().all()]


class ReadOnlyQueryGuard:
    """Run untrusted SQL inside a rolled-back READ ONLY transaction."""

    def __init__(self, uow_factory: Callable[[], ReadOnlyUnitOfWork]):
        self.uow_factory = uow_factory

    async def execute(self, sql: str) -> list[dict[str, Any]]:
        logger.debug("read-only query: %s", sql)
        async with self.uow_factory() as uow:
            result = await uow.connection.exec_driver_sql(sql, execution_options=RAW)
            return rows_of(result)


class PlainQueryGuard:
    """Run trusted internal SQL with optional positional (%s) parameters."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        logger.debug("query: %s params=%r", sql, params)
        async with self.engine.connect() as conn:
            if params:
                result = await conn.exec_driver_sql(sql, tuple(params))
            else:
                result = await conn.exec_driver_sql(sql, execution_options=RAW)
            return rows_of(result)
