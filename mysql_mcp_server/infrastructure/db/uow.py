from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

logger = logging.getLogger(__name__)

SET_READ_ONLY = "SET SESSION TRANSACTION READ ONLY"
SET_READ_WRITE = "SET SESSION TRANSACTION READ WRITE"


class ReadOnlyUnitOfWork:
    """Borrow one pooled connection for a single READ ONLY transaction that is always rolled back."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.connection: AsyncConnection | None = None

    async def __aenter__(self) -> "ReadOnlyUnitOfWork":
        self.connection = await self.engine.connect().start()
        try:
            await self._set_access_mode(SET_READ_ONLY)
            await self.connection.begin()
        except BaseException:
            await self._recover()
            await self._release()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is None:
                try:
                    await self.connection.rollback()
                    await self._set_access_mode(SET_READ_WRITE)
                except BaseException:
                    await self._recover()
                    raise
            else:
                await self._recover()
        finally:
            await self._release()

    async def _set_access_mode(self, statement: str) -> None:
        await self.connection.exec_driver_sql(statement)
        # session characteristics apply from the next transaction on
        await self.connection.commit()

    async def _recover(self) -> None:
        try:
            await self.connection.rollback()
            await self._set_access_mode(SET_READ_WRITE)
        except Exception:
            logger.warning("Could not reset connection after failure; discarding it", exc_info=True)
            await self._invalidate()

    async def _invalidate(self) -> None:
        try:
            await self.connection.invalidate()
        except Exception:
            logger.warning("Could not invalidate connection", exc_info=True)

    async def _release(self) -> None:
        conn, self.connection = self.connection, None
        await conn.close()
