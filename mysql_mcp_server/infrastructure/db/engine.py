from __future__ import annotations

import logging

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from mysql_mcp_server.config.settings import Settings

logger = logging.getLogger(__name__)


def build_mysql_url(settings: Settings) -> URL:
    return URL.create(
        "mysql+aiomysql",
        username=settings.user,
        password=settings.password or None,
        host=settings.host,
        port=settings.port,
        database=settings.database or None,
    )


def build_engine(url: URL, pool_size: int, pool_timeout: float) -> AsyncEngine:
    # no overflow: pool_size is a hard cap, extra borrowers wait for a free connection
    return create_async_engine(
        url,
        pool_size=pool_size,
        max_overflow=0,
        pool_timeout=pool_timeout,
        pool_pre_ping=True,
    )


class Database:
    """Owns the async engine and its connection pool for the lifetime of the server."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.close_failed = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        url = build_mysql_url(settings)
        logger.info(
            "MySQL pool for %s (limit=%d)",
            url.render_as_string(hide_password=True),
            settings.connection_limit,
        )
        return cls(build_engine(url, settings.connection_limit, settings.pool_timeout))

    async def close(self) -> None:
        logger.info("Closing MySQL connection pool")
        try:
            await self.engine.dispose()
        except Exception:
            self.close_failed = True
            logger.exception("Error closing MySQL connection pool")
            raise
