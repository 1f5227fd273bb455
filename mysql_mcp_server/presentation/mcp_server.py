from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastmcp import FastMCP

from mysql_mcp_server.container import Container

from mysql_mcp_server.presentation.tools.health_tools import register as register_health
from mysql_mcp_server.presentation.tools.schema_tools import register as register_schema
from mysql_mcp_server.presentation.tools.sql_tools import register as register_sql
from mysql_mcp_server.presentation.resources.schema_resources import (
    publish_table_resources,
    register as register_schema_resources,
)

logger = logging.getLogger(__name__)


def build_lifespan(container: Container):
    @asynccontextmanager
    async def lifespan(server: FastMCP):
        try:
            await publish_table_resources(server, container)
        except Exception:
            # the server stays up; refresh_schema_resources can publish them later
            logger.warning("Could not list tables at startup", exc_info=True)
        try:
            yield {}
        finally:
            await container.database.close()

    return lifespan


def build_mcp_server(container: Container) -> FastMCP:
    mcp = FastMCP(
        name="mysql",
        instructions=(
            "Read-only access to a MySQL database. "
            "Each table's columns are published as a schema resource; "
            "run SQL with mysql_query (always executed in a rolled-back READ ONLY transaction)."
        ),
        lifespan=build_lifespan(container),
        on_duplicate_resources="replace",
    )

    register_health(mcp, container)
    register_schema(mcp, container)
    register_sql(mcp, container)
    register_schema_resources(mcp, container)

    return mcp
