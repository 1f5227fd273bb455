from __future__ import annotations

import logging

from fastmcp.server.middleware import Middleware, MiddlewareContext

from mysql_mcp_server.application.services.schema_service import SCHEMA_MIME_TYPE, SchemaService
from mysql_mcp_server.container import Container

logger = logging.getLogger(__name__)


def _schema_reader(schema: SchemaService, uri: str):
    async def read_table_schema() -> str:
        return await schema.read_resource(uri)

    return read_table_schema


async def publish_table_resources(mcp, container: Container) -> list[str]:
    """Register one static schema resource per table in the current database."""
    schema = container.schema
    descriptors = await schema.list_resources()
    for d in descriptors:
        mcp.resource(
            d.uri,
            name=d.name,
            description=f"Columns and data types of {d.name}",
            mime_type=d.mime_type,
            tags={"schema"},
        )(_schema_reader(schema, d.uri))
    tables = [schema.parse_resource_uri(d.uri) for d in descriptors]
    logger.info("Published schema resources for %d tables", len(tables))
    return tables


class LiveTableResources(Middleware):
    """Answer resource listings from the tables that exist right now."""

    def __init__(self, mcp, container: Container):
        self.mcp = mcp
        self.container = container

    def _is_dropped(self, uri: str, tables: set[str]) -> bool:
        schema = self.container.schema
        if not uri.startswith(schema.base_uri + "/"):
            return False
        try:
            return schema.parse_resource_uri(uri) not in tables
        except ValueError:
            return False

    async def on_list_resources(self, context: MiddlewareContext, call_next):
        tables = set(await publish_table_resources(self.mcp, self.container))
        resources = await call_next(context)
        return [r for r in resources if not self._is_dropped(str(r.uri), tables)]


def register(mcp, container: Container) -> None:
    schema = container.schema

    mcp.add_middleware(LiveTableResources(mcp, container))

    # serves tables created after the static resources were published
    @mcp.resource(
        schema.resource_template,
        name="Table schema",
        description="Column name/type pairs of one table in the current database.",
        mime_type=SCHEMA_MIME_TYPE,
        tags={"schema"},
    )
    async def table_schema(table: str) -> str:
        return await schema.read_resource(schema.resource_uri(table))
