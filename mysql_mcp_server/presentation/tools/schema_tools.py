from __future__ import annotations

from mysql_mcp_server.container import Container
from mysql_mcp_server.presentation.resources.schema_resources import publish_table_resources


def register(mcp, container: Container) -> None:
    @mcp.tool(
        title="Refresh schema resources",
        description="Re-list tables and publish one schema resource per table (use after running migrations).",
        tags={"schema"},
        meta={"read": True},
        annotations={"readOnlyHint": True, "idempotentHint": True},
    )
    async def refresh_schema_resources() -> dict:
        tables = await publish_table_resources(mcp, container)
        return {"ok": True, "tables": tables}
