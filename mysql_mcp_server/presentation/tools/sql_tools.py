from __future__ import annotations

from pydantic import Field

from mysql_mcp_server.container import Container


def register(mcp, container: Container) -> None:
    @mcp.tool(
        name="mysql_query",
        title="MySQL query (read-only)",
        description="Run a read-only MySQL query. Returns the result rows as a JSON array.",
        tags={"sql"},
        meta={"read": True, "safety": "readonly-transaction"},
        annotations={"readOnlyHint": True, "openWorldHint": False},
    )
    async def mysql_query(
        sql: str = Field(description="SQL statement. Runs in a READ ONLY transaction that is always rolled back."),
    ) -> str:
        return await container.sql.run_query(sql)
