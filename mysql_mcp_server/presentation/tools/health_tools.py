from __future__ import annotations

from mysql_mcp_server.container import Container


def register(mcp, container: Container) -> None:
    @mcp.tool(
        title="DB ping",
        description="Connectivity check: current database/user/server version/server time.",
        tags={"health"},
        meta={"read": True},
        annotations={"readOnlyHint": True},
    )
    async def db_ping() -> dict:
        return await container.health.ping()
