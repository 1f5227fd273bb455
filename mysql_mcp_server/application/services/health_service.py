from __future__ import annotations

from mysql_mcp_server.infrastructure.db.guards import PlainQueryGuard

PING_SQL = "SELECT DATABASE() AS db, CURRENT_USER() AS usr, VERSION() AS version, NOW() AS server_time"


class HealthService:
    def __init__(self, queries: PlainQueryGuard):
        self.queries = queries

    async def ping(self) -> dict:
        rows = await self.queries.execute(PING_SQL)
        return rows[0]
