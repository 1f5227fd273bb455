from __future__ import annotations

from mysql_mcp_server.application.services.json_text import to_json_text
from mysql_mcp_server.infrastructure.db.guards import ReadOnlyQueryGuard


class SqlService:
    def __init__(self, guard: ReadOnlyQueryGuard):
        self.guard = guard

    async def run_query(self, sql: str) -> str:
        rows = await self.guard.execute(sql)
        return to_json_text(rows)
