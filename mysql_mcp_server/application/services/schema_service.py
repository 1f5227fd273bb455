from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import unquote, urlsplit

from mysql_mcp_server.application.services.json_text import to_json_text
from mysql_mcp_server.infrastructure.db.guards import PlainQueryGuard

SCHEMA_PATH = "schema"
SCHEMA_MIME_TYPE = "application/json"

LIST_TABLES_SQL = (
    "SELECT table_name AS table_name FROM information_schema.tables "
    "WHERE table_schema = DATABASE() ORDER BY table_name"
)
DESCRIBE_TABLE_SQL = (
    "SELECT column_name AS column_name, data_type AS data_type FROM information_schema.columns "
    "WHERE table_schema = DATABASE() AND table_name = %s ORDER BY ordinal_position"
)


@dataclass(frozen=True)
class ResourceDescriptor:
    uri: str
    name: str
    mime_type: str = SCHEMA_MIME_TYPE


class SchemaService:
    def __init__(self, queries: PlainQueryGuard, host: str, port: int):
        self.queries = queries
        self.base_uri = f"mysql://{host}:{port}"

    @property
    def resource_template(self) -> str:
        return f"{self.base_uri}/{{table}}/{SCHEMA_PATH}"

    def resource_uri(self, table: str) -> str:
        return f"{self.base_uri}/{table}/{SCHEMA_PATH}"

    def parse_resource_uri(self, uri: str) -> str:
        """Return the table named by ``.../<table>/schema``."""
        parts = urlsplit(uri).path.split("/")
        schema = parts.pop() if parts else ""
        table = parts.pop() if parts else ""
        if schema != SCHEMA_PATH or not table:
            raise ValueError("Invalid resource URI")
        return unquote(table)

    async def list_tables(self) -> list[str]:
        rows = await self.queries.execute(LIST_TABLES_SQL)
        return [r["table_name"] for r in rows]

    async def list_resources(self) -> list[ResourceDescriptor]:
        return [
            ResourceDescriptor(uri=self.resource_uri(t), name=f'"{t}" database schema')
            for t in await self.list_tables()
        ]

    async def describe_table(self, table: str) -> list[dict]:
        return await self.queries.execute(DESCRIBE_TABLE_SQL, [table])

    async def read_resource(self, uri: str) -> str:
        table = self.parse_resource_uri(uri)
        return to_json_text(await self.describe_table(table))
