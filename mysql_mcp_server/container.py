from __future__ import annotations

from dataclasses import dataclass

from mysql_mcp_server.config.settings import Settings
from mysql_mcp_server.infrastructure.db.engine import Database
from mysql_mcp_server.infrastructure.db.guards import PlainQueryGuard, ReadOnlyQueryGuard
from mysql_mcp_server.infrastructure.db.uow import ReadOnlyUnitOfWork

from mysql_mcp_server.application.services.health_service import HealthService
from mysql_mcp_server.application.services.schema_service import SchemaService
from mysql_mcp_server.application.services.sql_service import SqlService


@dataclass(frozen=True)
class Container:
    settings: Settings
    database: Database

    schema: SchemaService
    sql: SqlService
    health: HealthService


def build_container(settings: Settings, database: Database | None = None) -> Container:
    database = database or Database.from_settings(settings)
    engine = database.engine

    def uow_factory() -> ReadOnlyUnitOfWork:
        return ReadOnlyUnitOfWork(engine)

    queries = PlainQueryGuard(engine)
    readonly = ReadOnlyQueryGuard(uow_factory)

    return Container(
        settings=settings,
        database=database,
        schema=SchemaService(queries, host=settings.host, port=settings.port),
        sql=SqlService(readonly),
        health=HealthService(queries),
    )
