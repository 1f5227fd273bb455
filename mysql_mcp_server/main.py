from __future__ import annotations

import logging
import signal
import sys

from mysql_mcp_server.config.logging import configure_logging
from mysql_mcp_server.config.settings import Settings
from mysql_mcp_server.container import build_container
from mysql_mcp_server.presentation.mcp_server import build_mcp_server

logger = logging.getLogger(__name__)


def _terminate(signum, frame) -> None:
    raise KeyboardInterrupt(signal.Signals(signum).name)


def main() -> None:
    settings = Settings()  # loads .env automatically
    configure_logging(settings.log_level)

    container = build_container(settings)
    mcp = build_mcp_server(container)

    # SIGTERM stops the server the same way SIGINT does; the lifespan closes the pool
    signal.signal(signal.SIGTERM, _terminate)

    exit_code = 0
    try:
        mcp.run(transport="stdio")
    except KeyboardInterrupt:
        logger.info("Received shutdown signal. Shutting down...")
    except Exception:
        logger.exception("Server error")
        exit_code = 1
    if container.database.close_failed:
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
