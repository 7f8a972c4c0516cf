"""Process entry point: serve the API and shut down within a bounded window."""

from __future__ import annotations

import asyncio
import logging
import signal
import sys

import uvicorn

from catalog_api.core.config import Settings, get_settings
from catalog_api.core.logging import configure_logging
from catalog_api.main import create_app

logger = logging.getLogger(__name__)

# Exit status when in-flight requests did not finish within the drain window
EXIT_UNGRACEFUL = 2


class CatalogServer(uvicorn.Server):
    """uvicorn server whose shutdown is bounded by ``drain_timeout``.

    On SIGINT/SIGTERM uvicorn closes the listening sockets, closes idle
    keep-alive connections and waits for in-flight requests. If that wait
    exceeds the drain window the shutdown is abandoned and ``drained`` is
    left False.

    Signals are not re-raised once ``run()`` returns, so the caller decides
    the exit status from ``drained``.
    """

    def __init__(self, config: uvicorn.Config, drain_timeout: float = 10.0) -> None:
        super().__init__(config)
        self.drain_timeout = drain_timeout
        self.drained = True

    def handle_exit(self, sig: int, frame) -> None:
        if self.should_exit and sig == signal.SIGINT:
            self.force_exit = True
            return
        if not self.should_exit:
            logger.info(f"Signal {signal.Signals(sig).name} received; server shutting down")
        self.should_exit = True

    async def shutdown(self, sockets=None) -> None:
        try:
            await asyncio.wait_for(super().shutdown(sockets=sockets), timeout=self.drain_timeout)
        except asyncio.TimeoutError:
            self.drained = False
            logger.error(
                f"Server failed to shutdown gracefully within {self.drain_timeout:g}s"
            )


def build_server(settings: Settings) -> CatalogServer:
    config = uvicorn.Config(
        create_app(settings),
        host=settings.http_host,
        port=settings.http_port,
        timeout_keep_alive=int(settings.idle_timeout),
        access_log=False,
        log_config=None,
    )
    return CatalogServer(config, drain_timeout=settings.shutdown_timeout)


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)

    server = build_server(settings)
    logger.info(f"Server listening on address: {settings.http_host}:{settings.http_port}")
    server.run()

    if not server.drained:
        logger.error("Server stopped with requests still in flight")
        sys.exit(EXIT_UNGRACEFUL)
    logger.info("Server stopped")
    sys.exit(0)


if __name__ == "__main__":
    main()
