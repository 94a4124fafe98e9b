"""Application entry point."""

from __future__ import annotations

import asyncio
import logging

import uvicorn

from storefront.bootstrap import startup
from storefront.config import settings
from storefront.logging_config import resolve_log_level, setup_logging

startup_log = logging.getLogger("startup")


async def main() -> None:
    setup_logging(log_dir=settings.LOG_DIR, level=resolve_log_level(settings.LOG_LEVEL))
    startup_log.info("S0: environment=%s db=%s", settings.ENVIRONMENT, settings.DB_URL)

    report = await startup()
    startup_log.info(
        "bootstrap done db_ready=%s synced=%s seeded=%s",
        report.db_ready,
        report.synced,
        report.seeded,
    )

    from storefront.web import app

    config = uvicorn.Config(
        app,
        host=settings.WEB_HOST,
        port=settings.WEB_PORT,
        loop="asyncio",
        log_level="info",
        access_log=False,
    )
    server = uvicorn.Server(config)
    startup_log.info("web server listening on http://%s:%s", settings.WEB_HOST, settings.WEB_PORT)
    await server.serve()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
