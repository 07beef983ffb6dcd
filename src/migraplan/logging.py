from __future__ import annotations

import logging
import structlog

from migraplan.config import settings


def configure_logging(json: bool | None = None) -> None:
    logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)
    if json is None:
        json = settings.log_json
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer(),
        ],
    )
