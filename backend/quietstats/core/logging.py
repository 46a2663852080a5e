"""
Structured logging with structlog.

JSON lines in production, colored console output elsewhere. Every request
carries its path, method and, for project routes, the project id.
"""
import logging
import re
import sys
from typing import Optional

import structlog
from starlette.types import ASGIApp, Receive, Scope, Send
from structlog.types import Processor

from quietstats.core.config import settings

_PROJECT_PATH = re.compile(r"/projects/(?P<project_id>[0-9a-fA-F-]{36})(?:/|$)")

NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "asyncpg")


def _renderer(json_logs: bool) -> list[Processor]:
    if json_logs:
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [structlog.dev.ConsoleRenderer(colors=True)]


def configure_logging(
    level: Optional[str] = None,
    json_logs: Optional[bool] = None,
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Log level name, defaults to settings.log_level
        json_logs: Force JSON output, defaults to on in production
    """
    level = (level or settings.log_level).upper()
    if json_logs is None:
        json_logs = settings.environment == "production"

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        *_renderer(json_logs),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level, logging.INFO),
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def project_id_from_path(path: str) -> Optional[str]:
    match = _PROJECT_PATH.search(path)
    return match.group("project_id") if match else None


class LoggerContextMiddleware:
    """
    Resets the structlog context for each request and binds request details.

    Must wrap RequestIdMiddleware so the request id survives the reset.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "")
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(path=path, method=scope.get("method", ""))

        project_id = project_id_from_path(path)
        if project_id:
            structlog.contextvars.bind_contextvars(project_id=project_id)

        await self.app(scope, receive, send)
