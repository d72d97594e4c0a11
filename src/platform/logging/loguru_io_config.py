"""
Loguru sinks and shared logging state

- one stdout sink, plus an hourly file sink when DEBUG is on
- standard logging (uvicorn, fastapi, httpx, sqlalchemy) is routed into loguru
- every line carries the service context and the current request context
  (`<request id> <caller>`), set per request by the app middleware
"""

from contextvars import ContextVar
from datetime import datetime, timezone
from enum import StrEnum
import logging
import os
import sys
from typing import TYPE_CHECKING

from loguru import logger as loguru_logger


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.constant.path import LOG_DIR
from src.platform.logging.service_context import get_service_context


LOG_DIR = os.environ.get('TEST_LOG_DIR', LOG_DIR)

# Keys whose values never reach a log line
SENSITIVE_KEYWORDS = frozenset({'password', 'api_key', 'airtable_api_key', 'authorization'})

MAX_CONTENT_LENGTH = 500

NO_REQUEST = '-'
request_context_var: ContextVar[str] = ContextVar('request_context_var', default=NO_REQUEST)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    REQUEST_CONTEXT = 'request_context'
    CALL_TARGET = 'call_target'


# (lowest status, level) checked top-down
_ACCESS_LOG_LEVELS = ((500, 'CRITICAL'), (400, 'ERROR'), (300, 'WARNING'), (200, 'SUCCESS'))


def access_log_level(message: str) -> str | None:
    """'127.0.0.1:53422 - "GET /api/products HTTP/1.1" 404' -> 'ERROR'"""
    if ' HTTP/' not in message or message.count('"') < 2:
        return None
    status_part = message.rsplit('"', 1)[1].split()
    if not status_part or not status_part[0].isdigit():
        return None
    status_code = int(status_part[0])
    for lowest, level in _ACCESS_LOG_LEVELS:
        if status_code >= lowest:
            return level
    return 'INFO'


def bind_logger(**extra: str) -> 'LoguruLogger':
    return loguru_logger.bind(
        **{
            ExtraField.SERVICE_CONTEXT: get_service_context(),
            ExtraField.REQUEST_CONTEXT: NO_REQUEST,
            ExtraField.CALL_TARGET: '',
            **extra,
        }
    )


def _inject_request_context(record: dict) -> None:
    record['extra'][ExtraField.REQUEST_CONTEXT] = request_context_var.get()


class InterceptHandler(logging.Handler):
    """Standard logging -> loguru, keeping the emitting call site."""

    def emit(self, record: logging.LogRecord) -> None:
        message = record.getMessage()
        level: str | int | None = access_log_level(message)
        if level is None:
            try:
                level = loguru_logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        custom_logger.opt(depth=depth, exception=record.exc_info).log(level, message)


io_log_format = ' | '.join(
    (
        '<lk>{time:YYYY-MM-DD HH:mm:ss.SSS}</>',
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        f'<m>{{extra[{ExtraField.REQUEST_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
    )
)

min_log_level = 'DEBUG' if settings.DEBUG else 'INFO'

loguru_logger.remove()
loguru_logger.configure(patcher=_inject_request_context)  # type: ignore[arg-type]
custom_logger = bind_logger()
custom_logger.add(sys.stdout, format=io_log_format, level=min_log_level, enqueue=True)

if settings.DEBUG:
    log_prefix = 'test_' if os.environ.get('TEST_LOG_DIR') else ''
    custom_logger.add(
        f'{LOG_DIR}/{log_prefix}{datetime.now(timezone.utc):%Y-%m-%d_%H}.log',
        format=io_log_format,
        rotation='1 hour',
        retention='7 days',
        compression='gz',
        enqueue=True,
        level=min_log_level,
    )

logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

for logger_name in ('uvicorn', 'uvicorn.error', 'uvicorn.access', 'fastapi', 'httpx'):
    std_logger = logging.getLogger(logger_name)
    std_logger.handlers = [InterceptHandler()]
    std_logger.propagate = False
