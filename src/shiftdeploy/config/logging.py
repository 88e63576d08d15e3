"""structlog configuration for shiftdeploy.

Build logs are read by people and, on some CI hosts, by log parsers:
- Human (default): console-rendered lines on stderr
- JSON (--log-json): one JSON object per line on stderr

structlog events and plain stdlib records share one handler, so messages
from ``logging.getLogger(__name__)`` modules get the same fields.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import Processor

# Chatty libraries kept at WARNING even in verbose mode.
_QUIET_LOGGERS = ("httpx", "httpcore")

_PRE_CHAIN: list[Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def _final_renderer(log_json: bool) -> Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def _stderr_handler(renderer: Processor) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_PRE_CHAIN,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    return handler


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Safe to call repeatedly; each call replaces the previous handler.

    Args:
        verbose: Put the ``shiftdeploy`` logger at DEBUG instead of WARNING.
        log_json: Render JSON lines instead of console output.
    """
    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers[:] = [_stderr_handler(_final_renderer(log_json))]
    root.setLevel(logging.WARNING)

    logging.getLogger("shiftdeploy").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
