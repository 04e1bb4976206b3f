"""Logging infrastructure.

Structured logging on top of the standard library:
- dictConfig with a QueueHandler on the root logger (non-blocking I/O)
- JSON Lines or plain text output
- contextvars-based context injection (billboard_code, connection_id, ...)

Usage:
    import logging

    from billboard_service.infra.logging import log_context, setup_logging

    setup_logging()
    logger = logging.getLogger(__name__)

    with log_context(billboard_code="4821"):
        logger.info("Flags refreshed")  # record includes billboard_code
"""

from billboard_service.infra.logging.config import (
    configure_logging,
    setup_logging,
    shutdown,
)
from billboard_service.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    log_context,
    set_log_context,
)
from billboard_service.infra.logging.formatters import JSONFormatter

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "clear_log_context",
    "configure_logging",
    "get_log_context",
    "log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
