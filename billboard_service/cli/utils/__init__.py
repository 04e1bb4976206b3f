"""CLI utilities for running async operations and formatting output."""

from billboard_service.cli.utils.async_runner import coro
from billboard_service.cli.utils.formatters import (
    error,
    header,
    info,
    print_flags,
    print_post,
    success,
    warning,
)

__all__ = [
    "coro",
    "error",
    "header",
    "info",
    "print_flags",
    "print_post",
    "success",
    "warning",
]
