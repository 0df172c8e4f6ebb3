"""Observability module for mapforge.

Provides structured logging for the generation pipeline and the CLI.
"""

from mapforge.observability.logging import (
    close_file_logging,
    configure_logging,
    get_logger,
    get_logs_dir,
)

__all__ = [
    "close_file_logging",
    "configure_logging",
    "get_logger",
    "get_logs_dir",
]
