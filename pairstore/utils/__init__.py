"""Shared utilities."""

from .logging_setup import JSONFormatter, get_logger, log_operation, setup_logging

__all__ = ["JSONFormatter", "get_logger", "log_operation", "setup_logging"]
