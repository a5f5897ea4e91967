"""Utility modules for the swing scoring engine."""

from swing_scoring.utils.logging_config import LoggerMixin, get_logger, setup_logging

__all__ = ["setup_logging", "get_logger", "LoggerMixin"]
