"""
Logging infrastructure for Sprout.

Provides structured logging and decorators for tracking operations.
"""

from .logger import (
    SproutLogger,
    get_sprout_logger,
    initialize_logging,
    get_logger_instance,
    log_repository_operation,
)

from .decorators import (
    track_operation,
    performance_monitor,
)

__all__ = [
    # Logger
    "SproutLogger",
    "get_sprout_logger",
    "initialize_logging",
    "get_logger_instance",
    "log_repository_operation",
    # Decorators
    "track_operation",
    "performance_monitor",
]
