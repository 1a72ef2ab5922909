"""
Logging infrastructure for Sprout.

Provides structured logging with:
- Component-specific loggers (objects, staging, checkout, merge, ...)
- Optional rotating file sinks inside the control directory
- Repository operation tracking
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from loguru import logger

# Components that get their own log file when file logging is enabled
FILE_COMPONENTS = ("objects", "checkout", "merge")

DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

logger.configure(extra={"component": "system"})


class SproutLogger:
    """
    Logger setup for a Sprout invocation.

    Features:
    - Console sink on stderr
    - Main, error, and per-component log files with rotation and retention
    - Component-bound child loggers
    """

    def __init__(
        self,
        log_dir: Optional[Path] = None,
        rotation: str = "10 MB",
        retention: str = "1 month",
        level: str = "WARNING",
        format_string: Optional[str] = None,
        enable_file_logging: bool = False,
        enable_console_logging: bool = True,
    ):
        """
        Initialize the Sprout logger.

        Args:
            log_dir: Directory for log files
            rotation: When to rotate log files
            retention: How long to keep old logs
            level: Console log level
            format_string: Custom format string
            enable_file_logging: Whether to log to files
            enable_console_logging: Whether to log to stderr
        """
        self.log_dir = log_dir or Path("logs")
        self.rotation = rotation
        self.retention = retention
        self.level = level
        self.format_string = format_string or DEFAULT_FORMAT

        # Remove default and previously added handlers
        logger.remove()

        if enable_console_logging:
            logger.add(
                sys.stderr,
                format=self.format_string,
                level=level,
                colorize=True,
            )

        if enable_file_logging:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self._add_file_handlers()

        self.logger = logger.bind(component="system")

    def _add_file_handlers(self) -> None:
        """Add file handlers for the main log, errors, and components."""
        logger.add(
            self.log_dir / "sprout.log",
            format=self.format_string,
            level="DEBUG",
            rotation=self.rotation,
            retention=self.retention,
        )

        for component in FILE_COMPONENTS:
            logger.add(
                self.log_dir / f"{component}.log",
                format=self.format_string,
                level="DEBUG",
                rotation=self.rotation,
                retention=self.retention,
                filter=lambda record, c=component: record["extra"].get("component") == c,
            )

        logger.add(
            self.log_dir / "errors.log",
            format=self.format_string,
            level="ERROR",
            rotation=self.rotation,
            retention=self.retention,
        )

    def get_logger(self, component: str) -> Any:
        """
        Get a logger bound to a specific component.

        Args:
            component: Component name (e.g., "objects", "merge")

        Returns:
            Logger instance bound to the component
        """
        return logger.bind(component=component)


def get_sprout_logger(component: str = "system") -> Any:
    """
    Get a component-specific logger.

    Args:
        component: Component name

    Returns:
        Logger instance

    Example:
        >>> log = get_sprout_logger("merge")
        >>> log.info("Merged feature", commit_id="3f2a...")
    """
    return logger.bind(component=component)


def log_repository_operation(
    logger_instance: Any, operation: str, **kwargs: Any
) -> None:
    """
    Log a repository operation event.

    Args:
        logger_instance: Logger to use
        operation: Operation name (e.g., "commit", "merge_complete")
        **kwargs: Additional context
    """
    logger_instance.debug(
        f"Repository operation: {operation}",
        operation=operation,
        timestamp=datetime.now().isoformat(),
        **kwargs,
    )


# Global logger instance
_sprout_logger: Optional[SproutLogger] = None


def initialize_logging(
    log_dir: Optional[Path] = None, level: str = "WARNING", **kwargs: Any
) -> SproutLogger:
    """
    Initialize the Sprout logging system.

    This should be called once at startup.

    Args:
        log_dir: Directory for log files
        level: Console log level
        **kwargs: Additional configuration for SproutLogger

    Returns:
        Configured SproutLogger instance
    """
    global _sprout_logger
    _sprout_logger = SproutLogger(log_dir=log_dir, level=level, **kwargs)
    return _sprout_logger


def get_logger_instance() -> Optional[SproutLogger]:
    """Get the global logger instance."""
    return _sprout_logger
