"""
Configuration management for Sprout.

This module provides centralized configuration for all system components:
- Repository layout and naming defaults
- Commit metadata formatting
- Logging settings
"""

import os
from typing import Literal, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables from .env file
load_dotenv()


LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class RepositoryConfig(BaseModel):
    """Configuration for repository layout and commit metadata."""

    control_dir: str = Field(
        default=".sprout",
        description="Name of the control directory created at the repository root",
    )
    default_branch: str = Field(
        default="master", description="Branch created by init"
    )
    initial_message: str = Field(
        default="initial commit", description="Message of the root commit"
    )
    timestamp_format: str = Field(
        default="%a %b %d %H:%M:%S %Y %z",
        description="strftime format used for commit timestamps",
    )
    short_id_length: int = Field(
        default=7, gt=0, le=40, description="Length of abbreviated ids in output"
    )


class LogConfig(BaseModel):
    """Configuration for logging system."""

    level: LogLevel = Field(default="WARNING", description="Console logging level")
    format: str = Field(
        default="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{extra[component]}</cyan> - "
        "<level>{message}</level>",
        description="Log message format",
    )
    rotation: str = Field(default="10 MB", description="Log file rotation size")
    retention: str = Field(default="1 month", description="Log file retention period")
    log_dir: str = Field(
        default="logs",
        description="Directory for log files, relative to the control directory",
    )
    enable_file_logging: bool = Field(
        default=False, description="Whether to enable file logging"
    )
    enable_console_logging: bool = Field(
        default=True, description="Whether to enable console logging"
    )


class Config(BaseModel):
    """Main configuration object for Sprout."""

    repository: RepositoryConfig = Field(default_factory=RepositoryConfig)
    logging: LogConfig = Field(default_factory=LogConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from environment variables."""
        return cls(
            repository=RepositoryConfig(
                control_dir=os.getenv("SPROUT_DIR", ".sprout"),
                default_branch=os.getenv("SPROUT_DEFAULT_BRANCH", "master"),
            ),
            logging=LogConfig(
                level=cast(LogLevel, os.getenv("SPROUT_LOG_LEVEL", "WARNING")),
                enable_file_logging=os.getenv("SPROUT_LOG_FILE", "").lower()
                in ("1", "true", "yes"),
            ),
        )


# Global configuration instance
config = Config.from_env()
