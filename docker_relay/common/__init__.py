"""Shared configuration, exceptions and logging"""

from .config import RelayConfig, ExecutorConfig, BackupConfig, get_config
from .exceptions import (
    RelayError,
    ConfigurationError,
    ValidationError,
    CommandExecutionError,
    ProjectError,
    BackupError,
)
from .logging_setup import configure_logging

__all__ = [
    "RelayConfig",
    "ExecutorConfig",
    "BackupConfig",
    "get_config",
    "RelayError",
    "ConfigurationError",
    "ValidationError",
    "CommandExecutionError",
    "ProjectError",
    "BackupError",
    "configure_logging",
]
