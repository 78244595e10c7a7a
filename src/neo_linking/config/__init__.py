"""Configuration for the account linking platform."""

from .settings import LinkingSettings, get_settings
from .logging_config import LoggingConfig, LogVerbosity, setup_logging

__all__ = [
    "LinkingSettings",
    "get_settings",
    "LoggingConfig",
    "LogVerbosity",
    "setup_logging",
]
