"""Logging configuration for the account linking platform.

Consistent, configurable logging with environment-based control over
verbosity and output format.
"""

import logging
import logging.config
from enum import Enum
from typing import Any, Dict, Optional

from .settings import LinkingSettings, get_settings


class LogVerbosity(str, Enum):
    """Log verbosity modes."""
    QUIET = "QUIET"      # Only errors and critical
    NORMAL = "NORMAL"    # Configured log level
    VERBOSE = "VERBOSE"  # Info level logging
    DEBUG = "DEBUG"      # Full debug logging


FORMATS = {
    "simple": "%(asctime)s - %(levelname)s - %(message)s",
    "detailed": "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    "json": '{"time":"%(asctime)s","level":"%(levelname)s","module":"%(name)s","message":"%(message)s"}',
}


def get_effective_level(log_level: str, verbosity: str) -> str:
    """Map verbosity mode and configured level to the effective log level."""
    try:
        mode = LogVerbosity(verbosity.upper())
    except ValueError:
        mode = LogVerbosity.NORMAL
    
    if mode is LogVerbosity.QUIET:
        return "ERROR"
    if mode is LogVerbosity.VERBOSE:
        return "INFO"
    if mode is LogVerbosity.DEBUG:
        return "DEBUG"
    return log_level.upper()


class LoggingConfig:
    """Logging configuration manager."""
    
    # Vendor modules that should only log errors
    ERROR_ONLY_MODULES = [
        "keycloak",
        "httpx",
        "httpcore",
        "urllib3",
        "asyncio",
    ]
    
    @classmethod
    def build(cls, settings: LinkingSettings) -> Dict[str, Any]:
        """Build a dictConfig dictionary from settings."""
        level = get_effective_level(settings.log_level, settings.log_verbosity)
        
        logging_config: Dict[str, Any] = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": FORMATS[settings.log_format],
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": level,
                "handlers": ["console"],
            },
            "loggers": {},
        }
        
        for module in cls.ERROR_ONLY_MODULES:
            logging_config["loggers"][module] = {
                "level": "ERROR",
                "handlers": ["console"],
                "propagate": False,
            }
        
        return logging_config
    
    @classmethod
    def configure(cls, settings: Optional[LinkingSettings] = None) -> None:
        """Configure logging from settings (environment when omitted)."""
        settings = settings or get_settings()
        logging_config = cls.build(settings)
        logging.config.dictConfig(logging_config)
        
        logger = logging.getLogger(__name__)
        logger.debug(f"Logging configured: level={logging_config['root']['level']}, format={settings.log_format}")


def setup_logging(settings: Optional[LinkingSettings] = None) -> None:
    """Setup logging configuration.
    
    Should be called once at application startup.
    """
    LoggingConfig.configure(settings)
