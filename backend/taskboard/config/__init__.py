"""
Taskboard - Configuration
"""
from .settings import Settings, DatabaseSettings, ServerSettings, LoggingSettings, settings
from .logging import (
    setup_logging,
    get_logger,
    log_error,
    request_id_var,
    JSONFormatter,
    ColoredFormatter,
)

__all__ = [
    "Settings",
    "DatabaseSettings",
    "ServerSettings",
    "LoggingSettings",
    "settings",
    # Logging
    "setup_logging",
    "get_logger",
    "log_error",
    "request_id_var",
    "JSONFormatter",
    "ColoredFormatter",
]
