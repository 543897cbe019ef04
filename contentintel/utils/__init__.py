"""
Utility modules for configuration, logging, and error handling.
"""

from contentintel.utils.errors import (
    ContentIntelError,
    ConfigurationError,
    StoreError,
    ModelLoadError,
    AnalysisError,
    EngineTimeoutError,
    CategoryOfflineError,
    AccessDeniedError,
    AdminAuthError,
)
from contentintel.utils.logging import get_logger, setup_logging, setup_logging_from_config, JSONFormatter
from contentintel.utils.config import ConfigManager, load_config

__all__ = [
    "ContentIntelError",
    "ConfigurationError",
    "StoreError",
    "ModelLoadError",
    "AnalysisError",
    "EngineTimeoutError",
    "CategoryOfflineError",
    "AccessDeniedError",
    "AdminAuthError",
    "get_logger",
    "setup_logging",
    "setup_logging_from_config",
    "JSONFormatter",
    "ConfigManager",
    "load_config",
]
