"""
Core Infrastructure - Secure Configuration and Logging

Usage:
    from timetracking.core import get_config, get_logger

    config = get_config()
    ado_config = config.get_ado_config()

    logger = get_logger(__name__)
"""

from ..secure_config import (
    AzureDevOpsConfig,
    ConfigurationError,
    SecureConfig,
    SevenPaceConfig,
    get_config,
    validate_config_on_startup,
)
from .logging_config import get_logger, log_with_context, setup_logging

__all__ = [
    # Configuration
    "get_config",
    "validate_config_on_startup",
    "ConfigurationError",
    "SecureConfig",
    "AzureDevOpsConfig",
    "SevenPaceConfig",
    # Logging
    "get_logger",
    "log_with_context",
    "setup_logging",
]
