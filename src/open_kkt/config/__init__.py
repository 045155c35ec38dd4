"""
Configuration module
"""

from open_kkt.config.open_api_config import (
    OpenApiConfig,
    PartialOpenApiConfig,
    LogLevel,
    ENV_VAR_MAPPING,
    ConfigDefaults,
)
from open_kkt.config.config_loader import ConfigLoader
from open_kkt.config.config_validator import (
    ConfigValidator,
    ValidationResult,
    ValidationErrorDetail,
)

__all__ = [
    "OpenApiConfig",
    "PartialOpenApiConfig",
    "LogLevel",
    "ENV_VAR_MAPPING",
    "ConfigDefaults",
    "ConfigLoader",
    "ConfigValidator",
    "ValidationResult",
    "ValidationErrorDetail",
]
