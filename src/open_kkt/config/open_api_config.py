"""
Open API Configuration Types and Schema
Type-safe configuration objects for the cash register SDK
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Log levels understood by the SDK logger"""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ConfigDefaults:
    """Default configuration values"""
    TIMEOUT = 30000
    LOG_LEVEL = LogLevel.DEBUG
    ENABLE_AUDIT_LOG = True


# Environment variable mapping
ENV_VAR_MAPPING = {
    "OPEN_API_ACCOUNT": "account",
    "OPEN_API_APP_ID": "app_id",
    "OPEN_API_SECRET": "secret",
    "OPEN_API_TIMEOUT": "timeout",
    "OPEN_API_CACHE_PATH": "cache_path",
    "OPEN_API_LOG_PATH": "log_path",
    "OPEN_API_LOG_LEVEL": "log_level",
    "OPEN_API_ENABLE_AUDIT_LOG": "enable_audit_log",
}


class OpenApiConfig(BaseModel):
    """
    Main Open API configuration class
    Credentials are fixed for the lifetime of a client built from it.
    """

    # Required - Integration credentials
    account: str = Field(
        ...,
        description="Open API account URL; resource names are appended to it",
        min_length=1
    )
    app_id: str = Field(
        ...,
        description="app_id of the integration",
        min_length=1
    )
    secret: str = Field(
        ...,
        description="Secret key of the integration",
        min_length=1,
        repr=False
    )

    # Optional - Transport settings
    timeout: int = Field(
        default=ConfigDefaults.TIMEOUT,
        description="Request timeout in milliseconds",
        ge=1000,
        le=300000
    )

    # Optional - Persistence and logging
    cache_path: Optional[str] = Field(
        default=None,
        description="Directory for the file-backed token cache"
    )
    log_path: Optional[str] = Field(
        default=None,
        description="Directory for daily log files"
    )
    log_level: LogLevel = Field(
        default=ConfigDefaults.LOG_LEVEL,
        description="Minimum level written by the SDK logger"
    )
    enable_audit_log: bool = Field(
        default=ConfigDefaults.ENABLE_AUDIT_LOG,
        description="Enable HTTP audit entries"
    )

    model_config = {
        "str_strip_whitespace": True,
        "frozen": True,
    }

    @field_validator("account")
    @classmethod
    def validate_account(cls, v: str) -> str:
        """Validate account is an HTTP(S) URL ending with a slash"""
        if not v.startswith(("http://", "https://")):
            raise ValueError("account must be a valid HTTP/HTTPS URL")
        if not v.endswith("/"):
            v = v + "/"
        return v


class PartialOpenApiConfig(BaseModel):
    """
    Partial configuration for merging from multiple sources
    All fields are optional to allow partial configuration
    """

    account: Optional[str] = None
    app_id: Optional[str] = None
    secret: Optional[str] = None
    timeout: Optional[int] = None
    cache_path: Optional[str] = None
    log_path: Optional[str] = None
    log_level: Optional[LogLevel] = None
    enable_audit_log: Optional[bool] = None

    model_config = {
        "str_strip_whitespace": True,
        "extra": "forbid",
    }
