"""
Configuration Validator
Validates Open API configuration with clear error messages
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from open_kkt.config.open_api_config import LogLevel


@dataclass
class ValidationErrorDetail:
    """Validation error detail"""
    field: str
    message: str
    value: Optional[Any] = None


@dataclass
class ValidationResult:
    """Validation result"""
    valid: bool
    errors: List[ValidationErrorDetail] = field(default_factory=list)


class ConfigValidator:
    """
    ConfigValidator class
    Provides comprehensive validation for Open API configuration
    """

    def __init__(self) -> None:
        self._errors: List[ValidationErrorDetail] = []

    def validate(self, config: Dict[str, Any]) -> ValidationResult:
        """
        Validate the entire configuration dictionary

        Args:
            config: Configuration dictionary to validate

        Returns:
            ValidationResult with any errors
        """
        self._errors = []

        self._validate_required(config)
        self._validate_formats(config)
        self._validate_ranges(config)
        self._validate_log_level(config)

        return ValidationResult(
            valid=len(self._errors) == 0,
            errors=self._errors.copy()
        )

    def validate_or_raise(self, config: Dict[str, Any]) -> None:
        """
        Validate and raise if invalid

        Raises:
            ValidationError: If configuration is invalid
        """
        from open_kkt.exceptions import ValidationError

        result = self.validate(config)
        if not result.valid:
            error_messages = "; ".join(
                f"{e.field}: {e.message}" for e in result.errors
            )
            raise ValidationError(
                f"Configuration validation failed: {error_messages}",
                field=result.errors[0].field,
            )

    def _validate_required(self, config: Dict[str, Any]) -> None:
        """Validate required fields are present and non-empty"""
        for field_name in ("account", "app_id", "secret"):
            value = config.get(field_name)
            if value is None:
                self._errors.append(ValidationErrorDetail(
                    field=field_name,
                    message=f"{field_name} is required"
                ))
            elif isinstance(value, str) and value.strip() == "":
                self._errors.append(ValidationErrorDetail(
                    field=field_name,
                    message=f"{field_name} cannot be empty",
                    value="[REDACTED]" if field_name == "secret" else value
                ))

    def _validate_formats(self, config: Dict[str, Any]) -> None:
        """Validate field formats"""
        account = config.get("account")
        if isinstance(account, str) and account.strip():
            if not account.startswith(("http://", "https://")):
                self._errors.append(ValidationErrorDetail(
                    field="account",
                    message="account must be a valid HTTP/HTTPS URL",
                    value=account
                ))

        for path_field in ("cache_path", "log_path"):
            path_value = config.get(path_field)
            if path_value is not None and path_value != "":
                if not isinstance(path_value, str):
                    self._errors.append(ValidationErrorDetail(
                        field=path_field,
                        message=f"{path_field} must be a string",
                        value=path_value
                    ))

    def _validate_ranges(self, config: Dict[str, Any]) -> None:
        """Validate numeric ranges"""
        timeout = config.get("timeout")
        if timeout is not None:
            if not isinstance(timeout, (int, float)) or timeout <= 0:
                self._errors.append(ValidationErrorDetail(
                    field="timeout",
                    message="timeout must be a positive number (milliseconds)",
                    value=timeout
                ))
            elif timeout < 1000:
                self._errors.append(ValidationErrorDetail(
                    field="timeout",
                    message="timeout should be at least 1000ms for reliable operation",
                    value=timeout
                ))
            elif timeout > 300000:
                self._errors.append(ValidationErrorDetail(
                    field="timeout",
                    message="timeout should not exceed 300000ms (5 minutes)",
                    value=timeout
                ))

    def _validate_log_level(self, config: Dict[str, Any]) -> None:
        """Validate log level setting"""
        log_level = config.get("log_level")
        if log_level is not None:
            valid_levels = [level.value for level in LogLevel]
            level_value = log_level.value if isinstance(log_level, LogLevel) else log_level
            if level_value not in valid_levels:
                self._errors.append(ValidationErrorDetail(
                    field="log_level",
                    message=f"log_level must be one of: {', '.join(valid_levels)}",
                    value=log_level
                ))
