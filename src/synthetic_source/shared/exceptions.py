"""
Custom exceptions for the synthetic source.

Every failure in this package is a configuration problem: generation itself
is a pure function of valid inputs, so there is nothing to retry.
"""

from typing import Any


class SyntheticSourceError(Exception):
    """Base exception for all synthetic source errors."""

    pass


class ConfigurationError(SyntheticSourceError, ValueError):
    """Exception raised when options or distribution parameters are invalid.

    Raised eagerly while samplers and models are constructed, never while
    records are being generated.
    """

    def __init__(
        self,
        message: str,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        validation_errors: list[str] | None = None,
    ):
        self.field_name = field_name
        self.invalid_value = invalid_value
        self.validation_errors = validation_errors or []

        error_parts = [message]

        if field_name:
            error_parts.append(f"Field: {field_name}")

        if invalid_value is not None:
            error_parts.append(f"Value: {invalid_value}")

        if validation_errors:
            error_parts.extend(
                [f"Validation error: {error}" for error in validation_errors]
            )

        super().__init__(" | ".join(error_parts))
