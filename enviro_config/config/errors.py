"""
Configuration Errors
====================

Exception types raised while loading and validating environment configuration.
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .schema import ValidationResult


class EnviroConfigError(Exception):
    """Base class for all enviro_config errors."""


class EnvironmentValidationError(EnviroConfigError):
    """Raised when the merged environment does not satisfy the configured schema."""

    def __init__(self, message: str, result: Optional["ValidationResult"] = None):
        super().__init__(f"Environment validation error: {message}")
        self.result = result


__all__ = ["EnviroConfigError", "EnvironmentValidationError"]
