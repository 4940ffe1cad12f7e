"""Static validators for generated or edited source text."""

from validators.base import Severity, ValidationError, ValidationResult, ValidationStats
from validators.code_validator import CodeValidator, validate

__all__ = [
    "CodeValidator",
    "Severity",
    "ValidationError",
    "ValidationResult",
    "ValidationStats",
    "validate",
]
