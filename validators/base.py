"""Diagnostic types shared by every validator."""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class ValidationError:
    """One finding. ``line`` and ``column`` are 1-based."""
    line: int
    column: int
    message: str
    severity: Severity
    source: str
    category: str = "general"
    suggestion: Optional[str] = None
    code: Optional[Union[int, str]] = None

    @property
    def is_blocking(self) -> bool:
        return self.severity is Severity.ERROR

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            'line': self.line,
            'column': self.column,
            'message': self.message,
            'severity': self.severity.value,
            'source': self.source,
            'category': self.category,
        }
        if self.suggestion is not None:
            result['suggestion'] = self.suggestion
        if self.code is not None:
            result['code'] = self.code
        return result


@dataclass(frozen=True)
class ValidationStats:
    total_errors: int
    errors_by_category: Dict[str, int]
    errors_by_severity: Dict[str, int]
    validation_time_ms: float

    @classmethod
    def from_errors(cls, errors: Iterable[ValidationError], validation_time_ms: float) -> "ValidationStats":
        errors = list(errors)
        return cls(
            total_errors=len(errors),
            errors_by_category=dict(Counter(e.category or 'unknown' for e in errors)),
            errors_by_severity=dict(Counter(e.severity.value for e in errors)),
            validation_time_ms=validation_time_ms,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalErrors': self.total_errors,
            'errorsByCategory': dict(self.errors_by_category),
            'errorsBySeverity': dict(self.errors_by_severity),
            'validationTime': self.validation_time_ms,
        }


@dataclass(frozen=True)
class ValidationResult:
    """Findings in encounter order plus aggregate stats."""
    errors: List[ValidationError] = field(default_factory=list)
    stats: Optional[ValidationStats] = None

    @property
    def is_valid(self) -> bool:
        return not any(e.is_blocking for e in self.errors)

    def by_severity(self, severity: Severity) -> List[ValidationError]:
        return [e for e in self.errors if e.severity is severity]

    def to_dict(self) -> Dict[str, Any]:
        stats = self.stats or ValidationStats.from_errors(self.errors, 0.0)
        return {
            'errors': [e.to_dict() for e in self.errors],
            'stats': stats.to_dict(),
        }
