"""User-facing error information built from exceptions."""

import traceback
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError as ConfigValidationError

from generators.synthesizer import MissingInputError


class ErrorType(str, Enum):
    FIGMA = "figma"
    NETWORK = "network"
    VALIDATION = "validation"
    GENERATION = "generation"
    GENERAL = "general"


ERROR_SUGGESTIONS = {
    ErrorType.FIGMA: "Check your Figma URL and ensure the file is publicly accessible or you have the right permissions.",
    ErrorType.NETWORK: "Check your internet connection and try again.",
    ErrorType.VALIDATION: "Please check your code for syntax errors and try again.",
    ErrorType.GENERATION: "There was an issue generating the code. Please try with a different design.",
    ErrorType.GENERAL: "An unexpected error occurred. Please try again.",
}


def classify_error(message: str, exc: Optional[BaseException] = None) -> ErrorType:
    """Pick the error type from the exception class, then from the message text."""
    if isinstance(exc, httpx.HTTPStatusError):
        return ErrorType.FIGMA
    if isinstance(exc, (httpx.TimeoutException, httpx.NetworkError)):
        return ErrorType.NETWORK
    if isinstance(exc, ConfigValidationError):
        return ErrorType.VALIDATION
    if isinstance(exc, MissingInputError):
        return ErrorType.GENERATION

    lowered = message.lower()
    if "figma" in lowered:
        return ErrorType.FIGMA
    if "network" in lowered or "fetch" in lowered:
        return ErrorType.NETWORK
    if "validation" in lowered:
        return ErrorType.VALIDATION
    if "generation" in lowered:
        return ErrorType.GENERATION
    return ErrorType.GENERAL


@dataclass(frozen=True)
class ErrorInfo:
    """Message for the user, details and stack for an expandable panel."""
    message: str
    details: Optional[str] = None
    stack: Optional[str] = None
    code: Optional[str] = None
    type: ErrorType = ErrorType.GENERAL

    @property
    def suggestion(self) -> str:
        return ERROR_SUGGESTIONS[self.type]

    @classmethod
    def from_exception(cls, exc: BaseException, code: Optional[str] = None) -> "ErrorInfo":
        message = str(exc) or type(exc).__name__
        stack = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        details = f"{type(exc).__module__}.{type(exc).__qualname__}"
        if exc.__cause__ is not None:
            details += f" (caused by {type(exc.__cause__).__name__}: {exc.__cause__})"
        if code is None and isinstance(exc, httpx.HTTPStatusError):
            code = str(exc.response.status_code)
        return cls(
            message=message,
            details=details,
            stack=stack,
            code=code,
            type=classify_error(message, exc),
        )

    def to_dict(self, include_stack: bool = False) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            'message': self.message,
            'type': self.type.value,
            'suggestion': self.suggestion,
        }
        if self.code:
            result['code'] = self.code
        if self.details:
            result['details'] = self.details
        if include_stack and self.stack:
            result['stack'] = self.stack
        return result
