"""Language dispatch for the validators."""

import logging
import time
from typing import List, Optional

from validators.base import Severity, ValidationError, ValidationResult, ValidationStats
from validators.css_validator import CSSValidator
from validators.markup_validator import MarkupTagValidator
from validators.typescript_validator import Compiler, TypeScriptValidator

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = (
    "css", "scss", "typescript", "tsx", "javascript", "jsx", "html", "vue", "svelte", "angular",
)


class UnsupportedLanguageError(ValueError):
    pass


class CodeValidator:
    """Run the validators that apply to ``language`` and collect their findings.

    ``css``/``scss`` run the stylesheet validator, ``typescript``/``tsx`` the
    type checker plus JSX tag checks, ``javascript``/``jsx`` JSX tag checks only,
    ``html``/``vue``/``svelte`` tag balance only and ``angular`` the type checker
    plus tag balance.
    """

    def __init__(self, compiler: Optional[Compiler] = None):
        self.css_validator = CSSValidator()
        self.scss_validator = CSSValidator(scss=True)
        self.ts_validator = TypeScriptValidator(compiler)
        self.jsx_validator = MarkupTagValidator(jsx=True)
        self.markup_validator = MarkupTagValidator(jsx=False)

    async def validate(self, code: str, language: str) -> ValidationResult:
        start = time.perf_counter()
        language = (language or '').lower()
        errors: List[ValidationError] = []

        try:
            errors = await self._dispatch(code, language)
        except Exception as e:
            logger.exception("Validation error for %s source", language)
            errors = [ValidationError(
                line=1,
                column=1,
                message=f"Validation failed due to internal error: {e}",
                severity=Severity.ERROR,
                source=language or "unknown",
                category="system",
                suggestion="Report this input; the validator could not process it",
            )]

        elapsed_ms = (time.perf_counter() - start) * 1000
        return ValidationResult(errors=errors, stats=ValidationStats.from_errors(errors, elapsed_ms))

    async def _dispatch(self, code: str, language: str) -> List[ValidationError]:
        if language == "css":
            return self.css_validator.validate(code)
        if language == "scss":
            return self.scss_validator.validate(code)
        if language in ("typescript", "tsx"):
            type_errors = await self.ts_validator.validate(code, "component.tsx")
            return type_errors + self.jsx_validator.validate(code)
        if language in ("javascript", "jsx"):
            return self.jsx_validator.validate(code)
        if language in ("html", "vue", "svelte"):
            return self.markup_validator.validate(code)
        if language == "angular":
            type_errors = await self.ts_validator.validate(code, "component.ts")
            return type_errors + self.markup_validator.validate(code)
        raise UnsupportedLanguageError(
            f"Unsupported language '{language}'. Use one of: {', '.join(SUPPORTED_LANGUAGES)}"
        )


_default_validator: Optional[CodeValidator] = None


def get_validator() -> CodeValidator:
    global _default_validator
    if _default_validator is None:
        _default_validator = CodeValidator()
    return _default_validator


async def validate(code: str, language: str) -> ValidationResult:
    """Validate ``code`` with the shared default validator."""
    return await get_validator().validate(code, language)
