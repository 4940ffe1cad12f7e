"""
Markup tag balance validator.

A stack machine over tag occurrences. Opening tags are pushed unless the
element closes itself before its next ``>``; closing tags pop. It only looks
at tag names, so it works on JSX, Vue/Svelte single-file components and
HTML alike.
"""

import bisect
import re
from dataclasses import dataclass
from typing import List, Tuple

from validators.base import Severity, ValidationError

# Opening ``<Name`` only when not preceded by an identifier, so generic type
# arguments such as ``React.FC<Props>`` or ``Array<string>`` are skipped.
# Closing ``</Name`` always counts, including right after text content.
_TAG = re.compile(r"(?<![\w.$)\]])<([A-Za-z][\w.:-]*)|</([A-Za-z][\w.:-]*)")
_JSX_ATTRIBUTE = re.compile(r"(?<![\w:-])(class|for)=")

VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta",
    "param", "source", "track", "wbr",
})

_JSX_REPLACEMENTS = {
    'class': ("Use 'className' instead of 'class' in JSX", "Replace 'class' with 'className'"),
    'for': ("Use 'htmlFor' instead of 'for' in JSX", "Replace 'for' with 'htmlFor'"),
}


@dataclass(frozen=True)
class OpenTag:
    name: str
    line: int
    column: int


class _Positions:
    """Offset -> (line, column), both 1-based."""

    def __init__(self, text: str):
        self.starts = [0] + [m.end() for m in re.finditer('\n', text)]

    def __call__(self, offset: int) -> Tuple[int, int]:
        index = bisect.bisect_right(self.starts, offset) - 1
        return index + 1, offset - self.starts[index] + 1


def _closes_itself(text: str, start: int) -> bool:
    """Whether the tag starting before ``start`` ends with ``/>``. Arrows (``=>``) are skipped."""
    position = start
    while True:
        end = text.find('>', position)
        if end == -1:
            return False
        if end > 0 and text[end - 1] == '=':
            position = end + 1
            continue
        return text[end - 1] == '/'


class MarkupTagValidator:
    """Tag balance checks; in the JSX dialect also flags ``class=`` and ``for=``."""

    def __init__(self, jsx: bool = True, check_attributes: bool = True):
        self.jsx = jsx
        self.check_attributes = check_attributes and jsx

    @property
    def source(self) -> str:
        return "jsx" if self.jsx else "markup"

    def validate(self, code: str) -> List[ValidationError]:
        errors: List[ValidationError] = []
        position = _Positions(code)
        stack: List[OpenTag] = []

        for match in _TAG.finditer(code):
            closing = match.group(2) is not None
            name = match.group(2) if closing else match.group(1)
            line, column = position(match.start())

            if not closing:
                if _closes_itself(code, match.end()):
                    continue
                if not self.jsx and name.lower() in VOID_ELEMENTS:
                    continue
                stack.append(OpenTag(name, line, column))
                continue

            if not stack:
                errors.append(self._error(
                    line, column, f"Unexpected closing tag: {name}",
                    "Remove the extra closing tag or add a matching opening tag",
                ))
                continue

            top = stack[-1]
            if top.name == name:
                stack.pop()
                continue

            errors.append(self._error(
                line, column, f"Mismatched tags: expected {top.name}, found {name}",
                f"Change to </{top.name}> or fix the opening tag",
            ))
            # Unwind to the matching ancestor so one mistake yields one error
            if any(tag.name == name for tag in stack):
                while stack.pop().name != name:
                    pass
            else:
                stack.pop()

        if self.check_attributes:
            for match in _JSX_ATTRIBUTE.finditer(code):
                line, column = position(match.start())
                message, suggestion = _JSX_REPLACEMENTS[match.group(1)]
                errors.append(self._error(line, column, message, suggestion, category="attribute"))
            errors.sort(key=lambda e: (e.line, e.column))

        for tag in stack:
            errors.append(self._error(
                tag.line, tag.column, f"Unclosed tag: {tag.name}", f"Add closing tag </{tag.name}>",
            ))

        return errors

    def _error(self, line: int, column: int, message: str, suggestion: str,
               category: str = "syntax") -> ValidationError:
        return ValidationError(
            line=line,
            column=column,
            message=message,
            severity=Severity.ERROR,
            source=self.source,
            category=category,
            suggestion=suggestion,
        )
