"""
Stylesheet validator.

A line-oriented state machine: a brace-depth counter tracks whether a line
sits inside a rule, selectors are checked when a rule opens from depth 0 and
declarations are checked against a property allow-list and a small value
grammar. It never builds a stylesheet AST.
"""

import re
from typing import FrozenSet, List, Optional, Sequence, Tuple

from validators.base import Severity, ValidationError

SOURCE = "css"

CSS_PROPERTIES: Tuple[str, ...] = (
    # Layout
    "display", "position", "top", "right", "bottom", "left", "inset", "z-index",
    "float", "clear", "overflow", "overflow-x", "overflow-y", "clip", "visibility",
    "opacity", "filter", "vertical-align", "isolation",
    # Box model
    "width", "height", "min-width", "min-height", "max-width", "max-height",
    "margin", "margin-top", "margin-right", "margin-bottom", "margin-left",
    "padding", "padding-top", "padding-right", "padding-bottom", "padding-left",
    "border", "border-width", "border-style", "border-color", "border-top",
    "border-right", "border-bottom", "border-left", "border-radius",
    "box-sizing", "box-shadow", "outline", "outline-offset",
    # Typography
    "font", "font-family", "font-size", "font-weight", "font-style", "font-variant",
    "line-height", "letter-spacing", "word-spacing", "text-align", "text-decoration",
    "text-transform", "text-indent", "text-shadow", "text-overflow", "white-space",
    "word-wrap", "word-break", "list-style",
    # Colors and backgrounds
    "color", "background", "background-color", "background-image", "background-repeat",
    "background-position", "background-size", "background-attachment",
    "background-clip", "background-origin",
    # Flexbox
    "flex", "flex-direction", "flex-wrap", "flex-flow", "justify-content", "align-items",
    "align-content", "align-self", "flex-grow", "flex-shrink", "flex-basis", "order",
    # Grid
    "grid", "grid-template", "grid-template-columns", "grid-template-rows",
    "grid-template-areas", "grid-gap", "grid-column-gap", "grid-row-gap",
    "grid-column", "grid-row", "grid-area", "justify-items",
    # Animation and transitions
    "transition", "transition-property", "transition-duration",
    "transition-timing-function", "transition-delay", "animation", "animation-name",
    "animation-duration", "animation-timing-function", "animation-delay",
    "animation-iteration-count", "animation-direction", "animation-fill-mode",
    "animation-play-state",
    # Transform
    "transform", "transform-origin", "transform-style", "perspective",
    "perspective-origin", "backface-visibility",
    # Modern layout
    "gap", "row-gap", "column-gap", "place-items", "place-content", "place-self",
    "aspect-ratio", "object-fit", "object-position", "scroll-behavior",
    "scroll-snap-type", "scroll-snap-align",
    # Interaction and generated content
    "cursor", "pointer-events", "user-select", "content", "will-change",
    # SVG presentation
    "fill", "stroke", "stroke-width",
)

_PROPERTY_SET: FrozenSet[str] = frozenset(CSS_PROPERTIES)

VENDOR_PREFIXES = ("-webkit-", "-moz-", "-ms-", "-o-")

MAX_SUGGESTION_DISTANCE = 2
MAX_SUGGESTIONS = 3

_SELECTOR = re.compile(r"""^[\w\-#.\[\]:(),\s>+~*="'^$|&\\]+$""")

_HEX_COLOR = re.compile(r"^#([0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_RGB_COLOR = re.compile(
    r"^rgba?\(\s*[\d.]+%?\s*,\s*[\d.]+%?\s*,\s*[\d.]+%?\s*(,\s*[\d.]+%?\s*)?\)$"
    r"|^rgba?\(\s*[\d.]+%?(\s+[\d.]+%?){2}\s*(/\s*[\d.]+%?\s*)?\)$"
)
_HSL_COLOR = re.compile(
    r"^hsla?\(\s*[\d.]+(deg|turn|rad)?\s*,\s*[\d.]+%\s*,\s*[\d.]+%\s*(,\s*[\d.]+%?\s*)?\)$"
    r"|^hsla?\(\s*[\d.]+(deg|turn|rad)?(\s+[\d.]+%){2}\s*(/\s*[\d.]+%?\s*)?\)$"
)
NAMED_COLORS = frozenset({
    "black", "white", "red", "green", "blue", "yellow", "orange", "purple", "pink",
    "gray", "grey", "silver", "maroon", "navy", "teal", "olive", "lime", "aqua",
    "fuchsia", "transparent", "currentcolor", "none",
})

_LENGTH = re.compile(
    r"^[+-]?(\d+(\.\d+)?|\.\d+)(px|em|rem|%|vh|vw|vmin|vmax|dvh|svh|lvh|ch|ex|cm|mm|in|pt|pc|fr)$"
)
_ZERO = re.compile(r"^[+-]?0(\.0+)?$")
_UNITLESS = re.compile(r"^[+-]?(\d+(\.\d+)?|\.\d+)$")
LENGTH_KEYWORDS = frozenset({
    "auto", "none", "fit-content", "min-content", "max-content", "thin", "medium", "thick",
})
GLOBAL_KEYWORDS = frozenset({"inherit", "initial", "unset", "revert"})

# Values built from these are resolved later; their grammar is not checked
_DEFERRED_VALUE = re.compile(r"var\(|calc\(|min\(|max\(|clamp\(|env\(|\$|#\{")
_IMPORTANT = re.compile(r"\s*!\s*important\s*$", re.I)

_VALUE_SUGGESTIONS = {
    "color": "Use hex (#000000), rgb(0,0,0), or named colors",
    "background-color": "Use hex (#000000), rgb(0,0,0), or named colors",
    "width": "Use length units like px, em, rem, % or auto",
    "height": "Use length units like px, em, rem, % or auto",
    "margin": "Use length units like px, em, rem, % or auto",
    "padding": "Use length units like px, em, rem, % or auto",
    "font-size": "Use length units like px, em, rem or keywords like small, medium, large",
    "display": "Use values like block, inline, flex, grid, none",
}


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance using the full (len(a)+1) x (len(b)+1) table."""
    rows, cols = len(a) + 1, len(b) + 1
    matrix = [[0] * cols for _ in range(rows)]
    for i in range(rows):
        matrix[i][0] = i
    for j in range(cols):
        matrix[0][j] = j
    for i in range(1, rows):
        for j in range(1, cols):
            if a[i - 1] == b[j - 1]:
                matrix[i][j] = matrix[i - 1][j - 1]
            else:
                matrix[i][j] = 1 + min(matrix[i - 1][j - 1], matrix[i][j - 1], matrix[i - 1][j])
    return matrix[-1][-1]


def similar_properties(prop: str, candidates: Sequence[str] = CSS_PROPERTIES) -> List[str]:
    """Up to three allow-listed names within edit distance 2, closest first."""
    scored = []
    for candidate in candidates:
        distance = levenshtein_distance(prop, candidate)
        if distance <= MAX_SUGGESTION_DISTANCE:
            scored.append((distance, candidate))
    scored.sort(key=lambda item: item[0])
    return [name for _, name in scored[:MAX_SUGGESTIONS]]


def is_valid_property(prop: str) -> bool:
    if prop.startswith("--"):
        return len(prop) > 2
    if prop in _PROPERTY_SET:
        return True
    for prefix in VENDOR_PREFIXES:
        if prop.startswith(prefix):
            return prop[len(prefix):] in _PROPERTY_SET
    return False


def is_valid_selector(selector: str) -> bool:
    return bool(selector) and bool(_SELECTOR.match(selector))


def is_valid_color(value: str) -> bool:
    lowered = value.lower()
    if lowered in NAMED_COLORS or lowered in GLOBAL_KEYWORDS:
        return True
    return bool(_HEX_COLOR.match(value) or _RGB_COLOR.match(lowered) or _HSL_COLOR.match(lowered))


def is_valid_length(value: str, unitless: bool = False) -> bool:
    """Each whitespace-separated token must be a length, so shorthands pass."""
    tokens = value.split()
    if not tokens:
        return False
    if len(tokens) == 1 and tokens[0].lower() in GLOBAL_KEYWORDS:
        return True
    for token in tokens:
        lowered = token.lower()
        if lowered in LENGTH_KEYWORDS or _ZERO.match(token) or _LENGTH.match(lowered):
            continue
        if unitless and (_UNITLESS.match(token) or lowered == "normal"):
            continue
        return False
    return True


def _strip_comments(line: str, in_comment: bool, line_comments: bool) -> Tuple[str, bool]:
    """Blank out comment text, keeping columns stable."""
    out = []
    i = 0
    while i < len(line):
        if in_comment:
            end = line.find("*/", i)
            if end == -1:
                out.append(' ' * (len(line) - i))
                return ''.join(out), True
            out.append(' ' * (end + 2 - i))
            i = end + 2
            in_comment = False
            continue
        start = line.find("/*", i)
        if line_comments:
            slashes = line.find("//", i)
            if slashes != -1 and (start == -1 or slashes < start) and line[slashes - 1:slashes] != ':':
                out.append(line[i:slashes])
                return ''.join(out), False
        if start == -1:
            out.append(line[i:])
            break
        out.append(line[i:start])
        i = start
        in_comment = True
    return ''.join(out), in_comment


class CSSValidator:
    """Validate plain CSS, or SCSS when ``scss`` is set (``//`` comments allowed)."""

    def __init__(self, scss: bool = False):
        self.scss = scss

    def validate(self, css: str) -> List[ValidationError]:
        errors: List[ValidationError] = []
        lines = css.split('\n')

        depth = 0
        selector_lines: List[str] = []
        in_comment = False

        for index, raw_line in enumerate(lines):
            line_number = index + 1
            text, in_comment = _strip_comments(raw_line, in_comment, self.scss)
            line = text.strip()
            if not line:
                continue

            declarations: Optional[str] = None
            declaration_offset = 0

            if '{' in line:
                brace = text.index('{')
                if depth <= 0:
                    selector = ' '.join(selector_lines + [text[:brace].strip()]).strip()
                    selector_lines = []
                    error = self._check_selector(selector, line_number)
                    if error:
                        errors.append(error)
                last_brace = text.rindex('{')
                declarations = text[last_brace + 1:]
                declaration_offset = last_brace + 1
            elif depth > 0 and ':' in line:
                declarations = text
            elif depth <= 0 and '}' not in line:
                # Outside a rule: either part of a multi-line selector or a
                # statement such as @import or an SCSS variable
                if line.endswith(';'):
                    selector_lines = []
                else:
                    selector_lines.append(line)

            if declarations is not None:
                body = declarations.split('}', 1)[0]
                found = self._check_declarations(body, declaration_offset, line_number, errors)
                if found and not line.endswith(';') and not line.endswith('}'):
                    errors.append(ValidationError(
                        line=line_number,
                        column=len(raw_line.rstrip()),
                        message="Missing semicolon",
                        severity=Severity.WARNING,
                        source=SOURCE,
                        category="syntax",
                        suggestion="Add semicolon at the end of the declaration",
                    ))

            depth += line.count('{') - line.count('}')

        if depth != 0:
            errors.append(ValidationError(
                line=len(lines),
                column=1,
                message="Unmatched braces in CSS",
                severity=Severity.ERROR,
                source=SOURCE,
                category="syntax",
                suggestion="Ensure all opening braces have corresponding closing braces",
            ))

        return errors

    def _check_selector(self, selector: str, line_number: int) -> Optional[ValidationError]:
        if selector.startswith('@'):
            return None
        if is_valid_selector(selector):
            return None
        message = f"Invalid CSS selector: {selector}" if selector else "Missing CSS selector"
        return ValidationError(
            line=line_number,
            column=1,
            message=message,
            severity=Severity.ERROR,
            source=SOURCE,
            category="selector",
            suggestion="Check selector syntax and ensure proper nesting",
        )

    def _check_declarations(self, body: str, offset: int, line_number: int,
                            errors: List[ValidationError]) -> bool:
        """Check every ``prop: value`` in ``body``; returns whether any was found."""
        found = False
        position = offset
        for chunk in body.split(';'):
            chunk_start = position
            position += len(chunk) + 1
            if ':' not in chunk:
                continue
            colon = chunk.index(':')
            prop = chunk[:colon].strip()
            if not prop:
                continue
            found = True
            column = chunk_start + (len(chunk) - len(chunk.lstrip())) + 1
            value_column = chunk_start + colon + 2
            value = _IMPORTANT.sub('', chunk[colon + 1:]).strip()
            self._check_declaration(prop, value, line_number, column, value_column, errors)
        return found

    def _check_declaration(self, prop: str, value: str, line_number: int, column: int,
                           value_column: int, errors: List[ValidationError]) -> None:
        # SCSS variables and nested selectors are not declarations
        if prop.startswith(('$', '&', '@')):
            return
        name = prop.lower()

        if not is_valid_property(name):
            similar = similar_properties(name)
            if similar:
                suggestion = f"Did you mean one of: {', '.join(similar)}?"
            else:
                suggestion = "Check the property name for typos or add a vendor prefix"
            errors.append(ValidationError(
                line=line_number,
                column=column,
                message=f"Unknown CSS property: {prop}",
                severity=Severity.WARNING,
                source=SOURCE,
                category="property",
                suggestion=suggestion,
            ))

        value_error = self._check_value(name, value)
        if value_error:
            errors.append(ValidationError(
                line=line_number,
                column=value_column,
                message=value_error,
                severity=Severity.ERROR,
                source=SOURCE,
                category="value",
                suggestion=_VALUE_SUGGESTIONS.get(name, "Check CSS specification for valid values"),
            ))

    def _check_value(self, prop: str, value: str) -> Optional[str]:
        if not value:
            return "Empty value"
        if prop.startswith("--") or _DEFERRED_VALUE.search(value):
            return None

        if "color" in prop or (prop == "background" and len(value.split()) == 1 and '(' not in value):
            if not is_valid_color(value):
                return "Invalid color value"

        if any(part in prop for part in ("width", "height", "margin", "padding")):
            unitless = prop in ("line-height", "stroke-width")
            if not is_valid_length(value, unitless=unitless):
                return "Invalid length value"

        return None
