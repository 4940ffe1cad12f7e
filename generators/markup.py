"""Helpers for splitting the root <svg> element and laying out markup."""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

_ROOT_TAG = re.compile(r"<svg\b([^>]*?)(/?)>", re.S)
_ROOT_CLOSE = re.compile(r"</svg>\s*$")
_ATTRIBUTE = re.compile(r"""([A-Za-z_:][\w:.-]*)\s*=\s*("[^"]*"|'[^']*'|\{[^}]*\})""")
_TOKEN = re.compile(r"<[^>]+>|[^<]+")

# Root attributes that become component props
PROP_ATTRIBUTES = ('className', 'width', 'height', 'fill', 'stroke')


@dataclass(frozen=True)
class RootElement:
    """The root <svg> split into its attributes and inner markup."""
    attributes: Tuple[Tuple[str, str], ...]
    inner: str

    def value(self, name: str) -> Optional[str]:
        for key, raw in self.attributes:
            if key == name:
                return raw[1:-1] if raw[:1] in ('"', "'") else raw
        return None

    def without(self, names) -> Tuple[Tuple[str, str], ...]:
        return tuple((k, v) for k, v in self.attributes if k not in names)


def split_root(markup: str) -> RootElement:
    """Split normalized markup (which always starts with ``<svg``) into root and body."""
    match = _ROOT_TAG.search(markup)
    if not match:
        return RootElement(attributes=(), inner=markup.strip())
    attributes = tuple((m.group(1), m.group(2)) for m in _ATTRIBUTE.finditer(match.group(1)))
    if match.group(2):
        return RootElement(attributes=attributes, inner='')
    inner = _ROOT_CLOSE.sub('', markup[match.end():])
    return RootElement(attributes=attributes, inner=inner.strip())


def render_attributes(attributes) -> str:
    return ''.join(f" {name}={value}" for name, value in attributes)


def layout_markup(markup: str, indent: int = 0, step: int = 2) -> List[str]:
    """One element per line, nested by depth. Text-only elements stay inline."""
    tokens = [t.group(0) for t in _TOKEN.finditer(markup)]
    tokens = [t.strip() for t in tokens if t.strip()]
    lines: List[str] = []
    depth = 0
    i = 0
    while i < len(tokens):
        token = tokens[i]
        prefix = ' ' * (indent + depth * step)
        if token.startswith('</'):
            depth = max(0, depth - 1)
            lines.append(' ' * (indent + depth * step) + token)
        elif token.startswith('<') and not token.endswith('/>'):
            closes_inline = (
                i + 2 < len(tokens)
                and not tokens[i + 1].startswith('<')
                and tokens[i + 2].startswith('</')
            )
            if closes_inline:
                lines.append(prefix + ''.join(tokens[i:i + 3]))
                i += 3
                continue
            lines.append(prefix + token)
            depth += 1
        else:
            lines.append(prefix + token)
        i += 1
    return lines


def to_kebab_case(name: str) -> str:
    """``IconButton`` -> ``icon-button``."""
    kebab = re.sub(r"(?<=[a-z0-9])([A-Z])", r"-\1", name)
    kebab = re.sub(r"(?<=[A-Z])([A-Z][a-z])", r"-\1", kebab)
    return re.sub(r"[^a-zA-Z0-9-]+", '-', kebab).strip('-').lower() or 'component'


def default_literal(value: Optional[str]) -> Optional[str]:
    """Render a root attribute value as a JS default: numbers bare, the rest quoted."""
    if value is None:
        return None
    if re.fullmatch(r"\d+(\.\d+)?", value):
        return value
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def class_default(root: RootElement) -> str:
    """The root's own className as a quoted default, ``''`` when it has none."""
    value = root.value('className') or ''
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"
