"""
Markup normalization: raw SVG -> JSX-safe SVG.

Every rewrite only touches attribute names (a name directly followed by ``=``)
and produces text the same rewrite no longer matches, so normalization is
idempotent.
"""

import re

SVG_ROOT_PREFIX = "<svg"
DEFAULT_SVG_OPEN = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">'

_XML_DECLARATION = re.compile(r"<\?xml[^>]*\?>")
_COMMENT = re.compile(r"<!--[\s\S]*?-->")

# Attribute must not be the tail of a longer name (data-class=, xlink:for=)
_ATTR_START = r"(?<![\w:-])"

CLASS_ATTRIBUTE = ("class", "className")

HYPHENATED_ATTRIBUTES = {
    'stroke-width': 'strokeWidth',
    'fill-rule': 'fillRule',
    'clip-rule': 'clipRule',
    'stroke-linecap': 'strokeLinecap',
    'stroke-linejoin': 'strokeLinejoin',
    'stroke-miterlimit': 'strokeMiterlimit',
    'stroke-dasharray': 'strokeDasharray',
    'stroke-dashoffset': 'strokeDashoffset',
    'stroke-opacity': 'strokeOpacity',
    'fill-opacity': 'fillOpacity',
    'stop-color': 'stopColor',
    'stop-opacity': 'stopOpacity',
    'clip-path': 'clipPath',
    'font-family': 'fontFamily',
    'font-size': 'fontSize',
    'font-weight': 'fontWeight',
    'text-anchor': 'textAnchor',
    'dominant-baseline': 'dominantBaseline',
}

LABEL_ATTRIBUTES = {
    'for': 'htmlFor',
    'tabindex': 'tabIndex',
}


def _rename_attribute(markup: str, source: str, target: str) -> str:
    pattern = re.compile(_ATTR_START + re.escape(source) + r"(?=\s*=)")
    return pattern.sub(target, markup)


def normalize_markup(markup: str) -> str:
    """Clean an SVG fragment and rewrite attribute names for JSX.

    Strips XML declarations and comments, guarantees a single ``<svg>`` root,
    then renames ``class``, hyphenated presentation attributes and
    ``for``/``tabindex``, in that order. Never raises.
    """
    cleaned = markup or ''
    # Removing one block can splice a new one together, so repeat until stable
    while _XML_DECLARATION.search(cleaned) or _COMMENT.search(cleaned):
        cleaned = _COMMENT.sub('', _XML_DECLARATION.sub('', cleaned))
    cleaned = cleaned.strip()

    if not cleaned.startswith(SVG_ROOT_PREFIX):
        cleaned = f"{DEFAULT_SVG_OPEN}{cleaned}</svg>"

    cleaned = _rename_attribute(cleaned, *CLASS_ATTRIBUTE)
    for source, target in HYPHENATED_ATTRIBUTES.items():
        cleaned = _rename_attribute(cleaned, source, target)
    for source, target in LABEL_ATTRIBUTES.items():
        cleaned = _rename_attribute(cleaned, source, target)

    return cleaned


def to_html_attributes(markup: str) -> str:
    """Map JSX attribute names back to plain markup names for template dialects."""
    result = _rename_attribute(markup, CLASS_ATTRIBUTE[1], CLASS_ATTRIBUTE[0])
    for source, target in HYPHENATED_ATTRIBUTES.items():
        result = _rename_attribute(result, target, source)
    for source, target in LABEL_ATTRIBUTES.items():
        result = _rename_attribute(result, target, source)
    return result
