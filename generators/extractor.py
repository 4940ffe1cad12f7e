"""
Design-tree extraction: Figma node tree -> flat SVG markup fragment.

Malformed or partial design data never aborts generation. It degrades to a
visible placeholder so the rest of the pipeline still runs.
"""

import logging
from html import escape
from typing import Any, List, Mapping, Tuple, Union

from generators.base import (
    CANVAS_HEIGHT, CANVAS_WIDTH, EXPORTABLE_KINDS, TEXT_BASELINE_OFFSET,
    DesignNode, NodeKind, TextNode, format_number, unwrap_document,
)

logger = logging.getLogger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"

PLACEHOLDER_LABEL = "Generated from Figma"
ERROR_LABEL = "SVG Generation Error"

# Fixed placeholder paint for extracted primitives
SHAPE_FILL = "#f0f0f0"
ELLIPSE_FILL = "#e0e0e0"
SHAPE_STROKE = "#ccc"
TEXT_FILL = "#333"


class NodeExtractionError(ValueError):
    """A single node could not be turned into a primitive."""


def _svg_open() -> str:
    return (
        f'<svg width="{CANVAS_WIDTH}" height="{CANVAS_HEIGHT}" '
        f'viewBox="0 0 {CANVAS_WIDTH} {CANVAS_HEIGHT}" xmlns="{SVG_NAMESPACE}">'
    )


def default_placeholder() -> str:
    """Placeholder returned when the design yields no primitives."""
    return f"""{_svg_open()}
  <rect x="50" y="50" width="300" height="200" fill="#f0f0f0" stroke="#ccc" stroke-width="2" rx="8"/>
  <text x="200" y="160" text-anchor="middle" font-family="Arial, sans-serif" font-size="16" fill="#666">{PLACEHOLDER_LABEL}</text>
</svg>"""


def error_placeholder(message: str) -> str:
    """Placeholder returned when the traversal itself fails."""
    return f"""{_svg_open()}
  <rect x="10" y="10" width="380" height="280" fill="none" stroke="#ddd" stroke-width="1"/>
  <text x="200" y="160" text-anchor="middle" font-family="Arial, sans-serif" font-size="14" fill="#999">{ERROR_LABEL}</text>
  <text x="200" y="180" text-anchor="middle" font-family="Arial, sans-serif" font-size="12" fill="#666">{escape(message, quote=False)}</text>
</svg>"""


# ---------------------------------------------------------------------------
# Primitive emission
# ---------------------------------------------------------------------------

def _emit_primitive(node: DesignNode, offset: Tuple[float, float]) -> str:
    """Emit the markup primitive for one node, or '' for non-shape kinds."""
    if node.kind not in (NodeKind.RECTANGLE, NodeKind.ELLIPSE, NodeKind.TEXT):
        return ''

    box = node.bounding_box
    if box is None:
        raise NodeExtractionError(f"{node.kind.value} node '{node.id}' has no bounding box")

    dx, dy = offset
    n = format_number

    if node.kind is NodeKind.RECTANGLE:
        return (
            f'<rect x="{n(box.x + dx)}" y="{n(box.y + dy)}" width="{n(box.width)}" height="{n(box.height)}" '
            f'fill="{SHAPE_FILL}" stroke="{SHAPE_STROKE}" stroke-width="1"/>'
        )

    if node.kind is NodeKind.ELLIPSE:
        cx = box.x + box.width / 2
        cy = box.y + box.height / 2
        return (
            f'<ellipse cx="{n(cx + dx)}" cy="{n(cy + dy)}" rx="{n(box.width / 2)}" ry="{n(box.height / 2)}" '
            f'fill="{ELLIPSE_FILL}" stroke="{SHAPE_STROKE}" stroke-width="1"/>'
        )

    characters = node.characters if isinstance(node, TextNode) and node.characters else "Text"
    return (
        f'<text x="{n(box.x + dx)}" y="{n(box.y + dy + TEXT_BASELINE_OFFSET)}" '
        f'font-family="Arial, sans-serif" font-size="14" fill="{TEXT_FILL}">{escape(characters, quote=False)}</text>'
    )


def _extract_shapes(nodes: Tuple[DesignNode, ...], shapes: List[str], offset: Tuple[float, float] = (0, 0)) -> None:
    """Depth-first, pre-order walk. The offset is passed through unchanged."""
    for index, node in enumerate(nodes):
        try:
            primitive = _emit_primitive(node, offset)
            if primitive:
                shapes.append(primitive)
        except NodeExtractionError as e:
            logger.warning("Skipping node %d (%s): %s", index, node.name or node.id, e)
        _extract_shapes(node.children, shapes, offset)


def extract_markup(design_data: Any) -> str:
    """Convert a design tree into an SVG fragment on a fixed 400x300 canvas.

    Accepts a bare node, ``{document}`` or ``{file: {document}}``. Never raises.
    """
    try:
        if not isinstance(design_data, Mapping):
            logger.warning("Invalid Figma data structure: %s", type(design_data).__name__)
            return default_placeholder()

        document = unwrap_document(design_data)
        if not isinstance(document.get('children'), list) or not document['children']:
            logger.warning("No document children found, using placeholder markup")
            return default_placeholder()

        root = DesignNode.from_dict(document)
        logger.debug("Processing design data with %d top-level children", len(root.children))

        shapes: List[str] = []
        _extract_shapes(root.children, shapes)

        if not shapes:
            logger.warning("No shapes were extracted, using placeholder markup")
            return default_placeholder()

        return _svg_open() + ''.join(shapes) + '</svg>'

    except Exception as e:
        logger.exception("SVG extraction failed")
        return error_placeholder(str(e) or type(e).__name__)


def is_placeholder(markup: str) -> bool:
    """Whether ``markup`` is one of the fallback fragments rather than extracted shapes."""
    return markup == default_placeholder() or ERROR_LABEL in markup


# ---------------------------------------------------------------------------
# Node queries
# ---------------------------------------------------------------------------

def _as_node(node: Union[DesignNode, Mapping[str, Any]]) -> DesignNode:
    if isinstance(node, DesignNode):
        return node
    return DesignNode.from_dict(unwrap_document(node))


def list_exportable_node_ids(node: Union[DesignNode, Mapping[str, Any]]) -> List[str]:
    """Ids of FRAME and COMPONENT nodes in pre-order, for per-node export requests."""
    return [n.id for n in _as_node(node).walk() if n.kind in EXPORTABLE_KINDS]


def collect_palette(node: Union[DesignNode, Mapping[str, Any]], limit: int = 8) -> List[str]:
    """Unique visible solid fill colors in pre-order, as hex strings."""
    palette: List[str] = []
    for current in _as_node(node).walk():
        for paint in current.fills:
            if not (paint.visible and paint.is_solid):
                continue
            color = paint.color.hex
            if color not in palette:
                palette.append(color)
            if len(palette) >= limit:
                return palette
    return palette
