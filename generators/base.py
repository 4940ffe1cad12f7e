"""
Design-node data model shared by the generators.

Figma payloads are loosely typed JSON. Everything here parses them into small,
immutable value objects while tolerating missing or malformed fields: a bad
field degrades to ``None`` (or is dropped) instead of raising.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple


# Fixed output canvas for synthesized markup
CANVAS_WIDTH = 400
CANVAS_HEIGHT = 300

# Vertical offset applied to text primitives to approximate the baseline
TEXT_BASELINE_OFFSET = 16

MAX_DEPTH = 64


class NodeKind(str, Enum):
    """Figma node types the pipeline knows about."""
    DOCUMENT = "DOCUMENT"
    CANVAS = "CANVAS"
    FRAME = "FRAME"
    GROUP = "GROUP"
    SECTION = "SECTION"
    COMPONENT = "COMPONENT"
    COMPONENT_SET = "COMPONENT_SET"
    INSTANCE = "INSTANCE"
    RECTANGLE = "RECTANGLE"
    ELLIPSE = "ELLIPSE"
    TEXT = "TEXT"
    VECTOR = "VECTOR"
    LINE = "LINE"
    STAR = "STAR"
    REGULAR_POLYGON = "REGULAR_POLYGON"
    BOOLEAN_OPERATION = "BOOLEAN_OPERATION"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: Any) -> "NodeKind":
        try:
            return cls(str(value).upper())
        except ValueError:
            return cls.OTHER


EXPORTABLE_KINDS = (NodeKind.FRAME, NodeKind.COMPONENT)


def _to_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def format_number(value: float) -> str:
    """Render a coordinate without a trailing ``.0`` for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


# ---------------------------------------------------------------------------
# Paint values
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ColorValue:
    """RGBA color with 0-1 channels, as Figma stores it."""
    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 1.0

    @classmethod
    def from_dict(cls, data: Any) -> Optional["ColorValue"]:
        if not isinstance(data, Mapping):
            return None
        channels = [_to_float(data.get(k)) for k in ('r', 'g', 'b')]
        if any(c is None for c in channels):
            return None
        alpha = _to_float(data.get('a'))
        return cls(*channels, a=1.0 if alpha is None else alpha)

    def _channels(self) -> Tuple[int, int, int]:
        return tuple(max(0, min(255, round(c * 255))) for c in (self.r, self.g, self.b))

    @property
    def hex(self) -> str:
        r, g, b = self._channels()
        if self.a < 1:
            alpha = max(0, min(255, round(self.a * 255)))
            return f"#{r:02x}{g:02x}{b:02x}{alpha:02x}"
        return f"#{r:02x}{g:02x}{b:02x}"

    @property
    def rgba(self) -> str:
        r, g, b = self._channels()
        return f"rgba({r}, {g}, {b}, {self.a:.2f})"


@dataclass(frozen=True)
class GradientStop:
    color: ColorValue
    position: float = 0.0


@dataclass(frozen=True)
class Paint:
    """A fill or stroke: either a solid color or a gradient stop list."""
    type: str
    color: Optional[ColorValue] = None
    stops: Tuple[GradientStop, ...] = ()
    opacity: float = 1.0
    visible: bool = True

    @property
    def is_solid(self) -> bool:
        return self.type == 'SOLID' and self.color is not None

    @property
    def is_gradient(self) -> bool:
        return self.type.startswith('GRADIENT_') and bool(self.stops)

    @classmethod
    def from_dict(cls, data: Any) -> Optional["Paint"]:
        if not isinstance(data, Mapping):
            return None
        paint_type = str(data.get('type', '')).upper()
        stops = []
        for raw_stop in data.get('gradientStops') or []:
            if not isinstance(raw_stop, Mapping):
                continue
            color = ColorValue.from_dict(raw_stop.get('color'))
            if color is None:
                continue
            stops.append(GradientStop(color=color, position=_to_float(raw_stop.get('position')) or 0.0))
        opacity = _to_float(data.get('opacity'))
        return cls(
            type=paint_type,
            color=ColorValue.from_dict(data.get('color')),
            stops=tuple(stops),
            opacity=1.0 if opacity is None else opacity,
            visible=data.get('visible', True) is not False,
        )


def parse_paints(raw: Any) -> Tuple[Paint, ...]:
    """Parse a fills/strokes array, dropping entries that are not paints."""
    if not isinstance(raw, list):
        return ()
    paints = (Paint.from_dict(item) for item in raw)
    return tuple(p for p in paints if p is not None)


# ---------------------------------------------------------------------------
# Geometry and text
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BoundingBox:
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_dict(cls, data: Any) -> Optional["BoundingBox"]:
        if not isinstance(data, Mapping):
            return None
        values = [_to_float(data.get(k)) for k in ('x', 'y', 'width', 'height')]
        if any(v is None for v in values):
            return None
        return cls(*values)


@dataclass(frozen=True)
class TextStyle:
    font_family: Optional[str] = None
    font_size: Optional[float] = None
    font_weight: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional["TextStyle"]:
        if not isinstance(data, Mapping):
            return None
        family = data.get('fontFamily')
        return cls(
            font_family=family if isinstance(family, str) else None,
            font_size=_to_float(data.get('fontSize')),
            font_weight=_to_float(data.get('fontWeight')),
        )


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DesignNode:
    """One node of the design tree. Children are owned; there are no parent links."""
    id: str
    name: str
    kind: NodeKind
    type_name: str = ''
    bounding_box: Optional[BoundingBox] = None
    children: Tuple["DesignNode", ...] = ()
    fills: Tuple[Paint, ...] = ()
    strokes: Tuple[Paint, ...] = ()
    visible: bool = True

    @staticmethod
    def from_dict(data: Mapping[str, Any], depth: int = 0) -> "DesignNode":
        """Build a node (and its subtree) from a Figma JSON mapping.

        Never raises for mapping input; children deeper than ``MAX_DEPTH`` are cut.
        """
        raw_type = data.get('type', '')
        kind = NodeKind.parse(raw_type)
        children: Tuple[DesignNode, ...] = ()
        raw_children = data.get('children')
        if isinstance(raw_children, list) and depth < MAX_DEPTH:
            children = tuple(
                DesignNode.from_dict(child, depth + 1)
                for child in raw_children
                if isinstance(child, Mapping)
            )
        common = dict(
            id=str(data.get('id', '')),
            name=str(data.get('name', '')),
            kind=kind,
            type_name=str(raw_type),
            bounding_box=BoundingBox.from_dict(data.get('absoluteBoundingBox')),
            children=children,
            fills=parse_paints(data.get('fills')),
            strokes=parse_paints(data.get('strokes')),
            visible=data.get('visible', True) is not False,
        )
        if kind is NodeKind.TEXT:
            characters = data.get('characters')
            return TextNode(
                **common,
                characters=characters if isinstance(characters, str) else None,
                text_style=TextStyle.from_dict(data.get('style')),
            )
        return DesignNode(**common)

    def walk(self):
        """Yield this node and every descendant in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass(frozen=True)
class TextNode(DesignNode):
    characters: Optional[str] = None
    text_style: Optional[TextStyle] = None


# ---------------------------------------------------------------------------
# File wrapper
# ---------------------------------------------------------------------------

def unwrap_document(data: Any) -> Any:
    """Return the document node from ``node``, ``{document}`` or ``{file: {document}}``."""
    if not isinstance(data, Mapping):
        return data
    if isinstance(data.get('document'), Mapping):
        return data['document']
    file_data = data.get('file')
    if isinstance(file_data, Mapping) and isinstance(file_data.get('document'), Mapping):
        return file_data['document']
    return data


@dataclass(frozen=True)
class DesignFile:
    """A retrieved Figma file: document tree plus pass-through metadata."""
    document: Optional[DesignNode]
    key: Optional[str] = None
    name: Optional[str] = None
    last_modified: Optional[str] = None
    thumbnail_url: Optional[str] = None
    version: Optional[str] = None
    components: Dict[str, Any] = field(default_factory=dict)
    styles: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any, key: Optional[str] = None) -> "DesignFile":
        meta: Mapping[str, Any] = {}
        if isinstance(data, Mapping):
            if isinstance(data.get("file"), Mapping):
                meta = data["file"]
            elif "document" in data:
                meta = data
        root = unwrap_document(data)
        document = DesignNode.from_dict(root) if isinstance(root, Mapping) else None

        def _text(name: str) -> Optional[str]:
            value = meta.get(name)
            return str(value) if value is not None else None

        def _mapping(name: str) -> Dict[str, Any]:
            value = meta.get(name)
            return dict(value) if isinstance(value, Mapping) else {}

        return cls(
            document=document,
            key=key or _text('key'),
            name=_text('name'),
            last_modified=_text('lastModified'),
            thumbnail_url=_text('thumbnailUrl'),
            version=_text('version'),
            components=_mapping('components'),
            styles=_mapping('styles'),
        )

    @property
    def has_metadata(self) -> bool:
        return any((self.key, self.name, self.last_modified))

    def header_lines(self) -> List[str]:
        """Human-readable provenance lines for generated file headers."""
        lines = []
        if self.name:
            lines.append(f'Generated from Figma file "{self.name}"' + (f" ({self.key})" if self.key else ''))
        elif self.key:
            lines.append(f"Generated from Figma file {self.key}")
        if self.last_modified:
            lines.append(f"Last modified: {self.last_modified}")
        if self.thumbnail_url:
            lines.append(f"Thumbnail: {self.thumbnail_url}")
        return lines
