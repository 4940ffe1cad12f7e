"""Design analysis and the weighted quality report attached to each generation."""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from generators.base import EXPORTABLE_KINDS, DesignNode, NodeKind
from generators.config import GenerationConfig
from pipeline.metrics import CodeMetrics, round_half_up
from validators.base import Severity, ValidationResult

CATEGORY_WEIGHTS: Dict[str, float] = {
    'visual': 0.20,
    'code': 0.25,
    'performance': 0.15,
    'accessibility': 0.15,
    'maintainability': 0.15,
    'security': 0.10,
}

LARGE_DESIGN_NODES = 200
_SHAPE_KINDS = (NodeKind.RECTANGLE, NodeKind.ELLIPSE, NodeKind.TEXT)
_UNSAFE_SINKS = re.compile(r"dangerouslySetInnerHTML|innerHTML|v-html|\{@html|\beval\s*\(")
_MEDIA_QUERY = re.compile(r"@media\b")


@dataclass(frozen=True)
class DesignAnalysis:
    components: List[Dict[str, str]] = field(default_factory=list)
    node_count: int = 0
    shape_count: int = 0
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'components': list(self.components),
            'nodeCount': self.node_count,
            'shapeCount': self.shape_count,
            'suggestions': list(self.suggestions),
        }


def analyze_design(document: Optional[DesignNode], config: Optional[GenerationConfig] = None) -> DesignAnalysis:
    """Advisory suggestions about the design tree itself."""
    config = config or GenerationConfig()
    if document is None or not document.children:
        return DesignAnalysis(suggestions=["Provide a design with at least one frame to generate real markup"])

    nodes = list(document.walk())
    components = [
        {'id': n.id, 'name': n.name, 'type': n.kind.value}
        for n in nodes if n.kind in EXPORTABLE_KINDS
    ]
    shapes = [n for n in nodes if n.kind in _SHAPE_KINDS]
    suggestions = []

    if not components:
        suggestions.append("Wrap the design in a frame or component so it can be exported as a unit")
    if any(n.bounding_box is None for n in shapes):
        suggestions.append("Some shapes have no bounding box and were left out of the markup")
    if len(nodes) > LARGE_DESIGN_NODES:
        suggestions.append("Consider splitting the design into smaller components")
    if config.accessibility.color_contrast and any(n.kind is NodeKind.TEXT for n in shapes):
        suggestions.append(f"Verify text color contrast against WCAG {config.accessibility.wcag_level.value}")
    if shapes and all(n.kind is NodeKind.TEXT for n in shapes):
        suggestions.append("The design contains only text; consider exporting it as markup instead of an SVG")

    return DesignAnalysis(
        components=components,
        node_count=len(nodes),
        shape_count=len(shapes),
        suggestions=suggestions,
    )


def _dedupe(items: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


@dataclass(frozen=True)
class QualityReport:
    overall: int
    categories: Dict[str, int]
    issues: List[Dict[str, Any]]
    recommendations: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'overall': self.overall,
            'categories': dict(self.categories),
            'issues': list(self.issues),
            'recommendations': list(self.recommendations),
        }


def build_quality_report(
    metrics: CodeMetrics,
    validation: Mapping[str, ValidationResult],
    sources: Mapping[str, str],
    analysis: DesignAnalysis,
    placeholder: bool = False,
) -> QualityReport:
    """Weighted category scores plus recommendations.

    ``validation`` and ``sources`` are keyed by file name. Recommendations
    from the design analysis are appended and duplicates dropped, keeping
    first occurrence order.
    """
    issues = []
    warnings = 0
    for file_name, result in validation.items():
        for error in result.errors:
            if error.severity is Severity.ERROR:
                issues.append({
                    'file': file_name,
                    'line': error.line,
                    'message': error.message,
                    'category': error.category,
                })
            elif error.severity is Severity.WARNING:
                warnings += 1

    all_source = '\n'.join(sources.values())
    unsafe_sinks = len(_UNSAFE_SINKS.findall(all_source))

    categories = {
        'visual': 50 if placeholder else 90,
        'code': max(0, 100 - 10 * len(issues) - 3 * warnings),
        'performance': metrics.performance,
        'accessibility': metrics.accessibility,
        'maintainability': min(100, metrics.maintainability),
        'security': max(0, 100 - 20 * unsafe_sinks),
    }
    overall = round_half_up(sum(CATEGORY_WEIGHTS[name] * score for name, score in categories.items()))

    recommendations = []
    if placeholder:
        recommendations.append("The design produced no shapes; check the selected node or file")
    if issues:
        recommendations.append("Fix the validation errors reported for the generated files")
    if not _MEDIA_QUERY.search(all_source):
        recommendations.append("Add responsive design patterns")
    if categories['accessibility'] < 70:
        recommendations.append("Implement proper accessibility")
    if categories['maintainability'] < 50:
        recommendations.append("Split the component to improve maintainability")
    if unsafe_sinks:
        recommendations.append("Avoid raw HTML injection in generated components")

    return QualityReport(
        overall=overall,
        categories=categories,
        issues=issues,
        recommendations=_dedupe(recommendations + list(analysis.suggestions)),
    )
