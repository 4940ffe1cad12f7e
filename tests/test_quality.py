"""Tests for design analysis and quality reports."""
import pytest

from generators.base import DesignNode
from generators.config import GenerationConfig
from pipeline.metrics import BundleEstimate, CodeMetrics
from pipeline.quality import CATEGORY_WEIGHTS, DesignAnalysis, analyze_design, build_quality_report
from validators.base import Severity, ValidationError, ValidationResult


def _metrics(performance=100, accessibility=80, maintainability=120):
    return CodeMetrics(
        complexity=1,
        maintainability=maintainability,
        testability=100,
        performance=performance,
        accessibility=accessibility,
        bundle=BundleEstimate(size=10, gzip_size=3, modules=1),
    )


def _finding(severity, category='syntax'):
    return ValidationError(line=1, column=1, message='problem', severity=severity, source='css', category=category)


class TestAnalyzeDesign:
    """Advisory suggestions about the design tree."""

    def test_empty_document(self):
        analysis = analyze_design(None)
        assert analysis.suggestions == ["Provide a design with at least one frame to generate real markup"]
        assert analysis.node_count == 0

    def test_frame_with_shapes(self, document_data):
        document = DesignNode.from_dict(document_data['document'])
        analysis = analyze_design(document)
        assert analysis.components == [{'id': '1:1', 'name': 'Profile Card', 'type': 'FRAME'}]
        assert analysis.node_count == 6
        assert analysis.shape_count == 3
        assert analysis.suggestions == ["Verify text color contrast against WCAG AA"]

    def test_contrast_check_follows_config(self, document_data):
        document = DesignNode.from_dict(document_data['document'])
        config = GenerationConfig.from_options({'accessibility': {'colorContrast': False}})
        assert analyze_design(document, config).suggestions == []

    def test_loose_shapes_without_frame(self, rectangle_node):
        document = DesignNode.from_dict({'type': 'DOCUMENT', 'children': [rectangle_node, {'type': 'ELLIPSE'}]})
        suggestions = analyze_design(document).suggestions
        assert "Wrap the design in a frame or component so it can be exported as a unit" in suggestions
        assert "Some shapes have no bounding box and were left out of the markup" in suggestions

    def test_text_only(self, text_node):
        document = DesignNode.from_dict({'type': 'DOCUMENT', 'children': [text_node]})
        assert any('only text' in s for s in analyze_design(document).suggestions)

    def test_large_design(self):
        children = [{'type': 'RECTANGLE', 'absoluteBoundingBox': {'x': 0, 'y': 0, 'width': 1, 'height': 1}}] * 250
        document = DesignNode.from_dict({'type': 'FRAME', 'children': children})
        assert "Consider splitting the design into smaller components" in analyze_design(document).suggestions


class TestQualityReport:
    """Weighted categories and recommendations."""

    def test_clean_generation(self):
        report = build_quality_report(
            _metrics(), {'Icon.tsx': ValidationResult()}, {'Icon.css': '@media (max-width: 768px) {}'},
            DesignAnalysis(),
        )
        assert report.categories == {
            'visual': 90, 'code': 100, 'performance': 100,
            'accessibility': 80, 'maintainability': 100, 'security': 100,
        }
        expected = sum(CATEGORY_WEIGHTS[k] * v for k, v in report.categories.items())
        assert report.overall == int(expected + 0.5)
        assert report.recommendations == []
        assert report.issues == []

    def test_weights_sum_to_one(self):
        assert sum(CATEGORY_WEIGHTS.values()) == pytest.approx(1.0)

    def test_findings_lower_code_score(self):
        validation = {
            'Icon.tsx': ValidationResult([_finding(Severity.ERROR), _finding(Severity.WARNING)]),
            'Icon.css': ValidationResult([_finding(Severity.WARNING), _finding(Severity.INFO)]),
        }
        report = build_quality_report(_metrics(), validation, {'Icon.tsx': ''}, DesignAnalysis())
        assert report.categories['code'] == 100 - 10 - 6
        assert report.issues == [{'file': 'Icon.tsx', 'line': 1, 'message': 'problem', 'category': 'syntax'}]
        assert "Fix the validation errors reported for the generated files" in report.recommendations

    def test_placeholder_and_recommendations(self):
        analysis = DesignAnalysis(suggestions=["Add responsive design patterns", "Check the frame"])
        report = build_quality_report(
            _metrics(accessibility=40), {}, {'Icon.tsx': '<div dangerouslySetInnerHTML={x} />'}, analysis,
            placeholder=True,
        )
        assert report.categories['visual'] == 50
        assert report.categories['security'] == 80
        assert report.recommendations == [
            "The design produced no shapes; check the selected node or file",
            "Add responsive design patterns",
            "Implement proper accessibility",
            "Avoid raw HTML injection in generated components",
            "Check the frame",
        ]

    def test_to_dict(self):
        report = build_quality_report(_metrics(), {}, {}, DesignAnalysis())
        data = report.to_dict()
        assert set(data) == {'overall', 'categories', 'issues', 'recommendations'}
        assert 0 <= data['overall'] <= 100
