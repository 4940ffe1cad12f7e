"""Shared test fixtures for the codegen pipeline tests."""
from typing import List

import pytest

from validators.typescript_validator import Compiler, CompilerDiagnostic


def _solid(r, g, b, a=1.0):
    return {'type': 'SOLID', 'visible': True, 'color': {'r': r, 'g': g, 'b': b, 'a': a}, 'opacity': 1}


@pytest.fixture
def rectangle_node():
    """Figma RECTANGLE node with a solid fill."""
    return {
        'id': '1:2',
        'name': 'Card Background',
        'type': 'RECTANGLE',
        'absoluteBoundingBox': {'x': 10, 'y': 20, 'width': 200, 'height': 100},
        'fills': [_solid(1, 0, 0)],
        'strokes': [],
        'children': [],
    }


@pytest.fixture
def ellipse_node():
    """Figma ELLIPSE node, 50x30 at (0, 0)."""
    return {
        'id': '1:3',
        'name': 'Avatar',
        'type': 'ELLIPSE',
        'absoluteBoundingBox': {'x': 0, 'y': 0, 'width': 50, 'height': 30},
        'fills': [_solid(0, 0, 1)],
        'children': [],
    }


@pytest.fixture
def text_node():
    """Figma TEXT node with characters that need escaping."""
    return {
        'id': '1:4',
        'name': 'Title',
        'type': 'TEXT',
        'characters': 'Save & <Continue>',
        'absoluteBoundingBox': {'x': 5, 'y': 5, 'width': 120, 'height': 20},
        'style': {'fontFamily': 'Inter', 'fontSize': 14, 'fontWeight': 600},
        'fills': [_solid(0, 0, 0)],
        'children': [],
    }


@pytest.fixture
def frame_node(rectangle_node, ellipse_node, text_node):
    """FRAME containing a rectangle, a GROUP with an ellipse, and a text node."""
    return {
        'id': '1:1',
        'name': 'Profile Card',
        'type': 'FRAME',
        'absoluteBoundingBox': {'x': 0, 'y': 0, 'width': 300, 'height': 200},
        'fills': [_solid(1, 1, 1)],
        'children': [
            rectangle_node,
            {
                'id': '1:5',
                'name': 'Group',
                'type': 'GROUP',
                'children': [ellipse_node],
            },
            text_node,
        ],
    }


@pytest.fixture
def document_data(frame_node):
    """``{document}`` payload as returned by the Figma files endpoint."""
    return {
        'name': 'Design System',
        'lastModified': '2024-05-01T10:00:00Z',
        'thumbnailUrl': 'https://example.com/thumb.png',
        'version': '42',
        'document': {
            'id': '0:0',
            'name': 'Document',
            'type': 'DOCUMENT',
            'children': [frame_node],
        },
        'components': {'1:1': {'name': 'Profile Card'}},
        'styles': {},
    }


@pytest.fixture
def icon_markup():
    return '<svg><rect/></svg>'


class FakeCompiler(Compiler):
    """Compiler backend returning canned diagnostics, or raising."""

    def __init__(self, diagnostics: List[CompilerDiagnostic] = (), error: Exception = None):
        self.diagnostics = list(diagnostics)
        self.error = error
        self.calls = []

    async def check(self, source, file_name):
        self.calls.append((source, file_name))
        if self.error is not None:
            raise self.error
        return list(self.diagnostics)


@pytest.fixture
def fake_compiler():
    return FakeCompiler()
