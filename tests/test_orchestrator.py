"""Tests for the generation orchestrator."""
import asyncio
import re

import pytest

from generators.config import Framework
from pipeline import orchestrator
from pipeline.orchestrator import CodeGenerationEngine, Stage, generate_preview, language_for
from validators import CodeValidator

CHECKPOINTS = [
    (10, "Analyzing design..."),
    (30, "Planning structure..."),
    (50, "Generating components..."),
    (70, "Validating code..."),
    (85, "Assessing quality..."),
    (95, "Finalizing..."),
    (100, "Complete!"),
]


@pytest.fixture
def engine(fake_compiler):
    return CodeGenerationEngine(CodeValidator(compiler=fake_compiler))


class TestGenerateCode:
    """Full runs through every stage."""

    @pytest.mark.asyncio
    async def test_progress_checkpoints(self, engine, document_data):
        progress = []
        await engine.generate_code(document_data, {'framework': 'react'}, lambda p, s: progress.append((p, s)))
        assert progress == CHECKPOINTS

    @pytest.mark.asyncio
    async def test_result_files_and_structure(self, engine, document_data):
        result = await engine.generate_code(document_data, {'typescript': True})

        root = 'src/components/DesignSystem'
        assert result.structure == {
            'root': root,
            'components': [f'{root}/DesignSystem.tsx'],
            'styles': [f'{root}/DesignSystem.css'],
            'types': [f'{root}/DesignSystem.types.ts'],
            'tests': [],
        }
        assert [f.path for f in result.files] == [
            f'{root}/DesignSystem.tsx', f'{root}/DesignSystem.css', f'{root}/DesignSystem.types.ts',
        ]
        component = result.files[0]
        assert component.size == len(component.content.encode('utf-8'))
        assert '<rect' in component.content
        assert 'Generated from Figma file "Design System"' in component.content
        assert set(result.validation) == {f.name for f in result.files}

    @pytest.mark.asyncio
    async def test_component_name_from_config(self, engine, frame_node):
        result = await engine.generate_code(frame_node, {'framework': 'vue', 'componentName': 'profile card'})
        assert result.artifacts.component_name == 'ProfileCard'
        assert result.files[0].name == 'ProfileCard.vue'

    @pytest.mark.asyncio
    async def test_placeholder_design(self, engine):
        result = await engine.generate_code({})
        assert result.artifacts.component_name == 'GeneratedComponent'
        assert 'Generated from Figma' in result.artifacts.component_source
        assert result.quality.categories['visual'] == 50
        assert "Provide a design with at least one frame to generate real markup" in result.quality.recommendations

    @pytest.mark.asyncio
    async def test_svg_markup_override(self, engine, document_data):
        result = await engine.generate_code(document_data, svg_markup='<svg><circle r="4"/></svg>')
        assert '<circle r="4"/>' in result.artifacts.component_source
        assert '<rect' not in result.artifacts.component_source

    @pytest.mark.asyncio
    async def test_build_status_from_findings(self, engine, document_data):
        clean = await engine.generate_code(document_data)
        assert clean.build_status == 'success'
        assert clean.build_logs == []
        assert clean.is_valid

    @pytest.mark.asyncio
    async def test_build_logs(self, engine, document_data, monkeypatch):
        def broken_stylesheet(name, config, palette=()):
            return '.a {\n  colr: red;\n  width: wide;\n}\n'

        monkeypatch.setattr(orchestrator, 'synthesize', _with_stylesheet(broken_stylesheet))
        result = await engine.generate_code(document_data)
        assert result.build_status == 'error'
        assert {(log['level'], log['file']) for log in result.build_logs} == {
            ('warn', 'DesignSystem.css'), ('error', 'DesignSystem.css'),
        }
        assert not result.is_valid

    @pytest.mark.asyncio
    async def test_unit_test_scaffold_is_listed(self, engine, frame_node):
        result = await engine.generate_code(frame_node, {'testing': {'unitTests': True}, 'componentName': 'Card'})
        assert result.structure['tests'] == ['src/components/Card/Card.test.tsx']

    @pytest.mark.asyncio
    async def test_to_dict(self, engine, document_data):
        data = (await engine.generate_code(document_data)).to_dict()
        assert re.fullmatch(r'gen_\d+_[0-9a-f]{9}', data['id'])
        assert data['config']['framework'] == 'react'
        assert data['buildStatus'] == 'success'
        assert data['metrics']['bundle']['modules'] == 2
        assert set(data['quality']['categories']) == {
            'visual', 'code', 'performance', 'accessibility', 'maintainability', 'security',
        }
        assert data['generationTimeMs'] >= 0


def _with_stylesheet(make_stylesheet):
    synthesize = orchestrator.synthesize

    def wrapped(markup, component_name, config=None, **kwargs):
        kwargs['stylesheet'] = make_stylesheet(component_name, config)
        return synthesize(markup, component_name, config, **kwargs)

    return wrapped


class TestSessions:
    """Session bookkeeping on success, failure and callback errors."""

    @pytest.mark.asyncio
    async def test_queue_empty_after_success(self, engine, document_data):
        await engine.generate_code(document_data)
        assert engine.active_sessions == []

    @pytest.mark.asyncio
    async def test_session_visible_while_running(self, engine, document_data):
        seen = []
        await engine.generate_code(document_data, None, lambda p, s: seen.append(list(engine.active_sessions)))
        assert all(len(sessions) == 1 for sessions in seen)
        assert engine.active_sessions == []

    @pytest.mark.asyncio
    async def test_failure_is_raised_and_session_released(self, engine, document_data, monkeypatch):
        def explode(*args, **kwargs):
            raise RuntimeError('template failure')

        monkeypatch.setattr(orchestrator, 'synthesize', explode)
        progress = []
        with pytest.raises(RuntimeError, match='template failure'):
            await engine.generate_code(document_data, None, lambda p, s: progress.append(p))
        assert engine.active_sessions == []
        assert progress == [10, 30, 50]

    @pytest.mark.asyncio
    async def test_callback_errors_are_ignored(self, engine, document_data):
        def callback(progress, status):
            raise ValueError('listener went away')

        result = await engine.generate_code(document_data, None, callback)
        assert result.build_status == 'success'
        assert engine.active_sessions == []

    @pytest.mark.asyncio
    async def test_concurrent_sessions_are_independent(self, engine, document_data, frame_node):
        first, second = await asyncio.gather(
            engine.generate_code(document_data, {'framework': 'svelte'}),
            engine.generate_code(frame_node, {'framework': 'angular', 'componentName': 'Card'}),
        )
        assert first.id != second.id
        assert first.files[0].name == 'DesignSystem.svelte'
        assert second.files[0].name == 'Card.component.ts'
        assert engine.active_sessions == []

    def test_stage_values(self):
        assert Stage.FAILED.value == 'failed'


class TestHelpers:
    @pytest.mark.parametrize('file_name,framework,expected', [
        ('Icon.css', Framework.REACT, 'css'),
        ('Icon.scss', Framework.VUE, 'scss'),
        ('Icon.tsx', Framework.REACT, 'typescript'),
        ('Icon.jsx', Framework.REACT, 'javascript'),
        ('Icon.styles.js', Framework.REACT, 'javascript'),
        ('Icon.vue', Framework.VUE, 'vue'),
        ('Icon.svelte', Framework.SVELTE, 'svelte'),
        ('Icon.component.ts', Framework.ANGULAR, 'angular'),
        ('Icon.types.ts', Framework.ANGULAR, 'typescript'),
    ])
    def test_language_for(self, file_name, framework, expected):
        assert language_for(file_name, framework) == expected

    def test_preview_escapes_source(self):
        preview = generate_preview('<svg onload="x()">' + 'a' * 400, Framework.REACT)
        assert '&lt;svg onload=&quot;x()&quot;&gt;' in preview
        assert '<svg onload' not in preview
        assert 'a' * 400 not in preview
        assert 'converted to a react component' in preview
