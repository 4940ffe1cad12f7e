"""Tests for the type-checker backed validator and its backends."""
import pytest

from conftest import FakeCompiler
from generators.config import GenerationConfig
from generators.synthesizer import synthesize
from validators.base import Severity
from validators.typescript_validator import (
    DEFAULT_SUGGESTION, CompilerDiagnostic, CompilerError, TreeSitterCompiler,
    TypeScriptValidator, is_environmental, parse_tsc_output,
)


@pytest.fixture(scope='module')
def tree_sitter():
    return TreeSitterCompiler()


class TestDiagnosticMapping:
    """Backend diagnostics become 1-based findings with categories."""

    @pytest.mark.asyncio
    async def test_positions_and_categories(self):
        compiler = FakeCompiler([
            CompilerDiagnostic(0, 4, 1005, "';' expected."),
            CompilerDiagnostic(2, 0, 2345, "Argument of type 'number' is not assignable.", 'warning'),
            CompilerDiagnostic(3, 1, 9999, "Something else.", 'message'),
        ])
        errors = await TypeScriptValidator(compiler).validate('const x = 1', 'Icon.tsx')

        assert compiler.calls == [('const x = 1', 'Icon.tsx')]
        assert [(e.line, e.column) for e in errors] == [(1, 5), (3, 1), (4, 2)]
        assert [e.severity for e in errors] == [Severity.ERROR, Severity.WARNING, Severity.INFO]
        assert [e.category for e in errors] == ['syntax', 'argument', 'general']
        assert errors[0].code == 1005
        assert errors[2].suggestion == DEFAULT_SUGGESTION
        assert all(e.source == 'typescript' for e in errors)

    @pytest.mark.asyncio
    async def test_environmental_diagnostics_are_dropped(self):
        compiler = FakeCompiler([
            CompilerDiagnostic(0, 0, 2307, "Cannot find module 'react'."),
            CompilerDiagnostic(1, 0, 2339, "Property 'svg' does not exist on type 'JSX.IntrinsicElements'."),
            CompilerDiagnostic(2, 0, 2339, "Property 'foo' does not exist on type 'Bar'."),
        ])
        errors = await TypeScriptValidator(compiler).validate('x')
        assert len(errors) == 1
        assert errors[0].category == 'property'

    @pytest.mark.asyncio
    async def test_backend_failure_becomes_system_warning(self):
        compiler = FakeCompiler(error=CompilerError('tsc not found'))
        errors = await TypeScriptValidator(compiler).validate('const x = 1')
        assert len(errors) == 1
        assert errors[0].severity is Severity.WARNING
        assert errors[0].category == 'system'
        assert errors[0].message == 'TypeScript validation failed: tsc not found'

    def test_is_environmental(self):
        assert is_environmental(CompilerDiagnostic(0, 0, 7016, 'no types'))
        assert not is_environmental(CompilerDiagnostic(0, 0, 2322, "Type 'string' is not assignable to type 'number'."))
        assert is_environmental(CompilerDiagnostic(0, 0, 2322, "... 'IntrinsicAttributes & Props'."))


class TestTreeSitterCompiler:
    """In-process syntax checks."""

    @pytest.mark.asyncio
    async def test_valid_source(self, tree_sitter):
        assert await tree_sitter.check('const total: number = 1 + 2\n', 'index.ts') == []

    def test_broken_source(self, tree_sitter):
        diagnostics = tree_sitter.check_sync('const x = (1 + ;\nfunction {\n', 'index.ts')
        assert diagnostics
        assert {d.code for d in diagnostics} <= {1003, 1005, 1109, 1128}

    def test_duplicate_attribute(self, tree_sitter):
        diagnostics = tree_sitter.check_sync('const a = <div id="a" id="b" />\n', 'a.tsx')
        assert [d.code for d in diagnostics] == [17001]
        assert diagnostics[0].line == 0
        assert diagnostics[0].character == 22

    def test_mismatched_closing_tag(self, tree_sitter):
        diagnostics = tree_sitter.check_sync('const a = <div></span>\n', 'a.tsx')
        assert 17002 in [d.code for d in diagnostics]

    def test_redeclared_binding(self, tree_sitter):
        diagnostics = tree_sitter.check_sync('const a = 1\nexport const a = 2\n', 'a.ts')
        assert [(d.code, d.line) for d in diagnostics] == [(2451, 1)]

    def test_columns_count_characters(self, tree_sitter):
        diagnostics = tree_sitter.check_sync('const a = "é" && <b x="1" x="2" />\n', 'a.tsx')
        assert diagnostics[0].character == 26

    @pytest.mark.parametrize('framework', ['react', 'angular'])
    @pytest.mark.parametrize('typescript', [True, False])
    @pytest.mark.parametrize('styling', ['css', 'scss', 'styled-components', 'tailwind'])
    @pytest.mark.parametrize('pass_props', [True, False])
    def test_generated_component_parses(self, tree_sitter, framework, typescript, styling, pass_props):
        config = GenerationConfig(
            framework=framework, typescript=typescript, styling=styling, pass_props=pass_props,
            testing={'unit_tests': True},
        )
        markup = (
            '<svg width="24" fill="none" class="glyph">'
            '<rect x="1" stroke-width="2"/><text x="2">Hi</text></svg>'
        )
        artifacts = synthesize(markup, 'Icon', config)
        assert tree_sitter.check_sync(artifacts.component_source, artifacts.component_filename) == []
        if framework == 'react':
            assert tree_sitter.check_sync(artifacts.test_source, artifacts.test_filename) == []

    def test_destructured_props_are_a_parameter_list(self):
        source = synthesize('<svg><rect/></svg>', 'Icon', GenerationConfig()).component_source
        declaration = next(line for line in source.splitlines() if line.startswith('const Icon'))
        assert declaration.startswith("const Icon: React.FC<IconProps> = ({ className = ''")
        assert declaration.endswith('...props }) => {')


class TestTscOutput:
    def test_parse(self):
        output = (
            "/tmp/x/Icon.tsx(3,7): error TS2322: Type 'string' is not assignable to type 'number'.\n"
            "Found 1 error.\n"
        )
        diagnostics = parse_tsc_output(output)
        assert diagnostics == [
            CompilerDiagnostic(2, 6, 2322, "Type 'string' is not assignable to type 'number'.", 'error'),
        ]

    def test_ignores_noise(self):
        assert parse_tsc_output('Version 5.4.0\n\n') == []
