"""Tests for component synthesis across frameworks and styling strategies."""
import pytest

from generators.base import DesignFile
from generators.config import Framework, GenerationConfig, Styling
from generators.css_generator import effective_styling, generate_stylesheet
from generators.markup import split_root, to_kebab_case
from generators.synthesizer import (
    DEFAULT_COMPONENT_NAME, MissingInputError, scaffold_filename, synthesize, to_component_name,
)


def _config(**options):
    return GenerationConfig.from_options(options)


class TestReactSynthesis:
    """Typed and untyped React output."""

    def test_typed_component(self, icon_markup):
        artifacts = synthesize(icon_markup, 'Icon', _config(framework='react', typescript=True))
        source = artifacts.component_source
        assert 'interface IconProps' in source
        assert 'export default Icon' in source
        assert '<rect' in source
        assert artifacts.component_filename == 'Icon.tsx'
        assert artifacts.style_filename == 'Icon.css'
        assert artifacts.types_filename == 'Icon.types.ts'
        assert 'export interface IconProps {' in artifacts.types_source

    def test_untyped_component_has_no_type_syntax(self, icon_markup):
        artifacts = synthesize(icon_markup, 'Icon', _config(typescript=False))
        assert 'interface' not in artifacts.component_source
        assert ': React.FC' not in artifacts.component_source
        assert artifacts.component_filename == 'Icon.jsx'
        assert artifacts.types_source is None
        assert list(artifacts.files()) == ['Icon.jsx', 'Icon.css']

    def test_root_attributes_become_prop_defaults(self):
        markup = '<svg width="24" height="24" fill="none" viewBox="0 0 24 24"><path d="M0 0"/></svg>'
        source = synthesize(markup, 'Arrow').component_source
        assert "width = 24" in source
        assert "fill = 'none'" in source
        assert 'viewBox="0 0 24 24"' in source
        assert 'className={`arrow ${className}`.trim()}' in source

    def test_normalizes_before_templating(self):
        source = synthesize('<svg><path stroke-width="2" class="x"/></svg>', 'Line').component_source
        assert 'strokeWidth="2"' in source
        assert 'className="x"' in source

    def test_styled_components_wrapper(self, icon_markup):
        artifacts = synthesize(icon_markup, 'Icon', _config(styling='styled-components'))
        assert artifacts.style_filename == 'Icon.styles.ts'
        assert "import { IconWrapper } from './Icon.styles'" in artifacts.component_source
        assert '<IconWrapper>' in artifacts.component_source
        assert 'export const IconWrapper = styled.span`' in artifacts.style_source

    def test_treeshaking_adds_named_export(self, icon_markup):
        on = synthesize(icon_markup, 'Icon', _config(optimization={'treeshaking': True}))
        off = synthesize(icon_markup, 'Icon', _config(optimization={'treeshaking': False}))
        assert 'export { Icon }' in on.component_source
        assert 'export { Icon }' not in off.component_source

    def test_screen_reader_label(self, icon_markup):
        labelled = synthesize(icon_markup, 'Icon')
        plain = synthesize(icon_markup, 'Icon', _config(accessibility={'screenReader': False}))
        assert 'aria-label={title}' in labelled.component_source
        assert 'aria-label' not in plain.component_source


class TestOtherFrameworks:
    """Vue, Angular and Svelte templates."""

    def test_vue(self, icon_markup):
        artifacts = synthesize(icon_markup, 'Icon', _config(framework='vue'))
        source = artifacts.component_source
        assert artifacts.component_filename == 'Icon.vue'
        assert source.startswith('<template>')
        assert '<script lang="ts">' in source
        assert "name: 'Icon'" in source
        assert ':class="className"' in source
        assert '<style scoped src="./Icon.css"></style>' in source

    def test_vue_uses_plain_markup_attributes(self):
        source = synthesize('<svg><path stroke-width="2"/></svg>', 'Line', _config(framework='vue')).component_source
        assert 'stroke-width="2"' in source
        assert 'strokeWidth' not in source

    def test_angular(self, icon_markup):
        artifacts = synthesize(icon_markup, 'IconButton', _config(framework='angular'))
        source = artifacts.component_source
        assert artifacts.component_filename == 'IconButton.component.ts'
        assert "selector: 'app-icon-button'" in source
        assert 'export class IconButton implements IconButtonProps {' in source
        assert '@Input() className: string = ' in source
        assert 'export default IconButton' in source

    def test_angular_untyped(self, icon_markup):
        artifacts = synthesize(icon_markup, 'Icon', _config(framework='angular', typescript=False))
        assert artifacts.component_filename == 'Icon.component.js'
        assert 'interface' not in artifacts.component_source
        assert '@Input() className = ' in artifacts.component_source

    def test_svelte(self, icon_markup):
        artifacts = synthesize(icon_markup, 'Icon', _config(framework='svelte'))
        source = artifacts.component_source
        assert artifacts.component_filename == 'Icon.svelte'
        assert '<script context="module" lang="ts">' in source
        assert "export let className: string = ''" in source
        assert 'class="icon {className}"' in source

    @pytest.mark.parametrize('framework', ['vue', 'angular', 'svelte'])
    def test_styled_components_falls_back_to_css(self, icon_markup, framework):
        artifacts = synthesize(icon_markup, 'Icon', _config(framework=framework, styling='styled-components'))
        assert artifacts.styling is Styling.CSS
        assert artifacts.style_filename == 'Icon.css'
        assert 'styled' not in artifacts.style_source

    @pytest.mark.parametrize('framework,expected', [
        ('react', "({ className = 'glyph', "),
        ('vue', "className: { type: String as PropType<string>, default: 'glyph' },"),
        ('angular', "@Input() className: string = 'glyph'"),
        ('svelte', "export let className: string = 'glyph'"),
    ])
    def test_root_class_becomes_class_name_default(self, framework, expected):
        source = synthesize('<svg class="glyph"><rect/></svg>', 'Icon', _config(framework=framework)).component_source
        assert expected in source
        assert "className = ''" not in source

    @pytest.mark.parametrize('framework', ['react', 'vue', 'angular', 'svelte'])
    def test_every_framework_exports_component_name(self, icon_markup, framework):
        artifacts = synthesize(icon_markup, 'Badge', _config(framework=framework))
        assert 'Badge' in artifacts.component_source
        assert '<rect' in artifacts.component_source


class TestSynthesisContract:
    """Determinism, required inputs and optional artifacts."""

    def test_deterministic(self, icon_markup):
        config = _config(framework='svelte', styling='scss', testing={'unitTests': True})
        assert synthesize(icon_markup, 'Icon', config) == synthesize(icon_markup, 'Icon', config)

    @pytest.mark.parametrize('name,markup', [('', '<svg/>'), ('   ', '<svg/>'), ('Icon', ''), ('Icon', '  ')])
    def test_missing_input(self, name, markup):
        with pytest.raises(MissingInputError):
            synthesize(markup, name)

    def test_defaults_when_config_omitted(self, icon_markup):
        artifacts = synthesize(icon_markup, 'Icon')
        assert artifacts.framework is Framework.REACT
        assert artifacts.typescript is True

    def test_unit_test_scaffold(self, icon_markup):
        artifacts = synthesize(icon_markup, 'Icon', _config(testing={'unit_tests': True}))
        assert artifacts.test_filename == 'Icon.test.tsx'
        assert "describe('Icon'" in artifacts.test_source
        assert list(artifacts.files())[-1] == 'Icon.test.tsx'

    def test_scaffold_filenames(self):
        assert scaffold_filename('Icon', _config(framework='vue', typescript=False)) == 'Icon.test.js'
        assert scaffold_filename('Icon', _config(framework='react', typescript=False)) == 'Icon.test.jsx'

    def test_stylesheet_override(self, icon_markup):
        artifacts = synthesize(icon_markup, 'Icon', stylesheet='.icon { color: red; }\n')
        assert artifacts.style_source == '.icon { color: red; }\n'

    def test_header_from_design_file(self, icon_markup, document_data):
        source = DesignFile.from_dict(document_data, key='abc123')
        artifacts = synthesize(icon_markup, 'Icon', _config(component_library='mui'), source=source)
        assert artifacts.component_source.startswith('/**\n * Icon\n')
        assert 'Generated from Figma file "Design System" (abc123)' in artifacts.component_source
        assert 'Component library: mui' in artifacts.component_source

    def test_no_header_without_metadata(self, icon_markup):
        assert synthesize(icon_markup, 'Icon').component_source.startswith("import React from 'react'")


class TestNames:
    """Component and class name derivation."""

    @pytest.mark.parametrize('raw,expected', [
        ('primary button / hover', 'PrimaryButtonHover'),
        ('icon', 'Icon'),
        ('IconButton', 'IconButton'),
        ('3d-card', 'Component3dCard'),
        ('', DEFAULT_COMPONENT_NAME),
        ('***', DEFAULT_COMPONENT_NAME),
        (None, DEFAULT_COMPONENT_NAME),
    ])
    def test_to_component_name(self, raw, expected):
        assert to_component_name(raw) == expected

    @pytest.mark.parametrize('raw,expected', [
        ('IconButton', 'icon-button'),
        ('SVGIcon', 'svg-icon'),
        ('Card2', 'card2'),
    ])
    def test_to_kebab_case(self, raw, expected):
        assert to_kebab_case(raw) == expected

    def test_split_root(self):
        root = split_root('<svg width="10" fill="none"><rect/></svg>')
        assert root.value('width') == '10'
        assert root.inner == '<rect/>'
        assert root.without(('width',)) == (('fill', '"none"'),)


class TestStylesheets:
    """Per-strategy stylesheet bodies."""

    def test_css_palette_variables(self):
        css = generate_stylesheet('Icon', _config(), ['#ff0000', '#00ff00'])
        assert '--icon-color-1: #ff0000;' in css
        assert '--icon-color-2: #00ff00;' in css
        assert '@media (max-width: 768px)' in css

    def test_scss_variables(self):
        scss = generate_stylesheet('Icon', _config(styling='scss'), ['#123456'])
        assert '$icon-breakpoint: 768px;' in scss
        assert '$icon-color-1: #123456;' in scss

    def test_tailwind(self):
        assert '@apply inline-block leading-none;' in generate_stylesheet('Icon', _config(styling='tailwind'))

    def test_effective_styling(self):
        assert effective_styling(_config(styling='styled-components')) is Styling.STYLED_COMPONENTS
        assert effective_styling(_config(framework='vue', styling='styled-components')) is Styling.CSS
