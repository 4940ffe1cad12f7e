"""Vue single-file component templates (Options API via ``defineComponent``)."""

from typing import List, Optional

from generators.config import GenerationConfig, Styling
from generators.markup import (
    PROP_ATTRIBUTES, class_default, default_literal, layout_markup, render_attributes, split_root,
)
from generators.normalizer import to_html_attributes

_PROP_TYPES = {
    'className': ('String', 'string'),
    'width': ('[Number, String]', 'number | string'),
    'height': ('[Number, String]', 'number | string'),
    'fill': ('String', 'string'),
    'stroke': ('String', 'string'),
    'title': ('String', 'string'),
}


def _prop_names(config: GenerationConfig) -> List[str]:
    names = list(PROP_ATTRIBUTES)
    if config.accessibility.screen_reader:
        names.append('title')
    return names


def _props_block(root, component_name: str, config: GenerationConfig) -> List[str]:
    lines = ["  props: {"]
    for name in _prop_names(config):
        runtime, static = _PROP_TYPES[name]
        prop_type = f"{runtime} as PropType<{static}>" if config.typescript else runtime
        if name == 'className':
            default = class_default(root)
        elif name == 'title':
            default = f"'{component_name}'"
        else:
            default = default_literal(root.value(name)) or 'undefined'
        lines.append(f"    {name}: {{ type: {prop_type}, default: {default} }},")
    lines.append("  },")
    return lines


def _root_tag(root, component_name: str, class_name: str, config: GenerationConfig) -> str:
    if not config.pass_props:
        attributes = render_attributes(root.attributes)
        if config.accessibility.screen_reader:
            attributes += f' role="img" aria-label="{component_name}"'
        return to_html_attributes(f"<svg{attributes}>")
    bindings = render_attributes(root.without(PROP_ATTRIBUTES))
    bindings += f' class="{class_name}" :class="className"'
    bindings += ' :width="width" :height="height" :fill="fill" :stroke="stroke"'
    if config.accessibility.screen_reader:
        bindings += ' role="img" :aria-label="title"'
    return to_html_attributes(f"<svg{bindings}>")


def _style_block(config: GenerationConfig, style_filename: str) -> str:
    lang = ' lang="scss"' if config.styling is Styling.SCSS else ''
    return f'<style scoped{lang} src="./{style_filename}"></style>'


def generate_vue_component(
    markup: str,
    component_name: str,
    config: GenerationConfig,
    style_filename: str,
    class_name: str,
    header_lines: Optional[List[str]] = None,
) -> str:
    """Render a Vue SFC whose component is registered under ``component_name``."""
    root = split_root(markup)
    template = ["<template>", "  " + _root_tag(root, component_name, class_name, config)]
    template += layout_markup(to_html_attributes(root.inner), indent=4)
    template += ["  </svg>", "</template>"]

    script_open = '<script lang="ts">' if config.typescript else '<script>'
    vue_import = "import { defineComponent, type PropType } from 'vue'" if config.typescript \
        else "import { defineComponent } from 'vue'"
    script = [script_open, vue_import, ""]
    if config.typescript:
        script += [
            f"export interface {component_name}Props {{",
            *(f"  {name}?: {_PROP_TYPES[name][1]}" for name in _prop_names(config)),
            "}",
            "",
        ]
    script += ["export default defineComponent({", f"  name: '{component_name}',"]
    if config.pass_props:
        script += _props_block(root, component_name, config)
    script += ["})", "</script>"]

    header = ''
    if header_lines:
        header = "<!--\n" + '\n'.join(f"  {line}" for line in [component_name, *header_lines]) + "\n-->\n"

    return header + '\n\n'.join([
        '\n'.join(template),
        '\n'.join(script),
        _style_block(config, style_filename),
    ]) + '\n'


def generate_vue_test(component_name: str, config: GenerationConfig) -> str:
    return f"""import {{ mount }} from '@vue/test-utils'
import {component_name} from './{component_name}.vue'

describe('{component_name}', () => {{
  it('renders an svg element', () => {{
    const wrapper = mount({component_name})
    expect(wrapper.find('svg').exists()).toBe(true)
  }})
}})
"""
