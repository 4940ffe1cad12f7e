"""Svelte component templates."""

from typing import List, Optional

from generators.config import GenerationConfig
from generators.markup import (
    PROP_ATTRIBUTES, class_default, default_literal, layout_markup, render_attributes, split_root,
)
from generators.normalizer import to_html_attributes

_PROP_TYPES = {
    'className': 'string',
    'width': 'number | string',
    'height': 'number | string',
    'fill': 'string',
    'stroke': 'string',
    'title': 'string',
}


def _prop_names(config: GenerationConfig) -> List[str]:
    names = list(PROP_ATTRIBUTES)
    if config.accessibility.screen_reader:
        names.append('title')
    return names


def _module_script(component_name: str, config: GenerationConfig) -> List[str]:
    lang = ' lang="ts"' if config.typescript else ''
    lines = [f'<script context="module"{lang}>', f"  export const componentName = '{component_name}'"]
    if config.typescript:
        lines += [
            "",
            f"  export interface {component_name}Props {{",
            *(f"    {name}?: {_PROP_TYPES[name]}" for name in _prop_names(config)),
            "  }",
        ]
    lines.append("</script>")
    return lines


def _instance_script(root, component_name: str, config: GenerationConfig, style_filename: str) -> List[str]:
    lang = ' lang="ts"' if config.typescript else ''
    lines = [f'<script{lang}>', f"  import './{style_filename}'"]
    if config.pass_props:
        lines.append("")
        for name in _prop_names(config):
            if name == 'className':
                default = class_default(root)
            elif name == 'title':
                default = f"'{component_name}'"
            else:
                default = default_literal(root.value(name)) or 'undefined'
            annotation = f": {_PROP_TYPES[name]}" if config.typescript else ''
            if config.typescript and default == 'undefined':
                annotation += ' | undefined'
            lines.append(f"  export let {name}{annotation} = {default}")
    lines.append("</script>")
    return lines


def _root_tag(root, component_name: str, class_name: str, config: GenerationConfig) -> str:
    if not config.pass_props:
        attributes = render_attributes(root.attributes)
        if config.accessibility.screen_reader:
            attributes += f' role="img" aria-label="{component_name}"'
        return to_html_attributes(f"<svg{attributes}>")
    bindings = render_attributes(root.without(PROP_ATTRIBUTES))
    bindings += ' class="' + class_name + ' {className}"'
    bindings += ' width={width} height={height} fill={fill} stroke={stroke}'
    if config.accessibility.screen_reader:
        bindings += ' role="img" aria-label={title}'
    return to_html_attributes(f"<svg{bindings}>")


def generate_svelte_component(
    markup: str,
    component_name: str,
    config: GenerationConfig,
    style_filename: str,
    class_name: str,
    header_lines: Optional[List[str]] = None,
) -> str:
    root = split_root(markup)
    body = [_root_tag(root, component_name, class_name, config)]
    body += layout_markup(to_html_attributes(root.inner), indent=2)
    body.append("</svg>")

    header = ''
    if header_lines:
        header = "<!--\n" + '\n'.join(f"  {line}" for line in [component_name, *header_lines]) + "\n-->\n"

    return header + '\n\n'.join([
        '\n'.join(_module_script(component_name, config)),
        '\n'.join(_instance_script(root, component_name, config, style_filename)),
        '\n'.join(body),
    ]) + '\n'


def generate_svelte_test(component_name: str, config: GenerationConfig) -> str:
    return f"""import {{ render }} from '@testing-library/svelte'
import {component_name} from './{component_name}.svelte'

describe('{component_name}', () => {{
  it('renders an svg element', () => {{
    const {{ container }} = render({component_name})
    expect(container.querySelector('svg')).not.toBeNull()
  }})
}})
"""
