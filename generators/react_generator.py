"""
React component templates (TSX / JSX).

Markup arrives normalized to the JSX dialect. The root <svg> receives the
prop bindings; its own className/width/height/fill/stroke values become prop
defaults.
"""

from typing import List, Optional

from generators.config import GenerationConfig, Styling
from generators.markup import (
    PROP_ATTRIBUTES, class_default, default_literal, layout_markup, render_attributes, split_root,
)


def _header(component_name: str, header_lines: List[str]) -> str:
    if not header_lines:
        return ''
    body = '\n'.join(f" * {line}" for line in [component_name, *header_lines])
    return f"/**\n{body}\n */\n"


def props_interface(component_name: str, config: GenerationConfig, extends: Optional[str] = None) -> str:
    """Props contract shared by the component and the types artifact."""
    heritage = f" extends {extends}" if extends else ''
    lines = [
        f"export interface {component_name}Props{heritage} {{",
        "  className?: string",
        "  width?: number | string",
        "  height?: number | string",
        "  fill?: string",
        "  stroke?: string",
    ]
    if config.accessibility.screen_reader:
        lines.append("  title?: string")
    lines.append("}")
    return '\n'.join(lines)


def _imports(component_name: str, config: GenerationConfig, style_filename: str) -> List[str]:
    lines = ["import React from 'react'"]
    if config.styling is Styling.STYLED_COMPONENTS:
        module = style_filename.rsplit('.', 1)[0]
        lines.append(f"import {{ {component_name}Wrapper }} from './{module}'")
    else:
        lines.append(f"import './{style_filename}'")
    return lines


def _root_tag(root, component_name: str, class_name: str, config: GenerationConfig) -> str:
    if not config.pass_props:
        attributes = render_attributes(root.attributes)
        if config.accessibility.screen_reader:
            attributes += f' role="img" aria-label="{component_name}"'
        return f"<svg{attributes}>"

    bindings = render_attributes(root.without(PROP_ATTRIBUTES))
    bindings += " className={`" + class_name + " ${className}`.trim()}"
    bindings += " width={width} height={height} fill={fill} stroke={stroke}"
    if config.accessibility.screen_reader:
        bindings += ' role="img" aria-label={title}'
    bindings += " {...props}"
    return f"<svg{bindings}>"


def _params(root, component_name: str, config: GenerationConfig) -> str:
    if not config.pass_props:
        return "()"
    params = [f"className = {class_default(root)}"]
    for name in PROP_ATTRIBUTES[1:]:
        default = default_literal(root.value(name))
        params.append(f"{name} = {default}" if default else name)
    if config.accessibility.screen_reader:
        params.append(f"title = '{component_name}'")
    params.append("...props")
    return "({ " + ', '.join(params) + " })"


def generate_react_component(
    markup: str,
    component_name: str,
    config: GenerationConfig,
    style_filename: str,
    class_name: str,
    header_lines: Optional[List[str]] = None,
) -> str:
    """Render a function component exported under ``component_name``."""
    root = split_root(markup)
    styled = config.styling is Styling.STYLED_COMPONENTS
    body_indent = 6 if styled else 4

    jsx = [' ' * body_indent + _root_tag(root, component_name, class_name, config)]
    jsx += layout_markup(root.inner, indent=body_indent + 2)
    jsx.append(' ' * body_indent + "</svg>")
    if styled:
        jsx = [f"    <{component_name}Wrapper>", *jsx, f"    </{component_name}Wrapper>"]

    sections = ['\n'.join(_imports(component_name, config, style_filename))]
    if config.typescript:
        sections.append(props_interface(component_name, config, extends="React.SVGProps<SVGSVGElement>"))
        declaration = f"const {component_name}: React.FC<{component_name}Props> = "
    else:
        declaration = f"const {component_name} = "

    jsx_body = '\n'.join(jsx)
    sections.append(
        f"{declaration}{_params(root, component_name, config)} => {{\n"
        f"  return (\n{jsx_body}\n  )\n"
        f"}}"
    )

    exports = []
    if config.optimization.treeshaking:
        exports.append(f"export {{ {component_name} }}")
    exports.append(f"export default {component_name}")
    sections.append('\n'.join(exports))

    return _header(component_name, header_lines or []) + '\n\n'.join(sections) + '\n'


def generate_react_test(component_name: str, config: GenerationConfig) -> str:
    return f"""import React from 'react'
import {{ render }} from '@testing-library/react'
import {component_name} from './{component_name}'

describe('{component_name}', () => {{
  it('renders an svg element', () => {{
    const {{ container }} = render(<{component_name} />)
    expect(container.querySelector('svg')).not.toBeNull()
  }})
}})
"""
