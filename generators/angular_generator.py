"""Angular standalone component templates with an inline template."""

from typing import List, Optional

from generators.config import GenerationConfig
from generators.markup import (
    PROP_ATTRIBUTES, class_default, default_literal, layout_markup, render_attributes, split_root,
    to_kebab_case,
)
from generators.normalizer import to_html_attributes

_INPUT_TYPES = {
    'className': 'string',
    'width': 'number | string',
    'height': 'number | string',
    'fill': 'string',
    'stroke': 'string',
    'title': 'string',
}


def _root_tag(root, component_name: str, class_name: str, config: GenerationConfig) -> str:
    if not config.pass_props:
        attributes = render_attributes(root.attributes)
        if config.accessibility.screen_reader:
            attributes += f' role="img" aria-label="{component_name}"'
        return to_html_attributes(f"<svg{attributes}>")
    bindings = render_attributes(root.without(PROP_ATTRIBUTES))
    bindings += f' [attr.class]="\'{class_name} \' + className"'
    bindings += ' [attr.width]="width" [attr.height]="height" [attr.fill]="fill" [attr.stroke]="stroke"'
    if config.accessibility.screen_reader:
        bindings += ' role="img" [attr.aria-label]="title"'
    return to_html_attributes(f"<svg{bindings}>")


def _inputs(root, component_name: str, config: GenerationConfig) -> List[str]:
    names = list(PROP_ATTRIBUTES)
    if config.accessibility.screen_reader:
        names.append('title')
    lines = []
    for name in names:
        if name == 'className':
            default = class_default(root)
        elif name == 'title':
            default = f"'{component_name}'"
        else:
            default = default_literal(root.value(name))
        if config.typescript:
            annotation = f": {_INPUT_TYPES[name]}"
            if default is None:
                annotation = f"?: {_INPUT_TYPES[name]}"
        else:
            annotation = ''
        assignment = f" = {default}" if default is not None else ''
        lines.append(f"  @Input() {name}{annotation}{assignment}")
    return lines


def generate_angular_component(
    markup: str,
    component_name: str,
    config: GenerationConfig,
    style_filename: str,
    class_name: str,
    header_lines: Optional[List[str]] = None,
) -> str:
    """Render a standalone ``@Component`` class named ``component_name``."""
    root = split_root(markup)
    selector = f"app-{to_kebab_case(component_name)}"

    template = ["    " + _root_tag(root, component_name, class_name, config)]
    template += layout_markup(to_html_attributes(root.inner), indent=6)
    template.append("    </svg>")

    sections = []
    if header_lines:
        body = '\n'.join(f" * {line}" for line in [component_name, *header_lines])
        sections.append(f"/**\n{body}\n */")

    imports = "import { Component, Input } from '@angular/core'" if config.pass_props \
        else "import { Component } from '@angular/core'"
    sections.append(imports)

    heritage = ''
    if config.typescript:
        sections.append('\n'.join([
            f"export interface {component_name}Props {{",
            *(f"  {name}?: {_INPUT_TYPES[name]}" for name in _INPUT_TYPES
              if name != 'title' or config.accessibility.screen_reader),
            "}",
        ]))
        if config.pass_props:
            heritage = f" implements {component_name}Props"

    template_body = '\n'.join(template)
    decorator = (
        "@Component({\n"
        f"  selector: '{selector}',\n"
        "  standalone: true,\n"
        f"  styleUrls: ['./{style_filename}'],\n"
        f"  template: `\n{template_body}\n  `,\n"
        "})"
    )
    class_body = _inputs(root, component_name, config) if config.pass_props else []
    sections.append('\n'.join([
        decorator,
        f"export class {component_name}{heritage} {{",
        *class_body,
        "}",
    ]))
    sections.append(f"export default {component_name}")

    return '\n\n'.join(sections) + '\n'


def generate_angular_test(component_name: str, config: GenerationConfig) -> str:
    return f"""import {{ TestBed }} from '@angular/core/testing'
import {{ {component_name} }} from './{component_name}.component'

describe('{component_name}', () => {{
  it('renders an svg element', async () => {{
    await TestBed.configureTestingModule({{ imports: [{component_name}] }}).compileComponents()
    const fixture = TestBed.createComponent({component_name})
    fixture.detectChanges()
    expect(fixture.nativeElement.querySelector('svg')).toBeTruthy()
  }})
}})
"""
