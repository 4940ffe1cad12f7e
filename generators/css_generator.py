"""
Stylesheet artifact generation.

One function per styling strategy. The palette (solid fills collected from
the design) is exposed as custom properties or SCSS variables so edited
components can reuse the design colors.
"""

from typing import Callable, Dict, Sequence

from generators.config import Framework, GenerationConfig, Styling
from generators.markup import to_kebab_case

MOBILE_BREAKPOINT = 768


def effective_styling(config: GenerationConfig) -> Styling:
    """styled-components only applies to React; other frameworks fall back to plain CSS."""
    if config.styling is Styling.STYLED_COMPONENTS and config.framework is not Framework.REACT:
        return Styling.CSS
    return config.styling


def stylesheet_filename(component_name: str, config: GenerationConfig) -> str:
    styling = effective_styling(config)
    if styling is Styling.SCSS:
        return f"{component_name}.scss"
    if styling is Styling.STYLED_COMPONENTS:
        return f"{component_name}.styles.{'ts' if config.typescript else 'js'}"
    return f"{component_name}.css"


def _css(component_name: str, config: GenerationConfig, palette: Sequence[str]) -> str:
    cls = to_kebab_case(component_name)
    variables = ''.join(f"  --{cls}-color-{i + 1}: {color};\n" for i, color in enumerate(palette))
    return (
        f".{cls} {{\n"
        f"  display: inline-block;\n"
        f"  line-height: 0;\n"
        f"{variables}"
        f"}}\n"
        f"\n"
        f".{cls} svg {{\n"
        f"  max-width: 100%;\n"
        f"  height: auto;\n"
        f"}}\n"
        f"\n"
        f"@media (max-width: {MOBILE_BREAKPOINT}px) {{\n"
        f"  .{cls} {{\n"
        f"    width: 100%;\n"
        f"  }}\n"
        f"}}\n"
    )


def _scss(component_name: str, config: GenerationConfig, palette: Sequence[str]) -> str:
    cls = to_kebab_case(component_name)
    variables = ''.join(f"${cls}-color-{i + 1}: {color};\n" for i, color in enumerate(palette))
    return (
        f"${cls}-breakpoint: {MOBILE_BREAKPOINT}px;\n"
        f"{variables}"
        f"\n"
        f".{cls} {{\n"
        f"  display: inline-block;\n"
        f"  line-height: 0;\n"
        f"\n"
        f"  svg {{\n"
        f"    max-width: 100%;\n"
        f"    height: auto;\n"
        f"  }}\n"
        f"\n"
        f"  @media (max-width: ${cls}-breakpoint) {{\n"
        f"    width: 100%;\n"
        f"  }}\n"
        f"}}\n"
    )


def _styled_components(component_name: str, config: GenerationConfig, palette: Sequence[str]) -> str:
    lines = ["import styled from 'styled-components'", ""]
    if palette:
        lines.append("export const palette = [" + ', '.join(f"'{c}'" for c in palette) + "]")
        lines.append("")
    lines += [
        f"export const {component_name}Wrapper = styled.span`",
        "  display: inline-block;",
        "  line-height: 0;",
        "",
        "  svg {",
        "    max-width: 100%;",
        "    height: auto;",
        "  }",
        "",
        f"  @media (max-width: {MOBILE_BREAKPOINT}px) {{",
        "    width: 100%;",
        "  }",
        "`",
    ]
    return '\n'.join(lines) + '\n'


def _tailwind(component_name: str, config: GenerationConfig, palette: Sequence[str]) -> str:
    cls = to_kebab_case(component_name)
    return (
        "@tailwind base;\n"
        "@tailwind components;\n"
        "@tailwind utilities;\n"
        "\n"
        "@layer components {\n"
        f"  .{cls} {{\n"
        "    @apply inline-block leading-none;\n"
        "  }\n"
        "}\n"
    )


_GENERATORS: Dict[Styling, Callable[[str, GenerationConfig, Sequence[str]], str]] = {
    Styling.CSS: _css,
    Styling.SCSS: _scss,
    Styling.STYLED_COMPONENTS: _styled_components,
    Styling.TAILWIND: _tailwind,
}


def generate_stylesheet(component_name: str, config: GenerationConfig, palette: Sequence[str] = ()) -> str:
    """Stylesheet body for the component's root class under the configured strategy."""
    return _GENERATORS[effective_styling(config)](component_name, config, palette)
