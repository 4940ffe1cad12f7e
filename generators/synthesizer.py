"""
Component synthesis: normalized markup -> component, stylesheet and types artifacts.

Every framework template is a pure string function, so identical inputs give
byte-identical artifacts.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from generators.angular_generator import generate_angular_component, generate_angular_test
from generators.base import DesignFile
from generators.config import ComponentLibrary, Framework, GenerationConfig, Styling
from generators.css_generator import effective_styling, generate_stylesheet, stylesheet_filename
from generators.markup import to_kebab_case
from generators.normalizer import normalize_markup
from generators.react_generator import generate_react_component, generate_react_test, props_interface
from generators.svelte_generator import generate_svelte_component, generate_svelte_test
from generators.vue_generator import generate_vue_component, generate_vue_test

logger = logging.getLogger(__name__)

DEFAULT_COMPONENT_NAME = "GeneratedComponent"


class MissingInputError(ValueError):
    """Raised when synthesis is asked to run without a name or markup."""


@dataclass(frozen=True)
class GeneratedArtifactSet:
    """Text artifacts for one component."""
    component_name: str
    framework: Framework
    typescript: bool
    styling: Styling
    component_source: str
    style_source: str
    component_filename: str
    style_filename: str
    types_source: Optional[str] = None
    types_filename: Optional[str] = None
    test_source: Optional[str] = None
    test_filename: Optional[str] = None

    def files(self) -> Dict[str, str]:
        """Filename -> content for every artifact present, component first."""
        result = {
            self.component_filename: self.component_source,
            self.style_filename: self.style_source,
        }
        if self.types_source is not None and self.types_filename:
            result[self.types_filename] = self.types_source
        if self.test_source is not None and self.test_filename:
            result[self.test_filename] = self.test_source
        return result


def to_component_name(name: Optional[str], fallback: str = DEFAULT_COMPONENT_NAME) -> str:
    """Turn a free-form name into a PascalCase identifier.

    >>> to_component_name('primary button / hover')
    'PrimaryButtonHover'
    """
    words = re.split(r'[^a-zA-Z0-9]+', name or '')
    component_name = ''.join(w[:1].upper() + w[1:] for w in words if w)
    if not component_name:
        return fallback
    if not component_name[0].isalpha():
        component_name = 'Component' + component_name
    return component_name


def component_filename(component_name: str, config: GenerationConfig) -> str:
    if config.framework is Framework.REACT:
        return f"{component_name}.{'tsx' if config.typescript else 'jsx'}"
    if config.framework is Framework.VUE:
        return f"{component_name}.vue"
    if config.framework is Framework.ANGULAR:
        return f"{component_name}.component.{'ts' if config.typescript else 'js'}"
    return f"{component_name}.svelte"


def scaffold_filename(component_name: str, config: GenerationConfig) -> str:
    ext = 'ts' if config.typescript else 'js'
    if config.framework is Framework.REACT:
        ext += 'x'
    return f"{component_name}.test.{ext}"


_COMPONENT_TEMPLATES: Dict[Framework, Callable[..., str]] = {
    Framework.REACT: generate_react_component,
    Framework.VUE: generate_vue_component,
    Framework.ANGULAR: generate_angular_component,
    Framework.SVELTE: generate_svelte_component,
}

_TEST_TEMPLATES: Dict[Framework, Callable[[str, GenerationConfig], str]] = {
    Framework.REACT: generate_react_test,
    Framework.VUE: generate_vue_test,
    Framework.ANGULAR: generate_angular_test,
    Framework.SVELTE: generate_svelte_test,
}


def _header_lines(config: GenerationConfig, source: Optional[DesignFile]) -> List[str]:
    lines = list(source.header_lines()) if source is not None else []
    if config.component_library is not ComponentLibrary.CUSTOM:
        lines.append(f"Component library: {config.component_library.value}")
    return lines


def synthesize(
    markup: str,
    component_name: str,
    config: Optional[GenerationConfig] = None,
    *,
    source: Optional[DesignFile] = None,
    palette: Sequence[str] = (),
    stylesheet: Optional[str] = None,
) -> GeneratedArtifactSet:
    """Build the component, stylesheet and (typed output only) types artifacts.

    Args:
        markup: SVG fragment; normalized here before templating
        component_name: Exported component name, sanitized to PascalCase
        config: Generation options; defaults when omitted
        source: Design file whose metadata goes into the header comment
        palette: Design colors exposed by the stylesheet
        stylesheet: Stylesheet body used verbatim instead of the generated one

    Raises:
        MissingInputError: name or markup is empty or blank
    """
    if not component_name or not component_name.strip():
        raise MissingInputError("Component name is required")
    if not markup or not markup.strip():
        raise MissingInputError("Markup fragment is required")

    config = config or GenerationConfig()
    name = to_component_name(component_name)
    class_name = to_kebab_case(name)
    styling = effective_styling(config)
    if styling is not config.styling:
        logger.info("%s styling is React-only, using %s for %s", config.styling.value,
                    styling.value, config.framework.value)

    normalized = normalize_markup(markup)
    style_file = stylesheet_filename(name, config)

    component_source = _COMPONENT_TEMPLATES[config.framework](
        normalized, name, config, style_file, class_name, _header_lines(config, source),
    )
    style_source = stylesheet if stylesheet is not None else generate_stylesheet(name, config, palette)

    types_source = types_file = None
    if config.typescript:
        types_source = props_interface(name, config) + '\n'
        types_file = f"{name}.types.ts"

    test_source = test_file = None
    if config.testing.unit_tests:
        test_source = _TEST_TEMPLATES[config.framework](name, config)
        test_file = scaffold_filename(name, config)

    logger.debug("Synthesized %s for %s (%d bytes)", name, config.framework.value, len(component_source))

    return GeneratedArtifactSet(
        component_name=name,
        framework=config.framework,
        typescript=config.typescript,
        styling=styling,
        component_source=component_source,
        style_source=style_source,
        component_filename=component_filename(name, config),
        style_filename=style_file,
        types_source=types_source,
        types_filename=types_file,
        test_source=test_source,
        test_filename=test_file,
    )
