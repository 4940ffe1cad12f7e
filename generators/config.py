"""Generation options: target framework, typing, styling and option groups."""

from enum import Enum
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Framework(str, Enum):
    """Target UI framework."""
    REACT = "react"
    VUE = "vue"
    ANGULAR = "angular"
    SVELTE = "svelte"


class Styling(str, Enum):
    """Stylesheet strategy."""
    CSS = "css"
    SCSS = "scss"
    STYLED_COMPONENTS = "styled-components"
    TAILWIND = "tailwind"


class ComponentLibrary(str, Enum):
    CUSTOM = "custom"
    MUI = "mui"
    ANTD = "antd"
    CHAKRA = "chakra"


class WcagLevel(str, Enum):
    A = "A"
    AA = "AA"
    AAA = "AAA"


class _OptionGroup(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra='ignore',
        frozen=True,
    )


class OptimizationOptions(_OptionGroup):
    treeshaking: bool = Field(default=True, description="Emit a named export next to the default export")
    bundle_analysis: bool = Field(default=False, description="Request bundle analysis from the caller's build")
    codesplitting: bool = Field(default=False, description="Request code splitting from the caller's build")
    lazy_loading: bool = Field(default=False, description="Request lazy loading from the caller's build")


class AccessibilityOptions(_OptionGroup):
    wcag_level: WcagLevel = Field(default=WcagLevel.AA, description="Target WCAG conformance level")
    screen_reader: bool = Field(default=True, description="Label the root element for assistive technology")
    keyboard_navigation: bool = Field(default=True, description="Check keyboard handlers")
    color_contrast: bool = Field(default=True, description="Check color contrast")


class TestingOptions(_OptionGroup):
    __test__ = False

    unit_tests: bool = Field(default=False, description="Emit a unit test scaffold")
    integration_tests: bool = Field(default=False)
    e2e_tests: bool = Field(default=False)
    visual_regression: bool = Field(default=False)


class GenerationConfig(BaseModel):
    """Fully specified generation options.

    Every group is defaulted on construction, so a config is never partially
    applied. Keys may be given in snake_case or camelCase.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        validate_assignment=True,
        extra='ignore',
        frozen=True,
    )

    framework: Framework = Field(default=Framework.REACT, description="Target framework")
    typescript: bool = Field(default=True, description="Emit typed output")
    styling: Styling = Field(default=Styling.CSS, description="Stylesheet strategy")
    component_library: ComponentLibrary = Field(default=ComponentLibrary.CUSTOM)
    pass_props: bool = Field(default=True, description="Expose className/width/height/fill/stroke as props")
    component_name: Optional[str] = Field(
        default=None,
        description="Component name (derived from the design file name if not provided)"
    )
    optimization: OptimizationOptions = Field(default_factory=OptimizationOptions)
    accessibility: AccessibilityOptions = Field(default_factory=AccessibilityOptions)
    testing: TestingOptions = Field(default_factory=TestingOptions)

    @field_validator('component_name')
    @classmethod
    def blank_name_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @classmethod
    def from_options(cls, options: Union["GenerationConfig", Mapping[str, Any], None] = None) -> "GenerationConfig":
        """Merge caller options over the defaults."""
        if options is None:
            return cls()
        if isinstance(options, GenerationConfig):
            return options
        return cls.model_validate(dict(options))

    @property
    def is_jsx(self) -> bool:
        return self.framework is Framework.REACT
