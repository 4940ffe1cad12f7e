#!/usr/bin/env python3
"""
Figma Codegen MCP Server - Model Context Protocol server for Figma to component code.

Tools:
- Component generation (React, Vue, Angular, Svelte) with validation and metrics
- Exportable node listing
- Static validation of CSS / SCSS / TypeScript / JSX / Vue / Svelte / Angular sources
- Code metrics reports

Settings come from the environment:
- FIGMA_ACCESS_TOKEN or FIGMA_TOKEN: Figma API token
- FIGMA_CODEGEN_TSC: path to a ``tsc`` binary; enables the compiler backend
- FIGMA_CODEGEN_LOG_LEVEL: log level (default INFO)
"""

import os
import json
import re
from enum import Enum
from typing import Optional, List, Dict, Any

import httpx
from pydantic import BaseModel, Field, field_validator, ConfigDict
from mcp.server.fastmcp import FastMCP

from generators.config import ComponentLibrary, Framework, GenerationConfig, Styling
from generators.extractor import list_exportable_node_ids
from pipeline.errors import ErrorInfo
from pipeline.logging_config import setup_logger
from pipeline.metrics import analyze_component, generate_report
from pipeline.orchestrator import CodeGenerationEngine, GeneratedResult
from validators.code_validator import SUPPORTED_LANGUAGES, CodeValidator
from validators.typescript_validator import TscCompiler

# ============================================================================
# Constants
# ============================================================================

FIGMA_API_BASE = "https://api.figma.com/v1"
CHARACTER_LIMIT = 25000
DEFAULT_TIMEOUT = 30.0

_FILE_KEY_URL = re.compile(r'figma\.com/(?:design|file)/([a-zA-Z0-9]+)')

# ============================================================================
# Initialize MCP Server
# ============================================================================

mcp = FastMCP("figma_codegen_mcp")

LOG_LEVEL = os.environ.get("FIGMA_CODEGEN_LOG_LEVEL", "INFO")

logger = setup_logger("figma_codegen", LOG_LEVEL)
for _package in ("generators", "validators", "pipeline"):
    setup_logger(_package, LOG_LEVEL)


def _build_validator() -> CodeValidator:
    tsc = os.environ.get("FIGMA_CODEGEN_TSC")
    if tsc:
        logger.info("Using TypeScript compiler at %s", tsc)
        return CodeValidator(TscCompiler(tsc))
    return CodeValidator()


_validator = _build_validator()
_engine = CodeGenerationEngine(_validator)

# ============================================================================
# Enums and Types
# ============================================================================

class ResponseFormat(str, Enum):
    """Output format for tool responses."""
    MARKDOWN = "markdown"
    JSON = "json"


# ============================================================================
# Pydantic Input Models
# ============================================================================

def _extract_file_key(v: str) -> str:
    # Extract file key from URL if full URL provided
    if 'figma.com' in v:
        match = _FILE_KEY_URL.search(v)
        if match:
            return match.group(1)
        raise ValueError("Could not extract file key from Figma URL")
    return v


class FigmaFileInput(BaseModel):
    """Input model for file operations."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    file_key: str = Field(
        ...,
        description="Figma file key (from URL: figma.com/design/FILE_KEY/...)",
        min_length=10,
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' or 'json'"
    )

    @field_validator('file_key')
    @classmethod
    def validate_file_key(cls, v: str) -> str:
        return _extract_file_key(v)


class FigmaComponentInput(BaseModel):
    """Input model for component generation."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    file_key: str = Field(..., description="Figma file key or URL", min_length=10)
    node_id: Optional[str] = Field(
        default=None,
        description="Node ID to generate from (e.g., '1:2' or '1-2'); whole file if omitted"
    )
    framework: Framework = Field(default=Framework.REACT, description="Target framework")
    typescript: bool = Field(default=True, description="Emit typed output")
    styling: Styling = Field(default=Styling.CSS, description="Stylesheet strategy")
    component_library: ComponentLibrary = Field(default=ComponentLibrary.CUSTOM)
    component_name: Optional[str] = Field(
        default=None,
        description="Component name (auto-generated from node or file name if not provided)"
    )
    unit_tests: bool = Field(default=False, description="Also emit a unit test scaffold")
    use_svg_export: bool = Field(
        default=False,
        description="Use Figma's SVG export of node_id as markup instead of extracting shapes"
    )
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN, description="Output format")

    @field_validator('file_key')
    @classmethod
    def validate_file_key(cls, v: str) -> str:
        return _extract_file_key(v)

    @field_validator('node_id')
    @classmethod
    def normalize_node_id(cls, v: Optional[str]) -> Optional[str]:
        # Convert 1-2 format to 1:2
        return v.replace('-', ':') if v else None

    def to_config(self, component_name: Optional[str]) -> GenerationConfig:
        return GenerationConfig(
            framework=self.framework,
            typescript=self.typescript,
            styling=self.styling,
            component_library=self.component_library,
            component_name=self.component_name or component_name,
            testing={'unit_tests': self.unit_tests},
        )


class CodeValidationInput(BaseModel):
    """Input model for code validation."""
    model_config = ConfigDict(validate_assignment=True)

    code: str = Field(..., description="Source text to validate")
    language: str = Field(
        default="typescript",
        description=f"One of: {', '.join(SUPPORTED_LANGUAGES)}"
    )
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN, description="Output format")

    @field_validator('language')
    @classmethod
    def validate_language(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in SUPPORTED_LANGUAGES:
            raise ValueError(f"Unsupported language '{v}'. Use one of: {', '.join(SUPPORTED_LANGUAGES)}")
        return v


class CodeMetricsInput(BaseModel):
    """Input model for code metrics."""
    model_config = ConfigDict(validate_assignment=True)

    code: str = Field(..., description="Component source to measure")
    component_name: str = Field(default="Component", description="Name used in the component summary")
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN, description="Output format")


# ============================================================================
# Helpers
# ============================================================================

def _get_figma_token() -> str:
    """Get Figma API token from environment."""
    token = os.environ.get("FIGMA_ACCESS_TOKEN") or os.environ.get("FIGMA_TOKEN")
    if not token:
        raise ValueError(
            "Figma API token not found. Set FIGMA_ACCESS_TOKEN or FIGMA_TOKEN environment variable. "
            "Get your token from: https://www.figma.com/developers/api#access-tokens"
        )
    return token


async def _make_figma_request(
    endpoint: str,
    method: str = "GET",
    params: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Make authenticated request to Figma API."""
    token = _get_figma_token()

    async with httpx.AsyncClient() as client:
        response = await client.request(
            method=method,
            url=f"{FIGMA_API_BASE}/{endpoint}",
            headers={"X-Figma-Token": token},
            params=params,
            timeout=DEFAULT_TIMEOUT
        )
        response.raise_for_status()
        return response.json()


async def _download_text(url: str) -> str:
    """Fetch an exported asset (rendered image URLs need no token)."""
    async with httpx.AsyncClient() as client:
        response = await client.get(url, timeout=DEFAULT_TIMEOUT, follow_redirects=True)
        response.raise_for_status()
        return response.text


def _handle_api_error(e: Exception) -> str:
    """Format API errors for user-friendly messages."""
    if isinstance(e, httpx.HTTPStatusError):
        status = e.response.status_code
        if status == 401:
            return "Error: Invalid Figma API token. Check your FIGMA_ACCESS_TOKEN environment variable."
        elif status == 403:
            return "Error: Access denied. You don't have permission to view this file."
        elif status == 404:
            return "Error: File or node not found. Check the file key and node ID."
        elif status == 429:
            return "Error: Rate limit exceeded. Please wait before making more requests."
        return f"Error: Figma API returned status {status}"
    elif isinstance(e, httpx.TimeoutException):
        return "Error: Request timed out. The file might be too large."
    elif isinstance(e, ValueError):
        return f"Error: {str(e)}"
    info = ErrorInfo.from_exception(e)
    logger.error("Unhandled tool error: %s", info.details)
    return f"Error: {type(e).__name__}: {str(e)}\n\n{info.suggestion}"


def _find_node(node: Dict[str, Any], target_id: str) -> Optional[Dict[str, Any]]:
    """Depth-first search for ``target_id`` in a raw document tree."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.get('id') == target_id:
            return current
        children = current.get('children')
        if isinstance(children, list):
            stack.extend(reversed([c for c in children if isinstance(c, dict)]))
    return None


def _scope_to_node(data: Dict[str, Any], node: Dict[str, Any]) -> Dict[str, Any]:
    """File payload whose document only holds ``node``; file metadata is kept."""
    scoped = {k: v for k, v in data.items() if k != 'document'}
    scoped['document'] = {'id': '0:0', 'name': 'Document', 'type': 'DOCUMENT', 'children': [node]}
    return scoped


def _truncate(result: str) -> str:
    if len(result) > CHARACTER_LIMIT:
        return result[:CHARACTER_LIMIT] + "\n\n... (truncated)"
    return result


_FENCE_LANGUAGES = {
    '.tsx': 'tsx', '.jsx': 'jsx', '.ts': 'typescript', '.js': 'javascript',
    '.vue': 'vue', '.svelte': 'svelte', '.css': 'css', '.scss': 'scss',
}


def _fence_language(file_name: str) -> str:
    for ext, language in _FENCE_LANGUAGES.items():
        if file_name.endswith(ext):
            return language
    return ''


def _format_result_markdown(result: GeneratedResult, source_label: str) -> str:
    metrics = result.metrics
    lines = [
        f"# Generated Component: {result.artifacts.component_name}",
        f"**Framework:** {result.config.framework.value}"
        f" ({'TypeScript' if result.config.typescript else 'JavaScript'}, {result.artifacts.styling.value})",
        f"**Source:** {source_label}",
        f"**Build status:** {result.build_status}",
        "",
        "## Metrics",
        f"- Complexity: {metrics.complexity}",
        f"- Maintainability: {metrics.maintainability}",
        f"- Testability: {metrics.testability}",
        f"- Performance: {metrics.performance}",
        f"- Accessibility: {metrics.accessibility}",
        f"- Bundle: {metrics.bundle.size} bytes (~{metrics.bundle.gzip_size} gzipped), {metrics.bundle.modules} imports",
        f"- Quality score: {result.quality.overall}",
        "",
    ]

    if result.build_logs:
        lines.append("## Validation")
        for log in result.build_logs:
            lines.append(f"- **{log['level']}** `{log['file']}:{log['line']}` {log['message']}")
        lines.append("")

    if result.quality.recommendations:
        lines.append("## Recommendations")
        lines.extend(f"- {r}" for r in result.quality.recommendations)
        lines.append("")

    lines.append("## Files")
    for f in result.files:
        lines.extend([
            "",
            f"### `{f.path}` ({f.size} bytes)",
            "```" + _fence_language(f.name),
            f.content.rstrip('\n'),
            "```",
        ])

    return "\n".join(lines)


def _format_findings_markdown(errors: List[Dict[str, Any]], stats: Dict[str, Any], language: str) -> str:
    lines = [
        f"# Validation Result ({language})",
        f"**Findings:** {stats['totalErrors']}",
        f"**Time:** {stats['validationTime']:.1f} ms",
        "",
    ]
    if not errors:
        lines.append("No problems found.")
        return "\n".join(lines)
    for e in errors:
        lines.append(f"- **{e['severity']}** [{e['category']}] line {e['line']}, col {e['column']}: {e['message']}")
        if e.get('suggestion'):
            lines.append(f"  - Suggestion: {e['suggestion']}")
    return "\n".join(lines)


# ============================================================================
# Tools
# ============================================================================

@mcp.tool(
    name="figma_generate_component",
    annotations={
        "title": "Generate Component from Figma",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def figma_generate_component(params: FigmaComponentInput) -> str:
    """
    Generate a component, stylesheet and type definitions from a Figma file or node.

    The design is converted to SVG markup, normalized for the target framework and
    wrapped in a component. Every generated file is validated and the component is
    measured.

    Args:
        params: FigmaComponentInput containing:
            - file_key (str): Figma file key or URL
            - node_id (Optional[str]): Node to generate from
            - framework: 'react', 'vue', 'angular' or 'svelte'
            - typescript (bool): Typed output
            - styling: 'css', 'scss', 'styled-components' or 'tailwind'
            - component_name (Optional[str]): Custom component name
            - use_svg_export (bool): Use Figma's SVG render of the node as markup

    Returns:
        str: Generated files with validation findings and metrics
    """
    try:
        data = await _make_figma_request(f"files/{params.file_key}")
        data.setdefault('key', params.file_key)

        design_data: Dict[str, Any] = data
        default_name = data.get('name')
        source_label = f"file `{params.file_key}`"
        svg_markup = None

        if params.node_id:
            node = _find_node(data.get('document', {}), params.node_id)
            if not node:
                return f"Error: Node '{params.node_id}' not found."
            design_data = _scope_to_node(data, node)
            default_name = node.get('name') or default_name
            source_label = f"node `{params.node_id}` of file `{params.file_key}`"

            if params.use_svg_export:
                images = await _make_figma_request(
                    f"images/{params.file_key}",
                    params={"ids": params.node_id, "format": "svg"}
                )
                url = images.get('images', {}).get(params.node_id)
                if not url:
                    return f"Error: Figma could not render node '{params.node_id}' as SVG."
                svg_markup = await _download_text(url)

        result = await _engine.generate_code(
            design_data,
            params.to_config(default_name),
            svg_markup=svg_markup,
        )

        if params.response_format == ResponseFormat.JSON:
            return _truncate(json.dumps(result.to_dict(), indent=2))
        return _truncate(_format_result_markdown(result, source_label))

    except Exception as e:
        return _handle_api_error(e)


@mcp.tool(
    name="figma_list_exportable_nodes",
    annotations={
        "title": "List Exportable Figma Nodes",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def figma_list_exportable_nodes(params: FigmaFileInput) -> str:
    """
    List frame and component node IDs of a Figma file, in document order.

    Args:
        params: FigmaFileInput containing:
            - file_key (str): Figma file key or URL

    Returns:
        str: Node IDs usable as node_id for figma_generate_component
    """
    try:
        data = await _make_figma_request(f"files/{params.file_key}")
        node_ids = list_exportable_node_ids(data)

        if params.response_format == ResponseFormat.JSON:
            return json.dumps({
                'file_key': params.file_key,
                'name': data.get('name'),
                'node_ids': node_ids,
            }, indent=2)

        lines = [
            f"# Exportable Nodes: {data.get('name', params.file_key)}",
            f"**Count:** {len(node_ids)}",
            "",
        ]
        lines.extend(f"- `{node_id}`" for node_id in node_ids)
        if not node_ids:
            lines.append("No frames or components found.")
        return _truncate("\n".join(lines))

    except Exception as e:
        return _handle_api_error(e)


@mcp.tool(
    name="figma_validate_code",
    annotations={
        "title": "Validate Generated Code",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def figma_validate_code(params: CodeValidationInput) -> str:
    """
    Run the static validators over a source string.

    Args:
        params: CodeValidationInput containing:
            - code (str): Source text
            - language (str): css, scss, typescript, tsx, javascript, jsx, html, vue, svelte or angular

    Returns:
        str: Findings with severity, category, position and suggestion
    """
    try:
        result = await _validator.validate(params.code, params.language)
        payload = result.to_dict()
        if params.response_format == ResponseFormat.JSON:
            payload['isValid'] = result.is_valid
            return _truncate(json.dumps(payload, indent=2))
        return _truncate(_format_findings_markdown(payload['errors'], payload['stats'], params.language))

    except Exception as e:
        return _handle_api_error(e)


@mcp.tool(
    name="figma_code_metrics",
    annotations={
        "title": "Code Metrics",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def figma_code_metrics(params: CodeMetricsInput) -> str:
    """
    Compute complexity, maintainability, testability, performance, accessibility
    and bundle estimates for a component source.

    Args:
        params: CodeMetricsInput containing:
            - code (str): Component source
            - component_name (str): Name for the component summary

    Returns:
        str: Metrics report
    """
    try:
        metrics = generate_report(params.code)
        component = analyze_component(params.code, params.component_name)

        if params.response_format == ResponseFormat.JSON:
            return json.dumps({
                'metrics': metrics.to_dict(),
                'component': component.to_dict(),
            }, indent=2)

        lines = [
            f"# Code Metrics: {component.name}",
            f"**Type:** {component.type} component, {component.lines} lines",
            "",
            "| Metric | Value |",
            "| --- | --- |",
            f"| Complexity | {metrics.complexity} |",
            f"| Maintainability | {metrics.maintainability} |",
            f"| Testability | {metrics.testability} |",
            f"| Performance | {metrics.performance} |",
            f"| Accessibility | {metrics.accessibility} |",
            f"| Bundle size | {metrics.bundle.size} bytes |",
            f"| Gzip estimate | {metrics.bundle.gzip_size} bytes |",
            f"| Imports | {metrics.bundle.modules} |",
            "",
            f"**Props declarations:** {component.props}",
            f"**Hook calls:** {component.hooks}",
        ]
        if component.dependencies:
            lines.append("**Dependencies:** " + ", ".join(f"`{d}`" for d in component.dependencies))
        return "\n".join(lines)

    except Exception as e:
        return _handle_api_error(e)


# ============================================================================
# Entry Point
# ============================================================================

def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
