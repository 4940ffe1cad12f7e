"""
Code generation orchestrator.

Runs one generation as a fixed sequence of stages and reports progress at
fixed checkpoints. Each call gets its own session id and context; the only
shared state is the map of in-flight sessions, and an entry is removed on
every exit path.
"""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from html import escape
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from generators.base import DesignFile
from generators.config import Framework, GenerationConfig
from generators.extractor import collect_palette, extract_markup, is_placeholder
from generators.synthesizer import DEFAULT_COMPONENT_NAME, GeneratedArtifactSet, synthesize, to_component_name
from pipeline.metrics import BundleEstimate, CodeMetrics, calculate_bundle_size, generate_report
from pipeline.quality import DesignAnalysis, QualityReport, analyze_design, build_quality_report
from validators.base import Severity, ValidationResult
from validators.code_validator import CodeValidator

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, str], Any]

PREVIEW_EXCERPT_CHARS = 300


class Stage(str, Enum):
    QUEUED = "queued"
    EXTRACTING = "extracting"
    SYNTHESIZING = "synthesizing"
    VALIDATING = "validating"
    MEASURING = "measuring"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass
class GenerationContext:
    session_id: str
    start_time: float
    config: GenerationConfig
    design_data: Any
    stage: Stage = Stage.QUEUED
    progress: int = 0


@dataclass(frozen=True)
class GeneratedFile:
    path: str
    name: str
    content: str
    size: int

    def to_dict(self) -> Dict[str, Any]:
        return {'path': self.path, 'name': self.name, 'content': self.content, 'size': self.size}


@dataclass
class GeneratedResult:
    id: str
    timestamp: datetime
    config: GenerationConfig
    artifacts: GeneratedArtifactSet
    files: List[GeneratedFile]
    structure: Dict[str, Any]
    metrics: CodeMetrics
    style_bundle: BundleEstimate
    validation: Dict[str, ValidationResult]
    build_status: str
    build_logs: List[Dict[str, Any]]
    quality: QualityReport
    design_analysis: DesignAnalysis
    preview: str
    generation_time_ms: float = 0.0

    @property
    def is_valid(self) -> bool:
        return all(result.is_valid for result in self.validation.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'timestamp': self.timestamp.isoformat(),
            'config': self.config.model_dump(mode='json', by_alias=True),
            'files': [f.to_dict() for f in self.files],
            'structure': self.structure,
            'metrics': self.metrics.to_dict(),
            'styleBundle': self.style_bundle.to_dict(),
            'validation': {name: result.to_dict() for name, result in self.validation.items()},
            'isValid': self.is_valid,
            'buildStatus': self.build_status,
            'buildLogs': list(self.build_logs),
            'quality': self.quality.to_dict(),
            'designAnalysis': self.design_analysis.to_dict(),
            'preview': self.preview,
            'generationTimeMs': self.generation_time_ms,
        }


def language_for(file_name: str, framework: Framework) -> str:
    """Validator language tag for one generated file."""
    if file_name.endswith('.scss'):
        return 'scss'
    if file_name.endswith('.css'):
        return 'css'
    if file_name.endswith('.vue'):
        return 'vue'
    if file_name.endswith('.svelte'):
        return 'svelte'
    if framework is Framework.ANGULAR and '.component.' in file_name:
        return 'angular'
    if file_name.endswith(('.jsx', '.js')):
        return 'javascript'
    return 'typescript'


def generate_preview(component_source: str, framework: Framework) -> str:
    """Standalone HTML page embedding an escaped excerpt of the component."""
    excerpt = escape(component_source[:PREVIEW_EXCERPT_CHARS])
    return f"""<!DOCTYPE html>
<html>
<head>
    <title>Generated Component Preview</title>
    <style>
        body {{ font-family: Arial, sans-serif; padding: 20px; background: #f5f5f5; }}
        .preview {{ background: white; border: 1px solid #ddd; padding: 20px; border-radius: 8px; }}
        .code-preview {{ background: #f8f9fa; border: 1px solid #e9ecef; border-radius: 4px; padding: 15px;
            margin-top: 15px; font-family: 'Courier New', monospace; font-size: 12px; overflow-x: auto; }}
    </style>
</head>
<body>
    <div class="preview">
        <h2>Component Preview</h2>
        <p>Your Figma design has been converted to a {framework.value} component.</p>
        <div class="code-preview">
            <strong>Generated Code Preview:</strong>
            <pre>{excerpt}...</pre>
        </div>
        <p><em>Download the complete files to see the full implementation.</em></p>
    </div>
</body>
</html>"""


class CodeGenerationEngine:
    """Turn design data into generated, validated and measured component files."""

    def __init__(self, validator: Optional[CodeValidator] = None):
        self.validator = validator or CodeValidator()
        self._generation_queue: Dict[str, GenerationContext] = {}

    @property
    def active_sessions(self) -> List[str]:
        return list(self._generation_queue)

    @staticmethod
    def _generate_session_id() -> str:
        return f"gen_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"

    @staticmethod
    def _advance(context: GenerationContext, stage: Stage, progress: int, status: str,
                 progress_callback: Optional[ProgressCallback]) -> None:
        context.stage = stage
        context.progress = progress
        logger.info("[%s] %s", context.session_id, status)
        if progress_callback is None:
            return
        try:
            progress_callback(progress, status)
        except Exception:
            logger.warning("[%s] Progress callback failed at %d%%", context.session_id, progress, exc_info=True)

    async def generate_code(
        self,
        design_data: Any,
        config: Union[GenerationConfig, Mapping[str, Any], None] = None,
        progress_callback: Optional[ProgressCallback] = None,
        *,
        svg_markup: Optional[str] = None,
    ) -> GeneratedResult:
        """Run extraction, synthesis, validation and measurement for one design.

        Args:
            design_data: Figma node, ``{document}`` or ``{file: {document}}``
            config: Generation options (mapping keys in snake_case or camelCase)
            progress_callback: Called with (percent, status); failures are ignored
            svg_markup: Markup to use instead of extracting it from the design

        Raises:
            Whatever a stage raises, after logging it and releasing the session.
        """
        config = GenerationConfig.from_options(config)
        session_id = self._generate_session_id()
        context = GenerationContext(
            session_id=session_id,
            start_time=time.time(),
            config=config,
            design_data=design_data,
        )
        self._generation_queue[session_id] = context
        started = time.perf_counter()

        try:
            logger.info("[%s] Starting code generation (%s)", session_id, config.framework.value)

            self._advance(context, Stage.EXTRACTING, 10, "Analyzing design...", progress_callback)
            source = DesignFile.from_dict(design_data)
            analysis = analyze_design(source.document, config)
            if svg_markup and svg_markup.strip():
                markup = svg_markup
            else:
                markup = extract_markup(design_data)
            placeholder = is_placeholder(markup)
            palette = collect_palette(source.document) if source.document is not None else []

            self._advance(context, Stage.SYNTHESIZING, 30, "Planning structure...", progress_callback)
            component_name = to_component_name(config.component_name or source.name or DEFAULT_COMPONENT_NAME)

            self._advance(context, Stage.SYNTHESIZING, 50, "Generating components...", progress_callback)
            artifacts = synthesize(
                markup,
                component_name,
                config,
                source=source if source.has_metadata else None,
                palette=palette,
            )
            root = f"src/components/{artifacts.component_name}"
            files = [
                GeneratedFile(
                    path=f"{root}/{name}",
                    name=name,
                    content=content,
                    size=len(content.encode('utf-8')),
                )
                for name, content in artifacts.files().items()
            ]
            structure = {
                'root': root,
                'components': [f"{root}/{artifacts.component_filename}"],
                'styles': [f"{root}/{artifacts.style_filename}"],
                'types': [f"{root}/{artifacts.types_filename}"] if artifacts.types_filename else [],
                'tests': [f"{root}/{artifacts.test_filename}"] if artifacts.test_filename else [],
            }

            self._advance(context, Stage.VALIDATING, 70, "Validating code...", progress_callback)
            results = await asyncio.gather(*(
                self.validator.validate(f.content, language_for(f.name, config.framework)) for f in files
            ))
            validation = {f.name: result for f, result in zip(files, results)}
            build_logs = [
                {'level': 'error' if e.severity is Severity.ERROR else 'warn', 'file': name,
                 'line': e.line, 'message': e.message}
                for name, result in validation.items()
                for e in result.errors
                if e.severity in (Severity.ERROR, Severity.WARNING)
            ]
            if any(log['level'] == 'error' for log in build_logs):
                build_status = 'error'
            elif build_logs:
                build_status = 'warning'
            else:
                build_status = 'success'

            self._advance(context, Stage.MEASURING, 85, "Assessing quality...", progress_callback)
            metrics = generate_report(artifacts.component_source)
            style_bundle = calculate_bundle_size(artifacts.style_source)
            quality = build_quality_report(
                metrics, validation, {f.name: f.content for f in files}, analysis, placeholder=placeholder,
            )

            self._advance(context, Stage.MEASURING, 95, "Finalizing...", progress_callback)
            result = GeneratedResult(
                id=session_id,
                timestamp=datetime.now(timezone.utc),
                config=config,
                artifacts=artifacts,
                files=files,
                structure=structure,
                metrics=metrics,
                style_bundle=style_bundle,
                validation=validation,
                build_status=build_status,
                build_logs=build_logs,
                quality=quality,
                design_analysis=analysis,
                preview=generate_preview(artifacts.component_source, config.framework),
                generation_time_ms=(time.perf_counter() - started) * 1000,
            )

            self._advance(context, Stage.COMPLETE, 100, "Complete!", progress_callback)
            logger.info("[%s] Code generation completed in %.1f ms", session_id, result.generation_time_ms)
            return result

        except Exception as e:
            failed_stage = context.stage
            context.stage = Stage.FAILED
            logger.error("[%s] Code generation failed during %s stage: %s", session_id, failed_stage.value, e)
            raise
        finally:
            self._generation_queue.pop(session_id, None)
