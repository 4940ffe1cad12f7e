"""
Code metrics computed from source text.

Every score is a pure function of the input string and is recomputed from
scratch on each call. Pattern counts are plain regex occurrence counts, not
parse results.
"""

import math
import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, List

MAX_COMPLEXITY = 100

COMPLEXITY_PATTERNS = [
    re.compile(r"if\s*\("),
    re.compile(r"else\s*if\s*\("),
    re.compile(r"while\s*\("),
    re.compile(r"for\s*\("),
    re.compile(r"switch\s*\("),
    re.compile(r"case\s*.*:"),
    re.compile(r"catch\s*\("),
    re.compile(r"&&"),
    re.compile(r"\|\|"),
    re.compile(r"\?"),
]

_COMMENT = re.compile(r"/\*[\s\S]*?\*/|//.*$", re.M)

SIDE_EFFECT_PATTERN = re.compile(r"useEffect|fetch|axios|localStorage|sessionStorage")
PURITY_PATTERN = re.compile(r"React\.memo|useMemo|useCallback")

INEFFICIENT_PATTERNS = [
    re.compile(r"document\.querySelector"),
    re.compile(r"getElementById"),
    re.compile(r"innerHTML"),
    re.compile(r"for\s*\(\s*(?:const|let|var)?\s*\w+\s+in\s+"),
    re.compile(r"while\s*\(\s*true\s*\)"),
]

OPTIMIZATION_PATTERNS = [
    re.compile(r"React\.memo"),
    re.compile(r"useMemo"),
    re.compile(r"useCallback"),
    re.compile(r"lazy\s*\("),
    re.compile(r"Suspense"),
]

ACCESSIBILITY_PATTERNS = [
    re.compile(r"aria-[a-z]+"),
    re.compile(r"role="),
    re.compile(r"alt="),
    re.compile(r"tabIndex"),
    re.compile(r"onKeyDown"),
    re.compile(r"onKeyPress"),
]

ACCESSIBILITY_ISSUES = [
    re.compile(r"onClick(?!.*onKeyDown)"),
    re.compile(r"<img(?![^>]*\balt=)"),
    re.compile(r"<input(?![^>]*\b(?:aria-label|id)=)"),
]

_IMPORT = re.compile(r"^\s*import\s+(?:.+?\s+from\s+)?['\"]([^'\"]+)['\"]", re.M)
_PROPS_DECLARATION = re.compile(r"interface\s+\w+Props|type\s+\w+Props")
_HOOK = re.compile(r"use[A-Z]\w*")

GZIP_RATIO = 0.3


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _count(pattern: re.Pattern, code: str) -> int:
    return len(pattern.findall(code))


def _clamp(value: float, low: int = 0, high: int = 100) -> int:
    return int(max(low, min(value, high)))


def calculate_complexity(code: str) -> int:
    """Base 1 plus one per branch or boolean operator, capped at 100."""
    complexity = 1 + sum(_count(p, code) for p in COMPLEXITY_PATTERNS)
    return min(complexity, MAX_COMPLEXITY)


def count_comments(code: str) -> int:
    return _count(_COMMENT, code)


def calculate_maintainability(code: str) -> int:
    lines = len(code.split('\n'))
    complexity = calculate_complexity(code)
    comments = count_comments(code)
    score = (
        171
        - 5.2 * math.log(lines)
        - 0.23 * complexity
        - 16.2 * math.log(lines + 1)
        + 50 * math.sin(math.sqrt(2.4 * comments))
    )
    return round_half_up(max(0.0, score))


def calculate_testability(code: str) -> int:
    side_effects = _count(SIDE_EFFECT_PATTERN, code)
    pure = _count(PURITY_PATTERN, code)
    return _clamp(100 - side_effects * 5 + pure * 10)


def calculate_performance(code: str) -> int:
    score = 100
    score -= 5 * sum(_count(p, code) for p in INEFFICIENT_PATTERNS)
    score += 3 * sum(_count(p, code) for p in OPTIMIZATION_PATTERNS)
    return _clamp(score)


def calculate_accessibility(code: str) -> int:
    score = 50
    score += 5 * sum(_count(p, code) for p in ACCESSIBILITY_PATTERNS)
    score -= 10 * sum(_count(p, code) for p in ACCESSIBILITY_ISSUES)
    return _clamp(score)


@dataclass(frozen=True)
class BundleEstimate:
    size: int
    gzip_size: int
    modules: int

    def to_dict(self) -> Dict[str, int]:
        return {'size': self.size, 'gzipSize': self.gzip_size, 'modules': self.modules}


def calculate_bundle_size(code: str) -> BundleEstimate:
    """Byte length, a fixed-ratio gzip estimate and the import count."""
    size = len(code.encode('utf-8'))
    return BundleEstimate(
        size=size,
        gzip_size=round_half_up(size * GZIP_RATIO),
        modules=len(_IMPORT.findall(code)),
    )


@dataclass(frozen=True)
class CodeMetrics:
    complexity: int
    maintainability: int
    testability: int
    performance: int
    accessibility: int
    bundle: BundleEstimate

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result['bundle'] = self.bundle.to_dict()
        return result


def generate_report(code: str) -> CodeMetrics:
    return CodeMetrics(
        complexity=calculate_complexity(code),
        maintainability=calculate_maintainability(code),
        testability=calculate_testability(code),
        performance=calculate_performance(code),
        accessibility=calculate_accessibility(code),
        bundle=calculate_bundle_size(code),
    )


@dataclass(frozen=True)
class ComponentMetrics:
    name: str
    type: str
    lines: int
    complexity: int
    dependencies: List[str]
    props: int
    hooks: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def analyze_component(code: str, name: str) -> ComponentMetrics:
    """Shape of one component source: kind, size, imports, props and hook usage."""
    return ComponentMetrics(
        name=name,
        type='class' if 'class ' in code else 'function',
        lines=len(code.split('\n')),
        complexity=calculate_complexity(code),
        dependencies=_IMPORT.findall(code),
        props=_count(_PROPS_DECLARATION, code),
        hooks=_count(_HOOK, code),
    )
