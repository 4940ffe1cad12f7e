"""
Type-checker backed validation for TypeScript / TSX sources.

The validator talks to a ``Compiler`` backend that returns raw diagnostics
(0-based positions, TypeScript diagnostic codes). Two backends ship:

- ``TreeSitterCompiler``: in-process parse with the tree-sitter TSX/TS
  grammars. Reports syntax errors and a few structural checks using the
  codes ``tsc`` would use for them.
- ``TscCompiler``: runs a ``tsc --noEmit`` binary on a single temp file.

Diagnostics that only arise because the file is compiled alone (missing
modules, unknown globals, JSX intrinsic typings) are filtered out.
"""

import asyncio
import logging
import os
import re
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence

from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_language

from validators.base import Severity, ValidationError

logger = logging.getLogger(__name__)

SOURCE = "typescript"

# Codes that come from compiling one file without its project
ENVIRONMENTAL_CODES = frozenset({2307, 2304, 2503, 2686, 2875, 7016, 7026})
_INTRINSIC_NOISE = ("JSX.IntrinsicElements", "IntrinsicAttributes")

ERROR_CATEGORIES: Dict[int, str] = {
    1003: "syntax",
    1005: "syntax",
    1009: "syntax",
    1109: "syntax",
    1128: "syntax",
    1161: "syntax",
    17002: "syntax",
    2304: "reference",
    2451: "reference",
    2307: "module",
    2322: "type",
    2741: "type",
    7006: "type",
    7031: "type",
    2339: "property",
    17001: "property",
    2345: "argument",
    2554: "parameter",
}

ERROR_SUGGESTIONS: Dict[int, str] = {
    1003: "Add the missing identifier",
    1005: "Check for missing brackets, parentheses, or semicolons",
    1109: "Complete the expression or remove the stray token",
    1128: "Remove the stray token or complete the statement",
    2304: "Import the missing identifier or check spelling",
    2307: "Install the missing package or check the import path",
    2322: "Check the type compatibility between assigned values",
    2339: "Verify the property exists on the object type",
    2345: "Check the number and types of function arguments",
    2451: "Rename one of the declarations",
    2554: "Pass the expected number of arguments",
    7006: "Add explicit type annotations",
    7031: "Add explicit return type annotation",
    17001: "Remove the duplicated attribute",
    17002: "Make the closing tag match its opening tag",
}

DEFAULT_SUGGESTION = "Check TypeScript documentation for this error"


class CompilerError(RuntimeError):
    """The compiler backend could not produce diagnostics."""


@dataclass(frozen=True)
class CompilerDiagnostic:
    """Raw backend diagnostic. ``line`` and ``character`` are 0-based."""
    line: int
    character: int
    code: int
    message: str
    category: str = "error"


def is_environmental(diagnostic: CompilerDiagnostic) -> bool:
    if diagnostic.code in ENVIRONMENTAL_CODES:
        return True
    if diagnostic.code in (2339, 2322):
        return any(marker in diagnostic.message for marker in _INTRINSIC_NOISE)
    return False


class Compiler(ABC):
    """Backend producing diagnostics for one in-memory source file."""

    @abstractmethod
    async def check(self, source: str, file_name: str) -> List[CompilerDiagnostic]:
        ...


# ---------------------------------------------------------------------------
# tree-sitter backend
# ---------------------------------------------------------------------------

def _grammar_for(file_name: str) -> str:
    return "tsx" if file_name.endswith((".tsx", ".jsx")) else "typescript"


class TreeSitterCompiler(Compiler):
    """Syntax-level checking with the tree-sitter TypeScript grammars."""

    def __init__(self):
        self._parsers: Dict[str, Parser] = {}

    def _parser(self, grammar: str) -> Parser:
        parser = self._parsers.get(grammar)
        if parser is None:
            try:
                parser = Parser(get_language(grammar))
            except Exception as e:
                raise CompilerError(f"Failed to load {grammar} grammar: {e}") from e
            self._parsers[grammar] = parser
        return parser

    async def check(self, source: str, file_name: str) -> List[CompilerDiagnostic]:
        return self.check_sync(source, file_name)

    def check_sync(self, source: str, file_name: str) -> List[CompilerDiagnostic]:
        data = source.encode("utf-8")
        tree = self._parser(_grammar_for(file_name)).parse(data)
        lines = data.split(b"\n")

        def at(node: Node, code: int, message: str) -> CompilerDiagnostic:
            row, byte_column = node.start_point
            line_bytes = lines[row] if row < len(lines) else b""
            character = len(line_bytes[:byte_column].decode("utf-8", errors="replace"))
            return CompilerDiagnostic(row, character, code, message)

        diagnostics: List[CompilerDiagnostic] = []
        for node in _walk(tree.root_node):
            if node.is_missing:
                if node.is_named:
                    diagnostics.append(at(node, 1003, "Identifier expected."))
                else:
                    diagnostics.append(at(node, 1005, f"'{node.type}' expected."))
            elif node.is_error:
                if node.parent is None or node.parent.type == "program":
                    diagnostics.append(at(node, 1128, "Declaration or statement expected."))
                else:
                    diagnostics.append(at(node, 1109, "Expression expected."))
            elif node.type == "jsx_element":
                mismatch = _mismatched_closing_tag(node)
                if mismatch is not None:
                    close_tag, opening_name = mismatch
                    diagnostics.append(at(
                        close_tag, 17002, f"Expected corresponding JSX closing tag for '{opening_name}'.",
                    ))
            elif node.type in ("jsx_opening_element", "jsx_self_closing_element"):
                for attribute in _duplicate_attributes(node):
                    diagnostics.append(at(
                        attribute, 17001, "JSX elements cannot have multiple attributes with the same name.",
                    ))

        for node, name in _redeclared_bindings(tree.root_node):
            diagnostics.append(at(node, 2451, f"Cannot redeclare block-scoped variable '{name}'."))

        diagnostics.sort(key=lambda d: (d.line, d.character))
        return diagnostics


def _walk(root: Node) -> Iterator[Node]:
    """Pre-order walk that does not descend into ERROR subtrees."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        if not node.is_error:
            stack.extend(reversed(node.children))


def _text(node: Optional[Node]) -> Optional[str]:
    if node is None or node.text is None:
        return None
    return node.text.decode("utf-8", errors="replace")


def _mismatched_closing_tag(element: Node):
    children = element.children
    if len(children) < 2:
        return None
    opening, closing = children[0], children[-1]
    if opening.type != "jsx_opening_element" or closing.type != "jsx_closing_element":
        return None
    opening_name = _text(opening.child_by_field_name("name"))
    closing_name = _text(closing.child_by_field_name("name"))
    if opening_name is None or closing_name is None or opening_name == closing_name:
        return None
    return closing, opening_name


def _duplicate_attributes(element: Node) -> List[Node]:
    seen = set()
    duplicates = []
    for child in element.named_children:
        if child.type != "jsx_attribute" or not child.named_children:
            continue
        name = _text(child.named_children[0])
        if name in seen:
            duplicates.append(child)
        seen.add(name)
    return duplicates


def _declared_names(statement: Node) -> Iterator[Node]:
    if statement.type == "export_statement":
        declaration = statement.child_by_field_name("declaration")
        if declaration is not None:
            yield from _declared_names(declaration)
    elif statement.type == "lexical_declaration":
        for declarator in statement.named_children:
            if declarator.type == "variable_declarator":
                name = declarator.child_by_field_name("name")
                if name is not None and name.type == "identifier":
                    yield name
    elif statement.type == "class_declaration":
        name = statement.child_by_field_name("name")
        if name is not None:
            yield name


def _redeclared_bindings(program: Node):
    seen = set()
    for statement in program.named_children:
        for name_node in _declared_names(statement):
            name = _text(name_node)
            if name in seen:
                yield name_node, name
            seen.add(name)


# ---------------------------------------------------------------------------
# tsc backend
# ---------------------------------------------------------------------------

TSC_OPTIONS: Sequence[str] = (
    "--noEmit",
    "--jsx", "react-jsx",
    "--target", "ES2020",
    "--module", "ESNext",
    "--moduleResolution", "node",
    "--skipLibCheck",
    "--esModuleInterop",
    "--allowJs",
    "--pretty", "false",
)

_TSC_LINE = re.compile(
    r"^(?P<file>.+?)\((?P<line>\d+),(?P<col>\d+)\): (?P<category>error|warning|message) "
    r"TS(?P<code>\d+): (?P<message>.*)$"
)


def parse_tsc_output(output: str) -> List[CompilerDiagnostic]:
    diagnostics = []
    for line in output.splitlines():
        match = _TSC_LINE.match(line.strip())
        if not match:
            continue
        diagnostics.append(CompilerDiagnostic(
            line=int(match.group("line")) - 1,
            character=int(match.group("col")) - 1,
            code=int(match.group("code")),
            message=match.group("message"),
            category=match.group("category"),
        ))
    return diagnostics


class TscCompiler(Compiler):
    """Run a TypeScript compiler binary over one temporary file."""

    def __init__(self, executable: str = "tsc", timeout: float = 30.0):
        self.executable = executable
        self.timeout = timeout

    async def check(self, source: str, file_name: str) -> List[CompilerDiagnostic]:
        with tempfile.TemporaryDirectory(prefix="figma-codegen-") as workdir:
            path = os.path.join(workdir, os.path.basename(file_name))
            with open(path, "w", encoding="utf-8") as f:
                f.write(source)

            try:
                process = await asyncio.create_subprocess_exec(
                    self.executable, *TSC_OPTIONS, path,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                    cwd=workdir,
                )
            except OSError as e:
                raise CompilerError(f"Could not start {self.executable}: {e}") from e

            try:
                stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
            except asyncio.TimeoutError as e:
                process.kill()
                await process.wait()
                raise CompilerError(f"{self.executable} timed out after {self.timeout}s") from e

        output = stdout.decode("utf-8", errors="replace")
        diagnostics = parse_tsc_output(output)
        if process.returncode not in (0, 1, 2) or (process.returncode and not diagnostics and stderr):
            raise CompilerError(stderr.decode("utf-8", errors="replace").strip() or output.strip())
        return diagnostics


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------

_SEVERITIES = {
    "error": Severity.ERROR,
    "warning": Severity.WARNING,
}


class TypeScriptValidator:
    """Map compiler diagnostics to validation findings."""

    def __init__(self, compiler: Optional[Compiler] = None):
        self.compiler = compiler or TreeSitterCompiler()

    async def validate(self, code: str, file_name: str = "component.tsx") -> List[ValidationError]:
        try:
            diagnostics = await self.compiler.check(code, file_name)
        except Exception as e:
            logger.warning("TypeScript validation error: %s", e)
            return [ValidationError(
                line=1,
                column=1,
                message=f"TypeScript validation failed: {e}",
                severity=Severity.WARNING,
                source=SOURCE,
                category="system",
                suggestion="Check that the TypeScript backend is installed and configured",
            )]

        return [self._to_error(d) for d in diagnostics if not is_environmental(d)]

    @staticmethod
    def _to_error(diagnostic: CompilerDiagnostic) -> ValidationError:
        return ValidationError(
            line=diagnostic.line + 1,
            column=diagnostic.character + 1,
            message=diagnostic.message,
            severity=_SEVERITIES.get(diagnostic.category, Severity.INFO),
            source=SOURCE,
            category=ERROR_CATEGORIES.get(diagnostic.code, "general"),
            suggestion=ERROR_SUGGESTIONS.get(diagnostic.code, DEFAULT_SUGGESTION),
            code=diagnostic.code,
        )
