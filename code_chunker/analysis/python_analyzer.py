"""
Python-specific structure analyzer.

Scans line by line with regular expressions; blocks are nested by
indentation. Docstrings and comments are skipped for detection.
"""

import re
from typing import List

from .base_analyzer import BaseStructureAnalyzer, BlockTracker, BlockType
from ..models import StructuralInfo, FunctionInfo, ClassInfo, ImportInfo, ExportInfo


class PythonAnalyzer(BaseStructureAnalyzer):
    """Indentation-aware analyzer for Python sources"""

    file_type = "python"

    def __init__(self):
        super().__init__()

        # Python-specific patterns
        self.class_pattern = re.compile(r'^(\s*)class\s+([A-Za-z_][A-Za-z0-9_]*)\s*(?:\(([^)]*)\))?\s*:')
        self.function_pattern = re.compile(r'^(\s*)(async\s+)?def\s+([A-Za-z_][A-Za-z0-9_]*)\s*\(')
        self.from_import_pattern = re.compile(r'^\s*from\s+([\w.]+)\s+import\s+(.+)$')
        self.import_pattern = re.compile(r'^\s*import\s+(.+)$')
        self.all_pattern = re.compile(r'^__all__\s*=\s*[\[(](.*)[\])]')

    def get_supported_extensions(self) -> List[str]:
        return ['.py', '.pyx', '.pyi']

    def scan(self, filename: str, lines: List[str], structure: StructuralInfo) -> None:
        tracker = BlockTracker()
        docstring_quote = None

        for i, line in enumerate(lines):
            stripped = line.strip()

            if docstring_quote:
                if docstring_quote in stripped:
                    docstring_quote = None
                continue

            if not stripped or stripped.startswith('#'):
                continue

            quote = self._opening_docstring(stripped)
            if quote:
                # A docstring that closes on its own line is skipped as one line
                if stripped.count(quote) < 2:
                    docstring_quote = quote
                continue

            indent = self._get_indent_level(line)

            class_match = self.class_pattern.match(line)
            if class_match:
                name = class_match.group(2)
                tracker.open(BlockType.CLASS, name, i, indent)
                structure.classes.append(ClassInfo(
                    name=name,
                    line=i + 1,
                    inherits=self._split_items(class_match.group(3))
                ))
                if indent == 0 and not name.startswith('_'):
                    structure.exports.append(ExportInfo(name=name, kind='class', line=i + 1))
                continue

            func_match = self.function_pattern.match(line)
            if func_match:
                name = func_match.group(3)
                tracker.open(BlockType.FUNCTION, name, i, indent)
                structure.functions.append(FunctionInfo(
                    name=name,
                    line=i + 1,
                    kind=self._function_kind(name, bool(func_match.group(2)))
                ))
                if indent == 0 and not name.startswith('_'):
                    structure.exports.append(ExportInfo(name=name, kind='function', line=i + 1))
                continue

            self._collect_import(line, i, structure)

            all_match = self.all_pattern.match(line)
            if all_match:
                for item in self._split_items(all_match.group(1)):
                    structure.exports.append(ExportInfo(name=item.strip('\'"'), kind='all', line=i + 1))

        structure.semantic_blocks = tracker.close_all(len(lines) - 1)

    def _collect_import(self, line: str, line_index: int, structure: StructuralInfo):
        from_match = self.from_import_pattern.match(line)
        if from_match:
            items = from_match.group(2).strip().strip('()\\').strip()
            structure.imports.append(ImportInfo(
                module=from_match.group(1),
                imported_items=[item.split(' as ')[0].strip() for item in self._split_items(items)],
                line=line_index + 1
            ))
            return

        import_match = self.import_pattern.match(line)
        if import_match:
            for item in self._split_items(import_match.group(1)):
                module = item.split(' as ')[0].strip()
                structure.imports.append(ImportInfo(
                    module=module,
                    imported_items=[module.rsplit('.', 1)[-1]],
                    line=line_index + 1
                ))

    def _opening_docstring(self, stripped: str):
        for prefix in ('', 'r', 'u', 'b', 'f'):
            for quote in ('"""', "'''"):
                if stripped.startswith(prefix + quote):
                    return quote
        return None

    def _function_kind(self, name: str, is_async: bool) -> str:
        if is_async:
            return 'async'
        if name.startswith('__') and name.endswith('__'):
            return 'special'
        if name.startswith('_'):
            return 'private'
        return 'regular'
