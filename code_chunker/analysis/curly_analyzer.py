"""
Structure analyzer for curly-brace languages.

Covers JavaScript and TypeScript (ES modules, CommonJS, classes, arrow
functions) as well as Java, Kotlin and C#. Blocks are nested by brace depth:
a declaration opening at the same or a shallower depth closes the blocks
above it.
"""

import re
from typing import List, Optional, Tuple

from .base_analyzer import BaseStructureAnalyzer, BlockTracker, BlockType
from ..models import StructuralInfo, FunctionInfo, ClassInfo, ImportInfo, ExportInfo

CONTROL_KEYWORDS = {
    'if', 'for', 'while', 'switch', 'catch', 'return', 'function', 'else',
    'do', 'try', 'finally', 'with', 'new', 'typeof', 'await', 'yield',
    'throw', 'case', 'delete', 'void', 'sizeof', 'lock', 'using', 'foreach',
    'synchronized', 'when', 'super', 'this'
}

MODIFIERS = (
    r'(?:(?:public|private|protected|internal|static|final|abstract|override|virtual|'
    r'async|synchronized|suspend|open|inline|sealed|readonly|partial|extern|unsafe|'
    r'export|default|declare|native|operator|infix|tailrec|data|inner|enum|annotation)\s+)*'
)

EXTENSION_FILE_TYPES = {
    'js': 'javascript', 'jsx': 'javascript', 'mjs': 'javascript', 'cjs': 'javascript',
    'ts': 'typescript', 'tsx': 'typescript',
    'java': 'java', 'kt': 'kotlin', 'kts': 'kotlin', 'cs': 'csharp',
}


class CurlyBraceAnalyzer(BaseStructureAnalyzer):
    """Analyzer for JavaScript-family, Java, Kotlin and C# sources"""

    file_type = "javascript"

    def __init__(self):
        super().__init__()

        self.function_patterns = {
            'function_decl': re.compile(r'^\s*(?:export\s+)?(?:default\s+)?(?:async\s+)?function\s*\*?\s*(\w+)\s*\('),
            'arrow_func': re.compile(r'^\s*(?:export\s+)?(?:const|let|var)\s+(\w+)\s*(?::\s*[^=]+)?=\s*(?:async\s+)?(?:\([^)]*\)|\w+)\s*(?::\s*[^=]+)?=>'),
            'function_expr': re.compile(r'^\s*(?:export\s+)?(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s+)?function\b'),
            'object_method': re.compile(r'^\s*(\w+)\s*:\s*(?:async\s+)?function\s*\*?\s*\('),
            'kotlin_fun': re.compile(r'^\s*' + MODIFIERS + r'fun\s+(?:<[^>]+>\s*)?(?:[\w.]+\.)?(\w+)\s*\('),
            'method_def': re.compile(
                r'^\s*' + MODIFIERS +
                r'(?:[\w<>\[\],.?]+\s+)?(\w+)\s*(?:<[^>]*>)?\s*\([^;]*\)\s*'
                r'(?::\s*[\w<>\[\]|?,. ]+)?\s*(?:throws\s+[\w., ]+)?\s*(?:\{|=>)\s*(?:\}\s*)?$'
            ),
            # Opening brace on the next line (C# / Allman style) needs a modifier
            'allman_method': re.compile(
                r'^\s*(?:(?:public|private|protected|internal|static|override|virtual|'
                r'async|abstract|sealed|final|synchronized)\s+)+'
                r'(?:[\w<>\[\],.?]+\s+)?(\w+)\s*(?:<[^>]*>)?\s*\([^;]*\)\s*(?:throws\s+[\w., ]+)?$'
            ),
        }

        self.class_pattern = re.compile(
            r'^\s*' + MODIFIERS +
            r'(class|interface|struct|record|object|enum)\s+(\w+)'
            r'(?:\s*<[^>]*>)?(?:\s+extends\s+([\w.<>, ]+?))?(?:\s+implements\s+([\w.<>, ]+?))?'
            r'(?:\s*:\s*([\w.<>(), ]+?))?\s*(?:\{|$|\()'
        )

        self.import_patterns = {
            'es6_import': re.compile(r'^\s*import\s+(?:type\s+)?(?:\{([^}]*)\}|\*\s+as\s+(\w+)|(\w+)(?:\s*,\s*\{([^}]*)\})?)\s+from\s+[\'"]([^\'"]+)[\'"]'),
            'side_effect_import': re.compile(r'^\s*import\s+[\'"]([^\'"]+)[\'"]'),
            'commonjs_require': re.compile(r'^\s*(?:const|let|var)\s+(\{[^}]*\}|\w+)\s*=\s*require\s*\(\s*[\'"]([^\'"]+)[\'"]\s*\)'),
            'jvm_import': re.compile(r'^\s*import\s+(?:static\s+)?([\w.]+)(?:\.\*)?\s*;?\s*$'),
            'csharp_using': re.compile(r'^\s*using\s+(?:static\s+)?([\w.]+)\s*;'),
        }

        self.export_pattern = re.compile(r'^\s*export\s+(default\s+)?(?:(?:async\s+)?(?:const|let|var|function\*?|class|interface|type|enum)\s+)?(\w+)')
        self.commonjs_export_pattern = re.compile(r'^\s*(?:module\.exports|exports)(?:\.(\w+))?\s*=')
        self.public_type_pattern = re.compile(r'^\s*public\s+(?:\w+\s+)*(?:class|interface|enum|record|struct)\s+(\w+)')

    def get_supported_extensions(self) -> List[str]:
        return ['.js', '.jsx', '.mjs', '.cjs', '.ts', '.tsx', '.java', '.kt', '.kts', '.cs']

    def detect_file_type(self, filename: str) -> str:
        extension = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
        return EXTENSION_FILE_TYPES.get(extension, self.file_type)

    def scan(self, filename: str, lines: List[str], structure: StructuralInfo) -> None:
        tracker = BlockTracker()
        brace_depth = 0
        in_block_comment = False

        for i, line in enumerate(lines):
            code, in_block_comment = self._strip_comments(line, in_block_comment)
            stripped = code.strip()
            if not stripped:
                continue

            depth = brace_depth
            brace_depth = max(0, brace_depth + code.count('{') - code.count('}'))

            self._collect_imports(code, i, structure)
            self._collect_exports(code, i, structure)

            class_match = self.class_pattern.match(code)
            if class_match:
                name = class_match.group(2)
                tracker.open(BlockType.CLASS, name, i, depth)
                structure.classes.append(ClassInfo(
                    name=name,
                    line=i + 1,
                    inherits=self._inherits(class_match)
                ))
                continue

            function_name = self._match_function(code)
            if function_name:
                tracker.open(BlockType.FUNCTION, function_name, i, depth)
                structure.functions.append(FunctionInfo(
                    name=function_name,
                    line=i + 1,
                    kind=self.detect_function_type(code)
                ))

        structure.semantic_blocks = tracker.close_all(len(lines) - 1)

    def detect_function_type(self, line: str) -> str:
        if 'async' in line:
            return 'async'
        if '=>' in line:
            return 'arrow'
        if 'function*' in line:
            return 'generator'
        if 'export' in line:
            return 'exported'
        return 'regular'

    def _match_function(self, code: str) -> Optional[str]:
        for pattern_name, pattern in self.function_patterns.items():
            match = pattern.match(code)
            if not match:
                continue
            name = match.group(1)
            if name in CONTROL_KEYWORDS:
                continue
            return name
        return None

    def _inherits(self, match) -> List[str]:
        inherits = []
        for group in (3, 4, 5):
            inherits.extend(
                item.split('(')[0].strip() for item in self._split_items(match.group(group))
            )
        return [item for item in inherits if item]

    def _collect_imports(self, code: str, line_index: int, structure: StructuralInfo):
        for pattern_name, pattern in self.import_patterns.items():
            match = pattern.match(code)
            if not match:
                continue

            module, items = self._import_parts(pattern_name, match)
            structure.imports.append(ImportInfo(
                module=module,
                imported_items=items,
                line=line_index + 1
            ))
            return

    def _import_parts(self, pattern_name: str, match) -> Tuple[str, List[str]]:
        if pattern_name == 'es6_import':
            named, namespace, default, extra_named, module = match.groups()
            items = []
            if default:
                items.append(default)
            if namespace:
                items.append(namespace)
            items.extend(self._clean_named(named))
            items.extend(self._clean_named(extra_named))
            return module, items
        if pattern_name == 'side_effect_import':
            return match.group(1), []
        if pattern_name == 'commonjs_require':
            target = match.group(1)
            items = self._clean_named(target.strip('{}')) if target.startswith('{') else [target]
            return match.group(2), items
        # Java / Kotlin imports and C# usings
        module = match.group(1)
        return module, [module.rsplit('.', 1)[-1]]

    def _clean_named(self, named: Optional[str]) -> List[str]:
        return [item.split(' as ')[0].split(':')[0].strip() for item in self._split_items(named)]

    def _collect_exports(self, code: str, line_index: int, structure: StructuralInfo):
        match = self.export_pattern.match(code)
        if match:
            structure.exports.append(ExportInfo(
                name=match.group(2),
                kind='default' if match.group(1) else 'named',
                line=line_index + 1
            ))
            return

        match = self.commonjs_export_pattern.match(code)
        if match:
            structure.exports.append(ExportInfo(
                name=match.group(1) or 'module.exports',
                kind='commonjs',
                line=line_index + 1
            ))
            return

        match = self.public_type_pattern.match(code)
        if match:
            structure.exports.append(ExportInfo(name=match.group(1), kind='public', line=line_index + 1))

    def _strip_comments(self, line: str, in_block_comment: bool) -> Tuple[str, bool]:
        """Remove // and /* */ comments from a line for detection purposes only"""
        result = []
        i = 0
        while i < len(line):
            if in_block_comment:
                end = line.find('*/', i)
                if end == -1:
                    return ''.join(result), True
                i = end + 2
                in_block_comment = False
                continue

            start = line.find('/*', i)
            single = line.find('//', i)
            if single != -1 and (start == -1 or single < start) and not self._inside_url(line, single):
                result.append(line[i:single])
                break
            if start == -1:
                result.append(line[i:])
                break
            result.append(line[i:start])
            i = start + 2
            in_block_comment = True

        return ''.join(result), in_block_comment

    def _inside_url(self, line: str, index: int) -> bool:
        return index > 0 and line[index - 1] == ':'
