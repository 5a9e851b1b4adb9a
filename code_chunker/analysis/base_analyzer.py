"""
Abstract base class for language-specific structure analyzers.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from enum import Enum
import logging

from ..models import StructuralInfo, SemanticBlock
from ..exceptions import ParseHeuristicMiss


class BlockType(Enum):
    """Types of semantic blocks an analyzer can detect"""
    FUNCTION = "function"
    CLASS = "class"
    SECTION = "section"


# Lowercase keyword lists used for importance scoring
HIGH_IMPORTANCE_PATTERNS = [
    'main', 'index', 'init', 'constructor', 'setup', 'configure',
    'render', 'componentdidmount', 'useeffect', 'ngoninit',
    'oncreate', 'onstart', 'onresume'
]

MEDIUM_IMPORTANCE_PATTERNS = [
    'handler', 'controller', 'service', 'manager', 'factory',
    'component', 'view', 'model', 'api', 'route'
]


def calculate_block_importance(name: str, block_type: BlockType) -> int:
    """
    Score a block from 1 to 10 using its name and type.

    Classes start higher, entry-point names score highest, private, test and
    helper names score lowest. The same name and type always give the same score.
    """
    importance = 5
    lowered = name.lower()

    if block_type == BlockType.CLASS:
        importance += 3
    if block_type == BlockType.FUNCTION and name.startswith('_'):
        importance -= 2
    if 'test' in lowered:
        importance -= 1
    if 'util' in lowered or 'helper' in lowered:
        importance -= 1

    for pattern in HIGH_IMPORTANCE_PATTERNS:
        if pattern in lowered:
            importance += 3
            break

    for pattern in MEDIUM_IMPORTANCE_PATTERNS:
        if pattern in lowered:
            importance += 2
            break

    return max(1, min(10, importance))


class BlockTracker:
    """
    Tracks open blocks while scanning lines.

    A block stays open until a new block opens at the same or a shallower
    depth, or until the end of the file.
    """

    def __init__(self):
        self._open: List[SemanticBlock] = []
        self.closed: List[SemanticBlock] = []

    def open(self, block_type: BlockType, name: str, line: int, depth: int) -> SemanticBlock:
        while self._open and self._open[-1].depth >= depth:
            self._close(self._open.pop(), line - 1)

        block = SemanticBlock(
            type=block_type.value,
            name=name,
            start_line=line,
            end_line=line,
            importance=calculate_block_importance(name, block_type),
            depth=depth
        )
        self._open.append(block)
        return block

    def close_all(self, last_line: int) -> List[SemanticBlock]:
        while self._open:
            self._close(self._open.pop(), last_line)
        return sorted(self.closed, key=lambda b: (b.start_line, b.depth))

    def _close(self, block: SemanticBlock, end_line: int):
        block.end_line = max(block.start_line, end_line)
        self.closed.append(block)


class BaseStructureAnalyzer(ABC):
    """Abstract base class for language-specific structure analysis"""

    file_type = "generic"
    # Source analyzers refuse content that cannot be source code
    requires_source = True

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def scan(self, filename: str, lines: List[str], structure: StructuralInfo) -> None:
        """Fill ``structure`` from the file's lines"""
        pass

    @abstractmethod
    def get_supported_extensions(self) -> List[str]:
        """Return list of file extensions this analyzer supports"""
        pass

    def analyze(self, filename: str, content: str) -> StructuralInfo:
        """Main entry point: heuristic structure of one file"""
        structure = StructuralInfo(
            filename=filename,
            file_type=self.detect_file_type(filename),
            analyzer=self.__class__.__name__
        )

        if not content:
            structure.priority = self.calculate_file_priority(filename, structure)
            return structure

        if self.requires_source and "\x00" in content:
            raise ParseHeuristicMiss(filename, "content contains NUL bytes")

        lines = content.split('\n')
        self.scan(filename, lines, structure)

        if not structure.semantic_blocks and content.strip():
            structure.semantic_blocks.append(self.whole_file_block(filename, lines))

        structure.complexity = self.calculate_complexity(structure)
        structure.priority = self.calculate_file_priority(filename, structure)
        return structure

    def whole_file_block(self, filename: str, lines: List[str]) -> SemanticBlock:
        name = filename.rsplit('/', 1)[-1]
        return SemanticBlock(
            type=BlockType.SECTION.value,
            name=name,
            start_line=0,
            end_line=max(0, len(lines) - 1),
            importance=calculate_block_importance(name, BlockType.SECTION)
        )

    def calculate_complexity(self, structure: StructuralInfo) -> int:
        return (len(structure.functions) * 2 +
                len(structure.classes) * 3 +
                len(structure.imports) +
                len(structure.exports))

    def calculate_file_priority(self, filename: str, structure: StructuralInfo) -> int:
        """Rank a whole file from 1 to 10 for chunk instructions"""
        priority = 5
        lowered = filename.lower()

        if 'index' in lowered or 'main' in lowered or 'app' in lowered:
            priority += 3

        if structure.complexity > 20:
            priority += 2
        elif structure.complexity > 10:
            priority += 1

        if len(structure.exports) > 5:
            priority += 1

        if 'test' in lowered or 'spec' in lowered:
            priority -= 2

        if 'config' in lowered or 'setting' in lowered:
            priority += 1

        return max(1, min(10, priority))

    def detect_file_type(self, filename: str) -> str:
        return self.file_type

    def _get_indent_level(self, line: str) -> int:
        """Get the indentation level of a line"""
        return len(line) - len(line.lstrip())

    def _split_items(self, text: Optional[str]) -> List[str]:
        if not text:
            return []
        return [item.strip() for item in text.split(',') if item.strip()]
