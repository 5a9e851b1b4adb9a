from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Dict


class ChunkingStrategy(Enum):
    """Ways of splitting the combined file collection"""
    SEMANTIC = "semantic"
    SIZE_BASED = "size-based"


class BoundaryType(Enum):
    """Kinds of markers placed in the combined text"""
    FILE_START = "file_start"
    FILE_END = "file_end"
    FUNCTION_START = "function_start"
    CLASS_START = "class_start"
    SECTION_START = "section_start"


class ReferenceType(Enum):
    """Kinds of cross-chunk dependencies"""
    IMPORT = "import"
    FUNCTION_CALL = "function_call"


@dataclass
class SourceFile:
    """One file entry parsed out of the combined text"""
    filename: str
    content: str
    start_offset: int
    end_offset: int
    body_offset: int
    key: str = ""
    metadata: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.key:
            self.key = self.filename

    @property
    def byte_size(self) -> int:
        return self.end_offset - self.start_offset

    @property
    def extension(self) -> str:
        name = self.filename.rsplit('/', 1)[-1]
        return name.rsplit('.', 1)[-1].lower() if '.' in name else ''

    @property
    def is_binary(self) -> bool:
        return self.metadata.get('type') == 'binary'


@dataclass
class FunctionInfo:
    name: str
    line: int
    kind: str = "regular"


@dataclass
class ClassInfo:
    name: str
    line: int
    inherits: List[str] = field(default_factory=list)


@dataclass
class ImportInfo:
    module: str
    imported_items: List[str]
    line: int


@dataclass
class ExportInfo:
    name: str
    kind: str
    line: int


@dataclass
class SemanticBlock:
    """A function, class or section spanning a range of lines (0-based, inclusive)"""
    type: str  # 'function', 'class', 'section'
    name: str
    start_line: int
    end_line: int
    importance: int
    depth: int = 0


@dataclass
class StructuralInfo:
    """Heuristic structure of a single file"""
    filename: str
    functions: List[FunctionInfo] = field(default_factory=list)
    classes: List[ClassInfo] = field(default_factory=list)
    imports: List[ImportInfo] = field(default_factory=list)
    exports: List[ExportInfo] = field(default_factory=list)
    semantic_blocks: List[SemanticBlock] = field(default_factory=list)
    complexity: int = 0
    file_type: str = "generic"
    priority: int = 5
    analyzer: str = ""


@dataclass
class Boundary:
    """A marker at a character offset of the combined text"""
    type: BoundaryType
    position: int
    filename: str
    importance: int
    block_name: Optional[str] = None

    @property
    def description(self) -> str:
        if self.type == BoundaryType.FILE_START:
            return f"Start of {self.filename}"
        if self.type == BoundaryType.FILE_END:
            return f"End of {self.filename}"
        block_type = self.type.value[:-len('_start')]
        return f"{block_type} {self.block_name} in {self.filename}"


@dataclass
class CrossReference:
    """A dependency from one chunk to another"""
    type: ReferenceType
    target_chunk_index: int
    target_file: str
    source_file: str
    description: str


@dataclass
class ChunkFileInfo:
    """What a chunk holds of one file"""
    importance: int = 0
    boundaries: List[Boundary] = field(default_factory=list)
    functions: List[str] = field(default_factory=list)
    classes: List[str] = field(default_factory=list)


@dataclass
class Chunk:
    """
    A contiguous slice of the combined text.

    ``content`` is the raw slice; ``wrapped_content`` is the same text with
    pacing instructions and metadata added for pasting into a chat.
    """
    index: int
    label: str
    start_pos: int
    end_pos: int
    content: str = ""
    filename: str = ""
    boundaries: List[Boundary] = field(default_factory=list)
    files: Dict[str, ChunkFileInfo] = field(default_factory=dict)
    cross_references: List[CrossReference] = field(default_factory=list)
    semantic_summary: str = ""
    ai_instructions: str = ""
    wrapped_content: str = ""
    importance: float = 0.0
    strategy: ChunkingStrategy = ChunkingStrategy.SEMANTIC

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def file_names(self) -> List[str]:
        return list(self.files.keys())
