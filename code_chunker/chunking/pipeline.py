"""
End-to-end chunking pass: combined text, target size and strategy in, chunks out.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from .boundary_planner import BoundaryPlanner
from .chunk_assembler import ChunkAssembler, validate_target_size
from .cross_references import CrossReferenceResolver, FileReference
from .file_collection import parse_file_collection
from .instructions import InstructionWrapper
from ..analysis import StructuralAnalyzer
from ..models import Boundary, Chunk, ChunkingStrategy, SourceFile, StructuralInfo


@dataclass
class CollectionAnalysis:
    """Size-independent analysis of one combined text"""
    content: str
    files: List[SourceFile] = field(default_factory=list)
    structures: Dict[str, StructuralInfo] = field(default_factory=dict)
    file_references: Dict[str, List[FileReference]] = field(default_factory=dict)

    @property
    def reference_count(self) -> int:
        return sum(len(refs) for refs in self.file_references.values())


@dataclass
class ChunkingResult:
    """Output of a single chunking pass"""
    chunks: List[Chunk]
    target_size: int
    strategy: ChunkingStrategy
    strategy_used: ChunkingStrategy
    boundaries: List[Boundary]
    analysis: CollectionAnalysis


def coerce_strategy(strategy: Union[str, ChunkingStrategy, None]) -> ChunkingStrategy:
    if strategy is None:
        return ChunkingStrategy.SEMANTIC
    if isinstance(strategy, ChunkingStrategy):
        return strategy
    try:
        return ChunkingStrategy(strategy)
    except ValueError:
        raise ValueError(
            f"Unsupported chunking strategy: {strategy}. "
            f"Expected one of: {', '.join(s.value for s in ChunkingStrategy)}"
        )


def chunk_assignment(chunks: List[Chunk]) -> Dict[str, List[int]]:
    """Map each file key to the indices of the chunks holding part of it"""
    assignment: Dict[str, List[int]] = {}
    for chunk in chunks:
        for key in chunk.files:
            assignment.setdefault(key, []).append(chunk.index)
    return assignment


class ChunkingPipeline:
    """
    Runs structural analysis, boundary planning, assembly, cross-reference
    resolution and instruction wrapping.

    Every call to :meth:`run` returns brand-new chunk objects; nothing from a
    previous pass is reused or patched.
    """

    def __init__(self, structural_analyzer: StructuralAnalyzer = None,
                 boundary_planner: BoundaryPlanner = None,
                 assembler: ChunkAssembler = None,
                 resolver: CrossReferenceResolver = None,
                 wrapper: InstructionWrapper = None):
        self.structural_analyzer = structural_analyzer or StructuralAnalyzer()
        self.boundary_planner = boundary_planner or BoundaryPlanner()
        self.assembler = assembler or ChunkAssembler()
        self.resolver = resolver or CrossReferenceResolver()
        self.wrapper = wrapper or InstructionWrapper()
        self.logger = logging.getLogger(__name__)

    def analyze(self, content: str) -> CollectionAnalysis:
        """Parse the file entries and analyze each one"""
        self.logger.info("Analyzing code structure for semantic chunking...")

        files = parse_file_collection(content)
        structures = self.structural_analyzer.analyze_files(files)
        file_references = self.resolver.find_file_references(files, structures)

        analysis = CollectionAnalysis(
            content=content,
            files=files,
            structures=structures,
            file_references=file_references
        )
        self.logger.info(
            f"Analysis complete: {len(files)} files, {analysis.reference_count} file references"
        )
        return analysis

    def run(self, content: str, target_size: int,
            strategy: Union[str, ChunkingStrategy] = ChunkingStrategy.SEMANTIC,
            analysis: Optional[CollectionAnalysis] = None) -> ChunkingResult:
        """Chunk ``content``; ``analysis`` may be reused across sizes for the same content"""
        validate_target_size(target_size)
        strategy = coerce_strategy(strategy)

        if analysis is None or analysis.content != content:
            analysis = self.analyze(content)

        boundaries: List[Boundary] = []
        if strategy == ChunkingStrategy.SEMANTIC:
            boundaries = self.boundary_planner.plan(content, analysis.files, analysis.structures)

        if strategy == ChunkingStrategy.SEMANTIC and boundaries:
            chunks = self.assembler.assemble(content, boundaries, target_size)
            strategy_used = ChunkingStrategy.SEMANTIC
            self._attach_cross_references(chunks, analysis)
        else:
            if strategy == ChunkingStrategy.SEMANTIC:
                self.logger.info("No semantic boundaries found, falling back to size-based chunking")
            chunks = self.assembler.assemble_by_size(content, target_size)
            strategy_used = ChunkingStrategy.SIZE_BASED

        self.wrapper.apply(chunks)

        return ChunkingResult(
            chunks=chunks,
            target_size=target_size,
            strategy=strategy,
            strategy_used=strategy_used,
            boundaries=boundaries,
            analysis=analysis
        )

    def _attach_cross_references(self, chunks: List[Chunk], analysis: CollectionAnalysis):
        references = self.resolver.resolve(
            analysis.files,
            analysis.structures,
            chunk_assignment(chunks),
            file_references=analysis.file_references
        )
        for chunk in chunks:
            chunk.cross_references = references.get(chunk.index, [])
