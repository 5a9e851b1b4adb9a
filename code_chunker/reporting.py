"""
Chunk statistics and the plain-text semantic analysis report.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List

import numpy as np

from .config import MAX_INSTRUCTION_REFERENCES
from .formatting import format_size
from .models import Chunk, ChunkingStrategy

REPORT_RULE = '=' * 50
SECTION_RULE = '-' * 30

TYPE_INDICATORS = [
    ('class', 'Classes'),
    ('function', 'Functions'),
    ('config', 'Config'),
    ('test', 'Tests'),
    ('api', 'API'),
    ('component', 'Components'),
]


@dataclass
class ChunkAnalysis:
    """Summary of one chunking pass"""
    total_chunks: int
    chunking_strategy: str
    average_size: int
    largest_size: int
    smallest_size: int
    cross_references: int
    semantic_cohesion: float
    files: Dict[str, List[int]] = field(default_factory=dict)


def chunk_sizes(chunks: List[Chunk]) -> np.ndarray:
    return np.array([chunk.size for chunk in chunks], dtype=np.int64)


def get_average_chunk_size(chunks: List[Chunk]) -> int:
    if not chunks:
        return 0
    return int(np.round(chunk_sizes(chunks).mean()))


def get_largest_chunk_size(chunks: List[Chunk]) -> int:
    if not chunks:
        return 0
    return int(chunk_sizes(chunks).max())


def get_smallest_chunk_size(chunks: List[Chunk]) -> int:
    if not chunks:
        return 0
    return int(chunk_sizes(chunks).min())


def get_chunk_type_indicator(chunk: Chunk) -> str:
    """Short label for what a chunk mostly holds"""
    if any(info.classes for info in chunk.files.values()):
        return 'Classes'
    if any(info.functions for info in chunk.files.values()):
        return 'Functions'

    names = ' '.join(chunk.file_names).lower()
    for keyword, indicator in TYPE_INDICATORS[2:]:
        if keyword in names:
            return indicator
    return 'Code'


def generate_chunk_analysis_summary(chunks: List[Chunk], strategy: ChunkingStrategy) -> ChunkAnalysis:
    """
    Aggregate sizes, cross-references and file distribution.

    Semantic cohesion is the share of files that live in a single chunk;
    1.0 when no file is split (and when there are no files at all).
    """
    files: Dict[str, List[int]] = {}
    for chunk in chunks:
        for filename in chunk.files:
            files.setdefault(filename, []).append(chunk.index)

    split_files = sum(1 for indices in files.values() if len(indices) > 1)
    cohesion = 1.0 - (split_files / len(files)) if files else 1.0

    return ChunkAnalysis(
        total_chunks=len(chunks),
        chunking_strategy=strategy.value,
        average_size=get_average_chunk_size(chunks),
        largest_size=get_largest_chunk_size(chunks),
        smallest_size=get_smallest_chunk_size(chunks),
        cross_references=sum(len(chunk.cross_references) for chunk in chunks),
        semantic_cohesion=cohesion,
        files=files
    )


def export_semantic_analysis(chunks: List[Chunk], strategy: ChunkingStrategy,
                             include_timestamp: bool = False) -> str:
    """Render the analysis as plain text suitable for saving next to the chunks"""
    analysis = generate_chunk_analysis_summary(chunks, strategy)

    lines = ['SEMANTIC CHUNKING ANALYSIS REPORT', REPORT_RULE, '']
    if include_timestamp:
        lines.append(f"Generated: {datetime.now(timezone.utc).isoformat()}")
    lines.extend([
        f"Strategy: {analysis.chunking_strategy}",
        f"Total Chunks: {analysis.total_chunks}",
        f"Average Chunk Size: {format_size(analysis.average_size)}",
        f"Largest Chunk Size: {format_size(analysis.largest_size)}",
        f"Smallest Chunk Size: {format_size(analysis.smallest_size)}",
        f"Cross-References: {analysis.cross_references}",
        f"Semantic Cohesion: {analysis.semantic_cohesion * 100:.1f}%",
        '',
        'CHUNK BREAKDOWN',
        SECTION_RULE,
    ])

    for position, chunk in enumerate(chunks):
        lines.append(f"Chunk {position + 1} ({chunk.label.upper()}):")
        lines.append(f"  Size: {format_size(chunk.size)}")
        lines.append(f"  Type: {get_chunk_type_indicator(chunk)}")
        lines.append(f"  Summary: {chunk.semantic_summary or 'N/A'}")
        if chunk.cross_references:
            lines.append(f"  Cross-references: {len(chunk.cross_references)}")
            for ref in chunk.cross_references[:MAX_INSTRUCTION_REFERENCES]:
                lines.append(f"    → Chunk {ref.target_chunk_index + 1}: {ref.description}")
        lines.append('')

    lines.extend(['FILE DISTRIBUTION', SECTION_RULE])
    for filename, indices in analysis.files.items():
        lines.append(f"{filename}: Chunk(s) {', '.join(str(i + 1) for i in indices)}")

    return '\n'.join(lines) + '\n'
