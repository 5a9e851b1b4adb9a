"""
Global boundary planning over the combined text.
"""

import logging
from typing import Dict, List

from ..config import BOUNDARY_IMPORTANCE_THRESHOLD
from ..models import Boundary, BoundaryType, SemanticBlock, SourceFile, StructuralInfo

BLOCK_BOUNDARY_TYPES = {
    'function': BoundaryType.FUNCTION_START,
    'class': BoundaryType.CLASS_START,
    'section': BoundaryType.SECTION_START,
}

# Tie-break order for boundaries sharing a position within one file
TYPE_RANK = {
    BoundaryType.FILE_START: 0,
    BoundaryType.FUNCTION_START: 1,
    BoundaryType.CLASS_START: 1,
    BoundaryType.SECTION_START: 1,
    BoundaryType.FILE_END: 2,
}

FILE_START_IMPORTANCE = 10
FILE_END_IMPORTANCE = 8


def line_to_position(text: str, source_file: SourceFile, line_number: int) -> int:
    """
    Approximate the offset of a file's line in the combined text.

    The offset is ``start_offset + line_number * average line length`` of the
    whole entry, snapped back to the beginning of the line it lands on. This
    is an approximation: on files whose line lengths vary a lot the boundary
    can land a few lines away from the block it stands for. Line 0 maps to the
    start of the entry.
    """
    span = source_file.end_offset - source_file.start_offset
    if span <= 0 or line_number <= 0:
        return source_file.start_offset

    entry_lines = text.count('\n', source_file.start_offset, source_file.end_offset) + 1
    average_line_length = span / entry_lines
    position = source_file.start_offset + int(line_number * average_line_length)
    position = min(position, source_file.end_offset)

    line_start = text.rfind('\n', source_file.start_offset, position)
    if line_start == -1:
        return source_file.start_offset
    return line_start + 1


class BoundaryPlanner:
    """Turns per-file structures into a sorted list of boundaries"""

    def __init__(self, importance_threshold: int = None):
        self.importance_threshold = (
            BOUNDARY_IMPORTANCE_THRESHOLD if importance_threshold is None else importance_threshold
        )
        self.logger = logging.getLogger(__name__)

    def plan(self, text: str, files: List[SourceFile],
             structures: Dict[str, StructuralInfo]) -> List[Boundary]:
        """
        Emit one file_start and one file_end per file plus one boundary per
        semantic block whose importance reaches the threshold.

        The result is sorted by position; ties are broken by file order, then
        file_start before block boundaries before file_end.
        """
        keyed = []

        for file_order, source_file in enumerate(files):
            keyed.append(((source_file.start_offset, file_order, TYPE_RANK[BoundaryType.FILE_START], 0), Boundary(
                type=BoundaryType.FILE_START,
                position=source_file.start_offset,
                filename=source_file.key,
                importance=FILE_START_IMPORTANCE
            )))

            structure = structures.get(source_file.key)
            blocks = structure.semantic_blocks if structure else []
            for block_order, block in enumerate(blocks):
                if block.importance < self.importance_threshold:
                    continue
                boundary = self._block_boundary(text, source_file, block)
                keyed.append(((boundary.position, file_order, TYPE_RANK[boundary.type], block_order + 1), boundary))

            keyed.append(((source_file.end_offset, file_order, TYPE_RANK[BoundaryType.FILE_END], 0), Boundary(
                type=BoundaryType.FILE_END,
                position=source_file.end_offset,
                filename=source_file.key,
                importance=FILE_END_IMPORTANCE
            )))

        keyed.sort(key=lambda item: item[0])
        boundaries = [boundary for _, boundary in keyed]

        self.logger.info(f"Planned {len(boundaries)} boundaries across {len(files)} files")
        return boundaries

    def _block_boundary(self, text: str, source_file: SourceFile, block: SemanticBlock) -> Boundary:
        position = line_to_position(text, source_file, self._entry_line(text, source_file, block))
        return Boundary(
            type=BLOCK_BOUNDARY_TYPES.get(block.type, BoundaryType.SECTION_START),
            position=position,
            filename=source_file.key,
            importance=block.importance,
            block_name=block.name
        )

    def _entry_line(self, text: str, source_file: SourceFile, block: SemanticBlock) -> int:
        # Block lines count from the body; line 0 stays at the entry start so a
        # block at the top of a file never splits the header from its body.
        if block.start_line <= 0:
            return 0
        header_lines = text.count('\n', source_file.start_offset, source_file.body_offset)
        return header_lines + block.start_line
