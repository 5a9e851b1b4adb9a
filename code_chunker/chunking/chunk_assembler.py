"""
Greedy assembly of boundary-delimited segments into size-bounded chunks.
"""

import re
import logging
from typing import List, Optional, Tuple

from .file_collection import DELIMITER
from ..formatting import chunk_label, format_size
from ..models import Boundary, BoundaryType, Chunk, ChunkFileInfo, ChunkingStrategy

HEADER_MARKER = DELIMITER + '\nfilename: '

Segment = Tuple[int, int, Optional[Boundary]]


def validate_target_size(target_size: int):
    if not isinstance(target_size, int) or isinstance(target_size, bool) or target_size <= 0:
        raise ValueError(f"Target chunk size must be a positive integer, got {target_size!r}")


class ChunkAssembler:
    """
    Packs the text between consecutive boundaries into chunks.

    Segments are never split: a chunk is closed before a segment that would
    push it past the target size, and a segment larger than the target
    becomes a chunk of its own. Chunks cover the text without gaps or
    overlap, so joining their raw content gives back the input.
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    def assemble(self, content: str, boundaries: List[Boundary], target_size: int) -> List[Chunk]:
        """Semantic assembly; identical inputs always give identical chunks"""
        validate_target_size(target_size)

        if not content:
            return []

        self.logger.info(f"Creating semantic chunks with target size {format_size(target_size)}...")

        if target_size >= len(content):
            chunk = self._new_chunk(0, 0)
            chunk.end_pos = len(content)
            for boundary in boundaries:
                self._register_boundary(chunk, boundary)
            return [self._finalize_chunk(chunk, content)]

        chunks = []
        current = None
        # Boundaries of empty segments travel with the next non-empty segment
        pending: List[Boundary] = []

        for start, end, boundary in self._segments(content, boundaries):
            if boundary is not None:
                pending.append(boundary)
            if end <= start:
                continue

            segment_size = end - start
            if current is None:
                current = self._new_chunk(len(chunks), start)
            elif current.end_pos > current.start_pos and \
                    (current.end_pos - current.start_pos) + segment_size > target_size:
                chunks.append(self._finalize_chunk(current, content))
                current = self._new_chunk(len(chunks), start)

            current.end_pos = end
            for pending_boundary in pending:
                self._register_boundary(current, pending_boundary)
            pending = []

        if current is not None:
            for pending_boundary in pending:
                self._register_boundary(current, pending_boundary)
            chunks.append(self._finalize_chunk(current, content))

        self.logger.info(f"Created {len(chunks)} semantic chunks")
        return chunks

    def assemble_by_size(self, content: str, target_size: int) -> List[Chunk]:
        """
        Split purely by length.

        A break goes before a file header that sits in the second half of the
        window, otherwise after the last newline in the window. A line longer
        than the target is kept whole.
        """
        validate_target_size(target_size)

        chunks = []
        start = 0
        while start < len(content):
            end = self._size_break(content, start, target_size)
            index = len(chunks)
            label = chunk_label(index)
            chunks.append(Chunk(
                index=index,
                label=label,
                start_pos=start,
                end_pos=end,
                content=content[start:end],
                filename=f"size_based_chunk_{label}",
                semantic_summary=f"Size-based chunk {index + 1}",
                strategy=ChunkingStrategy.SIZE_BASED
            ))
            start = end

        self.logger.info(f"Created {len(chunks)} size-based chunks")
        return chunks

    def generate_semantic_summary(self, chunk: Chunk) -> str:
        file_names = chunk.file_names
        total_functions = sum(len(info.functions) for info in chunk.files.values())
        total_classes = sum(len(info.classes) for info in chunk.files.values())

        summary = f"Semantic chunk containing {len(file_names)} file(s)"
        if file_names and len(file_names) <= 3:
            summary += f": {', '.join(file_names)}"
        elif file_names:
            summary += f" including {', '.join(file_names[:2])} and {len(file_names) - 2} others"

        if total_functions > 0 or total_classes > 0:
            summary += f" with {total_functions} function(s) and {total_classes} class(es)"

        return summary

    def _segments(self, content: str, boundaries: List[Boundary]) -> List[Segment]:
        length = len(content)
        ordered = sorted(boundaries, key=lambda b: b.position)
        if not ordered:
            return [(0, length, None)]

        def clamp(position: int) -> int:
            return max(0, min(length, position))

        segments = []
        first = clamp(ordered[0].position)
        if first > 0:
            segments.append((0, first, None))

        for boundary, next_boundary in zip(ordered, ordered[1:]):
            segments.append((clamp(boundary.position), clamp(next_boundary.position), boundary))

        # Empty when the last boundary sits at the end of the text
        segments.append((clamp(ordered[-1].position), length, ordered[-1]))

        return segments

    def _size_break(self, content: str, start: int, target_size: int) -> int:
        limit = start + target_size
        if limit >= len(content):
            return len(content)

        header = content.rfind(HEADER_MARKER, start + 1, limit)
        if header != -1 and content[header - 1] == '\n' and header - start >= target_size // 2:
            return header

        newline = content.rfind('\n', start, limit)
        if newline != -1:
            return newline + 1

        next_newline = content.find('\n', limit)
        return len(content) if next_newline == -1 else next_newline + 1

    def _new_chunk(self, index: int, start_pos: int) -> Chunk:
        return Chunk(
            index=index,
            label=chunk_label(index),
            start_pos=start_pos,
            end_pos=start_pos
        )

    def _register_boundary(self, chunk: Chunk, boundary: Boundary):
        chunk.boundaries.append(boundary)

        # Text after a file's end marker is separator text, not part of the file
        if boundary.type == BoundaryType.FILE_END:
            return

        file_info = chunk.files.setdefault(boundary.filename, ChunkFileInfo())
        file_info.boundaries.append(boundary)
        file_info.importance = max(file_info.importance, boundary.importance)

        if boundary.type == BoundaryType.FUNCTION_START:
            file_info.functions.append(boundary.block_name)
        elif boundary.type == BoundaryType.CLASS_START:
            file_info.classes.append(boundary.block_name)

    def _finalize_chunk(self, chunk: Chunk, content: str) -> Chunk:
        chunk.content = content[chunk.start_pos:chunk.end_pos]
        chunk.semantic_summary = self.generate_semantic_summary(chunk)

        main_files = chunk.file_names[:3]
        if main_files:
            suffix = re.sub(r'[^a-zA-Z0-9]', '_', '_'.join(main_files))
            chunk.filename = f"semantic_chunk_{chunk.label}_{suffix}"
        else:
            chunk.filename = f"semantic_chunk_{chunk.label}"

        if chunk.files:
            chunk.importance = sum(info.importance for info in chunk.files.values()) / len(chunk.files)

        return chunk
