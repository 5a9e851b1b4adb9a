"""
Chunking session state and the chunk-size controller.
"""

import logging
from enum import Enum
from typing import List, Optional, Union

from .instructions import InstructionWrapper
from .pipeline import ChunkingPipeline, ChunkingResult, CollectionAnalysis, coerce_strategy
from .. import reporting
from ..config import DEFAULT_CHUNK_SIZE, MIN_CHUNK_SIZE, get_default_strategy
from ..exceptions import RechunkFailure
from ..formatting import format_size
from ..models import Chunk, ChunkingStrategy


class ControllerState(Enum):
    IDLE = "idle"
    RECHUNKING = "rechunking"


class ChunkSizeController:
    """
    Re-chunks a session when the requested chunk size changes.

    Requests arriving while a pass is running are ignored, not queued;
    debouncing a size slider is left to the caller. The controller always
    returns to IDLE, even when a pass raises.
    """

    def __init__(self, session: 'ChunkingSession'):
        self.session = session
        self.state = ControllerState.IDLE
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def is_rechunking(self) -> bool:
        return self.state == ControllerState.RECHUNKING

    def request_resize(self, new_size: int) -> bool:
        """Handle a size-change request; returns True when a new chunk set was installed"""
        if self.is_rechunking:
            self.logger.debug(f"Ignoring resize to {new_size} while a pass is running")
            return False

        size = self.session.clamp_chunk_size(new_size)
        if size == self.session.current_chunk_size and self.session.has_result:
            return False

        return self.rechunk(size)

    def rechunk(self, size: int) -> bool:
        """Run a pass at ``size`` regardless of the current size"""
        if self.is_rechunking:
            return False

        self.state = ControllerState.RECHUNKING
        try:
            result = self.session.pipeline.run(
                self.session.full_content,
                size,
                self.session.strategy,
                analysis=self.session.analysis
            )
        except Exception as e:
            failure = RechunkFailure(size, e)
            self.logger.exception(f"Error updating chunk size: {failure}")
            self.session.record_failure(failure)
            return False
        else:
            self.session.install_result(result)
            self.logger.info(f"Rechunking complete: {len(result.chunks)} chunks at {format_size(size)}")
            return True
        finally:
            self.state = ControllerState.IDLE
            self.session.clamp_chunk_index()


class ChunkingSession:
    """
    Holds the combined text, the current chunk set and navigation state.

    Chunk lists are replaced wholesale after every pass; callers should read
    ``session.chunks`` again instead of keeping references to old chunks.
    """

    def __init__(self, content: str = '', chunk_size: int = None,
                 strategy: Union[str, ChunkingStrategy] = None,
                 pipeline: ChunkingPipeline = None, min_chunk_size: int = None):
        self.pipeline = pipeline or ChunkingPipeline()
        self.default_chunk_size = chunk_size or DEFAULT_CHUNK_SIZE
        self.min_chunk_size = MIN_CHUNK_SIZE if min_chunk_size is None else min_chunk_size
        self.strategy = get_default_strategy() if strategy is None else coerce_strategy(strategy)

        self.full_content = ''
        self.current_chunk_size = self.default_chunk_size
        self.chunks: List[Chunk] = []
        self.current_chunk_index = 0
        self.analysis: Optional[CollectionAnalysis] = None
        self.last_result: Optional[ChunkingResult] = None
        self.last_error: Optional[RechunkFailure] = None

        self.controller = ChunkSizeController(self)
        self.logger = logging.getLogger(self.__class__.__name__)

        if content:
            self.process_content(content)

    @property
    def max_chunk_size(self) -> int:
        return len(self.full_content)

    @property
    def has_result(self) -> bool:
        return self.last_result is not None

    @property
    def current_chunk(self) -> Optional[Chunk]:
        if not self.chunks:
            return None
        return self.chunks[self.current_chunk_index]

    def process_content(self, content: str) -> List[Chunk]:
        """Start over with a new combined text at the default size"""
        self.full_content = content
        self.analysis = None
        self.last_result = None
        self.last_error = None
        self.chunks = []
        self.current_chunk_index = 0

        if not content:
            self.logger.info("Empty content, nothing to chunk")
            return self.chunks

        self.current_chunk_size = self.clamp_chunk_size(self.default_chunk_size)
        self.controller.rechunk(self.current_chunk_size)
        return self.chunks

    def update_chunk_size(self, new_size: int) -> bool:
        return self.controller.request_resize(new_size)

    def set_strategy(self, strategy: Union[str, ChunkingStrategy]) -> bool:
        """Switch strategy and re-chunk at the current size"""
        strategy = coerce_strategy(strategy)
        if strategy == self.strategy:
            return False
        self.strategy = strategy
        if not self.full_content:
            return False
        return self.controller.rechunk(self.current_chunk_size)

    def clamp_chunk_size(self, size: int) -> int:
        """Apply the minimum size and cap at the content length"""
        size = max(int(size), self.min_chunk_size, 1)
        if self.full_content:
            size = min(size, len(self.full_content))
        return size

    def clamp_chunk_index(self):
        if not self.chunks:
            self.current_chunk_index = 0
        else:
            self.current_chunk_index = max(0, min(self.current_chunk_index, len(self.chunks) - 1))

    def install_result(self, result: ChunkingResult):
        self.chunks = result.chunks
        self.current_chunk_size = result.target_size
        self.analysis = result.analysis
        self.last_result = result
        self.last_error = None
        self.clamp_chunk_index()

    def record_failure(self, failure: RechunkFailure):
        """Keep the previous chunk set; with none, fall back to the whole content"""
        self.last_error = failure
        if not self.chunks:
            self.chunks = self.whole_content_chunks()

    def whole_content_chunks(self) -> List[Chunk]:
        if not self.full_content:
            return []
        chunk = Chunk(
            index=0,
            label='a',
            start_pos=0,
            end_pos=len(self.full_content),
            content=self.full_content,
            filename='file_a',
            semantic_summary='Complete file collection',
            strategy=ChunkingStrategy.SIZE_BASED
        )
        return InstructionWrapper().apply([chunk])

    # Navigation

    def switch_to_chunk(self, index: int) -> Chunk:
        if not 0 <= index < len(self.chunks):
            raise IndexError(f"Chunk index {index} out of range for {len(self.chunks)} chunks")
        self.current_chunk_index = index
        return self.chunks[index]

    def next_chunk(self) -> bool:
        if self.current_chunk_index < len(self.chunks) - 1:
            self.current_chunk_index += 1
            return True
        return False

    def previous_chunk(self) -> bool:
        if self.current_chunk_index > 0:
            self.current_chunk_index -= 1
            return True
        return False

    def navigate_to_referenced_chunk(self, target_chunk_index: int) -> bool:
        if 0 <= target_chunk_index < len(self.chunks):
            self.current_chunk_index = target_chunk_index
            return True
        return False

    # Export

    def copy_all_content(self) -> str:
        return '\n'.join(chunk.wrapped_content for chunk in self.chunks)

    def get_average_chunk_size(self) -> int:
        return reporting.get_average_chunk_size(self.chunks)

    def get_largest_chunk_size(self) -> int:
        return reporting.get_largest_chunk_size(self.chunks)

    def get_smallest_chunk_size(self) -> int:
        return reporting.get_smallest_chunk_size(self.chunks)

    def analysis_summary(self) -> reporting.ChunkAnalysis:
        return reporting.generate_chunk_analysis_summary(self.chunks, self._reported_strategy())

    def export_semantic_analysis(self, include_timestamp: bool = False) -> str:
        return reporting.export_semantic_analysis(
            self.chunks, self._reported_strategy(), include_timestamp=include_timestamp
        )

    def _reported_strategy(self) -> ChunkingStrategy:
        return self.last_result.strategy_used if self.last_result else self.strategy
