"""
Code Chunker - semantic chunking of concatenated source files for LLM chats.
"""

__version__ = "0.1.0"

from .models import Chunk, ChunkingStrategy, BoundaryType, SourceFile, StructuralInfo
from .exceptions import ChunkingError, ParseHeuristicMiss, RechunkFailure
from .chunking import ChunkingPipeline, ChunkingSession

__all__ = [
    'Chunk',
    'ChunkingStrategy',
    'BoundaryType',
    'SourceFile',
    'StructuralInfo',
    'ChunkingError',
    'ParseHeuristicMiss',
    'RechunkFailure',
    'ChunkingPipeline',
    'ChunkingSession'
]
