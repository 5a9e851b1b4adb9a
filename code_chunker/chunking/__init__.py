"""
Boundary planning, chunk assembly, cross-references and the chunking session.
"""

from .file_collection import parse_file_collection, format_file_entry, build_file_collection
from .boundary_planner import BoundaryPlanner, line_to_position
from .chunk_assembler import ChunkAssembler
from .cross_references import CrossReferenceResolver, FileReference
from .instructions import InstructionWrapper
from .pipeline import ChunkingPipeline, ChunkingResult, CollectionAnalysis
from .session import ChunkingSession, ChunkSizeController, ControllerState

__all__ = [
    'parse_file_collection',
    'format_file_entry',
    'build_file_collection',
    'BoundaryPlanner',
    'line_to_position',
    'ChunkAssembler',
    'CrossReferenceResolver',
    'FileReference',
    'InstructionWrapper',
    'ChunkingPipeline',
    'ChunkingResult',
    'CollectionAnalysis',
    'ChunkingSession',
    'ChunkSizeController',
    'ControllerState'
]
