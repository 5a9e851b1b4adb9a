"""
Exceptions raised by the chunking engine.
"""


class ChunkingError(Exception):
    """Base class for chunking engine errors"""


class ParseHeuristicMiss(ChunkingError):
    """A language analyzer could not scan a file's content"""

    def __init__(self, filename: str, reason: str):
        super().__init__(f"Cannot analyze {filename}: {reason}")
        self.filename = filename
        self.reason = reason


class RechunkFailure(ChunkingError):
    """A chunking pass raised before producing any chunks"""

    def __init__(self, target_size: int, cause: Exception):
        super().__init__(f"Re-chunking at size {target_size} failed: {cause}")
        self.target_size = target_size
        self.cause = cause
