"""
Configuration settings for the code chunker.
"""

import os
import logging
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

# Chunk sizing (characters of the combined text)
DEFAULT_CHUNK_SIZE = int(os.getenv('CHUNK_SIZE', '100000'))
MIN_CHUNK_SIZE = int(os.getenv('MIN_CHUNK_SIZE', str(DEFAULT_CHUNK_SIZE)))

DEFAULT_CHUNKING_STRATEGY = os.getenv('CHUNKING_STRATEGY', 'semantic')

# Semantic blocks scoring at or above this become chunk boundaries
BOUNDARY_IMPORTANCE_THRESHOLD = int(os.getenv('BOUNDARY_IMPORTANCE_THRESHOLD', '7'))

MAX_INSTRUCTION_REFERENCES = int(os.getenv('MAX_INSTRUCTION_REFERENCES', '3'))
MIN_CALL_NAME_LENGTH = int(os.getenv('MIN_CALL_NAME_LENGTH', '3'))

DEFAULT_LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

DEBUG_MODE = os.getenv('DEBUG_MODE', 'false').lower() == 'true'


def get_default_strategy():
    """Get the configured chunking strategy as an enum member."""
    from .models import ChunkingStrategy

    try:
        return ChunkingStrategy(DEFAULT_CHUNKING_STRATEGY)
    except ValueError:
        raise ValueError(
            f"Unsupported chunking strategy: {DEFAULT_CHUNKING_STRATEGY}. "
            f"Expected one of: {', '.join(s.value for s in ChunkingStrategy)}"
        )


def setup_logging(level: Optional[str] = None):
    """Configure root logging for scripts and examples."""
    level_name = (level or ('DEBUG' if DEBUG_MODE else DEFAULT_LOG_LEVEL)).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )
