"""
Factory for creating appropriate language-specific analyzers.
"""

from typing import Dict, Type, List
import logging

from .base_analyzer import BaseStructureAnalyzer
from .curly_analyzer import CurlyBraceAnalyzer
from .python_analyzer import PythonAnalyzer
from .generic_analyzer import GenericAnalyzer


class AnalyzerFactory:
    """Factory for creating language-specific structure analyzers"""

    # Registry of available analyzers
    _analyzers: Dict[str, Type[BaseStructureAnalyzer]] = {
        'py': PythonAnalyzer,
        'pyx': PythonAnalyzer,
        'pyi': PythonAnalyzer,
        'js': CurlyBraceAnalyzer,
        'jsx': CurlyBraceAnalyzer,
        'mjs': CurlyBraceAnalyzer,
        'cjs': CurlyBraceAnalyzer,
        'ts': CurlyBraceAnalyzer,
        'tsx': CurlyBraceAnalyzer,
        'java': CurlyBraceAnalyzer,
        'kt': CurlyBraceAnalyzer,
        'kts': CurlyBraceAnalyzer,
        'cs': CurlyBraceAnalyzer,
    }

    @classmethod
    def register_analyzer(cls, file_extension: str, analyzer_class: Type[BaseStructureAnalyzer]):
        """Register a new analyzer for a file extension"""
        cls._analyzers[file_extension.lstrip('.').lower()] = analyzer_class

    @classmethod
    def get_analyzer(cls, file_extension: str) -> BaseStructureAnalyzer:
        """Get appropriate analyzer for file extension"""

        # Remove leading dot if present
        ext = file_extension.lstrip('.').lower()

        analyzer_class = cls._analyzers.get(ext)
        if analyzer_class:
            return analyzer_class()

        logger = logging.getLogger(__name__)
        logger.debug(f"No specific analyzer found for '{ext}', using section-based fallback")
        return GenericAnalyzer()

    @classmethod
    def get_supported_extensions(cls) -> List[str]:
        """Get list of all extensions with a language-specific analyzer"""
        return list(cls._analyzers.keys())

    @classmethod
    def is_supported(cls, file_extension: str) -> bool:
        """Check if file extension has a language-specific analyzer"""
        ext = file_extension.lstrip('.').lower()
        return ext in cls._analyzers
