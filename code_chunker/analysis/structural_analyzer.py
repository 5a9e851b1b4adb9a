"""
Entry point for per-file structural analysis.
"""

import logging
from typing import Dict, List

from .analyzer_factory import AnalyzerFactory
from .generic_analyzer import GenericAnalyzer
from ..exceptions import ParseHeuristicMiss
from ..models import SourceFile, StructuralInfo


class StructuralAnalyzer:
    """
    Picks a language heuristic by extension and always returns a result.

    When a language analyzer cannot scan a file, the generic section-based
    analyzer is used instead, so every file yields some StructuralInfo.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._fallback = GenericAnalyzer()

    def analyze(self, filename: str, content: str, binary: bool = False) -> StructuralInfo:
        """Analyze one file's text"""
        extension = filename.rsplit('/', 1)[-1]
        extension = extension.rsplit('.', 1)[-1] if '.' in extension else ''

        if binary:
            return self._fallback.analyze(filename, content)

        analyzer = AnalyzerFactory.get_analyzer(extension)
        try:
            return analyzer.analyze(filename, content)
        except ParseHeuristicMiss as e:
            self.logger.warning(f"{e}; falling back to section analysis")
            return self._fallback.analyze(filename, content)

    def analyze_files(self, files: List[SourceFile]) -> Dict[str, StructuralInfo]:
        """Analyze every parsed file, keyed by its unique key"""
        structures = {}
        for source_file in files:
            structures[source_file.key] = self.analyze(
                source_file.filename, source_file.content, binary=source_file.is_binary
            )
            self.logger.debug(
                f"{source_file.key}: {len(structures[source_file.key].semantic_blocks)} blocks "
                f"via {structures[source_file.key].analyzer}"
            )
        return structures
