"""
Heuristic structure analysis for the files of a collection.
"""

from .base_analyzer import BaseStructureAnalyzer, BlockType, calculate_block_importance
from .analyzer_factory import AnalyzerFactory
from .curly_analyzer import CurlyBraceAnalyzer
from .python_analyzer import PythonAnalyzer
from .generic_analyzer import GenericAnalyzer
from .structural_analyzer import StructuralAnalyzer

__all__ = [
    'BaseStructureAnalyzer',
    'BlockType',
    'calculate_block_importance',
    'AnalyzerFactory',
    'CurlyBraceAnalyzer',
    'PythonAnalyzer',
    'GenericAnalyzer',
    'StructuralAnalyzer'
]
