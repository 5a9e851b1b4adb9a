"""
Fallback analyzer for documentation, configuration and unknown file types.
"""

import re
from typing import List

from .base_analyzer import BaseStructureAnalyzer, BlockTracker, BlockType
from ..models import StructuralInfo

EXTENSION_FILE_TYPES = {
    'css': 'stylesheet', 'scss': 'stylesheet', 'sass': 'stylesheet', 'less': 'stylesheet',
    'html': 'markup', 'htm': 'markup', 'xml': 'markup', 'vue': 'markup', 'svelte': 'markup',
    'json': 'config', 'yaml': 'config', 'yml': 'config', 'toml': 'config',
    'ini': 'config', 'cfg': 'config', 'conf': 'config', 'env': 'config',
    'md': 'documentation', 'rst': 'documentation', 'txt': 'documentation',
}


class GenericAnalyzer(BaseStructureAnalyzer):
    """Splits any text into sections by headers"""

    requires_source = False

    def __init__(self):
        super().__init__()

        self.header_patterns = {
            'markdown_header': re.compile(r'^(#{1,6})\s+(.+?)\s*#*\s*$'),
            'config_section': re.compile(r'^\[([^\[\]]+)\]$'),
            'caps_header': re.compile(r'^([A-Z][A-Z0-9_ ]*[A-Z0-9_]):?$'),
        }

    def get_supported_extensions(self) -> List[str]:
        return []

    def detect_file_type(self, filename: str) -> str:
        extension = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
        return EXTENSION_FILE_TYPES.get(extension, 'generic')

    def scan(self, filename: str, lines: List[str], structure: StructuralInfo) -> None:
        tracker = BlockTracker()

        for i, line in enumerate(lines):
            stripped = line.strip()
            if not stripped:
                continue

            name = self._section_name(stripped)
            if name:
                # Sections never nest: every header closes the previous one
                tracker.open(BlockType.SECTION, name, i, 0)

        structure.semantic_blocks = tracker.close_all(len(lines) - 1)

    def calculate_complexity(self, structure: StructuralInfo) -> int:
        return len(structure.semantic_blocks)

    def _section_name(self, stripped: str):
        match = self.header_patterns['markdown_header'].match(stripped)
        if match:
            return match.group(2)

        match = self.header_patterns['config_section'].match(stripped)
        if match:
            return match.group(1).strip()

        match = self.header_patterns['caps_header'].match(stripped)
        if match and sum(1 for c in stripped if c.isalpha()) >= 2:
            return match.group(1).strip()

        return None
