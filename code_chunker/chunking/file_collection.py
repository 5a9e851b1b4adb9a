"""
Reading and writing the combined file-collection text.

Each file entry looks like::

    ================================================================================
    filename: app.py
    directory: /project/src
    relative_path: src/app.py
    full_path: /project/src/app.py
    type: text
    size: 1.2 KB
    ================================================================================

    <file content>

followed by a blank line before the next entry.
"""

import re
import logging
from typing import Dict, Iterable, List, Optional

from ..formatting import format_size
from ..models import SourceFile

DELIMITER = '=' * 80

HEADER_PATTERN = re.compile(
    r'^' + DELIMITER + r'\nfilename: ([^\n]*)\n'
    r'((?:(?!' + DELIMITER + r'\n)[^\n]*\n)*?)'
    + DELIMITER + r'\n\n',
    re.MULTILINE
)

ENTRY_SEPARATOR = '\n\n'
BINARY_PLACEHOLDER = '// Binary file - content not included\n'

logger = logging.getLogger(__name__)


def parse_file_collection(text: str) -> List[SourceFile]:
    """
    Locate every file entry in the combined text.

    An entry spans from its header to the start of the next header (or the end
    of the text), so entries are contiguous and keep their original order.
    Text before the first header belongs to no file.
    """
    matches = list(HEADER_PATTERN.finditer(text))
    files = []
    used_keys: Dict[str, int] = {}

    for i, match in enumerate(matches):
        start = match.start()
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        body = text[match.end():end]
        if body.endswith(ENTRY_SEPARATOR):
            body = body[:-len(ENTRY_SEPARATOR)]

        filename = match.group(1).strip()
        metadata = _parse_metadata(match.group(2))
        metadata['filename'] = filename

        files.append(SourceFile(
            filename=filename,
            content=body,
            start_offset=start,
            end_offset=end,
            body_offset=match.end(),
            key=_unique_key(metadata.get('relative_path') or filename, used_keys),
            metadata=metadata
        ))

    logger.debug(f"Parsed {len(files)} file entries from {len(text)} characters")
    return files


def format_file_entry(filename: str, content: Optional[str], directory: str = '',
                      relative_path: str = '', full_path: str = '',
                      classification: Optional[Iterable[str]] = None,
                      binary: bool = False) -> str:
    """Write one file entry in the combined-text format"""
    lines = [
        DELIMITER,
        f"filename: {filename}",
        f"directory: {directory}",
        f"relative_path: {relative_path or filename}",
        f"full_path: {full_path or relative_path or filename}",
    ]

    tags = list(classification or [])
    if tags:
        lines.append(f"classification: {', '.join(tags)}")

    if binary:
        lines.append("type: binary")
        lines.append(f"size: {format_size(0)}")
        body = BINARY_PLACEHOLDER
    elif content is None:
        body = '// Could not read file content\n'
    else:
        lines.append("type: text")
        lines.append(f"original_lines: {len(content.split(chr(10)))}")
        lines.append(f"size: {format_size(len(content))}")
        body = content

    lines.append(DELIMITER)
    return '\n'.join(lines) + '\n\n' + body + ENTRY_SEPARATOR


def build_file_collection(entries: Iterable[str], preamble: str = '') -> str:
    """Concatenate formatted entries, optionally after a free-text preamble"""
    return preamble + ''.join(entries)


def _parse_metadata(block: str) -> Dict[str, str]:
    metadata = {}
    for line in block.splitlines():
        key, sep, value = line.partition(':')
        if sep and key.strip():
            metadata[key.strip()] = value.strip()
    return metadata


def _unique_key(candidate: str, used_keys: Dict[str, int]) -> str:
    count = used_keys.get(candidate, 0) + 1
    used_keys[candidate] = count
    return candidate if count == 1 else f"{candidate}#{count}"
