"""
Best-effort resolution of import and call relationships between chunks.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from ..config import MIN_CALL_NAME_LENGTH
from ..models import CrossReference, ReferenceType, SourceFile, StructuralInfo

CALL_SITE_PATTERN = re.compile(r'\b([A-Za-z_$][\w$]*)\s*\(')

# Files named like this are better known by their directory
PACKAGE_INDEX_NAMES = {'index', '__init__'}


@dataclass
class FileReference:
    """A dependency between two files, before chunks are known"""
    type: ReferenceType
    source: str
    target: str
    items: List[str] = field(default_factory=list)
    function: Optional[str] = None
    line: int = 0

    @property
    def description(self) -> str:
        if self.type == ReferenceType.IMPORT:
            if self.items:
                return f"imports {', '.join(self.items)} from {self.target}"
            return f"imports {self.target}"
        if self.type == ReferenceType.FUNCTION_CALL:
            return f"calls function {self.function} in {self.target}"
        return f"references {self.target}"


class CrossReferenceResolver:
    """
    Maps each file's imports and call sites to other known files, then to
    the chunks holding them. Anything that cannot be matched is dropped.
    """

    def __init__(self, min_call_name_length: int = None):
        self.min_call_name_length = min_call_name_length or MIN_CALL_NAME_LENGTH
        self.logger = logging.getLogger(__name__)

    def resolve(self, files: List[SourceFile], structures: Dict[str, StructuralInfo],
                chunk_assignment: Dict[str, List[int]],
                file_references: Dict[str, List[FileReference]] = None) -> Dict[int, List[CrossReference]]:
        """
        Compute the cross-references of every chunk.

        ``chunk_assignment`` maps a file key to the chunk indices holding part
        of it. A reference points at the first chunk holding the target file
        and is dropped when that is the referencing chunk itself.
        """
        if file_references is None:
            file_references = self.find_file_references(files, structures)

        chunk_files: Dict[int, List[str]] = {}
        for source_file in files:
            for chunk_index in chunk_assignment.get(source_file.key, []):
                chunk_files.setdefault(chunk_index, []).append(source_file.key)

        all_chunks: Set[int] = set()
        for indices in chunk_assignment.values():
            all_chunks.update(indices)

        result: Dict[int, List[CrossReference]] = {}
        for chunk_index in sorted(all_chunks):
            references = []
            seen = set()
            for key in chunk_files.get(chunk_index, []):
                for ref in file_references.get(key, []):
                    target_chunks = chunk_assignment.get(ref.target)
                    if not target_chunks:
                        continue
                    target_chunk = min(target_chunks)
                    if target_chunk == chunk_index:
                        continue

                    identity = (ref.type, target_chunk, ref.description)
                    if identity in seen:
                        continue
                    seen.add(identity)

                    references.append(CrossReference(
                        type=ref.type,
                        target_chunk_index=target_chunk,
                        target_file=ref.target,
                        source_file=key,
                        description=ref.description
                    ))
            result[chunk_index] = references

        total = sum(len(refs) for refs in result.values())
        self.logger.info(f"Resolved {total} cross-references across {len(result)} chunks")
        return result

    def find_file_references(self, files: List[SourceFile],
                             structures: Dict[str, StructuralInfo]) -> Dict[str, List[FileReference]]:
        """File-to-file references from imports and call sites"""
        references: Dict[str, List[FileReference]] = {f.key: [] for f in files}

        for source_file in files:
            structure = structures.get(source_file.key)
            if structure is None:
                continue
            for imp in structure.imports:
                target = self.find_file_by_module(imp.module, files, exclude_key=source_file.key)
                if target:
                    references[source_file.key].append(FileReference(
                        type=ReferenceType.IMPORT,
                        source=source_file.key,
                        target=target,
                        items=[item for item in imp.imported_items if item],
                        line=imp.line
                    ))

        for source_key, target_key, function_name in self._call_references(files, structures):
            references[source_key].append(FileReference(
                type=ReferenceType.FUNCTION_CALL,
                source=source_key,
                target=target_key,
                function=function_name
            ))

        return references

    def find_file_by_module(self, module: str, files: List[SourceFile],
                            exclude_key: str = None) -> Optional[str]:
        """
        Match an import string to a known file.

        An exact match of the module's last segment with a file's base name
        wins; otherwise the first file whose base name contains, or is
        contained in, the module string is used.
        """
        normalized = (module or '').strip().lower()
        if not normalized:
            return None
        tail = self._module_tail(normalized)

        candidates = [
            (f.key, name)
            for f in files if f.key != exclude_key
            for name in self._base_names(f)
        ]

        for key, base in candidates:
            if base == tail:
                return key

        if len(tail) < 3:
            return None

        for key, base in candidates:
            if len(base) < 3:
                continue
            if base in normalized or tail in base:
                return key

        return None

    def _call_references(self, files: List[SourceFile], structures: Dict[str, StructuralInfo]):
        definitions: Dict[str, List[str]] = {}
        for source_file in files:
            structure = structures.get(source_file.key)
            if structure is None:
                continue
            for name in {func.name for func in structure.functions}:
                definitions.setdefault(name, []).append(source_file.key)

        # Only names defined in exactly one file point somewhere unambiguous
        unique = {
            name: keys[0] for name, keys in definitions.items()
            if len(keys) == 1 and self._is_trackable_name(name)
        }
        if not unique:
            return []

        found = []
        for source_file in files:
            structure = structures.get(source_file.key)
            own_names = {func.name for func in structure.functions} if structure else set()
            called = set(CALL_SITE_PATTERN.findall(source_file.content))

            for name in sorted(called & set(unique)):
                target = unique[name]
                if target == source_file.key or name in own_names:
                    continue
                found.append((source_file.key, target, name))

        return found

    def _is_trackable_name(self, name: str) -> bool:
        if len(name) < self.min_call_name_length:
            return False
        return not (name.startswith('__') and name.endswith('__'))

    def _module_tail(self, module: str) -> str:
        module = module.rstrip('/')
        tail = re.split(r'[/\\]', module)[-1]
        tail = re.sub(r'\.(js|jsx|mjs|cjs|ts|tsx|py|java|kt|cs|json)$', '', tail)
        # Dotted names (python packages, java imports) keep their last part
        parts = [part for part in tail.split('.') if part]
        return parts[-1] if parts else tail

    def _base_names(self, source_file: SourceFile) -> List[str]:
        basename = source_file.filename.rsplit('/', 1)[-1].lower()
        base = basename.split('.')[0]
        names = [base] if base else []

        if base in PACKAGE_INDEX_NAMES:
            path = source_file.metadata.get('relative_path') or source_file.key
            parts = [part for part in re.split(r'[/\\]', path.lower()) if part]
            if len(parts) >= 2:
                names.append(parts[-2])

        return names
