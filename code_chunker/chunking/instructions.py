"""
Chat-facing instructions wrapped around each chunk.
"""

from typing import List

from ..config import MAX_INSTRUCTION_REFERENCES
from ..formatting import format_size
from ..models import Chunk

SECTION_RULE = '=' * 60
COMPLETION_MARKER = 'DONE WITH ALL CHUNKS'

CODE_OUTPUT_RULES = [
    "CODE OUTPUT RULES:",
    "- Only write code when user explicitly requests it",
    "- Always use code artifacts for any code/file output",
    "- Do NOT write code for analysis or general questions",
]


class InstructionWrapper:
    """
    Builds the pasted form of a chunk.

    Everything is derived from ``(chunk, index, total)`` and the chunk's own
    fields, so wrapping the same chunk twice gives the same text.
    """

    def __init__(self, max_listed_references: int = None):
        self.max_listed_references = max_listed_references or MAX_INSTRUCTION_REFERENCES

    def build_instructions(self, chunk: Chunk, index: int, total: int) -> str:
        """Per-chunk analysis guidance shown inside the metadata block"""
        instructions: List[str] = []

        if index == 0:
            instructions.append("FIRST CHUNK: Start by understanding the overall project structure and main entry points.")
        elif index == total - 1:
            instructions.append("FINAL CHUNK: Complete your analysis and provide comprehensive recommendations.")
        else:
            instructions.append(f"CHUNK {index + 1}/{total}: Continue analysis building on previous context.")

        instructions.append(f"SEMANTIC CONTEXT: {chunk.semantic_summary}")

        if chunk.cross_references:
            referenced = sorted({ref.target_chunk_index + 1 for ref in chunk.cross_references})
            instructions.append(
                f"CROSS-REFERENCES: This chunk references code in chunk(s) {', '.join(str(n) for n in referenced)}"
            )
            for ref in chunk.cross_references[:self.max_listed_references]:
                instructions.append(f"  → {ref.description}")

        primary_files = sorted(chunk.files.items(), key=lambda item: -item[1].importance)[:2]
        if primary_files:
            instructions.append(
                f"PRIMARY FOCUS: Pay special attention to {' and '.join(name for name, _ in primary_files)}"
            )

        if chunk.cross_references:
            instructions.append("ANALYSIS APPROACH: Note relationships with other chunks for comprehensive understanding.")

        instructions.append("IMPORTANT: Analyze this chunk in context of the overall project architecture.")
        return '\n'.join(instructions)

    def wrap(self, chunk: Chunk, index: int, total: int) -> str:
        """Pacing instruction, metadata header, raw content and completion marker"""
        is_last = index == total - 1
        parts: List[str] = []

        if not is_last:
            parts.append(
                "I'm providing a semantic chunk of my project files. "
                f"IMPORTANT: Just respond with \"Ready for semantic chunk {index + 2}\" "
                f"after receiving this chunk. Do not analyze until I say \"{COMPLETION_MARKER}\".\n\n"
            )

        parts.append(f"SEMANTIC CHUNK {index + 1}/{total}\n{SECTION_RULE}\n\n")

        parts.append("CHUNK METADATA:\n")
        parts.append(f"- Files: {', '.join(chunk.file_names)}\n")
        parts.append(f"- Size: {format_size(chunk.size)}\n")
        parts.append(f"- Semantic Summary: {chunk.semantic_summary}\n")
        if chunk.cross_references:
            parts.append(f"- Cross-references: {len(chunk.cross_references)} reference(s) to other chunks\n")

        parts.append(f"\n{self.build_instructions(chunk, index, total)}\n\n")
        parts.append('\n'.join(CODE_OUTPUT_RULES) + "\n\n")

        parts.append(f"CHUNK CONTENT:\n{SECTION_RULE}\n\n")
        parts.append(chunk.content)

        if is_last:
            parts.append(f"\n\n{COMPLETION_MARKER}\n")
            parts.append(
                "\nYou can now analyze the complete project. "
                "Use the semantic relationships and cross-references to understand the architecture."
            )

        return ''.join(parts)

    def apply(self, chunks: List[Chunk]) -> List[Chunk]:
        """Fill instructions and wrapped content for a whole pass"""
        total = len(chunks)
        for index, chunk in enumerate(chunks):
            chunk.ai_instructions = self.build_instructions(chunk, index, total)
            chunk.wrapped_content = self.wrap(chunk, index, total)
        return chunks
