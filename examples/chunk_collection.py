"""
Example usage of the code chunker.

This example shows how to:
1. Build a combined file collection from a project directory
2. Chunk it semantically and browse the chunks
3. Re-chunk at a different size
4. Export the semantic analysis report
"""

import os
import sys
import logging
from pathlib import Path

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from code_chunker.config import setup_logging
from code_chunker.chunking import ChunkingSession, format_file_entry, build_file_collection
from code_chunker.formatting import format_size

EXCLUDED_DIRS = ['.git', '__pycache__', 'node_modules', '.venv', 'venv', 'dist', 'build']
INCLUDED_EXTENSIONS = ['.py', '.js', '.jsx', '.ts', '.tsx', '.java', '.kt', '.cs', '.md', '.json', '.css', '.html']

logger = logging.getLogger(__name__)


def collect_project(root_path: Path) -> str:
    """Concatenate every matching file under root_path into the combined format"""
    entries = []

    for root, dirs, files in os.walk(root_path):
        dirs[:] = sorted(d for d in dirs if d not in EXCLUDED_DIRS)

        for file in sorted(files):
            file_path = Path(root) / file
            if file_path.suffix not in INCLUDED_EXTENSIONS:
                continue
            try:
                content = file_path.read_text(encoding='utf-8')
            except UnicodeDecodeError:
                logger.warning(f"Skipping undecodable file {file_path}")
                continue

            relative_path = file_path.relative_to(root_path).as_posix()
            entries.append(format_file_entry(
                filename=file,
                content=content,
                directory=str(file_path.parent),
                relative_path=relative_path,
                full_path=str(file_path)
            ))

    logger.info(f"Collected {len(entries)} files from {root_path}")
    return build_file_collection(entries)


def browse_chunks(session: ChunkingSession):
    print(f"\n=== {len(session.chunks)} chunks at {format_size(session.current_chunk_size)} ===")

    while True:
        chunk = session.current_chunk
        print(f"\n[{chunk.label.upper()}] {chunk.filename} ({format_size(chunk.size)})")
        print(f"  {chunk.semantic_summary}")
        for ref in chunk.cross_references:
            print(f"  -> chunk {ref.target_chunk_index + 1}: {ref.description}")

        if not session.next_chunk():
            break


def main():
    setup_logging()

    root_path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(__file__).resolve().parent.parent
    content = collect_project(root_path)
    if not content:
        print("No files found.")
        return

    # Small sizes are allowed here so the example produces several chunks
    session = ChunkingSession(content, chunk_size=20000, min_chunk_size=1000)
    browse_chunks(session)

    print("\n=== Re-chunking at half the size ===")
    session.update_chunk_size(session.current_chunk_size // 2)
    if session.last_error:
        print(f"Re-chunking failed, keeping previous chunks: {session.last_error}")
    session.switch_to_chunk(0)
    browse_chunks(session)

    print("\n=== Analysis report ===")
    print(session.export_semantic_analysis(include_timestamp=True))


if __name__ == "__main__":
    main()
