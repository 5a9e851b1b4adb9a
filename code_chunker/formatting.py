"""
Small text helpers shared by the wrapper, the session and the report.
"""

import string

_SIZE_UNITS = ['B', 'KB', 'MB']


def format_size(size: int) -> str:
    """Format a character count the way the chunk navigation shows it (1024-based)."""
    if size <= 0:
        return '0 B'
    exponent = 0
    while exponent < len(_SIZE_UNITS) - 1 and size >= 1024 ** (exponent + 1):
        exponent += 1
    value = round(size / (1024 ** exponent), 1)
    return f"{value:g} {_SIZE_UNITS[exponent]}"


def chunk_label(index: int) -> str:
    """Bijective base-26 letters: 0 -> a, 25 -> z, 26 -> aa."""
    if index < 0:
        raise ValueError(f"Chunk index must be non-negative, got {index}")

    letters = []
    n = index + 1
    while n > 0:
        n, remainder = divmod(n - 1, 26)
        letters.append(string.ascii_lowercase[remainder])
    return ''.join(reversed(letters))
