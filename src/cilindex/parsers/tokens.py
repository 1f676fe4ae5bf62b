"""
Token splitting for declaration lines.
"""

from __future__ import annotations


def split(line: str, separator: str = " ") -> list[str]:
    """Split `line` on `separator`, dropping empty tokens."""
    return [token for token in line.split(separator) if token]
