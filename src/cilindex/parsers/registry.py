"""
Parser registry — pick a parser from the file extension.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .base import LanguageParser
from .cil import CilParser

_PARSERS: list[LanguageParser] = [
    CilParser(),
]

_EXT_MAP: dict[str, LanguageParser] = {}
for p in _PARSERS:
    for ext in p.extensions:
        _EXT_MAP[ext] = p


def get_parser(path: str | Path) -> Optional[LanguageParser]:
    """Return the appropriate parser for a file, or None if unsupported."""
    ext = Path(path).suffix.lower()
    return _EXT_MAP.get(ext)


def get_parser_by_language(language: str) -> Optional[LanguageParser]:
    """Return the parser for a format identifier such as 'cil'."""
    for parser in _PARSERS:
        if parser.language == language:
            return parser
    return None
