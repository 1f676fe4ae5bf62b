"""
Base parser types and abstract interface.

All declaration parsers produce the same output types.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, TYPE_CHECKING

from ..store.models import TypeRecord

if TYPE_CHECKING:
    from ..core.assembly import AssemblyRegistry


@dataclass
class ParseResult:
    """Output of parsing a single file."""
    types: dict[str, TypeRecord] = field(default_factory=dict)
    line_count: int = 0
    parse_error: Optional[str] = None


class LanguageParser(ABC):
    """Abstract base for disassembly-format parsers."""

    @property
    @abstractmethod
    def language(self) -> str:
        """Format identifier (e.g. 'cil')."""

    @property
    @abstractmethod
    def extensions(self) -> tuple[str, ...]:
        """File extensions this parser handles (e.g. ('.il',))."""

    @abstractmethod
    def parse_file(self, path: Path, registrar: "AssemblyRegistry",
                   encoding: str = "utf-8") -> ParseResult:
        """Parse a file and collect the types it declares."""
