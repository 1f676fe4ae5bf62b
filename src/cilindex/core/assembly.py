"""
Assembly registry — which disassembly file declared which type.

Owned by the caller and handed to each parser; nothing here is global.
"""

from __future__ import annotations

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class AssemblyRegistry:
    """Map unique type names to the source files that declare them."""

    def __init__(self) -> None:
        self._files_by_type: dict[str, list[str]] = {}

    def register_type(self, unique_name: str, source_path: str) -> None:
        """Record that `source_path` declares `unique_name`. Idempotent."""
        paths = self._files_by_type.setdefault(unique_name, [])
        if source_path in paths:
            return
        if paths:
            logger.debug(f"{unique_name} declared again in {source_path} (first seen in {paths[0]})")
        paths.append(source_path)

    def find_file(self, unique_name: str) -> Optional[str]:
        """First file registered for a type, or None."""
        paths = self._files_by_type.get(unique_name)
        return paths[0] if paths else None

    def find_files(self, unique_name: str) -> list[str]:
        return list(self._files_by_type.get(unique_name, []))

    def types_in(self, source_path: str) -> list[str]:
        return [name for name, paths in self._files_by_type.items() if source_path in paths]

    def forget_file(self, source_path: str) -> int:
        """Drop every registration for `source_path`. Returns how many were removed."""
        removed = 0
        for name in list(self._files_by_type):
            paths = self._files_by_type[name]
            if source_path in paths:
                paths.remove(source_path)
                removed += 1
                if not paths:
                    del self._files_by_type[name]
        return removed

    def __contains__(self, unique_name: object) -> bool:
        return unique_name in self._files_by_type

    def __len__(self) -> int:
        return len(self._files_by_type)
