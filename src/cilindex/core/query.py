"""
Query engine — context, search and file summaries over a TypeIndex.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..store.models import TypeRecord
from .indexer import TypeIndex

KINDS = ("class", "interface")


@dataclass
class TypeContext:
    """A type together with where it lives and what surrounds it."""
    type: dict[str, Any] = field(default_factory=dict)
    file: Optional[str] = None
    outer: Optional[dict[str, Any]] = None
    nested: list[dict[str, Any]] = field(default_factory=list)
    siblings: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "file": self.file,
            "outer": self.outer,
            "nested": self.nested,
            "siblings": self.siblings,
        }


class TypeQuery:
    """Answer lookups against an in-memory index."""

    def __init__(self, index: TypeIndex):
        self.index = index

    def get_context(self, name: str) -> TypeContext:
        """Everything known about a type.

        Matches the unique name exactly first, then falls back to the first
        type whose simple name matches.
        """
        record = self.index.find_type(name)
        if record is None:
            record = next(
                (t for t in self._sorted_types() if t.simple_name == name), None
            )
        if record is None:
            return TypeContext()

        rel_path = self.index.rel_path(record.source_path)
        ctx = TypeContext(type=record.to_dict(), file=rel_path)

        per_file = self.index.types.get(rel_path, {})
        if record.outer_name:
            outer = per_file.get(record.outer_name)
            if outer is not None:
                ctx.outer = outer.to_dict()

        ctx.nested = [t.to_dict() for t in self._nested_in(per_file, record.unique_name)]
        ctx.siblings = [
            t.to_dict() for t in self._nested_in(per_file, record.outer_name)
            if t.unique_name != record.unique_name
        ]
        return ctx

    def nested_types(self, name: str) -> list[TypeRecord]:
        """Types declared directly inside `name`."""
        record = self.index.find_type(name)
        if record is None:
            return []
        per_file = self.index.types.get(self.index.rel_path(record.source_path), {})
        return self._nested_in(per_file, record.unique_name)

    def search(self, query: str, kind: Optional[str] = None,
               limit: int = 20) -> list[dict[str, Any]]:
        """Case-insensitive substring search over unique names."""
        if kind is not None and kind not in KINDS:
            raise ValueError(f"Unknown kind: {kind}")
        if limit <= 0:
            return []
        needle = query.lower()
        results = []
        for t in self._sorted_types():
            if needle not in t.unique_name.lower():
                continue
            if kind is not None and t.kind != kind:
                continue
            entry = t.to_dict()
            entry["file"] = self.index.rel_path(t.source_path)
            results.append(entry)
            if len(results) >= limit:
                break
        return results

    def get_file_summary(self, rel_path: str) -> Optional[dict[str, Any]]:
        entry = self.index.files.get(rel_path)
        if entry is None:
            return None
        types = sorted(self.index.types.get(rel_path, {}).values(), key=lambda t: t.start_line)
        return {
            "file": {
                "rel_path": entry.rel_path,
                "line_count": entry.line_count,
                "type_count": entry.type_count,
                "parse_error": entry.parse_error,
                "indexed_at": entry.indexed_at,
            },
            "types": [t.to_dict() for t in types],
        }

    def _sorted_types(self) -> list[TypeRecord]:
        return sorted(self.index.all_types(), key=lambda t: (t.source_path, t.start_line))

    @staticmethod
    def _nested_in(per_file: dict[str, TypeRecord], outer_name: Optional[str]) -> list[TypeRecord]:
        found = [t for t in per_file.values() if t.outer_name == outer_name]
        return sorted(found, key=lambda t: t.start_line)
