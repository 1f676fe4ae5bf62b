"""
Indexer — discover disassembly files, parse them, collect their types.

Handles full builds and single-file reindex against an in-memory TypeIndex.
"""

from __future__ import annotations

import hashlib
import logging
import os
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

import pathspec

from ..config import ProjectConfig
from ..parsers.registry import get_parser, get_parser_by_language
from ..store.models import FileEntry, IndexStats, TypeRecord
from .assembly import AssemblyRegistry

logger = logging.getLogger(__name__)


def compute_file_hash(path: Path) -> str:
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            h.update(chunk)
    return h.hexdigest()


# Default directories to always skip
ALWAYS_SKIP = {
    ".git", ".hg", ".svn", ".vs", ".idea",
    "node_modules", "packages", "TestResults",
    "bin", "obj",
}


@dataclass
class TypeIndex:
    """Types of every indexed file, keyed by relative path."""
    project_root: Path
    registry: AssemblyRegistry = field(default_factory=AssemblyRegistry)
    files: dict[str, FileEntry] = field(default_factory=dict)
    types: dict[str, dict[str, TypeRecord]] = field(default_factory=dict)

    def all_types(self) -> list[TypeRecord]:
        return [t for per_file in self.types.values() for t in per_file.values()]

    def find_type(self, unique_name: str) -> Optional[TypeRecord]:
        """Look a type up by unique name; the first file registered for it wins."""
        source = self.registry.find_file(unique_name)
        if source is not None:
            rel_path = self.rel_path(source)
            found = self.types.get(rel_path, {}).get(unique_name)
            if found is not None:
                return found
        for per_file in self.types.values():
            if unique_name in per_file:
                return per_file[unique_name]
        return None

    def rel_path(self, source_path: str) -> str:
        try:
            return Path(source_path).relative_to(self.project_root).as_posix()
        except ValueError:
            return source_path

    def stats(self) -> IndexStats:
        types = self.all_types()
        interfaces = sum(1 for t in types if t.is_interface)
        return IndexStats(
            total_files=len(self.files),
            total_types=len(types),
            total_classes=len(types) - interfaces,
            total_interfaces=interfaces,
            nested_types=sum(1 for t in types if t.outer_name),
            generic_types=sum(1 for t in types if t.generics),
            parse_errors=sum(1 for f in self.files.values() if f.parse_error),
        )


class Indexer:
    """Build and update the type index."""

    def __init__(self, project_root: Path, config: Optional[ProjectConfig] = None):
        self.project_root = Path(project_root).resolve()
        self.config = config or ProjectConfig()
        self._extensions = {e.lower() for e in self.config.extensions}
        self._ignore_spec = self._build_ignore_spec()

    def _build_ignore_spec(self) -> Optional[pathspec.PathSpec]:
        """Build a pathspec from .gitignore + config ignore patterns."""
        patterns = list(self.config.ignore)

        gitignore = self.project_root / ".gitignore"
        if gitignore.exists():
            try:
                patterns.extend(gitignore.read_text(errors="replace").splitlines())
            except OSError as e:
                logger.debug(f"Could not read {gitignore}: {e}")

        if patterns:
            return pathspec.PathSpec.from_lines("gitwildmatch", patterns)
        return None

    def discover_files(self) -> list[tuple[Path, str]]:
        """Walk project, return (abs_path, rel_path) for disassembly files."""
        results = []

        for dirpath, dirnames, filenames in os.walk(self.project_root):
            # Skip always-excluded dirs
            dirnames[:] = sorted(d for d in dirnames if d not in ALWAYS_SKIP)

            rel_dir = Path(dirpath).relative_to(self.project_root).as_posix()

            # Skip ignored dirs
            if self._ignore_spec and rel_dir != ".":
                dirnames[:] = [
                    d for d in dirnames
                    if not self._ignore_spec.match_file(f"{rel_dir}/{d}/")
                ]

            for fname in sorted(filenames):
                ext = Path(fname).suffix.lower()
                if ext not in self._extensions:
                    continue
                abs_path = Path(dirpath) / fname
                rel_path = abs_path.relative_to(self.project_root).as_posix()

                if self._ignore_spec and self._ignore_spec.match_file(rel_path):
                    logger.debug(f"Ignoring {rel_path}")
                    continue

                results.append((abs_path, rel_path))

        return results

    def build(self) -> TypeIndex:
        """Parse every discovered file into a fresh index."""
        t0 = time.time()
        index = TypeIndex(project_root=self.project_root)

        for abs_path, rel_path in self.discover_files():
            self._index_file(index, abs_path, rel_path)

        stats = index.stats()
        logger.info(
            f"Indexed {stats.total_types} types from {stats.total_files} files "
            f"in {time.time() - t0:.2f}s ({stats.parse_errors} parse errors)"
        )
        return index

    def reindex_file(self, index: TypeIndex, rel_path: str) -> bool:
        """Re-parse a single file. Returns False if it no longer exists."""
        abs_path = self.project_root / rel_path
        self._drop_file(index, abs_path, rel_path)
        if not abs_path.exists():
            return False
        self._index_file(index, abs_path, rel_path)
        return True

    def _drop_file(self, index: TypeIndex, abs_path: Path, rel_path: str) -> None:
        index.files.pop(rel_path, None)
        index.types.pop(rel_path, None)
        index.registry.forget_file(str(abs_path))

    def _index_file(self, index: TypeIndex, abs_path: Path, rel_path: str) -> None:
        """Parse and store a single file."""
        parser = get_parser(abs_path) or get_parser_by_language("cil")
        logger.debug(f"Parsing {rel_path}")

        try:
            file_hash = compute_file_hash(abs_path)
            result = parser.parse_file(abs_path, index.registry, encoding=self.config.encoding)
        except OSError as e:
            self._store_file_error(index, abs_path, rel_path, str(e))
            return

        if result.parse_error:
            # registrations made before the failure point are not trustworthy
            index.registry.forget_file(str(abs_path))

        index.files[rel_path] = FileEntry(
            rel_path=rel_path,
            file_hash=file_hash,
            line_count=result.line_count,
            type_count=len(result.types),
            parse_error=result.parse_error,
            indexed_at=datetime.now().isoformat(),
        )
        index.types[rel_path] = result.types

    def _store_file_error(self, index: TypeIndex, abs_path: Path, rel_path: str, error: str):
        logger.warning(f"Could not read {rel_path}: {error}")
        index.registry.forget_file(str(abs_path))
        index.files[rel_path] = FileEntry(
            rel_path=rel_path,
            parse_error=error,
            indexed_at=datetime.now().isoformat(),
        )
        index.types[rel_path] = {}
