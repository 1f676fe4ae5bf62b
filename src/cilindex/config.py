"""
Project configuration — loads .cilindex.yaml and provides defaults.

Supports:
- project name
- ignore patterns (augments .gitignore)
- extensions of the disassembly files to scan
- encoding used to read them
"""

from __future__ import annotations

import codecs
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = [".il"]
DEFAULT_ENCODING = "utf-8"


@dataclass
class ProjectConfig:
    """Project configuration from .cilindex.yaml."""
    name: str = ""
    ignore: list[str] = field(default_factory=list)
    extensions: list[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    encoding: str = DEFAULT_ENCODING

    @classmethod
    def load(cls, project_root: Path) -> "ProjectConfig":
        """Load config from .cilindex.yaml in project root, or return defaults."""
        config_path = project_root / ".cilindex.yaml"
        if not config_path.exists():
            config_path = project_root / ".cilindex.yml"
        if not config_path.exists():
            return cls()

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Ignoring unreadable config {config_path}: {e}")
            return cls()

        if not isinstance(data, dict):
            logger.warning(f"Ignoring config {config_path}: expected a mapping")
            return cls()
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "ProjectConfig":
        project = data.get("project") or {}
        if not isinstance(project, dict):
            logger.warning(f"Ignoring project section: expected a mapping, got {project!r}")
            project = {}
        extensions = data.get("extensions") or DEFAULT_EXTENSIONS
        return cls(
            name=str(project.get("name", "")),
            ignore=list(data.get("ignore") or []),
            extensions=[_normalize_ext(e) for e in extensions],
            encoding=_checked_encoding(data.get("encoding", DEFAULT_ENCODING)),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.name:
            result["project"] = {"name": self.name}
        if self.ignore:
            result["ignore"] = self.ignore
        if self.extensions != DEFAULT_EXTENSIONS:
            result["extensions"] = self.extensions
        if self.encoding != DEFAULT_ENCODING:
            result["encoding"] = self.encoding
        return result


def _normalize_ext(ext: str) -> str:
    ext = str(ext).strip().lower()
    return ext if ext.startswith(".") else "." + ext


def _checked_encoding(encoding: Any) -> str:
    try:
        codecs.lookup(str(encoding))
    except LookupError:
        logger.warning(f"Unknown encoding {encoding!r}, using {DEFAULT_ENCODING}")
        return DEFAULT_ENCODING
    return str(encoding)
