"""
Domain models for the type index.

Pure dataclasses — no external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class GenericParameter:
    """One entry of a generic parameter list, e.g. `+([mscorlib]System.Object) T`."""
    name: str
    position: int = 0
    variance: str = ""  # "", "covariant", "contravariant"
    special_constraints: tuple[str, ...] = ()  # class, valuetype, .ctor
    type_constraints: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"name": self.name, "position": self.position}
        if self.variance:
            d["variance"] = self.variance
        if self.special_constraints:
            d["special_constraints"] = list(self.special_constraints)
        if self.type_constraints:
            d["type_constraints"] = list(self.type_constraints)
        return d


@dataclass
class TypeRecord:
    """A declared class or interface.

    `unique_name` is fixed at construction. `end_line` stays None while the
    type's scope is open and is set once by `close()`.
    """
    unique_name: str
    simple_name: str
    start_line: int
    generics: tuple[GenericParameter, ...] = ()
    is_interface: bool = False
    outer_name: Optional[str] = None
    source_path: str = ""
    end_line: Optional[int] = None

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "unique_name" and "unique_name" in self.__dict__:
            raise AttributeError("unique_name cannot be changed after construction")
        super().__setattr__(name, value)

    @property
    def is_open(self) -> bool:
        return self.end_line is None

    @property
    def kind(self) -> str:
        return "interface" if self.is_interface else "class"

    def close(self, end_line: int) -> None:
        if self.end_line is not None:
            raise ValueError(f"{self.unique_name} is already closed at line {self.end_line}")
        self.end_line = end_line

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "unique_name": self.unique_name,
            "simple_name": self.simple_name,
            "kind": self.kind,
            "start_line": self.start_line,
            "end_line": self.end_line,
        }
        if self.outer_name:
            d["outer_name"] = self.outer_name
        if self.generics:
            d["generics"] = [g.to_dict() for g in self.generics]
        if self.source_path:
            d["source_path"] = self.source_path
        return d


@dataclass
class FileEntry:
    """A disassembly file in the index."""
    rel_path: str = ""
    file_hash: str = ""
    line_count: int = 0
    type_count: int = 0
    parse_error: Optional[str] = None
    indexed_at: str = ""


@dataclass
class IndexStats:
    """Summary statistics for the index."""
    total_files: int = 0
    total_types: int = 0
    total_classes: int = 0
    total_interfaces: int = 0
    nested_types: int = 0
    generic_types: int = 0
    parse_errors: int = 0
