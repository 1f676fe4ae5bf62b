"""
CIL disassembly parser.

Reads an ILDasm-style listing line by line and collects the declared
classes and interfaces. Scope depth is tracked by counting braces; nested
type names are resolved against a stack of still-open declarations.
Method bodies, signatures and attributes are not looked at.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Union

from .base import LanguageParser, ParseResult
from .generics import parse_generic_declaration
from .tokens import split
from ..core.assembly import AssemblyRegistry
from ..errors import StackUnderrun, StructuralError, TruncatedInput
from ..store.models import TypeRecord

logger = logging.getLogger(__name__)

CLASS_KEYWORD = ".class"
NESTED_SEPARATOR = "$"

RESERVED_MODIFIERS = frozenset({
    CLASS_KEYWORD,
    # visibility
    "public", "private", "nested",
    "family", "assembly", "famandassem", "famorassem",
    # semantics
    "sealed", "abstract", "interface", "extends", "implements",
    "specialname", "rtspecialname", "serializable", "import", "windowsruntime",
    # layout
    "auto", "sequential", "explicit",
    # string format
    "ansi", "unicode", "autochar",
    # initialization
    "beforefieldinit",
})


def is_reserved_modifier(token: str) -> bool:
    return token in RESERVED_MODIFIERS


def strip_comment(line: str) -> str:
    """Trim and drop a trailing `//` comment."""
    line = line.strip()
    idx = line.find("//")
    if idx >= 0:
        line = line[:idx].rstrip()
    return line


class DeclarationFileParser:
    """Type declarations of one disassembly file.

    Parsing happens in the constructor; afterwards the instance only
    answers lookups. Raises StackUnderrun or TruncatedInput on unbalanced
    braces and OSError if the file cannot be read.
    """

    def __init__(self, path: Union[str, os.PathLike],
                 registrar: Optional[AssemblyRegistry] = None,
                 encoding: str = "utf-8"):
        self.path = Path(path)
        self.registrar = registrar if registrar is not None else AssemblyRegistry()
        self.encoding = encoding
        self.line_count = 0
        self._types: dict[str, TypeRecord] = {}
        self._parse()

    def _parse(self) -> None:
        source_path = str(self.path.absolute())
        # (declaration depth, record), most recent first
        stack: list[tuple[int, TypeRecord]] = []
        depth = 0
        line_no = -1

        with open(self.path, "r", encoding=self.encoding, errors="replace") as f:
            for line_no, raw in enumerate(f):
                line = strip_comment(raw)
                if not line:
                    continue

                if line.startswith(CLASS_KEYWORD):
                    record = self._read_declaration(line, line_no, depth, stack, source_path)
                    if record is not None:
                        stack.insert(0, (depth, record))

                for ch in line:
                    if ch == "{":
                        depth += 1
                    elif ch == "}":
                        if depth == 0:
                            raise StackUnderrun(line_no, path=source_path)
                        depth -= 1
                        if stack and stack[0][0] == depth:
                            _, closed = stack.pop(0)
                            closed.close(line_no + 1)
                            self._types[closed.unique_name] = closed

        self.line_count = line_no + 1
        if depth != 0:
            raise TruncatedInput(depth, line_no=line_no, path=source_path)

        logger.debug(f"Parsed {len(self._types)} types from {self.path}")

    def _read_declaration(self, line: str, line_no: int, depth: int,
                          stack: list[tuple[int, TypeRecord]],
                          source_path: str) -> Optional[TypeRecord]:
        """Build the record for a `.class` line, or None if it names nothing."""
        generics = parse_generic_declaration(line)
        tokens = split(line.replace("\t", " "), " ")

        is_interface = False
        for token in tokens:
            if token == "interface":
                is_interface = True
            elif not is_reserved_modifier(token):
                simple_name = token
                break
        else:
            logger.debug(f"{self.path}:{line_no}: declaration without a type name")
            return None

        outer_name = None
        if stack and stack[0][0] == depth - 1:
            outer_name = stack[0][1].unique_name
            unique_name = outer_name + NESTED_SEPARATOR + simple_name
        else:
            unique_name = simple_name

        record = TypeRecord(
            unique_name=unique_name,
            simple_name=simple_name,
            start_line=line_no,
            generics=generics,
            is_interface=is_interface,
            outer_name=outer_name,
            source_path=source_path,
        )
        try:
            self.registrar.register_type(unique_name, source_path)
        except Exception as e:
            logger.warning(f"Could not register {unique_name} from {source_path}: {e}")
        return record

    @property
    def types(self) -> list[TypeRecord]:
        """All types whose scope closed in this file."""
        return list(self._types.values())

    @property
    def result(self) -> dict[str, TypeRecord]:
        return dict(self._types)

    def find_type(self, unique_name: str) -> Optional[TypeRecord]:
        """The type with the given unique name, or None."""
        return self._types.get(unique_name)

    def __contains__(self, unique_name: object) -> bool:
        return unique_name in self._types

    def __len__(self) -> int:
        return len(self._types)


class CilParser(LanguageParser):
    """Registry adapter around DeclarationFileParser."""

    @property
    def language(self) -> str:
        return "cil"

    @property
    def extensions(self) -> tuple[str, ...]:
        return (".il", ".cil")

    def parse_file(self, path: Path, registrar: AssemblyRegistry,
                   encoding: str = "utf-8") -> ParseResult:
        try:
            parser = DeclarationFileParser(path, registrar, encoding=encoding)
        except StructuralError as e:
            logger.warning(f"{path}: {e}")
            return ParseResult(parse_error=str(e))
        return ParseResult(types=parser.result, line_count=parser.line_count)
