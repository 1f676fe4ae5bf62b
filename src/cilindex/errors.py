"""
Structural failures raised while scanning a disassembly file.
"""

from __future__ import annotations

from typing import Optional


class StructuralError(Exception):
    """Unbalanced braces — fatal for the file being parsed."""

    def __init__(self, message: str, line_no: Optional[int] = None,
                 path: Optional[str] = None) -> None:
        self.line_no = line_no
        self.path = path
        super().__init__(message)


class StackUnderrun(StructuralError):
    """Raised when a closing brace appears with no open scope."""

    def __init__(self, line_no: int, path: Optional[str] = None) -> None:
        super().__init__(f"stack underrun on line {line_no}", line_no=line_no, path=path)


class TruncatedInput(StructuralError):
    """Raised when the file ends with scopes still open."""

    def __init__(self, open_scopes: int, line_no: Optional[int] = None,
                 path: Optional[str] = None) -> None:
        self.open_scopes = open_scopes
        super().__init__(
            f"input seems to be truncated ({open_scopes} unclosed scopes)",
            line_no=line_no, path=path,
        )
