from __future__ import annotations

"""
Appendable Value Types.

Small immutable value objects that a LogRecord knows how to render: source
locations, pointer-like addresses and simple 2D geometry.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SourceLocation:
    """
    Call-site coordinates attached once to every record.

    Attributes:
        file: Path of the emitting source file (may be empty).
        line: Line number inside that file.
        func: Name of the emitting function (may be empty).
    """
    file: Optional[str] = None
    line: int = 0
    func: Optional[str] = None


@dataclass(frozen=True)
class Address:
    """An opaque pointer-like value, rendered as 0x-prefixed hex."""
    value: int

    def __str__(self) -> str:
        return f"0x{self.value:x}"


@dataclass(frozen=True)
class Point:
    x: int
    y: int

    def __str__(self) -> str:
        return f"@({self.x},{self.y})"


@dataclass(frozen=True)
class Size:
    width: int
    height: int

    def __str__(self) -> str:
        return f"@({self.width}x{self.height})"


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    def __str__(self) -> str:
        return f"@(({self.width},{self.height})+({self.x},{self.y}))"
