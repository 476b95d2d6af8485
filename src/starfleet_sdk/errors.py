"""
Starfleet SDK Error Hierarchy
=============================

This module defines the root of the exception hierarchy for the Starfleet
SDK, plus the source position types shared by every tool that reports
problems against source text.

Exception Hierarchy
-------------------
StarfleetError (base)
└── ArcError (arc scripting language front end, see starfleet_sdk.arc.errors)

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class StarfleetError(Exception):
    """
    Base exception for all Starfleet SDK errors.

    Callers can catch every SDK-related error with a single except clause:

        try:
            parse_file("ship.arc").unwrap()
        except StarfleetError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A single position in source text.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        offset: Character offset from the start of the source (0-indexed)
    """
    filename: str
    line: int
    column: int
    offset: int = 0

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """
    A half-open range of source text, [start, end).

    Tokens and AST nodes both carry a span. Spans compare by offsets, so a
    span built from two tokens covers everything in between.
    """
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        return str(self.start)

    def __len__(self) -> int:
        return self.end.offset - self.start.offset

    @property
    def filename(self) -> str:
        return self.start.filename

    def to(self, other: "SourceSpan") -> "SourceSpan":
        """Return the span running from the start of self to the end of other."""
        return SourceSpan(self.start, other.end)

    def contains(self, other: "SourceSpan") -> bool:
        """Return True if other lies entirely within this span."""
        return (
            self.start.offset <= other.start.offset
            and other.end.offset <= self.end.offset
        )
