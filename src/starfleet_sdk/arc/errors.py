"""
Arc Front End Error Hierarchy
=============================

This module defines the diagnostics produced by the arc lexer and parser.
All exceptions inherit from ArcError, which itself inherits from the base
StarfleetError for consistent error handling across the SDK.

Exception Hierarchy
-------------------
ArcError (base for all arc diagnostics)
├── LexicalError - source text that cannot be tokenized
│   ├── UnterminatedLiteralError - missing closing quote
│   └── InvalidCharacterError - unexpected character
├── ArcSyntaxError - token sequence matches no production
│   ├── UnexpectedTokenError - wrong token for the grammar rule
│   ├── MissingTokenError - required delimiter not found
│   ├── InvalidAssignmentTargetError - non-addressable assignment target
│   └── TypeNameError - malformed type name or array length
├── RecursionLimitError - nesting deeper than the configured bound
├── BreakOutsideLoopError - 'break' with no enclosing 'while'
└── ArcCompilationError - aggregate report of several diagnostics

Diagnostic Kinds
----------------
Every diagnostic carries a DiagnosticKind so that consumers can filter or
count them without isinstance checks: LEXICAL, SYNTAX, TYPE_NAME,
RECURSION_LIMIT and SEMANTIC (post-parse checks only).

Error Message Format
--------------------
    ship.arc:3:12: error: expression is not assignable
        f() := 2;
        ^
    hint: assign to a variable, a member access or an index access
"""

from enum import Enum
from typing import Optional, List

from starfleet_sdk.errors import StarfleetError, SourceLocation


class DiagnosticKind(Enum):
    """Broad category of a diagnostic."""
    LEXICAL = "lexical"
    SYNTAX = "syntax"
    TYPE_NAME = "type-name"
    RECURSION_LIMIT = "recursion-limit"
    SEMANTIC = "semantic"


# =============================================================================
# Base Arc Exception
# =============================================================================

class ArcError(StarfleetError):
    """
    Base exception for all arc front end diagnostics.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
        kind: The DiagnosticKind of this error
    """

    kind = DiagnosticKind.SYNTAX

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

            ship.arc:5:12: error: unexpected token '}'
                x := };
                     ^
            hint: expected expression
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class ArcCompilationError(ArcError):
    """
    Aggregate error containing multiple diagnostics.

    The message is already a formatted report from ErrorCollector and is
    passed through unchanged. The individual diagnostics stay available on
    the errors attribute.
    """

    def __init__(self, report: str, errors: Optional[List[ArcError]] = None):
        self.errors = list(errors or [])
        super().__init__(report)

    def _format_message(self) -> str:
        return self.message


# =============================================================================
# Lexical Errors
# =============================================================================

class LexicalError(ArcError):
    """
    Source text that cannot be turned into a token.

    Examples:
        - Unterminated char or string literal
        - Digit or punctuation inside a char or string literal
        - A character that starts no token, such as '$' or a lone '='
    """

    kind = DiagnosticKind.LEXICAL


class UnterminatedLiteralError(LexicalError):
    """
    Char or string literal with no closing quote.

    Example:
        name := "hello
    """

    def __init__(
        self,
        quote: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.quote = quote
        what = "string" if quote == '"' else "character"
        super().__init__(
            f"unterminated {what} literal",
            location=location,
            hint=f"add closing {quote} to complete the literal",
            source_line=source_line,
        )


class InvalidCharacterError(LexicalError):
    """
    Character that is not valid where it appears.

    Raised for characters that start no token, and for characters that
    are not allowed inside char and string literals (which accept letters
    only).
    """

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        context: Optional[str] = None,
    ):
        self.char = char
        message = f"invalid character '{char}' (0x{ord(char):02X})"
        hint = None
        if context:
            message = f"{message} in {context}"
            hint = "char and string literals may only contain letters"
        super().__init__(
            message,
            location=location,
            hint=hint,
            source_line=source_line,
        )


# =============================================================================
# Syntax Errors
# =============================================================================

class ArcSyntaxError(ArcError):
    """
    Token sequence that matches no production of the grammar.

    Attributes:
        at_error_token: True when the offending token is the placeholder the
            lexer emits after a lexical error. Such errors are consequences
            of a diagnostic that has already been recorded.
    """

    kind = DiagnosticKind.SYNTAX
    at_error_token: bool = False


class UnexpectedTokenError(ArcSyntaxError):
    """Token that doesn't match the expected grammar rule."""

    def __init__(
        self,
        found: str,
        expected: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.found = found
        self.expected = expected

        hint = None
        if expected:
            hint = f"expected {expected}"

        super().__init__(
            f"unexpected {found}",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class MissingTokenError(ArcSyntaxError):
    """
    Required token is missing.

    Raised when a required token (like ';' or '}') is not found where
    expected. For closing delimiters the hint points back at the opener.
    """

    def __init__(
        self,
        expected: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.expected = expected
        super().__init__(
            f"expected {expected}",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class InvalidAssignmentTargetError(ArcSyntaxError):
    """
    Left-hand side of ':=' or a compound assignment is not addressable.

    Examples of invalid targets:
        1 := 2;
        f() := 2;
        (x) += 1;
    """

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "expression is not assignable",
            location=location,
            hint="assign to a variable, a member access or an index access",
            source_line=source_line,
        )


class TypeNameError(ArcSyntaxError):
    """
    Malformed type name.

    Raised for a missing type, and for array lengths that are not a
    non-negative integer literal:
        [i32, n]
        [i32, -1]
        [u8, 0xg]
    """

    kind = DiagnosticKind.TYPE_NAME


# =============================================================================
# Resource Limits
# =============================================================================

class RecursionLimitError(ArcError):
    """
    Nesting deeper than the configured bound.

    Deeply nested expressions, array types or bodies fail with this error
    instead of exhausting the interpreter stack.
    """

    kind = DiagnosticKind.RECURSION_LIMIT

    def __init__(
        self,
        limit: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.limit = limit
        super().__init__(
            f"nesting exceeds the maximum depth of {limit}",
            location=location,
            hint="split the construct into smaller pieces",
            source_line=source_line,
        )


# =============================================================================
# Post-parse Checks
# =============================================================================

class BreakOutsideLoopError(ArcError):
    """'break' statement with no enclosing 'while' loop."""

    kind = DiagnosticKind.SEMANTIC

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "'break' statement not within a loop",
            location=location,
            source_line=source_line,
        )


# =============================================================================
# Error Collection (for multi-error reporting)
# =============================================================================

class ErrorCollector:
    """
    Collects multiple diagnostics for batch reporting.

    The lexer and parser use this to continue after an error, so that one
    pass reports every problem it can find.

    Example:
        collector = ErrorCollector(max_errors=50)
        for item in items:
            try:
                check(item)
            except ArcError as e:
                collector.add(e)
                if collector.should_stop():
                    break
        collector.raise_if_errors()
    """

    def __init__(self, max_errors: int = 100):
        """
        Initialize the error collector.

        Args:
            max_errors: Maximum errors to collect before stopping
        """
        self.errors: List[ArcError] = []
        self.max_errors = max_errors

    def add(self, error: ArcError) -> None:
        """Add an error, ignoring it once max_errors has been reached."""
        if not self.should_stop():
            self.errors.append(error)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def should_stop(self) -> bool:
        """Return True if max_errors has been reached."""
        return len(self.errors) >= self.max_errors

    def error_count(self) -> int:
        return len(self.errors)

    def sorted_errors(self) -> List[ArcError]:
        """Errors ordered by source position, unlocated ones last."""
        def key(error: ArcError):
            if error.location is None:
                return (1, 0)
            return (0, error.location.offset)
        return sorted(self.errors, key=key)

    def report(self) -> str:
        """Format all errors for display."""
        lines = []
        for error in self.sorted_errors():
            lines.append(str(error))
            lines.append("")

        error_word = "error" if len(self.errors) == 1 else "errors"
        lines.append(f"{len(self.errors)} {error_word}")
        return "\n".join(lines)

    def clear(self) -> None:
        self.errors.clear()

    def raise_if_errors(self) -> None:
        """Raise an ArcCompilationError if any errors were collected."""
        if self.has_errors():
            raise ArcCompilationError(self.report(), self.sorted_errors())
