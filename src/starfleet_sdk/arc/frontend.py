"""
Arc Front End Driver
====================

This module provides the main interface for turning arc source text into
an AST. It wires the lexer and parser together around a shared error
collector:

    Source → Lexer (lazy tokens) → Parser → Program

Usage
-----
Programmatic:
    >>> from starfleet_sdk.arc import parse
    >>> result = parse('fun main(): i32 { return 0; }')
    >>> result.success
    True
    >>> program = result.unwrap()

Command line:
    $ arcparse ship.arc --ast

Error Handling
--------------
parse() never raises for problems in the source. Lexical and syntax
errors are collected in one pass and returned as diagnostics on the
ParseResult; unwrap() turns them into a single ArcCompilationError.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import logging

from starfleet_sdk.arc.ast import Program
from starfleet_sdk.arc.lexer import Lexer
from starfleet_sdk.arc.parser import DEFAULT_MAX_DEPTH, Parser, max_supported_depth
from starfleet_sdk.arc.errors import (
    ArcCompilationError,
    ArcError,
    ErrorCollector,
)

logger = logging.getLogger(__name__)


@dataclass
class ParseOptions:
    """
    Front end configuration options.

    Attributes:
        max_depth: Nesting bound for expressions, types and bodies. Deeper
                   input fails with RecursionLimitError. At most
                   max_supported_depth(), which follows the interpreter
                   recursion limit.
        max_errors: Diagnostics to collect before the parse gives up
    """
    max_depth: int = DEFAULT_MAX_DEPTH
    max_errors: int = 100

    def __post_init__(self):
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")
        limit = max_supported_depth()
        if self.max_depth > limit:
            raise ValueError(
                f"max_depth must be at most {limit} at the current recursion "
                f"limit, got {self.max_depth}"
            )
        if self.max_errors < 1:
            raise ValueError(f"max_errors must be at least 1, got {self.max_errors}")


@dataclass
class ParseResult:
    """
    Result of parsing one source text.

    Attributes:
        filename: Source filename
        program: The parsed Program. When diagnostics are present it holds
                 only the items that parsed cleanly.
        diagnostics: Lexical and syntax errors, ordered by position
    """
    filename: str = "<input>"
    program: Optional[Program] = None
    diagnostics: list[ArcError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.diagnostics

    def report(self) -> str:
        """Format all diagnostics for display."""
        collector = ErrorCollector(max_errors=max(len(self.diagnostics), 1))
        for error in self.diagnostics:
            collector.add(error)
        return collector.report()

    def unwrap(self) -> Program:
        """
        Return the program, or raise if parsing failed.

        Raises:
            ArcCompilationError: With every diagnostic, if any were found
        """
        if self.diagnostics:
            raise ArcCompilationError(self.report(), self.diagnostics)
        return self.program


class ArcFrontEnd:
    """
    Lexer and parser for arc source.

    Example:
        front_end = ArcFrontEnd(ParseOptions(max_depth=32))
        result = front_end.parse_file("ship.arc")
        for error in result.diagnostics:
            print(error)

    Attributes:
        options: Front end configuration options
    """

    def __init__(self, options: Optional[ParseOptions] = None):
        self.options = options or ParseOptions()

    def parse_source(self, source: str, filename: str = "<input>") -> ParseResult:
        """
        Parse arc source text.

        Args:
            source: Arc source code string
            filename: Source filename for error messages

        Returns:
            ParseResult with the program and any diagnostics
        """
        errors = ErrorCollector(max_errors=self.options.max_errors)
        lexer = Lexer(source, filename, errors=errors)
        parser = Parser(
            lexer.tokenize(),
            filename,
            source.split("\n"),
            max_depth=self.options.max_depth,
            errors=errors,
        )

        program = parser.parse()

        result = ParseResult(
            filename=filename,
            program=program,
            diagnostics=errors.sorted_errors(),
        )
        logger.debug(
            f"Parsed {filename}: {len(program.items)} item(s), "
            f"{len(result.diagnostics)} diagnostic(s)"
        )
        return result

    def parse_file(self, filepath: str) -> ParseResult:
        """
        Parse an arc source file.

        Raises:
            FileNotFoundError: If source file not found
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding="utf-8")
        return self.parse_source(source, str(filepath))


# =============================================================================
# Convenience Functions
# =============================================================================

def parse(
    source: str,
    filename: str = "<input>",
    options: Optional[ParseOptions] = None,
) -> ParseResult:
    """
    Parse arc source text into a Program.

    This is the primary high-level interface of the front end.

    Example:
        >>> result = parse("x := [1, 2, 3];")
        >>> result.program.items[0].expression.target.name
        'x'
    """
    return ArcFrontEnd(options).parse_source(source, filename)


def parse_file(filepath: str, options: Optional[ParseOptions] = None) -> ParseResult:
    """Parse an arc source file into a Program."""
    return ArcFrontEnd(options).parse_file(filepath)
