"""
Starfleet SDK - Tooling for the Starfleet Simulation
====================================================

This package provides developer tooling for the Starfleet entity-component
simulation. Behaviour inside the simulation is scripted in arc, a small
typed language; the SDK ships its front end.

Main Components
---------------
- **arc**: arc front end
    Lexer, parser and AST for arc scripts, with collected diagnostics

- **cli**: command-line tools (arcparse)

Quick Start
-----------
Parse a script:
    >>> from starfleet_sdk.arc import parse
    >>> result = parse("fun add(a: i32, b: i32): i32 { return a + b; }")
    >>> program = result.unwrap()

Or use the command-line tool:
    $ arcparse ship.arc --ast

Version History
---------------
1.0.0 - Initial release with the arc lexer and parser
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from starfleet_sdk.errors import StarfleetError, SourceLocation, SourceSpan
from starfleet_sdk.arc import parse, parse_file, ParseOptions, ParseResult

__all__ = [
    "__version__",
    "StarfleetError",
    "SourceLocation",
    "SourceSpan",
    "parse",
    "parse_file",
    "ParseOptions",
    "ParseResult",
]
