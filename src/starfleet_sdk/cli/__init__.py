"""
Starfleet SDK Command-Line Interface
===================================

This package provides command-line tools for the Starfleet SDK:

- **arcparse**: arc front end driver (tokens, AST, diagnostics)

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["arcparse"]
