"""
arcparse - Arc Front End Command-Line Interface
===============================================

This module implements a developer tool for the arc front end. It parses
an arc source file and reports diagnostics, optionally dumping the token
stream or the AST.

Usage Examples
--------------
Check that a file parses:
    $ arcparse ship.arc

Print the AST:
    $ arcparse ship.arc --ast

Print the token stream:
    $ arcparse ship.arc --tokens

Also run the post-parse checks:
    $ arcparse ship.arc --check

Debug logging:
    $ arcparse -v ship.arc
"""

import logging
from pathlib import Path

import click

from starfleet_sdk import __version__
from starfleet_sdk.arc import ArcFrontEnd, ParseOptions, check_program
from starfleet_sdk.arc.ast import ASTPrinter
from starfleet_sdk.arc.errors import ArcCompilationError, ErrorCollector
from starfleet_sdk.arc.lexer import Lexer, TokenKind
from starfleet_sdk.arc.parser import DEFAULT_MAX_DEPTH, max_supported_depth
from starfleet_sdk.cli.errors import handle_cli_exception


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the AST after a successful parse",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream and exit",
)
@click.option(
    "--check",
    is_flag=True,
    help="Run post-parse checks (break placement)",
)
@click.option(
    "--max-depth",
    type=click.IntRange(min=1, max=max_supported_depth()),
    default=DEFAULT_MAX_DEPTH,
    show_default=True,
    help="Maximum nesting depth of expressions, types and bodies",
)
@click.option(
    "--max-errors",
    type=click.IntRange(min=1),
    default=100,
    show_default=True,
    help="Stop after this many diagnostics",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output with debug logging",
)
@click.version_option(version=__version__, prog_name="arcparse")
def main(
    input_file: Path,
    ast: bool,
    tokens: bool,
    check: bool,
    max_depth: int,
    max_errors: int,
    verbose: bool,
) -> None:
    """
    Parse an arc source file.

    INPUT_FILE is the arc source file (.arc) to parse.

    Exits with status 0 when the file parses cleanly and 1 when it has
    lexical, syntax or (with --check) placement errors. All diagnostics
    found in one pass are printed.

    \b
    Examples:
        arcparse ship.arc            # Parse and report
        arcparse ship.arc --ast      # Print the AST
        arcparse ship.arc --tokens   # Print the tokens
        arcparse ship.arc --check    # Also check break placement
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")

    try:
        source = input_file.read_text(encoding="utf-8")

        if tokens:
            _print_tokens(source, str(input_file))
            return

        options = ParseOptions(max_depth=max_depth, max_errors=max_errors)
        result = ArcFrontEnd(options).parse_source(source, str(input_file))
        program = result.unwrap()

        if check:
            problems = check_program(program, source)
            if problems:
                collector = ErrorCollector(max_errors=max_errors)
                for problem in problems:
                    collector.add(problem)
                collector.raise_if_errors()

        if ast:
            printer = ASTPrinter()
            click.echo(printer.print(program))
            return

        if verbose:
            click.echo(f"Functions: {len(program.functions)}")
            click.echo(f"Structs: {len(program.structs)}")
        click.echo(f"Parsed {input_file}: {len(program.items)} item(s)")

    except Exception as e:
        handle_cli_exception(e, verbose)


def _print_tokens(source: str, filename: str) -> None:
    """Print one token per line, followed by any lexical errors."""
    errors = ErrorCollector()
    for token in Lexer(source, filename, errors=errors).tokenize():
        if token.kind == TokenKind.EOF:
            click.echo(f"{token.line}:{token.column}\tEOF")
        else:
            click.echo(f"{token.line}:{token.column}\t{token.kind.name}\t{token.lexeme}")

    if errors.has_errors():
        raise ArcCompilationError(errors.report(), errors.sorted_errors())


if __name__ == "__main__":
    main()
