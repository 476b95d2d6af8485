"""
Unified CLI Error Handling
==========================

Provides consistent error handling and exit codes across the SDK's CLI tools.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    SOURCE_ERROR = 1     # Lexical, syntax or check errors in the input
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Unified exception handler for CLI tools.

    Prints the error, with a traceback for internal errors in verbose mode,
    and exits with the matching exit code.

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    from starfleet_sdk.arc.errors import ArcError
    from starfleet_sdk.errors import StarfleetError

    if isinstance(error, ArcError):
        # Diagnostics are already formatted with an "error:" prefix
        click.echo(str(error), err=True)
        sys.exit(ExitCode.SOURCE_ERROR)

    elif isinstance(error, StarfleetError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.SOURCE_ERROR)

    elif isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
