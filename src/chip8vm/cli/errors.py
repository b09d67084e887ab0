"""
Unified CLI Error Handling
==========================

Consistent error reporting and exit codes for the chip8vm tools.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from chip8vm.errors import Chip8Error, ExecutionError, RomError


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    EMULATION_ERROR = 1  # ROM rejected or the program faulted
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error


def describe_error(error: Chip8Error) -> str:
    """
    One-line description of an interpreter error.

    ROM errors read "Load error: ...", faults raised while running read
    "Execution error: $PC [OPCODE]: ...".
    """
    if isinstance(error, RomError):
        return f"Load error: {error}"
    if isinstance(error, ExecutionError):
        return f"Execution error: {error}"
    return f"Error: {error}"


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception and exit with the matching exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors

    Raises:
        SystemExit: Always
    """
    if isinstance(error, Chip8Error):
        click.echo(describe_error(error), err=True)
        sys.exit(ExitCode.EMULATION_ERROR)

    if isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    click.echo(f"Internal error: {error}", err=True)
    if verbose:
        traceback.print_exc()
    sys.exit(ExitCode.INTERNAL_ERROR)
