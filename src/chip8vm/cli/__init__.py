"""
chip8vm Command-Line Interface
==============================

This package provides command-line tools for chip8vm:

- **chip8run**: Headless ROM runner that prints the final screen

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["chip8run"]
