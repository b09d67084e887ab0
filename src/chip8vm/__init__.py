"""
chip8vm - CHIP-8 Interpreter
============================

This package provides a deterministic interpreter for the CHIP-8 virtual
machine: a fetch/decode/execute core, its machine state (memory,
registers, call stack, timers, framebuffer, keypad), and a headless
command-line runner.

Main Components
---------------
- **emulator**: The interpreter core and the host-facing Emulator facade
- **cli**: The chip8run command

Quick Start
-----------
Run a ROM for a while and look at the screen:
    >>> from chip8vm import Emulator
    >>> emu = Emulator()
    >>> emu.load_rom_file("roms/IBM")
    >>> emu.run(200)
    200
    >>> print(emu.display_text)

Or from the command line:
    $ chip8run roms/IBM --cycles 200

Version History
---------------
1.0.0 - Initial release
"""

__version__ = "1.0.0"
__author__ = "Hugo José Pinto & Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from chip8vm.errors import (
    Chip8Error,
    RomError,
    RomTooLargeError,
    ExecutionError,
    StackError,
    StackOverflowError,
    StackUnderflowError,
    MemoryAddressError,
)

from chip8vm.emulator import (
    Emulator,
    EmulatorConfig,
    Chip8CPU,
    Framebuffer,
    Keypad,
    KeyWaitProvider,
    TimerMode,
    RandomSource,
    SeededRandom,
    ScriptedRandom,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Exception hierarchy
    "Chip8Error",
    "RomError",
    "RomTooLargeError",
    "ExecutionError",
    "StackError",
    "StackOverflowError",
    "StackUnderflowError",
    "MemoryAddressError",
    # Emulator
    "Emulator",
    "EmulatorConfig",
    "Chip8CPU",
    "Framebuffer",
    "Keypad",
    "KeyWaitProvider",
    "TimerMode",
    "RandomSource",
    "SeededRandom",
    "ScriptedRandom",
]
