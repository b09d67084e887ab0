"""
CHIP-8 Emulator
===============

A deterministic CHIP-8 interpreter core.

This package provides:

- **CPU**: Fetch/decode/execute loop for the 35 standard instructions
- **Memory**: 4K image with the built-in hex font at $000
- **Framebuffer**: 64x32 monochrome display with XOR sprite drawing
- **Keypad**: 16-key input latch plus a blocking key-wait hook
- **Timers**: Delay and sound timers, per-cycle or fixed-rate

Quick Start
-----------

Basic usage::

    >>> from chip8vm.emulator import Emulator
    >>> emu = Emulator()
    >>> emu.load_rom_file("PONG")
    >>> emu.run(1000)
    1000
    >>> print(emu.display_text)

Module Structure
----------------

- `emulator.py`: Emulator facade and EmulatorConfig
- `cpu.py`: Chip8CPU, the interpreter loop
- `decoder.py`: Opcode to Instruction decoding
- `memory.py`: Memory image and font table
- `registers.py`: Register file and call stack
- `display.py`: Framebuffer
- `keyboard.py`: Keypad latch and host key map
- `timers.py`: Delay and sound timers
- `rng.py`: Random byte sources

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

# Main entry point
from .emulator import Emulator, EmulatorConfig

# CPU components
from .cpu import Chip8CPU
from .decoder import Instruction, Op, decode
from .registers import RegisterFile, RegisterState, CallStack

# Memory subsystem
from .memory import (
    Memory,
    FONT,
    MEMORY_SIZE,
    PROGRAM_START,
    ROM_CAPACITY,
    glyph_address,
)

# I/O
from .display import Framebuffer, SCREEN_WIDTH, SCREEN_HEIGHT
from .keyboard import Keypad, KeyWaitProvider, DEFAULT_KEY_MAP, key_for_host_key
from .timers import Timers, TimerMode

# Random sources
from .rng import RandomSource, SeededRandom, ScriptedRandom, DEFAULT_SEED

__all__ = [
    # Main API
    "Emulator",
    "EmulatorConfig",

    # CPU
    "Chip8CPU",
    "Instruction",
    "Op",
    "decode",
    "RegisterFile",
    "RegisterState",
    "CallStack",

    # Memory
    "Memory",
    "FONT",
    "MEMORY_SIZE",
    "PROGRAM_START",
    "ROM_CAPACITY",
    "glyph_address",

    # Display
    "Framebuffer",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",

    # Keypad
    "Keypad",
    "KeyWaitProvider",
    "DEFAULT_KEY_MAP",
    "key_for_host_key",

    # Timers
    "Timers",
    "TimerMode",

    # Random
    "RandomSource",
    "SeededRandom",
    "ScriptedRandom",
    "DEFAULT_SEED",
]
