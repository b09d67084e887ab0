"""
chip8vm Error Hierarchy
=======================

This module defines the exception hierarchy for the CHIP-8 interpreter.
All exceptions inherit from Chip8Error, allowing callers to catch every
interpreter-related error with a single except clause if desired.

Exception Hierarchy
-------------------
Chip8Error (base)
├── RomError (ROM loading)
│   └── RomTooLargeError - ROM does not fit in program memory
└── ExecutionError (raised out of a cycle)
    ├── StackError
    │   ├── StackOverflowError - call nesting deeper than 16
    │   └── StackUnderflowError - return with an empty call stack
    └── MemoryAddressError - access outside the 4K address space

Unknown opcodes are deliberately absent: they are logged and executed as
a no-op, never raised.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Chip8Error(Exception):
    """
    Base exception for all chip8vm errors.

    All exceptions in the package inherit from this class:

        try:
            emu.load_rom(data)
            emu.run(10_000)
        except Chip8Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# ROM Loading Exceptions
# =============================================================================

class RomError(Chip8Error):
    """Base exception for ROM loading errors."""
    pass


class RomTooLargeError(RomError):
    """
    ROM image exceeds program memory.

    Program memory runs from $200 to $FFF, so a ROM may be at most
    3584 bytes. The load is aborted before any byte is copied, leaving
    the interpreter exactly as it was.

    Attributes:
        size: Length of the rejected ROM in bytes
        capacity: Number of bytes available for a ROM
    """

    def __init__(self, size: int, capacity: int, message: str = ""):
        self.size = size
        self.capacity = capacity
        if not message:
            message = (
                f"ROM is too big to fit into memory: {size} bytes "
                f"(capacity {capacity} bytes)"
            )
        super().__init__(message)


# =============================================================================
# Execution Exceptions
# =============================================================================

class ExecutionError(Chip8Error):
    """
    Base exception for errors raised while executing an instruction.

    The cycle that raised is abandoned: PC, timers and the cycle counter
    keep the values they had before the cycle started.

    Attributes:
        message: The error description
        pc: Address of the failing instruction (optional)
        opcode: The failing 16-bit opcode (optional)
    """

    def __init__(
        self,
        message: str,
        pc: Optional[int] = None,
        opcode: Optional[int] = None,
    ):
        self.message = message
        self.pc = pc
        self.opcode = opcode
        super().__init__(self._format_message())

    def locate(self, pc: int, opcode: Optional[int] = None) -> None:
        """
        Attach the failing instruction's location if not already known.

        Components below the CPU (memory, call stack) raise without a PC;
        the CPU fills it in before the error leaves cycle().
        """
        if self.pc is not None:
            return
        self.pc = pc
        self.opcode = opcode
        self.args = (self._format_message(),)

    def _format_message(self) -> str:
        """
        Format the message with the instruction location.

        Example output:
            $0204 [2208]: call stack overflow (depth 16)
        """
        if self.pc is not None and self.opcode is not None:
            return f"${self.pc:04X} [{self.opcode:04X}]: {self.message}"
        if self.pc is not None:
            return f"${self.pc:04X}: {self.message}"
        return self.message


class StackError(ExecutionError):
    """Base exception for call stack bound violations."""
    pass


class StackOverflowError(StackError):
    """
    Subroutine call nested deeper than the 16-slot call stack.

    Raised by 2NNN when every stack slot is already in use.
    """
    pass


class StackUnderflowError(StackError):
    """
    Subroutine return with an empty call stack.

    Raised by 00EE when there is no return address to pop.
    """
    pass


class MemoryAddressError(ExecutionError, IndexError):
    """
    Memory access outside the 4K address space.

    Memory performs no implicit masking, so a program that walks I or PC
    off the end of memory fails loudly here instead of wrapping.

    Attributes:
        address: The offending address
    """

    def __init__(self, address: int, message: str = ""):
        self.address = address
        if not message:
            message = f"memory address ${address:04X} out of range"
        super().__init__(message)
