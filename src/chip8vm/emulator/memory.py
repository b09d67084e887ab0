"""
Memory Subsystem for the CHIP-8 Interpreter
===========================================

Memory Map:
    $000-$04F  Built-in font table (16 glyphs x 5 bytes)
    $050-$1FF  Unused (reserved for the interpreter on original hardware)
    $200-$FFF  Loaded ROM and working memory

Memory is a flat 4096-byte store. Accesses are direct indexed reads and
writes; addresses are not masked, and an out-of-range access raises
MemoryAddressError rather than wrapping.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging
from typing import Optional

from chip8vm.errors import MemoryAddressError, RomTooLargeError

logger = logging.getLogger(__name__)


# =============================================================================
# Memory Layout Constants
# =============================================================================

MEMORY_SIZE = 0x1000  # 4096 bytes
PROGRAM_START = 0x200  # ROMs are loaded (and PC starts) here
ROM_CAPACITY = MEMORY_SIZE - PROGRAM_START  # 3584 bytes

FONT_START = 0x000
FONT_HEIGHT = 5  # Bytes per glyph

# Hexadecimal digit glyphs 0-F, 4 pixels wide (high nibble) by 5 rows.
FONT = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

FONT_SIZE = len(FONT)  # 80 bytes


def glyph_address(digit: int) -> int:
    """Address of the font glyph for hex digit 0-F."""
    return FONT_START + FONT_HEIGHT * digit


class Memory:
    """
    Flat 4K memory image holding the font table and the loaded ROM.

    The font is installed at construction time and on every clear().
    A ROM is copied verbatim to $200 by load_rom().

    Attributes:
        rom_size: Length of the most recently loaded ROM (0 if none)

    Example:
        >>> mem = Memory()
        >>> mem.load_rom(bytes([0x60, 0x2A]))
        >>> f"{mem.read_word(0x200):04X}"
        '602A'
    """

    def __init__(self, rom_data: Optional[bytes] = None):
        """
        Initialize memory with the font table installed.

        Args:
            rom_data: Optional ROM image to load immediately
        """
        self._data = bytearray(MEMORY_SIZE)
        self.rom_size = 0
        self._load_font()

        if rom_data is not None:
            self.load_rom(rom_data)

    def __len__(self) -> int:
        return MEMORY_SIZE

    def _load_font(self) -> None:
        self._data[FONT_START:FONT_START + FONT_SIZE] = FONT

    def _check(self, address: int) -> None:
        if not 0 <= address < MEMORY_SIZE:
            raise MemoryAddressError(address)

    # ========================================
    # ROM Loading
    # ========================================

    def load_rom(self, data: bytes) -> None:
        """
        Copy a ROM image into memory starting at $200.

        Args:
            data: Raw ROM bytes (big-endian opcodes, no header)

        Raises:
            RomTooLargeError: If the ROM exceeds 3584 bytes. Nothing is
                copied in that case.
        """
        if len(data) > ROM_CAPACITY:
            raise RomTooLargeError(len(data), ROM_CAPACITY)

        self._data[PROGRAM_START:PROGRAM_START + len(data)] = data
        self.rom_size = len(data)
        logger.info("ROM copied successfully (%d bytes)", len(data))

    # ========================================
    # Byte and Word Access
    # ========================================

    def read(self, address: int) -> int:
        """
        Read byte from memory.

        Args:
            address: Address in 0..4095

        Returns:
            Byte value at address

        Raises:
            MemoryAddressError: If address is out of range
        """
        self._check(address)
        return self._data[address]

    def write(self, address: int, value: int) -> None:
        """
        Write byte to memory.

        Args:
            address: Address in 0..4095
            value: Byte value (masked to 8 bits)

        Raises:
            MemoryAddressError: If address is out of range
        """
        self._check(address)
        self._data[address] = value & 0xFF

    def read_word(self, address: int) -> int:
        """Read 16-bit word (big-endian)."""
        hi = self.read(address)
        lo = self.read(address + 1)
        return (hi << 8) | lo

    def write_word(self, address: int, value: int) -> None:
        """Write 16-bit word (big-endian)."""
        self.write(address, (value >> 8) & 0xFF)
        self.write(address + 1, value & 0xFF)

    def read_block(self, address: int, length: int) -> bytes:
        """
        Read a contiguous block of bytes.

        Raises:
            MemoryAddressError: If any byte of the block is out of range
        """
        if length <= 0:
            return b""
        self._check(address)
        self._check(address + length - 1)
        return bytes(self._data[address:address + length])

    def write_block(self, address: int, data: bytes) -> None:
        """
        Write a contiguous block of bytes.

        Raises:
            MemoryAddressError: If any byte of the block is out of range
        """
        if not data:
            return
        self._check(address)
        self._check(address + len(data) - 1)
        self._data[address:address + len(data)] = data

    def dump(self, start: int = 0, length: int = MEMORY_SIZE) -> bytes:
        """Return a copy of a memory region (defaults to all of memory)."""
        return self.read_block(start, length)

    def clear(self) -> None:
        """Zero all memory and reinstall the font table."""
        self._data = bytearray(MEMORY_SIZE)
        self.rom_size = 0
        self._load_font()
