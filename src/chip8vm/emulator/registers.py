"""
Register File and Call Stack
============================

CHIP-8 register set:
- V0-VF: sixteen 8-bit general registers (VF doubles as the flag register)
- I: 16-bit address register
- PC: 16-bit program counter, starts at $200
- OPCODE: the 16-bit word fetched by the current cycle

The call stack has 16 slots of return addresses. Unlike the original
hardware interpreters, pushes and pops are bounds-checked: a 17th nested
call raises StackOverflowError and a return with nothing on the stack
raises StackUnderflowError.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass, field

from chip8vm.errors import StackOverflowError, StackUnderflowError
from chip8vm.emulator.memory import PROGRAM_START

NUM_REGISTERS = 16
FLAG_REGISTER = 0xF
STACK_SIZE = 16


@dataclass
class RegisterState:
    """
    Complete register state.

    All values stored as Python ints but represent:
    - v: 16 x 8-bit unsigned (0-255)
    - i, pc, opcode: 16-bit unsigned (0-65535)
    """
    v: list[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)
    i: int = 0
    pc: int = PROGRAM_START
    opcode: int = 0


class RegisterFile:
    """
    CHIP-8 registers with width masking on every write.

    Example:
        >>> regs = RegisterFile()
        >>> regs.set_v(0xA, 0x1FF)
        >>> hex(regs.get_v(0xA))
        '0xff'
        >>> hex(regs.pc)
        '0x200'
    """

    def __init__(self):
        self.state = RegisterState()

    # ========================================
    # General Registers
    # ========================================

    def get_v(self, index: int) -> int:
        """Read general register V0-VF."""
        return self.state.v[index]

    def set_v(self, index: int, value: int) -> None:
        """Write general register V0-VF (masked to 8 bits)."""
        self.state.v[index] = value & 0xFF

    @property
    def v(self) -> list[int]:
        """Copy of V0-VF."""
        return list(self.state.v)

    @property
    def vf(self) -> int:
        """Flag register VF."""
        return self.state.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.state.v[FLAG_REGISTER] = value & 0xFF

    # ========================================
    # 16-bit Registers
    # ========================================

    @property
    def i(self) -> int:
        """Address register I (16-bit)."""
        return self.state.i

    @i.setter
    def i(self, value: int) -> None:
        self.state.i = value & 0xFFFF

    @property
    def pc(self) -> int:
        """Program counter (16-bit)."""
        return self.state.pc

    @pc.setter
    def pc(self, value: int) -> None:
        self.state.pc = value & 0xFFFF

    @property
    def opcode(self) -> int:
        """Most recently fetched opcode."""
        return self.state.opcode

    @opcode.setter
    def opcode(self, value: int) -> None:
        self.state.opcode = value & 0xFFFF

    def reset(self) -> None:
        """Zero all registers and point PC at the program start."""
        self.state = RegisterState()


class CallStack:
    """
    Bounded stack of subroutine return addresses.

    Attributes:
        sp: Number of occupied slots (0-16)
    """

    def __init__(self, size: int = STACK_SIZE):
        self._slots = [0] * size
        self.sp = 0

    @property
    def size(self) -> int:
        """Total number of slots."""
        return len(self._slots)

    @property
    def depth(self) -> int:
        """Number of return addresses currently stored."""
        return self.sp

    def push(self, address: int) -> None:
        """
        Push a return address.

        Raises:
            StackOverflowError: If all slots are in use
        """
        if self.sp >= len(self._slots):
            raise StackOverflowError(f"call stack overflow (depth {self.sp})")
        self._slots[self.sp] = address & 0xFFFF
        self.sp += 1

    def pop(self) -> int:
        """
        Pop the most recent return address.

        Raises:
            StackUnderflowError: If the stack is empty
        """
        if self.sp == 0:
            raise StackUnderflowError("return with empty call stack")
        self.sp -= 1
        return self._slots[self.sp]

    def peek(self) -> int:
        """Most recent return address without popping it."""
        if self.sp == 0:
            raise StackUnderflowError("call stack is empty")
        return self._slots[self.sp - 1]

    def entries(self) -> list[int]:
        """Stored return addresses, oldest first."""
        return self._slots[:self.sp]

    def clear(self) -> None:
        """Drop all return addresses."""
        self._slots = [0] * len(self._slots)
        self.sp = 0
