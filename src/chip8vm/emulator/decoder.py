"""
CHIP-8 Opcode Decoder
=====================

Turns a 16-bit opcode into an Instruction: an Op tag plus the operand
fields the instruction uses. Decoding is a pure function with no access
to machine state; the CPU executes the result with a match on the tag.

Operand fields, extracted from every opcode:
    X   = (opcode >> 8) & 0xF   register index
    Y   = (opcode >> 4) & 0xF   register index
    N   = opcode & 0xF          4-bit constant
    NN  = opcode & 0xFF         8-bit constant
    NNN = opcode & 0xFFF        12-bit address

Bit patterns outside the 35 standard instructions decode to Op.UNKNOWN.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache


class Op(Enum):
    """Instruction tags, one per CHIP-8 instruction."""
    CLS = auto()        # 00E0
    RET = auto()        # 00EE
    JP = auto()         # 1NNN
    CALL = auto()       # 2NNN
    SE_IMM = auto()     # 3XNN
    SNE_IMM = auto()    # 4XNN
    SE_REG = auto()     # 5XY0
    LD_IMM = auto()     # 6XNN
    ADD_IMM = auto()    # 7XNN
    LD_REG = auto()     # 8XY0
    OR = auto()         # 8XY1
    AND = auto()        # 8XY2
    XOR = auto()        # 8XY3
    ADD_REG = auto()    # 8XY4
    SUB = auto()        # 8XY5
    SHR = auto()        # 8XY6
    SUBN = auto()       # 8XY7
    SHL = auto()        # 8XYE
    SNE_REG = auto()    # 9XY0
    LD_I = auto()       # ANNN
    JP_V0 = auto()      # BNNN
    RND = auto()        # CXNN
    DRW = auto()        # DXYN
    SKP = auto()        # EX9E
    SKNP = auto()       # EXA1
    LD_VX_DT = auto()   # FX07
    LD_VX_K = auto()    # FX0A
    LD_DT_VX = auto()   # FX15
    LD_ST_VX = auto()   # FX18
    ADD_I_VX = auto()   # FX1E
    LD_F_VX = auto()    # FX29
    LD_B_VX = auto()    # FX33
    LD_MEM_VX = auto()  # FX55
    LD_VX_MEM = auto()  # FX65
    UNKNOWN = auto()


@dataclass(frozen=True)
class Instruction:
    """
    A decoded opcode.

    Attributes:
        op: Instruction tag
        opcode: The raw 16-bit word
        x, y, n, nn, nnn: Operand fields (always extracted; each Op uses
            the subset it needs)
    """
    op: Op
    opcode: int
    x: int
    y: int
    n: int
    nn: int
    nnn: int

    @property
    def mnemonic(self) -> str:
        """Tag name, e.g. 'ADD_REG'."""
        return self.op.name

    def __str__(self) -> str:
        return f"{self.opcode:04X} {self.op.name}"


# Sub-dispatch tables for the families selected by a low byte or nibble.

_ALU_OPS = {
    0x0: Op.LD_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

_KEY_OPS = {
    0x9E: Op.SKP,
    0xA1: Op.SKNP,
}

_MISC_OPS = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I_VX,
    0x29: Op.LD_F_VX,
    0x33: Op.LD_B_VX,
    0x55: Op.LD_MEM_VX,
    0x65: Op.LD_VX_MEM,
}


def _classify(opcode: int) -> Op:
    """Pick the Op tag for an opcode: high nibble first, then sub-fields."""
    n = opcode & 0x000F
    nn = opcode & 0x00FF

    match opcode & 0xF000:
        case 0x0000:
            if opcode == 0x00E0:
                return Op.CLS
            if opcode == 0x00EE:
                return Op.RET
            return Op.UNKNOWN
        case 0x1000:
            return Op.JP
        case 0x2000:
            return Op.CALL
        case 0x3000:
            return Op.SE_IMM
        case 0x4000:
            return Op.SNE_IMM
        case 0x5000:
            return Op.SE_REG if n == 0 else Op.UNKNOWN
        case 0x6000:
            return Op.LD_IMM
        case 0x7000:
            return Op.ADD_IMM
        case 0x8000:
            return _ALU_OPS.get(n, Op.UNKNOWN)
        case 0x9000:
            return Op.SNE_REG if n == 0 else Op.UNKNOWN
        case 0xA000:
            return Op.LD_I
        case 0xB000:
            return Op.JP_V0
        case 0xC000:
            return Op.RND
        case 0xD000:
            return Op.DRW
        case 0xE000:
            return _KEY_OPS.get(nn, Op.UNKNOWN)
        case _:  # 0xF000
            return _MISC_OPS.get(nn, Op.UNKNOWN)


@lru_cache(maxsize=None)
def decode(opcode: int) -> Instruction:
    """
    Decode a 16-bit opcode.

    Results are cached; Instruction is immutable, so a decoded opcode can
    be shared by every cycle that fetches it.

    Args:
        opcode: 16-bit instruction word

    Returns:
        The decoded Instruction (op is Op.UNKNOWN for unrecognized words)

    Example:
        >>> ins = decode(0x8AB4)
        >>> ins.op, ins.x, ins.y
        (<Op.ADD_REG: 14>, 10, 11)
    """
    opcode &= 0xFFFF
    return Instruction(
        op=_classify(opcode),
        opcode=opcode,
        x=(opcode >> 8) & 0xF,
        y=(opcode >> 4) & 0xF,
        n=opcode & 0xF,
        nn=opcode & 0xFF,
        nnn=opcode & 0xFFF,
    )
