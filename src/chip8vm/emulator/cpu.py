"""
CHIP-8 CPU
==========

The fetch/decode/execute loop and the machine state it drives.

One call to cycle():
1. Fetches the big-endian opcode at PC
2. Decodes it into an Instruction (see decoder.py)
3. Executes it; the instruction may replace the default next PC (PC + 2)
4. Stores the next PC and bumps the cycle counter
5. Ticks the delay and sound timers (unless the host paces them itself)

Arithmetic is exact 8-bit wraparound. Flags land in VF after the result
is written, so an instruction that targets VF itself ends with the flag.

Quirk kept on purpose: 8XY6 and 8XYE shift Vy (not Vx), store the shifted
value back into Vy, then copy it into Vx. Many interpreters shift Vx in
place instead; ROMs written for this behavior depend on it.

The only point where the CPU hands control to the host is FX0A: when no
key is down it calls the injected KeyWaitProvider and resumes once that
returns.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging
from typing import Callable, Optional, Sequence

from chip8vm.errors import ExecutionError
from chip8vm.emulator.decoder import Instruction, Op, decode
from chip8vm.emulator.display import Framebuffer
from chip8vm.emulator.keyboard import KeyWaitProvider, Keypad
from chip8vm.emulator.memory import FONT_HEIGHT, Memory
from chip8vm.emulator.registers import NUM_REGISTERS, CallStack, RegisterFile
from chip8vm.emulator.rng import RandomSource, SeededRandom
from chip8vm.emulator.timers import Timers

logger = logging.getLogger(__name__)


class Chip8CPU:
    """
    CHIP-8 interpreter core.

    Owns every piece of machine state. Collaborators that the host may
    want to replace (random source, key wait, beep callback) are plain
    attributes.

    Attributes:
        memory: 4K memory image (font + ROM)
        registers: V0-VF, I, PC, OPCODE
        stack: 16-slot call stack
        timers: Delay and sound timers
        display: 64x32 framebuffer
        keypad: 16-key input latch
        random_source: Supplies bytes for CXNN
        key_wait: Host capability FX0A blocks on (None: FX0A retries
            every cycle until a key appears in the latch)
        on_beep: Called when the sound timer runs out
        tick_timers_per_cycle: Tick timers at the end of every cycle
        cycle_count: Number of completed cycles (diagnostic)

    Example:
        >>> cpu = Chip8CPU()
        >>> cpu.load_rom(bytes([0x6A, 0x12]))  # LD VA, $12
        >>> cpu.cycle()
        >>> hex(cpu.registers.get_v(0xA)), hex(cpu.pc)
        ('0x12', '0x202')
    """

    def __init__(
        self,
        memory: Optional[Memory] = None,
        display: Optional[Framebuffer] = None,
        keypad: Optional[Keypad] = None,
        random_source: Optional[RandomSource] = None,
        key_wait: Optional[KeyWaitProvider] = None,
    ):
        self.memory = memory or Memory()
        self.registers = RegisterFile()
        self.stack = CallStack()
        self.timers = Timers()
        self.display = display or Framebuffer()
        self.keypad = keypad or Keypad()
        self.random_source: RandomSource = random_source or SeededRandom()
        self.key_wait = key_wait

        self.on_beep: Optional[Callable[[], None]] = None
        self.tick_timers_per_cycle = True
        self.cycle_count = 0

    # ========================================
    # Register Shortcuts
    # ========================================

    @property
    def pc(self) -> int:
        """Program counter."""
        return self.registers.pc

    @pc.setter
    def pc(self, value: int) -> None:
        self.registers.pc = value

    @property
    def i(self) -> int:
        """Address register I."""
        return self.registers.i

    @i.setter
    def i(self, value: int) -> None:
        self.registers.i = value

    @property
    def v(self) -> list[int]:
        """Copy of V0-VF."""
        return self.registers.v

    # ========================================
    # Host Interface
    # ========================================

    def load_rom(self, data: bytes) -> None:
        """
        Load a ROM at $200.

        Raises:
            RomTooLargeError: If the ROM exceeds 3584 bytes
        """
        self.memory.load_rom(data)

    def set_keys(self, keys: Sequence[bool]) -> None:
        """Replace the 16-entry input latch."""
        self.keypad.set_keys(keys)

    def should_draw(self) -> bool:
        """True if the framebuffer needs redrawing."""
        return self.display.should_draw()

    def clear_draw(self) -> None:
        """Acknowledge a redraw."""
        self.display.clear_draw()

    def reset(self, clear_memory: bool = False) -> None:
        """
        Return to the power-on state.

        A seeded random source restarts its sequence, so a rerun of the
        ROM draws the same CXNN bytes as the first run.

        Args:
            clear_memory: Also wipe memory (font is reinstalled). By
                default the loaded ROM stays in place so it can be rerun.
        """
        self.registers.reset()
        self.stack.clear()
        self.timers.reset()
        self.display.clear()
        self.display.clear_draw()
        self.keypad.release_all()
        self.cycle_count = 0
        if clear_memory:
            self.memory.clear()
        if isinstance(self.random_source, SeededRandom):
            self.random_source.reseed(self.random_source.seed)

    def tick_timers(self) -> None:
        """Tick both timers once, signalling the beep edge to the host."""
        if self.timers.tick():
            logger.debug("Sound timer expired, beep")
            if self.on_beep:
                self.on_beep()

    # ========================================
    # Main Execution Loop
    # ========================================

    def cycle(self) -> None:
        """
        Execute exactly one instruction.

        Raises:
            StackOverflowError: 2NNN with a full call stack
            StackUnderflowError: 00EE with an empty call stack
            MemoryAddressError: Fetch or data access outside memory

        If an error is raised, PC, timers and the cycle counter keep their
        pre-cycle values.
        """
        pc = self.registers.pc
        opcode = None

        try:
            opcode = self.memory.read_word(pc)
            self.registers.opcode = opcode
            instruction = decode(opcode)
            logger.debug("$%04X: %s", pc, instruction)

            next_pc = self.execute(instruction, pc)
        except ExecutionError as e:
            e.locate(pc, opcode)
            raise

        self.registers.pc = next_pc
        self.cycle_count += 1

        if self.tick_timers_per_cycle:
            self.tick_timers()

    def execute(self, ins: Instruction, pc: int) -> int:
        """
        Execute a decoded instruction located at pc.

        Args:
            ins: Decoded instruction
            pc: Address the instruction was fetched from

        Returns:
            Address of the next instruction to run
        """
        regs = self.registers
        next_pc = pc + 2
        x, y = ins.x, ins.y

        match ins.op:
            # ============================================
            # Flow Control
            # ============================================
            case Op.CLS:
                self.display.clear()
            case Op.RET:
                next_pc = self.stack.pop()
            case Op.JP:
                next_pc = ins.nnn
            case Op.CALL:
                self.stack.push(next_pc)
                next_pc = ins.nnn
            case Op.JP_V0:
                next_pc = regs.get_v(0) + ins.nnn

            # ============================================
            # Conditional Skips
            # ============================================
            case Op.SE_IMM:
                if regs.get_v(x) == ins.nn:
                    next_pc += 2
            case Op.SNE_IMM:
                if regs.get_v(x) != ins.nn:
                    next_pc += 2
            case Op.SE_REG:
                if regs.get_v(x) == regs.get_v(y):
                    next_pc += 2
            case Op.SNE_REG:
                if regs.get_v(x) != regs.get_v(y):
                    next_pc += 2
            case Op.SKP:
                if self.keypad.is_pressed(regs.get_v(x)):
                    next_pc += 2
            case Op.SKNP:
                if not self.keypad.is_pressed(regs.get_v(x)):
                    next_pc += 2

            # ============================================
            # Register Loads and Immediate Arithmetic
            # ============================================
            case Op.LD_IMM:
                regs.set_v(x, ins.nn)
            case Op.ADD_IMM:
                regs.set_v(x, regs.get_v(x) + ins.nn)  # No carry flag
            case Op.RND:
                regs.set_v(x, self.random_source.random_byte() & ins.nn)

            # ============================================
            # ALU (8XYN)
            # ============================================
            case Op.LD_REG:
                regs.set_v(x, regs.get_v(y))
            case Op.OR:
                regs.set_v(x, regs.get_v(x) | regs.get_v(y))
            case Op.AND:
                regs.set_v(x, regs.get_v(x) & regs.get_v(y))
            case Op.XOR:
                regs.set_v(x, regs.get_v(x) ^ regs.get_v(y))
            case Op.ADD_REG:
                total = regs.get_v(x) + regs.get_v(y)
                regs.set_v(x, total)
                regs.vf = 1 if total > 0xFF else 0
            case Op.SUB:
                vx, vy = regs.get_v(x), regs.get_v(y)
                regs.set_v(x, vx - vy)
                regs.vf = 1 if vx >= vy else 0  # Not-borrow
            case Op.SUBN:
                vx, vy = regs.get_v(x), regs.get_v(y)
                regs.set_v(x, vy - vx)
                regs.vf = 1 if vy >= vx else 0
            case Op.SHR:
                vy = regs.get_v(y)
                regs.set_v(y, vy >> 1)
                regs.set_v(x, regs.get_v(y))
                regs.vf = vy & 0x01
            case Op.SHL:
                vy = regs.get_v(y)
                regs.set_v(y, vy << 1)
                regs.set_v(x, regs.get_v(y))
                regs.vf = (vy >> 7) & 0x01

            # ============================================
            # Address Register
            # ============================================
            case Op.LD_I:
                regs.i = ins.nnn
            case Op.ADD_I_VX:
                regs.i = regs.i + regs.get_v(x)
            case Op.LD_F_VX:
                regs.i = FONT_HEIGHT * regs.get_v(x)

            # ============================================
            # Graphics
            # ============================================
            case Op.DRW:
                rows = self.memory.read_block(regs.i, ins.n)
                collision = self.display.draw_sprite(regs.get_v(x), regs.get_v(y), rows)
                regs.vf = 1 if collision else 0

            # ============================================
            # Timers and Input
            # ============================================
            case Op.LD_VX_DT:
                regs.set_v(x, self.timers.delay)
            case Op.LD_DT_VX:
                self.timers.delay = regs.get_v(x)
            case Op.LD_ST_VX:
                self.timers.sound = regs.get_v(x)
            case Op.LD_VX_K:
                key = self._wait_for_key()
                if key is None:
                    next_pc = pc  # Run FX0A again next cycle
                else:
                    regs.set_v(x, key)

            # ============================================
            # Memory Transfers
            # ============================================
            case Op.LD_B_VX:
                value = regs.get_v(x)
                self.memory.write_block(
                    regs.i, bytes([value // 100, (value // 10) % 10, value % 10])
                )
            case Op.LD_MEM_VX:
                self.memory.write_block(regs.i, bytes(regs.v))
                regs.i = regs.i + NUM_REGISTERS
            case Op.LD_VX_MEM:
                data = self.memory.read_block(regs.i, NUM_REGISTERS)
                for index, value in enumerate(data):
                    regs.set_v(index, value)
                regs.i = regs.i + NUM_REGISTERS

            case Op.UNKNOWN:
                logger.warning("Unimplemented opcode %04X at $%04X", ins.opcode, pc)

        return next_pc & 0xFFFF

    def _wait_for_key(self) -> Optional[int]:
        """
        Resolve FX0A: lowest pressed key, blocking on the host if needed.

        Returns:
            Key index, or None if still no key is down (instruction retries)
        """
        key = self.keypad.first_pressed()
        if key is not None:
            return key

        if self.key_wait is None:
            logger.debug("Waiting for key press (no key wait provider)")
            return None

        self.keypad.set_keys(self.key_wait.wait_for_key())
        key = self.keypad.first_pressed()
        if key is None:
            logger.warning("Key wait provider returned with no key pressed")
        return key
