"""
CHIP-8 Emulator - Host-Facing Facade
====================================

This module provides the `Emulator` class that wires the CPU to its
collaborators and offers a small, stable API for hosts (GUI front ends,
the headless CLI, tests).

The Emulator class:
- Builds the CPU, memory, framebuffer and keypad from an EmulatorConfig
- Loads ROMs from bytes or files
- Runs single cycles or bursts of cycles
- Paces the timers per cycle (default) or at a fixed wall-clock rate
- Forwards key state, key-wait provider and beep callback to the CPU

Example usage:
    >>> from chip8vm.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator(EmulatorConfig(seed=1))
    >>> emu.load_rom(bytes([0x00, 0xE0, 0x12, 0x02]))  # CLS; JP $202
    >>> emu.run(10)
    10
    >>> emu.should_draw()
    True

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from .cpu import Chip8CPU
from .display import Framebuffer
from .keyboard import KeyWaitProvider, Keypad
from .memory import Memory
from .rng import DEFAULT_SEED, RandomSource, SeededRandom
from .timers import TimerMode

logger = logging.getLogger(__name__)

MAX_CATCH_UP_TICKS = 255


@dataclass(frozen=True)
class EmulatorConfig:
    """
    Configuration for emulator initialization.

    Attributes:
        seed: Seed for the default random source (CXNN). Ignored when a
              random_source is passed to Emulator directly.
        timer_mode: PER_CYCLE ticks timers once per instruction (the
                    deterministic default); FIXED_RATE ticks them at
                    timer_hz against a monotonic clock.
        timer_hz: Timer frequency for FIXED_RATE mode.
        rom_path: Optional ROM file to load at construction.

    Example:
        >>> config = EmulatorConfig(seed=42)
        >>> config = EmulatorConfig(timer_mode=TimerMode.FIXED_RATE)
    """
    seed: int = DEFAULT_SEED
    timer_mode: TimerMode = TimerMode.PER_CYCLE
    timer_hz: int = 60
    rom_path: Optional[Path] = None


class Emulator:
    """
    CHIP-8 emulator facade.

    Attributes:
        config: The EmulatorConfig used to initialize this instance
        cpu: The Chip8CPU (accessible for low-level inspection)
        memory: Memory image shared with the CPU
        framebuffer: 64x32 framebuffer shared with the CPU
        keypad: Input latch shared with the CPU

    Example:
        >>> emu = Emulator()
        >>> emu.load_rom_file("PONG")
        >>> while True:
        ...     emu.set_keys(host_keys())
        ...     emu.cycle()
        ...     if emu.should_draw():
        ...         render(emu.framebuffer)
        ...         emu.clear_draw()
    """

    def __init__(
        self,
        config: Optional[EmulatorConfig] = None,
        random_source: Optional[RandomSource] = None,
        key_wait: Optional[KeyWaitProvider] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the emulator with given configuration.

        Args:
            config: EmulatorConfig; defaults to seed 7, per-cycle timers.
            random_source: Replaces the seeded generator (e.g. ScriptedRandom
                           in tests).
            key_wait: Host capability FX0A blocks on.
            clock: Monotonic time source in seconds, used by FIXED_RATE.

        Raises:
            ValueError: If timer_hz is not positive
            FileNotFoundError: If config.rom_path does not exist
            RomTooLargeError: If config.rom_path is too large
        """
        self.config = config or EmulatorConfig()
        if self.config.timer_hz <= 0:
            raise ValueError(f"timer_hz must be positive, got {self.config.timer_hz}")

        self.memory = Memory()
        self.framebuffer = Framebuffer()
        self.keypad = Keypad()
        self.cpu = Chip8CPU(
            memory=self.memory,
            display=self.framebuffer,
            keypad=self.keypad,
            random_source=random_source or SeededRandom(self.config.seed),
            key_wait=key_wait,
        )

        self._clock = clock
        self._timer_period = 1.0 / self.config.timer_hz
        self._last_timer_time: Optional[float] = None
        self.cpu.tick_timers_per_cycle = self.config.timer_mode is TimerMode.PER_CYCLE

        if self.config.rom_path is not None:
            self.load_rom_file(self.config.rom_path)

    # =========================================================================
    # Collaborators
    # =========================================================================

    @property
    def on_beep(self) -> Optional[Callable[[], None]]:
        """Callback invoked when the sound timer runs out."""
        return self.cpu.on_beep

    @on_beep.setter
    def on_beep(self, callback: Optional[Callable[[], None]]) -> None:
        self.cpu.on_beep = callback

    @property
    def key_wait(self) -> Optional[KeyWaitProvider]:
        """Host capability FX0A blocks on."""
        return self.cpu.key_wait

    @key_wait.setter
    def key_wait(self, provider: Optional[KeyWaitProvider]) -> None:
        self.cpu.key_wait = provider

    @property
    def cycle_count(self) -> int:
        """Number of completed cycles since construction or reset."""
        return self.cpu.cycle_count

    # =========================================================================
    # Program Loading
    # =========================================================================

    def load_rom(self, data: bytes) -> None:
        """
        Load a ROM image at $200.

        Raises:
            RomTooLargeError: If the ROM exceeds 3584 bytes; memory is
                left untouched
        """
        self.cpu.load_rom(data)

    def load_rom_file(self, path: Union[str, Path]) -> None:
        """
        Load a ROM file (raw bytes, no header) at $200.

        Raises:
            FileNotFoundError: If the file doesn't exist
            RomTooLargeError: If the ROM exceeds 3584 bytes
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"ROM file not found: {path}")
        data = path.read_bytes()
        self.load_rom(data)
        logger.info("Loaded ROM %s", path)

    # =========================================================================
    # Execution Control
    # =========================================================================

    def reset(self, clear_memory: bool = False) -> None:
        """
        Reset to power-on state.

        Args:
            clear_memory: Also wipe the loaded ROM
        """
        self.cpu.reset(clear_memory=clear_memory)
        self._last_timer_time = None

    def cycle(self) -> None:
        """Execute one instruction (and pace the timers per the config)."""
        self.cpu.cycle()
        if self.config.timer_mode is TimerMode.FIXED_RATE:
            self._tick_fixed_rate()

    def run(self, cycles: int) -> int:
        """
        Execute a burst of instructions.

        Args:
            cycles: Number of cycles to run

        Returns:
            Number of cycles executed

        Raises:
            ValueError: If cycles is negative
        """
        if cycles < 0:
            raise ValueError(f"cycles must be non-negative, got {cycles}")
        for _ in range(cycles):
            self.cycle()
        return cycles

    def _tick_fixed_rate(self) -> None:
        """Tick the timers once for every full timer period elapsed."""
        now = self._clock()
        if self._last_timer_time is None:
            self._last_timer_time = now
            return

        periods = int((now - self._last_timer_time) // self._timer_period)
        if periods <= 0:
            return
        self._last_timer_time += periods * self._timer_period

        # Both counters are 8-bit, so 255 ticks always run them to zero
        for _ in range(min(periods, MAX_CATCH_UP_TICKS)):
            self.cpu.tick_timers()

    # =========================================================================
    # Keyboard Input
    # =========================================================================

    def set_keys(self, keys: Sequence[bool]) -> None:
        """Replace the 16-entry key latch (call before each cycle)."""
        self.cpu.set_keys(keys)

    def press_key(self, key: int) -> None:
        """Hold a single keypad key (0-15) down."""
        self.keypad.key_down(key)

    def release_key(self, key: int) -> None:
        """Release a single keypad key."""
        self.keypad.key_up(key)

    # =========================================================================
    # Display Output
    # =========================================================================

    def should_draw(self) -> bool:
        """True if the framebuffer changed since the last clear_draw()."""
        return self.framebuffer.should_draw()

    def clear_draw(self) -> None:
        """Acknowledge a redraw."""
        self.framebuffer.clear_draw()

    @property
    def display_text(self) -> str:
        """Framebuffer rendered as text ('#' lit, '.' unlit)."""
        return self.framebuffer.get_text()

    def get_state(self) -> dict:
        """
        Snapshot of registers and timers for inspection.

        Returns:
            Dict with pc, i, v, sp, stack, delay, sound, cycles
        """
        cpu = self.cpu
        return {
            "pc": cpu.pc,
            "i": cpu.i,
            "v": cpu.v,
            "sp": cpu.stack.sp,
            "stack": cpu.stack.entries(),
            "delay": cpu.timers.delay,
            "sound": cpu.timers.sound,
            "cycles": cpu.cycle_count,
        }
