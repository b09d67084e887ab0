"""
Delay and Sound Timers
======================

Two independent 8-bit countdown counters. Each tick decrements a counter
by one while it is nonzero. The sound timer reaching zero from nonzero
is an edge event: the host's audio collaborator is told to beep.

How often tick() runs is the caller's business. The interpreter ticks
once per executed instruction by default; the Emulator facade can
instead tick at a fixed wall-clock rate (TimerMode.FIXED_RATE).

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from enum import Enum


class TimerMode(Enum):
    """How the timers are paced."""
    PER_CYCLE = "per_cycle"    # One tick per interpreter cycle
    FIXED_RATE = "fixed_rate"  # One tick per 1/timer_hz seconds


@dataclass
class TimerState:
    """Timer counters (8-bit unsigned)."""
    delay: int = 0
    sound: int = 0


class Timers:
    """
    Delay and sound countdown timers.

    Example:
        >>> timers = Timers()
        >>> timers.sound = 1
        >>> timers.tick()  # True: sound just ran out
        True
        >>> timers.tick()
        False
    """

    def __init__(self):
        self._state = TimerState()

    @property
    def delay(self) -> int:
        """Delay timer (8-bit)."""
        return self._state.delay

    @delay.setter
    def delay(self, value: int) -> None:
        self._state.delay = value & 0xFF

    @property
    def sound(self) -> int:
        """Sound timer (8-bit)."""
        return self._state.sound

    @sound.setter
    def sound(self, value: int) -> None:
        self._state.sound = value & 0xFF

    @property
    def sound_active(self) -> bool:
        """True while the sound timer is running."""
        return self._state.sound > 0

    def tick(self) -> bool:
        """
        Decrement both timers once.

        Returns:
            True if the sound timer went from 1 to 0 on this tick
        """
        beep = False
        if self._state.sound > 0:
            self._state.sound -= 1
            beep = self._state.sound == 0
        if self._state.delay > 0:
            self._state.delay -= 1
        return beep

    def reset(self) -> None:
        """Stop both timers."""
        self._state = TimerState()
