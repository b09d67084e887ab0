"""
Emulator Integration Tests
==========================

Tests for the complete emulator system, verifying that all components
work together correctly.

These tests ensure:
- Emulator instantiation from an EmulatorConfig
- ROM loading from bytes and files
- Small programs running end to end
- Keyboard input and the key wait provider
- Fixed-rate timer pacing
- Reset and state snapshots

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import pytest

from chip8vm.emulator import (
    Emulator,
    EmulatorConfig,
    ScriptedRandom,
    TimerMode,
)
from chip8vm.errors import RomTooLargeError


def program(*opcodes: int) -> bytes:
    """Assemble opcodes into big-endian ROM bytes."""
    return b"".join(op.to_bytes(2, "big") for op in opcodes)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


# A few small programs used across the tests

# Draw the "0" glyph at (0, 0), then spin
DRAW_ZERO = program(0x6000, 0xF029, 0xD005, 0x1206)

# Count the delay timer down from 5, then spin at $20A
COUNTDOWN = program(
    0x6A05,  # VA = 5
    0xFA15,  # DT = VA
    0xFB07,  # VB = DT
    0x3B00,  # skip if VB == 0
    0x1204,  # back to VB = DT
    0x120A,  # done
)

# Call a subroutine that sets V1, return, set V2, spin
SUBROUTINE = program(0x2206, 0x6202, 0x1204, 0x6101, 0x00EE)


# =============================================================================
# Construction Tests
# =============================================================================

class TestEmulatorCreation:
    """Test emulator instantiation."""

    def test_default_config(self):
        """Defaults: seed 7, per-cycle timers, 60 Hz."""
        emu = Emulator()
        assert emu.config.seed == 7
        assert emu.config.timer_mode is TimerMode.PER_CYCLE
        assert emu.config.timer_hz == 60
        assert emu.cpu.tick_timers_per_cycle is True

    def test_shared_components(self):
        """Facade and CPU share memory, framebuffer and keypad."""
        emu = Emulator()
        assert emu.cpu.memory is emu.memory
        assert emu.cpu.display is emu.framebuffer
        assert emu.cpu.keypad is emu.keypad

    def test_fixed_rate_disables_per_cycle_ticks(self):
        """FIXED_RATE hands timer pacing to the facade."""
        emu = Emulator(EmulatorConfig(timer_mode=TimerMode.FIXED_RATE))
        assert emu.cpu.tick_timers_per_cycle is False

    def test_invalid_timer_hz(self):
        """Non-positive timer_hz is rejected."""
        with pytest.raises(ValueError):
            Emulator(EmulatorConfig(timer_hz=0))

    def test_rom_path_loaded(self, tmp_path):
        """rom_path in the config is loaded at construction."""
        rom = tmp_path / "draw.ch8"
        rom.write_bytes(DRAW_ZERO)
        emu = Emulator(EmulatorConfig(rom_path=rom))
        assert emu.memory.dump(0x200, len(DRAW_ZERO)) == DRAW_ZERO

    def test_config_is_frozen(self):
        """EmulatorConfig cannot be mutated."""
        config = EmulatorConfig()
        with pytest.raises(AttributeError):
            config.seed = 1


# =============================================================================
# ROM Loading Tests
# =============================================================================

class TestRomLoading:
    """Test loading ROMs through the facade."""

    def test_load_file(self, tmp_path):
        """load_rom_file copies the file at $200."""
        rom = tmp_path / "test.ch8"
        rom.write_bytes(bytes([0x12, 0x00]))
        emu = Emulator()
        emu.load_rom_file(rom)
        assert emu.memory.read_word(0x200) == 0x1200

    def test_load_file_str_path(self, tmp_path):
        """String paths are accepted."""
        rom = tmp_path / "test.ch8"
        rom.write_bytes(bytes([0x12, 0x00]))
        emu = Emulator()
        emu.load_rom_file(str(rom))
        assert emu.memory.rom_size == 2

    def test_missing_file(self, tmp_path):
        """A missing ROM file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            Emulator().load_rom_file(tmp_path / "nope.ch8")

    def test_too_large(self):
        """Oversized ROMs are rejected."""
        with pytest.raises(RomTooLargeError):
            Emulator().load_rom(bytes(3585))


# =============================================================================
# Program Execution Tests
# =============================================================================

class TestPrograms:
    """Run small programs end to end."""

    def test_run_returns_count(self):
        """run() executes and reports the requested number of cycles."""
        emu = Emulator()
        emu.load_rom(DRAW_ZERO)
        assert emu.run(10) == 10
        assert emu.cycle_count == 10

    def test_run_zero(self):
        """run(0) executes nothing."""
        emu = Emulator()
        emu.load_rom(DRAW_ZERO)
        assert emu.run(0) == 0
        assert emu.cycle_count == 0

    def test_run_negative(self):
        """A negative cycle count is rejected."""
        emu = Emulator()
        emu.load_rom(DRAW_ZERO)
        with pytest.raises(ValueError):
            emu.run(-5)
        assert emu.cycle_count == 0

    def test_draw_zero(self):
        """The glyph shows up in the text rendering."""
        emu = Emulator()
        emu.load_rom(DRAW_ZERO)
        emu.run(3)
        lines = emu.display_text.splitlines()
        assert lines[0].startswith("####.")
        assert lines[1].startswith("#..#.")
        assert lines[4].startswith("####.")
        assert emu.should_draw() is True

    def test_clear_draw(self):
        """Host acknowledges the redraw."""
        emu = Emulator()
        emu.load_rom(DRAW_ZERO)
        emu.run(3)
        emu.clear_draw()
        assert emu.should_draw() is False

    def test_countdown(self):
        """The delay timer loop terminates at $20A with VB = 0."""
        emu = Emulator()
        emu.load_rom(COUNTDOWN)
        emu.run(30)
        assert emu.cpu.pc == 0x20A
        assert emu.cpu.registers.get_v(0xB) == 0
        assert emu.cpu.timers.delay == 0

    def test_subroutine(self):
        """Call and return leave the stack empty."""
        emu = Emulator()
        emu.load_rom(SUBROUTINE)
        emu.run(4)
        state = emu.get_state()
        assert state["v"][1] == 1
        assert state["v"][2] == 2
        assert state["sp"] == 0
        assert state["pc"] == 0x204

    def test_random_source_injected(self):
        """A scripted random source drives CXNN."""
        emu = Emulator(random_source=ScriptedRandom([0x5A]))
        emu.load_rom(program(0xC3FF))
        emu.cycle()
        assert emu.cpu.registers.get_v(3) == 0x5A

    def test_same_seed_same_run(self):
        """Two emulators with the same seed agree."""
        rom = program(0xC0FF, 0xC1FF, 0xC2FF, 0xC3FF)
        results = []
        for _ in range(2):
            emu = Emulator(EmulatorConfig(seed=1234))
            emu.load_rom(rom)
            emu.run(4)
            results.append(emu.get_state()["v"][:4])
        assert results[0] == results[1]


# =============================================================================
# Input Tests
# =============================================================================

class TestInput:
    """Test keyboard handling through the facade."""

    def test_press_and_skip(self):
        """EX9E sees a key pressed with press_key()."""
        emu = Emulator()
        emu.load_rom(program(0x6105, 0xE19E))
        emu.press_key(5)
        emu.run(2)
        assert emu.cpu.pc == 0x206

    def test_release(self):
        """release_key() lets EXA1 skip."""
        emu = Emulator()
        emu.load_rom(program(0x6105, 0xE1A1))
        emu.press_key(5)
        emu.release_key(5)
        emu.run(2)
        assert emu.cpu.pc == 0x206

    def test_set_keys(self):
        """set_keys() replaces the latch."""
        emu = Emulator()
        emu.set_keys([n == 0xE for n in range(16)])
        assert emu.keypad.first_pressed() == 0xE

    def test_key_wait_provider(self):
        """FX0A blocks on the provider given to the facade."""
        class OneKey:
            def wait_for_key(self):
                return [n == 0xC for n in range(16)]

        emu = Emulator(key_wait=OneKey())
        emu.load_rom(program(0xF20A))
        emu.cycle()
        assert emu.cpu.registers.get_v(2) == 0xC
        assert emu.key_wait is emu.cpu.key_wait


# =============================================================================
# Timer Pacing Tests
# =============================================================================

class TestFixedRateTimers:
    """Test FIXED_RATE pacing against a fake clock."""

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def emu(self, clock):
        emu = Emulator(EmulatorConfig(timer_mode=TimerMode.FIXED_RATE), clock=clock)
        emu.load_rom(program(0x1200))
        emu.cpu.timers.delay = 10
        return emu

    def test_first_cycle_only_starts_clock(self, emu, clock):
        """No tick on the first cycle."""
        emu.cycle()
        assert emu.cpu.timers.delay == 10

    def test_no_tick_within_period(self, emu, clock):
        """Cycles inside one period leave the timers alone."""
        emu.cycle()
        clock.now += 0.5 / 60
        emu.run(5)
        assert emu.cpu.timers.delay == 10

    def test_ticks_per_elapsed_period(self, emu, clock):
        """Each full period elapsed ticks once."""
        emu.cycle()
        clock.now += 2.5 / 60
        emu.cycle()
        assert emu.cpu.timers.delay == 8

    def test_beep_in_fixed_rate(self, emu, clock):
        """on_beep fires from fixed-rate ticks too."""
        beeps = []
        emu.on_beep = lambda: beeps.append(True)
        emu.cpu.timers.sound = 1
        emu.cycle()
        clock.now += 1.5 / 60
        emu.cycle()
        assert beeps == [True]

    def test_long_stall_bounded(self, emu, clock):
        """A long pause ticks at most 255 times, then pacing resumes."""
        ticks = []
        tick_timers = emu.cpu.tick_timers

        def counting_tick():
            ticks.append(True)
            tick_timers()

        emu.cpu.tick_timers = counting_tick

        emu.cycle()
        clock.now += 3600.0 + 0.25 / 60
        emu.cycle()
        assert len(ticks) == 255
        assert emu.cpu.timers.delay == 0

        emu.cpu.timers.delay = 10
        clock.now += 1.0 / 60
        emu.cycle()
        assert emu.cpu.timers.delay == 9

    def test_reset_restarts_clock(self, emu, clock):
        """After reset() the next cycle only restarts the clock."""
        emu.cycle()
        emu.reset()
        emu.cpu.timers.delay = 10
        clock.now += 5.5 / 60
        emu.cycle()
        assert emu.cpu.timers.delay == 10


class TestPerCycleTimers:
    """Test the default pacing."""

    def test_beep_callback(self):
        """on_beep set on the facade reaches the CPU."""
        beeps = []
        emu = Emulator()
        emu.on_beep = lambda: beeps.append(emu.cycle_count)
        emu.load_rom(program(0x6003, 0xF018, 0x1204))
        emu.run(10)
        assert beeps == [4]


# =============================================================================
# Reset and State Tests
# =============================================================================

class TestResetAndState:
    """Test reset() and get_state()."""

    def test_state_keys(self):
        """Snapshot carries registers, stack, timers and cycle count."""
        state = Emulator().get_state()
        assert set(state) == {"pc", "i", "v", "sp", "stack", "delay", "sound", "cycles"}
        assert state["pc"] == 0x200
        assert state["v"] == [0] * 16

    def test_state_stack(self):
        """The stack snapshot lists return addresses oldest first."""
        emu = Emulator()
        emu.load_rom(SUBROUTINE)
        emu.cycle()
        assert emu.get_state()["stack"] == [0x202]

    def test_reset_reruns_rom(self):
        """reset() keeps the ROM so it can run again."""
        emu = Emulator()
        emu.load_rom(DRAW_ZERO)
        emu.run(3)
        emu.reset()
        assert emu.framebuffer.lit_count() == 0
        assert emu.cycle_count == 0
        emu.run(3)
        assert emu.framebuffer.lit_count() == 14

    def test_reset_clear_memory(self):
        """reset(clear_memory=True) removes the ROM."""
        emu = Emulator()
        emu.load_rom(DRAW_ZERO)
        emu.reset(clear_memory=True)
        assert emu.memory.read_word(0x200) == 0

    def test_reset_restarts_random_sequence(self):
        """A rerun after reset() draws the same CXNN bytes."""
        emu = Emulator()
        emu.load_rom(program(0xC0FF, 0xC1FF, 0xC2FF))
        emu.run(3)
        first = emu.get_state()["v"][:3]

        emu.reset()
        emu.run(3)
        assert emu.get_state()["v"][:3] == first

    def test_reset_matches_fresh_emulator(self):
        """After reset() the random bytes match a new emulator with the same seed."""
        rom = program(0xC0FF, 0xC1FF, 0xC2FF)
        fresh = Emulator(EmulatorConfig(seed=99))
        fresh.load_rom(rom)
        fresh.run(3)

        emu = Emulator(EmulatorConfig(seed=99))
        emu.load_rom(rom)
        emu.run(3)
        emu.reset()
        emu.run(3)
        assert emu.get_state()["v"] == fresh.get_state()["v"]

    def test_reset_no_pending_redraw(self):
        """A reset machine, like a new one, has no redraw pending."""
        emu = Emulator()
        assert emu.should_draw() is False
        emu.load_rom(DRAW_ZERO)
        emu.run(3)
        emu.reset()
        assert emu.should_draw() is False
