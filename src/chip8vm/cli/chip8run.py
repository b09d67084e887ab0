"""
chip8run - Headless CHIP-8 Runner
=================================

Loads a ROM, runs it for a fixed number of cycles without a window, and
prints the final framebuffer as text followed by a register summary.
Useful for smoke-testing ROMs and for scripting.

There is no interactive input. Keys given with --key/--host-key are held
down for the whole run; a ROM waiting on FX0A with no key held simply
keeps waiting (the instruction is retried every cycle).

Usage Examples
--------------
Run the IBM logo ROM:
    $ chip8run roms/IBM --cycles 200

Hold keypad key 5 (host key W) down:
    $ chip8run roms/PONG --key 5
    $ chip8run roms/PONG --host-key W

Write the screen to a file:
    $ chip8run roms/IBM -o screen.txt

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging
from pathlib import Path
from typing import Optional

import click

from chip8vm import __version__
from chip8vm.cli.errors import handle_cli_exception
from chip8vm.emulator import Emulator, EmulatorConfig, TimerMode, key_for_host_key

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def parse_keypad_key(value: str) -> int:
    """
    Parse a keypad key given as a hex digit (0-F, optional 0x prefix).

    Raises:
        click.BadParameter: If the value is not a key 0-F
    """
    text = value.lower()
    if text.startswith("0x"):
        text = text[2:]
    try:
        key = int(text, 16)
    except ValueError:
        raise click.BadParameter(f"'{value}' is not a hex keypad key (0-F)")
    if not 0 <= key <= 0xF:
        raise click.BadParameter(f"keypad key must be 0-F, got '{value}'")
    return key


def parse_host_key(value: str) -> int:
    """
    Map a host key name onto the keypad using the default QWERTY layout.

    Raises:
        click.BadParameter: If the host key is unmapped
    """
    key = key_for_host_key(value)
    if key is None:
        raise click.BadParameter(f"host key '{value}' is not mapped to the keypad")
    return key


def format_state(emu: Emulator) -> str:
    """Register and timer summary, e.g. for the end of a run."""
    state = emu.get_state()
    lines = [
        f"PC=${state['pc']:04X}  I=${state['i']:04X}  SP={state['sp']}  "
        f"DT={state['delay']}  ST={state['sound']}  cycles={state['cycles']}",
        " ".join(f"V{n:X}={value:02X}" for n, value in enumerate(state["v"])),
    ]
    return "\n".join(lines)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "rom_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-n", "--cycles",
    type=click.IntRange(min=0),
    default=1000,
    show_default=True,
    help="Number of instructions to execute",
)
@click.option(
    "-s", "--seed",
    type=int,
    default=7,
    show_default=True,
    help="Seed for the random number generator (CXNN)",
)
@click.option(
    "-k", "--key",
    "keys",
    multiple=True,
    help="Keypad key (hex 0-F) to hold down; may be repeated",
)
@click.option(
    "--host-key",
    "host_keys",
    multiple=True,
    help="Host key (1234/QWER/ASDF/ZXCV layout) to hold down; may be repeated",
)
@click.option(
    "--fixed-rate",
    is_flag=True,
    help="Pace timers at 60 Hz wall-clock instead of once per instruction",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the screen to a file instead of stdout",
)
@click.option(
    "--state/--no-state",
    default=True,
    help="Print registers and timers after the screen (default: enabled)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (traces every instruction)",
)
@click.version_option(version=__version__, prog_name="chip8run")
def main(
    rom_file: Path,
    cycles: int,
    seed: int,
    keys: tuple[str, ...],
    host_keys: tuple[str, ...],
    fixed_rate: bool,
    output: Optional[Path],
    state: bool,
    verbose: bool,
) -> None:
    """
    Run a CHIP-8 ROM headlessly and print the screen.

    ROM_FILE is a raw CHIP-8 program image (no header).

    Examples:

        # Run for 200 instructions
        chip8run roms/IBM --cycles 200

        # Hold keypad key A down, different random seed
        chip8run roms/BRIX --key A --seed 3
    """
    setup_logging(verbose)

    try:
        held = [parse_keypad_key(k) for k in keys]
        held += [parse_host_key(k) for k in host_keys]

        config = EmulatorConfig(
            seed=seed,
            timer_mode=TimerMode.FIXED_RATE if fixed_rate else TimerMode.PER_CYCLE,
        )
        emu = Emulator(config)
        emu.load_rom_file(rom_file)

        for key in held:
            emu.press_key(key)

        logger.debug("Running %s for %d cycles", rom_file.name, cycles)
        emu.run(cycles)

        text = emu.display_text
        if state:
            text = f"{text}\n\n{format_state(emu)}"

        if output:
            output.write_text(text + "\n")
            click.echo(f"Wrote screen to {output}")
        else:
            click.echo(text)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
