"""
Keypad Input Latch for the CHIP-8 Interpreter
=============================================

The CHIP-8 hex keypad has 16 keys, 0x0-0xF:

    1 2 3 C
    4 5 6 D
    7 8 9 E
    A 0 B F

The interpreter never polls the host. Before each cycle the host writes
the complete pressed/released vector into the latch with set_keys().
The one exception is FX0A, which blocks on an injected KeyWaitProvider
when no key is down.

Hosts commonly map the keypad onto the left-hand block of a QWERTY
keyboard; DEFAULT_KEY_MAP gives that layout.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from typing import Dict, List, Optional, Protocol, Sequence

NUM_KEYS = 16


# =============================================================================
# HOST KEY NAME TO KEYPAD MAPPING
# =============================================================================
# Host key names (upper case) to keypad indices:
#
#     1 2 3 4        1 2 3 C
#     Q W E R   ->   4 5 6 D
#     A S D F        7 8 9 E
#     Z X C V        A 0 B F

DEFAULT_KEY_MAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}


def key_for_host_key(name: str, key_map: Optional[Dict[str, int]] = None) -> Optional[int]:
    """
    Look up the keypad index for a host key name.

    Args:
        name: Host key name (case-insensitive), e.g. "q"
        key_map: Mapping to use (defaults to DEFAULT_KEY_MAP)

    Returns:
        Keypad index 0-15, or None if the host key is unmapped
    """
    return (key_map or DEFAULT_KEY_MAP).get(name.upper())


class KeyWaitProvider(Protocol):
    """
    Host capability used by FX0A to block until a key is pressed.

    wait_for_key() must not return until the host's input source reports
    at least one key down. It returns the complete 16-entry key vector,
    which replaces the interpreter's latch.
    """

    def wait_for_key(self) -> Sequence[bool]:
        ...


class Keypad:
    """
    16-key pressed/released latch.

    Example:
        >>> pad = Keypad()
        >>> pad.set_keys([False] * 5 + [True] + [False] * 10)
        >>> pad.is_pressed(5)
        True
        >>> pad.first_pressed()
        5
    """

    def __init__(self):
        self._keys: List[bool] = [False] * NUM_KEYS

    def set_keys(self, keys: Sequence[bool]) -> None:
        """
        Overwrite the whole latch.

        Args:
            keys: 16 booleans, index = keypad key

        Raises:
            ValueError: If keys does not have exactly 16 entries
        """
        if len(keys) != NUM_KEYS:
            raise ValueError(f"Expected {NUM_KEYS} key states, got {len(keys)}")
        self._keys = [bool(k) for k in keys]

    def get_keys(self) -> List[bool]:
        """Copy of the latch."""
        return list(self._keys)

    def key_down(self, key: int) -> None:
        """Mark a single key pressed."""
        self._keys[key & 0xF] = True

    def key_up(self, key: int) -> None:
        """Mark a single key released."""
        self._keys[key & 0xF] = False

    def release_all(self) -> None:
        """Mark every key released."""
        self._keys = [False] * NUM_KEYS

    def is_pressed(self, key: int) -> bool:
        """Check a key; only the low nibble of key is used."""
        return self._keys[key & 0xF]

    def any_pressed(self) -> bool:
        """True if at least one key is down."""
        return any(self._keys)

    def first_pressed(self) -> Optional[int]:
        """Lowest-indexed pressed key, or None if none are down."""
        for index, pressed in enumerate(self._keys):
            if pressed:
                return index
        return None
