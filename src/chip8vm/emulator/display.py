"""
Framebuffer for the CHIP-8 Interpreter
======================================

The CHIP-8 display is a 64 x 32 monochrome grid. Programs draw sprites by
XOR-compositing rows of 8 pixels onto it; a pixel that goes from lit to
unlit during a draw is a collision, reported back to the program in VF.

Sprite pixels wrap independently on both axes, so a sprite drawn at
x=60 shows its last four columns at x=0-3.

The dirty flag tells the host a redraw is needed. Every clear or draw
sets it; only the host clears it (after rendering).

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from typing import List

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32
SPRITE_WIDTH = 8


class Framebuffer:
    """
    64 x 32 monochrome pixel grid with a dirty flag.

    Pixels are addressed as (x, y) with (0, 0) at the top left and stored
    row-major.

    Example:
        >>> fb = Framebuffer()
        >>> fb.draw_sprite(0, 0, bytes([0xF0]))  # No collision
        False
        >>> fb.get_pixel(3, 0), fb.get_pixel(4, 0)
        (True, False)
        >>> fb.should_draw()
        True
    """

    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT):
        """
        Initialize a blank framebuffer.

        Args:
            width: Number of columns (64 on standard CHIP-8)
            height: Number of rows (32 on standard CHIP-8)
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Framebuffer size must be positive, got {width}x{height}")

        self._width = width
        self._height = height
        self._pixels = [False] * (width * height)
        self._draw_pending = False

    @property
    def width(self) -> int:
        """Number of columns."""
        return self._width

    @property
    def height(self) -> int:
        """Number of rows."""
        return self._height

    # ========================================
    # Dirty Flag
    # ========================================

    def should_draw(self) -> bool:
        """True if the framebuffer changed since the host last cleared the flag."""
        return self._draw_pending

    def clear_draw(self) -> None:
        """Acknowledge a redraw (called by the host after rendering)."""
        self._draw_pending = False

    # ========================================
    # Pixel Operations
    # ========================================

    def get_pixel(self, x: int, y: int) -> bool:
        """Read the pixel at (x, y). Coordinates must be on screen."""
        return self._pixels[y * self._width + x]

    def clear(self) -> None:
        """Unlight every pixel and mark the framebuffer dirty."""
        self._pixels = [False] * (self._width * self._height)
        self._draw_pending = True

    def draw_sprite(self, x: int, y: int, rows: bytes) -> bool:
        """
        XOR a sprite onto the framebuffer.

        Each byte of rows is one sprite row of 8 pixels, most significant
        bit leftmost. Every set bit toggles the pixel at
        ((x + col) mod width, (y + row) mod height).

        Args:
            x: Origin column (any non-negative value; wrapped)
            y: Origin row (any non-negative value; wrapped)
            rows: Sprite data, one byte per row

        Returns:
            True if any pixel went from lit to unlit (collision)
        """
        collision = False
        width = self._width
        height = self._height
        pixels = self._pixels

        for row, data in enumerate(rows):
            if data == 0:
                continue
            pixel_y = (y + row) % height
            base = pixel_y * width
            for col in range(SPRITE_WIDTH):
                if data & (0x80 >> col):
                    index = base + (x + col) % width
                    if pixels[index]:
                        collision = True
                    pixels[index] = not pixels[index]

        self._draw_pending = True
        return collision

    # ========================================
    # Output Methods
    # ========================================

    def get_rows(self) -> List[List[bool]]:
        """Pixel grid as a list of rows, each a list of booleans."""
        w = self._width
        return [self._pixels[r * w:(r + 1) * w] for r in range(self._height)]

    def get_pixel_buffer(self) -> bytes:
        """
        Pixel grid as one byte per pixel (0 = off, 255 = on), row-major.

        Convenient for handing straight to an image or texture upload.
        """
        return bytes(255 if p else 0 for p in self._pixels)

    def get_text_grid(self, on: str = "#", off: str = ".") -> List[str]:
        """Framebuffer as one string per row."""
        return [
            "".join(on if p else off for p in row)
            for row in self.get_rows()
        ]

    def get_text(self, on: str = "#", off: str = ".") -> str:
        """Framebuffer as newline-separated rows."""
        return "\n".join(self.get_text_grid(on, off))

    def lit_count(self) -> int:
        """Number of lit pixels."""
        return sum(self._pixels)
