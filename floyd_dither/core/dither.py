"""Floyd-Steinberg error diffusion against a color palette."""

from __future__ import annotations

from floyd_dither.core.palette import Palette
from floyd_dither.core.pixels import PixelGrid
from floyd_dither.core.quantize import PaletteQuantizer

# (dx, dy, weight):
#        *   7
#    3   5   1     (/16)
FLOYD_STEINBERG_KERNEL = (
    (1, 0, 7 / 16),
    (-1, 1, 3 / 16),
    (0, 1, 5 / 16),
    (1, 1, 1 / 16),
)


def _clamp(value: int) -> int:
    return max(0, min(255, value))


def diffuse_error(
    grid: PixelGrid,
    x: int,
    y: int,
    error: tuple[int, int, int],
    weight: float,
) -> None:
    """Add ``error * weight`` (truncated toward zero) to the pixel at (x, y).

    Coordinates outside the grid are ignored.
    """
    r, g, b = grid.get(x, y)
    grid.set(
        x,
        y,
        (
            _clamp(r + int(error[0] * weight)),
            _clamp(g + int(error[1] * weight)),
            _clamp(b + int(error[2] * weight)),
        ),
    )


def floyd_steinberg(grid: PixelGrid, palette: Palette, bits: int) -> PixelGrid:
    """Dither ``grid`` in place and return it.

    Args:
        grid: pixels in top-down order, modified in place.
        palette: reference colors for the quantizer.
        bits: per-channel bit depth of the output, 1 to 8.

    The scan stops one short of the last column and the last row, so the
    right and bottom edges keep their (error-adjusted) source values.
    """
    quantize = PaletteQuantizer(palette, bits)

    for y in range(grid.height - 1):
        for x in range(grid.width - 1):
            original = grid.get(x, y)
            quantized = quantize(original)
            grid.set(x, y, quantized)

            error = (
                original[0] - quantized[0],
                original[1] - quantized[1],
                original[2] - quantized[2],
            )
            if error == (0, 0, 0):
                continue
            for dx, dy, weight in FLOYD_STEINBERG_KERNEL:
                diffuse_error(grid, x + dx, y + dy, error, weight)

    return grid
