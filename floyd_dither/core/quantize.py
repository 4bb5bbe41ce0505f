"""Nearest-palette-color quantization with luminance preserving rescaling.

Channel arithmetic is done on integers: every intermediate value of the
luminance, scaling and requantization formulas is a ratio of small integers,
so truncation and rounding are exact.
"""

from __future__ import annotations

from functools import lru_cache

import numpy as np

from floyd_dither.core.palette import RGB, Palette

MIN_BITS = 1
MAX_BITS = 8

# 0.2162 R + 0.7152 G + 0.0722 B, in units of 1/10000. The weights sum to
# slightly above 1, hence the clamp in luminance().
LUMA_WEIGHTS = (2162, 7152, 722)
LUMA_SCALE = 10000

_MONOCHROME = ((0, 0, 0), (255, 255, 255))


def check_bits(bits: int) -> int:
    if not MIN_BITS <= bits <= MAX_BITS:
        raise ValueError(f"Bit depth must be between {MIN_BITS} and {MAX_BITS}, got {bits}")
    return bits


def luminance(pixel: RGB) -> int:
    """Grayscale value of ``pixel``, truncated to an 8-bit sample.

    Computed exactly in integers. A single-precision float evaluation of the
    same weights (as older builds of this tool did) truncates one unit off
    on a few inputs, about 3 in 100000, so outputs can differ there.
    """
    wr, wg, wb = LUMA_WEIGHTS
    r, g, b = pixel
    return min((wr * r + wg * g + wb * b) // LUMA_SCALE, 255)


def scale_color(color: RGB, level: int) -> RGB:
    """Darken ``color`` channel-wise by ``level / 255``."""
    return tuple(c * level // 255 for c in color)


@lru_cache(maxsize=None)
def level_table(bits: int) -> np.ndarray:
    """Lookup table mapping each 8-bit sample to its ``bits``-bit level.

    A sample ``c`` becomes ``round(c / 255 * steps)`` with
    ``steps = 2**bits - 1``, which is scaled back by ``* 255 / steps`` and
    truncated. ``c * steps / 255`` is never exactly half-way between two
    integers, so the rounding direction never matters.
    """
    check_bits(bits)
    steps = (1 << bits) - 1
    samples = np.arange(256, dtype=np.int64)
    level = (2 * samples * steps + 255) // 510
    table = np.clip(level * 255 // steps, 0, 255).astype(np.uint8)
    table.setflags(write=False)
    return table


class PaletteQuantizer:
    """Maps pixels to palette colors reduced to a fixed bit depth."""

    def __init__(self, palette: Palette, bits: int) -> None:
        self.palette = palette
        self.bits = check_bits(bits)
        self._colors = np.array(palette.colors, dtype=np.int64)
        self._table = level_table(bits)

    def nearest(self, pixel: RGB) -> RGB:
        """Closest palette entry by Euclidean distance, earliest wins ties."""
        diff = self._colors - np.array(pixel, dtype=np.int64)
        dist = (diff * diff).sum(axis=1)
        # argmin returns the first minimum
        return self.palette.colors[int(np.argmin(dist))]

    def select(self, pixel: RGB) -> RGB:
        """Pick the output color before bit-depth reduction.

        Black or white matches become the pixel's own gray level; other
        matches are darkened to the pixel's luminance. A pixel that already
        is a palette color is returned as is.
        """
        pixel = tuple(int(c) for c in pixel)
        nearest = self.nearest(pixel)
        if nearest == pixel:
            return nearest
        level = luminance(pixel)
        if nearest in _MONOCHROME:
            return (level, level, level)
        return scale_color(nearest, level)

    def requantize(self, color: RGB) -> RGB:
        table = self._table
        return (int(table[color[0]]), int(table[color[1]]), int(table[color[2]]))

    def __call__(self, pixel: RGB) -> RGB:
        return self.requantize(self.select(pixel))
