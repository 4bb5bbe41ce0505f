"""Row-major RGB pixel storage with saturating bounds handling.

The grid always holds rows in logical top-down order. Conversion from and to
the on-disk blue-green-red byte stream (and the bottom-up row order most BMP
files use) happens in ``from_bytes`` / ``to_bytes``.
"""

from __future__ import annotations

import numpy as np

from floyd_dither.core.headers import RowPadding
from floyd_dither.core.palette import RGB

BLACK: RGB = (0, 0, 0)


def row_stride(width: int) -> int:
    """Bytes per 24-bit scan line, padded to a 4-byte boundary."""
    return (width * 3 + 3) // 4 * 4


def padded_length(width: int, height: int, padding: RowPadding) -> int:
    """Size of the pixel stream for the given geometry and padding scheme."""
    if padding == RowPadding.ROW:
        return row_stride(width) * height
    raw = width * height * 3
    return raw + (-raw) % 4


class PixelGrid:
    """A width x height grid of RGB samples.

    ``get`` outside the grid returns black and ``set`` outside the grid does
    nothing; error diffusion reaches one pixel past the edges and relies on it.

    ``surplus`` holds whole BGR samples found after the last pixel of a
    stream-padded source. They are not part of the image but are written back
    unchanged so the stream keeps its length.
    """

    def __init__(
        self,
        width: int,
        height: int,
        data: np.ndarray | None = None,
        surplus: bytes = b"",
    ) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"Invalid grid size: {width}x{height}")
        if data is None:
            data = np.zeros((height, width, 3), dtype=np.uint8)
        elif data.shape != (height, width, 3):
            raise ValueError(
                f"Pixel data shape {data.shape} does not match {width}x{height}"
            )
        self._width = width
        self._height = height
        self.data = np.ascontiguousarray(data, dtype=np.uint8)
        self.surplus = bytes(surplus)

    @classmethod
    def from_bytes(
        cls,
        raw: bytes,
        width: int,
        height: int,
        bottom_up: bool,
        padding: RowPadding = RowPadding.STREAM,
    ) -> PixelGrid:
        """Build a grid from BGR disk bytes.

        With STREAM padding the bytes are consumed as consecutive 3-byte
        samples and a trailing partial sample is dropped; whole samples past
        the last pixel are kept in ``surplus``. With ROW padding each scan
        line is read from its 4-byte aligned stride and anything past the
        last row is ignored. Missing samples read as black.
        """
        count = width * height
        surplus = b""
        if padding == RowPadding.ROW:
            stride = row_stride(width)
            buf = np.zeros(stride * height, dtype=np.uint8)
            usable = min(len(raw), buf.size)
            if usable:
                buf[:usable] = np.frombuffer(raw, dtype=np.uint8, count=usable)
            bgr = buf.reshape(height, stride)[:, : width * 3].reshape(-1, 3)
        else:
            bgr = np.zeros((count, 3), dtype=np.uint8)
            whole = len(raw) // 3
            usable = min(whole, count)
            if usable:
                samples = np.frombuffer(raw, dtype=np.uint8, count=usable * 3)
                bgr[:usable] = samples.reshape(-1, 3)
            # canonical row padding of narrow images shifts real samples here
            surplus = raw[count * 3 : whole * 3]

        grid = cls(width, height, bgr[:, ::-1].reshape(height, width, 3), surplus)
        if bottom_up:
            grid.flip()
        return grid

    def to_bytes(self, bottom_up: bool, padding: RowPadding = RowPadding.STREAM) -> bytes:
        """Serialize to BGR disk bytes, padded according to ``padding``.

        STREAM output carries ``surplus`` after the pixels; ROW output has no
        room for it.
        """
        rows = self.data[::-1] if bottom_up else self.data
        bgr = rows[:, :, ::-1]
        if padding == RowPadding.ROW:
            stride = row_stride(self._width)
            out = np.zeros((self._height, stride), dtype=np.uint8)
            out[:, : self._width * 3] = bgr.reshape(self._height, -1)
            return out.tobytes()
        stream = bgr.tobytes() + self.surplus
        return stream + bytes((-len(stream)) % 4)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def get(self, x: int, y: int) -> RGB:
        if not self._in_bounds(x, y):
            return BLACK
        r, g, b = self.data[y, x]
        return int(r), int(g), int(b)

    def set(self, x: int, y: int, pixel: RGB) -> None:
        if not self._in_bounds(x, y):
            return
        self.data[y, x] = pixel

    def flip(self) -> None:
        """Reverse the row order in place, keeping each row intact."""
        self.data = np.ascontiguousarray(self.data[::-1])

    def copy(self) -> PixelGrid:
        return PixelGrid(self._width, self._height, self.data.copy(), self.surplus)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return self.data.shape == other.data.shape and bool(
            np.array_equal(self.data, other.data)
        )

    def __repr__(self) -> str:
        return f"PixelGrid({self._width}x{self._height})"
