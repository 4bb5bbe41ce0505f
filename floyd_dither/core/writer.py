"""BMP encoding.

Writes the stored headers back verbatim, zero-fills the gap up to the pixel
offset and serializes the grid in the row order of the source file.
"""

from __future__ import annotations

from pathlib import Path

from floyd_dither.core.headers import RowPadding
from floyd_dither.core.reader import Bitmap


def encode(bitmap: Bitmap, padding: RowPadding | None = None) -> bytes:
    """Serialize a Bitmap.

    Args:
        bitmap: decoded (and possibly dithered) image.
        padding: alignment scheme for the pixel stream. Defaults to the
            scheme the bitmap was decoded with.

    Returns:
        The complete file contents.
    """
    if padding is None:
        padding = bitmap.padding

    out = bytearray(bitmap.file_header.pack())
    out += bitmap.info_header.pack()

    gap = bitmap.file_header.offset - len(out)
    if gap > 0:
        out += bytes(gap)

    out += bitmap.pixels.to_bytes(bitmap.info_header.bottom_up, padding)
    return bytes(out)


def save_bitmap(
    bitmap: Bitmap,
    path: str | Path,
    padding: RowPadding | None = None,
) -> int:
    """Encode ``bitmap`` to ``path`` and return the number of bytes written.

    I/O errors propagate unchanged; a partially written file is left as is.
    """
    data = encode(bitmap, padding)
    with open(path, "wb") as f:
        return f.write(data)
