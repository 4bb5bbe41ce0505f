"""BMP decoding.

Validates the container and info headers of an uncompressed 24-bit BMP and
turns its pixel region into a top-down PixelGrid.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path

from floyd_dither.core.dither import floyd_steinberg
from floyd_dither.core.headers import (
    BMP_IDENTIFIER,
    FILE_HEADER_SIZE,
    INFO_HEADER_MIN_SIZE,
    BitmapError,
    Compression,
    FileHeader,
    IdentifierMismatchError,
    InfoHeader,
    RowPadding,
    TruncatedStructureError,
    UnsupportedBitDepthError,
    UnsupportedCompressionError,
)
from floyd_dither.core.palette import Palette
from floyd_dither.core.pixels import PixelGrid, padded_length


@dataclass
class Bitmap:
    """A decoded BMP: both headers plus the pixels they describe."""

    file_header: FileHeader
    info_header: InfoHeader
    pixels: PixelGrid
    padding: RowPadding = RowPadding.STREAM

    @property
    def width(self) -> int:
        return self.pixels.width

    @property
    def height(self) -> int:
        return self.pixels.height

    def dither(self, palette: Palette, bits: int) -> None:
        """Floyd-Steinberg dither the pixels in place."""
        floyd_steinberg(self.pixels, palette, bits)


def _read_file_header(data: bytes) -> FileHeader:
    if len(data) < FILE_HEADER_SIZE:
        raise TruncatedStructureError("BitMapFileHeader", FILE_HEADER_SIZE - len(data))

    header = FileHeader.unpack(data)
    if header.identifier != BMP_IDENTIFIER:
        raise IdentifierMismatchError((header.identifier[0], header.identifier[1]))
    return header


def _read_info_header(data: bytes) -> InfoHeader:
    size_end = FILE_HEADER_SIZE + 4
    if len(data) < size_end:
        raise TruncatedStructureError("BitMapInfoHeader", size_end - len(data))

    (size,) = struct.unpack_from("<I", data, FILE_HEADER_SIZE)
    end = FILE_HEADER_SIZE + size
    if len(data) < end:
        raise TruncatedStructureError("BitMapInfoHeader", end - len(data))
    if size < INFO_HEADER_MIN_SIZE:
        # OS/2 core headers and the like lack the fields read below
        raise TruncatedStructureError("BitMapInfoHeader", INFO_HEADER_MIN_SIZE - size)

    return InfoHeader.unpack(data[FILE_HEADER_SIZE:end])


def _check_format(info: InfoHeader) -> None:
    try:
        compression = Compression.from_code(info.compression)
    except ValueError:
        raise UnsupportedCompressionError(Compression.UNKNOWN, info.compression) from None
    if compression is not Compression.RGB:
        raise UnsupportedCompressionError(compression)

    if info.bit_count != 24:
        raise UnsupportedBitDepthError(info.bit_count)
    if info.width < 0:
        raise BitmapError(f"Invalid pixel width: {info.width}")


def decode(data: bytes, padding: RowPadding = RowPadding.STREAM) -> Bitmap:
    """Decode a BMP held in memory.

    The pixel region is ``image_size`` bytes from the pixel offset. If it
    holds fewer samples than the geometry needs, the missing pixels read as
    black. With STREAM padding, whole samples beyond the last pixel are kept
    on the grid and written back by the encoder; with ROW padding bytes past
    the last row are ignored.

    Args:
        data: the complete file contents.
        padding: alignment scheme of the pixel stream, see RowPadding.

    Returns:
        Bitmap with the pixels in top-down order.

    Raises:
        BitmapError: the buffer is truncated, is not a BMP, or uses an
            encoding other than uncompressed 24-bit RGB.
    """
    file_header = _read_file_header(data)
    info_header = _read_info_header(data)
    _check_format(info_header)

    image_size = info_header.image_size
    if image_size == 0:
        # Legal for BI_RGB; the size follows from the geometry
        image_size = padded_length(info_header.width, info_header.rows, padding)

    start = file_header.offset
    end = start + image_size
    if len(data) < end:
        raise TruncatedStructureError("PixelArray", end - len(data))

    pixels = PixelGrid.from_bytes(
        data[start:end],
        info_header.width,
        info_header.rows,
        bottom_up=info_header.bottom_up,
        padding=padding,
    )
    return Bitmap(file_header, info_header, pixels, padding)


def read_bitmap(path: str | Path, padding: RowPadding = RowPadding.STREAM) -> Bitmap:
    """Read and decode a BMP file. I/O errors propagate unchanged."""
    with open(path, "rb") as f:
        data = f.read()
    return decode(data, padding)
