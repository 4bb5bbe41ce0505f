"""BMP container and info header structures.

Both headers are little-endian on disk. The info header keeps its raw bytes
so that header variants larger than the 40-byte BITMAPINFOHEADER are written
back unchanged.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import Enum, IntEnum

FILE_HEADER_SIZE = 14
INFO_HEADER_MIN_SIZE = 40
BMP_IDENTIFIER = b"BM"

_FILE_HEADER = struct.Struct("<2sI4sI")
_INFO_HEADER = struct.Struct("<IiiHHIIiiII")


class Compression(IntEnum):
    RGB = 0
    RLE8 = 1
    RLE4 = 2
    BITFIELDS = 3
    JPEG = 4
    PNG = 5
    ALPHABITFIELDS = 6
    CMYK = 11
    CMYKRLE8 = 12
    CMYKRLE4 = 13

    # Not a BMP code, stands in for any value outside the list above.
    UNKNOWN = -1

    @classmethod
    def from_code(cls, code: int) -> Compression:
        """Convert a raw compression code, rejecting anything not named above."""
        if code == cls.UNKNOWN.value:
            raise ValueError(f"Unknown compression code: {code}")
        return cls(code)


class RowPadding(str, Enum):
    """How the pixel stream is aligned to 4-byte boundaries.

    STREAM pads the whole pixel stream once, ROW pads every scan line as
    the BMP format prescribes.
    """

    STREAM = "stream"
    ROW = "row"


class BitmapError(ValueError):
    """Base class for BMP decoding failures."""


class TruncatedStructureError(BitmapError):
    def __init__(self, structure: str, missing: int) -> None:
        self.structure = structure
        self.missing = missing
        super().__init__(f"Bad {structure}, missing {missing} bytes")


class IdentifierMismatchError(BitmapError):
    def __init__(self, found: tuple[int, int]) -> None:
        self.found = found
        super().__init__(
            f"Identifier mismatch: found [{found[0]:#04x}, {found[1]:#04x}], "
            f"expected [0x42, 0x4d]"
        )


class UnsupportedCompressionError(BitmapError):
    def __init__(self, compression: Compression, code: int | None = None) -> None:
        self.compression = compression
        self.code = int(compression) if code is None else code
        if compression is Compression.UNKNOWN:
            message = f"Unsupported compression: UNKNOWN (code {self.code})"
        else:
            message = f"Unsupported compression: {compression.name}"
        super().__init__(message)


class UnsupportedBitDepthError(BitmapError):
    def __init__(self, bit_count: int) -> None:
        self.bit_count = bit_count
        super().__init__(f"Unsupported color depth: {bit_count} bits per pixel (need 24)")


@dataclass(frozen=True)
class FileHeader:
    """The 14-byte BITMAPFILEHEADER."""

    identifier: bytes
    size: int
    reserved: bytes  # Unused, written back verbatim
    offset: int  # Start of pixel data from the beginning of the file

    @classmethod
    def unpack(cls, data: bytes) -> FileHeader:
        identifier, size, reserved, offset = _FILE_HEADER.unpack_from(data, 0)
        return cls(identifier=identifier, size=size, reserved=reserved, offset=offset)

    def pack(self) -> bytes:
        return _FILE_HEADER.pack(self.identifier, self.size, self.reserved, self.offset)


@dataclass(frozen=True)
class InfoHeader:
    """BITMAPINFOHEADER fields plus the header's raw bytes."""

    size: int
    width: int
    height: int  # > 0: rows stored bottom-up, < 0: top-down
    planes: int
    bit_count: int
    compression: int  # Raw code, see Compression
    image_size: int
    x_resolution: int
    y_resolution: int
    colors_used: int
    colors_important: int
    raw: bytes = b""

    @classmethod
    def unpack(cls, data: bytes) -> InfoHeader:
        """Parse the first 40 bytes of ``data``; all of ``data`` is kept as ``raw``."""
        fields = _INFO_HEADER.unpack_from(data, 0)
        return cls(*fields, raw=bytes(data))

    def pack(self) -> bytes:
        packed = _INFO_HEADER.pack(
            self.size,
            self.width,
            self.height,
            self.planes,
            self.bit_count,
            self.compression,
            self.image_size,
            self.x_resolution,
            self.y_resolution,
            self.colors_used,
            self.colors_important,
        )
        # Bytes past the 40 known ones (V4/V5 headers) come from the source
        return packed + self.raw[len(packed):]

    @property
    def bottom_up(self) -> bool:
        return self.height > 0

    @property
    def rows(self) -> int:
        return abs(self.height)
