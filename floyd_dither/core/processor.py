"""Dithering pipeline.

Read BMP → build palette → Floyd-Steinberg → write BMP.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from floyd_dither.core.headers import RowPadding
from floyd_dither.core.palette import DEFAULT_COLORS, Palette
from floyd_dither.core.quantize import check_bits
from floyd_dither.core.reader import decode, read_bitmap
from floyd_dither.core.writer import encode, save_bitmap

DEFAULT_BITS = 3


@dataclass(frozen=True)
class Settings:
    """Options that affect the output image."""

    colors: tuple[str, ...] = DEFAULT_COLORS
    bits: int = DEFAULT_BITS  # 1 to 8
    padding: RowPadding = RowPadding.STREAM

    def __post_init__(self) -> None:
        check_bits(self.bits)

    def palette(self) -> Palette:
        return Palette.from_names(self.colors)


@dataclass
class ProcessResult:
    """Summary of one pipeline run."""

    output: Path
    bytes_written: int
    width: int
    height: int
    palette: Palette


def process_bytes(data: bytes, settings: Settings) -> bytes:
    """Dither an in-memory BMP and return the encoded result."""
    palette = settings.palette()
    bitmap = decode(data, settings.padding)
    bitmap.dither(palette, settings.bits)
    return encode(bitmap)


def process_file(
    input_path: str | Path,
    output_path: str | Path,
    settings: Settings,
) -> ProcessResult:
    """Dither the BMP at ``input_path`` and write it to ``output_path``."""
    # Build the palette first so a bad color list fails before any I/O
    palette = settings.palette()
    bitmap = read_bitmap(input_path, settings.padding)
    bitmap.dither(palette, settings.bits)
    written = save_bitmap(bitmap, output_path)
    return ProcessResult(
        output=Path(output_path),
        bytes_written=written,
        width=bitmap.width,
        height=bitmap.height,
        palette=palette,
    )
