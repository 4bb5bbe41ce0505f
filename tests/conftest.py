"""Shared fixtures: hand-built BMP files."""

import struct

import pytest


def build_bmp(
    rows,
    bottom_up=True,
    row_padding=False,
    offset=54,
    info_size=40,
    compression=0,
    bit_count=24,
    image_size=None,
    reserved=b"\x00\x00\x00\x00",
):
    """Encode top-down ``rows`` of RGB tuples as BMP bytes.

    Without ``row_padding`` the pixel stream is padded once to a 4-byte
    multiple; with it every scan line is.
    """
    height = len(rows)
    width = len(rows[0]) if rows else 0
    disk_rows = list(reversed(rows)) if bottom_up else list(rows)

    pixel_bytes = bytearray()
    for row in disk_rows:
        line = bytearray()
        for r, g, b in row:
            line += bytes((b, g, r))
        if row_padding:
            line += bytes((-len(line)) % 4)
        pixel_bytes += line
    if not row_padding:
        pixel_bytes += bytes((-len(pixel_bytes)) % 4)

    if image_size is None:
        image_size = len(pixel_bytes)

    info = struct.pack(
        "<IiiHHIIiiII",
        info_size,
        width,
        height if bottom_up else -height,
        1,
        bit_count,
        compression,
        image_size,
        2835,
        2835,
        0,
        0,
    )
    info += bytes(max(info_size - 40, 0))

    header_len = 14 + len(info)
    gap = bytes(max(offset - header_len, 0))
    total = header_len + len(gap) + len(pixel_bytes)
    file_header = struct.pack("<2sI4sI", b"BM", total, reserved, offset)
    return file_header + info + gap + bytes(pixel_bytes)


@pytest.fixture
def make_bmp():
    return build_bmp


@pytest.fixture
def gradient_rows():
    """A 4x3 image with distinct pixels everywhere."""
    return [
        [(x * 60, y * 100, (x + y) * 30) for x in range(4)]
        for y in range(3)
    ]
