"""Tests for palette quantization."""

import itertools

import numpy as np
import pytest

from floyd_dither.core.palette import COLOR_TABLE, Palette
from floyd_dither.core.quantize import (
    PaletteQuantizer,
    check_bits,
    level_table,
    luminance,
    scale_color,
)

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
RED = (255, 0, 0)
GREEN = (0, 255, 0)


class TestLuminance:
    def test_primaries(self):
        assert luminance(RED) == 55
        assert luminance(GREEN) == 182
        assert luminance((0, 0, 255)) == 18

    def test_white_is_clamped(self):
        # Weights sum to 1.0036
        assert luminance(WHITE) == 255

    def test_black(self):
        assert luminance(BLACK) == 0

    def test_gray(self):
        assert luminance((100, 100, 100)) == 100

    @pytest.mark.parametrize(
        "pixel, expected",
        [((0, 1, 184), 14), ((0, 28, 152), 31), ((0, 109, 56), 82)],
    )
    def test_integral_sums_not_truncated_down(self, pixel, expected):
        # weighted sums that are whole numbers, where float math can fall short
        assert luminance(pixel) == expected


class TestLevels:
    @pytest.mark.parametrize("bits", range(1, 9))
    def test_channel_range_and_count(self, bits):
        table = level_table(bits)
        assert table.dtype == np.uint8
        assert len(set(table.tolist())) == 2 ** bits

    @pytest.mark.parametrize("bits", range(1, 9))
    def test_evenly_spaced(self, bits):
        steps = 2 ** bits - 1
        for k, value in enumerate(sorted(set(level_table(bits).tolist()))):
            assert abs(value - k * 255 / steps) < 1

    @pytest.mark.parametrize("bits", range(1, 9))
    def test_extremes_are_fixed(self, bits):
        table = level_table(bits)
        assert table[0] == 0
        assert table[255] == 255

    def test_one_bit_threshold(self):
        table = level_table(1)
        assert table[127] == 0
        assert table[128] == 255

    def test_three_bits(self):
        assert level_table(3)[100] == 109

    def test_table_is_read_only(self):
        with pytest.raises(ValueError):
            level_table(2)[0] = 1

    @pytest.mark.parametrize("bits", [0, 9, -1])
    def test_invalid_bits(self, bits):
        with pytest.raises(ValueError, match="Bit depth"):
            check_bits(bits)


class TestNearest:
    def test_exact_tie_goes_to_first(self):
        pixel = (10, 10, 0)
        assert PaletteQuantizer(Palette((RED, GREEN)), 8).nearest(pixel) == RED
        assert PaletteQuantizer(Palette((GREEN, RED)), 8).nearest(pixel) == GREEN

    def test_order_invariant_without_ties(self):
        colors = list(COLOR_TABLE.values())
        rng = np.random.default_rng(11)
        pixels = [tuple(int(c) for c in p) for p in rng.integers(0, 256, size=(50, 3))]
        orders = [colors, colors[::-1], colors[3:] + colors[:3]]
        quantizers = [PaletteQuantizer(Palette(tuple(o)), 4) for o in orders]

        for pixel in pixels:
            dists = sorted(sum((a - b) ** 2 for a, b in zip(c, pixel)) for c in colors)
            if dists[0] == dists[1]:
                continue
            results = {q.nearest(pixel) for q in quantizers}
            assert len(results) == 1


class TestSelect:
    def test_monochrome_uses_luminance(self):
        q = PaletteQuantizer(Palette((BLACK, WHITE, RED)), 8)
        assert q.select((100, 100, 100)) == (100, 100, 100)

    def test_color_is_scaled_by_luminance(self):
        q = PaletteQuantizer(Palette(((128, 0, 0), BLACK, WHITE)), 8)
        # luminance(200, 30, 30) == 66; 128 * 66 / 255 == 33.1
        assert q.select((200, 30, 30)) == (33, 0, 0)

    def test_exact_palette_color_kept(self):
        q = PaletteQuantizer(Palette((WHITE, BLACK, RED)), 1)
        assert q.select(RED) == RED
        assert q.select(WHITE) == WHITE
        assert q.select(BLACK) == BLACK

    def test_scale_color(self):
        assert scale_color((128, 255, 0), 0) == (0, 0, 0)
        assert scale_color((128, 64, 0), 66) == (33, 16, 0)


class TestQuantize:
    def test_full_pipeline(self):
        palette = Palette(((128, 0, 0), BLACK, WHITE))
        assert PaletteQuantizer(palette, 3)((200, 30, 30)) == (36, 0, 0)

    def test_gray_three_bits(self):
        palette = Palette((BLACK, WHITE, RED))
        assert PaletteQuantizer(palette, 3)((100, 100, 100)) == (109, 109, 109)

    def test_red_stays_red_at_one_bit(self):
        palette = Palette.from_names(["white", "black", "red"])
        assert PaletteQuantizer(palette, 1)(RED) == RED

    def test_outputs_on_level_grid(self):
        palette = Palette.from_names(["white", "black", "red", "green", "blue"])
        for bits in (1, 2, 5):
            grid = set(level_table(bits).tolist())
            q = PaletteQuantizer(palette, bits)
            for pixel in itertools.product(range(0, 256, 51), repeat=3):
                out = q(pixel)
                assert all(0 <= c <= 255 for c in out)
                assert set(out) <= grid

    def test_invalid_bits(self):
        with pytest.raises(ValueError):
            PaletteQuantizer(Palette((BLACK,)), 0)
