"""
Tests for palette_compliance module.
"""

import re

import pytest
from PIL import Image

from conftest import png_bytes, solid_png

from series_art.palette_compliance import (
    FAR_DISTANCE_THRESHOLD,
    MAX_FAR_RATIO,
    NEUTRAL_COLORS,
    color_distance,
    expand_allowed_colors,
    hex_to_rgb,
    score_palette_compliance,
    shade_scale,
)

BRAND = ["#1F3A5F"]


class TestColorMath:

    def test_hex_to_rgb(self):
        assert hex_to_rgb("#1F3A5F") == (0x1F, 0x3A, 0x5F)
        assert hex_to_rgb("fff") == (255, 255, 255)

    def test_hex_to_rgb_rejects_garbage(self):
        with pytest.raises(ValueError):
            hex_to_rgb("#12345")

    def test_color_distance(self):
        assert color_distance("#000000", "#000000") == 0
        assert color_distance("#000000", "#FFFFFF") == pytest.approx(441.67, abs=0.01)

    def test_shade_scale_stops(self):
        scale = shade_scale("#1F3A5F")
        assert list(scale) == [50, 100, 200, 300, 400, 500, 600, 700, 800, 900, 950]
        assert all(re.fullmatch(r"#[0-9A-F]{6}", v) for v in scale.values())
        # 500 anchors on the base colour
        assert color_distance(scale[500], "#1F3A5F") < 4

    def test_expand_includes_base_shades_and_neutrals(self):
        colors = expand_allowed_colors(["#1f3a5f"])
        assert "#1F3A5F" in colors
        assert all(n in colors for n in NEUTRAL_COLORS)
        assert len(colors) == len(set(colors))


class TestScorePaletteCompliance:
    """Tests for score_palette_compliance."""

    def test_palette_colour_is_compliant(self, navy_png):
        score = score_palette_compliance(navy_png, BRAND)
        assert score.is_compliant
        assert score.sample_count == 800
        assert score.far_sample_count == 0
        assert score.far_distance_threshold == FAR_DISTANCE_THRESHOLD
        assert score.max_far_ratio == MAX_FAR_RATIO

    def test_neutrals_are_compliant(self, white_png):
        assert score_palette_compliance(white_png, BRAND).is_compliant

    def test_unrelated_colour_is_not(self, green_png):
        score = score_palette_compliance(green_png, BRAND)
        assert not score.is_compliant
        assert score.far_sample_ratio == 1.0
        assert score.average_nearest_distance > FAR_DISTANCE_THRESHOLD

    def test_small_off_palette_area_tolerated(self):
        img = Image.new("RGB", (400, 200), (0x1F, 0x3A, 0x5F))
        img.paste((0, 255, 0), (0, 0, 80, 200))
        score = score_palette_compliance(png_bytes(img), BRAND)
        assert score.far_sample_ratio == pytest.approx(0.2)
        assert score.is_compliant

    def test_half_off_palette_fails(self):
        img = Image.new("RGB", (400, 200), (0x1F, 0x3A, 0x5F))
        img.paste((0, 255, 0), (0, 0, 200, 200))
        score = score_palette_compliance(png_bytes(img), BRAND)
        assert score.far_sample_ratio == pytest.approx(0.5)
        assert not score.is_compliant

    def test_transparent_pixels_skipped(self):
        img = Image.new("RGBA", (400, 200), (0, 255, 0, 0))
        img.paste((0x1F, 0x3A, 0x5F, 255), (200, 0, 400, 200))
        score = score_palette_compliance(png_bytes(img), BRAND)
        assert score.sample_count == 400
        assert score.is_compliant

    def test_fully_transparent_is_compliant(self):
        score = score_palette_compliance(solid_png((0, 0, 0, 0), mode="RGBA"), BRAND)
        assert score.sample_count == 0
        assert score.is_compliant
