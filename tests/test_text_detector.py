"""
Tests for text_detector module.
"""

import numpy as np
import pytest
from PIL import Image, ImageDraw

from conftest import PARAGRAPH, FakeClassifier, glyph_rows_png, noise_png, png_bytes, solid_png, text_png

from series_art.text_detector import detect_text, edge_density, edge_mask, has_text_like_raster_pattern


class TestHeuristic:
    """Tests for has_text_like_raster_pattern."""

    def test_rows_of_letter_shapes_flagged(self):
        """Should flag paragraph-like rows of small outlined glyphs."""
        assert has_text_like_raster_pattern(glyph_rows_png()) is True

    @pytest.mark.parametrize("font_size", [32, 40, 48])
    def test_rendered_paragraph_flagged(self, font_size):
        """Should flag a block of real set type over a plain background."""
        assert has_text_like_raster_pattern(text_png(PARAGRAPH, font_size=font_size)) is True

    def test_uniform_image_clean(self):
        assert has_text_like_raster_pattern(solid_png((240, 236, 228))) is False

    def test_noise_clean(self):
        """Dense noise has edge density far above the text band."""
        assert has_text_like_raster_pattern(noise_png()) is False

    def test_large_shapes_clean(self):
        img = Image.new("L", (320, 240), 255)
        ImageDraw.Draw(img).rectangle([40, 40, 260, 200], fill=30)
        assert has_text_like_raster_pattern(png_bytes(img)) is False

    def test_too_few_glyphs_clean(self):
        # one short row: under ten glyph-like components
        assert has_text_like_raster_pattern(glyph_rows_png(rows=1, per_row=4)) is False

    def test_tiny_raster_clean(self):
        assert has_text_like_raster_pattern(solid_png((0, 0, 0), size=(320, 20))) is False

    def test_edge_mask_interior_only(self):
        gray = np.zeros((10, 10), dtype=np.int16)
        gray[:, 5:] = 255
        mask = edge_mask(gray)
        assert not mask[0].any() and not mask[-1].any()
        assert not mask[:, 0].any() and not mask[:, -1].any()
        assert mask[1:-1, 4:6].all()
        assert edge_density(mask) == mask.sum() / 100


class TestDetectText:
    """Tests for detect_text (heuristic + classifier)."""

    def test_heuristic_hit_skips_classifier(self):
        classifier = FakeClassifier([False])
        assert detect_text(glyph_rows_png(), classifier.invoke) is True
        assert classifier.calls == 0

    def test_classifier_consulted_when_heuristic_clean(self, white_png):
        classifier = FakeClassifier([True])
        assert detect_text(white_png, classifier.invoke) is True
        assert classifier.calls == 1

    def test_no_classifier_means_clean(self, white_png):
        assert detect_text(white_png) is False

    def test_classifier_error_fails_open(self, white_png):
        classifier = FakeClassifier(error=TimeoutError("vision timeout"))
        assert detect_text(white_png, classifier.invoke) is False

    def test_undecodable_raster_fails_open(self):
        assert detect_text(b"not an image") is False

    def test_short_title_caught_by_classifier(self):
        """A lone title word sits below the glyph-count floor; the classifier catches it."""
        title = text_png(["HOPE"], font_size=96)
        classifier = FakeClassifier([True])
        assert detect_text(title, classifier.invoke) is True
        assert classifier.calls == 1

    def test_short_title_without_classifier(self):
        assert detect_text(text_png(["HOPE"], font_size=96)) is False
