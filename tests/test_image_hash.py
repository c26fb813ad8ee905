"""
Tests for image_hash module.
"""

import warnings

from conftest import noise_png, ramp_png, solid_png

from series_art.image_hash import (
    ReferenceHash,
    closest_reference,
    compute_dhash,
    hamming_distance,
    is_valid_dhash,
)


class TestComputeDhash:

    def test_format(self):
        h = compute_dhash(noise_png())
        assert len(h) == 16
        assert is_valid_dhash(h)
        assert h == h.lower()

    def test_identical_images_same_hash(self):
        assert compute_dhash(noise_png(seed=3)) == compute_dhash(noise_png(seed=3))

    def test_uniform_image_is_all_zero(self):
        assert compute_dhash(solid_png((120, 120, 120))) == "0" * 16

    def test_no_pillow_deprecation_warnings(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            assert len(compute_dhash(ramp_png())) == 16

    def test_brightness_shift_barely_moves_hash(self):
        assert hamming_distance(compute_dhash(ramp_png()), compute_dhash(ramp_png(offset=10))) <= 2

    def test_reversed_ramp_is_far(self):
        assert hamming_distance(compute_dhash(ramp_png(True)), compute_dhash(ramp_png(False))) >= 48


class TestHamming:

    def test_distance(self):
        assert hamming_distance("0" * 16, "0" * 16) == 0
        assert hamming_distance("0" * 16, "f" * 16) == 64
        assert hamming_distance("0" * 15 + "7", "0" * 16) == 3

    def test_valid_dhash(self):
        assert not is_valid_dhash("xyz")
        assert not is_valid_dhash("g" * 16)
        assert not is_valid_dhash(None)
        assert is_valid_dhash("0123456789abcdef")

    def test_closest_reference(self):
        refs = [ReferenceHash("far", "f" * 16), ReferenceHash("near", "0" * 15 + "1")]
        ref, distance = closest_reference("0" * 16, refs)
        assert ref.id == "near"
        assert distance == 1

    def test_closest_reference_empty(self):
        assert closest_reference("0" * 16, []) is None
