"""
Pytest configuration and shared fixtures.

Rasters are built in memory with Pillow/numpy; providers and classifiers are
small fakes so no test touches the network.
"""

import io
from typing import List, Optional, Sequence

import numpy as np
import pytest
from PIL import Image, ImageDraw, ImageFont


def png_bytes(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def solid_png(color, size=(320, 240), mode="RGB") -> bytes:
    return png_bytes(Image.new(mode, size, color))


def glyph_rows_png(rows: int = 6, per_row: int = 17) -> bytes:
    """
    White 320x240 canvas with rows of small outlined letter blocks (12x8),
    spaced like a paragraph of set type.
    """
    img = Image.new("L", (320, 240), 255)
    draw = ImageDraw.Draw(img)
    for r in range(rows):
        y0 = 10 + 16 * r
        for k in range(per_row):
            x0 = 10 + 18 * k
            draw.rectangle([x0, y0, x0 + 11, y0 + 7], outline=0, width=1)
    return png_bytes(img)


PARAGRAPH = (
    "Rooted in grace, a sermon series",
    "for the whole church family this",
    "autumn. Join us every Sunday at",
    "ten as we walk through the story",
    "of the vine and the branches and",
    "what it means to remain in Him.",
)


def text_png(lines: Sequence[str], font_size: int = 40, size=(1024, 1024)) -> bytes:
    """Black text set on a white canvas with Pillow's bundled TrueType font."""
    img = Image.new("L", size, 255)
    draw = ImageDraw.Draw(img)
    font = ImageFont.load_default(size=font_size)
    y = 80
    for line in lines:
        draw.text((60, y), line, fill=0, font=font)
        y += int(font_size * 1.6)
    return png_bytes(img)


def noise_png(size=(320, 240), seed: int = 7) -> bytes:
    rng = np.random.default_rng(seed)
    arr = rng.integers(0, 256, size=(size[1], size[0]), dtype=np.uint8)
    return png_bytes(Image.fromarray(arr, mode="L"))


def ramp_png(increasing: bool = True, offset: int = 0) -> bytes:
    """90x80 grayscale with nine vertical bands stepping 0..240 (+offset)."""
    arr = np.zeros((80, 90), dtype=np.uint8)
    for band in range(9):
        value = band * 30 if increasing else (8 - band) * 30
        arr[:, band * 10:(band + 1) * 10] = value + offset
    return png_bytes(Image.fromarray(arr, mode="L"))


class FakeProvider:
    """ImageProvider returning queued rasters; the last one repeats."""

    def __init__(self, rasters: Sequence[bytes], fail_on: Optional[int] = None, error: Exception = None):
        self.rasters = list(rasters)
        self.prompts: List[str] = []
        self.sizes: List[str] = []
        self.reference_counts: List[int] = []
        self.fail_on = fail_on
        self.error = error or RuntimeError("provider down")

    @property
    def calls(self) -> int:
        return len(self.prompts)

    def invoke(self, prompt, size, reference_images=None):
        call_index = len(self.prompts)
        self.prompts.append(prompt)
        self.sizes.append(size)
        self.reference_counts.append(len(reference_images or []))
        if self.fail_on is not None and call_index == self.fail_on:
            raise self.error
        return self.rasters[min(call_index, len(self.rasters) - 1)]


class FakeClassifier:
    """VisionClassifier answering from a queue; the last answer repeats."""

    def __init__(self, answers: Sequence[bool] = (False,), error: Exception = None):
        self.answers = list(answers)
        self.error = error
        self.calls = 0

    def invoke(self, raster):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.answers[min(self.calls - 1, len(self.answers) - 1)]


@pytest.fixture
def white_png():
    return solid_png((255, 255, 255))


@pytest.fixture
def navy_png():
    return solid_png((0x1F, 0x3A, 0x5F))


@pytest.fixture
def green_png():
    return solid_png((0, 255, 0))


@pytest.fixture(autouse=True)
def clear_gemini_env(monkeypatch):
    """Tests never talk to Gemini; make sure config comes from the test."""
    for key in ("GEMINI_API_KEY", "SERIES_ART_IMAGE_MODELS", "SERIES_ART_VISION_MODEL", "SERIES_ART_VISION_TIMEOUT_MS"):
        monkeypatch.delenv(key, raising=False)
