"""
palette_compliance.py - How well a raster sticks to a brand palette.

Samples a 40x20 grid of opaque pixels and measures each sample's distance to
the nearest allowed colour. Allowed colours are the brand swatches, an
11-stop tint/shade scale of each swatch, and a fixed set of neutrals.

    score = score_palette_compliance(png_bytes, ["#1F3A5F", "#E8C468"])
    score.is_compliant      # far_sample_ratio <= 0.25
"""

from __future__ import annotations

import io
import math
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import numpy as np
from PIL import Image

GRID_COLUMNS = 40
GRID_ROWS = 20
MIN_ALPHA = 16
FAR_DISTANCE_THRESHOLD = 64.0
MAX_FAR_RATIO = 0.25

SHADE_STOPS = [50, 100, 200, 300, 400, 500, 600, 700, 800, 900, 950]

NEUTRAL_COLORS = ("#FFFFFF", "#000000", "#F4F4F5", "#E5E5E5", "#A3A3A3", "#525252", "#171717")


@dataclass(frozen=True)
class PaletteComplianceScore:
    sample_count: int
    far_sample_count: int
    far_sample_ratio: float
    far_distance_threshold: float
    max_far_ratio: float
    average_nearest_distance: float
    is_compliant: bool


# ── Color math ────────────────────────────────────────────────────────────────

def hex_to_rgb(hex_str: str) -> Tuple[int, int, int]:
    h = hex_str.strip().lstrip("#")
    if len(h) == 3:
        h = "".join(c * 2 for c in h)
    if len(h) != 6:
        raise ValueError(f"Not a hex colour: {hex_str!r}")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def color_distance(hex_a: str, hex_b: str) -> float:
    """Euclidean distance between two hex colors in RGB space."""
    ra, ga, ba = hex_to_rgb(hex_a)
    rb, gb, bb = hex_to_rgb(hex_b)
    return math.sqrt((ra - rb) ** 2 + (ga - gb) ** 2 + (ba - bb) ** 2)


def _hex_to_hsl(hex_str: str) -> Tuple[float, float, float]:
    """hex -> HSL (H: 0-360, S: 0-1, L: 0-1)"""
    r, g, b = (c / 255 for c in hex_to_rgb(hex_str))
    mx, mn = max(r, g, b), min(r, g, b)
    delta = mx - mn
    L = (mx + mn) / 2
    S = 0.0 if delta == 0 else delta / (1 - abs(2 * L - 1))
    if delta == 0:
        H = 0.0
    elif mx == r:
        H = 60 * (((g - b) / delta) % 6)
    elif mx == g:
        H = 60 * (((b - r) / delta) + 2)
    else:
        H = 60 * (((r - g) / delta) + 4)
    return H, S, L


def _hsl_to_hex(H: float, S: float, L: float) -> str:
    C = (1 - abs(2 * L - 1)) * S
    X = C * (1 - abs((H / 60) % 2 - 1))
    m = L - C / 2
    if   H < 60:  r, g, b = C, X, 0
    elif H < 120: r, g, b = X, C, 0
    elif H < 180: r, g, b = 0, C, X
    elif H < 240: r, g, b = 0, X, C
    elif H < 300: r, g, b = X, 0, C
    else:         r, g, b = C, 0, X
    return f"#{int((r+m)*255):02X}{int((g+m)*255):02X}{int((b+m)*255):02X}"


def shade_scale(hex_color: str) -> Dict[int, str]:
    """
    11-stop tint/shade scale around a base colour.

    Lightness runs from ~96% (stop 50) through the base (500) down to 14% of
    the base (950). Saturation eases off towards both ends.
    """
    H, S, L_base = _hex_to_hsl(hex_color)
    target_L = {
        50: 0.960, 100: 0.910, 200: 0.820, 300: 0.700, 400: 0.580,
        500: L_base,
        600: L_base * 0.78, 700: L_base * 0.58, 800: L_base * 0.40,
        900: L_base * 0.24, 950: L_base * 0.14,
    }
    target_S = {
        50: S * 0.20, 100: S * 0.35, 200: S * 0.55, 300: S * 0.75, 400: S * 0.90,
        500: S,
        600: S * 0.95, 700: S * 0.90, 800: S * 0.82, 900: S * 0.70, 950: S * 0.55,
    }
    result: Dict[int, str] = {}
    for stop in SHADE_STOPS:
        lum = max(0.02, min(0.98, target_L[stop]))
        sat = max(0.0, min(1.0, target_S[stop]))
        result[stop] = _hsl_to_hex(H, sat, lum)
    return result


def expand_allowed_colors(palette: Sequence[str]) -> List[str]:
    """Brand swatches + their shade scales + neutrals, deduplicated."""
    colors: List[str] = []
    for hex_color in palette:
        base = f"#{''.join(f'{c:02X}' for c in hex_to_rgb(hex_color))}"
        colors.append(base)
        colors.extend(shade_scale(base).values())
    colors.extend(NEUTRAL_COLORS)
    return list(dict.fromkeys(colors))


# ── Scoring ───────────────────────────────────────────────────────────────────

def _sample_grid(raster: bytes) -> np.ndarray:
    """RGB of the opaque grid samples, shape (n, 3)."""
    img = Image.open(io.BytesIO(raster)).convert("RGBA")
    pixels = np.asarray(img, dtype=np.float64)
    height, width = pixels.shape[:2]
    xs = ((np.arange(GRID_COLUMNS) + 0.5) * width / GRID_COLUMNS).astype(int).clip(0, width - 1)
    ys = ((np.arange(GRID_ROWS) + 0.5) * height / GRID_ROWS).astype(int).clip(0, height - 1)
    samples = pixels[np.ix_(ys, xs)].reshape(-1, 4)
    return samples[samples[:, 3] >= MIN_ALPHA][:, :3]


def score_palette_compliance(raster: bytes, palette: Sequence[str]) -> PaletteComplianceScore:
    allowed = np.array([hex_to_rgb(c) for c in expand_allowed_colors(palette)], dtype=np.float64)
    samples = _sample_grid(raster)

    if len(samples) == 0:
        # fully transparent raster: nothing off-palette to complain about
        return PaletteComplianceScore(
            sample_count=0,
            far_sample_count=0,
            far_sample_ratio=0.0,
            far_distance_threshold=FAR_DISTANCE_THRESHOLD,
            max_far_ratio=MAX_FAR_RATIO,
            average_nearest_distance=0.0,
            is_compliant=True,
        )

    diffs = samples[:, None, :] - allowed[None, :, :]
    nearest = np.sqrt((diffs ** 2).sum(axis=2)).min(axis=1)
    far_count = int((nearest > FAR_DISTANCE_THRESHOLD).sum())
    ratio = far_count / len(samples)

    return PaletteComplianceScore(
        sample_count=int(len(samples)),
        far_sample_count=far_count,
        far_sample_ratio=ratio,
        far_distance_threshold=FAR_DISTANCE_THRESHOLD,
        max_far_ratio=MAX_FAR_RATIO,
        average_nearest_distance=float(nearest.mean()),
        is_compliant=ratio <= MAX_FAR_RATIO,
    )
