"""
text_detector.py - Catches letterforms that leaked into a generated background.

Two layers:
  1. has_text_like_raster_pattern - a local heuristic. Edge-detect a 320px
     wide grayscale copy, then count connected edge blobs whose size, aspect
     and fill look like glyphs. Ten or more means text.
  2. An optional vision classifier, asked only when the heuristic is clean.

Both layers fail open: a raster that cannot be analysed counts as clean.
"""

from __future__ import annotations

import io
import logging
from collections import deque
from typing import Callable, Optional

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

ANALYSIS_WIDTH = 320
MIN_DIMENSION = 32
EDGE_THRESHOLD = 72
MIN_EDGE_DENSITY = 0.012
MAX_EDGE_DENSITY = 0.34
TEXT_COMPONENT_TARGET = 10

# glyph-like component bounds
MIN_BOX_WIDTH = 5
MIN_BOX_HEIGHT = 4
MIN_AREA = 12
MAX_AREA = 2200
MAX_BOX_AREA = 4600
MIN_ASPECT = 1.15
MAX_ASPECT = 15.0
MIN_FILL = 0.07
MAX_FILL = 0.62

VisionClassifierFn = Callable[[bytes], bool]


def _grayscale(raster: bytes) -> np.ndarray:
    img = Image.open(io.BytesIO(raster)).convert("L")
    if img.width != ANALYSIS_WIDTH:
        height = max(1, round(img.height * ANALYSIS_WIDTH / img.width))
        img = img.resize((ANALYSIS_WIDTH, height), Image.BILINEAR)
    return np.asarray(img, dtype=np.int16)


def edge_mask(gray: np.ndarray) -> np.ndarray:
    """Two-tap gradient |dx| + |dy| over interior pixels, thresholded."""
    mask = np.zeros(gray.shape, dtype=bool)
    gx = np.abs(gray[1:-1, 2:] - gray[1:-1, :-2])
    gy = np.abs(gray[2:, 1:-1] - gray[:-2, 1:-1])
    mask[1:-1, 1:-1] = (gx + gy) > EDGE_THRESHOLD
    return mask


def edge_density(mask: np.ndarray) -> float:
    return float(mask.sum()) / mask.size if mask.size else 0.0


def _is_glyph_like(area: int, box_w: int, box_h: int) -> bool:
    box_area = box_w * box_h
    aspect = box_w / box_h
    fill = area / box_area
    return (
        MIN_AREA <= area <= MAX_AREA
        and box_area <= MAX_BOX_AREA
        and MIN_ASPECT <= aspect <= MAX_ASPECT
        and MIN_FILL <= fill <= MAX_FILL
    )


def count_text_like_components(mask: np.ndarray, stop_at: int = TEXT_COMPONENT_TARGET) -> int:
    """4-connected flood fill over the edge mask; stops early at ``stop_at``."""
    height, width = mask.shape
    visited = np.zeros_like(mask)
    found = 0

    for sy, sx in zip(*np.nonzero(mask)):
        if visited[sy, sx]:
            continue
        visited[sy, sx] = True
        queue = deque([(sy, sx)])
        area = 0
        min_x = max_x = sx
        min_y = max_y = sy

        while queue:
            y, x = queue.popleft()
            area += 1
            min_x, max_x = min(min_x, x), max(max_x, x)
            min_y, max_y = min(min_y, y), max(max_y, y)
            for ny, nx in ((y - 1, x), (y + 1, x), (y, x - 1), (y, x + 1)):
                if 0 <= ny < height and 0 <= nx < width and mask[ny, nx] and not visited[ny, nx]:
                    visited[ny, nx] = True
                    queue.append((ny, nx))

        box_w = int(max_x - min_x + 1)
        box_h = int(max_y - min_y + 1)
        if box_w < MIN_BOX_WIDTH or box_h < MIN_BOX_HEIGHT:
            continue
        if _is_glyph_like(area, box_w, box_h):
            found += 1
            if found >= stop_at:
                break

    return found


def has_text_like_raster_pattern(raster: bytes) -> bool:
    """True when the raster looks like it contains rows of glyphs."""
    gray = _grayscale(raster)
    height, width = gray.shape
    if width < MIN_DIMENSION or height < MIN_DIMENSION:
        return False

    mask = edge_mask(gray)
    density = edge_density(mask)
    # blank canvases and busy textures both fall outside this band
    if density < MIN_EDGE_DENSITY or density > MAX_EDGE_DENSITY:
        return False

    return count_text_like_components(mask) >= TEXT_COMPONENT_TARGET


def detect_text(raster: bytes, classifier: Optional[VisionClassifierFn] = None) -> bool:
    """
    Heuristic first, then the vision classifier when one is configured.

    Analysis errors are logged and treated as "no text".
    """
    try:
        if has_text_like_raster_pattern(raster):
            return True
    except Exception as e:
        logger.warning(f"Text heuristic failed, treating raster as clean: {e}")

    if classifier is None:
        return False
    try:
        return bool(classifier(raster))
    except Exception as e:
        logger.warning(f"Vision text classifier failed, treating raster as clean: {e}")
        return False
