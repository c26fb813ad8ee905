"""
reference_library.py - Loads and samples the reference corpus.

The corpus lives under reference/ with an index.json written by
scripts/build_reference_index.py:

    {"images": [{"relativePath": "clean/a.jpg", "width": 1200, "height": 800,
                 "minimalScore": 0.82, "dHash": "f0e1...", "tags": ["minimal"]}]}

The index is read once into an immutable tuple. Sampling is seeded so a
given (seed, round, option) always sends the same references to the model.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image

from .image_hash import ReferenceHash, compute_dhash, is_valid_dhash
from .seeded_random import SeededRandom

logger = logging.getLogger(__name__)

REFERENCE_ROOT = Path("reference")
INDEX_FILENAME = "index.json"
MAX_REFERENCES_PER_SLOT = 3
MIN_POOL_SIZE = 12


@dataclass(frozen=True)
class ReferenceItem(ReferenceHash):
    relative_path: str = ""
    width: int = 0
    height: int = 0
    minimal_score: float = 0.0
    tags: Tuple[str, ...] = ()


def _normalize_entry(entry: object) -> Optional[ReferenceItem]:
    if not isinstance(entry, dict):
        return None
    relative_path = entry.get("relativePath")
    relative_path = relative_path.strip() if isinstance(relative_path, str) else ""
    width = entry.get("width") if isinstance(entry.get("width"), (int, float)) else 0
    height = entry.get("height") if isinstance(entry.get("height"), (int, float)) else 0
    if not relative_path or width <= 0 or height <= 0:
        return None

    score = entry.get("minimalScore")
    dhash = entry.get("dHash")
    tags = entry.get("tags") or []
    return ReferenceItem(
        id=relative_path,
        dhash=dhash.lower() if is_valid_dhash(dhash) else "",
        relative_path=relative_path,
        width=int(width),
        height=int(height),
        minimal_score=float(score) if isinstance(score, (int, float)) else 0.0,
        tags=tuple(str(t).strip().lower() for t in tags if isinstance(t, str) and t.strip()),
    )


def load_reference_index(root: Path = REFERENCE_ROOT) -> Tuple[ReferenceItem, ...]:
    """Read index.json. A missing or malformed index is an empty corpus."""
    index_path = Path(root) / INDEX_FILENAME
    if not index_path.exists():
        logger.info(f"No reference index at {index_path}")
        return ()
    try:
        data = json.loads(index_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Could not read reference index {index_path}: {e}")
        return ()

    images = data.get("images") if isinstance(data, dict) else None
    items = tuple(
        item for item in (_normalize_entry(entry) for entry in images or []) if item is not None
    )
    logger.info(f"Loaded {len(items)} reference images from {index_path}")
    return items


def reference_hashes(items: Sequence[ReferenceItem]) -> Tuple[ReferenceHash, ...]:
    """The hashes the originality guard compares against (items without a dHash are skipped)."""
    return tuple(ReferenceHash(item.id, item.dhash) for item in items if item.dhash)


def pick_references(
    items: Sequence[ReferenceItem],
    seed: str,
    count: int = MAX_REFERENCES_PER_SLOT,
    preferred_tags: Sequence[str] = (),
) -> List[ReferenceItem]:
    """
    Sample up to ``count`` references for one slot.

    Items tagged with any of ``preferred_tags`` are ranked first, then by
    minimal score. The sample is drawn from the top max(3n, 12) of that
    ranking.
    """
    requested = max(0, min(int(count), MAX_REFERENCES_PER_SLOT))
    if requested == 0 or not items:
        return []

    wanted = {t.lower() for t in preferred_tags if t}
    ranked = sorted(
        items,
        key=lambda item: (0 if wanted & set(item.tags) else 1, -item.minimal_score),
    )
    pool = ranked[: min(len(ranked), max(requested * 3, MIN_POOL_SIZE))]
    return SeededRandom(f"{seed}|references").shuffle(pool)[:requested]


def resolve_reference_path(relative_path: str, root: Path = REFERENCE_ROOT) -> Optional[Path]:
    """Absolute path inside ``root``, or None if the path escapes it."""
    normalized = relative_path.lstrip("/")
    if not normalized:
        return None
    root_path = Path(root).resolve()
    candidate = (root_path / normalized).resolve()
    if candidate != root_path and root_path not in candidate.parents:
        return None
    return candidate


def load_reference_images(items: Sequence[ReferenceItem], root: Path = REFERENCE_ROOT) -> List[bytes]:
    """Raw bytes of each reference that can be read; unreadable files are skipped."""
    images: List[bytes] = []
    for item in items:
        path = resolve_reference_path(item.relative_path, root)
        if path is None or not path.exists():
            logger.warning(f"Skipping unusable reference path: {item.relative_path}")
            continue
        try:
            images.append(path.read_bytes())
        except OSError as e:
            logger.warning(f"Skipping unreadable reference {item.relative_path}: {e}")
    return images


# ── Indexing ──────────────────────────────────────────────────────────────────

IMAGE_EXTS = {".png", ".jpg", ".jpeg", ".webp"}
SCORE_THUMB_SIZE = 256
EDGE_LUMA_DELTA = 0.12


def compute_minimal_score(image: Image.Image) -> float:
    """
    0-1 "how clean-minimal does this look" score.

    Bright (mean luma near 0.82), desaturated and low-edge images score high:
    0.45 * brightness + 0.35 * low saturation + 0.2 * low edge density.
    """
    thumb = image.convert("RGB")
    thumb.thumbnail((SCORE_THUMB_SIZE, SCORE_THUMB_SIZE))
    rgb = np.asarray(thumb, dtype=np.float64) / 255.0
    height, width = rgb.shape[:2]
    if width <= 1 or height <= 1:
        return 0.0

    luma = 0.2126 * rgb[..., 0] + 0.7152 * rgb[..., 1] + 0.0722 * rgb[..., 2]
    mx = rgb.max(axis=2)
    mn = rgb.min(axis=2)
    saturation = np.where(mx > 0, (mx - mn) / np.where(mx > 0, mx, 1), 0.0)

    edge_hits = (np.abs(np.diff(luma, axis=1)) > EDGE_LUMA_DELTA).sum()
    edge_hits += (np.abs(np.diff(luma, axis=0)) > EDGE_LUMA_DELTA).sum()
    edge_checks = height * (width - 1) + width * (height - 1)
    edge_density = edge_hits / edge_checks

    brightness_score = float(np.clip(1 - abs(luma.mean() - 0.82) / 0.82, 0, 1))
    saturation_score = float(np.clip(1 - saturation.mean() / 0.45, 0, 1))
    edge_score = float(np.clip(1 - edge_density / 0.2, 0, 1))

    combined = 0.45 * brightness_score + 0.35 * saturation_score + 0.2 * edge_score
    return round(combined, 3)


def index_image(path: Path, root: Path = REFERENCE_ROOT) -> Optional[dict]:
    """One index.json entry for ``path``; tags are its folder names under ``root``."""
    with Image.open(path) as img:
        img.load()
        width, height = img.size
        if width <= 0 or height <= 0:
            return None
        relative = Path(path).resolve().relative_to(Path(root).resolve())
        return {
            "relativePath": relative.as_posix(),
            "width": width,
            "height": height,
            "minimalScore": compute_minimal_score(img),
            "dHash": compute_dhash(img),
            "tags": [part.lower() for part in relative.parts[:-1]],
        }
