"""
image_hash.py - Difference hash (dHash) for originality checks.

A 64-bit dHash is computed from a 9x8 grayscale thumbnail: each bit says
whether a pixel is brighter than its right-hand neighbour. Two images are
"near copies" when the Hamming distance between their hashes is small.
Hashes are stored as 16 lowercase hex characters.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

import numpy as np
from PIL import Image

HASH_WIDTH = 9
HASH_HEIGHT = 8
HASH_HEX_LENGTH = 16


@dataclass(frozen=True)
class ReferenceHash:
    id: str
    dhash: str


def _open(image: Union[bytes, Image.Image]) -> Image.Image:
    if isinstance(image, Image.Image):
        return image
    return Image.open(io.BytesIO(image))


def compute_dhash(image: Union[bytes, Image.Image]) -> str:
    """dHash of raw image bytes or an open PIL image."""
    thumb = _open(image).convert("L").resize((HASH_WIDTH, HASH_HEIGHT), Image.LANCZOS)
    pixels = np.asarray(thumb, dtype=np.int16)

    value = 0
    for bit in (pixels[:, :-1] > pixels[:, 1:]).ravel():
        value = (value << 1) | int(bit)
    return f"{value:0{HASH_HEX_LENGTH}x}"


def is_valid_dhash(value: object) -> bool:
    if not isinstance(value, str) or len(value) != HASH_HEX_LENGTH:
        return False
    try:
        int(value, 16)
    except ValueError:
        return False
    return True


def hamming_distance(a: str, b: str) -> int:
    return bin(int(a, 16) ^ int(b, 16)).count("1")


def closest_reference(
    dhash: str, references: Iterable[ReferenceHash]
) -> Optional[Tuple[ReferenceHash, int]]:
    """Nearest reference and its distance, or None when there are no references."""
    best: Optional[Tuple[ReferenceHash, int]] = None
    for ref in references:
        distance = hamming_distance(dhash, ref.dhash)
        if best is None or distance < best[1]:
            best = (ref, distance)
    return best
