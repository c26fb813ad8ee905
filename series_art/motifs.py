"""
motifs.py - Spread a series' motifs across the options of a round.

Every option gets a primary motif no other option has (while the pool lasts)
plus one secondary from the rotation. The option carrying the series mark is
steered towards the motif that best matches the brief's mark ideas.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence

from .seeded_random import SeededRandom

# Stock church-design motifs. They read as filler unless the brief asks for
# them explicitly, so they sit behind the specific motifs in the priority list.
GENERIC_MOTIFS = frozenset({
    "cross",
    "dove",
    "light",
    "sun",
    "sunrise",
    "tree",
    "mountain",
    "water",
    "wave",
    "bible",
    "book",
    "crown",
    "heart",
    "hands",
    "path",
    "road",
    "candle",
    "flame",
    "fire",
    "church",
    "star",
    "globe",
    "bird",
    "leaf",
})

MAX_MOTIF_FOCUS = 2
MIN_TOKEN_LENGTH = 3
NOVELTY_BONUS = 2


def normalize_motifs(items: Optional[Iterable[str]]) -> List[str]:
    """Trim and drop case-insensitive duplicates, keeping the first spelling."""
    seen = set()
    result: List[str] = []
    for item in items or []:
        trimmed = item.strip() if isinstance(item, str) else ""
        lowered = trimmed.lower()
        if not trimmed or lowered in seen:
            continue
        seen.add(lowered)
        result.append(trimmed)
    return result


def normalize_motif_key(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", " ", value.lower()).strip()


def motif_token_set(value: str) -> set:
    cleaned = re.sub(r"[^a-z0-9\s]", " ", value.lower())
    return {token for token in cleaned.split() if len(token) >= MIN_TOKEN_LENGTH}


def is_generic_motif(motif: str) -> bool:
    key = normalize_motif_key(motif)
    if key in GENERIC_MOTIFS:
        return True
    # plural forms ("crosses", "mountains")
    for suffix in ("es", "s"):
        if key.endswith(suffix) and key[: -len(suffix)] in GENERIC_MOTIFS:
            return True
    return False


def _dedupe(items: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(items))


def pick_mark_support_motif(
    motifs: Sequence[str],
    mark_ideas: Sequence[str],
    recent_motifs: Optional[Sequence[str]] = None,
) -> Optional[str]:
    """
    Pick the motif a series mark should lean on.

    Score = count of 3+ char tokens shared with each mark idea, plus a novelty
    bonus when the motif was not used in recent rounds. Non-generic motifs
    are preferred when there are any. Ties keep input order.
    """
    pool = normalize_motifs(motifs)
    if not pool:
        return None

    recent = {normalize_motif_key(m) for m in normalize_motifs(recent_motifs)}
    non_generic = [m for m in pool if not is_generic_motif(m)]
    mark_token_sets = [tokens for tokens in (motif_token_set(idea) for idea in mark_ideas) if tokens]

    def score(motif: str) -> int:
        tokens = motif_token_set(motif)
        overlap = sum(len(tokens & mark_tokens) for mark_tokens in mark_token_sets)
        novelty = 0 if normalize_motif_key(motif) in recent else NOVELTY_BONUS
        return overlap + novelty

    ranked = sorted(non_generic or pool, key=lambda motif: -score(motif))
    return ranked[0]


def assign_motif_focuses(
    run_seed: str,
    wants_series_mark: Sequence[bool],
    motifs: Optional[Sequence[str]] = None,
    allowed_generic_motifs: Optional[Sequence[str]] = None,
    mark_ideas: Optional[Sequence[str]] = None,
    recent_motifs: Optional[Sequence[str]] = None,
) -> List[List[str]]:
    """
    Return one motif focus list (at most two entries) per option.

    ``wants_series_mark`` has one flag per option; its length is the option
    count.
    """
    option_count = len(wants_series_mark)
    if option_count <= 0:
        return []

    pool = normalize_motifs(motifs)
    if not pool:
        return [[] for _ in range(option_count)]

    allowed_generic = {m.lower() for m in normalize_motifs(allowed_generic_motifs)}
    non_generic = [m for m in pool if not is_generic_motif(m)]
    allowed_generic_pool = [m for m in pool if is_generic_motif(m) and m.lower() in allowed_generic]
    fallback_generic = [m for m in pool if is_generic_motif(m) and m.lower() not in allowed_generic]
    recent_keys = {normalize_motif_key(m) for m in normalize_motifs(recent_motifs)}

    rng = SeededRandom(f"{run_seed}|motif-focus")
    base_order = _dedupe(
        rng.shuffle(non_generic) + rng.shuffle(allowed_generic_pool) + rng.shuffle(fallback_generic)
    )
    fresh = [m for m in base_order if normalize_motif_key(m) not in recent_keys]
    stale = [m for m in base_order if normalize_motif_key(m) in recent_keys]
    ordered = fresh + stale

    # ── Primary: unique per option until the pool runs out ──
    used_primary = set()
    primaries: List[str] = []
    for option_index in range(option_count):
        primary = next((m for m in ordered if normalize_motif_key(m) not in used_primary), None)
        if primary is None:
            primary = ordered[option_index % len(ordered)]
        used_primary.add(normalize_motif_key(primary))
        primaries.append(primary)

    # ── Secondary: next distinct motif in the rotation ──
    focuses: List[List[str]] = []
    for option_index, primary in enumerate(primaries):
        rotation = _dedupe(ordered[option_index + 1:] + ordered[: option_index + 1])
        primary_key = normalize_motif_key(primary)
        secondary = next((m for m in rotation if normalize_motif_key(m) != primary_key), None)
        focuses.append([primary, secondary] if secondary else [primary])

    # ── Series mark support ──
    mark_index = next((i for i, wants in enumerate(wants_series_mark) if wants), -1)
    if mark_index >= 0:
        mark_motif = pick_mark_support_motif(
            non_generic or ordered,
            mark_ideas or [],
            recent_motifs or [],
        )
        current = focuses[mark_index]
        if mark_motif and mark_motif not in current:
            if len(current) >= MAX_MOTIF_FOCUS:
                focuses[mark_index] = [mark_motif, current[0]]
            else:
                focuses[mark_index] = current + [mark_motif]

    return [focus[:MAX_MOTIF_FOCUS] for focus in focuses]
