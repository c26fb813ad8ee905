"""
intent.py - Keyword classifier for the tone of a series.

Reads the free-text fields of a brief (title, subtitle, description, design
notes, topics) and decides whether playful style families are welcome:

  solemn - any solemn keyword matched. Hard veto, playful hits are ignored.
  high   - playful keywords matched and nothing solemn.
  low    - nothing matched.

Only style-family scoring reads this signal; template selection does not.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Literal, Optional, Sequence, Tuple

IntentLevel = Literal["low", "high", "solemn"]

PLAYFUL_INTENT_KEYWORDS: Tuple[str, ...] = (
    "summer",
    "summer daze",
    "kids",
    "kid",
    "children",
    "child",
    "vbs",
    "vacation bible school",
    "camp",
    "kids camp",
    "gratitude",
    "joy",
    "celebration",
    "celebrate",
    "party",
    "family",
    "fun",
    "welcome",
)

SOLEMN_INTENT_KEYWORDS: Tuple[str, ...] = (
    "good friday",
    "lament",
    "suffering",
    "suffer",
    "repentance",
    "repent",
    "death",
    "judgment",
    "judgement",
    "mourning",
    "grief",
    "holy saturday",
    "ashes",
    "ash wednesday",
)


@dataclass(frozen=True)
class IntentSignal:
    is_playful: bool
    level: IntentLevel
    reason_keywords: Tuple[str, ...] = ()
    matched_playful_keywords: Tuple[str, ...] = ()
    matched_solemn_keywords: Tuple[str, ...] = ()


def normalize_intent_text(text: str) -> str:
    """Lowercase, non-alphanumerics to spaces, collapse whitespace."""
    lowered = re.sub(r"[^a-z0-9\s]", " ", text.lower())
    return re.sub(r"\s+", " ", lowered).strip()


def _keyword_hits(normalized_text: str, keywords: Iterable[str]) -> List[str]:
    if not normalized_text:
        return []
    hits: List[str] = []
    for keyword in keywords:
        needle = normalize_intent_text(keyword)
        if not needle:
            continue
        if re.search(rf"\b{re.escape(needle)}\b", normalized_text) and keyword not in hits:
            hits.append(keyword)
    return hits


def detect_playful_intent(
    title: Optional[str] = None,
    subtitle: Optional[str] = None,
    description: Optional[str] = None,
    design_notes: Optional[str] = None,
    topics: Optional[Sequence[str]] = None,
) -> IntentSignal:
    joined = " ".join(
        part for part in [title or "", subtitle or "", description or "", design_notes or "", *(topics or [])]
        if part
    )
    text = normalize_intent_text(joined)
    playful = tuple(_keyword_hits(text, PLAYFUL_INTENT_KEYWORDS))
    solemn = tuple(_keyword_hits(text, SOLEMN_INTENT_KEYWORDS))

    if solemn:
        return IntentSignal(False, "solemn", solemn, playful, solemn)
    if playful:
        return IntentSignal(True, "high", playful, playful, solemn)
    return IntentSignal(False, "low", (), playful, solemn)
