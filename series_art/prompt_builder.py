"""
prompt_builder.py - Turns a planned direction into a background prompt.

The prompt asks for art only: titles and subtitles are laid over the approved
raster later, so every prompt carries the no-text policy up front and
again at the end. Corrective boosts from the validator are appended by the
validator itself, not here.

Usage:
    prompt = build_background_prompt(spec, BriefContext(series_title="Rooted"), palette=["#1F3A5F"])
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional, Sequence

from .director import PlannedDirectionSpec
from .style_families import STYLE_FAMILY_BANK

PreviewShape = Literal["square", "wide", "tall"]

SHAPE_SIZES = {
    "square": "1024x1024",
    "wide": "1536x1024",
    "tall": "1024x1536",
}

MAX_AVOID_WORDS = 16
MAX_DESCRIPTION_CHARS = 360

NO_TEXT_POLICY = (
    "Background only. no text, no letters, no words, no typography, no signage, no watermarks. "
    "No logos and no symbols that resemble letters. "
    "Do not include any readable characters in any language."
)

FINAL_TEXT_REMINDER = (
    "Final text policy reminder: title/subtitle are overlay-only and must NOT appear in the background art."
)

NEUTRAL_PALETTE_HINT = (
    "Use a neutral clean-minimal palette with soft whites, warm grays, slate, and one subtle accent."
)

_SHAPE_HINTS = {
    "square": "Square 1:1 canvas: balanced composition with a calm central or upper-left title zone.",
    "wide": "Wide 3:2 canvas: keep the left third open for a title column, weight imagery to the right.",
    "tall": "Tall 2:3 canvas: keep the upper third open for a stacked title, weight imagery low.",
}


@dataclass
class BriefContext:
    """The parts of a series brief that shape a background prompt."""
    series_title: str = ""
    series_subtitle: str = ""
    series_description: str = ""
    avoid_words: List[str] = field(default_factory=list)
    feedback_request: str = ""


def size_for_shape(shape: str) -> str:
    return SHAPE_SIZES.get(shape, SHAPE_SIZES["square"])


def truncate_for_prompt(value: Optional[str], limit: int) -> str:
    text = " ".join((value or "").split())
    if len(text) <= limit:
        return text
    return text[: limit - 1].rstrip() + "…"


def palette_hint(palette: Sequence[str]) -> str:
    if palette:
        return f"Use restrained tones influenced by this palette: {', '.join(palette)}."
    return NEUTRAL_PALETTE_HINT


def build_background_prompt(
    spec: PlannedDirectionSpec,
    brief: BriefContext,
    palette: Sequence[str] = (),
    shape: PreviewShape = "square",
    variation_seed: str = "",
) -> str:
    """Single-line prompt for one option's background."""
    family = STYLE_FAMILY_BANK.get(spec.style_family) if spec.style_family else None
    description = truncate_for_prompt(brief.series_description, MAX_DESCRIPTION_CHARS)
    avoid_words = [w.strip() for w in brief.avoid_words if w and w.strip()]
    # the series title must never leak into the art either
    for word in (brief.series_title, brief.series_subtitle):
        if word and word.strip() and word.strip() not in avoid_words:
            avoid_words.append(word.strip())
    avoid_list = ", ".join(avoid_words[:MAX_AVOID_WORDS])

    lines = [
        "Create an ORIGINAL premium sermon-series BACKGROUND only.",
        NO_TEXT_POLICY,
        "Create an ORIGINAL design; do not copy reference images; use them only for inspiration.",
        spec.lane_prompt,
        f"Style family: {family.name}. {family.description}" if family else "",
        f"Composition: {spec.composition_type.replace('_', ' ')}; "
        f"background treatment: {spec.background_mode.replace('_', ' ')}.",
        f"Motif focus: {', '.join(spec.motif_focus)}." if spec.motif_focus else "",
        (
            "Reserve a calm, low-detail title stage with generous negative space for a later text overlay."
            if spec.wants_title_stage
            else "Leave intentional negative space for a text overlay in the upper-left area."
        ),
        (
            "Leave a small clean zone where a simple series mark can sit without competing imagery."
            if spec.wants_series_mark
            else ""
        ),
        _SHAPE_HINTS.get(shape, _SHAPE_HINTS["square"]),
        f"Avoid words (never render these as text): {avoid_list}." if avoid_list else "",
        f"Series description mood context (prompt-only, never render): {description}." if description else "",
        palette_hint(palette),
        f"Refinement cues: {brief.feedback_request}." if brief.feedback_request else "",
        FINAL_TEXT_REMINDER,
        f"Variation seed: {variation_seed or spec.id}.",
    ]
    return " ".join(line for line in lines if line)
