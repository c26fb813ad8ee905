"""
catalog.py - Static pool of direction templates.

Each template bundles the stylistic tags the planner diversifies over
(lane family, composition, background mode, type profile, ornament) with the
provider preset ids used downstream. The table is loaded once at import and
never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple

LaneFamily = Literal["premium_modern", "editorial", "minimal", "photo_centric", "retro"]

CompositionType = Literal[
    "asymmetric_split",
    "centered_stack",
    "bottom_anchor",
    "poster_grid",
    "badge_emblem",
    "monumental_overprint",
]

BackgroundMode = Literal[
    "abstract_texture",
    "minimal_gradient",
    "editorial_photo",
    "cinematic_photo",
    "paper_grain",
    "vintage_print",
]

TypeProfile = Literal["condensed_sans", "humanist_sans", "mono_sans", "display_serif", "high_contrast_serif"]

OrnamentProfile = Literal["none", "anchored_rule", "grain", "wheat", "frame_bold"]

TemplateStyleFamily = Literal["clean-min", "modern-collage", "editorial-photo", "illustrated-heritage"]

# Canonical lane order: used to pad the lane plan when the pool runs short.
LANE_FAMILY_ORDER: Tuple[LaneFamily, ...] = (
    "premium_modern",
    "editorial",
    "minimal",
    "photo_centric",
    "retro",
)


@dataclass(frozen=True)
class DirectionTemplate:
    id: str
    lane_family: LaneFamily
    composition_type: CompositionType
    background_mode: BackgroundMode
    type_profile: TypeProfile
    ornament_profile: OrnamentProfile
    preset_key: str                     # background generator preset
    lockup_preset_id: str               # title lockup preset
    template_style_family: TemplateStyleFamily
    lane_prompt: str


# ── Template table ────────────────────────────────────────────────────────────

DIRECTION_TEMPLATES: Tuple[DirectionTemplate, ...] = (
    # Premium modern
    DirectionTemplate(
        id="pm-monument-overprint",
        lane_family="premium_modern",
        composition_type="monumental_overprint",
        background_mode="abstract_texture",
        type_profile="condensed_sans",
        ornament_profile="none",
        preset_key="abstract_gradient_modern_v1",
        lockup_preset_id="monument_overprint",
        template_style_family="modern-collage",
        lane_prompt="Premium modern lane: confident hierarchy, clean luxury spacing, restrained abstract texture.",
    ),
    DirectionTemplate(
        id="pm-knockout-grid",
        lane_family="premium_modern",
        composition_type="poster_grid",
        background_mode="minimal_gradient",
        type_profile="condensed_sans",
        ornament_profile="none",
        preset_key="geo_shapes_negative_v1",
        lockup_preset_id="stacked_stagger",
        template_style_family="modern-collage",
        lane_prompt="Premium modern lane: geometric confidence, disciplined negative space, crisp contemporary rhythm.",
    ),
    DirectionTemplate(
        id="pm-slab-anchor",
        lane_family="premium_modern",
        composition_type="bottom_anchor",
        background_mode="abstract_texture",
        type_profile="condensed_sans",
        ornament_profile="none",
        preset_key="mark_icon_abstract_v1",
        lockup_preset_id="slab_shadow",
        template_style_family="modern-collage",
        lane_prompt="Premium modern lane: anchored typography, elevated polish, minimal-but-bold contrast.",
    ),
    # Editorial
    DirectionTemplate(
        id="ed-arc-editorial",
        lane_family="editorial",
        composition_type="centered_stack",
        background_mode="editorial_photo",
        type_profile="display_serif",
        ornament_profile="grain",
        preset_key="type_editorial_v1",
        lockup_preset_id="arc_title",
        template_style_family="editorial-photo",
        lane_prompt="Editorial lane: magazine-like hierarchy, nuanced serif voice, intentional whitespace and pacing.",
    ),
    DirectionTemplate(
        id="ed-split-serif",
        lane_family="editorial",
        composition_type="asymmetric_split",
        background_mode="editorial_photo",
        type_profile="high_contrast_serif",
        ornament_profile="grain",
        preset_key="type_bw_high_contrast_v1",
        lockup_preset_id="split_title_dynamic",
        template_style_family="editorial-photo",
        lane_prompt="Editorial lane: asymmetric text column, story-driven hierarchy, crisp art-direction feel.",
    ),
    DirectionTemplate(
        id="ed-inline-contrast",
        lane_family="editorial",
        composition_type="centered_stack",
        background_mode="minimal_gradient",
        type_profile="high_contrast_serif",
        ornament_profile="grain",
        preset_key="texture_stone_modern_v1",
        lockup_preset_id="inline_outline",
        template_style_family="editorial-photo",
        lane_prompt="Editorial lane: high-contrast voice, elegant restraint, premium publication aesthetics.",
    ),
    # Minimal
    DirectionTemplate(
        id="min-clean-system",
        lane_family="minimal",
        composition_type="asymmetric_split",
        background_mode="paper_grain",
        type_profile="mono_sans",
        ornament_profile="none",
        preset_key="type_clean_min_v1",
        lockup_preset_id="split_title_dynamic",
        template_style_family="clean-min",
        lane_prompt="Minimal lane: reduction-first design, careful spacing, simple forms and quiet confidence.",
    ),
    DirectionTemplate(
        id="min-swiss-grid",
        lane_family="minimal",
        composition_type="poster_grid",
        background_mode="minimal_gradient",
        type_profile="humanist_sans",
        ornament_profile="none",
        preset_key="type_swiss_grid_v1",
        lockup_preset_id="high_contrast_serif",
        template_style_family="clean-min",
        lane_prompt="Minimal lane: Swiss-inspired grid logic, high legibility, controlled neutral atmosphere.",
    ),
    DirectionTemplate(
        id="min-text-system",
        lane_family="minimal",
        composition_type="bottom_anchor",
        background_mode="paper_grain",
        type_profile="humanist_sans",
        ornament_profile="none",
        preset_key="type_text_system_v1",
        lockup_preset_id="split_title_dynamic",
        template_style_family="clean-min",
        lane_prompt="Minimal lane: typographic system focus, subtle rhythm, no decorative noise.",
    ),
    # Photo-centric
    DirectionTemplate(
        id="photo-cinematic-veil",
        lane_family="photo_centric",
        composition_type="bottom_anchor",
        background_mode="cinematic_photo",
        type_profile="humanist_sans",
        ornament_profile="frame_bold",
        preset_key="photo_veil_cinematic_v1",
        lockup_preset_id="inline_outline",
        template_style_family="editorial-photo",
        lane_prompt="Photo-centric lane: cinematic depth, restrained color grading, clear text lane protection.",
    ),
    DirectionTemplate(
        id="photo-color-block",
        lane_family="photo_centric",
        composition_type="asymmetric_split",
        background_mode="editorial_photo",
        type_profile="humanist_sans",
        ornament_profile="none",
        preset_key="photo_color_block_v1",
        lockup_preset_id="modern_editorial",
        template_style_family="editorial-photo",
        lane_prompt="Photo-centric lane: bold photographic mood with disciplined negative space and clear hierarchy.",
    ),
    DirectionTemplate(
        id="photo-landscape-min",
        lane_family="photo_centric",
        composition_type="centered_stack",
        background_mode="cinematic_photo",
        type_profile="display_serif",
        ornament_profile="grain",
        preset_key="photo_landscape_min_v1",
        lockup_preset_id="high_contrast_serif",
        template_style_family="editorial-photo",
        lane_prompt="Photo-centric lane: atmospheric scene language, quiet typography staging, premium finish.",
    ),
    # Retro
    DirectionTemplate(
        id="retro-classic-inscribed",
        lane_family="retro",
        composition_type="badge_emblem",
        background_mode="vintage_print",
        type_profile="display_serif",
        ornament_profile="frame_bold",
        preset_key="illus_engraved_v1",
        lockup_preset_id="classic_inscription",
        template_style_family="illustrated-heritage",
        lane_prompt="Retro lane: archival craftsmanship, classic serif character, tactile print-era warmth.",
    ),
    DirectionTemplate(
        id="retro-badge-seal",
        lane_family="retro",
        composition_type="badge_emblem",
        background_mode="vintage_print",
        type_profile="display_serif",
        ornament_profile="frame_bold",
        preset_key="illus_flat_min_v1",
        lockup_preset_id="badge_seal",
        template_style_family="illustrated-heritage",
        lane_prompt="Retro lane: emblematic composition, heritage motifs, intentional old-print personality.",
    ),
    DirectionTemplate(
        id="retro-handmade-organic",
        lane_family="retro",
        composition_type="asymmetric_split",
        background_mode="paper_grain",
        type_profile="display_serif",
        ornament_profile="wheat",
        preset_key="seasonal_liturgical_v1",
        lockup_preset_id="handmade_organic",
        template_style_family="illustrated-heritage",
        lane_prompt="Retro lane: hand-crafted organic texture, heritage pacing, restrained symbolic ornament.",
    ),
)


def get_direction_template_catalog() -> Tuple[DirectionTemplate, ...]:
    return DIRECTION_TEMPLATES


def templates_for_lane(lane_family: str) -> Tuple[DirectionTemplate, ...]:
    return tuple(t for t in DIRECTION_TEMPLATES if t.lane_family == lane_family)


def all_preset_keys() -> Tuple[str, ...]:
    """Every background preset key the catalog can route to, in table order."""
    return tuple(dict.fromkeys(t.preset_key for t in DIRECTION_TEMPLATES))
