"""
style_families.py - Secondary style tags layered onto a planned direction.

A style family is finer-grained than a lane family: it names the visual
language (papercut, blueprint, risograph ...) the background should speak.
The bank below is the process-wide table the planner scores against. Each
family maps back to the lane family it sits most naturally in, and carries
the flags the scorer cares about:

  mark_friendly    - can host a small series mark without fighting it
  TITLE_STAGE_*    - friendly to (or cluttering) a reserved title stage
  BRAND_CONSTRAINED - behaves well under a locked brand palette
  PLAYFUL          - reads as light-hearted; vetoed for solemn series
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Mapping, Tuple

from .catalog import LaneFamily


@dataclass(frozen=True)
class StyleFamily:
    key: str
    name: str
    description: str
    lane_family: LaneFamily
    best_for: Tuple[str, ...]
    mark_friendly: bool


def _family(key, name, description, lane_family, best_for, mark_friendly) -> StyleFamily:
    return StyleFamily(key, name, description, lane_family, tuple(best_for), mark_friendly)


# ── Bank ──────────────────────────────────────────────────────────────────────

_BANK: Tuple[StyleFamily, ...] = (
    _family(
        "modern_geometric_blocks", "Modern Geometric Blocks",
        "Bold shape-led modernism with clean blocks, overlaps, and disciplined edge control.",
        "premium_modern", ["vision series", "leadership themes", "clarity-first messaging"], True,
    ),
    _family(
        "abstract_organic_papercut", "Abstract Organic Papercut",
        "Layered organic silhouettes with tactile edges and depth-by-overlap.",
        "minimal", ["pastoral themes", "restoration", "grace and growth"], False,
    ),
    _family(
        "editorial_grid_minimal", "Editorial Grid Minimal",
        "Magazine-grade grid logic with strict spacing, restraint, and hierarchy.",
        "editorial", ["teaching series", "verse-by-verse studies", "formal campaigns"], True,
    ),
    _family(
        "typographic_only_statement", "Typographic Only Statement",
        "Type-led poster language where form, rhythm, and spacing drive the image.",
        "minimal", ["proclamation themes", "short punchy titles", "identity-forward campaigns"], True,
    ),
    _family(
        "monoline_icon_system", "Monoline Icon System",
        "Consistent stroke-based iconography integrated with modern layout structure.",
        "premium_modern", ["series branding systems", "discipleship tracks", "multi-week sets"], True,
    ),
    _family(
        "symbol_collage", "Symbol Collage",
        "Curated symbolic fragments arranged with controlled overlap and narrative rhythm.",
        "retro", ["storytelling arcs", "narrative series", "thematic transitions"], False,
    ),
    _family(
        "halftone_print_poster", "Halftone Print Poster",
        "Posterized print language with halftone fields, strong contrast, and controlled grit.",
        "retro", ["youth events", "high-energy campaigns", "announcement-driven graphics"], False,
    ),
    _family(
        "risograph_duotone", "Risograph Duotone",
        "Two-ink risograph feel with offset registration charm and matte analog character.",
        "retro", ["seasonal campaigns", "creative workshops", "alt editorial series"], False,
    ),
    _family(
        "blueprint_diagram", "Blueprint Diagram",
        "Technical drawing language with measured lines, callout logic, and structural clarity.",
        "premium_modern", ["process series", "doctrine frameworks", "vision architecture themes"], True,
    ),
    _family(
        "map_wayfinding", "Map Wayfinding",
        "Route, marker, and wayfinding cues that suggest journey without literal cartography overload.",
        "editorial", ["journey themes", "discipleship paths", "mission-oriented series"], False,
    ),
    _family(
        "architecture_structural_forms", "Architecture Structural Forms",
        "Massing, beams, frames, and structural geometry with premium spatial discipline.",
        "premium_modern", ["vision casting", "church identity", "capital campaigns"], False,
    ),
    _family(
        "textile_woven_pattern", "Textile Woven Pattern",
        "Thread, weave, and loom-inspired rhythms with tactile warmth and repeat discipline.",
        "retro", ["community themes", "family series", "hospitality emphasis"], False,
    ),
    _family(
        "topographic_contour_lines", "Topographic Contour Lines",
        "Layered contour maps with elevation rhythm and calm directional flow.",
        "editorial", ["journey + growth themes", "formation series", "outdoor/service themes"], False,
    ),
    _family(
        "light_gradient_stage", "Light Gradient Stage",
        "Atmospheric gradients engineered to create intentional text staging zones.",
        "minimal", ["invitation campaigns", "season transitions", "contemplative themes"], False,
    ),
    _family(
        "painterly_atmosphere", "Painterly Atmosphere",
        "Brush-like tonal fields and atmospheric blending with intentional restraint.",
        "photo_centric", ["lament/hope themes", "worship series", "reflective seasons"], False,
    ),
    _family(
        "photographic_graphic_overlay", "Photographic Graphic Overlay",
        "Photo-led base with disciplined graphic overlays and protected text lanes.",
        "photo_centric", ["event promos", "testimony themes", "city/outreach contexts"], False,
    ),
    _family(
        "macro_texture_minimal", "Macro Texture Minimal",
        "Close-cropped tactile surfaces with minimal composition and generous negative space.",
        "minimal", ["minimal campaigns", "prayer/quiet themes", "mature brand look"], False,
    ),
    _family(
        "engraved_heritage", "Engraved Heritage",
        "Classic engraved linework and letterpress-era discipline with restrained heritage tone.",
        "retro", ["heritage milestones", "historic themes", "formal celebrations"], False,
    ),
    _family(
        "manuscript_marginalia", "Manuscript Marginalia",
        "Margin-note and annotation-inspired compositions with scholarly warmth.",
        "editorial", ["study series", "biblical literacy", "historical context themes"], False,
    ),
    _family(
        "emblem_seal_system", "Emblem Seal System",
        "Structured emblem language with repeatable seal logic and strong identity cohesion.",
        "retro", ["series identity systems", "multi-channel campaigns", "church-wide initiatives"], True,
    ),
    _family(
        "playful_neon_pool", "Playful Neon Pool",
        "Summer-forward playful energy with splash silhouettes, wave arcs, and a calm title stage.",
        "premium_modern", ["summer", "joy", "celebration", "gratitude", "kids/vbs when indicated"], True,
    ),
    _family(
        "comic_storyboard", "Comic Storyboard",
        "Hand-drawn ink and wash with storyboard panel structure and editorial narrative pacing.",
        "editorial", ["gratitude", "narrative series", "parables", "story themes", "testimony series"], True,
    ),
    _family(
        "bubbly_3d_clay", "Bubbly 3D Clay",
        "Rounded chunky 3D clay-like forms with toy-like softness and clear hierarchy.",
        "minimal", ["kids ministry series", "family series", "joy/celebration themes", "summer", "welcome campaigns"], True,
    ),
    _family(
        "sticker_pack_pop", "Sticker Pack Pop",
        "Sticker-sheet decal style with clean outlines, subtle shadows, and strong negative space.",
        "premium_modern", ["youth", "events", "summer", "vision sunday modern tone", "topical series"], True,
    ),
    _family(
        "paper_cut_collage_playful", "Paper Cut Collage Playful",
        "Tactile cut-paper layering with playful structure, subtle tape accents, and clear hierarchy.",
        "minimal", ["gratitude/thanksgiving", "community series", "topical series", "summer"], True,
    ),
)

STYLE_FAMILY_KEYS: Tuple[str, ...] = tuple(f.key for f in _BANK)

STYLE_FAMILY_BANK: Mapping[str, StyleFamily] = MappingProxyType({f.key: f for f in _BANK})

TITLE_STAGE_FRIENDLY_STYLE_FAMILIES: FrozenSet[str] = frozenset({
    "light_gradient_stage",
    "editorial_grid_minimal",
    "modern_geometric_blocks",
    "abstract_organic_papercut",
    "macro_texture_minimal",
    "playful_neon_pool",
    "comic_storyboard",
    "bubbly_3d_clay",
    "sticker_pack_pop",
    "paper_cut_collage_playful",
})

TITLE_STAGE_CLUTTER_PRONE_STYLE_FAMILIES: FrozenSet[str] = frozenset({
    "symbol_collage",
    "map_wayfinding",
    "textile_woven_pattern",
    "manuscript_marginalia",
})

BRAND_CONSTRAINED_STYLE_FAMILIES: FrozenSet[str] = frozenset({
    "modern_geometric_blocks",
    "editorial_grid_minimal",
    "typographic_only_statement",
    "monoline_icon_system",
    "blueprint_diagram",
    "light_gradient_stage",
    "macro_texture_minimal",
    "emblem_seal_system",
})

PLAYFUL_STYLE_FAMILIES: FrozenSet[str] = frozenset({
    "playful_neon_pool",
    "comic_storyboard",
    "bubbly_3d_clay",
    "sticker_pack_pop",
    "paper_cut_collage_playful",
})


def is_style_family_key(value: object) -> bool:
    return isinstance(value, str) and value in STYLE_FAMILY_BANK
