"""
director.py - Plans the creative directions for one generation round.

Given a run seed and the set of enabled background presets, picks 1-3
directions (options A/B/C) that are as different from each other as the
template pool allows:

  - one lane family per option, never repeated while the pool has room
  - a template inside each lane, scored for diversity against earlier picks
  - one option reserved for the title stage, one (optionally) for a series mark
  - a style family and up to two motifs layered on top

The whole plan is a pure function of its inputs. No network, no clock, no
global random state: the same seed always yields the same plan.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Dict, List, Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field
from rich.console import Console
from rich.panel import Panel

from .catalog import (
    LANE_FAMILY_ORDER,
    BackgroundMode,
    CompositionType,
    DirectionTemplate,
    LaneFamily,
    OrnamentProfile,
    TemplateStyleFamily,
    TypeProfile,
    templates_for_lane,
)
from .intent import IntentSignal, detect_playful_intent
from .motifs import assign_motif_focuses
from .seeded_random import SeededRandom, hash_to_seed
from .style_families import (
    BRAND_CONSTRAINED_STYLE_FAMILIES,
    PLAYFUL_STYLE_FAMILIES,
    STYLE_FAMILY_BANK,
    STYLE_FAMILY_KEYS,
    TITLE_STAGE_CLUTTER_PRONE_STYLE_FAMILIES,
    TITLE_STAGE_FRIENDLY_STYLE_FAMILIES,
    is_style_family_key,
)

console = Console()

BrandMode = Literal["brand", "fresh"]

OPTION_LABELS = ("A", "B", "C")
MAX_OPTIONS = 3
DEFAULT_RUN_SEED = "run-seed"
TIE_EPSILON = 1e-6


# ── Output record ─────────────────────────────────────────────────────────────

class PlannedDirectionSpec(BaseModel):
    """One planned option: the template it was built from plus per-round choices."""
    model_config = ConfigDict(frozen=True)

    id: str
    lane_family: LaneFamily
    composition_type: CompositionType
    background_mode: BackgroundMode
    type_profile: TypeProfile
    ornament_profile: OrnamentProfile
    preset_key: str
    lockup_preset_id: str
    template_style_family: TemplateStyleFamily
    lane_prompt: str

    option_index: int = Field(ge=0, le=MAX_OPTIONS - 1)
    option_label: Literal["A", "B", "C"]
    wants_series_mark: bool = False
    wants_title_stage: bool = False
    style_family: Optional[str] = None
    motif_focus: List[str] = Field(default_factory=list, max_length=2)


class DirectionPlan(BaseModel):
    """A full round: the seed it was planned from and its options in order."""
    run_seed: str
    directions: List[PlannedDirectionSpec]


def option_label(option_index: int) -> str:
    return OPTION_LABELS[option_index] if 0 <= option_index < len(OPTION_LABELS) else "C"


def clamp_option_count(option_count: Optional[int]) -> int:
    if option_count is None:
        return MAX_OPTIONS
    return max(1, min(int(option_count), MAX_OPTIONS))


# ── Lane & template selection ─────────────────────────────────────────────────

def diversity_score(candidate: DirectionTemplate, chosen: Sequence[DirectionTemplate]) -> float:
    """
    Higher is more different from everything already chosen.

    A shared lane family is a -1000 veto for that pairing; otherwise each
    differing tag earns points and each shared tag costs a little.
    """
    score = 0
    for current in chosen:
        if candidate.lane_family == current.lane_family:
            score -= 1000
            continue
        score += 6 if candidate.composition_type != current.composition_type else -2
        score += 4 if candidate.background_mode != current.background_mode else -1
        score += 4 if candidate.type_profile != current.type_profile else -1
        score += 3 if candidate.ornament_profile != current.ornament_profile else -1
        score += 2 if candidate.template_style_family != current.template_style_family else 0
        score += 1 if candidate.preset_key != current.preset_key else -2
        score += 1 if candidate.lockup_preset_id != current.lockup_preset_id else -2
    return score


def pick_best_template(
    pool: Sequence[DirectionTemplate],
    chosen: Sequence[DirectionTemplate],
    rng: SeededRandom,
    slot_seed: str,
) -> DirectionTemplate:
    scored = [
        (template, diversity_score(template, chosen) + hash_to_seed(f"{slot_seed}|{template.id}") / 0xFFFFFFFF)
        for template in pool
    ]
    scored.sort(key=lambda entry: -entry[1])
    best = scored[0][1]
    ties = [template for template, score in scored if abs(score - best) < TIE_EPSILON]
    return rng.pick(ties or [scored[0][0]])


def pool_for_lane_family(lane_family: str, enabled_preset_keys: set) -> List[DirectionTemplate]:
    """Templates of a lane whose preset is enabled, or the whole lane if none are."""
    family_pool = list(templates_for_lane(lane_family))
    enabled_pool = [t for t in family_pool if t.preset_key in enabled_preset_keys]
    return enabled_pool or family_pool


def pick_lane_families(
    rng: SeededRandom,
    available_families: Sequence[str],
    preferred_families: Optional[Sequence[str]] = None,
) -> List[str]:
    """Preferred families first (in the caller's order), the rest shuffled."""
    available = set(available_families)
    preferred = list(dict.fromkeys(f for f in preferred_families or [] if f in available))
    rest = [f for f in available_families if f not in preferred]
    return preferred + rng.shuffle(rest)


# ── Style families ────────────────────────────────────────────────────────────

def _recent_style_family_ranks(recent_style_families: Optional[Sequence[str]]) -> Dict[str, int]:
    """Rank 0 is the most recent. Unknown keys and repeats are dropped."""
    ranks: Dict[str, int] = {}
    for family in recent_style_families or []:
        if is_style_family_key(family) and family not in ranks:
            ranks[family] = len(ranks)
    return ranks


def style_family_score(
    family: str,
    lane_family: str,
    wants_series_mark: bool,
    wants_title_stage: bool,
    recent_ranks: Dict[str, int],
    preferred_lane_families: set,
    brand_mode: BrandMode,
    intent: IntentSignal,
) -> int:
    record = STYLE_FAMILY_BANK[family]
    score = 0

    if record.lane_family == lane_family:
        score += 4
    if record.lane_family in preferred_lane_families:
        score += 2

    recent_rank = recent_ranks.get(family)
    if recent_rank is None:
        score += 8
    else:
        # very recent use costs more than older use
        score += min(0, recent_rank - 8)

    if wants_series_mark:
        score += 6 if record.mark_friendly else -3

    if wants_title_stage:
        if family in TITLE_STAGE_FRIENDLY_STYLE_FAMILIES:
            score += 6
        if family in TITLE_STAGE_CLUTTER_PRONE_STYLE_FAMILIES:
            score -= 6

    if brand_mode == "brand":
        score += 2 if family in BRAND_CONSTRAINED_STYLE_FAMILIES else -1

    if family in PLAYFUL_STYLE_FAMILIES:
        if intent.level == "solemn":
            score -= 24
        elif intent.level == "high":
            score += 7
        else:
            score -= 4

    return score


def assign_style_families(
    run_seed: str,
    templates: Sequence[DirectionTemplate],
    series_mark_index: int,
    title_stage_index: int,
    intent: IntentSignal,
    preferred_lane_families: Optional[Sequence[str]] = None,
    recent_style_families: Optional[Sequence[str]] = None,
    brand_mode: BrandMode = "fresh",
) -> List[str]:
    """One style family per option; no family is used twice in a round."""
    seeded_order = SeededRandom(f"{run_seed}|style-family-order").shuffle(STYLE_FAMILY_KEYS)
    order_index = {family: index for index, family in enumerate(seeded_order)}
    recent_ranks = _recent_style_family_ranks(recent_style_families)
    preferred = set(preferred_lane_families or [])

    picks: List[str] = []
    used = set()
    for option_index, template in enumerate(templates):
        candidates = [f for f in seeded_order if f not in used]
        if not candidates:
            break

        def rank_key(family: str):
            score = style_family_score(
                family,
                template.lane_family,
                option_index == series_mark_index,
                option_index == title_stage_index,
                recent_ranks,
                preferred,
                brand_mode,
                intent,
            )
            return (-score, order_index[family], hash_to_seed(f"{run_seed}|style-family|{option_index}|{family}"))

        selected = min(candidates, key=rank_key)
        picks.append(selected)
        used.add(selected)

    return picks


# ── Title stage & series mark ─────────────────────────────────────────────────

TITLE_STAGE_LANE_SCORES: Dict[str, int] = {
    "premium_modern": 4,
    "editorial": 1,
    "minimal": 5,
    "photo_centric": -3,
    "retro": 0,
}

TITLE_STAGE_COMPOSITION_SCORES: Dict[str, int] = {
    "asymmetric_split": 3,
    "centered_stack": 2,
    "bottom_anchor": 2,
    "poster_grid": 4,
    "badge_emblem": 1,
    "monumental_overprint": 3,
}

TITLE_STAGE_BACKGROUND_MODE_SCORES: Dict[str, int] = {
    "abstract_texture": 4,
    "minimal_gradient": 6,
    "editorial_photo": -2,
    "cinematic_photo": -3,
    "paper_grain": 3,
    "vintage_print": 1,
}


def title_stage_preference_score(template: DirectionTemplate) -> int:
    """How much room the template leaves for a clean title area."""
    score = TITLE_STAGE_LANE_SCORES[template.lane_family]
    score += TITLE_STAGE_COMPOSITION_SCORES[template.composition_type]
    score += TITLE_STAGE_BACKGROUND_MODE_SCORES[template.background_mode]
    score += 2 if template.template_style_family in ("clean-min", "modern-collage") else -1
    score += 1 if template.ornament_profile == "none" else -1
    return score


def pick_title_stage_index(run_seed: str, templates: Sequence[DirectionTemplate]) -> int:
    if not templates:
        return -1
    ranked = sorted(
        range(len(templates)),
        key=lambda i: (
            -title_stage_preference_score(templates[i]),
            hash_to_seed(f"{run_seed}|title-stage|{i}|{templates[i].id}"),
        ),
    )
    return ranked[0]


def pick_series_mark_index(run_seed: str, option_count: int, requested: bool) -> int:
    """
    Option index that carries the series mark, or -1.

    Derived from the seed alone; the chosen templates do not influence it.
    """
    if not requested or option_count <= 0:
        return -1
    return hash_to_seed(f"{run_seed}|series-mark") % option_count


# ── Planner ───────────────────────────────────────────────────────────────────

def plan_direction_set(
    run_seed: str,
    enabled_preset_keys: Sequence[str] = (),
    option_count: Optional[int] = None,
    preferred_families: Optional[Sequence[str]] = None,
    series_mark_requested: bool = False,
    motifs: Optional[Sequence[str]] = None,
    allowed_generic_motifs: Optional[Sequence[str]] = None,
    mark_ideas: Optional[Sequence[str]] = None,
    recent_motifs: Optional[Sequence[str]] = None,
    recent_style_families: Optional[Sequence[str]] = None,
    brand_mode: str = "fresh",
    series_title: Optional[str] = None,
    series_subtitle: Optional[str] = None,
    series_description: Optional[str] = None,
    design_notes: Optional[str] = None,
    topic_names: Optional[Sequence[str]] = None,
) -> List[PlannedDirectionSpec]:
    """
    Plan one round of directions.

    Args:
        run_seed:             Seed for every choice in the round. Blank uses "run-seed".
        enabled_preset_keys:  Background presets the caller can render. Lanes with
                              no enabled preset fall back to their full pool.
        option_count:         1-3; None means 3.
        preferred_families:   Lane families to place first, in order.
        series_mark_requested: Reserve one option for a series mark.
        motifs / allowed_generic_motifs / mark_ideas / recent_motifs:
                              Motif inputs, see motifs.assign_motif_focuses.
        recent_style_families: Style families from recent rounds, most recent first.
        brand_mode:           "brand" favours palette-disciplined style families.
        series_*, design_notes, topic_names:
                              Free text read only for playful/solemn tone.

    Returns:
        PlannedDirectionSpec per option, ordered by option_index.
    """
    count = clamp_option_count(option_count)
    seed = (run_seed or "").strip() or DEFAULT_RUN_SEED
    rng = SeededRandom(seed)
    enabled = {key.strip() for key in enabled_preset_keys if key and key.strip()}

    available = [lane for lane in LANE_FAMILY_ORDER if pool_for_lane_family(lane, enabled)]
    lane_order = pick_lane_families(rng, available, preferred_families)

    chosen_lanes: List[str] = []
    for lane in list(lane_order) + list(LANE_FAMILY_ORDER):
        if len(chosen_lanes) >= count:
            break
        if lane not in chosen_lanes:
            chosen_lanes.append(lane)

    chosen_templates: List[DirectionTemplate] = []
    for option_index in range(count):
        lane = chosen_lanes[option_index] if option_index < len(chosen_lanes) else chosen_lanes[-1]
        template = pick_best_template(
            pool_for_lane_family(lane, enabled),
            chosen_templates,
            rng,
            f"{seed}|{option_index}",
        )
        chosen_templates.append(template)

    series_mark_index = pick_series_mark_index(seed, count, series_mark_requested)
    title_stage_index = pick_title_stage_index(seed, chosen_templates)

    intent = detect_playful_intent(
        title=series_title,
        subtitle=series_subtitle,
        description=series_description,
        design_notes=design_notes,
        topics=topic_names,
    )
    style_families = assign_style_families(
        seed,
        chosen_templates,
        series_mark_index,
        title_stage_index,
        intent,
        preferred_lane_families=preferred_families,
        recent_style_families=recent_style_families,
        brand_mode="brand" if brand_mode == "brand" else "fresh",
    )
    motif_focuses = assign_motif_focuses(
        seed,
        [i == series_mark_index for i in range(count)],
        motifs=motifs,
        allowed_generic_motifs=allowed_generic_motifs,
        mark_ideas=mark_ideas,
        recent_motifs=recent_motifs,
    )

    return [
        PlannedDirectionSpec(
            **asdict(template),
            option_index=option_index,
            option_label=option_label(option_index),
            wants_series_mark=option_index == series_mark_index,
            wants_title_stage=option_index == title_stage_index,
            style_family=style_families[option_index] if option_index < len(style_families) else None,
            motif_focus=motif_focuses[option_index],
        )
        for option_index, template in enumerate(chosen_templates)
    ]


# ── Display helpers ───────────────────────────────────────────────────────────

LANE_COLORS = {
    "premium_modern": "cyan",
    "editorial": "magenta",
    "minimal": "white",
    "photo_centric": "yellow",
    "retro": "red",
}


def display_plan(directions: Sequence[PlannedDirectionSpec]) -> None:
    """Pretty-print a planned round to the terminal."""
    for d in directions:
        color = LANE_COLORS.get(d.lane_family, "white")
        family = STYLE_FAMILY_BANK.get(d.style_family) if d.style_family else None
        flags = []
        if d.wants_title_stage:
            flags.append("title stage")
        if d.wants_series_mark:
            flags.append("series mark")
        body = (
            f"[bold]Lane:[/bold] [{color}]{d.lane_family}[/{color}]\n"
            f"[bold]Composition:[/bold] {d.composition_type}  "
            f"[bold]Background:[/bold] {d.background_mode}\n"
            f"[bold]Type:[/bold] {d.type_profile}  [bold]Ornament:[/bold] {d.ornament_profile}\n"
            f"[bold]Preset:[/bold] {d.preset_key}  [bold]Lockup:[/bold] {d.lockup_preset_id}\n"
            f"[bold]Style family:[/bold] {family.name if family else '-'}\n"
            f"[bold]Motifs:[/bold] {', '.join(d.motif_focus) or '-'}"
        )
        if flags:
            body += f"\n[bold]Reserved:[/bold] {', '.join(flags)}"
        console.print(
            Panel(
                body,
                title=f"[bold]Option {d.option_label} - {d.id}[/bold]",
                border_style=color,
            )
        )
