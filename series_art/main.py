"""
Series Art Direction Engine - command line entry point

Plans a round of background directions and (optionally) generates and
validates one background per option.

Usage:
  python -m series_art.main --seed project-42-r1 --title "Rooted" --motif oak --motif roots
  python -m series_art.main --seed demo --options 2 --prefer minimal --no-images
  python -m series_art.main --seed demo --palette "#1F3A5F" --palette "#E8C468" --series-mark
"""

from __future__ import annotations

import argparse
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, Sequence

from dotenv import load_dotenv
from rich.console import Console
from rich.rule import Rule

from .catalog import LANE_FAMILY_ORDER
from .director import DirectionPlan, PlannedDirectionSpec, display_plan, plan_direction_set
from .generator import GeminiImageGenerator, GeminiTextClassifier
from .prompt_builder import SHAPE_SIZES, BriefContext, build_background_prompt
from .reference_library import (
    REFERENCE_ROOT,
    ReferenceItem,
    load_reference_images,
    load_reference_index,
    pick_references,
    reference_hashes,
)
from .validator import GenerationRequest, GenerationValidator, generate_round

load_dotenv()

console = Console()

OUTPUTS_ROOT = Path("outputs")


# ── CLI ───────────────────────────────────────────────────────────────────────

def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Series Art Direction Engine - plan and validate background directions"
    )
    parser.add_argument("--seed", required=True, help="Run seed; same seed, same plan")
    parser.add_argument("--options", type=int, default=None, help="Number of options (1-3, default 3)")
    parser.add_argument("--preset", action="append", default=[], help="Enabled background preset key (repeatable)")
    parser.add_argument("--prefer", action="append", default=[], choices=list(LANE_FAMILY_ORDER),
                        help="Preferred lane family, placed first (repeatable)")
    parser.add_argument("--series-mark", action="store_true", help="Reserve one option for a series mark")
    parser.add_argument("--motif", action="append", default=[], help="Series motif (repeatable)")
    parser.add_argument("--mark-idea", action="append", default=[], help="Series mark idea (repeatable)")
    parser.add_argument("--title", default="", help="Series title")
    parser.add_argument("--subtitle", default="", help="Series subtitle")
    parser.add_argument("--description", default="", help="Series description")
    parser.add_argument("--palette", action="append", default=[], help="Brand hex colour (repeatable)")
    parser.add_argument("--brand-mode", choices=["brand", "fresh"], default="fresh")
    parser.add_argument("--shape", choices=list(SHAPE_SIZES), default="square")
    parser.add_argument("--reference-dir", default=str(REFERENCE_ROOT),
                        help="Reference corpus root (containing index.json)")
    parser.add_argument("--no-images", action="store_true", help="Plan only, skip generation")
    parser.add_argument("--no-vision", action="store_true", help="Skip the vision text classifier")
    parser.add_argument("--output", default=None, help="Output directory (default: outputs/<timestamp>)")
    return parser.parse_args(argv)


# ── Output helpers ────────────────────────────────────────────────────────────

def save_plan_json(plan: DirectionPlan, output_dir: Path) -> Path:
    """Save the planned round for downstream rendering."""
    json_path = output_dir / "plan.json"
    json_path.write_text(plan.model_dump_json(indent=2), encoding="utf-8")
    return json_path


# ── Request building ──────────────────────────────────────────────────────────

def build_generation_requests(
    directions: Sequence[PlannedDirectionSpec],
    brief: BriefContext,
    corpus: Sequence[ReferenceItem],
    run_seed: str,
    palette: Sequence[str] = (),
    shape: str = "square",
    reference_root: Path = REFERENCE_ROOT,
) -> Dict[int, GenerationRequest]:
    """
    One GenerationRequest per option, keyed by option index.

    Each slot samples its own references; the originality guard compares
    against those sampled references only.
    """
    requests: Dict[int, GenerationRequest] = {}
    for spec in directions:
        refs = pick_references(
            corpus,
            seed=f"{run_seed}|{spec.option_index}",
            preferred_tags=[spec.lane_family, spec.style_family or ""],
        )
        requests[spec.option_index] = GenerationRequest(
            prompt=build_background_prompt(
                spec, brief, palette=palette, shape=shape,
                variation_seed=f"{run_seed}-{spec.option_label}",
            ),
            size=SHAPE_SIZES[shape],
            reference_images=load_reference_images(refs, reference_root),
            reference_hashes=reference_hashes(refs),
            allowed_palette=list(palette) or None,
            label=spec.option_label,
        )
    return requests


# ── Main ──────────────────────────────────────────────────────────────────────

def main(argv=None) -> None:
    logging.basicConfig(
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        level=logging.INFO,
    )
    args = parse_args(argv)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    output_dir = Path(args.output) if args.output else OUTPUTS_ROOT / timestamp
    output_dir.mkdir(parents=True, exist_ok=True)

    console.print(Rule("[bold magenta]Series Art Direction Engine[/bold magenta]"))
    console.print(f"  Seed: [bold]{args.seed}[/bold]  |  Output: [bold]{output_dir}[/bold]")

    # ── Step 1: Plan ─────────────────────────────────────────────────────────
    console.print("\n[bold]Step 1/2 - Planning directions[/bold]")
    directions = plan_direction_set(
        run_seed=args.seed,
        enabled_preset_keys=args.preset,
        option_count=args.options,
        preferred_families=args.prefer,
        series_mark_requested=args.series_mark,
        motifs=args.motif,
        mark_ideas=args.mark_idea,
        brand_mode=args.brand_mode,
        series_title=args.title,
        series_subtitle=args.subtitle,
        series_description=args.description,
    )
    plan = DirectionPlan(run_seed=args.seed, directions=directions)
    display_plan(directions)
    json_path = save_plan_json(plan, output_dir)
    console.print(f"\n  [dim]Saved: {json_path}[/dim]")

    if args.no_images:
        return

    # ── Step 2: Generate + validate ──────────────────────────────────────────
    console.print("\n[bold]Step 2/2 - Generating backgrounds (Gemini)[/bold]")
    reference_root = Path(args.reference_dir)
    brief = BriefContext(
        series_title=args.title,
        series_subtitle=args.subtitle,
        series_description=args.description,
    )
    requests = build_generation_requests(
        directions,
        brief,
        corpus=load_reference_index(reference_root),
        run_seed=args.seed,
        palette=args.palette,
        shape=args.shape,
        reference_root=reference_root,
    )

    validator = GenerationValidator(
        GeminiImageGenerator(),
        None if args.no_vision else GeminiTextClassifier(),
    )
    t0 = time.time()
    round_result = generate_round(validator, requests)

    for option_index, result in sorted(round_result.results.items()):
        label = requests[option_index].label
        out_path = output_dir / f"option_{label}.png"
        out_path.write_bytes(result.raster)
        notes = " ".join(result.retry_notes())
        console.print(f"  [green]✓[/green] {out_path.name} {notes}")
    for option_index, exc in sorted(round_result.failures.items()):
        console.print(f"  [red]✗ Option {requests[option_index].label}: {exc}[/red]")

    console.print(
        f"\n  [green]✓ {len(round_result.results)} of {len(requests)} option(s) - "
        f"{time.time() - t0:.1f}s[/green]"
    )


if __name__ == "__main__":
    main()
