"""
Tests for prompt_builder module.
"""

from series_art.director import plan_direction_set
from series_art.prompt_builder import (
    FINAL_TEXT_REMINDER,
    MAX_AVOID_WORDS,
    NEUTRAL_PALETTE_HINT,
    NO_TEXT_POLICY,
    BriefContext,
    build_background_prompt,
    size_for_shape,
    truncate_for_prompt,
)
from series_art.style_families import STYLE_FAMILY_BANK


def first_spec(**updates):
    spec = plan_direction_set("prompt-tests", motifs=["oak", "river"])[0]
    return spec.model_copy(update=updates) if updates else spec


class TestHelpers:

    def test_size_for_shape(self):
        assert size_for_shape("square") == "1024x1024"
        assert size_for_shape("wide") == "1536x1024"
        assert size_for_shape("tall") == "1024x1536"
        assert size_for_shape("banner") == "1024x1024"

    def test_truncate(self):
        assert truncate_for_prompt("  a   b  ", 10) == "a b"
        assert truncate_for_prompt("abcdefghij", 5) == "abcd…"
        assert truncate_for_prompt(None, 5) == ""


class TestBuildBackgroundPrompt:
    """Tests for build_background_prompt."""

    def test_no_text_policy_at_both_ends(self):
        prompt = build_background_prompt(first_spec(), BriefContext())
        assert NO_TEXT_POLICY in prompt
        assert prompt.index(NO_TEXT_POLICY) < prompt.index(FINAL_TEXT_REMINDER)
        assert "\n" not in prompt

    def test_carries_direction(self):
        spec = first_spec()
        prompt = build_background_prompt(spec, BriefContext())
        assert spec.lane_prompt in prompt
        assert STYLE_FAMILY_BANK[spec.style_family].name in prompt
        assert f"Motif focus: {', '.join(spec.motif_focus)}." in prompt
        assert prompt.endswith(f"Variation seed: {spec.id}.")

    def test_title_and_subtitle_become_avoid_words(self):
        prompt = build_background_prompt(
            first_spec(), BriefContext(series_title="Rooted", series_subtitle="Grow Deep", avoid_words=["Easter"])
        )
        assert "Avoid words (never render these as text): Easter, Rooted, Grow Deep." in prompt

    def test_avoid_words_capped(self):
        words = [f"w{i}" for i in range(30)]
        prompt = build_background_prompt(first_spec(), BriefContext(avoid_words=words))
        assert f"w{MAX_AVOID_WORDS - 1}," in prompt or f"w{MAX_AVOID_WORDS - 1}." in prompt
        assert f"w{MAX_AVOID_WORDS}," not in prompt

    def test_palette_hint(self):
        assert NEUTRAL_PALETTE_HINT in build_background_prompt(first_spec(), BriefContext())
        prompt = build_background_prompt(first_spec(), BriefContext(), palette=["#1F3A5F", "#E8C468"])
        assert "#1F3A5F, #E8C468" in prompt
        assert NEUTRAL_PALETTE_HINT not in prompt

    def test_stage_and_mark_lines(self):
        staged = build_background_prompt(first_spec(wants_title_stage=True, wants_series_mark=True), BriefContext())
        plain = build_background_prompt(first_spec(wants_title_stage=False, wants_series_mark=False), BriefContext())
        stage_line = "Reserve a calm, low-detail title stage"
        mark_line = "simple series mark can sit"
        assert stage_line in staged and mark_line in staged
        assert stage_line not in plain and mark_line not in plain

    def test_variation_seed_and_feedback(self):
        prompt = build_background_prompt(
            first_spec(), BriefContext(feedback_request="warmer light"), variation_seed="abc-A"
        )
        assert "Refinement cues: warmer light." in prompt
        assert prompt.endswith("Variation seed: abc-A.")

    def test_shape_hint(self):
        assert "Wide 3:2 canvas" in build_background_prompt(first_spec(), BriefContext(), shape="wide")
