"""
Tests for motifs module.
"""

from series_art.motifs import (
    assign_motif_focuses,
    is_generic_motif,
    motif_token_set,
    normalize_motif_key,
    normalize_motifs,
    pick_mark_support_motif,
)


class TestNormalization:

    def test_normalize_motifs_dedupes_case_insensitively(self):
        assert normalize_motifs(["Oak", "oak ", " OAK", "River", "", "   "]) == ["Oak", "River"]

    def test_normalize_motifs_none(self):
        assert normalize_motifs(None) == []

    def test_motif_key(self):
        assert normalize_motif_key("  Olive-Branch!! ") == "olive branch"

    def test_token_set_drops_short_tokens(self):
        assert motif_token_set("an oak & ivy leaf") == {"oak", "ivy", "leaf"}

    def test_generic_motifs(self):
        assert is_generic_motif("Cross")
        assert is_generic_motif("crosses")
        assert is_generic_motif("Mountains")
        assert not is_generic_motif("oak")
        assert not is_generic_motif("olive branch")


class TestAssignMotifFocuses:
    """Tests for assign_motif_focuses."""

    def test_no_options(self):
        assert assign_motif_focuses("s", []) == []

    def test_no_motifs_gives_empty_focus(self):
        assert assign_motif_focuses("s", [False, False, False], motifs=[]) == [[], [], []]

    def test_unique_primaries_and_at_most_two(self):
        focuses = assign_motif_focuses("s", [False, False, False], motifs=["oak", "roots", "river", "harvest"])
        assert all(1 <= len(f) <= 2 for f in focuses)
        primaries = [f[0] for f in focuses]
        assert len(set(primaries)) == 3
        for focus in focuses:
            assert len(set(focus)) == len(focus)

    def test_single_motif_is_reused(self):
        focuses = assign_motif_focuses("s", [False, False, False], motifs=["oak"])
        assert focuses == [["oak"], ["oak"], ["oak"]]

    def test_specific_motifs_before_generic(self):
        focuses = assign_motif_focuses("s", [False], motifs=["cross", "oak", "dove"])
        assert focuses[0][0] == "oak"

    def test_allowed_generic_before_other_generic(self):
        focuses = assign_motif_focuses(
            "s", [False, False], motifs=["cross", "dove"], allowed_generic_motifs=["Dove"]
        )
        assert focuses[0][0] == "dove"

    def test_recent_motifs_rotate_to_back(self):
        focuses = assign_motif_focuses("s", [False], motifs=["oak", "river"], recent_motifs=["OAK"])
        assert focuses[0] == ["river", "oak"]

    def test_deterministic(self):
        args = ("seed-1", [False, True, False])
        kwargs = dict(motifs=["oak", "roots", "river", "harvest", "light"], mark_ideas=["river stone seal"])
        assert assign_motif_focuses(*args, **kwargs) == assign_motif_focuses(*args, **kwargs)

    def test_series_mark_slot_gets_matching_motif(self):
        focuses = assign_motif_focuses(
            "s",
            [False, True, False],
            motifs=["oak tree", "river stone", "harvest", "lantern"],
            mark_ideas=["a simple oak leaf seal"],
        )
        assert "oak tree" in focuses[1]
        assert len(focuses[1]) <= 2


class TestPickMarkSupportMotif:

    def test_token_overlap_wins(self):
        assert pick_mark_support_motif(
            ["harvest", "river stone", "oak tree"], ["oak leaf monogram"]
        ) == "oak tree"

    def test_novelty_breaks_even_overlap(self):
        # both overlap once; the recent one loses its novelty bonus
        assert pick_mark_support_motif(
            ["oak tree", "oak branch"], ["oak"], recent_motifs=["oak tree"]
        ) == "oak branch"

    def test_prefers_non_generic(self):
        assert pick_mark_support_motif(["cross", "lantern"], ["cross emblem"]) == "lantern"

    def test_all_generic_falls_back(self):
        assert pick_mark_support_motif(["cross", "dove"], ["dove mark"]) == "dove"

    def test_empty(self):
        assert pick_mark_support_motif([], ["anything"]) is None
