"""
Tests for intent module.
"""

from series_art.intent import detect_playful_intent, normalize_intent_text


class TestNormalizeIntentText:

    def test_lowercases_and_strips_punctuation(self):
        assert normalize_intent_text("  Summer-Daze!!  KIDS ") == "summer daze kids"


class TestDetectPlayfulIntent:
    """Tests for detect_playful_intent."""

    def test_playful_keywords_give_high(self):
        """Should return high when playful keywords match and nothing solemn does."""
        signal = detect_playful_intent(title="Summer Daze", description="A series for kids and family")
        assert signal.level == "high"
        assert signal.is_playful is True
        assert "summer" in signal.matched_playful_keywords
        assert "summer daze" in signal.matched_playful_keywords
        assert "kids" in signal.matched_playful_keywords
        assert signal.reason_keywords == signal.matched_playful_keywords

    def test_solemn_vetoes_playful(self):
        """Should return solemn even when playful keywords also match."""
        signal = detect_playful_intent(
            title="Good Friday",
            subtitle="a celebration of the cross",
            topics=["joy", "lament"],
        )
        assert signal.level == "solemn"
        assert signal.is_playful is False
        assert "good friday" in signal.matched_solemn_keywords
        assert "lament" in signal.matched_solemn_keywords
        assert "celebration" in signal.matched_playful_keywords
        assert signal.reason_keywords == signal.matched_solemn_keywords

    def test_no_keywords_give_low(self):
        signal = detect_playful_intent(title="Romans", description="Verse by verse through the letter.")
        assert signal.level == "low"
        assert signal.is_playful is False
        assert signal.reason_keywords == ()

    def test_whole_word_matching(self):
        """Should not match keywords inside longer words."""
        signal = detect_playful_intent(title="Funeral planning", description="kidney health")
        assert signal.level == "low"

    def test_design_notes_and_topics_are_read(self):
        assert detect_playful_intent(design_notes="VBS week!").level == "high"
        assert detect_playful_intent(topics=["Ash Wednesday"]).level == "solemn"

    def test_all_empty(self):
        signal = detect_playful_intent()
        assert signal.level == "low"
        assert signal.matched_playful_keywords == ()
        assert signal.matched_solemn_keywords == ()
