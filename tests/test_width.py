"""Unit tests for display width and grapheme segmentation."""
from hypothesis import given
from hypothesis import strategies as st

from hank_tui.editor.width import (
    boundaries,
    char_width,
    grapheme_width,
    graphemes,
    text_width,
)


class TestCharWidth:
    """Tests for single code point widths."""

    def test_ascii_is_narrow(self):
        assert char_width("a") == 1

    def test_cjk_is_wide(self):
        assert char_width("中") == 2

    def test_emoji_is_wide(self):
        assert char_width("😀") == 2

    def test_combining_mark_is_zero_width(self):
        assert char_width("\u0301") == 0

    def test_control_character_is_zero_width(self):
        assert char_width("\x07") == 0

    def test_zero_width_joiner_is_zero_width(self):
        assert char_width("\u200d") == 0


class TestGraphemes:
    """Tests for grapheme cluster segmentation."""

    def test_plain_text_is_one_cluster_per_character(self):
        assert graphemes("abc") == ["a", "b", "c"]

    def test_combining_mark_joins_base(self):
        assert graphemes("e\u0301x") == ["e\u0301", "x"]

    def test_flag_is_one_cluster(self):
        flag = "\U0001F1E9\U0001F1EA"
        assert graphemes(flag + "a") == [flag, "a"]

    def test_zwj_sequence_is_one_cluster(self):
        family = "\U0001F468\u200d\U0001F469\u200d\U0001F467"
        assert graphemes(family) == [family]

    def test_skin_tone_joins_base(self):
        wave = "\U0001F44B\U0001F3FD"
        assert graphemes(wave) == [wave]

    def test_spacing_mark_joins_base(self):
        ka_i = "\u0915\u093f"
        assert graphemes(ka_i + "a") == [ka_i, "a"]

    def test_conjoining_jamo_form_one_syllable(self):
        gak = "\u1100\u1161\u11a8"
        assert graphemes(gak + "\u1100") == [gak, "\u1100"]

    def test_newline_is_its_own_cluster(self):
        assert graphemes("a\n\u0301") == ["a", "\n", "\u0301"]

    def test_empty_text(self):
        assert graphemes("") == []

    @given(st.text())
    def test_clusters_reassemble_text(self, text: str):
        """Property: segmentation never drops or reorders code points."""
        assert "".join(graphemes(text)) == text

    @given(st.text())
    def test_boundaries_cover_text(self, text: str):
        """Property: boundaries start at 0, end at len and increase strictly."""
        offsets = boundaries(text)
        assert offsets[0] == 0
        assert offsets[-1] == len(text)
        assert all(a < b for a, b in zip(offsets, offsets[1:]))


class TestGraphemeWidth:
    """Tests for cluster widths."""

    def test_flag_is_wide(self):
        assert grapheme_width("\U0001F1E9\U0001F1EA") == 2

    def test_zwj_sequence_is_wide(self):
        assert grapheme_width("\U0001F468\u200d\U0001F469") == 2

    def test_emoji_presentation_selector_widens(self):
        assert grapheme_width("❤\ufe0f") == 2

    def test_combining_cluster_keeps_base_width(self):
        assert grapheme_width("e\u0301") == 1

    def test_spacing_mark_cluster_keeps_base_width(self):
        assert grapheme_width("\u0915\u093f") == 1

    def test_jamo_syllable_is_wide(self):
        assert grapheme_width("\u1100\u1161\u11a8") == 2

    def test_text_width_sums_clusters(self):
        assert text_width("a中😀e\u0301") == 6

    @given(st.text())
    def test_cluster_width_is_bounded(self, text: str):
        """Property: every cluster is 0, 1 or 2 columns wide."""
        assert all(0 <= grapheme_width(g) <= 2 for g in graphemes(text))
