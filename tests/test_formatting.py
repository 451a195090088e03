"""Tests for Rich text rendering of transcript and input rows."""
from hank_tui.chat.layout import LineStyle, TranscriptLine
from hank_tui.editor.wrap import wrap_text
from hank_tui.ui.formatting import input_text, resolve_style, transcript_line_text

VARIABLES = {
    "primary": "#89b4fa",
    "secondary": "#f5c2e7",
    "boost": "#89b4fa 30%",
}


class TestResolveStyle:
    """Tests for theme variable substitution."""

    def test_substitutes_variables(self):
        assert resolve_style("bold $primary", VARIABLES) == "bold #89b4fa"

    def test_drops_unknown_variables(self):
        assert resolve_style("italic $missing", VARIABLES) == "italic"

    def test_keeps_only_the_color_of_compound_values(self):
        assert resolve_style("$boost", VARIABLES) == "#89b4fa"


class TestTranscriptLineText:
    """Tests for transcript rows."""

    def test_header_is_styled_apart(self):
        line = TranscriptLine("12:00:00 You: hi", LineStyle.USER, header_width=14)
        text = transcript_line_text(line, VARIABLES)
        assert text.plain == "12:00:00 You: hi"
        assert (text.spans[0].start, text.spans[0].end) == (0, 14)
        assert (text.spans[1].start, text.spans[1].end) == (14, 16)
        assert text.spans[0].style != text.spans[1].style

    def test_plain_row(self):
        text = transcript_line_text(TranscriptLine("", LineStyle.BLANK), VARIABLES)
        assert text.plain == ""
        assert text.spans == []


class TestInputText:
    """Tests for the input box rendering."""

    def test_cursor_inside_row(self):
        text = input_text(wrap_text("abc", 10), (0, 1))
        assert text.plain == "abc"
        assert [(s.start, s.end, s.style) for s in text.spans] == [(1, 2, "reverse")]

    def test_cursor_at_row_end_draws_space(self):
        text = input_text(wrap_text("abc", 10), (0, 3))
        assert text.plain == "abc "
        assert [(s.start, s.end) for s in text.spans] == [(3, 4)]

    def test_cursor_covers_whole_wide_character(self):
        text = input_text(wrap_text("中a", 10), (0, 0))
        assert [(s.start, s.end) for s in text.spans] == [(0, 1)]

    def test_cursor_on_second_row(self):
        text = input_text(wrap_text("ab\ncd", 10), (1, 0))
        assert text.plain == "ab\ncd"
        assert [(s.start, s.end) for s in text.spans] == [(3, 4)]

    def test_hidden_cursor(self):
        text = input_text(wrap_text("abc", 10), (0, 1), show_cursor=False)
        assert text.spans == []
