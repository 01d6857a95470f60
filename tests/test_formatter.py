"""
Test: response formatting pipeline.
"""
from core.formatter import (RUBRIC_STEPS, TEXT_STEPS, bold, format_plain, format_response, headings, italic,
                            percentage_badges)


def test_full_pipeline_output():
    text = "## Title\nSome **bold** and *it*.\n\nNext"
    assert format_response(text) == (
        "<p><h2>Title</h2><br>Some <strong>bold</strong> and <em>it</em>.</p><p>Next</p>"
    )


def test_formatting_is_deterministic():
    text = "## Feedback\n**Score:** 85-90%\n\n* strengths *\nline\nline"
    assert format_response(text) == format_response(text)
    assert format_response(text, rubric=True) == format_response(text, rubric=True)


def test_badges_only_in_rubric_mode():
    text = "Excellent: 90-100%"
    assert "badge" not in format_response(text)
    assert format_response(text, rubric=True) == '<p>Excellent: <span class="badge">90-100%</span></p>'


def test_bold_runs_before_italic():
    assert italic(bold("**a** *b*")) == "<strong>a</strong> <em>b</em>"


def test_heading_stops_at_line_end():
    assert headings("## One\n## Two") == "<h2>One</h2>\n<h2>Two</h2>"


def test_percentage_badge_step():
    assert percentage_badges("0-69% and 5%") == '<span class="badge">0-69%</span> and 5%'


def test_step_order():
    assert [name for name, _ in TEXT_STEPS] == [
        "headings", "bold", "italic", "paragraphs", "line_breaks", "wrap_paragraph",
    ]
    assert [name for name, _ in RUBRIC_STEPS][3] == "percentage_badges"


def test_empty_text_still_wrapped():
    assert format_response("") == "<p></p>"


def test_plain_view_is_unchanged():
    text = "## raw **text**\n"
    assert format_plain(text) == text
