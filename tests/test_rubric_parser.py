"""
Test: rubric extraction from model text and the placeholder fallback.
"""
import pytest

from core.rubric_parser import (DEFAULT_LEVEL_DESCRIPTIONS, FALLBACK_RUBRIC, fallback_rubric, level_text,
                                parse_rubric, points_value, total_points)

MULTI_CRITERIA = """\
Here is your rubric.

## Thesis Statement: 25 points
Outstanding: Clear arguable claim
Proficient - Mostly clear claim
Weight: 30%
Fair: Vague claim
Unsatisfactory: No claim

2. Evidence:
Worth 20 pts overall
Poor: No sources
"""


@pytest.mark.parametrize("text", ["", "random unstructured prose with no colons", None])
def test_unparseable_text_returns_fallback(text):
    rows = parse_rubric(text)
    assert rows == list(FALLBACK_RUBRIC)
    assert [row.criteria for row in rows] == [
        "Content Quality & Understanding",
        "Organization & Structure",
        "Research & Evidence",
        "Writing Mechanics & Style",
        "Critical Thinking & Analysis",
    ]


def test_fallback_copies_are_independent():
    rows = fallback_rubric()
    rows[0].points = "99 points"
    assert FALLBACK_RUBRIC[0].points == "25 points"
    assert parse_rubric("")[0].points == "25 points"


def test_single_criterion_with_two_levels():
    rows = parse_rubric("1. Clarity: \nExcellent: very clear\nGood: mostly clear\n")

    assert len(rows) == 1
    row = rows[0]
    assert row.criteria == "Clarity"
    assert row.excellent == "very clear"
    assert row.good == "mostly clear"
    assert row.satisfactory is None
    assert row.needs_improvement is None
    assert row.excellent_range == "90-100%"
    assert row.needs_improvement_range == "0-69%"


def test_synonyms_points_and_weight():
    first, second = parse_rubric(MULTI_CRITERIA)

    assert first.criteria == "Thesis Statement"
    assert first.points == "25 points"
    assert first.weight == "30%"
    assert first.excellent == "Clear arguable claim"
    assert first.good == "Mostly clear claim"
    assert first.satisfactory == "Vague claim"
    assert first.needs_improvement == "No claim"

    assert second.criteria == "Evidence"
    assert second.points == "20 pts"
    assert second.needs_improvement == "No sources"
    assert second.excellent is None


def test_level_lines_before_any_criterion_are_ignored():
    rows = parse_rubric("Excellent: floating text\n- Focus:\nNeeds Improvement: off topic")
    assert len(rows) == 1
    assert rows[0].excellent is None
    assert rows[0].needs_improvement == "off topic"


def test_total_points_defaults_missing_values():
    rows = parse_rubric(MULTI_CRITERIA + "\n3. Style:\n")
    assert [points_value(row) for row in rows] == [25, 20, 25]
    assert total_points(rows) == 70


def test_fallback_total():
    assert total_points(fallback_rubric()) == 100


def test_level_text_falls_back_to_default():
    row = parse_rubric("1. Clarity:\nGood: mostly clear")[0]
    assert level_text(row, "good") == "mostly clear"
    assert level_text(row, "excellent") == DEFAULT_LEVEL_DESCRIPTIONS["excellent"]
