"""
Test: export artifacts (txt, json, pdf) and the rubric HTML page.
"""
import json
import re
from datetime import datetime

import pytest

from core.exporter import export_filename, export_response, export_rubric_html, save_artifact, slugify
from core.rubric_parser import RubricRow, fallback_rubric

NOW = datetime(2026, 5, 4, 13, 5, 9)


def test_filename_shape():
    artifact = export_response("hi", "My Feature!", "txt")
    assert re.fullmatch(r"my_feature!_\d{4}-\d{2}-\d{2}\.txt", artifact.filename)


def test_slug_collapses_whitespace_runs():
    assert slugify("Automatic   Grading\tTool") == "automatic_grading_tool"
    assert export_filename("IEP-Aware Rewrite", "pdf", NOW) == "iep-aware_rewrite_2026-05-04.pdf"


def test_txt_layout():
    artifact = export_response("Body\n  verbatim", "Lesson Planner", "txt", now=NOW)
    assert artifact.data.decode("utf-8") == (
        "Lesson Planner\nGenerated on: 2026-05-04 13:05:09\n\nBody\n  verbatim"
    )
    assert artifact.media_type == "text/plain"


def test_json_payload():
    artifact = export_response("Körper", "Rubric Generator", "json", now=NOW)
    text = artifact.data.decode("utf-8")
    assert text.startswith("{\n  ")
    assert json.loads(text) == {
        "feature": "Rubric Generator",
        "content": "Körper",
        "timestamp": "2026-05-04T13:05:09",
        "exported_by": "Auralis",
    }


def test_pdf_header():
    artifact = export_response("Short content", "Automatic Grading", "pdf", now=NOW)
    assert artifact.data.startswith(b"%PDF")
    assert artifact.filename == "automatic_grading_2026-05-04.pdf"
    assert artifact.media_type == "application/pdf"


def test_long_pdf_paginates():
    content = "\n".join(f"Paragraph {i}: " + "word " * 30 for i in range(120))
    artifact = export_response(content, "Content Summarization", "pdf", now=NOW)
    pages = re.findall(rb"/Type /Page\b", artifact.data)
    assert len(pages) >= 2


def test_unsupported_format():
    with pytest.raises(ValueError):
        export_response("hi", "F", "docx")


def test_save_artifact_writes_bytes(tmp_path):
    artifact = export_response("hi", "F", "txt", now=NOW)
    path = save_artifact(artifact, str(tmp_path / "out"))
    with open(path, "rb") as f:
        assert f.read() == artifact.data
    assert path.endswith("f_2026-05-04.txt")


def test_rubric_html():
    rows = [RubricRow(criteria="Clarity <1>", excellent="very clear", points="30 points", weight="30%"),
            RubricRow(criteria="Style")]
    artifact = export_rubric_html(rows, now=NOW)
    page = artifact.data.decode("utf-8")

    assert artifact.filename == "professional_rubric_2026-05-04.html"
    assert artifact.media_type == "text/html"
    assert "Clarity &lt;1&gt;" in page
    assert "very clear" in page
    assert "25 pts" in page
    assert "Total possible points: 55 points" in page
    assert page.count("<tr><td>") == 2


def test_fallback_rubric_html_total():
    page = export_rubric_html(fallback_rubric(), now=NOW).data.decode("utf-8")
    assert "Total possible points: 100 points" in page
