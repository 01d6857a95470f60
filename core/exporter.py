"""Serializes generated results into downloadable files."""

import html
import io
import json
import os
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

import config
from core.rubric_parser import LEVEL_LABELS, LEVELS, RubricRow, DEFAULT_POINTS, level_text, total_points
from utils.logger import get_logger

logger = get_logger()

EXPORT_FORMATS = ("pdf", "json", "txt")

MEDIA_TYPES = {
    "pdf": "application/pdf",
    "json": "application/json",
    "txt": "text/plain",
    "html": "text/html",
}

# PDF layout
PDF_MARGIN = 20 * mm
PDF_FONT = "Helvetica"
PDF_TITLE_SIZE = 16
PDF_META_SIZE = 10
PDF_BODY_SIZE = 12
PDF_LEADING = PDF_BODY_SIZE * 1.2


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    data: bytes
    media_type: str


def slugify(feature: str) -> str:
    """Lowercases and turns each whitespace run into one underscore."""
    return re.sub(r'\s+', '_', feature.lower())


def export_filename(feature: str, extension: str, now: Optional[datetime] = None) -> str:
    day = (now or datetime.now()).date().isoformat()
    return f"{slugify(feature)}_{day}.{extension}"


def _generated_on(now: datetime) -> str:
    return f"Generated on: {now.strftime('%Y-%m-%d %H:%M:%S')}"


def encode_txt(content: str, feature: str, now: datetime) -> bytes:
    return f"{feature}\n{_generated_on(now)}\n\n{content}".encode("utf-8")


def encode_json(content: str, feature: str, now: datetime) -> bytes:
    payload = {
        "feature": feature,
        "content": content,
        "timestamp": now.isoformat(),
        "exported_by": config.PRODUCT_NAME,
    }
    return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")


def wrap_lines(content: str, max_width: float, font: str = PDF_FONT, size: float = PDF_BODY_SIZE) -> List[str]:
    """Word-wraps content to max_width points, keeping blank lines."""
    lines: List[str] = []
    for paragraph in content.split("\n"):
        if not paragraph.strip():
            lines.append("")
            continue
        lines.extend(simpleSplit(paragraph, font, size, max_width))
    return lines


def encode_pdf(content: str, feature: str, now: datetime) -> bytes:
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    page_width, page_height = A4
    max_width = page_width - 2 * PDF_MARGIN

    pdf.setTitle(feature)
    pdf.setFont(PDF_FONT, PDF_TITLE_SIZE)
    pdf.drawString(PDF_MARGIN, page_height - 20 * mm, feature)
    pdf.setFont(PDF_FONT, PDF_META_SIZE)
    pdf.drawString(PDF_MARGIN, page_height - 30 * mm, _generated_on(now))

    pdf.setFont(PDF_FONT, PDF_BODY_SIZE)
    y = page_height - 45 * mm
    pages = 1
    for line in wrap_lines(content, max_width):
        if y < PDF_MARGIN:
            pdf.showPage()
            pages += 1
            pdf.setFont(PDF_FONT, PDF_BODY_SIZE)
            y = page_height - PDF_MARGIN
        pdf.drawString(PDF_MARGIN, y, line)
        y -= PDF_LEADING

    pdf.save()
    logger.debug(f"Rendered PDF export for '{feature}' ({pages} page(s)).")
    return buffer.getvalue()


_ENCODERS = {
    "pdf": encode_pdf,
    "json": encode_json,
    "txt": encode_txt,
}


def export_response(content: str, feature: str, fmt: str, now: Optional[datetime] = None) -> ExportArtifact:
    """Builds a downloadable artifact for a result.

    Raises:
        ValueError: If fmt is not one of EXPORT_FORMATS.
    """
    if fmt not in _ENCODERS:
        raise ValueError(f"Unsupported export format '{fmt}'. Choose one of: {', '.join(EXPORT_FORMATS)}")
    now = now or datetime.now()
    data = _ENCODERS[fmt](content, feature, now)
    artifact = ExportArtifact(export_filename(feature, fmt, now), data, MEDIA_TYPES[fmt])
    logger.info(f"Exported '{feature}' as {fmt} ({len(data)} bytes).")
    return artifact


def save_artifact(artifact: ExportArtifact, directory: str = config.EXPORT_DIR) -> str:
    """Writes the artifact into directory and returns the file path."""
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, artifact.filename)
    with open(path, "wb") as f:
        f.write(artifact.data)
    logger.info(f"Wrote export to {path}.")
    return path


_RUBRIC_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>Professional Assessment Rubric</title>
<style>
body {{ font-family: 'Segoe UI', Tahoma, sans-serif; margin: 20px; }}
table {{ width: 100%; border-collapse: collapse; font-size: 14px; }}
th, td {{ border: 1px solid #e0e6ed; padding: 12px; text-align: left; vertical-align: top; }}
th {{ background: #3f9fff; color: white; }}
.criteria-desc {{ font-size: 12px; color: #7f8c8d; font-style: italic; }}
.range {{ font-weight: 700; display: inline-block; padding: 2px 6px; border-radius: 4px; color: white; }}
.excellent .range {{ background: #28a745; }}
.good .range {{ background: #17a2b8; }}
.satisfactory .range {{ background: #ffc107; }}
.needs_improvement .range {{ background: #dc3545; }}
.footer {{ text-align: center; margin-top: 30px; color: #7f8c8d; font-size: 13px; }}
</style>
</head>
<body>
<h1>Professional Assessment Rubric</h1>
<table>
<thead>
<tr><th>Assessment Criteria</th><th>Points/Weight</th>{level_headers}</tr>
</thead>
<tbody>
{rows}
</tbody>
</table>
<p>Total possible points: {total} points</p>
<div class="footer">Generated on {generated} by {product}</div>
</body>
</html>
"""


def _rubric_row_html(row: RubricRow) -> str:
    esc = html.escape
    cells = [
        f'<td><div><strong>{esc(row.criteria or "Assessment Criterion")}</strong></div>'
        + (f'<div class="criteria-desc">{esc(row.description)}</div>' if row.description else "")
        + "</td>",
        f"<td><div>{esc(row.points or DEFAULT_POINTS)}</div>"
        + (f"<div>{esc(row.weight)}</div>" if row.weight else "")
        + "</td>",
    ]
    for level in LEVELS:
        cells.append(
            f'<td class="{level}"><span class="range">{esc(row.level_range(level))}</span>'
            f"<div>{esc(level_text(row, level))}</div></td>"
        )
    return "<tr>" + "".join(cells) + "</tr>"


def export_rubric_html(rows: Iterable[RubricRow], now: Optional[datetime] = None) -> ExportArtifact:
    """Renders parsed rubric rows as a standalone HTML table."""
    now = now or datetime.now()
    rows = list(rows)
    page = _RUBRIC_PAGE.format(
        level_headers="".join(f"<th>{LEVEL_LABELS[level]}</th>" for level in LEVELS),
        rows="\n".join(_rubric_row_html(row) for row in rows),
        total=total_points(rows),
        generated=now.strftime("%B %d, %Y %H:%M"),
        product=config.PRODUCT_NAME,
    )
    filename = f"professional_rubric_{now.date().isoformat()}.html"
    logger.info(f"Rendered rubric HTML with {len(rows)} rows.")
    return ExportArtifact(filename, page.encode("utf-8"), MEDIA_TYPES["html"])
