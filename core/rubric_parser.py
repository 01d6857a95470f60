"""Heuristic extraction of rubric rows from free-form model output."""

import re
from dataclasses import asdict, dataclass, replace
from typing import Dict, Iterable, List, Optional, Tuple

EXCELLENT_RANGE = "90-100%"
GOOD_RANGE = "80-89%"
SATISFACTORY_RANGE = "70-79%"
NEEDS_IMPROVEMENT_RANGE = "0-69%"

DEFAULT_POINTS = "25 pts"

# Shown by views for levels the model never described
DEFAULT_LEVEL_DESCRIPTIONS: Dict[str, str] = {
    "excellent": "Exceptional performance that exceeds all expectations. Demonstrates mastery and innovation with sophisticated understanding.",
    "good": "Strong performance that meets most expectations. Shows solid understanding and skill with good application of concepts.",
    "satisfactory": "Adequate performance that meets basic requirements. Shows developing understanding with standard application.",
    "needs_improvement": "Performance below expectations. Requires significant development and additional support to meet standards.",
}

LEVELS: Tuple[str, ...] = ("excellent", "good", "satisfactory", "needs_improvement")

LEVEL_LABELS: Dict[str, str] = {
    "excellent": "Excellent",
    "good": "Good",
    "satisfactory": "Satisfactory",
    "needs_improvement": "Needs Improvement",
}


@dataclass
class RubricRow:
    criteria: str
    excellent: Optional[str] = None
    good: Optional[str] = None
    satisfactory: Optional[str] = None
    needs_improvement: Optional[str] = None
    points: Optional[str] = None
    weight: Optional[str] = None
    description: Optional[str] = None
    excellent_range: str = EXCELLENT_RANGE
    good_range: str = GOOD_RANGE
    satisfactory_range: str = SATISFACTORY_RANGE
    needs_improvement_range: str = NEEDS_IMPROVEMENT_RANGE

    def level_range(self, level: str) -> str:
        return getattr(self, f"{level}_range")

    def to_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)


# Placeholder rubric shown when nothing could be parsed. Product-defined
# content, unrelated to the model's answer.
FALLBACK_RUBRIC: Tuple[RubricRow, ...] = (
    RubricRow(
        criteria="Content Quality & Understanding",
        excellent="Demonstrates exceptional understanding with comprehensive analysis, original insights, and sophisticated reasoning. Shows mastery of all concepts with innovative applications.",
        good="Shows solid understanding with good analysis and clear reasoning. Demonstrates proficiency in most concepts with some creative applications.",
        satisfactory="Displays basic understanding with adequate analysis. Shows developing grasp of fundamental concepts with standard applications.",
        needs_improvement="Shows limited understanding with weak analysis. Demonstrates minimal grasp of concepts requiring significant support and instruction.",
        points="25 points",
        weight="25%",
        description="Evaluates depth of understanding and quality of content",
    ),
    RubricRow(
        criteria="Organization & Structure",
        excellent="Exceptionally well-organized with clear, logical flow and seamless transitions. Compelling introduction that hooks the reader and conclusion that synthesizes key points effectively.",
        good="Well-organized with good structure and adequate transitions. Clear introduction and conclusion that support the main content effectively.",
        satisfactory="Basic organization with some structure. Adequate introduction and conclusion that meet minimum requirements.",
        needs_improvement="Poor organization with unclear structure. Weak or missing introduction/conclusion that fail to support the content.",
        points="20 points",
        weight="20%",
        description="Assesses logical flow and structural elements",
    ),
    RubricRow(
        criteria="Research & Evidence",
        excellent="Outstanding use of diverse, credible sources with excellent integration and critical analysis. Proper citations throughout with sophisticated synthesis of information.",
        good="Good use of credible sources with adequate integration and analysis. Most citations are proper with effective use of supporting evidence.",
        satisfactory="Basic use of acceptable sources with some integration. Citations are generally correct with adequate supporting evidence.",
        needs_improvement="Limited or poor use of sources with minimal integration. Missing or incorrect citations with insufficient supporting evidence.",
        points="20 points",
        weight="20%",
        description="Evaluates use of sources and supporting evidence",
    ),
    RubricRow(
        criteria="Writing Mechanics & Style",
        excellent="Excellent grammar, spelling, and style throughout. Engaging, professional writing with varied sentence structure and sophisticated vocabulary.",
        good="Good grammar and spelling with clear, effective writing style. Minor errors that don't impede understanding with appropriate vocabulary.",
        satisfactory="Adequate grammar and spelling with basic writing style. Writing is clear but may lack engagement with standard vocabulary.",
        needs_improvement="Frequent errors in grammar/spelling that impede understanding. Poor writing style with limited vocabulary and unclear expression.",
        points="15 points",
        weight="15%",
        description="Assesses technical writing skills and presentation",
    ),
    RubricRow(
        criteria="Critical Thinking & Analysis",
        excellent="Demonstrates sophisticated critical thinking with in-depth analysis, evaluation of multiple perspectives, and original conclusions supported by evidence.",
        good="Shows solid critical thinking with good analysis and consideration of different viewpoints. Conclusions are well-supported and logical.",
        satisfactory="Displays basic critical thinking with adequate analysis. Shows some consideration of different perspectives with acceptable conclusions.",
        needs_improvement="Limited critical thinking with superficial analysis. Minimal consideration of perspectives with weak or unsupported conclusions.",
        points="20 points",
        weight="20%",
        description="Evaluates analytical and critical thinking skills",
    ),
)

_CRITERION = re.compile(r'^\s*(\d+\.|•|-|#{1,3})\s*(.+?):')
_LEVEL = re.compile(
    r'(Excellent|Outstanding|Exemplary|Good|Proficient|Satisfactory|Fair|Adequate|'
    r'Needs?\s*Improvement|Poor|Unsatisfactory)\s*[:\-]\s*(.+)',
    re.IGNORECASE,
)
_POINTS = re.compile(r'(\d+)\s*(points?|pts?|%)', re.IGNORECASE)
_WEIGHT = re.compile(r'weight\s*:?\s*(\d+%?)', re.IGNORECASE)
_FIRST_INT = re.compile(r'\d+')

_LEVEL_SYNONYMS: Dict[str, str] = {
    "excellent": "excellent",
    "outstanding": "excellent",
    "exemplary": "excellent",
    "good": "good",
    "proficient": "good",
    "satisfactory": "satisfactory",
    "fair": "satisfactory",
    "adequate": "satisfactory",
    "poor": "needs_improvement",
    "unsatisfactory": "needs_improvement",
}


def _level_key(keyword: str) -> str:
    word = keyword.lower()
    if word.startswith("need"):
        return "needs_improvement"
    return _LEVEL_SYNONYMS[word]


def fallback_rubric() -> List[RubricRow]:
    """Fresh copies of the placeholder rubric."""
    return [replace(row) for row in FALLBACK_RUBRIC]


def parse_rubric(text: Optional[str]) -> List[RubricRow]:
    """Extracts rubric rows from model text in document order.

    Falls back to the placeholder rubric when no criterion line is found.
    Never raises.
    """
    rows: List[RubricRow] = []
    current: Optional[RubricRow] = None

    for line in (text or "").split("\n"):
        if not line.strip():
            continue

        criterion = _CRITERION.match(line)
        if criterion:
            if current is not None and current.criteria:
                rows.append(current)
            current = RubricRow(criteria=criterion.group(2).strip())
            points = _POINTS.search(line)
            if points:
                current.points = points.group(0)
            continue

        if current is None:
            continue

        level = _LEVEL.search(line)
        if level:
            setattr(current, _level_key(level.group(1)), level.group(2).strip())
            continue

        points = _POINTS.search(line)
        if points and not current.points:
            current.points = points.group(0)
        weight = _WEIGHT.search(line)
        if weight and not current.weight:
            current.weight = weight.group(1)

    if current is not None and current.criteria:
        rows.append(current)

    if not rows:
        return fallback_rubric()
    return rows


def points_value(row: RubricRow) -> int:
    """First integer in the row's points, 25 when there is none."""
    match = _FIRST_INT.search(row.points or "")
    return int(match.group(0)) if match else 25


def total_points(rows: Iterable[RubricRow]) -> int:
    return sum(points_value(row) for row in rows)


def level_text(row: RubricRow, level: str) -> str:
    """The row's description for a level, or the generic default."""
    return getattr(row, level) or DEFAULT_LEVEL_DESCRIPTIONS[level]
