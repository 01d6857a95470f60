"""Turns raw completion text into light display markup.

The formatter is an ordered pipeline of pure text steps. Order matters: the
paragraph and line-break steps run after the inline steps, and the badge step
must see the raw percentage tokens before any markup is wrapped around them.
"""

import re
from typing import Callable, List, Tuple

Step = Tuple[str, Callable[[str], str]]

_HEADING = re.compile(r'##\s+(.*?)(?=\n|$)')
_BOLD = re.compile(r'\*\*(.*?)\*\*')
_ITALIC = re.compile(r'\*(.*?)\*')
_PERCENT_RANGE = re.compile(r'(\d+)-(\d+)%')


def headings(text: str) -> str:
    return _HEADING.sub(r'<h2>\1</h2>', text)


def bold(text: str) -> str:
    return _BOLD.sub(r'<strong>\1</strong>', text)


def italic(text: str) -> str:
    return _ITALIC.sub(r'<em>\1</em>', text)


def percentage_badges(text: str) -> str:
    return _PERCENT_RANGE.sub(r'<span class="badge">\1-\2%</span>', text)


def paragraphs(text: str) -> str:
    return text.replace('\n\n', '</p><p>')


def line_breaks(text: str) -> str:
    return text.replace('\n', '<br>')


def wrap_paragraph(text: str) -> str:
    return f'<p>{text}</p>'


TEXT_STEPS: List[Step] = [
    ("headings", headings),
    ("bold", bold),
    ("italic", italic),
    ("paragraphs", paragraphs),
    ("line_breaks", line_breaks),
    ("wrap_paragraph", wrap_paragraph),
]

# Same pipeline with percentage ranges highlighted, used for rubric output
RUBRIC_STEPS: List[Step] = TEXT_STEPS[:3] + [("percentage_badges", percentage_badges)] + TEXT_STEPS[3:]


def apply_steps(text: str, steps: List[Step]) -> str:
    for _, step in steps:
        text = step(text)
    return text


def format_response(text: str, rubric: bool = False) -> str:
    """Formats raw model text as display markup. Deterministic for a given input."""
    return apply_steps(text, RUBRIC_STEPS if rubric else TEXT_STEPS)


def format_plain(text: str) -> str:
    """The plain view shows the model text exactly as received."""
    return text
