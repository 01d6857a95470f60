"""Prompt construction for each educational task."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional


class TaskKind(Enum):
    """The educational operations the assistant supports, valued by display label."""
    GRADING = "Automatic Grading"
    SUMMARIZATION = "Summarize Articles"
    PLAGIARISM_CHECK = "Plagiarism Check"
    IEP_REWRITE = "IEP-Aware Rewrite"
    RUBRIC = "Rubric Generator"
    REPORT_CARD = "Report Card Comments"
    CURRICULUM = "Curriculum Analyzer"
    LESSON_PLAN = "Lesson Plan Generator"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class FieldSpec:
    """One auxiliary input collected for a task."""
    key: str
    label: str
    placeholder: str
    default: str = ""
    multiline: bool = False


@dataclass(frozen=True)
class TaskSpec:
    kind: TaskKind
    description: str
    input_label: str
    fields: List[FieldSpec] = field(default_factory=list)


@dataclass(frozen=True)
class PromptRequest:
    """Everything needed to build one prompt. Auxiliary fields are frozen on construction."""
    task_kind: TaskKind
    primary_text: str
    auxiliary_fields: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "auxiliary_fields", MappingProxyType(dict(self.auxiliary_fields or {})))


TASKS: Dict[TaskKind, TaskSpec] = {
    TaskKind.GRADING: TaskSpec(
        TaskKind.GRADING,
        "AI-powered grading with detailed analytics and feedback",
        "Paste the student's work here for grading...",
        [FieldSpec("criteria", "Grading Criteria", "Enter specific grading criteria and rubric details...",
                   default="Standard grading criteria", multiline=True)],
    ),
    TaskKind.SUMMARIZATION: TaskSpec(
        TaskKind.SUMMARIZATION,
        "Condense articles into their key points",
        "Paste the article to summarize...",
    ),
    TaskKind.PLAGIARISM_CHECK: TaskSpec(
        TaskKind.PLAGIARISM_CHECK,
        "Screen text for plagiarism indicators",
        "Paste the text to analyze...",
    ),
    TaskKind.IEP_REWRITE: TaskSpec(
        TaskKind.IEP_REWRITE,
        "Adapt content for students with IEP accommodations",
        "Paste the content to rewrite...",
        [FieldSpec("accommodations", "IEP Accommodations", "e.g. extended time, simplified language...",
                   multiline=True)],
    ),
    TaskKind.RUBRIC: TaskSpec(
        TaskKind.RUBRIC,
        "Generate assessment rubrics with performance levels",
        "Describe the assignment...",
        [FieldSpec("criteria", "Key Criteria", "Criteria the rubric must include...", multiline=True)],
    ),
    TaskKind.REPORT_CARD: TaskSpec(
        TaskKind.REPORT_CARD,
        "Write professional report card comments",
        "Describe the student's performance...",
        [FieldSpec("student", "Student Name", "Student name", default="Student"),
         FieldSpec("subject", "Subject", "e.g. Mathematics", default="General")],
    ),
    TaskKind.CURRICULUM: TaskSpec(
        TaskKind.CURRICULUM,
        "Analyze curriculum against educational standards",
        "Paste the curriculum content...",
        [FieldSpec("standards", "Standards", "e.g. Common Core, NGSS...", default="Common Core Standards")],
    ),
    TaskKind.LESSON_PLAN: TaskSpec(
        TaskKind.LESSON_PLAN,
        "Create comprehensive lesson plans",
        "Enter the lesson topic...",
        [FieldSpec("grade", "Grade Level", "e.g. 5th Grade", default="Elementary"),
         FieldSpec("objectives", "Learning Objectives", "What should students learn?", multiline=True)],
    ),
}


def resolve_fields(task_kind: TaskKind, auxiliary_fields: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """Returns the task's fields in declaration order, blank or missing values replaced by defaults."""
    supplied = auxiliary_fields or {}
    resolved: Dict[str, str] = {}
    for spec in TASKS[task_kind].fields:
        value = supplied.get(spec.key)
        resolved[spec.key] = value if value and value.strip() else spec.default
    return resolved


def _grading(text: str, f: Dict[str, str]) -> str:
    return f"""As an expert teacher, grade the following student work based on the criteria provided. Provide a detailed analysis with scores, feedback, and suggestions for improvement.

Grading Criteria: {f['criteria']}

Student Work:
{text}

Please provide:
1. Overall Grade (percentage or letter grade)
2. Detailed feedback for each criterion
3. Strengths identified
4. Areas for improvement
5. Specific suggestions for enhancement"""


def _summarization(text: str, f: Dict[str, str]) -> str:
    return f"""Please provide a comprehensive summary of the following article. Include:
1. Main points and key ideas
2. Supporting arguments or evidence
3. Conclusion or implications
4. Important details that shouldn't be missed

Article:
{text}"""


def _plagiarism(text: str, f: Dict[str, str]) -> str:
    return f"""Analyze the following text for potential plagiarism indicators. Look for:
1. Unusual style changes or inconsistencies
2. Overly sophisticated language for the context
3. Lack of proper citations
4. Generic or template-like content
5. Provide recommendations for verification

Text to analyze:
{text}

Please provide a detailed analysis with specific concerns and recommendations."""


def _iep_rewrite(text: str, f: Dict[str, str]) -> str:
    return f"""Rewrite the following content to be appropriate for a student with IEP accommodations. Make it accessible while maintaining educational value.

IEP Accommodations to consider: {f['accommodations']}

Original Content:
{text}

Please provide:
1. Rewritten content with appropriate modifications
2. Explanation of changes made
3. Additional support strategies
4. Assessment adaptations if needed"""


def _rubric(text: str, f: Dict[str, str]) -> str:
    return f"""Create a detailed rubric for the following assignment. Include multiple performance levels and clear criteria.

Assignment: {text}

Key Criteria to include: {f['criteria']}

Please create a rubric with:
1. 4-5 performance levels (Excellent, Good, Satisfactory, Needs Improvement, etc.)
2. Clear descriptors for each level
3. Point values or percentage weights
4. Specific, measurable criteria"""


def _report_card(text: str, f: Dict[str, str]) -> str:
    return f"""Generate professional, constructive report card comments for a student.

Student: {f['student']}
Subject: {f['subject']}
Performance Overview: {text}

Please provide:
1. Positive comments highlighting strengths
2. Areas for growth and improvement
3. Specific suggestions for continued success
4. Encouraging and professional tone appropriate for parents"""


def _curriculum(text: str, f: Dict[str, str]) -> str:
    return f"""Analyze the following curriculum content against educational standards and best practices.

Curriculum Content: {text}

Standards to evaluate against: {f['standards']}

Please provide:
1. Alignment analysis with standards
2. Strengths and gaps identified
3. Suggestions for improvement
4. Missing components or topics
5. Recommended enhancements"""


def _lesson_plan(text: str, f: Dict[str, str]) -> str:
    return f"""Create a comprehensive lesson plan for the specified topic and grade level.

Topic: {text}
Grade Level: {f['grade']}
Learning Objectives: {f['objectives']}

Please include:
1. Lesson overview and duration
2. Materials needed
3. Step-by-step activities
4. Assessment methods
5. Differentiation strategies
6. Extension activities
7. Homework/follow-up assignments"""


_BUILDERS: Dict[TaskKind, Callable[[str, Dict[str, str]], str]] = {
    TaskKind.GRADING: _grading,
    TaskKind.SUMMARIZATION: _summarization,
    TaskKind.PLAGIARISM_CHECK: _plagiarism,
    TaskKind.IEP_REWRITE: _iep_rewrite,
    TaskKind.RUBRIC: _rubric,
    TaskKind.REPORT_CARD: _report_card,
    TaskKind.CURRICULUM: _curriculum,
    TaskKind.LESSON_PLAN: _lesson_plan,
}


def build_prompt(request: PromptRequest) -> str:
    """Builds the instruction string for a request.

    Raises:
        ValueError: If the task kind has no prompt builder.
    """
    builder = _BUILDERS.get(request.task_kind)
    if builder is None:
        raise ValueError(f"Unsupported task kind: {request.task_kind!r}")
    return builder(request.primary_text, resolve_fields(request.task_kind, request.auxiliary_fields))
