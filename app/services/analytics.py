"""Summary statistics over evaluation results.

A response counts as positive when its answer is "Strongly Agree" or
"Agree". Percentages only ever count rating-type responses; text answers
are collected verbatim.
"""

from collections import OrderedDict
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional

from app.firestore_models import ANSWER_ORDER, POSITIVE_ANSWERS

SECTIONS = (
    "Instructional Competence",
    "Classroom Management",
    "Research",
    "Student Support & Development",
    "Professionalism & Personal Qualities",
    "verbal interpretation",
)

# Sections that hold free-form feedback rather than ratings
NON_RATING_SECTIONS = ("verbal interpretation", "comments")

RATING_THRESHOLDS = (
    (90, "Excellent", "#10b981"),
    (80, "Very Good", "#3b82f6"),
    (70, "Good", "#8b5cf6"),
    (60, "Satisfactory", "#f59e0b"),
)
FALLBACK_RATING = ("Needs Improvement", "#ef4444")


@dataclass
class Performance:
    total: int = 0
    positive: int = 0
    percentage: int = 0
    rating: str = FALLBACK_RATING[0]
    rating_color: str = FALLBACK_RATING[1]

    def to_dict(self):
        return asdict(self)


@dataclass
class EvaluationSummary(Performance):
    completed_count: int = 0


@dataclass
class QuestionBreakdown:
    question_text: str
    question_type: str
    answers: Dict[str, int] = field(default_factory=dict)
    text_answers: List[str] = field(default_factory=list)
    performance: Optional[Performance] = None

    @property
    def is_text(self):
        return self.question_type == "text"

    def to_dict(self):
        return {
            "questionText": self.question_text,
            "questionType": self.question_type,
            "answers": dict(self.answers),
            "textAnswers": list(self.text_answers),
            "performance": self.performance.to_dict() if self.performance else None,
        }


def is_positive(answer):
    return answer in POSITIVE_ANSWERS


def rating_for(percentage):
    """Map a percentage to its qualitative rating and display color."""
    for threshold, rating, color in RATING_THRESHOLDS:
        if percentage >= threshold:
            return rating, color
    return FALLBACK_RATING


def round_half_up(value):
    # round() rounds halves to even; percentages on the dashboard round 62.5 up
    return int(value + 0.5)


def performance_of(responses):
    """Performance over rating responses; text responses are skipped."""
    rated = [r for r in responses if not r.is_text]
    total = len(rated)
    positive = sum(1 for r in rated if is_positive(r.answer))
    percentage = round_half_up(positive / total * 100) if total else 0
    rating, color = rating_for(percentage)
    return Performance(total=total, positive=positive, percentage=percentage,
                       rating=rating, rating_color=color)


def _counts_toward_overall(response):
    section = (response.section or "").lower()
    return not response.is_text and section not in NON_RATING_SECTIONS


def summarize(results):
    """Overall performance across completed evaluations."""
    completed = [r for r in results if r.is_complete]
    responses = [resp for r in completed for resp in r.responses if _counts_toward_overall(resp)]
    overall = performance_of(responses)
    return EvaluationSummary(completed_count=len(completed), **asdict(overall))


def all_responses(results):
    return [resp for r in results for resp in r.responses]


def available_sections(results):
    """Sections present in the data, known ones first in their fixed order."""
    seen = []
    for response in all_responses(results):
        if response.section and response.section not in seen:
            seen.append(response.section)
    ordered = [s for s in SECTIONS if s in seen]
    ordered.extend(s for s in seen if s not in SECTIONS)
    return ordered or list(SECTIONS)


def answer_counts(responses):
    counts = OrderedDict()
    for response in responses:
        if response.is_text:
            continue
        counts[response.answer] = counts.get(response.answer, 0) + 1
    return counts


def question_breakdown(responses):
    """Group responses by question text, preserving first-seen order."""
    questions = OrderedDict()
    for response in responses:
        entry = questions.get(response.question_text)
        if entry is None:
            entry = QuestionBreakdown(response.question_text, response.question_type)
            questions[response.question_text] = entry
        if entry.is_text:
            if response.answer and response.answer.strip():
                entry.text_answers.append(response.answer)
        else:
            entry.answers[response.answer] = entry.answers.get(response.answer, 0) + 1

    for text, entry in questions.items():
        if entry.is_text:
            continue
        ordered = OrderedDict((a, entry.answers[a]) for a in ANSWER_ORDER if entry.answers.get(a))
        ordered.update((a, n) for a, n in entry.answers.items() if a not in ordered)
        entry.answers = ordered
        entry.performance = performance_of([r for r in responses
                                            if r.question_text == text and not r.is_text])
    return list(questions.values())


def section_breakdown(results, section):
    """Performance, answer distribution and per-question detail for one section."""
    responses = [r for r in all_responses(results) if r.section == section]
    return {
        "section": section,
        "performance": performance_of(responses).to_dict(),
        "answerCounts": dict(answer_counts(responses)),
        "questions": [q.to_dict() for q in question_breakdown(responses)],
    }


def count_active_students(professor, students):
    """Count active students in the professor's sections (and subjects)."""
    sections = set(professor.handled_sections())
    if not sections:
        return 0
    subjects = set(professor.handled_subjects())

    count = 0
    for student in students:
        if (student.get("accountStatus") or "").lower() != "active":
            continue
        if student.get("section") not in sections:
            continue
        student_subjects = student.get("subjects") or []
        if subjects and student_subjects:
            if not any(s in subjects for s in student_subjects):
                continue
        count += 1
    return count
