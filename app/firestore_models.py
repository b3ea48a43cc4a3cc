"""
Firestore document models using Python dataclasses.

Each model includes:
  - An `id` field for the Firestore document ID (where the document has one)
  - A `to_dict()` instance method for serialization
  - A `from_dict(data, doc_id)` classmethod for deserialization

Firestore field names are camelCase because the collections are shared
with the student evaluation app that writes them; attribute names are
snake_case.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

INACTIVE_STATUSES = ("inactive", "resigned", "retired")

POSITIVE_ANSWERS = ("Strongly Agree", "Agree")
ANSWER_ORDER = ("Strongly Agree", "Agree", "Undecided", "Disagree", "Strongly Disagree")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _from_epoch_ms(value) -> Optional[datetime]:
    try:
        return EPOCH + timedelta(milliseconds=float(value))
    except (OverflowError, ValueError):
        return None


def normalize_timestamp(value) -> Optional[datetime]:
    """Convert a stored timestamp to an aware UTC datetime.

    Accepts Firestore DatetimeWithNanoseconds (a datetime subclass),
    protobuf Timestamps, native datetime/date objects, epoch milliseconds
    as numbers or numeric strings, ISO-8601 strings, and exported
    ``{"seconds": ..., "nanoseconds": ...}`` mappings. Returns None for
    anything else.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return _from_epoch_ms(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return _from_epoch_ms(float(text))
        except ValueError:
            pass
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
        return normalize_timestamp(parsed)
    if isinstance(value, Mapping):
        seconds = value.get("seconds", value.get("_seconds"))
        nanos = value.get("nanoseconds", value.get("_nanoseconds", 0)) or 0
        if isinstance(seconds, (int, float)) and not isinstance(seconds, bool):
            return _from_epoch_ms(seconds * 1000 + nanos / 1_000_000)
        return None
    # protobuf Timestamp
    to_datetime = getattr(value, "ToDatetime", None)
    if callable(to_datetime):
        return normalize_timestamp(to_datetime())
    return None


def epoch_millis(value: datetime) -> int:
    return (normalize_timestamp(value) - EPOCH) // timedelta(milliseconds=1)


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ===========================================================================
# 1. Professor
# ===========================================================================

@dataclass
class SubjectSection:
    subject: str = ""
    sections: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"subject": self.subject, "sections": list(self.sections)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SubjectSection:
        return cls(
            subject=data.get("subject", ""),
            sections=list(data.get("sections") or []),
        )


@dataclass
class Professor:
    id: Optional[str] = None
    name: str = ""
    email: str = ""
    department_id: str = ""
    department_name: str = ""
    password_hash: Optional[str] = None
    image_url: Optional[str] = None
    handled_section: Optional[str] = None
    subject: Optional[str] = None
    status: str = "Active"
    subject_sections: List[SubjectSection] = field(default_factory=list)
    subjects: List[str] = field(default_factory=list)

    # Set only when the stored record predates password hashing
    legacy_password: Optional[str] = field(default=None, repr=False)

    @property
    def is_active(self) -> bool:
        return (self.status or "Active").lower() not in INACTIVE_STATUSES

    @property
    def is_complete_profile(self) -> bool:
        return bool(self.name and self.email and self.department_id and self.department_name)

    @property
    def initials(self) -> str:
        return "".join(part[0] for part in self.name.split() if part).upper()

    def handled_sections(self) -> List[str]:
        sections = []
        for item in self.subject_sections:
            for section in item.sections:
                if section not in sections:
                    sections.append(section)
        if not sections and self.handled_section:
            sections.append(self.handled_section)
        return sections

    def handled_subjects(self) -> List[str]:
        subjects = []
        for item in self.subject_sections:
            if item.subject and item.subject not in subjects:
                subjects.append(item.subject)
        return subjects

    def to_public_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "departmentId": self.department_id,
            "departmentName": self.department_name,
            "imageUrl": self.image_url,
            "handledSection": self.handled_section,
            "subject": self.subject,
            "status": self.status,
            "subjectSections": [s.to_dict() for s in self.subject_sections],
            "subjects": list(self.subjects),
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.to_public_dict()
        data.pop("id")
        data["passwordHash"] = self.password_hash
        data["profilePictureUrl"] = self.image_url
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> Professor:
        return cls(
            id=doc_id,
            name=data.get("name") or "",
            email=data.get("email") or "",
            department_id=data.get("departmentId") or "",
            department_name=data.get("departmentName") or "",
            password_hash=data.get("passwordHash") or None,
            image_url=data.get("imageUrl") or data.get("profilePictureUrl") or None,
            handled_section=data.get("handledSection") or None,
            subject=data.get("subject") or None,
            status=data.get("status") or "Active",
            subject_sections=[SubjectSection.from_dict(s) for s in data.get("subjectSections") or []],
            subjects=list(data.get("subjects") or []),
            legacy_password=data.get("password") or None,
        )


# ===========================================================================
# 2. EvaluationDeadline  (document: evaluation_deadlines/current)
# ===========================================================================

@dataclass
class EvaluationDeadline:
    start_date: datetime
    end_date: datetime
    is_active: bool = True
    period_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def resolved_period_id(self) -> str:
        """Stored periodId, or one derived from the start date."""
        if self.period_id:
            return self.period_id
        return f"period_{epoch_millis(self.start_date)}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startDate": self.start_date,
            "endDate": self.end_date,
            "isActive": self.is_active,
            "periodId": self.period_id,
            "createdAt": self.created_at or _now(),
            "updatedAt": self.updated_at or _now(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> EvaluationDeadline:
        start_date = normalize_timestamp(data.get("startDate"))
        end_date = normalize_timestamp(data.get("endDate"))
        if start_date is None or end_date is None:
            raise ValueError("Deadline document is missing startDate or endDate")
        return cls(
            start_date=start_date,
            end_date=end_date,
            is_active=data.get("isActive", True),
            period_id=data.get("periodId") or None,
            created_at=normalize_timestamp(data.get("createdAt")),
            updated_at=normalize_timestamp(data.get("updatedAt")),
        )


# ===========================================================================
# 3. EvaluationResult  (collection: evaluation_results)
# ===========================================================================

@dataclass
class EvaluationResponse:
    question_text: str = ""
    question_type: str = "rating"
    answer: str = ""
    section: Optional[str] = None

    @property
    def is_text(self) -> bool:
        return self.question_type == "text"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "questionText": self.question_text,
            "questionType": self.question_type,
            "answer": self.answer,
            "section": self.section,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> EvaluationResponse:
        return cls(
            question_text=data.get("questionText") or "",
            question_type=data.get("questionType") or "rating",
            answer=data.get("answer") or "",
            section=data.get("section") or None,
        )


@dataclass
class EvaluationResult:
    id: Optional[str] = None
    professor_email: str = ""
    professor_id: str = ""
    professor_name: str = ""
    department_name: str = ""
    evaluation_status: str = ""
    is_complete: bool = False
    responses: List[EvaluationResponse] = field(default_factory=list)
    evaluation_period_id: Optional[str] = None
    # Raw stored values; see normalize_timestamp
    created_at: Any = None
    submitted_at: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "professorEmail": self.professor_email,
            "professorId": self.professor_id,
            "professorName": self.professor_name,
            "departmentName": self.department_name,
            "evaluationStatus": self.evaluation_status,
            "isComplete": self.is_complete,
            "responses": [r.to_dict() for r in self.responses],
            "evaluationPeriodId": self.evaluation_period_id,
            "createdAt": self.created_at,
            "submittedAt": self.submitted_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> EvaluationResult:
        return cls(
            id=doc_id,
            professor_email=data.get("professorEmail") or "",
            professor_id=data.get("professorId") or "",
            professor_name=data.get("professorName") or "",
            department_name=data.get("departmentName") or "",
            evaluation_status=data.get("evaluationStatus") or "",
            is_complete=bool(data.get("isComplete", False)),
            responses=[EvaluationResponse.from_dict(r) for r in data.get("responses") or []],
            evaluation_period_id=data.get("evaluationPeriodId") or None,
            created_at=data.get("createdAt"),
            submitted_at=data.get("submittedAt"),
        )


# ===========================================================================
# 4. ThemePalette
# ===========================================================================

COLOR_TOKENS = (
    "background", "foreground", "card", "cardForeground",
    "primary", "primaryForeground", "secondary", "secondaryForeground",
    "muted", "mutedForeground", "accent", "accentForeground",
    "border", "input", "ring",
)


@dataclass
class ThemePalette:
    name: str
    value: str
    preview: str
    description: str
    colors: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "preview": self.preview,
            "description": self.description,
            "colors": dict(self.colors),
        }
