"""Database schema: enums and model classes."""

from datetime import datetime
from typing import Optional, Dict, Any, List
from enum import Enum


class JobStatus(str, Enum):
    """Job posting status."""

    ACTIVE = "active"
    ARCHIVED = "archived"


class CandidateStage(str, Enum):
    """Candidate pipeline stages."""

    APPLIED = "applied"
    SCREEN = "screen"
    TECH = "tech"
    OFFER = "offer"
    HIRED = "hired"
    REJECTED = "rejected"


class QuestionType(str, Enum):
    """Assessment question types."""

    SINGLE_CHOICE = "single-choice"
    MULTI_CHOICE = "multi-choice"
    SHORT_TEXT = "short-text"
    LONG_TEXT = "long-text"
    NUMERIC = "numeric"
    FILE = "file"


# Timeline event label and notes written for each target stage.
STAGE_EVENTS: Dict[CandidateStage, tuple] = {
    CandidateStage.APPLIED: ("Applied", "Application received"),
    CandidateStage.SCREEN: ("Moved to Screen", "Passed initial resume screen"),
    CandidateStage.TECH: ("Moved to Tech", "Scheduled for technical interview"),
    CandidateStage.OFFER: ("Offer Extended", "Offer letter being prepared"),
    CandidateStage.HIRED: ("Hired", "Candidate accepted the offer"),
    CandidateStage.REJECTED: ("Rejected", "Candidate did not move forward"),
}


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class Job:
    """Job posting model."""

    def __init__(
        self,
        id: Optional[int] = None,
        title: str = "",
        slug: str = "",
        status: JobStatus = JobStatus.ACTIVE,
        tags: Optional[List[str]] = None,
        order: int = 0,
    ):
        self.id = id
        self.title = title
        self.slug = slug
        self.status = status if isinstance(status, JobStatus) else JobStatus(status)
        self.tags = list(tags or [])
        self.order = order

    def has_tags(self, required: List[str]) -> bool:
        """True when every required tag is present, ignoring case."""
        own = {tag.lower() for tag in self.tags}
        return all(tag.lower() in own for tag in required)

    def matches_search(self, query: str) -> bool:
        """Case-insensitive substring match on title, slug or any tag."""
        q = query.strip().lower()
        if not q:
            return True
        return (
            q in self.title.lower()
            or q in self.slug.lower()
            or any(q in tag.lower() for tag in self.tags)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "status": self.status.value,
            "tags": list(self.tags),
            "order": self.order,
        }


class Candidate:
    """Candidate model."""

    def __init__(
        self,
        id: Optional[int] = None,
        name: str = "",
        email: str = "",
        job_id: Optional[int] = None,
        stage: CandidateStage = CandidateStage.APPLIED,
    ):
        self.id = id
        self.name = name
        self.email = email
        self.job_id = job_id
        self.stage = stage if isinstance(stage, CandidateStage) else CandidateStage(stage)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "jobId": self.job_id,
            "stage": self.stage.value,
        }


class TimelineEntry:
    """Audit trail entry for a candidate."""

    def __init__(
        self,
        id: Optional[int] = None,
        candidate_id: int = 0,
        timestamp: Optional[datetime] = None,
        event: str = "",
        stage: Optional[CandidateStage] = None,
        notes: Optional[str] = None,
    ):
        self.id = id
        self.candidate_id = candidate_id
        self.timestamp = timestamp or datetime.now()
        self.event = event
        if stage is not None and not isinstance(stage, CandidateStage):
            stage = CandidateStage(stage)
        self.stage = stage
        self.notes = notes

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "candidateId": self.candidate_id,
            "timestamp": _iso(self.timestamp),
            "event": self.event,
            "stage": self.stage.value if self.stage else None,
            "notes": self.notes,
        }


class AssessmentResponse:
    """Submitted answers for an assessment."""

    def __init__(
        self,
        id: Optional[int] = None,
        candidate_id: Optional[int] = None,
        assessment_id: int = 0,
        responses: Optional[Dict[str, Any]] = None,
        submitted_at: Optional[datetime] = None,
    ):
        self.id = id
        self.candidate_id = candidate_id
        self.assessment_id = assessment_id
        self.responses = dict(responses or {})
        self.submitted_at = submitted_at or datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "candidateId": self.candidate_id,
            "assessmentId": self.assessment_id,
            "responses": dict(self.responses),
            "submittedAt": _iso(self.submitted_at),
        }
