"""Pydantic models for request bodies accepted by the simulated API."""

from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from database.schema import CandidateStage, JobStatus
from models.assessment_models import Question


class RequestBody(BaseModel):
    """Base for request bodies: unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


def _clean_tags(tags: List[str]) -> List[str]:
    cleaned = []
    seen = set()
    for tag in tags:
        tag = tag.strip()
        if tag and tag.lower() not in seen:
            seen.add(tag.lower())
            cleaned.append(tag)
    return cleaned


# Tags are trimmed and de-duplicated case-insensitively, first spelling wins.
Tags = Annotated[List[str], AfterValidator(_clean_tags)]


class CreateJobRequest(RequestBody):
    """Body of POST /jobs."""

    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    tags: Tags = Field(default_factory=list)


class UpdateJobRequest(RequestBody):
    """Body of PATCH /jobs/:id. Only provided fields are written."""

    title: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, min_length=1)
    status: Optional[JobStatus] = None
    tags: Optional[Tags] = None

    @field_validator("title", "slug", "status", "tags", mode="before")
    @classmethod
    def _reject_null(cls, value):
        # Omitted fields stay unchanged; explicit null is rejected.
        if value is None:
            raise ValueError("must not be null")
        return value

    def changes(self) -> Dict[str, Any]:
        """Fields explicitly set by the caller."""
        return self.model_dump(exclude_unset=True)


class ReorderJobRequest(RequestBody):
    """Body of PATCH /jobs/:id/reorder."""

    from_order: int = Field(..., alias="fromOrder", ge=0)
    to_order: int = Field(..., alias="toOrder", ge=0)


class CreateCandidateRequest(RequestBody):
    """Body of POST /candidates."""

    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    job_id: int = Field(..., alias="jobId")
    stage: CandidateStage = CandidateStage.APPLIED


class UpdateCandidateRequest(RequestBody):
    """Body of PATCH /candidates/:id."""

    stage: CandidateStage


class SaveAssessmentRequest(RequestBody):
    """Body of PUT /assessments/:jobId."""

    questions: List[Question]


class SubmitResponseRequest(RequestBody):
    """Body of POST /assessments/:jobId/submit."""

    candidate_id: Optional[int] = Field(None, alias="candidateId")
    responses: Dict[str, Any]
    submitted_at: Optional[datetime] = Field(None, alias="submittedAt")
