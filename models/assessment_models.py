"""Pydantic models for assessments and their questions."""

from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from database.schema import QuestionType


class QuestionValidation(BaseModel):
    """Validation rules attached to a question."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    required: Optional[bool] = Field(None, description="Answer must be present")
    min: Optional[float] = Field(None, description="Minimum numeric value")
    max: Optional[float] = Field(None, description="Maximum numeric value")
    max_length: Optional[int] = Field(None, alias="maxLength", ge=0, description="Maximum text length")


class QuestionCondition(BaseModel):
    """Show the question only when another question has the given answer."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    question_id: str = Field(..., alias="questionId", description="Id of the question this depends on")
    value: Optional[Any] = Field(None, description="Expected answer of the referenced question")


class Question(BaseModel):
    """Single assessment question."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    id: str = Field(..., min_length=1, description="Question id, unique within its assessment")
    type: QuestionType = Field(..., description="Input type")
    label: str = Field(..., description="Question text shown to the candidate")
    options: Optional[List[str]] = Field(None, description="Choices for choice questions")
    validation: Optional[QuestionValidation] = None
    condition: Optional[QuestionCondition] = None


class Assessment(BaseModel):
    """Ordered set of questions attached to one job."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    job_id: int = Field(..., alias="jobId")
    questions: List[Question] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_question_references(self):
        seen = set()
        for question in self.questions:
            if question.id in seen:
                raise ValueError(f"Duplicate question id: {question.id}")
            seen.add(question.id)
        for question in self.questions:
            if question.condition is None:
                continue
            ref = question.condition.question_id
            if ref == question.id or ref not in seen:
                raise ValueError(
                    f"Question {question.id} has a condition on unknown question {ref}"
                )
        return self

    def to_dict(self) -> dict:
        """Convert to the camelCase wire shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
