"""Assessment service layer: save/load question sets and accept submissions."""

import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from constants import Tables
from core.exceptions import NotFoundError, RequestValidationError
from core.logger import logger
from database.assessments import get_assessment, insert_response, save_assessment
from database.db import Store
from database.schema import AssessmentResponse, QuestionType
from models.assessment_models import Assessment, Question


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def is_visible(question: Question, responses: Dict[str, Any]) -> bool:
    """A conditional question is shown only when its trigger has the expected answer."""
    if question.condition is None:
        return True
    return responses.get(question.condition.question_id) == question.condition.value


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value) if isinstance(value, (int, float)) else float(str(value).strip())
    except (ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def check_answer(question: Question, value: Any) -> List[str]:
    """Problems with one answer; empty list when it is acceptable."""
    rules = question.validation
    if _is_blank(value):
        if rules is not None and rules.required:
            return ["This field is required"]
        return []

    errors = []
    if question.type == QuestionType.NUMERIC:
        number = _to_number(value)
        if number is None:
            return ["Must be a number"]
        if rules is not None and rules.min is not None and number < rules.min:
            errors.append(f"Minimum value is {rules.min:g}")
        if rules is not None and rules.max is not None and number > rules.max:
            errors.append(f"Maximum value is {rules.max:g}")
    elif question.type == QuestionType.SINGLE_CHOICE and question.options:
        if value not in question.options:
            errors.append("Not one of the available options")
    elif question.type == QuestionType.MULTI_CHOICE:
        values = value if isinstance(value, list) else [value]
        if question.options and any(v not in question.options for v in values):
            errors.append("Not one of the available options")

    if rules is not None and rules.max_length is not None and isinstance(value, str):
        if len(value) > rules.max_length:
            errors.append(f"Must be {rules.max_length} characters or less")
    return errors


def validate_responses(assessment: Assessment, responses: Dict[str, Any]) -> Dict[str, List[str]]:
    """Per-question problems for the visible questions of an assessment."""
    problems = {}
    for question in assessment.questions:
        if not is_visible(question, responses):
            continue
        errors = check_answer(question, responses.get(question.id))
        if errors:
            problems[question.id] = errors
    return problems


class AssessmentService:
    """Service for assessments (one per job) and candidate submissions."""

    def __init__(self, store: Store):
        self.store = store

    async def get_assessment(self, job_id: int) -> Optional[Assessment]:
        return await self.store.transaction(
            [Tables.ASSESSMENTS], lambda tx: get_assessment(tx, job_id)
        )

    async def save_assessment(self, job_id: int, questions: List[Question]) -> Assessment:
        """Replace the job's question list wholesale."""
        try:
            assessment = Assessment(job_id=job_id, questions=questions)
        except ValueError as e:
            raise RequestValidationError(f"Invalid assessment: {e}") from e
        await self.store.transaction(
            [Tables.ASSESSMENTS], lambda tx: save_assessment(tx, assessment)
        )
        logger.info(f"Saved assessment for job {job_id} ({len(questions)} questions)")
        return assessment

    async def submit(
        self,
        job_id: int,
        responses: Dict[str, Any],
        candidate_id: Optional[int] = None,
        submitted_at: Optional[datetime] = None,
    ) -> AssessmentResponse:
        """
        Check answers against the job's assessment and store them.

        Raises:
            NotFoundError: If the job has no assessment
            RequestValidationError: If any visible answer breaks its rules
        """

        def work(tx):
            assessment = get_assessment(tx, job_id)
            if assessment is None:
                raise NotFoundError("Assessment", job_id)
            problems = validate_responses(assessment, responses)
            if problems:
                raise RequestValidationError(
                    f"Invalid answers for {len(problems)} question(s)", errors=problems
                )
            return insert_response(
                tx, job_id, responses, candidate_id=candidate_id, submitted_at=submitted_at
            )

        saved = await self.store.transaction(
            [Tables.ASSESSMENTS, Tables.ASSESSMENT_RESPONSES], work
        )
        logger.info(f"Stored assessment response {saved.id} for job {job_id}")
        return saved
