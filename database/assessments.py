"""Assessment and assessment response operations."""

import json
from datetime import datetime
from typing import List, Optional

from constants import Tables
from database.db import Transaction
from database.schema import AssessmentResponse
from models.assessment_models import Assessment


def get_assessment(tx: Transaction, job_id: int) -> Optional[Assessment]:
    """Get the assessment attached to a job."""
    tx.require(Tables.ASSESSMENTS)
    row = tx.fetchone("SELECT * FROM assessments WHERE job_id = ?", (job_id,))
    if not row:
        return None
    return Assessment.model_validate({"jobId": row["job_id"], "questions": json.loads(row["questions"])})


def save_assessment(tx: Transaction, assessment: Assessment) -> Assessment:
    """Replace the whole assessment for its job."""
    tx.require(Tables.ASSESSMENTS)
    questions = assessment.to_dict()["questions"]
    tx.execute(
        "INSERT OR REPLACE INTO assessments (job_id, questions) VALUES (?, ?)",
        (assessment.job_id, json.dumps(questions)),
    )
    return assessment


def _row_to_response(row) -> AssessmentResponse:
    return AssessmentResponse(
        id=row["id"],
        candidate_id=row["candidate_id"],
        assessment_id=row["assessment_id"],
        responses=json.loads(row["responses"]),
        submitted_at=datetime.fromisoformat(row["submitted_at"]),
    )


def insert_response(
    tx: Transaction,
    assessment_id: int,
    responses: dict,
    candidate_id: Optional[int] = None,
    submitted_at: Optional[datetime] = None,
) -> AssessmentResponse:
    """Store a submitted set of answers."""
    tx.require(Tables.ASSESSMENT_RESPONSES)
    submitted_at = submitted_at or datetime.now()
    cursor = tx.execute(
        """
        INSERT INTO assessment_responses (candidate_id, assessment_id, responses, submitted_at)
        VALUES (?, ?, ?, ?)
    """,
        (candidate_id, assessment_id, json.dumps(responses), submitted_at.isoformat()),
    )
    return AssessmentResponse(
        id=cursor.lastrowid,
        candidate_id=candidate_id,
        assessment_id=assessment_id,
        responses=responses,
        submitted_at=submitted_at,
    )


def get_responses(
    tx: Transaction,
    assessment_id: Optional[int] = None,
    candidate_id: Optional[int] = None,
) -> List[AssessmentResponse]:
    """Get submitted responses, optionally by assessment and/or candidate."""
    tx.require(Tables.ASSESSMENT_RESPONSES)
    clauses = []
    values = []
    if assessment_id is not None:
        clauses.append("assessment_id = ?")
        values.append(assessment_id)
    if candidate_id is not None:
        clauses.append("candidate_id = ?")
        values.append(candidate_id)
    where = f' WHERE {" AND ".join(clauses)}' if clauses else ""
    rows = tx.fetchall(f"SELECT * FROM assessment_responses{where} ORDER BY id", values)
    return [_row_to_response(row) for row in rows]
