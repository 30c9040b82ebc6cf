"""Persistent store: schema, connection and per-table operations."""
from .schema import (
    Job, Candidate, TimelineEntry, AssessmentResponse,
    JobStatus, CandidateStage, QuestionType, STAGE_EVENTS,
)
from .db import Store, Transaction

__all__ = [
    'Job', 'Candidate', 'TimelineEntry', 'AssessmentResponse',
    'JobStatus', 'CandidateStage', 'QuestionType', 'STAGE_EVENTS',
    'Store', 'Transaction',
]
