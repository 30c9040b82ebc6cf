"""Services package."""
from services.job_service import JobService
from services.candidate_service import CandidateService
from services.assessment_service import AssessmentService
from services.ordering_service import OrderingEngine
from services.stage_service import StageAuditEngine
from services.request_simulator import RequestSimulator

__all__ = [
    "JobService",
    "CandidateService",
    "AssessmentService",
    "OrderingEngine",
    "StageAuditEngine",
    "RequestSimulator",
]
