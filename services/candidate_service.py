"""Candidate read service. Stage writes live in StageAuditEngine."""

from typing import List, Optional

from constants import Tables
from core.exceptions import NotFoundError
from database.candidates import get_candidate, list_candidates
from database.db import Store
from database.schema import Candidate, CandidateStage


class CandidateService:
    """Service for candidate lookups and listing."""

    def __init__(self, store: Store):
        self.store = store

    async def get_candidate(self, candidate_id: int) -> Candidate:
        candidate = await self.store.transaction(
            [Tables.CANDIDATES], lambda tx: get_candidate(tx, candidate_id)
        )
        if candidate is None:
            raise NotFoundError("Candidate", candidate_id)
        return candidate

    async def list_candidates(
        self,
        job_id: Optional[int] = None,
        stage: Optional[CandidateStage] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 1000,
    ) -> List[Candidate]:
        """Filter candidates by job, stage and name/email substring, then paginate."""
        query = (search or "").strip().lower()

        def matches(candidate: Candidate) -> bool:
            return query in candidate.name.lower() or query in candidate.email.lower()

        candidates = await self.store.transaction(
            [Tables.CANDIDATES],
            lambda tx: list_candidates(
                tx, job_id=job_id, stage=stage, predicate=matches if query else None
            ),
        )
        start = (page - 1) * page_size
        return candidates[start:start + page_size]
