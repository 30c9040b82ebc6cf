"""Candidate stage transitions and their timeline audit trail."""

from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from config.settings import settings
from constants import Tables
from core.exceptions import NotFoundError
from core.logger import logger
from database.candidates import get_candidate, insert_candidate, set_candidate_stage
from database.db import Store, Transaction
from database.schema import STAGE_EVENTS, Candidate, CandidateStage, TimelineEntry
from database.timeline import append_entry, get_entries_for_candidate


def describe_stage(stage: CandidateStage) -> Tuple[str, str]:
    """Event label and notes recorded when a candidate enters ``stage``."""
    return STAGE_EVENTS[CandidateStage(stage)]


def _append_stage_entry(
    tx: Transaction, candidate_id: int, stage: CandidateStage, timestamp: Optional[datetime] = None
) -> TimelineEntry:
    event, notes = describe_stage(stage)
    return append_entry(tx, candidate_id, event, stage=stage, notes=notes, timestamp=timestamp)


class StageAuditEngine:
    """
    Owns every candidate stage write.

    Any stage may move to any other stage. Each real change is written
    together with exactly one timeline entry in a single transaction over
    the candidates and timeline tables.
    """

    TABLES = (Tables.CANDIDATES, Tables.TIMELINE)

    def __init__(self, store: Store, genesis_offset: Optional[timedelta] = None):
        self.store = store
        if genesis_offset is None:
            genesis_offset = timedelta(minutes=settings.genesis_offset_minutes)
        self.genesis_offset = genesis_offset

    async def create_candidate(
        self,
        name: str,
        email: str,
        job_id: Optional[int],
        stage: CandidateStage = CandidateStage.APPLIED,
    ) -> Tuple[Candidate, TimelineEntry]:
        """Insert a candidate and its first timeline entry atomically."""

        def work(tx: Transaction):
            candidate = insert_candidate(tx, name, email, job_id, stage)
            entry = _append_stage_entry(tx, candidate.id, candidate.stage)
            return candidate, entry

        candidate, entry = await self.store.transaction(self.TABLES, work)
        logger.info(f"Created candidate {candidate.id} at stage {candidate.stage.value}")
        return candidate, entry

    async def change_stage(self, candidate_id: int, stage: CandidateStage) -> Optional[TimelineEntry]:
        """
        Move a candidate to ``stage``.

        Returns:
            The new timeline entry, or None when the candidate already was
            at ``stage`` (nothing is written in that case)

        Raises:
            NotFoundError: If the candidate does not exist
        """
        stage = CandidateStage(stage)

        def work(tx: Transaction) -> Optional[TimelineEntry]:
            candidate = get_candidate(tx, candidate_id)
            if candidate is None:
                raise NotFoundError("Candidate", candidate_id)
            if candidate.stage == stage:
                return None
            set_candidate_stage(tx, candidate_id, stage)
            return _append_stage_entry(tx, candidate_id, stage)

        entry = await self.store.transaction(self.TABLES, work)
        if entry is None:
            logger.debug(f"Candidate {candidate_id} already at stage {stage.value}")
        else:
            logger.info(f"Candidate {candidate_id} moved to stage {stage.value}")
        return entry

    async def get_timeline(self, candidate_id: int) -> List[TimelineEntry]:
        """
        Timeline for a candidate, newest first.

        A candidate with no entries gets a genesis entry built from its
        current stage, backdated by ``genesis_offset`` and persisted so
        later reads return the same history.
        """

        def work(tx: Transaction) -> List[TimelineEntry]:
            candidate = get_candidate(tx, candidate_id)
            if candidate is None:
                raise NotFoundError("Candidate", candidate_id)
            entries = get_entries_for_candidate(tx, candidate_id)
            if not entries:
                genesis = _append_stage_entry(
                    tx, candidate_id, candidate.stage, timestamp=datetime.now() - self.genesis_offset
                )
                logger.info(f"Backfilled genesis timeline entry for candidate {candidate_id}")
                entries = [genesis]
            return entries

        return await self.store.transaction(self.TABLES, work)
