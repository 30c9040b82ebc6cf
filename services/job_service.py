"""Job service layer: creation, edits and filtered listing."""

from typing import List, Optional, Tuple

from constants import Tables
from core.exceptions import NotFoundError
from core.logger import logger
from database.db import Store, Transaction
from database.jobs import get_job, insert_job, list_jobs, update_job
from database.schema import Job, JobStatus
from services.ordering_service import order_for_new_job


class JobService:
    """Service for job records. Rank changes go through OrderingEngine."""

    def __init__(self, store: Store):
        self.store = store

    async def get_job(self, job_id: int) -> Job:
        job = await self.store.transaction([Tables.JOBS], lambda tx: get_job(tx, job_id))
        if job is None:
            raise NotFoundError("Job", job_id)
        return job

    async def create_job(self, title: str, slug: str, tags: Optional[List[str]] = None) -> Job:
        """
        Create an active job at the end of the ranking.

        Raises:
            ValidationConflictError: If the slug is already used
        """

        def work(tx: Transaction) -> Job:
            return insert_job(tx, title=title, slug=slug, tags=tags, order=order_for_new_job(tx))

        job = await self.store.transaction([Tables.JOBS], work)
        logger.info(f"Created job {job.id} '{job.slug}' at order {job.order}")
        return job

    async def update_job(self, job_id: int, **changes) -> Job:
        """
        Apply a partial edit (title, slug, status, tags).

        Raises:
            NotFoundError: If the job does not exist
            ValidationConflictError: If the new slug belongs to another job
        """

        def work(tx: Transaction) -> Job:
            if get_job(tx, job_id) is None:
                raise NotFoundError("Job", job_id)
            return update_job(tx, job_id, **changes)

        job = await self.store.transaction([Tables.JOBS], work)
        logger.info(f"Updated job {job_id}: {', '.join(sorted(changes)) or 'no changes'}")
        return job

    async def list_jobs(
        self,
        status: Optional[JobStatus] = None,
        search: Optional[str] = None,
        tags: Optional[List[str]] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> Tuple[List[Job], int]:
        """
        Filter and paginate jobs by ascending order.

        Returns:
            (jobs on the requested page, total number of matching jobs)
        """

        def matches(job: Job) -> bool:
            if search and not job.matches_search(search):
                return False
            if tags and not job.has_tags(tags):
                return False
            return True

        jobs = await self.store.transaction(
            [Tables.JOBS], lambda tx: list_jobs(tx, status=status, predicate=matches)
        )
        start = (page - 1) * page_size
        return jobs[start:start + page_size], len(jobs)
