"""Job ranking: keeps job ``order`` values dense and unique."""

from constants import Messages, Tables
from core.exceptions import NotFoundError, ValidationConflictError
from core.logger import logger
from database.db import Store, Transaction
from database.jobs import count_jobs, get_job, list_jobs, set_job_order, shift_orders
from database.schema import Job


def order_for_new_job(tx: Transaction) -> int:
    """Rank given to a job created inside ``tx``: the end of the list."""
    return count_jobs(tx)


def apply_reorder(tx: Transaction, job_id: int, from_order: int, to_order: int) -> Job:
    """
    Move one job from ``from_order`` to ``to_order`` inside an open transaction.

    Jobs between the two positions slide one step toward ``from_order``:
    moving forward, jobs in (from, to] decrement; moving backward, jobs in
    [to, from) increment.

    Raises:
        NotFoundError: If the job does not exist
        ValidationConflictError: If ``from_order`` is not the job's stored
            order or ``to_order`` is outside 0..N-1
    """
    job = get_job(tx, job_id)
    if job is None:
        raise NotFoundError("Job", job_id)
    if job.order != from_order:
        raise ValidationConflictError(
            Messages.STALE_ORDER.format(job_id=job_id, current=job.order, requested=from_order)
        )
    total = count_jobs(tx)
    if not 0 <= to_order < total:
        raise ValidationConflictError(
            Messages.ORDER_OUT_OF_RANGE.format(order=to_order, last=total - 1)
        )
    if from_order == to_order:
        return job

    if from_order < to_order:
        shifted = shift_orders(tx, from_order + 1, to_order, -1, exclude_id=job_id)
    else:
        shifted = shift_orders(tx, to_order, from_order - 1, 1, exclude_id=job_id)
    set_job_order(tx, job_id, to_order)
    logger.debug(f"Job {job_id} moved {from_order} -> {to_order}, {shifted} sibling(s) shifted")
    job.order = to_order
    return job


class OrderingEngine:
    """Maintains the dense rank over all jobs."""

    def __init__(self, store: Store):
        self.store = store

    async def next_order(self) -> int:
        """Order value for a newly created job (the current job count)."""
        return await self.store.transaction([Tables.JOBS], order_for_new_job)

    async def reorder(self, job_id: int, from_order: int, to_order: int) -> Job:
        """Move a job to a new rank as one atomic write over the jobs table."""
        job = await self.store.transaction(
            [Tables.JOBS], lambda tx: apply_reorder(tx, job_id, from_order, to_order)
        )
        logger.info(f"Reordered job {job_id}: {from_order} -> {to_order}")
        return job

    async def normalize(self) -> int:
        """
        Rewrite orders to 0..N-1, keeping the current relative order.

        Returns:
            Number of jobs whose order changed
        """

        def work(tx: Transaction) -> int:
            changed = 0
            for index, job in enumerate(list_jobs(tx)):
                if job.order != index:
                    set_job_order(tx, job.id, index)
                    changed += 1
            return changed

        changed = await self.store.transaction([Tables.JOBS], work)
        if changed:
            logger.warning(f"Normalized job order: {changed} job(s) renumbered")
        return changed

    async def is_dense(self) -> bool:
        """True when job orders are exactly 0..N-1."""

        def work(tx: Transaction) -> bool:
            orders = sorted(job.order for job in list_jobs(tx))
            return orders == list(range(len(orders)))

        return await self.store.transaction([Tables.JOBS], work)
