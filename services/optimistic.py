"""Optimistic updates against the request simulator.

A client applies a change to its local view before the server answers and
undoes it if the server refuses. Each change is a ``SpeculativeCommand``;
``OptimisticExecutor`` runs the protocol:

1. snapshot the local view
2. ``apply`` the change locally
3. ``send`` the request
4. on a non-2xx status restore the snapshot (``compensate``) and report
   the failure; on success ``commit`` and keep the speculative state
"""

import asyncio
import copy
from typing import Any, Callable, Dict, List, Optional

from core.logger import logger
from database.schema import CandidateStage, JobStatus
from models.http_models import SimulatedResponse


class LocalView:
    """Client-side copy of jobs and candidates as plain dicts."""

    def __init__(self, jobs: Optional[List[dict]] = None, candidates: Optional[List[dict]] = None):
        self.jobs = list(jobs or [])
        self.candidates = list(candidates or [])

    def find_job(self, job_id: int) -> dict:
        for job in self.jobs:
            if job["id"] == job_id:
                return job
        raise KeyError(f"Job {job_id} is not in the local view")

    def find_candidate(self, candidate_id: int) -> dict:
        for candidate in self.candidates:
            if candidate["id"] == candidate_id:
                return candidate
        raise KeyError(f"Candidate {candidate_id} is not in the local view")

    def snapshot(self) -> Dict[str, List[dict]]:
        return {"jobs": copy.deepcopy(self.jobs), "candidates": copy.deepcopy(self.candidates)}

    def restore(self, snapshot: Dict[str, List[dict]]) -> None:
        self.jobs[:] = snapshot["jobs"]
        self.candidates[:] = snapshot["candidates"]


class OptimisticOutcome:
    """Result of running one speculative command."""

    def __init__(self, committed: bool, status: Optional[int] = None, error: Optional[str] = None):
        self.committed = committed
        self.status = status
        self.error = error

    def __repr__(self) -> str:
        return f"<OptimisticOutcome committed={self.committed} status={self.status}>"


class SpeculativeCommand:
    """A local change plus the request that makes it permanent."""

    description = "update"

    def is_noop(self, view: LocalView) -> bool:
        return False

    def apply(self, view: LocalView) -> None:
        raise NotImplementedError

    async def send(self, simulator) -> SimulatedResponse:
        raise NotImplementedError

    def commit(self, view: LocalView, response: SimulatedResponse) -> None:
        """Keep the speculative state; the response body is not merged back."""

    def compensate(self, view: LocalView, snapshot: Dict[str, List[dict]]) -> None:
        view.restore(snapshot)


class ToggleJobStatus(SpeculativeCommand):
    """Archive an active job or unarchive an archived one."""

    description = "job status update"

    def __init__(self, job_id: int):
        self.job_id = job_id
        self.new_status: Optional[str] = None

    def apply(self, view: LocalView) -> None:
        job = view.find_job(self.job_id)
        current = JobStatus(job["status"])
        target = JobStatus.ARCHIVED if current == JobStatus.ACTIVE else JobStatus.ACTIVE
        self.new_status = target.value
        job["status"] = self.new_status

    async def send(self, simulator) -> SimulatedResponse:
        return await simulator.patch(f"/jobs/{self.job_id}", {"status": self.new_status})


class ReorderJob(SpeculativeCommand):
    """Move a job to a new rank, shifting the jobs in between locally."""

    description = "job reorder"

    def __init__(self, job_id: int, to_order: int):
        self.job_id = job_id
        self.to_order = to_order
        self.from_order: Optional[int] = None

    def is_noop(self, view: LocalView) -> bool:
        return view.find_job(self.job_id)["order"] == self.to_order

    def apply(self, view: LocalView) -> None:
        moved = view.find_job(self.job_id)
        self.from_order = moved["order"]
        low, high = sorted((self.from_order, self.to_order))
        step = -1 if self.from_order < self.to_order else 1
        for job in view.jobs:
            if job is not moved and low <= job["order"] <= high:
                job["order"] += step
        moved["order"] = self.to_order
        view.jobs.sort(key=lambda job: job["order"])

    async def send(self, simulator) -> SimulatedResponse:
        return await simulator.patch(
            f"/jobs/{self.job_id}/reorder",
            {"fromOrder": self.from_order, "toOrder": self.to_order},
        )


class MoveCandidateStage(SpeculativeCommand):
    """Move a candidate card to another pipeline column."""

    description = "candidate stage update"

    def __init__(self, candidate_id: int, stage: CandidateStage):
        self.candidate_id = candidate_id
        self.stage = CandidateStage(stage)

    def is_noop(self, view: LocalView) -> bool:
        return view.find_candidate(self.candidate_id)["stage"] == self.stage.value

    def apply(self, view: LocalView) -> None:
        view.find_candidate(self.candidate_id)["stage"] = self.stage.value

    async def send(self, simulator) -> SimulatedResponse:
        return await simulator.patch(f"/candidates/{self.candidate_id}", {"stage": self.stage.value})


def _log_failure(command: SpeculativeCommand, outcome: OptimisticOutcome) -> None:
    logger.warning(f"{command.description.capitalize()} failed ({outcome.status}): {outcome.error}")


class OptimisticExecutor:
    """Runs speculative commands against a simulator and a local view."""

    def __init__(
        self,
        simulator,
        view: LocalView,
        on_failure: Optional[Callable[[SpeculativeCommand, OptimisticOutcome], Any]] = None,
    ):
        self.simulator = simulator
        self.view = view
        self.on_failure = on_failure or _log_failure

    async def run(self, command: SpeculativeCommand) -> OptimisticOutcome:
        if command.is_noop(self.view):
            return OptimisticOutcome(committed=True)

        snapshot = self.view.snapshot()
        command.apply(self.view)
        try:
            response = await command.send(self.simulator)
        except asyncio.CancelledError:
            command.compensate(self.view, snapshot)
            raise

        if response.ok:
            command.commit(self.view, response)
            return OptimisticOutcome(committed=True, status=response.status)

        command.compensate(self.view, snapshot)
        body = response.body if isinstance(response.body, dict) else {}
        outcome = OptimisticOutcome(
            committed=False, status=response.status, error=body.get("error", "Request failed")
        )
        self.on_failure(command, outcome)
        return outcome
