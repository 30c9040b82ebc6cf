"""Tests for optimistic updates with rollback."""

import asyncio
import copy

import pytest

from database.schema import CandidateStage
from services.fault_injection import AlwaysFail, FaultDecision
from services.optimistic import (
    LocalView,
    MoveCandidateStage,
    OptimisticExecutor,
    ReorderJob,
    ToggleJobStatus,
)


async def _view(simulator):
    jobs = (await simulator.get("/jobs", pageSize=100)).body["jobs"]
    candidates = (await simulator.get("/candidates")).body
    return LocalView(jobs, candidates)


@pytest.mark.asyncio
async def test_toggle_status_commits(simulator, make_job):
    job = await make_job("Backend Engineer")
    view = await _view(simulator)
    outcome = await OptimisticExecutor(simulator, view).run(ToggleJobStatus(job["id"]))
    assert outcome.committed
    assert outcome.status == 200
    assert view.find_job(job["id"])["status"] == "archived"
    assert (await simulator.get(f"/jobs/{job['id']}")).body["status"] == "archived"


@pytest.mark.asyncio
async def test_failed_toggle_restores_exact_snapshot(simulator, make_job):
    job = await make_job("Backend Engineer")
    await make_job("Frontend Engineer")
    view = await _view(simulator)
    before = copy.deepcopy(view.jobs)
    failures = []

    simulator.faults = AlwaysFail(["update_job"])
    executor = OptimisticExecutor(simulator, view, on_failure=lambda cmd, out: failures.append((cmd, out)))
    outcome = await executor.run(ToggleJobStatus(job["id"]))

    assert not outcome.committed
    assert outcome.status == 500
    assert view.jobs == before
    assert len(failures) == 1
    assert failures[0][1].error
    assert (await simulator.get(f"/jobs/{job['id']}")).body["status"] == "active"


@pytest.mark.asyncio
async def test_reorder_shifts_locally_and_matches_server(simulator, make_job):
    for title in ["A", "B", "C", "D"]:
        await make_job(title)
    view = await _view(simulator)
    a_id = view.jobs[0]["id"]

    outcome = await OptimisticExecutor(simulator, view).run(ReorderJob(a_id, 2))
    assert outcome.committed
    assert [(j["title"], j["order"]) for j in view.jobs] == [("B", 0), ("C", 1), ("A", 2), ("D", 3)]

    server = (await simulator.get("/jobs")).body["jobs"]
    assert [(j["title"], j["order"]) for j in server] == [(j["title"], j["order"]) for j in view.jobs]


@pytest.mark.asyncio
async def test_failed_reorder_rolls_back(simulator, make_job):
    for title in ["A", "B", "C"]:
        await make_job(title)
    view = await _view(simulator)
    before = copy.deepcopy(view.jobs)

    simulator.faults = AlwaysFail(["reorder_job"])
    outcome = await OptimisticExecutor(simulator, view, on_failure=lambda *_: None).run(
        ReorderJob(view.jobs[2]["id"], 0)
    )
    assert not outcome.committed
    assert view.jobs == before


@pytest.mark.asyncio
async def test_stale_reorder_is_refused_and_rolled_back(simulator, make_job):
    for title in ["A", "B"]:
        await make_job(title)
    view = await _view(simulator)
    before = copy.deepcopy(view.jobs)
    # Server order changed behind the view's back
    await simulator.patch(f"/jobs/{view.jobs[0]['id']}/reorder", {"fromOrder": 0, "toOrder": 1})

    outcome = await OptimisticExecutor(simulator, view, on_failure=lambda *_: None).run(
        ReorderJob(view.jobs[0]["id"], 1)
    )
    assert outcome.status == 409
    assert view.jobs == before


@pytest.mark.asyncio
async def test_same_position_reorder_sends_nothing(simulator, make_job):
    await make_job("A")
    view = await _view(simulator)
    simulator.faults = AlwaysFail()
    outcome = await OptimisticExecutor(simulator, view).run(ReorderJob(view.jobs[0]["id"], 0))
    assert outcome.committed
    assert outcome.status is None


@pytest.mark.asyncio
async def test_move_candidate_stage(simulator, make_candidate):
    candidate = await make_candidate()
    view = await _view(simulator)
    outcome = await OptimisticExecutor(simulator, view).run(
        MoveCandidateStage(candidate["id"], CandidateStage.SCREEN)
    )
    assert outcome.committed
    assert view.find_candidate(candidate["id"])["stage"] == "screen"
    timeline = (await simulator.get(f"/candidates/{candidate['id']}/timeline")).body
    assert len(timeline) == 2


@pytest.mark.asyncio
async def test_failed_stage_move_rolls_back(simulator, make_candidate):
    candidate = await make_candidate()
    view = await _view(simulator)
    simulator.faults = AlwaysFail(["update_candidate"])
    outcome = await OptimisticExecutor(simulator, view, on_failure=lambda *_: None).run(
        MoveCandidateStage(candidate["id"], "hired")
    )
    assert not outcome.committed
    assert view.find_candidate(candidate["id"])["stage"] == "applied"


@pytest.mark.asyncio
async def test_cancelled_request_rolls_back(simulator, make_job):
    job = await make_job("A")
    view = await _view(simulator)
    simulator.faults = lambda endpoint: FaultDecision(delay=5.0, fail=False)

    task = asyncio.create_task(OptimisticExecutor(simulator, view).run(ToggleJobStatus(job["id"])))
    await asyncio.sleep(0.01)
    assert view.find_job(job["id"])["status"] == "archived"
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert view.find_job(job["id"])["status"] == "active"


def test_unknown_ids_raise_key_error():
    view = LocalView()
    with pytest.raises(KeyError):
        view.find_job(1)
    with pytest.raises(KeyError):
        view.find_candidate(1)
