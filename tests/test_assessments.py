"""Tests for assessment storage and submission checks."""

import pytest

from constants import Tables
from database.assessments import get_responses
from models.assessment_models import Assessment, Question
from services.assessment_service import check_answer, is_visible, validate_responses

QUESTIONS = [
    {"id": "q1", "type": "single-choice", "label": "Worked remotely before?",
     "options": ["Yes", "No"], "validation": {"required": True}},
    {"id": "q2", "type": "long-text", "label": "Describe your remote setup",
     "validation": {"required": True, "maxLength": 20},
     "condition": {"questionId": "q1", "value": "Yes"}},
    {"id": "q3", "type": "numeric", "label": "Years of experience",
     "validation": {"min": 0, "max": 40}},
    {"id": "q4", "type": "multi-choice", "label": "Stacks", "options": ["React", "Vue", "Svelte"]},
]


async def _save(simulator, job_id=1, questions=QUESTIONS):
    response = await simulator.put(f"/assessments/{job_id}", {"questions": questions})
    assert response.status == 200, response.body
    return response


@pytest.mark.asyncio
async def test_missing_assessment_is_null(simulator):
    response = await simulator.get("/assessments/1")
    assert response.status == 200
    assert response.body is None


@pytest.mark.asyncio
async def test_save_and_load_round_trip(simulator):
    await _save(simulator)
    body = (await simulator.get("/assessments/1")).body
    assert body["jobId"] == 1
    assert [q["id"] for q in body["questions"]] == ["q1", "q2", "q3", "q4"]
    assert body["questions"][1]["validation"]["maxLength"] == 20
    assert body["questions"][1]["condition"] == {"questionId": "q1", "value": "Yes"}


@pytest.mark.asyncio
async def test_save_replaces_questions(simulator):
    await _save(simulator)
    await _save(simulator, questions=QUESTIONS[:1])
    body = (await simulator.get("/assessments/1")).body
    assert [q["id"] for q in body["questions"]] == ["q1"]


@pytest.mark.asyncio
async def test_invalid_assessments_are_rejected(simulator):
    duplicate = [QUESTIONS[0], dict(QUESTIONS[0])]
    assert (await simulator.put("/assessments/1", {"questions": duplicate})).status == 400
    dangling = [QUESTIONS[1]]
    assert (await simulator.put("/assessments/1", {"questions": dangling})).status == 400
    bad_type = [{"id": "q1", "type": "slider", "label": "?"}]
    assert (await simulator.put("/assessments/1", {"questions": bad_type})).status == 400
    assert (await simulator.get("/assessments/1")).body is None


@pytest.mark.asyncio
async def test_submit_without_assessment_is_404(simulator):
    response = await simulator.post("/assessments/9/submit", {"responses": {}})
    assert response.status == 404


@pytest.mark.asyncio
async def test_valid_submission_is_stored(simulator, store):
    await _save(simulator)
    response = await simulator.post(
        "/assessments/1/submit",
        {"candidateId": 4, "responses": {"q1": "Yes", "q2": "Desk and VPN", "q3": "5", "q4": ["Vue"]},
         "submittedAt": "2024-03-01T10:00:00"},
    )
    assert response.status == 201
    saved = await store.transaction(
        [Tables.ASSESSMENT_RESPONSES], lambda tx: get_responses(tx, candidate_id=4)
    )
    assert len(saved) == 1
    assert saved[0].assessment_id == 1
    assert saved[0].responses["q2"] == "Desk and VPN"


@pytest.mark.asyncio
async def test_hidden_required_question_is_skipped(simulator):
    await _save(simulator)
    response = await simulator.post("/assessments/1/submit", {"responses": {"q1": "No"}})
    assert response.status == 201


@pytest.mark.asyncio
async def test_rule_violations_return_400_and_store_nothing(simulator, store):
    await _save(simulator)
    response = await simulator.post(
        "/assessments/1/submit",
        {"responses": {"q1": "Maybe", "q3": 99, "q4": ["Angular"]}},
    )
    assert response.status == 400
    assert set(response.body["details"]) == {"q1", "q3", "q4"}
    assert await store.count(Tables.ASSESSMENT_RESPONSES) == 0

    response = await simulator.post(
        "/assessments/1/submit", {"responses": {"q1": "Yes", "q2": "x" * 21}}
    )
    assert response.status == 400
    assert response.body["details"]["q2"] == ["Must be 20 characters or less"]


def test_check_answer_rules():
    assessment = Assessment(job_id=1, questions=QUESTIONS)
    q1, q2, q3, q4 = assessment.questions
    assert check_answer(q1, None) == ["This field is required"]
    assert check_answer(q1, "  ") == ["This field is required"]
    assert check_answer(q1, "Yes") == []
    assert check_answer(q3, None) == []
    assert check_answer(q3, "abc") == ["Must be a number"]
    assert check_answer(q3, -1) == ["Minimum value is 0"]
    assert check_answer(q3, 41) == ["Maximum value is 40"]
    assert check_answer(q4, ["React", "Svelte"]) == []


def test_condition_visibility():
    assessment = Assessment(job_id=1, questions=QUESTIONS)
    follow_up = assessment.questions[1]
    assert is_visible(follow_up, {"q1": "Yes"})
    assert not is_visible(follow_up, {"q1": "No"})
    assert not is_visible(follow_up, {})
    assert validate_responses(assessment, {"q1": "Yes"}) == {"q2": ["This field is required"]}


def test_question_accepts_snake_case_names():
    question = Question(id="q", type="short-text", label="Name", validation={"max_length": 5})
    assert question.validation.max_length == 5


@pytest.mark.asyncio
@pytest.mark.parametrize("answer", ["nan", "NaN", "inf", "-Infinity", float("nan")])
async def test_non_finite_numbers_are_rejected(simulator, store, answer):
    await _save(simulator)
    response = await simulator.post(
        "/assessments/1/submit", {"responses": {"q1": "No", "q3": answer}}
    )
    assert response.status == 400
    assert response.body["details"]["q3"] == ["Must be a number"]
    assert await store.count(Tables.ASSESSMENT_RESPONSES) == 0
