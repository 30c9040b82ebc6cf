"""Candidate and timeline routes."""

from config.settings import settings
from database.schema import CandidateStage
from models.http_models import json_response
from models.request_models import CreateCandidateRequest, UpdateCandidateRequest
from routes.helpers import parse_body, parse_enum_param, parse_int_param, parse_pagination


def register_candidates(sim):
    """Register candidate-related routes."""

    @sim.route("/candidates", methods=["GET"], endpoint="list_candidates")
    async def list_candidates(request):
        # Large default page: the client virtualizes the whole list.
        page, page_size = parse_pagination(request.query, settings.candidate_page_size)
        candidates = await sim.candidates.list_candidates(
            job_id=parse_int_param(request.query, "jobId", minimum=0),
            stage=parse_enum_param(request.query, "stage", CandidateStage),
            search=request.query.get("search"),
            page=page,
            page_size=page_size,
        )
        return json_response([candidate.to_dict() for candidate in candidates])

    @sim.route("/candidates", methods=["POST"], endpoint="create_candidate")
    async def create_candidate(request):
        data = parse_body(request.body, CreateCandidateRequest)
        candidate, _ = await sim.stages.create_candidate(
            data.name, data.email, data.job_id, data.stage
        )
        return json_response(candidate.to_dict(), status=201)

    @sim.route("/candidates/<int:candidate_id>", methods=["GET"], endpoint="get_candidate")
    async def get_candidate(request, candidate_id):
        candidate = await sim.candidates.get_candidate(candidate_id)
        return json_response(candidate.to_dict())

    @sim.route("/candidates/<int:candidate_id>", methods=["PATCH"], endpoint="update_candidate")
    async def update_candidate(request, candidate_id):
        data = parse_body(request.body, UpdateCandidateRequest)
        await sim.stages.change_stage(candidate_id, data.stage)
        return json_response({"success": True})

    @sim.route("/candidates/<int:candidate_id>/timeline", methods=["GET"], endpoint="get_timeline")
    async def get_timeline(request, candidate_id):
        entries = await sim.stages.get_timeline(candidate_id)
        return json_response([entry.to_dict() for entry in entries])
