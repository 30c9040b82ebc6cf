"""Assessment routes."""

from models.http_models import json_response
from models.request_models import SaveAssessmentRequest, SubmitResponseRequest
from routes.helpers import parse_body


def register_assessments(sim):
    """Register assessment-related routes."""

    @sim.route("/assessments/<int:job_id>", methods=["GET"], endpoint="get_assessment")
    async def get_assessment(request, job_id):
        assessment = await sim.assessments.get_assessment(job_id)
        return json_response(assessment.to_dict() if assessment else None)

    @sim.route("/assessments/<int:job_id>", methods=["PUT"], endpoint="save_assessment")
    async def save_assessment(request, job_id):
        data = parse_body(request.body, SaveAssessmentRequest)
        await sim.assessments.save_assessment(job_id, data.questions)
        return json_response({"success": True})

    @sim.route("/assessments/<int:job_id>/submit", methods=["POST"], endpoint="submit_assessment")
    async def submit_assessment(request, job_id):
        data = parse_body(request.body, SubmitResponseRequest)
        await sim.assessments.submit(
            job_id,
            data.responses,
            candidate_id=data.candidate_id,
            submitted_at=data.submitted_at,
        )
        return json_response({"success": True}, status=201)
