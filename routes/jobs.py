"""Job routes."""

from config.settings import settings
from database.schema import JobStatus
from models.http_models import json_response
from models.request_models import CreateJobRequest, ReorderJobRequest, UpdateJobRequest
from routes.helpers import parse_body, parse_enum_param, parse_pagination, parse_tags


def register_jobs(sim):
    """Register job-related routes."""

    @sim.route("/jobs", methods=["GET"], endpoint="list_jobs")
    async def list_jobs(request):
        """Filtered, paginated jobs in rank order."""
        page, page_size = parse_pagination(request.query, settings.default_page_size)
        status = parse_enum_param(request.query, "status", JobStatus)
        jobs, total = await sim.jobs.list_jobs(
            status=status,
            search=request.query.get("search"),
            tags=parse_tags(request.query.get("tags")),
            page=page,
            page_size=page_size,
        )
        return json_response({
            "jobs": [job.to_dict() for job in jobs],
            "totalCount": total,
            "page": page,
            "pageSize": page_size,
        })

    @sim.route("/jobs/<int:job_id>", methods=["GET"], endpoint="get_job")
    async def get_job(request, job_id):
        job = await sim.jobs.get_job(job_id)
        return json_response(job.to_dict())

    @sim.route("/jobs", methods=["POST"], endpoint="create_job")
    async def create_job(request):
        data = parse_body(request.body, CreateJobRequest)
        job = await sim.jobs.create_job(data.title, data.slug, data.tags)
        return json_response(job.to_dict(), status=201)

    @sim.route("/jobs/<int:job_id>", methods=["PATCH"], endpoint="update_job")
    async def update_job(request, job_id):
        data = parse_body(request.body, UpdateJobRequest)
        job = await sim.jobs.update_job(job_id, **data.changes())
        return json_response(job.to_dict())

    @sim.route("/jobs/<int:job_id>/reorder", methods=["PATCH"], endpoint="reorder_job")
    async def reorder_job(request, job_id):
        data = parse_body(request.body, ReorderJobRequest)
        await sim.ordering.reorder(job_id, data.from_order, data.to_order)
        return json_response({"success": True})
