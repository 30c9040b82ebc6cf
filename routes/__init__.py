"""Route registration for the request simulator."""

from routes.jobs import register_jobs
from routes.candidates import register_candidates
from routes.assessments import register_assessments


def register_all_routes(sim):
    """Register all route modules on the simulator."""
    register_jobs(sim)
    register_candidates(sim)
    register_assessments(sim)
