"""Application constants."""


class Latency:
    """Simulated latency per endpoint as (min_ms, max_ms)."""

    LIST_JOBS = (500, 500)
    GET_JOB = (300, 300)
    CREATE_JOB = (200, 1200)
    UPDATE_JOB = (600, 600)
    REORDER_JOB = (800, 800)
    LIST_CANDIDATES = (400, 400)
    CREATE_CANDIDATE = (500, 500)
    GET_CANDIDATE = (300, 300)
    GET_TIMELINE = (500, 500)
    UPDATE_CANDIDATE = (600, 600)
    GET_ASSESSMENT = (400, 400)
    SAVE_ASSESSMENT = (800, 800)
    SUBMIT_ASSESSMENT = (1000, 1000)

    @classmethod
    def for_endpoint(cls, endpoint: str) -> tuple:
        return getattr(cls, endpoint.upper(), (0, 0))


class Tables:
    """Logical table names used for transaction scoping."""

    JOBS = "jobs"
    CANDIDATES = "candidates"
    TIMELINE = "timeline"
    ASSESSMENTS = "assessments"
    ASSESSMENT_RESPONSES = "assessment_responses"

    ALL = (JOBS, CANDIDATES, TIMELINE, ASSESSMENTS, ASSESSMENT_RESPONSES)


class Messages:
    """Common user-facing messages."""

    DUPLICATE_SLUG = "Slug already in use: {slug}"
    STALE_ORDER = "Job {job_id} is at order {current}, not {requested}"
    ORDER_OUT_OF_RANGE = "Target order {order} outside 0..{last}"
    TIMEOUT = "Request timed out"
    SERVER_ERROR = "Server Error"
