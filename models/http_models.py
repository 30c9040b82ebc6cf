"""Request and response envelopes exchanged with the request simulator."""

from typing import Any, Dict, Optional


class SimulatedRequest:
    """Parsed request handed to a route handler."""

    def __init__(
        self,
        method: str,
        path: str,
        query: Optional[Dict[str, str]] = None,
        body: Any = None,
    ):
        self.method = method.upper()
        self.path = path
        self.query = dict(query or {})
        self.body = body

    def __repr__(self) -> str:
        return f"<SimulatedRequest {self.method} {self.path}>"


class SimulatedResponse:
    """HTTP-shaped result: a status code and a JSON-like payload."""

    def __init__(self, status: int, body: Any = None):
        self.status = status
        self.body = body

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status, "body": self.body}

    def __repr__(self) -> str:
        return f"<SimulatedResponse {self.status}>"


def json_response(body: Any, status: int = 200) -> SimulatedResponse:
    return SimulatedResponse(status, body)


def error_response(status: int, message: str, details: Any = None) -> SimulatedResponse:
    body = {"error": message}
    if details:
        body["details"] = details
    return SimulatedResponse(status, body)
