"""In-process stand-in for the remote REST API.

Requests are routed with a werkzeug URL map, delayed and possibly failed by
a fault strategy, then delegated to the services and engines. Domain errors
are translated to status codes here and nowhere else.
"""

import asyncio
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, urlsplit

from werkzeug.exceptions import HTTPException
from werkzeug.routing import Map, Rule

from config.settings import Settings, settings as default_settings
from constants import Messages
from core.exceptions import (
    InjectedTransientFailure,
    NotFoundError,
    RequestValidationError,
    ValidationConflictError,
)
from core.logger import logger
from database.db import Store
from models.http_models import SimulatedRequest, SimulatedResponse, error_response
from routes import register_all_routes
from services.assessment_service import AssessmentService
from services.candidate_service import CandidateService
from services.fault_injection import FaultStrategy, RandomFaults
from services.job_service import JobService
from services.ordering_service import OrderingEngine
from services.stage_service import StageAuditEngine


class RequestSimulator:
    """Facade exposing REST-like endpoints over one Store."""

    def __init__(
        self,
        store: Store,
        faults: Optional[FaultStrategy] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the simulator.

        Args:
            store: Opened Store shared by every service
            faults: Fault strategy; defaults to RandomFaults built from settings
            settings: Settings used for defaults (timeouts, fault rates)
        """
        self.settings = settings or default_settings
        self.store = store
        self.faults = faults or RandomFaults.from_settings(self.settings)
        self.timeout = self.settings.request_timeout_seconds

        self.jobs = JobService(store)
        self.ordering = OrderingEngine(store)
        self.candidates = CandidateService(store)
        self.stages = StageAuditEngine(store)
        self.assessments = AssessmentService(store)

        self.url_map = Map()
        self._handlers: Dict[str, Any] = {}
        register_all_routes(self)
        logger.info(f"RequestSimulator initialized with {len(self._handlers)} endpoints")

    def route(self, rule: str, methods, endpoint: str):
        """Decorator registering an async handler for ``rule``."""

        def decorator(handler):
            self.url_map.add(Rule(rule, methods=methods, endpoint=endpoint))
            self._handlers[endpoint] = handler
            return handler

        return decorator

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        query: Optional[Dict[str, Any]] = None,
    ) -> SimulatedResponse:
        """
        Handle one request.

        Args:
            method: HTTP method
            path: Path, optionally with a query string
            body: JSON-like request body
            query: Extra query parameters (merged over the path's query string)

        Returns:
            SimulatedResponse with status and payload
        """
        parts = urlsplit(path)
        params = dict(parse_qsl(parts.query, keep_blank_values=True))
        if query:
            params.update({k: str(v) for k, v in query.items() if v is not None})
        request = SimulatedRequest(method, parts.path, params, body)

        if self.timeout is None:
            return await self._dispatch(request)
        try:
            return await asyncio.wait_for(self._dispatch(request), self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{request.method} {request.path} timed out after {self.timeout}s")
            return error_response(504, Messages.TIMEOUT)

    async def get(self, path: str, **query) -> SimulatedResponse:
        return await self.request("GET", path, query=query)

    async def post(self, path: str, body: Any = None) -> SimulatedResponse:
        return await self.request("POST", path, body=body)

    async def put(self, path: str, body: Any = None) -> SimulatedResponse:
        return await self.request("PUT", path, body=body)

    async def patch(self, path: str, body: Any = None) -> SimulatedResponse:
        return await self.request("PATCH", path, body=body)

    async def _dispatch(self, request: SimulatedRequest) -> SimulatedResponse:
        adapter = self.url_map.bind("localhost")
        try:
            endpoint, args = adapter.match(request.path, method=request.method)
        except HTTPException as e:
            return error_response(e.code or 404, e.name)

        decision = self.faults(endpoint)
        if decision.delay > 0:
            await asyncio.sleep(decision.delay)

        try:
            if decision.fail:
                raise InjectedTransientFailure(endpoint)
            return await self._handlers[endpoint](request, **args)
        except InjectedTransientFailure as e:
            logger.warning(f"{request.method} {request.path}: {e}")
            return error_response(500, Messages.SERVER_ERROR)
        except NotFoundError as e:
            return error_response(404, str(e))
        except ValidationConflictError as e:
            logger.info(f"{request.method} {request.path} rejected: {e}")
            return error_response(409, str(e))
        except RequestValidationError as e:
            return error_response(400, str(e), e.errors)
        except Exception as e:
            logger.error(f"Unhandled error in {request.method} {request.path}: {e}", exc_info=True)
            return error_response(500, Messages.SERVER_ERROR)
