"""Prometheus instrumentation for incoming requests."""

from __future__ import annotations

import time
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from verdict.telemetry import observe_request

_UNMATCHED_ROUTE = "unmatched"
_SKIPPED_PATHS = frozenset({"/metrics"})


class TelemetryMiddleware(BaseHTTPMiddleware):
    """Record count and latency per route template (``/api/sessions/{session_id}``)."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path in _SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            observe_request(
                request.method,
                self._route_template(request),
                status_code,
                time.perf_counter() - start_time,
            )

    @staticmethod
    def _route_template(request: Request) -> str:
        """Return the matched route pattern; raw paths would explode label cardinality."""

        scope_route: Any = request.scope.get("route")
        path = getattr(scope_route, "path", None) if scope_route is not None else None
        return path or _UNMATCHED_ROUTE
