"""Upstream liveness route."""

from __future__ import annotations

import asyncio

from fastapi import FastAPI

from ..dependencies import get_workflow_client
from ..schemas import HealthResponse, UpstreamStatus


def register_health_routes(app: FastAPI) -> None:
    """Register the health endpoint on the provided app."""

    @app.get(
        "/api/health",
        response_model=HealthResponse,
        response_model_exclude_none=True,
    )
    async def health() -> HealthResponse:
        """Report whether n8n answers; the relay itself is always running."""
        probe = await asyncio.to_thread(get_workflow_client().check_health)
        if probe.connected:
            upstream = UpstreamStatus(status="connected", status_code=probe.status_code)
        else:
            upstream = UpstreamStatus(status="disconnected", error=probe.error)
        return HealthResponse(success=probe.connected, n8n=upstream)
