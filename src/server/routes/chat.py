"""Chat relay and transcript routes."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Union

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse

from src.workflow_relay.exceptions import StorageError
from src.workflow_relay.relay import describe_failure

from ..dependencies import get_chat_relay, get_session_store, serialize_message
from ..schemas import (
    ChatErrorResponse,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    HistoryResponse,
)

logger = logging.getLogger(__name__)


def _error(status_code: int, body: Union[ChatErrorResponse, ErrorResponse]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_chat_routes(app: FastAPI) -> None:
    """Register chat/history endpoints on the provided app."""

    @app.post(
        "/api/chat",
        response_model=ChatResponse,
        responses={500: {"model": ChatErrorResponse}},
    )
    async def chat(request: ChatRequest):
        """Relay one chat turn to the n8n workflow."""
        relay = get_chat_relay()
        try:
            result = await asyncio.to_thread(
                relay.handle_turn,
                request.chat_input,
                request.files,
                request.session_id,
            )
        except Exception as exc:
            logger.exception("Error in /api/chat: %s", exc)
            error, details = describe_failure(exc)
            return _error(500, ChatErrorResponse(error=error, details=details))

        if not result.success:
            return _error(
                500, ChatErrorResponse(error=result.error or "", details=result.details)
            )
        return ChatResponse(response=result.response or "", session_id=result.session_id)

    @app.get(
        "/api/history",
        response_model=HistoryResponse,
        responses={500: {"model": ErrorResponse}},
    )
    async def history(session_id: Optional[str] = Query(default=None, alias="sessionId")):
        """Return the stored transcript of a session, oldest first."""
        store = get_session_store()
        try:
            messages = await asyncio.to_thread(store.list_messages, session_id)
        except StorageError as exc:
            logger.error("Error in /api/history: %s", exc)
            return _error(500, ErrorResponse(error="Internal error"))
        return HistoryResponse(messages=[serialize_message(m) for m in messages])
