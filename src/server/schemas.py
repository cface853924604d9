"""Pydantic schemas for the FastAPI server."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """Request body for the chat endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    chat_input: Optional[str] = Field(
        default=None, alias="chatInput", description="User message"
    )
    files: Optional[List[Dict[str, Any]]] = Field(
        default=None,
        description="Attachments ({name, content, size, type}) passed through to the workflow as sent",
    )
    session_id: Optional[str] = Field(
        default=None, alias="sessionId", description="Client session id"
    )


class ChatResponse(BaseModel):
    """Successful chat turn."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    response: str
    session_id: Optional[str] = Field(default=None, alias="sessionId")


class ChatErrorResponse(BaseModel):
    """Failed chat turn."""

    success: bool = False
    error: str
    details: str = ""


class HistoryMessage(BaseModel):
    role: str
    content: str
    created_at: str


class HistoryResponse(BaseModel):
    """Transcript of one session."""

    success: bool = True
    messages: List[HistoryMessage] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class UpstreamStatus(BaseModel):
    status: str
    status_code: Optional[int] = Field(default=None, alias="statusCode")
    error: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class HealthResponse(BaseModel):
    """Response for the health check endpoint."""

    success: bool
    n8n: UpstreamStatus
    server: str = "running"
