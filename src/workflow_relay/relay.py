"""
Chat turn orchestration

Related classes:
  - upstream_client.WorkflowClient: produces the raw reply
  - normalizer.normalize_reply: turns the raw reply into text
  - chat_history.SessionStore: session registration and transcript
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from src.chat_history import SessionStore

from .exceptions import (
    UpstreamConfigError,
    UpstreamError,
    UpstreamHTTPError,
    UpstreamUnreachable,
)
from .normalizer import normalize_reply
from .upstream_client import WorkflowClient

logger = logging.getLogger(__name__)

UNREACHABLE_MESSAGE = (
    "No response received from n8n workflow. Please check if n8n is running."
)


@dataclass
class ChatTurnResult:
    """Outcome of one chat turn, ready to be serialized by the API layer."""

    success: bool
    response: Optional[str] = None
    session_id: Optional[str] = None
    error: Optional[str] = None
    details: str = ""


def _preview(text: Optional[str], limit: int = 100) -> str:
    if not text:
        return ""
    return text[:limit] + ("..." if len(text) > limit else "")


def describe_failure(exc: Exception) -> Tuple[str, str]:
    """Map an exception to the (error, details) pair shown to the client."""
    if isinstance(exc, UpstreamHTTPError):
        details = ""
        if isinstance(exc.body, (dict, list)):
            details = json.dumps(exc.body, ensure_ascii=False, separators=(",", ":"))
        return f"n8n returned {exc.status_code}: {exc.reason}", details
    if isinstance(exc, UpstreamUnreachable):
        return UNREACHABLE_MESSAGE, str(exc)
    if isinstance(exc, UpstreamConfigError):
        return "Request setup error", str(exc)
    return "Failed to process request", str(exc)


class ChatRelay:
    """Relays a browser chat turn to the workflow engine and back."""

    def __init__(self, client: WorkflowClient, store: SessionStore):
        self.client = client
        self.store = store

    def handle_turn(
        self,
        chat_input: Optional[str] = None,
        files: Optional[List[Dict[str, Any]]] = None,
        session_id: Optional[str] = None,
    ) -> ChatTurnResult:
        """
        Run one chat turn

        Args:
            chat_input: user text (may be empty when only files are sent)
            files: attachments, forwarded untouched
            session_id: client session id; absent for a brand new chat

        Returns:
            ChatTurnResult: success with the reply, or failure with error/details
            when the workflow call failed
        """
        logger.info(
            "Received request from interface: chatInput=%r filesCount=%d sessionId=%s",
            _preview(chat_input),
            len(files or []),
            session_id,
        )

        resolved_id = self.store.ensure_session(session_id)

        payload = self.client.build_payload(chat_input, files, session_id)
        try:
            data = self.client.invoke(payload)
        except UpstreamError as exc:
            error, details = describe_failure(exc)
            logger.error("Error in chat turn: %s", error)
            return ChatTurnResult(success=False, error=error, details=details)

        reply = normalize_reply(data)
        logger.info("Extracted AI response length: %d", len(reply))

        if resolved_id:
            if chat_input:
                self.store.append_message(resolved_id, "user", chat_input)
            self.store.append_message(resolved_id, "assistant", reply)

        return ChatTurnResult(
            success=True,
            response=reply,
            session_id=session_id or resolved_id,
        )
