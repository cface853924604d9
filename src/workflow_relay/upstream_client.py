"""
HTTP client for the n8n workflow webhook

Related classes:
  - config.UpstreamConfig: URLs and timeouts
  - relay.ChatRelay: the only caller of invoke()

Each chat turn is a single POST. There are no retries because a workflow run
may have side effects.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from .config import UpstreamConfig
from .exceptions import UpstreamConfigError, UpstreamHTTPError, UpstreamUnreachable

logger = logging.getLogger(__name__)

DEFAULT_SESSION_ID = "default-session"

# Raised by requests before anything goes on the wire.
_SETUP_ERRORS = (
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
    requests.exceptions.InvalidURL,
    requests.exceptions.InvalidHeader,
)


@dataclass(frozen=True)
class HealthProbe:
    connected: bool
    status_code: Optional[int] = None
    error: Optional[str] = None


def _decode_body(response: requests.Response) -> Any:
    """JSON when the body parses, raw text otherwise."""
    try:
        return response.json()
    except ValueError:
        return response.text


class WorkflowClient:
    """Calls the n8n webhook that produces the assistant reply."""

    def __init__(
        self,
        config: Optional[UpstreamConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            config: upstream URLs and timeouts (defaults to a local n8n)
            session: requests session to send with (injected by tests)
        """
        self.config = config or UpstreamConfig()
        self.session = session or requests.Session()

    @staticmethod
    def build_payload(
        chat_input: Optional[str],
        files: Optional[List[Dict[str, Any]]],
        session_id: Optional[str],
    ) -> Dict[str, Any]:
        """Shape a chat turn the way the workflow expects it."""
        return {
            "chatInput": chat_input or "",
            "files": files or [],
            "sessionId": session_id or DEFAULT_SESSION_ID,
        }

    def invoke(self, payload: Dict[str, Any]) -> Any:
        """
        POST the payload to the workflow webhook

        Args:
            payload: body built by build_payload()

        Returns:
            Decoded JSON body, or the raw text when the body is not JSON

        Raises:
            UpstreamHTTPError: n8n answered with a non-2xx status
            UpstreamUnreachable: no response (refused connection, timeout)
            UpstreamConfigError: the request could not be built
        """
        url = self.config.webhook_url
        logger.info("Calling n8n workflow at: %s", url)
        try:
            response = self.session.post(
                url,
                json=payload,
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
                timeout=self.config.timeout_seconds,
            )
        except _SETUP_ERRORS as exc:
            logger.error("Request setup error: %s", exc)
            raise UpstreamConfigError(str(exc)) from exc
        except requests.exceptions.RequestException as exc:
            logger.error("No response received from n8n at %s: %s", url, exc)
            raise UpstreamUnreachable(str(exc)) from exc

        logger.info("n8n response status: %s", response.status_code)
        body = _decode_body(response)
        if not response.ok:
            logger.error("n8n Response Status: %s", response.status_code)
            logger.error("n8n Response Data: %s", body)
            raise UpstreamHTTPError(response.status_code, response.reason or "", body)
        return body

    def check_health(self) -> HealthProbe:
        """Liveness probe against the n8n health endpoint."""
        try:
            response = self.session.get(
                self.config.health_url, timeout=self.config.health_timeout_seconds
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as exc:
            logger.warning("n8n health check failed: %s", exc)
            return HealthProbe(connected=False, error=str(exc))
        return HealthProbe(connected=True, status_code=response.status_code)
