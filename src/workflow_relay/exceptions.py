"""Exceptions raised by the relay components."""

from __future__ import annotations

from typing import Any, Optional


class RelayError(Exception):
    """Base exception for the workflow relay."""


class UpstreamError(RelayError):
    """The n8n workflow call did not produce a usable response."""


class UpstreamHTTPError(UpstreamError):
    """n8n answered with a non-2xx status."""

    def __init__(self, status_code: int, reason: str, body: Optional[Any] = None):
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(f"n8n returned {status_code}: {reason}")


class UpstreamUnreachable(UpstreamError):
    """The request was sent but no response came back (refused, timed out)."""


class UpstreamConfigError(UpstreamError):
    """The request could not be built (bad URL, bad header)."""


class StorageError(RelayError):
    """Session store read failed."""
