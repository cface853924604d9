"""Chat History Models

Transcript data model.

Related classes: SessionStore (repository.py)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Role = Literal["user", "assistant", "system"]


@dataclass(slots=True, frozen=True)
class ChatMessage:
    """One stored message of a session transcript

    Messages are immutable once written; a transcript is read back in
    created_at order.
    """

    role: Role
    content: str
    created_at: str  # ISO8601
