# models.py
"""Value types shared by the Jira relay: inbound messages, tickets, replies and events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class BotIdentity:
    display_name: str


@dataclass(frozen=True)
class InboundMessage:
    text: str
    channel_id: str
    author_username: str
    subtype: Optional[str] = None
    ts: Optional[str] = None


@dataclass(frozen=True)
class TicketRecord:
    key: str
    status: str
    summary: str
    reporter: Optional[str]
    assignee: Optional[str]
    created: str
    created_epoch: int


@dataclass(frozen=True)
class ReplyPayload:
    channel_id: str
    text: str


@dataclass(frozen=True)
class ReplyOutcome:
    """Result of replying to a single issue identifier.

    Truthy when the reply was posted. Failed outcomes carry the error text that
    was logged for the identifier.
    """

    issue_id: str
    success: bool
    payload: Optional[ReplyPayload] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, issue_id: str, payload: ReplyPayload) -> ReplyOutcome:
        return cls(issue_id=issue_id, success=True, payload=payload)

    @classmethod
    def fail(cls, issue_id: str, error: str) -> ReplyOutcome:
        return cls(issue_id=issue_id, success=False, error=error)

    def __bool__(self) -> bool:
        return self.success


# Transport events


@dataclass(frozen=True)
class MessageEvent:
    message: InboundMessage


@dataclass(frozen=True)
class LatencyEvent:
    value: float


@dataclass(frozen=True)
class AuthFailureEvent:
    description: str = ""


@dataclass(frozen=True)
class TransportErrorEvent:
    description: str


@dataclass(frozen=True)
class ConnectionEvent:
    state: str
