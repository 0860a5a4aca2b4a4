# dispatcher.py
"""Dispatch loop: filters inbound messages, extracts issue keys and replies per key."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Protocol

from formatter import build_reply
from issue_parser import extract_issue_ids
from message_filter import should_process
from models import (
    AuthFailureEvent,
    BotIdentity,
    ConnectionEvent,
    InboundMessage,
    LatencyEvent,
    MessageEvent,
    ReplyOutcome,
    TicketRecord,
    TransportErrorEvent,
)

logger = logging.getLogger(__name__)


class ChatTransport(Protocol):
    def post_message(
        self, channel_id: str, text: str, *, username: str, markdown: bool = True
    ) -> None: ...

    def get_channel_name(self, channel_id: str) -> Optional[str]: ...


class IssueTracker(Protocol):
    def get_issue(self, issue_id: str) -> TicketRecord: ...


class Dispatcher:
    """Consumes transport events one at a time and answers issue mentions.

    Holds no state between messages. Each issue key in a message is fetched and
    answered on its own; a failure for one key is logged and recorded in its
    ``ReplyOutcome`` without touching the others.
    """

    def __init__(
        self,
        *,
        identity: BotIdentity,
        transport: ChatTransport,
        tracker: IssueTracker,
        tracker_base_url: str,
    ) -> None:
        self.identity = identity
        self.transport = transport
        self.tracker = tracker
        self.tracker_base_url = tracker_base_url

    def run(self, events: Iterable[object]) -> None:
        logger.info("dispatcher_listening", extra={"bot": self.identity.display_name})
        for event in events:
            self.handle_event(event)
        logger.info("dispatcher_stopped")

    def handle_event(self, event: object) -> None:
        try:
            if isinstance(event, MessageEvent):
                self.handle_message(event.message)
            elif isinstance(event, LatencyEvent):
                logger.warning("transport_latency", extra={"latency_seconds": event.value})
            elif isinstance(event, TransportErrorEvent):
                logger.error("transport_error", extra={"error": event.description})
            elif isinstance(event, AuthFailureEvent):
                logger.error("transport_invalid_credentials", extra={"error": event.description})
            elif isinstance(event, ConnectionEvent):
                logger.info("transport_connection", extra={"state": event.state})
            else:
                logger.debug("ignore_event", extra={"event_type": type(event).__name__})
        except Exception as exc:  # keep the loop alive for the next event
            logger.exception(
                "event_handling_failed",
                extra={"event_type": type(event).__name__, "error": str(exc)},
            )

    def handle_message(self, message: InboundMessage) -> list[ReplyOutcome]:
        if not should_process(message, self.identity):
            logger.info("ignore_message", extra={"channel": message.channel_id})
            return []

        issue_ids = extract_issue_ids(message.text)
        if not issue_ids:
            return []

        logger.info(
            "issues_mentioned",
            extra={
                "channel": message.channel_id,
                "channel_name": self._channel_name(message.channel_id),
                "issue_ids": issue_ids,
            },
        )
        return [self.respond_to_issue(message.channel_id, issue_id) for issue_id in issue_ids]

    def respond_to_issue(self, channel_id: str, issue_id: str) -> ReplyOutcome:
        try:
            ticket = self.tracker.get_issue(issue_id)
            reply = build_reply(ticket, channel_id, self.tracker_base_url)
            self.transport.post_message(
                reply.channel_id,
                reply.text,
                username=self.identity.display_name,
                markdown=True,
            )
        except Exception as exc:
            logger.warning(
                "issue_reply_failed",
                extra={"issue_id": issue_id, "channel": channel_id, "error": str(exc)},
                exc_info=logger.isEnabledFor(logging.DEBUG),
            )
            return ReplyOutcome.fail(issue_id, str(exc))

        logger.info("issue_reply_sent", extra={"issue_id": issue_id, "channel": channel_id})
        return ReplyOutcome.ok(issue_id, reply)

    def _channel_name(self, channel_id: str) -> Optional[str]:
        if not logger.isEnabledFor(logging.DEBUG):
            return None
        try:
            return self.transport.get_channel_name(channel_id)
        except Exception as exc:
            logger.debug("channel_lookup_failed", extra={"channel": channel_id, "error": str(exc)})
            return None
