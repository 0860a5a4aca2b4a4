# slack_transport.py
"""Slack Socket Mode transport: turns Slack payloads into relay events and posts replies."""

from __future__ import annotations

import logging
import queue
import time
from typing import Any, Iterator, Optional

from slack_bolt import App
from slack_bolt.adapter.socket_mode import SocketModeHandler
from slack_sdk.errors import SlackApiError

from models import (
    AuthFailureEvent,
    ConnectionEvent,
    InboundMessage,
    LatencyEvent,
    MessageEvent,
    TransportErrorEvent,
)
from settings import SlackSettings

AUTH_FAILURE_CODES = {"invalid_auth", "not_authed", "account_inactive", "token_revoked"}
# Edits and deletions re-deliver old text; replying to them would duplicate replies.
SKIPPED_SUBTYPES = {"message_changed", "message_deleted"}

_STOP = object()

logger = logging.getLogger(__name__)


class SlackTransport:
    def __init__(self, settings: SlackSettings, app: Optional[App] = None) -> None:
        self.settings = settings
        self.app = app or App(token=settings.api_key, token_verification_enabled=False)
        self._events: "queue.Queue[object]" = queue.Queue()
        self._handler: Optional[SocketModeHandler] = None

        self.app.event("message")(self._on_message)
        self.app.error(self._on_error)

    def start(self) -> bool:
        """Verify credentials and open the Socket Mode connection in the background.

        Returns ``False`` without connecting when Slack rejects the token; an
        ``AuthFailureEvent`` is queued in that case.
        """
        try:
            self.app.client.auth_test()
        except SlackApiError as exc:
            code = str(exc.response.get("error", ""))
            if code in AUTH_FAILURE_CODES:
                self._events.put(AuthFailureEvent(description=code))
                return False
            raise

        self._handler = SocketModeHandler(self.app, self.settings.app_token)
        self._handler.client.message_listeners.append(self._on_socket_frame)
        self._handler.connect()
        logger.info("slack_socket_mode_connecting")
        return True

    def close(self) -> None:
        if self._handler is not None:
            self._handler.close()
            self._handler = None
        self._events.put(_STOP)

    def events(self) -> Iterator[object]:
        """Block on the event queue until ``close`` is called."""
        while True:
            event = self._events.get()
            if event is _STOP:
                return
            yield event

    def post_message(
        self, channel_id: str, text: str, *, username: str, markdown: bool = True
    ) -> None:
        self.app.client.chat_postMessage(
            channel=channel_id, text=text, username=username, mrkdwn=markdown
        )

    def get_channel_name(self, channel_id: str) -> Optional[str]:
        response = self.app.client.conversations_info(channel=channel_id)
        channel = response.get("channel") or {}
        return channel.get("name")

    def _on_message(self, event: dict[str, Any]) -> None:
        subtype = event.get("subtype")
        if subtype in SKIPPED_SUBTYPES:
            return

        ts = event.get("ts")
        lag = _delivery_lag(ts)
        if lag is not None and lag > self.settings.latency_warning_seconds:
            self._events.put(LatencyEvent(value=round(lag, 3)))

        message = InboundMessage(
            text=event.get("text") or "",
            channel_id=str(event.get("channel", "")),
            author_username=str(event.get("username") or event.get("user") or ""),
            subtype=subtype,
            ts=ts,
        )
        self._events.put(MessageEvent(message=message))

    def _on_error(self, error: Exception) -> None:
        self._events.put(TransportErrorEvent(description=str(error)))

    def _on_socket_frame(
        self, _client: Any, frame: dict[str, Any], _raw: Optional[str] = None
    ) -> None:
        frame_type = frame.get("type")
        if frame_type == "hello":
            self._events.put(ConnectionEvent(state="connected"))
        elif frame_type == "disconnect":
            reason = frame.get("reason", "unknown")
            self._events.put(ConnectionEvent(state=f"disconnect ({reason})"))


def _delivery_lag(ts: Optional[str]) -> Optional[float]:
    if not ts:
        return None
    try:
        return time.time() - float(ts)
    except ValueError:
        return None
