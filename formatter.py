# formatter.py
"""Slack message formatting for Jira issue summaries."""

from __future__ import annotations

from typing import Optional

from models import ReplyPayload, TicketRecord

UNASSIGNED_PLACEHOLDER = "Unassigned"
UNKNOWN_PLACEHOLDER = "Unknown"

_SLACK_ESCAPES = (("&", "&amp;"), ("<", "&lt;"), (">", "&gt;"))


def issue_browse_url(tracker_base_url: str, issue_key: str) -> str:
    return tracker_base_url.rstrip("/") + "/browse/" + issue_key


def format_issue_message(ticket: TicketRecord, tracker_base_url: str) -> str:
    """Render ``ticket`` as three quoted mrkdwn lines.

    The creation date is sent as a ``<!date^...>`` token so each Slack client
    shows it in the reader's timezone, with the raw Jira timestamp as fallback.
    """

    lines = [
        "> <{url}|{key}> :traffic_light: *Status:* {status} :memo: *Summary:* {summary}".format(
            url=issue_browse_url(tracker_base_url, ticket.key),
            key=ticket.key,
            status=_escape(ticket.status, UNKNOWN_PLACEHOLDER),
            summary=_escape(ticket.summary, ""),
        ),
        "> :bust_in_silhouette: *Creator:* {reporter}, *Assignee:* {assignee}".format(
            reporter=_escape(ticket.reporter, UNKNOWN_PLACEHOLDER),
            assignee=_escape(ticket.assignee, UNASSIGNED_PLACEHOLDER),
        ),
        "> :calendar: *Created:* <!date^%d^{date} at {time}|%s>"
        % (ticket.created_epoch, _escape(ticket.created, "")),
    ]
    return "\n".join(lines)


def build_reply(ticket: TicketRecord, channel_id: str, tracker_base_url: str) -> ReplyPayload:
    return ReplyPayload(
        channel_id=channel_id, text=format_issue_message(ticket, tracker_base_url)
    )


def _escape(value: Optional[str], placeholder: str) -> str:
    if not value:
        return placeholder
    for raw, entity in _SLACK_ESCAPES:
        value = value.replace(raw, entity)
    return value
