# jira_client.py
"""Jira API client helpers for the relay."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, cast

import requests  # type: ignore[import-untyped]

from formatter import issue_browse_url
from models import TicketRecord
from settings import JiraSettings

ISSUE_FIELDS = "summary,status,reporter,assignee,created"
# Jira renders timestamps like 2016-03-01T10:15:30.000+0000.
JIRA_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"

logger = logging.getLogger(__name__)


class JiraLookupError(Exception):
    """Raised when an issue cannot be fetched or its payload cannot be read."""

    def __init__(self, issue_id: str, message: str) -> None:
        super().__init__(f"{issue_id}: {message}")
        self.issue_id = issue_id


class JiraClient:
    def __init__(self, settings: JiraSettings, session: Optional[requests.Session] = None) -> None:
        self.base_url = settings.base_url.rstrip("/")
        self.api_url = self.base_url + "/" + settings.api_path.strip("/")
        self.timeout = settings.timeout_seconds
        self.session = session or requests.Session()
        self.session.auth = (settings.username, settings.password)
        self.session.headers.update({"Accept": "application/json"})

    def issue_url(self, issue_key: str) -> str:
        return issue_browse_url(self.base_url, issue_key)

    def get_issue(self, issue_id: str) -> TicketRecord:
        """Fetch a single issue. One attempt; any failure raises ``JiraLookupError``."""
        try:
            response = self.session.get(
                f"{self.api_url}/issue/{issue_id}",
                params={"fields": ISSUE_FIELDS},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("jira_request_failed", extra={"issue_id": issue_id, "error": str(exc)})
            raise JiraLookupError(issue_id, f"request failed: {exc}") from exc

        if response.status_code != 200:
            raise JiraLookupError(issue_id, self._describe_error(issue_id, response))

        try:
            payload_obj = response.json()
        except ValueError as exc:
            logger.error("jira_invalid_json", extra={"issue_id": issue_id, "error": str(exc)})
            raise JiraLookupError(issue_id, "invalid response from Jira") from exc

        if not isinstance(payload_obj, dict):
            logger.error(
                "jira_unexpected_format",
                extra={"issue_id": issue_id, "body_type": type(payload_obj).__name__},
            )
            raise JiraLookupError(
                issue_id, f"unexpected response format from Jira ({type(payload_obj).__name__})"
            )

        ticket = _map_ticket(issue_id, payload_obj)
        logger.debug("jira_issue_fetched", extra={"issue_id": issue_id, "key": ticket.key})
        return ticket

    def _describe_error(self, issue_id: str, response: requests.Response) -> str:
        try:
            payload_obj = response.json()
        except ValueError:
            logger.error(
                "jira_error_response",
                extra={"issue_id": issue_id, "status": response.status_code, "body": response.text},
            )
            return f"Jira error {response.status_code}: {response.text}"

        messages: list[str] = []
        if isinstance(payload_obj, dict):
            error_messages_val = payload_obj.get("errorMessages", [])
            if isinstance(error_messages_val, list):
                messages.extend(str(msg) for msg in error_messages_val)

            field_errors_val = payload_obj.get("errors", {})
            if isinstance(field_errors_val, dict):
                for field, msg in field_errors_val.items():
                    messages.append(f"{field}: {msg}")

        logger.error(
            "jira_lookup_rejected",
            extra={"issue_id": issue_id, "status": response.status_code, "errors": messages},
        )
        if messages:
            return f"Jira rejected the request ({response.status_code}): {'; '.join(messages)}"
        return f"Jira error {response.status_code}: {response.text}"


def parse_created(issue_id: str, created: str) -> int:
    """Convert Jira's ``created`` timestamp to epoch seconds."""
    try:
        moment = datetime.strptime(created, JIRA_DATETIME_FORMAT)
    except ValueError:
        try:
            moment = datetime.fromisoformat(created)
        except ValueError as exc:
            raise JiraLookupError(issue_id, f"unparseable creation date {created!r}") from exc
    return int(moment.timestamp())


def _display_name(fields: dict[str, Any], name: str) -> Optional[str]:
    person = fields.get(name)
    if not isinstance(person, dict):
        return None
    return cast(Optional[str], person.get("displayName"))


def _map_ticket(issue_id: str, issue: dict[str, Any]) -> TicketRecord:
    fields = issue.get("fields")
    key = issue.get("key")
    if not isinstance(fields, dict) or not key:
        raise JiraLookupError(issue_id, "issue payload is missing key or fields")

    created = fields.get("created")
    if not isinstance(created, str) or not created:
        raise JiraLookupError(issue_id, "issue payload is missing the creation date")

    status = fields.get("status") if isinstance(fields.get("status"), dict) else {}
    return TicketRecord(
        key=str(key),
        status=cast(str, status.get("name") or ""),
        summary=cast(str, fields.get("summary") or ""),
        reporter=_display_name(fields, "reporter"),
        assignee=_display_name(fields, "assignee"),
        created=created,
        created_epoch=parse_created(issue_id, created),
    )
