import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock

import requests  # type: ignore[import-untyped]

from jira_client import JiraClient, JiraLookupError, parse_created
from settings import JiraSettings


def _settings():
    return JiraSettings(
        JIRA_BASEURL="https://jira.example.com/",
        JIRA_USERNAME="relay",
        JIRA_PASSWORD="secret",
    )


def _issue_payload(**field_overrides):
    fields = {
        "summary": "Login times out",
        "status": {"name": "In Progress"},
        "reporter": {"displayName": "Alice Example"},
        "assignee": {"displayName": "Bob Example"},
        "created": "2016-03-01T10:15:30.000+0000",
    }
    fields.update(field_overrides)
    return {"key": "PROJ-42", "fields": fields}


class TestJiraClient(unittest.TestCase):
    def setUp(self):
        self.session = MagicMock()
        self.client = JiraClient(_settings(), session=self.session)

    def _respond(self, status_code, payload=None, text=""):
        response = self.session.get.return_value
        response.status_code = status_code
        response.text = text
        if payload is None:
            response.json.side_effect = ValueError("no json")
        else:
            response.json.return_value = payload

    def test_get_issue_success(self):
        self._respond(200, _issue_payload())
        ticket = self.client.get_issue("PROJ-42")

        self.session.get.assert_called_once_with(
            "https://jira.example.com/rest/api/latest/issue/PROJ-42",
            params={"fields": "summary,status,reporter,assignee,created"},
            timeout=10,
        )
        self.assertEqual(self.session.auth, ("relay", "secret"))
        self.assertEqual(ticket.key, "PROJ-42")
        self.assertEqual(ticket.status, "In Progress")
        self.assertEqual(ticket.reporter, "Alice Example")
        self.assertEqual(ticket.assignee, "Bob Example")
        self.assertEqual(ticket.created, "2016-03-01T10:15:30.000+0000")
        expected = int(datetime(2016, 3, 1, 10, 15, 30, tzinfo=timezone.utc).timestamp())
        self.assertEqual(ticket.created_epoch, expected)

    def test_unassigned_issue(self):
        self._respond(200, _issue_payload(assignee=None))
        self.assertIsNone(self.client.get_issue("PROJ-42").assignee)

    def test_not_found_raises_with_jira_messages(self):
        self._respond(404, {"errorMessages": ["Issue does not exist"], "errors": {}})
        with self.assertRaises(JiraLookupError) as ctx:
            self.client.get_issue("NOPE-1")
        self.assertEqual(ctx.exception.issue_id, "NOPE-1")
        self.assertIn("Issue does not exist", str(ctx.exception))

    def test_error_without_json_body(self):
        self._respond(502, text="Bad Gateway")
        with self.assertRaises(JiraLookupError) as ctx:
            self.client.get_issue("PROJ-42")
        self.assertIn("502", str(ctx.exception))

    def test_request_exception_raises(self):
        self.session.get.side_effect = requests.ConnectionError("refused")
        with self.assertRaises(JiraLookupError):
            self.client.get_issue("PROJ-42")

    def test_invalid_json_raises(self):
        self._respond(200)
        with self.assertRaises(JiraLookupError):
            self.client.get_issue("PROJ-42")

    def test_missing_created_raises(self):
        self._respond(200, _issue_payload(created=None))
        with self.assertRaises(JiraLookupError):
            self.client.get_issue("PROJ-42")

    def test_issue_url(self):
        self.assertEqual(
            self.client.issue_url("PROJ-42"), "https://jira.example.com/browse/PROJ-42"
        )


class TestParseCreated(unittest.TestCase):
    def test_iso_offset_with_colon(self):
        expected = int(datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc).timestamp())
        self.assertEqual(parse_created("X-1", "2020-01-02T03:04:05+00:00"), expected)

    def test_garbage_raises(self):
        with self.assertRaises(JiraLookupError):
            parse_created("X-1", "yesterday")


if __name__ == "__main__":
    unittest.main()
