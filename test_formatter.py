import unittest

from formatter import build_reply, format_issue_message
from models import TicketRecord

BASE_URL = "https://jira.example.com"


def _ticket(**overrides):
    values = {
        "key": "PROJ-42",
        "status": "In Progress",
        "summary": "Login times out",
        "reporter": "Alice Example",
        "assignee": "Bob Example",
        "created": "2016-03-01T10:15:30.000+0000",
        "created_epoch": 1456827330,
    }
    values.update(overrides)
    return TicketRecord(**values)


class TestFormatIssueMessage(unittest.TestCase):
    def test_three_line_layout(self):
        lines = format_issue_message(_ticket(), BASE_URL).split("\n")
        self.assertEqual(len(lines), 3)
        self.assertEqual(
            lines[0],
            "> <https://jira.example.com/browse/PROJ-42|PROJ-42> :traffic_light: "
            "*Status:* In Progress :memo: *Summary:* Login times out",
        )
        self.assertEqual(
            lines[1], "> :bust_in_silhouette: *Creator:* Alice Example, *Assignee:* Bob Example"
        )
        self.assertEqual(
            lines[2],
            "> :calendar: *Created:* <!date^1456827330^{date} at {time}"
            "|2016-03-01T10:15:30.000+0000>",
        )

    def test_unassigned_ticket_renders_placeholder(self):
        text = format_issue_message(_ticket(assignee=None), BASE_URL)
        self.assertIn("*Assignee:* Unassigned", text)

    def test_missing_reporter_does_not_fail(self):
        text = format_issue_message(_ticket(reporter=None), BASE_URL)
        self.assertIn("*Creator:* Unknown", text)

    def test_trailing_slash_on_base_url(self):
        text = format_issue_message(_ticket(), BASE_URL + "/")
        self.assertIn("<https://jira.example.com/browse/PROJ-42|", text)

    def test_markup_in_summary_is_escaped(self):
        text = format_issue_message(_ticket(summary="a <b> & c"), BASE_URL)
        self.assertIn("*Summary:* a &lt;b&gt; &amp; c", text)

    def test_build_reply_targets_channel(self):
        reply = build_reply(_ticket(), "C123", BASE_URL)
        self.assertEqual(reply.channel_id, "C123")
        self.assertIn("PROJ-42", reply.text)


if __name__ == "__main__":
    unittest.main()
