# issue_parser.py
"""Extraction of Jira issue keys from free-form chat text."""

from __future__ import annotations

import re
from typing import List, Optional, Set

# Word characters are ASCII so that keys glued to accented letters are not picked up.
ISSUE_ID_PATTERN = re.compile(r"\b\w+-\d+\b", re.ASCII)


def extract_issue_ids(text: Optional[str]) -> List[str]:
    """Return the distinct issue keys mentioned in ``text``.

    Keys are upper-cased and kept in order of first mention, so
    ``"see ABC-1 and abc-1 and DEF-2"`` yields ``["ABC-1", "DEF-2"]``.
    Text without keys yields an empty list.
    """

    if not text:
        return []

    seen: Set[str] = set()
    issue_ids: List[str] = []
    for match in ISSUE_ID_PATTERN.finditer(text):
        issue_id = match.group(0).upper()
        if issue_id in seen:
            continue
        seen.add(issue_id)
        issue_ids.append(issue_id)
    return issue_ids
