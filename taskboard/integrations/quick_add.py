"""Parser for quick-add task input.

Recognises a relative due date keyword inside free text:
    "Finish DBMS notes tomorrow"  -> title "Finish DBMS notes", due = now + 1 day
    "Call the bank today"         -> title "Call the bank", due = now
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta

from ..models.base import utc_now

# Порядок важен: первое совпадение побеждает
DUE_KEYWORDS: list[tuple[str, timedelta]] = [
    ("tomorrow", timedelta(days=1)),
    ("today", timedelta(0)),
]

WHITESPACE_PATTERN = re.compile(r"\s+")


@dataclass
class ParsedQuickAdd:
    """Result of parsing a quick-add line."""

    title: str
    due_date: datetime | None = None


def parse_quick_add(text: str, now: datetime | None = None) -> ParsedQuickAdd:
    """Extract a title and an optional due date from quick-add text.

    The keyword is matched case-insensitively as a substring; only its first
    occurrence is removed from the title.

    Args:
        text: Raw user input
        now: Reference time (defaults to current UTC time)

    Returns:
        ParsedQuickAdd with the cleaned title and the due date (or None)
    """
    now = now or utc_now()
    title = text
    due_date = None

    lowered = text.lower()
    for keyword, offset in DUE_KEYWORDS:
        if keyword in lowered:
            due_date = now + offset
            title = re.sub(keyword, "", title, count=1, flags=re.IGNORECASE)
            break

    title = WHITESPACE_PATTERN.sub(" ", title).strip()
    return ParsedQuickAdd(title=title, due_date=due_date)
