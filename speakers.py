"""
Speaker records and per-run scrape state.

``SpeakerRecord`` is the only entity the scraper produces.  ``ScrapeRun``
is the explicit run context threaded through the collector and the
detail extractor: it owns the ordered result list and the set of names
already seen, so two runs never share state.

The text helpers are pure (no I/O) so they can be unit-tested without
Playwright.
"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import asdict, dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

_RE_WHITESPACE = re.compile(r"\s+")

# textContent can still carry double-escaped entities ("&amp;nbsp;"),
# so text is unescaped twice; the non-breaking / zero-width characters
# they decode to are then removed.
_INVISIBLE = str.maketrans({"\u00a0": " ", "\u200b": None, "\ufeff": None})


def normalize_text(value: str | None) -> str:
    """Collapse whitespace and strip HTML entity artifacts.

    >>> normalize_text("  Chief&nbsp;Executive\\n Officer ")
    'Chief Executive Officer'
    >>> normalize_text("R&amp;D")
    'R&D'
    >>> normalize_text("AT&T;")
    'AT&T;'
    """
    if not value:
        return ""
    text = _unescape(value).translate(_INVISIBLE)
    return _RE_WHITESPACE.sub(" ", text).strip()


def _unescape(value: str) -> str:
    return html.unescape(html.unescape(value))


def clean_bio(value: str | None) -> str:
    """Decode entities in free-text bios but keep their line structure."""
    if not value:
        return ""
    text = _unescape(value).translate(_INVISIBLE)
    lines = [_RE_WHITESPACE.sub(" ", ln).strip() for ln in text.splitlines()]
    return "\n".join(ln for ln in lines if ln)


@dataclass
class SpeakerRecord:
    """One speaker as read from the widget's detail modal.

    Missing fields are empty strings, never ``None``.
    """

    name: str
    title: str = ""
    company: str = ""
    bio: str = ""

    @classmethod
    def from_fields(cls, fields: dict[str, str | None]) -> "SpeakerRecord":
        """Build a normalized record from raw modal text."""
        return cls(
            name=normalize_text(fields.get("name")),
            title=normalize_text(fields.get("title")),
            company=normalize_text(fields.get("company")),
            bio=clean_bio(fields.get("bio")),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SpeakerRecord":
        return cls(
            name=str(data.get("name") or ""),
            title=str(data.get("title") or ""),
            company=str(data.get("company") or ""),
            bio=str(data.get("bio") or ""),
        )

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass
class ScrapeRun:
    """Mutable state for a single scrape run.

    Records are kept in discovery order.  ``add`` enforces the retention
    rule: non-empty name, first occurrence wins, later duplicates are
    dropped without merging.
    """

    url: str
    speakers: list[SpeakerRecord] = field(default_factory=list)
    seen: set[str] = field(default_factory=set)
    tiles_processed: int = 0
    duplicates: int = 0
    failures: int = 0
    abandoned_carousels: int = 0

    def add(self, record: SpeakerRecord) -> bool:
        """Append *record* if its name is new.  Returns ``True`` if kept."""
        if not record.name:
            logger.debug("Dropping speaker with empty name")
            return False
        if record.name in self.seen:
            self.duplicates += 1
            return False
        self.seen.add(record.name)
        self.speakers.append(record)
        return True

    def __len__(self) -> int:
        return len(self.speakers)
