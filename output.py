"""
Flat-file persistence for scraped speakers.

The scraper writes the whole collection once, at the end of a run, as
pretty-printed UTF-8 JSON.  Two shapes are supported:

  - a bare list of speaker objects (the default), and
  - a wrapper carrying run metadata::

        {"scrapedAt": ..., "url": ..., "totalSpeakers": N, "speakers": [...]}

``load_speakers`` reads either shape back; it is the only input of the
downstream chat.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from speakers import SpeakerRecord

logger = logging.getLogger(__name__)


class OutputWriteError(RuntimeError):
    """The speaker file could not be written.  Fatal for the run."""


def serialize_speakers(
    speakers: Iterable[SpeakerRecord],
    *,
    url: str | None = None,
    scraped_at: datetime | None = None,
) -> str:
    """Render *speakers* as JSON text.

    When *url* is given the list is wrapped with run metadata.  Keys keep
    a fixed order (``name, title, company, bio``) so two runs over the
    same page produce byte-identical files.
    """
    rows = [s.to_dict() for s in speakers]
    payload: Any = rows
    if url is not None:
        payload = {
            "scrapedAt": (scraped_at or datetime.now(timezone.utc)).isoformat(),
            "url": url,
            "totalSpeakers": len(rows),
            "speakers": rows,
        }
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def write_speakers(
    path: str | Path,
    speakers: Iterable[SpeakerRecord],
    *,
    url: str | None = None,
    scraped_at: datetime | None = None,
) -> Path:
    """Serialize and write *speakers* to *path* in a single write.

    Raises ``OutputWriteError`` on any filesystem failure.
    """
    target = Path(path)
    text = serialize_speakers(speakers, url=url, scraped_at=scraped_at)
    try:
        target.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise OutputWriteError(f"Failed to write {target}: {exc}") from exc
    logger.info("Saved %s (%d bytes)", target, len(text.encode("utf-8")))
    return target


def load_speakers(path: str | Path) -> list[SpeakerRecord]:
    """Read a speaker file written by ``write_speakers`` (either shape)."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("speakers", [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of speakers")
    return [SpeakerRecord.from_dict(row) for row in data if isinstance(row, dict)]
