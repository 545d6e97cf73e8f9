"""
Flatten the scraped speaker file into the text block the chat prompt
embeds.

Each speaker becomes one numbered entry::

    3. Jane Doe - Director at SOFWERX
       Bio: Twenty years in special operations...

Bios are cut to a fixed character budget with ``...`` appended when cut;
entries are separated by a blank line.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from output import load_speakers
from speakers import SpeakerRecord

BIO_CHAR_LIMIT = 500
ELLIPSIS = "..."
NO_BIO = "No bio available"


def format_speaker(index: int, speaker: SpeakerRecord, *, bio_limit: int = BIO_CHAR_LIMIT) -> str:
    if speaker.bio:
        bio = speaker.bio[:bio_limit]
        if len(speaker.bio) > bio_limit:
            bio += ELLIPSIS
    else:
        bio = NO_BIO
    return (
        f"{index}. {speaker.name} - {speaker.title} at {speaker.company}\n"
        f"   Bio: {bio}"
    )


def build_speakers_context(
    speakers: Iterable[SpeakerRecord],
    *,
    bio_limit: int = BIO_CHAR_LIMIT,
) -> str:
    return "\n\n".join(
        format_speaker(i, s, bio_limit=bio_limit)
        for i, s in enumerate(speakers, start=1)
    )


def load_speakers_context(path: str | Path, *, bio_limit: int = BIO_CHAR_LIMIT) -> str:
    """Read the scraper's output file once and build the context block."""
    return build_speakers_context(load_speakers(path), bio_limit=bio_limit)
