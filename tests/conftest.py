"""Shared fixtures for the speaker scraper test suite."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure the project modules are importable from tests/
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config.agenda import WIDGET_DEFAULTS
from speakers import ScrapeRun, SpeakerRecord


@pytest.fixture
def fast_settings():
    """Widget settings with every fixed wait zeroed out."""
    settings = dict(WIDGET_DEFAULTS["cvent"])
    for key in settings:
        if key.endswith("_sec"):
            settings[key] = 0
    return settings


@pytest.fixture
def fast_kwargs(fast_settings):
    """Keyword arguments for ``extract_carousel_speakers`` with no waits."""
    return {
        "max_pages": fast_settings["max_carousel_pages"],
        "open_settle_sec": 0,
        "close_settle_sec": 0,
        "carousel_settle_sec": 0,
    }


@pytest.fixture
def run():
    """Fresh run state per test."""
    return ScrapeRun(url="https://sofweek.org/agenda/")


@pytest.fixture
def make_speaker():
    """Factory for ``SpeakerRecord`` with sensible defaults."""

    def _make(
        name="Ms. Leslie Babich",
        *,
        title="Director",
        company="SOFWERX",
        bio="20+ years in special operations.",
    ):
        return SpeakerRecord(name=name, title=title, company=company, bio=bio)

    return _make
