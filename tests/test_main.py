"""Tests for main.py — exit codes and the written file."""

from __future__ import annotations

import json

import pytest

import main
from config.agenda import EVENT
from handlers import WidgetLoadError
from speakers import ScrapeRun, SpeakerRecord


def _fake_scraper(result=None, error=None):
    class FakeScraper:
        def __init__(self, event, *, headless=True):
            self.event = event

        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc_val, exc_tb):
            return None

        async def scrape(self):
            if error is not None:
                raise error
            return result

    return FakeScraper


def _run_with(*names):
    run = ScrapeRun(url=EVENT["url"])
    for name in names:
        run.add(SpeakerRecord(name=name, title="Director", company="SOFWERX"))
    return run


@pytest.fixture
def output_path(tmp_path, monkeypatch):
    path = tmp_path / "speakers.json"
    monkeypatch.setattr(main, "OUTPUT_PATH", str(path))
    monkeypatch.setattr(main, "WRAP_OUTPUT", False)
    return path


@pytest.mark.asyncio
async def test_success_writes_bare_list(output_path, monkeypatch):
    monkeypatch.setitem(main.SCRAPER_MAP, "cvent", _fake_scraper(_run_with("A", "B")))

    assert await main.run(EVENT) == 0

    data = json.loads(output_path.read_text(encoding="utf-8"))
    assert [row["name"] for row in data] == ["A", "B"]
    assert list(data[0]) == ["name", "title", "company", "bio"]


@pytest.mark.asyncio
async def test_wrapped_output(output_path, monkeypatch):
    monkeypatch.setattr(main, "WRAP_OUTPUT", True)
    monkeypatch.setitem(main.SCRAPER_MAP, "cvent", _fake_scraper(_run_with("A")))

    assert await main.run(EVENT) == 0

    data = json.loads(output_path.read_text(encoding="utf-8"))
    assert data["url"] == EVENT["url"]
    assert data["totalSpeakers"] == 1


@pytest.mark.asyncio
async def test_widget_failure_exits_nonzero_without_file(output_path, monkeypatch):
    error = WidgetLoadError("never ready", attempts=3, history=[])
    monkeypatch.setitem(main.SCRAPER_MAP, "cvent", _fake_scraper(error=error))

    assert await main.run(EVENT) == 1
    assert not output_path.exists()


@pytest.mark.asyncio
async def test_write_failure_exits_nonzero(tmp_path, monkeypatch):
    monkeypatch.setattr(main, "OUTPUT_PATH", str(tmp_path / "missing" / "speakers.json"))
    monkeypatch.setitem(main.SCRAPER_MAP, "cvent", _fake_scraper(_run_with("A")))

    assert await main.run(EVENT) == 1


@pytest.mark.asyncio
async def test_empty_run_still_writes_file(output_path, monkeypatch):
    monkeypatch.setitem(main.SCRAPER_MAP, "cvent", _fake_scraper(_run_with()))

    assert await main.run(EVENT) == 0
    assert json.loads(output_path.read_text(encoding="utf-8")) == []
