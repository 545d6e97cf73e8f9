"""
SOF Week speaker scraper orchestrator.

Loads the agenda page, walks the embedded Cvent widget, and writes every
unique speaker to a JSON file that the chat (``chat.py``) reads.

Usage:
    python main.py

Environment variables:
    AGENDA_URL=https://...    # override the agenda page
    OUTPUT_PATH=speakers.json # where to write the speakers
    WRAP_OUTPUT=true          # wrap with {scrapedAt, url, totalSpeakers, speakers}
    HEADLESS=false            # show the browser window
    DEBUG_DIR=...             # screenshots/HTML on widget load failure

Exit code 0 = speakers written, 1 = fatal failure (nothing written).
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
import time
from typing import Any

from dotenv import load_dotenv

from config.agenda import EVENT
from handlers import WidgetLoadError, WidgetNotFoundError
from output import OutputWriteError, write_speakers
from platforms import CventAgendaScraper

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("orchestrator")

# ---------------------------------------------------------------------------
# Configuration from environment
# ---------------------------------------------------------------------------

AGENDA_URL = os.getenv("AGENDA_URL", EVENT["url"])
OUTPUT_PATH = os.getenv("OUTPUT_PATH", "speakers.json")
WRAP_OUTPUT = os.getenv("WRAP_OUTPUT", "false").lower() == "true"
HEADLESS = os.getenv("HEADLESS", "true").lower() == "true"

SCRAPER_MAP = {
    "cvent": CventAgendaScraper,
}


async def run(event: dict[str, Any] | None = None) -> int:
    """Run the full scrape and write the output file.  Returns an exit code."""
    event = event or {**EVENT, "url": AGENDA_URL}
    start = time.time()

    logger.info("=" * 60)
    logger.info("%s Speaker Scraper Starting", event["name"])
    logger.info("  URL:        %s", event["url"])
    logger.info("  OUTPUT:     %s", OUTPUT_PATH)
    logger.info("  WRAPPED:    %s", WRAP_OUTPUT)
    logger.info("  HEADLESS:   %s", HEADLESS)
    logger.info("=" * 60)

    scraper_cls = SCRAPER_MAP[event["platform"]]

    try:
        async with scraper_cls(event, headless=HEADLESS) as scraper:
            scrape_run = await scraper.scrape()
    except (WidgetNotFoundError, WidgetLoadError) as exc:
        logger.error("Scrape aborted: %s", exc)
        return 1

    logger.info("Total unique speakers scraped: %d", len(scrape_run))
    logger.info("Saving to %s …", OUTPUT_PATH)
    try:
        write_speakers(
            OUTPUT_PATH,
            scrape_run.speakers,
            url=event["url"] if WRAP_OUTPUT else None,
        )
    except OutputWriteError as exc:
        logger.error("%s", exc)
        return 1

    elapsed = time.time() - start
    logger.info("=" * 60)
    logger.info("SCRAPE COMPLETE")
    logger.info("  Speakers:   %d", len(scrape_run))
    logger.info("  Tiles:      %d", scrape_run.tiles_processed)
    logger.info("  Duplicates: %d", scrape_run.duplicates)
    logger.info("  Failures:   %d", scrape_run.failures)
    logger.info("  Duration:   %.1f min", elapsed / 60)
    if scrape_run.speakers:
        logger.info("  Sample speakers:")
        for s in scrape_run.speakers[:3]:
            logger.info("    - %s (%s)", s.name, s.company)
    logger.info("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(run()))
