"""
Scraper for conference agendas rendered by the Cvent agenda-v2 widget.

Flow:
  1. Load the host page and wait for the widget iframe to show session
     tiles, reloading on the empty state or a tile timeout (max 3
     attempts).
  2. Scroll the widget frame in fixed steps; after each step hand only
     the newly rendered tiles to the extractor.
  3. For each new tile, walk its speaker carousel page by page, opening
     every speaker's detail modal and reading name/title/company/bio.
  4. Return the run state; writing the file is the caller's job.

Everything is strictly sequential — one page, one frame, one modal at
a time.
"""

from __future__ import annotations

import asyncio
import logging

from playwright.async_api import Frame

from config.agenda import SESSION_TILE_SELECTOR
from handlers import (
    WidgetLoadError,
    WidgetNotFoundError,
    extract_carousel_speakers,
    load_agenda,
    scroll_and_collect,
)
from speakers import ScrapeRun
from .base import BaseScraper

logger = logging.getLogger(__name__)


class CventAgendaScraper(BaseScraper):
    """Scraper for the Cvent agenda-v2 widget embedded in an iframe."""

    async def scrape(self) -> ScrapeRun:
        cfg = self.settings
        run = self.new_run()

        try:
            nav = await load_agenda(
                self.page,
                self.url,
                max_attempts=cfg["max_load_attempts"],
                post_scroll_wait_sec=cfg["post_scroll_wait_sec"],
                iframe_timeout_ms=cfg["iframe_timeout_ms"],
                post_iframe_wait_sec=cfg["post_iframe_wait_sec"],
                tile_timeout_ms=cfg["tile_timeout_ms"],
                retry_wait_sec=cfg["retry_wait_sec"],
            )
        except (WidgetLoadError, WidgetNotFoundError):
            await self.save_debug_info("widget_not_ready")
            raise

        logger.info("[%s] Widget ready after %d attempt(s)", self.slug, nav.attempts)
        await self.collect(nav.frame, run)

        logger.info(
            "[%s] Scrape complete — %d speakers (%d tiles, %d duplicates, "
            "%d failed cards, %d abandoned carousels)",
            self.slug, len(run), run.tiles_processed, run.duplicates,
            run.failures, run.abandoned_carousels,
        )
        return run

    async def collect(self, frame: Frame, run: ScrapeRun) -> None:
        """Scroll *frame* and extract speakers from every new tile into *run*."""
        cfg = self.settings

        async def _process_tiles(start: int, end: int) -> None:
            for index in range(start, end):
                logger.info("[%s] Processing session tile %d/%d …", self.slug, index + 1, end)
                await asyncio.sleep(cfg["tile_settle_sec"])
                tile = frame.locator(SESSION_TILE_SELECTOR).nth(index)
                await extract_carousel_speakers(
                    frame,
                    tile,
                    run,
                    max_pages=cfg["max_carousel_pages"],
                    click_timeout_ms=cfg["card_click_timeout_ms"],
                    modal_timeout_ms=cfg["modal_timeout_ms"],
                    open_settle_sec=cfg["modal_open_settle_sec"],
                    close_timeout_ms=cfg["modal_close_timeout_ms"],
                    close_settle_sec=cfg["modal_close_settle_sec"],
                    carousel_settle_sec=cfg["carousel_settle_sec"],
                )
                run.tiles_processed += 1

        logger.info("[%s] Scrolling widget and processing tiles incrementally …", self.slug)
        stats = await scroll_and_collect(
            frame,
            _process_tiles,
            step_px=cfg["scroll_step_px"],
            settle_sec=cfg["scroll_settle_sec"],
            max_stalled_scrolls=cfg["max_stalled_scrolls"],
            bottom_tolerance_px=cfg["bottom_tolerance_px"],
        )
        logger.info(
            "[%s] Scrolling done — %d scroll(s), %d tile(s)%s",
            self.slug, stats.scrolls, stats.tiles_seen,
            " (reached bottom)" if stats.reached_bottom else "",
        )
