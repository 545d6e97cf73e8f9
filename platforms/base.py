"""
Abstract base class for agenda-widget scrapers.

Owns the browser session for one run: Playwright, browser, context and
page are acquired in ``__aenter__`` and released exactly once in
``__aexit__``, whether the scrape succeeded or raised.  Subclasses
implement ``scrape()`` with their widget-specific navigation and
extraction logic.

Session setup:
  1. Chromium with the shared ``BROWSER_ARGS``.
  2. playwright-stealth — patches the usual automation giveaways
     (webdriver flag, plugins, languages, chrome.runtime, ...).
  3. Analytics domain blocking — lets ``networkidle`` actually settle on
     the host page.
  4. Randomized viewport + User-Agent per context.
"""

from __future__ import annotations

import abc
import logging
import os
from pathlib import Path
from typing import Any

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Frame,
    Page,
    Playwright,
)
from playwright_stealth import Stealth

from config.agenda import BROWSER_ARGS, WIDGET_DEFAULTS, get_user_agent, get_viewport
from speakers import ScrapeRun

DEBUG_DIR = Path(os.getenv("DEBUG_DIR", "debug_screenshots"))

logger = logging.getLogger(__name__)

_STEALTH = Stealth()

_BLOCKED_ANALYTICS_PATTERNS = [
    "*google-analytics.com*",
    "*googletagmanager.com*",
    "*facebook.net*",
    "*doubleclick.net*",
    "*hotjar.com*",
    "*linkedin.com/px*",
]


async def _block_route(route) -> None:
    await route.abort()


class BaseScraper(abc.ABC):
    """Skeleton shared by every widget scraper.

    Usage::

        async with CventAgendaScraper(EVENT) as scraper:
            run = await scraper.scrape()
    """

    def __init__(self, event: dict[str, Any], *, headless: bool = True) -> None:
        self.event = event
        self.name: str = event["name"]
        self.slug: str = event["slug"]
        self.url: str = event["url"]
        self.platform: str = event["platform"]
        self.headless = headless

        # Widget timings/bounds, with per-event overrides on top.
        self.settings: dict[str, Any] = {
            **WIDGET_DEFAULTS.get(self.platform, {}),
            **event.get("settings", {}),
        }

        # Set by __aenter__
        self._pw: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    # ------------------------------------------------------------------
    # Async context manager — browser lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> "BaseScraper":
        self._pw = await async_playwright().start()
        try:
            self._browser = await self._pw.chromium.launch(
                headless=self.headless, args=BROWSER_ARGS,
            )
            self._context = await self._browser.new_context(
                viewport=get_viewport(),
                user_agent=get_user_agent(),
                locale="en-US",
                timezone_id="America/New_York",
            )
            await _STEALTH.apply_stealth_async(self._context)
            self._page = await self._context.new_page()
            for pattern in _BLOCKED_ANALYTICS_PATTERNS:
                await self._page.route(pattern, _block_route)
        except Exception:
            await self.close()
            raise

        logger.info("[%s] Browser ready (headless=%s)", self.slug, self.headless)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Release page, context, browser and Playwright.  Idempotent."""
        for obj in (self._page, self._context, self._browser):
            if obj is None:
                continue
            try:
                await obj.close()
            except Exception as exc:
                logger.warning("[%s] Error while closing %s: %s", self.slug, type(obj).__name__, exc)
        self._page = self._context = self._browser = None
        if self._pw is not None:
            await self._pw.stop()
            self._pw = None
            logger.info("[%s] Cleanup done", self.slug)

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    @property
    def page(self) -> Page:
        assert self._page is not None, "BaseScraper must be used as an async context manager"
        return self._page

    def new_run(self) -> ScrapeRun:
        return ScrapeRun(url=self.url)

    async def save_debug_info(self, label: str, target: Page | Frame | None = None) -> None:
        """Save a screenshot and an HTML dump under ``DEBUG_DIR``.

        Errors are caught so this never masks the failure being debugged.
        """
        target = target or self.page
        prefix = f"{self.slug}_{label}"
        try:
            DEBUG_DIR.mkdir(parents=True, exist_ok=True)
            logger.info("[%s] DEBUG url=%s", self.slug, target.url)

            await self.page.screenshot(path=str(DEBUG_DIR / f"{prefix}.png"), full_page=True)

            html = await target.content()
            (DEBUG_DIR / f"{prefix}.html").write_text(html[:50_000], encoding="utf-8")

            iframes = await self.page.query_selector_all("iframe")
            logger.info("[%s] DEBUG %d iframe(s) found on page", self.slug, len(iframes))
            for i, iframe in enumerate(iframes):
                src = await iframe.get_attribute("src") or "(no src)"
                logger.info("[%s] DEBUG iframe[%d]: src=%s", self.slug, i, src)

            logger.info("[%s] Debug artifacts saved: %s", self.slug, DEBUG_DIR / prefix)
        except Exception as exc:
            logger.warning("[%s] Failed to save debug info: %s", self.slug, exc)

    # ------------------------------------------------------------------
    # Abstract interface
    # ------------------------------------------------------------------

    @abc.abstractmethod
    async def scrape(self) -> ScrapeRun:
        """Scrape speakers from this event's agenda widget.

        Returns the run state holding the deduplicated speakers in
        discovery order.
        """
        ...
