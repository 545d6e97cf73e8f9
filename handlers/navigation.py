"""
Initial page load for the agenda widget, with whole-attempt retries.

Each attempt runs the full sequence: navigate, scroll the host page half
way so the iframe is injected, resolve the widget frame, then decide:

  - the widget shows its empty-state text ("No sessions found") —
    data has not arrived yet; reload and start over;
  - no session tile within the timeout — same, reload and start over;
  - a session tile is attached — ready.

Retries restart the whole attempt, never an inner step.  Running out of
attempts raises ``WidgetLoadError``.  A missing iframe is not retried:
``WidgetNotFoundError`` propagates straight away.

States::

    LOADING -> (EMPTY_DETECTED | CARD_TIMEOUT) -> RELOADING -> LOADING
    LOADING -> READY
    RELOADING (attempts exhausted) -> FAILED
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass, field

from playwright.async_api import Page, Frame, TimeoutError as PlaywrightTimeout

from config.agenda import (
    EMPTY_STATE_SELECTOR,
    GOTO_TIMEOUT_MS,
    SESSION_TILE_SELECTOR,
    WAIT_UNTIL,
    WIDGET_DEFAULTS,
)
from .iframe import get_widget_frame

logger = logging.getLogger(__name__)

_CVENT_CFG = WIDGET_DEFAULTS["cvent"]

# Scrolls the host page (not the widget) to half its height; the embed
# script only injects the iframe once it is near the viewport.
_JS_SCROLL_HALF = "() => window.scrollTo(0, document.body.scrollHeight / 2)"


class NavState(enum.Enum):
    LOADING = "loading"
    EMPTY_DETECTED = "empty_detected"
    CARD_TIMEOUT = "card_timeout"
    RELOADING = "reloading"
    READY = "ready"
    FAILED = "failed"


class WidgetLoadError(RuntimeError):
    """The widget never produced session tiles within the attempt budget."""

    def __init__(self, message: str, *, attempts: int, history: list[NavState]) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.history = history


@dataclass
class NavigationResult:
    """Outcome of a successful ``load_agenda``."""

    frame: Frame
    attempts: int
    history: list[NavState] = field(default_factory=list)


async def load_agenda(
    page: Page,
    url: str,
    *,
    max_attempts: int = _CVENT_CFG["max_load_attempts"],
    wait_until: str = WAIT_UNTIL,
    goto_timeout_ms: int = GOTO_TIMEOUT_MS,
    post_scroll_wait_sec: float = _CVENT_CFG["post_scroll_wait_sec"],
    iframe_timeout_ms: int = _CVENT_CFG["iframe_timeout_ms"],
    post_iframe_wait_sec: float = _CVENT_CFG["post_iframe_wait_sec"],
    tile_timeout_ms: int = _CVENT_CFG["tile_timeout_ms"],
    retry_wait_sec: float = _CVENT_CFG["retry_wait_sec"],
) -> NavigationResult:
    """Load *url* until the agenda widget shows session tiles.

    Returns the widget frame together with the number of attempts used
    and the visited states.  Raises ``WidgetLoadError`` once
    *max_attempts* have all ended in a transient failure.
    """
    history: list[NavState] = []

    for attempt in range(1, max_attempts + 1):
        logger.info("=" * 60)
        logger.info("Attempt %d/%d", attempt, max_attempts)
        logger.info("=" * 60)
        history.append(NavState.LOADING)

        logger.info("Navigating to %s (wait_until=%s)", url, wait_until)
        await page.goto(url, wait_until=wait_until, timeout=goto_timeout_ms)

        logger.info("Scrolling halfway down page to load iframe …")
        await page.evaluate(_JS_SCROLL_HALF)
        await asyncio.sleep(post_scroll_wait_sec)

        frame = await get_widget_frame(
            page, timeout_ms=iframe_timeout_ms, post_wait_sec=post_iframe_wait_sec,
        )

        if await frame.locator(EMPTY_STATE_SELECTOR).count() > 0:
            logger.warning("Empty-state marker detected on attempt %d — reloading", attempt)
            history.append(NavState.EMPTY_DETECTED)
        else:
            try:
                await frame.locator(SESSION_TILE_SELECTOR).first.wait_for(
                    state="attached", timeout=tile_timeout_ms,
                )
            except PlaywrightTimeout:
                logger.warning(
                    "Session tiles did not load within %d ms on attempt %d — reloading",
                    tile_timeout_ms, attempt,
                )
                history.append(NavState.CARD_TIMEOUT)
            else:
                logger.info("Session tiles loaded on attempt %d", attempt)
                history.append(NavState.READY)
                return NavigationResult(frame=frame, attempts=attempt, history=history)

        history.append(NavState.RELOADING)
        await asyncio.sleep(retry_wait_sec)

    history.append(NavState.FAILED)
    raise WidgetLoadError(
        f"Failed to load session tiles after {max_attempts} attempts",
        attempts=max_attempts,
        history=history,
    )
