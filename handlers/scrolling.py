"""
Incremental scroll-and-collect loop for the agenda widget.

The widget renders session tiles lazily as its own document scrolls.
Each step scrolls the frame a fixed distance, waits for rendering to
settle, and re-counts tiles.  Only the newly rendered range
``[previous, current)`` is handed to the caller, so tiles already
processed are never touched again as the list grows.

The loop ends when the tile count has not grown for
``max_stalled_scrolls`` consecutive steps, or when the frame is scrolled
to the bottom.  Ending with zero tiles is a valid "no content" outcome.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from playwright.async_api import Frame

from config.agenda import SESSION_TILE_SELECTOR, WIDGET_DEFAULTS

logger = logging.getLogger(__name__)

_CVENT_CFG = WIDGET_DEFAULTS["cvent"]

_JS_SCROLL_TO = "(pos) => window.scrollTo(0, pos)"

_JS_AT_BOTTOM = """
(tolerance) =>
    window.innerHeight + window.scrollY >= document.body.scrollHeight - tolerance
"""

TileRangeHandler = Callable[[int, int], Awaitable[None]]


@dataclass
class ScrollStats:
    scrolls: int = 0
    tiles_seen: int = 0
    reached_bottom: bool = False
    stalled: bool = False


async def is_at_bottom(frame: Frame, tolerance_px: int) -> bool:
    return bool(await frame.evaluate(_JS_AT_BOTTOM, tolerance_px))


async def scroll_and_collect(
    frame: Frame,
    on_new_tiles: TileRangeHandler,
    *,
    step_px: int = _CVENT_CFG["scroll_step_px"],
    settle_sec: float = _CVENT_CFG["scroll_settle_sec"],
    max_stalled_scrolls: int = _CVENT_CFG["max_stalled_scrolls"],
    bottom_tolerance_px: int = _CVENT_CFG["bottom_tolerance_px"],
) -> ScrollStats:
    """Scroll *frame* step by step, calling *on_new_tiles(start, end)* for
    every newly rendered range of session tiles.

    A shrinking count (the widget recycling tiles) counts as a stall and
    does not move the processed boundary backwards.
    """
    stats = ScrollStats()
    position = 0
    previous_count = 0
    stalled = 0

    while stalled < max_stalled_scrolls:
        position += step_px
        await frame.evaluate(_JS_SCROLL_TO, position)
        stats.scrolls += 1
        await asyncio.sleep(settle_sec)

        current_count = await frame.locator(SESSION_TILE_SELECTOR).count()
        logger.info("Scroll position: %d, tiles loaded: %d", position, current_count)

        if current_count <= previous_count:
            stalled += 1
            logger.info("No new tiles (%d/%d)", stalled, max_stalled_scrolls)
        else:
            stalled = 0
            await on_new_tiles(previous_count, current_count)
            previous_count = current_count

        if await is_at_bottom(frame, bottom_tolerance_px):
            logger.info("Reached bottom of widget frame")
            stats.reached_bottom = True
            break
    else:
        stats.stalled = True

    stats.tiles_seen = previous_count
    return stats
