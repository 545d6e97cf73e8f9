"""
Speaker-carousel traversal inside a session tile.

A session tile may carry a carousel of speaker cards spread over several
pages.  For every page:

  1. Re-count the visible cards (the widget rebuilds the carousel after
     each interaction, so nothing is cached across clicks).
  2. For each card: open its detail modal, read the fields, dedupe
     against the run, close the modal.
  3. Advance with the right arrow if it exists and is enabled.

One card's failure is isolated: it is logged, the modal is closed on a
best-effort basis, and the next card is tried.  If the modal is still
stuck open after that, the rest of the carousel is abandoned rather
than clicking through an overlay.  A failed arrow click abandons the
rest of the carousel the same way; the run moves on to the next tile.

CRITICAL: a missing or disabled right arrow is the *expected* end of
the carousel, not an error.
"""

from __future__ import annotations

import asyncio
import logging

from playwright.async_api import Frame, Locator

from config.agenda import (
    CAROUSEL_NEXT_SELECTOR,
    SPEAKER_CARD_SELECTOR,
    SPEAKER_CAROUSEL_SELECTOR,
    WIDGET_DEFAULTS,
)
from speakers import ScrapeRun
from .detail_view import (
    close_detail_view,
    dismiss_detail_view,
    open_detail_view,
    read_speaker_fields,
)

logger = logging.getLogger(__name__)

_CVENT_CFG = WIDGET_DEFAULTS["cvent"]


def speaker_cards(carousel: Locator) -> Locator:
    """Fresh locator for the cards currently rendered in *carousel*."""
    return carousel.locator(SPEAKER_CARD_SELECTOR)


async def advance_carousel(
    carousel: Locator,
    *,
    settle_sec: float = _CVENT_CFG["carousel_settle_sec"],
) -> bool:
    """Click the carousel's right arrow.

    Returns ``True`` if the carousel moved to the next page, ``False``
    if there is no further page (arrow missing or disabled).
    """
    arrow = carousel.locator(CAROUSEL_NEXT_SELECTOR).first
    if await arrow.count() == 0:
        logger.info("  No more carousel pages (no right arrow)")
        return False

    if not await arrow.is_enabled():
        logger.info("  Right arrow disabled — carousel complete")
        return False

    await arrow.click()
    logger.info("  → Clicked right arrow to next carousel page")
    await asyncio.sleep(settle_sec)
    return True


async def extract_carousel_speakers(
    frame: Frame,
    tile: Locator,
    run: ScrapeRun,
    *,
    max_pages: int = _CVENT_CFG["max_carousel_pages"],
    click_timeout_ms: int = _CVENT_CFG["card_click_timeout_ms"],
    modal_timeout_ms: int = _CVENT_CFG["modal_timeout_ms"],
    open_settle_sec: float = _CVENT_CFG["modal_open_settle_sec"],
    close_timeout_ms: int = _CVENT_CFG["modal_close_timeout_ms"],
    close_settle_sec: float = _CVENT_CFG["modal_close_settle_sec"],
    carousel_settle_sec: float = _CVENT_CFG["carousel_settle_sec"],
) -> int:
    """Collect every speaker reachable from *tile*'s carousel into *run*.

    Returns the number of new (non-duplicate) speakers added.  Never
    raises for a single card's failure.
    """
    carousel = tile.locator(SPEAKER_CAROUSEL_SELECTOR)
    if await carousel.count() == 0:
        logger.info("  No speaker carousel found in this tile")
        return 0

    initial = await speaker_cards(carousel).count()
    if initial == 0:
        logger.info("  Speaker carousel is empty")
        return 0
    logger.info("  Found %d speaker card(s) initially visible", initial)

    added = 0
    for page_index in range(max_pages):
        visible = await speaker_cards(carousel).count()
        if visible == 0:
            logger.info("  No more speaker cards visible")
            break
        logger.info(
            "  Processing %d speaker(s) on carousel page %d", visible, page_index + 1,
        )

        for card_index in range(visible):
            # Re-query right before use; the carousel may have been rebuilt.
            if card_index >= await speaker_cards(carousel).count():
                logger.info("  Card %d no longer available", card_index + 1)
                break
            card = speaker_cards(carousel).nth(card_index)

            try:
                modal = await open_detail_view(
                    frame, card,
                    click_timeout_ms=click_timeout_ms,
                    modal_timeout_ms=modal_timeout_ms,
                    settle_sec=open_settle_sec,
                )
                record = await read_speaker_fields(modal)

                if not record.name:
                    logger.info("  Card %d has no speaker name — skipped", card_index + 1)
                elif run.add(record):
                    added += 1
                    logger.info(
                        "  ✓ Scraped [%d/%d]: %s", card_index + 1, visible, record.name,
                    )
                else:
                    logger.info(
                        "  - Already scraped [%d/%d]: %s",
                        card_index + 1, visible, record.name,
                    )

                await close_detail_view(
                    frame, close_timeout_ms=close_timeout_ms, settle_sec=close_settle_sec,
                )
            except Exception as exc:
                run.failures += 1
                logger.warning(
                    "  Error processing speaker %d on carousel page %d: %s",
                    card_index + 1, page_index + 1, exc,
                )
                closed = await dismiss_detail_view(
                    frame, close_timeout_ms=close_timeout_ms, settle_sec=close_settle_sec,
                )
                if not closed:
                    run.abandoned_carousels += 1
                    logger.error(
                        "  Detail view stuck open — abandoning rest of this carousel "
                        "(%d speaker(s) collected from it)",
                        added,
                    )
                    return added

        try:
            advanced = await advance_carousel(carousel, settle_sec=carousel_settle_sec)
        except Exception as exc:
            run.failures += 1
            run.abandoned_carousels += 1
            logger.warning(
                "  Could not advance carousel past page %d: %s "
                "(%d speaker(s) collected from it)",
                page_index + 1, exc, added,
            )
            return added
        if not advanced:
            break
    else:
        logger.warning("  Hit carousel page cap (%d) — stopping", max_pages)

    logger.info("  Processed %d new speaker(s) from this carousel", added)
    return added
