"""
Speaker detail modal: open, read, close.

Every function takes the speaker card as a *locator*, never a resolved
element handle.  The widget rebuilds its carousel DOM between clicks,
and a locator re-resolves by selector at the moment of each action.
"""

import asyncio
import logging

from playwright.async_api import Frame, Locator

from config.agenda import (
    MODAL_CLOSE_SELECTOR,
    SPEAKER_FIELD_SELECTORS,
    SPEAKER_MODAL_SELECTOR,
    WIDGET_DEFAULTS,
)
from speakers import SpeakerRecord

logger = logging.getLogger(__name__)

_CVENT_CFG = WIDGET_DEFAULTS["cvent"]


def detail_modal(frame: Frame) -> Locator:
    return frame.locator(SPEAKER_MODAL_SELECTOR)


async def open_detail_view(
    frame: Frame,
    card: Locator,
    *,
    click_timeout_ms: int = _CVENT_CFG["card_click_timeout_ms"],
    modal_timeout_ms: int = _CVENT_CFG["modal_timeout_ms"],
    settle_sec: float = _CVENT_CFG["modal_open_settle_sec"],
) -> Locator:
    """Click *card* and wait for the detail modal to become visible.

    Raises ``PlaywrightTimeout`` if the click or the modal times out.
    """
    await card.click(timeout=click_timeout_ms)
    await asyncio.sleep(settle_sec)
    modal = detail_modal(frame)
    await modal.wait_for(state="visible", timeout=modal_timeout_ms)
    return modal


async def read_speaker_fields(modal: Locator) -> SpeakerRecord:
    """Read the fixed field set from an open modal.

    A missing field yields an empty string; it is never an error.
    """
    raw: dict[str, str] = {}
    for key, selector in SPEAKER_FIELD_SELECTORS.items():
        field = modal.locator(selector).first
        if await field.count() == 0:
            raw[key] = ""
            continue
        raw[key] = await field.text_content() or ""
    return SpeakerRecord.from_fields(raw)


async def close_detail_view(
    frame: Frame,
    *,
    close_timeout_ms: int = _CVENT_CFG["modal_close_timeout_ms"],
    settle_sec: float = _CVENT_CFG["modal_close_settle_sec"],
) -> None:
    """Click the modal's close control and wait for the modal to go away.

    Raises ``PlaywrightTimeout`` if the modal is still visible afterwards.
    """
    await frame.locator(MODAL_CLOSE_SELECTOR).first.click(timeout=close_timeout_ms)
    await detail_modal(frame).wait_for(state="hidden", timeout=close_timeout_ms)
    await asyncio.sleep(settle_sec)


async def dismiss_detail_view(
    frame: Frame,
    *,
    close_timeout_ms: int = _CVENT_CFG["modal_close_timeout_ms"],
    settle_sec: float = _CVENT_CFG["modal_close_settle_sec"],
) -> bool:
    """Best-effort close after a failed interaction.

    Returns ``True`` if no detail modal is left visible, ``False`` if it
    is stuck open.  Never raises.
    """
    close = frame.locator(MODAL_CLOSE_SELECTOR).first
    try:
        if await close.count() > 0:
            await close.click(timeout=close_timeout_ms)
            await asyncio.sleep(settle_sec)
    except Exception:
        logger.debug("Best-effort modal close failed", exc_info=True)

    try:
        return not await detail_modal(frame).is_visible()
    except Exception:
        logger.debug("Could not determine modal visibility", exc_info=True)
        return False
