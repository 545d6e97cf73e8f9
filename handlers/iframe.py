"""
Iframe resolution for the embedded Cvent agenda widget.

The host page injects ``iframe.cvt-embed`` lazily, after the visitor has
scrolled towards it.  ``get_widget_frame`` waits for that element and
returns its content frame.  Not finding it is a structural failure: the
widget cannot be scraped without it, so the error propagates.
"""

from __future__ import annotations

import asyncio
import logging

from playwright.async_api import Page, Frame, TimeoutError as PlaywrightTimeout

from config.agenda import IFRAME_SELECTOR

logger = logging.getLogger(__name__)


class WidgetNotFoundError(RuntimeError):
    """The agenda widget iframe never appeared or had no content frame."""


async def get_widget_frame(
    page: Page,
    *,
    selector: str = IFRAME_SELECTOR,
    timeout_ms: int = 30_000,
    post_wait_sec: float = 0,
) -> Frame:
    """Wait for the widget iframe on *page* and return its content frame.

    Raises ``WidgetNotFoundError`` if the iframe is not attached within
    *timeout_ms* or exposes no content frame.
    """
    locator = page.locator(selector).first
    try:
        await locator.wait_for(state="attached", timeout=timeout_ms)
    except PlaywrightTimeout as exc:
        raise WidgetNotFoundError(
            f"Iframe {selector!r} not found within {timeout_ms} ms"
        ) from exc

    element = await locator.element_handle()
    if element is None:
        raise WidgetNotFoundError(f"Iframe {selector!r} matched but has no element handle")

    frame = await element.content_frame()
    if frame is None:
        raise WidgetNotFoundError(f"Could not access content of iframe {selector!r}")

    logger.info("Widget iframe found via %r — frame URL: %s", selector, frame.url)

    if post_wait_sec > 0:
        await asyncio.sleep(post_wait_sec)

    return frame
