"""
Agenda-widget configuration for the SOF Week speaker scraper.

The agenda page embeds a Cvent "agenda-v2" widget inside an iframe.
Everything the scraper knows about that widget lives here: the host
page URL, the DOM markers it keys on, and the timings used for the
fixed-duration waits between interactions.

Any change to the selectors below is a compatibility break the scraper
can only notice through timeouts, so keep them together and keep them
exact.
"""

# ---------------------------------------------------------------------------
# Browser / Playwright defaults
# ---------------------------------------------------------------------------

import random as _random

BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-blink-features=AutomationControlled",
    "--disable-dev-shm-usage",
    "--disable-infobars",
]

# Pool of realistic Chrome User-Agents — one is picked per browser context.
_USER_AGENT_POOL = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/130.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
]


def get_user_agent() -> str:
    """Return a randomly selected realistic Chrome User-Agent."""
    return _random.choice(_USER_AGENT_POOL)


# The widget lays out session tiles responsively; these bases all keep
# the desktop layout (carousel arrows visible, modal as overlay).
_VIEWPORT_BASES = [
    (1920, 1080),
    (1440, 900),
    (1536, 864),
]


def get_viewport() -> dict[str, int]:
    """Return a slightly randomized desktop viewport."""
    w, h = _random.choice(_VIEWPORT_BASES)
    return {
        "width": w + _random.randint(-16, 16),
        "height": h + _random.randint(-8, 8),
    }


# The widget only mounts once the host page's own scripts have gone
# quiet, so the agenda page is loaded with 'networkidle'.  Analytics
# are blocked in BaseScraper so the network actually settles.
WAIT_UNTIL = "networkidle"

GOTO_TIMEOUT_MS = 60_000

# ---------------------------------------------------------------------------
# Event
# ---------------------------------------------------------------------------

EVENT = {
    "name": "SOF Week",
    "slug": "sofweek",
    "url": "https://sofweek.org/agenda/",
    "platform": "cvent",
}

# ---------------------------------------------------------------------------
# Cvent agenda-v2 widget markers
# ---------------------------------------------------------------------------

IFRAME_SELECTOR = "iframe.cvt-embed"

# Rendered by the widget when it has mounted but its data has not arrived.
EMPTY_STATE_TEXT = "No sessions found"
EMPTY_STATE_SELECTOR = f"text={EMPTY_STATE_TEXT}"

SESSION_TILE_SELECTOR = '[data-cvent-id="agenda-v2-widget-session-tile-card"]'
SPEAKER_CAROUSEL_SELECTOR = '[data-cvent-id="speaker-carousel"]'
SPEAKER_CARD_SELECTOR = '[data-cvent-id="speaker-card-speaker-profile-image"]'

# The right arrow only carries hashed CSS-module classes, so match on the
# stable prefix of both.
CAROUSEL_NEXT_SELECTOR = (
    '[class*="AgendaV2Styles__carouselButton"][class*="AgendaV2Styles__carouselRight"]'
)

SPEAKER_MODAL_SELECTOR = '[data-cvent-id="speaker-detail-modal"]'
MODAL_CLOSE_SELECTOR = '[data-cvent-id="close"]'

# Detail-modal fields, in output order.
SPEAKER_FIELD_SELECTORS = {
    "name": '[data-cvent-id="speaker-name"]',
    "title": '[data-cvent-id="speaker-card-speaker-info-speaker-title"]',
    "company": '[data-cvent-id="speaker-card-speaker-info-speaker-company"]',
    "bio": '[class*="AgendaV2Styles__speakerModalBio"]',
}

# ---------------------------------------------------------------------------
# Timings and bounds
# ---------------------------------------------------------------------------

WIDGET_DEFAULTS = {
    "cvent": {
        # Retry Navigator
        "max_load_attempts": 3,
        "post_scroll_wait_sec": 2,
        "iframe_timeout_ms": 30_000,
        "post_iframe_wait_sec": 2,
        "tile_timeout_ms": 30_000,
        "retry_wait_sec": 2,
        # Incremental Collector
        "scroll_step_px": 800,
        "scroll_settle_sec": 2,
        "max_stalled_scrolls": 3,
        "bottom_tolerance_px": 100,
        # Detail Extractor
        "tile_settle_sec": 0.3,
        "max_carousel_pages": 50,
        "card_click_timeout_ms": 5_000,
        "modal_timeout_ms": 5_000,
        "modal_open_settle_sec": 1,
        "modal_close_timeout_ms": 3_000,
        "modal_close_settle_sec": 0.5,
        "carousel_settle_sec": 1,
    },
}
