"""
In-memory stand-ins for the slice of Playwright's async API the scraper
uses (Page, Frame, Locator).

``FakeWidget`` plays the Cvent iframe: a list of session tiles, each with
an optional multi-page speaker carousel, one detail modal, and a scroll
position.  ``FakePage`` plays the host page and controls, per navigation
attempt, whether the widget shows its empty state or never renders tiles.

Speakers are plain dicts (see ``speaker()``).  A speaker with
``fail=True`` makes its card click time out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from playwright.async_api import TimeoutError as PlaywrightTimeout

from config.agenda import (
    CAROUSEL_NEXT_SELECTOR,
    EMPTY_STATE_SELECTOR,
    IFRAME_SELECTOR,
    MODAL_CLOSE_SELECTOR,
    SESSION_TILE_SELECTOR,
    SPEAKER_CARD_SELECTOR,
    SPEAKER_CAROUSEL_SELECTOR,
    SPEAKER_FIELD_SELECTORS,
    SPEAKER_MODAL_SELECTOR,
)
from handlers.scrolling import _JS_AT_BOTTOM, _JS_SCROLL_TO

_FIELD_BY_SELECTOR = {sel: key for key, sel in SPEAKER_FIELD_SELECTORS.items()}


def speaker(name: str, *, fail: bool = False, **fields: str) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": name,
        "title": fields.get("title", f"{name} Title"),
        "company": fields.get("company", f"{name} Co"),
        "bio": fields.get("bio", f"Bio of {name}."),
    }
    if fail:
        data["fail"] = True
    return data


@dataclass
class FakeCarousel:
    pages: list[list[dict[str, Any]]]
    next_disabled_on_last: bool = False
    # Right-arrow click times out (arrow detached or covered).
    arrow_broken: bool = False
    current: int = 0

    def has_next(self) -> bool:
        return self.current < len(self.pages) - 1 or self.next_disabled_on_last

    def cards(self) -> list[dict[str, Any]]:
        return self.pages[self.current] if self.pages else []


@dataclass
class FakeTile:
    carousel: FakeCarousel | None = None


@dataclass
class FakeWidget:
    tiles: list[FakeTile] = field(default_factory=list)
    # Visible tile count after the n-th scroll (last value repeats).
    # ``None`` means every tile is visible from the start.
    tile_counts: list[int] | None = None
    # Report "at bottom" from this scroll number on.
    bottom_after: int | None = None
    close_stuck: bool = False
    empty_state: bool = False
    tiles_ready: bool = True

    url: str = "https://web.cvent.com/event/fake/agenda"
    scroll_positions: list[int] = field(default_factory=list)
    clicked: list[str] = field(default_factory=list)
    open_speaker: dict[str, Any] | None = None

    # -- Frame API -------------------------------------------------------

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        if expression == _JS_SCROLL_TO:
            self.scroll_positions.append(arg)
            return None
        if expression == _JS_AT_BOTTOM:
            return self.bottom_after is not None and len(self.scroll_positions) >= self.bottom_after
        raise AssertionError(f"Unexpected evaluate: {expression!r}")

    def locator(self, selector: str) -> Any:
        if selector == SESSION_TILE_SELECTOR:
            return _TileList(self)
        if selector == SPEAKER_MODAL_SELECTOR:
            return _Modal(self)
        if selector == MODAL_CLOSE_SELECTOR:
            return _CloseButton(self)
        if selector == EMPTY_STATE_SELECTOR:
            return _Counted(1 if self.empty_state else 0)
        raise AssertionError(f"Unexpected frame selector: {selector!r}")

    # -- helpers -----------------------------------------------------------

    def visible_tiles(self) -> int:
        if self.tile_counts is None:
            return len(self.tiles)
        if not self.scroll_positions:
            return 0
        return self.tile_counts[min(len(self.scroll_positions), len(self.tile_counts)) - 1]


class _Counted:
    def __init__(self, n: int) -> None:
        self.n = n

    async def count(self) -> int:
        return self.n


class _TileList:
    def __init__(self, widget: FakeWidget) -> None:
        self.widget = widget

    @property
    def first(self) -> "_TileList":
        return self

    async def count(self) -> int:
        return self.widget.visible_tiles()

    async def wait_for(self, *, state: str = "visible", timeout: float | None = None) -> None:
        if not self.widget.tiles_ready:
            raise PlaywrightTimeout(f"Timeout {timeout}ms waiting for session tile")

    def nth(self, index: int) -> "_Tile":
        return _Tile(self.widget, self.widget.tiles[index])


class _Tile:
    def __init__(self, widget: FakeWidget, tile: FakeTile) -> None:
        self.widget = widget
        self.tile = tile

    def locator(self, selector: str) -> "_CarouselLocator":
        assert selector == SPEAKER_CAROUSEL_SELECTOR, selector
        return _CarouselLocator(self.widget, self.tile.carousel)


class _CarouselLocator:
    def __init__(self, widget: FakeWidget, carousel: FakeCarousel | None) -> None:
        self.widget = widget
        self.carousel = carousel

    async def count(self) -> int:
        return 0 if self.carousel is None else 1

    def locator(self, selector: str) -> Any:
        if selector == SPEAKER_CARD_SELECTOR:
            return _CardList(self.widget, self.carousel)
        if selector == CAROUSEL_NEXT_SELECTOR:
            return _NextArrow(self.carousel)
        raise AssertionError(f"Unexpected carousel selector: {selector!r}")


class _CardList:
    def __init__(self, widget: FakeWidget, carousel: FakeCarousel) -> None:
        self.widget = widget
        self.carousel = carousel

    async def count(self) -> int:
        return len(self.carousel.cards())

    def nth(self, index: int) -> "_Card":
        return _Card(self.widget, self.carousel, index)


class _Card:
    def __init__(self, widget: FakeWidget, carousel: FakeCarousel, index: int) -> None:
        self.widget = widget
        self.carousel = carousel
        self.index = index

    async def click(self, *, timeout: float | None = None) -> None:
        if self.widget.open_speaker is not None:
            raise PlaywrightTimeout("Click intercepted: detail modal is covering the carousel")
        data = self.carousel.cards()[self.index]
        self.widget.clicked.append(data["name"])
        if data.get("fail"):
            raise PlaywrightTimeout(f"Timeout {timeout}ms exceeded clicking {data['name']}")
        self.widget.open_speaker = data


class _NextArrow:
    def __init__(self, carousel: FakeCarousel) -> None:
        self.carousel = carousel

    @property
    def first(self) -> "_NextArrow":
        return self

    async def count(self) -> int:
        return 1 if self.carousel.has_next() else 0

    async def is_enabled(self) -> bool:
        return self.carousel.current < len(self.carousel.pages) - 1

    async def click(self, *, timeout: float | None = None) -> None:
        if self.carousel.arrow_broken:
            raise PlaywrightTimeout(f"Timeout {timeout}ms exceeded clicking right arrow")
        self.carousel.current += 1


class _Modal:
    def __init__(self, widget: FakeWidget) -> None:
        self.widget = widget

    async def wait_for(self, *, state: str = "visible", timeout: float | None = None) -> None:
        is_open = self.widget.open_speaker is not None
        if state == "visible" and not is_open:
            raise PlaywrightTimeout(f"Timeout {timeout}ms waiting for detail modal")
        if state == "hidden" and is_open:
            raise PlaywrightTimeout(f"Timeout {timeout}ms waiting for detail modal to close")

    async def is_visible(self) -> bool:
        return self.widget.open_speaker is not None

    def locator(self, selector: str) -> "_Field":
        return _Field(self.widget, _FIELD_BY_SELECTOR[selector])


class _Field:
    def __init__(self, widget: FakeWidget, key: str) -> None:
        self.widget = widget
        self.key = key

    @property
    def first(self) -> "_Field":
        return self

    async def count(self) -> int:
        data = self.widget.open_speaker or {}
        return 1 if data.get(self.key) is not None else 0

    async def text_content(self) -> str | None:
        return (self.widget.open_speaker or {}).get(self.key)


class _CloseButton:
    def __init__(self, widget: FakeWidget) -> None:
        self.widget = widget

    @property
    def first(self) -> "_CloseButton":
        return self

    async def count(self) -> int:
        return 1 if self.widget.open_speaker is not None else 0

    async def click(self, *, timeout: float | None = None) -> None:
        if self.widget.open_speaker is None:
            raise PlaywrightTimeout("Close control not attached")
        if not self.widget.close_stuck:
            self.widget.open_speaker = None


# ---------------------------------------------------------------------------
# Host page
# ---------------------------------------------------------------------------


class FakePage:
    """Host page whose widget state depends on the navigation attempt."""

    def __init__(
        self,
        widget: FakeWidget | None,
        *,
        empty_attempts: set[int] | None = None,
        timeout_attempts: set[int] | None = None,
    ) -> None:
        self.widget = widget
        self.empty_attempts = empty_attempts or set()
        self.timeout_attempts = timeout_attempts or set()
        self.attempts = 0
        self.url = "about:blank"

    async def goto(self, url: str, **kwargs: Any) -> None:
        self.attempts += 1
        self.url = url
        if self.widget is not None:
            empty = self.attempts in self.empty_attempts
            self.widget.empty_state = empty
            self.widget.tiles_ready = not empty and self.attempts not in self.timeout_attempts

    async def evaluate(self, expression: str, arg: Any = None) -> None:
        return None

    def locator(self, selector: str) -> "_IframeLocator":
        assert selector == IFRAME_SELECTOR, selector
        return _IframeLocator(self)


class _IframeLocator:
    def __init__(self, page: FakePage) -> None:
        self.page = page

    @property
    def first(self) -> "_IframeLocator":
        return self

    async def wait_for(self, *, state: str = "visible", timeout: float | None = None) -> None:
        if self.page.widget is None:
            raise PlaywrightTimeout(f"Timeout {timeout}ms waiting for {IFRAME_SELECTOR}")

    async def element_handle(self) -> "_IframeElement":
        return _IframeElement(self.page.widget)


class _IframeElement:
    def __init__(self, widget: FakeWidget) -> None:
        self.widget = widget

    async def content_frame(self) -> FakeWidget:
        return self.widget
